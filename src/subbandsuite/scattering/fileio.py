"""
Plain-text data files for the scattering tools.

All files are whitespace-separated columns, one sample per line:

    E<p>.r          state index, eigen-energy (meV)
    wf_<p><i>.r     z (m), wavefunction (m^-1/2), one file per state (1-based)
    Ef.r            state index, quasi-Fermi energy (meV)
    N.r             subband population (m^-2)
    x.r             z (m), alloy fraction
    rrp.r           initial, final state index of each wanted transition
    ado<i><f>.r     initial total energy (meV), scattering rate (1/s)
    ado-avg.dat     initial, final index, weighted mean rate (1/s)
"""

import os

import numpy as np

from subbandsuite.core.constants import meV
from subbandsuite.libsubbandsuite.logger import get_logger

from .subband import State, Subband

log = get_logger(__name__)


def read_table(filename, ncols=None):
    """
    Read a whitespace-separated table of numbers.

    Parameters
    ----------
    filename : str
        Path to the data file
    ncols : int, optional
        Expected number of columns

    Returns
    -------
    tuple of ndarray
        One 1D array per column.

    Raises
    ------
    ValueError
        If the number of columns differs from ncols.
    """
    data = np.loadtxt(filename, dtype=np.float64, ndmin=2)
    if ncols is not None and data.shape[1] != ncols:
        raise ValueError(f"Expected {ncols} columns in {filename}, found {data.shape[1]}.")
    log.debug("Read %d lines from %s", data.shape[0], filename)
    return tuple(data[:, j].copy() for j in range(data.shape[1]))


def write_table(filename, *columns, fmt="%.17e"):
    """
    Write equal-length columns as a whitespace-separated table.

    Parameters
    ----------
    filename : str
        Path to the output file
    *columns : array_like
        Data columns
    fmt : str, optional
        printf-style format for each value
    """
    lengths = {len(c) for c in columns}
    if len(lengths) > 1:
        raise ValueError(f"Columns written to {filename} differ in length: {sorted(lengths)}")
    np.savetxt(filename, np.column_stack(columns), fmt=fmt)


def read_states(energy_filename, wf_prefix, wf_ext):
    """
    Read eigenstates from an energy file and one wavefunction file per state.

    Parameters
    ----------
    energy_filename : str
        File of (index, energy [meV]) lines
    wf_prefix : str
        Wavefunction filename prefix, e.g. ``"wf_e"``
    wf_ext : str
        Wavefunction filename extension, e.g. ``".r"``

    Returns
    -------
    tuple of (list of State, ndarray)
        The states and the shared z axis (m).
    """
    _, E = read_table(energy_filename, ncols=2)
    directory = os.path.dirname(energy_filename)

    states = []
    z = None
    for ist in range(len(E)):
        wf_filename = os.path.join(directory, f"{wf_prefix}{ist + 1}{wf_ext}")
        z_ist, psi = read_table(wf_filename, ncols=2)

        if z is None:
            z = z_ist
        elif len(z_ist) != len(z) or not np.allclose(z_ist, z, rtol=1e-12, atol=0.0):
            raise ValueError(f"Spatial samples in {wf_filename} differ from the first state.")

        states.append(State(E[ist] * meV, psi))

    return states, z


def _value_at_psi_max(profile, psi):
    # Evaluate a z-profile where the wavefunction is largest, i.e. in the well
    return float(profile[int(np.argmax(np.abs(psi)))])


def read_subbands(energy_filename, wf_prefix, wf_ext,
                  populations_filename, fermienergy_filename,
                  mass=None, m_d_filename=None,
                  alphad_filename=None, potential_filename=None):
    """
    Build subbands from eigenstate, population and Fermi-energy files.

    The density-of-states mass is either the constant *mass* or, when
    *m_d_filename* (z, m_d [kg]) is given, the profile value where the
    wavefunction peaks.  Giving both *alphad_filename* (z, alpha [1/J]) and
    *potential_filename* (z, V [J]) selects the nonparabolic dispersion,
    with both parameters also taken at the wavefunction peak.

    Returns
    -------
    list of Subband

    Raises
    ------
    ValueError
        If the data files disagree on the number of states or no mass
        source is given.
    InvalidPopulation
        If any population is not positive.
    """
    if mass is None and m_d_filename is None:
        raise ValueError("Either a constant mass or a mass profile file is required.")
    if (alphad_filename is None) != (potential_filename is None):
        raise ValueError("Nonparabolic dispersion needs both alphad and potential files.")

    states, z = read_states(energy_filename, wf_prefix, wf_ext)
    nst = len(states)

    (P,) = read_table(populations_filename, ncols=1)
    _, Ef = read_table(fermienergy_filename, ncols=2)

    if len(P) != nst or len(Ef) != nst:
        raise ValueError(
            f"Incorrect amount of data in {populations_filename} ({len(P)} lines) or "
            f"{fermienergy_filename} ({len(Ef)} lines). Expected {nst} lines."
        )

    m_d_z = None
    if m_d_filename is not None:
        _, m_d_z = read_table(m_d_filename, ncols=2)

    alphad_z = V = None
    if alphad_filename is not None:
        _, alphad_z = read_table(alphad_filename, ncols=2)
        _, V = read_table(potential_filename, ncols=2)

    subbands = []
    for ist, state in enumerate(states):
        psi = state.psi
        md_0 = mass if m_d_z is None else _value_at_psi_max(m_d_z, psi)
        alphad = 0.0 if alphad_z is None else _value_at_psi_max(alphad_z, psi)
        condband_edge = 0.0 if V is None else _value_at_psi_max(V, psi)

        subbands.append(Subband(state, z, Ef[ist] * meV, P[ist], md_0,
                                alphad=alphad, condband_edge=condband_edge))

    log.info("Read %d subbands from %s", nst, energy_filename)
    return subbands


def read_transitions(filename):
    """Read (initial, final) 1-based state index pairs."""
    i_indices, f_indices = read_table(filename, ncols=2)
    return [(int(i), int(f)) for i, f in zip(i_indices, f_indices)]


def write_rate_table(filename, result):
    """Write initial total energy (meV) against scattering rate (1/s)."""
    write_table(filename, result.E_total / meV, result.Wif)


def rate_table_filename(result, directory=""):
    return os.path.join(directory, f"ado{result.i}{result.f}.r")


def write_average_rates(filename, results):
    """Write the weighted mean rate of each transition as ``i f Wbar`` lines."""
    with open(filename, "w", encoding="utf-8") as fh:
        for result in results:
            fh.write(f"{result.i} {result.f} {result.Wbar:20.17e}\n")
