"""
Alloy-disorder scattering rates between 2D subbands.

For a transition from an initial subband ``i`` to a final subband ``f`` the
rate is independent of the initial wavevector, because the alloy-disorder
potential is short-ranged:

    W_if = m * Omega * Vad^2 / hbar^3 * integral(psi_i^2 psi_f^2 x (1 - x) dz)

optionally reduced by final-state blocking, (1 - f_FD(E_f(kf))).  The
energy-conserving final wavevector is

    kf^2 = ki^2 + 2m (E_i - E_f) / hbar^2

and the population-averaged rate is the Fermi-Dirac weighted mean over the
initial states,

    Wbar = integral(W_if(ki) ki f_FD(E_i(ki)) dki) / (pi N_i)

Each transition only reads the (immutable) subbands and the alloy profile,
so a list of transitions may be evaluated concurrently.
"""

import warnings
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import numpy as np

from subbandsuite.core.constants import hbar, meV, pi
from subbandsuite.libsubbandsuite.errors import CutoffTooNarrow, KinematicInconsistency
from subbandsuite.libsubbandsuite.integrator import integral
from subbandsuite.libsubbandsuite.logger import get_logger

log = get_logger(__name__)

# Relative round-off allowed in kf^2 at the kinematic floor
_KF_SQR_RTOL = 1e-9


@dataclass(frozen=True, eq=False)
class TransitionRate:
    """
    Scattering rates for one i -> f transition.

    Attributes
    ----------
    i, f : int
        Initial and final subband indices (1-based)
    ki : ndarray
        Initial wavevector samples (1/m)
    E_total : ndarray
        Total energy of each initial state (J)
    Wif : ndarray
        Scattering rate at each initial wavevector (1/s)
    Wbar : float
        Fermi-Dirac weighted mean scattering rate (1/s)
    kimin, kimax : float
        Wavevector range of the samples (1/m)
    Ecutoff : float
        Cut-off kinetic energy actually used (J)
    cutoff_widened : bool
        True if the requested cut-off was widened to allow scattering
    prefactor : float
        Unblocked rate given by the alloy-disorder matrix element (1/s)
    """
    i: int
    f: int
    ki: np.ndarray
    E_total: np.ndarray
    Wif: np.ndarray
    Wbar: float
    kimin: float
    kimax: float
    Ecutoff: float
    cutoff_widened: bool
    prefactor: float


# ---------------------------------------------------------------------------
# Kinematics
# ---------------------------------------------------------------------------
def find_kimin(isb, fsb, m):
    """
    Minimum initial wavevector that allows energy-conserving scattering.

    Parameters
    ----------
    isb, fsb : Subband
        Initial and final subbands
    m : float
        Band-edge effective mass (kg)

    Returns
    -------
    float
        sqrt(2 m (E_f - E_i)) / hbar if the final subband lies above the
        initial one, otherwise 0.
    """
    Efi = fsb.get_E() - isb.get_E()
    if Efi > 0.0:
        return float(np.sqrt(2.0 * m * Efi) / hbar)
    return 0.0


def find_cutoff(isb, fsb, T, Ecutoff=None, label=""):
    """
    Cut-off kinetic energy in the initial subband.

    If no cut-off is given, the thermal range of the initial subband is
    used.  A cut-off that does not reach the bottom of the final subband is
    widened by the subband separation and a :class:`CutoffTooNarrow`
    warning is issued.

    Parameters
    ----------
    isb, fsb : Subband
        Initial and final subbands
    T : float
        Carrier temperature (K)
    Ecutoff : float, optional
        Requested cut-off kinetic energy (J)
    label : str, optional
        Transition label used in messages

    Returns
    -------
    tuple of (float, bool)
        Cut-off energy (J) and whether it was widened.
    """
    Ei = isb.get_E()
    Ef = fsb.get_E()

    if Ecutoff is None:
        Ecutoff = isb.Ek(isb.get_k_max(T))

    widened = False
    if Ecutoff + Ei < Ef:
        Ecutoff = Ecutoff + (Ef - Ei)
        widened = True
        message = (
            f"No scattering permitted from state {label} within the specified cut-off energy. "
            f"Extending range automatically to {Ecutoff / meV:.3f} meV."
        )
        log.warning(message)
        warnings.warn(message, CutoffTooNarrow, stacklevel=2)

    return float(Ecutoff), widened


def final_wavevector(ki, isb, fsb, m):
    """
    Energy-conserving final wavevectors for a set of initial wavevectors.

    Parameters
    ----------
    ki : ndarray
        Initial wavevectors (1/m), 1D array
    isb, fsb : Subband
        Initial and final subbands
    m : float
        Band-edge effective mass (kg)

    Returns
    -------
    ndarray
        Final wavevectors (1/m)

    Raises
    ------
    KinematicInconsistency
        If any kf^2 is negative (beyond round-off) or kf is NaN.
    """
    ki = np.asarray(ki, dtype=np.float64)
    shift = 2.0 * m * (isb.get_E() - fsb.get_E()) / (hbar * hbar)
    kf_sqr = ki * ki + shift

    tol = _KF_SQR_RTOL * np.maximum(ki * ki, abs(shift))
    kf_sqr = np.where((kf_sqr < 0.0) & (kf_sqr >= -tol), 0.0, kf_sqr)

    if np.any(kf_sqr < 0.0):
        bad = int(np.argmax(kf_sqr < 0.0))
        raise KinematicInconsistency(
            f"Imaginary final wave-vector at ki = {ki[bad] * 1e-9} nm^{{-1}} "
            f"(kf^2 = {kf_sqr[bad]} m^-2). Check the kinematic range."
        )

    kf = np.sqrt(kf_sqr)
    if np.any(np.isnan(kf)):
        raise KinematicInconsistency("Final wave-vector is not a number. Check the input data.")
    return kf


# ---------------------------------------------------------------------------
# Rates
# ---------------------------------------------------------------------------
def alloy_matrix_element(isb, fsb, z, x, params):
    """
    Alloy-disorder rate prefactor for a pair of subbands.

    Parameters
    ----------
    isb, fsb : Subband
        Initial and final subbands
    z : ndarray
        Spatial samples (m), uniformly spaced
    x : ndarray
        Alloy fraction at each spatial sample
    params : ado
        Run parameters (Vad, unit cell, mass)

    Returns
    -------
    float
        m * Omega * Vad^2 / hbar^3 * integral(psi_i^2 psi_f^2 x (1 - x) dz), (1/s)
    """
    z = np.asarray(z, dtype=np.float64)
    x = np.asarray(x, dtype=np.float64)
    psi_i = isb.psi_array()
    psi_f = fsb.psi_array()

    if not (len(z) == len(x) == len(psi_i) == len(psi_f)):
        raise ValueError(
            f"Alloy profile ({len(x)} points), z axis ({len(z)}) and wavefunctions "
            f"({len(psi_i)}, {len(psi_f)}) must have the same length."
        )

    integrand_dz = psi_i * psi_i * psi_f * psi_f * x * (1.0 - x)
    dz = z[1] - z[0]
    Omega = params.unit_cell_volume

    return float(params.mass * Omega * params.Vad ** 2 / hbar ** 3 * integral(integrand_dz, dz))


def scattering_rates(ki, isb, fsb, prefactor, params):
    """
    Scattering rate at each initial wavevector.

    Parameters
    ----------
    ki : ndarray
        Initial wavevectors (1/m), 1D array
    isb, fsb : Subband
        Initial and final subbands
    prefactor : float
        Unblocked rate from :func:`alloy_matrix_element` (1/s)
    params : ado
        Run parameters (mass, temperature, blocking)

    Returns
    -------
    ndarray
        Rates (1/s), same shape as ki
    """
    kf = final_wavevector(ki, isb, fsb, params.mass)
    Wif = np.full(len(kf), prefactor, dtype=np.float64)

    if params.blocking:
        for iki in range(len(kf)):
            Wif[iki] *= 1.0 - fsb.f_FD_k(kf[iki], params.T)
            log.debug2("ki = %e 1/m, kf = %e 1/m, Wif = %e 1/s", ki[iki], kf[iki], Wif[iki])

    return Wif


def weighted_mean_rate(Wif, ki, isb, T):
    """
    Fermi-Dirac weighted mean of the scattering rate over initial states.

    Parameters
    ----------
    Wif : ndarray
        Rate at each initial wavevector (1/s)
    ki : ndarray
        Uniformly spaced initial wavevectors (1/m)
    isb : Subband
        Initial subband
    T : float
        Carrier temperature (K)

    Returns
    -------
    float
        integral(Wif ki f_FD(ki) dki) / (pi N_i), (1/s)
    """
    ki = np.asarray(ki, dtype=np.float64)
    dki = ki[1] - ki[0]
    f_FD = np.array([isb.f_FD_k(k, T) for k in ki])
    return float(integral(Wif * ki * f_FD, dki) / (pi * isb.get_pop()))


def calculate_transition(subbands, i, f, z, x, params):
    """
    Scattering rates for one transition.

    Parameters
    ----------
    subbands : sequence of Subband
        All subbands of the structure
    i, f : int
        Initial and final subband indices (1-based)
    z : ndarray
        Spatial samples (m)
    x : ndarray
        Alloy fraction at each spatial sample
    params : ado
        Run parameters

    Returns
    -------
    TransitionRate
        Rate table and weighted mean for the transition.

    Raises
    ------
    IndexError
        If either index does not name a subband.
    KinematicInconsistency
        If the sampled wavevectors violate energy conservation.
    """
    nst = len(subbands)
    if not (1 <= i <= nst and 1 <= f <= nst):
        raise IndexError(f"Transition {i}->{f} is out of range for {nst} subbands.")

    isb = subbands[i - 1]
    fsb = subbands[f - 1]
    label = f"{i}->{f}"

    kimin = find_kimin(isb, fsb, params.mass)
    Ecutoff, widened = find_cutoff(isb, fsb, params.T, params.Ecutoff, label)
    kimax = isb.k(Ecutoff)

    dki = (kimax - kimin) / (params.nki - 1)
    ki = kimin + dki * np.arange(params.nki, dtype=np.float64)

    prefactor = alloy_matrix_element(isb, fsb, z, x, params)
    Wif = scattering_rates(ki, isb, fsb, prefactor, params)
    E_total = np.array([isb.E_total(k) for k in ki])
    Wbar = weighted_mean_rate(Wif, ki, isb, params.T)

    log.info(
        "Transition %s: ki = [%.4f, %.4f] nm^-1, Wbar = %.6e s^-1",
        label, kimin * 1e-9, kimax * 1e-9, Wbar,
    )

    for arr in (ki, E_total, Wif):
        arr.setflags(write=False)

    return TransitionRate(
        i=i,
        f=f,
        ki=ki,
        E_total=E_total,
        Wif=Wif,
        Wbar=Wbar,
        kimin=kimin,
        kimax=kimax,
        Ecutoff=Ecutoff,
        cutoff_widened=widened,
        prefactor=prefactor,
    )


def calculate_rates(subbands, transitions, z, x, params, max_workers=None, on_error=None):
    """
    Scattering rates for a list of transitions.

    Parameters
    ----------
    subbands : sequence of Subband
        All subbands of the structure
    transitions : iterable of (int, int)
        (initial, final) subband index pairs, 1-based
    z : ndarray
        Spatial samples (m)
    x : ndarray
        Alloy fraction at each spatial sample
    params : ado
        Run parameters
    max_workers : int, optional
        Number of worker threads; transitions are evaluated serially when
        None or 1
    on_error : callable, optional
        Called as ``on_error(i, f, exc)`` when a transition fails with a
        domain, kinematic or index error.  The failed transition's slot in
        the result is None and the remaining transitions are still
        evaluated.  Without it the first failure propagates.

    Returns
    -------
    list of TransitionRate
        One result per transition, in request order.
    """
    pairs = [(int(i), int(f)) for i, f in transitions]

    def _one(pair):
        i, f = pair
        if on_error is None:
            return calculate_transition(subbands, i, f, z, x, params)
        try:
            return calculate_transition(subbands, i, f, z, x, params)
        except (KinematicInconsistency, ValueError, IndexError) as exc:
            on_error(i, f, exc)
            return None

    if max_workers is None or max_workers <= 1:
        return [_one(pair) for pair in pairs]

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(_one, pairs))
