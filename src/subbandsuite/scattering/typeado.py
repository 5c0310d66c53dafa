"""
Run parameters for the alloy-disorder scattering calculation.

This module provides the parameter structure (``ado`` type) together with
functions for reading and writing it as a plain-text parameter file.

Parameter file format (one value per line, optional trailing comment after
``:`` or ``!``), all values in SI units::

     9.61305980400000E-20 : Alloy-disorder potential. (J)
     4.00000000000000E+00 : Fraction of unit cell occupied by each scatterer.
     5.65000000000000E-10 : Lattice constant in growth direction. (m)
     6.10328708000000E-32 : Band-edge effective mass. (kg)
                        e : Particle ID (e, h or l).
     3.00000000000000E+02 : Carrier temperature. (K)
                     none : Cut-off kinetic energy. (J)
                      101 : Number of initial wave-vector samples.
                        1 : Final-state blocking (1 = on, 0 = off).

A cut-off of ``none`` selects the thermal range of the initial subband.
"""

from dataclasses import dataclass, replace
from typing import Optional

from subbandsuite.core.constants import angstrom, me0, meV
from subbandsuite.libsubbandsuite.errors import InsufficientSamples
from subbandsuite.libsubbandsuite.logger import get_logger

log = get_logger(__name__)

PARTICLES = ("e", "h", "l")


# ---------------------------------------------------------------------------
# File I/O helpers
# ---------------------------------------------------------------------------
def GetFileToken(file_handle):
    """Read the first token of the next line from a parameter file.

    Parameters
    ----------
    file_handle : file-like
        Open text stream.

    Returns
    -------
    str
        The first whitespace-delimited token on the line.

    Raises
    ------
    ValueError
        If the file ends or the line carries no value.
    """
    line = file_handle.readline()
    if not line:
        raise ValueError("Unexpected end of file while reading parameter")
    parts = line.split()
    if not parts:
        raise ValueError(f"Empty line in parameter file: {line!r}")
    token = parts[0]
    if token.startswith(("!", ":")):
        raise ValueError(f"Comment-only line: {line!r}")
    return token


def GetFileParam(file_handle):
    """Read a single numeric parameter from a file handle."""
    token = GetFileToken(file_handle)
    try:
        return float(token)
    except ValueError as exc:
        raise ValueError(f"Could not parse parameter value: {token!r}") from exc


# ---------------------------------------------------------------------------
# Data structure
# ---------------------------------------------------------------------------
@dataclass
class ado:
    """
    Alloy-disorder run parameters.

    Attributes
    ----------
    Vad : float
        Alloy-disorder potential (J)
    cellfraction : float
        Fraction of the unit cell occupied by each scatterer
    latticeconst : float
        Lattice constant in the growth direction (m)
    mass : float
        Band-edge effective mass (kg)
    particle : str
        Particle ID: 'e', 'h' or 'l' (electron, heavy hole, light hole)
    T : float
        Carrier temperature (K)
    Ecutoff : float or None
        Cut-off kinetic energy in the initial subband (J); None selects the
        thermal range of the initial subband
    nki : int
        Number of initial wave-vector samples
    blocking : bool
        Include final-state blocking
    """
    Vad: float = 600.0 * meV
    cellfraction: float = 4.0
    latticeconst: float = 5.65 * angstrom
    mass: float = 0.067 * me0
    particle: str = "e"
    T: float = 300.0
    Ecutoff: Optional[float] = None
    nki: int = 101
    blocking: bool = True

    def __post_init__(self):
        self.nki = int(self.nki)
        if self.nki < 2:
            raise InsufficientSamples(f"At least 2 wave-vector samples are needed: nki = {self.nki}.")
        if self.particle not in PARTICLES:
            raise ValueError(f"Unknown particle ID {self.particle!r}; expected one of {PARTICLES}.")
        for name in ("cellfraction", "latticeconst", "mass", "T"):
            if not getattr(self, name) > 0.0:
                raise ValueError(f"{name} must be positive: {getattr(self, name)} received.")
        if self.Ecutoff is not None and self.Ecutoff < 0.0:
            raise ValueError(f"Cut-off energy must not be negative: {self.Ecutoff / meV} meV.")

    @property
    def unit_cell_volume(self) -> float:
        """Volume (m^3) of the unit cell per scatterer."""
        return self.latticeconst ** 3 / self.cellfraction

    def with_changes(self, **changes) -> "ado":
        """Return a validated copy with some parameters replaced."""
        return replace(self, **changes)


# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------
def readadoparams_sub(fh):
    """Read alloy-disorder parameters from an open file handle.

    Parameters
    ----------
    fh : file-like
        Readable text stream.

    Returns
    -------
    ado
        The validated parameter structure.
    """
    Vad = GetFileParam(fh)
    cellfraction = GetFileParam(fh)
    latticeconst = GetFileParam(fh)
    mass = GetFileParam(fh)
    particle = GetFileToken(fh)
    T = GetFileParam(fh)
    token = GetFileToken(fh)
    Ecutoff = None if token.lower() == "none" else float(token)
    nki = int(GetFileParam(fh))
    blocking = bool(int(GetFileParam(fh)))

    return ado(
        Vad=Vad,
        cellfraction=cellfraction,
        latticeconst=latticeconst,
        mass=mass,
        particle=particle,
        T=T,
        Ecutoff=Ecutoff,
        nki=nki,
        blocking=blocking,
    )


def ReadADOParams(filename):
    """Read alloy-disorder parameters from a named file.

    Parameters
    ----------
    filename : str
        Path to the parameter file.

    Returns
    -------
    ado
        The validated parameter structure.
    """
    with open(filename, "r", encoding="utf-8") as fh:
        params = readadoparams_sub(fh)
    log.debug("Read alloy-disorder parameters from %s", filename)
    dumpado(params)
    return params


def WriteADOParams_sub(fh, params):
    """Write alloy-disorder parameters to an open file handle."""
    Ecutoff = "none" if params.Ecutoff is None else f"{params.Ecutoff:.14E}"
    fh.write(f"{params.Vad:25.14E} : Alloy-disorder potential. (J)\n")
    fh.write(f"{params.cellfraction:25.14E} : Fraction of unit cell occupied by each scatterer.\n")
    fh.write(f"{params.latticeconst:25.14E} : Lattice constant in growth direction. (m)\n")
    fh.write(f"{params.mass:25.14E} : Band-edge effective mass. (kg)\n")
    fh.write(f"{params.particle:>25s} : Particle ID (e, h or l).\n")
    fh.write(f"{params.T:25.14E} : Carrier temperature. (K)\n")
    fh.write(f"{Ecutoff:>25s} : Cut-off kinetic energy. (J)\n")
    fh.write(f"{params.nki:25d} : Number of initial wave-vector samples.\n")
    fh.write(f"{int(params.blocking):25d} : Final-state blocking (1 = on, 0 = off).\n")


def writeadoparams(filename, params):
    """Write alloy-disorder parameters to a named file."""
    with open(filename, "w", encoding="utf-8") as fh:
        WriteADOParams_sub(fh, params)


def dumpado(params):
    """Log the parameters at debug level."""
    log.debug(
        "Vad = %.3f meV, cellfraction = %g, a = %.4f A, m = %.4f m0, particle = %s",
        params.Vad / meV, params.cellfraction, params.latticeconst / angstrom,
        params.mass / me0, params.particle,
    )
    log.debug(
        "T = %g K, Ecutoff = %s, nki = %d, blocking = %s",
        params.T,
        "thermal" if params.Ecutoff is None else f"{params.Ecutoff / meV:.3f} meV",
        params.nki, params.blocking,
    )
