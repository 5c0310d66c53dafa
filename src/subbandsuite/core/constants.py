"""
Physical and mathematical constants used throughout subbandsuite.

Values are taken once, at import time, from ``scipy.constants`` (CODATA)
and stored as NumPy scalars.  They are exposed both as module-level names
(``from subbandsuite.core.constants import hbar, kB``) and as class
attributes of :class:`Constants` for callers that prefer a single table.
"""
import numpy as np
import scipy.constants as const


class Constants:
    """
    Table of physical and mathematical constants.

    Attributes
    ----------
    pi : float
        The value of pi.
    twopi : float
        2*pi.
    e0 : float
        Elementary charge (C).
    eV : float
        Electron volt (J).
    meV : float
        Milli-electron volt (J).
    hplank : float
        Planck constant (J*s).
    hbar : float
        Reduced Planck constant (J*s).
    me0 : float
        Free-electron rest mass (kg).
    kB : float
        Boltzmann constant (J/K).
    angstrom : float
        One angstrom (m).
    """
    pi = np.float64(const.pi)
    twopi = np.float64(2.0 * const.pi)
    e0 = np.float64(const.e)
    eV = np.float64(const.e)
    meV = np.float64(const.e * 1e-3)
    hplank = np.float64(const.h)
    hbar = np.float64(const.hbar)
    me0 = np.float64(const.m_e)
    kB = np.float64(const.k)
    angstrom = np.float64(const.angstrom)

    @classmethod
    def as_dict(cls):
        """
        Return all constants as a dictionary.

        Returns
        -------
        dict
            Dictionary of all constant names and values.
        """
        return {k: getattr(cls, k) for k in dir(cls) if not k.startswith('__') and not callable(getattr(cls, k))}


pi = Constants.pi
twopi = Constants.twopi
e0 = Constants.e0
eV = Constants.eV
meV = Constants.meV
hplank = Constants.hplank
hbar = Constants.hbar
me0 = Constants.me0
kB = Constants.kB
angstrom = Constants.angstrom
