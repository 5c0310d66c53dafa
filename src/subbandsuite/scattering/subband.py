"""
A quantized subband in a 2D carrier system.

A :class:`Subband` couples a confined ground :class:`State` (band-minimum
energy and envelope wavefunction on the growth axis) with the in-plane
dispersion and carrier statistics of the subband:

    parabolic:     Ek = hbar^2 k^2 / (2 m_d)
    nonparabolic:  alpha*Ek^2 + b*Ek - hbar^2 k^2 / (2 m_d) = 0,
                   b = 1 + alpha*(E - V)

where ``E`` is the subband minimum and ``V`` the band-edge reference at the
wavefunction peak.  The nonparabolic branch is selected by a non-zero
``alphad``.

All energies are absolute (J) except kinetic energies ``Ek``, which are
measured from the subband minimum.  Subbands are immutable once built.
"""

from dataclasses import dataclass, field

import numpy as np
from scipy.special import expit

from subbandsuite.core.constants import e0, hbar, kB, pi
from subbandsuite.libsubbandsuite.errors import (
    InvalidPopulation,
    NegativeEnergy,
    NoRealSolution,
)

# Numerical error allowed at the subband minimum
_K_TOLERANCE = 1e-9          # 1/m
_EK_TOLERANCE = 1e-9 * e0    # J

# Thermal range of interest above the subband minimum (multiples of kB*T)
_N_KT = 5.0


def _readonly(a) -> np.ndarray:
    arr = np.array(a, dtype=np.float64)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class State:
    """
    A confined eigenstate.

    Attributes
    ----------
    E : float
        Eigen-energy (J)
    psi : ndarray
        Wavefunction samples (m^-1/2), 1D array
    """
    E: float
    psi: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, "E", float(self.E))
        object.__setattr__(self, "psi", _readonly(self.psi))

    def size(self) -> int:
        return len(self.psi)


@dataclass(frozen=True, eq=False)
class Subband:
    """
    A 2D subband with parabolic or nonparabolic in-plane dispersion.

    Attributes
    ----------
    ground_state : State
        Ground state of the subband (its energy is the subband minimum)
    z : ndarray
        Spatial samples on the growth axis (m), shared by all subbands
    Ef : float
        Quasi-Fermi energy of the subband (J)
    population : float
        Areal carrier density (m^-2), strictly positive
    md_0 : float
        Density-of-states effective mass at the band edge (kg)
    alphad : float, optional
        Nonparabolicity parameter (1/J); 0 gives a parabolic dispersion
    condband_edge : float, optional
        Band-edge energy used by the nonparabolic dispersion (J)

    Raises
    ------
    InvalidPopulation
        If the population is zero or negative.
    ValueError
        If the mass is not positive or psi and z differ in length.
    """
    ground_state: State
    z: np.ndarray = field(repr=False)
    Ef: float
    population: float
    md_0: float
    alphad: float = 0.0
    condband_edge: float = 0.0

    def __post_init__(self):
        if not self.population > 0.0:
            raise InvalidPopulation(
                f"Subband population must be positive: {self.population} m^-2 received."
            )
        if not self.md_0 > 0.0:
            raise ValueError(f"Density-of-states mass must be positive: {self.md_0} kg received.")

        z = _readonly(self.z)
        if len(z) != self.ground_state.size():
            raise ValueError(
                f"Wavefunction has {self.ground_state.size()} samples but z axis has {len(z)}."
            )

        object.__setattr__(self, "z", z)
        for name in ("Ef", "population", "md_0", "alphad", "condband_edge"):
            object.__setattr__(self, name, float(getattr(self, name)))

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    def get_E(self) -> float:
        """Subband minimum energy (J)."""
        return self.ground_state.E

    def get_Ef(self) -> float:
        return self.Ef

    def get_pop(self) -> float:
        return self.population

    def get_m_d(self, E=None) -> float:
        """Density-of-states mass (kg).  The energy is currently unused."""
        return self.md_0

    def psi_array(self) -> np.ndarray:
        return self.ground_state.psi

    def z_array(self) -> np.ndarray:
        return self.z

    def is_nonparabolic(self) -> bool:
        return self.alphad != 0.0

    # ------------------------------------------------------------------
    # Dispersion
    # ------------------------------------------------------------------
    def Ek(self, k: float) -> float:
        """
        Kinetic energy above the subband minimum at an in-plane wavevector.

        Parameters
        ----------
        k : float
            In-plane wavevector (1/m)

        Returns
        -------
        float
            Kinetic energy (J); exactly 0 at the subband minimum

        Raises
        ------
        NoRealSolution
            If the nonparabolic dispersion has no real root at k.
        NegativeEnergy
            If the selected root is not the larger of the two, or lies
            below the subband minimum.
        """
        k = float(k)
        if abs(k) < _K_TOLERANCE:
            return 0.0

        if not self.is_nonparabolic():
            return (hbar * k) ** 2 / (2.0 * self.md_0)

        b = 1.0 + self.alphad * (self.get_E() - self.condband_edge)
        four_ac = 4.0 * self.alphad * (-((hbar * k) ** 2) / (2.0 * self.md_0))

        if four_ac > b * b:
            raise NoRealSolution(
                f"No real energy solution exists at wavevector k = {k * 1e-9} nm^{{-1}}."
            )

        root = np.sqrt(b * b - four_ac)
        Ek = (-b + root) / (2.0 * self.alphad)

        # Only the larger root is physical; it must also lie above the minimum
        if not (root > b and Ek > 0.0):
            raise NegativeEnergy(f"Negative energy found at wavevector k = {k * 1e-9} nm^{{-1}}.")

        return float(Ek)

    def k(self, Ek: float) -> float:
        """
        In-plane wavevector at a kinetic energy above the subband minimum.

        In the nonparabolic case the correction term is evaluated at Ek
        itself, so this is not the exact algebraic inverse of :meth:`Ek`.

        Parameters
        ----------
        Ek : float
            Kinetic energy (J)

        Returns
        -------
        float
            Wavevector (1/m); exactly 0 at the subband minimum

        Raises
        ------
        NegativeEnergy
            If Ek < 0.
        """
        Ek = float(Ek)
        if Ek < 0.0:
            raise NegativeEnergy(
                f"Cannot find wavevector at negative kinetic energy, Ek = {Ek / e0 * 1000} meV."
            )

        if Ek < _EK_TOLERANCE:
            return 0.0

        if not self.is_nonparabolic():
            return float(np.sqrt(2.0 * self.md_0 * Ek) / hbar)

        correction = 1.0 + self.alphad * (self.get_E() + Ek - self.condband_edge)
        return float(np.sqrt(2.0 * self.md_0 * Ek * correction) / hbar)

    def E_total(self, k: float) -> float:
        """Total energy (J) of the state at wavevector k."""
        return self.get_E() + self.Ek(k)

    def rho(self, E=None) -> float:
        """2D density of states (1/(J m^2)), energy independent."""
        return self.get_m_d(E) / (pi * hbar * hbar)

    # ------------------------------------------------------------------
    # Carrier statistics
    # ------------------------------------------------------------------
    def f_FD(self, E, Te: float):
        """
        Fermi-Dirac occupation at total energy E.

        Parameters
        ----------
        E : float or ndarray
            Total energy (J)
        Te : float
            Carrier temperature (K)

        Returns
        -------
        float or ndarray
            1 / (exp((E - Ef) / (kB Te)) + 1)
        """
        x = (np.asarray(E, dtype=np.float64) - self.Ef) / (kB * Te)
        occ = expit(-x)
        if np.ndim(occ) == 0:
            return float(occ)
        return occ

    def f_FD_k(self, k: float, Te: float) -> float:
        """Fermi-Dirac occupation of the state at wavevector k."""
        return self.f_FD(self.E_total(k), Te)

    def f_FD_Ek(self, Ek: float, Te: float) -> float:
        """Fermi-Dirac occupation at kinetic energy Ek above the minimum."""
        return self.f_FD(self.get_E() + Ek, Te)

    def get_k_fermi(self) -> float:
        """Fermi wavevector (1/m) of the subband population."""
        return float(np.sqrt(2.0 * pi * self.population))

    def get_Ek_max(self, Te: float) -> float:
        """
        Kinetic energy range (J) holding essentially all carriers.

        5 kB*Te above the subband minimum, or above the quasi-Fermi level
        when that lies inside the subband.
        """
        return max(self.Ef - self.get_E(), 0.0) + _N_KT * kB * Te

    def get_k_max(self, Te: float) -> float:
        """Wavevector (1/m) at the top of the thermal energy range."""
        return self.k(self.get_Ek_max(Te))
