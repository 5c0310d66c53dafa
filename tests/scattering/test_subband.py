"""
Tests for subbandsuite.scattering.subband.

A 20-point square-well-like ground state in GaAs (m = 0.067 m0) at
E = 50 meV is used throughout; the wavefunction shape does not enter the
dispersion or the carrier statistics.

Tolerances:
    algebraic : rtol=1e-12
    round-trip: rtol=1e-9
"""

import numpy as np
import pytest

from subbandsuite.core.constants import hbar, kB, me0, meV, pi
from subbandsuite.libsubbandsuite.errors import InvalidPopulation, NegativeEnergy, NoRealSolution
from subbandsuite.scattering.subband import State, Subband

RTOL = 1e-12
ATOL = 1e-12

M_GAAS = 0.067 * me0
Z = np.linspace(0.0, 20e-9, 21)
PSI = np.sqrt(2.0 / 20e-9) * np.sin(np.pi * Z / 20e-9)


def make_subband(E=50 * meV, Ef=40 * meV, population=1e15, md_0=M_GAAS, alphad=0.0, V=0.0):
    return Subband(State(E, PSI), Z, Ef, population, md_0, alphad=alphad, condband_edge=V)


# ═════════════════════════════════════════════════════════════════════
#  Construction
# ═════════════════════════════════════════════════════════════════════

class TestConstruction:
    def test_accessors(self):
        sb = make_subband()
        assert sb.get_E() == pytest.approx(50 * meV, rel=RTOL)
        assert sb.get_Ef() == pytest.approx(40 * meV, rel=RTOL)
        assert sb.get_pop() == 1e15
        assert sb.get_m_d() == M_GAAS
        assert sb.get_m_d(100 * meV) == M_GAAS
        np.testing.assert_array_equal(sb.psi_array(), PSI)
        np.testing.assert_array_equal(sb.z_array(), Z)
        assert not sb.is_nonparabolic()

    def test_state_size(self):
        assert State(0.0, PSI).size() == len(PSI)

    @pytest.mark.parametrize("population", [0.0, -1e14])
    def test_invalid_population(self, population):
        with pytest.raises(InvalidPopulation):
            make_subband(population=population)

    def test_invalid_population_is_value_error(self):
        with pytest.raises(ValueError):
            make_subband(population=0.0)

    def test_nonpositive_mass(self):
        with pytest.raises(ValueError):
            make_subband(md_0=0.0)

    def test_mismatched_z(self):
        with pytest.raises(ValueError):
            Subband(State(0.0, PSI), Z[:-1], 0.0, 1e15, M_GAAS)

    def test_arrays_are_read_only(self):
        sb = make_subband()
        with pytest.raises(ValueError):
            sb.psi_array()[0] = 1.0
        with pytest.raises(ValueError):
            sb.z_array()[0] = 1.0

    def test_arrays_are_copied(self):
        psi = PSI.copy()
        sb = Subband(State(0.0, psi), Z, 0.0, 1e15, M_GAAS)
        psi[3] = 0.0
        assert sb.psi_array()[3] == PSI[3]

    def test_frozen(self):
        sb = make_subband()
        with pytest.raises(AttributeError):
            sb.Ef = 0.0


# ═════════════════════════════════════════════════════════════════════
#  Parabolic dispersion
# ═════════════════════════════════════════════════════════════════════

class TestParabolicDispersion:
    def test_zero_at_minimum(self):
        sb = make_subband()
        assert sb.Ek(0.0) == 0.0
        assert sb.k(0.0) == 0.0

    def test_within_tolerance_of_minimum(self):
        sb = make_subband()
        assert sb.Ek(5e-10) == 0.0
        assert sb.k(1e-30) == 0.0

    def test_negative_kinetic_energy_below_tolerance(self):
        """The sign is checked before the tolerance at the minimum."""
        sb = make_subband()
        with pytest.raises(NegativeEnergy):
            sb.k(-1e-30)

    def test_Ek_formula(self):
        sb = make_subband()
        k = 2.5e8
        assert sb.Ek(k) == pytest.approx((hbar * k) ** 2 / (2.0 * M_GAAS), rel=RTOL)

    def test_Ek_even_in_k(self):
        sb = make_subband()
        assert sb.Ek(-3e8) == pytest.approx(sb.Ek(3e8), rel=RTOL)

    @pytest.mark.parametrize("k", [1e7, 5e7, 1e8, 4e8, 1e9])
    def test_round_trip(self, k):
        sb = make_subband()
        assert sb.k(sb.Ek(k)) == pytest.approx(k, rel=1e-9)

    def test_negative_kinetic_energy(self):
        with pytest.raises(NegativeEnergy):
            make_subband().k(-1 * meV)

    def test_E_total(self):
        sb = make_subband()
        k = 1e8
        assert sb.E_total(k) == pytest.approx(sb.get_E() + sb.Ek(k), rel=RTOL)
        assert sb.E_total(0.0) == sb.get_E()


# ═════════════════════════════════════════════════════════════════════
#  Nonparabolic dispersion
# ═════════════════════════════════════════════════════════════════════

class TestNonparabolicDispersion:
    ALPHA = 0.6 / (1000 * meV)

    def test_selected_by_alpha(self):
        assert make_subband(alphad=self.ALPHA).is_nonparabolic()

    def test_zero_at_minimum(self):
        sb = make_subband(alphad=self.ALPHA)
        assert sb.Ek(0.0) == 0.0
        assert sb.k(0.0) == 0.0

    def test_Ek_solves_quadratic(self):
        sb = make_subband(alphad=self.ALPHA, V=10 * meV)
        k = 5e8
        Ek = sb.Ek(k)
        b = 1.0 + self.ALPHA * (sb.get_E() - 10 * meV)
        residual = self.ALPHA * Ek**2 + b * Ek - (hbar * k) ** 2 / (2.0 * M_GAAS)
        assert abs(residual) < 1e-9 * Ek

    def test_Ek_below_parabolic(self):
        k = 5e8
        assert make_subband(alphad=self.ALPHA).Ek(k) < make_subband().Ek(k)

    def test_k_formula(self):
        sb = make_subband(alphad=self.ALPHA, V=10 * meV)
        Ek = 30 * meV
        expected = np.sqrt(2 * M_GAAS * Ek * (1 + self.ALPHA * (sb.get_E() + Ek - 10 * meV))) / hbar
        assert sb.k(Ek) == pytest.approx(expected, rel=RTOL)

    def test_no_real_solution(self):
        # Negative alpha: discriminant closes at large k
        sb = make_subband(alphad=-self.ALPHA)
        with pytest.raises(NoRealSolution):
            sb.Ek(5e9)

    def test_negative_energy_branch(self):
        # b < 0 makes the physical root negative
        sb = make_subband(E=50 * meV, alphad=-1.0 / (10 * meV))
        with pytest.raises(NegativeEnergy):
            sb.Ek(1e8)

    def test_smaller_root_rejected(self):
        """Negative alpha with b > 0 selects the smaller root, which is unphysical."""
        sb = make_subband(E=50 * meV, alphad=-self.ALPHA)
        b = 1.0 + sb.alphad * sb.get_E()
        assert b > 0.0
        with pytest.raises(NegativeEnergy):
            sb.Ek(1e8)


# ═════════════════════════════════════════════════════════════════════
#  Carrier statistics
# ═════════════════════════════════════════════════════════════════════

class TestCarrierStatistics:
    def test_half_occupation_at_fermi_level(self):
        sb = make_subband()
        assert sb.f_FD(sb.get_Ef(), 300.0) == pytest.approx(0.5, rel=RTOL)

    def test_occupation_formula(self):
        sb = make_subband()
        E, T = 60 * meV, 77.0
        expected = 1.0 / (np.exp((E - sb.get_Ef()) / (kB * T)) + 1.0)
        assert sb.f_FD(E, T) == pytest.approx(expected, rel=1e-12)

    def test_occupation_bounded_and_no_overflow(self):
        sb = make_subband()
        assert sb.f_FD(sb.get_Ef() + 10.0 * meV * 1e3, 1.0) == 0.0
        assert sb.f_FD(sb.get_Ef() - 10.0 * meV * 1e3, 1.0) == 1.0

    def test_occupation_vectorised(self):
        sb = make_subband()
        E = np.linspace(0.0, 100 * meV, 11)
        occ = sb.f_FD(E, 300.0)
        assert occ.shape == E.shape
        assert np.all(np.diff(occ) < 0.0)

    def test_f_FD_k_and_Ek_agree(self):
        sb = make_subband()
        k = 2e8
        assert sb.f_FD_k(k, 300.0) == pytest.approx(sb.f_FD_Ek(sb.Ek(k), 300.0), rel=RTOL)

    def test_k_fermi(self):
        assert make_subband(population=1e15).get_k_fermi() == pytest.approx(np.sqrt(2 * pi * 1e15), rel=RTOL)

    def test_density_of_states(self):
        assert make_subband().rho() == pytest.approx(M_GAAS / (pi * hbar**2), rel=RTOL)

    def test_Ek_max_degenerate(self):
        sb = make_subband(E=50 * meV, Ef=60 * meV)
        assert sb.get_Ek_max(300.0) == pytest.approx(10 * meV + 5 * kB * 300.0, rel=1e-12)

    def test_Ek_max_nondegenerate(self):
        sb = make_subband(E=50 * meV, Ef=20 * meV)
        assert sb.get_Ek_max(300.0) == pytest.approx(5 * kB * 300.0, rel=1e-12)

    def test_k_max(self):
        sb = make_subband()
        assert sb.get_k_max(77.0) == pytest.approx(sb.k(sb.get_Ek_max(77.0)), rel=RTOL)
