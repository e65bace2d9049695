"""Tests for ensemble acceptance rules."""

import math

import numpy as np
import pytest

from mccore.ensembles import (
    ARGON_MASS,
    PLANCK,
    CanonicalEnsemble,
    GrandCanonicalEnsemble,
    metropolis,
)
from mccore.moves import MoveKind, MoveProposer, MoveRecord
from mccore.system import Box, MCState


class FixedDraw:
    """Generator that always returns the same uniform draw."""

    def __init__(self, value: float):
        self.value = value

    def random(self):
        return self.value


def make_record(kind):
    return MoveRecord(kind, 0, np.zeros(3), np.zeros(3))


def make_state(n_particles, length):
    rng = np.random.default_rng(0)
    return MCState(rng.random((n_particles, 3)) * length, Box.cubic(length))


@pytest.fixture
def unit_wavelength():
    """GCMC ensemble with lambda = 1, so mu_rel = 0 at any density."""
    return GrandCanonicalEnsemble(
        temperature=1.0, boltzmann=1.0, mass=1.0, planck=math.sqrt(2.0 * math.pi)
    )


class TestMetropolis:
    """Test the Metropolis criterion."""

    def test_accepts_below_probability(self):
        """Test a draw below exp(-beta dE) accepts."""
        # exp(-1) = 0.3679
        assert metropolis(1.0, 1.0, FixedDraw(0.3))

    def test_rejects_above_probability(self):
        """Test a draw above exp(-beta dE) rejects."""
        assert not metropolis(1.0, 1.0, FixedDraw(0.5))

    def test_zero_delta_always_accepted(self):
        """Test dE = 0 gives probability 1, above every draw in [0, 1)."""
        assert metropolis(0.0, 1.0, FixedDraw(0.999999))


class TestCanonicalEnsemble:
    """Test NVT rules."""

    def test_properties(self):
        """Test thermal quantities."""
        ensemble = CanonicalEnsemble(temperature=77.0)
        assert ensemble.name == "nvt"
        assert not ensemble.grand_canonical
        assert ensemble.kT == pytest.approx(77.0)
        assert ensemble.beta == pytest.approx(1.0 / 77.0)

    def test_invalid_temperature(self):
        """Test non-positive temperatures raise errors."""
        with pytest.raises(ValueError):
            CanonicalEnsemble(temperature=0.0)

    def test_downhill_always_accepted(self):
        """Test a lower energy is kept without consulting the draw."""
        ensemble = CanonicalEnsemble(temperature=1e-6)
        state = make_state(2, 10.0)
        record = make_record(MoveKind.DISPLACEMENT)
        assert ensemble.accept(10.0, 9.0, record, state, FixedDraw(0.999999))

    def test_uphill_uses_metropolis(self):
        """Test uphill moves follow the draw."""
        ensemble = CanonicalEnsemble(temperature=1.0)
        state = make_state(2, 10.0)
        record = make_record(MoveKind.DISPLACEMENT)

        assert ensemble.accept(0.0, 1.0, record, state, FixedDraw(0.3))
        assert not ensemble.accept(0.0, 1.0, record, state, FixedDraw(0.5))

    def test_insertion_not_supported(self):
        """Test uphill insertions are refused in the canonical ensemble."""
        ensemble = CanonicalEnsemble(temperature=1.0)
        with pytest.raises(ValueError):
            ensemble.accept(
                0.0, 1.0, make_record(MoveKind.INSERTION), make_state(2, 10.0),
                FixedDraw(0.0),
            )

    def test_propose_displaces(self):
        """Test the canonical ensemble proposes displacements only."""
        ensemble = CanonicalEnsemble(temperature=1.0)
        proposer = MoveProposer(np.random.default_rng(0))
        state = make_state(4, 10.0)

        for _ in range(20):
            assert ensemble.propose(proposer, state).kind is MoveKind.DISPLACEMENT
        assert state.n_particles == 4

    def test_recorded_energy(self):
        """Test the log keeps the energy of the kept configuration."""
        ensemble = CanonicalEnsemble(temperature=1.0)
        assert ensemble.recorded_energy(1.0, 2.0, accepted=True) == 2.0
        assert ensemble.recorded_energy(1.0, 2.0, accepted=False) == 1.0


class TestGrandCanonicalEnsemble:
    """Test muVT rules."""

    def test_defaults(self):
        """Test the argon defaults."""
        ensemble = GrandCanonicalEnsemble(temperature=101.0)
        assert ensemble.name == "gcmc"
        assert ensemble.grand_canonical
        assert ensemble.mass == ARGON_MASS
        assert ensemble.planck == PLANCK

    def test_thermal_wavelength(self):
        """Test lambda = h / sqrt(2 pi m k T)."""
        ensemble = GrandCanonicalEnsemble(temperature=101.0)
        expected = PLANCK / math.sqrt(2.0 * math.pi * ARGON_MASS * 101.0)
        assert ensemble.thermal_wavelength == pytest.approx(expected)
        assert ensemble.log_wavelength_cubed == pytest.approx(3.0 * math.log(expected))

    def test_relative_chemical_potential(self):
        """Test mu_rel vanishes at unit density and is -ref when empty."""
        ensemble = GrandCanonicalEnsemble(temperature=101.0)
        reference = ensemble.kT * ensemble.log_wavelength_cubed

        assert ensemble.relative_chemical_potential(0, 1000.0) == pytest.approx(-reference)
        assert ensemble.relative_chemical_potential(1000, 1000.0) == pytest.approx(0.0)

    def test_invalid_mass(self):
        """Test non-positive masses raise errors."""
        with pytest.raises(ValueError):
            GrandCanonicalEnsemble(temperature=1.0, mass=0.0)

    def test_downhill_always_accepted(self, unit_wavelength):
        """Test lower energies are kept for every move kind."""
        state = make_state(2, 2.0)
        for kind in MoveKind:
            assert unit_wavelength.accept(
                5.0, 4.0, make_record(kind), state, FixedDraw(0.999999)
            )

    def test_displacement_uses_metropolis(self, unit_wavelength):
        """Test uphill displacements follow the draw."""
        state = make_state(2, 2.0)
        record = make_record(MoveKind.DISPLACEMENT)
        assert unit_wavelength.accept(0.0, 1.0, record, state, FixedDraw(0.3))
        assert not unit_wavelength.accept(0.0, 1.0, record, state, FixedDraw(0.5))

    def test_insertion_threshold(self, unit_wavelength):
        """Test insertion is kept when -beta dE + ln(V / (N + 1)) < 0."""
        # V = 8, N = 1 after the insertion, so the threshold is dE > ln 4
        state = make_state(1, 2.0)
        record = make_record(MoveKind.INSERTION)

        assert not unit_wavelength.accept(0.0, 1.0, record, state, FixedDraw(0.0))
        assert unit_wavelength.accept(0.0, 2.0, record, state, FixedDraw(0.999999))

    def test_insertion_exponent(self, unit_wavelength):
        """Test the insertion exponent with mu_rel = 0."""
        assert unit_wavelength.insertion_exponent(1.0, 1, 8.0) == pytest.approx(
            -1.0 + math.log(4.0)
        )

    def test_deletion_threshold(self, unit_wavelength):
        """Test deletion is kept when N exp(beta dE) / V < 1."""
        # V = 8, N = 2 after the deletion, so the threshold is dE < ln 4
        state = make_state(2, 2.0)
        record = make_record(MoveKind.DELETION)

        assert unit_wavelength.accept(0.0, 1.0, record, state, FixedDraw(0.999999))
        assert not unit_wavelength.accept(0.0, 2.0, record, state, FixedDraw(0.0))

    def test_deleting_last_particle_accepted(self):
        """Test removing the only particle is always kept."""
        ensemble = GrandCanonicalEnsemble(temperature=101.0)
        state = make_state(0, 22.0)
        record = make_record(MoveKind.DELETION)
        assert ensemble.accept(0.0, 50.0, record, state, FixedDraw(0.999999))

    def test_argon_insertion_into_empty_box(self):
        """Test the first argon insertion at dE = 0 is turned down."""
        ensemble = GrandCanonicalEnsemble(temperature=101.0)
        state = make_state(1, 22.0)
        record = make_record(MoveKind.INSERTION)

        assert ensemble.insertion_exponent(0.0, 1, state.box.volume) > 0
        assert not ensemble.accept(0.0, 0.0, record, state, FixedDraw(0.0))

    def test_large_exponents_do_not_overflow(self):
        """Test extreme energy changes give a decision, not an error."""
        ensemble = GrandCanonicalEnsemble(temperature=1.0)
        state = make_state(3, 22.0)

        insertion = make_record(MoveKind.INSERTION)
        deletion = make_record(MoveKind.DELETION)
        assert ensemble.accept(0.0, 1e9, insertion, state, FixedDraw(0.0))
        assert not ensemble.accept(0.0, 1e9, deletion, state, FixedDraw(0.0))

    def test_propose_inserts_into_empty_system(self, unit_wavelength):
        """Test an empty system always gets an insertion."""
        proposer = MoveProposer(np.random.default_rng(0))
        state = MCState.empty(Box.cubic(2.0))
        record = unit_wavelength.propose(proposer, state)
        assert record.kind is MoveKind.INSERTION

    def test_recorded_energy(self, unit_wavelength):
        """Test the log always carries the proposed energy."""
        assert unit_wavelength.recorded_energy(1.0, 2.0, accepted=True) == 2.0
        assert unit_wavelength.recorded_energy(1.0, 2.0, accepted=False) == 2.0
