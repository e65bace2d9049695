"""
CI-friendly smoke tests for the high-level API.

These tests are designed to:
1. Run fast (<1s each)
2. Exercise the full pipeline from configuration to results
3. Be deterministic (seeded RNG)
"""

import numpy as np
import pytest

from mccore import simulate
from mccore.config import SimulationConfig
from mccore.ensembles import CanonicalEnsemble, GrandCanonicalEnsemble
from mccore.exceptions import ConfigurationError
from mccore.io import write_starting_positions

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def small_lj_positions():
    """Ten particles in a 10 A box."""
    rng = np.random.default_rng(42)
    return rng.random((10, 3)) * 10.0


# =============================================================================
# simulate.nvt / simulate.gcmc
# =============================================================================


class TestSimulateNVT:
    """Smoke tests for canonical runs."""

    def test_result_series(self, small_lj_positions):
        """Test every series has one entry per step plus step 0."""
        result = simulate.nvt(
            n_steps=50,
            positions=small_lj_positions,
            box_length=10.0,
            epsilon=1.0,
            sigma=1.0,
            temperature=1.0,
            seed=42,
        )

        assert result.ensemble == "nvt"
        assert result.n_steps == 50
        assert len(result.steps) == 51
        assert len(result.energy) == 51
        assert np.all(result.n_particles == 10)
        assert np.isnan(result.helmholtz[0])
        assert np.all(np.isfinite(result.helmholtz[1:]))
        assert np.all(np.isnan(result.qst))
        assert result.positions.shape == (10, 3)
        assert result.average_energy == pytest.approx(result.energy.mean())
        assert 0.0 <= result.acceptance_ratio <= 1.0
        assert result.seed == 42

    def test_deterministic(self, small_lj_positions):
        """Test the same seed reproduces the run."""
        kwargs = dict(
            n_steps=30, positions=small_lj_positions, box_length=10.0, seed=7
        )
        first = simulate.nvt(**kwargs)
        second = simulate.nvt(**kwargs)
        assert np.array_equal(first.energy, second.energy)

    def test_two_argon_atoms(self):
        """Test two close argon atoms in the big box have zero energy."""
        result = simulate.nvt(
            n_steps=0, positions=[[0, 0, 0], [1, 0, 0]], seed=1
        )
        assert result.final_energy == 0.0
        assert result.average_energy == 0.0
        assert list(result.steps) == [0]

    def test_reads_starting_file(self, tmp_path):
        """Test positions come from the starting configuration file."""
        start = tmp_path / "start.txt"
        write_starting_positions(start, [[1.0, 1.0, 1.0], [50.0, 50.0, 50.0], [3, 3, 3]])

        result = simulate.nvt(
            n_steps=5, starting_positions=start, n_particles=2, seed=3
        )
        assert np.all(result.n_particles == 2)

    def test_positions_outside_box(self):
        """Test out-of-box starting coordinates are rejected."""
        with pytest.raises(ConfigurationError):
            simulate.nvt(n_steps=1, positions=[[0, 0, 0], [300, 0, 0]])

    def test_write_files(self, small_lj_positions, tmp_path):
        """Test the canonical output files are written."""
        result = simulate.nvt(
            n_steps=10,
            positions=small_lj_positions,
            box_length=10.0,
            seed=1,
            write_files=True,
            output_dir=tmp_path,
        )

        assert set(result.output_files) == {"trajectory", "energies", "free_energies"}
        energies = (tmp_path / "energies.dat").read_text().splitlines()
        assert len(energies) == 11
        assert energies[0].startswith("0 ")


class TestSimulateGCMC:
    """Smoke tests for grand canonical runs."""

    def test_argon_defaults(self):
        """Test the default argon run stays empty."""
        result = simulate.gcmc(n_steps=20, seed=42)

        assert result.ensemble == "gcmc"
        assert result.temperature == 101.0
        assert result.box_length == 22.0
        assert np.all(result.n_particles == 0)
        # Every step is a rejected insertion whose trial count is one
        assert result.average_particles == pytest.approx(20 / 21)
        assert np.all(np.isnan(result.helmholtz))

    def test_fluctuating_count(self):
        """Test a small box with lambda = e fills and empties."""
        result = simulate.gcmc(
            n_steps=200,
            seed=5,
            box_length=2.0,
            temperature=1.0,
            mass=1.0,
            planck=np.e * np.sqrt(2.0 * np.pi),
            epsilon=1.0,
            sigma=1.0,
        )

        assert result.n_particles.max() > 0
        assert np.all(np.abs(np.diff(result.n_particles)) <= 1)
        assert result.positions.shape == (result.n_particles[-1], 3)
        # Trial counts sit at most one above the kept count
        assert 0.0 < result.average_particles <= result.n_particles.max() + 1

    def test_write_files(self, tmp_path):
        """Test the grand canonical output files are written."""
        result = simulate.gcmc(
            n_steps=5, seed=1, write_files=True, output_dir=tmp_path / "run"
        )

        assert set(result.output_files) == {"trajectory", "energies", "qsts"}
        assert len((tmp_path / "run" / "qsts.dat").read_text().splitlines()) == 5


class TestBuilders:
    """Test configuration-driven construction."""

    def test_build_ensemble(self):
        """Test the ensemble class follows the configuration."""
        nvt = simulate.build_ensemble(SimulationConfig.for_ensemble("nvt"))
        gcmc = simulate.build_ensemble(SimulationConfig.for_ensemble("gcmc"))

        assert isinstance(nvt, CanonicalEnsemble)
        assert isinstance(gcmc, GrandCanonicalEnsemble)
        assert gcmc.temperature == 101.0

    def test_gcmc_starts_empty(self):
        """Test GCMC builds an empty state without reading a file."""
        state = simulate.build_state(SimulationConfig.for_ensemble("gcmc"))
        assert state.n_particles == 0
        assert state.box.length == 22.0

    def test_run_needs_steps(self):
        """Test running without a step count raises ConfigurationError."""
        with pytest.raises(ConfigurationError):
            simulate.run(SimulationConfig.for_ensemble("gcmc"), write_files=False)


# =============================================================================
# Plotting
# =============================================================================


class TestPlotting:
    """Smoke tests for the optional plotting helpers."""

    @pytest.fixture(autouse=True)
    def agg_backend(self):
        matplotlib = pytest.importorskip("matplotlib")
        matplotlib.use("Agg")
        yield
        import matplotlib.pyplot as plt

        plt.close("all")

    def test_energy_and_count_plots(self, small_lj_positions, tmp_path):
        """Test figures are created and saved."""
        from mccore import plotting

        result = simulate.nvt(
            n_steps=20, positions=small_lj_positions, box_length=10.0, seed=0
        )
        fig = plotting.energy(result, show=False)
        assert fig is not None
        plotting.particle_count(result, show=False)
        plotting.save(tmp_path / "count.png")
        assert (tmp_path / "count.png").exists()

    def test_qst_requires_values(self, small_lj_positions):
        """Test QST plots refuse canonical results."""
        from mccore import plotting

        result = simulate.nvt(
            n_steps=5, positions=small_lj_positions, box_length=10.0, seed=0
        )
        with pytest.raises(ValueError):
            plotting.qst(result, show=False)
