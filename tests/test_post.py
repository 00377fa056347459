"""Tests for the post-processing package."""

import numpy as np
import pytest

from chebflow.bases import Chebyshev
from chebflow.field import Field, chebyshev, fourier_r2c
from chebflow.navier import Diagnostics, Navier2DPeriodic
from post import analysis, io, visualisation


@pytest.fixture
def rundir(tmp_path):
    """Run directory with two snapshots and a diagnostics file."""
    navier = Navier2DPeriodic(8, 8, 1e4, 1.0, 0.01)
    navier.set_temperature(0.1, 2.0, 1.0)
    navier.write(tmp_path)
    navier.update()
    navier.write(tmp_path)
    return tmp_path


@pytest.fixture
def series():
    times = np.linspace(0.0, 9.0, 10)
    return times, {
        "nu": np.full(10, 2.0),
        "nuvol": np.full(10, 2.2),
        "re": np.arange(10, dtype=float),
    }


class TestIo:

    def test_snapshot_time(self):
        assert io.snapshot_time("data/flow12.500.h5") == 12.5
        with pytest.raises(ValueError):
            io.snapshot_time("data/diagnostics.h5")

    def test_list_snapshots_sorted_by_time(self, tmp_path):
        for name in ("flow10.000.h5", "flow2.000.h5", "flow0.500.h5", "other.h5"):
            (tmp_path / name).touch()
        names = [p.name for p in io.list_snapshots(tmp_path)]
        assert names == ["flow0.500.h5", "flow2.000.h5", "flow10.000.h5"]

    def test_list_snapshots_empty(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            io.list_snapshots(tmp_path)

    def test_read_snapshot(self, rundir):
        snap = io.read_snapshot(rundir / "flow0.010.h5")
        assert snap["temp"].shape == (8, 8)
        assert snap["x"].shape == (8,)
        assert snap["y"].shape == (8,)
        assert snap["time"] == pytest.approx(0.01)
        np.testing.assert_allclose(snap["temp"][:, 0], 0.5, atol=1e-10)

    def test_read_snapshot_missing_field(self, rundir):
        with pytest.raises(KeyError):
            io.read_snapshot(rundir / "flow0.010.h5", fields=("vorticity",))

    def test_read_diagnostics(self, rundir):
        times, series_dict = io.read_diagnostics(rundir / "diagnostics.h5")
        np.testing.assert_allclose(times, [0.0, 0.01])
        assert set(series_dict) == {"nu", "nuvol", "re"}

    def test_read_diagnostics_sorted(self, tmp_path):
        diagnostics = Diagnostics()
        diagnostics.append(2.0, 3.0, 3.0, 1.0)
        diagnostics.append(1.0, 2.0, 2.0, 0.5)
        diagnostics.write(tmp_path / "diagnostics.h5")
        times, series_dict = io.read_diagnostics(tmp_path / "diagnostics.h5")
        np.testing.assert_allclose(times, [1.0, 2.0])
        np.testing.assert_allclose(series_dict["nu"], [2.0, 3.0])


class TestAnalysis:

    def test_time_average_and_std(self, series):
        times, series_dict = series
        assert analysis.time_average(times, series_dict["re"]) == pytest.approx(4.5)
        assert analysis.time_average(times, series_dict["re"], t_start=5.0) == pytest.approx(7.0)
        assert analysis.time_std(times, series_dict["nu"]) == pytest.approx(0.0)

    def test_empty_window(self, series):
        times, series_dict = series
        with pytest.raises(ValueError):
            analysis.time_average(times, series_dict["re"], t_start=20.0)

    def test_moving_average(self):
        result = analysis.moving_average(np.arange(5, dtype=float), 2)
        np.testing.assert_allclose(result, [0.5, 1.5, 2.5, 3.5])
        with pytest.raises(ValueError):
            analysis.moving_average(np.arange(5, dtype=float), 0)

    def test_statistics_summary(self, series):
        times, series_dict = series
        stats = analysis.compute_statistics_summary(times, series_dict)
        assert stats["re"]["max"] == 9.0
        assert stats["re"]["median"] == pytest.approx(4.5)
        assert stats["nu"]["mean"] == pytest.approx(2.0)

    def test_nusselt_mismatch(self, series):
        times, series_dict = series
        assert analysis.nusselt_mismatch(times, series_dict) == pytest.approx(0.1)
        with pytest.raises(KeyError):
            analysis.nusselt_mismatch(times, {"re": series_dict["re"]})

    def test_means(self):
        y = Chebyshev(9).coords()
        field = np.tile(y ** 2, (4, 1))
        np.testing.assert_allclose(analysis.horizontal_mean(field), y ** 2)
        assert analysis.volume_mean(field, y) == pytest.approx(1.0 / 3.0, abs=1e-12)

    def test_volume_mean_scaled_grid(self):
        y = 1.0 + 0.5 * (Chebyshev(9).coords() + 1.0)
        field = np.tile(y, (4, 1))
        assert analysis.volume_mean(field, y) == pytest.approx(1.5, abs=1e-12)

    def test_volume_mean_matches_field_average(self):
        field = Field([fourier_r2c(8), chebyshev(9)])
        x, y = field.x[0][:, None], field.x[1][None, :]
        field.v[...] = 1.0 + np.cos(x) * y + y ** 4
        assert analysis.volume_mean(field.v, field.x[1]) == pytest.approx(field.average(),
                                                                          abs=1e-12)

    def test_volume_mean_rejects_uniform_grid(self):
        y = np.linspace(-1.0, 1.0, 9)
        with pytest.raises(ValueError):
            analysis.volume_mean(np.tile(y, (4, 1)), y)


class TestVisualisation:

    def test_plot_time_series(self, series, tmp_path):
        times, series_dict = series
        written = visualisation.plot_time_series(times, series_dict, outdir=tmp_path, dpi=50)
        assert [p.name for p in written] == ["nusselt.png", "re.png"]
        assert all(p.exists() for p in written)

    def test_plot_snapshot_and_profile(self, rundir, tmp_path):
        snap = io.read_snapshot(rundir / "flow0.010.h5")
        path = visualisation.plot_snapshot(snap, outdir=tmp_path / "fig", dpi=50)
        assert path.name == "snapshot_t0.010.png"
        assert path.exists()
        profile = visualisation.plot_mean_profile(snap, "temp", outdir=tmp_path / "fig", dpi=50)
        assert profile.exists()

    def test_plot_snapshot_without_fields(self, tmp_path):
        with pytest.raises(ValueError):
            visualisation.plot_snapshot({"x": np.zeros(2), "y": np.zeros(2)}, outdir=tmp_path)
