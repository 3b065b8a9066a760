# tests/test_simulation.py

"""
Tests for the simulation collaborators: noise generators, instrument files,
per-arc parallel processing, the orbit and star camera programs and the
command line interface.
"""

import json

import numpy as np
import pandas as pd
import pytest
from scipy.spatial.transform import Rotation

from geofilt.__main__ import main
from geofilt.core.exceptions import (
    ConfigurationError, DimensionError, InsufficientLengthError, ParameterError, ProcessingError
)
from geofilt.filters import Butterworth, DigitalFilter, MovingAverage
from geofilt.simulation import (
    FilteredNoiseGenerator, NoiseGenerator, WhiteNoiseGenerator, arc_statistics,
    filter_arcs, for_each, local_orbit_frames, noise_orbit, read_arcs,
    rotation_from_axes, simulate_star_camera, write_arcs
)
from geofilt.simulation.instrument import (
    ARC_COLUMN, POSITION_COLUMNS, QUATERNION_COLUMNS, TIME_COLUMN, VELOCITY_COLUMNS
)

from .conftest import circular_orbit


class ConstantNoise:
    """Noise generator returning the same (along, cross, radial) sample."""

    def __init__(self, sample):
        self.sample = np.asarray(sample, dtype=float)

    def noise(self, rows, columns):
        return np.tile(self.sample, (rows, 1))


def _angles(arc: pd.DataFrame) -> np.ndarray:
    return np.arctan2(arc[POSITION_COLUMNS[1]], arc[POSITION_COLUMNS[0]]).to_numpy()


def _matrices(star_camera: pd.DataFrame) -> np.ndarray:
    quaternions = star_camera[QUATERNION_COLUMNS].to_numpy()
    return Rotation.from_quat(quaternions[:, [1, 2, 3, 0]]).as_matrix()


# ---- Noise ----

class TestNoiseGenerators:

    def test_white_noise_statistics(self):
        noise = WhiteNoiseGenerator(2.0, seed=1).noise(20000, 2)
        assert noise.shape == (20000, 2)
        np.testing.assert_allclose(noise.std(axis=0), 2.0, rtol=0.05)
        np.testing.assert_allclose(noise.mean(axis=0), 0.0, atol=0.1)

    def test_seed_is_reproducible(self):
        first = WhiteNoiseGenerator(seed=3).noise(10, 3)
        second = WhiteNoiseGenerator(seed=3).noise(10, 3)
        np.testing.assert_array_equal(first, second)

    def test_filtered_noise_drops_warmup(self):
        average = MovingAverage(4, "zero")
        coloured = FilteredNoiseGenerator(WhiteNoiseGenerator(seed=5), average, warmup=10)
        expected = average.filter(WhiteNoiseGenerator(seed=5).noise(60, 2))[10:]
        np.testing.assert_array_equal(coloured.noise(50, 2), expected)

    def test_protocol(self):
        assert isinstance(WhiteNoiseGenerator(), NoiseGenerator)
        assert isinstance(ConstantNoise([0, 0, 0]), NoiseGenerator)
        assert not isinstance(object(), NoiseGenerator)

    def test_negative_sigma(self):
        with pytest.raises(ParameterError):
            WhiteNoiseGenerator(-1.0)


# ---- Instrument files ----

class TestInstrumentFiles:

    def test_round_trip(self, tmp_path, orbit_arcs):
        path = write_arcs(tmp_path / "orbit" / "orbit.csv", orbit_arcs)
        arcs = read_arcs(path)
        assert len(arcs) == len(orbit_arcs)
        for expected, arc in zip(orbit_arcs, arcs):
            pd.testing.assert_frame_equal(arc, expected, check_exact=False, rtol=1e-12)

    def test_missing_columns(self, tmp_path):
        path = tmp_path / "orbit.csv"
        pd.DataFrame({TIME_COLUMN: [0.0, 1.0], "x": [1.0, 2.0]}).to_csv(path, index=False)
        with pytest.raises(ConfigurationError):
            read_arcs(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            read_arcs(tmp_path / "missing.csv")

    def test_write_needs_time(self, tmp_path):
        with pytest.raises(DimensionError):
            write_arcs(tmp_path / "orbit.csv", [pd.DataFrame({"x": [1.0]})])

    def test_statistics(self, orbit_arcs):
        statistics = arc_statistics(orbit_arcs)
        assert list(statistics[ARC_COLUMN]) == [0, 1, 2]
        assert list(statistics["epochs"]) == [40, 25, 60]
        np.testing.assert_allclose(statistics["sampling"], 5.0)
        assert statistics["end"].iloc[0] == pytest.approx(195.0)


# ---- Parallel processing ----

class TestForEach:

    @pytest.mark.parametrize("max_workers", [1, 4])
    def test_results_in_order(self, max_workers):
        assert for_each(range(10), lambda x: x * x, max_workers=max_workers) == [x * x for x in range(10)]

    @pytest.mark.parametrize("max_workers", [1, 3])
    def test_error_reports_arc(self, max_workers):
        def fail_on_three(x):
            if x == 3:
                raise ValueError("bad arc")
            return x

        with pytest.raises(ProcessingError) as excinfo:
            for_each(range(6), fail_on_three, max_workers=max_workers, operation="test")
        assert excinfo.value.arc == 3
        assert excinfo.value.operation == "test"
        assert isinstance(excinfo.value.__cause__, ValueError)

    def test_empty(self):
        assert for_each([], lambda x: x) == []


# ---- Programs ----

class TestFilterArcs:

    def test_filters_selected_columns(self, orbit_arcs):
        average = MovingAverage(3, "constant")
        filtered = filter_arcs(orbit_arcs, average, columns=["x"], max_workers=2)
        for arc, result in zip(orbit_arcs, filtered):
            np.testing.assert_allclose(result["x"].to_numpy(), average.filter(arc["x"])[:, 0])
            pd.testing.assert_series_equal(result["y"], arc["y"])
            pd.testing.assert_series_equal(result[TIME_COLUMN], arc[TIME_COLUMN])

    def test_filters_all_data_columns(self, orbit_arcs):
        chain = DigitalFilter([MovingAverage(5, "symmetric")])
        filtered = filter_arcs(orbit_arcs, chain)
        for arc, result in zip(orbit_arcs, filtered):
            columns = POSITION_COLUMNS + VELOCITY_COLUMNS
            np.testing.assert_allclose(result[columns].to_numpy(), chain.filter(arc[columns]))

    def test_short_arc_reports_number(self, orbit_arcs):
        arcs = [orbit_arcs[0], orbit_arcs[0].iloc[:10]]
        with pytest.raises(ProcessingError) as excinfo:
            filter_arcs(arcs, Butterworth(4, 0.1), max_workers=2)
        assert excinfo.value.arc == 1
        assert isinstance(excinfo.value.__cause__, InsufficientLengthError)


class TestNoiseOrbit:

    def test_along_track_noise(self, orbit_arcs):
        noisy = noise_orbit(orbit_arcs, ConstantNoise([1.0, 0.0, 0.0]))
        for arc, result in zip(orbit_arcs, noisy):
            theta = _angles(arc)
            offset = result[POSITION_COLUMNS].to_numpy() - arc[POSITION_COLUMNS].to_numpy()
            expected = np.column_stack([-np.sin(theta), np.cos(theta), np.zeros_like(theta)])
            np.testing.assert_allclose(offset, expected, atol=1e-6)

    def test_cross_track_noise(self, orbit_arcs):
        noisy = noise_orbit(orbit_arcs, ConstantNoise([0.0, 1.0, 0.0]))
        for arc, result in zip(orbit_arcs, noisy):
            offset = result[POSITION_COLUMNS].to_numpy() - arc[POSITION_COLUMNS].to_numpy()
            np.testing.assert_allclose(offset, np.tile([0.0, 0.0, 1.0], (len(arc), 1)), atol=1e-6)

    def test_radial_noise(self, orbit_arcs):
        noisy = noise_orbit(orbit_arcs, None, ConstantNoise([0.0, 0.0, 0.5]))
        for arc, result in zip(orbit_arcs, noisy):
            positions = arc[POSITION_COLUMNS].to_numpy()
            offset = result[VELOCITY_COLUMNS].to_numpy() - arc[VELOCITY_COLUMNS].to_numpy()
            radial = positions / np.linalg.norm(positions, axis=1, keepdims=True)
            np.testing.assert_allclose(offset, 0.5 * radial, atol=1e-6)
            np.testing.assert_array_equal(result[POSITION_COLUMNS].to_numpy(), positions)

    def test_reproducible_across_workers(self, orbit_arcs):
        sequential = noise_orbit(orbit_arcs, WhiteNoiseGenerator(0.1, seed=9), max_workers=1)
        parallel = noise_orbit(orbit_arcs, WhiteNoiseGenerator(0.1, seed=9), max_workers=3)
        for first, second in zip(sequential, parallel):
            pd.testing.assert_frame_equal(first, second)

    def test_frames_are_rotations(self, orbit_arcs):
        frames = local_orbit_frames(orbit_arcs[0][POSITION_COLUMNS].to_numpy())
        identity = np.einsum("nji,njk->nik", frames, frames)
        np.testing.assert_allclose(identity, np.tile(np.eye(3), (len(frames), 1, 1)), atol=1e-12)
        np.testing.assert_allclose(np.linalg.det(frames), 1.0)

    def test_single_epoch_frame(self):
        np.testing.assert_array_equal(local_orbit_frames(np.ones((1, 3))), np.eye(3)[None])

    def test_missing_position_columns(self):
        arc = pd.DataFrame({TIME_COLUMN: [0.0, 5.0], "x": [1.0, 2.0]})
        with pytest.raises(ProcessingError) as excinfo:
            noise_orbit([arc], ConstantNoise([1.0, 0.0, 0.0]))
        assert isinstance(excinfo.value.__cause__, DimensionError)


class TestStarCamera:

    def test_earth_pointing_axes(self, orbit_arcs):
        star_camera = simulate_star_camera(orbit_arcs)
        for arc, result in zip(orbit_arcs, star_camera):
            assert list(result.columns) == [TIME_COLUMN] + QUATERNION_COLUMNS
            np.testing.assert_array_equal(result[TIME_COLUMN], arc[TIME_COLUMN])

            quaternions = result[QUATERNION_COLUMNS].to_numpy()
            np.testing.assert_allclose(np.linalg.norm(quaternions, axis=1), 1.0)

            theta = _angles(arc)
            matrices = Rotation.from_quat(quaternions[:, [1, 2, 3, 0]]).as_matrix()
            along = np.column_stack([-np.sin(theta), np.cos(theta), np.zeros_like(theta)])
            radial = np.column_stack([np.cos(theta), np.sin(theta), np.zeros_like(theta)])
            np.testing.assert_allclose(matrices[:, :, 0], along, atol=1e-9)
            np.testing.assert_allclose(matrices[:, :, 2], -radial, atol=1e-9)

    def test_modes_agree_on_circular_orbit(self, orbit_arcs):
        earth = simulate_star_camera(orbit_arcs, "earth_pointing")
        leading = simulate_star_camera(orbit_arcs, "velocity_leading")
        for first, second in zip(earth, leading):
            np.testing.assert_allclose(_matrices(first), _matrices(second), atol=1e-9)

    def test_velocities_derived_from_positions(self):
        arc = circular_orbit(50)
        reference = _matrices(simulate_star_camera([arc])[0])[:, :, 0]
        derived = _matrices(simulate_star_camera([arc.drop(columns=VELOCITY_COLUMNS)])[0])[:, :, 0]
        np.testing.assert_allclose(derived, reference, atol=1e-2)

    def test_single_epoch_without_velocity(self):
        arc = circular_orbit(1).drop(columns=VELOCITY_COLUMNS)
        with pytest.raises(ProcessingError) as excinfo:
            simulate_star_camera([arc])
        assert isinstance(excinfo.value.__cause__, InsufficientLengthError)

    def test_unknown_mode(self, orbit_arcs):
        with pytest.raises(ParameterError):
            simulate_star_camera(orbit_arcs, "sun_pointing")

    def test_rotation_from_axes_orthogonalizes(self):
        matrices = rotation_from_axes(np.array([[2.0, 0.0, 0.0]]), np.array([[1.0, 1.0, 0.0]]))
        np.testing.assert_allclose(matrices[0], np.eye(3), atol=1e-12)


# ---- Command line ----

class TestCommandLine:

    @pytest.fixture
    def orbit_file(self, tmp_path, orbit_arcs):
        return write_arcs(tmp_path / "orbit.csv", orbit_arcs)

    def test_filter(self, tmp_path, orbit_file):
        chain_file = tmp_path / "chain.json"
        chain_file.write_text(json.dumps({"filter": [{"movingAverage": {"length": 3, "padType": "constant"}}]}))
        output = tmp_path / "filtered.csv"
        assert main(["filter", "--input", str(orbit_file), "--output", str(output),
                     "--filter", str(chain_file), "--columns", "x", "y"]) == 0
        arcs = read_arcs(output)
        assert [len(arc) for arc in arcs] == [40, 25, 60]

    def test_noise_orbit(self, tmp_path, orbit_file):
        output = tmp_path / "noisy.csv"
        assert main(["--workers", "1", "noise-orbit", "--input", str(orbit_file),
                     "--output", str(output), "--sigma-position", "0.02", "--seed", "4"]) == 0
        noisy = read_arcs(output)
        original = read_arcs(orbit_file)
        offset = noisy[0][POSITION_COLUMNS].to_numpy() - original[0][POSITION_COLUMNS].to_numpy()
        assert 0.0 < np.abs(offset).max() < 0.2
        np.testing.assert_allclose(noisy[0][VELOCITY_COLUMNS], original[0][VELOCITY_COLUMNS])

    def test_star_camera(self, tmp_path, orbit_file):
        output = tmp_path / "starCamera.csv"
        assert main(["star-camera", "--input", str(orbit_file), "--output", str(output)]) == 0
        arcs = read_arcs(output)
        assert list(arcs[0].columns) == [TIME_COLUMN] + QUATERNION_COLUMNS

    def test_failure_returns_one(self, tmp_path, orbit_file):
        assert main(["filter", "--input", str(orbit_file), "--output", str(tmp_path / "out.csv"),
                     "--filter", str(tmp_path / "missing.json")]) == 1
