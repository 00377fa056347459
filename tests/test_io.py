"""Tests for HDF5 persistence helpers."""

import numpy as np
import pytest

from chebflow import io


class TestIo:

    def test_write_read_complex(self, tmp_path):
        path = tmp_path / "data.h5"
        array = np.arange(6).reshape(2, 3) * (1.0 - 2.0j)
        io.write_field(path, "u/vhat", array)
        result = io.read_field(path, "u/vhat")
        assert result.dtype == np.complex128
        np.testing.assert_array_equal(result, array)

    def test_replace_existing(self, tmp_path):
        path = tmp_path / "data.h5"
        io.write_field(path, "series", np.zeros(2))
        io.write_field(path, "series", np.ones(5))
        np.testing.assert_array_equal(io.read_field(path, "series"), np.ones(5))

    def test_several_datasets(self, tmp_path):
        path = tmp_path / "data.h5"
        io.write_field(path, "a", np.zeros(3))
        io.write_field(path, "b", np.ones(3))
        np.testing.assert_array_equal(io.read_field(path, "a"), np.zeros(3))

    def test_scalars(self, tmp_path):
        path = tmp_path / "data.h5"
        io.write_scalar(path, "time", 1.5)
        io.write_scalar(path, "time", 2.5)
        assert io.read_scalar(path, "time") == pytest.approx(2.5)

    def test_missing_dataset(self, tmp_path):
        path = tmp_path / "data.h5"
        io.write_scalar(path, "time", 1.0)
        with pytest.raises(KeyError):
            io.read_field(path, "temp/vhat")
        with pytest.raises(KeyError):
            io.read_scalar(path, "ra")

    def test_append_field_grows(self, tmp_path):
        path = tmp_path / "series.h5"
        io.append_field(path, "time", [0.0, 0.5])
        io.append_field(path, "time", 1.0)
        io.append_field(path, "time", [])
        np.testing.assert_array_equal(io.read_field(path, "time"), [0.0, 0.5, 1.0])

    def test_append_to_fixed_dataset_raises(self, tmp_path):
        path = tmp_path / "series.h5"
        io.write_field(path, "time", np.zeros(2))
        with pytest.raises(ValueError):
            io.append_field(path, "time", [1.0])
