"""Tests for spaces and fields."""

import numpy as np
import pytest

from chebflow.field import (
    Field, Space, cheb_dirichlet, cheb_neumann, chebyshev, fourier_c2c, fourier_r2c,
)


class TestSpace:

    def test_shapes(self):
        space = Space([fourier_r2c(8), cheb_dirichlet(10)])
        assert space.ndim == 2
        assert space.shape_physical == (8, 10)
        assert space.shape_spectral == (5, 8)
        assert space.shape_ortho == (5, 10)
        assert space.spectral_dtype == np.complex128

    def test_real_space_dtype(self):
        space = Space([cheb_dirichlet(6), cheb_neumann(6)])
        assert space.spectral_dtype == np.float64
        assert Space([fourier_c2c(4), chebyshev(4)]).spectral_dtype == np.complex128

    def test_empty_space_raises(self):
        with pytest.raises(ValueError):
            Space([])

    def test_shape_mismatch_raises(self):
        space = Space([fourier_r2c(8), chebyshev(6)])
        with pytest.raises(ValueError):
            space.forward(np.zeros((8, 7)))
        with pytest.raises(ValueError):
            space.backward(np.zeros((8, 6)))
        with pytest.raises(ValueError):
            space.forward(np.zeros(8))

    def test_ortho_roundtrip(self):
        space = Space([fourier_r2c(8), cheb_dirichlet(10)])
        rng = np.random.default_rng(10)
        vhat = rng.standard_normal((5, 8)) + 1j * rng.standard_normal((5, 8))
        ortho = space.to_ortho(vhat)
        assert ortho.shape == (5, 10)
        np.testing.assert_allclose(space.from_ortho(ortho), vhat, atol=1e-10)


class TestField:
    """Transforms, derivatives, averages and persistence of Field."""

    @pytest.fixture
    def field(self):
        field = Field([fourier_r2c(16), cheb_dirichlet(12)])
        x, y = field.x[0][:, None], field.x[1][None, :]
        field.v[...] = np.sin(x) * (1.0 - y ** 2)
        return field

    def test_forward_backward(self, field):
        expected = field.v.copy()
        field.forward()
        field.v[...] = 0.0
        field.backward()
        np.testing.assert_allclose(field.v, expected, atol=1e-12)

    def test_chebyshev_only_forward_backward(self, arange_6x4):
        field = Field([chebyshev(6), chebyshev(4)])
        field.v[...] = arange_6x4
        field.forward()
        assert field.vhat.dtype == np.float64
        field.backward()
        np.testing.assert_allclose(field.v, arange_6x4, atol=1e-10)

    def test_c2c_field(self):
        field = Field([fourier_c2c(8), chebyshev(5)])
        x, y = field.x[0][:, None], field.x[1][None, :]
        field.v[...] = np.cos(x) * y
        expected = field.v.copy()
        field.forward()
        field.backward()
        np.testing.assert_allclose(field.v, expected, atol=1e-12)

    def test_grad_x(self, field):
        field.forward()
        out = Field([fourier_r2c(16), chebyshev(12)])
        out.vhat[...] = field.grad([1, 0])
        out.backward()
        x, y = out.x[0][:, None], out.x[1][None, :]
        np.testing.assert_allclose(out.v, np.cos(x) * (1.0 - y ** 2), atol=1e-10)

    def test_grad_y_scaled(self, field):
        field.forward()
        out = Field([fourier_r2c(16), chebyshev(12)])
        out.vhat[...] = field.grad([0, 1], scale=[1.0, 2.0])
        out.backward()
        x, y = out.x[0][:, None], out.x[1][None, :]
        np.testing.assert_allclose(out.v, -np.sin(x) * y, atol=1e-10)

    def test_grad_wrong_length(self, field):
        with pytest.raises(ValueError):
            field.grad([1])

    def test_to_from_ortho(self, field):
        field.forward()
        vhat = field.vhat.copy()
        ortho = field.to_ortho()
        field.vhat[...] = 0.0
        field.from_ortho(ortho)
        np.testing.assert_allclose(field.vhat, vhat, atol=1e-12)

    def test_average(self):
        field = Field([fourier_r2c(16), chebyshev(9)])
        x, y = field.x[0][:, None], field.x[1][None, :]
        field.v[...] = y ** 2 + 1.0 + np.cos(x) * y
        assert field.average() == pytest.approx(4.0 / 3.0)

    def test_average_axis(self):
        field = Field([fourier_r2c(16), chebyshev(9)])
        x, y = field.x[0][:, None], field.x[1][None, :]
        field.v[...] = np.cos(x) * y + y ** 2
        np.testing.assert_allclose(field.average_axis(0), field.x[1] ** 2, atol=1e-12)
        avg_y = field.average_axis(1)
        assert avg_y.shape == (16,)
        np.testing.assert_allclose(avg_y, np.full(16, 1.0 / 3.0), atol=1e-12)

    def test_write_read(self, field, tmp_path):
        field.forward()
        path = tmp_path / "field.h5"
        field.write(path, "u")
        other = Field([fourier_r2c(16), cheb_dirichlet(12)])
        other.read(path, "u")
        np.testing.assert_allclose(other.vhat, field.vhat)
        np.testing.assert_allclose(other.v, field.v, atol=1e-12)

    def test_read_shape_mismatch(self, field, tmp_path):
        field.forward()
        path = tmp_path / "field.h5"
        field.write(path, "u")
        other = Field([fourier_r2c(8), cheb_dirichlet(12)])
        with pytest.raises(ValueError):
            other.read(path, "u")

    def test_read_missing(self, field, tmp_path):
        field.forward()
        path = tmp_path / "field.h5"
        field.write(path, "u")
        with pytest.raises(KeyError):
            field.read(path, "w")


class TestDifferentiateLinearity:
    """d^k(a f + b g) = a d^k f + b d^k g for every basis."""

    @pytest.mark.parametrize("order", [1, 2, 3])
    @pytest.mark.parametrize("factory", [chebyshev, cheb_dirichlet, cheb_neumann, fourier_r2c])
    def test_linear_combination(self, factory, order):
        base = factory(9)
        rng = np.random.default_rng(10 * order + base.len_spec())
        shape = (base.len_spec(), 3)
        f = rng.standard_normal(shape)
        g = rng.standard_normal(shape)
        if factory is fourier_r2c:
            f = f + 1j * rng.standard_normal(shape)
            g = g + 1j * rng.standard_normal(shape)
        a, b = 1.7, -0.6

        lhs = base.differentiate(a * f + b * g, order, axis=0)
        rhs = a * base.differentiate(f, order, axis=0) + b * base.differentiate(g, order, axis=0)
        scale = max(np.max(np.abs(rhs)), 1.0)
        np.testing.assert_allclose(lhs, rhs, rtol=1e-10, atol=1e-11 * scale)
