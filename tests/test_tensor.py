"""Tests for the eigendecomposition-based tensor solver."""

import numpy as np
import pytest

from chebflow.tensor import FdmaTensor, eig


@pytest.fixture
def a_matrix():
    """-I plus ones on the second super-diagonal."""
    return -np.eye(6) + np.diag(np.ones(4), 2)


@pytest.fixture
def c_matrix():
    return np.array([
        [0.41666, 0.0, -0.2083, 0.0, 0.041666, 0.0],
        [0.0, 0.104166, 0.0, -0.0833, 0.0, 0.0208],
        [-0.0208, 0.0, 0.0542, 0.0, -0.0333, 0.0],
        [0.0, -0.0125, 0.0, 0.033333, 0.0, -0.020833],
        [0.0, 0.0, -0.00833, 0.0, 0.00833, 0.0],
        [0.0, 0.0, 0.0, -0.00595, 0.0, 0.00595],
    ])


class TestEig:

    def test_generalised_decomposition(self, a_matrix, c_matrix):
        lam, fwd, bwd = eig(a_matrix, c_matrix)
        np.testing.assert_allclose(a_matrix @ bwd, c_matrix @ bwd @ np.diag(lam), atol=1e-8)
        np.testing.assert_allclose(fwd @ c_matrix @ bwd, np.eye(6), atol=1e-8)

    def test_complex_eigenvalues_raise(self):
        rotation = np.array([[0.0, -1.0], [1.0, 0.0]])
        with pytest.raises(ValueError):
            eig(rotation, np.eye(2))


class TestFdmaTensor:

    def test_solve_1d(self, fdma_matrix):
        dense = fdma_matrix(6)
        solver = FdmaTensor([dense], [np.eye(6)], [False])
        data = np.arange(6, dtype=float)
        np.testing.assert_allclose(dense @ solver.solve(data), data, atol=1e-10)

    def test_solve_2d(self, a_matrix, c_matrix):
        solver = FdmaTensor([a_matrix, a_matrix], [c_matrix, c_matrix], [False, False])
        data = np.arange(36, dtype=float).reshape(6, 6)
        x = solver.solve(data)
        recover = a_matrix @ x @ c_matrix.T + c_matrix @ x @ a_matrix.T
        np.testing.assert_allclose(recover, data, atol=1e-3)

    def test_solve_2d_complex(self, a_matrix, c_matrix):
        solver = FdmaTensor([a_matrix, a_matrix], [c_matrix, c_matrix], [False, False])
        data = np.arange(36, dtype=float).reshape(6, 6) * (1.0 + 1.0j)
        x = solver.solve(data)
        recover = a_matrix @ x @ c_matrix.T + c_matrix @ x @ a_matrix.T
        np.testing.assert_allclose(recover, data, atol=1e-3)

    def test_diagonal_axis(self, a_matrix, c_matrix):
        d = np.array([0.0, 1.0, 4.0, 9.0])
        solver = FdmaTensor([np.diag(d), a_matrix], [np.eye(4), c_matrix], [True, False])
        np.testing.assert_allclose(solver.lam[0], d)
        assert solver.shape == (4, 6)
        rng = np.random.default_rng(9)
        data = rng.standard_normal((4, 6))
        x = solver.solve(data)
        recover = np.diag(d) @ x @ c_matrix.T + x @ a_matrix.T
        np.testing.assert_allclose(recover, data, atol=1e-8)

    def test_workers_agree(self, a_matrix, c_matrix):
        data = np.arange(36, dtype=float).reshape(6, 6)
        serial = FdmaTensor([a_matrix, a_matrix], [c_matrix, c_matrix], [False, False])
        threaded = FdmaTensor([a_matrix, a_matrix], [c_matrix, c_matrix], [False, False],
                              workers=2)
        np.testing.assert_allclose(threaded.solve(data), serial.solve(data), atol=1e-12)

    def test_set_eigenvalues(self, a_matrix, c_matrix):
        d = np.array([1.0, 2.0, 3.0])
        solver = FdmaTensor([np.diag(d), a_matrix], [np.eye(3), c_matrix], [True, False])
        new = np.array([2.0, 4.0, 6.0])
        solver.set_eigenvalues(new)
        np.testing.assert_allclose(solver.lam[0], new)
        data = np.ones((3, 6))
        x = solver.solve(data)
        np.testing.assert_allclose(np.diag(new) @ x @ c_matrix.T + x @ a_matrix.T, data,
                                   atol=1e-8)
        with pytest.raises(ValueError):
            solver.set_eigenvalues(np.ones(4))

    def test_out_argument(self, a_matrix, c_matrix):
        solver = FdmaTensor([a_matrix, a_matrix], [c_matrix, c_matrix], [False, False])
        data = np.arange(36, dtype=float).reshape(6, 6)
        out = np.zeros((6, 6))
        returned = solver.solve(data, out=out)
        assert returned is out
        np.testing.assert_allclose(out, solver.solve(data))

    def test_three_dimensions_rejected(self):
        eye = np.eye(4)
        with pytest.raises(ValueError):
            FdmaTensor([eye] * 3, [eye] * 3, [False] * 3)

    def test_shape_mismatch(self, a_matrix, c_matrix):
        solver = FdmaTensor([a_matrix, a_matrix], [c_matrix, c_matrix], [False, False])
        with pytest.raises(ValueError):
            solver.solve(np.ones((6, 5)))
        with pytest.raises(ValueError):
            solver.solve(np.ones(6))

    def test_modes_built_on_first_solve(self, a_matrix, c_matrix):
        d = np.array([0.0, 1.0, 4.0])
        solver = FdmaTensor([np.diag(d), a_matrix], [np.eye(3), c_matrix], [True, False])
        assert solver.modes == []
        solver.solve(np.ones((3, 6)))
        assert len(solver.modes) == 3
        solver.set_eigenvalues(d + 1.0)
        assert solver.modes == []
