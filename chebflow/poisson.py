"""
Poisson and Helmholtz solvers on a Space.

Both solvers reduce the continuous equation to the tensor form handled by
tensor.FdmaTensor by assembling one pair (A_i, C_i) per axis:

    Chebyshev (composite) axis:  the dense Laplacian is avoided by applying
                                 the banded pseudo-inverse B2 to both sides,
                                 L = I2 S and M = I2 B2 S, where S is the
                                 stencil (mass) and I2 drops the first two
                                 rows. The right-hand side is pre-multiplied
                                 by B2[2:, :] (MatVec).
    Fourier axis:                L = diag(-k^2), M = I, no pre-multiplication.

Poisson   (sum_i c_i d^2/dx_i^2) u = f:     A_i = c_i L_i,  C_i = M_i
Helmholtz (I - sum_i c_i d^2/dx_i^2) u = f: A_0 = M_0 - c_0 L_0,
                                            A_i = -c_i L_i (i > 0),  C_i = M_i

Right-hand sides are given in the parent (orthogonal) bases; solutions are
returned in the composite bases of the space.
"""

import logging

import numpy as np

from .bases import check_size
from .field import Space
from .tensor import FdmaTensor

logger = logging.getLogger(__name__)

# Eigenvalues below this magnitude are treated as singular
SINGULAR_TOL = 1e-10


class MatVec:
    """Dense pre-multiplication of an array along one axis."""

    def __init__(self, mat):
        self.mat = np.asarray(mat, dtype=float)

    def apply(self, a, axis=0):
        a = np.asarray(a)
        check_size(a, axis, self.mat.shape[1], "matvec")
        out = np.tensordot(self.mat, a, axes=([1], [axis]))
        return np.moveaxis(out, 0, axis)


def _operators(base):
    """Return (M, L, matvec) for one basis."""
    if base.is_diag:
        return base.mass(), base.laplace(), None
    if not hasattr(base, "stencil"):
        raise ValueError(
            "Implicit solvers need a composite Chebyshev basis with boundary "
            f"conditions, got '{base.kind}'"
        )
    mass = base.mass()
    pinv = base.laplace_inv()
    peye = base.laplace_inv_eye()
    return peye @ pinv @ mass, peye @ mass, MatVec(pinv[2:, :])


class _TensorSolver:
    """Common assembly and solve of Poisson and Helmholtz."""

    def __init__(self, space, c, workers=1):
        self.space = space if isinstance(space, Space) else Space(space)
        c = [float(ci) for ci in np.atleast_1d(c)]
        if len(c) != self.space.ndim:
            raise ValueError(f"Expected {self.space.ndim} coefficients, got {len(c)}")
        self.c = c

        ops = [_operators(base) for base in self.space.bases]
        self.matvec = [op[2] for op in ops]
        a = self._assemble_a([op[0] for op in ops], [op[1] for op in ops])
        c_mats = [op[0] for op in ops]
        is_diag = [base.is_diag for base in self.space.bases]
        self.solver = FdmaTensor(a, c_mats, is_diag, workers=workers)

    def _assemble_a(self, mass, lap):
        raise NotImplementedError

    def solve(self, rhs, axis=0, out=None):
        """
        Solve for the composite coefficients of u.

        Args:
            rhs (ndarray): Right-hand side in the parent bases (shape_ortho)
            axis (int): Unused; the solve spans all axes
            out (ndarray, optional): Array receiving the solution

        Returns:
            ndarray: Solution with shape_spectral of the space
        """
        rhs = np.asarray(rhs)
        if rhs.shape != self.space.shape_ortho:
            raise ValueError(
                f"Right-hand side shape mismatch, got {rhs.shape} "
                f"expected {self.space.shape_ortho}"
            )
        for i, matvec in enumerate(self.matvec):
            if matvec is not None:
                rhs = matvec.apply(rhs, i)
        return self.solver.solve(rhs, 0, out=out)


class Poisson(_TensorSolver):
    """
    Solver for sum_i c_i d^2u/dx_i^2 = f.

    In 2-D a zero leading eigenvalue whose banded system is rank deficient
    (pure Neumann problem) is shifted by -SINGULAR_TOL; the caller has to fix
    the free constant mode.
    """

    def __init__(self, space, c, workers=1):
        super().__init__(space, c, workers=workers)
        if self.space.ndim == 2:
            lam = self.solver.lam[0].copy()
            if abs(lam[0]) < SINGULAR_TOL and self._mode_singular(lam[0]):
                logger.warning(
                    "Poisson problem seems singular, eigenvalue 0 is shifted by %.1e",
                    -SINGULAR_TOL,
                )
                lam[0] -= SINGULAR_TOL
                self.solver.set_eigenvalues(lam)

    def _mode_singular(self, lam):
        mat = (self.solver.fdma_a + self.solver.fdma_c * lam).to_dense()
        return np.linalg.matrix_rank(mat) < mat.shape[0]

    def _assemble_a(self, mass, lap):
        return [ci * li for ci, li in zip(self.c, lap)]


class Helmholtz(_TensorSolver):
    """Solver for (I - sum_i c_i d^2/dx_i^2) u = f."""

    def _assemble_a(self, mass, lap):
        a = [mass[0] - self.c[0] * lap[0]]
        a += [-ci * li for ci, li in zip(self.c[1:], lap[1:])]
        return a
