"""
Tensor solver for multidimensional banded systems.

Only the last axis has to be banded (see fdma.FdmaMatrix); every other axis
is diagonalised by an eigendecomposition. In 2-D the system reads

    (A_x (x) C_y + C_x (x) A_y) g = f,    i.e.   A_x G C_y^T + C_x G A_y^T = F

Multiplying by C_x^{-1} and diagonalising C_x^{-1} A_x = Q lam Q^{-1} leaves
one banded system per eigenmode,

    (A_y + lam_i C_y) ghat_i = fhat_i,

so the solve is done in three steps:

    1. fhat = (Q^{-1} C_x^{-1}) f     along axis 0
    2. banded solve per mode          along axis 1
    3. g = Q ghat                     along axis 0

Axes whose matrices are already diagonal (Fourier) skip steps 1 and 3 and
take their eigenvalues from the diagonal of A.
"""

import logging
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import scipy.linalg

from .bases import check_size
from .fdma import FdmaMatrix

logger = logging.getLogger(__name__)


def eig(a, c):
    """
    Generalised eigendecomposition a q = lam c q.

    Returns:
        tuple: (lam, fwd, bwd) with bwd = Q and fwd = (c Q)^{-1}

    Raises:
        ValueError: If an eigenvalue has a non-negligible imaginary part
    """
    lam, q = scipy.linalg.eig(a, c)
    scale = max(np.max(np.abs(lam)), 1.0)
    if np.any(np.abs(lam.imag) > 1e-8 * scale):
        raise ValueError("Eigendecomposition returned complex eigenvalues")
    lam = lam.real
    q = q.real
    fwd = np.linalg.inv(c @ q)
    return lam, fwd, q


class FdmaTensor:
    """
    Eigendecomposition-based solver for N = 1 or 2 dimensions.

    Args:
        a (sequence): One matrix A_i per axis
        c (sequence): One matrix C_i per axis
        is_diag (sequence): Per axis, True if A_i is already diagonal
        workers (int): Threads used for the per-mode banded solves
    """

    def __init__(self, a, c, is_diag, workers=1):
        self.ndim = len(a)
        if self.ndim not in (1, 2):
            raise ValueError(f"FdmaTensor supports 1 or 2 dimensions, got {self.ndim}")
        if len(c) != self.ndim or len(is_diag) != self.ndim:
            raise ValueError("FdmaTensor needs one a, c and is_diag entry per axis")
        self.workers = max(int(workers), 1)

        self.fwd = []
        self.bwd = []
        self.lam = []
        for i in range(self.ndim - 1):
            if is_diag[i]:
                self.lam.append(np.real(np.diag(a[i])).astype(float))
                self.fwd.append(None)
                self.bwd.append(None)
            else:
                lam, fwd, bwd = eig(np.asarray(a[i], dtype=float), np.asarray(c[i], dtype=float))
                self.lam.append(lam)
                self.fwd.append(fwd)
                self.bwd.append(bwd)

        self.fdma_a = FdmaMatrix.from_matrix(a[-1])
        self.fdma_c = FdmaMatrix.from_matrix(c[-1])
        self.n = self.fdma_a.n

        # Per-mode systems are assembled and swept on the first solve
        self.modes = []
        if self.ndim == 1:
            self.fdma_a.sweep()

    @property
    def shape(self):
        return tuple(lam.size for lam in self.lam) + (self.n,)

    def _build_modes(self):
        """Assemble and sweep A_y + lam_i C_y for every mode."""
        self.modes = []
        for lam in self.lam[0]:
            mat = self.fdma_a + self.fdma_c * lam
            mat.sweep()
            self.modes.append(mat)

    def set_eigenvalues(self, lam, axis=0):
        """Replace the eigenvalues of *axis*; modes are rebuilt on the next solve."""
        lam = np.asarray(lam, dtype=float)
        if lam.shape != self.lam[axis].shape:
            raise ValueError(
                f"Eigenvalue shape mismatch, got {lam.shape} expected {self.lam[axis].shape}"
            )
        self.lam[axis] = lam.copy()
        self.modes = []

    def solve(self, rhs, axis=0, out=None):
        """
        Solve the tensor system for *rhs*.

        Args:
            rhs (ndarray): Right-hand side with shape self.shape (real or complex)
            axis (int): Ignored for N > 1; the solve always spans all axes
            out (ndarray, optional): Array receiving the solution

        Returns:
            ndarray: Solution with the shape of rhs
        """
        rhs = np.asarray(rhs)
        if rhs.ndim != self.ndim:
            raise ValueError(f"Tensor solve expects a {self.ndim}-D array, got {rhs.ndim}-D")
        if self.ndim == 1:
            return self.fdma_a.solve(rhs, axis=0, out=out)

        check_size(rhs, 0, self.lam[0].size, "tensor solve")
        check_size(rhs, 1, self.n, "tensor solve")
        if not self.modes:
            self._build_modes()

        # Step 1: transform along axis 0
        if self.fwd[0] is not None:
            hat = np.tensordot(self.fwd[0], rhs, axes=([1], [0]))
        else:
            hat = np.array(rhs, dtype=np.result_type(rhs.dtype, np.float64), copy=True)

        # Step 2: one banded solve per mode, mode i writes row i only
        def solve_mode(i):
            self.modes[i].solve(hat[i], axis=0, out=hat[i])

        if self.workers > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                list(executor.map(solve_mode, range(len(self.modes))))
        else:
            for i in range(len(self.modes)):
                solve_mode(i)

        # Step 3: transform back along axis 0
        if self.bwd[0] is not None:
            hat = np.tensordot(self.bwd[0], hat, axes=([1], [0]))

        if out is None:
            return hat
        out[...] = hat
        return out
