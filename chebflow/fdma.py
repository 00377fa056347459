"""
Banded solver for matrices with diagonals at offsets -2, 0, 2 and 4.

Such matrices arise from Chebyshev Galerkin discretisations once the dense
Laplacian has been replaced by its banded pseudo-inverse. The solver is a
banded LU decomposition: sweep() eliminates the -2 diagonal once, after
which solve() costs O(n) per right-hand side.

The raw diagonals are kept alongside the swept ones, so that matrices can
still be combined (A + lam*C) after one of them has been swept.
"""

import numpy as np

from .bases import check_size


class FdmaMatrix:
    """
    Four-diagonal matrix (offsets -2, 0, 2, 4).

    Args:
        low (ndarray): Diagonal at offset -2, length n-2
        dia (ndarray): Main diagonal, length n
        up1 (ndarray): Diagonal at offset +2, length n-2
        up2 (ndarray): Diagonal at offset +4, length n-4
    """

    def __init__(self, low, dia, up1, up2):
        self.dia = np.asarray(dia, dtype=float).copy()
        self.n = self.dia.size
        self.low = np.asarray(low, dtype=float).copy()
        self.up1 = np.asarray(up1, dtype=float).copy()
        self.up2 = np.asarray(up2, dtype=float).copy()
        expected = (max(self.n - 2, 0), max(self.n - 2, 0), max(self.n - 4, 0))
        got = (self.low.size, self.up1.size, self.up2.size)
        if got != expected:
            raise ValueError(f"Inconsistent diagonal lengths {got} for order {self.n}")
        self._swept = None

    @classmethod
    def from_matrix(cls, mat):
        """Extract the four diagonals of a dense square matrix."""
        mat = np.asarray(mat, dtype=float)
        if mat.ndim != 2 or mat.shape[0] != mat.shape[1]:
            raise ValueError(f"Expected a square matrix, got shape {mat.shape}")
        return cls(
            np.diagonal(mat, -2),
            np.diagonal(mat, 0),
            np.diagonal(mat, 2),
            np.diagonal(mat, 4),
        )

    def __add__(self, other):
        if not isinstance(other, FdmaMatrix):
            return NotImplemented
        if other.n != self.n:
            raise ValueError(f"Cannot add matrices of order {self.n} and {other.n}")
        return FdmaMatrix(
            self.low + other.low,
            self.dia + other.dia,
            self.up1 + other.up1,
            self.up2 + other.up2,
        )

    def __mul__(self, scalar):
        scalar = float(scalar)
        return FdmaMatrix(
            self.low * scalar, self.dia * scalar, self.up1 * scalar, self.up2 * scalar
        )

    __rmul__ = __mul__

    @property
    def is_swept(self):
        return self._swept is not None

    def to_dense(self):
        mat = np.diag(self.dia)
        if self.n > 2:
            mat += np.diag(self.low, -2) + np.diag(self.up1, 2)
        if self.n > 4:
            mat += np.diag(self.up2, 4)
        return mat

    def sweep(self):
        """Forward elimination of the -2 diagonal (done once per matrix)."""
        n = self.n
        low = self.low.copy()
        dia = self.dia.copy()
        up1 = self.up1.copy()
        up2 = self.up2
        for i in range(2, n):
            low[i - 2] /= dia[i - 2]
            dia[i] -= low[i - 2] * up1[i - 2]
            if i < n - 2:
                up1[i] -= low[i - 2] * up2[i - 2]
        self._swept = (low, dia, up1, up2)

    def solve(self, rhs, axis=0, out=None):
        """
        Solve A x = rhs for every lane of rhs along *axis*.

        Args:
            rhs (ndarray): Right-hand side (real or complex), extent n along axis
            axis (int): Axis along which the system is solved
            out (ndarray, optional): Array receiving the solution

        Returns:
            ndarray: Solution with the shape of rhs

        Raises:
            RuntimeError: If sweep() has not been called
        """
        if self._swept is None:
            raise RuntimeError("FdmaMatrix.solve called before sweep()")
        rhs = np.asarray(rhs)
        check_size(rhs, axis, self.n, "fdma solve")
        low, dia, up1, up2 = self._swept
        n = self.n

        dtype = np.result_type(rhs.dtype, np.float64)
        b = np.moveaxis(rhs, axis, 0).astype(dtype, copy=True)

        # Forward substitution (unit lower band at -2)
        for i in range(2, n):
            b[i] -= low[i - 2] * b[i - 2]

        # Back substitution
        for i in range(n - 1, -1, -1):
            if i < n - 2:
                b[i] -= up1[i] * b[i + 2]
            if i < n - 4:
                b[i] -= up2[i] * b[i + 4]
            b[i] /= dia[i]

        result = np.moveaxis(b, 0, axis)
        if out is None:
            return result
        out[...] = result
        return out

    def dot(self, x, axis=0):
        """Multiply the (raw, unswept) matrix with x along *axis*."""
        x = np.asarray(x)
        check_size(x, axis, self.n, "fdma dot")
        v = np.moveaxis(x, axis, 0)
        extra = (slice(None),) + (None,) * (v.ndim - 1)
        y = self.dia[extra] * v
        if self.n > 2:
            y[:-2] += self.up1[extra] * v[2:]
            y[2:] += self.low[extra] * v[:-2]
        if self.n > 4:
            y[:-4] += self.up2[extra] * v[4:]
        return np.moveaxis(y, 0, axis)
