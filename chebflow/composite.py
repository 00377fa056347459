"""
Composite bases built from Chebyshev polynomials.

A composite basis combines functions of a parent orthogonal basis so that
every member satisfies a boundary condition. Parent (p) and composite (c)
coefficients are connected by a banded stencil matrix S:

    p = S c

to_parent is a banded matrix-vector product; from_parent solves the normal
equations (S^T S) c = S^T p without forming S.

Stencils:
    dirichlet:     phi_k = T_k - T_{k+2}
    neumann:       phi_k = T_k - k^2/(k+2)^2 T_{k+2}
    dirichlet_bc:  phi_0 = (T_0 - T_1)/2,  phi_1 = (T_0 + T_1)/2

Reference: J. Shen, Efficient Spectral-Galerkin Method II.
"""

import numpy as np

from .bases import Chebyshev, check_size


def _tdma(low, main, up, rhs):
    """
    Solve a tridiagonal system with diagonals at offsets -2, 0, 2.

    Args:
        low (ndarray): Sub-diagonal (-2), length n-2
        main (ndarray): Main diagonal, length n
        up (ndarray): Super-diagonal (+2), length n-2
        rhs (ndarray): Right-hand side, shape (n, ...) (lanes along axis 0)

    Returns:
        ndarray: Solution with the shape of rhs
    """
    n = main.size
    w = np.zeros(max(n - 2, 0))
    g = np.array(rhs, dtype=np.result_type(rhs.dtype, np.float64), copy=True)

    # Forward sweep
    for i in range(n):
        denom = main[i]
        if i >= 2:
            denom = denom - low[i - 2] * w[i - 2]
            g[i] -= low[i - 2] * g[i - 2]
        if i < n - 2:
            w[i] = up[i] / denom
        g[i] /= denom

    # Back substitution
    for i in range(n - 3, -1, -1):
        g[i] -= w[i] * g[i + 2]
    return g


class StencilChebyshev:
    """
    Banded stencil with a main diagonal and a sub-diagonal at offset -2.

    Args:
        n (int): Number of parent coefficients
        diag (ndarray): Main diagonal, length m = n-2
        low2 (ndarray): Sub-diagonal at offset -2, length m
    """

    def __init__(self, n, diag, low2):
        self.n = int(n)
        self.m = self.get_m(self.n)
        self.diag = np.asarray(diag, dtype=float)
        self.low2 = np.asarray(low2, dtype=float)
        if self.diag.size != self.m or self.low2.size != self.m:
            raise ValueError(
                f"Stencil diagonals must have length {self.m}, "
                f"got {self.diag.size} and {self.low2.size}"
            )

    @staticmethod
    def get_m(n):
        """Size of composite space from size of parent space."""
        return n - 2

    @classmethod
    def dirichlet(cls, n):
        """Stencil of phi_k = T_k - T_{k+2}."""
        m = cls.get_m(n)
        return cls(n, np.ones(m), -np.ones(m))

    @classmethod
    def neumann(cls, n):
        """Stencil of phi_k = T_k - k^2/(k+2)^2 T_{k+2}."""
        m = cls.get_m(n)
        k = np.arange(m, dtype=float)
        return cls(n, np.ones(m), -(k ** 2) / (k + 2.0) ** 2)

    def to_parent(self, composite, axis=0):
        """
        Multiply the stencil with composite coefficients along *axis*.

        Args:
            composite (ndarray): Composite coefficients, extent m along axis
            axis (int): Axis of the stencil

        Returns:
            ndarray: Parent coefficients, extent n along axis
        """
        composite = np.asarray(composite)
        check_size(composite, axis, self.m, "stencil to_parent")
        c = np.moveaxis(composite, axis, 0)
        shape = (self.n,) + c.shape[1:]
        p = np.zeros(shape, dtype=np.result_type(c.dtype, np.float64))
        extra = (slice(None),) + (None,) * (c.ndim - 1)
        p[:self.m] += self.diag[extra] * c
        p[2:] += self.low2[extra] * c
        return np.moveaxis(p, 0, axis)

    def from_parent(self, parent, axis=0):
        """
        Apply the left-inverse of the stencil along *axis*.

        The normal equations (S^T S) c = S^T p are tridiagonal with offsets
        -2, 0, 2 and are solved by elimination, not by inverting S.

        Args:
            parent (ndarray): Parent coefficients, extent n along axis
            axis (int): Axis of the stencil

        Returns:
            ndarray: Composite coefficients, extent m along axis
        """
        parent = np.asarray(parent)
        check_size(parent, axis, self.n, "stencil from_parent")
        p = np.moveaxis(parent, axis, 0)
        extra = (slice(None),) + (None,) * (p.ndim - 1)

        # Diagonals of the symmetric matrix S^T S
        main = self.diag ** 2 + self.low2 ** 2
        off = self.diag[2:] * self.low2[:-2]

        rhs = self.diag[extra] * p[:self.m] + self.low2[extra] * p[2:]
        c = _tdma(off, main, off, rhs)
        return np.moveaxis(c, 0, axis)

    def to_matrix(self):
        """Dense (n, m) stencil matrix."""
        return self.to_parent(np.eye(self.m), axis=0)


class StencilChebyshevBc:
    """
    Two-function stencil that lifts inhomogeneous Dirichlet values.

    phi_0 is 1 at x=-1 and 0 at x=1; phi_1 is 0 at x=-1 and 1 at x=1, so the
    composite coefficients are the boundary values themselves.
    """

    def __init__(self, n):
        self.n = int(n)
        self.m = self.get_m(self.n)
        self._matrix = np.zeros((self.n, self.m))
        self._matrix[0, :] = 0.5
        self._matrix[1, 0] = -0.5
        self._matrix[1, 1] = 0.5
        self._normal = self._matrix.T @ self._matrix

    @staticmethod
    def get_m(n):
        return 2

    @classmethod
    def dirichlet(cls, n):
        return cls(n)

    def to_parent(self, composite, axis=0):
        composite = np.asarray(composite)
        check_size(composite, axis, self.m, "stencil to_parent")
        p = np.tensordot(self._matrix, composite, axes=([1], [axis]))
        return np.moveaxis(p, 0, axis)

    def from_parent(self, parent, axis=0):
        parent = np.asarray(parent)
        check_size(parent, axis, self.n, "stencil from_parent")
        rhs = np.tensordot(self._matrix.T, parent, axes=([1], [axis]))
        c = np.tensordot(np.linalg.inv(self._normal), rhs, axes=([1], [0]))
        return np.moveaxis(c, 0, axis)

    def to_matrix(self):
        return self._matrix.copy()


# Stencil constructors selectable by name
STENCILS = {
    "dirichlet": StencilChebyshev.dirichlet,
    "neumann": StencilChebyshev.neumann,
    "dirichlet_bc": StencilChebyshevBc.dirichlet,
}


class CompositeBasis:
    """
    Basis derived from a Chebyshev parent through a stencil.

    Args:
        n (int): Number of grid points (size of the parent space)
        kind (str): Stencil name, one of STENCILS

    Transforms are compositions of the parent transform and the stencil:
        forward       = from_parent o parent.forward
        backward      = parent.backward o to_parent
        differentiate = parent.differentiate o to_parent (parent coefficients)
    """

    is_diag = False

    def __init__(self, n, kind):
        if kind not in STENCILS:
            raise ValueError(f"Unknown stencil '{kind}'. Use one of {sorted(STENCILS)}.")
        self.kind = kind
        self.parent = Chebyshev(n)
        self.stencil = STENCILS[kind](n)
        self.n = self.parent.n
        self.m = self.stencil.m
        self.x = self.parent.x

    def len_phys(self):
        return self.n

    def len_spec(self):
        return self.m

    def coords(self):
        return self.x

    def forward(self, v, axis=0):
        return self.stencil.from_parent(self.parent.forward(v, axis), axis)

    def backward(self, vhat, axis=0):
        return self.parent.backward(self.stencil.to_parent(vhat, axis), axis)

    def differentiate(self, vhat, order, axis=0):
        """Derivative coefficients in parent space."""
        return self.parent.differentiate(self.stencil.to_parent(vhat, axis), order, axis)

    def to_ortho(self, vhat, axis=0):
        return self.stencil.to_parent(vhat, axis)

    def from_ortho(self, vhat, axis=0):
        return self.stencil.from_parent(vhat, axis)

    def quadrature_weights(self):
        return self.parent.quadrature_weights()

    # --- Operator matrices ---
    def mass(self):
        return self.stencil.to_matrix()

    def laplace(self):
        return self.parent.laplace() @ self.mass()

    def laplace_inv(self):
        return self.parent.laplace_inv()

    def laplace_inv_eye(self):
        return self.parent.laplace_inv_eye()
