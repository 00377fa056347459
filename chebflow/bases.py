"""
Orthogonal spectral bases and their transforms.

This module provides the one-dimensional building blocks of a spectral space:
- Chebyshev polynomials on Chebyshev-Gauss-Lobatto nodes (DCT-I transform)
- Real-to-complex and complex-to-complex Fourier bases (FFT transform)

Every basis transforms along a single axis of an N-dimensional array, so a
multidimensional space is built by applying one basis per axis. Besides the
transforms, each basis provides spectral differentiation and the operator
matrices (mass, Laplacian, Laplacian pseudo-inverse) used by the implicit
solvers.
"""

import numpy as np
from scipy import fft as scipy_fft


def check_size(array, axis, size, what):
    """
    Validate the extent of an array along an axis.

    Args:
        array (ndarray): Array to check
        axis (int): Axis along which the basis operates
        size (int): Required extent
        what (str): Name of the operation (used in the error message)

    Raises:
        ValueError: If the extent differs from the required size
    """
    if array.ndim <= axis:
        raise ValueError(f"{what}: array of dimension {array.ndim} has no axis {axis}")
    if array.shape[axis] != size:
        raise ValueError(
            f"Size mismatch in {what}, got {array.shape[axis]} expected {size}"
        )


def along_axis(vec, ndim, axis):
    """Reshape a 1D vector so it broadcasts along *axis* of an ndim array."""
    shape = [1] * ndim
    shape[axis] = -1
    return np.reshape(vec, shape)


def _dct1(a, axis):
    """Unnormalised type-I DCT; complex input is transformed component-wise."""
    if np.iscomplexobj(a):
        return (scipy_fft.dct(a.real, type=1, axis=axis, norm=None)
                + 1j * scipy_fft.dct(a.imag, type=1, axis=axis, norm=None))
    return scipy_fft.dct(a, type=1, axis=axis, norm=None)


class Chebyshev:
    """
    Chebyshev polynomials T_k on Chebyshev-Gauss-Lobatto nodes.

    Nodes are the extrema of T_{n-1} in ascending order, including -1 and 1.
    The forward transform is a DCT-I followed by a correction which turns the
    DCT output into Chebyshev coefficients.

    Args:
        n (int): Number of grid points (equal to the number of coefficients)
    """

    kind = "chebyshev"
    is_diag = False

    def __init__(self, n):
        if n < 4:
            raise ValueError(f"Chebyshev basis needs at least 4 points, got {n}")
        self.n = int(n)
        self.m = self.n
        self.x = self.nodes_2nd_kind(self.n)
        self._correct_dct = self.alternating_ones(self.n)

    @staticmethod
    def nodes_2nd_kind(n):
        """Chebyshev nodes of the second kind on [-1, 1] (ascending)."""
        m = n - 1.0
        k = np.arange(n, dtype=float)
        return -np.sin(np.pi * (m - 2.0 * k) / (2.0 * m))

    @staticmethod
    def alternating_ones(n):
        """Array [1, -1, 1, ...] used to correct the DCT."""
        return (-1.0) ** np.arange(n)

    def len_phys(self):
        return self.n

    def len_spec(self):
        return self.m

    def coords(self):
        return self.x

    def forward(self, v, axis=0):
        """
        Transform physical values to Chebyshev coefficients along *axis*.

        Args:
            v (ndarray): Physical-space values, extent n along axis
            axis (int): Axis to transform

        Returns:
            ndarray: Chebyshev coefficients, extent n along axis
        """
        v = np.asarray(v)
        check_size(v, axis, self.n, "chebyshev forward")
        vhat = _dct1(v, axis)
        corrector = 1.0 / ((self.n - 1) * self._correct_dct)
        corrector[0] /= 2.0
        corrector[-1] /= 2.0
        return vhat * along_axis(corrector, vhat.ndim, axis)

    def backward(self, vhat, axis=0):
        """
        Transform Chebyshev coefficients to physical values along *axis*.

        Args:
            vhat (ndarray): Chebyshev coefficients, extent n along axis
            axis (int): Axis to transform

        Returns:
            ndarray: Physical-space values, extent n along axis
        """
        vhat = np.asarray(vhat)
        check_size(vhat, axis, self.m, "chebyshev backward")
        corrector = self._correct_dct / 2.0
        corrector[0] *= 2.0
        corrector[-1] *= 2.0
        return _dct1(vhat * along_axis(corrector, vhat.ndim, axis), axis)

    def differentiate(self, vhat, order, axis=0):
        """
        Differentiate Chebyshev coefficients *order* times along *axis*.

        Uses the descending recurrence c'_i = 2(i+1) c_{i+1} + c'_{i+2},
        with the zeroth coefficient halved.

        Args:
            vhat (ndarray): Chebyshev coefficients, extent n along axis
            order (int): Number of derivatives
            axis (int): Axis to differentiate

        Returns:
            ndarray: Coefficients of the derivative, same shape as vhat
        """
        vhat = np.asarray(vhat)
        check_size(vhat, axis, self.m, "chebyshev differentiate")
        dtype = np.result_type(vhat.dtype, np.float64)
        out = np.moveaxis(vhat, axis, 0).astype(dtype, copy=True)
        n = self.n
        for _ in range(order):
            out[0] = out[1]
            for i in range(1, n - 1):
                out[i] = 2.0 * (i + 1) * out[i + 1]
            out[n - 1] = 0.0
            for i in range(n - 3, 0, -1):
                out[i] += out[i + 2]
            out[0] += out[2] / 2.0
        return np.moveaxis(out, 0, axis)

    def to_ortho(self, vhat, axis=0):
        return np.array(vhat, copy=True)

    def from_ortho(self, vhat, axis=0):
        return np.array(vhat, copy=True)

    def quadrature_weights(self):
        """
        Clenshaw-Curtis weights on the nodes, integrating over [-1, 1].

        Built from the exact integrals of T_k and the forward transform, so
        that sum(w * f) integrates the polynomial interpolant of f.
        """
        k = np.arange(self.n)
        integrals = np.zeros(self.n)
        even = k % 2 == 0
        integrals[even] = 2.0 / (1.0 - k[even] ** 2)
        return integrals @ self.forward(np.eye(self.n), axis=0)

    # --- Operator matrices ---
    def mass(self):
        return np.eye(self.n)

    def laplace(self):
        """Dense second-derivative matrix acting on coefficient vectors."""
        return self.differentiate(np.eye(self.n), 2, axis=0)

    def laplace_inv(self):
        """
        Banded pseudo-inverse B2 of the second-derivative matrix.

        Rows 2.. of B2 @ laplace() are the identity; rows 0 and 1 vanish.
        Reference: S. Oh, An efficient spectral method to solve
        multi-dimensional linear partial differential equations using
        Chebyshev polynomials.
        """
        n = self.n
        pinv = np.zeros((n, n))
        pinv[2, 0] = 0.25
        for i in range(3, n):
            pinv[i, i - 2] = 1.0 / (4.0 * i * (i - 1))
        for i in range(2, n - 2):
            pinv[i, i] = -1.0 / (2.0 * (i * i - 1))
        for i in range(2, n - 4):
            pinv[i, i + 2] = 1.0 / (4.0 * i * (i + 1))
        return pinv

    def laplace_inv_eye(self):
        """Identity with the first two rows removed."""
        return np.eye(self.n)[2:, :]


class FourierR2c:
    """
    Real-to-complex Fourier basis on [0, 2*pi).

    Spectral space holds the n//2+1 non-negative wavenumbers of a real
    signal. Coefficients are normalised by n in the forward transform.

    Args:
        n (int): Number of grid points
    """

    kind = "fourier_r2c"
    is_diag = True

    def __init__(self, n):
        if n < 2:
            raise ValueError(f"Fourier basis needs at least 2 points, got {n}")
        self.n = int(n)
        self.m = self.n // 2 + 1
        self.x = 2.0 * np.pi * np.arange(self.n) / self.n
        self.k = np.arange(self.m, dtype=float)

    def len_phys(self):
        return self.n

    def len_spec(self):
        return self.m

    def coords(self):
        return self.x

    def forward(self, v, axis=0):
        v = np.asarray(v)
        check_size(v, axis, self.n, "fourier forward")
        return scipy_fft.rfft(v, axis=axis, norm="forward")

    def backward(self, vhat, axis=0):
        vhat = np.asarray(vhat)
        check_size(vhat, axis, self.m, "fourier backward")
        return scipy_fft.irfft(vhat, n=self.n, axis=axis, norm="forward")

    def differentiate(self, vhat, order, axis=0):
        """Multiply coefficients by (i*k)**order along *axis*."""
        vhat = np.asarray(vhat)
        check_size(vhat, axis, self.m, "fourier differentiate")
        factor = (1j * self.k) ** order
        return vhat * along_axis(factor, vhat.ndim, axis)

    def to_ortho(self, vhat, axis=0):
        return np.array(vhat, copy=True)

    def from_ortho(self, vhat, axis=0):
        return np.array(vhat, copy=True)

    def quadrature_weights(self):
        return np.full(self.n, 2.0 * np.pi / self.n)

    # --- Operator matrices ---
    def mass(self):
        return np.eye(self.m)

    def laplace(self):
        return np.diag(-self.k ** 2)

    def laplace_inv(self):
        # k = 0 has no inverse and is left at zero
        inv = np.zeros(self.m)
        nonzero = self.k != 0.0
        inv[nonzero] = -1.0 / self.k[nonzero] ** 2
        return np.diag(inv)

    def laplace_inv_eye(self):
        return np.eye(self.m)


class FourierC2c(FourierR2c):
    """
    Complex-to-complex Fourier basis on [0, 2*pi).

    Spectral space holds all n wavenumbers in FFT order.
    """

    kind = "fourier_c2c"

    def __init__(self, n):
        super().__init__(n)
        self.m = self.n
        self.k = np.fft.fftfreq(self.n, d=1.0 / self.n)

    def forward(self, v, axis=0):
        v = np.asarray(v)
        check_size(v, axis, self.n, "fourier forward")
        return scipy_fft.fft(v, axis=axis, norm="forward")

    def backward(self, vhat, axis=0):
        vhat = np.asarray(vhat)
        check_size(vhat, axis, self.m, "fourier backward")
        return scipy_fft.ifft(vhat, axis=axis, norm="forward")
