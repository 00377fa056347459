"""
Spaces and fields.

A Space couples one basis per axis; a Field owns the physical-space array
(v) and the spectral-space array (vhat) of a function in that space, and
drives the per-axis transforms between them. After forward() the spectral
array is up to date, after backward() the physical array is; the other one
is stale until it is recomputed.

Convenience constructors for the bases are provided here as well:
chebyshev, cheb_dirichlet, cheb_neumann, cheb_dirichlet_bc, fourier_r2c and
fourier_c2c.
"""

import logging

import numpy as np

from . import io
from .bases import Chebyshev, FourierC2c, FourierR2c, check_size
from .composite import CompositeBasis

logger = logging.getLogger(__name__)


def chebyshev(n):
    """Orthogonal Chebyshev basis with n points."""
    return Chebyshev(n)


def cheb_dirichlet(n):
    """Composite Chebyshev basis with homogeneous Dirichlet conditions."""
    return CompositeBasis(n, "dirichlet")


def cheb_neumann(n):
    """Composite Chebyshev basis with homogeneous Neumann conditions."""
    return CompositeBasis(n, "neumann")


def cheb_dirichlet_bc(n):
    """Two-function Chebyshev basis carrying inhomogeneous Dirichlet values."""
    return CompositeBasis(n, "dirichlet_bc")


def fourier_r2c(n):
    """Real-to-complex Fourier basis with n points."""
    return FourierR2c(n)


def fourier_c2c(n):
    """Complex-to-complex Fourier basis with n points."""
    return FourierC2c(n)


class Space:
    """
    Ordered tuple of bases, one per axis.

    Args:
        bases (sequence): Basis objects (orthogonal or composite)
    """

    def __init__(self, bases):
        self.bases = tuple(bases)
        if not self.bases:
            raise ValueError("Space needs at least one basis")

    @property
    def ndim(self):
        return len(self.bases)

    @property
    def shape_physical(self):
        return tuple(b.len_phys() for b in self.bases)

    @property
    def shape_spectral(self):
        return tuple(b.len_spec() for b in self.bases)

    @property
    def shape_ortho(self):
        """Shape of spectral arrays expressed in the parent bases."""
        return tuple(getattr(b, "parent", b).len_spec() for b in self.bases)

    @property
    def spectral_dtype(self):
        if any(isinstance(b, FourierR2c) for b in self.bases):
            return np.complex128
        return np.float64

    def _check_shape(self, array, shape, what):
        if array.ndim != self.ndim:
            raise ValueError(f"{what}: expected {self.ndim}-D array, got {array.ndim}-D")
        for axis, size in enumerate(shape):
            check_size(array, axis, size, what)

    def forward(self, v):
        """Physical -> spectral, transforming axis 0 first."""
        v = np.asarray(v)
        self._check_shape(v, self.shape_physical, "space forward")
        out = v
        for axis, base in enumerate(self.bases):
            out = base.forward(out, axis)
        return out

    def backward(self, vhat):
        """Spectral -> physical, transforming the last axis first."""
        vhat = np.asarray(vhat)
        self._check_shape(vhat, self.shape_spectral, "space backward")
        out = vhat
        for axis in reversed(range(self.ndim)):
            out = self.bases[axis].backward(out, axis)
        if self.spectral_dtype is np.float64 and np.iscomplexobj(out):
            out = out.real
        return out

    def to_ortho(self, vhat):
        """Composite -> parent coefficients along every axis."""
        out = np.asarray(vhat)
        self._check_shape(out, self.shape_spectral, "space to_ortho")
        for axis, base in enumerate(self.bases):
            out = base.to_ortho(out, axis)
        return out

    def from_ortho(self, vhat):
        """Parent -> composite coefficients along every axis."""
        out = np.asarray(vhat)
        self._check_shape(out, self.shape_ortho, "space from_ortho")
        for axis, base in enumerate(self.bases):
            out = base.from_ortho(out, axis)
        return out


class Field:
    """
    Function in a Space, held in physical (v) and spectral (vhat) form.

    Args:
        space (Space or sequence): Space, or the bases to build one from

    Attributes:
        v (ndarray): Physical-space values
        vhat (ndarray): Spectral coefficients
        x (list): Grid coordinates per axis (may be rescaled by the owner)
    """

    def __init__(self, space):
        self.space = space if isinstance(space, Space) else Space(space)
        self.v = np.zeros(self.space.shape_physical)
        self.vhat = np.zeros(self.space.shape_spectral, dtype=self.space.spectral_dtype)
        self.x = [np.array(b.coords(), dtype=float) for b in self.space.bases]

    @property
    def ndim(self):
        return self.space.ndim

    def forward(self):
        """Update vhat from v."""
        self.vhat[...] = self.space.forward(self.v)

    def backward(self):
        """Update v from vhat."""
        out = self.space.backward(self.vhat)
        self.v[...] = out.real if np.iscomplexobj(out) and not np.iscomplexobj(self.v) else out

    def to_ortho(self):
        """Return vhat expressed in the parent (orthogonal) bases."""
        return self.space.to_ortho(self.vhat)

    def from_ortho(self, input):
        """Set vhat from coefficients given in the parent bases."""
        self.vhat[...] = self.space.from_ortho(input)

    def grad(self, deriv, scale=None):
        """
        Spectral derivative of the field.

        Args:
            deriv (sequence): Derivative order per axis, e.g. [1, 0] for d/dx
            scale (sequence, optional): Physical length scale per axis; the
                derivative along axis i is divided by scale[i]**deriv[i]

        Returns:
            ndarray: Derivative coefficients in the parent bases
        """
        if len(deriv) != self.ndim:
            raise ValueError(f"grad: expected {self.ndim} derivative orders, got {len(deriv)}")
        out = self.vhat
        for axis, (base, order) in enumerate(zip(self.space.bases, deriv)):
            if order > 0:
                out = base.differentiate(out, order, axis)
            else:
                out = base.to_ortho(out, axis)
        if scale is not None:
            factor = np.prod([s ** d for s, d in zip(scale, deriv)])
            out = out / factor
        return out

    def _weights(self, axis):
        w = self.space.bases[axis].quadrature_weights()
        return w / np.sum(w)

    def average_axis(self, axis):
        """Average of v along *axis* (physical space)."""
        return np.tensordot(self.v, self._weights(axis), axes=([axis], [0]))

    def average(self):
        """Volume average of v (physical space)."""
        avg = self.v
        for axis in reversed(range(self.ndim)):
            avg = np.tensordot(avg, self._weights(axis), axes=([axis], [0]))
        return float(avg)

    def write(self, path, name):
        """Write v and vhat to the HDF5 group *name*."""
        io.write_field(path, f"{name}/v", self.v)
        io.write_field(path, f"{name}/vhat", self.vhat)
        for axis, x in enumerate(self.x):
            io.write_field(path, f"{'xyz'[axis]}", x)

    def read(self, path, name):
        """Read vhat from the HDF5 group *name* and update v."""
        vhat = io.read_field(path, f"{name}/vhat")
        if vhat.shape != self.vhat.shape:
            raise ValueError(
                f"Shape mismatch reading {name} from {path}: "
                f"got {vhat.shape} expected {self.vhat.shape}"
            )
        self.vhat[...] = vhat
        self.backward()
        logger.debug("Read field %s from %s", name, path)
