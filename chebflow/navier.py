"""
Rayleigh-Benard convection in a horizontally periodic cell.

Navier-Stokes momentum equations with a Boussinesq temperature coupling,
discretised with a Fourier basis along x and (composite) Chebyshev bases
along y. One timestep is split into

    1. explicit convection in physical space
    2. implicit diffusion of ux and uy (Helmholtz)
    3. projection onto a divergence-free velocity (pseudo-pressure Poisson)
    4. implicit diffusion of the temperature (Helmholtz)

Temperature is split into a fluctuation with homogeneous Dirichlet
conditions and a fixed boundary field carrying T = 0.5 at the bottom plate
and T = -0.5 at the top plate.
"""

import logging
import pathlib

import numpy as np

from . import io
from .field import (
    Field, cheb_dirichlet, cheb_dirichlet_bc, cheb_neumann, chebyshev, fourier_r2c,
)
from .poisson import Helmholtz, Poisson
from .utils import eval_nu, eval_nuvol, eval_re, get_ka, get_nu, norm_l2

logger = logging.getLogger(__name__)

# Permeability of the volume penalisation inside solid regions
SOLID_ETA = 1e-3


class Diagnostics:
    """Time series of scalar diagnostics, one entry per write()."""

    names = ("time", "nu", "nuvol", "re")

    def __init__(self):
        self.time = []
        self.nu = []
        self.nuvol = []
        self.re = []
        self._written = 0

    def append(self, time, nu, nuvol, re):
        self.time.append(time)
        self.nu.append(nu)
        self.nuvol.append(nuvol)
        self.re.append(re)

    def as_dict(self):
        return {name: np.array(getattr(self, name)) for name in self.names}

    def write(self, path):
        """Append the samples not yet written, so earlier runs in *path* are kept."""
        for name, values in self.as_dict().items():
            io.append_field(path, name, values[self._written:])
        self._written = len(self)

    def __len__(self):
        return len(self.time)


def conv_term(field, scratch, u, deriv, scale):
    """
    Physical-space convection term u * d(field).

    Args:
        field (Field): Advected field
        scratch (Field): Field in the parent bases used for the transform
        u (ndarray): Advecting velocity component (physical space)
        deriv (sequence): Derivative order per axis
        scale (sequence): Physical scale per axis

    Returns:
        ndarray: u * d(field) in physical space
    """
    scratch.vhat[...] = field.grad(deriv, scale)
    scratch.backward()
    return u * scratch.v


class Navier2DPeriodic:
    """
    Integrator of 2-D Rayleigh-Benard convection, periodic in x.

    Args:
        nx (int): Fourier points along x
        ny (int): Chebyshev points along y
        ra (float): Rayleigh number
        pr (float): Prandtl number
        dt (float): Timestep
        aspect (float): Horizontal scale of the cell (x spans 2*pi*aspect)
        workers (int): Threads used by the tensor solvers

    Attributes:
        temp, ux, uy (Field): Temperature fluctuation and velocity
        pres (list): [pressure, pseudo-pressure]
        fieldbc (Field): Boundary temperature field
        solid (ndarray or None): Solid mask in physical space (1 inside, 0 in the fluid)
        diagnostics (Diagnostics): Time series written by write()
        write_intervall (float or None): Snapshot interval of write()
        outdir (str): Output directory of write()
    """

    def __init__(self, nx, ny, ra, pr, dt, aspect=1.0, workers=1):
        self.scale = (float(aspect), 1.0)
        self.ra = float(ra)
        self.pr = float(pr)
        self.dt = float(dt)
        self.nu = get_nu(ra, pr, 2.0 * self.scale[1])
        self.ka = get_ka(ra, pr, 2.0 * self.scale[1])
        self.time = 0.0
        self.write_intervall = None
        self.outdir = "data"
        self.diagnostics = Diagnostics()
        self.solid = None

        self.temp = Field([fourier_r2c(nx), cheb_dirichlet(ny)])
        self.ux = Field([fourier_r2c(nx), cheb_dirichlet(ny)])
        self.uy = Field([fourier_r2c(nx), cheb_dirichlet(ny)])
        self.pres = [
            Field([fourier_r2c(nx), chebyshev(ny)]),
            Field([fourier_r2c(nx), cheb_neumann(ny)]),
        ]
        self.field = Field([fourier_r2c(nx), chebyshev(ny)])
        self.rhs = np.zeros_like(self.field.vhat)

        sx, sy = self.scale
        c_nu = [self.dt * self.nu / sx ** 2, self.dt * self.nu / sy ** 2]
        c_ka = [self.dt * self.ka / sx ** 2, self.dt * self.ka / sy ** 2]
        self.solver = [
            Helmholtz(self.ux.space, c_nu, workers=workers),
            Helmholtz(self.uy.space, c_nu, workers=workers),
            Helmholtz(self.temp.space, c_ka, workers=workers),
            Poisson(self.pres[1].space, [1.0 / sx ** 2, 1.0 / sy ** 2], workers=workers),
        ]

        self.fieldbc = None
        self._scale()
        self.set_temp_bc(self.bc_rbc(nx, ny))
        self.set_velocity(0.2, 2.0, 1.0)

        logger.info(
            "Navier2DPeriodic: %dx%d, Ra=%.2e, Pr=%.2f, dt=%.2e, nu=%.3e, kappa=%.3e",
            nx, ny, self.ra, self.pr, self.dt, self.nu, self.ka,
        )

    def _scale(self):
        """Rescale coordinates to the physical cell (affects output only)."""
        for field in (self.temp, self.ux, self.uy, self.pres[0], self.field):
            field.x[0] = field.x[0] * self.scale[0]
            field.x[1] = field.x[1] * self.scale[1]

    @staticmethod
    def bc_rbc(nx, ny):
        """Boundary field with T = 0.5 at the bottom and T = -0.5 at the top."""
        fieldbc = Field([fourier_r2c(nx), cheb_dirichlet_bc(ny)])
        bc = np.zeros((nx, 2))
        bc[:, 0] = 0.5
        bc[:, 1] = -0.5
        fieldbc.vhat[...] = fieldbc.space.bases[0].forward(bc, axis=0)
        fieldbc.backward()
        fieldbc.forward()
        return fieldbc

    def set_temp_bc(self, fieldbc):
        self.fieldbc = fieldbc

    def set_solid(self, mask):
        """
        Penalise velocity and temperature inside a solid obstacle.

        The convection terms gain mask * u / SOLID_ETA (and mask * T / SOLID_ETA),
        which drives both towards zero where mask is 1. Pass None to remove it.
        """
        if mask is None:
            self.solid = None
            return
        mask = np.asarray(mask, dtype=float)
        if mask.shape != self.temp.v.shape:
            raise ValueError(
                f"Solid mask shape mismatch, got {mask.shape} expected {self.temp.v.shape}"
            )
        self.solid = mask.copy()
        logger.info("Solid mask covers %.1f%% of the cell", 100.0 * np.mean(mask > 0.5))

    # --- Initial conditions ---
    def _unit_coords(self):
        x = self.temp.x[0] / (2.0 * np.pi * self.scale[0])
        y = self.temp.x[1]
        y = (y - y[0]) / (y[-1] - y[0])
        return x[:, None], y[None, :]

    def set_velocity(self, amp, m, n):
        """
        Velocity made of a single convection roll pattern.

            ux =  amp * sin(pi*m*x) cos(pi*n*y)
            uy = -amp * cos(pi*m*x) sin(pi*n*y)

        with x, y normalised to [0, 1].
        """
        x, y = self._unit_coords()
        self.ux.v[...] = amp * np.sin(np.pi * m * x) * np.cos(np.pi * n * y)
        self.uy.v[...] = -amp * np.cos(np.pi * m * x) * np.sin(np.pi * n * y)
        self.ux.forward()
        self.uy.forward()

    def set_temperature(self, amp, m, n):
        """Temperature fluctuation -amp * cos(pi*m*x) sin(pi*n*y)."""
        x, y = self._unit_coords()
        self.temp.v[...] = -amp * np.cos(np.pi * m * x) * np.sin(np.pi * n * y)
        self.temp.forward()

    # --- Convection ---
    def _to_spectral(self, conv):
        self.field.v[...] = conv
        self.field.forward()
        return self.field.vhat.copy()

    def conv_ux(self, ux, uy):
        conv = conv_term(self.ux, self.field, ux, [1, 0], self.scale)
        conv += conv_term(self.ux, self.field, uy, [0, 1], self.scale)
        if self.solid is not None:
            conv += self.solid * ux / SOLID_ETA
        return self._to_spectral(conv)

    def conv_uy(self, ux, uy):
        conv = conv_term(self.uy, self.field, ux, [1, 0], self.scale)
        conv += conv_term(self.uy, self.field, uy, [0, 1], self.scale)
        if self.solid is not None:
            conv += self.solid * uy / SOLID_ETA
        return self._to_spectral(conv)

    def conv_temp(self, ux, uy):
        conv = conv_term(self.temp, self.field, ux, [1, 0], self.scale)
        conv += conv_term(self.temp, self.field, uy, [0, 1], self.scale)
        if self.fieldbc is not None:
            conv += conv_term(self.fieldbc, self.field, ux, [1, 0], self.scale)
            conv += conv_term(self.fieldbc, self.field, uy, [0, 1], self.scale)
        if self.solid is not None:
            self.temp.backward()
            temp = self.temp.v
            if self.fieldbc is not None:
                temp = temp + self.fieldbc.v
            conv += self.solid * temp / SOLID_ETA
        return self._to_spectral(conv)

    # --- Implicit steps ---
    def solve_ux(self, ux, uy):
        self.rhs[...] = self.ux.to_ortho()
        self.rhs -= self.dt * self.pres[0].grad([1, 0], self.scale)
        self.rhs -= self.dt * self.conv_ux(ux, uy)
        self.solver[0].solve(self.rhs, out=self.ux.vhat)

    def solve_uy(self, ux, uy, buoy):
        self.rhs[...] = self.uy.to_ortho()
        self.rhs -= self.dt * self.pres[0].grad([0, 1], self.scale)
        self.rhs += self.dt * buoy
        self.rhs -= self.dt * self.conv_uy(ux, uy)
        self.solver[1].solve(self.rhs, out=self.uy.vhat)

    def solve_temp(self, ux, uy):
        self.rhs[...] = self.temp.to_ortho()
        if self.fieldbc is not None:
            self.rhs += self.dt * self.ka * self.fieldbc.grad([2, 0], self.scale)
            self.rhs += self.dt * self.ka * self.fieldbc.grad([0, 2], self.scale)
        self.rhs -= self.dt * self.conv_temp(ux, uy)
        self.solver[2].solve(self.rhs, out=self.temp.vhat)

    def divergence(self):
        """Velocity divergence dux/dx + duy/dy in the parent bases."""
        return self.ux.grad([1, 0], self.scale) + self.uy.grad([0, 1], self.scale)

    def solve_pres(self, div):
        self.solver[3].solve(div, out=self.pres[1].vhat)
        # Pseudo-pressure is defined up to a constant
        self.pres[1].vhat[0, 0] = 0.0

    def project_velocity(self, c):
        """Subtract c * grad(pseudo-pressure) from the velocity."""
        dpdx = self.pres[1].grad([1, 0], self.scale)
        dpdy = self.pres[1].grad([0, 1], self.scale)
        self.ux.vhat -= c * self.ux.space.from_ortho(dpdx)
        self.uy.vhat -= c * self.uy.space.from_ortho(dpdy)

    def update_pres(self, div):
        self.pres[0].vhat -= self.nu * div
        self.pres[0].vhat += self.pres[1].to_ortho() / self.dt

    def project(self):
        """Make the velocity divergence free and update the pressure."""
        div = self.divergence()
        self.solve_pres(div)
        self.project_velocity(1.0)
        self.update_pres(div)

    def update(self):
        """Advance the solution by one timestep."""
        # Buoyancy
        that = self.temp.to_ortho()
        if self.fieldbc is not None:
            that = that + self.fieldbc.to_ortho()

        # Convection velocity
        self.ux.backward()
        self.uy.backward()
        ux = self.ux.v.copy()
        uy = self.uy.v.copy()

        self.solve_ux(ux, uy)
        self.solve_uy(ux, uy, that)
        self.project()
        self.solve_temp(ux, uy)

        self.time += self.dt

    # --- Diagnostics ---
    def eval_nu(self):
        return eval_nu(self.temp, self.field, self.fieldbc, self.scale)

    def eval_nuvol(self):
        return eval_nuvol(self.temp, self.uy, self.field, self.fieldbc, self.ka, self.scale)

    def eval_re(self):
        return eval_re(self.ux, self.uy, self.field, self.nu, self.scale)

    def get_time(self):
        return self.time

    def get_dt(self):
        return self.dt

    def reset_time(self):
        self.time = 0.0

    def exit(self):
        """True if the divergence contains non-finite values."""
        return not np.isfinite(norm_l2(self.divergence()))

    # --- Output ---
    def _is_write_time(self):
        if self.write_intervall is None:
            return True
        rem = self.time % self.write_intervall
        return rem < self.dt / 2.0 or rem > self.write_intervall - self.dt / 2.0

    def write(self, outdir=None):
        """Write a snapshot, log and record the diagnostics (into self.outdir by default)."""
        outdir = pathlib.Path(self.outdir if outdir is None else outdir)
        outdir.mkdir(parents=True, exist_ok=True)

        if self._is_write_time():
            self.write_to_file(outdir / f"flow{self.time:.3f}.h5")

        div = norm_l2(self.divergence())
        nu = self.eval_nu()
        nuvol = self.eval_nuvol()
        re = self.eval_re()
        logger.info(
            "time = %6.2f  |div| = %9.2e  Nu = %10.3e  Nuv = %10.3e  Re = %10.3e",
            self.time, div, nu, nuvol, re,
        )
        self.diagnostics.append(self.time, nu, nuvol, re)
        self.diagnostics.write(outdir / "diagnostics.h5")

    def write_to_file(self, path):
        """Store temperature (including the boundary field), velocity and pressure."""
        self.temp.backward()
        self.ux.backward()
        self.uy.backward()
        self.pres[0].backward()
        if self.fieldbc is not None:
            self.temp.v += self.fieldbc.v

        self.temp.write(path, "temp")
        self.ux.write(path, "ux")
        self.uy.write(path, "uy")
        self.pres[0].write(path, "pres")
        io.write_scalar(path, "time", self.time)
        io.write_scalar(path, "ra", self.ra)
        io.write_scalar(path, "pr", self.pr)
        io.write_scalar(path, "nu", self.nu)
        io.write_scalar(path, "kappa", self.ka)

        if self.fieldbc is not None:
            self.temp.backward()
        logger.info("==> %s", path)

    def read(self, path):
        """Restore fields and time from a snapshot written by write_to_file."""
        self.temp.read(path, "temp")
        self.ux.read(path, "ux")
        self.uy.read(path, "uy")
        self.pres[0].read(path, "pres")
        self.time = float(io.read_scalar(path, "time"))
        logger.info("<== %s", path)
