"""
chebflow: Spectral Rayleigh-Benard Convection Solver
====================================================

2D incompressible Navier-Stokes equations with Boussinesq coupling, solved
with Fourier and (composite) Chebyshev bases and banded/tensor solvers.

Modules:
    config: Configuration and command-line argument parsing
    bases: Orthogonal Chebyshev and Fourier bases
    composite: Stencils and composite Chebyshev bases
    field: Spaces, fields and basis constructors
    fdma: Four-diagonal banded solver
    tensor: Eigendecomposition-based multidimensional solver
    poisson: Poisson and Helmholtz solvers
    navier: Navier-Stokes integrator (periodic in x)
    integrate: Fixed-step time loop
    io: HDF5 persistence
    utils: Physical parameters and flow diagnostics
"""

__version__ = "0.1.0"

from . import config
from . import bases
from . import composite
from . import field
from . import fdma
from . import tensor
from . import poisson
from . import navier
from . import integrate
from . import io
from . import utils

from .field import (
    Field, Space, cheb_dirichlet, cheb_dirichlet_bc, cheb_neumann, chebyshev,
    fourier_c2c, fourier_r2c,
)
from .fdma import FdmaMatrix
from .tensor import FdmaTensor
from .poisson import Helmholtz, MatVec, Poisson
from .navier import Navier2DPeriodic

__all__ = [
    "config",
    "bases",
    "composite",
    "field",
    "fdma",
    "tensor",
    "poisson",
    "navier",
    "integrate",
    "io",
    "utils",
    "Field",
    "Space",
    "chebyshev",
    "cheb_dirichlet",
    "cheb_dirichlet_bc",
    "cheb_neumann",
    "fourier_r2c",
    "fourier_c2c",
    "FdmaMatrix",
    "FdmaTensor",
    "MatVec",
    "Poisson",
    "Helmholtz",
    "Navier2DPeriodic",
]
