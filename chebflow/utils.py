"""
Physical parameters and flow diagnostics.

This module provides helper functions for:
- Viscosity and diffusivity from Rayleigh and Prandtl numbers
- Norms of spectral arrays (divergence monitoring)
- Nusselt and Reynolds numbers of a Rayleigh-Benard flow
"""

import logging

import numpy as np

logger = logging.getLogger(__name__)


def get_nu(ra, pr, height):
    """
    Kinematic viscosity from Ra, Pr and cell height.

        nu = sqrt(Pr / (Ra / H^3))
    """
    return np.sqrt(pr / (ra / height ** 3))


def get_ka(ra, pr, height):
    """
    Thermal diffusivity from Ra, Pr and cell height.

        kappa = sqrt(1 / ((Ra / H^3) Pr))
    """
    return np.sqrt(1.0 / ((ra / height ** 3) * pr))


def norm_l2(array):
    """L2 norm of a real or complex array (NaN propagates)."""
    return float(np.sqrt(np.sum(np.abs(array) ** 2)))


def _total_grad(temp, fieldbc, deriv, scale):
    """Derivative of temp (+ boundary field) in the parent bases."""
    dtdz = temp.grad(deriv, scale)
    if fieldbc is not None:
        dtdz = dtdz + fieldbc.grad(deriv, scale)
    return dtdz


def eval_nu(temp, field, fieldbc, scale):
    """
    Nusselt number from the heat flux at the plates.

        Nu = -<dT/dy>_x averaged over bottom and top, times H = 2*scale[1]

    Args:
        temp (Field): Temperature fluctuation
        field (Field): Scratch field in the parent bases
        fieldbc (Field or None): Boundary temperature field
        scale (sequence): Physical scale per axis

    Returns:
        float: Nusselt number
    """
    field.vhat[...] = _total_grad(temp, fieldbc, [0, 1], scale)
    field.backward()
    dtdz = -field.average_axis(0)
    return float(0.5 * (dtdz[0] + dtdz[-1]) * 2.0 * scale[1])


def eval_nuvol(temp, uy, field, fieldbc, ka, scale):
    """
    Volumetric Nusselt number.

        Nuvol = <uy*T/kappa - dT/dy>_V * H
    """
    field.vhat[...] = _total_grad(temp, fieldbc, [0, 1], scale)
    field.backward()
    dtdz = field.v.copy()

    field.vhat[...] = temp.to_ortho()
    if fieldbc is not None:
        field.vhat += fieldbc.to_ortho()
    field.backward()
    that = field.v.copy()

    uy.backward()
    field.v[...] = (uy.v * that / ka - dtdz) * 2.0 * scale[1]
    return field.average()


def eval_re(ux, uy, field, nu, scale):
    """
    Reynolds number based on the volume averaged speed.

        Re = <sqrt(ux^2 + uy^2)>_V * H / nu
    """
    ux.backward()
    uy.backward()
    field.v[...] = np.sqrt(ux.v ** 2 + uy.v ** 2) * 2.0 * scale[1] / nu
    return field.average()
