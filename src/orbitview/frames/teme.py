"""TEME to Earth-fixed frame rotation for SGP4 output.

TEME (True Equator, Mean Equinox) is the native output frame of the
SGP4/SDP4 propagator.  Rotating by Greenwich Mean Sidereal Time about the
z-axis removes the mean Earth rotation and yields the pseudo Earth-fixed
(PEF) frame the renderer plots in.  Polar motion is ignored: it moves a
LEO position by metres, far below what a point cloud on a globe resolves.

The rotation depends only on time, so callers compute the sidereal angle
once and apply one matrix product to a whole ``(N, 3)`` block.
"""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from orbitview.config import get_dtype
from orbitview.constants import OMEGA_EARTH


def rotation_z(angle: float) -> Array:
    """Frame rotation matrix about the z-axis.

    Args:
        angle: Counter-clockwise rotation of the frame as viewed looking
            back along the positive z-axis. Units: *rad*.

    Returns:
        3x3 rotation matrix.

    References:

        1. O. Montenbruck, and E. Gill, *Satellite Orbits: Models, Methods and Applications*, 2012, p.27.
    """
    dtype = get_dtype()
    c = jnp.cos(jnp.asarray(angle, dtype=dtype))
    s = jnp.sin(jnp.asarray(angle, dtype=dtype))
    zero = jnp.zeros((), dtype=dtype)
    one = jnp.ones((), dtype=dtype)

    return jnp.array([[  c,    s, zero],
                      [ -s,    c, zero],
                      [zero, zero, one]])


def rotation_teme_to_pef(gmst: float) -> Array:
    """Compute the 3x3 rotation matrix from TEME to PEF.

    Args:
        gmst: Greenwich Mean Sidereal Time. Units: *rad*.

    Returns:
        3x3 rotation matrix (TEME -> PEF).
    """
    return rotation_z(gmst)


def rotation_pef_to_teme(gmst: float) -> Array:
    """Compute the 3x3 rotation matrix from PEF to TEME.

    Transpose of :func:`rotation_teme_to_pef`.
    """
    return rotation_teme_to_pef(gmst).T


def positions_teme_to_pef(gmst: float, r_teme: ArrayLike) -> Array:
    """Rotate a block of TEME positions into the PEF frame.

    Rows that are NaN in the input remain NaN in the output, so failed
    propagations pass through unchanged.

    Args:
        gmst: Greenwich Mean Sidereal Time. Units: *rad*.
        r_teme: Positions, shape ``(N, 3)`` or ``(3,)``. Any length unit.

    Returns:
        Positions in PEF with the same shape and unit.
    """
    r_teme = jnp.asarray(r_teme, dtype=get_dtype())
    R = rotation_teme_to_pef(gmst)
    if r_teme.ndim == 1:
        return R @ r_teme
    return r_teme @ R.T


def state_teme_to_pef(gmst: float, x_teme: ArrayLike) -> Array:
    """Transform a 6-element state vector from TEME to PEF.

    Velocity includes the Earth-rotation correction:
    ``v_pef = R @ v_teme - omega_earth x r_pef``

    Args:
        gmst: Greenwich Mean Sidereal Time. Units: *rad*.
        x_teme: 6-element TEME state ``[x, y, z, vx, vy, vz]``.
            Units: m, m/s.

    Returns:
        6-element PEF state ``[x, y, z, vx, vy, vz]``. Units: m, m/s.
    """
    dtype = get_dtype()
    x_teme = jnp.asarray(x_teme, dtype=dtype)

    R = rotation_teme_to_pef(gmst)
    omega = jnp.array([0.0, 0.0, OMEGA_EARTH], dtype=dtype)

    r_pef = R @ x_teme[:3]
    v_pef = R @ x_teme[3:6] - jnp.cross(omega, r_pef)

    return jnp.concatenate([r_pef, v_pef])
