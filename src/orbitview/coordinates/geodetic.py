"""Geodetic (WGS84 ellipsoid) coordinate transformations.

Converts between geodetic coordinates ``[longitude, latitude, altitude]``
and Earth-fixed Cartesian coordinates ``[x, y, z]``.  The forward
transformation is closed-form; the inverse iterates the latitude a fixed
number of times, which converges to well under a millimetre for any point
between the surface and geostationary altitude.

All inputs and outputs use SI base units (metres, radians) unless
``use_degrees=True`` is specified.

References:
    1. NIMA Technical Report TR8350.2, *Department of Defense World Geodetic
       System 1984*.
"""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from orbitview.config import get_dtype
from orbitview.constants import WGS84_a, WGS84_f

# First eccentricity squared of the WGS84 ellipsoid
ECC2 = WGS84_f * (2.0 - WGS84_f)

_LATITUDE_ITERATIONS = 6


def position_geodetic_to_ecef(
    x_geod: ArrayLike,
    use_degrees: bool = False,
) -> Array:
    """Convert geodetic position to Earth-fixed Cartesian coordinates.

    Args:
        x_geod: Geodetic coordinates ``[lon, lat, alt]``.
            Longitude and latitude in *rad* (or *deg* if ``use_degrees=True``),
            altitude in *m* above the WGS84 ellipsoid.
        use_degrees: If ``True``, interpret longitude and latitude as degrees.

    Returns:
        Earth-fixed position ``[x, y, z]`` in *m*.
    """
    x_geod = jnp.asarray(x_geod, dtype=get_dtype())

    lon, lat, alt = x_geod[0], x_geod[1], x_geod[2]
    if use_degrees:
        lon = jnp.deg2rad(lon)
        lat = jnp.deg2rad(lat)

    sin_lat = jnp.sin(lat)
    cos_lat = jnp.cos(lat)

    # Prime vertical radius of curvature
    N = WGS84_a / jnp.sqrt(1.0 - ECC2 * sin_lat * sin_lat)

    return jnp.array([
        (N + alt) * cos_lat * jnp.cos(lon),
        (N + alt) * cos_lat * jnp.sin(lon),
        ((1.0 - ECC2) * N + alt) * sin_lat,
    ])


def position_ecef_to_geodetic(
    x_ecef: ArrayLike,
    use_degrees: bool = False,
) -> Array:
    """Convert Earth-fixed Cartesian coordinates to geodetic position.

    Args:
        x_ecef: Earth-fixed position ``[x, y, z]`` in *m*.
        use_degrees: If ``True``, return longitude and latitude in degrees.

    Returns:
        Geodetic coordinates ``[lon, lat, alt]``. Longitude and latitude in
            *rad* (or *deg*), altitude in *m* above the WGS84 ellipsoid.
    """
    x_ecef = jnp.asarray(x_ecef, dtype=get_dtype())
    x, y, z = x_ecef[0], x_ecef[1], x_ecef[2]

    lon = jnp.arctan2(y, x)
    p = jnp.sqrt(x * x + y * y)

    lat = jnp.arctan2(z, p * (1.0 - ECC2))
    for _ in range(_LATITUDE_ITERATIONS):
        sin_lat = jnp.sin(lat)
        N = WGS84_a / jnp.sqrt(1.0 - ECC2 * sin_lat * sin_lat)
        lat = jnp.arctan2(z + ECC2 * N * sin_lat, p)

    sin_lat = jnp.sin(lat)
    N = WGS84_a / jnp.sqrt(1.0 - ECC2 * sin_lat * sin_lat)
    # Height along the normal; the z-form stays stable near the poles
    alt = jnp.where(
        jnp.abs(jnp.cos(lat)) > 1e-6,
        p / jnp.cos(lat) - N,
        jnp.abs(z) - N * (1.0 - ECC2),
    )

    if use_degrees:
        lon = jnp.rad2deg(lon)
        lat = jnp.rad2deg(lat)

    return jnp.array([lon, lat, alt])
