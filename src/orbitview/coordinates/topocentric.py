"""Observer-relative look angles.

Expresses an Earth-fixed target position in the East-North-Zenith (ENZ)
frame of a ground observer and reduces it to azimuth, elevation and
slant range, the quantities pass prediction and the sky plot work with.

The ENZ frame is right-handed: East and North are tangent to the WGS84
ellipsoid at the observer, Zenith is the ellipsoid normal.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from orbitview.config import get_dtype
from orbitview.coordinates.geodetic import position_geodetic_to_ecef


@dataclass(frozen=True)
class Observer:
    """A ground observer.

    Args:
        latitude: Geodetic latitude [deg], within ``[-90, 90]``.
        longitude: Longitude [deg], east positive.
        altitude: Height above the WGS84 ellipsoid [m].
    """

    latitude: float
    longitude: float
    altitude: float = 0.0

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(
                f"Observer latitude must be within [-90, 90] degrees, got {self.latitude}"
            )

    def ecef(self) -> Array:
        """Earth-fixed position of the observer ``[x, y, z]`` in *m*."""
        return position_geodetic_to_ecef(
            [self.longitude, self.latitude, self.altitude], use_degrees=True
        )


class LookAngles(NamedTuple):
    """Azimuth [deg, clockwise from North], elevation [deg] and range [m]."""

    azimuth: float
    elevation: float
    range: float


def rotation_ecef_to_enz(latitude: float, longitude: float) -> Array:
    """Rotation matrix from Earth-fixed to the observer's ENZ frame.

    Args:
        latitude: Geodetic latitude [deg].
        longitude: Longitude [deg].

    Returns:
        3x3 rotation matrix whose rows are the E, N, Z axes in Earth-fixed
            coordinates.
    """
    lat = jnp.deg2rad(jnp.asarray(latitude, dtype=get_dtype()))
    lon = jnp.deg2rad(jnp.asarray(longitude, dtype=get_dtype()))

    sin_lon, cos_lon = jnp.sin(lon), jnp.cos(lon)
    sin_lat, cos_lat = jnp.sin(lat), jnp.cos(lat)

    return jnp.array([
        [-sin_lon, cos_lon, jnp.zeros_like(lat)],
        [-sin_lat * cos_lon, -sin_lat * sin_lon, cos_lat],
        [cos_lat * cos_lon, cos_lat * sin_lon, sin_lat],
    ])


def look_angles(observer: Observer, r_ecef: ArrayLike) -> LookAngles:
    """Azimuth, elevation and range of a target seen from *observer*.

    At the zenith singularity azimuth is reported as 0.

    Args:
        observer: Ground observer.
        r_ecef: Earth-fixed target position ``[x, y, z]`` in *m*.

    Returns:
        LookAngles in degrees and metres.
    """
    r_ecef = jnp.asarray(r_ecef, dtype=get_dtype())
    rho = r_ecef - observer.ecef()
    e, n, z = rotation_ecef_to_enz(observer.latitude, observer.longitude) @ rho

    horiz = jnp.sqrt(e * e + n * n)
    elevation = jnp.rad2deg(jnp.arctan2(z, horiz))
    azimuth = jnp.where(horiz == 0.0, 0.0, jnp.rad2deg(jnp.arctan2(e, n)) % 360.0)

    return LookAngles(
        azimuth=float(azimuth),
        elevation=float(elevation),
        range=float(jnp.sqrt(e * e + n * n + z * z)),
    )
