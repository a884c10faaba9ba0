"""Coordinate conversions.

- **Geodetic**: WGS84 ``[lon, lat, alt]`` to and from Earth-fixed Cartesian.
- **Topocentric**: observer-relative azimuth, elevation and range.
"""

from .geodetic import position_ecef_to_geodetic, position_geodetic_to_ecef
from .topocentric import LookAngles, Observer, look_angles, rotation_ecef_to_enz

__all__ = [
    "position_geodetic_to_ecef",
    "position_ecef_to_geodetic",
    "Observer",
    "LookAngles",
    "rotation_ecef_to_enz",
    "look_angles",
]
