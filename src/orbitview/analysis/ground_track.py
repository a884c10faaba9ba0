"""Ground track and coverage footprint.

The ground track is the trace of the sub-satellite point: the satellite's
Earth-fixed position (TEME rotated by GMST) converted to WGS84 geodetic
latitude, longitude and altitude.  The footprint is the area from which the
satellite stands above a minimum elevation; on a spherical Earth its
radius along the surface is

    d = R * (arccos(R * cos(e) / (R + h)) - e)

References:

    1. D. Vallado, *Fundamentals of Astrodynamics and Applications*, 4th
       ed., ch. 3 and 11.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import numpy as np
from sgp4.api import Satrec

from orbitview.analysis._track import as_satrec, earth_fixed_track
from orbitview.catalog import ElementSet
from orbitview.constants import DEG2RAD, KM2M, R_EARTH_MEAN_KM, RAD2DEG
from orbitview.coordinates import position_ecef_to_geodetic
from orbitview.time import ensure_utc

VISIBILITY_ELEVATIONS: tuple[float, ...] = (0.0, 10.0, 20.0, 30.0)
"""Elevation masks [deg] of the default visibility rings."""


@dataclass(frozen=True)
class GroundTrackPoint:
    """Sub-satellite point.

    Attributes:
        latitude: Geodetic latitude [deg].
        longitude: Longitude in [-180, 180] [deg].
        altitude: Height above the WGS84 ellipsoid [km].
        time: Instant of the sample.
    """

    latitude: float
    longitude: float
    altitude: float
    time: datetime


@dataclass(frozen=True)
class GroundTrack:
    """Ground track around a reference instant.

    Attributes:
        past: Points before the reference instant, oldest first.
        future: Points after it, oldest first.
        current: Point at the reference instant, or ``None`` if the
            satellite could not be propagated there.
    """

    past: tuple[GroundTrackPoint, ...]
    future: tuple[GroundTrackPoint, ...]
    current: GroundTrackPoint | None


def _sample(satrec: Satrec, times: list[datetime]) -> list[GroundTrackPoint | None]:
    if not times:
        return []
    r_pef, valid = earth_fixed_track(satrec, times)
    lon, lat, alt = np.asarray(position_ecef_to_geodetic(r_pef.T, use_degrees=True), dtype=np.float64)
    return [
        GroundTrackPoint(float(lat[k]), float(lon[k]), float(alt[k]) / KM2M, t) if valid[k] else None
        for k, t in enumerate(times)
    ]


def subsatellite_point(source: Satrec | ElementSet, instant: datetime) -> GroundTrackPoint | None:
    """Point directly below the satellite at *instant*.

    Returns:
        GroundTrackPoint, or ``None`` if propagation fails.
    """
    return _sample(as_satrec(source), [ensure_utc(instant)])[0]


def ground_track(
    source: Satrec | ElementSet,
    start: datetime | None = None,
    future_minutes: float = 90.0,
    past_minutes: float = 45.0,
    step: float = 60.0,
) -> GroundTrack:
    """Sub-satellite trace before and after a reference instant.

    Past samples run from ``start - past_minutes`` up to but excluding
    *start*; future samples from ``start + step`` through
    ``start + future_minutes``.  Steps where propagation fails are left out.

    Args:
        source: Element set, or an already-initialized ``Satrec``.
        start: Reference instant (naive values are UTC). Default: now.
        future_minutes: Length of the forward trace [min]. Default: 90.0
        past_minutes: Length of the backward trace [min]. Default: 45.0
        step: Sampling interval [s]. Default: 60.0

    Returns:
        GroundTrack.

    Raises:
        ValueError: If ``step <= 0`` or either duration is negative.
    """
    if step <= 0.0:
        raise ValueError(f"Step must be positive, got {step}")
    if future_minutes < 0.0 or past_minutes < 0.0:
        raise ValueError(
            f"Track durations must be non-negative, got {past_minutes} and {future_minutes}"
        )

    start = ensure_utc(start) if start is not None else datetime.now(timezone.utc)
    satrec = as_satrec(source)

    past_offsets = np.arange(-past_minutes * 60.0, 0.0, step)
    future_offsets = np.arange(step, future_minutes * 60.0 + 1e-9, step)
    offsets = [*past_offsets, 0.0, *future_offsets]

    points = _sample(satrec, [start + timedelta(seconds=float(dt)) for dt in offsets])
    n_past = len(past_offsets)

    return GroundTrack(
        past=tuple(p for p in points[:n_past] if p is not None),
        future=tuple(p for p in points[n_past + 1:] if p is not None),
        current=points[n_past],
    )


def footprint_radius(altitude_km: float, min_elevation: float = 0.0) -> float:
    """Surface radius [km] of the area seeing the satellite above *min_elevation* [deg].

    Raises:
        ValueError: If the altitude is negative.
    """
    if altitude_km < 0.0:
        raise ValueError(f"Altitude must be non-negative, got {altitude_km} km")
    eps = min_elevation * DEG2RAD
    ratio = R_EARTH_MEAN_KM / (R_EARTH_MEAN_KM + altitude_km)
    central_angle = math.acos(ratio * math.cos(eps)) - eps
    return central_angle * R_EARTH_MEAN_KM


def footprint_circle(
    latitude: float,
    longitude: float,
    radius_km: float,
    num_points: int = 72,
) -> list[tuple[float, float]]:
    """Closed ring of ``(latitude, longitude)`` points [deg] around a center.

    The ring holds ``num_points + 1`` points; the last repeats the first.
    Longitudes are wrapped to [-180, 180).
    """
    lat1 = latitude * DEG2RAD
    lon1 = longitude * DEG2RAD
    delta = radius_km / R_EARTH_MEAN_KM

    ring = []
    for i in range(num_points + 1):
        bearing = 2.0 * math.pi * i / num_points
        lat2 = math.asin(
            math.sin(lat1) * math.cos(delta)
            + math.cos(lat1) * math.sin(delta) * math.cos(bearing)
        )
        lon2 = lon1 + math.atan2(
            math.sin(bearing) * math.sin(delta) * math.cos(lat1),
            math.cos(delta) - math.sin(lat1) * math.sin(lat2),
        )
        ring.append((lat2 * RAD2DEG, (lon2 * RAD2DEG + 540.0) % 360.0 - 180.0))
    return ring


def visibility_zones(
    latitude: float,
    longitude: float,
    altitude_km: float,
    elevations: tuple[float, ...] = VISIBILITY_ELEVATIONS,
) -> dict[float, list[tuple[float, float]]]:
    """Footprint rings for several elevation masks, keyed by elevation [deg]."""
    return {
        el: footprint_circle(latitude, longitude, footprint_radius(altitude_km, el))
        for el in elevations
    }


def great_circle_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance [km] between two points given in degrees."""
    phi1, phi2 = lat1 * DEG2RAD, lat2 * DEG2RAD
    dphi = (lat2 - lat1) * DEG2RAD
    dlam = (lon2 - lon1) * DEG2RAD
    a = math.sin(dphi / 2.0) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlam / 2.0) ** 2
    return 2.0 * R_EARTH_MEAN_KM * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))


def is_within_footprint(
    point: GroundTrackPoint,
    latitude: float,
    longitude: float,
    min_elevation: float = 0.0,
) -> bool:
    """Whether a ground location sees the satellite above *min_elevation*."""
    radius = footprint_radius(max(point.altitude, 0.0), min_elevation)
    return great_circle_distance(point.latitude, point.longitude, latitude, longitude) <= radius
