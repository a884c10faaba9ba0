"""Orbital lifetime estimate from atmospheric drag.

A King-Hele style estimate driven by the TLE B* term and a banded
exponential atmosphere (U.S. Standard Atmosphere 1976 anchor values).  The
altitude is stepped forward until it reaches 120 km or a 10-year horizon.
Solar activity is folded in through a density factor (see
:mod:`orbitview.analysis.space_weather`); the result stays an
order-of-magnitude indicator, not a reentry forecast.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from orbitview.catalog import ElementSet, parse_bstar, parse_eccentricity, parse_mean_motion
from orbitview.constants import GM_EARTH_KM, R_EARTH_MEAN_KM, SECONDS_PER_DAY
from orbitview.time import ensure_utc

# (base altitude [km], base density [kg/m^3], scale height [km])
DENSITY_LAYERS: tuple[tuple[float, float, float], ...] = (
    (0.0, 1.225, 8.5),
    (100.0, 5.297e-7, 5.9),
    (150.0, 2.070e-9, 26.8),
    (200.0, 2.789e-10, 37.2),
    (250.0, 7.248e-11, 45.5),
    (300.0, 2.418e-11, 53.6),
    (350.0, 9.518e-12, 53.3),
    (400.0, 3.725e-12, 58.5),
    (450.0, 1.585e-12, 60.8),
    (500.0, 6.967e-13, 63.8),
    (600.0, 1.454e-13, 71.8),
    (700.0, 3.614e-14, 88.7),
    (800.0, 1.170e-14, 124.6),
    (900.0, 5.245e-15, 181.1),
    (1000.0, 3.019e-15, 268.0),
)

REENTRY_ALTITUDE_KM = 120.0
MAX_LIFETIME_DAYS = 3650
_MIN_DECAY_RATE = 1e-4  # km/day
_MAX_DECAY_RATE = 10.0  # km/day
_NEGLIGIBLE_DRAG_ALTITUDE = 800.0  # km


class RiskLevel(enum.StrEnum):
    """Reentry urgency from current altitude."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class DecayPrediction:
    """Orbital lifetime estimate.

    Attributes:
        current_altitude_km: Altitude above the mean Earth radius [km].
        current_density: Atmospheric density at that altitude [kg/m^3].
        decay_rate_km_per_day: Current altitude loss rate [km/day].
        lifetime_days: Days until 120 km, capped at 3650.
        reentry_date: ``start + lifetime_days``.
        altitude_history: ``(day, altitude_km)`` samples of the simulation.
        risk_level: Urgency class of the current altitude.
    """

    current_altitude_km: float
    current_density: float
    decay_rate_km_per_day: float
    lifetime_days: float
    reentry_date: datetime
    altitude_history: tuple[tuple[float, float], ...]
    risk_level: RiskLevel


def atmospheric_density(altitude_km: float) -> float:
    """Atmospheric density from the banded exponential model.

    Args:
        altitude_km: Geometric altitude [km].

    Returns:
        Density [kg/m^3]; sea-level density below 0 km, 0 above 1500 km.
    """
    if altitude_km < 0.0:
        return 1.225
    if altitude_km > 1500.0:
        return 0.0

    h0, rho0, scale = DENSITY_LAYERS[0]
    for layer in reversed(DENSITY_LAYERS):
        if altitude_km >= layer[0]:
            h0, rho0, scale = layer
            break

    return rho0 * math.exp(-(altitude_km - h0) / scale)


def risk_level(altitude_km: float) -> RiskLevel:
    """Urgency class for an altitude [km]."""
    if altitude_km < 200.0:
        return RiskLevel.CRITICAL
    if altitude_km < 300.0:
        return RiskLevel.HIGH
    if altitude_km < 400.0:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def _daily_decay(semi_major_axis_km: float, bstar: float, rho_ref: float) -> float:
    altitude = semi_major_axis_km - R_EARTH_MEAN_KM
    ratio = atmospheric_density(altitude) / rho_ref if rho_ref > 0.0 else 0.0
    period_days = 2.0 * math.pi * math.sqrt(semi_major_axis_km**3 / GM_EARTH_KM) / SECONDS_PER_DAY
    rate = 2.0 * math.pi * semi_major_axis_km * ratio * abs(bstar) / period_days
    return min(_MAX_DECAY_RATE, max(_MIN_DECAY_RATE, rate))


def predict_orbital_decay(
    semi_major_axis_km: float,
    eccentricity: float,
    bstar: float,
    start: datetime | None = None,
    density_factor: float = 1.0,
) -> DecayPrediction:
    """Estimate the remaining orbital lifetime.

    Above 800 km drag is treated as negligible and a nominal 10-year
    answer is returned.  Below, the decay rate is re-evaluated at each step
    (1 day, or 10 days above 500 km) and clamped to [1e-4, 10] km/day.

    Args:
        semi_major_axis_km: Semi-major axis [km].
        eccentricity: Orbit eccentricity. Accepted for interface
            completeness; the model uses the mean altitude only.
        bstar: TLE B* drag term [1/earth radii].
        start: Reference instant. Default: now (UTC).
        density_factor: Multiplier on atmospheric density for solar and
            geomagnetic activity, applied through B*; see
            :func:`orbitview.analysis.space_weather.density_correction_factor`.
            Default: 1.0

    Returns:
        DecayPrediction.

    Raises:
        ValueError: If ``density_factor`` is not positive.
    """
    if not density_factor > 0.0:
        raise ValueError(f"Density factor must be positive, got {density_factor}")
    bstar = bstar * density_factor
    start = ensure_utc(start) if start is not None else datetime.now(timezone.utc)
    altitude = semi_major_axis_km - R_EARTH_MEAN_KM
    density = atmospheric_density(altitude)

    if altitude > _NEGLIGIBLE_DRAG_ALTITUDE:
        return DecayPrediction(
            current_altitude_km=altitude,
            current_density=density,
            decay_rate_km_per_day=_MIN_DECAY_RATE,
            lifetime_days=float(MAX_LIFETIME_DAYS),
            reentry_date=start + timedelta(days=MAX_LIFETIME_DAYS),
            altitude_history=((0.0, altitude), (float(MAX_LIFETIME_DAYS), altitude - 0.5)),
            risk_level=RiskLevel.LOW,
        )

    rho_ref = atmospheric_density(REENTRY_ALTITUDE_KM)
    rate = _daily_decay(semi_major_axis_km, bstar, rho_ref)

    step = 10 if altitude > 500.0 else 1
    history: list[tuple[float, float]] = []
    sim_altitude = altitude
    days = 0
    while sim_altitude > REENTRY_ALTITUDE_KM and days < MAX_LIFETIME_DAYS:
        if days % 10 == 0:
            history.append((float(days), sim_altitude))
        sim_altitude -= _daily_decay(R_EARTH_MEAN_KM + sim_altitude, bstar, rho_ref) * step
        days += step
    history.append((float(days), max(sim_altitude, 0.0)))

    return DecayPrediction(
        current_altitude_km=altitude,
        current_density=density,
        decay_rate_km_per_day=rate,
        lifetime_days=float(days),
        reentry_date=start + timedelta(days=days),
        altitude_history=tuple(history),
        risk_level=risk_level(altitude),
    )


def semi_major_axis_from_mean_motion(mean_motion: float) -> float:
    """Semi-major axis [km] for a mean motion in rev/day."""
    n = mean_motion * 2.0 * math.pi / SECONDS_PER_DAY
    return (GM_EARTH_KM / (n * n)) ** (1.0 / 3.0)


def decay_from_element_set(
    element_set: ElementSet,
    start: datetime | None = None,
    density_factor: float = 1.0,
) -> DecayPrediction:
    """Lifetime estimate from a TLE's mean motion, eccentricity and B*.

    Raises:
        ValueError: If line 2 cannot be read, the mean motion is not positive,
            or the density factor is not positive.
    """
    mean_motion = parse_mean_motion(element_set.line2)
    if not mean_motion > 0.0:
        raise ValueError(f"Non-positive mean motion for {element_set.identifier}")
    return predict_orbital_decay(
        semi_major_axis_from_mean_motion(mean_motion),
        parse_eccentricity(element_set.line2),
        parse_bstar(element_set.line1),
        start,
        density_factor,
    )


def format_lifetime(days: float) -> str:
    """Human-readable lifetime, e.g. ``"3 months"`` or ``"> 10 years"``."""
    if days < 1:
        return "< 1 day"
    if days < 30:
        return f"{round(days)} days"
    if days < 365:
        return f"{round(days / 30)} months"
    if days < MAX_LIFETIME_DAYS:
        return f"{days / 365:.1f} years"
    return "> 10 years"
