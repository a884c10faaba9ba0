"""Solar and geomagnetic activity for the drag estimate.

Upper-atmosphere density rises with solar EUV output (tracked by the
10.7 cm radio flux, F10.7) and with geomagnetic activity (Kp/Ap).  This
module fetches the latest indices from NOAA SWPC and turns them into a
scale factor for the exponential atmosphere of :mod:`orbitview.analysis.decay`:

    factor = clamp((F10.7 / 150) * (1 + 0.02 * (Ap - 7)), 0.5, 2.0)

Network errors are propagated by :func:`download_json`;
:func:`fetch_space_weather` catches them and falls back to moderate
default conditions so a lifetime estimate is always possible.

References:

    1. B. Bowman et al., "A New Empirical Thermospheric Density Model
       JB2008", AIAA 2008-6438.
"""

from __future__ import annotations

import enum
import logging
from typing import Any, NamedTuple

import httpx

logger = logging.getLogger(__name__)

NOAA_F107_URL: str = "https://services.swpc.noaa.gov/json/f107_cm_flux.json"
"""Daily F10.7 flux observations."""

NOAA_KP_URL: str = "https://services.swpc.noaa.gov/products/noaa-planetary-k-index.json"
"""Three-hourly planetary Kp index."""

REFERENCE_F107: float = 150.0
"""F10.7 [sfu] at which the density correction is 1."""

REFERENCE_AP: float = 7.0
"""Ap at which the geomagnetic correction is 1."""

_DEFAULT_TIMEOUT: float = 30.0
_F107_AVERAGE_DAYS = 81
_FACTOR_BOUNDS = (0.5, 2.0)

# Standard Kp (thirds) to 3-hour ap conversion
_KP_TABLE: tuple[float, ...] = (
    0.0, 0.33, 0.67, 1.0, 1.33, 1.67, 2.0, 2.33, 2.67, 3.0, 3.33, 3.67, 4.0, 4.33,
    4.67, 5.0, 5.33, 5.67, 6.0, 6.33, 6.67, 7.0, 7.33, 7.67, 8.0, 8.33, 8.67, 9.0,
)
_AP_TABLE: tuple[float, ...] = (
    0.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 9.0, 12.0, 15.0, 18.0, 22.0, 27.0, 32.0,
    39.0, 48.0, 56.0, 67.0, 80.0, 94.0, 111.0, 132.0, 154.0, 179.0, 207.0, 236.0, 300.0, 400.0,
)


class SpaceWeatherCondition(enum.StrEnum):
    """Coarse activity class."""

    QUIET = "quiet"
    MODERATE = "moderate"
    ACTIVE = "active"
    STORM = "storm"


class SpaceWeather(NamedTuple):
    """Current activity indices.

    Attributes:
        f107: Latest 10.7 cm solar radio flux [sfu].
        f107_average: Mean F10.7 over the last 81 reports [sfu].
        kp: Planetary K index (0-9).
        ap: Planetary amplitude index derived from ``kp``.
    """

    f107: float
    f107_average: float
    kp: float
    ap: float

    @property
    def condition(self) -> SpaceWeatherCondition:
        return space_weather_condition(self.kp, self.f107)


def static_space_weather(
    f107: float = REFERENCE_F107,
    f107_average: float = REFERENCE_F107,
    kp: float = 2.0,
    ap: float | None = None,
) -> SpaceWeather:
    """Space weather with fixed values.

    Args:
        f107: F10.7 flux [sfu]. Default: 150.0
        f107_average: 81-day average F10.7 [sfu]. Default: 150.0
        kp: Kp index. Default: 2.0
        ap: Ap index. Default: converted from ``kp``.

    Returns:
        SpaceWeather.

    Examples:
        ```python
        sw = static_space_weather(f107=220.0, kp=6.0)
        sw.condition  # SpaceWeatherCondition.STORM
        ```
    """
    return SpaceWeather(f107, f107_average, kp, kp_to_ap(kp) if ap is None else ap)


def kp_to_ap(kp: float) -> float:
    """Ap for the largest tabulated Kp not above *kp*."""
    ap = _AP_TABLE[0]
    for kp_step, ap_step in zip(_KP_TABLE, _AP_TABLE):
        if kp_step <= kp:
            ap = ap_step
    return ap


def space_weather_condition(kp: float, f107: float) -> SpaceWeatherCondition:
    """Activity class from the Kp index and F10.7 flux."""
    if kp >= 7.0 or f107 >= 200.0:
        return SpaceWeatherCondition.STORM
    if kp >= 5.0 or f107 >= 150.0:
        return SpaceWeatherCondition.ACTIVE
    if kp >= 3.0 or f107 >= 100.0:
        return SpaceWeatherCondition.MODERATE
    return SpaceWeatherCondition.QUIET


def density_correction_factor(weather: SpaceWeather) -> float:
    """Atmospheric density multiplier for the given activity, in [0.5, 2.0]."""
    f107_factor = weather.f107 / REFERENCE_F107
    ap_factor = 1.0 + (weather.ap - REFERENCE_AP) * 0.02
    low, high = _FACTOR_BOUNDS
    return max(low, min(high, f107_factor * ap_factor))


def _as_float(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_f107_json(data: Any) -> tuple[float, float]:
    """Latest and 81-report average flux from the SWPC F10.7 feed.

    Args:
        data: Decoded JSON, a list of records with a ``"flux"`` field.

    Returns:
        ``(f107, f107_average)`` [sfu].

    Raises:
        ValueError: If the feed holds no readable flux value.
    """
    if not isinstance(data, list):
        raise ValueError("F10.7 feed is not a list of records")
    fluxes = [
        flux
        for record in data
        if isinstance(record, dict) and (flux := _as_float(record.get("flux"))) is not None
    ]
    if not fluxes:
        raise ValueError("F10.7 feed holds no flux values")
    window = fluxes[-_F107_AVERAGE_DAYS:]
    return fluxes[-1], sum(window) / len(window)


def parse_kp_json(data: Any) -> tuple[float, float]:
    """Latest Kp and the matching Ap from the SWPC planetary K feed.

    Args:
        data: Decoded JSON, a header row followed by
            ``[time_tag, Kp, ...]`` rows.

    Returns:
        ``(kp, ap)``.

    Raises:
        ValueError: If the feed holds no readable Kp value.
    """
    if not isinstance(data, list):
        raise ValueError("Kp feed is not a list of rows")
    for row in reversed(data[1:]):
        if isinstance(row, list) and len(row) > 1 and (kp := _as_float(row[1])) is not None:
            return kp, kp_to_ap(kp)
    raise ValueError("Kp feed holds no index values")


def download_json(url: str, *, timeout: float = _DEFAULT_TIMEOUT) -> Any:
    """Download and decode a JSON document.

    Raises:
        httpx.HTTPStatusError: If the server returns a non-2xx status.
        httpx.TransportError: On network-level failures (DNS, timeout, etc.).
        ValueError: If the body is not valid JSON.
    """
    logger.info("Downloading space weather from %s", url)
    with httpx.Client(timeout=timeout, follow_redirects=True) as client:
        response = client.get(url)
        response.raise_for_status()
    return response.json()


def fetch_space_weather(*, timeout: float = _DEFAULT_TIMEOUT) -> SpaceWeather:
    """Latest space weather from NOAA SWPC.

    Each index falls back independently to its default (F10.7 150 sfu,
    Kp 2, Ap 7) when its feed cannot be downloaded or parsed.

    Args:
        timeout: HTTP timeout per request in seconds.

    Returns:
        SpaceWeather.
    """
    try:
        f107, f107_average = parse_f107_json(download_json(NOAA_F107_URL, timeout=timeout))
    except (httpx.HTTPError, ValueError) as err:
        logger.warning("F10.7 unavailable, using %.0f sfu: %s", REFERENCE_F107, err, exc_info=True)
        f107 = f107_average = REFERENCE_F107

    try:
        kp, ap = parse_kp_json(download_json(NOAA_KP_URL, timeout=timeout))
    except (httpx.HTTPError, ValueError) as err:
        logger.warning("Kp unavailable, using quiet defaults: %s", err, exc_info=True)
        kp, ap = 2.0, REFERENCE_AP

    weather = SpaceWeather(f107, f107_average, kp, ap)
    logger.debug("Space weather %s (%s)", weather, weather.condition)
    return weather
