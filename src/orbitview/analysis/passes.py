"""Satellite pass prediction for a ground observer.

Steps through a time window at a fixed interval, computes the satellite's
elevation above the observer's horizon at each step, and collects the
intervals spent above a minimum elevation:

- **AOS** (acquisition of signal): first step at or above the threshold.
- **LOS** (loss of signal): first step below it afterwards.
- **Peak**: highest elevation between the two.

A pass is marked *visible* when the satellite is sunlit at its peak while
the observer's sky is dark (Sun below civil twilight, -6 deg).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

import jax.numpy as jnp
import numpy as np
from sgp4.api import Satrec

from orbitview.analysis._track import as_satrec, earth_fixed_track
from orbitview.analysis.sun import is_sunlit, sun_position_ecef
from orbitview.catalog import ElementSet
from orbitview.config import get_dtype
from orbitview.constants import KM2M
from orbitview.coordinates import LookAngles, Observer, look_angles, rotation_ecef_to_enz
from orbitview.frames import positions_teme_to_pef
from orbitview.time import datetime_to_jd, ensure_utc, gmst

logger = logging.getLogger(__name__)

TWILIGHT_ELEVATION = -6.0
"""Sun elevation below which the observer's sky counts as dark [deg]."""


@dataclass(frozen=True)
class SatellitePass:
    """One pass over an observer.

    Attributes:
        aos: Acquisition of signal (rise above the threshold).
        los: Loss of signal (first step back below the threshold).
        max_elevation_time: Instant of the highest sampled elevation.
        max_elevation: Highest sampled elevation [deg].
        duration: ``los - aos`` [s].
        azimuth_aos: Azimuth at AOS [deg].
        azimuth_los: Azimuth at LOS [deg].
        visible: Satellite sunlit at peak while the observer is in darkness.
    """

    aos: datetime
    los: datetime
    max_elevation_time: datetime
    max_elevation: float
    duration: float
    azimuth_aos: float
    azimuth_los: float
    visible: bool


def _horizon_track(observer: Observer, r_pef: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Elevation and azimuth [deg] of Earth-fixed positions seen by *observer*."""
    rho = jnp.asarray(r_pef, dtype=get_dtype()) - observer.ecef()
    enz = rho @ rotation_ecef_to_enz(observer.latitude, observer.longitude).T
    e, n, z = enz[:, 0], enz[:, 1], enz[:, 2]
    horiz = jnp.sqrt(e * e + n * n)
    elevation = jnp.rad2deg(jnp.arctan2(z, horiz))
    azimuth = jnp.rad2deg(jnp.arctan2(e, n)) % 360.0
    return np.asarray(elevation, dtype=np.float64), np.asarray(azimuth, dtype=np.float64)


def _is_visible(observer: Observer, r_sat: np.ndarray, instant: datetime) -> bool:
    r_sun = sun_position_ecef(instant)
    if not is_sunlit(r_sat, r_sun):
        return False
    return look_angles(observer, r_sun).elevation < TWILIGHT_ELEVATION


def predict_passes(
    source: Satrec | ElementSet,
    observer: Observer,
    start: datetime,
    end: datetime,
    min_elevation: float = 10.0,
    step: float = 60.0,
) -> list[SatellitePass]:
    """Predict the passes of a satellite over an observer.

    Steps where propagation fails are skipped.  A pass still in progress at
    *end* is not reported.

    Args:
        source: Element set, or an already-initialized ``Satrec``.
        observer: Ground observer.
        start: Window start (naive values are UTC).
        end: Window end, inclusive.
        min_elevation: Elevation threshold [deg]. Default: 10.0
        step: Sampling interval [s]. Default: 60.0

    Returns:
        Passes in chronological order.

    Raises:
        ValueError: If ``end < start``, ``step <= 0``, or the element set is
            malformed.

    Examples:
        ```python
        from datetime import datetime, timedelta, timezone
        from orbitview.coordinates import Observer
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        passes = predict_passes(iss, Observer(41.0, 29.0), start, start + timedelta(days=1))
        ```
    """
    start = ensure_utc(start)
    end = ensure_utc(end)
    if end < start:
        raise ValueError(f"Window end {end} precedes start {start}")
    if step <= 0.0:
        raise ValueError(f"Step must be positive, got {step}")

    satrec = as_satrec(source)

    count = int((end - start).total_seconds() // step) + 1
    times = [start + timedelta(seconds=k * step) for k in range(count)]

    r_pef, valid = earth_fixed_track(satrec, times)
    elevation, azimuth = _horizon_track(observer, r_pef)

    passes: list[SatellitePass] = []
    in_pass = False
    aos = peak_time = start
    azimuth_aos = max_elevation = 0.0
    peak = 0

    for k, t in enumerate(times):
        if not valid[k]:
            continue
        el = float(elevation[k])

        if el >= min_elevation:
            if not in_pass:
                in_pass = True
                aos, azimuth_aos = t, float(azimuth[k])
                max_elevation, peak_time, peak = el, t, k
            elif el > max_elevation:
                max_elevation, peak_time, peak = el, t, k
        elif in_pass:
            in_pass = False
            passes.append(SatellitePass(
                aos=aos,
                los=t,
                max_elevation_time=peak_time,
                max_elevation=max_elevation,
                duration=(t - aos).total_seconds(),
                azimuth_aos=azimuth_aos,
                azimuth_los=float(azimuth[k]),
                visible=_is_visible(observer, r_pef[peak], peak_time),
            ))

    logger.debug("Found %d passes between %s and %s", len(passes), start, end)
    return passes


def look_angles_at(
    source: Satrec | ElementSet,
    observer: Observer,
    instant: datetime,
) -> LookAngles | None:
    """Current azimuth, elevation and range of a satellite.

    Args:
        source: Element set, or an already-initialized ``Satrec``.
        observer: Ground observer.
        instant: Instant (naive values are UTC).

    Returns:
        LookAngles, or ``None`` if the satellite cannot be propagated to
        *instant*.
    """
    satrec = as_satrec(source)
    jd, fraction = datetime_to_jd(instant)
    error, r_teme, _ = satrec.sgp4(jd, fraction)
    if error != 0:
        return None
    r_pef = positions_teme_to_pef(gmst(jd, fraction), np.asarray(r_teme) * KM2M)
    return look_angles(observer, r_pef)
