"""Doppler shift of a satellite signal seen from the ground.

Classical (non-relativistic) first-order Doppler:

    shift = -(v_r / c) * f0

where ``v_r`` is the range rate, the satellite's Earth-fixed velocity
projected on the observer-to-satellite unit vector.  A receding satellite
(``v_r > 0``) lowers the received frequency.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import jax.numpy as jnp
import numpy as np
from jax.typing import ArrayLike
from sgp4.api import Satrec

from orbitview.analysis._track import as_satrec
from orbitview.catalog import ElementSet
from orbitview.config import get_dtype
from orbitview.constants import C_LIGHT, KM2M
from orbitview.coordinates import Observer
from orbitview.frames import state_teme_to_pef
from orbitview.time import datetime_to_jd, gmst

COMMON_FREQUENCIES: dict[str, float] = {
    "ISS_VOICE": 145_800_000.0,
    "ISS_PACKET": 145_825_000.0,
    "NOAA_APT": 137_100_000.0,
    "METEOR_LRPT": 137_900_000.0,
    "STARLINK_KU": 12_000_000_000.0,
    "GPS_L1": 1_575_420_000.0,
    "IRIDIUM": 1_626_000_000.0,
}
"""Downlink frequencies of well-known services [Hz]."""


@dataclass(frozen=True)
class DopplerResult:
    """Doppler geometry and shift for one instant.

    Attributes:
        range_km: Observer-satellite distance [km].
        range_rate: Range rate [m/s], positive when receding.
        shift_hz: Frequency shift [Hz].
        received_hz: Received frequency [Hz].
        shift_ppm: Shift relative to the transmitted frequency [ppm].
        approaching: Whether the range is decreasing.
    """

    range_km: float
    range_rate: float
    shift_hz: float
    received_hz: float
    shift_ppm: float
    approaching: bool


def doppler_shift(
    r_sat_ecef: ArrayLike,
    v_sat_ecef: ArrayLike,
    observer: Observer,
    frequency_hz: float,
) -> DopplerResult:
    """Doppler shift of a transmission from a satellite.

    Args:
        r_sat_ecef: Earth-fixed satellite position [m].
        v_sat_ecef: Earth-fixed satellite velocity [m/s].
        observer: Ground observer.
        frequency_hz: Transmitted frequency [Hz].

    Returns:
        DopplerResult.

    Raises:
        ValueError: If *frequency_hz* is not positive or the satellite
            coincides with the observer.
    """
    if not frequency_hz > 0.0:
        raise ValueError(f"Frequency must be positive, got {frequency_hz}")

    _float = get_dtype()
    r = jnp.asarray(r_sat_ecef, dtype=_float)
    v = jnp.asarray(v_sat_ecef, dtype=_float)

    rho = r - observer.ecef()
    rng = float(jnp.linalg.norm(rho))
    if rng == 0.0:
        raise ValueError("Satellite position coincides with the observer")

    range_rate = float(jnp.dot(v, rho)) / rng
    shift = -(range_rate / C_LIGHT) * frequency_hz

    return DopplerResult(
        range_km=rng / KM2M,
        range_rate=range_rate,
        shift_hz=shift,
        received_hz=frequency_hz + shift,
        shift_ppm=shift / frequency_hz * 1e6,
        approaching=range_rate < 0.0,
    )


def doppler_at(
    source: Satrec | ElementSet,
    observer: Observer,
    instant: datetime,
    frequency_hz: float,
) -> DopplerResult | None:
    """Propagate a satellite to *instant* and compute its Doppler shift.

    Args:
        source: Element set, or an already-initialized ``Satrec``.
        observer: Ground observer.
        instant: Instant (naive values are UTC).
        frequency_hz: Transmitted frequency [Hz].

    Returns:
        DopplerResult, or ``None`` if propagation fails.
    """
    satrec = as_satrec(source)
    jd, fraction = datetime_to_jd(instant)
    error, r, v = satrec.sgp4(jd, fraction)
    if error != 0:
        return None

    x_teme = np.concatenate([r, v]) * KM2M
    x_pef = state_teme_to_pef(gmst(jd, fraction), x_teme)
    return doppler_shift(x_pef[:3], x_pef[3:6], observer, frequency_hz)


def format_frequency(frequency_hz: float) -> str:
    """Format a frequency with a GHz/MHz/kHz/Hz unit."""
    if frequency_hz >= 1e9:
        return f"{frequency_hz / 1e9:.6f} GHz"
    if frequency_hz >= 1e6:
        return f"{frequency_hz / 1e6:.6f} MHz"
    if frequency_hz >= 1e3:
        return f"{frequency_hz / 1e3:.3f} kHz"
    return f"{frequency_hz:.1f} Hz"


def format_doppler_shift(shift_hz: float) -> str:
    """Format a signed frequency shift, e.g. ``"+3.412 kHz"``."""
    sign = "+" if shift_hz >= 0 else "-"
    magnitude = abs(shift_hz)
    if magnitude >= 1e6:
        return f"{sign}{magnitude / 1e6:.3f} MHz"
    if magnitude >= 1e3:
        return f"{sign}{magnitude / 1e3:.3f} kHz"
    return f"{sign}{magnitude:.1f} Hz"
