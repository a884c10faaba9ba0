"""Sun position and satellite illumination.

Low-precision analytical Sun vector from the Astronomical Almanac series
(about 0.01 deg in direction over 1950-2050) and the cylindrical Earth
shadow test used to decide whether a pass is optically visible.
"""

from __future__ import annotations

from datetime import datetime

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from orbitview.config import get_dtype
from orbitview.constants import AU, DEG2RAD, JD2000, WGS84_a
from orbitview.frames import positions_teme_to_pef
from orbitview.time import datetime_to_jd, gmst


def sun_position_eci(instant: datetime) -> Array:
    """Position of the Sun in an Earth-centred inertial frame.

    Args:
        instant: Instant (naive values are UTC).

    Returns:
        Sun position ``[x, y, z]`` in *m*.

    Examples:
        ```python
        from datetime import datetime, timezone
        r_sun = sun_position_eci(datetime(2024, 3, 20, tzinfo=timezone.utc))
        float(jnp.linalg.norm(r_sun))  # ~1 AU
        ```

    References:

        1. U.S. Naval Observatory, *The Astronomical Almanac*, "Low precision
           formulas for the Sun", section C.
    """
    jd, fraction = datetime_to_jd(instant)
    n = (jd - JD2000) + fraction

    _float = get_dtype()

    # Mean longitude and mean anomaly [deg]
    L = (280.460 + 0.9856474 * n) % 360.0
    g = ((357.528 + 0.9856003 * n) % 360.0) * DEG2RAD

    # Ecliptic longitude and obliquity [rad]
    lam = (L + 1.915 * jnp.sin(g) + 0.020 * jnp.sin(2.0 * g)) * DEG2RAD
    eps = (23.439 - 4.0e-7 * n) * DEG2RAD

    r = (1.00014 - 0.01671 * jnp.cos(g) - 0.00014 * jnp.cos(2.0 * g)) * AU

    return jnp.array([
        r * jnp.cos(lam),
        r * jnp.sin(lam) * jnp.cos(eps),
        r * jnp.sin(lam) * jnp.sin(eps),
    ], dtype=_float)


def sun_position_ecef(instant: datetime) -> Array:
    """Sun position rotated into the Earth-fixed frame by GMST [m]."""
    jd, fraction = datetime_to_jd(instant)
    return positions_teme_to_pef(gmst(jd, fraction), sun_position_eci(instant))


def is_sunlit(r_object: ArrayLike, r_sun: ArrayLike) -> bool:
    """Whether an object is illuminated, using a cylindrical shadow.

    The object is lit when it is on the day side of the Earth, or on the
    night side but farther than one Earth radius from the Earth-Sun axis.
    Both vectors must be in the same frame and length unit (*m*).

    Args:
        r_object: Object position ``[x, y, z]``.
        r_sun: Sun position ``[x, y, z]``.

    Returns:
        ``True`` if sunlit.
    """
    _float = get_dtype()
    r = jnp.asarray(r_object, dtype=_float)[:3]
    r_s = jnp.asarray(r_sun, dtype=_float)

    e_sun = r_s / jnp.linalg.norm(r_s)
    r_proj = jnp.dot(r, e_sun)
    if r_proj > 0.0:
        return True

    # Squared distance from the shadow axis
    r_perp_sq = jnp.dot(r, r) - r_proj * r_proj
    return bool(r_perp_sq > WGS84_a * WGS84_a)
