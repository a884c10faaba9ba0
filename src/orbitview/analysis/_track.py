"""Shared propagation helpers for the per-satellite analyses."""

from __future__ import annotations

from datetime import datetime

import jax.numpy as jnp
import numpy as np
from sgp4.api import Satrec

from orbitview.catalog import ElementSet
from orbitview.config import get_dtype
from orbitview.constants import KM2M
from orbitview.pipeline.records import prepare_tle_record
from orbitview.time import datetime_to_jd, gmst


def as_satrec(source: Satrec | ElementSet) -> Satrec:
    """Initialized propagator for an element set, or *source* itself."""
    if isinstance(source, ElementSet):
        return prepare_tle_record(source).satrec
    return source


def earth_fixed_track(satrec: Satrec, times: list[datetime]) -> tuple[np.ndarray, np.ndarray]:
    """Earth-fixed positions [m] at *times* and a mask of successful steps."""
    jd = np.empty(len(times))
    fr = np.empty(len(times))
    for k, t in enumerate(times):
        jd[k], fr[k] = datetime_to_jd(t)

    errors, r_teme, _ = satrec.sgp4_array(jd, fr)
    theta = jnp.asarray([gmst(a, b) for a, b in zip(jd, fr)], dtype=get_dtype())
    r = jnp.asarray(r_teme * KM2M, dtype=get_dtype())

    # Per-step rotation about z by GMST
    c, s = jnp.cos(theta), jnp.sin(theta)
    r_pef = jnp.stack([c * r[:, 0] + s * r[:, 1], -s * r[:, 0] + c * r[:, 1], r[:, 2]], axis=1)

    r_pef = np.asarray(r_pef, dtype=np.float64)
    valid = (errors == 0) & np.isfinite(r_pef).all(axis=1)
    return r_pef, valid
