"""Per-frame batch propagation into a flat Earth-fixed position buffer.

One call propagates every prepared record to a single instant, rotates the
TEME results into the Earth-fixed frame with one GMST evaluation, scales
them to renderer units, and writes them into a flat buffer
``[x0, y0, z0, x1, y1, z1, ...]`` index-aligned with the catalog.

A record that cannot be propagated gets NaN in all three slots; the batch
itself never fails because of one record.
"""

from __future__ import annotations

import logging
from datetime import datetime

import numpy as np

from orbitview.config import get_buffer_dtype
from orbitview.constants import KM2M
from orbitview.frames import positions_teme_to_pef
from orbitview.pipeline.records import PreparedCatalog
from orbitview.time import datetime_to_jd, gmst

logger = logging.getLogger(__name__)


def _propagate_tle_block(catalog: PreparedCatalog, jd: float, fraction: float, out: np.ndarray) -> int:
    """Write TEME positions [km] of the TLE records into *out*.

    Returns:
        Number of records that failed to propagate.
    """
    indices = catalog.tle_indices
    if indices.size == 0:
        return 0

    try:
        errors, r, _ = catalog.satrec_array.sgp4(np.array([jd]), np.array([fraction]))
    except Exception:
        logger.debug("Vectorized propagation failed; propagating records one by one", exc_info=True)
        return _propagate_tle_each(catalog, jd, fraction, out)

    positions = r[:, 0, :]
    ok = (errors[:, 0] == 0) & np.isfinite(positions).all(axis=1)
    out[indices[ok]] = positions[ok]
    return int(indices.size - np.count_nonzero(ok))


def _propagate_tle_each(catalog: PreparedCatalog, jd: float, fraction: float, out: np.ndarray) -> int:
    failures = 0
    for i in catalog.tle_indices.tolist():
        try:
            error, r, _ = catalog.records[i].satrec.sgp4(jd, fraction)
        except Exception:
            failures += 1
            continue
        if error != 0 or not np.all(np.isfinite(r)):
            failures += 1
            continue
        out[i] = r
    return failures


def compute_position_batch(
    catalog: PreparedCatalog,
    instant: datetime,
    unit_scale: float = KM2M,
) -> np.ndarray:
    """Compute the Earth-fixed position buffer for one instant.

    Args:
        catalog: Prepared records for the current generation.
        instant: Frame instant. Naive datetimes are taken as UTC.
        unit_scale: Factor from kilometres to renderer units.

    Returns:
        Flat array of length ``3 * len(catalog)`` in the configured buffer
        dtype.  Slots of records that failed to propagate are NaN.

    Examples:
        ```python
        from datetime import datetime, timezone
        batch = compute_position_batch(catalog, datetime.now(timezone.utc))
        xyz = positions_as_xyz(batch)
        ```
    """
    jd, fraction = datetime_to_jd(instant)
    theta = gmst(jd, fraction)

    r_teme = np.full((len(catalog), 3), np.nan, dtype=np.float64)
    failures = _propagate_tle_block(catalog, jd, fraction, r_teme)

    for i in catalog.ephemeris_indices:
        try:
            r_teme[i] = catalog.records[i].position_at(jd, fraction)
        except ValueError:
            failures += 1

    if failures:
        logger.debug("%d of %d records have no position at %s", failures, len(catalog), instant)

    r_pef = positions_teme_to_pef(theta, r_teme * unit_scale)
    return np.asarray(r_pef, dtype=get_buffer_dtype()).reshape(-1)


def positions_as_xyz(batch: np.ndarray) -> np.ndarray:
    """View a flat position buffer as an ``(N, 3)`` array."""
    return np.asarray(batch).reshape(-1, 3)


def valid_mask(batch: np.ndarray) -> np.ndarray:
    """Boolean mask of records whose position is finite.

    Args:
        batch: Flat position buffer.

    Returns:
        Array of shape ``(N,)``, ``True`` where all three coordinates are finite.
    """
    return np.isfinite(positions_as_xyz(batch)).all(axis=1)
