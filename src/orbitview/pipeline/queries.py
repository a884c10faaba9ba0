"""Proximity and conjunction queries over a spatial hash index.

Both queries read the position batch and its index and compare squared
distances against squared thresholds; square roots are only taken for the
distances they report.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from orbitview.pipeline.batch import positions_as_xyz
from orbitview.pipeline.spatial_hash import SpatialHashIndex, neighborhood_keys


@dataclass(frozen=True, order=True)
class ConjunctionCandidate:
    """A pair of records closer than the conjunction threshold.

    Attributes:
        first: Lower batch index of the pair.
        second: Higher batch index of the pair.
        distance: Separation in renderer units.
    """

    first: int
    second: int
    distance: float


def _gather(index: SpatialHashIndex, key, reach: int) -> np.ndarray:
    members = [i for nkey in neighborhood_keys(key, reach) for i in index.bucket(nkey)]
    return np.asarray(members, dtype=np.intp)


def _squared_distances(xyz: np.ndarray, candidates: np.ndarray, center: np.ndarray) -> np.ndarray:
    delta = xyz[candidates] - center
    return np.einsum("ij,ij->i", delta, delta)


def neighbors_within(
    index: SpatialHashIndex,
    batch: np.ndarray,
    focal_position,
    radius_sq: float,
    exclude: int | None = None,
) -> list[int]:
    """Indices of positions strictly within a squared radius of a point.

    Args:
        index: Spatial hash built from *batch*.
        batch: Flat position buffer.
        focal_position: Query point ``[x, y, z]``.
        radius_sq: Squared search radius.
        exclude: Batch index to leave out of the result, typically the
            record the query point belongs to.

    Returns:
        Ascending batch indices ``j`` with ``|p_j - focal|^2 < radius_sq``.
    """
    focal = np.asarray(focal_position, dtype=np.float64)
    if not np.all(np.isfinite(focal)):
        return []

    reach = index.reach_for(math.sqrt(radius_sq))
    candidates = _gather(index, index.key_for(focal), reach)
    if exclude is not None:
        candidates = candidates[candidates != exclude]
    if candidates.size == 0:
        return []

    xyz = positions_as_xyz(batch).astype(np.float64)
    d2 = _squared_distances(xyz, candidates, focal)
    return sorted(candidates[d2 < radius_sq].tolist())


def proximity_query(
    index: SpatialHashIndex,
    batch: np.ndarray,
    focal_index: int,
    radius: float,
) -> list[int]:
    """Records within *radius* of the record at *focal_index*.

    The focal record itself is never included.  A focal record without a
    finite position has no neighbors.

    Args:
        index: Spatial hash built from *batch*.
        batch: Flat position buffer.
        focal_index: Batch index of the selected record.
        radius: Link radius in renderer units.

    Returns:
        Ascending batch indices of the neighbors.

    Raises:
        IndexError: If *focal_index* is outside the batch.
    """
    xyz = positions_as_xyz(batch)
    if not 0 <= focal_index < xyz.shape[0]:
        raise IndexError(f"Focal index {focal_index} out of range for {xyz.shape[0]} records")
    return neighbors_within(index, batch, xyz[focal_index], radius * radius, exclude=focal_index)


def scan_conjunctions(
    index: SpatialHashIndex,
    batch: np.ndarray,
    threshold: float,
) -> list[ConjunctionCandidate]:
    """Every unordered pair of records closer than *threshold*.

    Each pair is reported once with ``first < second``.

    Args:
        index: Spatial hash built from *batch*.
        batch: Flat position buffer.
        threshold: Conjunction distance in renderer units.

    Returns:
        Candidates sorted by ``(first, second)``.
    """
    xyz = positions_as_xyz(batch).astype(np.float64)
    threshold_sq = threshold * threshold
    reach = index.reach_for(threshold)

    candidates: list[ConjunctionCandidate] = []
    for key, members in index.items():
        neighborhood = _gather(index, key, reach)
        for i in members:
            others = neighborhood[neighborhood > i]
            if others.size == 0:
                continue
            d2 = _squared_distances(xyz, others, xyz[i])
            hits = d2 < threshold_sq
            for j, dist_sq in zip(others[hits].tolist(), d2[hits].tolist()):
                candidates.append(ConjunctionCandidate(i, j, math.sqrt(dist_sq)))

    candidates.sort(key=lambda c: (c.first, c.second))
    return candidates


def separation(batch: np.ndarray, first: int, second: int) -> float:
    """Distance between two records of a batch; NaN if either has no position."""
    xyz = positions_as_xyz(batch)
    delta = xyz[first].astype(np.float64) - xyz[second].astype(np.float64)
    return float(np.sqrt(delta @ delta))
