"""Uniform-grid spatial hash over a position batch.

Space is partitioned into cubic cells of edge ``cell_size``; each cell key
is the triple of floored coordinates divided by the cell size.  The index
maps keys to the batch indices of the positions inside them.  Records with
non-finite positions are never inserted.

The index is an immutable snapshot of one batch: it is built from scratch
every frame and never updated incrementally.
"""

from __future__ import annotations

import itertools
import math
from collections.abc import Iterator
from dataclasses import dataclass

import numpy as np

from orbitview.pipeline.batch import positions_as_xyz, valid_mask

CellKey = tuple[int, int, int]


@dataclass(frozen=True)
class GridStats:
    """Occupancy summary of a spatial hash index.

    Attributes:
        bucket_count: Number of non-empty cells.
        average_occupancy: Mean number of positions per non-empty cell.
        max_occupancy: Largest number of positions in one cell.
    """

    bucket_count: int
    average_occupancy: float
    max_occupancy: int


def cell_key(position, cell_size: float) -> CellKey:
    """Cell key of a single position.

    Args:
        position: ``[x, y, z]`` in renderer units.
        cell_size: Cell edge in the same units.

    Returns:
        ``(floor(x / s), floor(y / s), floor(z / s))``.
    """
    x, y, z = (float(c) for c in position)
    return (
        math.floor(x / cell_size),
        math.floor(y / cell_size),
        math.floor(z / cell_size),
    )


def neighborhood_keys(key: CellKey, reach: int = 1) -> Iterator[CellKey]:
    """Yield the keys of the cube of cells around *key*.

    Args:
        key: Center cell.
        reach: Cells on each side; 1 gives the 27-cell neighborhood.

    Yields:
        Every key whose components differ from *key* by at most *reach*.
    """
    i, j, k = key
    offsets = range(-reach, reach + 1)
    for di, dj, dk in itertools.product(offsets, offsets, offsets):
        yield (i + di, j + dj, k + dk)


class SpatialHashIndex:
    """Cell key to batch-index buckets for one position batch.

    Use :meth:`build` to construct.

    Args:
        cell_size: Cell edge in renderer units.
        buckets: Mapping of cell key to batch indices.
    """

    def __init__(self, cell_size: float, buckets: dict[CellKey, tuple[int, ...]]) -> None:
        if not (math.isfinite(cell_size) and cell_size > 0.0):
            raise ValueError(f"cell_size must be a positive finite number, got {cell_size}")
        self._cell_size = float(cell_size)
        self._buckets = buckets

    @classmethod
    def build(cls, batch: np.ndarray, cell_size: float) -> SpatialHashIndex:
        """Index every finite position of *batch*.

        Args:
            batch: Flat position buffer.
            cell_size: Cell edge in renderer units.

        Returns:
            The populated index.
        """
        if not (math.isfinite(cell_size) and cell_size > 0.0):
            raise ValueError(f"cell_size must be a positive finite number, got {cell_size}")

        xyz = positions_as_xyz(batch)
        indices = np.flatnonzero(valid_mask(batch))
        # float64 division so keys agree with cell_key()
        keys = np.floor(xyz[indices].astype(np.float64) / float(cell_size)).astype(np.int64)

        grouped: dict[CellKey, list[int]] = {}
        for index, (i, j, k) in zip(indices.tolist(), keys.tolist()):
            grouped.setdefault((i, j, k), []).append(index)

        return cls(cell_size, {key: tuple(members) for key, members in grouped.items()})

    @property
    def cell_size(self) -> float:
        """Cell edge in renderer units."""
        return self._cell_size

    def __len__(self) -> int:
        return len(self._buckets)

    def __contains__(self, key: object) -> bool:
        return key in self._buckets

    def key_for(self, position) -> CellKey:
        """Cell key of *position* in this grid."""
        return cell_key(position, self._cell_size)

    def reach_for(self, radius: float) -> int:
        """Neighborhood reach that covers every point within *radius*."""
        return max(1, math.ceil(radius / self._cell_size))

    def bucket(self, key: CellKey) -> tuple[int, ...]:
        """Batch indices in cell *key*; empty when the cell is absent."""
        return self._buckets.get(key, ())

    def keys(self):
        """Keys of the non-empty cells."""
        return self._buckets.keys()

    def items(self):
        """``(key, indices)`` pairs of the non-empty cells."""
        return self._buckets.items()

    def stats(self) -> GridStats:
        """Occupancy statistics of the index."""
        if not self._buckets:
            return GridStats(0, 0.0, 0)
        sizes = [len(members) for members in self._buckets.values()]
        return GridStats(len(sizes), sum(sizes) / len(sizes), max(sizes))
