"""Configuration for the position pipeline.

Provides :class:`PipelineConfig`, the frozen set of constants the
computation context works with: unit scaling, spatial hash cell size, and
the two query radii.  All lengths are in renderer units (metres by
default).
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from orbitview.constants import (
    DEFAULT_CELL_SIZE,
    DEFAULT_CONJUNCTION_THRESHOLD,
    DEFAULT_LINK_RADIUS,
    KM2M,
)


@dataclass(frozen=True)
class PipelineConfig:
    """Constants for one computation context.

    The spatial index widens the neighborhood it searches when a radius
    exceeds ``cell_size``, so any combination is correct; keeping
    ``cell_size >= link_radius`` keeps the proximity query at 27 cells.

    Args:
        unit_scale: Factor from propagator kilometres to renderer units.
        cell_size: Spatial hash cell edge.
        link_radius: Proximity link radius around the selected object.
        conjunction_threshold: Pair distance reported by the conjunction
            scanner.
        lazy_index: Build the spatial index only when a query needs it.
        verify_checksums: Drop element sets whose TLE checksums are wrong.

    Examples:
        ```python
        from orbitview.pipeline import PipelineConfig
        config = PipelineConfig(link_radius=1_000_000.0, cell_size=1_000_000.0)
        ```
    """

    unit_scale: float = KM2M
    cell_size: float = DEFAULT_CELL_SIZE
    link_radius: float = DEFAULT_LINK_RADIUS
    conjunction_threshold: float = DEFAULT_CONJUNCTION_THRESHOLD
    lazy_index: bool = True
    verify_checksums: bool = False

    def __post_init__(self) -> None:
        for name in ("unit_scale", "cell_size", "link_radius", "conjunction_threshold"):
            value = getattr(self, name)
            if not (math.isfinite(value) and value > 0.0):
                raise ValueError(f"{name} must be a positive finite number, got {value}")
