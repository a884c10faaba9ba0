"""
Data types for catalog ingestion.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


@dataclass(frozen=True)
class ElementSet:
    """One tracked object's two-line element set.

    Immutable once ingested; a catalog refresh replaces the whole list.

    Attributes:
        identifier: Stable catalog identifier (normally the NORAD number).
        line1: First TLE line.
        line2: Second TLE line.
        name: Human-readable object name.
    """

    identifier: str
    line1: str
    line2: str
    name: str = ""


class ObjectCategory(enum.StrEnum):
    """Coarse orbit regime of a tracked object."""

    LEO = "LEO"
    MEO = "MEO"
    GEO = "GEO"
    HEO = "HEO"
    DEBRIS = "DEBRIS"
    UNKNOWN = "UNKNOWN"
