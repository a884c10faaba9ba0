"""Catalog module.

Ingests two-line element sets: text parsing, line validation, fixed-column
field access, orbit-regime classification, and a cached mirror client.
"""

from orbitview.catalog._client import (
    DEFAULT_MIRRORS,
    CatalogClient,
    download_tle_text,
    looks_like_tle,
)
from orbitview.catalog._tle import (
    catalog_number,
    classify_element_set,
    compute_checksum,
    parse_bstar,
    parse_eccentricity,
    parse_mean_motion,
    parse_tle_text,
    validate_element_set,
    validate_tle_line,
)
from orbitview.catalog._types import ElementSet, ObjectCategory

__all__ = [
    # Types
    "ElementSet",
    "ObjectCategory",
    # Parsing
    "parse_tle_text",
    "compute_checksum",
    "validate_tle_line",
    "validate_element_set",
    "catalog_number",
    "parse_bstar",
    "parse_mean_motion",
    "parse_eccentricity",
    "classify_element_set",
    # Client
    "DEFAULT_MIRRORS",
    "CatalogClient",
    "download_tle_text",
    "looks_like_tle",
]
