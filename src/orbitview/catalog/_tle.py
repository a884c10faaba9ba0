"""
TLE text parsing and validation.

Provides pure-Python functions to split a catalog text (as served by
CelesTrak, Space-Track or AMSAT) into :class:`ElementSet` records, to
validate individual TLE lines, and to read the fixed-column fields the
analysis code needs (B* and mean motion) without a full SGP4 init.
"""

from __future__ import annotations

import logging
import re

from orbitview.catalog._types import ElementSet, ObjectCategory

logger = logging.getLogger(__name__)

_DEBRIS_MARKERS = ("DEBRIS", "ROCKET BODY", " DEB", "R/B", "OBJECT ")


def compute_checksum(line: str) -> int:
    """Compute the TLE checksum for a line.

    The checksum is the sum of all digit characters plus 1 for each
    minus sign, modulo 10, computed over the first 68 characters.

    Args:
        line: A TLE line string (at least 68 characters).

    Returns:
        The checksum digit (0-9).
    """
    return sum((int(c) if c.isdigit() else c == "-") for c in line[:68]) % 10


def validate_tle_line(line: str, line_number: int, verify_checksum: bool = True) -> None:
    """Validate a TLE line's format and, optionally, its checksum.

    Many published catalogs carry placeholder checksums, so the checksum
    test can be switched off while the structural checks stay on.

    Args:
        line: A TLE line string.
        line_number: Expected line number (1 or 2).
        verify_checksum: Also verify the trailing checksum digit.

    Raises:
        ValueError: If the line fails format or checksum validation.
    """
    line = line.rstrip()

    if len(line) < 69:
        raise ValueError(
            f"TLE line {line_number} is too short ({len(line)} chars, expected 69): {line}"
        )

    if line[0] != str(line_number) or line[1] != " ":
        raise ValueError(f"TLE line {line_number} does not start with '{line_number} ': {line}")

    if not verify_checksum:
        return

    checksum_char = line[68]
    if not checksum_char.isdigit():
        raise ValueError(f"TLE line {line_number} has a non-digit checksum '{checksum_char}'")

    expected = compute_checksum(line)
    if int(checksum_char) != expected:
        raise ValueError(
            f"TLE line {line_number} checksum mismatch: "
            f"expected {expected}, found {checksum_char}"
        )


def catalog_number(line: str) -> str:
    """Catalog number field (columns 3-7) of a TLE line, stripped."""
    return line[2:7].strip()


def validate_element_set(element_set: ElementSet, verify_checksum: bool = True) -> None:
    """Validate both lines of an element set and their agreement.

    Raises:
        ValueError: If either line is malformed or the two lines name
            different catalog numbers.
    """
    validate_tle_line(element_set.line1, 1, verify_checksum)
    validate_tle_line(element_set.line2, 2, verify_checksum)
    if catalog_number(element_set.line1) != catalog_number(element_set.line2):
        raise ValueError(
            f"TLE lines disagree on catalog number: "
            f"{catalog_number(element_set.line1)!r} vs {catalog_number(element_set.line2)!r}"
        )


def parse_tle_text(text: str) -> list[ElementSet]:
    """Split catalog text into element sets.

    Recognizes both the 3-line form (name, line 1, line 2; a leading ``0 ``
    on the name line is stripped) and the bare 2-line form.  Lines that fit
    neither form are skipped.  Identifiers are the catalog number from
    line 1; a missing or repeated number gets a deterministic
    ``SAT-<id>-<n>`` identifier so every record stays addressable.

    Args:
        text: Raw catalog text.

    Returns:
        Element sets in file order.
    """
    lines = [ln.strip() for ln in re.split(r"\r?\n", text)]
    lines = [ln for ln in lines if ln]

    element_sets: list[ElementSet] = []
    seen: set[str] = set()
    skipped = 0

    i = 0
    while i < len(lines):
        line = lines[i]

        if (i + 2 < len(lines)
                and lines[i + 1].startswith("1 ")
                and lines[i + 2].startswith("2 ")):
            name = line[2:].strip() if line.startswith("0 ") else line
            line1, line2 = lines[i + 1], lines[i + 2]
            i += 3
        elif (i + 1 < len(lines)
                and line.startswith("1 ")
                and lines[i + 1].startswith("2 ")):
            line1, line2 = line, lines[i + 1]
            name = f"SAT {catalog_number(line1)}"
            i += 2
        else:
            skipped += 1
            i += 1
            continue

        identifier = catalog_number(line1)
        if not identifier or identifier in seen:
            base = identifier or str(len(element_sets))
            suffix = 1
            while f"SAT-{base}-{suffix}" in seen:
                suffix += 1
            identifier = f"SAT-{base}-{suffix}"
        seen.add(identifier)

        element_sets.append(ElementSet(identifier, line1, line2, name))

    if skipped:
        logger.debug("Skipped %d unrecognized catalog lines", skipped)

    return element_sets


def parse_bstar(line1: str) -> float:
    """Parse the B* drag term from TLE line 1 (columns 54-61).

    The field uses an implied leading decimal point and a signed exponent,
    e.g. ``" 30142-3"`` is ``0.30142e-3``.

    Args:
        line1: First TLE line.

    Returns:
        B* in inverse Earth radii; ``0.0`` if the field is blank or unreadable.
    """
    field = line1[53:61].strip()
    if not field:
        return 0.0

    mantissa_str = field[:-2].strip()
    exponent_str = field[-2:].strip()
    digits = re.sub(r"[^0-9]", "", mantissa_str)
    if not digits:
        return 0.0

    try:
        mantissa = float(f"0.{digits}")
        exponent = int(exponent_str)
    except ValueError:
        return 0.0

    if mantissa_str.startswith("-"):
        mantissa = -mantissa
    return mantissa * 10.0 ** exponent


def parse_mean_motion(line2: str) -> float:
    """Mean motion from TLE line 2 (columns 53-63) [rev/day]."""
    return float(line2[52:63])


def parse_eccentricity(line2: str) -> float:
    """Eccentricity from TLE line 2 (columns 27-33, implied decimal point)."""
    return float(f"0.{line2[26:33].strip()}")


def classify_element_set(element_set: ElementSet) -> ObjectCategory:
    """Classify an object's orbit regime from its name and elements.

    Debris and rocket bodies are recognized by name first; otherwise the
    regime follows from mean motion (rev/day) and eccentricity.

    Args:
        element_set: Element set to classify.

    Returns:
        The object's category; ``UNKNOWN`` if line 2 cannot be read.
    """
    name = element_set.name.upper()
    if any(marker in name for marker in _DEBRIS_MARKERS):
        return ObjectCategory.DEBRIS

    try:
        mean_motion = parse_mean_motion(element_set.line2)
        eccentricity = parse_eccentricity(element_set.line2)
    except ValueError:
        return ObjectCategory.UNKNOWN

    if mean_motion > 11.25:
        return ObjectCategory.LEO
    if 0.9 < mean_motion < 1.1 and eccentricity < 0.1:
        return ObjectCategory.GEO
    if eccentricity > 0.25:
        return ObjectCategory.HEO
    return ObjectCategory.MEO
