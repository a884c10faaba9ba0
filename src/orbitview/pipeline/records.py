"""Prepared records: element sets parsed once for per-frame propagation.

A prepared record is one of two variants:

- :class:`TLERecord` wraps an ``sgp4`` ``Satrec`` built from a two-line
  element set.
- :class:`EphemerisRecord` carries time-tagged inertial positions (for
  objects with no element set, e.g. deep-space probes) and interpolates
  between samples.

:class:`PreparedCatalog` holds the records for one catalog generation.  It
is built once on init, never mutated, and replaced wholesale when the
catalog changes.  It also keeps the ``SatrecArray`` over its TLE records so
a frame propagates them in one vectorized call.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np
from sgp4.api import Satrec, SatrecArray

from orbitview.catalog import ElementSet, validate_element_set

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class TLERecord:
    """An element set parsed into the propagator's representation.

    Attributes:
        identifier: Catalog identifier.
        satrec: Initialized SGP4 satellite record.
    """

    identifier: str
    satrec: Satrec


@dataclass(frozen=True, eq=False)
class EphemerisRecord:
    """An object described by sampled inertial positions.

    Positions are linearly interpolated between samples.  Instants outside
    ``[epochs_jd[0], epochs_jd[-1]]`` have no position.

    Attributes:
        identifier: Catalog identifier.
        epochs_jd: Strictly increasing sample times, full Julian Dates.
        positions_km: Inertial (TEME-aligned) positions, shape ``(M, 3)`` [km].
    """

    identifier: str
    epochs_jd: np.ndarray
    positions_km: np.ndarray

    def __post_init__(self) -> None:
        epochs = np.asarray(self.epochs_jd, dtype=np.float64)
        positions = np.asarray(self.positions_km, dtype=np.float64)
        if epochs.ndim != 1 or epochs.size < 2:
            raise ValueError("Ephemeris needs at least two sample epochs")
        if positions.shape != (epochs.size, 3):
            raise ValueError(
                f"Ephemeris positions must have shape ({epochs.size}, 3), got {positions.shape}"
            )
        if np.any(np.diff(epochs) <= 0.0):
            raise ValueError("Ephemeris epochs must be strictly increasing")
        epochs.setflags(write=False)
        positions.setflags(write=False)
        object.__setattr__(self, "epochs_jd", epochs)
        object.__setattr__(self, "positions_km", positions)

    def position_at(self, jd: float, fraction: float = 0.0) -> np.ndarray:
        """Interpolated inertial position at a split Julian Date.

        Args:
            jd: Julian Date (whole part).
            fraction: Fraction of a day.

        Returns:
            Position ``[x, y, z]`` in km.

        Raises:
            ValueError: If the instant lies outside the sampled span.
        """
        t = jd + fraction
        if not self.epochs_jd[0] <= t <= self.epochs_jd[-1]:
            raise ValueError(f"Instant JD {t} is outside the ephemeris span of {self.identifier}")
        return np.array([np.interp(t, self.epochs_jd, self.positions_km[:, k]) for k in range(3)])


PreparedRecord = TLERecord | EphemerisRecord


@dataclass(frozen=True, eq=False)
class PreparedCatalog:
    """The immutable record set for one catalog generation.

    Attributes:
        records: Prepared records; the position batch is index-aligned to it.
        dropped: Identifiers of element sets rejected at init.
    """

    records: tuple[PreparedRecord, ...]
    dropped: tuple[str, ...] = ()
    _index: dict[str, int] = field(init=False, repr=False)
    _tle_indices: np.ndarray = field(init=False, repr=False)
    _ephemeris_indices: tuple[int, ...] = field(init=False, repr=False)
    _satrec_array: SatrecArray | None = field(init=False, repr=False)

    def __post_init__(self) -> None:
        index: dict[str, int] = {}
        tle_indices: list[int] = []
        ephemeris_indices: list[int] = []

        for i, record in enumerate(self.records):
            index.setdefault(record.identifier, i)
            match record:
                case TLERecord():
                    tle_indices.append(i)
                case EphemerisRecord():
                    ephemeris_indices.append(i)
                case _:
                    raise TypeError(f"Unsupported record type: {type(record).__name__}")

        satrecs = [self.records[i].satrec for i in tle_indices]
        object.__setattr__(self, "_index", index)
        object.__setattr__(self, "_tle_indices", np.asarray(tle_indices, dtype=np.intp))
        object.__setattr__(self, "_ephemeris_indices", tuple(ephemeris_indices))
        object.__setattr__(self, "_satrec_array", SatrecArray(satrecs) if satrecs else None)

    def __len__(self) -> int:
        return len(self.records)

    @property
    def identifiers(self) -> tuple[str, ...]:
        """Record identifiers in batch order."""
        return tuple(record.identifier for record in self.records)

    @property
    def tle_indices(self) -> np.ndarray:
        """Batch indices of the TLE-backed records."""
        return self._tle_indices

    @property
    def ephemeris_indices(self) -> tuple[int, ...]:
        """Batch indices of the ephemeris-backed records."""
        return self._ephemeris_indices

    @property
    def satrec_array(self) -> SatrecArray | None:
        """Vectorized propagator over the TLE records, ``None`` if there are none."""
        return self._satrec_array

    def index_of(self, identifier: str | None) -> int | None:
        """Batch index of *identifier*, or ``None`` if absent."""
        if identifier is None:
            return None
        return self._index.get(identifier)


def prepare_tle_record(element_set: ElementSet, verify_checksum: bool = False) -> TLERecord:
    """Parse one element set into a :class:`TLERecord`.

    Args:
        element_set: Element set to parse.
        verify_checksum: Also check TLE line checksums.

    Returns:
        The prepared record.

    Raises:
        ValueError: If the element set is malformed or SGP4 init rejects it.
    """
    validate_element_set(element_set, verify_checksum)
    satrec = Satrec.twoline2rv(element_set.line1, element_set.line2)
    if satrec.error != 0:
        raise ValueError(
            f"SGP4 initialization failed for {element_set.identifier} (error code {satrec.error})"
        )
    if not satrec.no_kozai > 0.0:
        raise ValueError(f"Non-positive mean motion for {element_set.identifier}")
    return TLERecord(element_set.identifier, satrec)


def prepare_catalog(
    element_sets: Sequence[ElementSet],
    ephemerides: Sequence[EphemerisRecord] = (),
    verify_checksums: bool = False,
) -> PreparedCatalog:
    """Build the prepared record set for a catalog.

    Malformed element sets are dropped, never fatal; the caller learns the
    reduced count from the result.  Ephemeris records are appended after
    the TLE records.

    Args:
        element_sets: Element sets to prepare.
        ephemerides: Already-built ephemeris records.
        verify_checksums: Reject element sets with bad TLE checksums.

    Returns:
        PreparedCatalog with the surviving records.

    Raises:
        ValueError: If both inputs are empty.
    """
    if not element_sets and not ephemerides:
        raise ValueError("Cannot initialize from an empty catalog")

    records: list[PreparedRecord] = []
    dropped: list[str] = []

    for element_set in element_sets:
        try:
            records.append(prepare_tle_record(element_set, verify_checksums))
        except ValueError as err:
            dropped.append(element_set.identifier)
            logger.debug("Dropping element set %s: %s", element_set.identifier, err)

    records.extend(ephemerides)

    if dropped:
        logger.warning(
            "Dropped %d of %d element sets that failed to parse",
            len(dropped), len(element_sets),
        )

    return PreparedCatalog(tuple(records), tuple(dropped))
