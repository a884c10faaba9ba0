"""Worker boundary between the frame loop and the position computation.

The computation runs on a single background thread that owns a
:class:`ComputationContext`.  The consumer talks to it only through
immutable messages:

- :class:`InitRequest` replaces the catalog and answers
  :class:`InitComplete` (or :class:`WorkerError`).
- :class:`UpdateRequest` computes one frame and answers
  :class:`UpdateComplete` (or :class:`WorkerError`).

:class:`FrameScheduler` is the consumer side.  It keeps at most one frame
in flight, skips frame requests while the worker is busy, tags every
request with the catalog generation, and discards results that belong to
an older generation.

Examples:
    ```python
    from orbitview.pipeline import FrameScheduler

    with FrameScheduler() as scheduler:
        scheduler.load_catalog(element_sets)
        scheduler.select("25544")
        scheduler.request_frame()
        frame = scheduler.wait(timeout=1.0)
    ```
"""

from __future__ import annotations

import concurrent.futures
import logging
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone

import numpy as np

from orbitview.catalog import ElementSet
from orbitview.pipeline.batch import compute_position_batch
from orbitview.pipeline.config import PipelineConfig
from orbitview.pipeline.queries import ConjunctionCandidate, proximity_query, scan_conjunctions
from orbitview.pipeline.records import EphemerisRecord, PreparedCatalog, prepare_catalog
from orbitview.pipeline.spatial_hash import GridStats, SpatialHashIndex

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InitRequest:
    """Replace the worker's catalog."""

    generation: int
    element_sets: tuple[ElementSet, ...]
    ephemerides: tuple[EphemerisRecord, ...] = ()
    config: PipelineConfig = field(default_factory=PipelineConfig)


@dataclass(frozen=True)
class UpdateRequest:
    """Compute one frame.

    Attributes:
        generation: Catalog generation the request was issued for.
        instant: Frame instant.
        focal_identifier: Selected record, or ``None`` for no selection.
        enable_conjunctions: Run the all-pairs conjunction scan.
    """

    generation: int
    instant: datetime
    focal_identifier: str | None = None
    enable_conjunctions: bool = False


@dataclass(frozen=True)
class InitComplete:
    """Catalog accepted.

    Attributes:
        generation: Generation of the new catalog.
        record_count: Number of records that survived parsing.
        identifiers: Record identifiers in batch order.
        dropped: Identifiers of rejected element sets.
    """

    generation: int
    record_count: int
    identifiers: tuple[str, ...]
    dropped: tuple[str, ...] = ()


@dataclass(frozen=True, eq=False)
class UpdateComplete:
    """Result of one frame.

    ``positions`` is a fresh buffer; the consumer owns it.

    Attributes:
        generation: Generation of the catalog the frame was computed from.
        instant: Frame instant.
        positions: Flat Earth-fixed position buffer.
        record_count: Records in the catalog; ``positions`` holds three
            values per record.
        focal_index: Batch index of the selected record, ``None`` if no
            record is selected or the identifier is unknown.
        neighbors: Batch indices within the link radius of the focal record.
        conjunctions: Close pairs, empty unless requested.
        grid_stats: Occupancy of the spatial index, ``None`` unless
            conjunction screening was requested.
    """

    generation: int
    instant: datetime
    positions: np.ndarray
    record_count: int
    focal_index: int | None = None
    neighbors: tuple[int, ...] = ()
    conjunctions: tuple[ConjunctionCandidate, ...] = ()
    grid_stats: GridStats | None = None


@dataclass(frozen=True)
class WorkerError:
    """A request failed inside the worker."""

    generation: int
    message: str


WorkerRequest = InitRequest | UpdateRequest
WorkerResponse = InitComplete | UpdateComplete | WorkerError


# ---------------------------------------------------------------------------
# Worker side
# ---------------------------------------------------------------------------


class ComputationContext:
    """State owned by the worker: the prepared catalog and its configuration.

    All computation state lives on this object; nothing is module-global.
    """

    def __init__(self) -> None:
        self._catalog: PreparedCatalog | None = None
        self._config = PipelineConfig()
        self._generation: int | None = None

    @property
    def initialized(self) -> bool:
        """Whether a catalog has been loaded."""
        return self._catalog is not None

    @property
    def catalog(self) -> PreparedCatalog | None:
        """The current prepared catalog."""
        return self._catalog

    @property
    def config(self) -> PipelineConfig:
        """The active configuration."""
        return self._config

    def initialize(self, request: InitRequest) -> InitComplete:
        """Prepare the catalog carried by *request*.

        The previous catalog stays active if preparation fails.

        Raises:
            ValueError: If the request holds no records.
        """
        catalog = prepare_catalog(
            request.element_sets,
            request.ephemerides,
            verify_checksums=request.config.verify_checksums,
        )
        self._catalog = catalog
        self._config = request.config
        self._generation = request.generation
        logger.info(
            "Catalog generation %d ready: %d records (%d dropped)",
            request.generation, len(catalog), len(catalog.dropped),
        )
        return InitComplete(request.generation, len(catalog), catalog.identifiers, catalog.dropped)

    def compute(self, request: UpdateRequest) -> UpdateComplete:
        """Compute the frame described by *request*.

        Raises:
            RuntimeError: If no catalog has been loaded.
        """
        if self._catalog is None:
            raise RuntimeError("Update requested before the catalog was initialized")

        catalog = self._catalog
        config = self._config
        positions = compute_position_batch(catalog, request.instant, config.unit_scale)

        focal_index = catalog.index_of(request.focal_identifier)
        needs_index = focal_index is not None or request.enable_conjunctions
        if config.lazy_index and not needs_index:
            return UpdateComplete(
                self._generation, request.instant, positions, len(catalog), focal_index,
            )

        index = SpatialHashIndex.build(positions, config.cell_size)
        neighbors: list[int] = []
        if focal_index is not None:
            neighbors = proximity_query(index, positions, focal_index, config.link_radius)
        conjunctions: list[ConjunctionCandidate] = []
        if request.enable_conjunctions:
            conjunctions = scan_conjunctions(index, positions, config.conjunction_threshold)

        return UpdateComplete(
            self._generation,
            request.instant,
            positions,
            len(catalog),
            focal_index,
            tuple(neighbors),
            tuple(conjunctions),
            index.stats() if request.enable_conjunctions else None,
        )

    def handle(self, message: WorkerRequest) -> WorkerResponse:
        """Dispatch one message; any failure is answered with :class:`WorkerError`.

        Bad input and a missing catalog are logged as one line; anything
        else is logged with its traceback.
        """
        try:
            match message:
                case InitRequest():
                    return self.initialize(message)
                case UpdateRequest():
                    return self.compute(message)
                case _:
                    raise ValueError(f"Unknown message type: {type(message).__name__}")
        except (ValueError, RuntimeError) as err:
            logger.error("Worker request failed: %s", err)
            return WorkerError(getattr(message, "generation", -1), str(err))
        except Exception as err:
            logger.error("Worker request failed unexpectedly: %r", err, exc_info=True)
            return WorkerError(getattr(message, "generation", -1), f"{type(err).__name__}: {err}")


class ComputationWorker:
    """A single background thread processing messages in order.

    Args:
        context: State the worker computes with. A fresh
            :class:`ComputationContext` when omitted.
    """

    def __init__(self, context: ComputationContext | None = None) -> None:
        self._context = context if context is not None else ComputationContext()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="orbitview-worker")

    def post(self, message: WorkerRequest) -> Future:
        """Queue *message*; the future resolves to the response message."""
        return self._executor.submit(self._context.handle, message)

    def close(self) -> None:
        """Stop the worker thread, dropping queued messages."""
        self._executor.shutdown(wait=True, cancel_futures=True)

    def __enter__(self) -> ComputationWorker:
        return self

    def __exit__(self, *exc) -> None:
        self.close()


# ---------------------------------------------------------------------------
# Consumer side
# ---------------------------------------------------------------------------


class FrameScheduler:
    """Drives a :class:`ComputationWorker` from a frame loop.

    Args:
        worker: Worker to drive. A private one is created when omitted and
            closed by :meth:`close`.
    """

    def __init__(self, worker: ComputationWorker | None = None) -> None:
        self._owns_worker = worker is None
        self._worker = worker if worker is not None else ComputationWorker()
        self._generation = 0
        self._init_future: Future | None = None
        self._catalog_info: InitComplete | None = None
        self._pending: Future | None = None
        self._latest: UpdateComplete | None = None
        self._focal_identifier: str | None = None
        self._enable_conjunctions = False

    @property
    def generation(self) -> int:
        """Generation of the most recently loaded catalog."""
        return self._generation

    @property
    def busy(self) -> bool:
        """Whether a frame is in flight."""
        return self._pending is not None

    @property
    def catalog_info(self) -> InitComplete | None:
        """Init result of the current catalog, once the worker has answered."""
        self._collect_init()
        return self._catalog_info

    @property
    def latest(self) -> UpdateComplete | None:
        """Most recent accepted frame."""
        return self._latest

    def load_catalog(
        self,
        element_sets: Sequence[ElementSet],
        ephemerides: Sequence[EphemerisRecord] = (),
        config: PipelineConfig | None = None,
    ) -> Future:
        """Send a new catalog to the worker.

        Frames computed from earlier catalogs are discarded from now on.

        Returns:
            Future resolving to :class:`InitComplete` or :class:`WorkerError`.
        """
        self._generation += 1
        self._catalog_info = None
        self._latest = None
        self._init_future = self._worker.post(
            InitRequest(
                self._generation,
                tuple(element_sets),
                tuple(ephemerides),
                config if config is not None else PipelineConfig(),
            )
        )
        logger.debug("Posted catalog generation %d (%d element sets)", self._generation, len(element_sets))
        return self._init_future

    def select(self, identifier: str | None) -> None:
        """Set the focal record for subsequent frames, ``None`` to clear."""
        self._focal_identifier = identifier

    def set_conjunctions(self, enabled: bool) -> None:
        """Enable or disable the conjunction scan for subsequent frames."""
        self._enable_conjunctions = enabled

    def request_frame(self, instant: datetime | None = None) -> bool:
        """Request a frame unless one is already in flight.

        Args:
            instant: Frame instant. Default: now (UTC).

        Returns:
            ``True`` if a request was posted, ``False`` if the frame was skipped.

        Raises:
            RuntimeError: If no catalog has been loaded.
        """
        if self._init_future is None:
            raise RuntimeError("No catalog loaded")
        if self._pending is not None:
            return False
        if instant is None:
            instant = datetime.now(timezone.utc)
        self._pending = self._worker.post(
            UpdateRequest(
                self._generation,
                instant,
                self._focal_identifier,
                self._enable_conjunctions,
            )
        )
        return True

    def poll(self) -> UpdateComplete | None:
        """Collect the in-flight frame if it has finished.

        Returns:
            The frame, or ``None`` if nothing finished or the result was stale.

        Raises:
            RuntimeError: If the worker reported an error.
        """
        self._collect_init()
        if self._pending is None or not self._pending.done():
            return None
        future, self._pending = self._pending, None
        return self._accept(future.result())

    def wait(self, timeout: float | None = None) -> UpdateComplete | None:
        """Block until the in-flight frame finishes, then :meth:`poll`."""
        if self._pending is not None:
            concurrent.futures.wait([self._pending], timeout=timeout)
        return self.poll()

    def close(self) -> None:
        """Close the worker if this scheduler created it."""
        if self._owns_worker:
            self._worker.close()

    def __enter__(self) -> FrameScheduler:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _collect_init(self) -> None:
        future = self._init_future
        if future is None or self._catalog_info is not None or not future.done():
            return
        result = future.result()
        if isinstance(result, WorkerError):
            self._init_future = None
            raise RuntimeError(f"Catalog initialization failed: {result.message}")
        if result.generation == self._generation:
            self._catalog_info = result

    def _accept(self, result: WorkerResponse) -> UpdateComplete | None:
        if isinstance(result, WorkerError):
            raise RuntimeError(f"Frame computation failed: {result.message}")

        info = self._catalog_info
        if result.generation != self._generation or info is None:
            logger.warning(
                "Discarding frame from catalog generation %s (current %d)",
                result.generation, self._generation,
            )
            return None
        if result.positions.size != 3 * info.record_count:
            logger.warning(
                "Discarding frame with %d values for %d records",
                result.positions.size, info.record_count,
            )
            return None

        self._latest = result
        return result
