"""Position pipeline.

Prepares a catalog once, then per frame propagates every record to one
instant, rotates the results into the Earth-fixed frame, indexes them in a
uniform spatial hash, and answers proximity and conjunction queries.  The
work runs behind a single-threaded worker boundary with back-pressure.
"""

from orbitview.pipeline.batch import compute_position_batch, positions_as_xyz, valid_mask
from orbitview.pipeline.config import PipelineConfig
from orbitview.pipeline.queries import (
    ConjunctionCandidate,
    neighbors_within,
    proximity_query,
    scan_conjunctions,
    separation,
)
from orbitview.pipeline.records import (
    EphemerisRecord,
    PreparedCatalog,
    PreparedRecord,
    TLERecord,
    prepare_catalog,
    prepare_tle_record,
)
from orbitview.pipeline.spatial_hash import (
    CellKey,
    GridStats,
    SpatialHashIndex,
    cell_key,
    neighborhood_keys,
)
from orbitview.pipeline.worker import (
    ComputationContext,
    ComputationWorker,
    FrameScheduler,
    InitComplete,
    InitRequest,
    UpdateComplete,
    UpdateRequest,
    WorkerError,
)

__all__ = [
    # Configuration
    "PipelineConfig",
    # Records
    "TLERecord",
    "EphemerisRecord",
    "PreparedRecord",
    "PreparedCatalog",
    "prepare_catalog",
    "prepare_tle_record",
    # Batch
    "compute_position_batch",
    "positions_as_xyz",
    "valid_mask",
    # Spatial hash
    "CellKey",
    "GridStats",
    "SpatialHashIndex",
    "cell_key",
    "neighborhood_keys",
    # Queries
    "ConjunctionCandidate",
    "neighbors_within",
    "proximity_query",
    "scan_conjunctions",
    "separation",
    # Worker
    "InitRequest",
    "UpdateRequest",
    "InitComplete",
    "UpdateComplete",
    "WorkerError",
    "ComputationContext",
    "ComputationWorker",
    "FrameScheduler",
]
