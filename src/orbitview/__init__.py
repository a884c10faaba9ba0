"""
orbitview computes Earth-fixed positions of whole satellite catalogs in real time, with spatial proximity and conjunction queries for rendering.
"""

from .constants import (
    DEG2RAD,
    RAD2DEG,
    JD2000,
    C_LIGHT,
    AU,
    WGS84_a,
    WGS84_f,
    R_EARTH_MEAN_KM,
    GM_EARTH_KM,
    OMEGA_EARTH,
    KM2M,
    DEFAULT_LINK_RADIUS,
    DEFAULT_CELL_SIZE,
    DEFAULT_CONJUNCTION_THRESHOLD,
)

from .config import set_dtype, get_dtype, get_buffer_dtype

from .time import (
    ensure_utc,
    caldate_to_jd,
    datetime_to_jd,
    jd_to_datetime,
    gmst,
    gmst_at,
)

from .frames import (
    rotation_teme_to_pef,
    rotation_pef_to_teme,
    positions_teme_to_pef,
    state_teme_to_pef,
)

from .coordinates import (
    position_geodetic_to_ecef,
    position_ecef_to_geodetic,
    Observer,
    LookAngles,
    look_angles,
)

from .catalog import (
    ElementSet,
    ObjectCategory,
    parse_tle_text,
    validate_element_set,
    classify_element_set,
    CatalogClient,
)

from .pipeline import (
    PipelineConfig,
    TLERecord,
    EphemerisRecord,
    PreparedCatalog,
    prepare_catalog,
    compute_position_batch,
    positions_as_xyz,
    valid_mask,
    SpatialHashIndex,
    GridStats,
    ConjunctionCandidate,
    proximity_query,
    scan_conjunctions,
    ComputationContext,
    ComputationWorker,
    FrameScheduler,
)

from .analysis import (
    sun_position_eci,
    sun_position_ecef,
    is_sunlit,
    SatellitePass,
    predict_passes,
    look_angles_at,
    DopplerResult,
    doppler_shift,
    DecayPrediction,
    predict_orbital_decay,
    decay_from_element_set,
    GroundTrack,
    ground_track,
    footprint_radius,
    SpaceWeather,
    fetch_space_weather,
    density_correction_factor,
)

__all__ = [
    # Constants
    "DEG2RAD",
    "RAD2DEG",
    "JD2000",
    "C_LIGHT",
    "AU",
    "WGS84_a",
    "WGS84_f",
    "R_EARTH_MEAN_KM",
    "GM_EARTH_KM",
    "OMEGA_EARTH",
    "KM2M",
    "DEFAULT_LINK_RADIUS",
    "DEFAULT_CELL_SIZE",
    "DEFAULT_CONJUNCTION_THRESHOLD",
    # Config
    "set_dtype",
    "get_dtype",
    "get_buffer_dtype",
    # Time
    "ensure_utc",
    "caldate_to_jd",
    "datetime_to_jd",
    "jd_to_datetime",
    "gmst",
    "gmst_at",
    # Frames
    "rotation_teme_to_pef",
    "rotation_pef_to_teme",
    "positions_teme_to_pef",
    "state_teme_to_pef",
    # Coordinates
    "position_geodetic_to_ecef",
    "position_ecef_to_geodetic",
    "Observer",
    "LookAngles",
    "look_angles",
    # Catalog
    "ElementSet",
    "ObjectCategory",
    "parse_tle_text",
    "validate_element_set",
    "classify_element_set",
    "CatalogClient",
    # Pipeline
    "PipelineConfig",
    "TLERecord",
    "EphemerisRecord",
    "PreparedCatalog",
    "prepare_catalog",
    "compute_position_batch",
    "positions_as_xyz",
    "valid_mask",
    "SpatialHashIndex",
    "GridStats",
    "ConjunctionCandidate",
    "proximity_query",
    "scan_conjunctions",
    "ComputationContext",
    "ComputationWorker",
    "FrameScheduler",
    # Analysis
    "sun_position_eci",
    "sun_position_ecef",
    "is_sunlit",
    "SatellitePass",
    "predict_passes",
    "look_angles_at",
    "DopplerResult",
    "doppler_shift",
    "DecayPrediction",
    "predict_orbital_decay",
    "decay_from_element_set",
    "GroundTrack",
    "ground_track",
    "footprint_radius",
    "SpaceWeather",
    "fetch_space_weather",
    "density_correction_factor",
]
