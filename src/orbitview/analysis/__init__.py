"""Satellite analysis algorithms.

- **Sun**: analytical Sun vector and cylindrical-shadow illumination.
- **Passes**: AOS/LOS pass prediction and look angles for an observer.
- **Doppler**: range rate and frequency shift of a downlink.
- **Decay**: drag-driven orbital lifetime estimate.
- **Ground track**: sub-satellite trace and coverage footprints.
- **Space weather**: NOAA activity indices and the drag density factor.
"""

from .decay import (
    DENSITY_LAYERS,
    DecayPrediction,
    RiskLevel,
    atmospheric_density,
    decay_from_element_set,
    format_lifetime,
    predict_orbital_decay,
    risk_level,
    semi_major_axis_from_mean_motion,
)
from .doppler import (
    COMMON_FREQUENCIES,
    DopplerResult,
    doppler_at,
    doppler_shift,
    format_doppler_shift,
    format_frequency,
)
from .ground_track import (
    VISIBILITY_ELEVATIONS,
    GroundTrack,
    GroundTrackPoint,
    footprint_circle,
    footprint_radius,
    great_circle_distance,
    ground_track,
    is_within_footprint,
    subsatellite_point,
    visibility_zones,
)
from .passes import TWILIGHT_ELEVATION, SatellitePass, look_angles_at, predict_passes
from .space_weather import (
    SpaceWeather,
    SpaceWeatherCondition,
    density_correction_factor,
    fetch_space_weather,
    kp_to_ap,
    parse_f107_json,
    parse_kp_json,
    space_weather_condition,
    static_space_weather,
)
from .sun import is_sunlit, sun_position_ecef, sun_position_eci

__all__ = [
    # Sun
    "sun_position_eci",
    "sun_position_ecef",
    "is_sunlit",
    # Passes
    "TWILIGHT_ELEVATION",
    "SatellitePass",
    "predict_passes",
    "look_angles_at",
    # Doppler
    "COMMON_FREQUENCIES",
    "DopplerResult",
    "doppler_shift",
    "doppler_at",
    "format_frequency",
    "format_doppler_shift",
    # Decay
    "DENSITY_LAYERS",
    "DecayPrediction",
    "RiskLevel",
    "atmospheric_density",
    "risk_level",
    "predict_orbital_decay",
    "semi_major_axis_from_mean_motion",
    "decay_from_element_set",
    "format_lifetime",
    # Ground track
    "VISIBILITY_ELEVATIONS",
    "GroundTrack",
    "GroundTrackPoint",
    "subsatellite_point",
    "ground_track",
    "footprint_radius",
    "footprint_circle",
    "visibility_zones",
    "great_circle_distance",
    "is_within_footprint",
    # Space weather
    "SpaceWeather",
    "SpaceWeatherCondition",
    "static_space_weather",
    "kp_to_ap",
    "space_weather_condition",
    "density_correction_factor",
    "parse_f107_json",
    "parse_kp_json",
    "fetch_space_weather",
]
