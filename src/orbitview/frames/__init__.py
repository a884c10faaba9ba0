"""Frame transformations.

Converts SGP4 output from the inertial TEME frame to the rotating,
Earth-fixed PEF frame using Greenwich Mean Sidereal Time.
"""

from .teme import (
    positions_teme_to_pef,
    rotation_pef_to_teme,
    rotation_teme_to_pef,
    rotation_z,
    state_teme_to_pef,
)

__all__ = [
    "rotation_z",
    "rotation_teme_to_pef",
    "rotation_pef_to_teme",
    "positions_teme_to_pef",
    "state_teme_to_pef",
]
