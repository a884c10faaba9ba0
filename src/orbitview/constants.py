"""
The `constants` module defines the physical constants and pipeline defaults used by orbitview.
"""

from jax.numpy import pi as PI

# Mathematical Constants

"""
Constant to convert degrees to radians. Equal to 2pi/360. Units: *rad/deg*
"""
DEG2RAD = 2.0 * PI / 360.0

"""
Constant to convert radians to degrees. Equal to 360/2pi. Units: *deg/rad*
"""
RAD2DEG = 360.0 / (PI * 2.0)

# Time Constants

"""
Julian Date of the J2000.0 epoch (2000-01-01 12:00:00). Units: *days*
"""
JD2000 = 2451545.0

"""
Seconds in one day. Units: *s*
"""
SECONDS_PER_DAY = 86400.0

# Physical Constants

"""
Speed of light in vacuum. Units: *m/s*

References:

1. D. Vallado, *Fundamentals of Astrodynamics and Applications (4th Ed.)*, 2010
"""
C_LIGHT = 299792458.0  # [m/s] Exact definition Vallado

"""
Astronomical Unit. Units: *m*

References:

1. P. Gérard and B. Luzum, *IERS Technical Note 36*, 2010
"""
AU = 1.49597870700e11  # [m] Astronomical Unit IAU 2010

# Earth Constants

"""
Earth's semi-major axis as defined by the WGS84 geodetic system. [m]

References:

1. NIMA Technical Report TR8350.2
"""
WGS84_a = 6378137.0  # WGS-84 semi-major axis

"""
Earth's ellipsoidal flattening.  WGS84 Value.

References:

1. NIMA Technical Report TR8350.2
"""
WGS84_f = 1.0 / 298.257223563  # WGS-84 flattening

"""
Earth's mean radius, used by the decay model's altitude bookkeeping. [km]
"""
R_EARTH_MEAN_KM = 6371.0

"""
Earth's gravitational parameter in kilometre units. [km^3/s^2]
"""
GM_EARTH_KM = 398600.4418

"""
Earth axial rotation rate. [rad/s]

References:

1. D. Vallado, *Fundamentals of Astrodynamics and Applications (4th Ed.)*, p. 222, 2010
"""
OMEGA_EARTH = 7.292115146706979e-5  # [rad/s] Taken from Vallado 4th Ed page 222

# Pipeline Defaults

"""
Propagator output (km) to renderer unit (m). [m/km]
"""
KM2M = 1000.0

"""
Default proximity link radius, 2,500 km expressed in metres. [m]
"""
DEFAULT_LINK_RADIUS = 2_500_000.0

"""
Default spatial hash cell edge. Matching the link radius keeps the
proximity query to the 27-cell neighborhood. [m]
"""
DEFAULT_CELL_SIZE = 2_500_000.0

"""
Default close-approach distance for the conjunction scanner. [m]
"""
DEFAULT_CONJUNCTION_THRESHOLD = 10_000.0
