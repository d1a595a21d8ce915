"""
The `constants` module defines the mathematical and time constants shared by the TLE parser and the SGP4 propagator.
"""

from math import pi as PI

# Mathematical Constants
"""
Constant to convert degrees to radians. Equal to 2pi/360. Units: *rad/deg*
"""
DEG2RAD = 2.0 * PI / 360.0

"""
Constant to convert radians to degrees. Equal to 360/2pi. Units: *deg/rad*
"""
RAD2DEG = 360.0 / (PI * 2.0)

"""
Full revolution. Units: *rad*
"""
TWOPI = 2.0 * PI

# Time Constants

"""
Minutes per day. Units: *min/day*
"""
MIN_PER_DAY = 1440.0

"""
Seconds per day. Units: *s/day*
"""
SEC_PER_DAY = 86400.0

"""
Conversion from rad/min to rev/day, the unit of TLE mean motion. Equal to 1440/2pi. Units: *(rev/day)/(rad/min)*
"""
XPDOTP = MIN_PER_DAY / TWOPI

"""
Julian Date of 1949-12-31 00:00 UT, the zero point of the SGP4 "days since 1950" epoch. Units: *days*
"""
JD_1950 = 2433281.5

"""
Julian Date of the J2000.0 epoch (2000-01-01 12:00:00). Units: *days*
"""
JD2000 = 2451545.0

"""
Orbital period at and above which an orbit belongs to the deep-space (SDP4) regime. Units: *min*
"""
DEEP_SPACE_PERIOD = 225.0
