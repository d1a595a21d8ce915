"""
tlejax is a near-Earth SGP4 satellite propagator for Two-Line Element sets, implemented in JAX.

Importing tlejax turns on JAX's 64-bit mode (``jax_enable_x64``) for the
whole process, since propagation defaults to ``jnp.float64``. Other JAX code
in the same process will then create float64 arrays by default. Call
``tlejax.config.set_dtype(jnp.float32)`` to propagate in single precision.
"""

from .constants import (
    DEG2RAD,
    RAD2DEG,
    TWOPI,
    MIN_PER_DAY,
    SEC_PER_DAY,
    XPDOTP,
)

from .config import set_dtype, get_dtype, get_kepler_tolerance

from .sgp4 import (
    TLE,
    WGS72OLD,
    WGS72,
    WGS84,
    EarthGravity,
    ErrorKind,
    SGP4Error,
    InvalidElementsError,
    PropagationError,
    DeepSpaceUnsupportedError,
    parse_tle,
    sgp4_init,
    sgp4_propagate,
    sgp4_propagate_batch,
)
