"""
Near-Earth SGP4 orbit propagator implemented in JAX.

This module provides a JAX-native implementation of the SGP4 (Simplified
General Perturbations 4) propagator for Two-Line Element (TLE) sets. TLE
parsing and initialization run once in Python; propagation is a pure JAX
kernel that supports JIT compilation, ``vmap`` over time arrays, and
``grad``. Deep-space orbits (period of 225 minutes or more) are detected and
reported as unsupported.
"""

from tlejax.sgp4._constants import (
    GRAVITY_MODELS,
    WGS72,
    WGS72OLD,
    WGS84,
    EarthGravity,
    resolve_gravity,
)
from tlejax.sgp4._errors import (
    DeepSpaceUnsupportedError,
    EccentricityOutOfRangeError,
    ErrorKind,
    InvalidElementsError,
    NegativeMeanMotionError,
    NegativeSemilatusRectumError,
    OrbitalDecayError,
    PropagationError,
    SGP4Error,
    error_from_code,
)
from tlejax.sgp4._initialize import sgp4_init
from tlejax.sgp4._propagation import (
    pack_params,
    sgp4_propagate,
    sgp4_propagate_batch,
    sgp4_propagate_params,
)
from tlejax.sgp4._satellite import TLE
from tlejax.sgp4._tle import alpha5_to_int, compute_checksum, parse_tle, validate_tle_line
from tlejax.sgp4._types import (
    Classification,
    DerivedCoefficients,
    MeanElements,
    OrbitRegime,
    PropagationBatch,
    RecordStatus,
    SatelliteRecord,
    StateVector,
)

__all__ = [
    # Types
    "Classification",
    "MeanElements",
    "DerivedCoefficients",
    "OrbitRegime",
    "RecordStatus",
    "SatelliteRecord",
    "StateVector",
    "PropagationBatch",
    "EarthGravity",
    "TLE",
    # Constants
    "WGS72OLD",
    "WGS72",
    "WGS84",
    "GRAVITY_MODELS",
    "resolve_gravity",
    # Errors
    "ErrorKind",
    "SGP4Error",
    "InvalidElementsError",
    "PropagationError",
    "EccentricityOutOfRangeError",
    "NegativeMeanMotionError",
    "NegativeSemilatusRectumError",
    "OrbitalDecayError",
    "DeepSpaceUnsupportedError",
    "error_from_code",
    # TLE Parsing
    "parse_tle",
    "compute_checksum",
    "validate_tle_line",
    "alpha5_to_int",
    # Initialization and propagation
    "sgp4_init",
    "sgp4_propagate",
    "sgp4_propagate_batch",
    # JIT-compilable kernel
    "sgp4_propagate_params",
    "pack_params",
]
