"""
Error taxonomy shared by the TLE parser, the initializer, and the propagator.

Two families are kept apart: :class:`InvalidElementsError` for malformed TLE
text, and :class:`PropagationError` subclasses for degenerate or decayed
geometry. Numeric codes follow the reference SGP4 implementation so results
can be cross-checked against it; the JAX kernel reports these codes as
integers and :func:`error_from_code` turns them back into exceptions.
"""

from __future__ import annotations

import enum


class ErrorKind(enum.IntEnum):
    """Kinds of terminal SGP4 failure.

    Values match the ``error`` codes of the reference SGP4 implementation
    (Vallado et al., 2006) where one exists.
    """

    ECCENTRICITY_OUT_OF_RANGE = 1
    NEGATIVE_MEAN_MOTION = 2
    NEGATIVE_SEMILATUS_RECTUM = 4
    ORBITAL_DECAY = 6
    INVALID_ELEMENTS = 7


class SGP4Error(Exception):
    """Base class for all tlejax SGP4 errors.

    Attributes:
        kind: The :class:`ErrorKind` of the failure, or ``None`` for
            conditions outside the taxonomy (deep-space orbits).
    """

    kind: ErrorKind | None = None


class InvalidElementsError(SGP4Error, ValueError):
    """A TLE line or field could not be parsed or failed validation."""

    kind = ErrorKind.INVALID_ELEMENTS


class PropagationError(SGP4Error):
    """Base class for physics-domain failures during init or propagation."""


class EccentricityOutOfRangeError(PropagationError):
    """Mean eccentricity is negative or not below one."""

    kind = ErrorKind.ECCENTRICITY_OUT_OF_RANGE


class NegativeMeanMotionError(PropagationError):
    """Mean motion is zero or negative."""

    kind = ErrorKind.NEGATIVE_MEAN_MOTION


class NegativeSemilatusRectumError(PropagationError):
    """Semilatus rectum a(1 - e^2) is not positive."""

    kind = ErrorKind.NEGATIVE_SEMILATUS_RECTUM


class OrbitalDecayError(PropagationError):
    """Propagated radius fell below one earth radius."""

    kind = ErrorKind.ORBITAL_DECAY


class DeepSpaceUnsupportedError(SGP4Error):
    """Orbit period is at least 225 minutes; SDP4 is not implemented."""


_ERROR_CLASSES: dict[ErrorKind, type[SGP4Error]] = {
    ErrorKind.ECCENTRICITY_OUT_OF_RANGE: EccentricityOutOfRangeError,
    ErrorKind.NEGATIVE_MEAN_MOTION: NegativeMeanMotionError,
    ErrorKind.NEGATIVE_SEMILATUS_RECTUM: NegativeSemilatusRectumError,
    ErrorKind.ORBITAL_DECAY: OrbitalDecayError,
    ErrorKind.INVALID_ELEMENTS: InvalidElementsError,
}

_DEFAULT_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.ECCENTRICITY_OUT_OF_RANGE: "mean eccentricity is outside the range 0 <= e < 1",
    ErrorKind.NEGATIVE_MEAN_MOTION: "mean motion is less than or equal to zero",
    ErrorKind.NEGATIVE_SEMILATUS_RECTUM: "semilatus rectum is less than zero",
    ErrorKind.ORBITAL_DECAY: "satellite has decayed below the earth's surface",
    ErrorKind.INVALID_ELEMENTS: "invalid orbital elements",
}


def default_message(kind: ErrorKind) -> str:
    """Return the standard description of an error kind."""
    return _DEFAULT_MESSAGES[kind]


def error_from_code(code: int, message: str | None = None) -> SGP4Error:
    """Build the exception instance matching a kernel error code.

    Args:
        code: Non-zero error code (an :class:`ErrorKind` value).
        message: Optional message; defaults to the standard description.

    Returns:
        An instance of the matching :class:`SGP4Error` subclass.

    Raises:
        ValueError: If ``code`` is not a known error code.
    """
    kind = ErrorKind(int(code))
    return _ERROR_CLASSES[kind](message or default_message(kind))
