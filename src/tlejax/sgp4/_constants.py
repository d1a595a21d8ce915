"""
Earth gravity constants for the SGP4 propagator.

Provides three standard gravity models: WGS72OLD, WGS72 (standard), and WGS84.
A gravity model is chosen once per satellite record and never changes for
the lifetime of that record.
"""

from __future__ import annotations

from math import sqrt
from typing import NamedTuple


class EarthGravity(NamedTuple):
    """Earth gravity model constants for SGP4 propagation.

    Attributes:
        name: Model name (``'wgs72old'``, ``'wgs72'``, or ``'wgs84'``).
        tumin: Minutes per SGP4 time unit (1/xke).
        mu: Gravitational parameter [km^3/s^2].
        radiusearthkm: Earth equatorial radius [km].
        xke: Reciprocal of tumin (sqrt(GM) in earth radii^1.5 per minute).
        j2: Second zonal harmonic.
        j3: Third zonal harmonic.
        j4: Fourth zonal harmonic.
        j3oj2: Ratio j3/j2.
    """

    name: str
    tumin: float
    mu: float
    radiusearthkm: float
    xke: float
    j2: float
    j3: float
    j4: float
    j3oj2: float


def _model(
    name: str,
    mu: float,
    radiusearthkm: float,
    j2: float,
    j3: float,
    j4: float,
    xke: float | None = None,
) -> EarthGravity:
    """Build a gravity model, deriving xke from mu and the earth radius unless given."""
    if xke is None:
        xke = 60.0 / sqrt(radiusearthkm**3 / mu)
    return EarthGravity(
        name=name,
        tumin=1.0 / xke,
        mu=mu,
        radiusearthkm=radiusearthkm,
        xke=xke,
        j2=j2,
        j3=j3,
        j4=j4,
        j3oj2=j3 / j2,
    )


WGS72OLD = _model(
    "wgs72old",
    mu=398600.79964,
    radiusearthkm=6378.135,
    j2=0.001082616,
    j3=-0.00000253881,
    j4=-0.00000165597,
    xke=0.0743669161,
)
"""WGS 72 Old gravity model (legacy, low-precision xke)."""

WGS72 = _model(
    "wgs72",
    mu=398600.8,
    radiusearthkm=6378.135,
    j2=0.001082616,
    j3=-0.00000253881,
    j4=-0.00000165597,
)
"""WGS 72 gravity model (standard for SGP4)."""

WGS84 = _model(
    "wgs84",
    mu=398600.5,
    radiusearthkm=6378.137,
    j2=0.00108262998905,
    j3=-0.00000253215306,
    j4=-0.00000161098761,
)
"""WGS 84 gravity model."""

GRAVITY_MODELS: dict[str, EarthGravity] = {g.name: g for g in (WGS72OLD, WGS72, WGS84)}
"""Mapping of gravity model names to ``EarthGravity`` instances."""


def resolve_gravity(gravity: str | EarthGravity) -> EarthGravity:
    """Return an ``EarthGravity`` for a model name or pass an instance through.

    Args:
        gravity: Gravity model name (``'wgs72'``, ``'wgs84'``, ``'wgs72old'``,
            case-insensitive) or an ``EarthGravity`` instance.

    Returns:
        The selected gravity model.

    Raises:
        ValueError: If the name does not match a known model.
    """
    if isinstance(gravity, EarthGravity):
        return gravity
    try:
        return GRAVITY_MODELS[gravity.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown gravity model {gravity!r}. Must be one of: {', '.join(GRAVITY_MODELS)}"
        ) from None
