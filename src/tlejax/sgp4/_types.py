"""
Data types for the SGP4 propagator.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import NamedTuple

import jax.numpy as jnp
from jax import Array

from tlejax.constants import JD_1950
from tlejax.sgp4._constants import EarthGravity
from tlejax.sgp4._errors import (
    DeepSpaceUnsupportedError,
    ErrorKind,
    SGP4Error,
    error_from_code,
)


class Classification(enum.Enum):
    """Security classification character of a TLE (line 1, column 8)."""

    UNCLASSIFIED = "U"
    CLASSIFIED = "C"
    SECRET = "S"


class OrbitRegime(enum.Enum):
    """SGP4 orbit regime, selected by the orbital period at epoch."""

    NEAR_EARTH = "n"
    DEEP_SPACE = "d"


class RecordStatus(enum.Enum):
    """Outcome of initializing a :class:`SatelliteRecord`."""

    INITIALIZED = "initialized"
    FAILED = "failed"
    DEEP_SPACE_UNSUPPORTED = "deep_space_unsupported"


@dataclass(frozen=True)
class MeanElements:
    """Parsed mean (Kozai) orbital elements from a TLE.

    A plain Python dataclass (not a JAX pytree). Angular values are stored in
    radians and rates in the per-minute convention used by SGP4, whatever
    the units of the source text.

    Attributes:
        satnum: Satellite catalog number (Alpha-5 numbers decoded).
        satnum_str: Catalog number exactly as written (e.g. ``'25544'``).
        classification: Classification; ``UNCLASSIFIED`` when the column is blank.
        intldesg: International designator (e.g. ``'98067A'``).
        epochyr: Two-digit epoch year (0-99).
        epochdays: Day of year with fractional day.
        jdsatepoch: Julian date of epoch (whole days, ending in .5).
        jdsatepochF: Julian date of epoch (fractional day).
        ndot: First derivative of mean motion divided by 2 [rad/min^2].
        nddot: Second derivative of mean motion divided by 6 [rad/min^3].
        bstar: B* drag coefficient [1/earth_radii].
        ephtype: Ephemeris type (typically 0).
        elnum: Element set number.
        revnum: Revolution number at epoch.
        inclo: Inclination [rad].
        nodeo: Right ascension of ascending node [rad].
        ecco: Eccentricity [dimensionless].
        argpo: Argument of perigee [rad].
        mo: Mean anomaly [rad].
        no_kozai: Mean motion (Kozai) [rad/min].
    """

    satnum: int
    satnum_str: str
    classification: Classification
    intldesg: str
    epochyr: int
    epochdays: float
    jdsatepoch: float
    jdsatepochF: float
    ndot: float
    nddot: float
    bstar: float
    ephtype: int
    elnum: int
    revnum: int
    inclo: float
    nodeo: float
    ecco: float
    argpo: float
    mo: float
    no_kozai: float

    @property
    def epoch_year(self) -> int:
        """Four-digit epoch year (two-digit years < 57 are 20xx)."""
        return self.epochyr + (2000 if self.epochyr < 57 else 1900)

    @property
    def jd_epoch(self) -> float:
        """Julian date of epoch (sum of the split parts)."""
        return self.jdsatepoch + self.jdsatepochF

    @property
    def epoch_days_1950(self) -> float:
        """Epoch in days since 1949-12-31 00:00 UT."""
        return self.jdsatepoch + self.jdsatepochF - JD_1950


@dataclass(frozen=True)
class DerivedCoefficients:
    """Brouwer mean elements and SGP4 secular/drag coefficients.

    Computed once by :func:`~tlejax.sgp4.sgp4_init`. Names follow the
    reference SGP4 implementation. Distances are in earth radii and times in
    minutes unless noted.

    Attributes:
        no_unkozai: Brouwer mean motion [rad/min].
        a: Semi-major axis from the Brouwer mean motion.
        alta: Apogee altitude.
        altp: Perigee altitude.
        ao: Semi-major axis used by the drag terms.
        rp: Perigee radius ``ao * (1 - e)``.
        period: Orbital period ``2pi / no_unkozai`` [min].
        gsto: Greenwich sidereal time at epoch [rad].
        cosio: Cosine of inclination.
        sinio: Sine of inclination.
        cosio2: Cosine of inclination squared.
        eccsq: Eccentricity squared.
        omeosq: ``1 - e^2``.
        rteosq: ``sqrt(1 - e^2)``.
        posq: Semilatus rectum squared.
        con41: ``3 cos^2(i) - 1``.
        con42: ``1 - 5 cos^2(i)``.
        x1mth2: ``1 - cos^2(i)``.
        x7thm1: ``7 cos^2(i) - 1``.
        mdot: Secular mean anomaly rate [rad/min].
        argpdot: Secular argument of perigee rate [rad/min].
        nodedot: Secular node rate [rad/min].
        cc1: Linear drag coefficient on the semi-major axis.
        cc4: Linear drag coefficient on eccentricity.
        cc5: Periodic drag coefficient on eccentricity.
        d2: Quadratic drag coefficient.
        d3: Cubic drag coefficient.
        d4: Quartic drag coefficient.
        t2cof: Mean longitude drag coefficient (t^2).
        t3cof: Mean longitude drag coefficient (t^3).
        t4cof: Mean longitude drag coefficient (t^4).
        t5cof: Mean longitude drag coefficient (t^5).
        omgcof: Argument of perigee drag coefficient.
        xmcof: Mean anomaly drag coefficient.
        nodecf: Node drag coefficient (t^2).
        delmo: ``(1 + eta cos(M0))^3``.
        eta: ``ao * e / (ao - s)``.
        sinmao: Sine of the mean anomaly at epoch.
        xlcof: Long-period coefficient on mean longitude.
        aycof: Long-period coefficient on the eccentricity vector.
        isimp: Simplified drag flag (perigee altitude below 220 km).
    """

    no_unkozai: float
    a: float
    alta: float
    altp: float
    ao: float
    rp: float
    period: float
    gsto: float
    cosio: float
    sinio: float
    cosio2: float
    eccsq: float
    omeosq: float
    rteosq: float
    posq: float
    con41: float
    con42: float
    x1mth2: float
    x7thm1: float
    mdot: float
    argpdot: float
    nodedot: float
    cc1: float
    cc4: float
    cc5: float
    d2: float
    d3: float
    d4: float
    t2cof: float
    t3cof: float
    t4cof: float
    t5cof: float
    omgcof: float
    xmcof: float
    nodecf: float
    delmo: float
    eta: float
    sinmao: float
    xlcof: float
    aycof: float
    isimp: bool


@dataclass(frozen=True, eq=False)
class SatelliteRecord:
    """One satellite, initialized for SGP4 propagation.

    Built once by :func:`~tlejax.sgp4.sgp4_init` and immutable afterwards,
    so a record may be propagated from many threads at once. A record whose
    initialization failed keeps its error; it is never propagated.

    Attributes:
        elements: Mean elements the record was built from.
        gravity: Gravity model fixed for this record.
        opsmode: Sidereal-time convention (``'i'`` or ``'a'``).
        coefficients: Derived coefficients, or ``None`` when initialization
            failed before they could be computed.
        regime: Orbit regime, or ``None`` when it could not be determined.
        error: Terminal initialization error, if any.
        error_message: Human-readable description of ``error``.
        params: Flat kernel parameter array; ``None`` unless initialized.
    """

    elements: MeanElements
    gravity: EarthGravity
    opsmode: str
    coefficients: DerivedCoefficients | None
    regime: OrbitRegime | None
    error: ErrorKind | None = None
    error_message: str = ""
    params: Array | None = None

    @property
    def status(self) -> RecordStatus:
        """Initialization outcome of this record."""
        if self.error is not None:
            return RecordStatus.FAILED
        if self.regime is OrbitRegime.DEEP_SPACE:
            return RecordStatus.DEEP_SPACE_UNSUPPORTED
        return RecordStatus.INITIALIZED

    @property
    def initialized(self) -> bool:
        """``True`` if the record can be propagated."""
        return self.status is RecordStatus.INITIALIZED

    @property
    def perigee_radius_km(self) -> float:
        """Perigee radius [km]."""
        return (self._require_coefficients().altp + 1.0) * self.gravity.radiusearthkm

    @property
    def apogee_radius_km(self) -> float:
        """Apogee radius [km]."""
        return (self._require_coefficients().alta + 1.0) * self.gravity.radiusearthkm

    def check(self) -> SatelliteRecord:
        """Return the record if it can be propagated, otherwise raise.

        Returns:
            This record.

        Raises:
            SGP4Error: The typed error recorded during initialization, or
                :class:`DeepSpaceUnsupportedError` for deep-space orbits.
        """
        if self.error is not None:
            raise error_from_code(self.error, self.error_message)
        if self.regime is OrbitRegime.DEEP_SPACE:
            raise DeepSpaceUnsupportedError(
                f"Satellite {self.elements.satnum} has a period of "
                f"{self.coefficients.period:.2f} min; deep-space (SDP4) propagation "
                "is not supported"
            )
        return self

    def _require_coefficients(self) -> DerivedCoefficients:
        if self.coefficients is None:
            raise SGP4Error(
                f"Satellite {self.elements.satnum} has no derived coefficients: "
                f"{self.error_message}"
            )
        return self.coefficients


@dataclass(frozen=True, eq=False)
class StateVector:
    """Position and velocity in the TEME frame at one time offset.

    Attributes:
        tsince: Time since epoch [min].
        r: Position [km], shape ``(3,)``.
        v: Velocity [km/s], shape ``(3,)``.
    """

    tsince: float
    r: Array
    v: Array

    @property
    def position_magnitude(self) -> float:
        """Distance from the earth's center [km]."""
        return float(jnp.linalg.norm(self.r))

    def to_array(self) -> Array:
        """Return ``[x, y, z, vx, vy, vz]`` in km and km/s."""
        return jnp.concatenate([self.r, self.v])


class PropagationBatch(NamedTuple):
    """Vectorized propagation output for many time offsets.

    Attributes:
        r: Positions [km], shape ``(N, 3)``; NaN where ``error != 0``.
        v: Velocities [km/s], shape ``(N, 3)``; NaN where ``error != 0``.
        error: Error codes, shape ``(N,)``; 0 on success, otherwise an
            :class:`~tlejax.sgp4.ErrorKind` value.
    """

    r: Array
    v: Array
    error: Array

    @property
    def ok(self) -> Array:
        """Boolean mask of rows that propagated successfully."""
        return self.error == 0
