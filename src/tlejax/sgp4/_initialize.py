"""
SGP4 initialization.

Turns parsed mean (Kozai) elements into Brouwer mean elements and the
secular, drag, and long-period coefficients the near-Earth propagator
needs, classifies the orbit regime, and rejects degenerate geometry. Runs at
Python time in double precision; the result is packed into a flat JAX array
once, for the kernel in ``_propagation``.

Initialization never raises for physics-domain problems: the returned
:class:`~tlejax.sgp4.SatelliteRecord` carries the error instead, so a loop
over a catalog is not interrupted by one bad object.
"""

from __future__ import annotations

import logging
from math import cos, fabs, sin, sqrt

import jax.numpy as jnp

from tlejax.constants import DEEP_SPACE_PERIOD, TWOPI
from tlejax.sgp4._constants import WGS72, EarthGravity, resolve_gravity
from tlejax.sgp4._errors import ErrorKind, default_message
from tlejax.sgp4._propagation import _propagate_jit, pack_params
from tlejax.sgp4._types import (
    DerivedCoefficients,
    MeanElements,
    OrbitRegime,
    SatelliteRecord,
)
from tlejax.time import sidereal_time_at_epoch

logger = logging.getLogger(__name__)

_OPSMODES = ("a", "i")

# Perigee altitude below which the higher-order drag terms are dropped [km]
_SIMPLE_DRAG_ALTITUDE = 220.0


def _initl(
    xke: float,
    j2: float,
    ecco: float,
    inclo: float,
    no: float,
) -> tuple:
    """Initialize SGP4 auxiliary quantities (Python floats).

    Removes the first-order J2 secular correction from the Kozai mean motion.
    The semi-major axis that the correction depends on is itself derived from
    the uncorrected mean motion, so one corrective pass is applied.

    Args:
        xke: Gravity constant xke.
        j2: J2 zonal harmonic.
        ecco: Eccentricity.
        inclo: Inclination [rad].
        no: Mean motion (Kozai) [rad/min].

    Returns:
        Tuple of computed quantities.
    """
    x2o3 = 2.0 / 3.0

    eccsq = ecco * ecco
    omeosq = 1.0 - eccsq
    rteosq = sqrt(omeosq)
    cosio = cos(inclo)
    cosio2 = cosio * cosio

    # Un-Kozai the mean motion
    ak = (xke / no) ** x2o3
    d1 = 0.75 * j2 * (3.0 * cosio2 - 1.0) / (rteosq * omeosq)
    del_ = d1 / (ak * ak)
    adel = ak * (1.0 - del_ * del_ - del_ * (1.0 / 3.0 + 134.0 * del_ * del_ / 81.0))
    del_ = d1 / (adel * adel)
    no = no / (1.0 + del_)

    return no, cosio, cosio2, eccsq, omeosq, rteosq


def _failed(
    elements: MeanElements,
    gravity: EarthGravity,
    opsmode: str,
    kind: ErrorKind,
    message: str,
    coefficients: DerivedCoefficients | None = None,
    regime: OrbitRegime | None = None,
) -> SatelliteRecord:
    logger.info("Satellite %d failed SGP4 initialization: %s", elements.satnum, message)
    return SatelliteRecord(
        elements=elements,
        gravity=gravity,
        opsmode=opsmode,
        coefficients=coefficients,
        regime=regime,
        error=kind,
        error_message=message,
    )


def sgp4_init(
    elements: MeanElements,
    gravity: str | EarthGravity = WGS72,
    opsmode: str = "i",
) -> SatelliteRecord:
    """Initialize an SGP4 satellite record from parsed TLE elements.

    Args:
        elements: Parsed mean elements from ``parse_tle``.
        gravity: Earth gravity model, as an ``EarthGravity`` instance or a
            name (``'wgs72'``, ``'wgs84'``, ``'wgs72old'``).
        opsmode: Operation mode: ``'i'`` (improved, IAU-82 sidereal time) or
            ``'a'`` (AFSPC sidereal time).

    Returns:
        An immutable record. ``record.status`` tells whether it is ready for
        propagation, failed (``record.error`` names the reason), or is a
        deep-space orbit that this propagator does not support.

    Raises:
        ValueError: If ``gravity`` or ``opsmode`` is not recognized. These
            are configuration mistakes, not properties of the elements.
    """
    gravity = resolve_gravity(gravity)
    if opsmode not in _OPSMODES:
        raise ValueError(f"Unknown opsmode {opsmode!r}. Must be 'a' or 'i'")

    ecco = elements.ecco
    bstar = elements.bstar
    x2o3 = 2.0 / 3.0
    temp4 = 1.5e-12

    # --- Geometry checks that must precede any arithmetic ---
    if not elements.no_kozai > 0.0:
        return _failed(
            elements,
            gravity,
            opsmode,
            ErrorKind.NEGATIVE_MEAN_MOTION,
            f"{default_message(ErrorKind.NEGATIVE_MEAN_MOTION)} "
            f"(no_kozai={elements.no_kozai!r} rad/min)",
        )
    if not 0.0 <= ecco < 1.0:
        return _failed(
            elements,
            gravity,
            opsmode,
            ErrorKind.ECCENTRICITY_OUT_OF_RANGE,
            f"{default_message(ErrorKind.ECCENTRICITY_OUT_OF_RANGE)} (ecco={ecco!r})",
        )

    no_unkozai, cosio, cosio2, eccsq, omeosq, rteosq = _initl(
        gravity.xke, gravity.j2, ecco, elements.inclo, elements.no_kozai
    )

    if not no_unkozai > 0.0:
        return _failed(
            elements,
            gravity,
            opsmode,
            ErrorKind.NEGATIVE_MEAN_MOTION,
            f"{default_message(ErrorKind.NEGATIVE_MEAN_MOTION)} "
            f"after removing the Kozai correction (no_unkozai={no_unkozai!r} rad/min)",
        )

    ao = (gravity.xke / no_unkozai) ** x2o3
    po = ao * omeosq
    if not po > 0.0:
        return _failed(
            elements,
            gravity,
            opsmode,
            ErrorKind.NEGATIVE_SEMILATUS_RECTUM,
            f"{default_message(ErrorKind.NEGATIVE_SEMILATUS_RECTUM)} (p={po!r} earth radii)",
        )

    sinio = sin(elements.inclo)
    con42 = 1.0 - 5.0 * cosio2
    con41 = -con42 - cosio2 - cosio2
    posq = po * po
    rp = ao * (1.0 - ecco)
    gsto = sidereal_time_at_epoch(elements.epoch_days_1950, opsmode)

    a = (no_unkozai * gravity.tumin) ** (-x2o3)
    alta = a * (1.0 + ecco) - 1.0
    altp = a * (1.0 - ecco) - 1.0
    period = TWOPI / no_unkozai

    # Earth constants of the atmospheric density model
    ss = 78.0 / gravity.radiusearthkm + 1.0
    qzms2ttemp = (120.0 - 78.0) / gravity.radiusearthkm
    qzms2t = qzms2ttemp**4
    sfour = ss

    isimp = rp < _SIMPLE_DRAG_ALTITUDE / gravity.radiusearthkm + 1.0

    qzms24 = qzms2t
    perige = (rp - 1.0) * gravity.radiusearthkm

    # For perigees below 156 km, s and qoms2t are altered
    if perige < 156.0:
        sfour = perige - 78.0
        if perige < 98.0:
            sfour = 20.0
        qzms24temp = (120.0 - sfour) / gravity.radiusearthkm
        qzms24 = qzms24temp**4
        sfour = sfour / gravity.radiusearthkm + 1.0

    # --- Secular rates and drag coefficients ---
    pinvsq = 1.0 / posq
    tsi = 1.0 / (ao - sfour)
    eta = ao * ecco * tsi
    etasq = eta * eta
    eeta = ecco * eta
    psisq = fabs(1.0 - etasq)
    coef = qzms24 * tsi**4
    coef1 = coef / psisq**3.5
    cc2 = (
        coef1
        * no_unkozai
        * (
            ao * (1.0 + 1.5 * etasq + eeta * (4.0 + etasq))
            + 0.375 * gravity.j2 * tsi / psisq * con41 * (8.0 + 3.0 * etasq * (8.0 + etasq))
        )
    )
    cc1 = bstar * cc2
    cc3 = 0.0
    if ecco > 1.0e-4:
        cc3 = -2.0 * coef * tsi * gravity.j3oj2 * no_unkozai * sinio / ecco
    x1mth2 = 1.0 - cosio2
    cc4 = (
        2.0
        * no_unkozai
        * coef1
        * ao
        * omeosq
        * (
            eta * (2.0 + 0.5 * etasq)
            + ecco * (0.5 + 2.0 * etasq)
            - gravity.j2
            * tsi
            / (ao * psisq)
            * (
                -3.0 * con41 * (1.0 - 2.0 * eeta + etasq * (1.5 - 0.5 * eeta))
                + 0.75
                * x1mth2
                * (2.0 * etasq - eeta * (1.0 + etasq))
                * cos(2.0 * elements.argpo)
            )
        )
    )
    cc5 = 2.0 * coef1 * ao * omeosq * (1.0 + 2.75 * (etasq + eeta) + eeta * etasq)
    cosio4 = cosio2 * cosio2
    temp1 = 1.5 * gravity.j2 * pinvsq * no_unkozai
    temp2 = 0.5 * temp1 * gravity.j2 * pinvsq
    temp3 = -0.46875 * gravity.j4 * pinvsq * pinvsq * no_unkozai
    mdot = (
        no_unkozai
        + 0.5 * temp1 * rteosq * con41
        + 0.0625 * temp2 * rteosq * (13.0 - 78.0 * cosio2 + 137.0 * cosio4)
    )
    argpdot = (
        -0.5 * temp1 * con42
        + 0.0625 * temp2 * (7.0 - 114.0 * cosio2 + 395.0 * cosio4)
        + temp3 * (3.0 - 36.0 * cosio2 + 49.0 * cosio4)
    )
    xhdot1 = -temp1 * cosio
    nodedot = (
        xhdot1 + (0.5 * temp2 * (4.0 - 19.0 * cosio2) + 2.0 * temp3 * (3.0 - 7.0 * cosio2)) * cosio
    )
    omgcof = bstar * cc3 * cos(elements.argpo)
    xmcof = 0.0
    if ecco > 1.0e-4:
        xmcof = -x2o3 * coef * bstar / eeta
    nodecf = 3.5 * omeosq * xhdot1 * cc1
    t2cof = 1.5 * cc1

    # sgp4fix for divide by zero with xinco = 180 deg
    if fabs(cosio + 1.0) > 1.5e-12:
        xlcof = -0.25 * gravity.j3oj2 * sinio * (3.0 + 5.0 * cosio) / (1.0 + cosio)
    else:
        xlcof = -0.25 * gravity.j3oj2 * sinio * (3.0 + 5.0 * cosio) / temp4

    aycof = -0.5 * gravity.j3oj2 * sinio
    delmotemp = 1.0 + eta * cos(elements.mo)
    delmo = delmotemp * delmotemp * delmotemp
    sinmao = sin(elements.mo)
    x7thm1 = 7.0 * cosio2 - 1.0

    regime = OrbitRegime.NEAR_EARTH
    if period >= DEEP_SPACE_PERIOD:
        regime = OrbitRegime.DEEP_SPACE
        isimp = True

    # Higher-order secular terms for non-simplified orbits
    d2 = d3 = d4 = 0.0
    t3cof = t4cof = t5cof = 0.0
    if not isimp:
        cc1sq = cc1 * cc1
        d2 = 4.0 * ao * tsi * cc1sq
        temp = d2 * tsi * cc1 / 3.0
        d3 = (17.0 * ao + sfour) * temp
        d4 = 0.5 * temp * ao * tsi * (221.0 * ao + 31.0 * sfour) * cc1
        t3cof = d2 + 2.0 * cc1sq
        t4cof = 0.25 * (3.0 * d3 + cc1 * (12.0 * d2 + 10.0 * cc1sq))
        t5cof = 0.2 * (3.0 * d4 + 12.0 * cc1 * d3 + 6.0 * d2 * d2 + 15.0 * cc1sq * (2.0 * d2 + cc1sq))

    coefficients = DerivedCoefficients(
        no_unkozai=no_unkozai,
        a=a,
        alta=alta,
        altp=altp,
        ao=ao,
        rp=rp,
        period=period,
        gsto=gsto,
        cosio=cosio,
        sinio=sinio,
        cosio2=cosio2,
        eccsq=eccsq,
        omeosq=omeosq,
        rteosq=rteosq,
        posq=posq,
        con41=con41,
        con42=con42,
        x1mth2=x1mth2,
        x7thm1=x7thm1,
        mdot=mdot,
        argpdot=argpdot,
        nodedot=nodedot,
        cc1=cc1,
        cc4=cc4,
        cc5=cc5,
        d2=d2,
        d3=d3,
        d4=d4,
        t2cof=t2cof,
        t3cof=t3cof,
        t4cof=t4cof,
        t5cof=t5cof,
        omgcof=omgcof,
        xmcof=xmcof,
        nodecf=nodecf,
        delmo=delmo,
        eta=eta,
        sinmao=sinmao,
        xlcof=xlcof,
        aycof=aycof,
        isimp=isimp,
    )

    if regime is OrbitRegime.DEEP_SPACE:
        logger.info(
            "Satellite %d has a period of %.2f min; deep-space propagation is not supported",
            elements.satnum,
            period,
        )
        return SatelliteRecord(
            elements=elements,
            gravity=gravity,
            opsmode=opsmode,
            coefficients=coefficients,
            regime=regime,
        )

    params = pack_params(elements, gravity, coefficients)

    # The reference theory finishes initialization with a propagation to
    # epoch; a failure there (e.g. perigee already below the surface) is terminal.
    _, _, error = _propagate_jit(params, jnp.zeros((), dtype=params.dtype))
    code = int(error)
    if code:
        kind = ErrorKind(code)
        return _failed(
            elements,
            gravity,
            opsmode,
            kind,
            f"{default_message(kind)} at epoch",
            coefficients=coefficients,
            regime=regime,
        )

    logger.debug(
        "Initialized satellite %d: period=%.2f min, perigee=%.1f km, simplified drag=%s",
        elements.satnum,
        period,
        altp * gravity.radiusearthkm,
        isimp,
    )
    return SatelliteRecord(
        elements=elements,
        gravity=gravity,
        opsmode=opsmode,
        coefficients=coefficients,
        regime=regime,
        params=params,
    )
