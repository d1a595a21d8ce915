"""
SGP4 near-Earth propagation in JAX.

The coefficients of an initialized :class:`~tlejax.sgp4.SatelliteRecord` are
packed into a flat ``jnp.array`` with named indices defined in ``_IDX``. The
kernel (``sgp4_propagate_params``) is a pure JAX function of that array and
a time offset, suitable for ``jax.jit``, ``jax.vmap``, and ``jax.grad``. It
never raises: failures are reported as an integer error code alongside NaN
position and velocity, and the record-level wrappers turn the code into a
typed exception (``sgp4_propagate``) or pass it through per row
(``sgp4_propagate_batch``).
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from tlejax.config import get_dtype, get_kepler_tolerance
from tlejax.sgp4._constants import EarthGravity
from tlejax.sgp4._errors import ErrorKind, default_message, error_from_code
from tlejax.sgp4._types import (
    DerivedCoefficients,
    MeanElements,
    PropagationBatch,
    SatelliteRecord,
    StateVector,
)

# ---------------------------------------------------------------------------
# Parameter index layout for the flat params array
# ---------------------------------------------------------------------------
_GRAVITY_FIELDS = ["radiusearthkm", "xke", "j2"]
_ELEMENT_FIELDS = ["bstar", "ecco", "argpo", "inclo", "mo", "nodeo"]
_COEFFICIENT_FIELDS = [
    "no_unkozai",
    "con41",
    "cc1",
    "cc4",
    "cc5",
    "d2",
    "d3",
    "d4",
    "delmo",
    "eta",
    "argpdot",
    "omgcof",
    "sinmao",
    "t2cof",
    "t3cof",
    "t4cof",
    "t5cof",
    "x1mth2",
    "x7thm1",
    "mdot",
    "nodedot",
    "xlcof",
    "xmcof",
    "nodecf",
    "aycof",
    "isimp",  # 0.0 or 1.0
]

_PARAM_NAMES = _GRAVITY_FIELDS + _ELEMENT_FIELDS + _COEFFICIENT_FIELDS

_IDX = {name: i for i, name in enumerate(_PARAM_NAMES)}
_NUM_PARAMS = len(_PARAM_NAMES)

_I = _IDX  # alias for brevity in propagation code

_MAX_KEPLER_ITERATIONS = 10


def pack_params(
    elements: MeanElements,
    gravity: EarthGravity,
    coefficients: DerivedCoefficients,
) -> Array:
    """Pack the quantities the kernel reads into a flat JAX array.

    Args:
        elements: Mean elements of the satellite.
        gravity: Gravity model of the satellite.
        coefficients: Coefficients derived by ``sgp4_init``.

    Returns:
        Array of shape ``(_NUM_PARAMS,)`` in the configured float dtype.
    """
    values = (
        [getattr(gravity, f) for f in _GRAVITY_FIELDS]
        + [getattr(elements, f) for f in _ELEMENT_FIELDS]
        + [float(getattr(coefficients, f)) for f in _COEFFICIENT_FIELDS]
    )
    return jnp.array(values, dtype=get_dtype())


# ---------------------------------------------------------------------------
# SGP4 Propagation (JAX, JIT-compatible)
# ---------------------------------------------------------------------------


def sgp4_propagate_params(params: Array, tsince: ArrayLike) -> tuple[Array, Array, Array]:
    """Propagate a near-Earth satellite with SGP4 (JAX, JIT-compatible).

    Args:
        params: Flat parameter array from ``pack_params`` (see
            ``SatelliteRecord.params``).
        tsince: Time since epoch in minutes.

    Returns:
        Tuple of ``(r, v, error)`` where ``r`` is position [km] and ``v`` is
        velocity [km/s], both as 3-element arrays in the TEME frame, and
        ``error`` is an int32 error code (0 on success). ``r`` and ``v`` are
        NaN when ``error`` is non-zero.
    """
    twopi = 2.0 * jnp.pi
    x2o3 = 2.0 / 3.0

    p = params
    radiusearthkm = p[_I["radiusearthkm"]]
    xke = p[_I["xke"]]
    j2 = p[_I["j2"]]
    bstar = p[_I["bstar"]]
    ecco = p[_I["ecco"]]
    argpo = p[_I["argpo"]]
    inclo = p[_I["inclo"]]
    mo = p[_I["mo"]]
    nodeo = p[_I["nodeo"]]
    no_unkozai = p[_I["no_unkozai"]]
    con41 = p[_I["con41"]]
    cc1 = p[_I["cc1"]]
    cc4 = p[_I["cc4"]]
    cc5 = p[_I["cc5"]]
    d2 = p[_I["d2"]]
    d3 = p[_I["d3"]]
    d4 = p[_I["d4"]]
    delmo = p[_I["delmo"]]
    eta = p[_I["eta"]]
    argpdot = p[_I["argpdot"]]
    omgcof = p[_I["omgcof"]]
    sinmao = p[_I["sinmao"]]
    t2cof = p[_I["t2cof"]]
    t3cof = p[_I["t3cof"]]
    t4cof = p[_I["t4cof"]]
    t5cof = p[_I["t5cof"]]
    x1mth2 = p[_I["x1mth2"]]
    x7thm1 = p[_I["x7thm1"]]
    mdot = p[_I["mdot"]]
    nodedot = p[_I["nodedot"]]
    xlcof = p[_I["xlcof"]]
    xmcof = p[_I["xmcof"]]
    nodecf = p[_I["nodecf"]]
    aycof = p[_I["aycof"]]
    isimp = p[_I["isimp"]]

    vkmpersec = radiusearthkm * xke / 60.0

    # --- Update for secular gravity and atmospheric drag ---
    t = jnp.asarray(tsince, dtype=p.dtype)
    xmdf = mo + mdot * t
    argpdf = argpo + argpdot * t
    nodedf = nodeo + nodedot * t
    argpm = argpdf
    mm = xmdf
    t2 = t * t
    nodem = nodedf + nodecf * t2
    tempa = 1.0 - cc1 * t
    tempe = bstar * cc4 * t
    templ = t2cof * t2

    # Higher-order drag terms, skipped for the simplified (low perigee) model
    is_not_simple = isimp < 0.5
    delomg = omgcof * t
    delmtemp = 1.0 + eta * jnp.cos(xmdf)
    delm = xmcof * (delmtemp * delmtemp * delmtemp - delmo)
    temp_corr = delomg + delm
    mm_ns = xmdf + temp_corr
    argpm_ns = argpdf - temp_corr
    t3 = t2 * t
    t4 = t3 * t
    tempa_ns = tempa - d2 * t2 - d3 * t3 - d4 * t4
    tempe_ns = tempe + bstar * cc5 * (jnp.sin(mm_ns) - sinmao)
    templ_ns = templ + t3cof * t3 + t4 * (t4cof + t * t5cof)

    mm = jnp.where(is_not_simple, mm_ns, mm)
    argpm = jnp.where(is_not_simple, argpm_ns, argpm)
    tempa = jnp.where(is_not_simple, tempa_ns, tempa)
    tempe = jnp.where(is_not_simple, tempe_ns, tempe)
    templ = jnp.where(is_not_simple, templ_ns, templ)

    nm = no_unkozai
    em = ecco
    inclm = inclo

    nm_ok = nm > 0.0

    am = (xke / nm) ** x2o3 * tempa * tempa
    nm = xke / am**1.5
    em = em - tempe

    em_ok = (em < 1.0) & (em >= -0.001)
    # Keep the remaining arithmetic finite; out-of-range rows are masked below
    em = jnp.clip(em, 1.0e-6, 0.999999)

    mm = mm + no_unkozai * templ
    xlm = mm + argpm + nodem

    nodem = nodem % twopi
    argpm = argpm % twopi
    xlm = xlm % twopi
    mm = (xlm - argpm - nodem) % twopi

    sinim = jnp.sin(inclm)
    cosim = jnp.cos(inclm)

    # --- Long period periodics ---
    axnl = em * jnp.cos(argpm)
    temp_lp = 1.0 / (am * (1.0 - em * em))
    aynl = em * jnp.sin(argpm) + temp_lp * aycof
    xl = mm + argpm + nodem + temp_lp * xlcof * axnl

    # --- Solve Kepler's equation ---
    u = (xl - nodem) % twopi
    tolerance = get_kepler_tolerance()

    def kepler_step(i, carry):
        eo1, converged = carry
        sineo1 = jnp.sin(eo1)
        coseo1 = jnp.cos(eo1)
        denom = 1.0 - coseo1 * axnl - sineo1 * aynl
        tem5 = (u - aynl * coseo1 + axnl * sineo1 - eo1) / denom
        tem5 = jnp.clip(tem5, -0.95, 0.95)
        eo1 = jnp.where(converged, eo1, eo1 + tem5)
        return eo1, converged | (jnp.abs(tem5) < tolerance)

    eo1, _ = jax.lax.fori_loop(
        0, _MAX_KEPLER_ITERATIONS, kepler_step, (u, jnp.zeros_like(u, dtype=bool))
    )

    sineo1 = jnp.sin(eo1)
    coseo1 = jnp.cos(eo1)

    # --- Short period preliminary quantities ---
    ecose = axnl * coseo1 + aynl * sineo1
    esine = axnl * sineo1 - aynl * coseo1
    el2 = axnl * axnl + aynl * aynl
    pl = am * (1.0 - el2)

    pl_ok = pl >= 0.0

    rl = am * (1.0 - ecose)
    rdotl = jnp.sqrt(am) * esine / rl
    rvdotl = jnp.sqrt(pl) / rl
    betal = jnp.sqrt(1.0 - el2)
    temp_sp = esine / (1.0 + betal)
    sinu = am / rl * (sineo1 - aynl - axnl * temp_sp)
    cosu = am / rl * (coseo1 - axnl + aynl * temp_sp)
    su = jnp.arctan2(sinu, cosu)
    sin2u = (cosu + cosu) * sinu
    cos2u = 1.0 - 2.0 * sinu * sinu
    temp_sp2 = 1.0 / pl
    temp1 = 0.5 * j2 * temp_sp2
    temp2 = temp1 * temp_sp2

    # --- Update for short period periodics ---
    mrt = rl * (1.0 - 1.5 * temp2 * betal * con41) + 0.5 * temp1 * x1mth2 * cos2u
    su = su - 0.25 * temp2 * x7thm1 * sin2u
    xnode = nodem + 1.5 * temp2 * cosim * sin2u
    xinc = inclm + 1.5 * temp2 * cosim * sinim * cos2u
    mvt = rdotl - nm * temp1 * x1mth2 * sin2u / xke
    rvdot = rvdotl + nm * temp1 * (x1mth2 * cos2u + 1.5 * con41) / xke

    # --- Orientation vectors ---
    sinsu = jnp.sin(su)
    cossu = jnp.cos(su)
    snod = jnp.sin(xnode)
    cnod = jnp.cos(xnode)
    sini = jnp.sin(xinc)
    cosi = jnp.cos(xinc)
    xmx = -snod * cosi
    xmy = cnod * cosi
    ux = xmx * sinsu + cnod * cossu
    uy = xmy * sinsu + snod * cossu
    uz = sini * sinsu
    vx = xmx * cossu - cnod * sinsu
    vy = xmy * cossu - snod * sinsu
    vz = sini * cossu

    # --- Position and velocity (km and km/s) ---
    _mr = mrt * radiusearthkm
    r = jnp.array([_mr * ux, _mr * uy, _mr * uz])
    v = jnp.array(
        [
            (mvt * ux + rvdot * vx) * vkmpersec,
            (mvt * uy + rvdot * vy) * vkmpersec,
            (mvt * uz + rvdot * vz) * vkmpersec,
        ]
    )

    # First failing check wins, in the order the reference theory tests them
    error = jnp.where(
        ~nm_ok,
        int(ErrorKind.NEGATIVE_MEAN_MOTION),
        jnp.where(
            ~em_ok,
            int(ErrorKind.ECCENTRICITY_OUT_OF_RANGE),
            jnp.where(
                ~pl_ok,
                int(ErrorKind.NEGATIVE_SEMILATUS_RECTUM),
                jnp.where(mrt < 1.0, int(ErrorKind.ORBITAL_DECAY), 0),
            ),
        ),
    ).astype(jnp.int32)

    nan3 = jnp.full(3, jnp.nan, dtype=r.dtype)
    r = jnp.where(error == 0, r, nan3)
    v = jnp.where(error == 0, v, nan3)

    return r, v, error


_propagate_jit = jax.jit(sgp4_propagate_params)
_propagate_batch_jit = jax.jit(jax.vmap(sgp4_propagate_params, in_axes=(None, 0)))


# ---------------------------------------------------------------------------
# Record-level entry points
# ---------------------------------------------------------------------------


def sgp4_propagate(record: SatelliteRecord, tsince: float) -> StateVector:
    """Propagate an initialized satellite to one time offset.

    Args:
        record: Record returned by ``sgp4_init``.
        tsince: Time since epoch in minutes (may be negative).

    Returns:
        TEME state vector in km and km/s.

    Raises:
        SGP4Error: The record's initialization error, or
            ``DeepSpaceUnsupportedError`` for a deep-space record.
        PropagationError: The matching subclass (e.g. ``OrbitalDecayError``)
            if the orbit is degenerate or decayed at ``tsince``.
    """
    record.check()
    r, v, error = _propagate_jit(record.params, jnp.asarray(tsince, dtype=get_dtype()))
    code = int(error)
    if code:
        raise error_from_code(
            code,
            f"Satellite {record.elements.satnum} at {float(tsince):.6f} min from epoch: "
            f"{default_message(ErrorKind(code))}",
        )
    return StateVector(tsince=float(tsince), r=r, v=v)


def sgp4_propagate_batch(record: SatelliteRecord, tsince: ArrayLike) -> PropagationBatch:
    """Propagate an initialized satellite to many time offsets at once.

    Uses ``jax.vmap`` over the offsets. A degenerate or decayed offset does
    not abort the batch: its row carries a non-zero error code and NaN
    position and velocity.

    Args:
        record: Record returned by ``sgp4_init``.
        tsince: Times since epoch in minutes, shape ``(N,)``.

    Returns:
        Batched positions, velocities, and per-row error codes.

    Raises:
        SGP4Error: If the record itself is not initialized.
    """
    record.check()
    times = jnp.atleast_1d(jnp.asarray(tsince, dtype=get_dtype()))
    r, v, error = _propagate_batch_jit(record.params, times)
    return PropagationBatch(r=r, v=v, error=error)
