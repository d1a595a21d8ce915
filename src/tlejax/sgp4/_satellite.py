"""High-level TLE satellite class for SGP4 propagation.

Provides :class:`TLE`, a convenience wrapper that combines TLE parsing,
SGP4 initialization, and propagation into a single object with
user-friendly properties and methods.
"""

from __future__ import annotations

from datetime import datetime

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from tlejax.constants import RAD2DEG, XPDOTP
from tlejax.sgp4._constants import EarthGravity
from tlejax.sgp4._initialize import sgp4_init
from tlejax.sgp4._propagation import sgp4_propagate, sgp4_propagate_batch
from tlejax.sgp4._tle import parse_tle
from tlejax.sgp4._types import (
    MeanElements,
    OrbitRegime,
    PropagationBatch,
    SatelliteRecord,
)
from tlejax.time import epoch_to_datetime


class TLE:
    """A parsed TLE, initialized and ready for SGP4 propagation.

    Construction parses and initializes the elements and raises if the
    satellite cannot be propagated, so every ``TLE`` instance is usable.
    Use :func:`~tlejax.sgp4.sgp4_init` directly to inspect failed records
    without an exception.

    The ``propagate`` method returns raw SGP4 output in km/km/s (for
    comparison testing). The ``state`` methods return SI units (m, m/s).

    Examples:
        ```python
        from tlejax.sgp4 import TLE

        line1 = "1 25544U 98067A   08264.51782528 ..."
        line2 = "2 25544  51.6416 247.4627 ..."
        sat = TLE(line1, line2)

        # Properties
        sat.epoch       # datetime (UTC)
        sat.n           # mean motion [rev/day]
        sat.i           # inclination [deg]

        # Raw SGP4 output (km, km/s)
        r_km, v_kms = sat.propagate(60.0)

        # TEME state (m, m/s) at epoch + 3600 seconds
        x = sat.state(3600.0)
        ```

    Args:
        line1: First TLE line.
        line2: Second TLE line.
        gravity: Gravity model name or :class:`EarthGravity` instance.
        opsmode: ``'i'`` (improved) or ``'a'`` (AFSPC) sidereal time.

    Raises:
        InvalidElementsError: If the lines do not parse.
        PropagationError: If initialization failed (e.g. the satellite has
            already decayed).
        DeepSpaceUnsupportedError: If the orbital period is 225 minutes or
            more.
    """

    def __init__(
        self,
        line1: str,
        line2: str,
        gravity: str | EarthGravity = "wgs72",
        opsmode: str = "i",
    ) -> None:
        self._init_record(parse_tle(line1, line2), gravity, opsmode)

    @classmethod
    def from_elements(
        cls,
        elements: MeanElements,
        gravity: str | EarthGravity = "wgs72",
        opsmode: str = "i",
    ) -> TLE:
        """Create a TLE from already-parsed mean elements.

        Args:
            elements: Mean elements, e.g. from ``parse_tle`` or built directly.
            gravity: Gravity model name or :class:`EarthGravity` instance.
            opsmode: ``'i'`` or ``'a'``.

        Returns:
            An initialized :class:`TLE`.
        """
        obj = cls.__new__(cls)
        obj._init_record(elements, gravity, opsmode)
        return obj

    def _init_record(
        self,
        elements: MeanElements,
        gravity: str | EarthGravity,
        opsmode: str,
    ) -> None:
        self._elements = elements
        self._record: SatelliteRecord = sgp4_init(elements, gravity, opsmode).check()
        self._epoch = epoch_to_datetime(elements.epoch_year, elements.epochdays)

    # ------------------------------------------------------------------
    # Properties (user-friendly units)
    # ------------------------------------------------------------------

    @property
    def epoch(self) -> datetime:
        """TLE epoch as a timezone-aware UTC ``datetime``."""
        return self._epoch

    @property
    def satnum(self) -> str:
        """NORAD catalog number as written (e.g. ``'25544'`` or ``'A0001'``)."""
        return self._elements.satnum_str

    @property
    def n(self) -> float:
        """Mean motion [rev/day]."""
        return self._elements.no_kozai * XPDOTP

    @property
    def e(self) -> float:
        """Eccentricity [dimensionless]."""
        return self._elements.ecco

    @property
    def i(self) -> float:
        """Inclination [degrees]."""
        return self._elements.inclo * RAD2DEG

    @property
    def raan(self) -> float:
        """Right ascension of ascending node [degrees]."""
        return self._elements.nodeo * RAD2DEG

    @property
    def argp(self) -> float:
        """Argument of perigee [degrees]."""
        return self._elements.argpo * RAD2DEG

    @property
    def M(self) -> float:
        """Mean anomaly [degrees]."""
        return self._elements.mo * RAD2DEG

    @property
    def bstar(self) -> float:
        """B* drag coefficient [1/earth_radii]."""
        return self._elements.bstar

    @property
    def period(self) -> float:
        """Orbital period from the Brouwer mean motion [minutes]."""
        return self._record.coefficients.period

    @property
    def regime(self) -> OrbitRegime:
        """Orbit regime (always near-Earth for a constructed ``TLE``)."""
        return self._record.regime

    @property
    def record(self) -> SatelliteRecord:
        """The initialized SGP4 record."""
        return self._record

    @property
    def params(self) -> Array:
        """Raw SGP4 parameter array (for ``sgp4_propagate_params``)."""
        return self._record.params

    # ------------------------------------------------------------------
    # Raw SGP4 output (km, km/s)
    # ------------------------------------------------------------------

    def propagate(self, tsince_min: float) -> tuple[Array, Array]:
        """Propagate using SGP4 and return raw output.

        Args:
            tsince_min: Time since TLE epoch in **minutes**.

        Returns:
            Tuple ``(r_km, v_kms)``: position [km] and velocity [km/s] in
            the TEME frame.

        Raises:
            PropagationError: If the orbit is degenerate or decayed at
                ``tsince_min``.
        """
        sv = sgp4_propagate(self._record, tsince_min)
        return sv.r, sv.v

    # ------------------------------------------------------------------
    # State methods (SI: m, m/s)
    # ------------------------------------------------------------------

    def state(self, t: float) -> Array:
        """Compute the TEME state at ``t`` seconds after the TLE epoch.

        Args:
            t: Seconds since TLE epoch.

        Returns:
            6-element TEME state ``[x, y, z, vx, vy, vz]`` in m and m/s.
        """
        return sgp4_propagate(self._record, t / 60.0).to_array() * 1e3

    def state_batch(self, t: ArrayLike) -> PropagationBatch:
        """Compute TEME states at many offsets (seconds after epoch).

        Rows that fail carry a non-zero error code and NaN states rather
        than raising.

        Args:
            t: Seconds since TLE epoch, shape ``(N,)``.

        Returns:
            Batch with ``r`` in m, ``v`` in m/s, and per-row error codes.
        """
        out = sgp4_propagate_batch(self._record, jnp.asarray(t) / 60.0)
        return PropagationBatch(r=out.r * 1e3, v=out.v * 1e3, error=out.error)

    # ------------------------------------------------------------------
    # Representation
    # ------------------------------------------------------------------

    def __repr__(self) -> str:
        return (
            f"TLE(satnum={self.satnum!r}, epoch={self._epoch.isoformat()}, "
            f"n={self.n:.8f} rev/day, gravity={self._record.gravity.name!r})"
        )
