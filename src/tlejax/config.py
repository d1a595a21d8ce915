"""Module-wide floating-point precision configuration.

Provides ``set_dtype`` and ``get_dtype`` to control the float dtype used by
the propagation kernel.  The default is ``jnp.float64``: SGP4 state vectors
are compared against published verification data at the metre level, which
single precision cannot resolve.  JAX's 64-bit mode (``jax_enable_x64``) is
enabled when this module is imported so the default dtype is honoured.

Call ``set_dtype`` **before** any JIT compilation, just like JAX's own
``jax.config.update("jax_enable_x64", True)``.  Under JIT, ``get_dtype()``
runs during tracing and its result is baked into the compiled program.
JAX retraces when input dtypes change, so passing float32 inputs after
``set_dtype(jnp.float32)`` triggers a correct retrace.

Initialization always runs in Python floats (double precision); only the
packed parameter array and the propagation arithmetic follow this setting.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp

_VALID_DTYPES = (jnp.float16, jnp.bfloat16, jnp.float32, jnp.float64)

_dtype = jnp.float64

jax.config.update("jax_enable_x64", True)


def set_dtype(dtype) -> None:
    """Set the module-wide float dtype for tlejax.

    Must be called **before** any ``jax.jit`` compilation.  In eager mode
    the change takes effect immediately.

    If *dtype* is ``jnp.float64``, JAX's 64-bit mode is (re-)enabled via
    ``jax.config.update("jax_enable_x64", True)``.

    Args:
        dtype: One of ``jnp.float16``, ``jnp.bfloat16``, ``jnp.float32``,
            or ``jnp.float64``.

    Raises:
        ValueError: If *dtype* is not a supported float type.
    """
    global _dtype
    if dtype not in _VALID_DTYPES:
        raise ValueError(
            f"Unsupported dtype {dtype}. Must be one of: "
            f"jnp.float16, jnp.bfloat16, jnp.float32, jnp.float64"
        )
    if dtype == jnp.float64:
        jax.config.update("jax_enable_x64", True)
    _dtype = dtype


def get_dtype():
    """Return the current module-wide float dtype.

    Returns:
        The active float dtype (default ``jnp.float64``).
    """
    return _dtype


def get_kepler_tolerance() -> float:
    """Return the dtype-adaptive convergence tolerance for Kepler's equation.

    The Newton iteration stops once the eccentric-anomaly correction drops
    below this value (or after 10 steps). The tolerance scales with the
    precision of the configured float dtype:

    - ``float16``:  1e-3 rad
    - ``bfloat16``: 1e-3 rad
    - ``float32``:  1e-6 rad
    - ``float64``:  1e-12 rad

    Returns:
        float: Tolerance in radians.
    """
    if _dtype == jnp.float64:
        return 1e-12
    if _dtype == jnp.float32:
        return 1e-6
    # float16 and bfloat16
    return 1e-3
