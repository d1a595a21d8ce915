import jax.numpy as jnp
import pytest

from tlejax.config import set_dtype


@pytest.fixture(autouse=True)
def _ensure_float64():
    """Set float64 precision before every test.

    Tests that change the dtype (e.g. the float32 propagation checks) would
    otherwise leak their setting into later tests in the same process.
    """
    set_dtype(jnp.float64)
