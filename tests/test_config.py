"""Tests for the tlejax.config module."""

import jax
import jax.numpy as jnp
import pytest

from tlejax.config import get_dtype, get_kepler_tolerance, set_dtype
from tlejax.sgp4 import WGS72, parse_tle, sgp4_init, sgp4_propagate

ISS_LINE1 = "1 25544U 98067A   08264.51782528 -.00002182  00000-0 -11606-4 0  2927"
ISS_LINE2 = "2 25544  51.6416 247.4627 0006703 130.5360 325.0288 15.72125391563537"


@pytest.fixture(autouse=True)
def reset_dtype():
    """Reset dtype to the float64 default before and after each test."""
    set_dtype(jnp.float64)
    yield
    set_dtype(jnp.float64)


class TestGetSetDtype:
    def test_default_dtype(self):
        assert get_dtype() == jnp.float64

    def test_set_float32(self):
        set_dtype(jnp.float32)
        assert get_dtype() == jnp.float32

    def test_set_float16(self):
        set_dtype(jnp.float16)
        assert get_dtype() == jnp.float16

    def test_set_bfloat16(self):
        set_dtype(jnp.bfloat16)
        assert get_dtype() == jnp.bfloat16

    def test_roundtrip(self):
        for dtype in (jnp.float16, jnp.bfloat16, jnp.float32, jnp.float64):
            set_dtype(dtype)
            assert get_dtype() == dtype

    def test_invalid_dtype_raises(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype(jnp.int32)

    def test_invalid_dtype_string_raises(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype("float64")

    def test_float64_enables_x64(self):
        set_dtype(jnp.float64)
        assert jax.config.jax_enable_x64 is True

    def test_import_enables_x64_process_wide(self):
        import tlejax

        assert jax.config.jax_enable_x64 is True
        assert jnp.zeros(1).dtype == jnp.float64
        assert "jax_enable_x64" in tlejax.__doc__


class TestKeplerTolerance:
    def test_float64_tolerance(self):
        assert get_kepler_tolerance() == 1e-12

    def test_float32_tolerance(self):
        set_dtype(jnp.float32)
        assert get_kepler_tolerance() == 1e-6

    def test_float16_tolerance(self):
        set_dtype(jnp.float16)
        assert get_kepler_tolerance() == 1e-3

    def test_bfloat16_tolerance(self):
        set_dtype(jnp.bfloat16)
        assert get_kepler_tolerance() == 1e-3


class TestDtypePropagation:
    """The configured dtype flows into packed parameters and outputs."""

    def test_params_follow_dtype(self):
        set_dtype(jnp.float32)
        record = sgp4_init(parse_tle(ISS_LINE1, ISS_LINE2), WGS72)
        assert record.params.dtype == jnp.float32

    def test_outputs_follow_dtype(self):
        set_dtype(jnp.float32)
        record = sgp4_init(parse_tle(ISS_LINE1, ISS_LINE2), WGS72)
        sv = sgp4_propagate(record, 60.0)
        assert sv.r.dtype == jnp.float32
        assert sv.v.dtype == jnp.float32

    def test_float64_outputs(self):
        record = sgp4_init(parse_tle(ISS_LINE1, ISS_LINE2), WGS72)
        sv = sgp4_propagate(record, 60.0)
        assert sv.r.dtype == jnp.float64
