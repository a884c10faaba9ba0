import jax
import jax.numpy as jnp
import numpy as np
import pytest

from orbitview.config import get_buffer_dtype, get_dtype, set_dtype
from orbitview.frames import positions_teme_to_pef


@pytest.fixture(autouse=True)
def reset_dtype():
    """Start and finish every test at the library default."""
    set_dtype(jnp.float32)
    yield
    set_dtype(jnp.float32)


class TestSetDtype:
    def test_default(self):
        assert get_dtype() == jnp.float32

    @pytest.mark.parametrize("value", [jnp.float64, np.float64, "float64", np.dtype("float64")])
    def test_double_precision_spellings(self, value):
        set_dtype(value)
        assert get_dtype() is jnp.float64

    def test_single_precision_by_name(self):
        set_dtype(jnp.float64)
        set_dtype("float32")
        assert get_dtype() is jnp.float32

    @pytest.mark.parametrize("value", [jnp.float16, jnp.bfloat16, jnp.int32, "complex64"])
    def test_rejected(self, value):
        with pytest.raises(ValueError, match="float32 or float64"):
            set_dtype(value)

    def test_not_a_dtype(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype("metres")

    def test_rejection_keeps_previous(self):
        set_dtype(jnp.float64)
        with pytest.raises(ValueError):
            set_dtype(jnp.float16)
        assert get_dtype() is jnp.float64

    def test_float64_enables_x64(self):
        set_dtype(jnp.float64)
        assert jax.config.jax_enable_x64 is True


class TestBufferDtype:
    def test_float32(self):
        assert get_buffer_dtype() == np.float32

    def test_float64(self):
        set_dtype(jnp.float64)
        assert get_buffer_dtype() == np.float64


class TestDtypePropagation:
    def test_rotation_float32(self):
        out = positions_teme_to_pef(0.5, [7.0e6, 0.0, 0.0])
        assert out.dtype == jnp.float32

    def test_rotation_float64(self):
        set_dtype(jnp.float64)
        out = positions_teme_to_pef(0.5, [7.0e6, 0.0, 0.0])
        assert out.dtype == jnp.float64
