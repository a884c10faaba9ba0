"""Module-wide floating-point precision.

Controls the float dtype of the ``jax.numpy`` code paths (frame rotations,
coordinate conversions, Doppler and illumination) and of the position
buffers the pipeline hands to a renderer.  The default is ``float32``,
the precision renderers consume; ``float64`` is available for analysis
and enables JAX's 64-bit mode.

Half precision is rejected: Earth-fixed coordinates in metres exceed the
float16 range.  Propagation itself always runs in double precision inside
``sgp4``; only its results are cast.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
import numpy as np

_PRECISIONS = {
    np.dtype(np.float32): jnp.float32,
    np.dtype(np.float64): jnp.float64,
}

_dtype = jnp.float32


def set_dtype(dtype) -> None:
    """Set the module-wide float dtype.

    Args:
        dtype: ``jnp.float32`` or ``jnp.float64``; NumPy dtypes and the
            names ``"float32"``/``"float64"`` are accepted as well.

    Raises:
        ValueError: If *dtype* is not single or double precision.
    """
    global _dtype
    try:
        key = np.dtype(dtype)
    except TypeError as exc:
        raise ValueError(f"Unsupported dtype {dtype!r}") from exc
    if key not in _PRECISIONS:
        raise ValueError(f"Unsupported dtype {dtype!r}: positions need float32 or float64")
    if key == np.float64:
        jax.config.update("jax_enable_x64", True)
    _dtype = _PRECISIONS[key]


def get_dtype():
    """Return the active float dtype (default ``jnp.float32``)."""
    return _dtype


def get_buffer_dtype() -> np.dtype:
    """NumPy dtype of host-side position buffers, matching :func:`get_dtype`."""
    return np.dtype(_dtype)
