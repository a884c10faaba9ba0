"""On-disk cache for downloaded catalogs.

The cache root is ``$ORBITVIEW_CACHE`` when set, otherwise
``~/.cache/orbitview``.  Freshness is judged from the file's modification
time, so a cache copied in by hand is honored like a downloaded one.
"""

from __future__ import annotations

import os
import time
from pathlib import Path

CACHE_ENV_VAR = "ORBITVIEW_CACHE"


def cache_dir(*parts: str) -> Path:
    """Directory under the cache root, created on first use.

    Args:
        *parts: Path components below the root, e.g. ``"catalog"``.

    Returns:
        The directory path.
    """
    env = os.environ.get(CACHE_ENV_VAR)
    root = Path(env) if env else Path.home() / ".cache" / "orbitview"
    path = root.joinpath(*parts)
    path.mkdir(parents=True, exist_ok=True)
    return path


def catalog_cache_file(filename: str = "catalog.tle") -> Path:
    """Default location of the cached catalog text."""
    return cache_dir("catalog") / filename


def cache_age(path: str | Path) -> float | None:
    """Seconds since *path* was last written, or ``None`` if it is missing."""
    try:
        mtime = Path(path).stat().st_mtime
    except FileNotFoundError:
        return None
    return max(0.0, time.time() - mtime)


def is_stale(path: str | Path, max_age: float) -> bool:
    """Whether *path* is missing or older than *max_age* seconds."""
    age = cache_age(path)
    return age is None or age > max_age
