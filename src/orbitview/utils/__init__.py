"""Utility helpers."""

from .caching import CACHE_ENV_VAR, cache_age, cache_dir, catalog_cache_file, is_stale

__all__ = [
    "CACHE_ENV_VAR",
    "cache_dir",
    "catalog_cache_file",
    "cache_age",
    "is_stale",
]
