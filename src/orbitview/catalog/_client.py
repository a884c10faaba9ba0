"""Element set download with mirror fallback and file caching.

Fetches a whole-catalog TLE text from a list of public mirrors, caches it
on disk, and serves the cache while it is fresh.  Network errors are
propagated by :func:`download_tle_text`; :class:`CatalogClient` catches
them per mirror, logs, and moves on to the next source.
"""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

from orbitview.catalog._tle import parse_tle_text
from orbitview.catalog._types import ElementSet
from orbitview.utils.caching import catalog_cache_file, is_stale

logger = logging.getLogger(__name__)

DEFAULT_MIRRORS: tuple[str, ...] = (
    "https://celestrak.org/NORAD/elements/gp.php?GROUP=active&FORMAT=tle",
    "https://www.amsat.org/tle/current/nasabare.txt",
    "https://celestrak.org/NORAD/elements/gp.php?GROUP=stations&FORMAT=tle",
)
"""Catalog sources tried in order."""

_CACHE_FILENAME = "catalog.tle"
_DEFAULT_MAX_CACHE_AGE = 7200.0  # 2 hours
_DEFAULT_TIMEOUT = 60.0
_USER_AGENT = "orbitview/0.1 (catalog-cache)"


def looks_like_tle(text: str) -> bool:
    """Cheap sanity check that a response body holds TLE data."""
    return "\n1 " in text or "\r\n1 " in text or text.startswith("1 ")


def download_tle_text(url: str, *, timeout: float = _DEFAULT_TIMEOUT) -> str:
    """Download catalog text from *url*.

    Args:
        url: Mirror URL.
        timeout: HTTP timeout in seconds.

    Returns:
        The response body.

    Raises:
        httpx.HTTPStatusError: If the server returns a non-2xx status.
        httpx.TransportError: On network-level failures (DNS, timeout, etc.).
    """
    logger.info("Downloading element sets from %s", url)
    with httpx.Client(
        timeout=timeout,
        follow_redirects=True,
        headers={"User-Agent": _USER_AGENT},
    ) as client:
        response = client.get(url)
        response.raise_for_status()
    return response.text


class CatalogClient:
    """Catalog client with mirror fallback and a file cache.

    Args:
        mirrors: URLs tried in order. Default: :data:`DEFAULT_MIRRORS`.
        cache_path: Cache file. Default: ``<cache>/catalog/catalog.tle``.
        cache_max_age: Cache TTL in seconds. Default: 7200.0 (2 hours).
        timeout: Per-request HTTP timeout in seconds.
    """

    def __init__(
        self,
        mirrors: tuple[str, ...] | list[str] = DEFAULT_MIRRORS,
        cache_path: str | Path | None = None,
        cache_max_age: float = _DEFAULT_MAX_CACHE_AGE,
        timeout: float = _DEFAULT_TIMEOUT,
    ) -> None:
        if not mirrors:
            raise ValueError("At least one mirror URL is required")
        self._mirrors = tuple(mirrors)
        self._cache_path = (
            Path(cache_path) if cache_path is not None
            else catalog_cache_file(_CACHE_FILENAME)
        )
        self._cache_max_age = cache_max_age
        self._timeout = timeout

    @property
    def cache_path(self) -> Path:
        """Location of the cache file."""
        return self._cache_path

    def fetch_text(self) -> str:
        """Return catalog text from the fresh cache or the first working mirror.

        Falls back to a stale cache when every mirror fails.

        Returns:
            Raw catalog text.

        Raises:
            RuntimeError: If no mirror answers with TLE data and no cache exists.
        """
        if not is_stale(self._cache_path, self._cache_max_age):
            logger.info("Using cached element sets from %s", self._cache_path)
            return self._cache_path.read_text(encoding="utf-8")

        for url in self._mirrors:
            try:
                text = download_tle_text(url, timeout=self._timeout)
            except httpx.HTTPError:
                logger.warning("Mirror %s failed; trying next source.", url, exc_info=True)
                continue

            if not looks_like_tle(text):
                logger.warning("Mirror %s returned no TLE data; trying next source.", url)
                continue

            self._cache_path.parent.mkdir(parents=True, exist_ok=True)
            self._cache_path.write_text(text, encoding="utf-8")
            logger.info("Element sets from %s written to %s", url, self._cache_path)
            return text

        if self._cache_path.exists():
            logger.warning(
                "All mirrors failed; falling back to stale cache %s.", self._cache_path
            )
            return self._cache_path.read_text(encoding="utf-8")

        raise RuntimeError(
            f"Unable to fetch element sets: all {len(self._mirrors)} mirrors failed "
            f"and no cache exists at {self._cache_path}"
        )

    def fetch(self) -> list[ElementSet]:
        """Fetch and parse the catalog.

        Returns:
            Parsed element sets.
        """
        element_sets = parse_tle_text(self.fetch_text())
        logger.info("Parsed %d element sets", len(element_sets))
        return element_sets
