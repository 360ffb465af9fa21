"""Cache helpers for parsed catalogs."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Dict, Tuple

from patdoc.config import load_config
from patdoc.parser import Catalog, load_catalog

# Types for cache storage.
CacheEntry = Tuple[float, Catalog]
CacheStore = Dict[Path, CacheEntry]

# Global in-memory cache and its time-to-live in seconds.
_CACHE: CacheStore = {}
_TTL_SECONDS = 15 * 60


def get_catalog(root: Path) -> Catalog:
    """Return the parsed catalog at ``root`` using a timed cache.

    Args:
        root: Catalog root directory.

    Returns:
        Parsed ``Catalog``.
    """

    root = root.resolve()
    now = time.time()
    cached = _CACHE.get(root)

    # Return cached entry when still valid.
    if cached and now - cached[0] < _TTL_SECONDS:
        return cached[1]

    catalog = _load_catalog(root)

    # Store fresh entry in the cache.
    _CACHE[root] = (now, catalog)
    return catalog


def clear_cache() -> None:
    """Forget every cached catalog."""

    _CACHE.clear()


def _load_catalog(root: Path) -> Catalog:
    """Parse the catalog at ``root`` with its own configuration."""

    return load_catalog(root, load_config(root))
