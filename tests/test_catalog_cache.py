"""Tests for the timed catalog cache."""

from __future__ import annotations

from pathlib import Path

import pytest

from patdoc import catalog_cache
from patdoc.parser import Catalog, CatalogInfo, Index


def _sample_catalog(root: Path) -> Catalog:
    """Return an empty catalog for tests."""
    info = CatalogInfo(
        root=str(root), index_path="readme.md", docs_dir="docs", title="T"
    )
    return Catalog(info=info, index=Index(path="readme.md", title="T"))


def test_get_catalog_caches(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """Repeated calls should reuse the cached ``Catalog``."""

    # Prepare fake loader to count invocations.
    calls = {"count": 0}

    def fake_loader(root: Path) -> Catalog:
        calls["count"] += 1
        return _sample_catalog(root)

    monkeypatch.setattr(catalog_cache, "_load_catalog", fake_loader)

    # First call parses and caches.
    first = catalog_cache.get_catalog(tmp_path)
    assert calls["count"] == 1

    # Second call should hit cache, also through a relative spelling.
    second = catalog_cache.get_catalog(tmp_path / ".")
    assert calls["count"] == 1
    assert first is second

    # Expire cache and ensure reload.
    catalog_cache._CACHE[tmp_path.resolve()] = (0.0, first)
    catalog_cache.get_catalog(tmp_path)
    assert calls["count"] == 2

    catalog_cache.clear_cache()
    catalog_cache.get_catalog(tmp_path)
    assert calls["count"] == 3


def test_get_catalog_reads_configuration(catalog_root: Path) -> None:
    """The cached catalog honors the configuration file of its root."""

    (catalog_root / "patdoc.yaml").write_text(
        "docs_dir: missing\n", encoding="utf-8"
    )
    catalog = catalog_cache.get_catalog(catalog_root)
    assert catalog.articles == []
    assert len(catalog.index.entries) == 21
