"""Shared fixtures building documentation catalogs on disk."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from patdoc.catalog_cache import clear_cache
from patdoc.parser import Category
from patdoc.template import render_article

# Name, emoji and worked example scenario of each article.
DESIGN_PATTERNS = [
    ("Factory Method", "🏭", "transport logistics"),
    ("Decorator", "☕", "a coffee shop"),
    ("Iterator", "🔁", "a music playlist"),
    ("Prototype", "🧬", "document templates"),
    ("Facade", "🏢", "a home theater"),
    ("Composite", "🌳", "a file system"),
    ("Flyweight", "🪶", "a forest renderer"),
    ("Chain of Responsibility", "⛓️", "support tickets"),
    ("Command", "🎮", "a text editor"),
    ("Adapter", "🔌", "payment gateways"),
    ("Builder", "🏗️", "a house"),
    ("Observer", "👀", "a newsletter"),
    ("Singleton", "💍", "a configuration registry"),
    ("Abstract Factory", "🏭", "furniture families"),
    ("Proxy", "🛡️", "image loading"),
]

ARCHITECTURES = [
    ("Hexagonal Architecture", "⬡", "an order service"),
    ("Microservices", "🧱", "an online shop"),
    ("Clean Architecture", "🧼", "a todo application"),
    ("Layered Architecture", "🍰", "a banking system"),
    ("Event-Driven Architecture", "📣", "a delivery tracker"),
    ("Domain-Driven Design", "🗺️", "a library domain"),
]

CatalogFactory = Callable[..., Path]


def _slug(name: str) -> str:
    return name.lower().replace(" ", "-")


def _readme(
    patterns: list[tuple[str, str, str]],
    architectures: list[tuple[str, str, str]],
) -> str:
    """Return an index page listing the given articles."""

    lines = ["# 📚 Design Patterns and Architectures Guide", ""]
    for heading, directory, rows in (
        ("## 🧩 Design Patterns", "design-patterns", patterns),
        ("## 🏛️ Architectures", "architectures", architectures),
    ):
        lines.extend([heading, ""])
        for name, emoji, scenario in rows:
            lines.append(
                f"- [{emoji} {name}](./docs/{directory}/{_slug(name)}/"
                f"index.md) - Illustrated with {scenario}."
            )
        lines.append("")
    return "\n".join(lines)


@pytest.fixture(autouse=True)
def _isolated_cache(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test with an empty catalog cache and no config env."""

    monkeypatch.delenv("PATDOC_CONFIG", raising=False)
    clear_cache()


@pytest.fixture
def make_catalog(tmp_path: Path) -> CatalogFactory:
    """Return a factory writing a catalog of articles under ``tmp_path``."""

    def factory(
        patterns: list[tuple[str, str, str]] | None = None,
        architectures: list[tuple[str, str, str]] | None = None,
        name: str = "guide",
    ) -> Path:
        patterns = DESIGN_PATTERNS if patterns is None else patterns
        architectures = (
            ARCHITECTURES if architectures is None else architectures
        )
        root = tmp_path / name

        for category, rows in (
            (Category.DESIGN_PATTERN, patterns),
            (Category.ARCHITECTURE, architectures),
        ):
            for title, emoji, scenario in rows:
                target = (
                    root / "docs" / category.directory / _slug(title)
                )
                target.mkdir(parents=True)
                (target / "index.md").write_text(
                    render_article(title, category, scenario, emoji),
                    encoding="utf-8",
                )

        (root / "readme.md").write_text(
            _readme(patterns, architectures), encoding="utf-8"
        )
        return root

    return factory


@pytest.fixture
def catalog_root(make_catalog: CatalogFactory) -> Path:
    """Return the root of a complete, valid catalog of 21 articles."""

    return make_catalog()
