"""Tests for the content-integrity checks."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Any

import pytest
import requests  # type: ignore[import-untyped]

from patdoc import link_checker
from patdoc.config import Config
from patdoc.lint import lint_article, lint_catalog
from patdoc.parser import Category, load_catalog, parse_article

FACTORY_PATH = "docs/design-patterns/factory-method/index.md"


def _append(path: Path, text: str) -> None:
    path.write_text(path.read_text(encoding="utf-8") + text, encoding="utf-8")


def _lint(root: Path, config: Config | None = None, **kwargs: Any) -> Any:
    catalog = load_catalog(root, config or Config())
    return lint_catalog(catalog, config, **kwargs)


def test_valid_catalog_is_clean(catalog_root: Path) -> None:
    report = _lint(catalog_root)
    assert report.violations == []
    assert report.ok
    assert report.checked_files == 22
    assert report.summary() == "0 error(s), 0 warning(s) in 22 file(s)"


def test_missing_article_is_a_broken_link(catalog_root: Path) -> None:
    shutil.rmtree(catalog_root / "docs" / "design-patterns" / "proxy")
    report = _lint(catalog_root)

    broken = [v for v in report.violations if v.rule == "broken-link"]
    assert len(broken) == 1
    assert broken[0].path == "readme.md"
    assert "Proxy" in broken[0].message
    assert not report.ok

    # The catalog is now one design pattern short.
    assert "catalog-size" in report.rules()


def test_unlisted_article_is_an_orphan(catalog_root: Path) -> None:
    extra = catalog_root / "docs" / "design-patterns" / "mediator"
    extra.mkdir()
    (extra / "index.md").write_text("# Mediator\n", encoding="utf-8")

    report = _lint(catalog_root)
    orphans = [v for v in report.violations if v.rule == "orphan-article"]
    assert [v.path for v in orphans] == [
        "docs/design-patterns/mediator/index.md"
    ]


def test_article_linked_twice(catalog_root: Path) -> None:
    _append(
        catalog_root / "readme.md",
        f"- [Factory Method Again](./{FACTORY_PATH}) - Twice.\n",
    )
    report = _lint(catalog_root)
    assert "duplicate-link" in report.rules()
    assert "duplicate-name" not in report.rules()


def test_row_linking_a_non_article_file(catalog_root: Path) -> None:
    proxy = catalog_root / "docs" / "design-patterns" / "proxy"
    (proxy / "notes.md").write_text("# Notes\n", encoding="utf-8")
    readme = catalog_root / "readme.md"
    readme.write_text(
        readme.read_text(encoding="utf-8").replace(
            "proxy/index.md", "proxy/notes.md"
        ),
        encoding="utf-8",
    )

    report = _lint(catalog_root)
    broken = [v for v in report.violations if v.rule == "broken-link"]
    assert len(broken) == 1
    assert broken[0].path == "readme.md"
    assert "not an article" in broken[0].message

    # The row no longer counts, so the article is unlisted.
    assert "orphan-article" in report.rules()
    assert "catalog-size" in report.rules()


def test_name_listed_twice(catalog_root: Path) -> None:
    copy = catalog_root / "docs" / "design-patterns" / "observer-2"
    shutil.copytree(copy.parent / "observer", copy)
    _append(
        catalog_root / "readme.md",
        "- [Observer](./docs/design-patterns/observer-2/index.md) - Again.\n",
    )

    report = _lint(catalog_root)
    names = [v for v in report.violations if v.rule == "duplicate-name"]
    assert len(names) == 1
    assert "'Observer'" in names[0].message


def test_slug_used_twice(catalog_root: Path) -> None:
    clash = catalog_root / "docs" / "architectures" / "decorator"
    clash.mkdir()
    (clash / "index.md").write_text("# Decorator\n", encoding="utf-8")

    report = _lint(catalog_root)
    slugs = [v for v in report.violations if v.rule == "duplicate-slug"]
    assert len(slugs) == 1
    assert "decorator" in slugs[0].message


def test_catalog_size_follows_configuration(catalog_root: Path) -> None:
    config = Config(
        expected_counts={Category.DESIGN_PATTERN: 14, Category.ARCHITECTURE: 6}
    )
    report = _lint(catalog_root, config)
    sizes = [v.message for v in report.violations if v.rule == "catalog-size"]
    assert sizes == [
        "index lists 21 entries, expected 20",
        "index lists 15 design patterns, expected 14",
    ]

    # An empty mapping disables the size check.
    assert _lint(catalog_root, Config(expected_counts={})).violations == []


def test_category_mismatch(catalog_root: Path) -> None:
    readme = catalog_root / "readme.md"
    text = readme.read_text(encoding="utf-8")
    row = next(line for line in text.splitlines() if "Singleton" in line)

    # Move the Singleton row under the architectures heading.
    moved = text.replace(row + "\n", "") + row + "\n"
    readme.write_text(moved, encoding="utf-8")

    report = _lint(catalog_root)
    assert "category-mismatch" in report.rules()
    assert "catalog-size" in report.rules()


def test_rules_can_be_switched_off(catalog_root: Path) -> None:
    shutil.rmtree(catalog_root / "docs" / "design-patterns" / "proxy")
    config = Config()
    config.rules["broken-link"] = "off"
    config.rules["catalog-size"] = "warning"

    report = _lint(catalog_root, config)
    assert "broken-link" not in report.rules()
    assert report.ok
    assert report.warning_count == 2


def test_section_order() -> None:
    text = (
        "# Builder\n\n"
        "## Definition\n\nBuilds things.\n\n"
        "## Conclusion\n\nDone.\n\n"
        "## Worked Example\n\n```python\nBuilder()\n```\n"
    )
    report = lint_article(parse_article(text, "builder.md"))

    order = [v for v in report.violations if v.rule == "section-order"]
    assert len(order) == 1
    assert order[0].line == 11
    assert "'Worked Example'" in order[0].message
    assert "'Conclusion'" in order[0].message


def test_nested_headings_do_not_affect_order() -> None:
    text = (
        "# Facade\n\n"
        "## Worked Example\n\n### Benefits of the facade\n\n"
        "```python\nFacade()\n```\n\n"
        "## Conclusion\n"
    )
    report = lint_article(parse_article(text, "facade.md"))
    assert "section-order" not in report.rules()
    assert "missing-code-example" not in report.rules()


def test_worked_example_without_code() -> None:
    text = "# Proxy\n\n## Worked Example\n\nImagine a proxy.\n"
    report = lint_article(parse_article(text, "proxy.md"))

    missing = [
        v for v in report.violations if v.rule == "missing-code-example"
    ]
    assert len(missing) == 1
    assert missing[0].line == 3
    assert missing[0].severity == "error"


def test_outermost_worked_example_is_checked() -> None:
    text = (
        "# Builder\n\n"
        "## When to Use\n\n### Example scenarios\n\nBuilding reports.\n\n"
        "## Worked Example\n\n```python\nBuilder()\n```\n"
    )
    report = lint_article(parse_article(text, "builder.md"))
    assert "missing-code-example" not in report.rules()


def test_missing_sections_and_untagged_code() -> None:
    text = "## Worked Example\n\n```\ncode()\n```\n"
    report = lint_article(parse_article(text, "command.md"))

    assert report.ok
    assert "missing-title" in report.rules()
    assert "untagged-code-block" in report.rules()
    missing = [v for v in report.violations if v.rule == "missing-section"]
    assert len(missing) == 8


def test_broken_article_link(catalog_root: Path) -> None:
    _append(
        catalog_root / FACTORY_PATH,
        "\nSee [Builder](../builder/index.md) and [gone](../gone/index.md).\n",
    )
    report = _lint(catalog_root)

    links = [v for v in report.violations if v.rule == "broken-article-link"]
    assert len(links) == 1
    assert "../gone/index.md" in links[0].message
    assert links[0].severity == "warning"


def test_external_links_are_opt_in(
    catalog_root: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    _append(
        catalog_root / FACTORY_PATH,
        "\nSee [the book](https://example.com/gof).\n",
    )
    calls: list[str] = []

    def fake_check(session: object, url: str, timeout: float) -> str:
        calls.append(url)
        return "answered HTTP 404"

    monkeypatch.setattr(link_checker, "_check_url", fake_check)

    assert "external-link" not in _lint(catalog_root).rules()
    assert calls == []

    report = _lint(catalog_root, external=True)
    external = [v for v in report.violations if v.rule == "external-link"]
    assert calls == ["https://example.com/gof"]
    assert external[0].message == "https://example.com/gof answered HTTP 404"


class _FakeResponse:
    def __init__(self, status_code: int) -> None:
        self.status_code = status_code

    def close(self) -> None:
        pass


class _FakeSession:
    def __init__(self, head: int, get: int) -> None:
        self.head_status = head
        self.get_status = get

    def head(self, url: str, **kwargs: object) -> _FakeResponse:
        return _FakeResponse(self.head_status)

    def get(self, url: str, **kwargs: object) -> _FakeResponse:
        return _FakeResponse(self.get_status)


class _FailingSession:
    def head(self, url: str, **kwargs: object) -> _FakeResponse:
        raise requests.ConnectionError("refused")


def test_check_url_falls_back_to_get() -> None:
    session: Any = _FakeSession(head=405, get=200)
    assert link_checker._check_url(session, "https://x.test", 1.0) is None

    session = _FakeSession(head=404, get=404)
    assert link_checker._check_url(session, "https://x.test", 1.0) == (
        "answered HTTP 404"
    )

    failing: Any = _FailingSession()
    assert link_checker._check_url(failing, "https://x.test", 1.0) == (
        "failed: ConnectionError"
    )
