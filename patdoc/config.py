"""Catalog configuration loaded from ``patdoc.yaml``."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]
from attrs import define, field

from patdoc.parser.category import Category
from patdoc.parser.section_kind import SectionKind

logger = logging.getLogger(__name__)

CONFIG_FILES = ("patdoc.yaml", ".patdoc.yaml", "patdoc.yml", ".patdoc.yml")

ERROR = "error"
WARNING = "warning"
OFF = "off"

# Every lint rule and its default severity.
DEFAULT_SEVERITIES: dict[str, str] = {
    "broken-link": ERROR,
    "orphan-article": ERROR,
    "duplicate-link": ERROR,
    "duplicate-name": ERROR,
    "duplicate-slug": ERROR,
    "catalog-size": ERROR,
    "missing-code-example": ERROR,
    "section-order": ERROR,
    "missing-section": WARNING,
    "missing-title": WARNING,
    "untagged-code-block": WARNING,
    "category-mismatch": WARNING,
    "broken-article-link": WARNING,
    "external-link": WARNING,
}


def _default_counts() -> dict[Category, int]:
    return {Category.DESIGN_PATTERN: 15, Category.ARCHITECTURE: 6}


def _default_sections() -> list[SectionKind]:
    return list(SectionKind)


@define(slots=True)
class Config:
    """Settings describing the layout and the rules of a catalog.

    Attributes:
        index_file: Name of the index page at the catalog root.
        docs_dir: Directory holding the articles.
        article_filename: File name of each article inside its directory.
        expected_counts: Number of articles expected per category; an
            empty mapping disables the size check.
        required_sections: Canonical sections every article should have.
        rules: Severity per rule: ``error``, ``warning`` or ``off``.
        external_timeout: Timeout in seconds for external link checks.
    """

    index_file: str = "readme.md"
    docs_dir: str = "docs"
    article_filename: str = "index.md"
    expected_counts: dict[Category, int] = field(factory=_default_counts)
    required_sections: list[SectionKind] = field(factory=_default_sections)
    rules: dict[str, str] = field(factory=lambda: dict(DEFAULT_SEVERITIES))
    external_timeout: float = 10.0

    @property
    def expected_total(self) -> int | None:
        """Total number of articles expected, ``None`` when unchecked."""

        if not self.expected_counts:
            return None
        return sum(self.expected_counts.values())

    def severity(self, rule: str) -> str:
        """Return the configured severity of ``rule``."""

        return self.rules.get(rule, DEFAULT_SEVERITIES[rule])


def find_config_file(root: Path) -> Path | None:
    """Locate the configuration file for the catalog at ``root``.

    The ``PATDOC_CONFIG`` environment variable takes precedence over the
    files searched in ``root``.

    Args:
        root: Catalog root directory.

    Returns:
        Path of the configuration file, or ``None`` when there is none.
    """

    env_path = os.environ.get("PATDOC_CONFIG")
    if env_path:
        return Path(env_path)

    for name in CONFIG_FILES:
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None


def config_from_dict(data: dict[str, Any]) -> Config:
    """Build a ``Config`` from a mapping read from YAML.

    Args:
        data: Mapping using the attribute names of ``Config``.

    Returns:
        The validated configuration.

    Throws:
        ValueError: On unknown keys, rules, severities, categories or
            section names.
    """

    known = {
        "index_file",
        "docs_dir",
        "article_filename",
        "expected_counts",
        "required_sections",
        "rules",
        "external_timeout",
    }
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")

    kwargs: dict[str, Any] = {
        key: data[key]
        for key in ("index_file", "docs_dir", "article_filename")
        if key in data
    }

    if "external_timeout" in data:
        kwargs["external_timeout"] = float(data["external_timeout"])

    if "expected_counts" in data:
        counts = data["expected_counts"] or {}
        kwargs["expected_counts"] = {
            Category.from_text(str(name)): int(count)
            for name, count in counts.items()
        }

    if "required_sections" in data:
        sections: list[SectionKind] = []
        for name in data["required_sections"] or []:
            kind = SectionKind.match(str(name))
            if kind is None:
                raise ValueError(f"Unknown section: {name!r}")
            sections.append(kind)
        kwargs["required_sections"] = sections

    rules = dict(DEFAULT_SEVERITIES)
    for rule, severity in (data.get("rules") or {}).items():
        if rule not in DEFAULT_SEVERITIES:
            raise ValueError(f"Unknown rule: {rule!r}")

        # YAML reads a bare ``off`` as ``False``.
        value = OFF if severity is False else str(severity).lower()
        if value not in (ERROR, WARNING, OFF):
            raise ValueError(f"Invalid severity for {rule}: {severity!r}")
        rules[rule] = value
    kwargs["rules"] = rules

    return Config(**kwargs)


def load_config(root: Path, path: Path | None = None) -> Config:
    """Load the configuration of the catalog at ``root``.

    Args:
        root: Catalog root directory.
        path: Explicit configuration file; searched for when omitted.

    Returns:
        The configuration, or the defaults when no file exists.
    """

    path = path or find_config_file(root)
    if path is None:
        return Config()

    logger.debug(f"Loading configuration from {path}")
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: configuration must be a mapping")
    return config_from_dict(data)
