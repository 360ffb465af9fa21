"""Content-integrity checks for a parsed catalog."""

from __future__ import annotations

import logging
from collections import defaultdict
from pathlib import Path

from attrs import define, field

from patdoc.config import ERROR, OFF, WARNING, Config
from patdoc.parser import Article, Catalog, IndexEntry, SectionKind, to_dict
from patdoc.parser.category import Category
from patdoc.parser.types import JSONDict
from patdoc.parser.utils import _is_relative_link, _link_target

logger = logging.getLogger(__name__)


@define(slots=True)
class Violation:
    """Single finding of a content check.

    Attributes:
        rule: Name of the rule that failed, e.g. ``broken-link``.
        severity: ``error`` or ``warning``.
        path: File the finding refers to, relative to the catalog root.
        line: 1-based line of the finding, ``0`` for whole-file findings.
        message: Human readable description.
    """

    rule: str
    severity: str
    path: str
    line: int
    message: str

    def format(self) -> str:
        """Return the finding as a ``path:line: severity [rule] message``."""

        return (
            f"{self.path}:{self.line}: {self.severity} [{self.rule}] "
            f"{self.message}"
        )


@define(slots=True)
class LintReport:
    """Findings of a lint run.

    Attributes:
        violations: Findings sorted by file and line.
        checked_files: Number of files inspected.
    """

    violations: list[Violation] = field(factory=list)
    checked_files: int = 0

    @property
    def error_count(self) -> int:
        return sum(1 for v in self.violations if v.severity == ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for v in self.violations if v.severity == WARNING)

    @property
    def ok(self) -> bool:
        """Whether the run found no errors."""

        return self.error_count == 0

    def rules(self) -> set[str]:
        """Return the names of the rules that reported findings."""

        return {v.rule for v in self.violations}

    def summary(self) -> str:
        return (
            f"{self.error_count} error(s), {self.warning_count} warning(s) "
            f"in {self.checked_files} file(s)"
        )

    def to_dict(self) -> JSONDict:
        return {
            "ok": self.ok,
            "errors": self.error_count,
            "warnings": self.warning_count,
            "checked_files": self.checked_files,
            "violations": [to_dict(v) for v in self.violations],
        }


class _Collector:
    """Accumulate violations applying the configured severities."""

    def __init__(self, config: Config) -> None:
        self.config = config
        self.violations: list[Violation] = []

    def add(self, rule: str, path: str, line: int, message: str) -> None:
        severity = self.config.severity(rule)
        if severity == OFF:
            return
        self.violations.append(
            Violation(
                rule=rule,
                severity=severity,
                path=path,
                line=line,
                message=message,
            )
        )


@define(slots=True)
class _Row:
    """Index row resolved against the filesystem."""

    entry: IndexEntry
    target: Path


def _resolve_rows(
    catalog: Catalog, root: Path, config: Config, out: _Collector
) -> list[_Row]:
    """Resolve index rows and report the ones pointing nowhere.

    Rows targeting existing files outside the documentation directory,
    such as a contributing guide, are not catalog rows and are skipped.
    """

    index_path = catalog.index.path
    base = (root / index_path).parent
    docs_dir = (root / config.docs_dir).resolve()
    articles = {(root / a.path).resolve() for a in catalog.articles}

    rows: list[_Row] = []
    for entry in catalog.index.entries:
        target = (base / _link_target(entry.href)).resolve()
        if not target.is_file():
            out.add(
                "broken-link",
                index_path,
                entry.line,
                f"'{entry.name}' links to missing file {entry.href}",
            )
            continue

        if docs_dir not in target.parents:
            logger.debug(f"Skipping non-article link {entry.href}")
            continue

        # Notes or assets next to an article do not count as entries.
        if target not in articles:
            out.add(
                "broken-link",
                index_path,
                entry.line,
                f"'{entry.name}' links to {entry.href}, which is not an "
                "article",
            )
            continue

        rows.append(_Row(entry=entry, target=target))
    return rows


def _check_round_trip(
    catalog: Catalog, rows: list[_Row], root: Path, out: _Collector
) -> None:
    """Every article is linked by exactly one index row."""

    by_target: dict[Path, list[_Row]] = defaultdict(list)
    for row in rows:
        by_target[row.target].append(row)

    for article in catalog.articles:
        linked = by_target.get((root / article.path).resolve(), [])
        if not linked:
            out.add(
                "orphan-article",
                article.path,
                0,
                f"'{article.title or article.slug}' is not linked from "
                f"{catalog.index.path}",
            )
            continue

        for extra in linked[1:]:
            out.add(
                "duplicate-link",
                catalog.index.path,
                extra.entry.line,
                f"{article.path} is already linked on line "
                f"{linked[0].entry.line}",
            )


def _check_names(catalog: Catalog, rows: list[_Row], out: _Collector) -> None:
    """No name appears twice in the index."""

    first_seen: dict[str, IndexEntry] = {}
    for row in rows:
        key = row.entry.name.casefold()
        if key in first_seen:
            out.add(
                "duplicate-name",
                catalog.index.path,
                row.entry.line,
                f"'{row.entry.name}' is already listed on line "
                f"{first_seen[key].line}",
            )
            continue
        first_seen[key] = row.entry


def _check_slugs(catalog: Catalog, out: _Collector) -> None:
    """Each slug resolves to exactly one article file."""

    by_slug: dict[str, list[Article]] = defaultdict(list)
    for article in catalog.articles:
        by_slug[article.slug].append(article)

    for slug, articles in by_slug.items():
        for article in articles[1:]:
            out.add(
                "duplicate-slug",
                article.path,
                0,
                f"slug '{slug}' is also used by {articles[0].path}",
            )


def _row_category(row: _Row, articles: dict[Path, Article]) -> Category | None:
    """Return the category of a row, falling back to its article."""

    if row.entry.category is not None:
        return row.entry.category
    article = articles.get(row.target)
    return article.category if article else None


def _check_size(
    catalog: Catalog,
    rows: list[_Row],
    root: Path,
    config: Config,
    out: _Collector,
) -> None:
    """The catalog holds the configured number of entries per category."""

    expected_total = config.expected_total
    if expected_total is None:
        return

    articles = {(root / a.path).resolve(): a for a in catalog.articles}

    if len(rows) != expected_total:
        out.add(
            "catalog-size",
            catalog.index.path,
            0,
            f"index lists {len(rows)} entries, expected {expected_total}",
        )

    counts: dict[Category | None, int] = defaultdict(int)
    for row in rows:
        counts[_row_category(row, articles)] += 1

    for category, expected in config.expected_counts.items():
        if counts[category] != expected:
            out.add(
                "catalog-size",
                catalog.index.path,
                0,
                f"index lists {counts[category]} {category.label.lower()}, "
                f"expected {expected}",
            )


def _check_categories(
    catalog: Catalog, rows: list[_Row], root: Path, out: _Collector
) -> None:
    """Rows are grouped under the category of the article they link."""

    articles = {(root / a.path).resolve(): a for a in catalog.articles}
    for row in rows:
        article = articles.get(row.target)
        if (
            article is None
            or article.category is None
            or row.entry.category is None
        ):
            continue
        if article.category is not row.entry.category:
            out.add(
                "category-mismatch",
                catalog.index.path,
                row.entry.line,
                f"'{row.entry.name}' is listed under "
                f"{row.entry.category.label} but {article.path} is in "
                f"{article.category.label}",
            )


def _check_sections(article: Article, config: Config, out: _Collector) -> None:
    """Canonical sections are present and appear in canonical order."""

    present = {s.kind for s in article.sections if s.kind is not None}
    for kind in config.required_sections:
        if kind not in present:
            out.add(
                "missing-section",
                article.path,
                0,
                f"missing '{kind.value}' section",
            )

    if not article.sections:
        return

    # Only the outermost headings take part in the ordering.
    top_level = min(s.level for s in article.sections)
    latest = None
    for section in article.sections:
        if section.level != top_level or section.kind is None:
            continue

        if latest is not None and section.kind.position < latest.kind.position:
            out.add(
                "section-order",
                article.path,
                section.line,
                f"'{section.heading}' ({section.kind.value}) should come "
                f"before '{latest.heading}' ({latest.kind.value})",
            )
            continue
        latest = section


def _check_examples(article: Article, out: _Collector) -> None:
    """The worked example holds code and every fence names its language."""

    position = article.find_section(
        SectionKind.WORKED_EXAMPLE, outermost=True
    )
    if position is not None:
        span = article.section_span(position)
        if not any(section.examples for section in span):
            head = span[0]
            out.add(
                "missing-code-example",
                article.path,
                head.line,
                f"'{head.heading}' contains no fenced code block",
            )

    for example in article.code_examples:
        if example.language is None:
            out.add(
                "untagged-code-block",
                article.path,
                example.line,
                "fenced code block has no language tag",
            )


def _check_article_links(
    article: Article, root: Path, out: _Collector
) -> None:
    """Relative links inside the article point to existing files."""

    base = (root / article.path).parent
    for link in article.links:
        if not _is_relative_link(link.href):
            continue
        target_path = _link_target(link.href)
        if not target_path:
            continue
        if not (base / target_path).exists():
            out.add(
                "broken-article-link",
                article.path,
                link.line,
                f"link '{link.text}' points to missing {link.href}",
            )


def lint_catalog(
    catalog: Catalog,
    config: Config | None = None,
    external: bool = False,
) -> LintReport:
    """Run every content check over ``catalog``.

    Args:
        catalog: Parsed catalog.
        config: Catalog configuration; defaults apply when omitted.
        external: Also request every ``http(s)`` link.

    Returns:
        The lint report.
    """

    config = config or Config()
    root = Path(catalog.info.root)
    out = _Collector(config)

    rows = _resolve_rows(catalog, root, config, out)
    _check_round_trip(catalog, rows, root, out)
    _check_names(catalog, rows, out)
    _check_slugs(catalog, out)
    _check_size(catalog, rows, root, config, out)
    _check_categories(catalog, rows, root, out)

    for article in catalog.articles:
        if not article.title:
            out.add(
                "missing-title", article.path, 0, "no level-1 heading"
            )
        _check_sections(article, config, out)
        _check_examples(article, out)
        _check_article_links(article, root, out)

    if external and config.severity("external-link") != OFF:
        from patdoc.link_checker import check_external_links

        for path, link, problem in check_external_links(
            catalog, timeout=config.external_timeout
        ):
            out.add(
                "external-link",
                path,
                link.line,
                f"{link.href} {problem}",
            )

    violations = sorted(out.violations, key=lambda v: (v.path, v.line))
    report = LintReport(
        violations=violations, checked_files=len(catalog.articles) + 1
    )
    logger.info(report.summary())
    return report


def lint_article(article: Article, config: Config | None = None) -> LintReport:
    """Run the per-article structural checks on a single article.

    Args:
        article: Parsed article.
        config: Catalog configuration; defaults apply when omitted.

    Returns:
        The lint report, without index or filesystem checks.
    """

    config = config or Config()
    out = _Collector(config)

    if not article.title:
        out.add("missing-title", article.path, 0, "no level-1 heading")
    _check_sections(article, config, out)
    _check_examples(article, out)

    violations = sorted(out.violations, key=lambda v: v.line)
    return LintReport(violations=violations, checked_files=1)
