"""Article skeletons and index generation."""

from __future__ import annotations

import logging
import posixpath
import re
from pathlib import Path

from patdoc.config import Config
from patdoc.parser import Article, Catalog, Category, SectionKind
from patdoc.parser.utils import _link_target, _slugify

logger = logging.getLogger(__name__)

INDEX_START = "<!-- patdoc:index:start -->"
INDEX_END = "<!-- patdoc:index:end -->"

# Line comment marker per fence language.
_COMMENT_MARKERS = {
    "python": "#",
    "py": "#",
    "ruby": "#",
    "bash": "#",
    "sh": "#",
    "yaml": "#",
    "sql": "--",
    "haskell": "--",
}

_PROMPTS = {
    SectionKind.HISTORICAL_CONTEXT: (
        "Where does {name} come from, and which problem did it first solve?"
    ),
    SectionKind.DEFINITION: "{name} is {kind} that ...",
    SectionKind.WHEN_TO_USE: "Reach for {name} when ...",
    SectionKind.BENEFITS: "- ...",
    SectionKind.DRAWBACKS: "- ...",
    SectionKind.WORKED_EXAMPLE: (
        "The example below applies {name} to {scenario}."
    ),
    SectionKind.WHEN_TO_AVOID: "Avoid {name} when ...",
    SectionKind.ALTERNATIVES: "- ...",
    SectionKind.CONCLUSION: "...",
}


def _article_kind(category: Category) -> str:
    if category is Category.ARCHITECTURE:
        return "a software architecture"
    return "a design pattern"


def render_article(
    name: str,
    category: Category,
    scenario: str,
    emoji: str | None = None,
    language: str = "python",
) -> str:
    """Render the Markdown skeleton of a new article.

    The skeleton holds the title, every canonical section in order and a
    language-tagged code block in the worked example.

    Args:
        name: Pattern or architecture name, e.g. ``"Factory Method"``.
        category: Category of the article.
        scenario: Illustrative scenario, e.g. ``"transport logistics"``.
        emoji: Optional emoji shown before the title.
        language: Language tag of the example code block.

    Returns:
        Markdown text of the article.
    """

    title = f"{emoji} {name}" if emoji else name
    values = {
        "name": name,
        "scenario": scenario,
        "kind": _article_kind(category),
    }

    parts = [f"# {title}", ""]
    for kind in SectionKind:
        parts.append(f"## {kind.value}")
        parts.append("")
        parts.append(_PROMPTS[kind].format(**values))
        parts.append("")

        if kind is SectionKind.WORKED_EXAMPLE:
            marker = _COMMENT_MARKERS.get(language.lower(), "//")
            parts.append(f"```{language}")
            parts.append(f"{marker} {name}: {scenario}")
            parts.append("```")
            parts.append("")

    return "\n".join(parts)


def scaffold_article(
    root: Path,
    name: str,
    category: Category,
    scenario: str,
    config: Config,
    emoji: str | None = None,
    language: str = "python",
    force: bool = False,
) -> Path:
    """Write the skeleton of a new article into the documentation tree.

    Args:
        root: Catalog root directory.
        name: Pattern or architecture name.
        category: Category of the article.
        scenario: Illustrative scenario of the worked example.
        config: Catalog configuration.
        emoji: Optional emoji shown before the title.
        language: Language tag of the example code block.
        force: Overwrite an existing article.

    Returns:
        Path of the written article.

    Throws:
        FileExistsError: If the article exists and ``force`` is not set.
    """

    target = (
        root
        / config.docs_dir
        / category.directory
        / _slugify(name)
        / config.article_filename
    )
    if target.exists() and not force:
        raise FileExistsError(f"{target} already exists")

    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(
        render_article(name, category, scenario, emoji, language),
        encoding="utf-8",
    )
    logger.info(f"Created {target}")
    return target


def _first_sentence(text: str, limit: int = 160) -> str:
    """Return the first sentence of ``text``, shortened to ``limit``."""

    sentence = re.split(r"(?<=[.!?])\s", text.strip(), maxsplit=1)[0]
    if len(sentence) > limit:
        sentence = sentence[: limit - 1].rstrip() + "…"
    return sentence


def _describe(article: Article) -> str:
    """Describe an article using the opening of its definition."""

    position = article.find_section(SectionKind.DEFINITION)
    if position is None:
        return ""
    return _first_sentence(article.sections[position].text)


def _escape_cell(text: str) -> str:
    return text.replace("|", "\\|")


def render_index(catalog: Catalog) -> str:
    """Render the index tables of ``catalog``, one per category.

    Articles keep the order of the current index; articles missing from it
    follow in path order. Existing row descriptions are reused, otherwise
    the first sentence of the definition is used.

    Args:
        catalog: Parsed catalog.

    Returns:
        Markdown text of the generated index block.
    """

    index_dir = posixpath.dirname(catalog.index.path) or "."

    # Existing rows keyed by the article path they point to.
    rows: dict[str, tuple[int, str]] = {}
    for position, entry in enumerate(catalog.index.entries):
        target = posixpath.normpath(
            posixpath.join(index_dir, _link_target(entry.href))
        )
        rows.setdefault(target, (position, entry.description))

    def order(article: Article) -> tuple[int, str]:
        known = rows.get(article.path)
        return (known[0] if known else len(rows), article.path)

    parts: list[str] = []
    for category in Category:
        articles = sorted(
            (a for a in catalog.articles if a.category is category), key=order
        )
        if not articles:
            continue

        parts.extend(
            [
                f"## {category.label}",
                "",
                "| Name | Description |",
                "| --- | --- |",
            ]
        )
        for article in articles:
            known = rows.get(article.path)
            description = (
                known[1] if known and known[1] else _describe(article)
            )
            name = article.title or article.slug
            if article.emoji:
                name = f"{article.emoji} {name}"
            href = posixpath.relpath(article.path, index_dir)
            if not href.startswith("."):
                href = f"./{href}"
            parts.append(
                f"| [{_escape_cell(name)}]({href}) | "
                f"{_escape_cell(description)} |"
            )
        parts.append("")

    for article in catalog.articles:
        if article.category is None:
            logger.warning(f"{article.path}: no category, left out of index")

    return "\n".join(parts).rstrip() + "\n"


def update_index(text: str, rendered: str) -> str:
    """Place a rendered index block into the index page text.

    The block between the ``patdoc:index`` markers is replaced; without
    markers the block is appended with them.

    Args:
        text: Current Markdown text of the index page.
        rendered: Output of ``render_index``.

    Returns:
        The updated index page text.
    """

    block = f"{INDEX_START}\n\n{rendered.rstrip()}\n\n{INDEX_END}"

    start = text.find(INDEX_START)
    end = text.find(INDEX_END, start + 1) if start != -1 else -1
    if start != -1 and end != -1:
        return text[:start] + block + text[end + len(INDEX_END) :]

    if not text or text.endswith("\n\n"):
        separator = ""
    elif text.endswith("\n"):
        separator = "\n"
    else:
        separator = "\n\n"
    return f"{text}{separator}{block}\n"
