"""Parse Markdown articles and the catalog index into structured data."""

from __future__ import annotations

import logging
import re

from .article import Article
from .category import Category
from .code_example import CodeExample
from .index import Index
from .index_entry import IndexEntry
from .section import Section
from .section_kind import SectionKind
from .types import CodeExampleList, IndexEntryList, LinkList, SectionList
from .utils import (
    BlockKind,
    _category_from_path,
    _collect_references,
    _extract_links,
    _HTML_ANCHOR,
    _is_relative_link,
    _iter_prose,
    _link_target,
    _MD_LINK,
    _MD_REF_LINK,
    _normalize_whitespace,
    _REF_DEFINITION,
    _remove_link_markup,
    _resolve_reference,
    _scan_markdown,
    _slug_from_path,
    _slugify,
    _split_emoji,
    _strip_emphasis,
    _unique_id,
)

logger = logging.getLogger(__name__)

# Characters separating the link of an index row from its description.
_ROW_SEPARATORS = " \t|-–—:*+"


def parse_article(
    text: str,
    path: str,
    category: Category | None = None,
    article_filename: str = "index.md",
) -> Article:
    """Parse a Markdown article into its content model.

    Args:
        text: Markdown source of the article.
        path: Article location relative to the catalog root, or its URL.
        category: Category to assign; derived from ``path`` when omitted.
        article_filename: Name used for articles stored one per directory.

    Returns:
        The parsed ``Article``.
    """

    blocks = _scan_markdown(text)

    title: str | None = None
    emoji = ""
    sections: SectionList = []
    examples: CodeExampleList = []
    prose: dict[str, list[str]] = {}
    seen_ids: dict[str, int] = {}
    current: Section | None = None

    for block in blocks:
        if block.kind is BlockKind.HEADING:
            # The first level-1 heading is the article title.
            if block.level == 1 and title is None:
                emoji, title = _split_emoji(_strip_emphasis(block.text))
                continue

            heading = _remove_link_markup(block.text).strip()
            _, plain = _split_emoji(heading)
            current = Section(
                section_id=_unique_id(_slugify(plain), seen_ids),
                heading=heading,
                kind=SectionKind.match(heading),
                level=block.level,
                line=block.line,
            )
            sections.append(current)
            prose[current.section_id] = []
        elif block.kind is BlockKind.FENCE:
            example = CodeExample(
                example_id=f"example-{len(examples) + 1}",
                language=block.language,
                code=block.text,
                section_id=current.section_id if current else None,
                line=block.line,
            )
            examples.append(example)
            if current is not None:
                current.examples.append(example.example_id)
        elif current is not None:
            prose[current.section_id].append(block.text)

    # Store the normalized prose of each section.
    for section in sections:
        section.text = _normalize_whitespace(
            " ".join(prose[section.section_id])
        )

    links: LinkList = []
    for block in _iter_prose(blocks):
        links.extend(_extract_links(block.text, block.line))

    if category is None:
        category = _category_from_path(path, article_filename)

    slug = _slug_from_path(path, article_filename)
    if title is None:
        logger.debug(f"{path}: no level-1 heading")

    return Article(
        slug=slug,
        title=title or "",
        emoji=emoji,
        category=category,
        path=path,
        sections=sections,
        code_examples=examples,
        links=links,
    )


def _clean_row_text(text: str) -> str:
    """Strip link markup, list markers, table pipes and emphasis."""

    text = _remove_link_markup(text)
    text = re.sub(r"^\s*([-*+]|\d+[.)])\s+", "", text)
    text = re.sub(r"\*\*|__", "", text)
    text = text.replace("|", " ")
    return _normalize_whitespace(text).strip(_ROW_SEPARATORS).strip()


def _row_parts(
    line: str, href: str, references: dict[str, str]
) -> tuple[str, str]:
    """Split an index row into the emoji before its link and its description.

    Args:
        line: Full index row.
        href: Target of the link that names the row.
        references: Reference definitions of the index.

    Returns:
        Tuple of the emoji written in front of the link (empty when absent)
        and the row text with the link, markup and separators removed.
    """

    # Drop the link that names the row, keep the text of any other link.
    removed = False
    prefix = ""

    def drop_first(match: re.Match[str]) -> str:
        nonlocal removed, prefix
        if match.re is _MD_REF_LINK:
            names_row = _resolve_reference(match, references) == href
        else:
            names_row = href in match.group(0)
        if removed or not names_row:
            return match.group(0)
        removed = True
        prefix = match.string[: match.start()]
        return " "

    text = _MD_LINK.sub(drop_first, line)
    text = _MD_REF_LINK.sub(drop_first, text)
    text = _HTML_ANCHOR.sub(drop_first, text)

    # Symbols alone in front of the link decorate the name.
    emoji, rest = _split_emoji(_clean_row_text(prefix))
    if emoji and not rest and text.startswith(prefix):
        text = text[len(prefix) :]
    else:
        emoji = ""
    return emoji, _clean_row_text(text)


def parse_index(text: str, path: str) -> Index:
    """Parse the catalog index into rows grouped by category.

    A row is any line whose first link targets a relative ``.md`` file;
    reference-style links resolve against the definitions of the index.
    The category of a row is the one named by the closest heading above
    it; a heading at the same or a higher level that names no category
    ends the group.

    Args:
        text: Markdown source of the index.
        path: Location of the index file relative to the catalog root.

    Returns:
        The parsed ``Index``.
    """

    blocks = _scan_markdown(text)
    references = _collect_references(blocks)

    title: str | None = None
    entries: IndexEntryList = []
    group: tuple[Category, int] | None = None

    for block in _iter_prose(blocks):
        if block.kind is BlockKind.HEADING:
            # The page title never opens a category group.
            if block.level == 1 and title is None:
                title = _split_emoji(_strip_emphasis(block.text))[1]
                continue

            category = Category.find(_remove_link_markup(block.text))
            if category is not None:
                group = (category, block.level)
            elif group is not None and block.level <= group[1]:
                group = None
            continue

        # Reference definitions only supply targets to the rows.
        if _REF_DEFINITION.match(block.text):
            continue

        row_link = next(
            (
                link
                for link in _extract_links(block.text, block.line, references)
                if _is_relative_link(link.href)
                and _link_target(link.href).lower().endswith(".md")
            ),
            None,
        )
        if row_link is None:
            continue

        emoji, name = _split_emoji(_strip_emphasis(row_link.text))
        lead, description = _row_parts(
            block.text, row_link.href, references
        )
        entries.append(
            IndexEntry(
                name=name,
                href=row_link.href,
                description=description,
                category=group[0] if group else None,
                line=block.line,
                emoji=emoji or lead,
            )
        )

    logger.debug(f"{path}: {len(entries)} index rows")
    return Index(path=path, title=title, entries=entries)
