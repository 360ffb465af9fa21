"""Utility functions for scanning Markdown documents."""

from __future__ import annotations

import re
import unicodedata
from enum import Enum
from pathlib import PurePosixPath
from typing import Any, Iterator
from urllib.parse import unquote

from attrs import define
from bs4 import BeautifulSoup

from .category import Category
from .link import Link
from .types import LinkList

_ATX_HEADING = re.compile(
    r"^ {0,3}(#{1,6})(?:[ \t]+(.*?))?(?:[ \t]+#+)?[ \t]*$"
)
_SETEXT_UNDERLINE = re.compile(r"^ {0,3}(=+|-+)[ \t]*$")
_FENCE_OPEN = re.compile(r"^ {0,3}(`{3,}|~{3,})[ \t]*([^\s`]*)")
_MD_LINK = re.compile(
    r"(?<!!)\[((?:[^\[\]]|\[[^\]]*\])*)\]"
    r"\(\s*<?([^)\s>]*)>?(?:\s+[\"'(][^)]*[\"')])?\s*\)"
)
_MD_REF_LINK = re.compile(r"(?<!!)\[((?:[^\[\]]|\[[^\]]*\])*)\]\[([^\]]*)\]")
_REF_DEFINITION = re.compile(r"^ {0,3}\[([^\]]+)\]:\s*<?(\S+?)>?(?:\s+.*)?$")
_INLINE_CODE = re.compile(r"(`+)(?:(?!\1).)+?\1")
_HTML_ANCHOR = re.compile(r"<a\b[^>]*>.*?</a>", re.IGNORECASE | re.DOTALL)
_HTML_TAG = re.compile(r"<[^>]+>")
_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")


class BlockKind(Enum):
    """Kind of a scanned Markdown block."""

    HEADING = "heading"
    FENCE = "fence"
    TEXT = "text"


@define(slots=True)
class Block:
    """Heading, fenced code block or prose line found by the scanner.

    Attributes:
        kind: Kind of the block.
        line: 1-based line where the block starts.
        text: Heading text, fence body or prose line.
        level: Heading depth; zero for other blocks.
        language: Language tag of a fence, ``None`` when untagged.
    """

    kind: BlockKind
    line: int
    text: str
    level: int = 0
    language: str | None = None


def _normalize_whitespace(text: str) -> str:
    """Collapse consecutive whitespace and tidy punctuation spacing."""

    cleaned = re.sub(r"\s+", " ", text).strip()
    # An ellipsis keeps the space in front of it.
    return re.sub(r"\s+(?!\.\.\.)([,.;:!?\)])", r"\1", cleaned)


def _slugify(text: str) -> str:
    """Return a lowercase, hyphen separated identifier for ``text``."""

    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    return slug or "section"


def _strip_emphasis(text: str) -> str:
    """Remove bold and italic markers wrapping Markdown text."""

    return re.sub(r"(\*\*|__|(?<!\w)[*_]|[*_](?!\w))", "", text).strip()


def _is_symbol(char: str) -> bool:
    """Return whether ``char`` is an emoji or other decorative symbol."""

    return unicodedata.category(char) in {"So", "Sk", "Cf", "Mn", "Co", "Cs"}


def _split_emoji(text: str) -> tuple[str, str]:
    """Separate decorative symbols from a title.

    Args:
        text: Heading or link text such as ``"🏭 Factory Method"``.

    Returns:
        Tuple of the emoji (empty when absent) and the remaining title.
    """

    text = text.strip()

    start = 0
    while start < len(text) and (
        _is_symbol(text[start]) or text[start].isspace()
    ):
        start += 1

    end = len(text)
    while end > start and (
        _is_symbol(text[end - 1]) or text[end - 1].isspace()
    ):
        end -= 1

    parts = (text[:start].strip(), text[end:].strip())
    return " ".join(p for p in parts if p), text[start:end]


def _scan_markdown(text: str) -> list[Block]:
    """Split Markdown into headings, fenced code blocks and prose lines.

    Headings inside fences are not headings. An unterminated fence runs to
    the end of the document.

    Args:
        text: Markdown source.

    Returns:
        Blocks in document order.
    """

    blocks: list[Block] = []
    lines = text.splitlines()
    idx = 0

    while idx < len(lines):
        line = lines[idx]
        lineno = idx + 1

        fence = _FENCE_OPEN.match(line)
        if fence:
            marker = fence.group(1)
            language = fence.group(2) or None

            # Backtick fences cannot carry backticks in their info string.
            if marker[0] == "`" and "`" in line[fence.end(1) :]:
                fence = None
            else:
                body: list[str] = []
                idx += 1
                fence_char = re.escape(marker[0])
                closing = re.compile(
                    rf"^ {{0,3}}{fence_char}{{{len(marker)},}}[ \t]*$"
                )
                while idx < len(lines) and not closing.match(lines[idx]):
                    body.append(lines[idx])
                    idx += 1

                # Skip the closing fence when present.
                idx += 1
                blocks.append(
                    Block(
                        kind=BlockKind.FENCE,
                        line=lineno,
                        text="\n".join(body),
                        language=language,
                    )
                )
                continue

        heading = _ATX_HEADING.match(line)
        if heading:
            blocks.append(
                Block(
                    kind=BlockKind.HEADING,
                    line=lineno,
                    text=(heading.group(2) or "").strip(),
                    level=len(heading.group(1)),
                )
            )
            idx += 1
            continue

        underline = _SETEXT_UNDERLINE.match(line)
        previous = blocks[-1] if blocks else None
        if (
            underline
            and previous is not None
            and previous.kind is BlockKind.TEXT
            and previous.text.strip()
            and previous.line == lineno - 1
            and not re.match(r"^\s*([-*+]|\d+[.)])\s", previous.text)
        ):
            # Promote the preceding prose line to a setext heading.
            previous.kind = BlockKind.HEADING
            previous.text = previous.text.strip()
            previous.level = 1 if underline.group(1)[0] == "=" else 2
            idx += 1
            continue

        blocks.append(Block(kind=BlockKind.TEXT, line=lineno, text=line))
        idx += 1

    return blocks


def _html_links(text: str, lineno: int) -> LinkList:
    """Return links of inline HTML anchors found in ``text``."""

    if "<a" not in text.lower():
        return []

    soup = BeautifulSoup(text, "html.parser")
    links: LinkList = []
    for anchor in soup.find_all("a", href=True):
        anchor_tag: Any = anchor
        links.append(
            Link(
                text=_normalize_whitespace(
                    anchor_tag.get_text(" ", strip=True)
                ),
                href=str(anchor_tag["href"]).strip(),
                line=lineno,
            )
        )
    return links


def _reference_key(label: str) -> str:
    """Return the case-insensitive lookup key of a link reference label."""

    return _normalize_whitespace(label).casefold()


def _collect_references(blocks: list[Block]) -> dict[str, str]:
    """Map reference labels to the targets defined by ``[label]: href``.

    The first definition of a label wins.
    """

    references: dict[str, str] = {}
    for block in _iter_prose(blocks):
        if block.kind is not BlockKind.TEXT:
            continue
        definition = _REF_DEFINITION.match(block.text)
        if definition:
            references.setdefault(
                _reference_key(definition.group(1)), definition.group(2)
            )
    return references


def _resolve_reference(
    match: re.Match[str], references: dict[str, str]
) -> str | None:
    """Return the target of a ``[text][label]`` or ``[text][]`` link."""

    return references.get(_reference_key(match.group(2) or match.group(1)))


def _extract_links(
    text: str, lineno: int, references: dict[str, str] | None = None
) -> LinkList:
    """Extract Markdown, reference definition and HTML links from a line.

    Args:
        text: A single prose or heading line.
        lineno: 1-based line number recorded on each link.
        references: Reference definitions of the document; when given,
            ``[text][label]`` links resolve against them.

    Returns:
        Links in the order they appear on the line.
    """

    # Inline code spans may show link syntax without being links.
    visible = _INLINE_CODE.sub("", text)

    definition = _REF_DEFINITION.match(visible)
    if definition:
        return [
            Link(
                text=definition.group(1),
                href=definition.group(2),
                line=lineno,
            )
        ]

    found: list[tuple[int, Link]] = []
    for match in _MD_LINK.finditer(visible):
        label = _strip_emphasis(_normalize_whitespace(match.group(1)))
        found.append(
            (match.start(), Link(text=label, href=match.group(2), line=lineno))
        )

    if references:
        for match in _MD_REF_LINK.finditer(visible):
            href = _resolve_reference(match, references)
            if href is None:
                continue
            label = _strip_emphasis(_normalize_whitespace(match.group(1)))
            found.append(
                (match.start(), Link(text=label, href=href, line=lineno))
            )

    for match in _HTML_ANCHOR.finditer(visible):
        for link in _html_links(match.group(0), lineno):
            found.append((match.start(), link))

    found.sort(key=lambda item: item[0])
    return [link for _, link in found]


def _remove_link_markup(text: str) -> str:
    """Replace Markdown and HTML links in ``text`` with their visible text."""

    text = _MD_LINK.sub(lambda m: m.group(1), text)
    text = _MD_REF_LINK.sub(lambda m: m.group(1), text)
    text = _HTML_ANCHOR.sub(
        lambda m: BeautifulSoup(m.group(0), "html.parser").get_text(" "), text
    )
    return _HTML_TAG.sub(" ", text)


def _is_relative_link(href: str) -> bool:
    """Return whether ``href`` points to a file relative to its document."""

    if not href or href.startswith(("#", "/")):
        return False
    return not _SCHEME.match(href)


def _is_external_link(href: str) -> bool:
    """Return whether ``href`` is an absolute ``http(s)`` URL."""

    return href.lower().startswith(("http://", "https://"))


def _link_target(href: str) -> str:
    """Drop the fragment and query of a relative link and decode it."""

    target = re.split(r"[#?]", href, maxsplit=1)[0]
    return unquote(target)


def _slug_from_path(path: str, article_filename: str = "index.md") -> str:
    """Derive the article slug from its location.

    Args:
        path: Article location relative to the catalog root, or a URL.
        article_filename: Name used for articles stored one per directory.

    Returns:
        The parent directory name for ``index.md`` style articles, the file
        stem otherwise.
    """

    pure = PurePosixPath(_link_target(path.split("://", 1)[-1]))
    if pure.name.lower() == article_filename.lower() and pure.parent.name:
        return pure.parent.name
    return pure.stem


def _category_from_path(
    path: str, article_filename: str = "index.md"
) -> Category | None:
    """Resolve the category from the directories enclosing an article.

    The article's own directory is skipped so that slugs such as
    ``clean-architecture`` do not decide the category.
    """

    pure = PurePosixPath(_link_target(path.split("://", 1)[-1]))
    parents = list(pure.parent.parts)
    if pure.name.lower() == article_filename.lower() and parents:
        parents = parents[:-1]

    # The nearest enclosing directory wins.
    for part in reversed(parents):
        category = Category.find(part)
        if category is not None:
            return category
    return None


def _unique_id(base: str, seen: dict[str, int]) -> str:
    """Return ``base`` or ``base-N`` so that identifiers never repeat."""

    count = seen.get(base, 0) + 1
    seen[base] = count
    return base if count == 1 else f"{base}-{count}"


def _iter_prose(blocks: list[Block]) -> Iterator[Block]:
    """Yield the headings and prose lines of ``blocks``."""

    for block in blocks:
        if block.kind is not BlockKind.FENCE:
            yield block
