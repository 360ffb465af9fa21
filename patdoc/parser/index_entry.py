"""Row of the catalog index."""

from __future__ import annotations

from attrs import define

from .category import Category


@define(slots=True)
class IndexEntry:
    """Row of the catalog index.

    Attributes:
        name: Display name of the linked article.
        href: Relative link target as written in the index.
        description: One-line description following the link.
        category: Category of the heading the row is listed under.
        line: 1-based line of the row in the index file.
        emoji: Emoji decorating the name, empty when absent.
    """

    name: str
    href: str
    description: str = ""
    category: Category | None = None
    line: int = 0
    emoji: str = ""
