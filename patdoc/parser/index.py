"""Top-level catalog page linking to every article."""

from __future__ import annotations

from attrs import define, field

from .types import IndexEntryList


@define(slots=True)
class Index:
    """Top-level catalog page linking to every article.

    Attributes:
        path: Location of the index file relative to the catalog root.
        title: First level-1 heading of the index, if present.
        entries: Rows in the order they appear.
    """

    path: str
    title: str | None = None
    entries: IndexEntryList = field(factory=list, repr=False)
