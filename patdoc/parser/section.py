"""Headed block of prose within an article."""

from __future__ import annotations

from attrs import define, field

from .section_kind import SectionKind
from .types import ExampleIdList


@define(slots=True)
class Section:
    """Headed block of prose within an article.

    Attributes:
        section_id: Slug of the heading, unique within the article.
        heading: Heading text as written, without the ``#`` markers.
        kind: Canonical section named by the heading, if any.
        level: Heading depth, 2 for ``##``.
        line: 1-based line of the heading.
        text: Prose of the section with code fences removed.
        examples: Identifiers of the code examples inside the section.
    """

    section_id: str
    heading: str
    kind: SectionKind | None = None
    level: int = 2
    line: int = 0
    text: str = ""
    examples: ExampleIdList = field(factory=list, repr=False)
