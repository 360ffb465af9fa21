"""Represents a single pattern or architecture article."""

from __future__ import annotations

from attrs import define, field

from .category import Category
from .section_kind import SectionKind
from .types import CodeExampleList, LinkList, SectionList


@define(slots=True)
class Article:
    """Represents a single pattern or architecture article.

    Attributes:
        slug: Path segment identifying the article, e.g. ``factory-method``.
        title: Display heading without the emoji.
        emoji: Emoji decorating the title, empty when absent.
        category: Index grouping derived from the article location.
        path: Location relative to the catalog root, or the source URL.
        sections: Ordered sections of the article.
        code_examples: Ordered code snippets of the article.
        links: Hyperlinks found in the prose.
    """

    slug: str
    title: str
    emoji: str = ""
    category: Category | None = None
    path: str = ""
    sections: SectionList = field(factory=list, repr=False)
    code_examples: CodeExampleList = field(factory=list, repr=False)
    links: LinkList = field(factory=list, repr=False)

    def find_section(
        self, kind: SectionKind, outermost: bool = False
    ) -> int | None:
        """Return the position of the first section of ``kind``.

        Args:
            kind: Section kind to look for.
            outermost: Prefer the match with the shallowest heading over
                one nested deeper, even when the nested one comes first.

        Returns:
            Index into ``sections`` or ``None`` when no section matches.
        """

        matches = [
            idx
            for idx, section in enumerate(self.sections)
            if section.kind is kind
        ]
        if not matches:
            return None
        if outermost:
            return min(matches, key=lambda idx: self.sections[idx].level)
        return matches[0]

    def section_span(self, position: int) -> SectionList:
        """Return the section at ``position`` followed by its subsections."""

        head = self.sections[position]
        span = [head]
        for section in self.sections[position + 1 :]:
            if section.level <= head.level:
                break
            span.append(section)
        return span
