"""Illustrative code snippet embedded in an article."""

from __future__ import annotations

from attrs import define


@define(slots=True)
class CodeExample:
    """Illustrative code snippet embedded in an article.

    Attributes:
        example_id: Identifier of the snippet, unique within the article.
        language: Language tag of the fence, ``None`` when untagged.
        code: Snippet body without the fence lines.
        section_id: Identifier of the section holding the snippet.
        line: 1-based line of the opening fence.
    """

    example_id: str
    language: str | None
    code: str
    section_id: str | None = None
    line: int = 0
