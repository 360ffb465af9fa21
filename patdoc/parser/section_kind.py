"""Canonical sections of an article, in their fixed order."""

from __future__ import annotations

import re
from enum import Enum


class SectionKind(Enum):
    """Canonical section of a pattern or architecture article.

    Members are declared in the order the sections must appear.
    """

    HISTORICAL_CONTEXT = "Historical Context"
    DEFINITION = "Definition"
    WHEN_TO_USE = "When to Use"
    BENEFITS = "Benefits"
    DRAWBACKS = "Drawbacks"
    WORKED_EXAMPLE = "Worked Example"
    WHEN_TO_AVOID = "When to Avoid"
    ALTERNATIVES = "Alternatives"
    CONCLUSION = "Conclusion"

    @property
    def position(self) -> int:
        """Zero-based position of the section in the canonical order."""

        return list(SectionKind).index(self)

    @property
    def aliases(self) -> tuple[str, ...]:
        """Normalized headings accepted for this section."""

        return _ALIASES[self]

    @classmethod
    def match(cls, heading: str) -> SectionKind | None:
        """Return the canonical section named by ``heading``.

        Args:
            heading: Raw heading text, possibly decorated with emoji or
                numbering.

        Returns:
            The matching kind, or ``None`` for free-form headings.
        """

        normalized = normalize_heading(heading)
        if not normalized:
            return None

        for kind in cls:
            for alias in kind.aliases:
                if normalized == alias or normalized.startswith(alias + " "):
                    return kind
        return None


def normalize_heading(heading: str) -> str:
    """Lowercase a heading and strip emoji, numbering and punctuation."""

    text = heading.lower().replace("&", " and ")

    # Drop everything that is not a letter, digit or apostrophe.
    text = re.sub(r"[^a-z0-9']+", " ", text).strip()

    # Remove leading numbering such as "1" or "2 3".
    text = re.sub(r"^(\d+\s+)+", "", text)
    return text.replace("'", "")


_ALIASES: dict[SectionKind, tuple[str, ...]] = {
    SectionKind.HISTORICAL_CONTEXT: (
        "historical context",
        "history",
        "background",
        "origins",
        "origin",
    ),
    SectionKind.DEFINITION: (
        "definition",
        "what is",
        "overview",
        "intent",
    ),
    SectionKind.WHEN_TO_USE: (
        "when to use",
        "when should you use",
        "use cases",
        "applicability",
        "usage",
    ),
    SectionKind.BENEFITS: (
        "benefits",
        "advantages",
        "pros",
    ),
    SectionKind.DRAWBACKS: (
        "drawbacks",
        "disadvantages",
        "cons",
        "limitations",
    ),
    SectionKind.WORKED_EXAMPLE: (
        "worked example",
        "code example",
        "practical example",
        "example",
        "examples",
        "implementation",
    ),
    SectionKind.WHEN_TO_AVOID: (
        "when to avoid",
        "when not to use",
        "when should you avoid",
    ),
    SectionKind.ALTERNATIVES: (
        "alternatives",
        "related patterns",
    ),
    SectionKind.CONCLUSION: (
        "conclusion",
        "summary",
        "final thoughts",
    ),
}
