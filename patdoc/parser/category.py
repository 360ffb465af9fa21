"""Classification of an article inside the catalog."""

from __future__ import annotations

import re
from enum import Enum


class Category(Enum):
    """Grouping used for the index: design pattern or architecture."""

    DESIGN_PATTERN = "DesignPattern"
    ARCHITECTURE = "Architecture"

    @property
    def label(self) -> str:
        """Heading used for the category in the index."""

        return _LABELS[self]

    @property
    def directory(self) -> str:
        """Conventional directory holding the category articles."""

        return _DIRECTORIES[self]

    @classmethod
    def from_text(cls, text: str) -> Category:
        """Resolve a category from a directory name, heading or value.

        Args:
            text: Text such as ``design-patterns``, ``## Architectures`` or
                ``DesignPattern``.

        Returns:
            The matching category.

        Throws:
            ValueError: If the text does not name a category.
        """

        category = cls.find(text)
        if category is None:
            raise ValueError(f"Unknown category: {text!r}")
        return category

    @classmethod
    def find(cls, text: str) -> Category | None:
        """Return the category named by ``text`` or ``None``."""

        # Collapse case, separators and decorations to plain words.
        words = re.sub(r"[^a-z]+", " ", text.lower()).strip()
        compact = words.replace(" ", "")

        for category in cls:
            if compact == category.value.lower():
                return category

        # "Architectural Patterns" names architectures.
        if "architect" in compact:
            return cls.ARCHITECTURE
        if "pattern" in compact:
            return cls.DESIGN_PATTERN
        return None


_LABELS = {
    Category.DESIGN_PATTERN: "Design Patterns",
    Category.ARCHITECTURE: "Architectures",
}

_DIRECTORIES = {
    Category.DESIGN_PATTERN: "design-patterns",
    Category.ARCHITECTURE: "architectures",
}
