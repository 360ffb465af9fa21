"""Hyperlink found in a Markdown document."""

from __future__ import annotations

from attrs import define


@define(slots=True)
class Link:
    """Hyperlink found in a Markdown document.

    Attributes:
        text: Visible text of the link.
        href: Link target exactly as written.
        line: 1-based line where the link appears.
    """

    text: str
    href: str
    line: int = 0
