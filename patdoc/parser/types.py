"""Common type aliases for parser structures."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .article import Article  # noqa: F401
    from .code_example import CodeExample  # noqa: F401
    from .index_entry import IndexEntry  # noqa: F401
    from .link import Link  # noqa: F401
    from .section import Section  # noqa: F401


JSONDict = dict[str, Any]
SectionList = list["Section"]
CodeExampleList = list["CodeExample"]
LinkList = list["Link"]
ArticleList = list["Article"]
IndexEntryList = list["IndexEntry"]
ExampleIdList = list[str]
