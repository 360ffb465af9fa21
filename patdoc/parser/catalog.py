"""Parsed documentation tree: metadata, index and articles."""

from __future__ import annotations

from attrs import define, field

from .index import Index
from .types import ArticleList


@define(slots=True)
class CatalogInfo:
    """Metadata about the parsed documentation tree.

    Attributes:
        root: Absolute path of the catalog root.
        index_path: Index file relative to the root.
        docs_dir: Directory holding the articles, relative to the root.
        title: Title of the index page.
    """

    root: str
    index_path: str
    docs_dir: str
    title: str | None = None


@define(slots=True)
class Catalog:
    """Parsed documentation tree.

    Attributes:
        info: Catalog metadata.
        index: Parsed index page.
        articles: Articles found on disk, sorted by path.
    """

    info: CatalogInfo
    index: Index
    articles: ArticleList = field(factory=list, repr=False)
