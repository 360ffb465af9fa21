"""Parser package for pattern and architecture articles."""

from .article import Article
from .catalog import Catalog, CatalogInfo
from .category import Category
from .code_example import CodeExample
from .fetch_article import fetch_article
from .index import Index
from .index_entry import IndexEntry
from .link import Link
from .load_catalog import (
    catalog_to_dict,
    load_catalog,
    parse_catalog,
    to_dict,
)
from .parse_markdown import parse_article, parse_index
from .section import Section
from .section_kind import SectionKind

__all__ = [
    "Article",
    "Catalog",
    "CatalogInfo",
    "Category",
    "CodeExample",
    "Index",
    "IndexEntry",
    "Link",
    "Section",
    "SectionKind",
    "catalog_to_dict",
    "fetch_article",
    "load_catalog",
    "parse_article",
    "parse_catalog",
    "parse_index",
    "to_dict",
]
