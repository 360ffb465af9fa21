"""Utility helpers for web routes."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from fastapi import Request  # type: ignore[import-not-found]
from fastapi.templating import (  # type: ignore[import-not-found]
    Jinja2Templates,
)

from patdoc.catalog_cache import get_catalog
from patdoc.parser import Article, Catalog

JSONDict = dict[str, Any]
ArticleSummary = dict[str, str | int | None]
ArticleSummaryList = list[ArticleSummary]

# Page templates shipped with the package.
templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))


def get_root() -> Path:
    """Return the catalog root served by the app.

    Returns:
        Directory named by ``PATDOC_ROOT``, or the working directory.
    """

    return Path(os.environ.get("PATDOC_ROOT", "."))


def current_catalog() -> Catalog:
    """Return the parsed catalog of ``get_root`` through the cache."""

    return get_catalog(get_root())


def find_article(catalog: Catalog, slug: str) -> Article | None:
    """Return the article of ``catalog`` named by ``slug``."""

    return next((a for a in catalog.articles if a.slug == slug), None)


def summarize(article: Article) -> ArticleSummary:
    """Return the listing fields of an article."""

    return {
        "slug": article.slug,
        "title": article.title,
        "emoji": article.emoji,
        "category": article.category.value if article.category else None,
        "path": article.path,
        "sections": len(article.sections),
        "code_examples": len(article.code_examples),
    }


def create_jinja_context(request: Request, **kwargs: Any) -> JSONDict:
    """Build the context passed to a page template.

    Args:
        request: Incoming request being rendered.
        **kwargs: Values exposed to the template.

    Returns:
        Template context holding the request and ``kwargs``.
    """

    context: JSONDict = {"request": request, "title": "patdoc"}
    context.update(kwargs)
    return context
