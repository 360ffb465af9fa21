"""Fetch a specific article."""

from __future__ import annotations

from pathlib import Path

from fastapi import (  # type: ignore[import-not-found]
    APIRouter,
    HTTPException,
    Query,
    Request,
    Response,
)
from fastapi.responses import JSONResponse  # type: ignore[import-not-found]

from patdoc.parser import to_dict

from ..utils import (
    create_jinja_context,
    current_catalog,
    find_article,
    templates,
)

router = APIRouter()


@router.get("/articles/{slug}")
async def get_article(
    slug: str,
    request: Request,
    format: str = Query(default="json", enum=["json", "html"]),
) -> Response:
    """Return a specific article by slug.

    Args:
        slug: Article slug, e.g. ``factory-method``.
        request: Incoming request used for template rendering.
        format: Desired response format.

    Returns:
        The parsed article or its HTML rendering.
    """

    article = find_article(current_catalog(), slug)
    if article is None:
        raise HTTPException(status_code=404, detail="Article not found")

    # Render as HTML when requested.
    if format == "html":
        return templates.TemplateResponse(
            request,
            "article_detail.html",
            context=create_jinja_context(
                request=request,
                article=article,
                examples={e.example_id: e for e in article.code_examples},
                title=article.title or article.slug,
            ),
        )

    return JSONResponse(to_dict(article))


@router.post("/articles/{slug}")
async def get_article_raw(slug: str) -> Response:
    """Return the Markdown source of an article.

    Args:
        slug: Article slug.

    Returns:
        Raw Markdown of the article file.
    """

    catalog = current_catalog()
    article = find_article(catalog, slug)
    if article is None:
        raise HTTPException(status_code=404, detail="Article not found")

    text = (Path(catalog.info.root) / article.path).read_text(encoding="utf-8")
    return Response(content=text, media_type="text/markdown")
