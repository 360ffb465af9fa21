"""List the articles of the catalog."""

from __future__ import annotations

from fastapi import (  # type: ignore[import-not-found]
    APIRouter,
    HTTPException,
    Query,
    Request,
    Response,
)
from fastapi.responses import JSONResponse  # type: ignore[import-not-found]

from patdoc.parser import Category

from ..utils import (
    ArticleSummaryList,
    create_jinja_context,
    current_catalog,
    summarize,
    templates,
)

router = APIRouter()


@router.get("/articles")
async def list_articles(
    request: Request,
    format: str = Query(default="json", enum=["json", "html"]),
    category: str | None = Query(default=None),
) -> Response:
    """List the articles of the catalog.

    Args:
        request: Incoming request used for template rendering.
        format: Desired response format.
        category: Optional category filter, e.g. ``architectures``.

    Returns:
        Either a JSON list of summaries or an HTML page of links.
    """

    wanted: Category | None = None
    if category:
        try:
            wanted = Category.from_text(category)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    summaries: ArticleSummaryList = [
        summarize(article)
        for article in current_catalog().articles
        if wanted is None or article.category is wanted
    ]

    # Render as HTML when requested.
    if format == "html":
        return templates.TemplateResponse(
            request,
            "articles.html",
            context=create_jinja_context(
                request=request,
                articles=summaries,
                title="Articles | patdoc",
            ),
        )

    return JSONResponse(summaries)
