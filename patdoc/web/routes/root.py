"""Landing page linking to the article list."""

from __future__ import annotations

from fastapi import APIRouter, Request  # type: ignore[import-not-found]
from fastapi.responses import HTMLResponse  # type: ignore[import-not-found]

from ..utils import create_jinja_context, current_catalog, templates

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def home(request: Request) -> HTMLResponse:
    """Render the landing page of the catalog."""

    catalog = current_catalog()
    return templates.TemplateResponse(
        request,
        "home.html",
        context=create_jinja_context(
            request=request,
            title=catalog.info.title or "Patterns and architectures",
            article_count=len(catalog.articles),
        ),
    )
