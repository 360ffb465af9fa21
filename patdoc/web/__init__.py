"""FastAPI application serving a parsed catalog."""

from __future__ import annotations

from fastapi import FastAPI  # type: ignore[import-not-found]

from .routes import article_detail, articles, convert, lint, root

app = FastAPI(title="patdoc")

app.include_router(root.router)
app.include_router(articles.router)
app.include_router(article_detail.router)
app.include_router(lint.router)
app.include_router(convert.router)
