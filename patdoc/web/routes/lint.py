"""Lint report of the served catalog."""

from __future__ import annotations

from fastapi import APIRouter  # type: ignore[import-not-found]
from fastapi.responses import JSONResponse  # type: ignore[import-not-found]

from patdoc.config import load_config
from patdoc.lint import lint_catalog

from ..utils import current_catalog, get_root

router = APIRouter()


@router.get("/lint")
async def lint_report() -> JSONResponse:
    """Return the content checks of the catalog as JSON."""

    report = lint_catalog(current_catalog(), load_config(get_root()))
    return JSONResponse(report.to_dict())
