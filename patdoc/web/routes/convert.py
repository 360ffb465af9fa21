"""Export the served catalog as structured data."""

from __future__ import annotations

import os
from pathlib import Path
from tempfile import NamedTemporaryFile

import yaml  # type: ignore[import-untyped]
from fastapi import (  # type: ignore[import-not-found]
    APIRouter,
    BackgroundTasks,
    Query,
    Response,
)
from fastapi.responses import (  # type: ignore[import-not-found]
    FileResponse,
    JSONResponse,
    PlainTextResponse,
)

from patdoc.parser import catalog_to_dict
from patdoc.xlsx import write_workbook

from ..utils import current_catalog

router = APIRouter()


@router.get("/convert")
async def convert_endpoint(
    background_tasks: BackgroundTasks,
    output_format: str = Query(default="json", enum=["json", "yaml", "xlsx"]),
) -> Response:
    """Export the whole catalog.

    Args:
        background_tasks: Used to remove the temporary workbook.
        output_format: Desired output format.

    Returns:
        The structured catalog in the requested format.
    """

    doc = catalog_to_dict(current_catalog())

    # Return JSON when requested.
    if output_format == "json":
        return JSONResponse(doc)

    # Return YAML output.
    if output_format == "yaml":
        text = yaml.safe_dump(doc, allow_unicode=True, sort_keys=False)
        return PlainTextResponse(text, media_type="application/x-yaml")

    # Prepare XLSX output by writing to a temporary file.
    tmp = NamedTemporaryFile(suffix=".xlsx", delete=False)
    tmp.close()
    write_workbook(doc, Path(tmp.name))

    # Schedule file deletion after the response is sent.
    background_tasks.add_task(os.unlink, tmp.name)

    # Serve the file as a download.
    return FileResponse(tmp.name, filename="catalog.xlsx")
