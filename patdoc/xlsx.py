"""Utilities for exporting catalog data to Excel workbooks."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List
from uuid import uuid4

from openpyxl import Workbook  # type: ignore[import-untyped]
from openpyxl.styles import Alignment, Font  # type: ignore[import-untyped]
from openpyxl.utils import get_column_letter  # type: ignore[import-untyped]
from openpyxl.worksheet.table import (  # type: ignore[import-untyped]
    Table,
    TableStyleInfo,
)
from openpyxl.worksheet.worksheet import (  # type: ignore[import-untyped]
    Worksheet,
)

from patdoc.json_utils import json_dumps

Row = Dict[str, Any]
Sheets = Dict[str, List[Row]]

# Cells longer than this are wrapped and get a wide column.
_LONG_TEXT = 50


def _ensure_id(item: Row, prefix: str, preferred: str | None = None) -> str:
    """Return an existing id for ``item`` or generate one.

    Args:
        item: Mapping representing a data object.
        prefix: Prefix used when generating a new identifier.
        preferred: Key whose value identifies the item when present.

    Returns:
        The unique identifier for ``item``.
    """

    if preferred and item.get(preferred):
        return str(item[preferred])

    for key, value in item.items():
        if key.endswith("_id") or key == "id":
            return str(value)

    new_id = f"{prefix}_{uuid4().hex}"
    item["id"] = new_id
    return new_id


def _flatten(doc: Dict[str, Any]) -> Sheets:
    """Flatten the nested catalog structure into tabular sheet data.

    Nested lists are replaced by comma separated identifiers and every
    child row records the identifier of its parent in ``parent_id``.
    Section and example identifiers are prefixed with the article slug so
    that they stay unique across the workbook.

    Args:
        doc: Structured catalog as returned by ``parse_catalog``.

    Returns:
        Mapping of sheet names to row dictionaries.
    """

    sheets: Sheets = {
        "Catalog": [],
        "IndexEntry": [],
        "Article": [],
        "Section": [],
        "CodeExample": [],
        "Link": [],
        "Violation": [],
    }

    catalog = dict(doc.get("catalog", {}))
    catalog_id = _ensure_id(catalog, "catalog")
    sheets["Catalog"].append(catalog)

    for entry in doc.get("index", []):
        row = dict(entry)
        _ensure_id(row, "entry")
        row["parent_id"] = catalog_id
        sheets["IndexEntry"].append(row)

    for article in doc.get("articles", []):
        row = dict(article)
        article_id = _ensure_id(row, "article", preferred="slug")
        row["article_id"] = article_id
        row["parent_id"] = catalog_id

        section_ids: List[str] = []
        for section in article.get("sections", []):
            section_row = dict(section)
            section_id = f"{article_id}/{section_row['section_id']}"
            section_row["section_id"] = section_id
            section_row["parent_id"] = article_id
            section_row["examples"] = ",".join(
                f"{article_id}/{ex}" for ex in section.get("examples", [])
            )
            sheets["Section"].append(section_row)
            section_ids.append(section_id)

        example_ids: List[str] = []
        for example in article.get("code_examples", []):
            example_row = dict(example)
            example_id = f"{article_id}/{example_row['example_id']}"
            example_row["example_id"] = example_id
            if example_row.get("section_id"):
                example_row["section_id"] = (
                    f"{article_id}/{example_row['section_id']}"
                )
            example_row["parent_id"] = article_id
            sheets["CodeExample"].append(example_row)
            example_ids.append(example_id)

        link_ids: List[str] = []
        for link in article.get("links", []):
            link_row = dict(link)
            link_ids.append(_ensure_id(link_row, "link"))
            link_row["parent_id"] = article_id
            sheets["Link"].append(link_row)

        row["sections"] = ",".join(section_ids)
        row["code_examples"] = ",".join(example_ids)
        row["links"] = ",".join(link_ids)
        sheets["Article"].append(row)

    for violation in doc.get("lint", {}).get("violations", []):
        row = dict(violation)
        _ensure_id(row, "violation")
        row["parent_id"] = catalog_id
        sheets["Violation"].append(row)

    # Drop sheets for which no data was recorded.
    return {name: rows for name, rows in sheets.items() if rows}


def _headers(rows: List[Row]) -> List[str]:
    """Return the union of row keys, in first-seen order."""

    headers: List[str] = []
    for row in rows:
        for key in row:
            if key not in headers:
                headers.append(key)
    return headers


def _write_sheet(ws: Worksheet, name: str, rows: List[Row]) -> None:
    """Write ``rows`` into ``ws`` as a styled table named ``name``."""

    headers = _headers(rows)
    ws.append(headers)
    for cell in ws[1]:
        cell.font = Font(bold=True)

    wrap_columns: set[int] = set()
    long_columns: set[int] = set()

    for row in rows:
        values: List[Any] = []
        for idx, header in enumerate(headers):
            value = row.get(header)

            # Serialize leftover structures to JSON strings.
            if isinstance(value, (list, dict)):
                value = json_dumps(value)

            if isinstance(value, str) and (
                len(value) > _LONG_TEXT or "\n" in value
            ):
                wrap_columns.add(idx)
                long_columns.add(idx)

            values.append(value)
        ws.append(values)

    for idx in wrap_columns:
        for cells in ws.iter_cols(
            min_col=idx + 1, max_col=idx + 1, min_row=2, max_row=ws.max_row
        ):
            for cell in cells:
                cell.alignment = Alignment(wrapText=True, vertical="top")

    for idx in range(len(headers)):
        width = 80 if idx in long_columns else 16
        ws.column_dimensions[get_column_letter(idx + 1)].width = width

    ref = f"A1:{get_column_letter(len(headers))}{len(rows) + 1}"
    table = Table(displayName=name, ref=ref)
    table.tableStyleInfo = TableStyleInfo(
        name="TableStyleMedium9", showRowStripes=True
    )
    ws.add_table(table)
    ws.freeze_panes = "A2"


def write_workbook(doc: Dict[str, Any], path: Path) -> None:
    """Write structured catalog data into an Excel workbook.

    Args:
        doc: Structured catalog, optionally with a ``lint`` report.
        path: Destination file path for the workbook.
    """

    workbook = Workbook()

    # Remove the default sheet created by openpyxl when present.
    default_sheet = workbook.active
    if default_sheet is not None:
        workbook.remove(default_sheet)

    for sheet_name, rows in _flatten(doc).items():
        _write_sheet(workbook.create_sheet(title=sheet_name), sheet_name, rows)

    workbook.save(path)
