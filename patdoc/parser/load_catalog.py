"""Read a documentation tree into a ``Catalog``."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from attrs import Attribute, asdict

from .catalog import Catalog, CatalogInfo
from .parse_markdown import parse_article, parse_index
from .types import ArticleList, JSONDict

if TYPE_CHECKING:
    from patdoc.config import Config

logger = logging.getLogger(__name__)


def _serialize_value(
    inst: Any, field: Attribute[Any] | None, value: Any  # noqa: ANN401
) -> Any:  # noqa: ANN401
    """Convert enum values to plain strings for JSON and YAML output."""

    if isinstance(value, Enum):
        return value.value
    return value


def to_dict(record: Any) -> JSONDict:  # noqa: ANN401
    """Return an attrs record as a mapping of plain values."""

    return asdict(record, value_serializer=_serialize_value)


def find_index_file(root: Path, name: str) -> Path | None:
    """Locate the index file in ``root`` ignoring the case of ``name``.

    Args:
        root: Catalog root directory.
        name: Expected file name, e.g. ``readme.md``.

    Returns:
        Path of the index file, or ``None`` when it does not exist.
    """

    exact = root / name
    if exact.is_file():
        return exact

    for candidate in sorted(root.iterdir()):
        if candidate.is_file() and candidate.name.lower() == name.lower():
            return candidate
    return None


def find_article_files(root: Path, config: Config) -> list[Path]:
    """Return the article files below the documentation directory.

    Args:
        root: Catalog root directory.
        config: Catalog configuration.

    Returns:
        Article paths sorted by their location. A missing documentation
        directory yields an empty list.
    """

    docs_dir = root / config.docs_dir
    if not docs_dir.is_dir():
        return []
    return sorted(docs_dir.rglob(config.article_filename))


def load_catalog(root: Path, config: Config | None = None) -> Catalog:
    """Parse the index and every article of the catalog at ``root``.

    Args:
        root: Catalog root directory.
        config: Catalog configuration; loaded from ``root`` when omitted.

    Returns:
        The parsed ``Catalog``.

    Throws:
        FileNotFoundError: If the index file does not exist.
    """

    from patdoc.config import load_config

    root = root.resolve()
    config = config or load_config(root)

    index_file = find_index_file(root, config.index_file)
    if index_file is None:
        raise FileNotFoundError(
            f"Index file {config.index_file!r} not found in {root}"
        )

    index_path = index_file.relative_to(root).as_posix()
    index = parse_index(index_file.read_text(encoding="utf-8"), index_path)

    articles: ArticleList = []
    for path in find_article_files(root, config):
        rel_path = path.relative_to(root).as_posix()
        logger.debug(f"Parsing {rel_path}")
        articles.append(
            parse_article(
                path.read_text(encoding="utf-8"),
                rel_path,
                article_filename=config.article_filename,
            )
        )

    logger.info(
        f"Loaded {len(articles)} articles and {len(index.entries)} index "
        f"rows from {root}"
    )

    info = CatalogInfo(
        root=str(root),
        index_path=index_path,
        docs_dir=config.docs_dir,
        title=index.title,
    )
    return Catalog(info=info, index=index, articles=articles)


def catalog_to_dict(catalog: Catalog) -> JSONDict:
    """Serialize a catalog into the interchange mapping.

    Args:
        catalog: Parsed catalog.

    Returns:
        Mapping with the ``catalog``, ``index`` and ``articles`` keys.
    """

    return {
        "catalog": to_dict(catalog.info),
        "index": [to_dict(e) for e in catalog.index.entries],
        "articles": [to_dict(a) for a in catalog.articles],
    }


def parse_catalog(root: Path, config: Config | None = None) -> JSONDict:
    """Parse the catalog at ``root`` into plain structured data.

    Args:
        root: Catalog root directory.
        config: Catalog configuration; loaded from ``root`` when omitted.

    Returns:
        Structured representation of the catalog.
    """

    return catalog_to_dict(load_catalog(root, config))
