"""Fetch an article, using the local cache for remote sources."""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path

import requests  # type: ignore[import-untyped]

from .article import Article
from .parse_markdown import parse_article
from .utils import _is_external_link

CACHE_DIR = Path.home() / ".patdoc" / "cache"

logger = logging.getLogger(__name__)


def fetch_article(source: str, cache_dir: Path | None = None) -> Article:
    """Read an article from a file or an ``http(s)`` URL.

    Remote articles are downloaded once and then served from the cache.

    Args:
        source: Local path or URL of the Markdown article.
        cache_dir: Directory used for caching downloaded Markdown files.

    Returns:
        Parsed article.

    Throws:
        FileNotFoundError: If a local source does not exist.
        requests.HTTPError: If the remote source answers with an error.
    """

    if not _is_external_link(source):
        path = Path(source)
        return parse_article(path.read_text(encoding="utf-8"), path.as_posix())

    cache_dir = cache_dir or CACHE_DIR
    cache_dir.mkdir(parents=True, exist_ok=True)
    digest = hashlib.sha1(source.encode("utf-8")).hexdigest()
    cache_file = cache_dir / f"{digest}.md"

    if cache_file.exists():
        logger.debug(f"Using cached copy of {source}")
        text = cache_file.read_text(encoding="utf-8")
    else:
        logger.info(f"Downloading {source}")
        response = requests.get(source, timeout=30)
        response.raise_for_status()
        text = response.text
        cache_file.write_text(text, encoding="utf-8")

    return parse_article(text, source)
