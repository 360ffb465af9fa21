"""Check that external links of a catalog still answer."""

from __future__ import annotations

import logging
from typing import Iterator

import requests  # type: ignore[import-untyped]

from patdoc.parser import Catalog, Link
from patdoc.parser.utils import _is_external_link

logger = logging.getLogger(__name__)

USER_AGENT = "patdoc-link-checker"


def _check_url(
    session: requests.Session, url: str, timeout: float
) -> str | None:
    """Request ``url`` and describe the problem, if any.

    A ``HEAD`` request is tried first; servers that refuse it get a
    streamed ``GET``.

    Args:
        session: HTTP session reused across links.
        url: Absolute URL to check.
        timeout: Timeout in seconds per request.

    Returns:
        ``None`` when the link works, a short description otherwise.
    """

    try:
        response = session.head(url, allow_redirects=True, timeout=timeout)
        if response.status_code >= 400:
            response = session.get(
                url, allow_redirects=True, timeout=timeout, stream=True
            )
            response.close()
    except requests.RequestException as exc:
        return f"failed: {exc.__class__.__name__}"

    if response.status_code >= 400:
        return f"answered HTTP {response.status_code}"
    return None


def _external_links(catalog: Catalog) -> Iterator[tuple[str, Link]]:
    """Yield ``(path, link)`` for every ``http(s)`` link of the articles."""

    for article in catalog.articles:
        for link in article.links:
            if _is_external_link(link.href):
                yield article.path, link


def check_external_links(
    catalog: Catalog, timeout: float = 10.0
) -> list[tuple[str, Link, str]]:
    """Request every external link once and report the broken ones.

    Args:
        catalog: Parsed catalog.
        timeout: Timeout in seconds per request.

    Returns:
        ``(path, link, problem)`` for each occurrence of a broken URL.
    """

    results: dict[str, str | None] = {}
    broken: list[tuple[str, Link, str]] = []

    with requests.Session() as session:
        session.headers["User-Agent"] = USER_AGENT

        for path, link in _external_links(catalog):
            # Each URL is requested once, however often it appears.
            if link.href not in results:
                logger.debug(f"Checking {link.href}")
                results[link.href] = _check_url(session, link.href, timeout)

            problem = results[link.href]
            if problem is not None:
                broken.append((path, link, problem))

    logger.info(
        f"Checked {len(results)} external links, {len(broken)} broken"
    )
    return broken
