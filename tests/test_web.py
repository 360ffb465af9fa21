"""Tests for FastAPI web module."""

from __future__ import annotations

from io import BytesIO
from pathlib import Path

import pytest
import yaml  # type: ignore[import-untyped]

pytest.importorskip("fastapi.testclient")
pytest.importorskip("jinja2")

from fastapi.testclient import TestClient  # type: ignore[import-not-found]
from openpyxl import load_workbook  # type: ignore[import-untyped]

from patdoc.web import app


@pytest.fixture
def client(catalog_root: Path, monkeypatch: pytest.MonkeyPatch) -> TestClient:
    """Return a test client serving the sample catalog."""

    monkeypatch.setenv("PATDOC_ROOT", str(catalog_root))
    return TestClient(app)


def test_home_page(client: TestClient) -> None:
    """Landing page should link to the article list."""

    response = client.get("/")

    assert response.status_code == 200
    assert "Design Patterns and Architectures Guide" in response.text
    assert "21 articles." in response.text
    assert "/articles?format=html" in response.text


def test_list_articles(client: TestClient) -> None:
    """Listing endpoint should summarize every article."""

    response = client.get("/articles")

    assert response.status_code == 200
    data = response.json()
    assert len(data) == 21
    factory = next(a for a in data if a["slug"] == "factory-method")
    assert factory == {
        "slug": "factory-method",
        "title": "Factory Method",
        "emoji": "🏭",
        "category": "DesignPattern",
        "path": "docs/design-patterns/factory-method/index.md",
        "sections": 9,
        "code_examples": 1,
    }


def test_list_articles_by_category(client: TestClient) -> None:
    """Listing can be narrowed to one category."""

    response = client.get("/articles", params={"category": "architectures"})

    assert response.status_code == 200
    assert {a["category"] for a in response.json()} == {"Architecture"}
    assert len(response.json()) == 6

    response = client.get("/articles", params={"category": "recipes"})
    assert response.status_code == 400


def test_list_articles_html(client: TestClient) -> None:
    """HTML listing should link to each article page."""

    response = client.get("/articles", params={"format": "html"})

    assert response.status_code == 200
    assert "/articles/hexagonal-architecture?format=html" in response.text


def test_get_article(client: TestClient) -> None:
    """Detail endpoint should return the parsed article."""

    response = client.get("/articles/observer")

    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Observer"
    assert data["category"] == "DesignPattern"
    assert data["sections"][5]["kind"] == "Worked Example"
    assert data["code_examples"][0]["code"] == "# Observer: a newsletter"


def test_get_article_html(client: TestClient) -> None:
    """HTML rendering should escape text and show the code."""

    response = client.get(
        "/articles/observer", params={"format": "html"}
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "<h2>Worked Example</h2>" in response.text
    assert "class='language-python'" in response.text
    assert "# Observer: a newsletter" in response.text


def test_get_article_raw(client: TestClient, catalog_root: Path) -> None:
    """POST on an article returns its Markdown source."""

    response = client.post("/articles/observer")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/markdown")
    source = catalog_root / "docs" / "design-patterns" / "observer"
    assert response.text == (source / "index.md").read_text(encoding="utf-8")


def test_missing_article(client: TestClient) -> None:
    assert client.get("/articles/visitor").status_code == 404
    assert client.post("/articles/visitor").status_code == 404


def test_lint_endpoint(client: TestClient) -> None:
    """Lint endpoint should report a clean catalog."""

    response = client.get("/lint")

    assert response.status_code == 200
    assert response.json() == {
        "ok": True,
        "errors": 0,
        "warnings": 0,
        "checked_files": 22,
        "violations": [],
    }


def test_convert_endpoint(client: TestClient) -> None:
    """Convert endpoint should export the catalog as JSON or YAML."""

    response = client.get("/convert")
    assert response.status_code == 200
    assert len(response.json()["articles"]) == 21

    response = client.get("/convert", params={"output_format": "yaml"})
    assert response.status_code == 200
    doc = yaml.safe_load(response.text)
    assert doc["catalog"]["index_path"] == "readme.md"


def test_convert_endpoint_xlsx(client: TestClient) -> None:
    """Convert endpoint should serve a workbook download."""

    response = client.get("/convert", params={"output_format": "xlsx"})

    assert response.status_code == 200
    assert "catalog.xlsx" in response.headers["content-disposition"]
    workbook = load_workbook(BytesIO(response.content))
    assert "Article" in workbook.sheetnames


def test_article_html_escapes_text(
    client: TestClient, catalog_root: Path
) -> None:
    """Article prose is escaped by the page template."""

    source = catalog_root / "docs" / "design-patterns" / "observer"
    index = source / "index.md"
    index.write_text(
        index.read_text(encoding="utf-8") + "\nCompare a <b> b.\n",
        encoding="utf-8",
    )

    response = client.get("/articles/observer", params={"format": "html"})

    assert "Compare a &lt;b&gt; b." in response.text
