import importlib
import logging
import os
import subprocess
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from types import ModuleType
from typing import Any, Optional

import click
import requests  # type: ignore[import-untyped]
import yaml  # type: ignore
from dotenv import load_dotenv

from patdoc import parser
from patdoc.config import Config, load_config
from patdoc.json_utils import json_dumps
from patdoc.lint import LintReport, lint_article, lint_catalog
from patdoc.parser import Category
from patdoc.parser.utils import _is_external_link
from patdoc.template import render_index, scaffold_article, update_index
from patdoc.xlsx import write_workbook

try:
    __version__ = version("patdoc")
except PackageNotFoundError:
    __version__ = "0.0.1-dev"

# Mapping from format names to file extensions.
EXTENSIONS = {"json": ".json", "yaml": ".yaml", "xlsx": ".xlsx"}


@click.group()
@click.option("--debug/--no-debug", default=False)
@click.option("--trace/--no-trace", default=False)
@click.option(
    "--log-file",
    type=click.Path(file_okay=True, dir_okay=False),
    envvar="PATDOC_LOG_FILE",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, file_okay=True, dir_okay=False),
    default=None,
    help="Configuration file; defaults to patdoc.yaml in the catalog root.",
)
@click.version_option(__version__, prog_name="patdoc")
@click.pass_context
def cli(
    ctx: click.Context,
    debug: bool,
    trace: bool,
    log_file: Optional[str] = None,
    config_path: Optional[str] = None,
) -> None:
    """Configure logging and load environment variables.

    Args:
        ctx: Click context object.
        debug: Toggle debug logging.
        trace: Toggle trace logging.
        log_file: Optional path to the log file.
        config_path: Optional configuration file shared by all commands.
    """
    if trace:
        level = 1
    elif debug:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        filename=log_file,
        level=level,
        format="[%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    if trace:
        logging.debug("Trace mode is on")
    if debug:
        logging.debug("Debug mode is on")
    load_dotenv()

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config_path) if config_path else None


def _load_config(ctx: click.Context, root: Path) -> Config:
    """Load the configuration for ``root``, honoring ``--config``."""

    try:
        return load_config(root, ctx.obj.get("config_path"))
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc


def _load_catalog(ctx: click.Context, root: Path) -> tuple[Any, Config]:
    """Parse the catalog at ``root`` or abort with a readable message."""

    config = _load_config(ctx, root)
    try:
        return parser.load_catalog(root, config), config
    except FileNotFoundError as exc:
        raise click.ClickException(str(exc)) from exc


def _emit(content: str, final_path: Optional[Path]) -> None:
    """Write ``content`` to ``final_path`` or echo it to the console."""

    if final_path:
        final_path.write_text(content, encoding="utf-8")
    else:
        click.echo(content)


@cli.command()
@click.argument("source", default=".")
@click.option(
    "--cache-dir",
    type=click.Path(file_okay=False, dir_okay=True),
    default=None,
    help="Directory for downloaded articles.",
)
@click.option(
    "--output",
    "output_path",
    type=click.Path(file_okay=True, dir_okay=True),
    default=None,
    help="Write output to FILE or DIRECTORY instead of the console.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "yaml", "xlsx"]),
    default="json",
    help="Output format.",
)
@click.option(
    "--lint", "with_lint", is_flag=True, help="Include lint results."
)
@click.pass_context
def convert(
    ctx: click.Context,
    source: str = ".",
    cache_dir: Optional[str] = None,
    output_path: Optional[str] = None,
    output_format: str = "json",
    with_lint: bool = False,
) -> None:
    """Convert a catalog, an article file or an article URL to data.

    Args:
        ctx: Click context object.
        source: Catalog root directory, Markdown file or ``http(s)`` URL.
        cache_dir: Directory used to cache downloaded articles.
        output_path: Optional file or directory path for the converted data.
            If a directory is provided, the file name is generated from the
            catalog directory or the article slug.
        output_format: Format of the converted data.
        with_lint: Attach the lint report under the ``lint`` key.
    """

    doc: dict[str, Any]
    if _is_external_link(source) or Path(source).is_file():
        cache_path = Path(cache_dir) if cache_dir else None
        try:
            article = parser.fetch_article(source, cache_path)
        except (
            FileNotFoundError,
            UnicodeDecodeError,
            requests.RequestException,
        ) as exc:
            raise click.ClickException(str(exc)) from exc

        doc = {"articles": [parser.to_dict(article)]}
        stem = article.slug or "article"
        report: Optional[LintReport] = (
            lint_article(article, _load_config(ctx, Path.cwd()))
            if with_lint
            else None
        )
    else:
        root = Path(source)
        if not root.is_dir():
            raise click.UsageError(f"No such file or directory: {source}")

        catalog, config = _load_catalog(ctx, root)
        doc = parser.catalog_to_dict(catalog)
        stem = root.resolve().name or "catalog"
        report = lint_catalog(catalog, config) if with_lint else None

    if report is not None:
        doc["lint"] = report.to_dict()

    # Determine the output file path if one was provided.
    final_path: Optional[Path] = None
    if output_path:
        final_path = Path(output_path)
        if final_path.is_dir():
            final_path = final_path / f"{stem}{EXTENSIONS[output_format]}"

    if output_format == "json":
        _emit(json_dumps(doc, pretty=True), final_path)
    elif output_format == "yaml":
        _emit(
            yaml.safe_dump(doc, allow_unicode=True, sort_keys=False),
            final_path,
        )
    elif output_format == "xlsx":
        if final_path is None:
            raise click.UsageError("Output file is required for xlsx format.")
        write_workbook(doc, final_path)


@cli.command()
@click.argument(
    "root", default=".", type=click.Path(exists=True, file_okay=False)
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json", "yaml"]),
    default="text",
    show_default=True,
    help="Report format.",
)
@click.option(
    "--external", is_flag=True, help="Also request every http(s) link."
)
@click.option("--strict", is_flag=True, help="Fail on warnings as well.")
@click.pass_context
def lint(
    ctx: click.Context,
    root: str = ".",
    output_format: str = "text",
    external: bool = False,
    strict: bool = False,
) -> None:
    """Check the catalog for broken links and malformed articles.

    Exits with status 1 when errors are found, or warnings with
    ``--strict``.
    """

    catalog, config = _load_catalog(ctx, Path(root))
    report = lint_catalog(catalog, config, external=external)

    if output_format == "json":
        click.echo(json_dumps(report.to_dict(), pretty=True))
    elif output_format == "yaml":
        click.echo(
            yaml.safe_dump(
                report.to_dict(), allow_unicode=True, sort_keys=False
            )
        )
    else:
        for violation in report.violations:
            click.echo(violation.format())
        click.echo(report.summary())

    if not report.ok or (strict and report.warning_count):
        ctx.exit(1)


@cli.command()
@click.argument(
    "root", default=".", type=click.Path(exists=True, file_okay=False)
)
@click.option(
    "--write", "mode", flag_value="write", help="Update the index file."
)
@click.option(
    "--check",
    "mode",
    flag_value="check",
    help="Exit with status 1 when the index file is out of date.",
)
@click.pass_context
def index(
    ctx: click.Context, root: str = ".", mode: Optional[str] = None
) -> None:
    """Generate the index tables from the articles on disk."""

    catalog, _ = _load_catalog(ctx, Path(root))
    rendered = render_index(catalog)

    if mode is None:
        click.echo(rendered, nl=False)
        return

    index_file = Path(catalog.info.root) / catalog.index.path
    current = index_file.read_text(encoding="utf-8")
    updated = update_index(current, rendered)

    if mode == "check":
        if updated != current:
            click.echo(f"{catalog.index.path} is out of date", err=True)
            ctx.exit(1)
        click.echo(f"{catalog.index.path} is up to date")
        return

    index_file.write_text(updated, encoding="utf-8")
    click.echo(f"Updated {catalog.index.path}")


def _parse_category(
    ctx: click.Context, param: click.Parameter, value: str
) -> Category:
    """Convert the ``--category`` option into a ``Category``."""

    try:
        return Category.from_text(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc


@cli.command()
@click.argument("name")
@click.option(
    "--category",
    required=True,
    callback=_parse_category,
    help="design-patterns or architectures.",
)
@click.option(
    "--scenario", required=True, help="Scenario of the worked example."
)
@click.option("--emoji", default=None, help="Emoji shown before the title.")
@click.option(
    "--language",
    default="python",
    show_default=True,
    help="Language tag of the example code block.",
)
@click.option("--force", is_flag=True, help="Overwrite an existing article.")
@click.option(
    "--root",
    default=".",
    show_default=True,
    type=click.Path(exists=True, file_okay=False),
    help="Catalog root directory.",
)
@click.pass_context
def new(
    ctx: click.Context,
    name: str,
    category: Category,
    scenario: str,
    emoji: Optional[str] = None,
    language: str = "python",
    force: bool = False,
    root: str = ".",
) -> None:
    """Create a new article from the article template."""

    root_path = Path(root)
    config = _load_config(ctx, root_path)
    try:
        target = scaffold_article(
            root_path,
            name,
            category,
            scenario,
            config,
            emoji=emoji,
            language=language,
            force=force,
        )
    except FileExistsError as exc:
        raise click.ClickException(f"{exc}; use --force to overwrite") from exc

    click.echo(f"Created {target}")


@cli.command("list")
@click.argument(
    "root", default=".", type=click.Path(exists=True, file_okay=False)
)
@click.pass_context
def list_articles(ctx: click.Context, root: str = ".") -> None:
    """List the articles of the catalog."""

    catalog, _ = _load_catalog(ctx, Path(root))
    for article in catalog.articles:
        category = article.category.value if article.category else "-"
        click.echo(f"{category:<14} {article.slug:<28} {article.title}")


def _import_optional(module: str, extra: str) -> ModuleType:
    """Import a module that requires an optional dependency group.

    Args:
        module: The module to import.
        extra: Name of the extra that provides the module.

    Returns:
        The imported module.

    Throws:
        click.ClickException: If the module or its dependencies are missing.
    """

    try:
        return importlib.import_module(module)
    except ModuleNotFoundError as exc:  # pragma: no cover - narrow except
        # Inform the user that extras are required.
        click.echo(
            f"This command requires optional {extra} dependencies.\n"
            f"Install them with `pip install -e .[{extra}]`."
        )

        # Offer to install the dependencies immediately.
        if click.confirm("Install them now?", default=False):
            subprocess.run(
                [sys.executable, "-m", "pip", "install", "-e", f".[{extra}]"],
                check=True,
            )
            return _import_optional(module, extra)

        raise click.ClickException(f"Missing {extra} dependencies") from exc


@cli.command()
@click.option(
    "--root",
    default=".",
    show_default=True,
    type=click.Path(exists=True, file_okay=False),
    help="Catalog root directory served by the app.",
)
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", type=int, default=8000, show_default=True)
def serve(root: str = ".", host: str = "127.0.0.1", port: int = 8000) -> None:
    """Serve the catalog over HTTP."""

    os.environ["PATDOC_ROOT"] = str(Path(root).resolve())

    uvicorn = _import_optional("uvicorn", "web")
    web = _import_optional("patdoc.web", "web")
    uvicorn.run(web.app, host=host, port=port)
