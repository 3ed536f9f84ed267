"""Typer-based command line interface for chartrepo."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from .errors import ChartRepoError
from .schema import CatalogSummary
from .serializer import CatalogFormat, load_catalog
from .service import IndexRequest, IndexService
from .utils.config import IndexConfig, load_config
from .utils.logging import configure_logging
from .utils.paths import normalise_path

INDEX_HELP = """
Read DIR, generate an index file based on the charts found and write the
result to 'index.yaml' in DIR.

Use '--url' to set an absolute URL for the charts. With '--merge', the charts
found in DIR are merged into the given index, local charts taking priority
over existing ones.
"""

app = typer.Typer(add_completion=False, help="Build index files for chart repositories.")
console = Console(stderr=True)


def _fail(exc: Exception) -> typer.Exit:
    console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}", highlight=False)
    return typer.Exit(code=1)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
) -> None:
    ctx.obj = {"verbose": verbose}
    configure_logging("DEBUG" if verbose else "INFO")


@app.command(help=INDEX_HELP)
def index(
    ctx: typer.Context,
    directory: Path = typer.Argument(..., help="Directory containing packaged charts."),
    url: Optional[str] = typer.Option(None, "--url", help="URL of the chart repository."),
    merge: Optional[Path] = typer.Option(None, "--merge", help="Merge the generated index into the given index."),
    json_output: bool = typer.Option(False, "--json", help="Write the index in JSON format."),
    config_path: Optional[Path] = typer.Option(None, "--config", help="YAML file with default options."),
) -> None:
    try:
        config = load_config(config_path) if config_path is not None else IndexConfig()
        verbose = bool(ctx.obj and ctx.obj.get("verbose"))
        if config_path is not None and not verbose:
            configure_logging(config.log_level)
        request = IndexRequest(
            directory=normalise_path(directory),
            url=url if url is not None else config.url,
            merge=merge if merge is not None else config.merge,
            output_format=CatalogFormat.JSON if json_output or config.json_output else CatalogFormat.YAML,
            exclude_dirs=config.exclude_dirs,
            max_depth=config.max_depth,
        )
        result = IndexService().run(request)
    except ChartRepoError as exc:
        raise _fail(exc) from exc
    summary = CatalogSummary.from_catalog(result.catalog)
    typer.echo(
        f"Indexed {summary.total_versions} versions of {summary.total_charts} charts into {result.output_path}"
    )


@app.command()
def summarize(index_path: Path = typer.Argument(..., help="Index file to summarise.")) -> None:
    try:
        catalog = load_catalog(index_path)
    except ChartRepoError as exc:
        raise _fail(exc) from exc
    summary = CatalogSummary.from_catalog(catalog)
    typer.echo(json.dumps(summary.model_dump(), indent=2))


if __name__ == "__main__":
    app()
