"""Command-line interface for Mainstay."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Optional

import click
import structlog
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from mainstay import __version__
from mainstay.api import extract_file, extract_html, extract_url
from mainstay.config.config import Config, MonitoringConfig, find_config_file
from mainstay.exceptions import ExtractionError, FetchError
from mainstay.extractor.cascade_extractor import CascadeExtractor
from mainstay.extractor.dom import is_html_content, is_url
from mainstay.extractor.models import ExtractionResult, StrategyName
from mainstay.observability.logging import configure_logging
from mainstay.output.formatter import OUTPUT_FORMATS, format_result

console = Console()
err_console = Console(stderr=True)
logger = structlog.get_logger(__name__)

STRATEGY_DESCRIPTIONS = {
    StrategyName.STRUCTURAL: "Selector-driven extraction, Wikipedia-aware section skipping",
    StrategyName.ARTICLE: "Best-scoring <article> element",
    StrategyName.CONTENT_HINTS: "First element whose class/id matches a content hint",
    StrategyName.DENSITY: "Highest-scoring container from the candidate search",
    StrategyName.PARAGRAPH_CLUSTER: "Paragraphs that are long, link-light and outside navigation",
    StrategyName.READABILITY: "Paragraph-parent scoring fallback",
    StrategyName.LAST_RESORT: "Every paragraph, no size gate",
}


def _load_config(config_path: Optional[Path]) -> Config:
    config_path = config_path or find_config_file()
    if config_path is not None:
        return Config.from_yaml(config_path)
    return Config()


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", type=click.Path(exists=True, dir_okay=False), help="Configuration file path")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level",
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], log_level: Optional[str]) -> None:
    """Mainstay - extract the main content of HTML documents."""
    ctx.ensure_object(dict)
    settings = _load_config(Path(config) if config else None)
    if log_level:
        settings.monitoring = settings.monitoring.model_copy(update={"log_level": log_level})
    ctx.obj["config"] = settings

    configure_logging(settings.monitoring)


def _read_input(input_value: Optional[str], url: Optional[str], file: Optional[str]) -> tuple[str, str]:
    """Resolve the input source to a (kind, value) pair."""
    if url:
        return "url", url
    if file:
        return "file", file
    if input_value is None or input_value == "-":
        return "html", sys.stdin.read()
    if is_url(input_value):
        return "url", input_value
    if is_html_content(input_value):
        return "html", input_value
    try:
        if Path(input_value).is_file():
            return "file", input_value
    except OSError:
        # name too long to be a path
        pass
    return "html", input_value


@cli.command()
@click.argument("input_value", metavar="[INPUT]", required=False)
@click.option("--url", "-u", help="URL to fetch and extract")
@click.option("--file", "-f", type=click.Path(exists=True, dir_okay=False), help="HTML file to extract")
@click.option(
    "--output-format",
    "-o",
    default="txt",
    type=click.Choice(list(OUTPUT_FORMATS)),
    help="Output format",
)
@click.option("--output", type=click.Path(dir_okay=False, writable=True), help="Write output to this file")
@click.option("--include-comments", is_flag=True, default=None, help="Keep comment markers")
@click.option("--include-tables/--no-include-tables", default=None, help="Keep tables")
@click.option("--include-links/--no-include-links", default=None, help="Append link targets to anchor text")
@click.option("--include-images", is_flag=True, default=None, help="Emit image markers")
@click.option("--extract-metadata", is_flag=True, default=None, help="Include document metadata")
@click.option("--min-extracted-size", type=click.IntRange(min=0), help="Minimum accepted content length")
@click.option("--favor-precision", is_flag=True, default=None, help="Use the stricter paragraph-only text variant")
@click.option("--timeout", type=click.FloatRange(min=0, min_open=True), help="HTTP timeout in seconds")
@click.option("--user-agent", help="HTTP User-Agent")
@click.option("--verbose", "-v", is_flag=True, help="Verbose logging")
@click.pass_context
def extract(
    ctx: click.Context,
    input_value: Optional[str],
    url: Optional[str],
    file: Optional[str],
    output_format: str,
    output: Optional[str],
    include_comments: Optional[bool],
    include_tables: Optional[bool],
    include_links: Optional[bool],
    include_images: Optional[bool],
    extract_metadata: Optional[bool],
    min_extracted_size: Optional[int],
    favor_precision: Optional[bool],
    timeout: Optional[float],
    user_agent: Optional[str],
    verbose: bool,
) -> None:
    """Extract the main content from INPUT (URL, file path, '-' for stdin, or raw HTML)."""
    settings: Config = ctx.obj["config"]
    if verbose:
        configure_logging(MonitoringConfig(log_level="DEBUG", log_file=settings.monitoring.log_file))

    config = settings.extraction.to_extraction_config(
        include_comments=include_comments,
        include_tables=include_tables,
        include_links=include_links,
        include_images=include_images,
        extract_metadata=extract_metadata,
        min_extracted_size=min_extracted_size,
        favor_precision=favor_precision,
    )
    http_updates = {key: value for key, value in {"timeout": timeout, "user_agent": user_agent}.items() if value}
    http_config = settings.http.model_copy(update=http_updates)

    kind, value = _read_input(input_value, url, file)
    logger.debug("Extracting", source=kind)

    try:
        result: ExtractionResult
        if kind == "url":
            result = asyncio.run(extract_url(value, config, http_config=http_config))
        elif kind == "file":
            result = extract_file(value, config)
        else:
            result = extract_html(value, config)
    except (ExtractionError, FetchError) as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]", markup=True, highlight=False)
        sys.exit(1)
    except OSError as e:
        err_console.print(f"[red]Error reading input: {escape(str(e))}[/red]", highlight=False)
        sys.exit(1)

    rendered = format_result(result, output_format)
    if output:
        Path(output).write_text(rendered + "\n", encoding="utf-8")
        err_console.print(f"[green]Output written to {escape(output)}[/green]", highlight=False)
    else:
        click.echo(rendered)


@cli.command()
def strategies() -> None:
    """Show the extraction strategies in the order they run."""
    table = Table(title="Extraction Strategies")
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Strategy", style="magenta")
    table.add_column("Gated", style="green")
    table.add_column("Description")

    for index, name in enumerate(CascadeExtractor().strategy_order, start=1):
        gated = "no" if name is StrategyName.LAST_RESORT else "yes"
        table.add_row(str(index), name.value, gated, STRATEGY_DESCRIPTIONS[name])

    console.print(table)


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
