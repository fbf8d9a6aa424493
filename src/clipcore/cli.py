"""Command-line interface for clipcore."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional, TextIO

import click
import structlog
import yaml
from rich.console import Console
from rich.table import Table

from clipcore import __version__
from clipcore.config import Config, ExtractionOptions, load_config
from clipcore.extractor import Article, ExtractionError, Readability
from clipcore.observability import configure_logging
from clipcore.utils import atomic_write_json, atomic_write_text

console = Console(stderr=True)
logger = structlog.get_logger(__name__)


def _load(ctx: click.Context) -> Config:
    config = load_config(ctx.obj["config_path"])
    if ctx.obj["log_level"]:
        config.monitoring.log_level = ctx.obj["log_level"]
    configure_logging(config.monitoring)
    return config


def _render(article: Article, output_format: str) -> str:
    if output_format == "html":
        return article.content
    if output_format == "text":
        return article.text_content
    return json.dumps(article.to_dict(), indent=2, ensure_ascii=False)


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", type=click.Path(exists=True), help="Configuration file path")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level (overrides the configuration file)",
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], log_level: Optional[str]) -> None:
    """clipcore - Extract the main article from HTML documents."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config) if config else None
    ctx.obj["log_level"] = log_level


@cli.command()
@click.argument("source", type=click.File("r", encoding="utf-8"))
@click.option("--url", default=None, help="Document URL, used to resolve relative links")
@click.option("--char-threshold", type=click.IntRange(min=0), default=None, help="Minimum article length")
@click.option("--candidates", type=click.IntRange(min=1), default=None, help="Number of top candidates")
@click.option("--max-elements", type=click.IntRange(min=0), default=None, help="Abort above this many elements")
@click.option("--keep-classes", is_flag=True, default=False, help="Keep class attributes in the article")
@click.option(
    "--format",
    "output_format",
    default="json",
    type=click.Choice(["json", "html", "text"]),
    help="Output format",
)
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write the result to this file")
@click.pass_context
def extract(
    ctx: click.Context,
    source: TextIO,
    url: Optional[str],
    char_threshold: Optional[int],
    candidates: Optional[int],
    max_elements: Optional[int],
    keep_classes: bool,
    output_format: str,
    output: Optional[str],
) -> None:
    """Extract the article from SOURCE (a file path, or - for stdin)."""
    config = _load(ctx)

    overrides: Dict[str, Any] = {}
    if char_threshold is not None:
        overrides["char_threshold"] = char_threshold
    if candidates is not None:
        overrides["candidate_count"] = candidates
    if max_elements is not None:
        overrides["max_elements_to_parse"] = max_elements
    if keep_classes:
        overrides["keep_classes"] = True
    options = ExtractionOptions.model_validate({**config.extraction.model_dump(), **overrides})

    html = source.read()
    try:
        article = Readability(
            html,
            url=url,
            options=options,
            record_metrics=config.monitoring.metrics_enabled,
        ).parse()
    except ExtractionError as e:
        logger.error("Extraction failed", source=source.name, error=str(e))
        console.print(f"[red]Extraction failed: {e}[/red]")
        sys.exit(1)

    if not output:
        click.echo(_render(article, output_format))
        return

    if output_format == "json":
        atomic_write_json(Path(output), article.to_dict())
    else:
        atomic_write_text(Path(output), _render(article, output_format))
    console.print(f"[green]Article saved to {output}[/green] ({article.length} characters)")


@cli.command()
@click.pass_context
def validate_config(ctx: click.Context) -> None:
    """Validate and show the effective configuration."""
    try:
        config = _load(ctx)
    except (ValueError, OSError, yaml.YAMLError) as e:
        console.print(f"[red]Configuration validation failed: {e}[/red]")
        sys.exit(1)

    table = Table(title="Effective Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")
    for section in ("extraction", "monitoring"):
        for key, value in getattr(config, section).model_dump().items():
            table.add_row(f"{section}.{key}", str(value))
    console.print(table)
    console.print("[green]Configuration is valid![/green]")


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
