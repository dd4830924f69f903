"""
CLI entry point for the record scraper.

Reads a saved HTML file, runs one extraction mode and prints the records
as JSON on stdout. Status and errors go to stderr.

Usage:
    python -m recordscraper scrape page.html --url https://shop.example/catalog
    python -m recordscraper schema page.html --fields '{"title": {"selector": "h2"}}'
    python -m recordscraper list page.html --list-selector .product \
        --fields @fields.json --limit 5
    python -m recordscraper auto page.html --list-selector ul.results

    # Lay the page out in headless Chromium instead of the static layout:
    python -m recordscraper scrape page.html --render
"""

import asyncio
import json
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click
from rich.console import Console

from recordscraper import __version__
from recordscraper.config import ScrapeConfig, ScraperSettings, load_config
from recordscraper.core.renderer import HTMLRenderer, RenderConfig
from recordscraper.core.scraper import PageScraper
from recordscraper.dom.document import Document
from recordscraper.exceptions import ConfigurationError, ScraperError
from recordscraper.utils.logging import setup_logging
from recordscraper.utils.metrics import set_scraper_info

console = Console(stderr=True)


def _common_options(func: Callable) -> Callable:
    """Options shared by every extraction mode."""
    options = [
        click.argument(
            "html_file",
            type=click.Path(exists=True, dir_okay=False, path_type=Path),
        ),
        click.option(
            "--url",
            type=str,
            default=None,
            help="Document location used to resolve relative links (default: file URL).",
        ),
        click.option(
            "--render",
            is_flag=True,
            default=False,
            help="Render the page in headless Chromium for real geometry.",
        ),
        click.option(
            "--viewport",
            type=str,
            default=None,
            help="Viewport as WIDTHxHEIGHT (default: from settings, 1280x720).",
        ),
        click.option(
            "--verbose",
            "-v",
            is_flag=True,
            help="Enable verbose logging.",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _parse_viewport(value: str | None, settings: ScraperSettings) -> tuple[int, int]:
    if not value:
        return settings.viewport_width, settings.viewport_height
    try:
        width, height = (int(part) for part in value.lower().split("x"))
    except ValueError:
        raise click.BadParameter(f"expected WIDTHxHEIGHT, got {value!r}", param_hint="--viewport")
    return width, height


def _parse_fields(value: str) -> dict[str, Any]:
    """Read field configuration from inline JSON or @path."""
    if value.startswith("@"):
        try:
            value = Path(value[1:]).read_text(encoding="utf-8")
        except OSError as e:
            raise click.BadParameter(f"cannot read {value[1:]}: {e}", param_hint="--fields")
    try:
        fields = json.loads(value)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"invalid JSON: {e}", param_hint="--fields")
    if not isinstance(fields, dict):
        raise click.BadParameter("expected a JSON object of label to field", param_hint="--fields")
    return fields


def _load_document(
    html_file: Path,
    url: str | None,
    render: bool,
    viewport: tuple[int, int],
    settings: ScraperSettings,
) -> Document:
    html = html_file.read_text(encoding="utf-8", errors="replace")
    location = url or html_file.resolve().as_uri()
    width, height = viewport

    if not render:
        return Document(html, url=location, viewport_width=width, viewport_height=height)

    config = RenderConfig(
        headless=settings.headless,
        timeout=settings.render_timeout_seconds,
        viewport_width=width,
        viewport_height=height,
    )
    console.print(f"[cyan]Rendering {html_file.name} in headless Chromium...[/cyan]")
    return asyncio.run(_render(html, location, config))


async def _render(html: str, location: str, config: RenderConfig) -> Document:
    """Render the page asynchronously."""
    async with HTMLRenderer(config) as renderer:
        return await renderer.render(html, location)


def _run(ctx: click.Context, extract: Callable[[PageScraper], list], **kwargs: Any) -> None:
    """Build the scraper for a mode, run it and print the records."""
    settings: ScraperSettings = ctx.obj["settings"]
    verbose = kwargs["verbose"] or ctx.obj["verbose"]
    setup_logging(level="DEBUG" if verbose else settings.log_level, format_type=settings.log_format)

    viewport = _parse_viewport(kwargs["viewport"], settings)

    try:
        document = _load_document(
            kwargs["html_file"], kwargs["url"], kwargs["render"], viewport, settings,
        )
        scraper = PageScraper(document, ScrapeConfig.from_settings(settings))
        records = extract(scraper)

    except ConfigurationError as e:
        console.print(f"[bold red]Configuration error: {e.message}[/bold red]")
        sys.exit(2)
    except ScraperError as e:
        console.print(f"[bold red]Error: {e.message}[/bold red]")
        if verbose:
            console.print(e.details)
        sys.exit(1)

    click.echo(json.dumps(records, indent=2, ensure_ascii=False))
    console.print(f"[green]{len(records)} record(s) extracted[/green]")


@click.group()
@click.version_option(__version__, prog_name="recordscraper")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """
    Record Scraper - structured records from rendered pages.

    Example:
        python -m recordscraper scrape page.html
    """
    ctx.ensure_object(dict)
    ctx.obj["settings"] = load_config()
    ctx.obj["verbose"] = verbose
    set_scraper_info(__version__)


@main.command()
@_common_options
@click.option(
    "--selector",
    "-s",
    type=str,
    default=None,
    help="Item selector (default: discover the list heuristically).",
)
@click.pass_context
def scrape(ctx: click.Context, selector: str | None, **kwargs: Any) -> None:
    """Free-form scrape of items into image and text-line records."""
    _run(ctx, lambda scraper: scraper.scrape(selector), **kwargs)


@main.command()
@_common_options
@click.option(
    "--fields",
    "-f",
    type=str,
    required=True,
    help="JSON object of label to {selector, attribute, shadow}, or @file.",
)
@click.pass_context
def schema(ctx: click.Context, fields: str, **kwargs: Any) -> None:
    """Extract records from named field selectors."""
    parsed = _parse_fields(fields)
    _run(ctx, lambda scraper: scraper.scrape_schema(parsed), **kwargs)


@main.command(name="list")
@_common_options
@click.option(
    "--list-selector",
    "-l",
    type=str,
    required=True,
    help="Selector of the list item containers.",
)
@click.option(
    "--fields",
    "-f",
    type=str,
    required=True,
    help="JSON object of label to {selector, attribute}, or @file.",
)
@click.option(
    "--limit",
    "-n",
    type=int,
    default=None,
    help="Maximum number of records (default: from settings, 10).",
)
@click.pass_context
def list_(
    ctx: click.Context,
    list_selector: str,
    fields: str,
    limit: int | None,
    **kwargs: Any,
) -> None:
    """Extract one record per list container."""
    parsed = _parse_fields(fields)
    _run(ctx, lambda scraper: scraper.scrape_list(list_selector, parsed, limit), **kwargs)


@main.command()
@_common_options
@click.option(
    "--list-selector",
    "-l",
    type=str,
    required=True,
    help="Selector of the list containers.",
)
@click.pass_context
def auto(ctx: click.Context, list_selector: str, **kwargs: Any) -> None:
    """Sample child selectors and text under list containers."""
    _run(ctx, lambda scraper: scraper.scrape_list_auto(list_selector), **kwargs)


if __name__ == "__main__":
    main()
