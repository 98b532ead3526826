"""
CLI entry point for pagescout.

Usage:
    python -m pagescout https://example.com

    # Listing page, five query-parameter pages, saved as JSON:
    python -m pagescout https://example.com/blog --profile listing \
        --strategy parameter --pages 5 --output ./results/blog.json
"""

import asyncio
import sys

import click
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from pagescout.config import ScrapeConfig, ScraperSettings, list_profiles
from pagescout.core.orchestrator import run_scrape, save_document
from pagescout.exceptions import ScraperError
from pagescout.models import PageDocument, PaginationStrategyName
from pagescout.utils.logging import ScraperLogger, setup_logging

console = Console()


@click.command()
@click.argument("url")
@click.option(
    "--max-scrolls",
    type=int,
    default=None,
    help="Scroll attempt budget per strategy (default: 200).",
)
@click.option(
    "--scroll-delay",
    type=int,
    default=None,
    help="Delay between scroll steps in milliseconds (default: 1000).",
)
@click.option(
    "--pages",
    "max_pages",
    type=int,
    default=None,
    help="Maximum pages to visit when paginating by URL (default: 1).",
)
@click.option(
    "--strategy",
    type=click.Choice([s.value for s in PaginationStrategyName]),
    default=None,
    help="Force a pagination strategy instead of detecting one.",
)
@click.option(
    "--click-selector",
    type=str,
    default=None,
    help="Button selector for the click strategy.",
)
@click.option(
    "--page-parameter",
    type=str,
    default=None,
    help="Query parameter incremented by the parameter strategy (default: page).",
)
@click.option(
    "--wait-for-selector",
    type=str,
    default=None,
    help="Selector to wait for before extracting.",
)
@click.option(
    "--profile",
    type=click.Choice(list_profiles()),
    default=None,
    help="Scraping profile applied before explicit options.",
)
@click.option(
    "--no-brute-force",
    is_flag=True,
    default=False,
    help="Stop the pagination pipeline at the first stage that finds new content.",
)
@click.option(
    "--no-pagination",
    is_flag=True,
    default=False,
    help="Extract the loaded page only.",
)
@click.option(
    "--download-images",
    is_flag=True,
    default=False,
    help="Download discovered images.",
)
@click.option(
    "--headless/--no-headless",
    default=None,
    help="Run the browser headless (default: headless).",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the scraped document to this JSON file.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level (default: INFO).",
)
def main(
    url: str,
    max_scrolls: int | None,
    scroll_delay: int | None,
    max_pages: int | None,
    strategy: str | None,
    click_selector: str | None,
    page_parameter: str | None,
    wait_for_selector: str | None,
    profile: str | None,
    no_brute_force: bool,
    no_pagination: bool,
    download_images: bool,
    headless: bool | None,
    output: str | None,
    log_level: str | None,
) -> None:
    """
    Scrape URL, paginating and extracting until the budget runs out.

    Example:
        python -m pagescout https://example.com --max-scrolls 50
    """
    settings = ScraperSettings()
    if headless is not None:
        settings.headless = headless

    setup_logging(level=log_level or settings.log_level, format_type=settings.log_format)
    logger = ScraperLogger("pagescout.cli")

    try:
        config = ScrapeConfig.from_settings(
            settings,
            profile=profile,
            max_scrolls=max_scrolls,
            scroll_delay=scroll_delay,
            max_pages=max_pages,
            pagination_strategy=strategy,
            click_selector=click_selector,
            page_parameter=page_parameter,
            wait_for_selector=wait_for_selector,
            brute_force=False if no_brute_force else None,
            handle_pagination=False if no_pagination else None,
            download_images=True if download_images else None,
        )
    except ScraperError as e:
        raise click.BadParameter(e.message) from e

    console.print("[bold blue]pagescout[/bold blue]")
    console.print(f"URL: {url}")
    if profile:
        console.print(f"Profile: {profile}")
    console.print(
        f"Scrolls: {config.max_scrolls} @ {config.scroll_delay}ms, pages: {config.max_pages}"
    )
    if config.pagination_strategy:
        console.print(f"Strategy: {config.pagination_strategy.value}")

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task("Scraping (this may take several minutes)...", total=None)
            document = asyncio.run(run_scrape(url, config, settings, logger))
    except KeyboardInterrupt:
        console.print("\n[yellow]Scrape interrupted by user[/yellow]")
        sys.exit(0)
    except ScraperError as e:
        console.print(f"\n[bold red]Error: {e.message}[/bold red]")
        sys.exit(1)

    _print_summary(document)

    if output:
        path = save_document(document, output)
        console.print(f"\nSaved to: {path}")


def _print_summary(document: PageDocument) -> None:
    stats = document.stats()

    table = Table(title="Scrape summary", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Title", document.title or "-")
    table.add_row("URL", document.url)
    table.add_row("Content items", str(stats["content_items"]))
    table.add_row("Images", str(stats["image_count"]))
    table.add_row("Structure", document.structure_type or "-")

    console.print()
    console.print(table)


if __name__ == "__main__":
    main()
