#!/usr/bin/env python3
"""
Batch Scrape Example

Queues several URLs, scrapes them with a bounded number of browsers, and
prints what the structure analyzer recommended for each site.

Features demonstrated:
- Structure analysis of a live page before scraping
- Named scraping profiles layered under explicit options
- The priority job queue with a concurrency ceiling
- Saving each document as JSON

Usage:
    playwright install chromium

    # Analyze one page and print the recommendation
    python examples/batch_scrape_example.py --analyze https://example.com/blog

    # Scrape several pages, two at a time, with the listing profile
    python examples/batch_scrape_example.py https://example.com/a https://example.com/b \
        --profile listing --concurrency 2 --output-dir ./results
"""

import argparse
import asyncio

from pagescout.adaptive import StructureAnalyzer
from pagescout.config import ScrapeConfig, ScraperSettings, list_profiles
from pagescout.core import BrowserPool
from pagescout.core.orchestrator import default_output_path, save_document
from pagescout.core.queue import JobStatus, ScrapeQueue
from pagescout.utils.logging import ScraperLogger, setup_logging


async def analyze(url: str, settings: ScraperSettings) -> None:
    """Print the analyzer's view of one page."""
    async with BrowserPool(max_contexts=1, settings=settings) as pool:
        async with pool.open_page(url) as page:
            analysis = await StructureAnalyzer().analyze_site(page)

    if analysis.partial_results:
        print(f"Analysis failed: {analysis.error}")
        return

    recommendation = analysis.recommendation
    print(f"\n{'='*60}")
    print(f"ANALYSIS: {url}")
    print(f"{'='*60}")
    print(f"Content type:     {analysis.content_type.primary_type.value}"
          f" (then {analysis.content_type.secondary_type.value})")
    print(f"Pagination:       {analysis.pagination.primary_type.value}")
    print(f"Infinite scroll:  confidence {analysis.infinite_scroll.confidence}/10")
    if recommendation is not None:
        strategy = recommendation.pagination_strategy
        print(f"Simple site:      {recommendation.simple_site}")
        print(f"Extractors first: {', '.join(recommendation.extractor_priority) or '-'}")
        print(f"Skipped:          {', '.join(recommendation.skip_extractors) or '-'}")
        print(f"Strategy:         {strategy.value if strategy else 'pipeline'}")
        if recommendation.click_selector:
            print(f"Click selector:   {recommendation.click_selector}")


async def scrape_batch(
    urls: list[str],
    config: ScrapeConfig,
    concurrency: int,
    output_dir: str | None,
) -> None:
    """Scrape every URL through the job queue."""
    logger = ScraperLogger("batch_example")

    async with ScrapeQueue(concurrency=concurrency, logger=logger) as queue:
        for priority, url in enumerate(urls):
            queue.submit(url, config, priority=priority)

    print(f"\n{'='*60}")
    print("RESULTS")
    print(f"{'='*60}")
    for job in queue.jobs:
        if job.status is JobStatus.COMPLETED and job.result is not None:
            stats = job.result.stats()
            print(f"[ok]     {job.url}: {stats['content_items']} items, {stats['image_count']} images")
            if output_dir:
                path = save_document(job.result, default_output_path(job.url, output_dir))
                print(f"         saved to {path}")
        else:
            print(f"[{job.status.value}] {job.url}: {job.error}")

    print(f"\nStats: {queue.get_stats()}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Batch scrape with pagescout")
    parser.add_argument("urls", nargs="*", help="URLs to scrape")
    parser.add_argument("--analyze", metavar="URL", help="Only analyze this URL")
    parser.add_argument("--profile", choices=list_profiles(), default="balanced")
    parser.add_argument("--max-scrolls", type=int, default=None)
    parser.add_argument("--concurrency", type=int, default=1)
    parser.add_argument("--output-dir", default=None)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    settings = ScraperSettings()
    setup_logging(level="DEBUG" if args.verbose else "WARNING", format_type="console")

    if args.analyze:
        asyncio.run(analyze(args.analyze, settings))
        return

    if not args.urls:
        parser.error("give at least one URL, or --analyze URL")

    config = ScrapeConfig.from_settings(settings, profile=args.profile, max_scrolls=args.max_scrolls)
    asyncio.run(scrape_batch(args.urls, config, args.concurrency, args.output_dir))


if __name__ == "__main__":
    main()
