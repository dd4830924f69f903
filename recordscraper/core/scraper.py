"""
Scraper entry points.

PageScraper runs the extraction components over a Document. LivePageScraper
exposes the same entry points over a loaded Playwright page: every call
snapshots the page first, then extracts synchronously from the snapshot.
"""

import time
from collections.abc import Callable, Mapping
from dataclasses import replace
from typing import Any

from recordscraper.config import ScrapeConfig
from recordscraper.dom.document import Document
from recordscraper.dom.snapshot import snapshot_page
from recordscraper.extraction.auto_list import AutoListExtractor
from recordscraper.extraction.heuristics import HeuristicLocator, HeuristicResult
from recordscraper.extraction.list_extractor import ListExtractor
from recordscraper.extraction.record_extractor import RecordExtractor
from recordscraper.extraction.schema_extractor import SchemaExtractor
from recordscraper.models import FieldConfig, HeuristicMetric, ScrapeResult
from recordscraper.utils import metrics
from recordscraper.utils.logging import ScraperLogger

FieldsInput = Mapping[str, FieldConfig | Mapping[str, Any]]


class PageScraper:
    """
    Extraction entry points over a single Document.

    Example:
        document = Document(html, url="https://shop.example/catalog")
        scraper = PageScraper(document)
        cards = scraper.scrape()
        products = scraper.scrape_list(".product", {"name": {"selector": "h2"}})
    """

    def __init__(
        self,
        document: Document,
        config: ScrapeConfig | None = None,
        logger: ScraperLogger | None = None,
    ):
        """
        Initialize the scraper.

        Args:
            document: Document to extract from.
            config: Extraction configuration.
            logger: Logger instance.
        """
        self.document = document
        self.config = config or ScrapeConfig()
        self.logger = (logger or ScraperLogger()).bind(url=document.location)

    def scrape(self, selector: str | None = None) -> ScrapeResult:
        """
        Free-form scrape of matched (or discovered) elements.

        Args:
            selector: Item selector; heuristic discovery runs when omitted.

        Returns:
            One untyped record per item.
        """
        extractor = RecordExtractor(self.document, self.config.heuristic, self.logger)
        return self._timed("scrape", lambda: extractor.extract(selector))

    def scrape_schema(self, fields: FieldsInput) -> ScrapeResult:
        """
        Extract records from named field selectors.

        Args:
            fields: Label to {selector, attribute, shadow}.

        Returns:
            One record per logical item.
        """
        extractor = SchemaExtractor(self.document, self.logger)
        return self._timed("schema", lambda: extractor.extract(fields))

    def scrape_list(
        self,
        list_selector: str,
        fields: FieldsInput,
        limit: int | None = None,
    ) -> ScrapeResult:
        """
        Extract one record per list container.

        Args:
            list_selector: Container selector, may use the `>>` delimiter.
            fields: Label to field config, relative to each container.
            limit: Maximum records; defaults to the configured list limit.

        Returns:
            Up to `limit` records in container order.
        """
        extractor = ListExtractor(self.document, self.config.list, self.logger)
        return self._timed("list", lambda: extractor.extract(list_selector, fields, limit))

    def scrape_list_auto(self, list_selector: str) -> list[dict[str, str]]:
        """
        Sample selectors and text of every child of the matched containers.

        Args:
            list_selector: Container selector.

        Returns:
            List of {selector, innerText} dicts.
        """
        extractor = AutoListExtractor(self.document, self.logger)
        return self._timed(
            "auto",
            lambda: [entry.to_dict() for entry in extractor.extract(list_selector)],
        )

    def locate_list(
        self,
        max_count_per_page: int | None = None,
        min_area: float | None = None,
        scrolls: int | None = None,
        metric: HeuristicMetric | str | None = None,
    ) -> HeuristicResult:
        """
        Run heuristic list discovery on its own.

        Arguments override the configured heuristic parameters for this call.

        Returns:
            HeuristicResult with the selector, score and elements.
        """
        overrides = {
            "max_count_per_page": max_count_per_page,
            "min_area": min_area,
            "scrolls": scrolls,
            "metric": HeuristicMetric(metric) if metric is not None else None,
        }
        config = replace(
            self.config.heuristic,
            **{key: value for key, value in overrides.items() if value is not None},
        )
        return HeuristicLocator(self.document, config, self.logger).locate()

    def _timed(self, mode: str, extract: Callable[[], list]) -> list:
        start_time = time.perf_counter()
        try:
            records = extract()
        except Exception:
            metrics.EXTRACTION_TOTAL.labels(mode=mode, outcome="error").inc()
            raise

        duration = time.perf_counter() - start_time
        metrics.record_extraction(mode, len(records), duration)
        self.logger.extraction_result(
            mode=mode,
            records=len(records),
            duration_ms=duration * 1000,
        )
        return records


class LivePageScraper:
    """
    Extraction entry points over a loaded Playwright page.

    The page is snapshotted on every call, so extraction always sees the
    current DOM, geometry and scroll offset. The page is never navigated.
    """

    def __init__(
        self,
        page,
        config: ScrapeConfig | None = None,
        logger: ScraperLogger | None = None,
        location: str | None = None,
    ):
        """
        Initialize the live scraper.

        Args:
            page: playwright.async_api.Page owned by the caller.
            config: Extraction configuration.
            logger: Logger instance.
            location: Overrides the page URL for resolving relative links.
        """
        self.page = page
        self.config = config or ScrapeConfig()
        self.logger = logger or ScraperLogger()
        self.location = location

    async def snapshot(self) -> PageScraper:
        """Capture the page and wrap the snapshot in a PageScraper."""
        document = await snapshot_page(self.page, self.location, self.logger)
        return PageScraper(document, self.config, self.logger)

    async def scrape(self, selector: str | None = None) -> ScrapeResult:
        return (await self.snapshot()).scrape(selector)

    async def scrape_schema(self, fields: FieldsInput) -> ScrapeResult:
        return (await self.snapshot()).scrape_schema(fields)

    async def scrape_list(
        self,
        list_selector: str,
        fields: FieldsInput,
        limit: int | None = None,
    ) -> ScrapeResult:
        return (await self.snapshot()).scrape_list(list_selector, fields, limit)

    async def scrape_list_auto(self, list_selector: str) -> list[dict[str, str]]:
        return (await self.snapshot()).scrape_list_auto(list_selector)

    async def locate_list(self, **overrides: Any) -> HeuristicResult:
        """Discover the most list-like region of the current page."""
        return (await self.snapshot()).locate_list(**overrides)
