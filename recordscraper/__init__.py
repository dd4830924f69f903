"""
Record Scraper

Extracts structured records from rendered web pages: heuristic list
discovery, free-form record scraping, schema grouping and list scraping,
with shadow DOM aware selectors.
"""

__version__ = "0.1.0"

from recordscraper.config import ScrapeConfig, ScraperSettings, load_config
from recordscraper.dom import Document, Element, ShadowRoot, snapshot_page
from recordscraper.exceptions import ScraperError
from recordscraper.models import (
    AttributeKind,
    AutoListEntry,
    FieldAttribute,
    FieldConfig,
    HeuristicMetric,
    Record,
    ScrapeResult,
)
from recordscraper.core.scraper import LivePageScraper, PageScraper

__all__ = [
    "AttributeKind",
    "AutoListEntry",
    "Document",
    "Element",
    "FieldAttribute",
    "FieldConfig",
    "HeuristicMetric",
    "LivePageScraper",
    "PageScraper",
    "Record",
    "ScrapeConfig",
    "ScrapeResult",
    "ScraperError",
    "ScraperSettings",
    "ShadowRoot",
    "load_config",
    "snapshot_page",
]
