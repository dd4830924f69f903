"""Utility modules for the record scraper."""

from recordscraper.utils.logging import ScraperLogger, get_logger, setup_logging
from recordscraper.utils.url_utils import (
    get_origin,
    is_data_url,
    parse_srcset,
    resolve_url,
    widest_srcset_candidate,
)

__all__ = [
    "ScraperLogger",
    "get_logger",
    "get_origin",
    "is_data_url",
    "parse_srcset",
    "resolve_url",
    "setup_logging",
    "widest_srcset_candidate",
]
