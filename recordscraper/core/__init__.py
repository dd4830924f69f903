"""Core scraper modules."""

from recordscraper.core.renderer import (
    BrowserPool,
    HTMLRenderer,
    RenderConfig,
    WaitStrategy,
)
from recordscraper.core.scraper import LivePageScraper, PageScraper

__all__ = [
    # Entry points
    "LivePageScraper",
    "PageScraper",
    # Rendering
    "BrowserPool",
    "HTMLRenderer",
    "RenderConfig",
    "WaitStrategy",
]
