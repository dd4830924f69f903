#!/usr/bin/env python3
"""
Product Listing Example

Demonstrates the extraction modes on a small product catalog page,
including a web component that keeps its prices in a shadow root.

Features demonstrated:
- Heuristic list discovery with no selector input
- Free-form record scraping
- Schema scraping with shadow-aware fields
- List scraping with a limit
- Auto-list sampling for schema authoring
- Headless rendering for real geometry (--render)

Usage:
    # Static layout, no browser needed
    python examples/product_listing_example.py

    # Lay the page out in Chromium first
    python examples/product_listing_example.py --render

Requirements:
    - pip install -e .
    - playwright install chromium (only for --render)
"""

import argparse
import asyncio
import json

from recordscraper.core.renderer import HTMLRenderer, RenderConfig
from recordscraper.core.scraper import PageScraper
from recordscraper.dom.document import Document
from recordscraper.utils.logging import ScraperLogger, setup_logging

CATALOG_URL = "https://shop.example/catalog/"

PRODUCTS = [
    ("Desk Lamp", "lamp", "$24"),
    ("Oak Chair", "chair", "$89"),
    ("Side Table", "table", "$120"),
    ("Bookshelf", "shelf", "$150"),
]


def build_catalog_html() -> str:
    """Build a catalog page with four product cards."""
    cards = "\n".join(
        f"""
        <div class="card" style="width: 280px; height: 320px">
            <img srcset="/img/{slug}-480.jpg 480w, /img/{slug}-1024.jpg 1024w"
                 src="/img/{slug}.jpg" width="280" height="200">
            <h2 class="title">{name}</h2>
            <price-tag>
                <template shadowrootmode="open"><span class="amount">{price}</span></template>
            </price-tag>
            <a class="more" href="/products/{slug}">Details</a>
        </div>"""
        for name, slug, price in PRODUCTS
    )
    return f"""
<!DOCTYPE html>
<html>
<head><title>Catalog</title></head>
<body>
    <header><h1>Furniture</h1></header>
    <main id="catalog" style="display: flex">
        {cards}
    </main>
</body>
</html>
"""


class CatalogDemo:
    """Runs every extraction mode against the catalog page."""

    def __init__(self, document: Document):
        self.document = document
        self.logger = ScraperLogger("catalog_demo")
        self.scraper = PageScraper(document, logger=self.logger)

    def discover(self) -> None:
        """Find the product cards by layout alone."""
        result = self.scraper.locate_list()
        print(f"\nDiscovered selector: {result.selector}")
        print(f"  score: {result.metric:.3f}, items: {len(result.elements)}")
        if result.degenerate:
            print("  (no list-like region found)")

    def scrape(self) -> None:
        """Free-form records of the discovered cards."""
        self._show("Free-form records", self.scraper.scrape())

    def scrape_schema(self) -> None:
        """Named fields, including a price inside each card's shadow root."""
        records = self.scraper.scrape_schema({
            "title": {"selector": ".card .title"},
            "price": {"selector": ".card price-tag >> .amount", "shadow": True},
            "link": {"selector": ".card a.more", "attribute": "href"},
        })
        self._show("Schema records", records)

    def scrape_list(self) -> None:
        """The first two cards as list records."""
        records = self.scraper.scrape_list(
            ".card",
            {
                "title": {"selector": ".title", "attribute": "innerText"},
                "price": {"selector": "price-tag >> .amount", "attribute": "innerText"},
                "image": {"selector": "img", "attribute": "src"},
            },
            limit=2,
        )
        self._show("List records (limit=2)", records)

    def scrape_list_auto(self) -> None:
        """Sample selectors for the children of the catalog."""
        self._show("Auto-list entries", self.scraper.scrape_list_auto("#catalog"))

    def _show(self, title: str, records: list) -> None:
        print(f"\n{title}:")
        print(json.dumps(records, indent=2))


async def render_catalog(html: str) -> Document:
    """Lay the catalog out in headless Chromium."""
    async with HTMLRenderer(RenderConfig(viewport_width=1280, viewport_height=720)) as renderer:
        return await renderer.render(html, CATALOG_URL)


def main() -> None:
    parser = argparse.ArgumentParser(description="Product listing extraction demo")
    parser.add_argument("--render", action="store_true", help="Render with Playwright")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    args = parser.parse_args()

    setup_logging(level="DEBUG" if args.verbose else "WARNING", format_type="console")

    html = build_catalog_html()
    if args.render:
        document = asyncio.run(render_catalog(html))
    else:
        document = Document(html, url=CATALOG_URL)

    demo = CatalogDemo(document)
    demo.discover()
    demo.scrape()
    demo.scrape_schema()
    demo.scrape_list()
    demo.scrape_list_auto()


if __name__ == "__main__":
    main()
