"""
Headless rendering of local HTML for the record scraper.

Uses Playwright to lay out markup the caller already has (a saved page, a
fixture, a harness dump) so extraction sees real geometry instead of the
static layout approximation.

Features:
- Configurable wait strategies (load, domcontentloaded, networkidle)
- All outgoing requests are aborted; content is never fetched
- Concurrent rendering with a browser pool
"""

import asyncio
from dataclasses import dataclass
from enum import Enum

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from recordscraper.dom.document import Document
from recordscraper.dom.snapshot import snapshot_page
from recordscraper.exceptions import SnapshotError
from recordscraper.utils.logging import ScraperLogger


class WaitStrategy(str, Enum):
    """Page load wait strategies."""

    LOAD = "load"  # Wait for 'load' event
    DOMCONTENTLOADED = "domcontentloaded"  # Wait for DOMContentLoaded
    NETWORKIDLE = "networkidle"  # Wait until no network activity for 500ms
    COMMIT = "commit"


@dataclass
class RenderConfig:
    """Configuration for headless rendering."""

    # Wait strategy
    wait_until: WaitStrategy = WaitStrategy.LOAD
    timeout: float = 30.0  # seconds

    # Browser settings
    headless: bool = True
    viewport_width: int = 1280
    viewport_height: int = 720

    # Extra settling time after load, for client-side rendering (seconds)
    wait_for_timeout: float | None = None
    wait_for_selector: str | None = None


class BrowserPool:
    """
    Manages a pool of browser contexts for concurrent rendering.

    Provides efficient reuse of one browser instance while allowing
    concurrent page rendering.
    """

    def __init__(
        self,
        max_contexts: int = 5,
        headless: bool = True,
        logger: ScraperLogger | None = None,
    ):
        """
        Initialize the browser pool.

        Args:
            max_contexts: Maximum number of concurrent browser contexts.
            headless: Whether to run browsers in headless mode.
            logger: Logger instance.
        """
        self.max_contexts = max_contexts
        self.headless = headless
        self.logger = logger or ScraperLogger("browser_pool")

        self._browser = None
        self._playwright = None
        self._semaphore = asyncio.Semaphore(max_contexts)
        self._initialized = False

    async def initialize(self) -> None:
        """Start Playwright and launch Chromium."""
        if self._initialized:
            return

        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(
            headless=self.headless,
        )
        self._initialized = True
        self.logger.info(
            "Browser pool initialized",
            headless=self.headless,
            max_contexts=self.max_contexts,
        )

    async def close(self) -> None:
        """Close the browser pool."""
        if self._browser:
            await self._browser.close()
            self._browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

        self._initialized = False
        self.logger.info("Browser pool closed")

    async def acquire_context(self, config: RenderConfig):
        """
        Acquire a browser context from the pool.

        Args:
            config: Render configuration.

        Returns:
            Browser context (must be closed when done).
        """
        await self._semaphore.acquire()

        try:
            if not self._initialized:
                await self.initialize()

            return await self._browser.new_context(
                viewport={
                    "width": config.viewport_width,
                    "height": config.viewport_height,
                },
                java_script_enabled=True,
            )
        except BaseException:
            self._semaphore.release()
            raise

    def release_context(self) -> None:
        """Release a context back to the pool."""
        self._semaphore.release()

    async def __aenter__(self) -> "BrowserPool":
        """Async context manager entry."""
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()


class HTMLRenderer:
    """
    Renders HTML strings in headless Chromium and snapshots the result.

    Example:
        async with HTMLRenderer() as renderer:
            document = await renderer.render(html, "https://shop.example/")
            records = PageScraper(document).scrape()
    """

    def __init__(
        self,
        config: RenderConfig | None = None,
        browser_pool: BrowserPool | None = None,
        logger: ScraperLogger | None = None,
    ):
        """
        Initialize the renderer.

        Args:
            config: Default render configuration.
            browser_pool: Shared browser pool (creates own if None).
            logger: Logger instance.
        """
        self.config = config or RenderConfig()
        self._external_pool = browser_pool is not None
        self.browser_pool = browser_pool or BrowserPool(
            headless=self.config.headless,
        )
        self.logger = logger or ScraperLogger("html_renderer")

    async def __aenter__(self) -> "HTMLRenderer":
        """Async context manager entry."""
        if not self._external_pool:
            await self.browser_pool.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        if not self._external_pool:
            await self.browser_pool.close()

    async def render(
        self,
        html: str,
        url: str | None = None,
        config: RenderConfig | None = None,
    ) -> Document:
        """
        Lay out HTML and capture it as a Document.

        Args:
            html: Markup to render.
            url: Location recorded on the Document for resolving relative links.
            config: Optional config override for this render.

        Returns:
            Document with rendered geometry.
        """
        cfg = config or self.config
        location = url or "about:blank"
        start_time = asyncio.get_event_loop().time()

        context = None
        page = None

        try:
            context = await self.browser_pool.acquire_context(cfg)
            page = await context.new_page()

            # Markup is rendered offline; subresources are never fetched
            await page.route("**/*", lambda route: route.abort())

            await page.set_content(
                html,
                wait_until=cfg.wait_until.value,
                timeout=cfg.timeout * 1000,  # Convert to ms
            )

            if cfg.wait_for_selector:
                await page.wait_for_selector(
                    cfg.wait_for_selector,
                    timeout=cfg.timeout * 1000,
                )

            if cfg.wait_for_timeout:
                await asyncio.sleep(cfg.wait_for_timeout)

            document = await snapshot_page(page, location=location, logger=self.logger)

        except PlaywrightError as e:
            self.logger.warning("Render failed", url=location, error=str(e))
            raise SnapshotError(location, str(e)) from e

        finally:
            if page:
                await page.close()
            if context:
                await context.close()
                self.browser_pool.release_context()

        self.logger.debug(
            "Render complete",
            url=location,
            render_time_ms=(asyncio.get_event_loop().time() - start_time) * 1000,
        )
        return document
