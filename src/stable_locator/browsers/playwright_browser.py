"""
Playwright Browser - Launch a browser and open pages for the command line.

The engine itself never launches anything; it is handed a page by whoever
drives the browser. This launcher exists for the CLI and for scripts that
want a page without wiring Playwright themselves.
"""

from typing import Any, Optional
import logging

from stable_locator.config.settings import BrowserSettings
from stable_locator.exceptions.browser import BrowserError, BrowserLaunchError

logger = logging.getLogger(__name__)


class PlaywrightBrowser:
    """
    Minimal Playwright lifecycle wrapper.

    Example:
        >>> browser = PlaywrightBrowser(BrowserSettings(headless=True))
        >>> await browser.launch()
        >>> page = await browser.new_page("https://example.com")
        >>> await browser.close()
    """

    def __init__(self, settings: Optional[BrowserSettings] = None):
        """Initialize the browser (not launched yet)."""
        self.settings = settings or BrowserSettings()
        self._playwright: Any = None
        self._browser: Any = None
        self._context: Any = None

    @property
    def is_connected(self) -> bool:
        """Check if browser is connected."""
        return self._browser is not None and self._browser.is_connected()

    async def launch(self) -> None:
        """
        Launch the configured browser.

        Raises:
            BrowserLaunchError: If Playwright cannot start the browser
        """
        try:
            from playwright.async_api import async_playwright

            self._playwright = await async_playwright().start()

            launcher = getattr(self._playwright, self.settings.browser_type)
            options = {"headless": self.settings.headless}
            if self.settings.channel:
                options["channel"] = self.settings.channel
            self._browser = await launcher.launch(**options)

            self._context = await self._browser.new_context(
                viewport={
                    "width": self.settings.viewport_width,
                    "height": self.settings.viewport_height,
                },
            )
            logger.info(f"Launched {self.settings.browser_type} browser (headless={self.settings.headless})")

        except Exception as e:
            await self.close()
            raise BrowserLaunchError(f"Failed to launch browser: {e}") from e

    async def new_page(self, url: Optional[str] = None) -> Any:
        """
        Open a page, optionally navigating to a URL.

        Returns:
            Playwright Page object
        """
        if not self._context:
            raise BrowserError("Browser not launched. Call launch() first.")

        page = await self._context.new_page()
        if url:
            await page.goto(url, timeout=self.settings.timeout_ms)
            logger.debug(f"Navigated to {url}")
        return page

    async def close(self) -> None:
        """Close the browser and cleanup."""
        if self._context:
            await self._context.close()
            self._context = None

        if self._browser:
            await self._browser.close()
            self._browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

        logger.debug("Browser closed")

    async def __aenter__(self) -> "PlaywrightBrowser":
        await self.launch()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()
