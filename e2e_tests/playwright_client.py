"""In-process Playwright for the navigation scenarios.

Each client owns one browser and one context, so every scenario gets an
isolated cookie and storage state. Browser type, headless mode and the
default timeout come from ``settings`` unless given explicitly.

Usage:
    async with PlaywrightClient() as client:
        await client.page.goto("http://localhost:5180/dev/app1")
"""
from __future__ import annotations

import logging
from typing import Optional

from playwright.async_api import async_playwright, Browser, BrowserContext, Page, Playwright

from e2e_tests.config import settings

logger = logging.getLogger(__name__)


class PlaywrightClient:
    """Launches a browser and opens a single page in a fresh context."""

    def __init__(
        self,
        browser_type: Optional[str] = None,
        headless: Optional[bool] = None,
        timeout: Optional[int] = None,
    ):
        self.browser_type = browser_type or settings.browser_type
        self.headless = settings.playwright_headless if headless is None else headless
        self.timeout = settings.timeout_ms if timeout is None else timeout

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    async def __aenter__(self) -> "PlaywrightClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def connect(self) -> None:
        """Launch the browser and open the context and page."""
        self._playwright = await async_playwright().start()
        launcher = getattr(self._playwright, self.browser_type)
        self._browser = await launcher.launch(headless=self.headless)
        logger.debug("Launched %s (headless=%s)", self.browser_type, self.headless)

        self._context = await self._browser.new_context()
        # Applies to navigation, waits and locator reads that pass no timeout
        self._context.set_default_timeout(self.timeout)
        self._page = await self._context.new_page()

    async def close(self) -> None:
        """Close page, context, browser and Playwright, innermost first."""
        if self._page:
            await self._page.close()
            self._page = None
        if self._context:
            await self._context.close()
            self._context = None
        if self._browser:
            await self._browser.close()
            self._browser = None
        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

    @property
    def page(self) -> Page:
        if not self._page:
            raise RuntimeError("Client not connected")
        return self._page
