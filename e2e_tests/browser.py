"""Thin wrapper around direct Playwright for ergonomic assertions."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from playwright.async_api import Page, TimeoutError as PlaywrightTimeout

from e2e_tests.config import settings

logger = logging.getLogger(__name__)


@dataclass
class ToolError(Exception):
    """Raised when a browser operation fails."""

    name: str
    payload: Dict[str, Any]
    message: str

    def __str__(self) -> str:  # pragma: no cover - human readable helper
        return f"{self.name} failed ({self.message}) with payload={self.payload}"


class Browser:
    """Convenience wrapper over direct Playwright with ergonomic API.

    Paths starting with ``/`` are resolved against ``base_url``.
    """

    def __init__(self, page: Page, base_url: Optional[str] = None) -> None:
        self._page = page
        self.base_url = base_url
        self.current_url: str | None = None
        self.current_title: str | None = None

    @property
    def page(self) -> Page:
        return self._page

    def url(self, path: str) -> str:
        if path.startswith("/"):
            return settings.url(path, base_url=self.base_url)
        return path

    async def _update_state(self) -> None:
        """Update internal state from page."""
        self.current_url = self._page.url
        self.current_title = await self._page.title()

    async def reset(self) -> Dict[str, Any]:
        """Navigate to about:blank (reset state)."""
        await self._page.goto("about:blank")
        await self._update_state()
        return {"url": self.current_url, "title": self.current_title}

    async def goto(self, url: str, wait_until: str = "networkidle", timeout: int | None = None) -> Dict[str, Any]:
        """Navigate to URL and return response with status.

        Args:
            url: Absolute URL, or a path resolved against ``base_url``
            wait_until: Wait strategy - "networkidle", "domcontentloaded", or "load"
            timeout: Timeout in milliseconds (None = context default, E2E_TIMEOUT_MS)

        Note: "networkidle" can time out on pages holding background
              connections; the navigation is then retried with
              "domcontentloaded".
        """
        target = self.url(url)
        try:
            response = await self._page.goto(target, wait_until=wait_until, timeout=timeout)
            await self._update_state()
            return {"url": self.current_url, "title": self.current_title, "status": response.status if response else None}
        except PlaywrightTimeout as exc:
            if wait_until == "networkidle":
                logger.warning("networkidle timed out for %s, retrying with domcontentloaded", target)
                try:
                    response = await self._page.goto(target, wait_until="domcontentloaded", timeout=timeout)
                    await self._update_state()
                    return {"url": self.current_url, "title": self.current_title, "status": response.status if response else None}
                except PlaywrightTimeout:
                    pass  # Fall through to original error
            raise ToolError(name="goto", payload={"url": target, "wait_until": wait_until}, message=str(exc))

    async def click(self, selector: str) -> Dict[str, Any]:
        """Click element."""
        try:
            await self._page.click(selector)
            await self._update_state()
            return {"selector": selector, "url": self.current_url}
        except Exception as exc:
            raise ToolError(name="click", payload={"selector": selector}, message=str(exc))

    async def wait_for_load_state(self, state: str = "networkidle", timeout: int | None = None) -> None:
        """Wait for the page to reach a load state."""
        try:
            await self._page.wait_for_load_state(state, timeout=timeout)
            await self._update_state()
        except PlaywrightTimeout as exc:
            raise ToolError(name="wait_for_load_state", payload={"state": state, "timeout": timeout}, message=str(exc))

    async def text(self, selector: str) -> str:
        """Get text content of element."""
        try:
            text = await self._page.text_content(selector)
            return text or ""
        except Exception as exc:
            raise ToolError(name="text", payload={"selector": selector}, message=str(exc))

    async def get_attribute(self, selector: str, attribute: str) -> str:
        """Get attribute value of element."""
        try:
            value = await self._page.get_attribute(selector, attribute)
            return value or ""
        except Exception as exc:
            raise ToolError(name="get_attribute", payload={"selector": selector, "attribute": attribute}, message=str(exc))

    async def screenshot(self, name: str, directory: str | None = None) -> str:
        """Save a full-page PNG screenshot and return its path.

        ``directory`` defaults to ``SCREENSHOT_DIR``.
        """
        screenshot_dir = directory or settings.screenshot_dir
        if not screenshot_dir:
            raise ToolError(
                name="screenshot",
                payload={"name": name},
                message="SCREENSHOT_DIR environment variable must be set",
            )
        try:
            os.makedirs(screenshot_dir, exist_ok=True)
            path = os.path.join(screenshot_dir, f"{name}.png")
            await self._page.screenshot(path=path, type="png", full_page=True)
            return path
        except Exception as exc:
            raise ToolError(name="screenshot", payload={"name": name}, message=str(exc))
