"""Waits for the client-side bootstrap of a deployed app.

Each app page ships ``#ref`` with the placeholder token ``__APP_REF__``. The
bootstrap script replaces it with the app's build ref, which is the
load-complete signal the scenarios wait for.
"""
from __future__ import annotations

import logging

from playwright.async_api import Page, TimeoutError as PlaywrightTimeoutError

from ecosystem_e2e.routing import APP_REF_PLACEHOLDER

logger = logging.getLogger(__name__)

DEFAULT_READY_TIMEOUT_MS = 10_000

_REF_READY_JS = """
(placeholder) => {
    const refEl = document.getElementById('ref');
    return !!refEl && !!refEl.textContent && !refEl.textContent.includes(placeholder);
}
"""


class AppLoadTimeoutError(TimeoutError):
    """Raised when an app never signals that its bootstrap completed."""

    def __init__(self, url: str, timeout: int) -> None:
        self.url = url
        self.timeout = timeout
        super().__init__(f"App at {url} did not finish loading within {timeout}ms")


async def wait_for_app_ref(page: Page, timeout: int = DEFAULT_READY_TIMEOUT_MS) -> None:
    """Block until ``#ref`` holds a real value instead of the placeholder."""
    try:
        await page.wait_for_function(_REF_READY_JS, arg=APP_REF_PLACEHOLDER, timeout=timeout)
    except PlaywrightTimeoutError as exc:
        raise AppLoadTimeoutError(page.url, timeout) from exc


async def wait_for_app_load(page: Page, timeout: int = DEFAULT_READY_TIMEOUT_MS) -> None:
    """Block until the current page's app finished its client-side bootstrap."""
    try:
        await page.wait_for_load_state("domcontentloaded", timeout=timeout)
    except PlaywrightTimeoutError as exc:
        raise AppLoadTimeoutError(page.url, timeout) from exc
    await wait_for_app_ref(page, timeout=timeout)
    logger.debug("App loaded at %s", page.url)
