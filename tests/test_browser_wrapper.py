"""Tests for the Browser wrapper, using a stand-in Playwright page."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeout

from e2e_tests.browser import Browser, ToolError
from e2e_tests.config import settings
from e2e_tests.playwright_client import PlaywrightClient

pytestmark = pytest.mark.asyncio

BASE_URL = "http://127.0.0.1:5180"


def _page(status=200):
    page = MagicMock()
    page.url = f"{BASE_URL}/dev/app1"
    page.goto = AsyncMock(return_value=MagicMock(status=status))
    page.title = AsyncMock(return_value="App 1")
    page.click = AsyncMock()
    page.text_content = AsyncMock(return_value="dev")
    page.get_attribute = AsyncMock(return_value="/dev/app2")
    page.wait_for_load_state = AsyncMock()
    page.screenshot = AsyncMock()
    return page


async def test_goto_resolves_paths_against_base_url():
    page = _page()
    browser = Browser(page, base_url=BASE_URL)

    result = await browser.goto("/dev/app1", wait_until="load")

    page.goto.assert_awaited_once_with(f"{BASE_URL}/dev/app1", wait_until="load", timeout=None)
    assert result == {"url": f"{BASE_URL}/dev/app1", "title": "App 1", "status": 200}
    assert browser.current_title == "App 1"


async def test_goto_keeps_absolute_urls():
    page = _page()
    browser = Browser(page, base_url=BASE_URL)

    await browser.goto("https://other.example.com/dev/app1", wait_until="load")

    assert page.goto.await_args.args[0] == "https://other.example.com/dev/app1"


async def test_goto_falls_back_when_networkidle_times_out():
    page = _page()
    page.goto.side_effect = [PlaywrightTimeout("networkidle"), MagicMock(status=200)]
    browser = Browser(page, base_url=BASE_URL)

    result = await browser.goto("/dev/app1")

    assert result["status"] == 200
    assert page.goto.await_args_list[1].kwargs["wait_until"] == "domcontentloaded"


async def test_goto_timeout_raises_tool_error():
    page = _page()
    page.goto.side_effect = PlaywrightTimeout("load")
    browser = Browser(page, base_url=BASE_URL)

    with pytest.raises(ToolError) as excinfo:
        await browser.goto("/dev/app1", wait_until="load")

    assert excinfo.value.name == "goto"
    assert excinfo.value.payload["url"] == f"{BASE_URL}/dev/app1"


async def test_click_failure_raises_tool_error():
    page = _page()
    page.click.side_effect = RuntimeError("element detached")
    browser = Browser(page, base_url=BASE_URL)

    with pytest.raises(ToolError, match="element detached"):
        await browser.click('nav a[data-app="app2"]')


async def test_get_attribute_missing_returns_empty_string():
    page = _page()
    page.get_attribute.return_value = None
    browser = Browser(page, base_url=BASE_URL)

    assert await browser.get_attribute('nav a[data-app="app2"]', "href") == ""


async def test_reads_use_context_default_timeout():
    page = _page()
    browser = Browser(page, base_url=BASE_URL)

    assert await browser.text("#env") == "dev"
    await browser.get_attribute('nav a[data-app="app2"]', "href")

    page.text_content.assert_awaited_once_with("#env")
    page.get_attribute.assert_awaited_once_with('nav a[data-app="app2"]', "href")


async def test_wait_for_load_state_timeout_raises_tool_error():
    page = _page()
    page.wait_for_load_state.side_effect = PlaywrightTimeout("networkidle")
    browser = Browser(page, base_url=BASE_URL)

    with pytest.raises(ToolError) as excinfo:
        await browser.wait_for_load_state("networkidle", timeout=100)

    assert excinfo.value.payload == {"state": "networkidle", "timeout": 100}


async def test_screenshot_writes_into_directory(tmp_path):
    page = _page()
    browser = Browser(page, base_url=BASE_URL)

    path = await browser.screenshot("failure", directory=str(tmp_path / "shots"))

    assert path == str(tmp_path / "shots" / "failure.png")
    page.screenshot.assert_awaited_once_with(path=path, type="png", full_page=True)


async def test_playwright_client_defaults_come_from_settings(monkeypatch):
    monkeypatch.setattr(settings, "browser_type", "firefox")
    monkeypatch.setattr(settings, "playwright_headless", False)
    monkeypatch.setattr(settings, "timeout_ms", 1234)

    client = PlaywrightClient()

    assert (client.browser_type, client.headless, client.timeout) == ("firefox", False, 1234)
    assert PlaywrightClient(browser_type="webkit", headless=True, timeout=5).timeout == 5
    with pytest.raises(RuntimeError, match="not connected"):
        client.page
