import logging
import re

import pytest
import pytest_asyncio

from e2e_tests.browser import Browser, ToolError
from e2e_tests.config import E2eTargetProfile, settings
from e2e_tests.mock_deployment import MockDeploymentServer
from e2e_tests.playwright_client import PlaywrightClient

logger = logging.getLogger(__name__)


@pytest.hookimpl(hookwrapper=True, tryfirst=True)
def pytest_runtest_makereport(item, call):
    """Expose each phase's report on the item so fixtures can see failures."""
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)


@pytest.fixture(autouse=True)
def refresh_settings_before_test():
    """Re-read the environment before each test.

    ``E2E_ENV`` is read once per test, so a run can switch slices between
    tests without restarting the session.
    """
    settings.refresh()
    yield


@pytest.fixture(scope="session")
def mock_deployment():
    """Local mock deployment, started only when E2E_MOCK_DEPLOYMENT is on
    and no E2E_BASE_URL points at a real one."""
    if settings.base_url or not settings.use_mock_deployment:
        yield None
        return

    server = MockDeploymentServer(port=settings.mock_port, environments=settings.environments())
    server.start()
    yield server
    server.stop()


@pytest.fixture()
def base_url(mock_deployment):
    """Base URL of the deployment under test, or None when none is configured."""
    if settings.base_url:
        return settings.base_url
    if mock_deployment is not None:
        return mock_deployment.base_url
    return None


def _profile_id(profile: E2eTargetProfile) -> str:
    return profile.environment


@pytest.fixture(params=settings.profiles(), ids=_profile_id)
def active_profile(request):
    """Activate each configured deployment slice for the test run."""
    profile: E2eTargetProfile = request.param
    with settings.use_profile(profile):
        yield profile


@pytest_asyncio.fixture()
async def playwright_client():
    """Create a Playwright client instance."""
    async with PlaywrightClient() as client:
        yield client


@pytest_asyncio.fixture()
async def browser(request, playwright_client, base_url):
    """Create a Browser instance bound to the deployment's base URL.

    Saves a screenshot of failing tests when SCREENSHOT_DIR is set.
    """
    if not base_url:
        pytest.fail("No base URL configured: set E2E_BASE_URL or E2E_MOCK_DEPLOYMENT=1", pytrace=False)

    browser = Browser(playwright_client.page, base_url=base_url)
    await browser.reset()
    yield browser

    report = getattr(request.node, "rep_call", None)
    if report is not None and report.failed and settings.screenshot_dir:
        name = re.sub(r"[^A-Za-z0-9_.-]+", "-", request.node.name)
        try:
            path = await browser.screenshot(name)
            logger.info("Saved failure screenshot to %s", path)
        except ToolError as exc:
            logger.warning("Could not capture failure screenshot: %s", exc)
