"""Shared configuration for the navigation e2e suite.

Values come from environment variables, falling back to ``.env.defaults`` in
the repository root:

- ``E2E_ENV``: deployment slice under test (default ``dev``)
- ``E2E_EXTRA_ENVS``: comma separated extra slices, one target profile each
- ``E2E_BASE_URL``: base URL of the deployed environment
- ``E2E_MOCK_DEPLOYMENT``: start the bundled mock deployment when no base URL
"""
from __future__ import annotations

import os
from contextlib import contextmanager
from copy import deepcopy
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional
from urllib.parse import urljoin

from ecosystem_e2e.routing import DEFAULT_ENV, app_path

from e2e_tests.env_defaults import get_env_default

APP_NAME = "app1"
TARGET_APP = "app2"

BROWSER_TYPES = ("chromium", "firefox", "webkit")
_TRUTHY = {"1", "true", "yes", "on"}


class ConfigError(RuntimeError):
    """Raised when the suite configuration is invalid."""


def _read(key: str, fallback: str = "") -> str:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        value = get_env_default(key)
    if value is None or value.strip() == "":
        return fallback
    return value.strip()


def _read_bool(key: str, fallback: bool = False) -> bool:
    raw = _read(key)
    if not raw:
        return fallback
    return raw.lower() in _TRUTHY


def _read_int(key: str, fallback: int) -> int:
    raw = _read(key)
    if not raw:
        return fallback
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{key} must be an integer, got {raw!r}") from exc


@dataclass
class E2eTargetProfile:
    """One deployment slice the scenarios run against."""

    name: str
    environment: str
    base_url: Optional[str] = None
    app_name: str = APP_NAME
    target_app: str = TARGET_APP

    def app_path(self, app: Optional[str] = None) -> str:
        return app_path(self.environment, app or self.app_name)


class E2eTestConfig:
    """Configuration for one test session.

    ``refresh()`` re-reads the environment; the fixtures call it before every
    test so a changed ``E2E_ENV`` is picked up without restarting pytest.
    """

    def __init__(self) -> None:
        self._profiles: Dict[str, E2eTargetProfile] = {}
        self._active: Optional[E2eTargetProfile] = None
        self.refresh()

    def refresh(self) -> None:
        self.playwright_headless: bool = _read_bool("PLAYWRIGHT_HEADLESS", True)

        self.browser_type: str = _read("E2E_BROWSER", "chromium").lower()
        if self.browser_type not in BROWSER_TYPES:
            raise ConfigError(
                f"E2E_BROWSER must be one of {', '.join(BROWSER_TYPES)}, got {self.browser_type!r}"
            )

        self.timeout_ms: int = _read_int("E2E_TIMEOUT_MS", 30_000)
        self.ready_timeout_ms: int = _read_int("E2E_READY_TIMEOUT_MS", 10_000)
        self.manifest_strict: bool = _read_bool("E2E_MANIFEST_STRICT")
        self.use_mock_deployment: bool = _read_bool("E2E_MOCK_DEPLOYMENT")
        self.mock_port: int = _read_int("E2E_MOCK_PORT", 5180)
        self.screenshot_dir: Optional[str] = _read("SCREENSHOT_DIR") or None

        base_url = _read("E2E_BASE_URL") or None
        primary_env = _read("E2E_ENV", DEFAULT_ENV)

        primary = E2eTargetProfile(name="primary", environment=primary_env, base_url=base_url)
        profiles: Dict[str, E2eTargetProfile] = {primary.name: primary}
        for env in _read("E2E_EXTRA_ENVS").split(","):
            env = env.strip()
            if env and env != primary_env and env not in profiles:
                profiles[env] = E2eTargetProfile(name=env, environment=env, base_url=base_url)

        active_name = self._active.name if self._active else primary.name
        self._profiles = profiles
        self._active = profiles.get(active_name, primary)

    # ---- active profile helpers -------------------------------------------------
    @property
    def environment(self) -> str:
        return self._active.environment

    @property
    def base_url(self) -> Optional[str]:
        return self._active.base_url

    @property
    def app_name(self) -> str:
        return self._active.app_name

    @property
    def target_app(self) -> str:
        return self._active.target_app

    def app_path(self, app: Optional[str] = None) -> str:
        """Environment-scoped path of ``app`` (default: the app under test)."""
        return self._active.app_path(app)

    # ---- profile orchestration --------------------------------------------------
    def profiles(self) -> List[E2eTargetProfile]:
        return list(self._profiles.values())

    def environments(self) -> List[str]:
        return [profile.environment for profile in self._profiles.values()]

    @contextmanager
    def use_profile(self, profile: E2eTargetProfile) -> Iterator[E2eTargetProfile]:
        """Temporarily make ``profile`` the active one.

        Works on a copy so a test mutating its profile leaves the configured
        one untouched.
        """
        previous = self._active
        self._active = deepcopy(profile)
        try:
            yield self._active
        finally:
            self._active = previous

    # ---- utility helpers --------------------------------------------------------
    def url(self, path: str, base_url: Optional[str] = None) -> str:
        """Return an absolute URL for ``path`` below ``base_url``."""
        base = base_url or self.base_url
        if not base:
            raise ConfigError("No base URL configured (set E2E_BASE_URL or E2E_MOCK_DEPLOYMENT=1)")
        return urljoin(base.rstrip("/") + "/", path.lstrip("/"))


# Singleton instance - initialized on first import
settings = E2eTestConfig()
