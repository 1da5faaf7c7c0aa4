"""Path, label and selector conventions of the multi-app deployment.

Every app is served below an environment slice: ``/{env}/{app}``. The static
nav links in each page point at ``/{app}`` and are rewritten client-side to
the environment-scoped form once the app bootstraps.
"""
from __future__ import annotations

import re
from typing import Optional

DEFAULT_ENV = "dev"

# Text of #ref until the client-side bootstrap replaces it
APP_REF_PLACEHOLDER = "__APP_REF__"

# Text of #env/#host/#route before the bootstrap fills them in
EMPTY_PLACEHOLDER = "-"

HEADING_SELECTOR = "h1"
ENV_SELECTOR = "#env"
REF_SELECTOR = "#ref"
HOST_SELECTOR = "#host"
ROUTE_SELECTOR = "#route"

_APP_NUMBER_RE = re.compile(r"^app(\d+)$")


def _check_segment(kind: str, value: str) -> str:
    if not value or not value.strip():
        raise ValueError(f"{kind} must not be empty")
    if "/" in value:
        raise ValueError(f"{kind} must be a single path segment: {value!r}")
    return value


def app_path(env: str, app: str) -> str:
    """Return the environment-scoped path of an app, e.g. ``/dev/app1``."""
    return f"/{_check_segment('environment', env)}/{_check_segment('app', app)}"


def nav_link_selector(app: str) -> str:
    """CSS selector of the nav link pointing at ``app``."""
    return f'nav a[data-app="{app}"]'


def app_label(app: str) -> str:
    """Display label rendered in an app's heading (``app1`` -> ``App 1``)."""
    match = _APP_NUMBER_RE.match(app)
    if match:
        return f"App {match.group(1)}"
    return app.replace("-", " ").replace("_", " ").title()


def is_placeholder_text(text: Optional[str]) -> bool:
    """True when an indicator element still shows no real value."""
    if text is None:
        return True
    stripped = text.strip()
    return stripped == "" or stripped == EMPTY_PLACEHOLDER
