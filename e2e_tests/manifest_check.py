"""Soft manifest check used by the manifest scenario.

Not every environment publishes a manifest, so by default a failure to fetch
or validate it is logged and the check passes. ``strict`` re-raises.
"""
from __future__ import annotations

import logging
from typing import Optional

import pytest

from ecosystem_e2e import (
    EcosystemManifest,
    ManifestError,
    assert_manifest_valid,
    fetch_ecosystem_manifest,
)

logger = logging.getLogger(__name__)


async def check_ecosystem_manifest(
    base_url: Optional[str],
    env: str,
    app_name: str,
    *,
    strict: bool = False,
) -> Optional[EcosystemManifest]:
    """Fetch and validate the manifest of ``env`` and require ``app_name`` in it.

    Skips the calling test when ``base_url`` is empty. Returns the manifest,
    or None when it was unavailable and ``strict`` is off.
    """
    if not base_url:
        pytest.skip("No base URL configured")

    try:
        manifest = await fetch_ecosystem_manifest(base_url, env)
        assert_manifest_valid(manifest)

        assert app_name in manifest.apps, f"{app_name} missing from manifest apps {sorted(manifest.apps)}"
    except (ManifestError, AssertionError) as exc:
        if strict:
            raise
        logger.warning("Manifest not available: %s", exc)
        return None
    return manifest
