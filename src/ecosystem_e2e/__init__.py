"""Helper library for the ecosystem navigation end-to-end suite.

The scenarios only need three entry points:

- :func:`wait_for_app_load` blocks until an app's client-side bootstrap ran
- :func:`fetch_ecosystem_manifest` downloads the manifest of an environment
- :func:`assert_manifest_valid` checks the manifest's shape
"""
from ecosystem_e2e.app_load import AppLoadTimeoutError, wait_for_app_load, wait_for_app_ref
from ecosystem_e2e.manifest import (
    EcosystemManifest,
    ManifestApp,
    ManifestError,
    assert_manifest_valid,
    fetch_ecosystem_manifest,
    manifest_url,
)
from ecosystem_e2e.routing import app_label, app_path, nav_link_selector

__all__ = [
    "AppLoadTimeoutError",
    "EcosystemManifest",
    "ManifestApp",
    "ManifestError",
    "app_label",
    "app_path",
    "assert_manifest_valid",
    "fetch_ecosystem_manifest",
    "manifest_url",
    "nav_link_selector",
    "wait_for_app_load",
    "wait_for_app_ref",
]
