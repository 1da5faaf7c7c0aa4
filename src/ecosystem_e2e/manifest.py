"""Ecosystem manifest retrieval and validation.

Each environment publishes ``/{env}/ecosystem.json``::

    {
      "environment": "dev",
      "generatedAt": "2026-10-01T12:00:00+00:00",
      "apps": {
        "app1": {"name": "App 1", "path": "/dev/app1", "ref": "dev-app1-4f2a"}
      }
    }
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

import httpx

from ecosystem_e2e.routing import app_path

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "ecosystem.json"
DEFAULT_FETCH_TIMEOUT = 10.0


class ManifestError(Exception):
    """Raised when a manifest cannot be fetched or parsed."""


@dataclass
class ManifestApp:
    """One deployed app as listed in the manifest."""
    name: str
    path: str
    ref: str = ""

    @classmethod
    def from_dict(cls, app_id: str, data: Any) -> "ManifestApp":
        if not isinstance(data, Mapping):
            raise ManifestError(f"Manifest entry for {app_id!r} is not an object")
        return cls(
            name=str(data.get("name") or ""),
            path=str(data.get("path") or ""),
            ref=str(data.get("ref") or ""),
        )


@dataclass
class EcosystemManifest:
    """All apps deployed in one environment, keyed by app identifier."""
    environment: str
    apps: Dict[str, ManifestApp] = field(default_factory=dict)
    generated_at: str = ""

    @classmethod
    def from_dict(cls, data: Any, env: Optional[str] = None) -> "EcosystemManifest":
        """Parse a decoded JSON document.

        ``env`` fills in the environment when the document does not name one.
        """
        if not isinstance(data, Mapping):
            raise ManifestError("Manifest document is not an object")
        raw_apps = data.get("apps", {})
        if not isinstance(raw_apps, Mapping):
            raise ManifestError("Manifest 'apps' is not a mapping")
        apps = {
            str(app_id): ManifestApp.from_dict(str(app_id), entry)
            for app_id, entry in raw_apps.items()
        }
        return cls(
            environment=str(data.get("environment") or env or ""),
            apps=apps,
            generated_at=str(data.get("generatedAt") or ""),
        )

    def to_dict(self) -> dict:
        return {
            "environment": self.environment,
            "generatedAt": self.generated_at,
            "apps": {
                app_id: {"name": app.name, "path": app.path, "ref": app.ref}
                for app_id, app in self.apps.items()
            },
        }


def manifest_url(base_url: str, env: str) -> str:
    """Absolute URL of an environment's manifest."""
    return f"{base_url.rstrip('/')}/{env}/{MANIFEST_FILENAME}"


async def fetch_ecosystem_manifest(
    base_url: str,
    env: str,
    *,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = DEFAULT_FETCH_TIMEOUT,
) -> EcosystemManifest:
    """Download and parse the manifest of ``env`` from ``base_url``.

    Raises:
        ManifestError: on transport errors, non-2xx responses or a body that
            is not a manifest document.
    """
    url = manifest_url(base_url, env)
    logger.debug("Fetching ecosystem manifest from %s", url)

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as owned:
                response = await owned.get(url)
        else:
            response = await client.get(url)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise ManifestError(
            f"Manifest request to {url} failed with HTTP {exc.response.status_code}"
        ) from exc
    except (httpx.HTTPError, httpx.InvalidURL, httpx.CookieConflict) as exc:
        # InvalidURL and CookieConflict are not HTTPError subclasses
        raise ManifestError(f"Manifest request to {url} failed: {exc}") from exc

    try:
        data = response.json()
    except ValueError as exc:
        raise ManifestError(f"Manifest at {url} is not valid JSON") from exc

    manifest = EcosystemManifest.from_dict(data, env=env)
    logger.info("Loaded ecosystem manifest for %s with %d apps", env, len(manifest.apps))
    return manifest


def assert_manifest_valid(manifest: Union[EcosystemManifest, Mapping[str, Any]]) -> None:
    """Fail with an ``AssertionError`` listing every problem of ``manifest``."""
    if not isinstance(manifest, EcosystemManifest):
        try:
            manifest = EcosystemManifest.from_dict(manifest)
        except ManifestError as exc:
            raise AssertionError(f"Invalid ecosystem manifest: {exc}") from exc

    problems: List[str] = []
    if not manifest.environment.strip():
        problems.append("environment is empty")
    if not manifest.apps:
        problems.append("no apps listed")

    for app_id, app in manifest.apps.items():
        if not app.name.strip():
            problems.append(f"{app_id}: name is empty")
        if manifest.environment.strip():
            try:
                expected = app_path(manifest.environment, app_id)
            except ValueError as exc:
                problems.append(f"{app_id}: {exc}")
                continue
            if app.path != expected:
                problems.append(f"{app_id}: path {app.path!r} != {expected!r}")

    if problems:
        raise AssertionError("Invalid ecosystem manifest: " + "; ".join(problems))
