"""Mock multi-app deployment for running the navigation suite locally.

Imitates the observable contract of a deployed environment:
- ``GET /<env>/<app>``: app page with heading, nav links and indicator
  elements that a small bootstrap script fills in
- ``GET /<env>/ecosystem.json``: ecosystem manifest of the environment
- ``GET /health``: liveness probe

The nav links are rendered with static ``/<app>`` hrefs and rewritten to
``/<env>/<app>`` by the bootstrap script, like the real deployment does.
"""
from __future__ import annotations

import hashlib
import logging
import threading
from datetime import datetime, timezone
from typing import Dict, Iterable, Optional

import httpx
from flask import Flask, abort, jsonify, render_template_string
from werkzeug.serving import make_server

from ecosystem_e2e.manifest import MANIFEST_FILENAME, EcosystemManifest, ManifestApp
from ecosystem_e2e.routing import APP_REF_PLACEHOLDER, EMPTY_PLACEHOLDER, app_label, app_path

logger = logging.getLogger(__name__)

DEFAULT_ENVIRONMENTS = ("dev", "staging")
DEFAULT_APPS = ("app1", "app2", "app3")

APP_PAGE_TEMPLATE = """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>{{ label }}</title>
</head>
<body data-ref="{{ ref }}">
  <nav>
    {% for other in apps %}
    <a data-app="{{ other }}" href="/{{ other }}">{{ labels[other] }}</a>
    {% endfor %}
  </nav>
  <main>
    <h1>{{ label }}</h1>
    <dl>
      <dt>Environment</dt><dd id="env">{{ empty }}</dd>
      <dt>Ref</dt><dd id="ref">{{ placeholder }}</dd>
      <dt>Host</dt><dd id="host">{{ empty }}</dd>
      <dt>Route</dt><dd id="route">{{ empty }}</dd>
    </dl>
  </main>
  <script>
    (function () {
      var env = window.location.pathname.split('/')[1];
      document.querySelectorAll('nav a[data-app]').forEach(function (link) {
        link.setAttribute('href', '/' + env + '/' + link.dataset.app);
      });
      document.getElementById('env').textContent = env;
      document.getElementById('host').textContent = window.location.host;
      document.getElementById('route').textContent = window.location.pathname;
      document.getElementById('ref').textContent = document.body.dataset.ref;
    })();
  </script>
</body>
</html>
"""


def app_ref(env: str, app: str) -> str:
    """Stable build ref of ``app`` in ``env``."""
    digest = hashlib.sha1(f"{env}/{app}".encode("utf-8")).hexdigest()[:8]
    return f"{env}-{app}-{digest}"


def build_manifest(env: str, apps: Iterable[str]) -> EcosystemManifest:
    return EcosystemManifest(
        environment=env,
        apps={
            app: ManifestApp(name=app_label(app), path=app_path(env, app), ref=app_ref(env, app))
            for app in apps
        },
        generated_at=datetime.now(timezone.utc).isoformat(),
    )


def create_mock_deployment_app(
    environments: Iterable[str] = DEFAULT_ENVIRONMENTS,
    apps: Iterable[str] = DEFAULT_APPS,
) -> Flask:
    """Create the mock deployment Flask app."""
    app = Flask(__name__)
    app.config['TESTING'] = True

    known_envs = tuple(environments)
    known_apps = tuple(apps)
    labels: Dict[str, str] = {name: app_label(name) for name in known_apps}

    def _require(env: str, name: Optional[str] = None) -> None:
        if env not in known_envs:
            abort(404)
        if name is not None and name not in known_apps:
            abort(404)

    @app.route('/health')
    def health():
        return "ok"

    @app.route(f'/<env>/{MANIFEST_FILENAME}')
    def ecosystem_manifest(env: str):
        _require(env)
        return jsonify(build_manifest(env, known_apps).to_dict())

    @app.route('/<env>/<name>')
    @app.route('/<env>/<name>/')
    def app_page(env: str, name: str):
        _require(env, name)
        return render_template_string(
            APP_PAGE_TEMPLATE,
            label=labels[name],
            ref=app_ref(env, name),
            apps=known_apps,
            labels=labels,
            empty=EMPTY_PLACEHOLDER,
            placeholder=APP_REF_PLACEHOLDER,
        )

    return app


class MockDeploymentServer:
    """Runs the mock deployment on a werkzeug server in a background thread."""

    def __init__(
        self,
        host: str = '127.0.0.1',
        port: int = 5180,
        environments: Iterable[str] = DEFAULT_ENVIRONMENTS,
        apps: Iterable[str] = DEFAULT_APPS,
    ):
        self.host = host
        self.port = port
        self.app = create_mock_deployment_app(environments, apps)
        self.server = None
        self.thread = None

    def start(self, ready_timeout: float = 5.0):
        """Start serving and wait until /health answers."""
        self.server = make_server(self.host, self.port, self.app, threaded=True)
        # Port 0 binds a free port
        self.port = self.server.server_port
        self.thread = threading.Thread(target=self.server.serve_forever, daemon=True)
        self.thread.start()

        try:
            httpx.get(f"{self.base_url}/health", timeout=ready_timeout).raise_for_status()
        except httpx.HTTPError as exc:
            self.stop()
            raise RuntimeError(f"Mock deployment did not come up at {self.base_url}") from exc
        logger.info("Mock deployment listening on %s", self.base_url)

    def stop(self):
        """Stop the server thread."""
        if self.server:
            self.server.shutdown()
            self.server.server_close()
            self.server = None
        if self.thread:
            self.thread.join(timeout=5)
            self.thread = None

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"
