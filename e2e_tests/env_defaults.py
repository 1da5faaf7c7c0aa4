"""Fallback settings for the e2e suite.

Lookup order for every key:
1. the process environment (handled by ``e2e_tests.config``)
2. ``.env.e2e`` in the repository root, a local uncommitted override layer
3. ``.env.defaults`` in the repository root, the version-controlled catalog
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Dict

REPO_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_FILES = (".env.defaults", ".env.e2e")


def parse_env_file(path: Path) -> Dict[str, str]:
    """Parse ``KEY=value`` lines, ignoring comments and blank lines."""
    values: Dict[str, str] = {}
    for raw in path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        value = value.strip()
        if len(value) >= 2 and value[0] in ('"', "'") and value[-1] == value[0]:
            value = value[1:-1]
        values[key.strip()] = value
    return values


@lru_cache(maxsize=1)
def _load_env_defaults() -> Dict[str, str]:
    defaults: Dict[str, str] = {}
    # Later files override earlier ones
    for name in DEFAULT_FILES:
        path = REPO_ROOT / name
        if path.exists():
            defaults.update(parse_env_file(path))
    return defaults


def get_env_default(key: str) -> str | None:
    return _load_env_defaults().get(key)
