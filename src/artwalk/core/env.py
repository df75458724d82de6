"""
Environment helpers: `.env` loading and resolution of relative catalog paths.

A relative `catalog.path` is resolved against `ARTWALK_PROJECT_ROOT` when set, otherwise
against the current working directory.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import find_dotenv, load_dotenv


def get_project_root() -> Path:
    override = os.getenv("ARTWALK_PROJECT_ROOT")
    if override:
        return Path(override).expanduser().resolve()
    return Path.cwd().resolve()


@lru_cache
def load_dotenv_if_present() -> Path | None:
    """Load `.env` once if one is found; existing env vars are never overridden."""
    explicit = os.getenv("ARTWALK_ENV_FILE")
    env_path = Path(explicit).expanduser() if explicit else Path(find_dotenv(usecwd=True) or ".env")
    if not env_path.is_file():
        return None
    load_dotenv(dotenv_path=env_path, override=False)
    return env_path.resolve()


def resolve_project_path(path: str | Path) -> Path:
    """Resolve a possibly-relative path against the project root."""
    p = Path(path).expanduser()
    if p.is_absolute():
        return p
    return (get_project_root() / p).resolve()
