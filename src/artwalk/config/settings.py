# src/artwalk/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/artwalk/config/defaults.yaml`, then optionally overridden by:
- environment variables (e.g., `ARTWALK_LOG_LEVEL`, `ARTWALK_CATALOG_PATH`)
- an external YAML file via `ARTWALK_CONFIG_PATH`

Design rule:
- Tuning knobs (trigger radius, fallback position) live in YAML, not in the session code.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, model_validator

from artwalk.core.env import load_dotenv_if_present


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `artwalk.config`."""
    text = resources.files("artwalk.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "ArtWalk"
    http_timeout_seconds: float = 15
    log_level: str = "INFO"


class CatalogSettings(BaseModel):
    path: str | None = None
    base_url: str | None = None


class FallbackPosition(BaseModel):
    lat: float = Field(37.7749, ge=-90, le=90)
    lon: float = Field(-122.4194, ge=-180, le=180)


class SessionSettings(BaseModel):
    trigger_radius_m: float = Field(30.0, gt=0, allow_inf_nan=False)
    default_position: FallbackPosition = Field(default_factory=FallbackPosition)
    display_min: float = 10.0
    display_max: float = 90.0

    @model_validator(mode="after")
    def _validate_display_range(self) -> "SessionSettings":
        if self.display_max <= self.display_min:
            raise ValueError("session.display_max must be greater than session.display_min")
        return self


class ApiSettings(BaseModel):
    title: str = "ArtWalk API"
    cors_origins: list[str] = Field(default_factory=list)
    cors_allow_local: bool = True


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    session: SessionSettings = Field(default_factory=SessionSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: We intentionally keep this whitelist small.
    """
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("ARTWALK_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    catalog_path = os.getenv("ARTWALK_CATALOG_PATH")
    if catalog_path:
        data.setdefault("catalog", {})["path"] = catalog_path

    catalog_url = os.getenv("ARTWALK_CATALOG_URL")
    if catalog_url:
        data.setdefault("catalog", {})["base_url"] = catalog_url

    cors_origins = os.getenv("ARTWALK_CORS_ORIGINS")
    if cors_origins:
        data.setdefault("api", {})["cors_origins"] = [s.strip() for s in cors_origins.split(",") if s.strip()]

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("ARTWALK_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
