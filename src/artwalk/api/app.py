# src/artwalk/api/app.py
"""
FastAPI application wiring.

This file creates the `FastAPI` instance and installs CORS so a separately hosted
frontend can read the catalog. Handlers live in `artwalk.api.routes`.

Run with: `uvicorn artwalk.api.app:app` (or `artwalk serve`).
"""

from __future__ import annotations

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from artwalk.config.settings import get_settings
from artwalk.core.logging import configure_logging

from .routes import router

configure_logging()

_settings = get_settings()

app = FastAPI(title=_settings.api.title, version="0.1.0")

# CORS (dev-friendly): explicit origins from settings/`ARTWALK_CORS_ORIGINS`, otherwise any
# localhost port unless `api.cors_allow_local` is off.
cors_origins = list(_settings.api.cors_origins)
cors_origin_regex = (
    r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$" if _settings.api.cors_allow_local and not cors_origins else ""
)
if cors_origins or cors_origin_regex:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_origin_regex=cors_origin_regex or None,
        allow_credentials=False,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

app.include_router(router)
