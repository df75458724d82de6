"""
API routes.

Endpoints:
- GET `/api/tours`: the full tour catalog.
- GET `/api/tours/{tour_id}`: one tour.
- GET `/api/settings`: public session settings for the client (radius, fallback position).
- GET `/healthz`: liveness.
"""

from __future__ import annotations

import logging
from functools import lru_cache

import httpx
from fastapi import APIRouter, HTTPException

from artwalk.catalog.loader import TourCatalog
from artwalk.config.settings import get_settings
from artwalk.domain.errors import InvalidTour
from artwalk.domain.models import Tour

logger = logging.getLogger(__name__)

router = APIRouter()


@lru_cache
def _catalog() -> TourCatalog:
    return TourCatalog.from_settings(get_settings())


def _load_catalog() -> TourCatalog:
    try:
        return _catalog()
    except (OSError, ValueError, httpx.HTTPError) as e:
        logger.error("Could not load tour catalog: %s", e)
        raise HTTPException(
            status_code=500,
            detail={"code": "CATALOG_ERROR", "message": "Could not load tours."},
        ) from e


@router.get("/healthz")
def healthz() -> dict:
    return {"status": "ok"}


@router.get("/api/tours", response_model=list[Tour])
def list_tours() -> list[Tour]:
    """Return every tour with its artworks."""
    return _load_catalog().list_tours()


@router.get("/api/tours/{tour_id}", response_model=Tour)
def get_tour(tour_id: str) -> Tour:
    """Return a single tour by id."""
    catalog = _load_catalog()
    try:
        return catalog.get_tour(tour_id)
    except InvalidTour as e:
        raise HTTPException(
            status_code=404,
            detail={"code": "TOUR_NOT_FOUND", "message": str(e)},
        ) from e


@router.get("/api/settings")
def get_public_settings() -> dict:
    """Return the session knobs the client needs to mirror server behavior."""
    session = get_settings().session
    return {"session": session.model_dump(mode="json")}
