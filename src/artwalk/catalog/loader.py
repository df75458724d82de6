"""
Tour catalog loader.

The catalog is a JSON file holding a list of tours, each with its ordered artworks. By
default the copy shipped in this package (`artwalk/catalog/tours.json`) is used; settings
can point at a local file instead. We validate it into typed Pydantic models so the
session can assume a consistent shape (finite coordinates, unique ids).
"""

from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any, Iterable, Iterator

from pydantic import TypeAdapter

from artwalk.config.settings import Settings
from artwalk.core.env import resolve_project_path
from artwalk.domain.errors import InvalidTour
from artwalk.domain.models import Tour

logger = logging.getLogger(__name__)

_TOURS_ADAPTER = TypeAdapter(list[Tour])


def parse_tours(payload: Any) -> list[Tour]:
    """Validate a decoded JSON payload into tours; tour ids must be unique."""
    tours = _TOURS_ADAPTER.validate_python(payload)
    seen: set[str] = set()
    for tour in tours:
        if tour.id in seen:
            raise ValueError(f"duplicate tour id '{tour.id}' in catalog")
        seen.add(tour.id)
    return tours


def load_tours(path: str | Path) -> list[Tour]:
    """Load and validate a tour catalog JSON file."""
    resolved = resolve_project_path(path)
    payload = json.loads(resolved.read_text(encoding="utf-8"))
    tours = parse_tours(payload)
    logger.debug("Loaded %d tours from %s", len(tours), resolved)
    return tours


def load_packaged_tours() -> list[Tour]:
    """Load the default catalog shipped inside `artwalk.catalog`."""
    text = resources.files("artwalk.catalog").joinpath("tours.json").read_text(encoding="utf-8")
    return parse_tours(json.loads(text))


class TourCatalog:
    """Read-only, ordered collection of tours keyed by id."""

    def __init__(self, tours: Iterable[Tour]):
        self._tours = list(tours)
        self._by_id = {t.id: t for t in self._tours}
        if len(self._by_id) != len(self._tours):
            raise ValueError("tour ids must be unique within a catalog")

    @classmethod
    def from_file(cls, path: str | Path) -> "TourCatalog":
        return cls(load_tours(path))

    @classmethod
    def from_settings(cls, settings: Settings) -> "TourCatalog":
        """Build the configured catalog: remote URL, else local file, else the packaged copy."""
        if settings.catalog.base_url:
            from artwalk.catalog.remote import HttpTourSource

            return HttpTourSource(
                settings.catalog.base_url, timeout_seconds=settings.app.http_timeout_seconds
            ).fetch_catalog()
        if settings.catalog.path:
            return cls.from_file(settings.catalog.path)
        return cls(load_packaged_tours())

    def list_tours(self) -> list[Tour]:
        return list(self._tours)

    def get_tour(self, tour_id: str) -> Tour:
        """Return the tour with `tour_id` or raise `InvalidTour`."""
        tour = self._by_id.get(tour_id)
        if tour is None:
            raise InvalidTour(f"Unknown tour '{tour_id}'.", tour_id=tour_id)
        return tour

    def __contains__(self, tour_id: object) -> bool:
        return tour_id in self._by_id

    def __iter__(self) -> Iterator[Tour]:
        return iter(self._tours)

    def __len__(self) -> int:
        return len(self._tours)
