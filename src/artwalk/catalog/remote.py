"""
Remote tour source.

Reads the catalog from another ArtWalk server's `GET /api/tours` endpoint, so a
session (e.g. the CLI `walk` command) can run against a deployed catalog.
"""

from __future__ import annotations

import logging

from artwalk.catalog.loader import TourCatalog, parse_tours
from artwalk.core.http import get_json
from artwalk.domain.models import Tour

logger = logging.getLogger(__name__)


class HttpTourSource:
    """Fetches and validates tours from a remote ArtWalk API."""

    def __init__(self, base_url: str, *, timeout_seconds: float = 15):
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds

    @property
    def tours_url(self) -> str:
        return f"{self._base_url}/api/tours"

    def list_tours(self) -> list[Tour]:
        """Return the remote catalog's tours.

        Raises:
            httpx.HTTPError: On transport errors or non-2xx status codes.
            ValueError: If the payload is not a valid tour list.
        """
        logger.info("Fetching tours from %s", self.tours_url)
        payload = get_json(self.tours_url, timeout_seconds=self._timeout_seconds)
        return parse_tours(payload)

    def fetch_catalog(self) -> TourCatalog:
        return TourCatalog(self.list_tours())
