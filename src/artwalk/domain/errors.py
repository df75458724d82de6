"""
Session and catalog errors.

All of them derive from `ValueError`: the API maps `ValueError` to a 4xx response and the
CLI reports it without a traceback.
"""

from __future__ import annotations


class InvalidTour(ValueError):
    """Unknown tour id, or a tour operation that does not fit the session state."""

    def __init__(self, message: str, *, tour_id: str | None = None):
        super().__init__(message)
        self.tour_id = tour_id


class MalformedPosition(ValueError):
    """A non-finite or out-of-range latitude/longitude."""

    def __init__(self, message: str, *, lat: object = None, lon: object = None):
        super().__init__(message)
        self.lat = lat
        self.lon = lon


class UnknownArtwork(ValueError):
    """An artwork id that does not belong to the active tour."""

    def __init__(self, message: str, *, artwork_id: str | None = None):
        super().__init__(message)
        self.artwork_id = artwork_id
