from __future__ import annotations

# The tour session is the proximity state machine:
#
#   no_tour --select_tour--> tour_active <--proximity / clear_trigger--> triggered
#
# It owns the user's position and the currently triggered artwork, and it is the only
# place where trigger decisions are made. Everything it wants rendered goes out as an
# event (see `artwalk.session.events`); it never touches a UI.
#
# All calls are expected on one logical execution context (the one that owns the
# location stream), so there is no locking.

import logging
import math
from typing import Callable, Literal, Sequence

from artwalk.catalog.loader import TourCatalog
from artwalk.config.settings import SessionSettings
from artwalk.core.geo import GeoPoint, haversine_m, screen_position
from artwalk.domain.errors import InvalidTour, MalformedPosition, UnknownArtwork
from artwalk.domain.models import Artwork, Position, Tour
from artwalk.session.events import ArtworkTriggered, SessionEvent, TourSelected, TriggerCleared, TriggerSource

logger = logging.getLogger(__name__)

SessionState = Literal["no_tour", "tour_active", "triggered"]
Listener = Callable[[SessionEvent], None]


def find_closest(point: GeoPoint, artworks: Sequence[Artwork]) -> tuple[Artwork, float] | None:
    """Return the nearest artwork and its distance in meters, or None when there are none.

    Linear scan with a strict `<`, so on equal distances the earlier artwork wins.
    """
    closest: Artwork | None = None
    min_distance = math.inf
    for art in artworks:
        d = haversine_m(point, art.point)
        if d < min_distance:
            min_distance = d
            closest = art
    if closest is None:
        return None
    return closest, min_distance


def _validate_coordinates(lat: object, lon: object) -> tuple[float, float]:
    if isinstance(lat, bool) or isinstance(lon, bool):
        raise MalformedPosition(f"Position must be numeric, got lat={lat!r} lon={lon!r}.", lat=lat, lon=lon)
    try:
        lat_f = float(lat)  # type: ignore[arg-type]
        lon_f = float(lon)  # type: ignore[arg-type]
    except (TypeError, ValueError) as e:
        raise MalformedPosition(f"Position must be numeric, got lat={lat!r} lon={lon!r}.", lat=lat, lon=lon) from e
    if not (math.isfinite(lat_f) and math.isfinite(lon_f)):
        raise MalformedPosition(f"Position must be finite, got lat={lat_f} lon={lon_f}.", lat=lat, lon=lon)
    if not -90 <= lat_f <= 90:
        raise MalformedPosition(f"Latitude {lat_f} is outside [-90, 90].", lat=lat, lon=lon)
    if not -180 <= lon_f <= 180:
        raise MalformedPosition(f"Longitude {lon_f} is outside [-180, 180].", lat=lat, lon=lon)
    return lat_f, lon_f


class TourSession:
    """Tracks one walk through one tour and decides which artwork is active."""

    def __init__(self, catalog: TourCatalog | None = None, *, settings: SessionSettings | None = None):
        self._catalog = catalog
        self._settings = settings or SessionSettings()
        fallback = self._settings.default_position
        self._position = Position(lat=fallback.lat, lon=fallback.lon)
        self._tour: Tour | None = None
        self._triggered: Artwork | None = None
        self._listeners: list[Listener] = []

    # --- read-only state ---

    @property
    def active_tour(self) -> Tour | None:
        return self._tour

    @property
    def user_position(self) -> Position:
        return self._position

    @property
    def triggered_artwork(self) -> Artwork | None:
        return self._triggered

    @property
    def trigger_radius_m(self) -> float:
        return self._settings.trigger_radius_m

    @property
    def state(self) -> SessionState:
        if self._tour is None:
            return "no_tour"
        if self._triggered is None:
            return "tour_active"
        return "triggered"

    # --- subscriptions ---

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register `listener` for session events; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _emit(self, event: SessionEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                # State is already committed; remaining listeners still get the event.
                logger.exception("Session listener %r failed on %s", listener, type(event).__name__)

    # --- transitions ---

    def select_tour(self, tour: str | Tour) -> Tour:
        """Start the session on `tour` (an id from the catalog, or a `Tour`)."""
        if self._tour is not None:
            raise InvalidTour(
                f"Tour '{self._tour.id}' is already active; start a new session to switch tours.",
                tour_id=self._tour.id,
            )
        if isinstance(tour, Tour):
            if self._catalog is not None:
                if tour.id not in self._catalog or self._catalog.get_tour(tour.id) != tour:
                    raise InvalidTour(f"Tour '{tour.id}' is not in the loaded catalog.", tour_id=tour.id)
            selected = tour
        elif isinstance(tour, str):
            if self._catalog is None:
                raise InvalidTour(f"No catalog loaded; cannot select tour '{tour}'.", tour_id=tour)
            selected = self._catalog.get_tour(tour)
        else:
            raise InvalidTour(f"Not a tour: {tour!r}.")

        self._tour = selected
        self._triggered = None
        logger.info("Tour '%s' selected (%d artworks)", selected.id, len(selected.artworks))
        self._emit(TourSelected(tour=selected))
        return selected

    def update_position(self, lat: float, lon: float) -> SessionEvent | None:
        """Record a new position and run the proximity check.

        Returns the trigger event this update caused, if any.
        """
        tour = self._require_tour()
        lat_f, lon_f = _validate_coordinates(lat, lon)
        self._position = Position(lat=lat_f, lon=lon_f)
        logger.debug("Position updated: lat=%.6f lon=%.6f", lat_f, lon_f)
        return self._check_proximity(tour)

    def clear_trigger(self) -> TriggerCleared | None:
        """Dismiss the active artwork (user-initiated). No-op when nothing is triggered."""
        self._require_tour()
        if self._triggered is None:
            return None
        return self._clear()

    def select_artwork(self, artwork_id: str) -> ArtworkTriggered:
        """Open `artwork_id` directly (e.g. a tap on its map pin), regardless of distance."""
        tour = self._require_tour()
        art = tour.get_artwork(artwork_id)
        if art is None:
            raise UnknownArtwork(
                f"Artwork '{artwork_id}' is not part of tour '{tour.id}'.", artwork_id=artwork_id
            )
        d = haversine_m(self._position.point, art.point)
        return self._trigger(tour, art, d, source="manual")

    # --- queries ---

    def nearest(self) -> tuple[Artwork, float] | None:
        """Closest artwork to the current position and its distance in meters."""
        tour = self._require_tour()
        return find_closest(self._position.point, tour.artworks)

    def indicator_position(self) -> tuple[float, float]:
        """Screen placement `(left_pct, top_pct)` of the user within the tour's bounding box."""
        tour = self._require_tour()
        return screen_position(
            self._position.point,
            [a.point for a in tour.artworks],
            low=self._settings.display_min,
            high=self._settings.display_max,
        )

    def map_center(self) -> GeoPoint:
        """Where a map should open: the tour's first artwork, else the user's position."""
        tour = self._require_tour()
        first = tour.first_artwork
        return first.point if first is not None else self._position.point

    # --- internals ---

    def _require_tour(self) -> Tour:
        if self._tour is None:
            raise InvalidTour("No tour selected.")
        return self._tour

    def _check_proximity(self, tour: Tour) -> SessionEvent | None:
        found = find_closest(self._position.point, tour.artworks)
        if found is not None and found[1] < self._settings.trigger_radius_m:
            closest, d = found
            if self._triggered is not None and self._triggered.id == closest.id:
                return None
            return self._trigger(tour, closest, d, source="proximity")

        if self._triggered is not None:
            return self._clear()
        return None

    def _trigger(self, tour: Tour, art: Artwork, d: float, *, source: TriggerSource) -> ArtworkTriggered:
        first = tour.first_artwork
        event = ArtworkTriggered(
            artwork=art,
            is_first_artwork=first is not None and first.id == art.id,
            distance_m=d,
            source=source,
        )
        self._triggered = art
        logger.info("Artwork '%s' triggered (%s, %.1f m)", art.id, source, d)
        self._emit(event)
        return event

    def _clear(self) -> TriggerCleared:
        previous = self._triggered
        assert previous is not None
        self._triggered = None
        event = TriggerCleared(previous=previous)
        logger.info("Artwork '%s' cleared", previous.id)
        self._emit(event)
        return event
