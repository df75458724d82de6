"""
Render adapters.

A render adapter is any callable that accepts a session event. The session does not
know which one is attached, so the browser UI, the CLI and the tests can each bring
their own.
"""

from __future__ import annotations

import logging
from typing import Callable, Protocol

from artwalk.domain.models import Artwork
from artwalk.session.events import ArtworkTriggered, SessionEvent, TourSelected, TriggerCleared

logger = logging.getLogger(__name__)


class RenderAdapter(Protocol):
    def __call__(self, event: SessionEvent) -> None: ...


def display_image_path(image: str) -> str:
    """Turn a catalog image reference into a path relative to the web root.

    Catalog entries use absolute `/assets/...` paths; the client serves them relative
    to its own location. URLs and other paths pass through unchanged.
    """
    marker = "/assets/"
    if image.startswith(marker):
        return "assets/" + image.split(marker, 1)[1]
    return image


def summary_line(art: Artwork) -> str:
    return f"{art.title} ({art.artist})"


def detail_lines(art: Artwork) -> list[str]:
    year = f" ({art.year})" if art.year is not None else ""
    lines = [art.title, f"{art.artist}{year}", display_image_path(art.image)]
    if art.story:
        lines.append(art.story)
    return lines


class LoggingRenderer:
    """Writes every event to the `artwalk` logger."""

    def __call__(self, event: SessionEvent) -> None:
        if isinstance(event, TourSelected):
            logger.info("render: tour '%s' opened", event.tour.id)
        elif isinstance(event, ArtworkTriggered):
            view = "detail" if event.show_detail else "summary"
            logger.info("render: %s for '%s' (%.1f m)", view, event.artwork.id, event.distance_m)
        elif isinstance(event, TriggerCleared):
            logger.info("render: tray closed for '%s'", event.previous.id)


class ConsoleRenderer:
    """Prints a text rendition of the tray/detail views (used by the CLI)."""

    def __init__(self, echo: Callable[[str], None] = print):
        self._echo = echo

    def __call__(self, event: SessionEvent) -> None:
        if isinstance(event, TourSelected):
            tour = event.tour
            self._echo(f"Tour: {tour.title} [{tour.id}] ({len(tour.artworks)} artworks)")
        elif isinstance(event, ArtworkTriggered):
            art = event.artwork
            if event.show_detail:
                self._echo(f"* {art.id} @ {event.distance_m:.1f} m")
                for line in detail_lines(art):
                    self._echo(f"    {line}")
            else:
                self._echo(f"> {art.id} @ {event.distance_m:.1f} m: {summary_line(art)}")
        elif isinstance(event, TriggerCleared):
            self._echo(f"- {event.previous.id} left behind")


class RecordingRenderer:
    """Keeps every event it receives, in order."""

    def __init__(self) -> None:
        self.events: list[SessionEvent] = []

    def __call__(self, event: SessionEvent) -> None:
        self.events.append(event)

    def of_type(self, kind: type) -> list[SessionEvent]:
        return [e for e in self.events if isinstance(e, kind)]
