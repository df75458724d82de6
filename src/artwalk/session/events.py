"""
Session events.

These are the only thing a `TourSession` tells the outside world. Render adapters
subscribe to them and decide how to present each one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Union

from artwalk.domain.models import Artwork, Tour

TriggerSource = Literal["proximity", "manual"]


@dataclass(frozen=True)
class TourSelected:
    tour: Tour


@dataclass(frozen=True)
class ArtworkTriggered:
    """An artwork became active.

    `is_first_artwork` marks the tour's opening piece, which gets the full detail view
    as an onboarding nudge; other proximity triggers only get the summary tray.
    """

    artwork: Artwork
    is_first_artwork: bool
    distance_m: float
    source: TriggerSource = "proximity"

    @property
    def show_detail(self) -> bool:
        return self.is_first_artwork or self.source == "manual"


@dataclass(frozen=True)
class TriggerCleared:
    previous: Artwork


SessionEvent = Union[TourSelected, ArtworkTriggered, TriggerCleared]
