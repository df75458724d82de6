"""
Domain models (Pydantic).

These types are the contract between the catalog, the tour session and the API:
- catalog entities (`Tour`, `Artwork`)
- the user's last known location (`Position`)

Tours and artworks are frozen: once a catalog is loaded nothing downstream may edit it.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator

from artwalk.core.geo import GeoPoint as CoreGeoPoint


class Artwork(BaseModel):
    """A geotagged piece on a tour, with the narrative shown when the user is nearby."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    title: str
    artist: str
    year: int | None = None
    image: str
    lat: float = Field(..., ge=-90, le=90, allow_inf_nan=False)
    lon: float = Field(..., ge=-180, le=180, allow_inf_nan=False)
    story: str = ""

    @property
    def point(self) -> CoreGeoPoint:
        return CoreGeoPoint(lat=self.lat, lon=self.lon)


class Tour(BaseModel):
    """An ordered walk through artworks."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    title: str
    description: str = ""
    artworks: tuple[Artwork, ...] = ()

    @field_validator("artworks")
    @classmethod
    def _unique_artwork_ids(cls, artworks: tuple[Artwork, ...]) -> tuple[Artwork, ...]:
        seen: set[str] = set()
        for art in artworks:
            if art.id in seen:
                raise ValueError(f"duplicate artwork id '{art.id}'")
            seen.add(art.id)
        return artworks

    def get_artwork(self, artwork_id: str) -> Artwork | None:
        for art in self.artworks:
            if art.id == artwork_id:
                return art
        return None

    @property
    def first_artwork(self) -> Artwork | None:
        return self.artworks[0] if self.artworks else None


class Position(BaseModel):
    """The user's last reported location."""

    lat: float = Field(..., ge=-90, le=90, allow_inf_nan=False)
    lon: float = Field(..., ge=-180, le=180, allow_inf_nan=False)
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def point(self) -> CoreGeoPoint:
        return CoreGeoPoint(lat=self.lat, lon=self.lon)
