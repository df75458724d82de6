import pytest

from artwalk.domain.models import Artwork, Tour


def make_artwork(art_id: str, lat: float, lon: float, **kwargs) -> Artwork:
    return Artwork(
        id=art_id,
        title=kwargs.pop("title", f"Artwork {art_id}"),
        artist=kwargs.pop("artist", "Someone"),
        year=kwargs.pop("year", 2020),
        image=kwargs.pop("image", f"/assets/{art_id}.jpg"),
        lat=lat,
        lon=lon,
        story=kwargs.pop("story", ""),
    )


@pytest.fixture
def two_stop_tour() -> Tour:
    return Tour(
        id="two-stop",
        title="Two Stops",
        description="Short test walk.",
        artworks=(
            make_artwork("art1", 37.7749, -122.4194),
            make_artwork("art2", 37.7765, -122.4175),
        ),
    )


@pytest.fixture
def empty_tour() -> Tour:
    return Tour(id="empty", title="Nothing here", artworks=())
