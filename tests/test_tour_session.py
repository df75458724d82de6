import math

import pytest

from artwalk.catalog.loader import TourCatalog
from artwalk.config.settings import SessionSettings
from artwalk.domain.errors import InvalidTour, MalformedPosition, UnknownArtwork
from artwalk.domain.models import Tour
from artwalk.session.events import ArtworkTriggered, TourSelected, TriggerCleared
from artwalk.session.render import RecordingRenderer
from artwalk.session.tour_session import TourSession, find_closest
from artwalk.core.geo import GeoPoint

from conftest import make_artwork

FAR_AWAY = (37.7800, -122.4300)


def _session(tour: Tour, **settings) -> tuple[TourSession, RecordingRenderer]:
    session = TourSession(TourCatalog([tour]), settings=SessionSettings(**settings))
    recorder = RecordingRenderer()
    session.subscribe(recorder)
    session.select_tour(tour.id)
    return session, recorder


def test_new_session_starts_without_tour_at_fallback_position():
    session = TourSession()
    assert session.state == "no_tour"
    assert session.active_tour is None
    assert session.triggered_artwork is None
    assert (session.user_position.lat, session.user_position.lon) == (37.7749, -122.4194)


def test_select_tour_emits_selection_and_starts_untriggered(two_stop_tour):
    session, recorder = _session(two_stop_tour)
    assert session.state == "tour_active"
    assert session.active_tour == two_stop_tour
    assert recorder.events == [TourSelected(tour=two_stop_tour)]


def test_first_artwork_trigger_shows_full_detail(two_stop_tour):
    session, recorder = _session(two_stop_tour)

    event = session.update_position(37.7749, -122.4194)

    assert session.state == "triggered"
    assert session.triggered_artwork.id == "art1"
    assert isinstance(event, ArtworkTriggered)
    assert event.artwork.id == "art1"
    assert event.is_first_artwork is True
    assert event.show_detail is True
    assert event.distance_m == 0.0
    assert recorder.of_type(ArtworkTriggered) == [event]


def test_later_artwork_trigger_is_summary_only(two_stop_tour):
    session, _ = _session(two_stop_tour)
    event = session.update_position(37.7765, -122.4175)
    assert event.artwork.id == "art2"
    assert event.is_first_artwork is False
    assert event.show_detail is False


def test_repeated_position_does_not_retrigger(two_stop_tour):
    session, recorder = _session(two_stop_tour)
    session.update_position(37.7749, -122.4194)
    assert session.update_position(37.7749, -122.4194) is None
    # Small drift inside the same radius.
    assert session.update_position(37.77495, -122.41942) is None
    assert len(recorder.of_type(ArtworkTriggered)) == 1


def test_leaving_radius_clears_exactly_once(two_stop_tour):
    session, recorder = _session(two_stop_tour)
    session.update_position(37.7749, -122.4194)

    event = session.update_position(*FAR_AWAY)
    session.update_position(*FAR_AWAY)
    session.update_position(FAR_AWAY[0] + 0.001, FAR_AWAY[1])

    assert isinstance(event, TriggerCleared)
    assert event.previous.id == "art1"
    assert session.state == "tour_active"
    assert session.triggered_artwork is None
    assert len(recorder.of_type(TriggerCleared)) == 1


def test_walking_from_one_artwork_to_the_next_switches_trigger(two_stop_tour):
    session, recorder = _session(two_stop_tour)
    session.update_position(37.7749, -122.4194)
    session.update_position(37.7765, -122.4175)

    triggered = [e.artwork.id for e in recorder.of_type(ArtworkTriggered)]
    assert triggered == ["art1", "art2"]
    assert recorder.of_type(TriggerCleared) == []


def test_reentering_after_leaving_fires_again(two_stop_tour):
    session, recorder = _session(two_stop_tour)
    session.update_position(37.7749, -122.4194)
    session.update_position(*FAR_AWAY)
    session.update_position(37.7749, -122.4194)
    assert [e.artwork.id for e in recorder.of_type(ArtworkTriggered)] == ["art1", "art1"]


def test_threshold_is_strict():
    # Artwork on the equator; positions are offset due east.
    tour = Tour(id="t", title="t", artworks=(make_artwork("a", 0.0, 0.0),))
    session, _ = _session(tour, trigger_radius_m=30)
    lon_for_30m = 30 / (math.pi * 6_371_000 / 180)

    assert session.update_position(0.0, lon_for_30m * 1.0001) is None
    assert session.update_position(0.0, lon_for_30m * 0.75) is not None


def test_empty_tour_never_triggers(empty_tour):
    session, recorder = _session(empty_tour)
    for lat, lon in [(37.7749, -122.4194), (0.0, 0.0), (-10.0, 45.0)]:
        assert session.update_position(lat, lon) is None
    assert session.state == "tour_active"
    assert session.nearest() is None
    assert recorder.of_type(ArtworkTriggered) == []


def test_equal_distance_tie_goes_to_first_in_tour_order():
    tour = Tour(
        id="tie",
        title="Tie",
        artworks=(make_artwork("west", 0.0, -0.0001), make_artwork("east", 0.0, 0.0001)),
    )
    found = find_closest(GeoPoint(lat=0.0, lon=0.0), tour.artworks)
    assert found[0].id == "west"

    session, _ = _session(tour)
    event = session.update_position(0.0, 0.0)
    assert event.artwork.id == "west"


def test_unknown_tour_is_rejected_without_state_change(two_stop_tour):
    session = TourSession(TourCatalog([two_stop_tour]))
    with pytest.raises(InvalidTour) as exc:
        session.select_tour("no-such-tour")
    assert exc.value.tour_id == "no-such-tour"
    assert session.state == "no_tour"
    assert session.active_tour is None


def test_unknown_tour_after_selection_keeps_prior_state(two_stop_tour):
    session, recorder = _session(two_stop_tour)
    session.update_position(37.7749, -122.4194)

    with pytest.raises(InvalidTour):
        session.select_tour("no-such-tour")

    assert session.active_tour == two_stop_tour
    assert session.triggered_artwork.id == "art1"
    assert len(recorder.events) == 2


def test_select_tour_rejects_non_tour_values():
    session = TourSession()
    with pytest.raises(InvalidTour):
        session.select_tour(42)
    with pytest.raises(InvalidTour):
        session.select_tour("mural-mile")


def test_select_tour_accepts_tour_object_without_catalog(two_stop_tour):
    session = TourSession()
    assert session.select_tour(two_stop_tour) is two_stop_tour


def test_update_position_requires_a_tour():
    with pytest.raises(InvalidTour):
        TourSession().update_position(37.7749, -122.4194)


@pytest.mark.parametrize(
    "lat, lon",
    [
        (math.nan, 0.0),
        (0.0, math.inf),
        (91.0, 0.0),
        (-90.5, 0.0),
        (0.0, 180.5),
        ("north", 0.0),
        (None, 1.0),
        (True, 0.0),
        (0.0, False),
    ],
)
def test_malformed_position_is_rejected_without_mutation(two_stop_tour, lat, lon):
    session, recorder = _session(two_stop_tour)
    session.update_position(37.7749, -122.4194)
    before = session.user_position

    with pytest.raises(MalformedPosition):
        session.update_position(lat, lon)

    assert session.user_position == before
    assert session.triggered_artwork.id == "art1"
    assert len(recorder.events) == 2


def test_clear_trigger_is_user_initiated_and_keeps_position(two_stop_tour):
    session, recorder = _session(two_stop_tour)
    session.update_position(37.7749, -122.4194)
    position = session.user_position

    event = session.clear_trigger()

    assert isinstance(event, TriggerCleared)
    assert session.triggered_artwork is None
    assert session.active_tour == two_stop_tour
    assert session.user_position == position
    assert session.clear_trigger() is None
    assert len(recorder.of_type(TriggerCleared)) == 1


def test_select_artwork_opens_detail_regardless_of_distance(two_stop_tour):
    session, _ = _session(two_stop_tour)
    session.update_position(*FAR_AWAY)

    event = session.select_artwork("art2")

    assert event.source == "manual"
    assert event.show_detail is True
    assert event.distance_m > 30
    assert session.triggered_artwork.id == "art2"
    with pytest.raises(UnknownArtwork):
        session.select_artwork("art9")


def test_indicator_position_and_map_center(two_stop_tour, empty_tour):
    session, _ = _session(two_stop_tour)
    session.update_position(37.7749, -122.4194)
    assert session.indicator_position() == pytest.approx((10.0, 10.0))
    assert session.map_center() == GeoPoint(lat=37.7749, lon=-122.4194)

    empty, _ = _session(empty_tour)
    empty.update_position(1.0, 2.0)
    assert empty.indicator_position() == (50.0, 50.0)
    assert empty.map_center() == GeoPoint(lat=1.0, lon=2.0)


def test_unsubscribe_and_failing_listener(two_stop_tour):
    session, recorder = _session(two_stop_tour)
    other = RecordingRenderer()
    unsubscribe = session.subscribe(other)

    def broken(_event):
        raise RuntimeError("renderer exploded")

    session.subscribe(broken)
    session.update_position(37.7749, -122.4194)
    unsubscribe()
    session.update_position(*FAR_AWAY)

    assert session.triggered_artwork is None
    assert len(recorder.events) == 3
    assert len(other.events) == 1


def test_tour_object_must_match_the_catalog(two_stop_tour):
    session = TourSession(TourCatalog([two_stop_tour]))
    stranger = Tour(id="not-in-catalog", title="Elsewhere", artworks=())
    lookalike = two_stop_tour.model_copy(update={"title": "Edited"})

    with pytest.raises(InvalidTour) as exc:
        session.select_tour(stranger)
    assert exc.value.tour_id == "not-in-catalog"
    with pytest.raises(InvalidTour):
        session.select_tour(lookalike)
    assert session.state == "no_tour"

    assert session.select_tour(two_stop_tour) == two_stop_tour


def test_manual_selection_far_away_clears_on_next_update(two_stop_tour):
    session, recorder = _session(two_stop_tour)
    session.update_position(*FAR_AWAY)
    session.select_artwork("art2")

    event = session.update_position(*FAR_AWAY)
    session.update_position(FAR_AWAY[0] + 0.001, FAR_AWAY[1])

    assert isinstance(event, TriggerCleared)
    assert event.previous.id == "art2"
    assert session.triggered_artwork is None
    assert len(recorder.of_type(TriggerCleared)) == 1
