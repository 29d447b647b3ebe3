import folium
import pytest

from khonreep.services.geolocation import Coordinates
from khonreep.services.map_view import MapView, padded_bounds
from tests.fakes import make_location


class CountingFactory:
    def __init__(self):
        self.created = []

    def __call__(self, **kwargs):
        m = folium.Map(**kwargs)
        self.created.append(m)
        return m


def drawn_pins(view: MapView) -> int:
    return view.to_html().count("khonreep-pin")


@pytest.fixture
def factory():
    return CountingFactory()


@pytest.fixture
def view(settings, factory):
    return MapView(settings, map_factory=factory)


def test_mount_is_idempotent(view, factory):
    first = view.mount()
    assert view.mount() is first
    assert len(factory.created) == 1


def test_render_before_mount_raises(view):
    with pytest.raises(RuntimeError):
        view.render([make_location("a")])


def test_one_marker_per_record(view):
    view.mount()
    view.render([make_location("a"), make_location("b", lat=14.0), make_location("c", lat=15.0)])
    assert set(view.markers) == {"a", "b", "c"}
    assert drawn_pins(view) == 3


def test_remount_leaves_single_surface_and_no_stale_markers(view, factory):
    records = [make_location("a"), make_location("b", lat=14.0)]

    view.mount()
    view.render(records)
    view.unmount()
    assert not view.mounted
    assert view.markers == {}

    view.mount()
    view.render(records)
    assert len(factory.created) == 2
    assert view.surface is factory.created[-1]
    assert drawn_pins(view) == 2


def test_reconcile_only_touches_the_delta(view):
    view.mount()
    view.render([make_location("a"), make_location("b", lat=14.0)])
    kept = view.markers["b"][1]

    view.render([make_location("b", lat=14.0), make_location("c", lat=15.0)])

    assert set(view.markers) == {"b", "c"}
    assert view.markers["b"][1] is kept
    assert drawn_pins(view) == 2


def test_changed_record_is_redrawn(view):
    view.mount()
    view.render([make_location("a", "WRONG_DIRECTION")])
    old = view.markers["a"][1]
    view.render([make_location("a", "ZEBRA_CROSSING_MISUSE")])
    assert view.markers["a"][1] is not old
    assert drawn_pins(view) == 1


def test_unknown_type_renders_with_default_style(view):
    view.mount()
    view.render([make_location("x", "SOMETHING_NEW")])
    assert "#6b7280" in view.to_html()


def test_viewer_marker_is_independent_of_records(view):
    view.mount()
    view.render([make_location("a"), make_location("b", lat=14.0)])

    view.place_viewer(Coordinates(13.0, 100.0))
    page = view.to_html()
    assert "You are here" in page
    assert drawn_pins(view) == 3

    view.place_viewer(None)
    assert "You are here" not in view.to_html()
    assert set(view.markers) == {"a", "b"}
    assert drawn_pins(view) == 2


def test_fit_uses_padded_marker_bounds(view):
    view.mount()
    view.render([make_location("a", lat=10.0, lng=100.0), make_location("b", lat=20.0, lng=110.0)])
    assert view.fit() == [[9.0, 99.0], [21.0, 111.0]]


def test_fit_falls_back_to_viewer_then_nothing(view):
    view.mount()
    assert view.fit() is None
    view.place_viewer(Coordinates(13.5, 100.25))
    assert view.fit() == [[13.5, 100.25], [13.5, 100.25]]


def test_padded_bounds_single_point():
    assert padded_bounds([(1.0, 2.0)], 0.1) == [[1.0, 2.0], [1.0, 2.0]]
