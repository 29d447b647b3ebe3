# khonreep/services/map_view.py
from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import folium
from folium.map import FitBounds

from khonreep.config import Settings
from khonreep.models.location import Location
from khonreep.services.geolocation import Coordinates
from khonreep.services.markers import (
    USER_MARKER_STYLE,
    marker_icon,
    popup_html,
    style_for,
    user_popup_html,
)

log = logging.getLogger(__name__)

# single-point bounds would zoom all the way in
MAX_FIT_ZOOM = 16

PIN_CSS = """
<style>
  @keyframes khonreep-pulse {
    0%, 100% { transform: scale(1); }
    50% { transform: scale(1.15); }
  }
  .khonreep-marker { background: transparent; border: none; }
</style>
"""

Bounds = List[List[float]]


def padded_bounds(points: Sequence[Tuple[float, float]], ratio: float) -> Bounds:
    """[[south, west], [north, east]] grown by `ratio` of its span on each side."""
    lats = [p[0] for p in points]
    lngs = [p[1] for p in points]
    south, north = min(lats), max(lats)
    west, east = min(lngs), max(lngs)
    lat_buf = (north - south) * ratio
    lng_buf = (east - west) * ratio
    return [[south - lat_buf, west - lng_buf], [north + lat_buf, east + lng_buf]]


def _forget(root: folium.Element, element: folium.Element) -> None:
    # a previous render left this element's header/script on the root figure
    for part in (root.header, root.html, root.script):
        part._children.pop(element.get_name(), None)
    for sub in list(element._children.values()):
        _forget(root, sub)


def _detach(parent: folium.Element, child: Optional[folium.Element]) -> None:
    # folium has no public remove; children are keyed by element name
    if child is None:
        return
    parent._children.pop(child.get_name(), None)
    _forget(parent.get_root(), child)


class MapView:
    """
    One folium surface per mount. Incident markers live in their own
    FeatureGroup keyed by record id; the "you are here" marker is separate
    and never touched by render().
    """

    def __init__(self, settings: Settings, map_factory: Callable[..., folium.Map] = folium.Map):
        self.settings = settings
        self.map_factory = map_factory
        self.surface: Optional[folium.Map] = None
        self.markers: Dict[str, Tuple[Location, folium.Marker]] = {}
        self.viewer: Optional[Coordinates] = None
        self._incidents: Optional[folium.FeatureGroup] = None
        self._viewer_marker: Optional[folium.Marker] = None
        self._fit: Optional[FitBounds] = None

    @property
    def mounted(self) -> bool:
        return self.surface is not None

    # ---------------- lifecycle ----------------

    def mount(self) -> folium.Map:
        if self.surface is not None:
            return self.surface

        surface = self.map_factory(
            location=list(self.settings.default_center),
            zoom_start=self.settings.default_zoom,
            tiles=None,
        )
        folium.TileLayer(
            tiles=self.settings.tile_url,
            attr=self.settings.tile_attribution,
            name="basemap",
        ).add_to(surface)
        surface.get_root().header.add_child(folium.Element(PIN_CSS))

        self._incidents = folium.FeatureGroup(name="Incidents")
        self._incidents.add_to(surface)
        self.surface = surface
        log.debug("Map surface mounted")
        return surface

    def unmount(self) -> None:
        if self.surface is None:
            return
        self.surface = None
        self.markers = {}
        self.viewer = None
        self._incidents = None
        self._viewer_marker = None
        self._fit = None
        log.debug("Map surface released")

    def _require_surface(self) -> folium.Map:
        if self.surface is None:
            raise RuntimeError("MapView is not mounted")
        return self.surface

    # ---------------- markers ----------------

    def render(self, locations: Sequence[Location]) -> None:
        """Reconcile drawn incident markers with `locations` (by id)."""
        self._require_surface()
        desired = {loc.id: loc for loc in locations}

        for loc_id in list(self.markers):
            if loc_id not in desired:
                _, marker = self.markers.pop(loc_id)
                _detach(self._incidents, marker)

        for loc_id, loc in desired.items():
            current = self.markers.get(loc_id)
            if current is not None and current[0] == loc:
                continue
            if current is not None:
                _detach(self._incidents, current[1])

            marker = folium.Marker(
                location=[loc.latitude, loc.longitude],
                popup=folium.Popup(popup_html(loc), max_width=260),
                icon=marker_icon(style_for(loc.type)),
            )
            marker.add_to(self._incidents)
            self.markers[loc_id] = (loc, marker)

        self.fit()

    def place_viewer(self, coords: Optional[Coordinates]) -> None:
        """Draw the viewer's own position; no fix means no marker, no error."""
        surface = self._require_surface()
        _detach(surface, self._viewer_marker)
        self._viewer_marker = None
        self.viewer = coords

        if coords is not None:
            self._viewer_marker = folium.Marker(
                location=[coords.latitude, coords.longitude],
                popup=folium.Popup(user_popup_html(coords.latitude, coords.longitude), show=True),
                icon=marker_icon(USER_MARKER_STYLE, pulse=True),
                tooltip="You are here",
            )
            self._viewer_marker.add_to(surface)

        self.fit()

    # ---------------- viewport ----------------

    def fit(self) -> Optional[Bounds]:
        surface = self._require_surface()
        _detach(surface, self._fit)
        self._fit = None

        if self.markers:
            points = [(loc.latitude, loc.longitude) for loc, _ in self.markers.values()]
        elif self.viewer is not None:
            points = [(self.viewer.latitude, self.viewer.longitude)]
        else:
            return None

        bounds = padded_bounds(points, self.settings.fit_padding)
        self._fit = FitBounds(bounds, max_zoom=MAX_FIT_ZOOM)
        surface.add_child(self._fit)
        return bounds

    def to_html(self) -> str:
        return self._require_surface().get_root().render()
