# khonreep/services/markers.py
"""
Marker styling and popup content for the map.

Every incident type maps to one fixed category entry; anything the table
does not know falls back to DEFAULT_CATEGORY.
"""
from __future__ import annotations

from html import escape
from typing import Dict, NamedTuple, Optional

import folium

from khonreep.models.location import Location


class MarkerStyle(NamedTuple):
    color: str
    border: str


class IncidentCategory(NamedTuple):
    label: str          # short button text on the Pin tab
    description: str    # popup headline
    message: str        # popup footer
    style: MarkerStyle


INCIDENT_CATEGORIES: Dict[str, IncidentCategory] = {
    "SIDEWALK_OR_MOTORBIKE": IncidentCategory(
        label="Motorbike on sidewalk",
        description="Motorbike riding on the sidewalk",
        message="Sidewalks are for people on foot!",
        style=MarkerStyle(color="#f97316", border="#9a3412"),
    ),
    "ZEBRA_CROSSING_MISUSE": IncidentCategory(
        label="Zebra crossing ignored",
        description="Driver did not stop at a zebra crossing",
        message="Pedestrians have right of way on the stripes.",
        style=MarkerStyle(color="#eab308", border="#ffffff"),
    ),
    "WRONG_DIRECTION": IncidentCategory(
        label="Wrong-way driving",
        description="Vehicle driving against traffic",
        message="Wrong way! Turn around.",
        style=MarkerStyle(color="#dc2626", border="#7f1d1d"),
    ),
    "TRAFFIC_LIGHT_BLINDNESS": IncidentCategory(
        label="Red light runner",
        description="Vehicle ran a red light",
        message="Red means stop.",
        style=MarkerStyle(color="#8b5cf6", border="#ffffff"),
    ),
}

DEFAULT_CATEGORY = IncidentCategory(
    label="Incident",
    description="Reported incident",
    message="Stay safe out there.",
    style=MarkerStyle(color="#6b7280", border="#ffffff"),
)

USER_MARKER_STYLE = MarkerStyle(color="#2563eb", border="#ffffff")

MARKER_SIZE = 32


def category_for(incident_type: Optional[str]) -> IncidentCategory:
    return INCIDENT_CATEGORIES.get(incident_type, DEFAULT_CATEGORY)


def style_for(incident_type: Optional[str]) -> MarkerStyle:
    return category_for(incident_type).style


def marker_icon(style: MarkerStyle, *, size: int = MARKER_SIZE, pulse: bool = False) -> folium.DivIcon:
    """Round colored pin as a DivIcon, anchored at its center."""
    animation = "animation: khonreep-pulse 2s infinite;" if pulse else ""
    html = (
        f'<div class="khonreep-pin" data-color="{style.color}" style="'
        f"background: {style.color}; width: {size}px; height: {size}px; "
        f"border-radius: 50%; border: 3px solid {style.border}; "
        f'box-shadow: 0 1px 5px rgba(0,0,0,0.3); {animation}"></div>'
    )
    return folium.DivIcon(
        html=html,
        icon_size=(size, size),
        icon_anchor=(size // 2, size // 2),
        class_name="khonreep-marker",
    )


def popup_html(location: Location) -> str:
    category = category_for(location.type)
    pending = ' <span style="color:#9ca3af">(pending)</span>' if location.status == "pending" else ""
    return (
        '<div style="text-align:center; padding:4px">'
        f'<p style="font-weight:bold; color:{category.style.color}; margin:0 0 6px">'
        f"{escape(category.description)}</p>"
        f'<p style="font-size:11px; color:#6b7280; margin:0 0 6px">'
        f"Report ID: {escape(location.id)}{pending}</p>"
        f'<p style="font-size:13px; margin:0">'
        f"{location.latitude:.6f}, {location.longitude:.6f}</p>"
        f'<p style="font-size:11px; margin:4px 0 0">{escape(category.message)}</p>'
        "</div>"
    )


def user_popup_html(latitude: float, longitude: float) -> str:
    return (
        '<div style="text-align:center; padding:4px">'
        '<p style="font-weight:bold; margin:0 0 6px">You are here</p>'
        f'<p style="font-size:13px; margin:0">{latitude:.6f}, {longitude:.6f}</p>'
        "</div>"
    )
