"""
Feedback -> visual parameters, drawn through a MapView.
"""

import html
import math
from typing import Optional, Tuple

from hotcold.engine.feedback import Feedback
from hotcold.engine.geo import Coordinate
from hotcold.engine.mapview import MapView
from hotcold.shared.constants import (
    COLD_RGB,
    HOT_RGB,
    MARKER_GROWTH_PX,
    MARKER_MIN_PX,
    RING_MAX_M,
    RING_MIN_M,
)

POPUP_OPTIONS = {
    "closeButton": True,
    "autoClose": True,
    "closeOnClick": True,
    "className": "result-popup",
    "maxWidth": 300,
}


def round_half_up(x: float) -> int:
    return math.floor(x + 0.5)


def lerp_rgb(t: float, cold: Tuple[int, int, int] = COLD_RGB, hot: Tuple[int, int, int] = HOT_RGB) -> Tuple[int, int, int]:
    """Linear per-channel interpolation, cold at t=0 and hot at t=1."""
    return tuple(round_half_up(c + (h - c) * t) for c, h in zip(cold, hot))


def visual_heat(heat: float) -> float:
    """Heat used for drawing; an undefined (NaN) heat draws as cold."""
    return 0.0 if math.isnan(heat) else heat


def heat_color(heat: float) -> str:
    r, g, b = lerp_rgb(heat)
    return f"rgb({r},{g},{b})"


def marker_radius_px(heat: float) -> int:
    return MARKER_MIN_PX + round_half_up(MARKER_GROWTH_PX * heat)


def ring_radius_m(distance_m: float) -> float:
    return min(max(RING_MIN_M, distance_m), RING_MAX_M)


def popup_html(feedback: Feedback) -> str:
    title = f"<strong>{html.escape(feedback.label)}</strong>"
    if not feedback.revealed:
        return title
    body = html.escape(f"Coordinates: {feedback.target_text}")
    return f'{title}<div style="margin-top:6px;white-space:pre-line">{body}</div>'


class RenderAdapter:
    """Owns the guess marker and ring; at most one of each is on the map."""

    def __init__(self, map_view: MapView):
        self.map_view = map_view
        self.marker_id: Optional[str] = None
        self.ring_id: Optional[str] = None

    def clear(self):
        if self.marker_id is not None:
            self.map_view.remove_layer(self.marker_id)
            self.marker_id = None
        if self.ring_id is not None:
            self.map_view.remove_layer(self.ring_id)
            self.ring_id = None

    def draw(self, at: Coordinate, feedback: Feedback):
        self.clear()
        heat = visual_heat(feedback.heat)
        color = heat_color(heat)

        self.marker_id = self.map_view.add_circle_marker(
            at,
            radius=marker_radius_px(heat),
            fillColor=color,
            color="#fff",
            weight=2,
            fillOpacity=0.95,
        )
        self.ring_id = self.map_view.add_circle(
            at,
            radius=ring_radius_m(feedback.distance_m),
            color=color,
            weight=1.4,
            opacity=0.35 + 0.5 * heat,
            fill=False,
        )
        self.map_view.open_popup(at, popup_html(feedback), **POPUP_OPTIONS)
