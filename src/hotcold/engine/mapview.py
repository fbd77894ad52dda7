"""
Map capability interface and the browser-backed implementation.

The game never talks to Leaflet directly. It draws through a MapView;
CommandMapView records each call as a JSON command which the page applies
with the matching Leaflet primitive (L.circleMarker, L.circle, L.marker,
L.popup, map.setView). Screen <-> geo conversion mirrors Leaflet's
spherical Web Mercator (EPSG:3857) with 256px tiles, using pyproj.
"""

import itertools
import logging
import math
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Protocol, Tuple

from pyproj import Transformer
from pyproj.exceptions import ProjError

from hotcold.engine.geo import Coordinate
from hotcold.shared.constants import EPSG_WEB_MERCATOR, EPSG_WGS84, TILE_SIZE_PX

logger = logging.getLogger("MapView")

# always_xy=True: 입출력 순서는 (lon, lat) / (x, y)
TRANSFORM_FWD = Transformer.from_crs(EPSG_WGS84, EPSG_WEB_MERCATOR, always_xy=True)
TRANSFORM_REV = Transformer.from_crs(EPSG_WEB_MERCATOR, EPSG_WGS84, always_xy=True)

# 적도 반둘레 (EPSG:3857 x/y 범위의 절반)
HALF_WORLD_M = math.pi * 6378137.0

# pyproj 오류 + 비정상 zoom (2 ** 5000, 문자열 등)
PROJECTION_FAILURES = (ProjError, OverflowError, TypeError, ValueError)


class ProjectionError(Exception):
    """Raised when a screen point cannot be mapped to a geo-coordinate."""


@dataclass(frozen=True)
class View:
    center: Coordinate
    zoom: float
    width: Optional[int] = None     # 컨테이너 크기 (px), 브라우저가 보고
    height: Optional[int] = None


class MapView(Protocol):
    def add_circle_marker(self, at: Coordinate, **style) -> str: ...

    def add_circle(self, at: Coordinate, **style) -> str: ...

    def add_marker(self, at: Coordinate, popup: Optional[str] = None) -> str: ...

    def remove_layer(self, layer_id: str) -> None: ...

    def open_popup(self, at: Coordinate, html: str, **options) -> None: ...

    def get_view(self) -> View: ...

    def set_view(self, center: Coordinate, zoom: Optional[float] = None) -> None: ...

    def container_point_to_latlng(self, x: float, y: float) -> Coordinate: ...

    def latlng_to_container_point(self, at: Coordinate) -> Tuple[float, float]: ...


def _world_scale(zoom: float) -> float:
    return TILE_SIZE_PX * 2 ** zoom


def project(at: Coordinate, zoom: float) -> Tuple[float, float]:
    """WGS84 -> absolute world pixel at the given zoom."""
    x, y = TRANSFORM_FWD.transform(xx=at.lng, yy=at.lat, errcheck=True)
    scale = _world_scale(zoom)
    px = (x + HALF_WORLD_M) / (2 * HALF_WORLD_M) * scale
    py = (HALF_WORLD_M - y) / (2 * HALF_WORLD_M) * scale
    return px, py


def unproject(px: float, py: float, zoom: float) -> Coordinate:
    """Absolute world pixel at the given zoom -> WGS84."""
    scale = _world_scale(zoom)
    x = px / scale * 2 * HALF_WORLD_M - HALF_WORLD_M
    y = HALF_WORLD_M - py / scale * 2 * HALF_WORLD_M
    lng, lat = TRANSFORM_REV.transform(xx=x, yy=y, errcheck=True)
    return Coordinate(lat=lat, lng=lng)


class CommandMapView:
    """MapView that queues Leaflet draw commands for the browser."""

    def __init__(self, view: View):
        self._view = view
        self._commands: List[Dict[str, Any]] = []
        self._ids = itertools.count(1)

    def _emit(self, op: str, **fields):
        self._commands.append({"op": op, **fields})

    def _next_id(self) -> str:
        return f"layer-{next(self._ids)}"

    def add_circle_marker(self, at: Coordinate, **style) -> str:
        layer_id = self._next_id()
        self._emit("add_circle_marker", id=layer_id, lat=at.lat, lng=at.lng, style=style)
        return layer_id

    def add_circle(self, at: Coordinate, **style) -> str:
        layer_id = self._next_id()
        self._emit("add_circle", id=layer_id, lat=at.lat, lng=at.lng, style=style)
        return layer_id

    def add_marker(self, at: Coordinate, popup: Optional[str] = None) -> str:
        layer_id = self._next_id()
        self._emit("add_marker", id=layer_id, lat=at.lat, lng=at.lng, popup=popup)
        return layer_id

    def remove_layer(self, layer_id: str) -> None:
        self._emit("remove_layer", id=layer_id)

    def open_popup(self, at: Coordinate, html: str, **options) -> None:
        self._emit("open_popup", lat=at.lat, lng=at.lng, html=html, options=options)

    def get_view(self) -> View:
        return self._view

    def set_view(self, center: Coordinate, zoom: Optional[float] = None) -> None:
        zoom = self._view.zoom if zoom is None else zoom
        self._view = replace(self._view, center=center, zoom=zoom)
        self._emit("set_view", lat=center.lat, lng=center.lng, zoom=zoom)

    def sync_view(self, view: View) -> None:
        """Adopt the viewport the browser reports (pan/zoom happen client-side)."""
        self._view = View(
            center=view.center,
            zoom=view.zoom,
            width=view.width if view.width is not None else self._view.width,
            height=view.height if view.height is not None else self._view.height,
        )

    def container_point_to_latlng(self, x: float, y: float) -> Coordinate:
        view = self._view
        if not view.width or not view.height:
            raise ProjectionError("container size unknown")
        try:
            cx, cy = project(view.center, view.zoom)
            result = unproject(cx + x - view.width / 2, cy + y - view.height / 2, view.zoom)
        except PROJECTION_FAILURES as e:
            raise ProjectionError(str(e)) from e
        if not (math.isfinite(result.lat) and math.isfinite(result.lng)):
            raise ProjectionError(f"point ({x}, {y}) is outside the projected world")
        return result

    def latlng_to_container_point(self, at: Coordinate) -> Tuple[float, float]:
        view = self._view
        if not view.width or not view.height:
            raise ProjectionError("container size unknown")
        try:
            cx, cy = project(view.center, view.zoom)
            px, py = project(at, view.zoom)
        except PROJECTION_FAILURES as e:
            raise ProjectionError(str(e)) from e
        return px - cx + view.width / 2, py - cy + view.height / 2

    def drain(self) -> List[Dict[str, Any]]:
        """Return and clear the commands queued since the last drain."""
        commands, self._commands = self._commands, []
        return commands
