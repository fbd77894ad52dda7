"""
Raw UI events -> GuessSubmitted.

Pointer clicks, the confirm key and touch releases all end up as one
GuessSubmitted(coordinate). A browser can fire click and touchend for the
same tap, so a guess within the debounce window at effectively the same
spot as the last accepted guess is dropped.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from hotcold.engine.geo import Coordinate, distance
from hotcold.engine.mapview import MapView, ProjectionError
from hotcold.shared.constants import CONFIRM_KEY

logger = logging.getLogger("InputController")

SOURCE_CLICK = "click"
SOURCE_KEY = "key"
SOURCE_TOUCH = "touch"


@dataclass(frozen=True)
class GuessSubmitted:
    coordinate: Coordinate
    source: str


class InputController:
    def __init__(
        self,
        map_view: MapView,
        debounce_ms: float,
        debounce_distance_m: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.map_view = map_view
        self.debounce_s = debounce_ms / 1000
        self.debounce_distance_m = debounce_distance_m
        self._clock = clock
        self._last: Optional[Coordinate] = None
        self._last_at: Optional[float] = None

    def reset(self):
        self._last = None
        self._last_at = None

    def on_click(self, lat: float, lng: float) -> Optional[GuessSubmitted]:
        return self._submit(Coordinate(lat=lat, lng=lng), SOURCE_CLICK)

    def on_key(self, key: str) -> Optional[GuessSubmitted]:
        if key != CONFIRM_KEY:
            return None
        return self._submit(self.map_view.get_view().center, SOURCE_KEY)

    def on_touch_end(self, x: float, y: float) -> Optional[GuessSubmitted]:
        try:
            coord = self.map_view.container_point_to_latlng(x, y)
        except ProjectionError as e:
            logger.warning(f"touchend conversion failed: {e}")
            return None
        return self._submit(coord, SOURCE_TOUCH)

    def _submit(self, coord: Coordinate, source: str) -> Optional[GuessSubmitted]:
        now = self._clock()
        if self._is_repeat(coord, now):
            logger.debug(f"Debounced {source} guess at ({coord.lat:.6f}, {coord.lng:.6f})")
            return None
        self._last = coord
        self._last_at = now
        return GuessSubmitted(coordinate=coord, source=source)

    def _is_repeat(self, coord: Coordinate, now: float) -> bool:
        if self._last is None:
            return False
        if now - self._last_at >= self.debounce_s:
            return False
        return distance(coord, self._last) < self.debounce_distance_m
