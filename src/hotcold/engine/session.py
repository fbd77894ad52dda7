"""
Game session: the target, one step of guess history and the overlays.

Every browser tab gets its own GameSession; the SessionStore keeps them in
process memory only.
"""

import logging
import math
import random
import threading
import time
import uuid
from collections import OrderedDict
from enum import Enum
from typing import Callable, Optional, Union

from hotcold.engine.feedback import Feedback, compute_feedback
from hotcold.engine.geo import Coordinate
from hotcold.engine.input_controller import GuessSubmitted, InputController
from hotcold.engine.mapview import CommandMapView, View
from hotcold.engine.render import RenderAdapter
from hotcold.shared.config import Settings

logger = logging.getLogger("Session")

RECENTER_OFFSET = True
RECENTER_CENTER = "center"


class SetTargetResult(str, Enum):
    OK = "ok"
    INVALID_ARGUMENT = "invalid_argument"


class SessionNotFound(KeyError):
    pass


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def random_offset(max_lat: float, max_lng: float, rng: random.Random = None) -> Coordinate:
    """Random camera start offset in [-max_lat, max_lat] x [-max_lng, max_lng] degrees."""
    rng = rng or random
    return Coordinate(lat=rng.uniform(-max_lat, max_lat), lng=rng.uniform(-max_lng, max_lng))


class GameSession:
    def __init__(
        self,
        session_id: str,
        target: Coordinate,
        start_offset: Coordinate,
        settings: Settings,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.id = session_id
        self.target = target
        self.start_offset = start_offset
        self.reveal_radius_m = settings.REVEAL_RADIUS_M
        self.hot_radius_m = settings.HOT_RADIUS_M
        self.previous_distance_m: Optional[float] = None
        self.debug_marker_id: Optional[str] = None
        self.lock = threading.Lock()

        start = Coordinate(lat=target.lat + start_offset.lat, lng=target.lng + start_offset.lng)
        self.map_view = CommandMapView(View(center=start, zoom=settings.START_ZOOM))
        self.renderer = RenderAdapter(self.map_view)

        self.controller = InputController(
            self.map_view,
            debounce_ms=settings.DEBOUNCE_MS,
            debounce_distance_m=settings.DEBOUNCE_DISTANCE_M,
            clock=clock,
        )

    @classmethod
    def create(cls, settings: Settings, rng: random.Random = None, clock: Callable[[], float] = time.monotonic) -> "GameSession":
        return cls(
            session_id=uuid.uuid4().hex,
            target=Coordinate(lat=settings.TARGET_LAT, lng=settings.TARGET_LNG),
            start_offset=random_offset(settings.START_OFFSET_LAT, settings.START_OFFSET_LNG, rng),
            settings=settings,
            clock=clock,
        )

    def handle_guess(self, guess: GuessSubmitted) -> Feedback:
        feedback = compute_feedback(
            guess.coordinate,
            self.target,
            self.previous_distance_m,
            self.reveal_radius_m,
            self.hot_radius_m,
        )
        self.renderer.draw(guess.coordinate, feedback)
        # 라벨 계산 후에 갱신 (다음 비교용)
        self.previous_distance_m = feedback.distance_m

        if feedback.revealed:
            logger.info(f"Session {self.id[:8]}: target found via {guess.source}")
        return feedback

    def set_target(
        self,
        lat,
        lng,
        recenter: Union[bool, str, None] = None,
        zoom: Optional[float] = None,
        debug: bool = False,
    ) -> SetTargetResult:
        """
        Replace the target and forget everything tied to the old one.

        recenter=True puts the view at target + start offset, "center"
        centers exactly on the target, anything else leaves the view alone.
        zoom only applies when recentering.
        """
        if not _is_number(lat) or not _is_number(lng):
            logger.warning(f"set_target requires numeric lat and lng, got {lat!r}, {lng!r}")
            return SetTargetResult.INVALID_ARGUMENT

        if zoom is not None and not _is_number(zoom):
            logger.warning(f"set_target ignoring non-numeric zoom {zoom!r}, keeping current zoom")
            zoom = None

        self.target = Coordinate(lat=float(lat), lng=float(lng))

        self.renderer.clear()
        if self.debug_marker_id is not None:
            self.map_view.remove_layer(self.debug_marker_id)
            self.debug_marker_id = None
        self.previous_distance_m = None
        self.controller.reset()

        if recenter is RECENTER_OFFSET:
            center = Coordinate(lat=self.target.lat + self.start_offset.lat, lng=self.target.lng + self.start_offset.lng)
            self.map_view.set_view(center, zoom)
        elif recenter == RECENTER_CENTER:
            self.map_view.set_view(self.target, zoom)

        if debug:
            self.debug_marker_id = self.map_view.add_marker(self.target, popup="Target set")

        logger.info(f"Session {self.id[:8]}: target replaced")
        return SetTargetResult.OK


class SessionStore:
    def __init__(self, settings: Settings):
        self.settings = settings
        self._sessions: "OrderedDict[str, GameSession]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self):
        return len(self._sessions)

    def create(self) -> GameSession:
        session = GameSession.create(self.settings)
        with self._lock:
            while len(self._sessions) >= self.settings.MAX_SESSIONS:
                evicted, _ = self._sessions.popitem(last=False)
                logger.info(f"Session store full, evicted {evicted[:8]}")
            self._sessions[session.id] = session
        return session

    def get(self, session_id: str) -> GameSession:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session
