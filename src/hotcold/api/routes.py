"""
HotCold game API

브라우저(Leaflet)는 원시 UI 이벤트만 전달하고,
서버가 거리/heat/라벨을 계산해 그리기 명령 목록을 돌려줍니다.

엔드포인트:
    POST /api/v1/sessions
    POST /api/v1/sessions/{session_id}/events
    POST /api/v1/sessions/{session_id}/target
"""

import logging
from typing import Any, Dict, Literal, Optional

from fastapi import APIRouter, Body, HTTPException
from pydantic import BaseModel

from hotcold.engine.geo import Coordinate
from hotcold.engine.input_controller import GuessSubmitted
from hotcold.engine.mapview import View
from hotcold.engine.session import GameSession, SessionNotFound, SessionStore
from hotcold.shared.config import settings

logger = logging.getLogger("GameAPI")

router = APIRouter(prefix="/api/v1", tags=["game"])

store = SessionStore(settings)


class ViewState(BaseModel):
    model_config = {"allow_inf_nan": False}

    lat: float
    lng: float
    zoom: float
    width: Optional[int] = None
    height: Optional[int] = None

    def to_view(self) -> View:
        return View(center=Coordinate(lat=self.lat, lng=self.lng), zoom=self.zoom, width=self.width, height=self.height)


class EventRequest(BaseModel):
    model_config = {"allow_inf_nan": False}

    type: Literal["click", "key", "touchend"]
    lat: Optional[float] = None
    lng: Optional[float] = None
    key: Optional[str] = None
    x: Optional[float] = None
    y: Optional[float] = None
    view: Optional[ViewState] = None


def _get_session(session_id: str) -> GameSession:
    try:
        return store.get(session_id)
    except SessionNotFound:
        raise HTTPException(status_code=404, detail=f"SESSION_NOT_FOUND: {session_id}")


def _dispatch(session: GameSession, event: EventRequest) -> Optional[GuessSubmitted]:
    controller = session.controller
    if event.type == "click":
        if event.lat is None or event.lng is None:
            raise HTTPException(status_code=422, detail="INVALID_EVENT: click requires lat and lng")
        return controller.on_click(event.lat, event.lng)
    if event.type == "key":
        if event.key is None:
            raise HTTPException(status_code=422, detail="INVALID_EVENT: key event requires key")
        return controller.on_key(event.key)
    if event.x is None or event.y is None:
        raise HTTPException(status_code=422, detail="INVALID_EVENT: touchend requires x and y")
    return controller.on_touch_end(event.x, event.y)


@router.post("/sessions")
def create_session():
    """새 게임 세션 생성 (타깃은 숨기고 시작 화면만 전달)"""
    session = store.create()
    view = session.map_view.get_view()
    logger.info(f"Session {session.id[:8]} created ({len(store)} active)")
    return {
        "session_id": session.id,
        "view": {"lat": view.center.lat, "lng": view.center.lng, "zoom": view.zoom},
        "map": {"tile_url": settings.TILE_URL, "max_zoom": settings.MAX_ZOOM},
    }


@router.post("/sessions/{session_id}/events")
def post_event(session_id: str, event: EventRequest):
    """
    클릭 / Enter 키 / touchend → 추측 1회

    Response:
        {
            "accepted": true,
            "feedback": { "label": "Warmer", "heat": 0.41, "revealed": false },
            "commands": [ { "op": "remove_layer", ... }, ... ]
        }
    """
    session = _get_session(session_id)

    with session.lock:
        if event.view is not None:
            session.map_view.sync_view(event.view.to_view())
        guess = _dispatch(session, event)
        feedback = session.handle_guess(guess) if guess is not None else None
        commands = session.map_view.drain()

    return {
        "accepted": guess is not None,
        "feedback": feedback.to_public_dict() if feedback is not None else None,
        "commands": commands,
    }


@router.post("/sessions/{session_id}/target")
def set_target(session_id: str, payload: Dict[str, Any] = Body(...)):
    """
    타깃 교체 (콘솔/스크립트용)

    Request:
        { "lat": 32.7094, "lng": 35.1078, "recenter": true, "zoom": 13, "debug": false }

    숫자가 아닌 lat/lng는 에러 없이 result="invalid_argument"로 무시됩니다.
    """
    session = _get_session(session_id)

    with session.lock:
        result = session.set_target(
            payload.get("lat"),
            payload.get("lng"),
            recenter=payload.get("recenter"),
            zoom=payload.get("zoom"),
            debug=payload.get("debug") is True,
        )
        commands = session.map_view.drain()

    return {"result": result.value, "commands": commands}
