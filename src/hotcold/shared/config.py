from pydantic_settings import BaseSettings

from hotcold.shared.constants import DEFAULT_TARGET_LAT, DEFAULT_TARGET_LNG, DEV_PORT


class Settings(BaseSettings):
    TARGET_LAT: float = DEFAULT_TARGET_LAT
    TARGET_LNG: float = DEFAULT_TARGET_LNG
    REVEAL_RADIUS_M: float = 20.0        # 이 거리 이내면 좌표 공개
    HOT_RADIUS_M: float = 1200.0         # heat 그라데이션 반경
    START_ZOOM: int = 7
    START_OFFSET_LAT: float = 0.6        # 시작 화면 랜덤 오프셋 (±도)
    START_OFFSET_LNG: float = 1.2
    TILE_URL: str = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
    MAX_ZOOM: int = 19
    DEBOUNCE_MS: int = 350
    DEBOUNCE_DISTANCE_M: float = 1.0
    MAX_SESSIONS: int = 1000
    HOST: str = "0.0.0.0"
    PORT: int = DEV_PORT
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "HOTCOLD_"}


settings = Settings()
