"""
HotCold 공유 상수 정의

기본 타깃 좌표, 피드백 라벨, 마커 색상/반경 등
프로젝트 전역에서 사용되는 불변 값들을 중앙 관리합니다.
"""

# ─── 기본 타깃 (N 32° 42.568'  E 035° 06.469') ─────────────
DEFAULT_TARGET_LAT = 32 + 42.568 / 60
DEFAULT_TARGET_LNG = 35 + 6.469 / 60

# ─── 지구 / 투영 ──────────────────────────────────────────
EARTH_RADIUS_M = 6371000
EPSG_WGS84 = "EPSG:4326"
EPSG_WEB_MERCATOR = "EPSG:3857"    # Leaflet 기본 타일 좌표계
TILE_SIZE_PX = 256

# ─── 피드백 라벨 ──────────────────────────────────────────
LABEL_FOUND = "FOUND"
LABEL_VERY_HOT = "Very Hot"
LABEL_WARM = "Warm"
LABEL_COLD = "Cold"
LABEL_WARMER = "Warmer"
LABEL_COLDER = "Colder"
LABEL_SAME = "Same"

VERY_HOT_HEAT = 0.72
WARM_HEAT = 0.36
SAME_TOLERANCE_M = 0.5             # 거의 같은 거리의 클릭에서 라벨 깜빡임 방지

# ─── 렌더링 ───────────────────────────────────────────────
COLD_RGB = (0x2C, 0x98, 0xF0)
HOT_RGB = (0xE2, 0x4B, 0x4B)
MARKER_MIN_PX = 6
MARKER_GROWTH_PX = 6
RING_MIN_M = 20
RING_MAX_M = 300                   # 정확한 거리를 역산하지 못하도록 클램프

# ─── 입력 ─────────────────────────────────────────────────
CONFIRM_KEY = "Enter"

# ─── 서버 설정 ────────────────────────────────────────────
DEV_PORT = 8000
API_VERSION = "1.0.0"
