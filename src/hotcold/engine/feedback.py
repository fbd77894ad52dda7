"""
Proximity feedback: distance -> heat -> label.

compute_feedback() is pure. It reads the previous distance but never
writes it; the session records the new distance after the label is chosen.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

from hotcold.engine.geo import Coordinate, distance, format_coordinate
from hotcold.shared.constants import (
    LABEL_COLD,
    LABEL_COLDER,
    LABEL_FOUND,
    LABEL_SAME,
    LABEL_VERY_HOT,
    LABEL_WARM,
    LABEL_WARMER,
    SAME_TOLERANCE_M,
    VERY_HOT_HEAT,
    WARM_HEAT,
)

logger = logging.getLogger("Feedback")


@dataclass(frozen=True)
class Feedback:
    distance_m: float
    heat: float
    label: str
    revealed: bool
    target_text: Optional[str] = None

    def to_public_dict(self):
        """Client payload. The numeric distance is never sent to the browser."""
        payload = {
            "label": self.label,
            "heat": None if math.isnan(self.heat) else round(self.heat, 3),
            "revealed": self.revealed,
        }
        if self.revealed:
            payload["coordinates"] = self.target_text
        return payload


def compute_heat(distance_m: float, hot_radius_m: float) -> float:
    """1.0 at the target, falling linearly to 0.0 at or beyond hot_radius_m. NaN stays NaN."""
    raw = 1 - min(distance_m, hot_radius_m) / hot_radius_m
    if math.isnan(raw):
        return raw
    return max(0.0, min(1.0, raw))


def choose_label(
    distance_m: float,
    heat: float,
    previous_distance_m: Optional[float],
    reveal_radius_m: float,
) -> str:
    if distance_m <= reveal_radius_m:
        return LABEL_FOUND

    # 첫 클릭: heat 단계로 절대 힌트
    if previous_distance_m is None:
        if heat >= VERY_HOT_HEAT:
            return LABEL_VERY_HOT
        if heat >= WARM_HEAT:
            return LABEL_WARM
        return LABEL_COLD

    if distance_m < previous_distance_m - SAME_TOLERANCE_M:
        return LABEL_WARMER
    if distance_m > previous_distance_m + SAME_TOLERANCE_M:
        return LABEL_COLDER
    return LABEL_SAME


def compute_feedback(
    guess: Coordinate,
    target: Coordinate,
    previous_distance_m: Optional[float],
    reveal_radius_m: float,
    hot_radius_m: float,
) -> Feedback:
    d = distance(guess, target)
    heat = compute_heat(d, hot_radius_m)
    label = choose_label(d, heat, previous_distance_m, reveal_radius_m)
    revealed = label == LABEL_FOUND

    logger.debug(f"guess=({guess.lat:.6f}, {guess.lng:.6f}) d={d:.1f}m heat={heat:.3f} label={label}")

    return Feedback(
        distance_m=d,
        heat=heat,
        label=label,
        revealed=revealed,
        target_text=format_coordinate(target) if revealed else None,
    )
