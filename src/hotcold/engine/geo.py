"""
Great-circle distance and degree formatting utilities.
"""

import math
from dataclasses import dataclass
from math import radians, sin, cos, sqrt, atan2
from typing import Optional

from hotcold.shared.constants import EARTH_RADIUS_M

_HEMISPHERES = {"lat": ("N", "S"), "lng": ("E", "W")}


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lng: float


def haversine_m(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Calculate the distance in meters between two WGS84 coordinates.
    """
    dlat = radians(lat2 - lat1)
    dlng = radians(lng2 - lng1)

    a = sin(dlat / 2) ** 2 + cos(radians(lat1)) * cos(radians(lat2)) * sin(dlng / 2) ** 2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))

    return EARTH_RADIUS_M * c


def distance(a: Coordinate, b: Coordinate) -> float:
    return haversine_m(a.lat, a.lng, b.lat, b.lng)


def format_degrees(value: float, axis: Optional[str] = None) -> str:
    """
    Convert signed decimal degrees to D° MM.mmm'.

    With an axis hint ("lat" or "lng") the hemisphere letter is written
    as a prefix: format_degrees(-33.5, "lat") -> "S 33° 30.000'".
    Without a hint a negative value keeps the legacy "W/S" suffix.
    """
    negative = value < 0
    deg = math.floor(abs(value))
    minutes = (abs(value) - deg) * 60
    text = f"{deg}° {minutes:.3f}'"

    if axis is None:
        return f"{text}W/S" if negative else text
    if axis not in _HEMISPHERES:
        raise ValueError(f"axis must be 'lat' or 'lng', got {axis!r}")

    positive_letter, negative_letter = _HEMISPHERES[axis]
    return f"{negative_letter if negative else positive_letter} {text}"


def format_coordinate(coord: Coordinate) -> str:
    return f"{format_degrees(coord.lat, 'lat')}  {format_degrees(coord.lng, 'lng')}"
