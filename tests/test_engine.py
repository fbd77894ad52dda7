"""
Unit tests for the HotCold geo math, feedback and render helpers.
"""

import math

import pytest

from hotcold.engine.feedback import choose_label, compute_feedback, compute_heat
from hotcold.engine.geo import Coordinate, distance, format_coordinate, format_degrees, haversine_m
from hotcold.engine.render import heat_color, lerp_rgb, marker_radius_px, popup_html, ring_radius_m, visual_heat
from hotcold.shared.constants import COLD_RGB, HOT_RGB

TARGET = Coordinate(lat=32 + 42.568 / 60, lng=35 + 6.469 / 60)
METERS_PER_DEG_LAT = 6371000 * math.pi / 180
REVEAL = 20.0
HOT = 1200.0


def north_of(origin: Coordinate, meters: float) -> Coordinate:
    return Coordinate(lat=origin.lat + meters / METERS_PER_DEG_LAT, lng=origin.lng)


def test_haversine_distance():
    # 0.001 degree of latitude is roughly 111.2 meters
    d = haversine_m(37.49794, 127.02764, 37.49894, 127.02764)
    assert 110 < d < 112


def test_distance_coincident_is_zero():
    assert distance(TARGET, TARGET) == 0.0


def test_distance_is_symmetric():
    a = Coordinate(lat=32.1, lng=34.8)
    b = Coordinate(lat=-12.5, lng=130.2)
    assert distance(a, b) == pytest.approx(distance(b, a))


def test_distance_nan_propagates():
    assert math.isnan(distance(Coordinate(lat=float("nan"), lng=0.0), TARGET))


def test_nan_distance_is_not_hot():
    assert math.isnan(compute_heat(float("nan"), HOT))

    fb = compute_feedback(Coordinate(lat=float("nan"), lng=0.0), TARGET, None, REVEAL, HOT)
    assert fb.label == "Cold"
    assert fb.revealed is False
    assert fb.to_public_dict()["heat"] is None
    assert heat_color(visual_heat(fb.heat)) == "rgb(44,152,240)"


def test_format_degrees_with_axis():
    assert format_degrees(-33.5, "lat") == "S 33° 30.000'"
    assert format_degrees(12.25, "lng") == "E 12° 15.000'"
    assert format_degrees(-0.75, "lng") == "W 0° 45.000'"


def test_format_degrees_without_axis_keeps_legacy_suffix():
    assert format_degrees(33.5) == "33° 30.000'"
    assert format_degrees(-33.5) == "33° 30.000'W/S"


def test_format_degrees_rejects_unknown_axis():
    with pytest.raises(ValueError):
        format_degrees(1.0, "alt")


def test_format_coordinate_target():
    assert format_coordinate(TARGET) == "N 32° 42.568'  E 35° 6.469'"


def test_heat_bounds():
    assert compute_heat(0.0, HOT) == 1.0
    assert compute_heat(HOT, HOT) == 0.0
    assert compute_heat(HOT * 5, HOT) == 0.0
    assert compute_heat(600.0, HOT) == pytest.approx(0.5)


def test_heat_is_non_increasing():
    heats = [compute_heat(d, HOT) for d in range(0, 2000, 25)]
    assert all(a >= b for a, b in zip(heats, heats[1:]))


@pytest.mark.parametrize("previous", [None, 5.0, 900.0])
def test_found_within_reveal_radius_regardless_of_history(previous):
    assert choose_label(REVEAL, compute_heat(REVEAL, HOT), previous, REVEAL) == "FOUND"
    assert choose_label(REVEAL + 0.01, compute_heat(REVEAL, HOT), previous, REVEAL) != "FOUND"


@pytest.mark.parametrize("heat,label", [(0.8, "Very Hot"), (0.72, "Very Hot"), (0.5, "Warm"), (0.36, "Warm"), (0.1, "Cold")])
def test_first_guess_tiers(heat, label):
    d = (1 - heat) * HOT
    assert choose_label(d, heat, None, REVEAL) == label


@pytest.mark.parametrize("d,label", [(400.0, "Warmer"), (600.0, "Colder"), (500.3, "Same"), (499.6, "Same")])
def test_relative_labels(d, label):
    assert choose_label(d, compute_heat(d, HOT), 500.0, REVEAL) == label


def test_compute_feedback_reveals_target():
    fb = compute_feedback(north_of(TARGET, 10), TARGET, None, REVEAL, HOT)
    assert fb.label == "FOUND"
    assert fb.revealed is True
    assert fb.target_text == "N 32° 42.568'  E 35° 6.469'"
    assert fb.distance_m == pytest.approx(10, abs=1e-3)


def test_compute_feedback_hides_target_until_found():
    fb = compute_feedback(north_of(TARGET, 240), TARGET, None, REVEAL, HOT)
    assert fb.label == "Very Hot"
    assert fb.heat == pytest.approx(0.8, abs=1e-6)
    assert fb.target_text is None
    assert "coordinates" not in fb.to_public_dict()
    assert "distance_m" not in fb.to_public_dict()


def test_color_endpoints():
    assert lerp_rgb(0.0) == COLD_RGB
    assert lerp_rgb(1.0) == HOT_RGB
    assert heat_color(0.0) == "rgb(44,152,240)"
    assert heat_color(1.0) == "rgb(226,75,75)"


def test_marker_and_ring_radius():
    assert marker_radius_px(0.0) == 6
    assert marker_radius_px(0.5) == 9
    assert marker_radius_px(1.0) == 12
    assert ring_radius_m(3.0) == 20
    assert ring_radius_m(150.0) == 150.0
    assert ring_radius_m(5000.0) == 300


def test_popup_html():
    cold = compute_feedback(north_of(TARGET, 1100), TARGET, None, REVEAL, HOT)
    assert popup_html(cold) == "<strong>Cold</strong>"

    found = compute_feedback(TARGET, TARGET, 300.0, REVEAL, HOT)
    html = popup_html(found)
    assert html.startswith("<strong>FOUND</strong>")
    assert "Coordinates: N 32° 42.568&#x27;" in html
