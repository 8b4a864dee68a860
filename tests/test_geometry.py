"""Tests for bezier construction, offsetting and end caps."""

import pytest

from phototopo.geometry import (
    BezierCurve,
    CapKind,
    arrowhead,
    control_points,
    fmt,
    offset_bezier,
    round_tenth,
    tee_bar,
    unscale,
)


def test_round_tenth_rounds_halves_up():
    assert round_tenth(1.25) == pytest.approx(1.3)
    assert round_tenth(-1.25) == pytest.approx(-1.2)
    assert round_tenth(3.04) == pytest.approx(3.0)


def test_fmt_drops_trailing_zero():
    assert fmt(10.0) == "10"
    assert fmt(2.5) == "2.5"
    assert fmt(7) == "7"


def test_control_points_follow_handles():
    """Handle 1 leaves the start forwards, handle 2 enters the end backwards."""
    points = control_points((0, 0), (10, 0), (4, 0), (4, 0))
    assert points == [(0, 0), (4, 0), (6, 0), (10, 0)]


def test_bezier_svg_part():
    curve = BezierCurve((0, 0), (4, 0), (6, 0.5), (10, 0))
    assert curve.svg_part() == "C4 0 6 0.5 10 0"
    assert curve.points[-1] == (10, 0)


def test_offset_straight_line_is_parallel():
    points = [(0, 0), (4, 0), (6, 0), (10, 0)]
    offset = offset_bezier(points, 2, 2)
    assert [p[0] for p in offset] == pytest.approx([0, 4, 6, 10])
    assert [p[1] for p in offset] == pytest.approx([2, 2, 2, 2])


def test_offset_interpolates_between_ends():
    points = [(0, 0), (3, 0), (6, 0), (9, 0)]
    offset = offset_bezier(points, 0, 3)
    assert [p[1] for p in offset] == pytest.approx([0, 1, 2, 3])


def test_offset_survives_full_reversal():
    """A control polygon that doubles back must not divide by zero."""
    points = [(0, 0), (5, 0), (0, 0), (5, 0)]
    offset = offset_bezier(points, 1, 1)
    assert len(offset) == 4


def test_unscale_rounds_to_photo_pixels():
    assert unscale(101, 2) == 51
    assert unscale(100, 1) == 100
    assert unscale(33.4) == 33


def test_arrowhead_points_along_angle():
    cap = arrowhead(0, 50, 10, 5)
    assert cap.kind is CapKind.ARROW
    assert len(cap.points) == 6
    # Tip sits past the route end in the direction of travel
    assert cap.points[3] == pytest.approx((55.8, 10))
    assert cap.points[0] == pytest.approx((47, 10))


def test_arrowhead_rotates():
    """Pointing down the page puts the tip below the end."""
    import math

    cap = arrowhead(math.pi / 2, 50, 10, 5)
    assert cap.points[3] == pytest.approx((50, 15.8))


def test_tee_bar_spans_across_route():
    cap = tee_bar(0, 20, 20, 5)
    assert cap.kind is CapKind.TEE
    ys = [p[1] for p in cap.points]
    xs = [p[0] for p in cap.points]
    assert max(ys) - min(ys) == pytest.approx(20)
    assert max(xs) - min(xs) == pytest.approx(0.5, abs=0.11)


def test_cap_svg_part_uses_line_segments():
    cap = tee_bar(0, 20, 20, 5)
    part = cap.svg_part()
    assert part.count("L") == 6
