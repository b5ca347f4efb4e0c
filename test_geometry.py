"""
Tests for the geometry kernel.

Usage:
    python -m pytest test_geometry.py
    python test_geometry.py
"""
import math

import pytest

from polynav.geometry import (
    Point,
    closest_point_on_polygon,
    closest_point_on_segment,
    distance_point_to_polygon,
    distance_point_to_segment,
    is_clockwise,
    line_intersection,
    path_length,
    point_in_polygon,
    polygon_area,
    polygon_centroid,
    segment_intersection,
    segment_intersects_polygon,
    segments_intersect,
    signed_area,
    to_point,
    to_polygon,
)


SQUARE = to_polygon([(0, 0), (10, 0), (10, 10), (0, 10)])
# Concave "L" shape
L_SHAPE = to_polygon([(0, 0), (20, 0), (20, 10), (10, 10), (10, 20), (0, 20)])


def test_point_in_polygon():
    """Inside/outside on convex and concave polygons."""
    assert point_in_polygon(Point(5, 5), SQUARE)
    assert not point_in_polygon(Point(15, 5), SQUARE)
    assert not point_in_polygon(Point(-1, -1), SQUARE)

    assert point_in_polygon(Point(5, 15), L_SHAPE)
    assert point_in_polygon(Point(15, 5), L_SHAPE)
    assert not point_in_polygon(Point(15, 15), L_SHAPE), "Notch of the L is outside"


def test_point_in_polygon_degenerate():
    """Fewer than 3 vertices never contain anything."""
    assert not point_in_polygon(Point(0, 0), [])
    assert not point_in_polygon(Point(0, 0), to_polygon([(0, 0), (1, 1)]))


def _inside_l_shape(x: float, y: float) -> bool:
    return 0 < x < 20 and 0 < y < 20 and not (x > 10 and y > 10)


def test_inside_agrees_with_polygon_distance():
    """Off-boundary sample points are classified like the analytic L."""
    for gx in range(-15, 30, 3):
        for gy in range(-15, 30, 3):
            p = Point(gx + 0.5, gy + 0.5)
            d = distance_point_to_polygon(p, L_SHAPE)
            assert d > 0, "Sample grid never touches the boundary"
            assert point_in_polygon(p, L_SHAPE) == _inside_l_shape(p.x, p.y), p


def test_segments_intersect():
    assert segments_intersect(Point(0, 0), Point(10, 10), Point(0, 10), Point(10, 0))
    assert not segments_intersect(Point(0, 0), Point(10, 0), Point(0, 5), Point(10, 5))
    # Shared endpoint
    assert segments_intersect(Point(0, 0), Point(5, 5), Point(5, 5), Point(10, 0))
    # T junction
    assert segments_intersect(Point(0, 5), Point(10, 5), Point(5, 0), Point(5, 5))
    # Collinear, disjoint
    assert not segments_intersect(Point(0, 0), Point(3, 0), Point(5, 0), Point(8, 0))
    # Collinear, overlapping
    assert segments_intersect(Point(0, 0), Point(6, 0), Point(5, 0), Point(8, 0))


def test_segments_intersect_zero_length():
    """Degenerate segments reduce to point-on-segment checks."""
    on = Point(5, 0)
    off = Point(5, 1)
    assert segments_intersect(on, on, Point(0, 0), Point(10, 0))
    assert not segments_intersect(off, off, Point(0, 0), Point(10, 0))
    assert segments_intersect(on, on, on, on)


@pytest.mark.parametrize("a,b,c,d", [
    ((0, 0), (10, 10), (0, 10), (10, 0)),
    ((0, 0), (10, 0), (0, 5), (10, 5)),
    ((0, 0), (3, 0), (5, 0), (8, 0)),
    ((0, 5), (10, 5), (5, 0), (5, 5)),
    ((1, 1), (1, 1), (0, 0), (2, 2)),
    ((0, 0), (4, 7), (3, -2), (-1, 9)),
])
def test_segments_intersect_is_symmetric(a, b, c, d):
    a, b, c, d = (to_point(v) for v in (a, b, c, d))
    assert segments_intersect(a, b, c, d) == segments_intersect(c, d, a, b)


def test_line_intersection():
    p = line_intersection(Point(0, 0), Point(1, 1), Point(0, 10), Point(1, 9))
    assert p.to_tuple() == pytest.approx((5.0, 5.0))

    # Not bounded by the segments
    p = line_intersection(Point(0, 0), Point(1, 0), Point(5, 1), Point(5, 2))
    assert p is not None
    assert p.x == pytest.approx(5.0)
    assert p.y == pytest.approx(0.0)

    assert line_intersection(Point(0, 0), Point(10, 0), Point(0, 1), Point(10, 1)) is None


def test_segment_intersection():
    p = segment_intersection(Point(0, 0), Point(10, 10), Point(0, 10), Point(10, 0))
    assert p is not None
    assert (p.x, p.y) == pytest.approx((5.0, 5.0))

    # Lines cross but outside the first segment
    assert segment_intersection(Point(0, 0), Point(1, 0), Point(5, -1), Point(5, 1)) is None
    # Parallel
    assert segment_intersection(Point(0, 0), Point(10, 0), Point(0, 1), Point(10, 1)) is None


def test_segment_intersects_polygon():
    assert segment_intersects_polygon(Point(-5, 5), Point(15, 5), SQUARE)
    assert not segment_intersects_polygon(Point(-5, -5), Point(-5, 15), SQUARE)
    # Fully inside: touches no edge
    assert not segment_intersects_polygon(Point(2, 2), Point(8, 8), SQUARE)


def test_closest_point_on_segment():
    a, b = Point(0, 0), Point(10, 0)
    assert closest_point_on_segment(Point(5, 5), a, b) == Point(5, 0)
    # Clamped to the endpoints
    assert closest_point_on_segment(Point(-5, 3), a, b) == Point(0, 0)
    assert closest_point_on_segment(Point(20, -3), a, b) == Point(10, 0)
    # Zero-length segment
    assert closest_point_on_segment(Point(3, 4), a, a) == a


def test_distances():
    assert distance_point_to_segment(Point(5, 5), Point(0, 0), Point(10, 0)) == pytest.approx(5.0)
    assert distance_point_to_segment(Point(3, 4), Point(0, 0), Point(0, 0)) == pytest.approx(5.0)

    assert distance_point_to_polygon(Point(15, 5), SQUARE) == pytest.approx(5.0)
    assert distance_point_to_polygon(Point(5, 5), SQUARE) == pytest.approx(5.0)
    assert distance_point_to_polygon(Point(13, 14), SQUARE) == pytest.approx(5.0)
    assert distance_point_to_polygon(Point(0, 0), []) == math.inf


def test_closest_point_on_polygon():
    assert closest_point_on_polygon(Point(15, 5), SQUARE).to_tuple() == pytest.approx((10.0, 5.0))
    assert closest_point_on_polygon(Point(-3, -4), SQUARE).to_tuple() == pytest.approx((0.0, 0.0))
    assert closest_point_on_polygon(Point(1, 1), []) is None


def test_large_polygon_distance_matches_edge_scan():
    """Many-vertex polygons take the vectorised path; results agree per edge."""
    n = 40
    circle = to_polygon(
        [(100 * math.cos(2 * math.pi * k / n), 100 * math.sin(2 * math.pi * k / n)) for k in range(n)]
    )

    for p in (Point(0, 0), Point(150, 20), Point(-70, 75), Point(99, 0)):
        expected = min(
            distance_point_to_segment(p, circle[i], circle[(i + 1) % n]) for i in range(n)
        )
        assert distance_point_to_polygon(p, circle) == pytest.approx(expected)
        closest = closest_point_on_polygon(p, circle)
        assert math.hypot(closest.x - p.x, closest.y - p.y) == pytest.approx(expected)


def test_signed_area_and_winding():
    """Negative area is clockwise on a y-down screen."""
    assert signed_area(SQUARE) == pytest.approx(-100.0)
    assert is_clockwise(SQUARE)

    reversed_square = list(reversed(SQUARE))
    assert signed_area(reversed_square) == pytest.approx(100.0)
    assert not is_clockwise(reversed_square)

    assert polygon_area(L_SHAPE) == pytest.approx(300.0)
    assert signed_area(to_polygon([(0, 0), (1, 1)])) == 0.0


def test_centroid_and_path_length():
    assert polygon_centroid(SQUARE).to_tuple() == pytest.approx((5.0, 5.0))
    assert polygon_centroid([]) is None

    path = to_polygon([(0, 0), (3, 4), (3, 10)])
    assert path_length(path) == pytest.approx(11.0)
    assert path_length(path[:1]) == math.inf


def test_to_point_coercion():
    assert to_point((1, 2)) == Point(1.0, 2.0)
    assert to_point(Point(3, 4)) == Point(3, 4)
    with pytest.raises(ValueError):
        to_point((1, 2, 3))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
