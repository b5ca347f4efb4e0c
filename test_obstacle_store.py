"""
Tests for the obstacle store and polygon expansion.

Usage:
    python -m pytest test_obstacle_store.py
"""
import math

import pytest

from polynav.geometry import (
    Point,
    point_in_polygon,
    polygon_area,
    polygon_centroid,
    to_polygon,
)
from polynav.navigation import (
    ObstacleStore,
    ObstacleStoreConfig,
    expand_polygon,
    offset_polygon,
)


SQUARE = [(100, 100), (150, 100), (150, 150), (100, 150)]


def _regular_polygon(n: int, radius: float, cx: float = 0.0, cy: float = 0.0):
    return [
        (cx + radius * math.cos(2 * math.pi * k / n), cy + radius * math.sin(2 * math.pi * k / n))
        for k in range(n)
    ]


def test_expand_square_scenario():
    """Square (100,100)-(150,150) with margin 5 grows to (95,95)-(155,155)."""
    expanded = expand_polygon(SQUARE, 5)
    original = to_polygon(SQUARE)

    assert len(expanded) == 4
    assert polygon_area(expanded) > polygon_area(original)
    assert polygon_area(expanded) == pytest.approx(60 * 60)

    center = polygon_centroid(expanded)
    assert center.to_tuple() == pytest.approx((125.0, 125.0))

    # Vertex i of the expansion belongs to source vertex i
    expected = [(95, 95), (155, 95), (155, 155), (95, 155)]
    for got, want in zip(expanded, expected):
        assert got.to_tuple() == pytest.approx(want)


@pytest.mark.parametrize("vertices", [
    _regular_polygon(3, 40, 200, 200),
    _regular_polygon(6, 25, 300, 100),
    list(reversed(_regular_polygon(6, 25, 300, 100))),
    list(reversed(SQUARE)),
    [(0, 0), (80, 10), (60, 70), (5, 40)],
])
def test_expansion_grows_convex_polygons(vertices):
    """Either winding: more area, same vertex count."""
    for margin in (0.5, 5.0, 15.0):
        expanded = expand_polygon(vertices, margin)
        assert len(expanded) == len(vertices)
        assert polygon_area(expanded) > polygon_area(to_polygon(vertices))


def test_expanded_polygon_contains_original():
    expanded = expand_polygon(SQUARE, 5)
    for v in to_polygon(SQUARE):
        assert point_in_polygon(v, expanded)


def test_expand_degenerate_inputs():
    """Fewer than 3 vertices pass through unchanged."""
    assert expand_polygon([], 5) == []
    segment = [(0, 0), (10, 0)]
    assert expand_polygon(segment, 5) == to_polygon(segment)


def test_expand_skips_zero_length_edges():
    with_duplicate = [(0, 0), (10, 0), (10, 0), (10, 10), (0, 10)]
    expanded = expand_polygon(with_duplicate, 2)
    assert len(expanded) == 4
    assert polygon_area(expanded) == pytest.approx(14 * 14)


def test_expand_parallel_edges_fall_back_to_endpoint():
    """Collinear consecutive edges never intersect; the offset endpoint is used."""
    collinear = [(0, 0), (5, 0), (10, 0), (10, 10), (0, 10)]
    expanded = expand_polygon(collinear, 5)

    assert len(expanded) == 5
    assert expanded[1].to_tuple() == pytest.approx((5.0, -5.0))
    assert expanded[0].to_tuple() == pytest.approx((-5.0, -5.0))


def test_offset_polygon_directions():
    """One normal direction shrinks, the other grows."""
    square = to_polygon(SQUARE)
    a = offset_polygon(square, 5, flip=False)
    b = offset_polygon(square, 5, flip=True)
    areas = sorted([polygon_area(a), polygon_area(b)])
    assert areas == pytest.approx([40 * 40, 60 * 60])


def test_store_add_obstacle_and_version():
    store = ObstacleStore()
    assert store.version == 0
    assert store.get_goal() == Point(400, 300), "Default goal is the centre"

    index = store.add_obstacle(SQUARE)
    assert index == 0
    assert store.version == 1
    assert store.obstacle_count == 1
    assert store.get_obstacles()[0] == to_polygon(SQUARE)
    assert len(store.get_expanded_obstacles()[0]) == 4

    # Append-only, no deduplication
    store.add_obstacle(SQUARE)
    assert store.obstacle_count == 2
    assert store.version == 2


def test_store_returns_copies():
    store = ObstacleStore()
    store.add_obstacle(SQUARE)
    store.get_obstacles()[0].clear()
    store.get_expanded_obstacles().clear()
    assert len(store.get_obstacles()[0]) == 4
    assert len(store.get_expanded_obstacles()) == 1


def test_store_set_goal_does_not_bump_version():
    store = ObstacleStore()
    store.set_goal((10, 20))
    assert store.get_goal() == Point(10, 20)
    assert store.version == 0


def test_store_set_expansion_margin():
    store = ObstacleStore(ObstacleStoreConfig(expansion_margin=5))
    store.add_obstacle(SQUARE)
    store.set_expansion_margin(10)

    assert store.version == 2
    assert store.expansion_margin == 10
    assert polygon_area(store.get_expanded_obstacles()[0]) == pytest.approx(70 * 70)

    with pytest.raises(ValueError):
        store.set_expansion_margin(-1)


def test_path_clear():
    store = ObstacleStore()
    store.add_obstacle(SQUARE)

    assert not store.test_path_clear((50, 125), (200, 125))
    assert store.test_path_clear((50, 50), (200, 50))
    # Segments along the expanded outline stay clear of the raw obstacle
    assert store.test_path_clear((95, 95), (155, 95))
    # Two opposite expanded corners see each other only through the obstacle
    assert not store.test_path_clear((95, 95), (155, 155))


def test_line_intersections():
    store = ObstacleStore()
    store.add_obstacle(SQUARE)

    result = store.test_line_intersections((50, 125), (200, 125))
    assert result.intersects
    xs = sorted(p.x for p in result.points)
    assert xs == pytest.approx([100.0, 150.0])
    assert all(p.y == pytest.approx(125.0) for p in result.points)

    result = store.test_line_intersections((50, 50), (200, 50))
    assert not result.intersects
    assert result.points == []


def test_config_validation():
    with pytest.raises(ValueError):
        ObstacleStoreConfig(width=0)
    with pytest.raises(ValueError):
        ObstacleStoreConfig(expansion_margin=-5)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
