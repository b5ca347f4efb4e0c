"""
Polygon obstacle store.

Holds the raw obstacle polygons in insertion order and keeps, for each one,
a copy offset outward by a safety margin. The corners of those expanded
copies are the nodes of the visibility graph.
"""
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple
import logging

from ..geometry import (
    Point,
    PointLike,
    Polygon,
    line_intersection,
    segment_intersection,
    segment_intersects_polygon,
    signed_area,
    to_point,
    to_polygon,
)
from .base import IntersectionResult

logger = logging.getLogger(__name__)


@dataclass
class ObstacleStoreConfig:
    """Configuration for the obstacle store."""
    width: float = 800.0
    height: float = 600.0
    expansion_margin: float = 5.0  # Outward offset of expanded obstacles

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Store dimensions must be positive, got {self.width}x{self.height}"
            )
        if self.expansion_margin < 0:
            raise ValueError(f"expansion_margin must be >= 0, got {self.expansion_margin}")


def _offset_edges(
    polygon: Sequence[Point], offset: float, flip: bool
) -> List[Tuple[Point, Point]]:
    """Every non-degenerate edge moved `offset` along one of its normals."""
    lines = []
    n = len(polygon)

    for i in range(n):
        current = polygon[i]
        nxt = polygon[(i + 1) % n]

        dx = nxt.x - current.x
        dy = nxt.y - current.y
        length = (dx * dx + dy * dy) ** 0.5
        if length == 0:
            continue

        normal_x = -dy / length
        normal_y = dx / length
        if flip:
            normal_x, normal_y = -normal_x, -normal_y

        lines.append((
            Point(current.x + normal_x * offset, current.y + normal_y * offset),
            Point(nxt.x + normal_x * offset, nxt.y + normal_y * offset),
        ))

    return lines


def offset_polygon(polygon: Sequence[Point], offset: float, flip: bool = False) -> Polygon:
    """
    Offset a polygon by moving each edge along its normal.

    Vertex i of the result is where the offset lines of the two edges meeting
    at source vertex i cross. Parallel neighbours fall back to the end of the
    incoming offset edge.
    """
    lines = _offset_edges(polygon, offset, flip)
    vertices: Polygon = []

    for i in range(len(lines)):
        incoming = lines[i - 1]
        outgoing = lines[i]

        corner = line_intersection(incoming[0], incoming[1], outgoing[0], outgoing[1])
        vertices.append(corner if corner is not None else incoming[1])

    return vertices


def expand_polygon(polygon: Sequence[PointLike], margin: float) -> Polygon:
    """
    Grow a polygon outward by `margin`.

    Which normal points outward depends on the winding, so both directions
    are tried and the one with the larger absolute area wins. Polygons with
    fewer than 3 vertices are returned unchanged.
    """
    points = to_polygon(polygon)
    if len(points) < 3:
        return points

    grown = offset_polygon(points, margin, flip=False)
    shrunk = offset_polygon(points, margin, flip=True)

    if abs(signed_area(grown)) > abs(signed_area(shrunk)):
        return grown
    return shrunk


class ObstacleStore:
    """
    Append-only store of raw and expanded obstacle polygons.

    Obstacles are identified by their insertion index and never removed.
    `version` increases on every change to the stored geometry so that
    derived caches can tell when they are stale.
    """

    def __init__(self, config: Optional[ObstacleStoreConfig] = None):
        self.config = config or ObstacleStoreConfig()

        self._obstacles: List[Polygon] = []
        self._expanded: List[Polygon] = []
        self._goal = Point(self.config.width / 2, self.config.height / 2)
        self._version = 0

    @property
    def version(self) -> int:
        return self._version

    @property
    def obstacle_count(self) -> int:
        return len(self._obstacles)

    @property
    def expansion_margin(self) -> float:
        return self.config.expansion_margin

    def set_goal(self, goal: PointLike) -> None:
        """Replace the goal. Dependent caches are the caller's concern."""
        self._goal = to_point(goal)

    def get_goal(self) -> Point:
        return self._goal

    def add_obstacle(self, polygon: Iterable[PointLike]) -> int:
        """
        Register an obstacle and derive its expanded outline.

        No merging, deduplication or validation is done.

        Returns:
            Index of the new obstacle
        """
        points = to_polygon(polygon)
        self._obstacles.append(points)
        self._expanded.append(expand_polygon(points, self.config.expansion_margin))
        self._version += 1

        index = len(self._obstacles) - 1
        logger.debug(
            "Added obstacle %d (%d vertices), store version %d",
            index, len(points), self._version,
        )
        return index

    def set_expansion_margin(self, margin: float) -> None:
        """Change the safety margin and re-derive every expanded obstacle."""
        if margin < 0:
            raise ValueError(f"margin must be >= 0, got {margin}")
        self.config.expansion_margin = margin
        self._expanded = [expand_polygon(p, margin) for p in self._obstacles]
        self._version += 1

    def get_obstacles(self) -> List[Polygon]:
        return [list(p) for p in self._obstacles]

    def get_expanded_obstacles(self) -> List[Polygon]:
        return [list(p) for p in self._expanded]

    def test_path_clear(self, start: PointLike, end: PointLike) -> bool:
        """True if the segment touches no raw obstacle edge."""
        a = to_point(start)
        b = to_point(end)
        for obstacle in self._obstacles:
            if segment_intersects_polygon(a, b, obstacle):
                return False
        return True

    def test_line_intersections(self, start: PointLike, end: PointLike) -> IntersectionResult:
        """Every point where the segment crosses a raw obstacle edge."""
        a = to_point(start)
        b = to_point(end)
        result = IntersectionResult()

        for obstacle in self._obstacles:
            n = len(obstacle)
            for i in range(n):
                hit = segment_intersection(a, b, obstacle[i], obstacle[(i + 1) % n])
                if hit is not None:
                    result.intersects = True
                    result.points.append(hit)

        return result

    def __repr__(self) -> str:
        return (
            f"ObstacleStore(obstacles={len(self._obstacles)}, "
            f"margin={self.config.expansion_margin}, version={self._version})"
        )
