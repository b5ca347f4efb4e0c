"""
A* pathfinding on an implicit square grid.

The grid is never materialised: a cell is walkable if its centre lies in
bounds, outside every raw obstacle and far enough from every obstacle edge.
Also provides the validity and repulsion queries used for soft steering.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple
import logging
import math
import random

from ..geometry import (
    Point,
    PointLike,
    Polygon,
    closest_point_on_polygon,
    distance_point_to_polygon,
    point_in_polygon,
    segment_intersects_polygon,
    to_point,
    to_polygon,
)

logger = logging.getLogger(__name__)

GridKey = Tuple[int, int]  # Grid cell indices

# (dx, dy, cost multiplier): 4 axis moves then 4 diagonals
DIRECTIONS = [
    (-1, 0, 1.0),
    (1, 0, 1.0),
    (0, -1, 1.0),
    (0, 1, 1.0),
    (-1, -1, math.sqrt(2)),
    (1, -1, math.sqrt(2)),
    (-1, 1, math.sqrt(2)),
    (1, 1, math.sqrt(2)),
]


@dataclass
class PathfindingConfig:
    """Configuration for A* pathfinding and steering queries."""
    width: float = 800.0
    height: float = 600.0
    grid_size: float = 20.0  # Distance between grid nodes

    # Clearance from obstacle edges
    pathfinding_margin: float = 30.0  # Required of every A* node
    validity_margin: float = 2.0  # Required by the public validity checks

    # Repulsion
    repulsion_range: float = 5.0  # Obstacles farther than this are ignored
    repulsion_distance: float = 10.0  # Length of the returned push vector

    # When A* fails, return [start, closest reached node, goal] if it helps
    partial_path_fallback: bool = True
    # Optional cap on expanded nodes; None searches the whole bounded grid
    max_iterations: Optional[int] = None
    smooth_path: bool = False  # Drop waypoints with clear line of sight

    seed: Optional[int] = None  # Seed for the zero-distance repulsion direction

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Grid dimensions must be positive, got {self.width}x{self.height}"
            )
        if self.grid_size <= 0:
            raise ValueError(f"grid_size must be positive, got {self.grid_size}")
        if self.pathfinding_margin < 0 or self.validity_margin < 0:
            raise ValueError("Clearance margins must be >= 0")
        if self.max_iterations is not None and self.max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {self.max_iterations}")


class GridPathfinder:
    """
    A* search over an 8-connected grid of spacing `grid_size`.

    Obstacles are raw polygons kept in insertion order. `obstacle_version`
    goes up on every insertion so callers can detect stale results.
    Cell walkability is cached until the next obstacle is added.
    """

    def __init__(self, config: Optional[PathfindingConfig] = None):
        self.config = config or PathfindingConfig()
        self.width = self.config.width
        self.height = self.config.height
        self.grid_size = self.config.grid_size

        self._obstacles: List[Polygon] = []
        self._obstacle_version = 0
        self._rng = random.Random(self.config.seed)

        # Walkability of grid cells, valid for the current obstacle set
        self._walkable: Dict[GridKey, bool] = {}

    @property
    def obstacle_version(self) -> int:
        return self._obstacle_version

    def add_obstacle(self, polygon: Iterable[PointLike]) -> None:
        self._obstacles.append(to_polygon(polygon))
        self._obstacle_version += 1
        self._walkable.clear()

    def get_obstacles(self) -> List[Polygon]:
        return [list(p) for p in self._obstacles]

    # ------------------------------------------------------------------
    # Validity queries
    # ------------------------------------------------------------------

    def _in_bounds(self, x: float, y: float) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def _is_clear_of_obstacles(self, point: Point, margin: float) -> bool:
        """Outside every obstacle and at least `margin` from its edges."""
        for obstacle in self._obstacles:
            if point_in_polygon(point, obstacle):
                return False
            if distance_point_to_polygon(point, obstacle) < margin:
                return False
        return True

    def _is_valid_position(self, x: float, y: float, margin: float) -> bool:
        if not self._in_bounds(x, y):
            return False
        return self._is_clear_of_obstacles(Point(x, y), margin)

    def is_position_valid(self, x: float, y: float) -> bool:
        """In bounds and keeps the general validity margin from obstacles."""
        return self._is_valid_position(x, y, self.config.validity_margin)

    def is_position_valid_for_movement(
        self, x: float, y: float, allow_off_screen: bool = False
    ) -> bool:
        """
        Like is_position_valid(), optionally accepting off-screen points.

        Spawn points sit outside the visible area, so bounds can be skipped.
        """
        if not allow_off_screen and not self._in_bounds(x, y):
            return False
        return self._is_clear_of_obstacles(Point(x, y), self.config.validity_margin)

    def _is_valid_for_pathfinding(self, x: float, y: float) -> bool:
        return self._is_valid_position(x, y, self.config.pathfinding_margin)

    def is_movement_valid(self, start: PointLike, end: PointLike) -> bool:
        """
        True if moving straight from start to end hits no obstacle.

        A move fails if it crosses an obstacle edge or if either endpoint
        lies inside an obstacle.
        """
        a = to_point(start)
        b = to_point(end)
        for obstacle in self._obstacles:
            if segment_intersects_polygon(a, b, obstacle):
                return False
            if point_in_polygon(a, obstacle) or point_in_polygon(b, obstacle):
                return False
        return True

    def get_repulsion_vector(self, x: float, y: float) -> Optional[Tuple[float, float]]:
        """
        Push vector away from the nearest obstacle, if one is close.

        Returns:
            (dx, dy) of length `repulsion_distance` pointing away from the
            closest boundary point, a random unit vector if the position is
            exactly on the boundary, or None if no obstacle is within
            `repulsion_range`
        """
        point = Point(x, y)
        nearest: Optional[Polygon] = None
        min_distance = math.inf

        for obstacle in self._obstacles:
            d = distance_point_to_polygon(point, obstacle)
            if d < min_distance:
                min_distance = d
                nearest = obstacle

        if nearest is None or min_distance > self.config.repulsion_range:
            return None

        closest = closest_point_on_polygon(point, nearest)
        if closest is None:
            return None

        dx = x - closest.x
        dy = y - closest.y
        dist = math.hypot(dx, dy)

        if dist == 0:
            angle = self._rng.random() * 2 * math.pi
            return (math.cos(angle), math.sin(angle))

        scale = self.config.repulsion_distance / dist
        return (dx * scale, dy * scale)

    # ------------------------------------------------------------------
    # A*
    # ------------------------------------------------------------------

    def _cell(self, value: float) -> int:
        """Index of the nearest grid line, halves rounding up."""
        return math.floor(value / self.grid_size + 0.5)

    def _cell_position(self, key: GridKey) -> Point:
        return Point(key[0] * self.grid_size, key[1] * self.grid_size)

    def _heuristic(self, a: Point, b: Point) -> float:
        return math.hypot(a.x - b.x, a.y - b.y)

    def _is_cell_walkable(self, key: GridKey) -> bool:
        walkable = self._walkable.get(key)
        if walkable is None:
            position = self._cell_position(key)
            walkable = self._is_valid_for_pathfinding(position.x, position.y)
            self._walkable[key] = walkable
        return walkable

    def _get_neighbors(self, key: GridKey) -> List[Tuple[GridKey, float]]:
        """Walkable neighbour cells with their move cost."""
        neighbors = []
        for dx, dy, multiplier in DIRECTIONS:
            neighbor = (key[0] + dx, key[1] + dy)
            if self._is_cell_walkable(neighbor):
                neighbors.append((neighbor, multiplier * self.grid_size))
        return neighbors

    def _reconstruct_path(
        self, keys: List[GridKey], parents: List[int], current: int
    ) -> List[Point]:
        """Walk parent indices back to the start."""
        path = []
        while current != -1:
            path.append(self._cell_position(keys[current]))
            current = parents[current]
        path.reverse()
        return path

    def find_path(self, start: PointLike, goal: PointLike) -> List[Point]:
        """
        Find a grid path from start to goal.

        Both endpoints are snapped to the grid. The start cell itself is not
        checked for clearance.

        Returns:
            Snapped waypoints from start to goal; on failure either the
            three-point partial path [start, closest reached node, goal] or
            an empty list (see PathfindingConfig.partial_path_fallback)
        """
        start_pt = to_point(start)
        goal_pt = to_point(goal)

        start_key = (self._cell(start_pt.x), self._cell(start_pt.y))
        goal_key = (self._cell(goal_pt.x), self._cell(goal_pt.y))
        goal_position = self._cell_position(goal_key)

        # Dense node arena: index -> cell, cost so far, priority, parent index
        keys: List[GridKey] = [start_key]
        g_scores: List[float] = [0.0]
        f_scores: List[float] = [self._heuristic(start_pt, goal_pt)]
        parents: List[int] = [-1]

        open_nodes: List[int] = [0]
        open_index: Dict[GridKey, int] = {start_key: 0}
        # Visit order is kept so the fallback scan is deterministic
        closed: Dict[GridKey, int] = {}
        iterations = 0
        limit = self.config.max_iterations

        while open_nodes:
            if limit is not None and iterations >= limit:
                logger.debug(
                    "A* hit iteration limit (%d) from %s to %s",
                    limit, start_key, goal_key,
                )
                break
            iterations += 1

            # Linear scan for the lowest f; first minimum wins ties
            current = min(open_nodes, key=lambda i: f_scores[i])
            open_nodes.remove(current)
            current_key = keys[current]
            del open_index[current_key]
            closed[current_key] = current

            if current_key == goal_key:
                path = self._reconstruct_path(keys, parents, current)
                if self.config.smooth_path:
                    path = self._smooth_path(path)
                return path

            for neighbor_key, move_cost in self._get_neighbors(current_key):
                if neighbor_key in closed:
                    continue

                tentative_g = g_scores[current] + move_cost
                f = tentative_g + self._heuristic(self._cell_position(neighbor_key), goal_position)

                existing = open_index.get(neighbor_key)
                if existing is None:
                    keys.append(neighbor_key)
                    g_scores.append(tentative_g)
                    f_scores.append(f)
                    parents.append(current)
                    new_index = len(keys) - 1
                    open_nodes.append(new_index)
                    open_index[neighbor_key] = new_index
                elif tentative_g < g_scores[existing]:
                    g_scores[existing] = tentative_g
                    f_scores[existing] = f
                    parents[existing] = current

        return self._fallback_path(start_pt, goal_pt, goal_position, closed)

    def _fallback_path(
        self,
        start: Point,
        goal: Point,
        goal_position: Point,
        closed: Dict[GridKey, int],
    ) -> List[Point]:
        """Degraded answer when the snapped goal was never reached."""
        if not self.config.partial_path_fallback:
            logger.debug("A* found no path to %s", goal_position)
            return []

        closest: Optional[Point] = None
        closest_distance = math.inf
        for key in closed:
            position = self._cell_position(key)
            d = self._heuristic(position, goal_position)
            if d < closest_distance:
                closest_distance = d
                closest = position

        if closest is not None and closest_distance < self._heuristic(start, goal_position):
            logger.debug("A* found no path to %s, falling back via %s", goal_position, closest)
            return [start, closest, goal]

        logger.debug("A* found no path to %s", goal_position)
        return []

    def _smooth_path(self, path: List[Point]) -> List[Point]:
        """
        Remove waypoints that have a clear line of sight past them.

        From each kept waypoint, jump to the farthest later waypoint that is
        reachable by a valid straight movement.
        """
        if len(path) <= 2:
            return path

        smoothed = [path[0]]
        current_idx = 0

        while current_idx < len(path) - 1:
            farthest_visible = current_idx + 1
            for check_idx in range(current_idx + 2, len(path)):
                if self.is_movement_valid(path[current_idx], path[check_idx]):
                    farthest_visible = check_idx

            smoothed.append(path[farthest_visible])
            current_idx = farthest_visible

        return smoothed

    def __repr__(self) -> str:
        return (
            f"GridPathfinder(size={self.width}x{self.height}, "
            f"grid={self.grid_size}, obstacles={len(self._obstacles)}, "
            f"version={self._obstacle_version})"
        )
