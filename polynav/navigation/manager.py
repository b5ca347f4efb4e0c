"""
Pathfinding manager: obstacle store, grid pathfinder and corner-path cache.

Many agents share one goal. Rather than searching per agent, the manager
precomputes, for every corner of every expanded obstacle, the shortest route
to the goal through the visibility graph. An agent standing at a corner then
gets its route with a dictionary lookup.

Architecture:
1. Obstacles go to both the ObstacleStore (expanded outlines, visibility
   tests) and the GridPathfinder (A* and steering queries)
2. Any obstacle or goal change marks the corner cache stale
3. The next cache query rebuilds the whole visibility graph and reruns
   Dijkstra from every corner
"""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple
import logging
import time

from ..geometry import Point, PointLike, Polygon, to_point
from .base import CornerKey, CornerPath, IntersectionResult, corner_key
from .obstacle_store import ObstacleStore, ObstacleStoreConfig
from .pathfinding import GridPathfinder, PathfindingConfig
from .visibility_graph import VisibilityGraph

logger = logging.getLogger(__name__)


@dataclass
class PathfindingManagerConfig:
    """Configuration for the pathfinding manager."""
    # Playfield
    width: float = 800.0
    height: float = 600.0

    # Grid pathfinder settings
    grid_size: float = 20.0
    partial_path_fallback: bool = True

    # Visibility graph settings
    expansion_margin: float = 5.0

    # Rebuild the corner cache inside add_obstacle()/set_goal() instead of
    # on the next query
    eager_rebuild: bool = False

    seed: Optional[int] = None


class PathfindingManager:
    """
    Owns the navigation state and the corner -> goal path cache.

    The cache is keyed by quantized corner coordinates (see corner_key()),
    so lookups tolerate small floating-point drift in the queried corner.
    """

    def __init__(self, config: Optional[PathfindingManagerConfig] = None):
        self.config = config or PathfindingManagerConfig()

        self._store = ObstacleStore(ObstacleStoreConfig(
            width=self.config.width,
            height=self.config.height,
            expansion_margin=self.config.expansion_margin,
        ))
        self._pathfinder = GridPathfinder(PathfindingConfig(
            width=self.config.width,
            height=self.config.height,
            grid_size=self.config.grid_size,
            partial_path_fallback=self.config.partial_path_fallback,
            seed=self.config.seed,
        ))

        self._goal = self._store.get_goal()
        self._goal_version = 0

        self._corner_paths: Dict[CornerKey, CornerPath] = {}
        self._graph: Optional[VisibilityGraph] = None
        self._built_version: Optional[Tuple[int, int]] = None

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def _current_version(self) -> Tuple[int, int]:
        return (self._store.version, self._goal_version)

    def _invalidate(self) -> None:
        if self.config.eager_rebuild:
            self.calculate_blue_corner_paths()

    def set_goal(self, goal: PointLike) -> None:
        """Move the shared goal; every cached corner path becomes stale."""
        self._goal = to_point(goal)
        self._store.set_goal(self._goal)
        self._goal_version += 1
        self._invalidate()

    def get_goal(self) -> Point:
        return self._goal

    def add_obstacle(self, polygon: Iterable[PointLike]) -> None:
        """Register an obstacle with the store and the grid pathfinder."""
        points = list(polygon)
        self._store.add_obstacle(points)
        self._pathfinder.add_obstacle(points)
        self._invalidate()

    # ------------------------------------------------------------------
    # Corner cache
    # ------------------------------------------------------------------

    @property
    def is_stale(self) -> bool:
        return self._built_version != self._current_version()

    def _ensure_current(self) -> None:
        if self.is_stale:
            self.calculate_blue_corner_paths()

    def calculate_blue_corner_paths(self) -> None:
        """
        Rebuild the visibility graph and every corner -> goal path.

        Nodes are all expanded-obstacle corners followed by the goal. Edges
        are tested against the raw obstacles. Each corner gets its own
        Dijkstra run; corners that cannot reach the goal are cached as
        unreachable.
        """
        started = time.perf_counter()
        self._corner_paths = {}

        corners: List[Point] = [
            corner
            for obstacle in self._store.get_expanded_obstacles()
            for corner in obstacle
        ]
        nodes = corners + [self._goal]
        goal_index = len(nodes) - 1

        self._graph = VisibilityGraph.build(nodes, self._store.test_path_clear)

        unreachable = 0
        for index, corner in enumerate(corners):
            result = self._graph.shortest_path(index, goal_index)
            if not result.is_reachable:
                unreachable += 1
            self._corner_paths[corner_key(corner)] = result

        self._built_version = self._current_version()

        logger.debug(
            "Corner paths rebuilt: %d corners, %d edges, %d unreachable, %.1f ms",
            len(corners),
            self._graph.edge_count,
            unreachable,
            (time.perf_counter() - started) * 1000.0,
        )

    def get_blue_corner_path(self, corner: PointLike) -> Optional[List[Point]]:
        """Cached route from `corner` to the goal, or None if unknown/unreachable."""
        self._ensure_current()
        cached = self._corner_paths.get(corner_key(corner))
        if cached is None or not cached.is_reachable:
            return None
        return cached.to_list()

    def get_blue_corner_distance(self, corner: PointLike) -> Optional[float]:
        """Length of the cached route, or None if unknown/unreachable."""
        self._ensure_current()
        cached = self._corner_paths.get(corner_key(corner))
        if cached is None or not cached.is_reachable:
            return None
        return cached.distance

    def get_blue_corner_paths(self) -> Dict[CornerKey, CornerPath]:
        """Snapshot of every cached record, unreachable ones included."""
        self._ensure_current()
        return dict(self._corner_paths)

    @property
    def visibility_graph(self) -> Optional[VisibilityGraph]:
        """Graph for the current obstacles and goal (for debugging/visualization)."""
        self._ensure_current()
        return self._graph

    # ------------------------------------------------------------------
    # Paths and passthrough queries
    # ------------------------------------------------------------------

    def find_path(self, start: PointLike) -> List[Point]:
        """
        Straight segment from start to the goal.

        Obstacle avoidance along it is left to steering (see
        GridPathfinder.get_repulsion_vector()).
        """
        return [to_point(start), self._goal]

    def find_grid_path(
        self, start: PointLike, goal: Optional[PointLike] = None
    ) -> List[Point]:
        """A* path from start to `goal` (the shared goal by default)."""
        target = self._goal if goal is None else goal
        return self._pathfinder.find_path(start, target)

    def test_path_clear(self, start: PointLike, end: PointLike) -> bool:
        return self._store.test_path_clear(start, end)

    def test_line_intersections(self, start: PointLike, end: PointLike) -> IntersectionResult:
        return self._store.test_line_intersections(start, end)

    def get_obstacles(self) -> List[Polygon]:
        return self._store.get_obstacles()

    def get_expanded_obstacles(self) -> List[Polygon]:
        return self._store.get_expanded_obstacles()

    @property
    def obstacle_store(self) -> ObstacleStore:
        return self._store

    @property
    def pathfinder(self) -> GridPathfinder:
        return self._pathfinder

    def __repr__(self) -> str:
        return (
            f"PathfindingManager(obstacles={self._store.obstacle_count}, "
            f"goal=({self._goal.x:.1f}, {self._goal.y:.1f}), "
            f"corners={len(self._corner_paths)}, stale={self.is_stale})"
        )
