"""
Navigation around polygonal obstacles.

This module provides two complementary pathfinding strategies:
- GridPathfinder: A* over an implicit grid, for exact point-to-point paths
- PathfindingManager: visibility graph over expanded-obstacle corners with
  cached shortest routes to a shared goal, for many agents at once

Example usage:
    from polynav.navigation import PathfindingManager, PathfindingManagerConfig

    manager = PathfindingManager(PathfindingManagerConfig(width=800, height=600))
    manager.set_goal((400, 300))
    manager.add_obstacle([(100, 100), (150, 100), (150, 150), (100, 150)])

    # Route from a corner of an expanded obstacle to the goal
    corner = manager.get_expanded_obstacles()[0][0]
    route = manager.get_blue_corner_path(corner)

    # Free-form A* path
    path = manager.find_grid_path((20, 20))
"""

# Shared types
from .base import (
    CornerKey,
    CornerPath,
    IntersectionResult,
    corner_key,
)

# Obstacle geometry
from .obstacle_store import (
    ObstacleStore,
    ObstacleStoreConfig,
    expand_polygon,
    offset_polygon,
)

# A* pathfinding
from .pathfinding import (
    GridPathfinder,
    PathfindingConfig,
)

# Visibility graph
from .visibility_graph import VisibilityGraph

# Corner-path cache
from .manager import (
    PathfindingManager,
    PathfindingManagerConfig,
)

__all__ = [
    # Base
    "CornerKey",
    "CornerPath",
    "IntersectionResult",
    "corner_key",
    # Obstacle store
    "ObstacleStore",
    "ObstacleStoreConfig",
    "expand_polygon",
    "offset_polygon",
    # Pathfinding
    "GridPathfinder",
    "PathfindingConfig",
    # Visibility graph
    "VisibilityGraph",
    # Manager
    "PathfindingManager",
    "PathfindingManagerConfig",
]
