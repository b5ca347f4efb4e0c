"""
polynav: 2D navigation around polygonal obstacles.

Subpackages:
- polynav.geometry: stateless geometry kernel
- polynav.navigation: obstacle store, A* grid pathfinder, visibility graph
  and the corner-path manager
"""
from .geometry import Point
from .navigation import (
    GridPathfinder,
    ObstacleStore,
    PathfindingManager,
)

__version__ = "0.1.0"

__all__ = [
    "Point",
    "GridPathfinder",
    "ObstacleStore",
    "PathfindingManager",
]
