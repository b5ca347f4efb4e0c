"""
Navigation demo: corner-path cache and grid A* on a small obstacle field.

Builds a PathfindingManager with a few obstacles, prints the cached route
from every expanded corner to the goal, then plans an A* path across the
field.

Usage:
    python demo_navigation.py                     # Default goal (700, 300)
    python demo_navigation.py --goal 100 500      # Different goal
    python demo_navigation.py --smooth --verbose  # Smoothed A* path, debug logs
"""
import argparse
import logging
import time

from polynav.geometry import distance
from polynav.navigation import (
    GridPathfinder,
    PathfindingConfig,
    PathfindingManager,
    PathfindingManagerConfig,
)


OBSTACLES = [
    [(100, 100), (150, 100), (150, 150), (100, 150)],
    [(300, 300), (380, 300), (340, 220)],
    [(500, 100), (520, 100), (520, 450), (500, 450)],
]


def _fmt(point) -> str:
    return f"({point.x:.1f}, {point.y:.1f})"


def show_corner_paths(manager: PathfindingManager) -> None:
    print("\n" + "=" * 60)
    print(f"Corner paths to goal {_fmt(manager.get_goal())}")
    print("=" * 60)

    start = time.perf_counter()
    manager.calculate_blue_corner_paths()
    elapsed = (time.perf_counter() - start) * 1000.0

    graph = manager.visibility_graph
    print(f"  Nodes: {graph.node_count}, edges: {graph.edge_count}, rebuild: {elapsed:.1f} ms")

    for index, obstacle in enumerate(manager.get_expanded_obstacles()):
        print(f"\n  Obstacle {index}:")
        for corner in obstacle:
            path = manager.get_blue_corner_path(corner)
            if path is None:
                print(f"    {_fmt(corner)}: unreachable")
                continue
            dist = manager.get_blue_corner_distance(corner)
            hops = " -> ".join(_fmt(p) for p in path[1:])
            print(f"    {_fmt(corner)}: {dist:7.1f} via {hops}")


def show_grid_path(manager: PathfindingManager, smooth: bool) -> None:
    print("\n" + "=" * 60)
    print("Grid A* path")
    print("=" * 60)

    start = (40, 40)
    if smooth:
        pathfinder = GridPathfinder(PathfindingConfig(smooth_path=True))
        for obstacle in manager.get_obstacles():
            pathfinder.add_obstacle(obstacle)
        path = pathfinder.find_path(start, manager.get_goal())
    else:
        path = manager.find_grid_path(start)

    if not path:
        print("  No path found")
        return

    length = sum(distance(a, b) for a, b in zip(path, path[1:]))
    print(f"  Waypoints: {len(path)}, length: {length:.1f}")
    for p in path:
        print(f"    {_fmt(p)}")


def main():
    parser = argparse.ArgumentParser(description="Navigation core demo")
    parser.add_argument("--goal", type=float, nargs=2, default=[700, 300],
                        metavar=("X", "Y"), help="Shared goal position")
    parser.add_argument("--margin", type=float, default=5.0,
                        help="Obstacle expansion margin")
    parser.add_argument("--smooth", action="store_true",
                        help="Smooth the A* path with line-of-sight checks")
    parser.add_argument("--verbose", action="store_true",
                        help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    manager = PathfindingManager(PathfindingManagerConfig(expansion_margin=args.margin))
    manager.set_goal(tuple(args.goal))
    for obstacle in OBSTACLES:
        manager.add_obstacle(obstacle)

    print(manager)
    show_corner_paths(manager)
    show_grid_path(manager, args.smooth)


if __name__ == "__main__":
    main()
