"""
Visibility graph over expanded-obstacle corners.

Nodes live in a dense arena (a list of Points); edges are stored as a
symmetric weight matrix with infinity where two nodes cannot see each other.
Shortest paths use Dijkstra with a linear-scan minimum and a
predecessor-index array, which suits the few hundred nodes a level holds.
"""
from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple

import numpy as np

from ..geometry import Point, distance
from .base import CornerPath

VisibilityTest = Callable[[Point, Point], bool]


@dataclass
class VisibilityGraph:
    """Nodes plus an (n, n) matrix of edge weights (inf = no edge)."""
    nodes: List[Point]
    weights: np.ndarray

    @classmethod
    def build(cls, nodes: Sequence[Point], is_visible: VisibilityTest) -> "VisibilityGraph":
        """
        Connect every pair of nodes whose straight segment is visible.

        This tests all n*(n-1)/2 pairs.
        """
        nodes = list(nodes)
        n = len(nodes)
        weights = np.full((n, n), np.inf)
        np.fill_diagonal(weights, 0.0)

        for i in range(n):
            for j in range(i + 1, n):
                if is_visible(nodes[i], nodes[j]):
                    d = distance(nodes[i], nodes[j])
                    weights[i, j] = d
                    weights[j, i] = d

        return cls(nodes=nodes, weights=weights)

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def edge_count(self) -> int:
        """Number of undirected edges."""
        finite = np.isfinite(self.weights)
        np.fill_diagonal(finite, False)
        return int(finite.sum()) // 2

    def neighbors(self, index: int) -> List[Tuple[int, float]]:
        row = self.weights[index]
        return [
            (int(j), float(row[j]))
            for j in np.flatnonzero(np.isfinite(row))
            if j != index
        ]

    def has_edge(self, i: int, j: int) -> bool:
        return i != j and bool(np.isfinite(self.weights[i, j]))

    def shortest_path(self, source: int, target: int) -> CornerPath:
        """
        Dijkstra from `source` to `target`.

        Stops as soon as the target is settled. Returns the unreachable
        sentinel when the target is never reached or the predecessor chain
        does not lead back to the source.
        """
        n = self.node_count
        if not (0 <= source < n and 0 <= target < n):
            return CornerPath.unreachable()

        dist = np.full(n, np.inf)
        dist[source] = 0.0
        previous = np.full(n, -1, dtype=np.int64)
        visited = np.zeros(n, dtype=bool)

        while True:
            candidates = np.where(visited, np.inf, dist)
            current = int(np.argmin(candidates))
            if not np.isfinite(candidates[current]):
                break

            visited[current] = True
            if current == target:
                break

            relaxed = dist[current] + self.weights[current]
            improved = ~visited & (relaxed < dist)
            dist[improved] = relaxed[improved]
            previous[improved] = current

        if not np.isfinite(dist[target]):
            return CornerPath.unreachable()

        indices = []
        node = target
        while node != -1 and len(indices) <= n:
            indices.append(node)
            node = int(previous[node])
        indices.reverse()

        if indices[0] != source:
            return CornerPath.unreachable()

        return CornerPath(
            path=tuple(self.nodes[i] for i in indices),
            distance=float(dist[target]),
        )
