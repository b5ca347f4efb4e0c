"""
Shared value types for the navigation components.

These records are what the obstacle store, the visibility graph and the
manager hand back to callers:
- CornerPath: cached shortest route from an expanded-obstacle corner to the goal
- IntersectionResult: segment-vs-obstacles diagnostics
- corner_key(): jitter-tolerant identity for corners across rebuilds
"""
from dataclasses import dataclass, field
from typing import List, Tuple
import math

from ..geometry import Point, PointLike, to_point

CornerKey = Tuple[float, float]

# Decimal places kept when identifying a corner by its coordinates
CORNER_KEY_PRECISION = 1


def corner_key(corner: PointLike) -> CornerKey:
    """
    Quantized, hashable identity of a corner.

    Repeated offsetting of the same obstacle can drift in the last bits;
    rounding to one decimal keeps such corners on the same cache entry.
    """
    p = to_point(corner)
    # Adding 0.0 folds -0.0 into 0.0 so both hash to the same key
    return (
        round(p.x, CORNER_KEY_PRECISION) + 0.0,
        round(p.y, CORNER_KEY_PRECISION) + 0.0,
    )


@dataclass(frozen=True)
class CornerPath:
    """Shortest route from a corner to the goal through the visibility graph."""
    path: Tuple[Point, ...] = ()
    distance: float = math.inf

    @property
    def is_reachable(self) -> bool:
        return len(self.path) > 0 and self.distance < math.inf

    @classmethod
    def unreachable(cls) -> "CornerPath":
        return cls()

    def to_list(self) -> List[Point]:
        return list(self.path)


@dataclass
class IntersectionResult:
    """Where a segment crosses raw obstacle edges."""
    intersects: bool = False
    points: List[Point] = field(default_factory=list)
