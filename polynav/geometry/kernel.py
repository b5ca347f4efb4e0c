"""
Planar geometry kernel.

Pure functions over points, segments and polygons used by the obstacle
store, the grid pathfinder and the visibility graph. Nothing here keeps
state and nothing raises for degenerate input: absent results are None,
unreachable distances are infinity.

Coordinates follow screen conventions (x to the right, y down), which only
matters for the sign of signed_area().
"""
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, Union
import math

import numpy as np

# Determinant threshold below which two lines are treated as parallel
EPSILON = 1e-10

# Polygons up to this many vertices use the plain-Python distance loop
SCALAR_MAX_VERTICES = 16


@dataclass(frozen=True)
class Point:
    """Immutable 2D coordinate."""
    x: float
    y: float

    def to_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def distance_to(self, other: "Point") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


PointLike = Union[Point, Sequence[float]]
Polygon = List[Point]


def to_point(value: PointLike) -> Point:
    """Coerce a Point or an (x, y) pair into a Point."""
    if isinstance(value, Point):
        return value
    if len(value) != 2:
        raise ValueError(f"Expected an (x, y) pair, got {value!r}")
    return Point(float(value[0]), float(value[1]))


def to_polygon(vertices: Iterable[PointLike]) -> Polygon:
    """Coerce a sequence of points or (x, y) pairs into a list of Points."""
    return [to_point(v) for v in vertices]


def polygon_to_array(polygon: Sequence[Point]) -> np.ndarray:
    """Polygon vertices as an (n, 2) float array."""
    if not polygon:
        return np.zeros((0, 2), dtype=np.float64)
    return np.array([(p.x, p.y) for p in polygon], dtype=np.float64)


def distance(a: Point, b: Point) -> float:
    return math.hypot(b.x - a.x, b.y - a.y)


def path_length(path: Sequence[Point]) -> float:
    """Sum of segment lengths along a path; infinite for fewer than 2 points."""
    if len(path) < 2:
        return math.inf
    return sum(distance(path[i], path[i + 1]) for i in range(len(path) - 1))


# ---------------------------------------------------------------------------
# Containment
# ---------------------------------------------------------------------------

def point_in_polygon(p: Point, polygon: Sequence[Point]) -> bool:
    """
    Ray-casting parity test.

    Points lying exactly on an edge or vertex may go either way; the
    comparison is strict and no tolerance is applied.
    """
    n = len(polygon)
    if n < 3:
        return False

    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = polygon[i].x, polygon[i].y
        xj, yj = polygon[j].x, polygon[j].y
        # The straddle check guarantees yi != yj before dividing
        if (yi > p.y) != (yj > p.y) and p.x < (xj - xi) * (p.y - yi) / (yj - yi) + xi:
            inside = not inside
        j = i

    return inside


# ---------------------------------------------------------------------------
# Segment intersection
# ---------------------------------------------------------------------------

def orientation(p: Point, q: Point, r: Point, eps: float = EPSILON) -> int:
    """
    Orientation of the ordered triplet (p, q, r).

    Returns 0 for collinear, 1 for clockwise, 2 for counter-clockwise.
    """
    val = (q.y - p.y) * (r.x - q.x) - (q.x - p.x) * (r.y - q.y)
    if abs(val) < eps:
        return 0
    return 1 if val > 0 else 2


def on_segment(p: Point, q: Point, r: Point) -> bool:
    """True if q lies within the bounding box of segment p-r."""
    return (
        min(p.x, r.x) <= q.x <= max(p.x, r.x)
        and min(p.y, r.y) <= q.y <= max(p.y, r.y)
    )


def segments_intersect(
    p1: Point, q1: Point, p2: Point, q2: Point, eps: float = EPSILON
) -> bool:
    """
    True if segment p1-q1 touches or crosses segment p2-q2.

    Zero-length segments degrade to point-on-segment checks.
    """
    o1 = orientation(p1, q1, p2, eps)
    o2 = orientation(p1, q1, q2, eps)
    o3 = orientation(p2, q2, p1, eps)
    o4 = orientation(p2, q2, q1, eps)

    # General case
    if o1 != o2 and o3 != o4:
        return True

    # Collinear special cases
    if o1 == 0 and on_segment(p1, p2, q1):
        return True
    if o2 == 0 and on_segment(p1, q2, q1):
        return True
    if o3 == 0 and on_segment(p2, p1, q2):
        return True
    if o4 == 0 and on_segment(p2, q1, q2):
        return True

    return False


def _intersection_params(
    p1: Point, q1: Point, p2: Point, q2: Point
) -> Optional[Tuple[float, float]]:
    """Parameters (t, u) of the line intersection, or None when parallel."""
    x1, y1 = p1.x, p1.y
    x2, y2 = q1.x, q1.y
    x3, y3 = p2.x, p2.y
    x4, y4 = q2.x, q2.y

    denom = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)
    if abs(denom) < EPSILON:
        return None

    t = ((x1 - x3) * (y3 - y4) - (y1 - y3) * (x3 - x4)) / denom
    u = -((x1 - x2) * (y1 - y3) - (y1 - y2) * (x1 - x3)) / denom
    return t, u


def line_intersection(p1: Point, q1: Point, p2: Point, q2: Point) -> Optional[Point]:
    """Intersection of the infinite lines through p1-q1 and p2-q2."""
    params = _intersection_params(p1, q1, p2, q2)
    if params is None:
        return None
    t, _ = params
    return Point(p1.x + t * (q1.x - p1.x), p1.y + t * (q1.y - p1.y))


def segment_intersection(p1: Point, q1: Point, p2: Point, q2: Point) -> Optional[Point]:
    """Intersection of segments p1-q1 and p2-q2, or None if they miss."""
    params = _intersection_params(p1, q1, p2, q2)
    if params is None:
        return None
    t, u = params
    if 0.0 <= t <= 1.0 and 0.0 <= u <= 1.0:
        return Point(p1.x + t * (q1.x - p1.x), p1.y + t * (q1.y - p1.y))
    return None


def segment_intersects_polygon(a: Point, b: Point, polygon: Sequence[Point]) -> bool:
    """True if segment a-b touches any edge of the polygon."""
    n = len(polygon)
    for i in range(n):
        if segments_intersect(a, b, polygon[i], polygon[(i + 1) % n]):
            return True
    return False


# ---------------------------------------------------------------------------
# Distances
# ---------------------------------------------------------------------------

def closest_point_on_segment(p: Point, a: Point, b: Point) -> Point:
    """Projection of p onto segment a-b, clamped to the segment."""
    cx = b.x - a.x
    cy = b.y - a.y
    len_sq = cx * cx + cy * cy
    if len_sq == 0:
        return a

    param = ((p.x - a.x) * cx + (p.y - a.y) * cy) / len_sq
    param = max(0.0, min(1.0, param))
    return Point(a.x + param * cx, a.y + param * cy)


def distance_point_to_segment(p: Point, a: Point, b: Point) -> float:
    return distance(p, closest_point_on_segment(p, a, b))


def _edge_projections(p: Point, polygon: Sequence[Point]) -> np.ndarray:
    """Closest point on every edge of the polygon, as an (n, 2) array."""
    starts = polygon_to_array(polygon)
    ends = np.roll(starts, -1, axis=0)
    edges = ends - starts
    len_sq = np.einsum("ij,ij->i", edges, edges)
    rel = np.array([p.x, p.y]) - starts

    dots = np.einsum("ij,ij->i", rel, edges)
    # Zero-length edges project onto their start vertex
    params = np.divide(dots, len_sq, out=np.zeros_like(dots), where=len_sq > 0)
    params = np.clip(params, 0.0, 1.0)
    return starts + params[:, None] * edges


def _closest_edge_point(p: Point, polygon: Sequence[Point]) -> Tuple[Point, float]:
    """Closest boundary point and its distance; polygon must be non-empty."""
    if len(polygon) <= SCALAR_MAX_VERTICES:
        # Array setup costs more than the arithmetic on small polygons
        best = polygon[0]
        best_distance = math.inf
        n = len(polygon)
        for i in range(n):
            candidate = closest_point_on_segment(p, polygon[i], polygon[(i + 1) % n])
            d = distance(p, candidate)
            if d < best_distance:
                best = candidate
                best_distance = d
        return best, best_distance

    projections = _edge_projections(p, polygon)
    dists = np.hypot(projections[:, 0] - p.x, projections[:, 1] - p.y)
    index = int(np.argmin(dists))
    closest = Point(float(projections[index, 0]), float(projections[index, 1]))
    return closest, float(dists[index])


def distance_point_to_polygon(p: Point, polygon: Sequence[Point]) -> float:
    """Minimum distance from p to any polygon edge; infinite if no edges."""
    if not polygon:
        return math.inf
    return _closest_edge_point(p, polygon)[1]


def closest_point_on_polygon(p: Point, polygon: Sequence[Point]) -> Optional[Point]:
    """Closest point on the polygon boundary, or None for an empty polygon."""
    if not polygon:
        return None
    return _closest_edge_point(p, polygon)[0]


# ---------------------------------------------------------------------------
# Area and orientation
# ---------------------------------------------------------------------------

def signed_area(polygon: Sequence[Point]) -> float:
    """
    Shoelace area in trapezoid form.

    Negative means clockwise on a y-down screen. Fewer than 3 vertices
    give 0.
    """
    n = len(polygon)
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(n):
        current = polygon[i]
        nxt = polygon[(i + 1) % n]
        area += (nxt.x - current.x) * (nxt.y + current.y)
    return area / 2.0


def polygon_area(polygon: Sequence[Point]) -> float:
    return abs(signed_area(polygon))


def is_clockwise(polygon: Sequence[Point]) -> bool:
    return signed_area(polygon) < 0


def polygon_centroid(polygon: Sequence[Point]) -> Optional[Point]:
    """Vertex mean of the polygon (not the area centroid)."""
    if not polygon:
        return None
    arr = polygon_to_array(polygon)
    cx, cy = arr.mean(axis=0)
    return Point(float(cx), float(cy))
