"""
Geometry kernel for polygonal navigation.

Stateless point, segment and polygon operations shared by every
navigation component.
"""

from .kernel import (
    EPSILON,
    Point,
    PointLike,
    Polygon,
    to_point,
    to_polygon,
    polygon_to_array,
    distance,
    path_length,
    point_in_polygon,
    orientation,
    on_segment,
    segments_intersect,
    line_intersection,
    segment_intersection,
    segment_intersects_polygon,
    closest_point_on_segment,
    distance_point_to_segment,
    distance_point_to_polygon,
    closest_point_on_polygon,
    signed_area,
    polygon_area,
    is_clockwise,
    polygon_centroid,
)

__all__ = [
    "EPSILON",
    "Point",
    "PointLike",
    "Polygon",
    "to_point",
    "to_polygon",
    "polygon_to_array",
    "distance",
    "path_length",
    "point_in_polygon",
    "orientation",
    "on_segment",
    "segments_intersect",
    "line_intersection",
    "segment_intersection",
    "segment_intersects_polygon",
    "closest_point_on_segment",
    "distance_point_to_segment",
    "distance_point_to_polygon",
    "closest_point_on_polygon",
    "signed_area",
    "polygon_area",
    "is_clockwise",
    "polygon_centroid",
]
