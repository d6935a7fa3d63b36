"""
Geometry module for roofkit.
Contains plan-space vector and polygon utilities.
"""

from .vec2 import (
    Vec2, vec2, as_vec2, add, sub, scale, dot, cross, length, length_sq,
    distance, distance_sq, normalize, perp_ccw, perp_cw, lerp, midpoint,
    equals, angle, angle_between, rotate, closest_point_on_segment,
    distance_to_segment, line_intersection
)
from .polygon import (
    to_vec2_list, dedupe_polygon, signed_area, polygon_area, is_clockwise, ensure_ccw,
    is_degenerate_polygon, polygon_perimeter, point_in_polygon,
    polygon_centroid, is_convex, interior_angle_at, polygon_interior_angles,
    angle_label_position, outward_normal, offset_polygon
)
from .plane import (
    RoofPlaneGeometry, build_plane, newell_normal, polygon_area_3d,
    slope_angle_deg, planes_for_roof
)

__all__ = [
    'Vec2', 'vec2', 'as_vec2', 'add', 'sub', 'scale', 'dot', 'cross',
    'length', 'length_sq', 'distance', 'distance_sq', 'normalize',
    'perp_ccw', 'perp_cw', 'lerp', 'midpoint', 'equals', 'angle',
    'angle_between', 'rotate', 'closest_point_on_segment',
    'distance_to_segment', 'line_intersection',
    'to_vec2_list', 'dedupe_polygon', 'signed_area', 'polygon_area', 'is_clockwise',
    'ensure_ccw', 'is_degenerate_polygon', 'polygon_perimeter',
    'point_in_polygon', 'polygon_centroid', 'is_convex',
    'interior_angle_at', 'polygon_interior_angles', 'angle_label_position',
    'outward_normal', 'offset_polygon',
    'RoofPlaneGeometry', 'build_plane', 'newell_normal', 'polygon_area_3d',
    'slope_angle_deg', 'planes_for_roof'
]
