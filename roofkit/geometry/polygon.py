"""
Polygon utilities for footprint processing.
Handles area, orientation, angles and outward offsetting of plan polygons.
"""

import math
from typing import List, Optional, Sequence, Union

import numpy as np

from .vec2 import (
    EPSILON,
    Vec2,
    add,
    as_vec2,
    cross,
    distance,
    dot,
    length,
    line_intersection,
    normalize,
    perp_cw,
    scale,
    sub,
)

# Below this absolute signed area a footprint is treated as degenerate
MIN_POLYGON_AREA = 1e-6


def to_vec2_list(polygon: Sequence) -> List[Vec2]:
    """Copy any sequence of 2D points into a fresh list of Vec2."""
    return [as_vec2(p) for p in polygon]


def dedupe_polygon(polygon: Sequence, tolerance: float = EPSILON) -> List[Vec2]:
    """Drop consecutive repeated points, including a closing copy of the first point."""
    result: List[Vec2] = []
    for point in to_vec2_list(polygon):
        if result and max(abs(point.x - result[-1].x), abs(point.y - result[-1].y)) <= tolerance:
            continue
        result.append(point)
    while len(result) > 1 and max(abs(result[0].x - result[-1].x),
                                  abs(result[0].y - result[-1].y)) <= tolerance:
        result.pop()
    return result


def signed_area(vertices: Sequence[Vec2]) -> float:
    """Shoelace area; positive for counter-clockwise winding."""
    if len(vertices) < 3:
        return 0.0
    pts = np.asarray([[p[0], p[1]] for p in vertices], dtype=float)
    x, y = pts[:, 0], pts[:, 1]
    return float(0.5 * (np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y)))


def polygon_area(vertices: Sequence[Vec2]) -> float:
    return abs(signed_area(vertices))


def is_clockwise(vertices: Sequence[Vec2]) -> bool:
    return signed_area(vertices) < 0


def ensure_ccw(vertices: Sequence[Vec2]) -> List[Vec2]:
    if is_clockwise(vertices):
        return list(reversed(vertices))
    return list(vertices)


def is_degenerate_polygon(vertices: Sequence, min_area: float = MIN_POLYGON_AREA) -> bool:
    """True when the polygon cannot carry a roof (too few points or no area)."""
    if vertices is None or len(vertices) < 3:
        return True
    return abs(signed_area(to_vec2_list(vertices))) < min_area


def polygon_perimeter(vertices: Sequence[Vec2]) -> float:
    n = len(vertices)
    return sum(distance(vertices[i], vertices[(i + 1) % n]) for i in range(n))


def point_in_polygon(point: Vec2, polygon: Sequence[Vec2]) -> bool:
    """Even-odd ray casting test."""
    inside = False
    n = len(polygon)
    j = n - 1
    for i in range(n):
        xi, yi = polygon[i]
        xj, yj = polygon[j]
        if (yi > point.y) != (yj > point.y):
            x_cross = (xj - xi) * (point.y - yi) / (yj - yi) + xi
            if point.x < x_cross:
                inside = not inside
        j = i
    return inside


def polygon_centroid(vertices: Sequence[Vec2]) -> Vec2:
    """Area centroid; falls back to the vertex average for zero-area input."""
    n = len(vertices)
    if n == 0:
        return Vec2(0.0, 0.0)
    pts = np.asarray([[p[0], p[1]] for p in vertices], dtype=float)
    x, y = pts[:, 0], pts[:, 1]
    xn, yn = np.roll(x, -1), np.roll(y, -1)
    f = x * yn - xn * y
    area = f.sum() / 2.0
    if abs(area) < EPSILON:
        mean = pts.mean(axis=0)
        return Vec2(float(mean[0]), float(mean[1]))
    cx = ((x + xn) * f).sum() / (6.0 * area)
    cy = ((y + yn) * f).sum() / (6.0 * area)
    return Vec2(float(cx), float(cy))


def is_convex(vertices: Sequence[Vec2]) -> bool:
    n = len(vertices)
    if n < 3:
        return False
    sign = 0
    for i in range(n):
        cp = cross(sub(vertices[(i + 1) % n], vertices[i]),
                   sub(vertices[(i + 2) % n], vertices[(i + 1) % n]))
        if abs(cp) < EPSILON:
            continue
        current = 1 if cp > 0 else -1
        if sign == 0:
            sign = current
        elif current != sign:
            return False
    return True


def interior_angle_at(vertices: Sequence[Vec2], index: int) -> float:
    """
    Interior angle at a polygon vertex.

    Args:
        vertices: Polygon vertices in either winding
        index: Vertex index

    Returns:
        Angle in radians in (0, 2*pi); reflex corners are reported above pi
    """
    n = len(vertices)
    if n < 3:
        return 0.0

    prev = vertices[(index - 1) % n]
    curr = vertices[index % n]
    nxt = vertices[(index + 1) % n]

    a = sub(prev, curr)
    b = sub(nxt, curr)
    len_a = length(a)
    len_b = length(b)
    if len_a < EPSILON or len_b < EPSILON:
        return 0.0

    cos_angle = max(-1.0, min(1.0, dot(a, b) / (len_a * len_b)))
    base_angle = math.acos(cos_angle)
    cross_val = cross(a, b)
    if abs(cross_val) < EPSILON:
        return base_angle

    # Convex corners of a CCW polygon turn clockwise from prev to next
    ccw = signed_area(vertices) > 0
    convex = cross_val < 0 if ccw else cross_val > 0
    return base_angle if convex else 2.0 * math.pi - base_angle


def polygon_interior_angles(vertices: Sequence[Vec2]) -> List[float]:
    return [interior_angle_at(vertices, i) for i in range(len(vertices))]


def _interior_sweep(start_angle: float, end_angle: float, is_ccw: bool) -> float:
    sweep = end_angle - start_angle
    if is_ccw:
        if sweep > 0:
            sweep -= 2.0 * math.pi
        if sweep > -EPSILON:
            sweep = -2.0 * math.pi
    else:
        if sweep < 0:
            sweep += 2.0 * math.pi
        if sweep < EPSILON:
            sweep = 2.0 * math.pi
    return sweep


def angle_label_position(center: Vec2, prev_pos: Vec2, next_pos: Vec2,
                         is_ccw: bool, offset: float) -> Vec2:
    """
    Anchor point for an angle label, pushed along the interior bisector.

    Args:
        center: Corner vertex
        prev_pos: Previous polygon vertex
        next_pos: Next polygon vertex
        is_ccw: Winding of the polygon the corner belongs to
        offset: Distance of the label from the corner

    Returns:
        Label position (the corner itself for degenerate corners)
    """
    v1 = sub(prev_pos, center)
    v2 = sub(next_pos, center)
    if length(v1) < EPSILON or length(v2) < EPSILON:
        return center

    start_angle = math.atan2(v1.y, v1.x)
    end_angle = math.atan2(v2.y, v2.x)
    mid_angle = start_angle + _interior_sweep(start_angle, end_angle, is_ccw) / 2.0
    return Vec2(center.x + math.cos(mid_angle) * offset,
                center.y + math.sin(mid_angle) * offset)


def outward_normal(start: Vec2, end: Vec2, ccw: bool = True) -> Vec2:
    """Unit normal of an edge pointing away from the polygon interior."""
    direction = normalize(sub(end, start))
    normal = perp_cw(direction)
    return normal if ccw else scale(normal, -1.0)


def offset_polygon(vertices: Sequence[Vec2],
                   distances: Union[float, Sequence[float]],
                   miter_limit: Optional[float] = None) -> List[Vec2]:
    """
    Offset every polygon edge outward and rebuild the mitred corners.

    Args:
        vertices: Polygon vertices in either winding
        distances: One distance for all edges, or one per edge (edge i runs
            from vertex i to vertex i + 1)
        miter_limit: Optional cap on corner displacement as a multiple of the
            largest adjacent distance. Corners past the cap, or between
            parallel edges, are shifted along the normal of the adjacent
            edge with the larger distance.

    Returns:
        Offset polygon with the same vertex count
    """
    pts = to_vec2_list(vertices)
    n = len(pts)
    if n < 3:
        return pts

    if isinstance(distances, (int, float)):
        dists = [float(distances)] * n
    else:
        dists = [float(d) for d in distances]

    ccw = signed_area(pts) > 0
    lines = []
    for i in range(n):
        a, b = pts[i], pts[(i + 1) % n]
        normal = outward_normal(a, b, ccw)
        lines.append((add(a, scale(normal, dists[i])), sub(b, a), normal))

    result = []
    for i in range(n):
        prev_point, prev_dir, prev_normal = lines[(i - 1) % n]
        point, direction, normal = lines[i]
        corner = line_intersection(prev_point, prev_dir, point, direction)
        shift = max(abs(dists[i]), abs(dists[(i - 1) % n]))
        if corner is None or (
                miter_limit is not None and shift > 0
                and distance(corner, pts[i]) > miter_limit * shift):
            # Plain shift along the normal of the wider adjacent edge
            if abs(dists[(i - 1) % n]) > abs(dists[i]):
                corner = add(pts[i], scale(prev_normal, dists[(i - 1) % n]))
            else:
                corner = add(pts[i], scale(normal, dists[i]))
        result.append(corner)
    return result
