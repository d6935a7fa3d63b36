"""
2D vector helpers for plan-space geometry.
All functions are pure and operate on immutable Vec2 tuples.
"""

import math
from typing import NamedTuple, Optional, Tuple

EPSILON = 1e-10


class Vec2(NamedTuple):
    """Point or direction in plan space (XY)."""
    x: float
    y: float


def vec2(x: float, y: float) -> Vec2:
    return Vec2(float(x), float(y))


def as_vec2(value) -> Vec2:
    """Coerce a Vec2, (x, y) pair or object with x/y attributes to Vec2."""
    if isinstance(value, Vec2):
        return value
    if hasattr(value, 'x') and hasattr(value, 'y'):
        return Vec2(float(value.x), float(value.y))
    x, y = value[0], value[1]
    return Vec2(float(x), float(y))


def add(a: Vec2, b: Vec2) -> Vec2:
    return Vec2(a.x + b.x, a.y + b.y)


def sub(a: Vec2, b: Vec2) -> Vec2:
    return Vec2(a.x - b.x, a.y - b.y)


def scale(v: Vec2, s: float) -> Vec2:
    return Vec2(v.x * s, v.y * s)


def dot(a: Vec2, b: Vec2) -> float:
    return a.x * b.x + a.y * b.y


def cross(a: Vec2, b: Vec2) -> float:
    return a.x * b.y - a.y * b.x


def length(v: Vec2) -> float:
    return math.hypot(v.x, v.y)


def length_sq(v: Vec2) -> float:
    return v.x * v.x + v.y * v.y


def distance(a: Vec2, b: Vec2) -> float:
    return length(sub(b, a))


def distance_sq(a: Vec2, b: Vec2) -> float:
    return length_sq(sub(b, a))


def normalize(v: Vec2) -> Vec2:
    """Unit vector in the direction of v, or the zero vector if v is tiny."""
    n = length(v)
    if n < EPSILON:
        return Vec2(0.0, 0.0)
    return Vec2(v.x / n, v.y / n)


def perp_ccw(v: Vec2) -> Vec2:
    return Vec2(-v.y, v.x)


def perp_cw(v: Vec2) -> Vec2:
    return Vec2(v.y, -v.x)


def lerp(a: Vec2, b: Vec2, t: float) -> Vec2:
    return Vec2(a.x + (b.x - a.x) * t, a.y + (b.y - a.y) * t)


def midpoint(a: Vec2, b: Vec2) -> Vec2:
    return Vec2((a.x + b.x) / 2.0, (a.y + b.y) / 2.0)


def equals(a: Vec2, b: Vec2, epsilon: float = 1e-6) -> bool:
    return abs(a.x - b.x) < epsilon and abs(a.y - b.y) < epsilon


def angle(v: Vec2) -> float:
    return math.atan2(v.y, v.x)


def angle_between(a: Vec2, b: Vec2) -> float:
    """Signed angle from a to b in radians."""
    return math.atan2(cross(a, b), dot(a, b))


def rotate(v: Vec2, rad: float) -> Vec2:
    c = math.cos(rad)
    s = math.sin(rad)
    return Vec2(v.x * c - v.y * s, v.x * s + v.y * c)


def closest_point_on_segment(p: Vec2, a: Vec2, b: Vec2) -> Tuple[Vec2, float]:
    """
    Project p onto segment ab.

    Returns:
        Tuple of (closest point, parameter t clamped to [0, 1])
    """
    ab = sub(b, a)
    ab_len_sq = length_sq(ab)
    if ab_len_sq < EPSILON:
        return a, 0.0
    t = dot(sub(p, a), ab) / ab_len_sq
    t = max(0.0, min(1.0, t))
    return add(a, scale(ab, t)), t


def distance_to_segment(p: Vec2, a: Vec2, b: Vec2) -> float:
    point, _ = closest_point_on_segment(p, a, b)
    return distance(p, point)


def line_intersection(p1: Vec2, d1: Vec2, p2: Vec2, d2: Vec2) -> Optional[Vec2]:
    """
    Intersect two infinite lines given as point + direction.

    Returns:
        Intersection point, or None when the lines are parallel
    """
    denom = cross(d1, d2)
    if abs(denom) < EPSILON * max(1.0, length(d1) * length(d2)):
        return None
    t = cross(sub(p2, p1), d2) / denom
    return add(p1, scale(d1, t))
