import math

import pytest

from roofkit.geometry import (
    Vec2,
    angle_label_position,
    build_plane,
    closest_point_on_segment,
    dedupe_polygon,
    ensure_ccw,
    interior_angle_at,
    is_clockwise,
    is_convex,
    is_degenerate_polygon,
    line_intersection,
    normalize,
    offset_polygon,
    planes_for_roof,
    point_in_polygon,
    polygon_area,
    polygon_centroid,
    polygon_interior_angles,
    signed_area,
    to_vec2_list,
)

UNIT_SQUARE = [Vec2(0, 0), Vec2(1, 0), Vec2(1, 1), Vec2(0, 1)]


def test_signed_area_follows_winding():
    assert signed_area(UNIT_SQUARE) == pytest.approx(1.0)
    assert signed_area(list(reversed(UNIT_SQUARE))) == pytest.approx(-1.0)
    assert polygon_area(list(reversed(UNIT_SQUARE))) == pytest.approx(1.0)


def test_ensure_ccw_reverses_clockwise_input():
    clockwise = list(reversed(UNIT_SQUARE))
    assert is_clockwise(clockwise)
    assert not is_clockwise(ensure_ccw(clockwise))


def test_degenerate_polygons():
    assert is_degenerate_polygon([(0, 0), (1, 0)])
    assert is_degenerate_polygon([(0, 0), (1, 0), (2, 0)])
    assert is_degenerate_polygon([])
    assert not is_degenerate_polygon(UNIT_SQUARE)


def test_normalize_zero_vector():
    assert normalize(Vec2(0.0, 0.0)) == Vec2(0.0, 0.0)
    assert normalize(Vec2(3.0, 4.0)) == pytest.approx(Vec2(0.6, 0.8))


def test_closest_point_is_clamped_to_segment():
    point, t = closest_point_on_segment(Vec2(5, 2), Vec2(0, 0), Vec2(2, 0))
    assert point == Vec2(2, 0)
    assert t == 1.0


def test_line_intersection_and_parallel_lines():
    hit = line_intersection(Vec2(0, 0), Vec2(1, 0), Vec2(2, -1), Vec2(0, 1))
    assert hit == pytest.approx(Vec2(2, 0))
    assert line_intersection(Vec2(0, 0), Vec2(1, 0), Vec2(0, 1), Vec2(2, 0)) is None


def test_interior_angles_report_reflex_corners(l_shape):
    points = to_vec2_list(l_shape)
    assert interior_angle_at(points, 0) == pytest.approx(math.pi / 2)
    assert interior_angle_at(points, 3) == pytest.approx(3 * math.pi / 2)
    # Same answer for the clockwise copy
    reversed_points = list(reversed(points))
    assert interior_angle_at(reversed_points, 2) == pytest.approx(3 * math.pi / 2)
    assert sum(polygon_interior_angles(points)) == pytest.approx(4 * math.pi)


def test_angle_label_sits_on_interior_bisector():
    label = angle_label_position(Vec2(0, 0), Vec2(0, 1), Vec2(1, 0), True, math.sqrt(2))
    assert label == pytest.approx(Vec2(1, 1))


def test_offset_polygon_mitres_corners():
    result = offset_polygon(UNIT_SQUARE, 1.0)
    assert result[0] == pytest.approx(Vec2(-1, -1))
    assert result[2] == pytest.approx(Vec2(2, 2))
    assert polygon_area(result) == pytest.approx(9.0)


def test_offset_polygon_per_edge_distances():
    result = offset_polygon(UNIT_SQUARE, [1.0, 0.0, 0.0, 0.0])
    # Only the bottom edge (vertex 0 -> 1) moves
    assert result[0] == pytest.approx(Vec2(0, -1))
    assert result[1] == pytest.approx(Vec2(1, -1))
    assert result[2] == pytest.approx(Vec2(1, 1))


def test_offset_polygon_parallel_neighbours_use_the_wider_shift():
    square = [Vec2(0, 0), Vec2(0.5, 0), Vec2(1, 0), Vec2(1, 1), Vec2(0, 1)]
    result = offset_polygon(square, [1.0, 0.0, 0.0, 0.0, 0.0])
    assert result[1] == pytest.approx(Vec2(0.5, -1))
    assert result[2] == pytest.approx(Vec2(1, 0))


def test_dedupe_polygon_opens_closed_rings():
    ring = [(0, 0), (1, 0), (1, 0), (1, 1), (0, 1), (0, 0)]
    assert dedupe_polygon(ring) == UNIT_SQUARE
    assert dedupe_polygon([(2, 2), (2, 2)]) == [Vec2(2, 2)]
    assert is_degenerate_polygon(dedupe_polygon([(0, 0), (1, 0), (0, 0)]))


def test_misc_polygon_queries(l_shape):
    points = to_vec2_list(l_shape)
    assert point_in_polygon(Vec2(1, 1), points)
    assert not point_in_polygon(Vec2(3, 3), points)
    assert is_convex(UNIT_SQUARE)
    assert not is_convex(points)
    assert polygon_centroid(UNIT_SQUARE) == pytest.approx(Vec2(0.5, 0.5))


def test_build_plane_uses_newell_area_and_slope():
    rise = math.tan(math.radians(30))
    plane = build_plane("r_p", "r", "Slope",
                        [(0, 0, 0), (2, 0, 0), (2, 1, rise), (0, 1, rise)])
    assert plane.area == pytest.approx(2 / math.cos(math.radians(30)))
    assert plane.slope_angle_deg == pytest.approx(30.0)
    assert plane.normal[2] > 0
    assert plane.triangles() == [(0, 1, 2), (0, 2, 3)]


def test_build_plane_drops_repeated_points():
    plane = build_plane("r_p", "r", "Hip", [(0, 0, 0), (1, 0, 0), (0.5, 1, 1), (0.5, 1, 1)])
    assert len(plane.polygon) == 3


def test_planes_for_roof_matches_field_not_prefix():
    planes = [
        build_plane("r1_front", "r1", "Front", [(0, 0, 0), (1, 0, 0), (1, 1, 0)]),
        build_plane("r10_front", "r10", "Front", [(0, 0, 0), (1, 0, 0), (1, 1, 0)]),
    ]
    assert [p.plane_id for p in planes_for_roof(planes, "r1")] == ["r1_front"]
