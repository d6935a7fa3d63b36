import math

import pytest

from roofkit import (
    EdgeOverhangs,
    RoofType,
    generate_roof_solid,
    initialize_from_polygon,
    planes_for_roof,
)
from roofkit.topology import EdgeRole, add_edge, add_interior_vertex, empty_topology, move_vertex

WIDTH = 8000.0
DEPTH = 6000.0

COS30 = math.cos(math.radians(30))
TAN30 = math.tan(math.radians(30))


def _solid(rectangle, roof_type, **kwargs):
    options = dict(base_z=0.0, pitch_deg=30.0)
    options.update(kwargs)
    return generate_roof_solid("r1", "f1", rectangle, roof_type, **options)


@pytest.mark.parametrize("overhang", [0.0, 250.0])
def test_flat_roof_covers_extended_footprint(rectangle, overhang):
    solid = _solid(rectangle, RoofType.FLAT, overhang=overhang)
    assert [p.plane_id for p in solid.planes] == ["r1_flat"]
    plane = solid.planes[0]
    assert plane.label == "Flat Roof"
    assert plane.slope_angle_deg == pytest.approx(0.0)
    assert plane.area == pytest.approx((WIDTH + 2 * overhang) * (DEPTH + 2 * overhang))
    assert all(z == 0.0 for _, _, z in plane.polygon)
    assert solid.fascias == ()
    assert solid.ridge_height == 0.0


def test_gable_roof_with_overhang(rectangle):
    solid = _solid(rectangle, RoofType.GABLE, overhang=300.0)
    ridge = 3300.0 * TAN30

    assert sorted(p.plane_id for p in solid.planes) == ["r1_back", "r1_front"]
    assert solid.plane("r1_front").label == "Front Slope"
    for plane in solid.planes:
        assert plane.roof_id == "r1"
        assert plane.area == pytest.approx(WIDTH * 3300.0 / COS30)
        assert plane.slope_angle_deg == pytest.approx(30.0)
    assert solid.ridge_height == pytest.approx(ridge)
    assert solid.total_area == pytest.approx(2 * WIDTH * 3300.0 / COS30)

    assert sorted(f.plane_id for f in solid.fascias) == ["r1_gable_left", "r1_gable_right"]
    for fascia in solid.fascias:
        assert fascia.label == "Gable Wall"
        assert fascia.slope_angle_deg == 90.0
        assert fascia.area == pytest.approx(6600.0 * ridge / 2)


def test_plane_ids_survive_parameter_changes(rectangle):
    first = _solid(rectangle, RoofType.GABLE, pitch_deg=30.0)
    second = _solid(rectangle, RoofType.GABLE, pitch_deg=45.0, overhang=500.0)
    assert [p.plane_id for p in first.planes] == [p.plane_id for p in second.planes]
    assert second.ridge_height > first.ridge_height


def test_side_overhangs_only_widen_their_side(rectangle):
    solid = _solid(rectangle, RoofType.FLAT, edge_overhangs=EdgeOverhangs(front=400.0))
    assert solid.planes[0].area == pytest.approx(WIDTH * (DEPTH + 400.0))


def test_pitch_is_clamped_to_config_range(rectangle):
    solid = _solid(rectangle, RoofType.GABLE, pitch_deg=80.0)
    for plane in solid.planes:
        assert plane.slope_angle_deg == pytest.approx(60.0)


def test_degenerate_footprint_gives_no_planes(caplog):
    solid = generate_roof_solid("r1", "f1", [(0, 0), (1, 0), (2, 0)], RoofType.GABLE, 0.0, 30.0)
    assert solid.is_empty
    assert solid.total_area == 0.0
    assert "degenerate" in caplog.text


def test_custom_topology_is_named_like_the_preset(rectangle, gable_topology):
    preset = _solid(rectangle, RoofType.GABLE, overhang=200.0)
    custom = _solid(rectangle, RoofType.GABLE, overhang=200.0, topology=gable_topology)
    assert [p.plane_id for p in custom.planes] == ["r1_front", "r1_back"]
    assert [p.plane_id for p in custom.planes] == [p.plane_id for p in preset.planes]
    assert [p.label for p in custom.planes] == ["Front Slope", "Back Slope"]
    assert [f.plane_id for f in custom.fascias] == ["r1_gable_right", "r1_gable_left"]
    assert [p.area for p in custom.planes] == pytest.approx([p.area for p in preset.planes])


def _flatten(points):
    return [c for point in points for c in point]


def _hip_topology(rectangle):
    topology = initialize_from_polygon(rectangle, 0.0, RoofType.FLAT)
    topology, a = add_interior_vertex(topology, (3000.0, 3000.0))
    topology, b = add_interior_vertex(topology, (5000.0, 3000.0))
    topology, _ = add_edge(topology, a, b, EdgeRole.RIDGE)
    for corner, end in (("v0", a), ("v3", a), ("v1", b), ("v2", b)):
        topology, _ = add_edge(topology, corner, end, EdgeRole.HIP)
    return topology, a


def test_custom_hip_topology(rectangle):
    topology, _ = _hip_topology(rectangle)
    solid = _solid(rectangle, RoofType.HIP, topology=topology)
    assert [p.plane_id for p in solid.planes] == ["r1_front", "r1_right", "r1_back", "r1_left"]
    assert solid.plane("r1_right").label == "Right Hip"
    assert solid.plane("r1_front").label == "Front Slope"
    assert solid.fascias == ()
    assert solid.ridge_height == pytest.approx(3000.0 * TAN30)
    assert solid.total_area == pytest.approx(WIDTH * DEPTH / COS30)


def test_moving_an_apex_keeps_every_plane_id(rectangle):
    topology, apex = _hip_topology(rectangle)
    before = _solid(rectangle, RoofType.HIP, topology=topology)
    moved = move_vertex(topology, apex, (2500.0, 3000.0))
    assert moved is not topology
    after = _solid(rectangle, RoofType.HIP, topology=moved)

    assert [p.plane_id for p in after.planes] == [p.plane_id for p in before.planes]
    # The right hip end does not touch the moved apex
    untouched_before, untouched_after = before.plane("r1_right"), after.plane("r1_right")
    assert untouched_after.area == pytest.approx(untouched_before.area)
    assert _flatten(untouched_after.polygon) == pytest.approx(_flatten(untouched_before.polygon))
    assert after.plane("r1_left").area != pytest.approx(before.plane("r1_left").area)


@pytest.mark.parametrize("roof_type", [RoofType.GABLE, RoofType.HIP, RoofType.SHED])
def test_sloped_plane_areas_grow_with_overhang(rectangle, roof_type):
    areas = []
    for overhang in (0.0, 200.0, 500.0):
        solid = _solid(rectangle, roof_type, overhang=overhang)
        areas.append({p.plane_id: p.area for p in solid.planes})
    assert areas[0].keys() == areas[1].keys() == areas[2].keys()
    for plane_id in areas[0]:
        assert areas[0][plane_id] < areas[1][plane_id] < areas[2][plane_id]


@pytest.mark.parametrize("roof_type, count", [(RoofType.GABLE, 2), (RoofType.FLAT, 1)])
def test_closed_ring_footprint(rectangle, roof_type, count):
    ring = list(rectangle) + [rectangle[0]]
    open_solid = _solid(rectangle, roof_type)
    closed_solid = _solid(ring, roof_type)
    assert len(closed_solid.planes) == count
    assert [p.plane_id for p in closed_solid.planes] == [p.plane_id for p in open_solid.planes]
    assert closed_solid.total_area == pytest.approx(open_solid.total_area)


def test_repeated_footprint_vertex_is_dropped():
    polygon = [(0.0, 0.0), (0.0, 0.0), (WIDTH, 0.0), (WIDTH, DEPTH), (0.0, DEPTH)]
    solid = generate_roof_solid("r1", "f1", polygon, RoofType.FLAT, 0.0, 30.0)
    assert [p.plane_id for p in solid.planes] == ["r1_flat"]
    assert solid.total_area == pytest.approx(WIDTH * DEPTH)


def test_empty_custom_topology(rectangle):
    solid = _solid(rectangle, RoofType.GABLE, topology=empty_topology())
    assert solid.is_empty


def test_planes_for_roof_filters_by_roof(rectangle):
    first = _solid(rectangle, RoofType.GABLE)
    second = generate_roof_solid("r2", "f2", rectangle, RoofType.FLAT, 0.0, 30.0)
    everything = list(first.planes) + list(second.planes)
    assert {p.plane_id for p in planes_for_roof(everything, "r2")} == {"r2_flat"}
