import logging

from roofkit.geometry import Vec2
from roofkit.topology import (
    Edge,
    EdgeRole,
    RoofTopology,
    RoofType,
    Vertex,
    empty_topology,
    initialize_from_polygon,
    validate_topology,
)


def _roles(topology):
    return {edge_id: edge.role for edge_id, edge in topology.edges.items()}


def test_flat_preset_rebuilds_boundary(rectangle, flat_topology):
    assert validate_topology(flat_topology) == []
    assert list(flat_topology.vertices) == ["v0", "v1", "v2", "v3"]
    assert all(v.pinned_z == 0.0 and not v.is_interior for v in flat_topology.vertices.values())
    assert set(_roles(flat_topology).values()) == {EdgeRole.EAVE}
    assert flat_topology.edges["e3"].start_id == "v3"
    assert flat_topology.edges["e3"].end_id == "v0"
    assert flat_topology.boundary_polygon() == [Vec2(*p) for p in rectangle]


def test_roof_types_without_preset_use_flat(rectangle):
    for roof_type in (RoofType.HIP, RoofType.SHED, RoofType.MANSARD):
        topology = initialize_from_polygon(rectangle, 2500.0, roof_type)
        assert topology.interior_edges() == []
        assert all(v.pinned_z == 2500.0 for v in topology.vertices.values())


def test_gable_preset_on_rectangle(gable_topology):
    assert validate_topology(gable_topology) == []
    roles = _roles(gable_topology)
    assert roles["e0"] == EdgeRole.EAVE
    assert roles["e2"] == EdgeRole.EAVE
    assert roles["e1"] == EdgeRole.GABLE
    assert roles["e3"] == EdgeRole.GABLE

    ridges = [e for e in gable_topology.edges.values() if e.role == EdgeRole.RIDGE]
    assert len(ridges) == 1
    start = gable_topology.vertices[ridges[0].start_id]
    end = gable_topology.vertices[ridges[0].end_id]
    assert start.position == Vec2(0.0, 3000.0)
    assert end.position == Vec2(8000.0, 3000.0)
    assert start.is_interior and end.is_interior
    assert not start.is_pinned and not end.is_pinned


def test_gable_ridge_follows_the_longest_edge():
    deep = [(0.0, 0.0), (4000.0, 0.0), (4000.0, 10000.0), (0.0, 10000.0)]
    topology = initialize_from_polygon(deep, 0.0, RoofType.GABLE)
    roles = _roles(topology)
    assert roles["e0"] == EdgeRole.GABLE
    assert roles["e2"] == EdgeRole.GABLE
    ridge = next(e for e in topology.edges.values() if e.role == EdgeRole.RIDGE)
    xs = {topology.vertices[v].position.x for v in (ridge.start_id, ridge.end_id)}
    assert xs == {2000.0}


def test_gable_ridge_offset_shifts_midline(rectangle):
    topology = initialize_from_polygon(rectangle, 0.0, RoofType.GABLE, ridge_offset=500.0)
    ridge = next(e for e in topology.edges.values() if e.role == EdgeRole.RIDGE)
    assert topology.vertices[ridge.start_id].position.y == 3500.0


def test_gable_falls_back_to_flat_when_midline_hits_vertex(caplog):
    square = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)]
    with caplog.at_level(logging.WARNING, logger="roofkit.topology.initialize"):
        topology = initialize_from_polygon(square, 0.0, RoofType.GABLE, ridge_offset=5.0)
    assert topology.interior_edges() == []
    assert set(_roles(topology).values()) == {EdgeRole.EAVE}
    assert "flat preset" in caplog.text


def test_degenerate_polygons_give_empty_topology(caplog):
    with caplog.at_level(logging.WARNING):
        assert initialize_from_polygon([(0, 0), (1, 0)], 0.0).is_empty
        assert initialize_from_polygon([(0, 0), (1, 0), (2, 0)], 0.0).is_empty
    assert "Degenerate" in caplog.text
    assert validate_topology(empty_topology()) == []


def test_clockwise_polygon_keeps_caller_order(rectangle):
    clockwise = list(reversed(rectangle))
    topology = initialize_from_polygon(clockwise, 0.0, RoofType.GABLE)
    assert validate_topology(topology) == []
    assert topology.vertices["v0"].position == Vec2(*clockwise[0])


def test_initializer_does_not_alias_input(rectangle):
    polygon = [list(p) for p in rectangle]
    topology = initialize_from_polygon(polygon, 0.0)
    polygon[0][0] = -999.0
    assert topology.vertices["v0"].position == Vec2(0.0, 0.0)


def test_validate_topology_reports_broken_graphs():
    vertices = {
        "a": Vertex("a", Vec2(0, 0), 0.0),
        "b": Vertex("b", Vec2(1, 0), 0.0),
        "c": Vertex("c", Vec2(0, 1), None, is_interior=True),
    }
    edges = {
        "e0": Edge("e0", "a", "b", EdgeRole.EAVE),
        "e1": Edge("e1", "b", "c", EdgeRole.EAVE),
        "e2": Edge("e2", "c", "missing", EdgeRole.RIDGE),
    }
    problems = validate_topology(RoofTopology(vertices=vertices, edges=edges))
    assert any("missing vertex" in p for p in problems)
    assert any("touches interior vertex" in p for p in problems)
    assert any("closed cycle" in p for p in problems)


def test_topology_dict_round_trip(gable_topology):
    restored = RoofTopology.from_dict(gable_topology.to_dict())
    assert restored == gable_topology


def test_closed_ring_matches_open_polygon(rectangle, gable_topology):
    ring = list(rectangle) + [rectangle[0]]
    topology = initialize_from_polygon(ring, 0.0, RoofType.GABLE)
    assert topology == gable_topology
    assert validate_topology(topology) == []


def test_repeated_vertex_leaves_no_zero_length_edge(rectangle):
    polygon = [rectangle[0], rectangle[0], rectangle[1], rectangle[2], rectangle[2], rectangle[3]]
    topology = initialize_from_polygon(polygon, 0.0, RoofType.FLAT)
    assert list(topology.vertices) == ["v0", "v1", "v2", "v3"]
    assert topology.boundary_polygon() == [Vec2(*p) for p in rectangle]
