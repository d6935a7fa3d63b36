import pytest

from roofkit import (
    EdgeOverhangs,
    EdgeRole,
    RoofSystemConfig,
    RoofType,
    apply_mutation,
    create_roof,
    generate_solid_for_roof,
    reset_topology,
    sync_topology,
    update_roof,
)
from roofkit.topology import add_interior_vertex, mark_gable, pin_vertex, set_edge_role


@pytest.fixture
def roof(rectangle):
    return create_roof("r1", "f1", rectangle, 0.0)


def test_create_roof_uses_config_defaults(roof):
    assert roof.roof_type == RoofType.GABLE
    assert roof.pitch_deg == 30.0
    assert roof.lower_pitch_deg == 60.0
    assert roof.edge_overhangs == EdgeOverhangs()
    assert not roof.use_custom_topology
    assert len(roof.topology.interior_edges()) == 1


def test_create_roof_overrides(rectangle):
    config = RoofSystemConfig(default_roof_type=RoofType.HIP, default_overhang=150.0)
    roof = create_roof("r2", "f2", rectangle, 2800.0, config=config, pitch_deg=40.0)
    assert roof.roof_type == RoofType.HIP
    assert roof.pitch_deg == 40.0
    assert roof.base_z == 2800.0
    assert roof.edge_overhangs == EdgeOverhangs.uniform(150.0)
    assert all(v.pinned_z == 2800.0 for v in roof.topology.vertices.values())

    roof = create_roof("r3", "f3", rectangle, 0.0, overhang=75.0)
    assert roof.edge_overhangs.back == 75.0


def test_create_roof_rejects_unknown_parameters(rectangle):
    with pytest.raises(ValueError):
        create_roof("r1", "f1", rectangle, 0.0, colour="red")


def test_apply_mutation_marks_roof_custom(roof):
    edited, new_id = apply_mutation(roof, add_interior_vertex, (4000.0, 1000.0))
    assert new_id == "v7"
    assert edited.use_custom_topology
    assert "v7" not in roof.topology.vertices

    edited, new_id = apply_mutation(edited, set_edge_role, "e0", EdgeRole.GABLE)
    assert new_id is None
    assert edited.topology.edges["e0"].role == EdgeRole.GABLE


def test_rejected_mutation_leaves_roof_untouched(roof):
    same, new_id = apply_mutation(roof, mark_gable, "missing")
    assert same is roof
    assert new_id is None


def test_sync_topology_follows_footprint_until_custom(roof):
    wider = [(0.0, 0.0), (9000.0, 0.0), (9000.0, 6000.0), (0.0, 6000.0)]
    assert sync_topology(roof, [(0.0, 0.0), (8000.0, 0.0), (8000.0, 6000.0), (0.0, 6000.0)]) is roof

    synced = sync_topology(roof, wider)
    assert synced.topology.vertices["v1"].position.x == 9000.0

    custom, _ = apply_mutation(roof, mark_gable, "e0")
    assert sync_topology(custom, wider) is custom


def test_update_roof_keeps_custom_topology(roof, rectangle):
    custom, _ = apply_mutation(roof, mark_gable, "e0")
    updated = update_roof(custom, rectangle, pitch_deg=45.0, overhang=200.0)
    assert updated.pitch_deg == 45.0
    assert updated.edge_overhangs == EdgeOverhangs.uniform(200.0)
    assert updated.use_custom_topology
    assert updated.topology is custom.topology


def test_update_roof_type_change_resets_topology(roof, rectangle):
    custom, _ = apply_mutation(roof, mark_gable, "e0")
    flat = update_roof(custom, rectangle, roof_type="flat")
    assert flat.roof_type == RoofType.FLAT
    assert not flat.use_custom_topology
    assert flat.topology.interior_edges() == []


def test_update_roof_ridge_offset_moves_preset_ridge(roof, rectangle):
    moved = update_roof(roof, rectangle, ridge_offset=400.0)
    ridge = next(e for e in moved.topology.edges.values() if e.role == EdgeRole.RIDGE)
    assert moved.topology.vertices[ridge.start_id].position.y == 3400.0

    with pytest.raises(ValueError):
        update_roof(roof, rectangle, id="other")


def test_reset_topology(roof, rectangle):
    custom, _ = apply_mutation(roof, mark_gable, "e0")
    restored = reset_topology(custom, rectangle)
    assert not restored.use_custom_topology
    assert restored.topology == roof.topology


def test_generate_solid_for_roof(roof, rectangle):
    solid = generate_solid_for_roof(roof, rectangle)
    assert solid.face_id == "f1"
    assert sorted(p.plane_id for p in solid.planes) == ["r1_back", "r1_front"]

    custom, _ = apply_mutation(roof, add_interior_vertex, (100.0, 100.0))
    solid = generate_solid_for_roof(custom, rectangle)
    assert [p.plane_id for p in solid.planes] == ["r1_front", "r1_back"]


def test_first_edit_keeps_plane_and_fascia_ids(rectangle):
    roof = create_roof("r1", "f1", rectangle, 0.0, overhang=250.0)
    before = generate_solid_for_roof(roof, rectangle)
    ridge = next(e for e in roof.topology.edges.values() if e.role == EdgeRole.RIDGE)

    # Pinning the ridge at the height it already resolves to changes nothing but the flag
    pinned, _ = apply_mutation(roof, pin_vertex, ridge.start_id, before.ridge_height)
    assert pinned.use_custom_topology
    after = generate_solid_for_roof(pinned, rectangle)

    assert [p.plane_id for p in after.planes] == [p.plane_id for p in before.planes]
    assert [f.plane_id for f in after.fascias] == [f.plane_id for f in before.fascias]
    assert [p.area for p in after.planes] == pytest.approx([p.area for p in before.planes])
    assert after.ridge_height == pytest.approx(before.ridge_height)
