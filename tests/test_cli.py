import json
import logging

import pytest
import yaml

from roofkit.cli import build_parser, main, read_footprint


@pytest.fixture(autouse=True)
def reset_roofkit_logger():
    yield
    logger = logging.getLogger("roofkit")
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def footprint_json(tmp_path, rectangle):
    path = tmp_path / "house.json"
    path.write_text(json.dumps({"polygon": rectangle}))
    return path


def test_read_footprint_formats(tmp_path, rectangle, footprint_json):
    assert read_footprint(str(footprint_json)) == [list(p) for p in rectangle]

    bare = tmp_path / "bare.yaml"
    bare.write_text(yaml.safe_dump([list(p) for p in rectangle]))
    assert read_footprint(str(bare)) == [list(p) for p in rectangle]

    broken = tmp_path / "broken.json"
    broken.write_text(json.dumps({"points": []}))
    with pytest.raises(ValueError):
        read_footprint(str(broken))


def test_parser_defaults():
    args = build_parser().parse_args(["--footprint", "f.json"])
    assert args.roof_type is None
    assert args.roof_id == "roof"
    assert args.ridge_offset == 0.0


def test_main_prints_summary(footprint_json, capsys):
    assert main(["--footprint", str(footprint_json), "--roof-id", "r1", "--overhang", "300"]) == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["face_id"] == "house"
    assert summary["roof_type"] == "gable"
    assert sorted(p["plane_id"] for p in summary["planes"]) == ["r1_back", "r1_front"]
    assert len(summary["fascias"]) == 2


def test_main_with_config_and_export(tmp_path, footprint_json, capsys):
    config = tmp_path / "config.yaml"
    config.write_text(yaml.safe_dump({"roof": {"default_roof_type": "hip"}}))
    out = tmp_path / "roof.stl"

    code = main(["--footprint", str(footprint_json), "--config", str(config),
                 "--export", str(out)])
    assert code == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["roof_type"] == "hip"
    assert len(summary["planes"]) == 4
    assert summary["export"]["success"]
    assert out.exists()


def test_main_missing_footprint(tmp_path, capsys):
    assert main(["--footprint", str(tmp_path / "nope.json")]) == 1
    assert capsys.readouterr().out == ""


def test_closed_ring_footprint(tmp_path, rectangle, capsys):
    ring = [list(p) for p in rectangle] + [list(rectangle[0])]
    path = tmp_path / "ring.json"
    path.write_text(json.dumps({"polygon": ring}))
    assert read_footprint(str(path)) == [list(p) for p in rectangle]

    assert main(["--footprint", str(path), "--roof-id", "r1"]) == 0
    summary = json.loads(capsys.readouterr().out)
    assert [p["plane_id"] for p in summary["planes"]] == ["r1_front", "r1_back"]
