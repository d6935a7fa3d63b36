import logging

import pytest
import yaml
from pydantic import ValidationError

from roofkit.config import DEFAULT_CONFIG, RoofSystemConfig, load_config
from roofkit.topology import EdgeOverhangs, RoofType
from roofkit.utils import (
    ErrorCategory,
    ErrorContext,
    ErrorHandler,
    ErrorSeverity,
    InvalidGeometryError,
    log_config,
    mutator,
    safe_execute,
    setup_logger,
)


def test_default_config():
    config = RoofSystemConfig()
    assert config.default_roof_type == RoofType.GABLE
    assert config.default_pitch_deg == 30.0
    assert (config.min_pitch_deg, config.max_pitch_deg) == (0.0, 60.0)
    assert (config.min_lower_pitch_deg, config.max_lower_pitch_deg) == (30.0, 85.0)
    assert config.max_overhang == 2000.0


def test_config_is_frozen():
    with pytest.raises(ValidationError):
        DEFAULT_CONFIG.max_pitch_deg = 10.0


def test_inverted_ranges_are_rejected():
    with pytest.raises(ValidationError):
        RoofSystemConfig(min_pitch_deg=50.0, max_pitch_deg=40.0)
    with pytest.raises(ValidationError):
        RoofSystemConfig(miter_limit=1.0)


def test_clamps():
    config = RoofSystemConfig()
    assert config.clamp_pitch(75.0) == 60.0
    assert config.clamp_pitch(-5.0) == 0.0
    assert config.clamp_lower_pitch(10.0) == 30.0
    assert config.clamp_overhang(5000.0) == 2000.0
    assert config.clamp_ridge_offset(-9000.0) == -3000.0
    clamped = config.clamp_overhangs(EdgeOverhangs(front=-1.0, back=3000.0, left=10.0))
    assert clamped == EdgeOverhangs(front=0.0, back=2000.0, left=10.0, right=0.0)


def test_load_config_missing_file(tmp_path, caplog):
    with caplog.at_level(logging.WARNING):
        config = load_config(tmp_path / "absent.yaml")
    assert config == DEFAULT_CONFIG
    assert "not found" in caplog.text
    assert load_config() is DEFAULT_CONFIG


def test_load_config_reads_roof_section(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text(yaml.safe_dump({
        "logging": {"level": "DEBUG"},
        "roof": {"default_roof_type": "hip", "max_pitch_deg": 45.0, "default_overhang": 100.0},
    }))
    config = load_config(path)
    assert config.default_roof_type == RoofType.HIP
    assert config.max_pitch_deg == 45.0
    assert config.default_overhang == 100.0


def test_load_config_flat_file(tmp_path):
    path = tmp_path / "roof.yaml"
    path.write_text("miter_limit: 2.5\n")
    assert load_config(str(path)).miter_limit == 2.5


def test_setup_logger_writes_file(tmp_path):
    log_file = tmp_path / "logs" / "roofkit.log"
    logger = setup_logger("roofkit.tests.file", level="debug", log_file=str(log_file))
    try:
        assert logger.level == logging.DEBUG
        logger.debug("hello roof")
        log_config(RoofSystemConfig(), logger)
        for handler in logger.handlers:
            handler.flush()
        text = log_file.read_text()
        assert "hello roof" in text
        assert "max_pitch_deg: 60.0" in text
    finally:
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            handler.close()


def test_setup_logger_replaces_handlers():
    first = setup_logger("roofkit.tests.repeat", level=logging.WARNING)
    second = setup_logger("roofkit.tests.repeat", level="not-a-level")
    assert first is second
    assert len(second.handlers) == 1
    assert second.level == logging.INFO
    second.removeHandler(second.handlers[0])


def test_mutator_turns_geometry_errors_into_noops():
    @mutator()
    def broken(topology):
        raise InvalidGeometryError("bad")

    @mutator(creates=True)
    def broken_create(topology):
        raise InvalidGeometryError("bad")

    sentinel = object()
    assert broken(sentinel) is sentinel
    assert broken_create(sentinel) == (sentinel, None)


def test_mutator_lets_other_errors_through():
    @mutator()
    def buggy(topology):
        raise KeyError("programming error")

    with pytest.raises(KeyError):
        buggy(object())


def test_safe_execute_records_failures():
    handler = ErrorHandler(max_recent=2)

    def failing():
        raise InvalidGeometryError("degenerate")

    for _ in range(3):
        assert safe_execute(failing, default_return=[], context=ErrorContext("build"),
                            handler=handler) == []
    stats = handler.get_error_stats()
    assert stats["total_errors"] == 3
    assert stats["errors_by_category"] == {"invalid_geometry": 3}
    assert len(handler.get_recent_errors()) == 2
    assert safe_execute(lambda: 5) == 5


def test_error_handler_report():
    handler = ErrorHandler()
    report = handler.handle_error(ValueError("boom"), ErrorContext("export"),
                                  ErrorSeverity.LOW, ErrorCategory.EXPORT_ERROR)
    assert report.category == ErrorCategory.EXPORT_ERROR
    assert report.exception_type == "ValueError"
    assert handler.get_recent_errors()[0]["operation"] == "export"
