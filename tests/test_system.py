"""
Tests for logging helpers and the system coordinator.
"""

import json
import logging
import logging.handlers
import signal
import sys

import pytest

from lutube.core.logging_config import ColoredFormatter, get_error_tracker, get_performance_logger
from lutube.main import LutubeSystem


def test_error_tracker_counts_errors(caplog):
    tracker = get_error_tracker("uploads")

    with caplog.at_level(logging.WARNING):
        tracker.log_error(OSError("disk full"), "save", {"video_id": "abc"})
        tracker.log_warning("slow disk", "save")

    stats = tracker.get_error_stats()
    assert stats["component"] == "uploads"
    assert stats["error_count"] == 1
    assert stats["errors_by_context"] == {"save": 1}
    assert stats["last_error_time"] is not None
    assert "Error in uploads (save): disk full | Data: {'video_id': 'abc'}" in caplog.text
    assert "Warning in uploads (save): slow disk" in caplog.text


def test_performance_logger_requires_start():
    timer = get_performance_logger("test")

    assert timer.end_timer("never started") == 0.0
    timer.start_timer("op")
    assert timer.end_timer("op") >= 0.0
    assert timer.end_timer("op") == 0.0


def test_performance_logger_tracks_overlapping_operations(caplog):
    timer = get_performance_logger("overlap")

    with caplog.at_level(logging.INFO, logger="performance.overlap"):
        timer.start_timer("save a")
        timer.start_timer("save b")
        timer.end_timer("save a")
        timer.end_timer("save b", succeeded=False)

    messages = [record.getMessage() for record in caplog.records if record.name == "performance.overlap"]
    assert any(message.startswith("Completed: save a in ") for message in messages)
    assert any(message.startswith("Failed: save b after ") for message in messages)


def test_colored_formatter_leaves_record_untouched():
    record = logging.LogRecord("lutube", logging.INFO, __file__, 1, "hello", None, None)

    formatted = ColoredFormatter("%(levelname)s %(message)s").format(record)

    assert "\033[32mINFO\033[0m hello" == formatted
    assert record.levelname == "INFO"


@pytest.fixture
def system(tmp_path, monkeypatch):
    monkeypatch.setattr(signal, "signal", lambda *args: None)
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", list(root.handlers))
    monkeypatch.setattr(root, "level", root.level)

    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({
        "storage": {"base_path": str(tmp_path / "videos")},
        "system": {"log_file": str(tmp_path / "logs" / "lutube.log"), "log_max_bytes": 4096, "log_backup_count": 2, "enable_api": False},
    }))
    return LutubeSystem(str(config_path), log_level="DEBUG")


def test_system_wires_components(system, tmp_path):
    assert system.config.system.log_level == "DEBUG"
    assert system.storage_manager.base_path == tmp_path / "videos"
    assert (tmp_path / "logs" / "lutube.log").exists()
    file_handlers = [h for h in system.logger_setup.handlers if isinstance(h, logging.handlers.RotatingFileHandler)]
    assert len(file_handlers) == 1
    assert file_handlers[0].maxBytes == 4096
    assert file_handlers[0].backupCount == 2

    status = system.get_system_status()
    assert status["running"] is False
    assert status["video_module"]["identifier_allocator"] == "FileSystemIdentifierAllocator"
    assert status["errors"]["component"] == "main_system"


def test_system_does_not_start_with_api_disabled(system):
    assert system.start() is False
    assert system.is_running() is False
