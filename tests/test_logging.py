"""Tests for logging configuration and utilities."""

import json
import logging
import os
import time

from fusebox.logging import (
    ComponentFormatter,
    JSONLHandler,
    configure_logging,
    prune_old_logs,
    record_extra,
    resolve_level,
)


def _record(name: str = "fusebox.container", **extra) -> logging.LogRecord:
    logger = logging.getLogger(name)
    return logger.makeRecord(
        name, logging.INFO, __file__, 1, "fuse_fired", None, None, extra=extra
    )


class TestPruneOldLogs:
    """Tests for prune_old_logs function."""

    def test_deletes_old_files(self, tmp_path):
        old_log = tmp_path / "2024-01-01.jsonl"
        old_log.write_text('{"test": "old"}\n')
        old_time = time.time() - (10 * 24 * 60 * 60)
        os.utime(old_log, (old_time, old_time))

        recent_log = tmp_path / "2024-01-10.jsonl"
        recent_log.write_text('{"test": "recent"}\n')

        deleted = prune_old_logs(tmp_path, retention_days=7)

        assert deleted == 1
        assert not old_log.exists()
        assert recent_log.exists()

    def test_ignores_non_jsonl_files(self, tmp_path):
        other = tmp_path / "notes.txt"
        other.write_text("keep me")
        old_time = time.time() - (30 * 24 * 60 * 60)
        os.utime(other, (old_time, old_time))

        assert prune_old_logs(tmp_path, retention_days=7) == 0
        assert other.exists()

    def test_missing_directory(self, tmp_path):
        assert prune_old_logs(tmp_path / "missing") == 0


class TestRecordExtra:
    """Tests for extracting structured fields."""

    def test_collects_extra_fields(self):
        record = _record(**{"fuse.id": "00000001", "container.count": 3})
        assert record_extra(record) == {"fuse.id": "00000001", "container.count": 3}

    def test_plain_record_has_no_extra(self):
        assert record_extra(_record()) == {}


class TestComponentFormatter:
    """Tests for ComponentFormatter."""

    def test_short_component_and_fields(self):
        formatter = ComponentFormatter("%(component)s | %(message)s")
        line = formatter.format(_record(**{"fuse.id": "00000002"}))
        assert line == "container | fuse_fired [fuse.id=00000002]"

    def test_foreign_logger_keeps_first_part(self):
        formatter = ComponentFormatter("%(component)s | %(message)s")
        assert formatter.format(_record("other.module")) == "other | fuse_fired"


class TestJSONLHandler:
    """Tests for JSONLHandler."""

    def test_writes_json_lines(self, tmp_path):
        handler = JSONLHandler(tmp_path / "logs")
        handler.emit(_record(**{"fuse.id": "0000000a", "fuse.duration": 5.0}))
        handler.close()

        files = list((tmp_path / "logs").glob("*.jsonl"))
        assert len(files) == 1
        entry = json.loads(files[0].read_text().strip())
        assert entry["level"] == "INFO"
        assert entry["component"] == "container"
        assert entry["logger"] == "fusebox.container"
        assert entry["message"] == "fuse_fired"
        assert entry["extra"] == {"fuse.id": "0000000a", "fuse.duration": 5.0}

    def test_unserializable_extra_is_stringified(self, tmp_path):
        handler = JSONLHandler(tmp_path)
        handler.emit(_record(**{"fuse.payload_type": object}))
        handler.close()

        entry = json.loads(next(tmp_path.glob("*.jsonl")).read_text())
        assert "object" in entry["extra"]["fuse.payload_type"]


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_resolve_level(self, monkeypatch):
        monkeypatch.delenv("FUSEBOX_LOG_LEVEL", raising=False)
        assert resolve_level("debug") == logging.DEBUG
        assert resolve_level("nonsense") == logging.INFO
        assert resolve_level() == logging.INFO
        monkeypatch.setenv("FUSEBOX_LOG_LEVEL", "ERROR")
        assert resolve_level() == logging.ERROR

    def test_console_only(self, restore_root_logger):
        configure_logging(level="WARNING")
        root = restore_root_logger
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, ComponentFormatter)

    def test_with_file(self, restore_root_logger, fusebox_home):
        configure_logging(level="DEBUG", log_to_file=True)
        logging.getLogger("fusebox.driver").info(
            "fuse_driver_started", extra={"container.count": 2}
        )

        handlers = restore_root_logger.handlers
        assert any(isinstance(h, JSONLHandler) for h in handlers)
        files = list((fusebox_home / "logs").glob("*.jsonl"))
        assert len(files) == 1
        assert "fuse_driver_started" in files[0].read_text()

    def test_rich_console(self, restore_root_logger):
        from rich.logging import RichHandler

        configure_logging(level="INFO", use_rich=True)
        assert isinstance(restore_root_logger.handlers[0], RichHandler)
