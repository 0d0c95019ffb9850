"""Tests for the audit log."""

import json
from pathlib import Path

from archive_maildir.storage.audit_log import AuditLog


class TestAuditLog:
    """Test JSON-lines event logging."""

    def test_creates_parent_directory(self, tmp_path):
        """Missing parent directories of the log file are created."""
        log = AuditLog(tmp_path / "logs" / "nested" / "audit.log")

        assert log.log_path.parent.is_dir()

    def test_log_events(self, tmp_path):
        """Each logged event is one JSON line with a timestamp."""
        log = AuditLog(tmp_path / "audit.log")

        log.log_run_started(Path("/mail/in"), Path("/mail/out"), "2022-01-01", "move", 2)
        log.log_email_archived("M1", Path("/mail/in/cur/M1:2,S"), Path("/mail/out/2020"), "2020-01-01", "move")
        log.log_archive_error("date", "M3", Path("/mail/in/cur/M3:2,"), None, "Received header is missing")
        log.log_run_finished(archived=1, considered=3, errors=1, mode="move")

        events = log.read_events()
        assert [e["event_type"] for e in events] == [
            "archive_run_started",
            "email_archived",
            "archive_error",
            "archive_run_finished",
        ]
        assert events[1]["destination_path"] == "/mail/out/2020"
        assert events[2]["destination_path"] is None
        assert events[3]["considered"] == 3
        assert all("timestamp" in e for e in events)

    def test_read_events_skips_invalid_lines(self, tmp_path):
        """Lines that are not JSON are skipped when reading."""
        log = AuditLog(tmp_path / "audit.log")
        log.log_run_finished(archived=0, considered=0, errors=0, mode="copy")
        with open(log.log_path, "a", encoding="utf-8") as f:
            f.write("garbage\n\n")

        assert len(log.read_events()) == 1

    def test_export_events(self, tmp_path):
        """Events are exported as a JSON array."""
        log = AuditLog(tmp_path / "audit.log")
        log.log_run_finished(archived=2, considered=5, errors=0, mode="copy")
        output = tmp_path / "export" / "events.json"

        log.export_events(output)

        exported = json.loads(output.read_text(encoding="utf-8"))
        assert exported[0]["archived"] == 2
