"""Audit logging for archive runs."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


class AuditLog:
    """Append-only JSON-lines log of archive events."""

    def __init__(self, log_path: Optional[Path] = None):
        """
        Initialize audit logger.

        Args:
            log_path: Path to audit log file (default: ~/.archive_maildir/logs/audit.log)
        """
        if log_path is None:
            log_path = Path("~/.archive_maildir/logs/audit.log").expanduser()

        self.log_path = log_path
        self.log_path.parent.mkdir(parents=True, exist_ok=True)

    def log_run_started(
        self,
        input_path: Path,
        output_dir: Path,
        before: str,
        mode: str,
        total: int,
    ) -> None:
        """
        Log the start of an archive run.

        Args:
            input_path: Source Maildir
            output_dir: Output root directory
            before: Cutoff date (ISO format)
            mode: Archive mode value
            total: Number of messages in the source ``cur/`` area
        """
        self._write_event(
            {
                "event_type": "archive_run_started",
                "input_path": str(input_path),
                "output_dir": str(output_dir),
                "before": before,
                "mode": mode,
                "total": total,
            }
        )

    def log_email_archived(
        self,
        message_id: str,
        source_path: Path,
        destination_path: Path,
        received_date: str,
        mode: str,
    ) -> None:
        """
        Log one successfully archived email.

        Args:
            message_id: Maildir id of the email
            source_path: Path of the source message file
            destination_path: Destination Maildir root
            received_date: Received date (ISO format)
            mode: Archive mode value
        """
        self._write_event(
            {
                "event_type": "email_archived",
                "message_id": message_id,
                "source_path": str(source_path),
                "destination_path": str(destination_path),
                "received_date": received_date,
                "mode": mode,
            }
        )

    def log_archive_error(
        self,
        kind: str,
        message_id: Optional[str],
        source_path: Optional[Path],
        destination_path: Optional[Path],
        error_details: str,
    ) -> None:
        """
        Log a per-message failure.

        Args:
            kind: Error kind value
            message_id: Maildir id (if known)
            source_path: Source file path (if known)
            destination_path: Destination Maildir root (if resolved)
            error_details: Human-readable error description
        """
        self._write_event(
            {
                "event_type": "archive_error",
                "kind": kind,
                "message_id": message_id,
                "source_path": str(source_path) if source_path else None,
                "destination_path": str(destination_path) if destination_path else None,
                "error_details": error_details,
            }
        )

    def log_run_finished(self, archived: int, considered: int, errors: int, mode: str) -> None:
        """Log the summary of an archive run."""
        self._write_event(
            {
                "event_type": "archive_run_finished",
                "archived": archived,
                "considered": considered,
                "errors": errors,
                "mode": mode,
            }
        )

    def read_events(self) -> list[dict]:
        """
        Read all events from the log file.

        Returns:
            List of event dictionaries, oldest first. Invalid lines are skipped.
        """
        events = []

        if self.log_path.exists():
            with open(self.log_path, "r", encoding="utf-8") as f:
                for line in f:
                    line = line.strip()
                    if line:
                        try:
                            events.append(json.loads(line))
                        except json.JSONDecodeError:
                            # Skip invalid lines
                            continue

        return events

    def export_events(self, output_path: Path) -> None:
        """
        Export all events to a JSON array file.

        Args:
            output_path: Path to output JSON file
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(self.read_events(), f, indent=2, ensure_ascii=False)

    def _write_event(self, event: dict) -> None:
        """
        Write event to log file.

        Args:
            event: Event dictionary
        """
        event = {"timestamp": datetime.now(timezone.utc).isoformat(), **event}
        with open(self.log_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(event, ensure_ascii=False) + "\n")
