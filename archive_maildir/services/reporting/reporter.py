"""Observers notified by the archive pipeline."""

import logging
from datetime import date
from pathlib import Path
from typing import Iterable

from archive_maildir.models.archive_result import ArchiveSummary, MessageError
from archive_maildir.models.mail_entry import MailEntry
from archive_maildir.storage.audit_log import AuditLog

logger = logging.getLogger(__name__)


class ArchiveReporter:
    """
    Receives progress events from an archive run.

    Every method is a no-op here; subclasses override what they need. The
    pipeline never writes to a log itself, it only calls a reporter.
    """

    def on_start(self, options, total: int) -> None:
        """Called once before enumeration, with the source ``cur/`` count."""

    def on_archived(self, entry: MailEntry, received: date, destination: Path) -> None:
        """Called after an email was archived (or would be, in dry-run mode)."""

    def on_skipped(self, entry: MailEntry, received: date) -> None:
        """Called for an email received on or after the cutoff."""

    def on_error(self, error: MessageError) -> None:
        """Called for every recoverable per-message failure."""

    def on_finish(self, summary: ArchiveSummary) -> None:
        """Called once after enumeration is exhausted."""


class LoggingReporter(ArchiveReporter):
    """Reporter writing events to the standard ``logging`` module."""

    def __init__(self, log: logging.Logger = logger):
        self.log = log
        self._options = None

    def on_start(self, options, total: int) -> None:
        self._options = options
        self.log.info(
            "Archiving emails in maildir %s older than %s (%d emails, mode %s)",
            options.input_path,
            options.before,
            total,
            options.archive_mode.value,
        )

    def on_archived(self, entry: MailEntry, received: date, destination: Path) -> None:
        self.log.info(
            "Archiving email %s from folder %s to folder %s",
            entry.id,
            self._options.input_path if self._options else entry.path.parent.parent,
            destination,
        )

    def on_skipped(self, entry: MailEntry, received: date) -> None:
        self.log.debug(
            "Ignoring email %s: date %s is not older than threshold %s",
            entry.id,
            received,
            self._options.before if self._options else "?",
        )

    def on_error(self, error: MessageError) -> None:
        self.log.error("%s", error)

    def on_finish(self, summary: ArchiveSummary) -> None:
        self.log.info(
            "Archived %d/%d emails (%d errors)",
            summary.archived,
            summary.considered,
            len(summary.errors),
        )


class AuditLogReporter(ArchiveReporter):
    """Reporter recording events in an AuditLog."""

    def __init__(self, audit_log: AuditLog):
        self.audit_log = audit_log
        self._mode = ""

    def on_start(self, options, total: int) -> None:
        self._mode = options.archive_mode.value
        self.audit_log.log_run_started(
            input_path=options.input_path,
            output_dir=options.output_dir,
            before=options.before.isoformat(),
            mode=self._mode,
            total=total,
        )

    def on_archived(self, entry: MailEntry, received: date, destination: Path) -> None:
        self.audit_log.log_email_archived(
            message_id=entry.id,
            source_path=entry.path,
            destination_path=destination,
            received_date=received.isoformat(),
            mode=self._mode,
        )

    def on_error(self, error: MessageError) -> None:
        self.audit_log.log_archive_error(
            kind=error.kind.value,
            message_id=error.message_id,
            source_path=error.source_path,
            destination_path=error.destination_path,
            error_details=error.detail,
        )

    def on_finish(self, summary: ArchiveSummary) -> None:
        self.audit_log.log_run_finished(
            archived=summary.archived,
            considered=summary.considered,
            errors=len(summary.errors),
            mode=summary.mode.value,
        )


class CompositeReporter(ArchiveReporter):
    """Forwards every event to several reporters, in order."""

    def __init__(self, reporters: Iterable[ArchiveReporter]):
        self.reporters = list(reporters)

    def on_start(self, options, total: int) -> None:
        for reporter in self.reporters:
            reporter.on_start(options, total)

    def on_archived(self, entry: MailEntry, received: date, destination: Path) -> None:
        for reporter in self.reporters:
            reporter.on_archived(entry, received, destination)

    def on_skipped(self, entry: MailEntry, received: date) -> None:
        for reporter in self.reporters:
            reporter.on_skipped(entry, received)

    def on_error(self, error: MessageError) -> None:
        for reporter in self.reporters:
            reporter.on_error(error)

    def on_finish(self, summary: ArchiveSummary) -> None:
        for reporter in self.reporters:
            reporter.on_finish(summary)
