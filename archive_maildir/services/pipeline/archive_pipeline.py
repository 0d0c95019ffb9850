"""
Archive pipeline - filter emails by received date and archive the old ones.

One pass over the ``cur/`` area of the source Maildir:
1. Enumerate entries (undecodable entries are reported and skipped)
2. Extract the received date (undated emails are reported and skipped)
3. Keep emails received strictly before the cutoff
4. Resolve the destination Maildir from the split policy
5. Archive with the strategy of the configured mode

Per-message failures never abort the run; they are collected in the
returned ArchiveSummary and passed to the reporter.
"""

import os
from datetime import date
from pathlib import Path
from typing import Dict, Optional

from archive_maildir.config.archive_config import ProgramOptions
from archive_maildir.models.archive_result import (
    ArchiveMode,
    ArchiveSummary,
    ErrorKind,
    MessageError,
)
from archive_maildir.models.mail_entry import MailEntry
from archive_maildir.services.archiving import ArchiveError, MaildirArchiver, create_mail_archiver
from archive_maildir.services.dates import received_date
from archive_maildir.services.paths import destination_path
from archive_maildir.services.reporting.reporter import ArchiveReporter
from archive_maildir.storage.maildir import (
    DateUnavailable,
    Maildir,
    MaildirEnumerationError,
    MaildirError,
)


class ArchiveSetupError(Exception):
    """Raised before any email is processed when the run cannot start."""

    pass


class ArchivePipeline:
    """
    Drives one archive run.

    Holds no state between runs besides what ``run`` builds; a new summary
    is produced on every call.
    """

    def __init__(
        self,
        options: ProgramOptions,
        reporter: Optional[ArchiveReporter] = None,
        archiver: Optional[MaildirArchiver] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            options: Resolved program options
            reporter: Observer for progress and errors (default: no-op)
            archiver: Strategy override (default: from ``options.archive_mode``)
        """
        self.options = options
        self.reporter = reporter or ArchiveReporter()
        self.archiver = archiver or create_mail_archiver(options.archive_mode)
        self.source = Maildir(options.input_path)
        self._destinations: Dict[Path, Maildir] = {}

    def check_setup(self) -> None:
        """
        Validate the source Maildir and output root.

        Raises:
            ArchiveSetupError: If the source is not a Maildir, or the output
                root cannot be written (not checked in dry-run mode)
        """
        if not self.source.exists():
            raise ArchiveSetupError(f"Not a Maildir (no cur/ directory): {self.source.root}")

        if self.options.archive_mode is ArchiveMode.DRY_RUN:
            return

        output_dir = Path(self.options.output_dir)
        if output_dir.exists():
            if not output_dir.is_dir():
                raise ArchiveSetupError(f"Output path is not a directory: {output_dir}")
            if not os.access(output_dir, os.W_OK | os.X_OK):
                raise ArchiveSetupError(f"Output directory is not writable: {output_dir}")

    def run(self) -> ArchiveSummary:
        """
        Archive every email older than the cutoff.

        Returns:
            ArchiveSummary with counters and all per-message errors

        Raises:
            ArchiveSetupError: If the run cannot start
        """
        self.check_setup()

        summary = ArchiveSummary(mode=self.options.archive_mode)
        self._destinations = {}
        self.reporter.on_start(self.options, self.source.count_current())

        try:
            entries = self.source.list_current()
            for item in entries:
                if isinstance(item, MaildirEnumerationError):
                    self._record_error(
                        summary,
                        MessageError(ErrorKind.ENUMERATION, None, item.path, None, str(item)),
                    )
                    continue

                summary.considered += 1
                self._process(item, summary)
        except MaildirError as e:
            raise ArchiveSetupError(str(e))

        self.reporter.on_finish(summary)
        return summary

    def _process(self, entry: MailEntry, summary: ArchiveSummary) -> None:
        """Filter, resolve and archive a single email."""
        try:
            received = received_date(entry)
        except DateUnavailable as e:
            self._record_error(
                summary,
                MessageError(
                    ErrorKind.DATE,
                    entry.id,
                    entry.path,
                    None,
                    f"Error while extracting date: {e}",
                ),
            )
            return

        if not self._is_eligible(received):
            summary.skipped_recent += 1
            self.reporter.on_skipped(entry, received)
            return

        to_maildir = self._destination_for(received)
        try:
            self.archiver.archive_email(entry, self.source, to_maildir)
        except ArchiveError as e:
            self._record_error(
                summary,
                MessageError(e.kind, e.message_id, e.source_path, e.destination_path, e.detail),
            )
            return

        summary.record_archived(to_maildir.root)
        self.reporter.on_archived(entry, received, to_maildir.root)

    def _is_eligible(self, received: date) -> bool:
        return received < self.options.before

    def _destination_for(self, received: date) -> Maildir:
        path = destination_path(
            self.options.output_dir,
            received,
            self.options.prefix,
            self.options.suffix,
            self.options.split_by,
        )
        if path not in self._destinations:
            self._destinations[path] = Maildir(path)
        return self._destinations[path]

    def _record_error(self, summary: ArchiveSummary, error: MessageError) -> None:
        summary.errors.append(error)
        self.reporter.on_error(error)


def run_archive(
    options: ProgramOptions, reporter: Optional[ArchiveReporter] = None
) -> ArchiveSummary:
    """
    Run one archive pass with the strategy selected by ``options``.

    Args:
        options: Resolved program options
        reporter: Optional observer for progress and errors

    Returns:
        ArchiveSummary (archived, considered, errors)

    Raises:
        ArchiveSetupError: If the source Maildir or output root is unusable
    """
    return ArchivePipeline(options, reporter).run()
