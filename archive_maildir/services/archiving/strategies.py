"""Dry-run, copy and move archive strategies."""

import logging
import os

from archive_maildir.models.archive_result import ArchiveMode, ErrorKind
from archive_maildir.models.mail_entry import MailEntry
from archive_maildir.storage.maildir import Maildir, MaildirError
from .base import ArchiveError, MaildirArchiver

logger = logging.getLogger(__name__)


class DryRunMaildirArchiver(MaildirArchiver):
    """Archiver that touches nothing and always succeeds."""

    mode = ArchiveMode.DRY_RUN

    def archive_email(self, entry: MailEntry, from_maildir: Maildir, to_maildir: Maildir) -> None:
        pass


class CopyMaildirArchiver(MaildirArchiver):
    """Archiver that copies an email, flags included, leaving the source as is."""

    mode = ArchiveMode.COPY

    def archive_email(self, entry: MailEntry, from_maildir: Maildir, to_maildir: Maildir) -> None:
        self._check_distinct(entry, from_maildir, to_maildir)
        data = self._read(entry, to_maildir)
        self._store(entry, data, to_maildir)

    def _check_distinct(self, entry: MailEntry, from_maildir: Maildir, to_maildir: Maildir) -> None:
        """Refuse a destination that is the source Maildir itself."""
        if _same_path(from_maildir.root, to_maildir.root):
            raise ArchiveError(
                ErrorKind.PROTOCOL,
                entry.id,
                entry.path,
                to_maildir.root,
                MaildirError(f"Destination is the source Maildir {from_maildir.root}", to_maildir.root),
            )

    def _read(self, entry: MailEntry, to_maildir: Maildir) -> bytes:
        try:
            return entry.read_bytes()
        except OSError as e:
            raise ArchiveError(ErrorKind.READ, entry.id, entry.path, to_maildir.root, e)

    def _store(self, entry: MailEntry, data: bytes, to_maildir: Maildir) -> None:
        """Create the destination if needed and deliver with the original id and flags."""
        try:
            to_maildir.create_directories()
            to_maildir.store_with_flags(data, entry.flags, message_id=entry.id)
        except MaildirError as e:
            raise ArchiveError(ErrorKind.PROTOCOL, entry.id, entry.path, to_maildir.root, e)
        except OSError as e:
            raise ArchiveError(ErrorKind.WRITE, entry.id, entry.path, to_maildir.root, e)
        logger.debug("Stored email %s in %s", entry.id, to_maildir.root)


class MoveMaildirArchiver(CopyMaildirArchiver):
    """
    Archiver that moves an email to the destination Maildir.

    The source is deleted only after the destination write succeeded. If
    the delete then fails the email exists in both Maildirs and an
    ArchiveError of kind DELETE is raised; the destination copy is kept.
    """

    mode = ArchiveMode.MOVE

    def archive_email(self, entry: MailEntry, from_maildir: Maildir, to_maildir: Maildir) -> None:
        super().archive_email(entry, from_maildir, to_maildir)

        stored = to_maildir.find(entry.id)
        if stored is None or _same_path(stored, entry.path):
            raise ArchiveError(
                ErrorKind.PROTOCOL,
                entry.id,
                entry.path,
                to_maildir.root,
                MaildirError(f"Stored copy of {entry.id} not found apart from the source", to_maildir.root),
            )

        try:
            from_maildir.delete(entry.id)
        except (MaildirError, OSError) as e:
            raise ArchiveError(ErrorKind.DELETE, entry.id, entry.path, to_maildir.root, e)


def _same_path(first, second) -> bool:
    try:
        return os.path.samefile(first, second)
    except OSError:
        return False


ARCHIVERS = {
    ArchiveMode.DRY_RUN: DryRunMaildirArchiver,
    ArchiveMode.COPY: CopyMaildirArchiver,
    ArchiveMode.MOVE: MoveMaildirArchiver,
}


def create_mail_archiver(mode: ArchiveMode) -> MaildirArchiver:
    """
    Create the archiver for an archive mode.

    Args:
        mode: Archive mode

    Returns:
        A new archiver instance

    Raises:
        ValueError: If the mode is unknown
    """
    try:
        return ARCHIVERS[ArchiveMode(mode)]()
    except (KeyError, ValueError):
        raise ValueError(f"Unknown archive mode: {mode}")
