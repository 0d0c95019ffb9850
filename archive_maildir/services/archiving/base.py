"""Abstract interface for archive strategies."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from archive_maildir.models.archive_result import ArchiveMode, ErrorKind
from archive_maildir.models.mail_entry import MailEntry
from archive_maildir.storage.maildir import Maildir


class ArchiveError(Exception):
    """
    Raised when an email cannot be transferred to its destination.

    Attributes:
        kind: Which step failed (read, write, delete, protocol)
        message_id: Maildir id of the email
        source_path: Path of the source message file
        destination_path: Root of the destination Maildir
        cause: Underlying exception
    """

    def __init__(
        self,
        kind: ErrorKind,
        message_id: str,
        source_path: Path,
        destination_path: Path,
        cause: Optional[BaseException] = None,
    ):
        self.kind = kind
        self.message_id = message_id
        self.source_path = source_path
        self.destination_path = destination_path
        self.cause = cause
        super().__init__(str(self))

    @property
    def detail(self) -> str:
        return str(self.cause) if self.cause else self.kind.value

    def __str__(self) -> str:
        return (
            f"{self.kind.value} failed for email {self.message_id} "
            f"({self.source_path} -> {self.destination_path}): {self.detail}"
        )


class MaildirArchiver(ABC):
    """
    Transfers one email from a source Maildir to a destination Maildir.

    ``archive_email`` is called once per eligible email by the archive
    pipeline. Implementations either succeed or raise ArchiveError; the
    source email must still be present after any failure that happens
    before the destination write completes.
    """

    mode: ArchiveMode

    @abstractmethod
    def archive_email(self, entry: MailEntry, from_maildir: Maildir, to_maildir: Maildir) -> None:
        """
        Archive one email.

        Args:
            entry: Email found in ``from_maildir``
            from_maildir: Source Maildir
            to_maildir: Destination Maildir, created on demand

        Raises:
            ArchiveError: If any step of the transfer fails
        """
        pass
