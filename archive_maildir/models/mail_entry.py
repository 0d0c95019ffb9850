"""Mail entry data model."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet


@dataclass(frozen=True)
class MailEntry:
    """
    A single message file found in the ``cur/`` area of a Maildir.

    Attributes:
        id: Unique part of the file name, stable within the mailbox
        flags: Set of single-character Maildir flags (``S``, ``R``, ...)
        path: Absolute path to the raw message file
    """

    id: str
    flags: FrozenSet[str] = field(default_factory=frozenset)
    path: Path = Path()

    def __post_init__(self):
        """Validate fields after initialization."""
        if not self.id:
            raise ValueError("id is required")
        for flag in self.flags:
            if len(flag) != 1:
                raise ValueError(f"Invalid flag: {flag!r}")

    def read_bytes(self) -> bytes:
        """Read the raw message content."""
        return self.path.read_bytes()

    def received_timestamp(self) -> int:
        """
        Seconds since epoch (UTC) parsed from the first ``Received`` header.

        Raises:
            DateUnavailable: If the header is missing or malformed
            OSError: If the file cannot be read
        """
        from archive_maildir.storage.maildir import parse_received_timestamp

        return parse_received_timestamp(self.path)
