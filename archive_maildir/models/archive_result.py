"""Archive run result models."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional


class ArchiveMode(Enum):
    """How a message is transferred to its destination mailbox."""

    MOVE = "move"
    COPY = "copy"
    DRY_RUN = "dry-run"


class SplitPolicy(Enum):
    """Date granularity used to name destination mailboxes."""

    YEAR = "year"
    MONTH = "month"
    DAY = "day"
    NONE = "none"


class ErrorKind(Enum):
    """Category of a per-message failure."""

    ENUMERATION = "enumeration"
    DATE = "date"
    READ = "read"
    WRITE = "write"
    DELETE = "delete"
    PROTOCOL = "protocol"


@dataclass
class MessageError:
    """
    A recoverable failure attached to one message (or directory entry).

    Attributes:
        kind: Failure category
        message_id: Maildir id of the message, if known
        source_path: Path of the message file or directory entry
        destination_path: Destination mailbox, if one was resolved
        detail: Human-readable description of the cause
    """

    kind: ErrorKind
    message_id: Optional[str]
    source_path: Optional[Path]
    destination_path: Optional[Path]
    detail: str

    def __str__(self) -> str:
        parts = [f"[{self.kind.value}]"]
        if self.message_id:
            parts.append(f"email {self.message_id}")
        if self.source_path:
            parts.append(f"from {self.source_path}")
        if self.destination_path:
            parts.append(f"to {self.destination_path}")
        return " ".join(parts) + f": {self.detail}"


@dataclass
class ArchiveSummary:
    """Outcome of one archive run."""

    mode: ArchiveMode
    archived: int = 0
    considered: int = 0
    skipped_recent: int = 0
    destinations: Dict[Path, int] = field(default_factory=dict)
    errors: List[MessageError] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def record_archived(self, destination: Path) -> None:
        self.archived += 1
        self.destinations[destination] = self.destinations.get(destination, 0) + 1
