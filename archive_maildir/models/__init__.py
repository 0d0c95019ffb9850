"""Data models for maildir archiving"""

from .mail_entry import MailEntry
from .archive_result import (
    ArchiveMode,
    ArchiveSummary,
    ErrorKind,
    MessageError,
    SplitPolicy,
)

__all__ = [
    "MailEntry",
    "ArchiveMode",
    "ArchiveSummary",
    "ErrorKind",
    "MessageError",
    "SplitPolicy",
]
