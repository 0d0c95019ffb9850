"""Storage layer: Maildir access and audit log"""

from .maildir import (
    DateUnavailable,
    Maildir,
    MaildirEnumerationError,
    MaildirError,
    MaildirStoreConflict,
)
from .audit_log import AuditLog

__all__ = [
    "DateUnavailable",
    "Maildir",
    "MaildirEnumerationError",
    "MaildirError",
    "MaildirStoreConflict",
    "AuditLog",
]
