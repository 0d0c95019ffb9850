"""Archive strategies."""

from .base import ArchiveError, MaildirArchiver
from .strategies import (
    CopyMaildirArchiver,
    DryRunMaildirArchiver,
    MoveMaildirArchiver,
    create_mail_archiver,
)

__all__ = [
    "ArchiveError",
    "MaildirArchiver",
    "CopyMaildirArchiver",
    "DryRunMaildirArchiver",
    "MoveMaildirArchiver",
    "create_mail_archiver",
]
