"""Business logic services"""

from .archiving import (
    ArchiveError,
    CopyMaildirArchiver,
    DryRunMaildirArchiver,
    MaildirArchiver,
    MoveMaildirArchiver,
    create_mail_archiver,
)
from .dates import received_date
from .paths import destination_path, resolve
from .reporting import (
    ArchiveReporter,
    AuditLogReporter,
    CompositeReporter,
    LoggingReporter,
    SummaryFormatter,
)
from .pipeline import ArchivePipeline, ArchiveSetupError, run_archive

__all__ = [
    "ArchiveError",
    "CopyMaildirArchiver",
    "DryRunMaildirArchiver",
    "MaildirArchiver",
    "MoveMaildirArchiver",
    "create_mail_archiver",
    "received_date",
    "destination_path",
    "resolve",
    "ArchiveReporter",
    "AuditLogReporter",
    "CompositeReporter",
    "LoggingReporter",
    "SummaryFormatter",
    "ArchivePipeline",
    "ArchiveSetupError",
    "run_archive",
]
