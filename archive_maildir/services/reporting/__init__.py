"""Run reporting."""

from .reporter import ArchiveReporter, AuditLogReporter, CompositeReporter, LoggingReporter
from .summary_formatter import SummaryFormatter

__all__ = [
    "ArchiveReporter",
    "AuditLogReporter",
    "CompositeReporter",
    "LoggingReporter",
    "SummaryFormatter",
]
