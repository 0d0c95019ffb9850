"""Destination mailbox naming."""

from datetime import date
from pathlib import Path

from archive_maildir.models.archive_result import SplitPolicy

# Length of the ISO 8601 date prefix kept for each policy
ISO_LENGTHS = {
    SplitPolicy.YEAR: 4,
    SplitPolicy.MONTH: 7,
    SplitPolicy.DAY: 10,
    SplitPolicy.NONE: 0,
}


def format_date(value: date, split_by: SplitPolicy) -> str:
    """
    Format a date at the granularity of the split policy.

    Examples:
        >>> format_date(date(2020, 1, 5), SplitPolicy.MONTH)
        '2020-01'
        >>> format_date(date(2020, 1, 5), SplitPolicy.NONE)
        ''
    """
    return value.isoformat()[: ISO_LENGTHS[split_by]]


def resolve(value: date, prefix: str, suffix: str, split_by: SplitPolicy) -> str:
    """
    Name of the destination mailbox for an email received on ``value``.

    Args:
        value: Received date
        prefix: Text placed before the formatted date
        suffix: Text placed after the formatted date
        split_by: Date granularity

    Returns:
        ``prefix + formatted_date + suffix``
    """
    return f"{prefix}{format_date(value, split_by)}{suffix}"


def destination_path(
    output_dir: Path, value: date, prefix: str, suffix: str, split_by: SplitPolicy
) -> Path:
    """Full destination mailbox root under ``output_dir``."""
    return Path(output_dir) / resolve(value, prefix, suffix, split_by)
