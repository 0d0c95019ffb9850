"""Cutoff date parsing utilities."""

from datetime import date, datetime, timezone
from typing import Optional

CUTOFF_FORMAT = "%Y-%m-%d"


def parse_cutoff(value: str) -> date:
    """
    Parse a ``YYYY-mm-dd`` cutoff date.

    Args:
        value: Date text from the command line or config file

    Returns:
        Parsed date

    Raises:
        ValueError: If the text is not a valid date in that format

    Examples:
        >>> parse_cutoff("2022-01-01")
        datetime.date(2022, 1, 1)
    """
    if not value or not value.strip():
        raise ValueError("Cutoff date is empty")
    return datetime.strptime(value.strip(), CUTOFF_FORMAT).date()


def default_cutoff(today: Optional[date] = None) -> date:
    """
    Same calendar day one year before ``today`` (UTC today by default).

    Feb 29 maps to Feb 28 of the previous year.

    Examples:
        >>> default_cutoff(date(2024, 2, 29))
        datetime.date(2023, 2, 28)
    """
    if today is None:
        today = datetime.now(timezone.utc).date()
    try:
        return today.replace(year=today.year - 1)
    except ValueError:
        return today.replace(year=today.year - 1, day=28)
