"""Received-date extraction for Maildir entries."""

from datetime import date, datetime, timezone

from archive_maildir.models.mail_entry import MailEntry
from archive_maildir.storage.maildir import DateUnavailable


def received_date(entry: MailEntry) -> date:
    """
    Return the UTC calendar date an email was received.

    Args:
        entry: Maildir entry to inspect

    Returns:
        The date component of the received timestamp, in UTC

    Raises:
        DateUnavailable: If the Received header is missing, malformed, or
            the message file cannot be read
    """
    try:
        timestamp = entry.received_timestamp()
    except OSError as e:
        raise DateUnavailable(f"Cannot read {entry.path}: {e}", entry.path)

    try:
        return datetime.fromtimestamp(timestamp, tz=timezone.utc).date()
    except (OverflowError, OSError, ValueError) as e:
        raise DateUnavailable(f"Timestamp {timestamp} out of range: {e}", entry.path)
