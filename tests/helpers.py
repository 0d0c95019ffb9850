"""Helpers for building test emails and Maildirs."""

from pathlib import Path
from typing import Optional

from archive_maildir.storage.maildir import Maildir


def make_message(received: Optional[str], subject: str = "Test message") -> bytes:
    """
    Build a raw email.

    Args:
        received: Date part of the Received header, or None to omit the header
        subject: Subject line
    """
    lines = []
    if received is not None:
        lines.append(f"Received: from mx.example.test by mail.example.test; {received}")
    lines += [
        "From: Sender <sender@example.test>",
        "To: recipient@example.test",
        f"Subject: {subject}",
        f"Message-ID: <{subject.replace(' ', '.')}@example.test>",
        "",
        f"Body of {subject}",
        "",
    ]
    return "\r\n".join(lines).encode("utf-8")


def add_message(maildir: Maildir, message_id: str, data: bytes, flags: str = "") -> Path:
    """Drop a message file straight into ``cur/``."""
    maildir.create_directories()
    path = maildir.cur / f"{message_id}:2,{flags}"
    path.write_bytes(data)
    return path


def cur_names(maildir: Maildir) -> list[str]:
    """Sorted file names in ``cur/``; empty if it does not exist."""
    if not maildir.cur.is_dir():
        return []
    return sorted(p.name for p in maildir.cur.iterdir())
