"""archive-maildir: archive old emails from a Maildir into dated sub-maildirs."""

__version__ = "0.3.0"
