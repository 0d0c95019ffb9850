"""Date extraction services."""

from .date_extractor import received_date

__all__ = ["received_date"]
