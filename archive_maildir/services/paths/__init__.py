"""Destination path resolution."""

from .path_resolver import destination_path, format_date, resolve

__all__ = ["destination_path", "format_date", "resolve"]
