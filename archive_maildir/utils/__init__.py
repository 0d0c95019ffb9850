"""Utility functions"""

from .date_utils import default_cutoff, parse_cutoff

__all__ = ["default_cutoff", "parse_cutoff"]
