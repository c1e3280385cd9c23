"""Utility functions for fintrack."""

from fintrack.utils.parsing import (
    clean_text,
    parse_amount,
    parse_date,
    read_file,
)

__all__ = ["parse_date", "parse_amount", "clean_text", "read_file"]
