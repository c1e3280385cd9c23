"""Parsing utilities for transaction rows and export files."""

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path


def parse_date(date_str: str) -> date | None:
    """
    Parse various date formats to date object.

    Supported formats:
    - YYYY-MM-DD (2024-01-05), optionally followed by a time part
    - DD/MM/YYYY (05/01/2024)
    - DD-MM-YYYY (05-01-2024)
    - DD MMM YYYY (05 Jan 2024)

    Args:
        date_str: Date string to parse

    Returns:
        date object if successful, None otherwise
    """
    date_str = date_str.strip().strip('"').strip()

    if not date_str:
        return None

    # Timestamps from the data service carry a time part we don't need
    if re.match(r"^\d{4}-\d{2}-\d{2}[T ]", date_str):
        date_str = date_str[:10]

    formats = [
        "%Y-%m-%d",  # 2024-01-05
        "%d/%m/%Y",  # 05/01/2024
        "%d-%m-%Y",  # 05-01-2024
        "%d %b %Y",  # 05 Jan 2024
        "%d %B %Y",  # 05 January 2024
    ]

    for fmt in formats:
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue

    return None


# Longer tokens first so "R$" is not read as "$"
CURRENCY_TOKENS = ("R$", "US$", "BRL", "USD", "EUR", "GBP", "SGD", "$", "€", "£")


def _strip_currency(amount_str: str) -> str:
    """Remove one leading and one trailing currency token."""
    for token in CURRENCY_TOKENS:
        if amount_str.startswith(token):
            amount_str = amount_str[len(token):].lstrip()
            break
    for token in CURRENCY_TOKENS:
        if amount_str.endswith(token):
            amount_str = amount_str[: -len(token)].rstrip()
            break
    return amount_str


def parse_amount(amount_str: str) -> Decimal | None:
    """
    Parse amount string to Decimal.

    Handles:
    - Currency markers before or after the number (R$, $, €, £, USD, BRL, ...)
    - Thousands separators in either convention (1,234.56 and 1.234,56)
    - Decimal comma (12,50)
    - Quoted values

    A leading minus sign is kept; callers decide whether negatives are valid.

    Args:
        amount_str: Amount string to parse

    Returns:
        Decimal if successful, None otherwise
    """
    if not amount_str or not amount_str.strip():
        return None

    # Remove quotes and whitespace
    amount_str = amount_str.strip().strip('"').strip()

    sign = ""
    if amount_str.startswith("-"):
        sign = "-"
        amount_str = amount_str[1:].lstrip()

    amount_str = sign + _strip_currency(amount_str)

    # Anything left besides digits and separators (1e3, 12abc, NaN) is not an amount
    if not amount_str or re.search(r"[^\d.,\-]", amount_str):
        return None

    if "," in amount_str and "." in amount_str:
        if amount_str.rfind(",") > amount_str.rfind("."):
            # 1.234,56
            amount_str = amount_str.replace(".", "").replace(",", ".")
        else:
            # 1,234.56
            amount_str = amount_str.replace(",", "")
    elif "," in amount_str:
        # 12,50 is a decimal comma, 1,234 a thousands separator
        if re.fullmatch(r"-?\d{1,3}(,\d{3})+", amount_str):
            amount_str = amount_str.replace(",", "")
        else:
            amount_str = amount_str.replace(",", ".")

    try:
        value = Decimal(amount_str)
    except InvalidOperation:
        return None

    if not value.is_finite():
        return None
    return value


def clean_text(text: str) -> str:
    """
    Collapse runs of whitespace and newlines into single spaces.

    Args:
        text: Raw description or category string

    Returns:
        Cleaned string
    """
    return " ".join(text.split())


def read_file(filepath: Path) -> str:
    """
    Read a text export file, trying common encodings.

    Args:
        filepath: Path to the file

    Returns:
        File content as string

    Raises:
        ValueError: If file cannot be read
    """
    if not filepath.exists():
        raise ValueError(f"File not found: {filepath}")

    encodings = ["utf-8-sig", "utf-8", "latin-1", "cp1252"]

    for encoding in encodings:
        try:
            with open(filepath, encoding=encoding) as f:
                return f.read()
        except UnicodeDecodeError:
            continue

    raise ValueError(f"Could not decode file {filepath} with any known encoding")
