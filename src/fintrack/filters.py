"""Filtering of transaction lists by kind, category, date range and free text."""

from collections.abc import Iterable
from datetime import date

from fintrack.models import KIND_ALL, FilterCriteria, Transaction


def matches_kind(tx: Transaction, kind: str) -> bool:
    """Check the transaction kind, where ``all`` matches everything."""
    return kind == KIND_ALL or tx.kind == kind


def matches_category(tx: Transaction, needle: str) -> bool:
    """Case-insensitive substring match on the category. Empty needle matches."""
    if not needle:
        return True
    return needle.lower() in tx.category.lower()


def in_date_range(tx: Transaction, date_from: date, date_to: date) -> bool:
    """Check the transaction date lies within the inclusive range."""
    return date_from <= tx.date <= date_to


def matches_search(tx: Transaction, needle: str) -> bool:
    """Case-insensitive substring match on description or category."""
    if not needle:
        return True
    needle = needle.lower()
    return needle in tx.description.lower() or needle in tx.category.lower()


def matches(tx: Transaction, criteria: FilterCriteria) -> bool:
    """Return True if the transaction satisfies every condition in ``criteria``."""
    return (
        matches_kind(tx, criteria.kind)
        and matches_category(tx, criteria.category_contains)
        and in_date_range(tx, criteria.date_from, criteria.date_to)
        and matches_search(tx, criteria.search_text)
    )


def filter_transactions(
    transactions: Iterable[Transaction],
    criteria: FilterCriteria,
) -> list[Transaction]:
    """
    Return the transactions matching all conditions of ``criteria``.

    Input order is preserved and duplicates are kept. The input is not
    modified; an impossible date range just yields an empty list.

    Args:
        transactions: Transactions for one owner, in any order
        criteria: Filter conditions

    Returns:
        New list of matching transactions
    """
    return [tx for tx in transactions if matches(tx, criteria)]
