"""Balance, monthly series and highlights over a transaction snapshot."""

from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from fintrack.models import (
    INCOME,
    NO_CATEGORY,
    Highlights,
    MonthBucket,
    Summary,
    Transaction,
)


def month_key(d: date) -> str:
    """Return the zero-padded ``YYYY-MM`` key for a date."""
    return f"{d.year:04d}-{d.month:02d}"


def calculate_totals(transactions: Iterable[Transaction]) -> tuple[Decimal, Decimal]:
    """Return (total income, total expenses)."""
    income = Decimal("0")
    expenses = Decimal("0")
    for tx in transactions:
        if tx.kind == INCOME:
            income += tx.amount
        else:
            expenses += tx.amount
    return income, expenses


def calculate_balance(transactions: Iterable[Transaction]) -> Decimal:
    """Total income minus total expenses. Zero for no transactions."""
    income, expenses = calculate_totals(transactions)
    return income - expenses


def process_monthly_data(transactions: Iterable[Transaction]) -> list[MonthBucket]:
    """
    Group income and expense totals by calendar month.

    One bucket is returned per month present in the input, in the order each
    month is first seen. Buckets are not sorted; use ``sort_by_month`` when
    chronological order is needed.

    Args:
        transactions: Transactions in any order

    Returns:
        List of MonthBucket
    """
    months: dict[str, list[Decimal]] = {}

    for tx in transactions:
        key = month_key(tx.date)
        totals = months.setdefault(key, [Decimal("0"), Decimal("0")])
        if tx.kind == INCOME:
            totals[0] += tx.amount
        else:
            totals[1] += tx.amount

    return [
        MonthBucket(month_key=key, income_total=income, expense_total=expenses)
        for key, (income, expenses) in months.items()
    ]


def sort_by_month(buckets: Iterable[MonthBucket], descending: bool = False) -> list[MonthBucket]:
    """Return buckets in chronological (or reverse chronological) order."""
    return sorted(buckets, key=lambda b: b.month_key, reverse=descending)


def find_largest_expense(transactions: Iterable[Transaction]) -> Transaction | None:
    """
    Return the expense with the highest amount, or None if there are none.

    Only a strictly greater amount replaces the current maximum, so among
    equal amounts the first one in input order wins.
    """
    largest: Transaction | None = None
    for tx in transactions:
        if not tx.is_expense:
            continue
        if largest is None or tx.amount > largest.amount:
            largest = tx
    return largest


def find_most_frequent_category(transactions: Iterable[Transaction]) -> str:
    """
    Return the category used by the most transactions, of either kind.

    Categories are scanned in the order they first appear and only a
    strictly higher count replaces the current leader, so the first
    category to reach the top count wins a tie. Returns ``NO_CATEGORY``
    when there are no transactions.
    """
    counts: dict[str, int] = {}
    for tx in transactions:
        counts[tx.category] = counts.get(tx.category, 0) + 1

    best = NO_CATEGORY
    best_count = 0
    for category, count in counts.items():
        if count > best_count:
            best = category
            best_count = count
    return best


def calculate_highlights(transactions: Iterable[Transaction]) -> Highlights:
    """Compute largest expense and most frequent category."""
    transactions = list(transactions)
    return Highlights(
        largest_expense=find_largest_expense(transactions),
        most_frequent_category=find_most_frequent_category(transactions),
    )


def aggregate(transactions: Iterable[Transaction]) -> Summary:
    """
    Build the dashboard summary for a snapshot of one owner's transactions.

    Usage:
        summary = aggregate(transactions)
        print(summary.balance, summary.highlights.most_frequent_category)

    Args:
        transactions: Full (unfiltered) transaction snapshot

    Returns:
        Summary with balance, monthly series and highlights
    """
    transactions = list(transactions)
    income, expenses = calculate_totals(transactions)
    return Summary(
        balance=income - expenses,
        monthly_series=process_monthly_data(transactions),
        highlights=calculate_highlights(transactions),
        total_income=income,
        total_expense=expenses,
    )
