"""Data models for transactions, categories and derived summaries."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any

INCOME = "income"
EXPENSE = "expense"
KIND_ALL = "all"

TRANSACTION_KINDS = (INCOME, EXPENSE)
FILTER_KINDS = (KIND_ALL, INCOME, EXPENSE)

# Returned as the most frequent category when there are no transactions
NO_CATEGORY = "none"


def _check_kind(kind: str, allowed: tuple[str, ...]) -> None:
    if kind not in allowed:
        raise ValueError(f"Invalid kind {kind!r}, expected one of: {', '.join(allowed)}")


def _as_date(value: Any, label: str) -> date:
    # datetime is a date subclass but cannot be compared with a plain date
    if isinstance(value, datetime):
        return value.date()
    if not isinstance(value, date):
        raise TypeError(f"{label} must be a date, got {type(value).__name__}")
    return value


def _check_str(value: Any, label: str) -> None:
    if not isinstance(value, str):
        raise TypeError(f"{label} must be a str, got {type(value).__name__}")


@dataclass(frozen=True)
class Transaction:
    """A single income or expense entry owned by one user.

    The amount is never negative; direction is carried by ``kind``.
    """

    date: date
    description: str
    amount: Decimal
    kind: str
    category: str
    id: str | None = None
    owner_id: str | None = None
    attachment_ref: str | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        """Validate transaction data."""
        _check_kind(self.kind, TRANSACTION_KINDS)
        _check_str(self.description, "Transaction description")
        _check_str(self.category, "Transaction category")
        object.__setattr__(self, "date", _as_date(self.date, "Transaction date"))

        amount = self.amount
        # bool is an int subclass; floats would silently carry rounding error
        if isinstance(amount, bool) or not isinstance(amount, (Decimal, int)):
            raise TypeError(
                f"Transaction amount must be a Decimal or int, got {type(amount).__name__}"
            )
        if isinstance(amount, int):
            amount = Decimal(amount)
            object.__setattr__(self, "amount", amount)

        if not amount.is_finite():
            raise ValueError(f"Transaction amount must be finite, got {amount}")
        if amount < 0:
            raise ValueError(f"Transaction amount must not be negative, got {amount}")

    @property
    def is_expense(self) -> bool:
        """Return True if this is an expense."""
        return self.kind == EXPENSE

    @property
    def is_income(self) -> bool:
        """Return True if this is income."""
        return self.kind == INCOME

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for CSV output."""
        return {
            "id": self.id or "",
            "user_id": self.owner_id or "",
            "type": self.kind,
            "amount": str(self.amount),
            "category": self.category,
            "description": self.description,
            "date": self.date.isoformat(),
            "receipt_url": self.attachment_ref or "",
        }


@dataclass(frozen=True)
class Category:
    """A user-defined label for income or expense transactions."""

    name: str
    kind: str
    id: str | None = None
    owner_id: str | None = None

    def __post_init__(self) -> None:
        _check_kind(self.kind, TRANSACTION_KINDS)
        name = self.name.strip()
        if not name:
            raise ValueError("Category name must not be empty")
        object.__setattr__(self, "name", name)


@dataclass(frozen=True)
class MonthBucket:
    """Income and expense totals for one calendar month."""

    month_key: str  # YYYY-MM
    income_total: Decimal = Decimal("0")
    expense_total: Decimal = Decimal("0")

    @property
    def net(self) -> Decimal:
        """Income minus expenses for the month."""
        return self.income_total - self.expense_total


@dataclass(frozen=True)
class Highlights:
    """Largest single expense and most used category."""

    largest_expense: Transaction | None
    most_frequent_category: str


@dataclass(frozen=True)
class Summary:
    """Everything the dashboard shows for one transaction snapshot."""

    balance: Decimal
    monthly_series: list[MonthBucket]
    highlights: Highlights
    total_income: Decimal = Decimal("0")
    total_expense: Decimal = Decimal("0")

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        largest = self.highlights.largest_expense
        return {
            "balance": str(self.balance),
            "total_income": str(self.total_income),
            "total_expense": str(self.total_expense),
            "monthly_series": [
                {
                    "month": bucket.month_key,
                    "income": str(bucket.income_total),
                    "expenses": str(bucket.expense_total),
                }
                for bucket in self.monthly_series
            ],
            "highlights": {
                "largest_expense": largest.to_dict() if largest else None,
                "most_frequent_category": self.highlights.most_frequent_category,
            },
        }


@dataclass(frozen=True)
class FilterCriteria:
    """Conditions a transaction must all satisfy to appear in a filtered list.

    Empty strings mean "no constraint". The date range is inclusive and is
    always applied; the defaults leave it unbounded. A range with
    ``date_from > date_to`` is allowed and matches nothing.
    """

    kind: str = KIND_ALL
    category_contains: str = ""
    date_from: date = date.min
    date_to: date = date.max
    search_text: str = ""

    def __post_init__(self) -> None:
        _check_kind(self.kind, FILTER_KINDS)
        object.__setattr__(self, "date_from", _as_date(self.date_from, "date_from"))
        object.__setattr__(self, "date_to", _as_date(self.date_to, "date_to"))

    @classmethod
    def current_month(cls, today: date | None = None, **kwargs: Any) -> "FilterCriteria":
        """Criteria covering the first day of the current month through today."""
        if today is None:
            today = date.today()
        return cls(date_from=today.replace(day=1), date_to=today, **kwargs)

    def with_dates(self, date_from: date, date_to: date) -> "FilterCriteria":
        """Return a copy with a different date range."""
        return FilterCriteria(
            kind=self.kind,
            category_contains=self.category_contains,
            date_from=date_from,
            date_to=date_to,
            search_text=self.search_text,
        )

