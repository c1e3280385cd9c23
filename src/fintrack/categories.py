"""Category choices offered when recording a transaction."""

from collections.abc import Iterable

from fintrack.models import EXPENSE, Category

# Offered for expenses when the user has not created any expense categories
DEFAULT_EXPENSE_CATEGORIES = [
    "Food",
    "Transport",
    "Housing",
    "Health",
    "Education",
    "Leisure",
    "Shopping",
    "Other",
]


def category_choices(categories: Iterable[Category], kind: str) -> list[str]:
    """
    Get the category names a user can pick for a transaction of ``kind``.

    Args:
        categories: The user's categories, of any kind
        kind: "income" or "expense"

    Returns:
        Names in the given order, or the default expense categories when
        the user has none for expenses
    """
    names = [c.name for c in categories if c.kind == kind]
    if not names and kind == EXPENSE:
        return DEFAULT_EXPENSE_CATEGORIES.copy()
    return names
