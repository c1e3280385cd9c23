"""fintrack - Summaries and filters over personal income and expense transactions."""

from fintrack.aggregation import aggregate
from fintrack.filters import filter_transactions
from fintrack.models import Category, FilterCriteria, Summary, Transaction
from fintrack.snapshot import SnapshotLoader
from fintrack.store import StoreClient

__version__ = "0.1.0"
__all__ = [
    "Category",
    "FilterCriteria",
    "SnapshotLoader",
    "StoreClient",
    "Summary",
    "Transaction",
    "aggregate",
    "filter_transactions",
]
