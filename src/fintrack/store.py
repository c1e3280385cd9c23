"""Client for the remote data service holding transactions and categories.

The service exposes a PostgREST-style API (as Supabase does): one table per
resource under ``/rest/v1``, filters passed as ``column=op.value`` query
parameters, and every row scoped to its owner through ``user_id``.
"""

from decimal import Decimal
from typing import Any

import requests

from fintrack.models import Category, Transaction
from fintrack.utils import parse_amount, parse_date


def _require(row: dict[str, Any], key: str) -> Any:
    value = row.get(key)
    if value is None or value == "":
        raise ValueError(f"Row {row.get('id', '?')}: missing required field '{key}'")
    return value


def _row_amount(row: dict[str, Any]) -> Decimal:
    value = _require(row, "amount")
    if isinstance(value, bool):
        raise ValueError(f"Row {row.get('id', '?')}: invalid amount {value!r}")
    if isinstance(value, (int, float)):
        # str() keeps the value as the service sent it, e.g. 12.3 not 12.2999...
        amount = Decimal(str(value))
    else:
        parsed = parse_amount(str(value))
        if parsed is None:
            raise ValueError(f"Row {row.get('id', '?')}: invalid amount {value!r}")
        amount = parsed
    if not amount.is_finite():
        raise ValueError(f"Row {row.get('id', '?')}: invalid amount {value!r}")
    return amount


def _optional_str(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def transaction_from_row(row: dict[str, Any]) -> Transaction:
    """Convert a ``transactions`` row to a Transaction.

    Raises:
        ValueError: If a required field is missing or malformed
    """
    raw_date = str(_require(row, "date"))
    tx_date = parse_date(raw_date)
    if tx_date is None:
        raise ValueError(f"Row {row.get('id', '?')}: invalid date {raw_date!r}")

    return Transaction(
        date=tx_date,
        description=str(row.get("description") or ""),
        amount=_row_amount(row),
        kind=str(_require(row, "type")),
        category=str(row.get("category") or ""),
        id=_optional_str(row.get("id")),
        owner_id=_optional_str(row.get("user_id")),
        attachment_ref=_optional_str(row.get("receipt_url")),
    )


def transaction_to_payload(tx: Transaction) -> dict[str, Any]:
    """Convert a Transaction to an insert payload for the ``transactions`` table."""
    payload: dict[str, Any] = {
        "user_id": tx.owner_id,
        "type": tx.kind,
        "amount": str(tx.amount),
        "description": tx.description,
        "category": tx.category,
        "date": tx.date.isoformat(),
    }
    if tx.attachment_ref:
        payload["receipt_url"] = tx.attachment_ref
    return payload


def category_from_row(row: dict[str, Any]) -> Category:
    """Convert a ``categories`` row to a Category."""
    return Category(
        name=str(_require(row, "name")),
        kind=str(_require(row, "type")),
        id=_optional_str(row.get("id")),
        owner_id=_optional_str(row.get("user_id")),
    )


def category_to_payload(category: Category) -> dict[str, Any]:
    """Convert a Category to an insert payload for the ``categories`` table."""
    return {
        "user_id": category.owner_id,
        "name": category.name,
        "type": category.kind,
    }


class StoreClient:
    """Client for reading and writing one user's data on the remote service."""

    REST_PATH = "rest/v1"

    def __init__(self, base_url: str, api_key: str, access_token: str | None = None) -> None:
        """Initialize client.

        Args:
            base_url: Project URL, e.g. https://xyz.supabase.co
            api_key: Public API key of the project
            access_token: Signed-in user's token; the API key is used if omitted
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self._session = requests.Session()
        self._session.headers.update({
            "apikey": api_key,
            "Authorization": f"Bearer {access_token or api_key}",
            "Content-Type": "application/json",
            "Prefer": "return=representation",
        })

    def _request(
        self,
        method: str,
        table: str,
        params: dict[str, str] | None = None,
        json: Any = None,
    ) -> Any:
        """Make an API request and return the decoded body (None if empty)."""
        url = f"{self.base_url}/{self.REST_PATH}/{table}"
        response = self._session.request(method, url, params=params, json=json)
        response.raise_for_status()
        if not response.content:
            return None
        return response.json()

    def fetch_transactions(self, owner_id: str) -> list[Transaction]:
        """Get all transactions of a user, newest first."""
        rows = self._request(
            "GET",
            "transactions",
            params={"select": "*", "user_id": f"eq.{owner_id}", "order": "date.desc"},
        )
        return [transaction_from_row(row) for row in rows or []]

    def add_transaction(self, tx: Transaction) -> Transaction:
        """Insert a transaction and return it as stored (with its id)."""
        if not tx.owner_id:
            raise ValueError("Transaction must have an owner_id to be stored")
        rows = self._request("POST", "transactions", json=transaction_to_payload(tx))
        if not rows:
            return tx
        return transaction_from_row(rows[0])

    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction by id."""
        self._request("DELETE", "transactions", params={"id": f"eq.{transaction_id}"})

    def fetch_categories(self, owner_id: str, kind: str | None = None) -> list[Category]:
        """Get a user's categories, newest first, optionally of one kind."""
        params = {"select": "*", "user_id": f"eq.{owner_id}", "order": "created_at.desc"}
        if kind:
            params["type"] = f"eq.{kind}"
        rows = self._request("GET", "categories", params=params)
        return [category_from_row(row) for row in rows or []]

    def add_category(self, category: Category) -> Category:
        """Insert a category and return it as stored."""
        if not category.owner_id:
            raise ValueError("Category must have an owner_id to be stored")
        rows = self._request("POST", "categories", json=category_to_payload(category))
        if not rows:
            return category
        return category_from_row(rows[0])

    def delete_category(self, category_id: str) -> None:
        """Delete a category by id."""
        self._request("DELETE", "categories", params={"id": f"eq.{category_id}"})
