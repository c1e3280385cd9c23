"""Tests for the data service client."""

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest
import requests

from fintrack.models import EXPENSE, INCOME, Category, Transaction
from fintrack.store import (
    StoreClient,
    category_from_row,
    category_to_payload,
    transaction_from_row,
    transaction_to_payload,
)


def _row(**overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "id": "t1",
        "user_id": "user-1",
        "type": "expense",
        "amount": 100.5,
        "category": "Food",
        "description": "Lunch",
        "date": "2024-01-05",
        "receipt_url": None,
        "created_at": "2024-01-05T12:00:00+00:00",
    }
    row.update(overrides)
    return row


class TestTransactionFromRow:
    """Tests for mapping service rows to transactions."""

    def test_basic_row(self) -> None:
        """Test a complete row."""
        tx = transaction_from_row(_row())
        assert tx.id == "t1"
        assert tx.owner_id == "user-1"
        assert tx.kind == EXPENSE
        assert tx.amount == Decimal("100.5")
        assert tx.category == "Food"
        assert tx.description == "Lunch"
        assert tx.date == date(2024, 1, 5)
        assert tx.attachment_ref is None

    def test_float_amount_kept_exact(self) -> None:
        """Test floats from JSON become the Decimal they print as."""
        tx = transaction_from_row(_row(amount=0.1))
        assert tx.amount == Decimal("0.1")

    def test_string_amount(self) -> None:
        """Test amounts given as text are parsed."""
        assert transaction_from_row(_row(amount="12,50")).amount == Decimal("12.50")

    def test_timestamp_date(self) -> None:
        """Test timestamps are reduced to their date."""
        tx = transaction_from_row(_row(date="2024-02-01T00:00:00+00:00"))
        assert tx.date == date(2024, 2, 1)

    def test_receipt_url(self) -> None:
        """Test the receipt reference is carried along."""
        tx = transaction_from_row(_row(receipt_url="file:///receipt.jpg"))
        assert tx.attachment_ref == "file:///receipt.jpg"

    def test_missing_amount_fails(self) -> None:
        """Test a missing amount is an error, not zero."""
        with pytest.raises(ValueError, match="amount"):
            transaction_from_row(_row(amount=None))

    def test_garbage_amount_fails(self) -> None:
        """Test a non-numeric amount is an error."""
        with pytest.raises(ValueError, match="invalid amount"):
            transaction_from_row(_row(amount="abc"))

    def test_nan_amount_fails(self) -> None:
        """Test NaN is an error."""
        with pytest.raises(ValueError):
            transaction_from_row(_row(amount=float("nan")))

    def test_negative_amount_fails(self) -> None:
        """Test a negative amount is an error."""
        with pytest.raises(ValueError, match="negative"):
            transaction_from_row(_row(amount=-3))

    def test_missing_date_fails(self) -> None:
        """Test a missing date is an error."""
        with pytest.raises(ValueError, match="date"):
            transaction_from_row(_row(date=None))

    def test_bad_date_fails(self) -> None:
        """Test an unparseable date is an error."""
        with pytest.raises(ValueError, match="invalid date"):
            transaction_from_row(_row(date="someday"))

    def test_bad_type_fails(self) -> None:
        """Test an unknown type is an error."""
        with pytest.raises(ValueError):
            transaction_from_row(_row(type="transfer"))


class TestPayloads:
    """Tests for insert payloads."""

    def test_transaction_payload(self) -> None:
        """Test transaction payload fields."""
        tx = Transaction(
            date=date(2024, 1, 10),
            description="January salary",
            amount=Decimal("500.00"),
            kind=INCOME,
            category="Salary",
            owner_id="user-1",
        )
        payload = transaction_to_payload(tx)
        assert payload == {
            "user_id": "user-1",
            "type": "income",
            "amount": "500.00",
            "description": "January salary",
            "category": "Salary",
            "date": "2024-01-10",
        }

    def test_transaction_payload_with_receipt(self) -> None:
        """Test the receipt reference is sent when present."""
        tx = Transaction(
            date(2024, 1, 5), "Lunch", Decimal("10"), EXPENSE, "Food",
            owner_id="user-1", attachment_ref="receipt.jpg",
        )
        assert transaction_to_payload(tx)["receipt_url"] == "receipt.jpg"

    def test_category_round_trip(self) -> None:
        """Test category payload and row mapping."""
        category = Category(name="Groceries", kind=EXPENSE, owner_id="user-1")
        payload = category_to_payload(category)
        assert payload == {"user_id": "user-1", "name": "Groceries", "type": "expense"}
        stored = category_from_row({**payload, "id": 7})
        assert stored.id == "7"
        assert stored.name == "Groceries"


class TestStoreClient:
    """Tests for StoreClient."""

    def test_init(self) -> None:
        """Test client initialization."""
        client = StoreClient("https://example.supabase.co/", "anon-key")
        assert client.base_url == "https://example.supabase.co"
        assert client._session.headers["apikey"] == "anon-key"
        assert client._session.headers["Authorization"] == "Bearer anon-key"

    def test_init_with_access_token(self) -> None:
        """Test the user token is preferred for authorization."""
        client = StoreClient("https://example.supabase.co", "anon-key", access_token="jwt")
        assert client._session.headers["Authorization"] == "Bearer jwt"

    @patch("fintrack.store.requests.Session")
    def test_fetch_transactions(self, mock_session_class: MagicMock) -> None:
        """Test fetching transactions for one owner, newest first."""
        mock_session = MagicMock()
        mock_session_class.return_value = mock_session

        mock_response = MagicMock()
        mock_response.json.return_value = [
            _row(id="t3", amount=300, date="2024-02-01"),
            _row(id="t2", type="income", amount=500, category="Salary", date="2024-01-10"),
        ]
        mock_session.request.return_value = mock_response

        client = StoreClient("https://example.supabase.co", "key")
        transactions = client.fetch_transactions("user-1")

        assert [tx.id for tx in transactions] == ["t3", "t2"]
        assert transactions[1].kind == INCOME

        method, url = mock_session.request.call_args.args
        assert method == "GET"
        assert url == "https://example.supabase.co/rest/v1/transactions"
        params = mock_session.request.call_args.kwargs["params"]
        assert params["user_id"] == "eq.user-1"
        assert params["order"] == "date.desc"

    @patch("fintrack.store.requests.Session")
    def test_fetch_propagates_http_errors(self, mock_session_class: MagicMock) -> None:
        """Test HTTP failures are raised to the caller."""
        mock_session = MagicMock()
        mock_session_class.return_value = mock_session

        mock_response = MagicMock()
        mock_response.raise_for_status.side_effect = requests.HTTPError("401 Unauthorized")
        mock_session.request.return_value = mock_response

        client = StoreClient("https://example.supabase.co", "key")
        with pytest.raises(requests.HTTPError):
            client.fetch_transactions("user-1")

    @patch("fintrack.store.requests.Session")
    def test_add_transaction(self, mock_session_class: MagicMock) -> None:
        """Test inserting a transaction returns the stored row."""
        mock_session = MagicMock()
        mock_session_class.return_value = mock_session

        mock_response = MagicMock()
        mock_response.json.return_value = [_row(id="new-id")]
        mock_session.request.return_value = mock_response

        client = StoreClient("https://example.supabase.co", "key")
        tx = Transaction(
            date(2024, 1, 5), "Lunch", Decimal("100.5"), EXPENSE, "Food", owner_id="user-1"
        )
        stored = client.add_transaction(tx)

        assert stored.id == "new-id"
        assert mock_session.request.call_args.args[0] == "POST"
        assert mock_session.request.call_args.kwargs["json"]["user_id"] == "user-1"

    def test_add_transaction_requires_owner(self) -> None:
        """Test a transaction without owner is refused before any request."""
        client = StoreClient("https://example.supabase.co", "key")
        tx = Transaction(date(2024, 1, 5), "Lunch", Decimal("1"), EXPENSE, "Food")
        with pytest.raises(ValueError, match="owner_id"):
            client.add_transaction(tx)

    @patch("fintrack.store.requests.Session")
    def test_delete_transaction(self, mock_session_class: MagicMock) -> None:
        """Test deleting by id."""
        mock_session = MagicMock()
        mock_session_class.return_value = mock_session

        mock_response = MagicMock()
        mock_response.content = b""
        mock_session.request.return_value = mock_response

        client = StoreClient("https://example.supabase.co", "key")
        client.delete_transaction("t1")

        assert mock_session.request.call_args.args[0] == "DELETE"
        assert mock_session.request.call_args.kwargs["params"] == {"id": "eq.t1"}

    @patch("fintrack.store.requests.Session")
    def test_fetch_categories_by_kind(self, mock_session_class: MagicMock) -> None:
        """Test fetching only one kind of categories."""
        mock_session = MagicMock()
        mock_session_class.return_value = mock_session

        mock_response = MagicMock()
        mock_response.json.return_value = [
            {"id": 1, "user_id": "user-1", "name": "Salary", "type": "income"},
        ]
        mock_session.request.return_value = mock_response

        client = StoreClient("https://example.supabase.co", "key")
        categories = client.fetch_categories("user-1", kind=INCOME)

        assert categories == [Category(name="Salary", kind=INCOME, id="1", owner_id="user-1")]
        params = mock_session.request.call_args.kwargs["params"]
        assert params["type"] == "eq.income"
        assert params["order"] == "created_at.desc"

    @patch("fintrack.store.requests.Session")
    def test_add_and_delete_category(self, mock_session_class: MagicMock) -> None:
        """Test category insert and delete requests."""
        mock_session = MagicMock()
        mock_session_class.return_value = mock_session

        mock_response = MagicMock()
        mock_response.json.return_value = [
            {"id": 9, "user_id": "user-1", "name": "Gifts", "type": "income"},
        ]
        mock_session.request.return_value = mock_response

        client = StoreClient("https://example.supabase.co", "key")
        stored = client.add_category(Category(name="Gifts", kind=INCOME, owner_id="user-1"))
        assert stored.id == "9"

        client.delete_category("9")
        method, url = mock_session.request.call_args.args
        assert method == "DELETE"
        assert url.endswith("/rest/v1/categories")
