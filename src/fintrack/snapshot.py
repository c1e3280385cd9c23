"""Loading transaction snapshots from export files and writing them back."""

import csv
import json
from io import StringIO
from pathlib import Path
from typing import Any

from fintrack.models import Transaction
from fintrack.store import transaction_from_row
from fintrack.utils import clean_text, read_file

CSV_FIELDS = [
    "id",
    "user_id",
    "type",
    "amount",
    "category",
    "description",
    "date",
    "receipt_url",
]

EXPORT_EXTENSIONS = (".csv", ".tsv", ".json")


class SnapshotLoader:
    """
    Loads transactions exported from the data service.

    Usage:
        loader = SnapshotLoader()
        transactions = loader.load_files([Path("january.csv"), Path("backup.json")])
        SnapshotLoader.write_csv(transactions, Path("output.csv"))
    """

    def __init__(self, sort_descending: bool = False) -> None:
        """
        Initialize loader.

        Args:
            sort_descending: Sort by date descending (newest first), the order
                the data service returns. Otherwise file order is kept.
        """
        self.sort_descending = sort_descending
        self._errors: list[tuple[Path, str]] = []

    @property
    def errors(self) -> list[tuple[Path, str]]:
        """Get list of (filepath, error_message) for failed files."""
        return self._errors.copy()

    def load_file(self, filepath: Path) -> list[Transaction]:
        """
        Load a single CSV or JSON file.

        A file with any malformed row is rejected as a whole so a bad
        amount never silently drops out of the totals.

        Args:
            filepath: Path to the file

        Returns:
            List of Transaction objects (empty if the file failed)
        """
        try:
            content = read_file(filepath)
        except ValueError as e:
            self._errors.append((filepath, str(e)))
            return []

        suffix = filepath.suffix.lower()
        try:
            if suffix == ".json":
                rows = self._json_rows(content)
            elif suffix in (".csv", ".tsv"):
                rows = self._csv_rows(content, "\t" if suffix == ".tsv" else ",")
            else:
                self._errors.append((filepath, f"Unsupported file type: {suffix or '(none)'}"))
                return []
            return [self._row_to_transaction(row, n) for n, row in enumerate(rows, 1)]
        except ValueError as e:
            self._errors.append((filepath, f"Parse error: {e}"))
            return []

    def load_files(self, filepaths: list[Path]) -> list[Transaction]:
        """
        Load multiple files and return combined transactions.

        Args:
            filepaths: List of file paths

        Returns:
            List of Transaction objects, sorted if configured
        """
        self._errors = []
        all_transactions: list[Transaction] = []

        for filepath in filepaths:
            all_transactions.extend(self.load_file(filepath))

        if self.sort_descending:
            # Stable sort keeps file order within a day
            all_transactions.sort(key=lambda t: t.date, reverse=True)

        return all_transactions

    @staticmethod
    def find_files(directory: Path, extensions: list[str] | None = None) -> list[Path]:
        """
        List export files in a directory, grouped by extension then by name.

        Extensions match case-insensitively, so ``JAN.CSV`` is found once.

        Args:
            directory: Directory path
            extensions: File extensions to include (default: csv, tsv, json)

        Returns:
            List of file paths
        """
        if extensions is None:
            extensions = list(EXPORT_EXTENSIONS)

        entries = [p for p in directory.iterdir() if p.is_file()]
        files: list[Path] = []
        for ext in extensions:
            files.extend(sorted(p for p in entries if p.suffix.lower() == ext.lower()))
        return files

    def load_directory(
        self, directory: Path, extensions: list[str] | None = None
    ) -> list[Transaction]:
        """
        Load all matching files in a directory.

        Args:
            directory: Directory path
            extensions: File extensions to include (default: csv, tsv, json)

        Returns:
            List of Transaction objects
        """
        return self.load_files(self.find_files(directory, extensions))

    @staticmethod
    def _json_rows(content: str) -> list[dict[str, Any]]:
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON: {e}") from e

        if isinstance(data, dict):
            data = data.get("transactions")
        if not isinstance(data, list) or not all(isinstance(r, dict) for r in data):
            raise ValueError("Expected a list of transaction objects")
        return data

    @staticmethod
    def _csv_rows(content: str, delimiter: str) -> list[dict[str, Any]]:
        reader = csv.DictReader(StringIO(content), delimiter=delimiter)
        fieldnames = [name.strip().lower() for name in reader.fieldnames or []]
        missing = {"type", "amount", "date"} - set(fieldnames)
        if missing:
            raise ValueError(f"Missing columns: {', '.join(sorted(missing))}")
        reader.fieldnames = fieldnames
        return [
            row for row in reader
            if any(isinstance(v, str) and v.strip() for v in row.values())
        ]

    @staticmethod
    def _row_to_transaction(row: dict[str, Any], line: int) -> Transaction:
        for key in ("description", "category"):
            if isinstance(row.get(key), str):
                row[key] = clean_text(row[key])
        try:
            return transaction_from_row(row)
        except (TypeError, ValueError) as e:
            raise ValueError(f"record {line}: {e}") from e

    @staticmethod
    def write_csv(
        transactions: list[Transaction],
        output_path: Path,
        delimiter: str = ",",
    ) -> None:
        """
        Write transactions to CSV in the export column layout.

        Args:
            transactions: List of transactions
            output_path: Output file path
            delimiter: CSV delimiter (default comma)
        """
        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=CSV_FIELDS, delimiter=delimiter)
            writer.writeheader()
            for tx in transactions:
                writer.writerow(tx.to_dict())
