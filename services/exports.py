"""Export service for writing ledger transactions to CSV."""

import csv
import io
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import Iterable, List, Optional

from models.outcome import DEFAULT, DESTRUCTIVE, Outcome
from models.transaction import Transaction
from logger import get_logger

logger = get_logger()

# Export statuses
INVALID_RANGE = "invalid_range"
EMPTY_RANGE = "empty_range"
EMPTY_LEDGER = "empty_ledger"
DELIVERED = "delivered"
DELIVERY_FAILED = "delivery_failed"

INVALID_DATE = "Invalid Date"
CENTS = Decimal("0.01")


class DeliveryError(Exception):
    """Raised when the host environment cannot save an exported file."""


class Delivery(ABC):
    """Hands a finished export over to the host environment."""

    @abstractmethod
    def deliver(self, filename: str, content: str) -> Optional[Path]:
        """Save content under filename.

        Returns:
            Where the file ended up, if it was written to disk.

        Raises:
            DeliveryError: If the file cannot be delivered.
        """
        pass


class FileDelivery(Delivery):
    """Writes exports as UTF-8 files into a directory.

    Args:
        export_dir: Directory receiving exported files (created on demand).
    """

    def __init__(self, export_dir: Path):
        self.export_dir = Path(export_dir)

    def deliver(self, filename: str, content: str) -> Path:
        output_path = self.export_dir / filename
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as e:
            raise DeliveryError(f"Could not write {output_path}: {e}") from e
        return output_path


@dataclass(frozen=True)
class ExportResult:
    """Result of an export attempt.

    Attributes:
        status: One of the export status constants.
        outcome: Notification for the user.
        filename: Derived filename (None when no file was produced).
        content: CSV text (None when no file was produced).
        path: Location the file was written to, if any.
    """

    status: str
    outcome: Outcome
    filename: Optional[str] = None
    content: Optional[str] = None
    path: Optional[Path] = None


def filter_by_date_range(
    transactions: Iterable[Transaction],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> List[Transaction]:
    """Keep transactions dated within [start_date, end_date].

    Either bound may be omitted. With no bounds every transaction is kept;
    otherwise transactions with unparseable dates are dropped.
    """
    transactions = list(transactions)
    if start_date is None and end_date is None:
        return transactions

    filtered = []
    for t in transactions:
        transaction_date = t.parsed_date
        if transaction_date is None:
            logger.debug(f"Excluding transaction with unparseable date: {t.date!r}")
            continue
        if start_date is not None and transaction_date < start_date:
            continue
        if end_date is not None and transaction_date > end_date:
            continue
        filtered.append(t)

    return filtered


def sort_newest_first(transactions: Iterable[Transaction]) -> List[Transaction]:
    """Sort by date descending; unparseable dates go last, ties keep their order."""
    return sorted(
        transactions,
        key=lambda t: t.parsed_date or date.min,
        reverse=True,
    )


def format_csv_row(values: List[str]) -> str:
    """Format one CSV row without its line terminator.

    Cells containing a comma, double quote, carriage return or newline are
    quoted, with embedded quotes doubled.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(values)
    return buffer.getvalue()[: -len(writer.dialect.lineterminator)]


def format_amount(amount: Decimal) -> str:
    """Format an amount with two decimals, rounding halves away from zero."""
    return str(amount.quantize(CENTS, rounding=ROUND_HALF_UP))


def build_csv(transactions: Iterable[Transaction], currency: str) -> str:
    """Serialize transactions to CSV text in the given order.

    Columns: Date, Description, Category, Type, Amount (<currency>).
    Rows are separated by '\\n' with no trailing newline.
    """
    lines = [
        format_csv_row(["Date", "Description", "Category", "Type", f"Amount ({currency})"])
    ]

    for t in transactions:
        transaction_date = t.parsed_date
        formatted_date = (
            transaction_date.strftime("%Y-%m-%d") if transaction_date else INVALID_DATE
        )
        lines.append(
            format_csv_row(
                [
                    formatted_date,
                    t.description,
                    t.category,
                    t.type,
                    format_amount(t.amount),
                ]
            )
        )

    return "\n".join(lines)


def build_export_filename(
    start_date: Optional[date], end_date: Optional[date], today: date
) -> str:
    """Derive the export filename from the requested range.

    Examples:
        transactions-from_20250101_to_20250131.csv
        transactions-from_start_to_20250131.csv
        transactions-all_2025-01-31.csv
    """
    if start_date is None and end_date is None:
        return f"transactions-all_{today.strftime('%Y-%m-%d')}.csv"

    start = start_date.strftime("%Y%m%d") if start_date else "start"
    end = end_date.strftime("%Y%m%d") if end_date else "all-time"
    return f"transactions-from_{start}_to_{end}.csv"


class ExportService:
    """Service for exporting transactions.

    Args:
        delivery: Delivery used to hand finished CSV files to the host.
    """

    def __init__(self, delivery: Delivery):
        self.delivery = delivery

    def export(
        self,
        transactions: Iterable[Transaction],
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        *,
        currency: str = "INR",
        today: Optional[date] = None,
    ) -> ExportResult:
        """Filter, serialize and deliver transactions as a CSV file.

        Args:
            transactions: Transactions in ledger order.
            start_date: Optional inclusive start of the range.
            end_date: Optional inclusive end of the range.
            currency: Currency code shown in the amount column header.
            today: Date used in the filename of unfiltered exports.

        Returns:
            ExportResult describing the outcome. Never raises for invalid
            ranges, empty results or delivery failures.
        """
        if start_date and end_date and start_date > end_date:
            return ExportResult(
                status=INVALID_RANGE,
                outcome=Outcome(
                    title="Invalid Date Range",
                    description="Start date cannot be after end date.",
                    variant=DESTRUCTIVE,
                ),
            )

        range_requested = start_date is not None or end_date is not None
        selected = filter_by_date_range(transactions, start_date, end_date)

        if not selected:
            if range_requested:
                status = EMPTY_RANGE
                message = "No transactions found for the selected date range."
            else:
                status = EMPTY_LEDGER
                message = "There are no transactions to download."
            return ExportResult(
                status=status,
                outcome=Outcome(title="No Transactions", description=message, variant=DEFAULT),
            )

        content = build_csv(sort_newest_first(selected), currency)
        filename = build_export_filename(start_date, end_date, today or date.today())

        try:
            path = self.delivery.deliver(filename, content)
        except (DeliveryError, OSError) as e:
            logger.error(f"Export delivery failed: {e}")
            return ExportResult(
                status=DELIVERY_FAILED,
                outcome=Outcome(
                    title="Download Failed",
                    description="Your environment does not support automatic downloads.",
                    variant=DESTRUCTIVE,
                ),
                filename=filename,
                content=content,
            )

        logger.info(f"Exported {len(selected)} transaction(s) to {filename}")
        return ExportResult(
            status=DELIVERED,
            outcome=Outcome(
                title="Download Started",
                description="Your transactions are being downloaded.",
            ),
            filename=filename,
            content=content,
            path=path,
        )
