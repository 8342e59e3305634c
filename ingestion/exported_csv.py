import csv
import logging
from typing import List, TextIO

from models.transaction import Transaction, parse_amount, parse_transaction_date

logger = logging.getLogger(__name__)


def ingest(source: TextIO) -> List[Transaction]:
    """
    Ingest a CSV file previously written by `transactions export`.

    Expected format:
    - Header row (line 1): Date,Description,Category,Type,Amount (<currency>)
    - Transaction rows (line 2+): actual transaction data
    """
    transactions = []
    reader = csv.reader(source)

    # Read and validate header
    try:
        header = next(reader)
        if len(header) < 5 or header[0] != "Date" or not header[4].startswith("Amount"):
            logger.error(f"Invalid header format: {header}")
            return transactions
        logger.info("Found exported CSV header")
    except StopIteration:
        logger.error("Empty CSV file")
        return transactions

    line_num = 1
    for row in reader:
        line_num += 1

        if not row or len(row) < 5:
            logger.warning(f"Skipping malformed line {line_num}: {row}")
            continue

        try:
            transactions.append(row_to_transaction(row))
        except ValueError as e:
            logger.warning(f"Skipping line {line_num}: {row} - {e}")
            continue

    logger.info(f"Successfully ingested {len(transactions)} transactions")
    return transactions


def row_to_transaction(row: List[str]) -> Transaction:
    """Convert one exported CSV row into a Transaction.

    Raises:
        ValueError: If the date or amount cannot be parsed.
    """
    date_str = row[0].strip()
    transaction_date = parse_transaction_date(date_str)
    if transaction_date is None:
        raise ValueError(f"unparseable date {date_str!r}")

    return Transaction(
        date=transaction_date.isoformat(),
        description=row[1],
        category=row[2],
        type=row[3].strip() or "expense",
        amount=parse_amount(row[4]),
    )
