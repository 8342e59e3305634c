import json
import logging
from datetime import date
from typing import List, Optional, TextIO

from models.transaction import Transaction

logger = logging.getLogger(__name__)


def ingest(source: TextIO, today: Optional[date] = None) -> List[Transaction]:
    """
    Ingest transactions produced by statement extraction.

    Expected format: a JSON array of records, or an object whose
    "transactions" key holds that array. Each record carries at least
    date, amount, description and type; category is optional.

    [
        {"date": "2025-01-15", "description": "Coffee", "category": "Food",
         "type": "expense", "amount": 4.5}
    ]
    """
    transactions = []

    try:
        data = json.load(source)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid extraction result: {e}")
        return transactions

    if isinstance(data, dict):
        data = data.get("transactions")

    if not isinstance(data, list):
        logger.error("Extraction result does not contain a list of transactions")
        return transactions

    for index, record in enumerate(data, start=1):
        try:
            transaction = row_to_transaction(record, today)
        except ValueError as e:
            logger.warning(f"Skipping record {index}: {e}")
            continue
        transactions.append(transaction)

    logger.info(f"Successfully ingested {len(transactions)} transactions")
    return transactions


def row_to_transaction(record, today: Optional[date] = None) -> Transaction:
    """Convert one extracted record into a Transaction.

    Raises:
        ValueError: If required fields are missing or malformed.
    """
    if not isinstance(record, dict):
        raise ValueError(f"record is not an object: {record!r}")

    missing = [
        field for field in ("date", "amount", "description") if record.get(field) in (None, "")
    ]
    if missing:
        raise ValueError(f"missing {', '.join(missing)}")

    transaction = Transaction.from_dict(record, today)
    if transaction.parsed_date is None:
        raise ValueError(f"unparseable date {transaction.date!r}")
    return transaction
