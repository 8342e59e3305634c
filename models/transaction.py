from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple
import logging

from dateutil.parser import isoparse

logger = logging.getLogger(__name__)

EXPENSE = "expense"
INCOME = "income"
TRANSACTION_TYPES = (EXPENSE, INCOME)


def parse_transaction_date(value) -> Optional[date]:
    """Parse a stored ISO-8601 date string into a local calendar date.

    Timestamps carrying an offset are converted to local time before the
    date is taken. Returns None when the value cannot be parsed.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return value
    else:
        try:
            parsed = isoparse(str(value).strip())
        except (ValueError, OverflowError) as e:
            logger.debug(f"Unparseable transaction date {value!r}: {e}")
            return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone()
    return parsed.date()


def parse_amount(value) -> Decimal:
    """Parse a stored amount into a non-negative Decimal.

    Raises:
        ValueError: If the value is not a finite, non-negative number.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid amount: {value!r}")
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {value!r}")
    if not amount.is_finite() or amount < 0:
        raise ValueError(f"Invalid amount: {value!r}")
    return amount


@dataclass(frozen=True)
class Transaction:
    date: str  # ISO-8601 calendar date, YYYY-MM-DD
    description: str
    category: str
    type: str  # 'expense' or 'income'
    amount: Decimal  # always non-negative

    @property
    def parsed_date(self) -> Optional[date]:
        """The transaction date as a date object, or None if unparseable."""
        return parse_transaction_date(self.date)

    @property
    def signature(self) -> Tuple[str, Decimal, str, str]:
        """Key used to detect duplicates when merging extracted transactions."""
        return (self.date, self.amount, self.description, self.type)

    @classmethod
    def from_dict(cls, data: dict, today: Optional[date] = None) -> "Transaction":
        """Build a Transaction from a stored or extracted record.

        Missing dates default to today and missing types to 'expense'.

        Raises:
            ValueError: If the record is not a dict or its amount is invalid.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Transaction record must be an object, got {data!r}")

        today = today or date.today()
        return cls(
            date=str(data.get("date") or today.isoformat()),
            description=str(data.get("description") or ""),
            category=str(data.get("category") or ""),
            type=str(data.get("type") or EXPENSE),
            amount=parse_amount(data.get("amount")),
        )

    def to_dict(self) -> dict:
        """Convert transaction to a JSON-serializable dictionary."""
        return {
            "date": self.date,
            "description": self.description,
            "category": self.category,
            "type": self.type,
            "amount": str(self.amount),
        }
