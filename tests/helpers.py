"""Helper utilities for tests."""

from decimal import Decimal
from pathlib import Path
import sqlite3

from models.transaction import Transaction


def run_migrations(conn: sqlite3.Connection, migrations_dir: Path) -> None:
    """Run all SQL migrations in order.

    Args:
        conn: SQLite connection to run migrations against.
        migrations_dir: Path to directory containing .sql migration files.
    """
    migration_files = sorted(migrations_dir.glob("*.sql"))

    for migration_file in migration_files:
        with open(migration_file, "r") as f:
            sql = f.read()

        conn.executescript(sql)

    conn.commit()


def make_transaction(
    date="2025-01-15",
    description="Coffee",
    category="Food",
    type="expense",
    amount="4.50",
) -> Transaction:
    """Build a Transaction with sensible defaults for tests."""
    return Transaction(
        date=date,
        description=description,
        category=category,
        type=type,
        amount=Decimal(amount),
    )
