#!/usr/bin/env python3

import sys
import argparse
from datetime import date
from pathlib import Path
from cli.outcomes import log_outcome
from ingestion import get_available_modules, get_ingestion_module
from models.transaction import (
    TRANSACTION_TYPES,
    Transaction,
    parse_amount,
    parse_transaction_date,
)
from services.exports import ExportService, FileDelivery
from tools.formatting import format_currency
from logger import get_logger

logger = get_logger()


def _parse_cli_date(value, option):
    """Parse a YYYY-MM-DD command-line date, exiting on failure."""
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        logger.error(f"Invalid {option} '{value}'. Use YYYY-MM-DD format.")
        sys.exit(1)


def cmd_add(args, services):
    """Add a single transaction to the ledger.

    Args:
        args: Parsed command-line arguments with amount, description, category, type, date
        services: Services container with the ledger and settings services
    """
    transaction_date = parse_transaction_date(args.date) if args.date else date.today()
    if transaction_date is None:
        logger.error(f"Invalid date '{args.date}'. Use YYYY-MM-DD format.")
        sys.exit(1)

    try:
        amount = parse_amount(args.amount)
    except ValueError:
        logger.error(f"Amount must be a non-negative number, got '{args.amount}'")
        sys.exit(1)

    description = args.description.strip()
    if not description:
        logger.error("Description cannot be empty.")
        sys.exit(1)

    transaction = Transaction(
        date=transaction_date.isoformat(),
        description=description,
        category=args.category.strip(),
        type=args.type,
        amount=amount,
    )

    try:
        services.ledger.add(transaction)
    except Exception as e:
        logger.error(f"Error adding transaction: {e}")
        sys.exit(1)

    logger.info("✓ Transaction added successfully")
    logger.info(f"  {transaction.date} {transaction.type}: {transaction.description}")
    logger.info(f"  Amount: {format_currency(amount, services.settings.currency)}")


def cmd_import(args, services):
    """Merge transactions produced by statement extraction into the ledger.

    Args:
        args: Parsed command-line arguments with input file and format
        services: Services container with the ledger service
    """
    input_path = Path(args.input_file)
    if not input_path.exists():
        logger.error(f"File not found: {args.input_file}")
        sys.exit(1)

    format_name = args.format or input_path.suffix.lstrip(".").lower()
    try:
        ingestion_module = get_ingestion_module(format_name)
    except ValueError as e:
        logger.error(str(e))
        logger.info(f"Available formats: {', '.join(get_available_modules())}")
        sys.exit(1)

    logger.info(f"Importing transactions from: {input_path} ({format_name})")

    try:
        with open(input_path, "r", encoding="utf-8") as f:
            candidates = ingestion_module.ingest(f)

        if not candidates:
            logger.info("No transactions to import.")
            return

        result = services.ledger.merge(candidates)
    except Exception as e:
        logger.error(f"Error during import: {e}")
        sys.exit(1)

    logger.info(f"✓ Successfully added {result.added} transaction(s)")
    if result.skipped:
        logger.info(f"  ({result.skipped} duplicate transaction(s) skipped)")


def cmd_list(args, services):
    """List transactions in ledger order (most recently added first)."""
    transactions = services.ledger.transactions

    if not transactions:
        logger.info("No transactions found.")
        return

    currency = services.settings.currency
    shown = transactions if args.all else transactions[: args.limit]

    logger.info("\nTransactions:")
    logger.info("=" * 80)
    for t in shown:
        logger.info(
            f"{t.date:<12} {t.type:<8} {format_currency(t.amount, currency):>14}  "
            f"{t.description[:36]:<36} {t.category}"
        )
    logger.info("-" * 80)

    logger.info(f"Showing {len(shown)} of {len(transactions)} transaction(s)")


def cmd_export(args, services):
    """Export transactions to CSV.

    Args:
        args: Parsed command-line arguments with optional start/end dates and output dir
        services: Services container with ledger, settings and exports services
    """
    start_date = _parse_cli_date(args.start_date, "--start-date")
    end_date = _parse_cli_date(args.end_date, "--end-date")

    exports = services.exports
    if args.output_dir:
        exports = ExportService(FileDelivery(Path(args.output_dir)))

    result = exports.export(
        services.ledger.transactions,
        start_date,
        end_date,
        currency=services.settings.currency,
    )

    log_outcome(result.outcome)
    if result.path:
        logger.info(f"  Saved to: {result.path}")
    if result.outcome.is_destructive:
        sys.exit(1)


def setup_parser(subparsers):
    """Setup transactions subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "transactions",
        help="Record, import and export transactions",
        description="Record, import and export ledger transactions",
    )

    transactions_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available transaction commands",
        dest="subcommand",
        required=True,
    )

    # transactions add
    add_parser = transactions_subparsers.add_parser(
        "add",
        help="Add a transaction",
        epilog="""
Examples:
  python -m cli transactions add 250 --description "Groceries" --category Food
  python -m cli transactions add 50000 --type income --description Salary --date 2025-10-01
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    add_parser.add_argument("amount", help="Amount (non-negative)")
    add_parser.add_argument("--description", required=True, help="What the money was for")
    add_parser.add_argument("--category", default="", help="Free-text category")
    add_parser.add_argument(
        "--type",
        choices=TRANSACTION_TYPES,
        default="expense",
        help="Transaction type (default: expense)",
    )
    add_parser.add_argument(
        "--date",
        help="Transaction date in YYYY-MM-DD format (default: today)",
    )
    add_parser.set_defaults(func=cmd_add)

    # transactions import
    import_parser = transactions_subparsers.add_parser(
        "import",
        help="Merge extracted transactions into the ledger",
        description="Merge transactions from a statement extraction result, skipping duplicates",
    )
    import_parser.add_argument("input_file", help="Path to the extraction result")
    import_parser.add_argument(
        "--format",
        choices=get_available_modules(),
        help="Input format (default: inferred from the file extension)",
    )
    import_parser.set_defaults(func=cmd_import)

    # transactions list
    list_parser = transactions_subparsers.add_parser("list", help="List transactions")
    list_parser.add_argument(
        "--limit", type=int, default=50, help="Maximum transactions to show"
    )
    list_parser.add_argument(
        "--all", action="store_true", help="Show all transactions"
    )
    list_parser.set_defaults(func=cmd_list)

    # transactions export
    export_parser = transactions_subparsers.add_parser(
        "export",
        help="Export transactions to CSV",
        description="Export transactions to a CSV file with optional date filtering",
        epilog="""
Examples:
  # Export everything
  python -m cli transactions export

  # Export October 2025
  python -m cli transactions export --start-date 2025-10-01 --end-date 2025-10-31

  # Export everything since a date into a specific directory
  python -m cli transactions export --start-date 2025-10-01 --output-dir ~/Downloads
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    export_parser.add_argument(
        "--start-date", help="Inclusive start date in YYYY-MM-DD format"
    )
    export_parser.add_argument(
        "--end-date", help="Inclusive end date in YYYY-MM-DD format"
    )
    export_parser.add_argument(
        "--output-dir", help="Directory for the CSV file (default: configured export_dir)"
    )
    export_parser.set_defaults(func=cmd_export)
