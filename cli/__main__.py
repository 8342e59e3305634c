#!/usr/bin/env python3
"""
Penny CLI - Personal ledger for income, expenses and a monthly spending target.

Usage:
    python -m cli <command> <subcommand> [options]

Commands:
    transactions Record, import and export transactions
    target       Manage the monthly spending target
    summary      Show daily and monthly totals
    settings     Display preferences
    migrate      Database migrations

Examples:
    python -m cli transactions add 250 --description Groceries --category Food
    python -m cli transactions import extracted.json
    python -m cli transactions export --start-date 2025-10-01 --end-date 2025-10-31
    python -m cli target set 50000
    python -m cli summary
"""

import sys
import argparse
from cli import migrate, settings, summary, target, transactions
from config import load_config
from db.manager import apply_pending_migrations
from services.base import Services
from logger import setup_logging


def main():
    """Main CLI entry point with subcommands."""
    parser = argparse.ArgumentParser(
        prog="cli",
        description="Penny - Personal ledger",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
    )

    # Register each command's subparser
    transactions.setup_parser(subparsers)
    target.setup_parser(subparsers)
    summary.setup_parser(subparsers)
    settings.setup_parser(subparsers)
    migrate.setup_parser(subparsers)

    args = parser.parse_args()

    if hasattr(args, "func"):
        try:
            config = load_config()
            setup_logging(config)

            # Create services container for dependency injection
            services = Services(config)

            if args.command == "migrate":
                # Migrate commands need db_manager for raw database operations
                args.func(args, services.db_manager)
            else:
                apply_pending_migrations(services.db_manager)
                # Hydrate once per process, before any command can write
                services.ledger.load()
                args.func(args, services)
        except Exception as e:
            print(f"Error: {e}")
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
