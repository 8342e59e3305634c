#!/usr/bin/env python3

import sys
from cli.outcomes import log_outcome
from tools.formatting import format_currency
from logger import get_logger

logger = get_logger()


def cmd_set(args, services):
    """Set the monthly spending target. Zero or a negative value clears it."""
    outcome = services.ledger.set_target(args.value, services.settings.currency)
    log_outcome(outcome)

    if outcome.is_destructive:
        sys.exit(1)


def cmd_show(args, services):
    """Show the current monthly spending target."""
    target = services.ledger.target

    if target is None:
        logger.info("No monthly target set.")
        return

    logger.info(
        f"Current Target: {format_currency(target, services.settings.currency)}"
    )


def setup_parser(subparsers):
    """Setup target subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "target",
        help="Manage the monthly spending target",
        description="Define your budget for the month. Enter 0 to clear the target.",
    )

    target_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available target commands",
        dest="subcommand",
        required=True,
    )

    # target set
    set_parser = target_subparsers.add_parser("set", help="Set or clear the target")
    set_parser.add_argument("value", help="Target amount (0 or less clears it)")
    set_parser.set_defaults(func=cmd_set)

    # target show
    show_parser = target_subparsers.add_parser("show", help="Show the current target")
    show_parser.set_defaults(func=cmd_show)
