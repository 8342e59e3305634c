#!/usr/bin/env python3

import sys
from logger import get_logger

logger = get_logger()


def cmd_show(args, services):
    """Show display preferences."""
    logger.info(f"Currency: {services.settings.currency}")
    logger.info(f"Theme: {services.settings.theme}")


def cmd_set_currency(args, services):
    """Change the display currency. Amounts are not converted."""
    try:
        currency = services.settings.set_currency(args.code)
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)

    logger.info(f"✓ Display currency set to {currency}")


def setup_parser(subparsers):
    """Setup settings subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "settings",
        help="Display preferences",
        description="Show and change display preferences",
    )

    settings_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available settings commands",
        dest="subcommand",
        required=True,
    )

    # settings show
    show_parser = settings_subparsers.add_parser("show", help="Show preferences")
    show_parser.set_defaults(func=cmd_show)

    # settings set-currency
    currency_parser = settings_subparsers.add_parser(
        "set-currency", help="Set the display currency"
    )
    currency_parser.add_argument("code", help="Currency code, e.g. INR or USD")
    currency_parser.set_defaults(func=cmd_set_currency)
