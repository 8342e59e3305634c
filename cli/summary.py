#!/usr/bin/env python3

from datetime import datetime
from tools.formatting import format_currency, format_percentage
from tools.transactions import get_dashboard_summary
from logger import get_logger

logger = get_logger()


def cmd_summary(args, services):
    """Show today's and this month's totals with budget progress."""
    summary = get_dashboard_summary(services, datetime.now())
    totals = summary.totals
    progress = summary.progress
    currency = services.settings.currency

    logger.info("\nSummary:")
    logger.info("=" * 80)
    logger.info(f"Today's Income:          {format_currency(totals.daily_income, currency)}")
    logger.info(f"Today's Expenses:        {format_currency(totals.daily_expenses, currency)}")
    logger.info(f"This Month's Income:     {format_currency(totals.monthly_income, currency)}")
    logger.info(f"This Month's Expenses:   {format_currency(totals.monthly_expenses, currency)}")
    logger.info("-" * 80)

    if progress.target is None:
        logger.info("Total spent so far this month. Set a target to track progress.")
        return

    logger.info(f"  out of {format_currency(progress.target, currency)} target")
    logger.info(f"  {_progress_bar(progress.clamped_percentage)}")

    if progress.is_over_budget:
        logger.warning(
            f"Over budget by {format_currency(progress.over_budget_amount, currency)}!"
        )
    elif progress.percentage > 0:
        logger.info(f"  {format_percentage(progress.percentage)} of target spent.")


def _progress_bar(percentage, width=40):
    filled = int(percentage / 100 * width)
    return "[" + "#" * filled + "-" * (width - filled) + "]"


def setup_parser(subparsers):
    """Setup summary subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "summary",
        help="Show daily and monthly totals",
        description="Show today's and this month's income and expenses against the monthly target",
    )
    parser.set_defaults(func=cmd_summary)
