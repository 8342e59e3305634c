"""Transaction analysis tools."""

from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional, Union

from models.summary import BudgetProgress, DashboardSummary, LedgerTotals
from models.transaction import EXPENSE, INCOME, Transaction
from logger import get_logger

logger = get_logger()


def calculate_totals(
    transactions: Iterable[Transaction], now: Union[datetime, date]
) -> LedgerTotals:
    """Sum income and expenses for the day and month containing now.

    Days are compared as local calendar dates, not 24-hour windows.
    Transactions with unparseable dates are logged and skipped.

    Args:
        transactions: Transactions to aggregate.
        now: Reference instant.

    Returns:
        LedgerTotals with daily and monthly sums.
    """
    today = now.date() if isinstance(now, datetime) else now

    daily_expenses = Decimal("0")
    daily_income = Decimal("0")
    monthly_expenses = Decimal("0")
    monthly_income = Decimal("0")

    for transaction in transactions:
        transaction_date = transaction.parsed_date
        if transaction_date is None:
            logger.warning(
                f"Skipping transaction with unparseable date: {transaction.date!r}"
            )
            continue

        same_day = transaction_date == today
        same_month = (transaction_date.year, transaction_date.month) == (
            today.year,
            today.month,
        )

        if transaction.type == EXPENSE:
            if same_day:
                daily_expenses += transaction.amount
            if same_month:
                monthly_expenses += transaction.amount
        elif transaction.type == INCOME:
            if same_day:
                daily_income += transaction.amount
            if same_month:
                monthly_income += transaction.amount

    return LedgerTotals(
        daily_expenses=daily_expenses,
        daily_income=daily_income,
        monthly_expenses=monthly_expenses,
        monthly_income=monthly_income,
    )


def calculate_budget_progress(
    monthly_expenses: Decimal, target: Optional[Decimal]
) -> BudgetProgress:
    """Measure monthly expenses against the monthly target.

    The percentage is left unclamped; BudgetProgress.clamped_percentage caps
    it for progress bars.

    Example:
        target=200, monthly_expenses=250 -> percentage=125, over_budget_amount=50
    """
    if target is None or target <= 0:
        return BudgetProgress(
            target=None,
            monthly_expenses=monthly_expenses,
            percentage=Decimal("0"),
        )

    percentage = monthly_expenses / target * 100
    over_budget_amount = (
        monthly_expenses - target if monthly_expenses > target else None
    )

    return BudgetProgress(
        target=target,
        monthly_expenses=monthly_expenses,
        percentage=percentage,
        over_budget_amount=over_budget_amount,
    )


def get_dashboard_summary(services, now: Union[datetime, date]) -> DashboardSummary:
    """Get totals and budget progress for the ledger.

    Nothing is computed until the ledger has been loaded; before that the
    all-zero totals are returned.

    Args:
        services: Services container with the ledger and hydration gate.
        now: Reference instant.

    Returns:
        DashboardSummary for now.
    """
    if not services.gate.is_ready:
        totals = LedgerTotals.zero()
        return DashboardSummary(
            totals=totals,
            progress=calculate_budget_progress(totals.monthly_expenses, None),
        )

    totals = calculate_totals(services.ledger.transactions, now)
    progress = calculate_budget_progress(
        totals.monthly_expenses, services.ledger.target
    )
    return DashboardSummary(totals=totals, progress=progress)
