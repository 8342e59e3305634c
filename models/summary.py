"""Rollup models produced by the aggregation tools."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class LedgerTotals:
    """Daily and monthly income/expense sums relative to a reference instant.

    Attributes:
        daily_expenses: Expenses dated on the reference day.
        daily_income: Income dated on the reference day.
        monthly_expenses: Expenses dated in the reference month.
        monthly_income: Income dated in the reference month.
    """

    daily_expenses: Decimal
    daily_income: Decimal
    monthly_expenses: Decimal
    monthly_income: Decimal

    @classmethod
    def zero(cls) -> "LedgerTotals":
        """Totals reported before the ledger has been loaded."""
        return cls(
            daily_expenses=Decimal("0"),
            daily_income=Decimal("0"),
            monthly_expenses=Decimal("0"),
            monthly_income=Decimal("0"),
        )


@dataclass(frozen=True)
class BudgetProgress:
    """Monthly expenses measured against the monthly target.

    Attributes:
        target: The monthly target, or None when no target is set.
        monthly_expenses: Expenses for the reference month.
        percentage: Unclamped share of the target spent (0 without a target).
        over_budget_amount: How far expenses exceed the target, if they do.
    """

    target: Optional[Decimal]
    monthly_expenses: Decimal
    percentage: Decimal
    over_budget_amount: Optional[Decimal] = None

    @property
    def clamped_percentage(self) -> Decimal:
        """Percentage capped at 100 for progress indicators."""
        return min(self.percentage, Decimal("100"))

    @property
    def is_over_budget(self) -> bool:
        return self.over_budget_amount is not None


@dataclass(frozen=True)
class DashboardSummary:
    """Totals and budget progress shown by the summary command."""

    totals: LedgerTotals
    progress: BudgetProgress
