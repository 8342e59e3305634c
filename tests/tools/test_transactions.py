"""Tests for transaction analysis tools."""

from datetime import date, datetime
from decimal import Decimal
from dateutil.relativedelta import relativedelta

from models.summary import LedgerTotals
from tools.transactions import (
    calculate_budget_progress,
    calculate_totals,
    get_dashboard_summary,
)
from tests.helpers import make_transaction


NOW = datetime(2025, 3, 15, 18, 30)


class TestCalculateTotals:
    """Tests for calculate_totals function."""

    def test_daily_and_monthly_totals(self):
        """Test that a prior-month expense counts towards nothing."""
        today = NOW.date()
        last_month = today - relativedelta(months=1)
        transactions = [
            make_transaction(date=today.isoformat(), type="expense", amount="100"),
            make_transaction(date=today.isoformat(), type="income", amount="40"),
            make_transaction(date=last_month.isoformat(), type="expense", amount="9999"),
        ]

        totals = calculate_totals(transactions, NOW)

        assert totals.daily_expenses == Decimal("100")
        assert totals.daily_income == Decimal("40")
        assert totals.monthly_expenses == Decimal("100")
        assert totals.monthly_income == Decimal("40")

    def test_earlier_days_count_only_towards_month(self):
        transactions = [
            make_transaction(date="2025-03-01", type="expense", amount="25.50"),
            make_transaction(date="2025-03-14", type="income", amount="10"),
        ]

        totals = calculate_totals(transactions, NOW)

        assert totals.daily_expenses == Decimal("0")
        assert totals.daily_income == Decimal("0")
        assert totals.monthly_expenses == Decimal("25.50")
        assert totals.monthly_income == Decimal("10")

    def test_same_month_previous_year_is_excluded(self):
        transactions = [make_transaction(date="2024-03-15", amount="500")]

        totals = calculate_totals(transactions, NOW)

        assert totals == LedgerTotals.zero()

    def test_calendar_day_not_24_hour_window(self):
        """Test that yesterday is excluded even within 24 hours of now."""
        just_after_midnight = datetime(2025, 3, 15, 0, 5)
        transactions = [
            make_transaction(date="2025-03-14", amount="7"),
            make_transaction(date="2025-03-15", amount="3"),
        ]

        totals = calculate_totals(transactions, just_after_midnight)

        assert totals.daily_expenses == Decimal("3")
        assert totals.monthly_expenses == Decimal("10")

    def test_accepts_date_reference(self):
        transactions = [make_transaction(date="2025-03-15", amount="3")]

        totals = calculate_totals(transactions, date(2025, 3, 15))

        assert totals.daily_expenses == Decimal("3")

    def test_unparseable_dates_are_skipped(self, caplog):
        transactions = [
            make_transaction(date="not-a-date", amount="1000"),
            make_transaction(date="2025-03-15", amount="5"),
        ]

        totals = calculate_totals(transactions, NOW)

        assert totals.daily_expenses == Decimal("5")
        assert totals.monthly_expenses == Decimal("5")
        assert "unparseable date" in caplog.text

    def test_unknown_type_is_ignored(self):
        transactions = [make_transaction(date="2025-03-15", type="transfer", amount="80")]

        totals = calculate_totals(transactions, NOW)

        assert totals == LedgerTotals.zero()

    def test_empty_ledger(self):
        assert calculate_totals([], NOW) == LedgerTotals.zero()


class TestCalculateBudgetProgress:
    """Tests for calculate_budget_progress function."""

    def test_over_budget(self):
        progress = calculate_budget_progress(Decimal("250"), Decimal("200"))

        assert progress.percentage == Decimal("125")
        assert progress.clamped_percentage == Decimal("100")
        assert progress.is_over_budget
        assert progress.over_budget_amount == Decimal("50")

    def test_under_budget(self):
        progress = calculate_budget_progress(Decimal("50"), Decimal("200"))

        assert progress.percentage == Decimal("25")
        assert progress.clamped_percentage == Decimal("25")
        assert not progress.is_over_budget
        assert progress.over_budget_amount is None

    def test_exactly_on_budget_is_not_over(self):
        progress = calculate_budget_progress(Decimal("200"), Decimal("200"))

        assert progress.percentage == Decimal("100")
        assert not progress.is_over_budget

    def test_no_target(self):
        progress = calculate_budget_progress(Decimal("250"), None)

        assert progress.target is None
        assert progress.percentage == Decimal("0")
        assert not progress.is_over_budget

    def test_zero_target_counts_as_absent(self):
        progress = calculate_budget_progress(Decimal("250"), Decimal("0"))

        assert progress.target is None
        assert progress.percentage == Decimal("0")


class TestGetDashboardSummary:
    """Tests for get_dashboard_summary function."""

    def test_returns_zeros_before_hydration(self, services):
        """Test that nothing is computed before the ledger is loaded."""
        services.storage.set(
            "transactions",
            '[{"date": "2025-03-15", "description": "Lunch", "category": "", '
            '"type": "expense", "amount": 12}]',
        )

        summary = get_dashboard_summary(services, NOW)

        assert summary.totals == LedgerTotals.zero()
        assert summary.progress.percentage == Decimal("0")

    def test_summary_after_hydration(self, services):
        services.ledger.load()
        services.ledger.add(make_transaction(date="2025-03-15", amount="250"))
        services.ledger.set_target("200")

        summary = get_dashboard_summary(services, NOW)

        assert summary.totals.daily_expenses == Decimal("250")
        assert summary.totals.monthly_expenses == Decimal("250")
        assert summary.progress.percentage == Decimal("125")
        assert summary.progress.over_budget_amount == Decimal("50")
