import pytest
from datetime import date
from decimal import Decimal

from models.outcome import DEFAULT, DESTRUCTIVE
from services.exports import (
    DELIVERED,
    DELIVERY_FAILED,
    EMPTY_LEDGER,
    EMPTY_RANGE,
    INVALID_RANGE,
    Delivery,
    DeliveryError,
    ExportService,
    FileDelivery,
    build_csv,
    build_export_filename,
    format_amount,
    format_csv_row,
    filter_by_date_range,
    sort_newest_first,
)
from tests.helpers import make_transaction


class RecordingDelivery(Delivery):
    """Delivery that keeps files in memory."""

    def __init__(self):
        self.files = {}

    def deliver(self, filename, content):
        self.files[filename] = content
        return None


class FailingDelivery(Delivery):
    """Delivery for a host that cannot save files."""

    def deliver(self, filename, content):
        raise DeliveryError("downloads are not supported")


class TestFormatCsvRow:
    """Tests for format_csv_row."""

    def test_plain_cells_are_unchanged(self):
        assert format_csv_row(["Groceries", "Food"]) == "Groceries,Food"

    def test_comma_and_quotes(self):
        assert format_csv_row(['Coffee, "Large"', "x"]) == '"Coffee, ""Large""",x'

    def test_quote_only(self):
        assert format_csv_row(['5" screen', "x"]) == '"5"" screen",x'

    def test_newline(self):
        assert format_csv_row(["line one\nline two", "x"]) == '"line one\nline two",x'

    def test_carriage_return(self):
        assert format_csv_row(["Line1\rLine2", "x"]) == '"Line1\rLine2",x'

    def test_empty_cells(self):
        assert format_csv_row(["a", "", "b"]) == "a,,b"


class TestFormatAmount:
    """Tests for format_amount."""

    @pytest.mark.parametrize(
        "amount,expected",
        [
            ("0.125", "0.13"),
            ("2.675", "2.68"),
            ("4.5", "4.50"),
            ("50000", "50000.00"),
            ("3.14159", "3.14"),
        ],
    )
    def test_two_decimals_half_up(self, amount, expected):
        assert format_amount(Decimal(amount)) == expected


class TestFilterByDateRange:
    """Tests for filter_by_date_range."""

    def setup_method(self):
        self.before = make_transaction(date="2025-01-09", description="Before")
        self.start = make_transaction(date="2025-01-10", description="Start")
        self.end = make_transaction(date="2025-01-20", description="End")
        self.after = make_transaction(date="2025-01-21", description="After")
        self.invalid = make_transaction(date="not-a-date", description="Invalid")
        self.transactions = [
            self.before,
            self.start,
            self.end,
            self.after,
            self.invalid,
        ]

    def test_no_bounds_keeps_everything(self):
        """Test that an unfiltered export keeps unparseable dates too."""
        assert filter_by_date_range(self.transactions) == self.transactions

    def test_closed_interval(self):
        """Test that both bounds are inclusive."""
        result = filter_by_date_range(
            self.transactions, date(2025, 1, 10), date(2025, 1, 20)
        )

        assert result == [self.start, self.end]

    def test_start_only(self):
        result = filter_by_date_range(self.transactions, start_date=date(2025, 1, 10))

        assert result == [self.start, self.end, self.after]

    def test_end_only(self):
        result = filter_by_date_range(self.transactions, end_date=date(2025, 1, 20))

        assert result == [self.before, self.start, self.end]

    def test_timestamp_dates_use_calendar_day(self):
        """Test that a record with a time of day still matches its date."""
        late = make_transaction(date="2025-01-20T23:30:00")

        result = filter_by_date_range([late], end_date=date(2025, 1, 20))

        assert result == [late]


class TestSortNewestFirst:
    """Tests for sort_newest_first."""

    def test_sorts_descending_with_invalid_last(self):
        older = make_transaction(date="2025-01-01", description="Older")
        newer = make_transaction(date="2025-02-01", description="Newer")
        invalid = make_transaction(date="???", description="Invalid")

        assert sort_newest_first([invalid, older, newer]) == [newer, older, invalid]

    def test_ties_keep_ledger_order(self):
        first = make_transaction(description="First")
        second = make_transaction(description="Second")

        assert sort_newest_first([first, second]) == [first, second]


class TestBuildCsv:
    """Tests for build_csv."""

    def test_header_and_rows(self):
        transactions = [
            make_transaction(
                date="2025-01-15",
                description='Coffee, "Large"',
                category="Food",
                type="expense",
                amount="4.5",
            ),
            make_transaction(
                date="2025-01-01",
                description="Salary",
                category="Work",
                type="income",
                amount="50000",
            ),
        ]

        content = build_csv(transactions, "INR")

        assert content == (
            "Date,Description,Category,Type,Amount (INR)\n"
            '2025-01-15,"Coffee, ""Large""",Food,expense,4.50\n'
            "2025-01-01,Salary,Work,income,50000.00"
        )

    def test_invalid_date_placeholder(self):
        content = build_csv([make_transaction(date="garbage", amount="1")], "USD")

        assert content.splitlines()[1] == "Invalid Date,Coffee,Food,expense,1.00"

    def test_amount_rounds_to_two_decimals(self):
        content = build_csv([make_transaction(amount="3.14159")], "USD")

        assert content.endswith(",3.14")


class TestBuildExportFilename:
    """Tests for build_export_filename."""

    def test_full_range(self):
        assert (
            build_export_filename(date(2025, 1, 1), date(2025, 1, 31), date(2025, 2, 3))
            == "transactions-from_20250101_to_20250131.csv"
        )

    def test_start_only(self):
        assert (
            build_export_filename(date(2025, 1, 1), None, date(2025, 2, 3))
            == "transactions-from_20250101_to_all-time.csv"
        )

    def test_end_only(self):
        assert (
            build_export_filename(None, date(2025, 1, 31), date(2025, 2, 3))
            == "transactions-from_start_to_20250131.csv"
        )

    def test_no_range(self):
        assert (
            build_export_filename(None, None, date(2025, 2, 3))
            == "transactions-all_2025-02-03.csv"
        )


class TestExportService:
    """Tests for ExportService.export."""

    def test_invalid_range(self):
        delivery = RecordingDelivery()
        service = ExportService(delivery)

        result = service.export(
            [make_transaction()], date(2025, 2, 1), date(2025, 1, 1)
        )

        assert result.status == INVALID_RANGE
        assert result.outcome.title == "Invalid Date Range"
        assert result.outcome.variant == DESTRUCTIVE
        assert result.filename is None
        assert delivery.files == {}

    def test_empty_ledger(self):
        delivery = RecordingDelivery()
        service = ExportService(delivery)

        result = service.export([])

        assert result.status == EMPTY_LEDGER
        assert result.outcome.title == "No Transactions"
        assert result.outcome.description == "There are no transactions to download."
        assert result.outcome.variant == DEFAULT
        assert delivery.files == {}

    def test_empty_range(self):
        delivery = RecordingDelivery()
        service = ExportService(delivery)

        result = service.export(
            [make_transaction(date="2025-01-15")],
            date(2025, 3, 1),
            date(2025, 3, 31),
        )

        assert result.status == EMPTY_RANGE
        assert (
            result.outcome.description
            == "No transactions found for the selected date range."
        )
        assert delivery.files == {}

    def test_range_excludes_day_after_end(self):
        delivery = RecordingDelivery()
        service = ExportService(delivery)
        on_end = make_transaction(date="2025-01-31", description="On end")
        after_end = make_transaction(date="2025-02-01", description="After end")

        result = service.export(
            [after_end, on_end],
            date(2025, 1, 1),
            date(2025, 1, 31),
            currency="USD",
        )

        assert result.status == DELIVERED
        assert result.filename == "transactions-from_20250101_to_20250131.csv"
        assert "On end" in result.content
        assert "After end" not in result.content
        assert delivery.files[result.filename] == result.content

    def test_export_all_sorted_newest_first(self):
        delivery = RecordingDelivery()
        service = ExportService(delivery)
        older = make_transaction(date="2025-01-01", description="Older")
        newer = make_transaction(date="2025-01-05", description="Newer")

        result = service.export([older, newer], today=date(2025, 1, 6))

        assert result.filename == "transactions-all_2025-01-06.csv"
        lines = result.content.split("\n")
        assert lines[1].startswith("2025-01-05,Newer")
        assert lines[2].startswith("2025-01-01,Older")
        assert result.outcome.title == "Download Started"
        assert result.outcome.description == "Your transactions are being downloaded."

    def test_delivery_failure_is_reported_not_raised(self):
        service = ExportService(FailingDelivery())

        result = service.export([make_transaction()])

        assert result.status == DELIVERY_FAILED
        assert result.outcome.title == "Download Failed"
        assert result.outcome.variant == DESTRUCTIVE
        assert result.path is None


class TestFileDelivery:
    """Tests for FileDelivery."""

    def test_writes_utf8_file(self, tmp_path):
        delivery = FileDelivery(tmp_path / "exports")

        path = delivery.deliver("out.csv", "Date,Description\n2025-01-01,Café")

        assert path == tmp_path / "exports" / "out.csv"
        assert path.read_text(encoding="utf-8") == "Date,Description\n2025-01-01,Café"

    def test_unwritable_directory_raises_delivery_error(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("file in the way")
        delivery = FileDelivery(blocker)

        with pytest.raises(DeliveryError, match="out.csv"):
            delivery.deliver("out.csv", "content")

    def test_export_service_with_file_delivery(self, tmp_path):
        service = ExportService(FileDelivery(tmp_path))

        result = service.export(
            [make_transaction(date="2025-01-15")],
            start_date=date(2025, 1, 1),
        )

        assert result.status == DELIVERED
        assert result.path == tmp_path / "transactions-from_20250101_to_all-time.csv"
        assert result.path.read_text(encoding="utf-8") == result.content
