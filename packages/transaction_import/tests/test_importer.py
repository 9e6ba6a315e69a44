"""Tests for the import orchestrator."""

import io
from datetime import date, datetime
from decimal import Decimal

import pandas as pd
import pytest

from packages.transaction_import.config import ImportSettings
from packages.transaction_import.errors import EmptyFileError, MissingColumnsError
from packages.transaction_import.importer import TransactionImporter, import_transactions
from packages.transaction_import.models import (
    ImportStatus,
    RecurrenceType,
    TransactionRecord,
    TransactionType,
)

TODAY = date(2026, 10, 18)


@pytest.fixture
def importer():
    return TransactionImporter(settings=ImportSettings(), today=TODAY)


class TestScenarios:
    """End-to-end imports of small exports."""

    def test_native_export(self, importer):
        text = "amount,category,date,notes\n45.67,Groceries,2025-02-28,Weekly shopping\n"

        result = importer.import_text(text)

        assert result.status == ImportStatus.SUCCESS
        assert result.records == (
            TransactionRecord(
                amount=Decimal("45.67"),
                category="Groceries",
                type=TransactionType.EXPENSE,
                date=datetime(2025, 2, 28),
                recurrence=RecurrenceType.ONE_TIME,
                notes="Weekly shopping",
                icon="🛒",
            ),
        )
        assert result.diagnostics.success_count == 1
        assert result.diagnostics.failure_count == 0

    def test_bank_export_with_reordered_headers(self, importer):
        text = "Date,Description,Category,Amount\n02/28/2025,Store purchase,Groceries,45.67\n"

        result = importer.import_text(text)

        assert result.ok
        record = result.records[0]
        assert record.amount == Decimal("45.67")
        assert record.category == "Groceries"
        assert record.type == TransactionType.INCOME
        assert record.date == datetime(2025, 2, 28)
        assert record.notes == "Store purchase"

    def test_short_row_is_skipped(self, importer):
        text = (
            "amount,category,date,notes\n"
            "45.67,Groceries\n"
            "12.00,Coffee,2025-03-01,Latte\n"
        )

        result = importer.import_text(text)

        assert result.status == ImportStatus.SUCCESS
        assert len(result.records) == 1
        assert result.records[0].category == "Coffee"
        assert result.diagnostics.success_count == 1
        assert result.diagnostics.failure_count == 1
        assert result.diagnostics.failure_reasons == {"short_row": 1}

    def test_header_only_is_success_with_no_records(self, importer):
        result = importer.import_text("amount,category,date\n")

        assert result.status == ImportStatus.SUCCESS
        assert result.records == ()
        assert result.diagnostics.success_count == 0
        assert result.diagnostics.failure_count == 0


class TestFileLevelOutcomes:
    @pytest.mark.parametrize("text", ["", "   \n \n", None])
    def test_empty_input(self, importer, text):
        result = importer.import_text(text)

        assert result.status == ImportStatus.EMPTY_FILE
        assert result.is_file_error
        with pytest.raises(EmptyFileError):
            result.raise_for_status()

    def test_missing_required_columns(self, importer):
        result = importer.import_text("foo,bar,date\n1,Food,2025-01-01\n")

        assert result.status == ImportStatus.MISSING_REQUIRED_COLUMNS
        assert result.missing_fields == ("amount", "category")
        assert result.records == ()
        with pytest.raises(MissingColumnsError) as exc_info:
            result.raise_for_status()
        assert exc_info.value.fields == ["amount", "category"]

    def test_override_rescues_unrecognised_headers(self):
        importer = TransactionImporter(
            override={"amount": 0, "category": 1}, settings=ImportSettings(), today=TODAY
        )

        result = importer.import_text("foo,bar,date\n1,Food,2025-01-01\n")

        assert result.ok
        assert result.records[0].amount == Decimal("1")
        assert result.records[0].category == "Food"

    def test_override_unmapping_required_field_fails(self):
        importer = TransactionImporter(override={"date": None}, today=TODAY)

        result = importer.import_text("amount,category,date\n1,Food,2025-01-01\n")

        assert result.status == ImportStatus.MISSING_REQUIRED_COLUMNS
        assert result.missing_fields == ("date",)

    def test_no_valid_transactions(self, importer):
        text = "amount,category,date\nabc,Food,2025-01-01\n5,,2025-01-02\n"

        result = importer.import_text(text)

        assert result.status == ImportStatus.NO_VALID_TRANSACTIONS
        assert not result.ok
        assert not result.is_file_error
        assert result.records == ()
        assert result.diagnostics.failure_reasons == {
            "invalid_amount": 1,
            "empty_category": 1,
        }
        assert result.raise_for_status() is result


class TestRowHandling:
    def test_amount_too_large_for_float_is_rejected(self, importer):
        huge = "1" + "0" * 400
        text = f"amount,category,date\n{huge},Food,2025-01-01\n5,Food,2025-01-02\n"

        result = importer.import_text(text)

        assert [r.amount for r in result.records] == [Decimal("5")]
        assert result.diagnostics.failure_reasons == {"invalid_amount": 1}
        assert result.to_dict()["transactions"][0]["amount"] == 5.0

    def test_success_and_failure_counts_cover_every_data_row(self, importer):
        text = (
            "Amount,Category,Date\n"
            "10,Food,2025-01-01\n"
            "\n"
            "oops,Food,2025-01-02\n"
            "20,Rent\n"
            "30,Rent,2025-01-03\n"
        )

        result = importer.import_text(text)

        diagnostics = result.diagnostics
        assert diagnostics.success_count + diagnostics.failure_count == 4
        assert len(result.records) == diagnostics.success_count == 2

    def test_bad_date_never_skips_a_row(self, importer):
        text = (
            "amount,category,date\n"
            "1,Food,unknown\n"
            "2,Food,unknown\n"
            "3,Food,sometime\n"
        )

        result = importer.import_text(text)

        assert len(result.records) == 3
        assert all(r.date == datetime(2026, 10, 1) for r in result.records)
        assert result.diagnostics.guessed_date_count == 3
        assert result.diagnostics.unparsed_dates == ["unknown", "sometime"]

    def test_unparsed_date_samples_are_capped(self):
        importer = TransactionImporter(settings=ImportSettings(MAX_DATE_SAMPLES=1), today=TODAY)
        text = "amount,category,date\n1,Food,unknown\n2,Food,sometime\n"

        result = importer.import_text(text)

        assert result.diagnostics.unparsed_dates == ["unknown"]
        assert result.diagnostics.guessed_date_count == 2

    def test_quoted_amount_with_grouping_comma(self, importer):
        result = importer.import_text('amount,category,date\n"$1,234.50",Rent,2025-01-05\n')

        assert result.records[0].amount == Decimal("1234.50")
        assert result.records[0].icon == "🏠"

    def test_optional_columns(self, importer):
        text = (
            "Amount,Category,Date,Type,Icon,Frequency\n"
            "-20,Salary,2025-01-01,Deposit,house,Monthly\n"
            "15,Lunch,2025-01-02,,,\n"
        )

        result = importer.import_text(text)

        salary, lunch = result.records
        assert salary.type == TransactionType.INCOME
        assert salary.icon == "🏠"
        assert salary.recurrence == RecurrenceType.MONTHLY
        # A mapped but empty type cell does not fall back to the amount sign
        assert lunch.type == TransactionType.EXPENSE
        assert lunch.icon == "💵"
        assert lunch.recurrence == RecurrenceType.ONE_TIME
        assert lunch.notes is None

    def test_byte_order_mark_is_ignored(self, importer):
        result = importer.import_text("\ufeffamount,category,date\n1,Food,2025-01-01\n")

        assert result.ok
        assert len(result.records) == 1

    def test_day_first_setting(self):
        importer = TransactionImporter(settings=ImportSettings(DAY_FIRST=True), today=TODAY)

        result = importer.import_text("amount,category,date\n1,Food,03/04/2025\n")

        assert result.records[0].date == datetime(2025, 4, 3)

    def test_semicolon_delimiter(self):
        importer = TransactionImporter(settings=ImportSettings(DELIMITER=";"), today=TODAY)

        result = importer.import_text("amount;category;date\n1,50;Food;2025-01-01\n")

        assert result.records[0].amount == Decimal("150")


class TestEntryPoints:
    TEXT = "amount,category,date,notes\n45.67,Groceries,2025-02-28,Weekly shopping\n"

    def test_import_is_repeatable(self, importer):
        first = importer.import_text(self.TEXT)
        second = importer.import_text(self.TEXT)

        assert first.records == second.records
        assert first.diagnostics == second.diagnostics

    def test_import_lines_streams_file_objects(self, importer):
        result = importer.import_lines(io.StringIO(self.TEXT))

        assert result.records == importer.import_text(self.TEXT).records

    def test_import_lines_empty(self, importer):
        assert importer.import_lines([]).status == ImportStatus.EMPTY_FILE

    def test_import_bytes_cp1252(self, importer):
        data = "amount,category,date,notes\n5,Café,2025-01-01,Crème\n".encode("cp1252")

        result = importer.import_bytes(data)

        assert result.records[0].category == "Café"
        assert result.records[0].notes == "Crème"

    def test_import_path(self, importer, tmp_path):
        path = tmp_path / "export.csv"
        path.write_text(self.TEXT, encoding="utf-8")

        result = importer.import_path(path)

        assert len(result.records) == 1

    def test_import_transactions_helper(self):
        result = import_transactions(self.TEXT, today=TODAY)

        assert result.ok
        assert result.message == "Imported 1, skipped 0, 0 dates guessed"

    def test_progress_callback(self):
        seen = []
        importer = TransactionImporter(today=TODAY, progress_callback=seen.append)
        rows = "".join(f"{i},Food,2025-01-{i:02d}\n" for i in range(1, 11))

        importer.import_text("amount,category,date\n" + rows)

        assert seen == [10, 20, 30, 40, 50, 60, 70, 80, 90, 100]

    def test_records_to_dataframe(self, importer):
        df = importer.import_text(self.TEXT).records_to_dataframe()

        assert len(df) == 1
        assert df["amount"].iloc[0] == pytest.approx(45.67)
        assert df["date"].iloc[0] == pd.Timestamp("2025-02-28")

    def test_to_dict(self, importer):
        body = importer.import_text(self.TEXT).to_dict()

        assert body["status"] == "success"
        assert body["transactions"][0]["date"] == "2025-02-28T00:00:00"
        assert body["transactions"][0]["type"] == "expense"
        assert body["diagnostics"]["success_count"] == 1


class TestPreview:
    def test_preview_suggests_mapping(self, importer):
        text = "Date,Description,Amount\n2025-01-01,Coffee,3.50\n2025-01-02,Tea,2.00\n"

        preview = importer.preview(text, limit=1)

        assert preview.headers == ["Date", "Description", "Amount"]
        assert preview.suggested_mapping == {"date": 0, "notes": 1, "amount": 2}
        assert preview.missing_fields == ["category"]
        assert preview.rows == [["2025-01-01", "Coffee", "3.50"]]

    def test_preview_empty(self, importer):
        preview = importer.preview("")

        assert preview.headers == []
        assert preview.rows == []
