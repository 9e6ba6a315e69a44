from datetime import date

from packages.transaction_import.exporter import EXPORT_COLUMNS, export_csv, write_csv
from packages.transaction_import.importer import TransactionImporter

TODAY = date(2026, 10, 18)

SOURCE = (
    "Date,Description,Category,Amount,Type,Frequency\n"
    "02/28/2025,Store purchase,Groceries,45.67,Expense,\n"
    '2025-03-01,,"Food, Dining",-12.00,Expense,Weekly\n'
    "2025-03-15,Paycheck,Salary,2500,Deposit,Bi-Weekly\n"
    "2025-04-01,,Brokerage,100,Investment,Monthly\n"
    "2025-04-02,,Emergency fund,50,Savings,Annually\n"
)


def test_export_header_row():
    importer = TransactionImporter(today=TODAY)
    records = importer.import_text(SOURCE).records

    text = export_csv(records)

    assert text.splitlines()[0] == ",".join(EXPORT_COLUMNS)
    assert len(text.splitlines()) == len(records) + 1


def test_exported_file_imports_to_the_same_records():
    importer = TransactionImporter(today=TODAY)
    records = importer.import_text(SOURCE).records

    reimported = importer.import_text(export_csv(records))

    assert reimported.ok
    assert reimported.records == records


def test_write_csv(tmp_path):
    importer = TransactionImporter(today=TODAY)
    records = importer.import_text(SOURCE).records
    path = tmp_path / "out.csv"

    count = write_csv(records, path)

    assert count == 5
    assert importer.import_path(path).records == records
