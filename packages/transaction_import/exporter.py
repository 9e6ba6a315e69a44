"""
CSV export of imported records.

The column names are chosen so an exported file maps cleanly back through
the header classifier.
"""

from typing import Iterable

import pandas as pd

from .models import TransactionRecord

EXPORT_COLUMNS = ["Amount", "Category", "Date", "Notes", "Icon", "Type", "Recurrence"]


def records_to_export_frame(records: Iterable[TransactionRecord]) -> pd.DataFrame:
    rows = [
        {
            "Amount": f"{record.amount:.2f}",
            "Category": record.category,
            "Date": record.date.strftime("%Y-%m-%d"),
            "Notes": record.notes or "",
            "Icon": record.icon,
            "Type": record.type.value,
            "Recurrence": record.recurrence.value,
        }
        for record in records
    ]
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def export_csv(records: Iterable[TransactionRecord]) -> str:
    """Render records as CSV text with a header row."""
    df = records_to_export_frame(records)
    return df.to_csv(index=False, lineterminator="\n")


def write_csv(records: Iterable[TransactionRecord], path) -> int:
    """Write records to ``path``. Returns the number of rows written."""
    df = records_to_export_frame(records)
    df.to_csv(path, index=False, lineterminator="\n", encoding="utf-8")
    return len(df)
