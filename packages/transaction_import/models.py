"""
Data model for the transaction import engine.

Records, diagnostics and the tagged import result handed to the storage and
presentation layers.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from .errors import EmptyFileError, MissingColumnsError

# Field keys, in classifier priority order
AMOUNT = "amount"
CATEGORY = "category"
DATE = "date"
NOTES = "notes"
TYPE = "type"
ICON = "icon"
RECURRENCE = "recurrence"

REQUIRED_FIELDS = (AMOUNT, CATEGORY, DATE)
OPTIONAL_FIELDS = (NOTES, TYPE, ICON, RECURRENCE)
ALL_FIELDS = REQUIRED_FIELDS + OPTIONAL_FIELDS

FieldMapping = Dict[str, int]

DEFAULT_ICON = "💵"


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"
    INVESTMENT = "investment"
    SAVINGS = "savings"


class RecurrenceType(str, Enum):
    ONE_TIME = "one-time"
    DAILY = "daily"
    WEEKLY = "weekly"
    BI_WEEKLY = "bi-weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUALLY = "annually"


@dataclass(frozen=True)
class TransactionRecord:
    """Normalized transaction produced from one data row."""

    amount: Decimal
    category: str
    type: TransactionType
    date: datetime
    recurrence: RecurrenceType = RecurrenceType.ONE_TIME
    notes: Optional[str] = None
    icon: str = DEFAULT_ICON

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "amount": float(self.amount),
            "category": self.category,
            "type": self.type.value,
            "recurrence": self.recurrence.value,
            "notes": self.notes,
            "icon": self.icon,
            "date": self.date.isoformat(),
        }


@dataclass(frozen=True)
class DateParseResult:
    """A parsed date plus whether it came from a precise strategy."""

    value: datetime
    confident: bool
    strategy: str


@dataclass
class ImportDiagnostics:
    """Row counts and unparsed date samples for one import call."""

    success_count: int = 0
    failure_count: int = 0
    guessed_date_count: int = 0
    unparsed_dates: List[str] = field(default_factory=list)
    failure_reasons: Dict[str, int] = field(default_factory=dict)
    max_date_samples: int = 10

    def record_success(self) -> None:
        self.success_count += 1

    def record_failure(self, reason: str) -> None:
        self.failure_count += 1
        self.failure_reasons[reason] = self.failure_reasons.get(reason, 0) + 1

    def record_guessed_date(self, raw: str) -> None:
        self.guessed_date_count += 1
        if raw in self.unparsed_dates:
            return
        if len(self.unparsed_dates) < self.max_date_samples:
            self.unparsed_dates.append(raw)

    def summary(self) -> str:
        """Human readable one-liner, e.g. 'Imported 10, skipped 2, 1 dates guessed'."""
        return (
            f"Imported {self.success_count}, skipped {self.failure_count}, "
            f"{self.guessed_date_count} dates guessed"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success_count": self.success_count,
            "failure_count": self.failure_count,
            "guessed_date_count": self.guessed_date_count,
            "unparsed_dates": list(self.unparsed_dates),
            "failure_reasons": dict(self.failure_reasons),
            "summary": self.summary(),
        }


class ImportStatus(str, Enum):
    SUCCESS = "success"
    EMPTY_FILE = "empty_file"
    MISSING_REQUIRED_COLUMNS = "missing_required_columns"
    NO_VALID_TRANSACTIONS = "no_valid_transactions"


@dataclass(frozen=True)
class ImportResult:
    """
    Tagged outcome of an import.

    ``records`` is only populated for SUCCESS. NO_VALID_TRANSACTIONS is a
    distinguished outcome rather than an error; the caller decides how to
    present it.
    """

    status: ImportStatus
    records: Tuple[TransactionRecord, ...] = ()
    diagnostics: ImportDiagnostics = field(default_factory=ImportDiagnostics)
    missing_fields: Tuple[str, ...] = ()
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status == ImportStatus.SUCCESS

    @property
    def is_file_error(self) -> bool:
        return self.status in (
            ImportStatus.EMPTY_FILE,
            ImportStatus.MISSING_REQUIRED_COLUMNS,
        )

    def raise_for_status(self) -> "ImportResult":
        """Raise the matching exception for file-level failures."""
        if self.status == ImportStatus.EMPTY_FILE:
            raise EmptyFileError(self.message or None)
        if self.status == ImportStatus.MISSING_REQUIRED_COLUMNS:
            raise MissingColumnsError(list(self.missing_fields))
        return self

    def records_to_dataframe(self) -> pd.DataFrame:
        """Records as a DataFrame with one column per record field."""
        columns = ["date", "amount", "category", "type", "recurrence", "notes", "icon"]
        rows = [record.to_dict() for record in self.records]
        df = pd.DataFrame(rows, columns=columns)
        if not df.empty:
            df["date"] = pd.to_datetime(df["date"], format="ISO8601")
        return df

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "message": self.message,
            "missing_fields": list(self.missing_fields),
            "transactions": [record.to_dict() for record in self.records],
            "diagnostics": self.diagnostics.to_dict(),
        }


@dataclass(frozen=True)
class ImportPreview:
    """Header row, suggested mapping and a few tokenized rows for review."""

    headers: List[str]
    suggested_mapping: FieldMapping
    missing_fields: List[str]
    rows: List[List[str]]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "headers": list(self.headers),
            "suggested_mapping": dict(self.suggested_mapping),
            "missing_fields": list(self.missing_fields),
            "rows": [list(row) for row in self.rows],
        }


__all__ = [
    "ALL_FIELDS",
    "REQUIRED_FIELDS",
    "OPTIONAL_FIELDS",
    "FieldMapping",
    "TransactionType",
    "RecurrenceType",
    "TransactionRecord",
    "DateParseResult",
    "ImportDiagnostics",
    "ImportStatus",
    "ImportResult",
    "ImportPreview",
]
