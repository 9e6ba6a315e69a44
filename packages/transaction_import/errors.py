"""
Import error taxonomy.

File-level errors stop an import before any row is processed. RowRejected is
raised by the value normalizers and never leaves the orchestrator.
"""

from typing import Iterable, List, Optional


class TransactionImportError(Exception):
    """Base class for file-level import failures."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


class EmptyFileError(TransactionImportError):
    """Input contained no header row."""

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail or "The CSV file appears to be empty.")


class MissingColumnsError(TransactionImportError):
    """Required fields could not be mapped to any column."""

    def __init__(self, fields: Iterable[str]):
        self.fields: List[str] = list(fields)
        super().__init__(f"Missing required columns: {', '.join(self.fields)}")


class RowRejected(ValueError):
    """A single data row cannot become a record."""

    def __init__(self, reason: str, value: str = ""):
        self.reason = reason
        self.value = value
        super().__init__(f"{reason}: {value!r}")


SHORT_ROW = "short_row"
INVALID_AMOUNT = "invalid_amount"
EMPTY_CATEGORY = "empty_category"
UNEXPECTED_ERROR = "unexpected_error"
