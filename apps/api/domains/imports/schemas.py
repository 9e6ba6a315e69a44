"""Pydantic schemas for the import domain."""

from typing import Optional

from pydantic import BaseModel, Field


class TransactionOut(BaseModel):
    """A normalized transaction ready for the storage collaborator."""

    amount: float
    category: str
    type: str
    recurrence: str = "one-time"
    notes: Optional[str] = None
    icon: str
    date: str


class DiagnosticsOut(BaseModel):
    success_count: int
    failure_count: int
    guessed_date_count: int = 0
    unparsed_dates: list[str] = Field(default_factory=list)
    failure_reasons: dict[str, int] = Field(default_factory=dict)
    summary: str = ""


class ImportResponse(BaseModel):
    """Outcome of a CSV import. ``status`` is success or no_valid_transactions."""

    status: str
    message: str = ""
    missing_fields: list[str] = Field(default_factory=list)
    transactions: list[TransactionOut]
    diagnostics: DiagnosticsOut


class PreviewResponse(BaseModel):
    """Header row, suggested column mapping and sample rows."""

    headers: list[str]
    suggested_mapping: dict[str, int]
    missing_fields: list[str]
    rows: list[list[str]]
