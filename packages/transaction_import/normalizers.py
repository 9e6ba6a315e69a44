"""
Value normalizers for amount, category, notes, type and recurrence.

Amount and category are the only fields that can reject a row. Everything
else falls back to a documented default.
"""

import math
import re
from decimal import Decimal, InvalidOperation
from typing import Optional

from .errors import EMPTY_CATEGORY, INVALID_AMOUNT, RowRejected
from .models import RecurrenceType, TransactionType

_AMOUNT_NOISE = re.compile(r"[^0-9.,+\-]")
_ACCOUNTING_NEGATIVE = re.compile(r"\(.*\)")

INCOME_KEYWORDS = ("income", "deposit", "credit")
INVESTMENT_KEYWORDS = ("invest",)
SAVINGS_KEYWORDS = ("save", "saving")


def normalize_amount(raw: Optional[str]) -> Decimal:
    """
    Parse a monetary amount.

    Currency symbols, letters and whitespace are stripped, accounting style
    parentheses force a negative sign and grouping commas are removed.

    Raises:
        RowRejected: if nothing numeric remains or the value overflows a float.
    """
    text = "" if raw is None else str(raw)
    cleaned = _AMOUNT_NOISE.sub("", text)
    cleaned = cleaned.replace(",", "")

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise RowRejected(INVALID_AMOUNT, text)

    # Amounts must stay finite once converted to float.
    if not amount.is_finite() or not math.isfinite(float(amount)):
        raise RowRejected(INVALID_AMOUNT, text)

    # (50.00) is accounting notation for -50.00
    if _ACCOUNTING_NEGATIVE.search(text):
        amount = -abs(amount)

    return amount


def normalize_category(raw: Optional[str]) -> str:
    category = "" if raw is None else str(raw).strip()
    if not category:
        raise RowRejected(EMPTY_CATEGORY, "" if raw is None else str(raw))
    return category


def normalize_notes(raw: Optional[str]) -> Optional[str]:
    if raw is None:
        return None
    notes = str(raw).strip()
    return notes or None


def normalize_type(
    raw: Optional[str],
    amount: Decimal,
    column_mapped: bool,
    signed_amounts: bool = True,
) -> TransactionType:
    """
    Resolve the transaction type.

    With a mapped type column the cell text decides and anything unrecognised
    is an expense. Without one, positive amounts are treated as income unless
    the export stores every amount unsigned (``signed_amounts=False``).
    """
    if not column_mapped:
        if signed_amounts and amount > 0:
            return TransactionType.INCOME
        return TransactionType.EXPENSE

    text = (raw or "").strip().lower()
    if any(keyword in text for keyword in INCOME_KEYWORDS):
        return TransactionType.INCOME
    if any(keyword in text for keyword in INVESTMENT_KEYWORDS):
        return TransactionType.INVESTMENT
    if any(keyword in text for keyword in SAVINGS_KEYWORDS):
        return TransactionType.SAVINGS
    return TransactionType.EXPENSE


def normalize_recurrence(raw: Optional[str]) -> RecurrenceType:
    text = (raw or "").strip().lower()
    if not text:
        return RecurrenceType.ONE_TIME

    if "daily" in text:
        return RecurrenceType.DAILY
    if ("week" in text and "bi" in text) or "fortnight" in text:
        return RecurrenceType.BI_WEEKLY
    if "week" in text:
        return RecurrenceType.WEEKLY
    if "month" in text:
        return RecurrenceType.MONTHLY
    if "quarter" in text:
        return RecurrenceType.QUARTERLY
    if "year" in text or "annual" in text:
        return RecurrenceType.ANNUALLY
    return RecurrenceType.ONE_TIME
