from decimal import Decimal

import pytest

from packages.transaction_import.errors import EMPTY_CATEGORY, INVALID_AMOUNT, RowRejected
from packages.transaction_import.models import RecurrenceType, TransactionType
from packages.transaction_import.normalizers import (
    normalize_amount,
    normalize_category,
    normalize_notes,
    normalize_recurrence,
    normalize_type,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("45.67", Decimal("45.67")),
        ("-45.67", Decimal("-45.67")),
        ("$1,234.50", Decimal("1234.50")),
        ("(50.00)", Decimal("-50.00")),
        ("($1,234.56)", Decimal("-1234.56")),
        ("USD 1,000", Decimal("1000")),
        ("€ 12.30", Decimal("12.30")),
        ("+5", Decimal("5")),
        ("INR 299.00", Decimal("299.00")),
        (")50(", Decimal("50")),
    ],
)
def test_normalize_amount(raw, expected):
    assert normalize_amount(raw) == expected


@pytest.mark.parametrize("raw", ["12.5.3", "", "abc", None, "--", ".", "1" + "0" * 400])
def test_normalize_amount_rejects_unparseable(raw):
    with pytest.raises(RowRejected) as exc_info:
        normalize_amount(raw)
    assert exc_info.value.reason == INVALID_AMOUNT


def test_normalize_category():
    assert normalize_category("  Food ") == "Food"

    with pytest.raises(RowRejected) as exc_info:
        normalize_category("   ")
    assert exc_info.value.reason == EMPTY_CATEGORY

    with pytest.raises(RowRejected):
        normalize_category(None)


def test_normalize_notes():
    assert normalize_notes("  Weekly shopping ") == "Weekly shopping"
    assert normalize_notes("   ") is None
    assert normalize_notes(None) is None


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Deposit", TransactionType.INCOME),
        ("INCOME", TransactionType.INCOME),
        ("credit", TransactionType.INCOME),
        ("Investment", TransactionType.INVESTMENT),
        ("Savings", TransactionType.SAVINGS),
        ("save", TransactionType.SAVINGS),
        ("Withdrawal", TransactionType.EXPENSE),
        ("", TransactionType.EXPENSE),
        (None, TransactionType.EXPENSE),
    ],
)
def test_normalize_type_from_mapped_column(raw, expected):
    """A mapped type column decides on its own, the amount sign is ignored."""
    assert normalize_type(raw, Decimal("10"), column_mapped=True) == expected


def test_normalize_type_from_amount_sign():
    assert normalize_type(None, Decimal("45.67"), column_mapped=False) == TransactionType.INCOME
    assert normalize_type(None, Decimal("-3"), column_mapped=False) == TransactionType.EXPENSE
    assert normalize_type(None, Decimal("0"), column_mapped=False) == TransactionType.EXPENSE


def test_normalize_type_unsigned_amounts_default_to_expense():
    result = normalize_type(None, Decimal("45.67"), column_mapped=False, signed_amounts=False)
    assert result == TransactionType.EXPENSE


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Daily", RecurrenceType.DAILY),
        ("Bi-Weekly", RecurrenceType.BI_WEEKLY),
        ("biweekly", RecurrenceType.BI_WEEKLY),
        ("Fortnightly", RecurrenceType.BI_WEEKLY),
        ("Weekly", RecurrenceType.WEEKLY),
        ("Monthly", RecurrenceType.MONTHLY),
        ("Quarterly", RecurrenceType.QUARTERLY),
        ("Annually", RecurrenceType.ANNUALLY),
        ("every year", RecurrenceType.ANNUALLY),
        ("one-time", RecurrenceType.ONE_TIME),
        ("whenever", RecurrenceType.ONE_TIME),
        ("", RecurrenceType.ONE_TIME),
        (None, RecurrenceType.ONE_TIME),
    ],
)
def test_normalize_recurrence(raw, expected):
    assert normalize_recurrence(raw) == expected
