from itertools import permutations

from packages.transaction_import.header_classifier import (
    HeaderClassifier,
    classify_headers,
    is_native_layout,
    missing_required_fields,
)


def test_classify_bank_export_headers():
    mapping = classify_headers(["Date", "Description", "Category", "Amount"])
    assert mapping == {"date": 0, "notes": 1, "category": 2, "amount": 3}


def test_classify_native_headers():
    mapping = classify_headers(["amount", "category", "date", "notes", "icon"])
    assert mapping == {"amount": 0, "category": 1, "date": 2, "notes": 3, "icon": 4}


def test_transaction_type_is_not_a_type_column():
    mapping = classify_headers(["Amount", "Transaction Type", "Date", "Category"])
    assert "type" not in mapping
    assert mapping["category"] == 3


def test_field_for_header_keywords():
    assert HeaderClassifier.field_for_header("Total Value") == "amount"
    assert HeaderClassifier.field_for_header("Timestamp") == "date"
    assert HeaderClassifier.field_for_header("Direction") == "type"
    assert HeaderClassifier.field_for_header("Emoji") == "icon"
    assert HeaderClassifier.field_for_header("Frequency") == "recurrence"
    assert HeaderClassifier.field_for_header("Memo") == "notes"
    assert HeaderClassifier.field_for_header("Reference") is None
    assert HeaderClassifier.field_for_header("   ") is None


def test_priority_order_resolves_ambiguous_header():
    """A header matching several fields goes to the highest priority one."""
    assert HeaderClassifier.field_for_header("Amount Date") == "amount"
    assert HeaderClassifier.field_for_header("Category Notes") == "category"


def test_first_matching_column_wins():
    mapping = classify_headers(["Amount", "Price", "Category", "Date"])
    assert mapping["amount"] == 0
    assert 1 not in mapping.values()


def test_classification_follows_column_order():
    headers = ["Posted Date", "Amount (USD)", "Category", "Memo"]
    for order in permutations(range(len(headers))):
        shuffled = [headers[i] for i in order]
        mapping = classify_headers(shuffled)
        assert mapping["amount"] == shuffled.index("Amount (USD)")
        assert mapping["date"] == shuffled.index("Posted Date")
        assert mapping["category"] == shuffled.index("Category")
        assert mapping["notes"] == shuffled.index("Memo")


def test_missing_required_fields():
    assert missing_required_fields({"amount": 0}) == ["category", "date"]
    assert missing_required_fields({"amount": 0, "category": 1, "date": 2}) == []


def test_is_native_layout():
    assert is_native_layout(["amount", "category", "date", "notes"])
    assert is_native_layout([" Amount ", "Category", "Date", "Icon"])
    assert not is_native_layout(["Date", "Description", "Category", "Amount"])
    assert not is_native_layout([])
