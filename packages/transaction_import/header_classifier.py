"""
Header classifier.

Guesses which column plays which role from the header row alone. The result is
a suggestion; callers may override any entry before importing.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from .models import (
    ALL_FIELDS,
    AMOUNT,
    CATEGORY,
    DATE,
    ICON,
    NOTES,
    RECURRENCE,
    REQUIRED_FIELDS,
    TYPE,
    FieldMapping,
)


class HeaderClassifier:
    """Keyword-based column role detection."""

    # Priority order matters: the first field whose keyword appears wins.
    FIELD_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
        (AMOUNT, ("amount", "price", "sum", "value")),
        (CATEGORY, ("category", "categ")),
        (DATE, ("date", "time")),
        (NOTES, ("note", "description", "memo", "details")),
        (TYPE, ("type", "direction")),
        (ICON, ("icon", "symbol", "emoji")),
        (RECURRENCE, ("recur", "repeat", "frequency", "schedule")),
    )

    # "Transaction Type" columns carry categories in some exports.
    EXCLUSIONS: Dict[str, Tuple[str, ...]] = {
        TYPE: ("transaction",),
    }

    @classmethod
    def field_for_header(cls, header: str) -> Optional[str]:
        """Return the field a single header cell suggests, if any."""
        header_lower = str(header).strip().lower()
        if not header_lower:
            return None

        for field, keywords in cls.FIELD_KEYWORDS:
            if not any(keyword in header_lower for keyword in keywords):
                continue
            excluded = cls.EXCLUSIONS.get(field, ())
            if any(word in header_lower for word in excluded):
                continue
            return field

        return None

    @classmethod
    def classify(cls, headers: Sequence[str]) -> FieldMapping:
        """Map field keys to column indexes, first column wins per field."""
        mapping: FieldMapping = {}
        for index, header in enumerate(headers):
            field = cls.field_for_header(header)
            if field is not None and field not in mapping:
                mapping[field] = index
        return mapping


def classify_headers(headers: Sequence[str]) -> FieldMapping:
    """Convenience wrapper around HeaderClassifier.classify."""
    return HeaderClassifier.classify(headers)


def missing_required_fields(mapping: FieldMapping) -> List[str]:
    """Required field keys that have no column in ``mapping``."""
    return [field for field in REQUIRED_FIELDS if mapping.get(field) is None]


def is_native_layout(headers: Sequence[str]) -> bool:
    """
    True when every header is exactly a field key, as in the app's own export.

    Native exports store expenses as positive amounts, so the amount sign
    says nothing about the transaction type.
    """
    cells = [str(header).strip().lower() for header in headers]
    return bool(cells) and all(cell in ALL_FIELDS for cell in cells)
