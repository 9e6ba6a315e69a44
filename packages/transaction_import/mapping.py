"""Mapping resolver: merges the detected mapping with a caller override."""

from typing import Dict, Iterable, List, Mapping, Optional

from .models import ALL_FIELDS, REQUIRED_FIELDS, FieldMapping

Override = Mapping[str, Optional[int]]

_NO_COLUMN = {"", "none", "null", "-"}


class ColumnMapping:
    """
    Resolved field → column lookup for one import.

    Args:
        detected: Mapping proposed by the header classifier.
        override: Per-field replacement. A key with value None explicitly
                  unmaps that field; absent keys keep the detected column.
        column_count: Width of the header row. When given, indexes past the
                      last column are treated as unmapped.
    """

    def __init__(
        self,
        detected: FieldMapping,
        override: Optional[Override] = None,
        column_count: Optional[int] = None,
    ):
        override = dict(override or {})
        unknown = sorted(set(override) - set(ALL_FIELDS))
        if unknown:
            raise ValueError(f"Unknown field keys in mapping override: {unknown}")

        self.column_count = column_count
        self._columns: Dict[str, int] = {}

        for field in ALL_FIELDS:
            index = override[field] if field in override else detected.get(field)
            if self._is_valid_index(index):
                self._columns[field] = int(index)

    def _is_valid_index(self, index) -> bool:
        if not isinstance(index, int) or isinstance(index, bool):
            return False
        if index < 0:
            return False
        if self.column_count is not None and index >= self.column_count:
            return False
        return True

    def column_for(self, field: str) -> Optional[int]:
        return self._columns.get(field)

    def is_mapped(self, field: str) -> bool:
        return field in self._columns

    def missing_fields(self) -> List[str]:
        return [field for field in REQUIRED_FIELDS if field not in self._columns]

    def required_fields_satisfied(self) -> bool:
        return not self.missing_fields()

    def max_required_index(self) -> int:
        """Highest column a data row must reach. -1 when required fields are missing."""
        indexes = [self._columns[f] for f in REQUIRED_FIELDS if f in self._columns]
        if len(indexes) < len(REQUIRED_FIELDS):
            return -1
        return max(indexes)

    def as_dict(self) -> FieldMapping:
        return dict(self._columns)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ColumnMapping):
            return NotImplemented
        return self._columns == other._columns

    def __repr__(self) -> str:
        return f"ColumnMapping({self._columns!r})"


def parse_mapping_spec(entries: Iterable[str]) -> Dict[str, Optional[int]]:
    """
    Parse ``field=index`` strings into an override.

    ``notes=none`` (or an empty value) explicitly unmaps a field.
    """
    override: Dict[str, Optional[int]] = {}
    for entry in entries:
        if "=" not in entry:
            raise ValueError(f"Expected field=index, got {entry!r}")
        field, raw_index = (part.strip() for part in entry.split("=", 1))
        field = field.lower()
        if field not in ALL_FIELDS:
            raise ValueError(f"Unknown field {field!r}. Expected one of {list(ALL_FIELDS)}")
        if raw_index.lower() in _NO_COLUMN:
            override[field] = None
            continue
        try:
            override[field] = int(raw_index)
        except ValueError:
            raise ValueError(f"Column index for {field!r} must be an integer, got {raw_index!r}")
    return override
