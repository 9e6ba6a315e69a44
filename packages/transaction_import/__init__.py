"""
Transaction Import Engine

Turns loosely structured CSV exports from banks and finance apps into
normalized transaction records with import diagnostics.
"""

__version__ = "0.1.0"

from .errors import EmptyFileError, MissingColumnsError, TransactionImportError
from .exporter import export_csv
from .header_classifier import (
    HeaderClassifier,
    classify_headers,
    is_native_layout,
    missing_required_fields,
)
from .importer import TransactionImporter, import_transactions
from .mapping import ColumnMapping, parse_mapping_spec
from .models import (
    ImportDiagnostics,
    ImportPreview,
    ImportResult,
    ImportStatus,
    RecurrenceType,
    TransactionRecord,
    TransactionType,
)
from .tokenizer import split_row

__all__ = [
    "TransactionImporter",
    "import_transactions",
    "HeaderClassifier",
    "classify_headers",
    "missing_required_fields",
    "is_native_layout",
    "export_csv",
    "ColumnMapping",
    "parse_mapping_spec",
    "split_row",
    "ImportDiagnostics",
    "ImportPreview",
    "ImportResult",
    "ImportStatus",
    "RecurrenceType",
    "TransactionRecord",
    "TransactionType",
    "TransactionImportError",
    "EmptyFileError",
    "MissingColumnsError",
]
