"""Import service: upload checks, mapping parsing and engine calls.

Everything here is synchronous; the router runs it in a worker thread.
"""

import json
from typing import Optional

from apps.api.core.errors import BadRequestError, PayloadTooLargeError, ValidationError
from packages.transaction_import.config import ImportSettings, get_settings as get_import_settings
from packages.transaction_import.importer import TransactionImporter
from packages.transaction_import.models import ALL_FIELDS, ImportPreview, ImportResult, ImportStatus
from packages.transaction_import.tokenizer import decode_bytes

ALLOWED_EXTENSIONS = (".csv", ".txt")


def validate_upload(filename: str, contents: bytes, max_bytes: int) -> None:
    """Reject unsupported file types and oversized uploads."""
    if not filename.lower().endswith(ALLOWED_EXTENSIONS):
        raise BadRequestError(
            f"Unsupported file type. Accepted: {', '.join(ALLOWED_EXTENSIONS)}"
        )
    if len(contents) > max_bytes:
        raise PayloadTooLargeError(f"File too large (max {max_bytes} bytes)")


def parse_mapping_field(raw: Optional[str]) -> Optional[dict[str, Optional[int]]]:
    """Parse the ``mapping`` form field: a JSON object of field -> index or null."""
    if raw is None or not raw.strip():
        return None

    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        raise BadRequestError("mapping must be a JSON object")
    if not isinstance(value, dict):
        raise BadRequestError("mapping must be a JSON object")

    override: dict[str, Optional[int]] = {}
    for field, index in value.items():
        if field not in ALL_FIELDS:
            raise BadRequestError(
                f"Unknown field {field!r} in mapping. Expected one of {list(ALL_FIELDS)}"
            )
        if index is not None and (not isinstance(index, int) or isinstance(index, bool)):
            raise BadRequestError(f"Column index for {field!r} must be an integer or null")
        override[field] = index
    return override


def _import_settings(day_first: Optional[bool]) -> ImportSettings:
    settings = get_import_settings()
    if day_first is not None:
        settings = settings.model_copy(update={"DAY_FIRST": day_first})
    return settings


def _decode(contents: bytes, settings: ImportSettings) -> str:
    try:
        return decode_bytes(contents, settings.ENCODINGS)
    except ValueError as e:
        raise BadRequestError(str(e))


def import_upload(
    contents: bytes,
    override: Optional[dict[str, Optional[int]]] = None,
    day_first: Optional[bool] = None,
) -> ImportResult:
    settings = _import_settings(day_first)
    importer = TransactionImporter(override=override, settings=settings)
    return importer.import_text(_decode(contents, settings))


def preview_upload(
    contents: bytes,
    limit: Optional[int] = None,
    override: Optional[dict[str, Optional[int]]] = None,
) -> ImportPreview:
    settings = _import_settings(None)
    importer = TransactionImporter(override=override, settings=settings)
    return importer.preview(_decode(contents, settings), limit=limit)


def result_to_response(result: ImportResult) -> dict:
    """
    Translate an ImportResult into a response body.

    File-level failures become problem details: an empty file is a bad
    request, unmapped required columns are unprocessable. A file whose rows
    all failed is still a 200 carrying ``no_valid_transactions``.
    """
    if result.status == ImportStatus.EMPTY_FILE:
        raise BadRequestError(result.message)
    if result.status == ImportStatus.MISSING_REQUIRED_COLUMNS:
        raise ValidationError(result.message, missing_fields=list(result.missing_fields))
    return result.to_dict()
