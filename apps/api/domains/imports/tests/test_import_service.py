"""Tests for the import service helpers."""

import pytest

from apps.api.core.errors import BadRequestError, PayloadTooLargeError, ValidationError
from apps.api.domains.imports import service
from packages.transaction_import.models import ImportResult, ImportStatus


def test_validate_upload_accepts_csv_and_txt():
    service.validate_upload("export.CSV", b"a", max_bytes=10)
    service.validate_upload("export.txt", b"a", max_bytes=10)


def test_validate_upload_rejects_other_types():
    with pytest.raises(BadRequestError):
        service.validate_upload("export.pdf", b"a", max_bytes=10)


def test_validate_upload_rejects_large_files():
    with pytest.raises(PayloadTooLargeError):
        service.validate_upload("export.csv", b"x" * 11, max_bytes=10)


def test_parse_mapping_field():
    assert service.parse_mapping_field(None) is None
    assert service.parse_mapping_field("  ") is None
    assert service.parse_mapping_field('{"amount": 3, "notes": null}') == {
        "amount": 3,
        "notes": None,
    }


def test_parse_mapping_field_rejects_booleans():
    with pytest.raises(BadRequestError):
        service.parse_mapping_field('{"amount": true}')


def test_result_to_response_maps_file_errors():
    with pytest.raises(BadRequestError):
        service.result_to_response(
            ImportResult(status=ImportStatus.EMPTY_FILE, message="empty")
        )

    with pytest.raises(ValidationError) as exc_info:
        service.result_to_response(
            ImportResult(
                status=ImportStatus.MISSING_REQUIRED_COLUMNS,
                missing_fields=("date",),
                message="Missing required columns: date",
            )
        )
    assert exc_info.value.extensions == {"missing_fields": ["date"]}


def test_import_upload_decodes_cp1252():
    data = "amount,category,date\n5,Café,2025-01-01\n".encode("cp1252")

    result = service.import_upload(data)

    assert result.records[0].category == "Café"
