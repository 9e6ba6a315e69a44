"""
Transaction importer - drives tokenization, column mapping and value
normalization over an export, one row at a time.

File-level problems (empty input, unmapped required columns) end the import
before any data row is read. Row-level problems skip the row and are counted.
Field-level problems fall back to defaults and never skip a row.
"""

from pathlib import Path
from datetime import date
from typing import Callable, Iterable, Iterator, List, Mapping, Optional, Sequence

import structlog

from .config import ImportSettings, get_settings
from .dates import DateNormalizer
from .errors import SHORT_ROW, UNEXPECTED_ERROR, RowRejected
from .header_classifier import classify_headers, is_native_layout
from .icons import resolve_icon
from .mapping import ColumnMapping
from .models import (
    AMOUNT,
    CATEGORY,
    DATE,
    ICON,
    NOTES,
    RECURRENCE,
    TYPE,
    ImportDiagnostics,
    ImportPreview,
    ImportResult,
    ImportStatus,
    TransactionRecord,
)
from .normalizers import (
    normalize_amount,
    normalize_category,
    normalize_notes,
    normalize_recurrence,
    normalize_type,
)
from .tokenizer import decode_bytes, iter_lines, iter_non_blank, split_row

logger = structlog.get_logger()

_BOM = "\ufeff"


class ProgressTracker:
    """Reports progress in 10% steps when the row total is known."""

    def __init__(self, total: int, callback: Optional[Callable[[int], None]] = None):
        self.total = total
        self.current = 0
        self.callback = callback
        self.last_percent = 0

    def update(self, increment: int = 1):
        self.current += increment
        if self.total <= 0:
            return
        percent = int((self.current / self.total) * 100)

        if percent != self.last_percent and percent % 10 == 0:
            self.last_percent = percent
            if self.callback:
                self.callback(percent)
            else:
                logger.debug("import_progress", percent=percent)

    def finish(self):
        if self.callback and self.last_percent != 100:
            self.callback(100)


class TransactionImporter:
    """
    Converts a loosely structured CSV export into TransactionRecords.

    The importer keeps no state between calls, so one instance can serve
    many imports.

    Args:
        override: Caller column choices per field key; None values unmap.
        settings: Import settings (defaults to environment-driven settings).
        today: Fixed date for the date fallback, mainly for tests.
        progress_callback: Called with a percentage as rows are processed.
    """

    def __init__(
        self,
        override: Optional[Mapping[str, Optional[int]]] = None,
        settings: Optional[ImportSettings] = None,
        today: Optional[date] = None,
        progress_callback: Optional[Callable[[int], None]] = None,
    ):
        self.override = dict(override) if override else None
        self.settings = settings or get_settings()
        self.dates = DateNormalizer(day_first=self.settings.DAY_FIRST, today=today)
        self.progress_callback = progress_callback

    # Entry points

    def import_text(self, text: Optional[str]) -> ImportResult:
        """Import a whole export held in memory."""
        if text is None or not text.strip():
            return self._empty_file_result()

        lines = list(iter_non_blank(iter_lines(text)))
        return self._run(iter(lines), total_rows=len(lines) - 1)

    def import_bytes(self, data: bytes) -> ImportResult:
        """Decode raw upload bytes, then import."""
        text = decode_bytes(data, self.settings.ENCODINGS)
        return self.import_text(text)

    def import_path(self, path) -> ImportResult:
        with open(Path(path), "rb") as f:
            return self.import_bytes(f.read())

    def import_lines(self, lines: Iterable[str]) -> ImportResult:
        """
        Import from any iterable of lines, e.g. an open text file.

        Rows are consumed one at a time, so memory stays bounded by the
        output records rather than the input size.
        """
        return self._run(iter_non_blank(lines), total_rows=None)

    def preview(self, text: Optional[str], limit: Optional[int] = None) -> ImportPreview:
        """Header, suggested mapping and the first few tokenized rows."""
        limit = self.settings.PREVIEW_ROWS if limit is None else limit
        lines = iter_non_blank(iter_lines(text or ""))

        header_line = next(lines, None)
        if header_line is None:
            return ImportPreview(headers=[], suggested_mapping={}, missing_fields=[], rows=[])

        headers = self._split_header(header_line)
        mapping = self.resolve_mapping(headers)
        rows: List[List[str]] = []
        for line in lines:
            if len(rows) >= limit:
                break
            rows.append(split_row(line, self.settings.DELIMITER))

        return ImportPreview(
            headers=headers,
            suggested_mapping=mapping.as_dict(),
            missing_fields=mapping.missing_fields(),
            rows=rows,
        )

    def resolve_mapping(self, headers: Sequence[str]) -> ColumnMapping:
        detected = classify_headers(headers)
        return ColumnMapping(detected, self.override, column_count=len(headers))

    # Pipeline

    def _split_header(self, line: str) -> List[str]:
        return [cell.strip() for cell in split_row(line.lstrip(_BOM), self.settings.DELIMITER)]

    def _empty_file_result(self) -> ImportResult:
        logger.info("import_empty_file")
        return ImportResult(
            status=ImportStatus.EMPTY_FILE,
            diagnostics=self._new_diagnostics(),
            message="The CSV file appears to be empty.",
        )

    def _new_diagnostics(self) -> ImportDiagnostics:
        return ImportDiagnostics(max_date_samples=self.settings.MAX_DATE_SAMPLES)

    def _run(self, lines: Iterator[str], total_rows: Optional[int]) -> ImportResult:
        header_line = next(lines, None)
        if header_line is None:
            return self._empty_file_result()

        diagnostics = self._new_diagnostics()
        headers = self._split_header(header_line)
        mapping = self.resolve_mapping(headers)

        missing = mapping.missing_fields()
        if missing:
            logger.warning("import_missing_columns", missing=missing, headers=headers)
            return ImportResult(
                status=ImportStatus.MISSING_REQUIRED_COLUMNS,
                diagnostics=diagnostics,
                missing_fields=tuple(missing),
                message=f"Missing required columns: {', '.join(missing)}",
            )

        logger.info("import_started", columns=len(headers), mapping=mapping.as_dict())

        progress = None
        if total_rows:
            progress = ProgressTracker(total_rows, self.progress_callback)

        signed_amounts = not is_native_layout(headers)
        records: List[TransactionRecord] = []
        data_rows = 0

        for row_number, line in enumerate(lines, start=1):
            data_rows += 1
            try:
                columns = split_row(line, self.settings.DELIMITER)
                record = self._build_record(columns, mapping, diagnostics, signed_amounts)
            except RowRejected as e:
                diagnostics.record_failure(e.reason)
                logger.debug("import_row_skipped", row=row_number, reason=e.reason)
            except Exception as e:
                diagnostics.record_failure(UNEXPECTED_ERROR)
                logger.warning("import_row_failed", row=row_number, error=str(e))
            else:
                records.append(record)
                diagnostics.record_success()

            if progress:
                progress.update()

        if progress:
            progress.finish()

        logger.info(
            "import_complete",
            succeeded=diagnostics.success_count,
            skipped=diagnostics.failure_count,
            guessed_dates=diagnostics.guessed_date_count,
        )

        if data_rows and not records:
            return ImportResult(
                status=ImportStatus.NO_VALID_TRANSACTIONS,
                diagnostics=diagnostics,
                message="No valid transactions found in the CSV file",
            )

        return ImportResult(
            status=ImportStatus.SUCCESS,
            records=tuple(records),
            diagnostics=diagnostics,
            message=diagnostics.summary(),
        )

    def _build_record(
        self,
        columns: List[str],
        mapping: ColumnMapping,
        diagnostics: ImportDiagnostics,
        signed_amounts: bool = True,
    ) -> TransactionRecord:
        if len(columns) <= mapping.max_required_index():
            raise RowRejected(SHORT_ROW, f"{len(columns)} columns")

        def cell(field: str) -> Optional[str]:
            index = mapping.column_for(field)
            if index is None or index >= len(columns):
                return None
            return columns[index]

        amount = normalize_amount(cell(AMOUNT))
        category = normalize_category(cell(CATEGORY))

        raw_date = (cell(DATE) or "").strip()
        parsed_date = self.dates.parse(raw_date)
        if not parsed_date.confident:
            diagnostics.record_guessed_date(raw_date)
            logger.debug(
                "import_date_guessed",
                raw=raw_date,
                guessed=parsed_date.value.date().isoformat(),
            )

        return TransactionRecord(
            amount=amount,
            category=category,
            type=normalize_type(
                cell(TYPE), amount, mapping.is_mapped(TYPE), signed_amounts
            ),
            date=parsed_date.value,
            recurrence=normalize_recurrence(cell(RECURRENCE)),
            notes=normalize_notes(cell(NOTES)),
            icon=resolve_icon(cell(ICON), category, default=self.settings.DEFAULT_ICON),
        )


def import_transactions(
    text: str,
    override: Optional[Mapping[str, Optional[int]]] = None,
    settings: Optional[ImportSettings] = None,
    today: Optional[date] = None,
) -> ImportResult:
    """
    Convenience function to import a CSV export held in memory.

    Args:
        text: Full export text, header row first.
        override: Optional column choices per field key.
        settings: Import settings override.
        today: Fixed date for the date fallback.

    Returns:
        Tagged ImportResult with records and diagnostics.
    """
    importer = TransactionImporter(override=override, settings=settings, today=today)
    return importer.import_text(text)
