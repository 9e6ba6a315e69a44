"""
Command line front end for the transaction importer.

    python -m packages.transaction_import.cli preview statement.csv
    python -m packages.transaction_import.cli import statement.csv --map amount=3 --map notes=none
"""

import argparse
import json
import sys

from .config import get_settings
from .exporter import write_csv
from .importer import TransactionImporter
from .logging_config import setup_cli_logging
from .mapping import parse_mapping_spec
from .models import ImportStatus
from .tokenizer import decode_bytes

EXIT_OK = 0
EXIT_FILE_ERROR = 1
EXIT_NO_VALID_TRANSACTIONS = 2


def _read_text(path: str, encodings) -> str:
    with open(path, "rb") as f:
        return decode_bytes(f.read(), encodings)


def _build_importer(args) -> TransactionImporter:
    settings = get_settings()
    if args.day_first:
        settings = settings.model_copy(update={"DAY_FIRST": True})
    override = parse_mapping_spec(args.map or [])
    return TransactionImporter(override=override or None, settings=settings)


def preview(args) -> int:
    importer = _build_importer(args)
    text = _read_text(args.file, importer.settings.ENCODINGS)
    result = importer.preview(text, limit=args.limit)

    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        return EXIT_OK

    print(f"Columns: {result.headers}")
    for field, index in result.suggested_mapping.items():
        print(f"   {field:<11} -> [{index}] {result.headers[index]}")
    if result.missing_fields:
        print(f"⚠️ Unmapped required fields: {', '.join(result.missing_fields)}")
    for row in result.rows:
        print(f"   {row}")
    return EXIT_OK


def run_import(args) -> int:
    importer = _build_importer(args)
    text = _read_text(args.file, importer.settings.ENCODINGS)
    result = importer.import_text(text)

    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    elif result.is_file_error:
        print(f"❌ {result.message}")
    else:
        diagnostics = result.diagnostics
        print(f"✅ {diagnostics.summary()}")
        if diagnostics.unparsed_dates:
            print(f"⚠️ Dates guessed from: {diagnostics.unparsed_dates}")
        if diagnostics.failure_reasons:
            print(f"⚠️ Skipped rows by reason: {diagnostics.failure_reasons}")

    if result.is_file_error:
        return EXIT_FILE_ERROR
    if result.status == ImportStatus.NO_VALID_TRANSACTIONS:
        return EXIT_NO_VALID_TRANSACTIONS

    if args.export:
        count = write_csv(result.records, args.export)
        if not args.json:
            print(f"📂 Wrote {count} transactions to {args.export}")
    return EXIT_OK


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("file", help="Path to CSV export")
    parser.add_argument(
        "--map",
        action="append",
        metavar="FIELD=INDEX",
        help="Override a column, e.g. amount=3 or notes=none (repeatable)",
    )
    parser.add_argument(
        "--day-first", action="store_true", help="Prefer dd/MM over MM/dd dates"
    )
    parser.add_argument("--json", action="store_true", help="Print JSON output")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Import transactions from CSV exports")
    parser.add_argument("--log-level", default="WARNING")
    subparsers = parser.add_subparsers(dest="command")

    # Preview
    preview_parser = subparsers.add_parser("preview")
    _add_common_arguments(preview_parser)
    preview_parser.add_argument("--limit", type=int, default=None)

    # Import
    import_parser = subparsers.add_parser("import")
    _add_common_arguments(import_parser)
    import_parser.add_argument("--export", default=None, help="Write records to CSV")

    args = parser.parse_args(argv)
    setup_cli_logging(args.log_level)

    try:
        if args.command == "preview":
            return preview(args)
        elif args.command == "import":
            return run_import(args)
    except (OSError, ValueError) as e:
        print(f"❌ {e}", file=sys.stderr)
        return EXIT_FILE_ERROR

    parser.print_help()
    return EXIT_FILE_ERROR


if __name__ == "__main__":
    sys.exit(main())
