"""CLI wrapper for CSV backup and restore of the ledger."""

from __future__ import annotations

import argparse
from pathlib import Path

from app.config import get_settings
from app.core.logging import setup_logging
from portfolio_ledger.service import LedgerService
from portfolio_ledger.storage import SqlAlchemyBlobStore


def _service() -> LedgerService:
    settings = get_settings()
    setup_logging(settings.log_level)
    return LedgerService(
        SqlAlchemyBlobStore(settings.database_url),
        storage_key=settings.storage_key,
        export_prefix=settings.export_filename_prefix,
    )


def _export(args: argparse.Namespace) -> None:
    filename, text = _service().export_csv()
    target = Path(args.output) if args.output else Path(filename)
    if target.is_dir():
        target = target / filename
    target.write_text(text, encoding="utf-8")
    print(f"Wrote ledger export to {target}")


def _import(args: argparse.Namespace) -> None:
    source = Path(args.csv_file)
    if not source.exists():
        raise SystemExit(f"CSV file not found: {source}")
    result = _service().import_csv(source.read_text(encoding="utf-8-sig"))
    if not result.imported:
        raise SystemExit(f"Ledger unchanged: {result.reason}")
    print(
        f"Imported {result.masters} masters, {result.trades} trades, "
        f"{result.prices} prices and {result.alerts} alerts from {source}"
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Back up or restore the portfolio ledger as CSV")
    subparsers = parser.add_subparsers(dest="command", required=True)

    export_parser = subparsers.add_parser("export", help="Write the whole ledger to a CSV file")
    export_parser.add_argument("output", nargs="?", help="File or directory (defaults to a dated filename)")
    export_parser.set_defaults(func=_export)

    import_parser = subparsers.add_parser("import", help="Replace the whole ledger with a CSV file")
    import_parser.add_argument("csv_file")
    import_parser.set_defaults(func=_import)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
