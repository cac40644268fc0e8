"""FossilVault spreadsheet import tool.

Usage:
    fossilvault-import inspect FILE [--map FIELD=COLUMN[|COLUMN...]]... [--verbose]
    fossilvault-import run FILE --owner OWNER_ID [--map ...] [--skip-row N]... [--verbose]

Examples:
    fossilvault-import inspect collection.csv
    fossilvault-import run collection.xlsx --owner alice --map species="Taxon|Name" --skip-row 3
"""

import argparse
import asyncio
import logging
import sys

from fossilvault.config import settings
from fossilvault.database import close_db, init_db
from fossilvault.models.fields import TargetField
from fossilvault.schemas.import_schemas import (
    ImportProgress,
    ImportSummary,
    MappingConfiguration,
    SpecimenDraft,
)
from fossilvault.services.import_service import (
    BeanieSpecimenStore,
    SourceReadError,
    apply_overrides,
    build_drafts,
    generate_mapping,
    parse_file,
    run_import,
)


def parse_map_options(items: list[str] | None) -> dict[TargetField, list[str]]:
    """Turn ``FIELD=COL|COL`` arguments into mapping overrides.

    FIELD is a target field key such as ``species`` or ``size_unit``.
    An empty column list (``FIELD=``) unmaps the field.

    Raises:
        ValueError: If an item is malformed or names an unknown field.
    """
    overrides: dict[TargetField, list[str]] = {}
    for item in items or []:
        key, sep, columns = item.partition("=")
        if not sep:
            raise ValueError(f"Invalid mapping '{item}', expected FIELD=COLUMN")
        try:
            field = TargetField(key.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown field '{key.strip()}'") from None
        overrides[field] = [c.strip() for c in columns.split("|") if c.strip()]
    return overrides


def load_configuration(path: str, map_items: list[str] | None) -> MappingConfiguration:
    """Parse a spreadsheet and build its mapping with any overrides applied."""
    result = parse_file(path, settings.max_rows)
    config = generate_mapping(result)
    return apply_overrides(config, parse_map_options(map_items))


def print_mapping(config: MappingConfiguration) -> None:
    """Print the mapped fields, unmapped required fields and shared columns."""
    tabular = config.tabular
    print(f"File: {tabular.source_name} ({tabular.row_count} rows, {tabular.delimiter_name})")
    print()
    print(f"{'Field':<28} {'Confidence':<11} {'Columns'}")
    print("-" * 70)
    mapped = [m for m in config.mappings if m.is_mapped]
    for mapping in mapped:
        print(
            f"{mapping.target_field.display_name:<28} "
            f"{mapping.confidence_level.value:<11} "
            f"{', '.join(mapping.source_columns)}"
        )

    unmapped = set(tabular.headers)
    for mapping in mapped:
        unmapped.difference_update(mapping.source_columns)
    if unmapped:
        print()
        print("Unmapped columns: " + ", ".join(h for h in tabular.headers if h in unmapped))

    missing = config.unmapped_required_fields()
    if missing:
        print()
        print("Missing required fields: " + ", ".join(f.display_name for f in missing))

    for column, fields in config.conflicting_columns().items():
        names = ", ".join(f.display_name for f in fields)
        print(f"Warning: column '{column}' is mapped to several fields: {names}")


def print_drafts(drafts: list[SpecimenDraft]) -> None:
    """Print per-row problems and totals."""
    print()
    for draft in drafts:
        for error in draft.blocking_errors:
            print(f"Row {draft.row_index + 1} [{draft.display_name}] ERROR {error.field.display_name}: {error.message}")
        for warning in draft.warnings:
            fix = f" -> {warning.corrected_value}" if warning.corrected_value else ""
            print(
                f"Row {draft.row_index + 1} [{draft.display_name}] warning "
                f"{warning.field.display_name}: {warning.message}{fix}"
            )
    importable = sum(1 for d in drafts if d.is_importable)
    print()
    print(f"{importable} of {len(drafts)} rows can be imported.")


def print_progress(progress: ImportProgress) -> None:
    if progress.cancelled:
        print("Import cancelled.")
        return
    if progress.current_specimen is None:
        return
    status = f"failed: {progress.last_error}" if progress.last_error else "ok"
    print(
        f"[{progress.completed_count}/{progress.total_specimens}] "
        f"{progress.current_specimen} {status}"
    )


def print_summary(summary: ImportSummary) -> None:
    print()
    print(f"Import {summary.import_id} of {summary.source_name}")
    print(f"  Imported: {summary.success_count}")
    print(f"  Failed:   {summary.failed_count}")
    print(f"  Skipped:  {summary.skipped_count}")
    print(f"  Warnings: {len(summary.warnings)}")
    print(f"  Duration: {summary.duration_ms} ms")


async def import_file(
    path: str,
    owner_id: str,
    map_items: list[str] | None = None,
    skip_rows: list[int] | None = None,
    skip_db_init: bool = False,
) -> ImportSummary:
    """Import a spreadsheet into MongoDB for one owner.

    Args:
        path: Spreadsheet path.
        owner_id: Owner of the created records.
        map_items: ``FIELD=COL|COL`` overrides.
        skip_rows: 1-based row numbers to leave out.
        skip_db_init: Assume Beanie is already initialized (for testing).

    Returns:
        The import summary.
    """
    config = load_configuration(path, map_items)
    if not config.has_all_required_fields_mapped():
        missing = ", ".join(f.display_name for f in config.unmapped_required_fields())
        print(f"Error: required fields are not mapped: {missing}")
        sys.exit(1)

    skipped = {n - 1 for n in skip_rows or []}
    drafts = [
        d.with_selected(False) if d.row_index in skipped else d
        for d in build_drafts(config, settings.default_currency)
    ]

    if not skip_db_init:
        await init_db()
    try:
        summary = await run_import(
            drafts,
            owner_id,
            BeanieSpecimenStore(owner_id),
            on_progress=print_progress,
            source_name=config.tabular.source_name,
            batch_size=settings.batch_size,
            default_currency=settings.default_currency,
        )
    finally:
        if not skip_db_init:
            await close_db()
    return summary


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Import fossil collection spreadsheets into FossilVault",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Accept --verbose after the command too; SUPPRESS keeps a leading flag from being reset
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--verbose", "-v", action="store_true", default=argparse.SUPPRESS, help="Enable debug logging"
    )

    map_help = "Override a mapping, e.g. species=Taxon or notes=Remarks|Comments (repeatable)"

    # Inspect command
    inspect_parser = subparsers.add_parser("inspect", parents=[common], help="Show the suggested mapping and row problems")
    inspect_parser.add_argument("file", help="CSV or XLSX file")
    inspect_parser.add_argument("--map", "-m", action="append", dest="map_items", help=map_help)

    # Run command
    run_parser = subparsers.add_parser("run", parents=[common], help="Import the spreadsheet")
    run_parser.add_argument("file", help="CSV or XLSX file")
    run_parser.add_argument("--owner", "-o", required=True, help="Owner ID for the imported records")
    run_parser.add_argument("--map", "-m", action="append", dest="map_items", help=map_help)
    run_parser.add_argument(
        "--skip-row", action="append", type=int, dest="skip_rows", help="1-based row number to skip (repeatable)"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose or settings.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 1

    try:
        if args.command == "inspect":
            config = load_configuration(args.file, args.map_items)
            print_mapping(config)
            print_drafts(build_drafts(config, settings.default_currency))

        elif args.command == "run":
            summary = asyncio.run(import_file(args.file, args.owner, args.map_items, args.skip_rows))
            print_summary(summary)
            if summary.failed_count:
                return 2

    except (SourceReadError, ValueError) as e:
        print(f"Error: {e}")
        return 1
    except KeyboardInterrupt:
        print("\nAborted.")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
