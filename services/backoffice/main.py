"""
Main CLI module for the course back-office core.

Exposes RUT validation, table search and enrollment checks to batch jobs
and shell scripts, with the same semantics the dashboard uses.
Example: python -m services.backoffice rut validate 12.345.678-5
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from . import __version__
from .enrollment import calculate_participant_status, rows_from_sheet, validate_enrollment_rows
from .helpers.rut import format_rut, validate_rut
from .log_config import configure_logging, get_logger
from .search import (
    FilterSpec,
    RangeValue,
    SearchConfig,
    SelectFilter,
    SortSpec,
    make_filter,
    paginate,
    query,
)
from .search.filters import FilterType, count_active_filters, index_filter_specs
from .settings import settings

logger = get_logger(__name__)

TRUE_VALUES = {"true", "1", "si", "sí", "yes"}
FALSE_VALUES = {"false", "0", "no"}


def load_json(path: str) -> Any:
    """
    Read a JSON document from disk.

    Raises:
        ValueError: If the file cannot be read or is not valid JSON
    """
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise ValueError(f"Cannot read '{path}': {e.strerror or e}") from e
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in '{path}': {e}") from e


def dump_json(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2, default=str))


def parse_filter_specs(values: Sequence[str]) -> List[FilterSpec]:
    """
    Parse ``key:type`` declarations given with --filter-spec.

    Examples:
        >>> parse_filter_specs(["nota:range"])
        [RangeFilter(key='nota', label='', min=None, max=None)]
    """
    specs = []
    for value in values:
        key, sep, filter_type = value.partition(":")
        if not sep or not key.strip():
            raise ValueError(f"Invalid filter spec '{value}'. Expected key:type")
        specs.append(make_filter(key.strip(), filter_type.strip().lower()))
    return specs


def parse_filter_value(spec: FilterSpec, raw: str) -> Any:
    """
    Convert a command-line filter value to what the filter type expects.

    Range filters take ``min..max``; boolean filters take true/false;
    select filters take a comma-separated list for multiple choices.
    """
    if spec.type == FilterType.RANGE:
        low, sep, high = raw.partition("..")
        if not sep:
            raise ValueError(f"Invalid range '{raw}' for '{spec.key}'. Expected min..max")
        try:
            return RangeValue(min=float(low), max=float(high))
        except ValueError as e:
            raise ValueError(f"Invalid range '{raw}' for '{spec.key}'. Expected numbers") from e

    if spec.type == FilterType.BOOLEAN:
        lowered = raw.strip().lower()
        if lowered in TRUE_VALUES:
            return True
        if lowered in FALSE_VALUES:
            return False
        raise ValueError(f"Invalid boolean '{raw}' for '{spec.key}'")

    if spec.type == FilterType.SELECT and "," in raw:
        return [part.strip() for part in raw.split(",")]

    return raw


def parse_filters(values: Sequence[str], specs: List[FilterSpec]) -> Dict[str, Any]:
    """
    Parse ``key=value`` pairs given with --filter.

    Keys without a --filter-spec declaration are treated as select filters
    and a declaration is appended to ``specs``.
    """
    indexed = index_filter_specs(specs)
    filters: Dict[str, Any] = {}

    for value in values:
        key, sep, raw = value.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValueError(f"Invalid filter '{value}'. Expected key=value")

        spec = indexed.get(key)
        if spec is None:
            spec = SelectFilter(key=key)
            specs.append(spec)
            indexed[key] = spec

        filters[key] = parse_filter_value(spec, raw)

    return filters


def run_rut(args: argparse.Namespace) -> int:
    if args.action == "format":
        print(format_rut(args.value))
        return 0

    validation = validate_rut(args.value)
    dump_json({
        "rut": format_rut(args.value),
        "valid": validation.valid,
        "message": validation.message,
    })
    return 0 if validation.valid else 1


def run_search(args: argparse.Namespace) -> int:
    records = load_json(args.data)
    if not isinstance(records, list):
        raise ValueError(f"'{args.data}' must contain a JSON array of records")

    specs = parse_filter_specs(args.filter_spec)
    filters = parse_filters(args.filter, specs)
    sort_spec = SortSpec.parse(args.sort) if args.sort else None

    config = SearchConfig(
        search_fields=tuple(args.field),
        case_sensitive=args.case_sensitive,
        exact_match=args.exact,
    )

    result = query(records, args.term, filters, sort_spec, config, specs)
    per_page = args.per_page or settings().default_items_per_page
    page = paginate(len(result), per_page, args.page)

    logger.info(
        "Search completed",
        data_file=args.data,
        total_items=len(records),
        filtered_items=len(result),
        active_filters=count_active_filters(filters),
        page=page.current_page,
    )

    dump_json({
        "stats": {
            "total_items": len(records),
            "filtered_items": len(result),
            "active_filters": count_active_filters(filters),
        },
        "page": {
            "current_page": page.current_page,
            "total_pages": page.total_pages,
            "start_index": page.start_index,
            "end_index": page.end_index,
        },
        "items": page.slice(result),
    })
    return 0


def run_import_check(args: argparse.Namespace) -> int:
    rows = load_json(args.data)
    if not isinstance(rows, list):
        raise ValueError(f"'{args.data}' must contain a JSON array of rows")

    parsed = rows_from_sheet(rows, has_header=not args.no_header)
    result = validate_enrollment_rows(parsed, args.capacity, args.occupancy)

    dump_json({
        "ok": result.ok,
        "accepted": [vars(participant) for participant in result.valid],
        "errors": result.errors,
    })
    return 0 if result.ok else 1


def run_status(args: argparse.Namespace) -> int:
    config = settings()
    status = calculate_participant_status(
        args.asistencia,
        args.nota,
        min_attendance=config.min_attendance_pct,
        min_grade=config.min_passing_grade,
    )
    print(status.value)
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        prog="backoffice",
        description="Course Back-Office Core",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m services.backoffice rut validate 12.345.678-5
  python -m services.backoffice rut format 123456785
  python -m services.backoffice search --data participants.json --field nombre \\
      --term garcía --filter estado=activo --sort fechaRegistro:desc --per-page 15
  python -m services.backoffice import-check --data nomina.json --capacity 30
        """
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override log level from configuration"
    )

    parser.add_argument(
        "--log-format",
        choices=["json", "text"],
        help="Override log format from configuration"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Course Back-Office Core {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    rut = subparsers.add_parser("rut", help="Validate or format a RUT")
    rut.add_argument("action", choices=["validate", "format"])
    rut.add_argument("value", help="RUT in any format, e.g. 12.345.678-5")
    rut.set_defaults(handler=run_rut)

    search = subparsers.add_parser("search", help="Search, filter and sort a JSON record file")
    search.add_argument("--data", required=True, help="JSON file with an array of records")
    search.add_argument("--field", action="append", default=[], help="Field searched by --term (repeatable)")
    search.add_argument("--term", default="", help="Free-text search term")
    search.add_argument("--case-sensitive", action="store_true", help="Match the term case-sensitively")
    search.add_argument("--exact", action="store_true", help="Require the whole field to equal the term")
    search.add_argument("--filter-spec", action="append", default=[], help="Declare a filter as key:type (repeatable)")
    search.add_argument("--filter", action="append", default=[], help="Filter value as key=value (repeatable)")
    search.add_argument("--sort", help="Sort as key or key:asc|desc")
    search.add_argument("--page", type=int, default=1, help="Page to show (clamped into range)")
    search.add_argument("--per-page", type=int, help="Records per page")
    search.set_defaults(handler=run_search)

    import_check = subparsers.add_parser("import-check", help="Validate a bulk enrollment sheet")
    import_check.add_argument("--data", required=True, help="JSON file with the sheet rows")
    import_check.add_argument("--capacity", type=int, required=True, help="Seats in the session")
    import_check.add_argument("--occupancy", type=int, default=0, help="Seats already taken")
    import_check.add_argument("--no-header", action="store_true", help="First row is data, not a header")
    import_check.set_defaults(handler=run_import_check)

    status = subparsers.add_parser("status", help="Pass/fail status from attendance and grade")
    status.add_argument("--asistencia", type=float, required=True, help="Attendance percentage")
    status.add_argument("--nota", type=float, required=True, help="Final grade (1.0-7.0)")
    status.set_defaults(handler=run_status)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point for the CLI application.

    Returns:
        Exit code (0 for success, 1 for failure or invalid input)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.log_level or args.log_format:
        configure_logging(args.log_level, args.log_format)

    try:
        return args.handler(args)
    except ValueError as e:
        logger.error(
            "Command failed",
            command=args.command,
            error=str(e),
            error_type=type(e).__name__
        )
        return 1


def cli_main():
    """Synchronous entry point for setuptools console scripts."""
    return main()


if __name__ == "__main__":
    sys.exit(main())
