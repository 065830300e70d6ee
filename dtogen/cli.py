# File: dtogen/cli.py
"""
dtogen - Command-Line Interface
================================

Built on the standard-library ``argparse`` module.

Usage examples::

    # Write dtos/user.dto.ts and models/user.model.ts under ./src
    python -m dtogen --schema user.yaml --output ./src

    # Print both artifacts instead of writing them
    python -m dtogen -s user.json --stdout

    # Review only (no rendering)
    python -m dtogen -s user.yaml --review-only --fail-on-warnings

Exit codes:
    0 — success
    1 — review failure (only with --fail-on-warnings)
    2 — generation error
    3 — export error
    4 — input/argument error
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, NoReturn, Optional, Sequence

# ---------------------------------------------------------------------------
# Logger (configured in _setup_logging)
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("dtogen")


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_REVIEW_ERROR: int = 1
EXIT_GENERATION_ERROR: int = 2
EXIT_EXPORT_ERROR: int = 3
EXIT_INPUT_ERROR: int = 4


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbosity: int) -> None:
    """
    Configure the ``dtogen`` logger based on verbosity level.

    Args:
        verbosity: 0 = WARNING, 1 = INFO, 2+ = DEBUG.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler: logging.StreamHandler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    fmt: str = "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"
    datefmt: str = "%H:%M:%S"
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root_logger: logging.Logger = logging.getLogger("dtogen")
    root_logger.setLevel(level)

    # Remove existing handlers to prevent duplication
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.propagate = False


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    from dtogen import __version__

    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="dtogen",
        description=(
            "dtogen — TypeScript DTO and Mongoose schema generator.\n\n"
            "Turns an entity schema (JSON/YAML) into a type-definition "
            "module and a matching Mongoose model module."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  %(prog)s -s user.yaml -o ./src\n"
            "  %(prog)s -s user.json --stdout\n"
            "  %(prog)s -s user.yaml --review-only --fail-on-warnings\n"
        ),
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"dtogen v{__version__}",
    )

    # --- Required arguments ---
    parser.add_argument(
        "-s", "--schema",
        type=str,
        required=True,
        metavar="PATH",
        help="Path to the schema definition file (JSON or YAML).",
    )

    # --- Output ---
    output_group = parser.add_argument_group("output")
    output_group.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        metavar="DIR",
        help="Directory to write dtos/ and models/ into.",
    )
    output_group.add_argument(
        "--stdout",
        action="store_true",
        default=False,
        help="Print both artifacts to standard output.",
    )

    # --- Modes ---
    mode_group = parser.add_argument_group("operation modes")
    mode_group.add_argument(
        "--review-only",
        action="store_true",
        default=False,
        help="Only review the schema without rendering anything.",
    )
    mode_group.add_argument(
        "--fail-on-warnings",
        action="store_true",
        default=False,
        help="Treat review warnings as errors (exit code 1).",
    )

    # --- Config overrides ---
    config_group = parser.add_argument_group("configuration overrides")
    config_group.add_argument(
        "--name",
        type=str,
        default=None,
        metavar="NAME",
        help="Override the schema (entity) name.",
    )

    # --- Verbosity ---
    verbosity_group = parser.add_argument_group("verbosity")
    verbosity_group.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG).",
    )
    verbosity_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=False,
        help="Suppress all output except errors.",
    )

    return parser


# ---------------------------------------------------------------------------
# Review-only mode
# ---------------------------------------------------------------------------


def _run_review_only(
    schema_path: Path,
    name_override: Optional[str],
    fail_on_warnings: bool,
) -> int:
    """Review the schema without rendering.  Returns the exit code."""
    from dtogen.generator import load_schema_file, parse_raw_schema
    from dtogen.utils import Timer
    from dtogen.validators import validate_schema

    logger.info("Running review-only mode for: %s", schema_path)

    try:
        schema = parse_raw_schema(load_schema_file(schema_path))
    except (FileNotFoundError, ValueError) as exc:
        logger.error("Failed to load schema: %s", exc)
        return EXIT_INPUT_ERROR

    if name_override:
        schema = schema.model_copy(update={"name": name_override})

    with Timer("review") as t:
        result = validate_schema(schema)

    print(f"\n{'=' * 50}")
    print("  Schema Review Report")
    print(f"{'=' * 50}")
    print(f"  File:     {schema_path.name}")
    print(f"  Schema:   {schema.name}")
    print(f"  Fields:   {len(schema.fields)}")
    print(f"  Time:     {t.elapsed:.3f}s")

    if result.has_warnings:
        print()
        for line in result.format_report().splitlines():
            print(f"  {line}")
    else:
        print("\n  ✅ No findings.")

    print(f"{'=' * 50}\n")

    if fail_on_warnings and result.has_warnings:
        return EXIT_REVIEW_ERROR
    return EXIT_SUCCESS


# ---------------------------------------------------------------------------
# Full generation mode
# ---------------------------------------------------------------------------


def _run_generation(
    schema_path: Path,
    output_dir: Optional[Path],
    args: argparse.Namespace,
) -> int:
    """Run the full pipeline.  Returns the exit code."""
    from dtogen.generator import DtoGenerator, GenerationReport

    generator: DtoGenerator = DtoGenerator(fail_on_warnings=args.fail_on_warnings)
    report: GenerationReport = generator.generate_from_file(
        schema_path,
        output_dir,
        name_override=args.name,
    )

    if args.stdout and report.artifacts is not None:
        sys.stdout.write(report.artifacts.type_artifact)
        sys.stdout.write("\n")
        sys.stdout.write(report.artifacts.storage_artifact)
    else:
        print(report.summary())

    if not report.success:
        if report.input_errors:
            return EXIT_INPUT_ERROR
        if report.generation_errors:
            return EXIT_GENERATION_ERROR
        if report.export_errors:
            return EXIT_EXPORT_ERROR
        if report.review_warnings:
            return EXIT_REVIEW_ERROR
        return EXIT_GENERATION_ERROR

    return EXIT_SUCCESS


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def cli_main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """
    Main CLI entry point.

    Can be called from ``__main__.py`` or directly for testing.

    Args:
        argv: Optional argument list (defaults to sys.argv[1:]).
    """
    parser: argparse.ArgumentParser = _build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    if args.quiet:
        verbosity: int = -1
    else:
        verbosity = args.verbose
    _setup_logging(verbosity)
    if args.quiet:
        logging.getLogger("dtogen").setLevel(logging.ERROR)

    schema_path: Path = Path(args.schema).resolve()

    if not schema_path.exists():
        logger.error("Schema file not found: %s", schema_path)
        sys.exit(EXIT_INPUT_ERROR)

    if not schema_path.is_file():
        logger.error("Schema path is not a file: %s", schema_path)
        sys.exit(EXIT_INPUT_ERROR)

    if args.review_only:
        sys.exit(_run_review_only(schema_path, args.name, args.fail_on_warnings))

    if args.output is None and not args.stdout:
        logger.error(
            "Nothing to do: use -o/--output, --stdout or --review-only."
        )
        parser.print_usage(sys.stderr)
        sys.exit(EXIT_INPUT_ERROR)

    output_dir: Optional[Path] = Path(args.output).resolve() if args.output else None

    logger.info("Schema:  %s", schema_path)
    logger.info("Output:  %s", output_dir or "<stdout>")

    exit_code: int = _run_generation(schema_path, output_dir, args)

    if exit_code == EXIT_SUCCESS:
        logger.info("Generation completed successfully.")
    else:
        logger.error("Generation failed with exit code %d.", exit_code)

    sys.exit(exit_code)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "cli_main",
    "EXIT_SUCCESS",
    "EXIT_REVIEW_ERROR",
    "EXIT_GENERATION_ERROR",
    "EXIT_EXPORT_ERROR",
    "EXIT_INPUT_ERROR",
]

logger.debug("dtogen.cli loaded.")
