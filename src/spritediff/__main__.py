"""Command line interface for spritediff."""
from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Iterable, Optional

from dotenv import load_dotenv

from .compare import compare_docs
from .core.loader import load_doc
from .errors import InvalidSnapshotError
from .presets import CEL_CHECKS, PALETTE_CHECKS, CompareOptions, default_preset_name, get_preset
from .report import diff_result_to_json, write_json_report

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV_VAR = "SPRITEDIFF_LOG_LEVEL"

EXIT_SAME = 0
EXIT_DIFFERENT = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spritediff",
        description="Report which parts of two sprite document snapshots differ.",
    )
    parser.add_argument("old", help="Path to the baseline snapshot (JSON)")
    parser.add_argument("new", help="Path to the revised snapshot (JSON)")
    parser.add_argument(
        "--preset",
        help="Preset name (default|legacy|strict); defaults to $SPRITEDIFF_PRESET or 'default'",
    )
    parser.add_argument("--cel-check", choices=CEL_CHECKS, help="Override the cel comparison rule")
    parser.add_argument(
        "--palette-check", choices=PALETTE_CHECKS, help="Override the palette comparison rule"
    )
    parser.add_argument("--json", help="Write the diff report to this path")
    parser.add_argument("--print-json", action="store_true", help="Print the diff report as JSON")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only set the exit status")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=_version())
    return parser


def _version() -> str:
    from . import __version__

    return f"%(prog)s {__version__}"


def _configure_logging(verbose: bool) -> None:
    level_name = "DEBUG" if verbose else os.getenv(LOG_LEVEL_ENV_VAR, "WARNING").upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _override_options(options: CompareOptions, args: argparse.Namespace) -> CompareOptions:
    overrides = {}
    for field_name in ("cel_check", "palette_check"):
        value = getattr(args, field_name)
        if value is not None:
            overrides[field_name] = value
    return options.copy(**overrides)


def main(argv: Optional[Iterable[str]] = None) -> int:
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        preset = get_preset(args.preset or default_preset_name())
    except KeyError as exc:
        parser.error(str(exc))

    options = _override_options(preset.options, args)
    logger.debug("Using preset '%s' with %s", preset.name, options.to_dict())

    try:
        doc_old = load_doc(args.old)
        doc_new = load_doc(args.new)
    except InvalidSnapshotError as exc:
        logger.error("%s", exc)
        return EXIT_ERROR

    result = compare_docs(doc_old, doc_new, options)

    if args.json:
        try:
            write_json_report(result, args.json, options)
        except OSError as exc:
            logger.error("Cannot write report '%s': %s", args.json, exc)
            return EXIT_ERROR

    if not args.quiet:
        if args.print_json:
            print(diff_result_to_json(result, options))
        elif result.anything:
            print("Changed: " + ", ".join(result.changed_categories()))
        else:
            print("No differences")

    return EXIT_DIFFERENT if result.anything else EXIT_SAME


if __name__ == "__main__":
    sys.exit(main())
