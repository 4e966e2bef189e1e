from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from pidsync.adapters.export import FileMetadataExportSink
from pidsync.app import list_failed_pids, run_synchronization
from pidsync.config import configure_logging
from pidsync.domain.model import Pid
from pidsync.domain.reconciliation import ProcessingOptions
from pidsync.ui.printer import DiagnosticPrinter

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from pidsync.domain.reconciliation import ReconciliationOrchestrator

log = logging.getLogger(__name__)


class CLIValidationError(ValueError):
    """Raised when the command line combines options that can not be used together."""


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pidsync",
        description="Diagnose and repair DOIs against the DataCite registrar",
    )
    parser.add_argument("--doi", type=str, help="DOI to diagnose (and optionally fix)")
    parser.add_argument(
        "--doi-list",
        type=Path,
        help="File containing one DOI per line; blank lines are skipped",
    )
    parser.add_argument(
        "--list-failed-doi",
        action="store_true",
        help="List the DOIs whose local status is FAILED",
    )
    parser.add_argument(
        "--export",
        action="store_true",
        help="Export the locally stored metadata document of --doi",
    )
    parser.add_argument(
        "--export-dir",
        type=Path,
        help="Directory for exported metadata documents (defaults to PIDSYNC_EXPORT_DIR)",
    )
    parser.add_argument(
        "--fix-doi",
        action="store_true",
        help="Try to fix the DOI by replaying its owner's state change",
    )
    parser.add_argument(
        "--skip-diagnostic",
        action="store_true",
        help="Do not print the diagnostic report",
    )
    return parser.parse_args(list(argv))


def _validate_args(args: argparse.Namespace) -> None:
    if args.list_failed_doi:
        if args.doi or args.doi_list or args.export or args.fix_doi:
            raise CLIValidationError("--list-failed-doi must be used alone")
        return

    if args.doi and args.doi_list:
        raise CLIValidationError("--doi and --doi-list can not be used at the same time")
    if not args.doi and not args.doi_list:
        raise CLIValidationError("One of --doi, --doi-list or --list-failed-doi is required")
    if args.export and args.doi_list:
        raise CLIValidationError("--export can not be used with --doi-list")
    if args.doi and not Pid.is_parsable(args.doi):
        raise CLIValidationError(f"{args.doi} is not a valid DOI")
    if args.doi_list and not args.doi_list.is_file():
        raise CLIValidationError(f"DOI list can not be found: {args.doi_list}")


def _read_doi_list(path: Path) -> list[str]:
    with path.open(encoding="utf-8") as handle:
        return [line.strip() for line in handle if line.strip()]


def _requested_pids(args: argparse.Namespace) -> list[str]:
    if args.doi:
        return [args.doi]
    return _read_doi_list(args.doi_list)


class _StopOnInterrupt:
    """First Ctrl+C finishes the current DOI and stops; the second exits at once."""

    def __init__(self) -> None:
        self.orchestrator: ReconciliationOrchestrator | None = None

    def attach(self, orchestrator: ReconciliationOrchestrator) -> None:
        self.orchestrator = orchestrator
        signal(SIGINT, self.handle)

    def handle(self, signal_received: int, frame: FrameType | None) -> None:
        if self.orchestrator is None:
            sigint_handler(signal_received, frame)
            return
        log.info("Stopping after the current DOI (Ctrl+C again to exit)")
        self.orchestrator.request_stop()
        self.orchestrator = None
        signal(SIGINT, sigint_handler)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        _validate_args(parsed_args)
        raw_pids = [] if parsed_args.list_failed_doi else _requested_pids(parsed_args)
    except (ValueError, OSError):
        log.exception("CLI validation error")
        sys.exit(2)

    printer = DiagnosticPrinter(sys.stdout)
    try:
        if parsed_args.list_failed_doi:
            printer.print_failed(list_failed_pids())
            return

        export_sink = (
            FileMetadataExportSink(parsed_args.export_dir)
            if parsed_args.export and parsed_args.export_dir is not None
            else None
        )
        outcomes = run_synchronization(
            raw_pids,
            options=ProcessingOptions(
                skip_diagnostic=parsed_args.skip_diagnostic,
                export=parsed_args.export,
                repair=parsed_args.fix_doi,
            ),
            export_sink=export_sink,
            observer=printer.print_outcome,
            on_ready=_StopOnInterrupt().attach,
        )
        log.info("Processed %d of %d DOIs", len(outcomes), len(raw_pids))
    except Exception:
        log.exception("Fatal error during DOI synchronization")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console-script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
