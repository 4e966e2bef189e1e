"""Plain-text rendering of diagnostic reports and repair outcomes."""

# ruff: noqa: T201

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

from pidsync.domain.reconciliation import DatasetOwnership, DownloadOwnership, ProbeStep

if TYPE_CHECKING:
    from pidsync.domain.model import Pid
    from pidsync.domain.reconciliation import (
        DiagnosticReport,
        FailedPids,
        PidOutcome,
        RepairOutcome,
    )

UNKNOWN = "unknown"


def _yes_no(value: bool | None) -> str:
    if value is None:
        return UNKNOWN
    return "yes" if value else "no"


def _or_unknown(value: object | None) -> str:
    return UNKNOWN if value is None else str(value)


class DiagnosticPrinter:
    """Writes human-readable output for the CLI."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream or sys.stdout

    def _line(self, text: str = "") -> None:
        print(text, file=self.stream)

    def print_outcome(self, outcome: PidOutcome) -> None:
        """Render everything recorded for one requested PID."""

        if outcome.input_error is not None:
            self._line(f"{outcome.raw} is not a valid DOI")
            return
        if outcome.pid is None:
            return

        if outcome.diagnosed:
            self.print_report(outcome.pid, outcome.report)
        if outcome.exported_to is not None:
            self._line(f"Exported file saved in {outcome.exported_to}")
        if outcome.export_error is not None:
            self._line(f"Export of {outcome.pid} failed: {outcome.export_error}")
        if outcome.repair is not None:
            self.print_repair(outcome.pid, outcome.repair)
        if outcome.error is not None:
            self._line(f"Processing of {outcome.pid} failed: {outcome.error}")

    def print_report(self, pid: Pid, report: DiagnosticReport | None) -> None:
        if report is None:
            self._line(f"No report can be generated. Nothing found for DOI {pid}")
            return

        self._line(f"------ {report.pid} ------")
        self._line(f"Owner type: {report.owner_type}")
        self._print_owner(report)

        local = report.local_record
        self._line(f"Local status: {_or_unknown(local.status if local else None)}")
        self._line(f"Local target: {_or_unknown(local.target if local else None)}")

        registrar = report.registrar
        exists_known = ProbeStep.EXISTS not in report.probe_failures
        self._line(f"Exists at registrar: {_yes_no(registrar.exists if exists_known else None)}")
        if registrar.exists:
            self._line(f"Registrar status: {_or_unknown(registrar.status)}")
            self._line(f"Registrar target: {_or_unknown(registrar.target)}")
            self._line(f"Metadata matches: {_yes_no(report.metadata_matches)}")
        if report.probe_failures:
            failed = ", ".join(step.value for step in report.probe_failures)
            self._line(f"Registrar probes failed: {failed}")
        self._line()

    def _print_owner(self, report: DiagnosticReport) -> None:
        match report.owner:
            case DatasetOwnership(datasets=datasets) as ownership:
                if not datasets:
                    self._line("Dataset: none linked")
                for dataset in datasets:
                    current = _or_unknown(dataset.current_pid)
                    self._line(f"Dataset: {dataset.key} (current DOI {current})")
                if ownership.is_linked_to_single_dataset:
                    self._line(
                        "DOI in alternate identifiers: "
                        f"{_yes_no(ownership.pid_in_alternate_identifiers)}"
                    )
            case DownloadOwnership(download=None):
                self._line("Download: none linked")
            case DownloadOwnership(download=download) if download is not None:
                self._line(f"Download: {download.key} (status {download.status})")

    def print_repair(self, pid: Pid, outcome: RepairOutcome) -> None:
        if outcome.succeeded:
            prior = f" (prior DOI {outcome.prior_pid})" if outcome.prior_pid else ""
            self._line(f"Fix attempt for DOI {pid}: replayed{prior}")
            return
        state = "refused" if outcome.attempted else "not attempted"
        detail = f": {outcome.detail}" if outcome.detail else ""
        self._line(f"Fix attempt for DOI {pid}: {state} [{outcome.reason}]{detail}")

    def print_failed(self, failed: FailedPids) -> None:
        self._line("Dataset DOI with status FAILED:")
        for pid in failed.datasets:
            self._line(str(pid))
        self._line()
        self._line("Download DOI with status FAILED:")
        for pid in failed.downloads:
            self._line(str(pid))
