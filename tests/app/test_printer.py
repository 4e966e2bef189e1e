from __future__ import annotations

import io

from pidsync.domain.model import DownloadStatus, OwnerType, PidStatus, RegistrarRecord
from pidsync.domain.reconciliation import (
    DatasetOwnership,
    DiagnosticReport,
    DownloadOwnership,
    FailedPids,
    PidOutcome,
    ProbeStep,
    RepairOutcome,
    RepairReason,
)
from pidsync.ui.printer import DiagnosticPrinter
from tests.helpers.pids import make_dataset, make_download, make_record, pid


def _render(callback_name: str, *args: object) -> str:
    stream = io.StringIO()
    getattr(DiagnosticPrinter(stream), callback_name)(*args)
    return stream.getvalue()


def test_dataset_report() -> None:
    dataset = make_dataset("10.5072/abc123")
    report = DiagnosticReport(
        pid=pid("10.5072/abc123"),
        owner=DatasetOwnership(datasets=(dataset,), pid_in_alternate_identifiers=False),
        local_record=make_record("10.5072/abc123"),
        registrar=RegistrarRecord(
            exists=True, status=PidStatus.REGISTERED, target="https://example.org/d"
        ),
        metadata_matches=False,
    )

    output = _render("print_report", report.pid, report)

    assert "------ 10.5072/abc123 ------" in output
    assert f"Owner type: {OwnerType.DATASET}" in output
    assert f"Dataset: {dataset.key} (current DOI 10.5072/abc123)" in output
    assert "DOI in alternate identifiers: no" in output
    assert "Registrar target: https://example.org/d" in output
    assert "Metadata matches: no" in output


def test_incomplete_report_marks_unknown_fields() -> None:
    download = make_download("10.5072/dl.1", status=DownloadStatus.FAILED)
    report = DiagnosticReport(
        pid=pid("10.5072/dl.1"),
        owner=DownloadOwnership(download=download),
        local_record=None,
        probe_failures=(ProbeStep.EXISTS,),
    )

    output = _render("print_report", report.pid, report)

    assert "Local status: unknown" in output
    assert "Exists at registrar: unknown" in output
    assert "Registrar probes failed: exists" in output
    assert f"(status {DownloadStatus.FAILED})" in output


def test_missing_report() -> None:
    output = _render("print_report", pid("10.5072/none"), None)

    assert output == "No report can be generated. Nothing found for DOI 10.5072/none\n"


def test_repair_outcomes() -> None:
    old = pid("10.5072/old001")
    replayed = _render("print_repair", old, RepairOutcome.replayed(prior_pid=old))
    skipped = _render(
        "print_repair",
        pid("10.5072/x"),
        RepairOutcome.not_attempted(RepairReason.UNKNOWN_PID, "Nothing found"),
    )

    assert replayed == "Fix attempt for DOI 10.5072/old001: replayed (prior DOI 10.5072/old001)\n"
    assert skipped == "Fix attempt for DOI 10.5072/x: not attempted [unknown_pid]: Nothing found\n"


def test_outcome_with_input_error() -> None:
    outcome = PidOutcome(raw="nope", input_error="'nope' is not a valid DOI")

    assert _render("print_outcome", outcome) == "nope is not a valid DOI\n"


def test_outcome_with_export_results() -> None:
    outcome = PidOutcome(
        raw="10.5072/abc123",
        pid=pid("10.5072/abc123"),
        exported_to="/tmp/10.5072_abc123_export.xml",
    )

    output = _render("print_outcome", outcome)

    assert output == "Exported file saved in /tmp/10.5072_abc123_export.xml\n"


def test_failed_listing() -> None:
    failed = FailedPids(datasets=(pid("10.5072/d1"),), downloads=(pid("10.5072/dl"),))

    output = _render("print_failed", failed)

    assert output == (
        "Dataset DOI with status FAILED:\n10.5072/d1\n\n"
        "Download DOI with status FAILED:\n10.5072/dl\n"
    )
