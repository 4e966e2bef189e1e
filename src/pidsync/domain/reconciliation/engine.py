"""Orchestrator for PID diagnosis, export and repair.

PIDs are processed one after another. Every failure is recorded on the outcome
of the PID it belongs to, and the loop moves on to the next PID.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from pidsync.domain.model import InvalidPidError, OwnerType, Pid
from pidsync.domain.ports import ExportError

from .contracts import RepairOutcome, RepairReason
from .diagnose import DiagnosticBuilder
from .repair import DatasetRepairStrategy, DownloadRepairStrategy

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from pidsync.domain.ports import (
        LocalPidStore,
        MetadataExportSink,
        RegistrarProbe,
        RepairStrategyExecutor,
    )

    from .contracts import DiagnosticReport
    from .repair import RepairStrategy

log = getLogger(__name__)

type OutcomeObserver = Callable[[PidOutcome], None]


@dataclass(frozen=True, slots=True, kw_only=True)
class ProcessingOptions:
    skip_diagnostic: bool = False
    export: bool = False
    repair: bool = False


@dataclass(slots=True, kw_only=True)
class PidOutcome:
    """Everything that happened to one requested PID."""

    raw: str
    pid: Pid | None = None
    input_error: str | None = None
    diagnosed: bool = False
    report: DiagnosticReport | None = None
    exported_to: str | None = None
    export_error: str | None = None
    repair: RepairOutcome | None = None
    error: str | None = None


@dataclass(frozen=True, slots=True)
class FailedPids:
    datasets: tuple[Pid, ...] = ()
    downloads: tuple[Pid, ...] = ()

    def by_owner_type(self) -> dict[OwnerType, tuple[Pid, ...]]:
        return {OwnerType.DATASET: self.datasets, OwnerType.DOWNLOAD: self.downloads}


def collect_failed(store: LocalPidStore) -> FailedPids:
    """Return the PIDs whose local status is FAILED, grouped by owner type."""
    return FailedPids(
        datasets=tuple(store.list_failed(OwnerType.DATASET)),
        downloads=tuple(store.list_failed(OwnerType.DOWNLOAD)),
    )


@dataclass(slots=True)
class ReconciliationOrchestrator:
    store: LocalPidStore
    probe: RegistrarProbe
    own_prefix: str
    repair_identity: str
    executor: RepairStrategyExecutor | None = None
    export_sink: MetadataExportSink | None = None
    observer: OutcomeObserver | None = None
    _stop_requested: bool = field(default=False, init=False)

    def request_stop(self) -> None:
        """Stop a running batch before its next PID."""
        self._stop_requested = True

    def process(self, raw_pids: Iterable[str], options: ProcessingOptions) -> list[PidOutcome]:
        self._stop_requested = False
        repaired: set[Pid] = set()
        outcomes: list[PidOutcome] = []
        for raw in raw_pids:
            if self._stop_requested:
                log.info("Stop requested, %d PIDs processed", len(outcomes))
                break
            outcome = self.process_one(raw, options, repaired=repaired)
            outcomes.append(outcome)
            if self.observer is not None:
                self.observer(outcome)
        return outcomes

    def process_one(
        self,
        raw: str | Pid,
        options: ProcessingOptions,
        *,
        repaired: set[Pid] | None = None,
    ) -> PidOutcome:
        outcome = PidOutcome(raw=str(raw))
        try:
            pid = raw if isinstance(raw, Pid) else Pid.parse(raw)
        except InvalidPidError as exc:
            outcome.input_error = str(exc)
            return outcome
        outcome.pid = pid

        try:
            if not options.skip_diagnostic:
                outcome.report = self.diagnose(pid)
                outcome.diagnosed = True
            if options.export:
                self._export(pid, outcome)
            if options.repair:
                outcome.repair = self._repair_once(pid, repaired)
        except Exception as exc:
            log.exception("Unexpected failure while processing PID %s", pid)
            outcome.error = f"{type(exc).__name__}: {exc}"
        return outcome

    def diagnose(self, pid: Pid) -> DiagnosticReport | None:
        return DiagnosticBuilder(self.store, self.probe).diagnose(pid)

    def repair(self, pid: Pid) -> RepairOutcome:
        owner_type = self.store.find_owner_type(pid)
        if owner_type is None:
            return RepairOutcome.not_attempted(
                RepairReason.UNKNOWN_PID, f"Nothing found for DOI {pid}"
            )
        return self._strategy_for(owner_type).repair(pid)

    def list_failed(self) -> FailedPids:
        return collect_failed(self.store)

    def _strategy_for(self, owner_type: OwnerType) -> RepairStrategy:
        if self.executor is None:
            raise RuntimeError("No repair strategy executor configured")
        match owner_type:
            case OwnerType.DATASET:
                return DatasetRepairStrategy(self.store, self.executor, self.own_prefix)
            case OwnerType.DOWNLOAD:
                return DownloadRepairStrategy(self.store, self.executor, self.repair_identity)

    def _repair_once(self, pid: Pid, repaired: set[Pid] | None) -> RepairOutcome:
        if repaired is not None:
            if pid in repaired:
                return RepairOutcome.not_attempted(
                    RepairReason.DUPLICATE_REQUEST,
                    f"Repair of {pid} was already requested in this run",
                )
            repaired.add(pid)
        return self.repair(pid)

    def _export(self, pid: Pid, outcome: PidOutcome) -> None:
        if self.export_sink is None:
            outcome.export_error = "No export destination configured"
            return
        record = self.store.get_local_record(pid)
        document = record.metadata_document if record is not None else None
        if not document:
            log.info("No stored metadata to export for PID %s", pid)
            return
        try:
            outcome.exported_to = self.export_sink.export(pid, document)
        except ExportError as exc:
            log.error("Export of PID %s failed: %s", pid, exc)
            outcome.export_error = str(exc)
