"""Diagnostic comparison of a PID between the local store and the registrar.

Registrar failures never abort a diagnosis. The affected fields stay ``None`` and
the failed step is listed on the report, so an incomplete report is still
returned to the caller.

Metadata documents are compared as exact strings. Documents that differ only in
whitespace or attribute order are reported as mismatches.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from pidsync.domain.model import OwnerType, RegistrarRecord
from pidsync.domain.ports import RegistrarError

from .classify import PidClassifier
from .contracts import (
    DatasetOwnership,
    DiagnosticReport,
    DownloadOwnership,
    OwnerSnapshot,
    ProbeStep,
)

if TYPE_CHECKING:
    from pidsync.domain.model import LocalPidRecord, Pid
    from pidsync.domain.ports import LocalPidStore, RegistrarProbe

log = getLogger(__name__)


@dataclass(slots=True)
class DiagnosticBuilder:
    store: LocalPidStore
    probe: RegistrarProbe

    def diagnose(self, pid: Pid) -> DiagnosticReport | None:
        """Build a report for ``pid``, or return ``None`` when it is unknown locally."""

        owner_type = PidClassifier(self.store).classify(pid)
        if owner_type is None:
            log.info("No local owner found for PID %s", pid)
            return None

        owner = self._owner_snapshot(pid, owner_type)
        local_record = self.store.get_local_record(pid)
        registrar, metadata_matches, failures = self._probe_registrar(pid, local_record)

        return DiagnosticReport(
            pid=pid,
            owner=owner,
            local_record=local_record,
            registrar=registrar,
            metadata_matches=metadata_matches,
            probe_failures=failures,
        )

    def _owner_snapshot(self, pid: Pid, owner_type: OwnerType) -> OwnerSnapshot:
        match owner_type:
            case OwnerType.DATASET:
                datasets = tuple(self.store.find_datasets_by_pid(pid))
                in_alternates = datasets[0].has_alternate_pid(pid) if len(datasets) == 1 else None
                return DatasetOwnership(
                    datasets=datasets,
                    pid_in_alternate_identifiers=in_alternates,
                )
            case OwnerType.DOWNLOAD:
                return DownloadOwnership(download=self.store.find_download_by_pid(pid))

    def _probe_registrar(
        self,
        pid: Pid,
        local_record: LocalPidRecord | None,
    ) -> tuple[RegistrarRecord, bool | None, tuple[ProbeStep, ...]]:
        failures: list[ProbeStep] = []

        try:
            exists = self.probe.exists(pid)
        except RegistrarError as exc:
            log.warning("Can not check existence of PID %s at the registrar: %s", pid, exc)
            return RegistrarRecord(), None, (ProbeStep.EXISTS,)

        if not exists:
            return RegistrarRecord(exists=False), None, ()

        metadata_document: str | None = None
        metadata_matches: bool | None = None
        try:
            metadata_document = self.probe.fetch_metadata(pid)
        except RegistrarError as exc:
            log.error("Can't compare metadata of PID %s: %s", pid, exc)
            failures.append(ProbeStep.METADATA)
        else:
            local_document = local_record.metadata_document if local_record else None
            metadata_matches = local_document == metadata_document

        status = None
        target = None
        try:
            resolution = self.probe.resolve_status(pid)
        except RegistrarError as exc:
            log.error("Failed to resolve PID %s: %s", pid, exc)
            failures.append(ProbeStep.RESOLVE)
        else:
            status = resolution.status
            target = resolution.target

        record = RegistrarRecord(
            exists=True,
            status=status,
            target=target,
            metadata_document=metadata_document,
        )
        return record, metadata_matches, tuple(failures)
