"""Value types exchanged between the reconciliation stages.

Reports and outcomes are built once from fully resolved inputs; fields that
could not be determined are left as ``None`` rather than filled in later.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Literal, Self

from pidsync.domain.model import OwnerType, RegistrarRecord

if TYPE_CHECKING:
    from pidsync.domain.model import Dataset, Download, LocalPidRecord, Pid


class ProbeStep(StrEnum):
    """Registrar calls made while diagnosing a PID."""

    EXISTS = "exists"
    METADATA = "metadata"
    RESOLVE = "resolve"


@dataclass(frozen=True, slots=True, kw_only=True)
class DatasetOwnership:
    """Datasets currently linked to the diagnosed PID."""

    datasets: tuple[Dataset, ...] = ()
    pid_in_alternate_identifiers: bool | None = None
    owner_type: Literal[OwnerType.DATASET] = OwnerType.DATASET

    @property
    def is_linked_to_single_dataset(self) -> bool:
        return len(self.datasets) == 1

    @property
    def related_dataset(self) -> Dataset | None:
        return self.datasets[0] if self.is_linked_to_single_dataset else None


@dataclass(frozen=True, slots=True, kw_only=True)
class DownloadOwnership:
    download: Download | None = None
    owner_type: Literal[OwnerType.DOWNLOAD] = OwnerType.DOWNLOAD


type OwnerSnapshot = DatasetOwnership | DownloadOwnership


@dataclass(frozen=True, slots=True, kw_only=True)
class DiagnosticReport:
    """Comparison of one PID between the local store and the registrar."""

    pid: Pid
    owner: OwnerSnapshot
    local_record: LocalPidRecord | None
    registrar: RegistrarRecord = field(default_factory=RegistrarRecord)
    metadata_matches: bool | None = None
    probe_failures: tuple[ProbeStep, ...] = ()

    @property
    def owner_type(self) -> OwnerType:
        return self.owner.owner_type

    @property
    def is_complete(self) -> bool:
        """False when a registrar probe failed and some fields are missing."""
        return not self.probe_failures


class RepairReason(StrEnum):
    REPLAYED = "replayed"
    REPLAYED_ROTATION = "replayed_rotation"
    NOTHING_TO_REPAIR = "nothing_to_repair"
    AMBIGUOUS_DATASETS = "ambiguous_datasets"
    SELF_MINTED_ROTATION = "self_minted_rotation"
    ROTATION_INVARIANT_VIOLATED = "rotation_invariant_violated"
    UNSTABLE_DOWNLOAD_STATUS = "unstable_download_status"
    IDENTITY_NOT_FOUND = "identity_not_found"
    EXECUTOR_FAILED = "executor_failed"
    UNKNOWN_PID = "unknown_pid"
    DUPLICATE_REQUEST = "duplicate_request"


@dataclass(frozen=True, slots=True, kw_only=True)
class RepairOutcome:
    attempted: bool
    succeeded: bool
    reason: RepairReason
    detail: str = ""
    prior_pid: Pid | None = None

    @classmethod
    def replayed(cls, *, prior_pid: Pid | None = None, detail: str = "") -> Self:
        reason = RepairReason.REPLAYED if prior_pid is None else RepairReason.REPLAYED_ROTATION
        return cls(
            attempted=True, succeeded=True, reason=reason, detail=detail, prior_pid=prior_pid
        )

    @classmethod
    def refused(cls, reason: RepairReason, detail: str) -> Self:
        return cls(attempted=True, succeeded=False, reason=reason, detail=detail)

    @classmethod
    def not_attempted(cls, reason: RepairReason, detail: str) -> Self:
        return cls(attempted=False, succeeded=False, reason=reason, detail=detail)

    @property
    def is_noop(self) -> bool:
        return self.reason is RepairReason.NOTHING_TO_REPAIR
