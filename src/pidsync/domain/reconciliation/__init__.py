"""Reconciliation of PIDs between the local store and the registrar.

Flow per PID:
1) classify the PID by the resource type owning it
2) diagnose local and registrar state into an immutable report
3) optionally replay the owner's state change when the safety gates allow it
"""

from __future__ import annotations

from .classify import PidClassifier
from .contracts import (
    DatasetOwnership,
    DiagnosticReport,
    DownloadOwnership,
    OwnerSnapshot,
    ProbeStep,
    RepairOutcome,
    RepairReason,
)
from .diagnose import DiagnosticBuilder
from .engine import (
    FailedPids,
    OutcomeObserver,
    PidOutcome,
    ProcessingOptions,
    ReconciliationOrchestrator,
    collect_failed,
)
from .repair import DatasetRepairStrategy, DownloadRepairStrategy, RepairStrategy

__all__ = [
    "DatasetOwnership",
    "DatasetRepairStrategy",
    "DiagnosticBuilder",
    "DiagnosticReport",
    "DownloadOwnership",
    "DownloadRepairStrategy",
    "FailedPids",
    "OutcomeObserver",
    "OwnerSnapshot",
    "PidClassifier",
    "PidOutcome",
    "ProbeStep",
    "ProcessingOptions",
    "ReconciliationOrchestrator",
    "RepairOutcome",
    "RepairReason",
    "RepairStrategy",
    "collect_failed",
]
