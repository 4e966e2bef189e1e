"""Domain port definitions for adapters."""

from __future__ import annotations

from .export import ExportError, MetadataExportSink
from .persistence import LocalPidStore
from .registrar import RegistrarError, RegistrarProbe
from .repair import RepairExecutionError, RepairStrategyExecutor
from .unit_of_work import PidRepositories, PidUnitOfWork, RepositoryCollection, UnitOfWork

__all__ = [
    "ExportError",
    "LocalPidStore",
    "MetadataExportSink",
    "PidRepositories",
    "PidUnitOfWork",
    "RegistrarError",
    "RegistrarProbe",
    "RepairExecutionError",
    "RepairStrategyExecutor",
    "RepositoryCollection",
    "UnitOfWork",
]
