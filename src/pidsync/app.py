"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from importlib.metadata import entry_points
from logging import getLogger
from typing import TYPE_CHECKING, Final

from pidsync.adapters.datacite import DataCiteRegistrarProbe
from pidsync.adapters.export import FileMetadataExportSink
from pidsync.adapters.sqlalchemy.unit_of_work import SqlAlchemyPidUnitOfWork, startup
from pidsync.config import RepairExecutorUnavailableError, get_datacite_config, get_sync_config
from pidsync.domain.ports import RepairStrategyExecutor
from pidsync.domain.ports.unit_of_work import PidUnitOfWork
from pidsync.domain.reconciliation import (
    FailedPids,
    PidOutcome,
    ProcessingOptions,
    ReconciliationOrchestrator,
    collect_failed,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from pidsync.config import SyncConfig
    from pidsync.domain.ports import LocalPidStore, MetadataExportSink, RegistrarProbe
    from pidsync.domain.reconciliation import OutcomeObserver

UnitOfWorkFactory = Callable[[], PidUnitOfWork]
RepairExecutorFactory = Callable[["SyncConfig"], RepairStrategyExecutor]

REPAIR_EXECUTOR_GROUP: Final[str] = "pidsync.repair_executors"

log = getLogger(__name__)


def load_repair_executor(name: str | None, *, sync_config: SyncConfig) -> RepairStrategyExecutor:
    """Instantiate the repair executor registered under ``name``.

    Executors live in the surrounding application and are published through the
    ``pidsync.repair_executors`` entry-point group. Each entry point must resolve
    to a callable taking the ``SyncConfig`` and returning the executor.
    """

    if name is None:
        raise RepairExecutorUnavailableError(
            "Repairs need a state-change executor: set PIDSYNC_REPAIR_EXECUTOR"
        )
    matches = entry_points(group=REPAIR_EXECUTOR_GROUP, name=name)
    if not matches:
        raise RepairExecutorUnavailableError(
            f"No repair executor named {name!r} in entry-point group {REPAIR_EXECUTOR_GROUP}"
        )
    entry_point = matches[name]
    factory: RepairExecutorFactory = entry_point.load()
    executor = factory(sync_config)
    if not isinstance(executor, RepairStrategyExecutor):
        raise RepairExecutorUnavailableError(
            f"Entry point {name!r} did not produce a repair strategy executor"
        )
    log.info("Loaded repair executor %s from %s", name, entry_point.value)
    return executor


def build_orchestrator(
    store: LocalPidStore,
    *,
    options: ProcessingOptions,
    sync_config: SyncConfig,
    probe: RegistrarProbe | None = None,
    executor: RepairStrategyExecutor | None = None,
    export_sink: MetadataExportSink | None = None,
    observer: OutcomeObserver | None = None,
) -> ReconciliationOrchestrator:
    """Wire an orchestrator, filling unset collaborators from configuration."""

    effective_probe = probe or DataCiteRegistrarProbe(config=get_datacite_config())
    effective_executor = executor
    if options.repair and effective_executor is None:
        effective_executor = load_repair_executor(
            sync_config.repair_executor, sync_config=sync_config
        )
    effective_sink = export_sink
    if options.export and effective_sink is None:
        effective_sink = FileMetadataExportSink(sync_config.export_dir)

    return ReconciliationOrchestrator(
        store=store,
        probe=effective_probe,
        own_prefix=sync_config.own_prefix,
        repair_identity=sync_config.repair_identity,
        executor=effective_executor,
        export_sink=effective_sink,
        observer=observer,
    )


def run_synchronization(
    raw_pids: Iterable[str],
    *,
    options: ProcessingOptions,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    probe: RegistrarProbe | None = None,
    executor: RepairStrategyExecutor | None = None,
    export_sink: MetadataExportSink | None = None,
    observer: OutcomeObserver | None = None,
    sync_config: SyncConfig | None = None,
    on_ready: Callable[[ReconciliationOrchestrator], None] | None = None,
) -> list[PidOutcome]:
    """Diagnose, export and repair the given PIDs using the configured adapters.

    ``on_ready`` receives the orchestrator before the first PID is processed so
    callers can wire cancellation to ``request_stop``.
    """

    if unit_of_work_factory is None:
        startup()
    effective_uow = unit_of_work_factory or SqlAlchemyPidUnitOfWork
    effective_config = sync_config or get_sync_config()
    log.info(
        "Starting PID synchronization: diagnose=%s, export=%s, repair=%s",
        not options.skip_diagnostic,
        options.export,
        options.repair,
    )

    with effective_uow() as uow:
        orchestrator = build_orchestrator(
            uow.repositories.pids,
            options=options,
            sync_config=effective_config,
            probe=probe,
            executor=executor,
            export_sink=export_sink,
            observer=observer,
        )
        if on_ready is not None:
            on_ready(orchestrator)
        outcomes = orchestrator.process(raw_pids, options)
        if options.repair:
            uow.commit()

    repaired = sum(1 for outcome in outcomes if outcome.repair and outcome.repair.succeeded)
    log.info(
        "Finished PID synchronization: processed=%s, repaired=%s, errors=%s",
        len(outcomes),
        repaired,
        sum(1 for outcome in outcomes if outcome.error or outcome.input_error),
    )
    return outcomes


def list_failed_pids(*, unit_of_work_factory: UnitOfWorkFactory | None = None) -> FailedPids:
    """Return the PIDs currently recorded as FAILED in the local store."""

    if unit_of_work_factory is None:
        startup()
    effective_uow = unit_of_work_factory or SqlAlchemyPidUnitOfWork
    with effective_uow() as uow:
        return collect_failed(uow.repositories.pids)
