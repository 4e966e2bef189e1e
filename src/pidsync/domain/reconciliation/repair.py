"""Safety-gated replay of resource state changes.

Each strategy re-invokes the state-change handler that normally runs when a
dataset or download changes, but only when the local store is in a shape that
justifies the resulting registrar write. Gates run in order and the first one
that fails ends the attempt. Strategies never retry.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from pidsync.domain.ports import RepairExecutionError

from .contracts import RepairOutcome, RepairReason

if TYPE_CHECKING:
    from collections.abc import Callable

    from pidsync.domain.model import Dataset, Pid
    from pidsync.domain.ports import LocalPidStore, RepairStrategyExecutor

log = getLogger(__name__)


class RepairStrategy(Protocol):
    def repair(self, pid: Pid) -> RepairOutcome: ...


@dataclass(slots=True)
class DatasetRepairStrategy:
    store: LocalPidStore
    executor: RepairStrategyExecutor
    own_prefix: str

    def repair(self, pid: Pid) -> RepairOutcome:
        datasets = self.store.find_datasets_by_pid(pid)
        if not datasets:
            return RepairOutcome.refused(
                RepairReason.NOTHING_TO_REPAIR, f"No dataset is linked to {pid}"
            )
        if len(datasets) > 1:
            log.error("PID %s is linked to %d datasets", pid, len(datasets))
            return RepairOutcome.refused(
                RepairReason.AMBIGUOUS_DATASETS,
                f"{len(datasets)} datasets are linked to {pid}",
            )

        dataset = datasets[0]
        current_pid = dataset.current_pid
        if pid == current_pid:
            return _replay(lambda: self.executor.on_dataset_changed(dataset, None))

        if current_pid is None:
            log.error("Dataset %s linked to %s has no current DOI", dataset.key, pid)
            return RepairOutcome.refused(
                RepairReason.ROTATION_INVARIANT_VIOLATED,
                f"Dataset {dataset.key} linked to {pid} has no current PID",
            )

        if current_pid.is_under(self.own_prefix):
            log.error("Can not handle cases where the DOI changed to a self-minted DOI")
            return RepairOutcome.refused(
                RepairReason.SELF_MINTED_ROTATION,
                f"Rotation of dataset {dataset.key} from {pid} to {current_pid} "
                "requires manual handling",
            )

        if not _rotation_recorded(dataset, old_pid=pid, new_pid=current_pid):
            log.error(
                "Can not handle cases where the DOI changed but the list of alternate "
                "identifiers is not updated (dataset %s, %s -> %s)",
                dataset.key,
                pid,
                current_pid,
            )
            return RepairOutcome.refused(
                RepairReason.ROTATION_INVARIANT_VIOLATED,
                f"Alternate identifiers of dataset {dataset.key} do not record the rotation "
                f"from {pid} to {current_pid}",
            )

        return _replay(
            lambda: self.executor.on_dataset_changed(dataset, pid),
            prior_pid=pid,
        )


def _rotation_recorded(dataset: Dataset, *, old_pid: Pid, new_pid: Pid) -> bool:
    return dataset.has_alternate_pid(old_pid) and not dataset.has_alternate_pid(new_pid)


@dataclass(slots=True)
class DownloadRepairStrategy:
    """Replay download state changes under a fixed system identity.

    The download's requesting user is not resolved; every replay is authorised
    by ``identity_name``.
    """

    store: LocalPidStore
    executor: RepairStrategyExecutor
    identity_name: str

    def repair(self, pid: Pid) -> RepairOutcome:
        download = self.store.find_download_by_pid(pid)
        if download is None:
            return RepairOutcome.refused(
                RepairReason.NOTHING_TO_REPAIR, f"No download is linked to {pid}"
            )

        if not download.status.has_stable_target:
            log.error("Download with DOI %s status is %s", pid, download.status)
            return RepairOutcome.refused(
                RepairReason.UNSTABLE_DOWNLOAD_STATUS,
                f"Download {download.key} has status {download.status.name}",
            )

        identity = self.store.resolve_identity(self.identity_name)
        if identity is None:
            log.error("No user with name %s can be found", self.identity_name)
            return RepairOutcome.refused(
                RepairReason.IDENTITY_NOT_FOUND,
                f"Identity {self.identity_name} not found",
            )

        return _replay(lambda: self.executor.on_download_changed(download, None, identity))


def _replay(call: Callable[[], None], *, prior_pid: Pid | None = None) -> RepairOutcome:
    try:
        call()
    except RepairExecutionError as exc:
        log.error("State change replay failed: %s", exc)
        return RepairOutcome.refused(RepairReason.EXECUTOR_FAILED, str(exc))
    return RepairOutcome.replayed(prior_pid=prior_pid)
