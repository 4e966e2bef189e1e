"""Port for the state-change strategy that repairs replay.

Implementations perform the registrar write and update the local status; the
reconciliation engine only decides when calling them is safe.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pidsync.domain.model import Dataset, Download, Identity, Pid


class RepairExecutionError(RuntimeError):
    """Raised by executors when a replayed state change could not be applied."""


@runtime_checkable
class RepairStrategyExecutor(Protocol):
    def on_dataset_changed(self, dataset: Dataset, prior_pid: Pid | None) -> None: ...

    def on_download_changed(
        self,
        download: Download,
        prior_pid: Pid | None,
        acting_identity: Identity,
    ) -> None: ...
