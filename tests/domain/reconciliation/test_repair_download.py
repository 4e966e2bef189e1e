from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from pidsync.domain.model import DownloadStatus
from pidsync.domain.reconciliation import DownloadRepairStrategy, RepairReason
from tests.helpers.pids import REPAIR_IDENTITY, RecordingExecutor, make_download, pid

if TYPE_CHECKING:
    from tests.helpers.pids import FakePidStore


def _strategy(store: FakePidStore, executor: RecordingExecutor) -> DownloadRepairStrategy:
    return DownloadRepairStrategy(store, executor, REPAIR_IDENTITY)


@pytest.mark.parametrize("status", [DownloadStatus.SUCCEEDED, DownloadStatus.FILE_ERASED])
def test_stable_download_replays_with_fixed_identity(
    store: FakePidStore,
    executor: RecordingExecutor,
    status: DownloadStatus,
) -> None:
    download = store.add_download(make_download("10.5072/dl.1", status=status))
    identity = store.add_identity()

    outcome = _strategy(store, executor).repair(pid("10.5072/dl.1"))

    assert outcome.attempted
    assert outcome.succeeded
    assert outcome.reason is RepairReason.REPLAYED
    assert executor.download_calls == [(download, None, identity)]


def test_requesting_user_is_not_used_as_identity(
    store: FakePidStore, executor: RecordingExecutor
) -> None:
    store.add_download(make_download("10.5072/dl.1"))
    store.add_identity("alice")
    system = store.add_identity()

    _strategy(store, executor).repair(pid("10.5072/dl.1"))

    assert executor.download_calls[0][2] is system


@pytest.mark.parametrize(
    "status",
    [status for status in DownloadStatus if not status.has_stable_target],
)
def test_unstable_download_status_is_refused(
    store: FakePidStore,
    executor: RecordingExecutor,
    status: DownloadStatus,
) -> None:
    store.add_download(make_download("10.5072/dl.1", status=status))
    store.add_identity()

    outcome = _strategy(store, executor).repair(pid("10.5072/dl.1"))

    assert outcome.attempted
    assert not outcome.succeeded
    assert outcome.reason is RepairReason.UNSTABLE_DOWNLOAD_STATUS
    assert status.name in outcome.detail
    assert executor.download_calls == []


def test_failed_download_refusal_cites_status(
    store: FakePidStore, executor: RecordingExecutor
) -> None:
    store.add_download(make_download("10.5072/dl.1", status=DownloadStatus.FAILED))
    store.add_identity()

    outcome = _strategy(store, executor).repair(pid("10.5072/dl.1"))

    assert outcome.reason is RepairReason.UNSTABLE_DOWNLOAD_STATUS
    assert "FAILED" in outcome.detail


def test_missing_download_is_a_noop(store: FakePidStore, executor: RecordingExecutor) -> None:
    outcome = _strategy(store, executor).repair(pid("10.5072/dl.1"))

    assert outcome.reason is RepairReason.NOTHING_TO_REPAIR
    assert outcome.is_noop
    assert executor.download_calls == []


def test_missing_identity_is_refused(store: FakePidStore, executor: RecordingExecutor) -> None:
    store.add_download(make_download("10.5072/dl.1"))

    outcome = _strategy(store, executor).repair(pid("10.5072/dl.1"))

    assert outcome.attempted
    assert not outcome.succeeded
    assert outcome.reason is RepairReason.IDENTITY_NOT_FOUND
    assert REPAIR_IDENTITY in outcome.detail
    assert executor.download_calls == []


def test_executor_failure_is_reported(store: FakePidStore) -> None:
    store.add_download(make_download("10.5072/dl.1"))
    store.add_identity()

    outcome = _strategy(store, RecordingExecutor(fail_with="boom")).repair(pid("10.5072/dl.1"))

    assert outcome.reason is RepairReason.EXECUTOR_FAILED
    assert outcome.detail == "boom"
