"""Ports for reading the local system of record."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pidsync.domain.model import (
        Dataset,
        Download,
        Identity,
        LocalPidRecord,
        OwnerType,
        Pid,
    )


@runtime_checkable
class LocalPidStore(Protocol):
    """Read access to PIDs and the resources owning them."""

    def find_owner_type(self, pid: Pid) -> OwnerType | None: ...

    def get_local_record(self, pid: Pid) -> LocalPidRecord | None: ...

    def find_datasets_by_pid(self, pid: Pid) -> list[Dataset]:
        """Datasets whose current PID is ``pid`` or that list it as a DOI identifier."""
        ...

    def find_download_by_pid(self, pid: Pid) -> Download | None: ...

    def list_failed(self, owner_type: OwnerType) -> list[Pid]: ...

    def resolve_identity(self, name: str) -> Identity | None: ...
