"""Registrar probe backed by the DataCite REST API."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final, Protocol

from pidsync.domain.model import PidStatus, RegistrarResolution

from .client import DataCiteAPIError, DataCiteClient
from .schema import DataCiteState

if TYPE_CHECKING:
    from pidsync.config.datacite import DataCiteConfig
    from pidsync.domain.model import Pid

    from .schema import DataCiteDoiAttributes

# Hidden ("registered" but not findable) DOIs are how DataCite represents deletions.
STATUS_BY_STATE: Final[dict[DataCiteState, PidStatus]] = {
    DataCiteState.DRAFT: PidStatus.RESERVED,
    DataCiteState.FINDABLE: PidStatus.REGISTERED,
    DataCiteState.REGISTERED: PidStatus.DELETED,
}


class DoiLookupClient(Protocol):
    def fetch_doi(self, pid: Pid) -> DataCiteDoiAttributes | None: ...


class DataCiteRegistrarProbe:
    """Answers the registrar probes of one diagnosis from a single DataCite lookup.

    ``exists`` opens every diagnosis and always queries DataCite. The metadata
    and status steps that follow for the same PID reuse that lookup, so the
    report describes one registrar snapshot. Nothing is kept beyond the most
    recent PID.
    """

    def __init__(
        self,
        *,
        config: DataCiteConfig,
        client: DoiLookupClient | None = None,
    ) -> None:
        self._client = client or DataCiteClient(config=config)
        self._snapshot: tuple[Pid, DataCiteDoiAttributes | None] | None = None

    def exists(self, pid: Pid) -> bool:
        return self._lookup(pid, refresh=True) is not None

    def fetch_metadata(self, pid: Pid) -> str | None:
        attributes = self._lookup(pid)
        if attributes is None:
            return None
        try:
            return attributes.metadata_document()
        except ValueError as exc:
            raise DataCiteAPIError(str(exc)) from exc

    def resolve_status(self, pid: Pid) -> RegistrarResolution:
        attributes = self._lookup(pid)
        if attributes is None:
            raise DataCiteAPIError(f"DOI {pid} can not be resolved at DataCite")
        status = STATUS_BY_STATE.get(attributes.state) if attributes.state else None
        return RegistrarResolution(status=status, target=attributes.url)

    def _lookup(self, pid: Pid, *, refresh: bool = False) -> DataCiteDoiAttributes | None:
        if not refresh and self._snapshot is not None and self._snapshot[0] == pid:
            return self._snapshot[1]
        self._snapshot = None
        attributes = self._client.fetch_doi(pid)
        self._snapshot = (pid, attributes)
        return attributes
