"""Port for probing the external registrar."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pidsync.domain.model import Pid, RegistrarResolution


class RegistrarError(RuntimeError):
    """Raised when the registrar cannot answer a probe (timeouts included)."""


@runtime_checkable
class RegistrarProbe(Protocol):
    def exists(self, pid: Pid) -> bool: ...

    def fetch_metadata(self, pid: Pid) -> str | None: ...

    def resolve_status(self, pid: Pid) -> RegistrarResolution: ...
