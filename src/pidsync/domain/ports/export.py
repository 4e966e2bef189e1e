"""Port for exporting stored metadata documents."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pidsync.domain.model import Pid


class ExportError(RuntimeError):
    """Raised when a metadata document could not be exported."""


@runtime_checkable
class MetadataExportSink(Protocol):
    def export(self, pid: Pid, document: str) -> str:
        """Persist ``document`` and return a description of where it went."""
        ...
