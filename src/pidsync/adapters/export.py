"""File-system sink for exported metadata documents."""

from __future__ import annotations

from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from pidsync.domain.ports import ExportError

if TYPE_CHECKING:
    from pidsync.domain.model import Pid

log = getLogger(__name__)

EXPORT_SUFFIX = "_export.xml"


def export_filename(pid: Pid) -> str:
    """Return the file name used for ``pid``, e.g. ``10.5072_abc123_export.xml``."""
    return pid.name.replace("/", "_") + EXPORT_SUFFIX


class FileMetadataExportSink:
    """Writes stored metadata documents to one XML file per PID."""

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)

    def export(self, pid: Pid, document: str) -> str:
        if not document:
            raise ExportError(f"No metadata document to export for {pid}")
        path = (self.directory / export_filename(pid)).resolve()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(document, encoding="utf-8")
        except OSError as exc:
            raise ExportError(f"Could not write {path}: {exc}") from exc
        log.info("Exported metadata of %s to %s", pid, path)
        return str(path)
