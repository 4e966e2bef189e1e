"""Point-in-time views of a PID at the external registrar."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pidsync.domain.model.enums import PidStatus


@dataclass(frozen=True, slots=True)
class RegistrarResolution:
    status: PidStatus | None
    target: str | None


@dataclass(frozen=True, slots=True)
class RegistrarRecord:
    """Registrar snapshot; never cached, fetched again on every diagnosis."""

    exists: bool = False
    status: PidStatus | None = None
    target: str | None = None
    metadata_document: str | None = None
