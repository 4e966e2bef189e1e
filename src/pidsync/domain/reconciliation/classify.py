"""Owner-type classification of PIDs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pidsync.domain.model import OwnerType, Pid
    from pidsync.domain.ports import LocalPidStore


@dataclass(slots=True)
class PidClassifier:
    store: LocalPidStore

    def classify(self, pid: Pid) -> OwnerType | None:
        """Return the owning resource type, or ``None`` when the PID is unknown locally."""

        return self.store.find_owner_type(pid)
