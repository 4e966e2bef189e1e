"""Synchronisation settings for the DOI reconciliation engine."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .env import optional_env_var, require_env_vars

# Identity used to authorise download repairs; the requesting user is not resolved.
DEFAULT_REPAIR_IDENTITY = "download.system"


@dataclass(frozen=True, slots=True)
class SyncConfig:
    own_prefix: str
    repair_identity: str = DEFAULT_REPAIR_IDENTITY
    repair_executor: str | None = None
    export_dir: Path = Path()


def get_sync_config() -> SyncConfig:
    values = require_env_vars(("PIDSYNC_DOI_PREFIX",))
    export_dir = optional_env_var("PIDSYNC_EXPORT_DIR")
    return SyncConfig(
        own_prefix=values["PIDSYNC_DOI_PREFIX"],
        repair_identity=optional_env_var("PIDSYNC_REPAIR_IDENTITY") or DEFAULT_REPAIR_IDENTITY,
        repair_executor=optional_env_var("PIDSYNC_REPAIR_EXECUTOR"),
        export_dir=Path(export_dir) if export_dir else Path(),
    )
