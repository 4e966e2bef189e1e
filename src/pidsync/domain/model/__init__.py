"""Public domain model surface."""

from __future__ import annotations

from pidsync.domain.model.entities import (
    AlternateIdentifier,
    Dataset,
    Download,
    Identity,
    LocalPidRecord,
)
from pidsync.domain.model.enums import (
    STABLE_DOWNLOAD_STATUSES,
    DownloadStatus,
    IdentifierKind,
    OwnerType,
    PidStatus,
)
from pidsync.domain.model.pid import InvalidPidError, Pid
from pidsync.domain.model.registrar import RegistrarRecord, RegistrarResolution

__all__ = [  # noqa: RUF022
    # identifiers
    "Pid",
    "InvalidPidError",
    # local records
    "LocalPidRecord",
    "Dataset",
    "AlternateIdentifier",
    "Download",
    "Identity",
    # registrar
    "RegistrarRecord",
    "RegistrarResolution",
    # enums
    "OwnerType",
    "PidStatus",
    "DownloadStatus",
    "IdentifierKind",
    "STABLE_DOWNLOAD_STATUSES",
]
