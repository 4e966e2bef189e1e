"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class OwnerType(StrEnum):
    """Kind of resource a PID is minted for; selects lookup and repair strategy."""

    DATASET = "dataset"
    DOWNLOAD = "download"


class PidStatus(StrEnum):
    """Lifecycle status of a PID, locally recorded or resolved at the registrar."""

    NEW = "new"
    RESERVED = "reserved"
    REGISTERED = "registered"
    DELETED = "deleted"
    FAILED = "failed"


class DownloadStatus(StrEnum):
    PREPARING = "preparing"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    CANCELLED = "cancelled"
    KILLED = "killed"
    FAILED = "failed"
    SUSPENDED = "suspended"
    FILE_ERASED = "file_erased"

    @property
    def has_stable_target(self) -> bool:
        """Whether the download file location can no longer change."""
        return self in STABLE_DOWNLOAD_STATUSES


STABLE_DOWNLOAD_STATUSES = frozenset({DownloadStatus.SUCCEEDED, DownloadStatus.FILE_ERASED})


class IdentifierKind(StrEnum):
    """Kind of an alternate identifier attached to a dataset."""

    DOI = "doi"
    URL = "url"
    LSID = "lsid"
    HANDLE = "handle"
    UUID = "uuid"
    UNKNOWN = "unknown"
