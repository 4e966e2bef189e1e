"""Locally owned records the reconciliation engine reads.

These are plain dataclasses; the SQLAlchemy adapter maps them imperatively, so
they stay mutable and compare by identity like the other mapped entities.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from pidsync.domain.model.enums import IdentifierKind, OwnerType, PidStatus
from pidsync.domain.model.pid import InvalidPidError, Pid

if TYPE_CHECKING:
    from pidsync.domain.model.enums import DownloadStatus


@dataclass(eq=False, kw_only=True)
class LocalPidRecord:
    """Status and stored metadata of a PID as last recorded locally."""

    pid: Pid
    owner_type: OwnerType
    status: PidStatus
    metadata_document: str | None = None
    target: str | None = None


@dataclass(eq=False, kw_only=True)
class AlternateIdentifier:
    kind: IdentifierKind
    value: str
    id: UUID = field(default_factory=uuid4)

    def as_pid(self) -> Pid | None:
        """Return the identifier as a PID when it is a parsable DOI."""
        if self.kind is not IdentifierKind.DOI:
            return None
        try:
            return Pid.parse(self.value)
        except InvalidPidError:
            return None


@dataclass(eq=False, kw_only=True)
class Dataset:
    key: UUID = field(default_factory=uuid4)
    title: str = ""
    current_pid: Pid | None = None
    identifiers: list[AlternateIdentifier] = field(default_factory=list)

    @property
    def alternate_pids(self) -> frozenset[Pid]:
        pids = (identifier.as_pid() for identifier in self.identifiers)
        return frozenset(pid for pid in pids if pid is not None)

    def has_alternate_pid(self, pid: Pid) -> bool:
        return pid in self.alternate_pids

    def add_identifier(self, kind: IdentifierKind, value: str) -> AlternateIdentifier:
        identifier = AlternateIdentifier(kind=kind, value=value)
        self.identifiers.append(identifier)
        return identifier


@dataclass(eq=False, kw_only=True)
class Download:
    key: str
    status: DownloadStatus
    pid: Pid | None = None
    requested_by: str | None = None


@dataclass(eq=False, kw_only=True)
class Identity:
    """A local user account able to authorise registrar writes."""

    user_name: str
    email: str | None = None
    id: UUID = field(default_factory=uuid4)
