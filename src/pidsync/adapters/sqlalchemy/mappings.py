"""SQLAlchemy mapping metadata for the pidsync domain model."""

from __future__ import annotations

import logging
import uuid
from functools import cache

from sqlalchemy import (
    Column,
    Dialect,
    Enum,
    ForeignKey,
    String,
    Table,
    Text,
    TypeDecorator,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers, relationship

from pidsync.domain.model import (
    AlternateIdentifier,
    Dataset,
    Download,
    DownloadStatus,
    IdentifierKind,
    Identity,
    LocalPidRecord,
    OwnerType,
    Pid,
    PidStatus,
)

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class PidType(TypeDecorator[Pid]):
    """Stores a ``Pid`` as its canonical ``prefix/suffix`` string."""

    impl = String(255)
    cache_ok = True

    def process_bind_param(self, value: Pid | str | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        if isinstance(value, Pid):
            return value.name
        return Pid.parse(value).name

    def process_result_value(self, value: str | None, dialect: Dialect) -> Pid | None:
        _ = dialect
        if value is None:
            return None
        return Pid.parse(value)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

pid_table = Table(
    "pid",
    mapper_registry.metadata,
    Column("pid", PidType, primary_key=True),
    Column("owner_type", Enum(OwnerType, native_enum=False), nullable=False, index=True),
    Column("status", Enum(PidStatus, native_enum=False), nullable=False, index=True),
    Column("metadata", Text, key="metadata_document", nullable=True),
    Column("target", String, nullable=True),
)

dataset_table = Table(
    "dataset",
    mapper_registry.metadata,
    Column("key", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("title", String, nullable=False, default=""),
    Column("doi", PidType, key="current_pid", nullable=True, index=True),
)

dataset_identifier_table = Table(
    "dataset_identifier",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "dataset_key",
        UUIDColumnType,
        ForeignKey("dataset.key", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("type", Enum(IdentifierKind, native_enum=False), key="kind", nullable=False),
    Column("identifier", String, key="value", nullable=False, index=True),
)

download_table = Table(
    "download",
    mapper_registry.metadata,
    Column("key", String, primary_key=True),
    Column("doi", PidType, key="pid", nullable=True, unique=True),
    Column("status", Enum(DownloadStatus, native_enum=False), nullable=False),
    Column("created_by", String, key="requested_by", nullable=True),
)

user_table = Table(
    "user_account",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("user_name", String, nullable=False, unique=True),
    Column("email", String, nullable=True),
)


@cache
def start_mappers() -> orm.registry:
    """Map domain dataclasses imperatively; safe to call more than once."""

    log.debug("Mapping pidsync domain model")
    mapper_registry.map_imperatively(LocalPidRecord, pid_table)

    mapper_registry.map_imperatively(AlternateIdentifier, dataset_identifier_table)

    mapper_registry.map_imperatively(
        Dataset,
        dataset_table,
        properties={
            "identifiers": relationship(
                AlternateIdentifier,
                cascade="all, delete-orphan",
                order_by=dataset_identifier_table.c.value,
                lazy="selectin",
            ),
        },
    )

    mapper_registry.map_imperatively(Download, download_table)

    mapper_registry.map_imperatively(Identity, user_table)

    configure_mappers()
    return mapper_registry
