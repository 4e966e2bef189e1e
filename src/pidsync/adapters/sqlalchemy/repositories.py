"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import or_, select

from pidsync.adapters.sqlalchemy.mappings import (
    dataset_identifier_table,
    dataset_table,
    download_table,
    pid_table,
    user_table,
)
from pidsync.domain.model import (
    Dataset,
    Download,
    IdentifierKind,
    Identity,
    LocalPidRecord,
    OwnerType,
    Pid,
    PidStatus,
)

if TYPE_CHECKING:
    from sqlalchemy.orm import Session


class SqlAlchemyPidStore:
    """Lookups of PIDs and their owning resources in the registry database."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: LocalPidRecord | Dataset | Download | Identity) -> None:
        self.session.add(entity)

    def find_owner_type(self, pid: Pid) -> OwnerType | None:
        stmt = select(pid_table.c.owner_type).where(pid_table.c.pid == pid)
        return self.session.execute(stmt).scalar_one_or_none()

    def get_local_record(self, pid: Pid) -> LocalPidRecord | None:
        return self.session.get(LocalPidRecord, pid)

    def find_datasets_by_pid(self, pid: Pid) -> list[Dataset]:
        # Identifier values are stored as entered. SQL narrows by prefix and the
        # domain parse of each value decides the match.
        candidates_by_identifier = (
            select(dataset_identifier_table.c.dataset_key)
            .where(dataset_identifier_table.c.kind == IdentifierKind.DOI)
            .where(dataset_identifier_table.c.value.contains(pid.prefix, autoescape=True))
        )
        stmt = (
            select(Dataset)
            .where(
                or_(
                    dataset_table.c.current_pid == pid,
                    dataset_table.c.key.in_(candidates_by_identifier),
                )
            )
            .order_by(dataset_table.c.key)
        )
        candidates = self.session.execute(stmt).scalars().all()
        return [
            dataset
            for dataset in candidates
            if dataset.current_pid == pid or dataset.has_alternate_pid(pid)
        ]

    def find_download_by_pid(self, pid: Pid) -> Download | None:
        stmt = select(Download).where(download_table.c.pid == pid)
        return self.session.execute(stmt).scalar_one_or_none()

    def list_failed(self, owner_type: OwnerType) -> list[Pid]:
        stmt = (
            select(pid_table.c.pid)
            .where(pid_table.c.status == PidStatus.FAILED)
            .where(pid_table.c.owner_type == owner_type)
            .order_by(pid_table.c.pid)
        )
        return list(self.session.execute(stmt).scalars().all())

    def resolve_identity(self, name: str) -> Identity | None:
        stmt = select(Identity).where(user_table.c.user_name == name)
        return self.session.execute(stmt).scalar_one_or_none()
