"""SQLAlchemy adapter package for pidsync."""

from __future__ import annotations

from .mappings import PidType, mapper_registry, start_mappers
from .repositories import SqlAlchemyPidStore
from .unit_of_work import SqlAlchemyPidUnitOfWork, shutdown, startup

__all__ = [
    "PidType",
    "SqlAlchemyPidStore",
    "SqlAlchemyPidUnitOfWork",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
