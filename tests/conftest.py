from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from pidsync.adapters.sqlalchemy import start_mappers
from pidsync.adapters.sqlalchemy.migrations import upgrade_head
from pidsync.adapters.sqlalchemy.unit_of_work import SqlAlchemyPidUnitOfWork, shutdown, startup
from tests.helpers.pids import FakePidStore, FakeRegistrarProbe, RecordingExecutor

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def store() -> FakePidStore:
    return FakePidStore()


@pytest.fixture
def probe() -> FakeRegistrarProbe:
    return FakeRegistrarProbe()


@pytest.fixture
def executor() -> RecordingExecutor:
    return RecordingExecutor()


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    start_mappers()
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyPidUnitOfWork]]:
    startup(engine=sqlite_engine, migrate=False, force=True)

    def factory() -> SqlAlchemyPidUnitOfWork:
        return SqlAlchemyPidUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()
