from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine, inspect

from pidsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyPidUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from pidsync.domain.model import PidStatus
from tests.helpers.pids import make_record, pid

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_unit_of_work_requires_startup() -> None:
    with pytest.raises(StartupError):
        SqlAlchemyPidUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b
    assert is_started()


def test_startup_migrates_schema() -> None:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine, force=True)

    tables = set(inspect(engine).get_table_names())
    assert {"pid", "dataset", "dataset_identifier", "download", "user_account"} <= tables


def test_commit_persists_between_units_of_work(
    sqlite_unit_of_work: Callable[[], SqlAlchemyPidUnitOfWork],
) -> None:
    with sqlite_unit_of_work() as uow:
        uow.session.add(make_record("10.5072/abc123", status=PidStatus.FAILED))
        uow.commit()

    with sqlite_unit_of_work() as uow:
        record = uow.repositories.pids.get_local_record(pid("10.5072/abc123"))
        assert record is not None
        assert record.status is PidStatus.FAILED


def test_exception_rolls_back(
    sqlite_unit_of_work: Callable[[], SqlAlchemyPidUnitOfWork],
) -> None:
    with pytest.raises(RuntimeError), sqlite_unit_of_work() as uow:
        uow.session.add(make_record("10.5072/abc123"))
        uow.session.flush()
        raise RuntimeError("boom")

    with sqlite_unit_of_work() as uow:
        assert uow.repositories.pids.get_local_record(pid("10.5072/abc123")) is None


def test_repositories_unavailable_outside_context(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, migrate=False, force=True)
    uow = SqlAlchemyPidUnitOfWork()

    with pytest.raises(StartupError):
        _ = uow.repositories
