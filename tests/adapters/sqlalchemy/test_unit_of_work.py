from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine

from casebridge.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyGatewayUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from casebridge.domain.model import EntityType, ObjectRecord

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_unit_of_work_requires_startup() -> None:
    with pytest.raises(StartupError):
        SqlAlchemyGatewayUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b
    assert is_started()


def test_unit_of_work_commits_records(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemyGatewayUnitOfWork() as uow:
        uow.repositories.objects.save(
            ObjectRecord(entity_type=EntityType.CASE, attributes={"identification": "ZAAK-1"})
        )
        uow.commit()

    with SqlAlchemyGatewayUnitOfWork() as uow:
        found = uow.repositories.objects.search(EntityType.CASE, {"identification": "ZAAK-1"})

    assert len(found) == 1


def test_unit_of_work_rolls_back_on_error(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with pytest.raises(RuntimeError), SqlAlchemyGatewayUnitOfWork() as uow:
        uow.repositories.objects.save(
            ObjectRecord(entity_type=EntityType.CASE, attributes={"identification": "ZAAK-1"})
        )
        raise RuntimeError("boom")

    with SqlAlchemyGatewayUnitOfWork() as uow:
        found = uow.repositories.objects.search(EntityType.CASE, {"identification": "ZAAK-1"})

    assert found == ()


def test_repositories_require_open_session(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    uow = SqlAlchemyGatewayUnitOfWork()

    with pytest.raises(StartupError):
        _ = uow.repositories
