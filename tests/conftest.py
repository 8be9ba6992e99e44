from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from casebridge.adapters.mapping import MappingRegistry
from casebridge.adapters.sqlalchemy import start_mappers
from casebridge.adapters.sqlalchemy.migrations import upgrade_head
from casebridge.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyGatewayUnitOfWork,
    shutdown,
    startup,
)
from casebridge.domain.ports import GatewayRepositories
from casebridge.domain.upsert import (
    CASE_IDENTIFICATION_MAPPINGS,
    CASE_MAPPINGS,
    DOCUMENT_IDENTIFICATION_MAPPINGS,
    DOCUMENT_MAPPINGS,
    OutboundMessage,
)
from tests.helpers.repositories import InMemoryFileRepository, InMemoryObjectRepository

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


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
) -> Iterator[Callable[[], SqlAlchemyGatewayUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyGatewayUnitOfWork:
        return SqlAlchemyGatewayUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()


@pytest.fixture
def objects() -> InMemoryObjectRepository:
    return InMemoryObjectRepository()


@pytest.fixture
def files() -> InMemoryFileRepository:
    return InMemoryFileRepository()


@pytest.fixture
def repositories(
    objects: InMemoryObjectRepository,
    files: InMemoryFileRepository,
) -> GatewayRepositories:
    return GatewayRepositories(objects=objects, files=files)


def _echo_outbound(message: OutboundMessage) -> dict[str, object]:
    return {"record": message.record, "reference": message.routing.reference}


@pytest.fixture
def passthrough_mapper() -> MappingRegistry:
    """Mapper whose inbound mappings take drafts as-is and echo outbound records."""

    registry = MappingRegistry()
    for mappings in (
        CASE_IDENTIFICATION_MAPPINGS,
        DOCUMENT_IDENTIFICATION_MAPPINGS,
        CASE_MAPPINGS,
        DOCUMENT_MAPPINGS,
    ):
        registry.register(mappings.inbound, lambda body: body)
        registry.register(mappings.outbound, _echo_outbound)
    return registry
