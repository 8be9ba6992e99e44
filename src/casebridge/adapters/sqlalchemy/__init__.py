"""SQLAlchemy adapter package for casebridge."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, start_mappers
from .repositories import SqlAlchemyFileRepository, SqlAlchemyObjectRepository
from .unit_of_work import SqlAlchemyGatewayUnitOfWork, shutdown, startup

__all__ = [
    "SqlAlchemyFileRepository",
    "SqlAlchemyGatewayUnitOfWork",
    "SqlAlchemyObjectRepository",
    "create_all_tables",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
