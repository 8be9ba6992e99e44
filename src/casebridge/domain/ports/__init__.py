"""Domain port definitions for adapters."""

from __future__ import annotations

from .mapping import Mapper
from .persistence import FileRepository, ObjectRepository, SearchFilter
from .unit_of_work import (
    GatewayRepositories,
    GatewayUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "FileRepository",
    "GatewayRepositories",
    "GatewayUnitOfWork",
    "Mapper",
    "ObjectRepository",
    "RepositoryCollection",
    "SearchFilter",
    "UnitOfWork",
]
