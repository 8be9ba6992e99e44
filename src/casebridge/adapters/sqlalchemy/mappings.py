"""SQLAlchemy mapping metadata for object records and stored files."""

from __future__ import annotations

import logging
import uuid
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Column,
    Enum,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
    Uuid,
    orm,
)
from sqlalchemy.ext.mutable import MutableDict

from casebridge.domain.model import EntityType, ObjectRecord, StoredFile

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]

mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

object_record_table = Table(
    "object_record",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("entity_type", Enum(EntityType, native_enum=False), nullable=False, index=True),
    Column("attributes", MutableDict.as_mutable(JSON()), nullable=False, default=dict),
)

stored_file_table = Table(
    "stored_file",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "document_id",
        UUIDColumnType,
        ForeignKey("object_record.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    ),
    Column("name", String, nullable=True),
    Column("mime_type", String, nullable=False),
    Column("extension", String, nullable=False, default=""),
    Column("size", Integer, nullable=False, default=0),
    Column("content", Text, nullable=False, default=""),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the record types."""

    log.info("Starting SQLAlchemy mappers")
    mapper_registry.map_imperatively(ObjectRecord, object_record_table)
    mapper_registry.map_imperatively(StoredFile, stored_file_table)
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
