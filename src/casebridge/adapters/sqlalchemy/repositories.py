"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import select

from casebridge.adapters.sqlalchemy.mappings import object_record_table, stored_file_table
from casebridge.domain.model import ObjectRecord, StoredFile

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from casebridge.domain.model import EntityType
    from casebridge.domain.ports.persistence import SearchFilter


class SqlAlchemyObjectRepository:
    """Object records in one table, searched by JSON attribute equality."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def search(self, entity_type: EntityType, filters: SearchFilter) -> tuple[ObjectRecord, ...]:
        stmt = select(ObjectRecord).where(object_record_table.c.entity_type == entity_type)
        for name, value in filters.items():
            stmt = stmt.where(object_record_table.c.attributes[name].as_string() == value)
        return tuple(self.session.execute(stmt).scalars().all())

    def get(self, record_id: uuid.UUID) -> ObjectRecord | None:
        return self.session.get(ObjectRecord, record_id)

    def save(self, record: ObjectRecord) -> uuid.UUID:
        if record.id is None:
            record.id = uuid.uuid4()
        self.session.add(record)
        self.session.flush()
        return record.id


class SqlAlchemyFileRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def for_document(self, document_id: uuid.UUID) -> StoredFile | None:
        stmt = select(StoredFile).where(stored_file_table.c.document_id == document_id).limit(1)
        return self.session.execute(stmt).scalar_one_or_none()

    def save(self, stored_file: StoredFile) -> uuid.UUID:
        if stored_file.id is None:
            stored_file.id = uuid.uuid4()
        self.session.add(stored_file)
        self.session.flush()
        return stored_file.id
