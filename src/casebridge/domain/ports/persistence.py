"""Ports for the generic object repository."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping
    from uuid import UUID

    from casebridge.domain.model import EntityType, ObjectRecord, StoredFile


type SearchFilter = Mapping[str, str]


@runtime_checkable
class ObjectRepository(Protocol):
    """Repository gateway for typed object records.

    ``search`` returns matches in no meaningful order; callers must treat more
    than one result as ambiguous. ``save`` creates a record without an id and
    updates one that already carries an id.
    """

    def search(
        self,
        entity_type: EntityType,
        filters: SearchFilter,
    ) -> tuple[ObjectRecord, ...]: ...

    def get(self, record_id: UUID) -> ObjectRecord | None: ...

    def save(self, record: ObjectRecord) -> UUID: ...


@runtime_checkable
class FileRepository(Protocol):
    """Storage for binary content attached to documents."""

    def for_document(self, document_id: UUID) -> StoredFile | None: ...

    def save(self, stored_file: StoredFile) -> UUID: ...
