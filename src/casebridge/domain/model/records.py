"""Records stored by the object repository.

Records are plain dataclasses; persistence adapters map them imperatively.
References between records are stored as the referenced id in string form so
compound natural keys stay simple equality filters.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping
    from uuid import UUID

    from casebridge.domain.model.enums import EntityType


type Attributes = dict[str, Any]


class UnsavedRecordError(RuntimeError):
    """Raised when a reference is requested for a record without an identity."""


@dataclass(eq=False, kw_only=True)
class ObjectRecord:
    """One node of the object graph.

    ``id`` stays ``None`` until the repository assigns an identity on save.
    """

    entity_type: EntityType
    attributes: Attributes = field(default_factory=dict)
    id: UUID | None = None

    @property
    def is_persisted(self) -> bool:
        return self.id is not None

    @property
    def ref(self) -> str:
        """Reference value other records use to point at this one."""
        if self.id is None:
            raise UnsavedRecordError(f"{self.entity_type} record has no identity yet")
        return str(self.id)

    def get(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)

    def hydrate(self, values: Mapping[str, Any]) -> None:
        """Merge ``values`` into the attributes, replacing the mapping as a whole."""
        merged = dict(self.attributes)
        merged.update(values)
        self.attributes = merged

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"id": None if self.id is None else str(self.id)}
        payload.update(self.attributes)
        return payload


@dataclass(eq=False, kw_only=True)
class StoredFile:
    """Binary content attached to a document record (base64 encoded)."""

    document_id: UUID
    name: str | None = None
    mime_type: str = "application/pdf"
    extension: str = ""
    size: int = 0
    content: str = ""
    id: UUID | None = None
