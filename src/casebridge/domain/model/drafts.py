"""Typed drafts produced by inbound mappings, one per message kind.

Drafts describe the target shape before reconciliation: natural keys only,
no repository identities.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True, kw_only=True)
class Routing:
    """Routing data carried by the inbound stuurgegevens."""

    sender: str | None = None
    receiver: str | None = None
    reference: str | None = None
    cross_reference: str | None = None


@dataclass(slots=True, kw_only=True)
class CaseRegistrationDraft:
    identification: str
    attributes: dict[str, Any] = field(default_factory=dict[str, Any])
    routing: Routing = field(default_factory=Routing)


@dataclass(slots=True, kw_only=True)
class DocumentRegistrationDraft:
    identification: str
    attributes: dict[str, Any] = field(default_factory=dict[str, Any])
    routing: Routing = field(default_factory=Routing)


@dataclass(slots=True, kw_only=True)
class CaseTypeDraft:
    identification: str
    attributes: dict[str, Any] = field(default_factory=dict[str, Any])


@dataclass(slots=True, kw_only=True)
class PropertyDraft:
    name: str
    attributes: dict[str, Any] = field(default_factory=dict[str, Any])


@dataclass(slots=True, kw_only=True)
class RoleTypeDraft:
    generic_description: str
    attributes: dict[str, Any] = field(default_factory=dict[str, Any])


@dataclass(slots=True, kw_only=True)
class CasePropertyDraft:
    """A property value on a case; ``property`` is reconciled against the case type."""

    property: PropertyDraft
    value: str | None = None


@dataclass(slots=True, kw_only=True)
class RoleDraft:
    """A participant role on a case; ``role_type`` is reconciled against the case type."""

    role_type: RoleTypeDraft
    attributes: dict[str, Any] = field(default_factory=dict[str, Any])


@dataclass(slots=True, kw_only=True)
class CaseDraft:
    identification: str
    case_type: CaseTypeDraft | None = None
    properties: list[CasePropertyDraft] = field(default_factory=list["CasePropertyDraft"])
    roles: list[RoleDraft] = field(default_factory=list["RoleDraft"])
    attributes: dict[str, Any] = field(default_factory=dict[str, Any])
    routing: Routing = field(default_factory=Routing)


@dataclass(slots=True, kw_only=True)
class DocumentDraft:
    identification: str
    document_type_description: str | None = None
    title: str | None = None
    format: str | None = None
    content: str | None = None
    version: int | None = None
    attributes: dict[str, Any] = field(default_factory=dict[str, Any])

    def document_fields(self) -> dict[str, Any]:
        """Fields written onto the stored document.

        The type description and the version are left out: the version only
        changes when file content is stored.
        """
        fields: dict[str, Any] = dict(self.attributes)
        fields["identification"] = self.identification
        optional = {
            "title": self.title,
            "format": self.format,
            "content": self.content,
        }
        fields.update({name: value for name, value in optional.items() if value is not None})
        return fields


@dataclass(slots=True, kw_only=True)
class CaseDocumentDraft:
    case_identification: str
    document: DocumentDraft
    attributes: dict[str, Any] = field(default_factory=dict[str, Any])
    routing: Routing = field(default_factory=Routing)
