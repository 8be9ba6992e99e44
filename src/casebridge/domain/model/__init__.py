"""Public domain model surface."""

from __future__ import annotations

from casebridge.domain.model.drafts import (
    CaseDocumentDraft,
    CaseDraft,
    CasePropertyDraft,
    CaseRegistrationDraft,
    CaseTypeDraft,
    DocumentDraft,
    DocumentRegistrationDraft,
    PropertyDraft,
    RoleDraft,
    RoleTypeDraft,
    Routing,
)
from casebridge.domain.model.enums import EntityType, MessageKind
from casebridge.domain.model.records import (
    Attributes,
    ObjectRecord,
    StoredFile,
    UnsavedRecordError,
)

__all__ = [  # noqa: RUF022
    # records
    "Attributes",
    "ObjectRecord",
    "StoredFile",
    "UnsavedRecordError",
    # drafts
    "CaseDocumentDraft",
    "CaseDraft",
    "CasePropertyDraft",
    "CaseRegistrationDraft",
    "CaseTypeDraft",
    "DocumentDraft",
    "DocumentRegistrationDraft",
    "PropertyDraft",
    "RoleDraft",
    "RoleTypeDraft",
    "Routing",
    # enums
    "EntityType",
    "MessageKind",
]
