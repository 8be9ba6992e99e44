"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class EntityType(StrEnum):
    """Discriminator for records held by the object repository."""

    CASE = "case"
    CASE_TYPE = "case_type"
    PROPERTY = "property"
    ROLE_TYPE = "role_type"
    DOCUMENT = "document"
    DOCUMENT_TYPE = "document_type"
    CASE_DOCUMENT = "case_document"


class MessageKind(StrEnum):
    """Inbound message kinds handled by the upsert coordinator."""

    CASE_IDENTIFICATION = "case_identification"
    DOCUMENT_IDENTIFICATION = "document_identification"
    CASE = "case"
    DOCUMENT = "document"
    DOCUMENT_RESPONSE = "document_response"
