"""Entity upsert workflows for inbound case-management messages."""

from __future__ import annotations

from .context import HandlerResult, MessageContext, OutboundMessage
from .coordinator import (
    CASE_IDENTIFICATION_MAPPINGS,
    CASE_MAPPINGS,
    DEFAULT_FILE_CASE_TYPES,
    DOCUMENT_IDENTIFICATION_MAPPINGS,
    DOCUMENT_MAPPINGS,
    EntityUpsertCoordinator,
    WorkflowMappings,
)

__all__ = [
    "CASE_IDENTIFICATION_MAPPINGS",
    "CASE_MAPPINGS",
    "DEFAULT_FILE_CASE_TYPES",
    "DOCUMENT_IDENTIFICATION_MAPPINGS",
    "DOCUMENT_MAPPINGS",
    "EntityUpsertCoordinator",
    "HandlerResult",
    "MessageContext",
    "OutboundMessage",
    "WorkflowMappings",
]
