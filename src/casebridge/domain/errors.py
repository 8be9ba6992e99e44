"""Business outcome errors raised by the reconciliation engine.

Every ``GatewayError`` is recovered by the upsert coordinator into a 400 wire
response. Anything else is an infrastructure fault and propagates.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from casebridge.domain.model import EntityType


class GatewayError(Exception):
    """Base class for business outcomes reported back to the sender."""

    status_code: ClassVar[int] = 400

    def __init__(
        self,
        message: str,
        *,
        entity_type: EntityType | None = None,
        key: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.entity_type = entity_type
        self.key = key


class DuplicateEntityError(GatewayError):
    """Identification registration found an existing entity."""


class NotFoundError(GatewayError):
    """A record required to pre-exist could not be found."""


class AmbiguousMatchError(GatewayError):
    """More than one record matched a natural key that must be singular."""

    def __init__(
        self,
        message: str,
        *,
        count: int,
        entity_type: EntityType | None = None,
        key: str | None = None,
    ) -> None:
        super().__init__(message, entity_type=entity_type, key=key)
        self.count = count


class InvalidContentError(GatewayError):
    """Inbound document content could not be decoded."""
