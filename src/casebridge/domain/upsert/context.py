"""Request-scoped state threaded through one message workflow."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from casebridge.domain.model import MessageKind, ObjectRecord, Routing


@dataclass(slots=True, kw_only=True)
class MessageContext:
    """Inbound message plus whatever the workflow stored while handling it."""

    kind: MessageKind
    body: Any
    record: ObjectRecord | None = None
    results: list[ObjectRecord] = field(default_factory=list["ObjectRecord"])


@dataclass(slots=True, kw_only=True)
class OutboundMessage:
    """Input of an outbound mapping: a stored shape and the routing to answer with."""

    record: dict[str, Any]
    routing: Routing


@dataclass(slots=True, kw_only=True)
class HandlerResult:
    """Status and payload ready for the response encoder."""

    status: int
    payload: dict[str, Any]
    record: ObjectRecord | None = None
    results: tuple[ObjectRecord, ...] = ()

    @property
    def ok(self) -> bool:
        return self.status < 400
