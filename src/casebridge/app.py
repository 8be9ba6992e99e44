"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from casebridge.adapters.sqlalchemy.migrations import upgrade_head
from casebridge.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyGatewayUnitOfWork,
    is_started,
    startup,
)
from casebridge.adapters.zds import (
    EnvelopeError,
    decode_envelope,
    encode_response,
    zds_mapping_registry,
)
from casebridge.config import get_database_config, get_gateway_config
from casebridge.domain.model import MessageKind
from casebridge.domain.ports.unit_of_work import GatewayUnitOfWork
from casebridge.domain.reconciliation import HeldKeys, NaturalKeyLocks
from casebridge.domain.upsert import EntityUpsertCoordinator, MessageContext

if TYPE_CHECKING:
    from casebridge.adapters.zds import WireResponse
    from casebridge.config import GatewayConfig
    from casebridge.domain.ports import Mapper

type UnitOfWorkFactory = Callable[[], GatewayUnitOfWork]

log = getLogger(__name__)

_LOCKS = NaturalKeyLocks()


def handle_message(
    raw_xml: str | bytes,
    kind: MessageKind | str | None = None,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    mapper: Mapper | None = None,
    config: GatewayConfig | None = None,
    locks: NaturalKeyLocks | None = None,
) -> WireResponse:
    """Process one inbound ZDS message and return the encoded reply.

    The message kind is detected from the SOAP body unless ``kind`` is given.
    All writes for the message share one unit of work: committed once the
    workflow returns (also for 400 replies), rolled back when it raises.
    Natural keys locked along the way stay locked until then.
    """

    gateway_config = config or get_gateway_config()
    decoded = decode_envelope(raw_xml)
    message_kind = MessageKind(kind) if kind is not None else decoded.detected_kind
    if message_kind is None:
        raise EnvelopeError(f"Unsupported message type: {decoded.root}")

    if unit_of_work_factory is None:
        if not is_started():
            startup()
        unit_of_work_factory = SqlAlchemyGatewayUnitOfWork
    effective_mapper = (
        mapper if mapper is not None else zds_mapping_registry(sender=gateway_config.sender)
    )

    log.info("Handling %s message (%s)", message_kind, decoded.root)
    context = MessageContext(kind=message_kind, body=decoded.body)
    # key locks outlive the unit of work: released only after commit or rollback
    with (
        HeldKeys(locks if locks is not None else _LOCKS) as held,
        unit_of_work_factory() as uow,
    ):
        coordinator = EntityUpsertCoordinator(
            mapper=effective_mapper,
            repositories=uow.repositories,
            download_endpoint=gateway_config.download_endpoint,
            policy=gateway_config.policy,
            file_case_types=gateway_config.file_case_types,
            locks=held,
        )
        result = coordinator.handle(context)
        uow.commit()

    log.info("Finished %s message with status %s", message_kind, result.status)
    return encode_response(result.payload, result.status)


def initialize_database(database_uri: str | None = None) -> str:
    """Apply all migrations to the configured database and return its URI."""

    uri = database_uri or get_database_config().uri
    log.info("Upgrading database schema at %s", uri)
    upgrade_head(database_uri=uri)
    return uri
