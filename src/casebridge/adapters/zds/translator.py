"""Translate decoded ZDS messages into drafts and stored records into replies.

Inbound functions take the decoded body of the message element; outbound
functions take an ``OutboundMessage`` and return the dict handed to the
envelope encoder (``@`` keys are attributes).
"""

from __future__ import annotations

import re
from datetime import UTC, datetime
from functools import partial
from logging import getLogger
from typing import TYPE_CHECKING, Any, Final

from casebridge.adapters.mapping import MappingRegistry
from casebridge.domain.model import (
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
from casebridge.domain.upsert import (
    CASE_IDENTIFICATION_MAPPINGS,
    CASE_MAPPINGS,
    DOCUMENT_IDENTIFICATION_MAPPINGS,
    DOCUMENT_MAPPINGS,
)

from .schema import (
    CaseMessage,
    CaseObject,
    DocumentMessage,
    IdentificationRequest,
    RoleRelation,
    Stuurgegevens,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from casebridge.domain.upsert import OutboundMessage

log = getLogger(__name__)

NAMESPACES: Final[dict[str, str]] = {
    "@xmlns:StUF": "http://www.egem.nl/StUF/StUF0301",
    "@xmlns:ZKN": "http://www.egem.nl/StUF/sector/zkn/0310",
}

ROLE_RELATIONS: Final[dict[str, str]] = {
    "heeft_als_initiator": "initiator",
    "heeft_als_belanghebbende": "belanghebbende",
    "heeft_als_uitvoerende": "behandelaar",
    "heeft_als_verantwoordelijke": "zaakcoordinator",
}

SUBJECT_TYPES: Final[dict[str, str]] = {
    "natuurlijkPersoon": "natuurlijk_persoon",
    "nietNatuurlijkPersoon": "niet_natuurlijk_persoon",
    "vestiging": "vestiging",
    "organisatorischeEenheid": "organisatorische_eenheid",
    "medewerker": "medewerker",
}

_STUF_DATE = re.compile(r"^(\d{4})(\d{2})(\d{2})")

type Clock = Callable[[], datetime]


# Inbound ----------------------------------------------------------------------


def routing_from(stuurgegevens: Stuurgegevens) -> Routing:
    return Routing(
        sender=stuurgegevens.zender.name if stuurgegevens.zender else None,
        receiver=stuurgegevens.ontvanger.name if stuurgegevens.ontvanger else None,
        reference=stuurgegevens.referentienummer,
        cross_reference=stuurgegevens.cross_refnummer,
    )


def to_case_registration(body: dict[str, Any]) -> CaseRegistrationDraft:
    """``genereerZaakIdentificatie_Di02``: the reference number becomes the case id."""

    request = IdentificationRequest.model_validate(body)
    return CaseRegistrationDraft(
        identification=request.reference,
        routing=routing_from(request.stuurgegevens),
    )


def to_document_registration(body: dict[str, Any]) -> DocumentRegistrationDraft:
    request = IdentificationRequest.model_validate(body)
    return DocumentRegistrationDraft(
        identification=request.reference,
        routing=routing_from(request.stuurgegevens),
    )


def to_case(body: dict[str, Any]) -> CaseDraft:
    message = CaseMessage.model_validate(body)
    case = message.object
    return CaseDraft(
        identification=case.identificatie,
        case_type=_case_type(case),
        properties=_case_properties(case),
        roles=_roles(case),
        attributes=_present(
            description=case.omschrijving,
            explanation=case.toelichting,
            start_date=iso_date(case.startdatum),
            registration_date=iso_date(case.registratiedatum),
            planned_end_date=iso_date(case.einddatum_gepland),
            final_end_date=iso_date(case.uiterlijke_einddatum),
            end_date=iso_date(case.einddatum),
            archive_nomination=case.archiefnominatie,
        ),
        routing=routing_from(message.stuurgegevens),
    )


def to_case_document(body: dict[str, Any]) -> CaseDocumentDraft:
    message = DocumentMessage.model_validate(body)
    document = message.object
    content = document.inhoud
    return CaseDocumentDraft(
        case_identification=document.is_relevant_voor.gerelateerde.identificatie,
        document=DocumentDraft(
            identification=document.identificatie,
            document_type_description=document.document_type_description,
            title=document.titel,
            format=document.formaat or (content.content_type if content else None),
            content=content.value if content else None,
            version=parse_version(document.versie),
            attributes=_present(
                description=document.beschrijving,
                creation_date=iso_date(document.creatiedatum),
                received_date=iso_date(document.ontvangstdatum),
                sent_date=iso_date(document.verzenddatum),
                language=document.taal,
                status=document.status,
                confidentiality=(
                    document.vertrouwelijk_aanduiding.lower()
                    if document.vertrouwelijk_aanduiding
                    else None
                ),
                author=document.auteur,
                link=document.link,
                file_name=content.bestandsnaam if content else None,
            ),
        ),
        attributes=_present(title=document.titel, description=document.beschrijving),
        routing=routing_from(message.stuurgegevens),
    )


def _case_type(case: CaseObject) -> CaseTypeDraft | None:
    reference = case.is_van.gerelateerde if case.is_van else None
    if reference is None or not reference.code:
        return None
    return CaseTypeDraft(
        identification=reference.code,
        attributes=_present(description=reference.omschrijving),
    )


def _case_properties(case: CaseObject) -> list[CasePropertyDraft]:
    if case.extra_elementen is None:
        return []
    return [
        CasePropertyDraft(
            property=PropertyDraft(name=element.naam, attributes={"definition": element.naam}),
            value=element.value,
        )
        for element in case.extra_elementen.extra_element
    ]


def _roles(case: CaseObject) -> list[RoleDraft]:
    roles: list[RoleDraft] = []
    for field_name, generic_description in ROLE_RELATIONS.items():
        relations: list[RoleRelation] = getattr(case, field_name)
        roles.extend(
            RoleDraft(
                role_type=RoleTypeDraft(
                    generic_description=generic_description,
                    attributes={"description": generic_description},
                ),
                attributes=_role_attributes(relation),
            )
            for relation in relations
        )
    return roles


def _role_attributes(relation: RoleRelation) -> dict[str, Any]:
    subject_type: str | None = None
    subject: Any = None
    for key, value in (relation.gerelateerde or {}).items():
        if key in SUBJECT_TYPES:
            subject_type = SUBJECT_TYPES[key]
            subject = value
            break
    return _present(
        subject_type=subject_type,
        subject=subject,
        explanation=relation.rol_toelichting,
    )


def iso_date(value: str | None) -> str | None:
    """``YYYYMMDD[...]`` to ``YYYY-MM-DD``; other values pass through."""

    if value is None:
        return None
    match = _STUF_DATE.match(value)
    if match is None:
        return value
    year, month, day = match.groups()
    return f"{year}-{month}-{day}"


def parse_version(value: str | None) -> int | None:
    if value is None or not value.strip().isdigit():
        return None
    return int(value.strip())


def _present(**values: Any) -> dict[str, Any]:
    return {name: value for name, value in values.items() if value is not None}


# Outbound ---------------------------------------------------------------------


def stuurgegevens_reply(
    message: OutboundMessage,
    *,
    berichtcode: str,
    sender: str,
    clock: Clock,
    functie: str | None = None,
) -> dict[str, Any]:
    """Reply routing: sender and receiver swapped, inbound reference as cross reference."""

    routing = message.routing
    return {
        "StUF:berichtcode": berichtcode,
        "StUF:zender": {"StUF:applicatie": routing.receiver or sender},
        "StUF:ontvanger": {"StUF:applicatie": routing.sender},
        "StUF:referentienummer": message.record.get("id") or routing.reference,
        "StUF:tijdstipBericht": clock().strftime("%Y%m%d%H%M%S"),
        "StUF:crossRefnummer": routing.reference,
        "StUF:functie": functie,
    }


def case_identification_reply(
    message: OutboundMessage, *, sender: str, clock: Clock
) -> dict[str, Any]:
    return _envelope(
        "ZKN:genereerZaakIdentificatie_Du02",
        {
            "ZKN:stuurgegevens": stuurgegevens_reply(
                message,
                berichtcode="Du02",
                functie="genereerZaakidentificatie",
                sender=sender,
                clock=clock,
            ),
            "ZKN:zaak": {
                "@StUF:entiteittype": "ZAK",
                "@StUF:functie": "entiteit",
                "ZKN:identificatie": message.record.get("identification"),
            },
        },
    )


def document_identification_reply(
    message: OutboundMessage, *, sender: str, clock: Clock
) -> dict[str, Any]:
    return _envelope(
        "ZKN:genereerDocumentIdentificatie_Du02",
        {
            "ZKN:stuurgegevens": stuurgegevens_reply(
                message,
                berichtcode="Du02",
                functie="genereerDocumentidentificatie",
                sender=sender,
                clock=clock,
            ),
            "ZKN:document": {
                "@StUF:entiteittype": "EDC",
                "@StUF:functie": "entiteit",
                "ZKN:identificatie": message.record.get("identification"),
            },
        },
    )


def acknowledgement(message: OutboundMessage, *, sender: str, clock: Clock) -> dict[str, Any]:
    """``Bv03``: plain acknowledgement of a processed update message."""

    return _envelope(
        "StUF:Bv03Bericht",
        {
            "StUF:stuurgegevens": stuurgegevens_reply(
                message,
                berichtcode="Bv03",
                sender=sender,
                clock=clock,
            ),
        },
    )


def _envelope(message_name: str, content: dict[str, Any]) -> dict[str, Any]:
    return {**NAMESPACES, "SOAP-ENV:Body": {message_name: content}}


def _utc_now() -> datetime:
    return datetime.now(UTC)


def zds_mapping_registry(*, sender: str, clock: Clock = _utc_now) -> MappingRegistry:
    """Registry holding every mapping the upsert workflows refer to."""

    log.debug("Registering ZDS mappings for sender %s", sender)
    return MappingRegistry.of(
        {
            CASE_IDENTIFICATION_MAPPINGS.inbound: to_case_registration,
            CASE_IDENTIFICATION_MAPPINGS.outbound: partial(
                case_identification_reply, sender=sender, clock=clock
            ),
            DOCUMENT_IDENTIFICATION_MAPPINGS.inbound: to_document_registration,
            DOCUMENT_IDENTIFICATION_MAPPINGS.outbound: partial(
                document_identification_reply, sender=sender, clock=clock
            ),
            CASE_MAPPINGS.inbound: to_case,
            CASE_MAPPINGS.outbound: partial(acknowledgement, sender=sender, clock=clock),
            DOCUMENT_MAPPINGS.inbound: to_case_document,
            DOCUMENT_MAPPINGS.outbound: partial(acknowledgement, sender=sender, clock=clock),
        }
    )
