"""Builders for inbound ZDS envelopes and drafts used across tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

from casebridge.domain.model import (
    CaseDocumentDraft,
    CaseDraft,
    CasePropertyDraft,
    CaseTypeDraft,
    DocumentDraft,
    PropertyDraft,
    RoleDraft,
    RoleTypeDraft,
    Routing,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

ENVELOPE = """<?xml version="1.0" encoding="UTF-8"?>
<SOAP-ENV:Envelope xmlns:SOAP-ENV="http://schemas.xmlsoap.org/soap/envelope/"
    xmlns:ZKN="http://www.egem.nl/StUF/sector/zkn/0310"
    xmlns:StUF="http://www.egem.nl/StUF/StUF0301"
    xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"
    xmlns:xmime="http://www.w3.org/2005/05/xmlmime">
  <SOAP-ENV:Body>
{body}
  </SOAP-ENV:Body>
</SOAP-ENV:Envelope>
"""

ROUTING = Routing(sender="DMS", receiver="ZDS", reference="ref-1")


def stuurgegevens(berichtcode: str, *, reference: str = "ref-1") -> str:
    return f"""<ZKN:stuurgegevens>
      <StUF:berichtcode>{berichtcode}</StUF:berichtcode>
      <StUF:zender><StUF:organisatie>0000</StUF:organisatie><StUF:applicatie>DMS</StUF:applicatie></StUF:zender>
      <StUF:ontvanger><StUF:organisatie>0000</StUF:organisatie><StUF:applicatie>ZDS</StUF:applicatie></StUF:ontvanger>
      <StUF:referentienummer>{reference}</StUF:referentienummer>
      <StUF:tijdstipBericht>20240102030405</StUF:tijdstipBericht>
    </ZKN:stuurgegevens>"""


def case_identification_request(reference: str = "ZAAK-1") -> str:
    return ENVELOPE.format(
        body=f"""<ZKN:genereerZaakIdentificatie_Di02>
    {stuurgegevens("Di02", reference=reference)}
  </ZKN:genereerZaakIdentificatie_Di02>"""
    )


def document_identification_request(reference: str = "DOC-1") -> str:
    return ENVELOPE.format(
        body=f"""<ZKN:genereerDocumentIdentificatie_Di02>
    {stuurgegevens("Di02", reference=reference)}
  </ZKN:genereerDocumentIdentificatie_Di02>"""
    )


def case_update(
    identification: str = "ZAAK-1",
    *,
    case_type: str | None = "B333",
    properties: Sequence[tuple[str, str]] = (("kleur", "blauw"),),
    initiator: str | None = "123456782",
) -> str:
    extra = "".join(
        f'<StUF:extraElement naam="{name}">{value}</StUF:extraElement>'
        for name, value in properties
    )
    is_van = (
        f"""<ZKN:isVan StUF:entiteittype="ZAKZKT">
        <ZKN:gerelateerde StUF:entiteittype="ZKT">
          <ZKN:omschrijving>Melding openbare ruimte</ZKN:omschrijving>
          <ZKN:code>{case_type}</ZKN:code>
        </ZKN:gerelateerde>
      </ZKN:isVan>"""
        if case_type is not None
        else ""
    )
    heeft_als_initiator = (
        f"""<ZKN:heeftAlsInitiator StUF:entiteittype="ZAKBTRINI">
        <ZKN:gerelateerde>
          <ZKN:natuurlijkPersoon StUF:entiteittype="NPS">
            <BG:inp.bsn xmlns:BG="http://www.egem.nl/StUF/sector/bg/0310">{initiator}</BG:inp.bsn>
          </ZKN:natuurlijkPersoon>
        </ZKN:gerelateerde>
      </ZKN:heeftAlsInitiator>"""
        if initiator is not None
        else ""
    )
    return ENVELOPE.format(
        body=f"""<ZKN:zakLk01>
    {stuurgegevens("Lk01")}
    <ZKN:parameters><StUF:mutatiesoort>T</StUF:mutatiesoort></ZKN:parameters>
    <ZKN:object StUF:entiteittype="ZAK" StUF:verwerkingssoort="T">
      <ZKN:identificatie>{identification}</ZKN:identificatie>
      <ZKN:omschrijving>Losliggende stoeptegel</ZKN:omschrijving>
      <ZKN:toelichting xsi:nil="true"/>
      <ZKN:startdatum>20240102</ZKN:startdatum>
      <ZKN:registratiedatum>20240103</ZKN:registratiedatum>
      <StUF:extraElementen>{extra}</StUF:extraElementen>
      {is_van}
      {heeft_als_initiator}
    </ZKN:object>
  </ZKN:zakLk01>"""
    )


def document_update(
    identification: str = "DOC-1",
    *,
    case_identification: str = "ZAAK-1",
    document_type: str | None = "Foto",
    content: str | None = "aGVsbG8=",
    version: str | None = None,
) -> str:
    document_type_element = (
        f"<ZKN:dct.omschrijving>{document_type}</ZKN:dct.omschrijving>"
        if document_type is not None
        else ""
    )
    version_element = f"<ZKN:versie>{version}</ZKN:versie>" if version is not None else ""
    content_element = (
        f'<ZKN:inhoud StUF:bestandsnaam="foto.png" xmime:contentType="image/png">{content}</ZKN:inhoud>'
        if content is not None
        else ""
    )
    return ENVELOPE.format(
        body=f"""<ZKN:edcLk01>
    {stuurgegevens("Lk01")}
    <ZKN:object StUF:entiteittype="EDC" StUF:verwerkingssoort="T">
      <ZKN:identificatie>{identification}</ZKN:identificatie>
      {document_type_element}
      <ZKN:creatiedatum>20240104</ZKN:creatiedatum>
      <ZKN:titel>Foto van de stoep</ZKN:titel>
      <ZKN:formaat>image/png</ZKN:formaat>
      <ZKN:taal>nld</ZKN:taal>
      {version_element}
      <ZKN:vertrouwelijkAanduiding>OPENBAAR</ZKN:vertrouwelijkAanduiding>
      <ZKN:auteur>Melder</ZKN:auteur>
      {content_element}
      <ZKN:isRelevantVoor StUF:entiteittype="EDCZAK">
        <ZKN:gerelateerde StUF:entiteittype="ZAK">
          <ZKN:identificatie>{case_identification}</ZKN:identificatie>
        </ZKN:gerelateerde>
      </ZKN:isRelevantVoor>
    </ZKN:object>
  </ZKN:edcLk01>"""
    )


def make_case_draft(
    identification: str = "ZAAK-1",
    *,
    case_type: str | None = "B333",
    properties: Sequence[tuple[str, str]] = (("kleur", "blauw"),),
    role_types: Sequence[str] = ("initiator",),
) -> CaseDraft:
    return CaseDraft(
        identification=identification,
        case_type=(
            CaseTypeDraft(identification=case_type, attributes={"description": "Melding"})
            if case_type is not None
            else None
        ),
        properties=[
            CasePropertyDraft(property=PropertyDraft(name=name), value=value)
            for name, value in properties
        ],
        roles=[
            RoleDraft(
                role_type=RoleTypeDraft(generic_description=description),
                attributes={"subject_type": "natuurlijk_persoon"},
            )
            for description in role_types
        ],
        attributes={"description": "Losliggende stoeptegel"},
        routing=ROUTING,
    )


def make_document_draft(
    identification: str = "DOC-1",
    *,
    case_identification: str = "ZAAK-1",
    document_type: str | None = "Foto",
    content: str | None = "aGVsbG8=",
    version: int | None = None,
    title: str | None = "Foto van de stoep",
    file_format: str | None = "image/png",
) -> CaseDocumentDraft:
    return CaseDocumentDraft(
        case_identification=case_identification,
        document=DocumentDraft(
            identification=identification,
            document_type_description=document_type,
            title=title,
            format=file_format,
            content=content,
            version=version,
        ),
        routing=ROUTING,
    )
