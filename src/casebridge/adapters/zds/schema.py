"""Pydantic models for inbound StUF-ZKN messages (decoded envelope bodies)."""

from __future__ import annotations

import logging
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

log = logging.getLogger(__name__)

type StufDate = str  # Format: YYYYMMDD


def _as_list(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, list):
        return [item for item in value if item is not None]
    return [value]


class ZdsBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)
    _logged_extra_keys: ClassVar[set[str]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = {key for key in extras if not key.startswith("@")}
        new_keys.difference_update(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        log.debug(
            "ZDS %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


class StufParty(ZdsBaseModel):
    organisatie: str | None = None
    applicatie: str | None = None
    administratie: str | None = None
    gebruiker: str | None = None

    @property
    def name(self) -> str | None:
        return self.applicatie or self.organisatie


class Stuurgegevens(ZdsBaseModel):
    berichtcode: str | None = None
    zender: StufParty | None = None
    ontvanger: StufParty | None = None
    referentienummer: str | None = None
    cross_refnummer: str | None = Field(default=None, alias="crossRefnummer")
    tijdstip_bericht: str | None = Field(default=None, alias="tijdstipBericht")
    entiteittype: str | None = None
    functie: str | None = None


class IdentificationRequest(ZdsBaseModel):
    """``genereerZaakIdentificatie_Di02`` and ``genereerDocumentIdentificatie_Di02``."""

    stuurgegevens: Stuurgegevens

    @model_validator(mode="after")
    def _require_reference(self) -> IdentificationRequest:
        if not self.stuurgegevens.referentienummer:
            raise ValueError("stuurgegevens.referentienummer is required")
        return self

    @property
    def reference(self) -> str:
        return self.stuurgegevens.referentienummer or ""


# Case ------------------------------------------------------------------------


class CaseTypeReference(ZdsBaseModel):
    code: str | None = None
    omschrijving: str | None = None


class CaseTypeRelation(ZdsBaseModel):
    gerelateerde: CaseTypeReference | None = None


class ExtraElement(ZdsBaseModel):
    naam: str = Field(alias="@naam")
    value: str | None = Field(default=None, alias="#")


class ExtraElements(ZdsBaseModel):
    extra_element: list[ExtraElement] = Field(default_factory=list, alias="extraElement")

    _wrap = field_validator("extra_element", mode="before")(_as_list)


class RoleRelation(ZdsBaseModel):
    gerelateerde: dict[str, Any] | None = None
    rol_toelichting: str | None = Field(default=None, alias="rolToelichting")


class CaseObject(ZdsBaseModel):
    identificatie: str
    omschrijving: str | None = None
    toelichting: str | None = None
    kenmerk: Any = None
    startdatum: StufDate | None = None
    registratiedatum: StufDate | None = None
    einddatum_gepland: StufDate | None = Field(default=None, alias="einddatumGepland")
    uiterlijke_einddatum: StufDate | None = Field(default=None, alias="uiterlijkeEinddatum")
    einddatum: StufDate | None = None
    archiefnominatie: str | None = None
    extra_elementen: ExtraElements | None = Field(default=None, alias="extraElementen")
    is_van: CaseTypeRelation | None = Field(default=None, alias="isVan")
    heeft_als_initiator: list[RoleRelation] = Field(
        default_factory=list, alias="heeftAlsInitiator"
    )
    heeft_als_belanghebbende: list[RoleRelation] = Field(
        default_factory=list, alias="heeftAlsBelanghebbende"
    )
    heeft_als_uitvoerende: list[RoleRelation] = Field(
        default_factory=list, alias="heeftAlsUitvoerende"
    )
    heeft_als_verantwoordelijke: list[RoleRelation] = Field(
        default_factory=list, alias="heeftAlsVerantwoordelijke"
    )

    _wrap = field_validator(
        "heeft_als_initiator",
        "heeft_als_belanghebbende",
        "heeft_als_uitvoerende",
        "heeft_als_verantwoordelijke",
        mode="before",
    )(_as_list)


class CaseMessage(ZdsBaseModel):
    """``zakLk01``: the case to populate, a single object."""

    stuurgegevens: Stuurgegevens
    parameters: dict[str, Any] | None = None
    object: CaseObject

    @field_validator("object", mode="before")
    @classmethod
    def _first_object(cls, value: Any) -> Any:
        if isinstance(value, list) and value:
            return value[0]
        return value


# Document --------------------------------------------------------------------


class DocumentContent(ZdsBaseModel):
    value: str | None = Field(default=None, alias="#")
    bestandsnaam: str | None = Field(default=None, alias="@bestandsnaam")
    content_type: str | None = Field(default=None, alias="@contentType")


class CaseReference(ZdsBaseModel):
    identificatie: str


class CaseRelation(ZdsBaseModel):
    gerelateerde: CaseReference


class DocumentObject(ZdsBaseModel):
    identificatie: str
    document_type_description: str | None = Field(default=None, alias="dct.omschrijving")
    creatiedatum: StufDate | None = None
    ontvangstdatum: StufDate | None = None
    verzenddatum: StufDate | None = None
    titel: str | None = None
    beschrijving: str | None = None
    formaat: str | None = None
    taal: str | None = None
    versie: str | None = None
    status: str | None = None
    vertrouwelijk_aanduiding: str | None = Field(default=None, alias="vertrouwelijkAanduiding")
    auteur: str | None = None
    link: str | None = None
    inhoud: DocumentContent | None = None
    is_relevant_voor: CaseRelation = Field(alias="isRelevantVoor")

    @field_validator("inhoud", mode="before")
    @classmethod
    def _wrap_text(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"#": value}
        return value


class DocumentMessage(ZdsBaseModel):
    """``edcLk01``: a document related to an existing case."""

    stuurgegevens: Stuurgegevens
    parameters: dict[str, Any] | None = None
    object: DocumentObject

    @field_validator("object", mode="before")
    @classmethod
    def _first_object(cls, value: Any) -> Any:
        if isinstance(value, list) and value:
            return value[0]
        return value
