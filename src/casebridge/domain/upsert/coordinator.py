"""Per-message-kind workflows turning mapped drafts into linked records.

Each workflow is an explicit decision sequence:
- map the inbound body to a typed draft
- resolve the primary entity by natural key
- reuse, create, or reject, reconciling types on the way
- map the stored shape to the outbound payload

Business outcomes (``GatewayError``) become 400 responses here. Repository,
mapper and configuration faults are not caught.
"""

from __future__ import annotations

import logging
from contextlib import nullcontext
from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING, Any, Final
from uuid import UUID

from casebridge.domain.errors import (
    AmbiguousMatchError,
    DuplicateEntityError,
    GatewayError,
    NotFoundError,
)
from casebridge.domain.model import (
    CaseDocumentDraft,
    CaseDraft,
    CaseRegistrationDraft,
    DocumentRegistrationDraft,
    EntityType,
    MessageKind,
    ObjectRecord,
)
from casebridge.domain.reconciliation import (
    DEFAULT_FILE_CASE_TYPES,
    AmbiguousResolution,
    FileMaterializer,
    IdentityResolver,
    LinkPolicy,
    NaturalKey,
    ReconciliationPolicy,
    TypeReconciler,
    UniqueResolution,
)

from .context import HandlerResult, OutboundMessage

if TYPE_CHECKING:
    from collections.abc import Callable
    from contextlib import AbstractContextManager

    from casebridge.domain.model import Routing
    from casebridge.domain.ports import GatewayRepositories, Mapper
    from casebridge.domain.reconciliation import (
        CaseTypeReconciliation,
        DownloadEndpoint,
        KeyGuard,
    )

    from .context import MessageContext

log = logging.getLogger(__name__)

SUCCESS: Final[int] = 200


@dataclass(frozen=True, slots=True)
class WorkflowMappings:
    """Mapping references used by one workflow."""

    inbound: str
    outbound: str


CASE_IDENTIFICATION_MAPPINGS = WorkflowMappings(
    inbound="zds.zdsZaakIdToZgwZaak",
    outbound="zds.zgwZaakToDu02",
)
DOCUMENT_IDENTIFICATION_MAPPINGS = WorkflowMappings(
    inbound="zds.zdsDocumentIdToZgwDocument",
    outbound="zds.zgwDocumentToDu02",
)
CASE_MAPPINGS = WorkflowMappings(
    inbound="zds.zdsZaakToZgwZaak",
    outbound="zds.zgwZaakToBv03",
)
DOCUMENT_MAPPINGS = WorkflowMappings(
    inbound="zds.zdsDocumentToZgwDocument",
    outbound="zds.zgwDocumentToBv03",
)


@dataclass(slots=True)
class EntityUpsertCoordinator:
    """Run one inbound message through its workflow against one set of repositories."""

    mapper: Mapper
    repositories: GatewayRepositories
    download_endpoint: Callable[[], DownloadEndpoint]
    policy: ReconciliationPolicy = field(default_factory=ReconciliationPolicy)
    file_case_types: frozenset[str] = DEFAULT_FILE_CASE_TYPES
    locks: KeyGuard | None = None
    today: Callable[[], date] = date.today
    _resolver: IdentityResolver = field(init=False)
    _types: TypeReconciler = field(init=False)

    def __post_init__(self) -> None:
        self._resolver = IdentityResolver(self.repositories.objects)
        self._types = TypeReconciler(
            self._resolver,
            self.repositories.objects,
            nested_ambiguity=self.policy.nested_ambiguity,
            locks=self.locks,
            today=self.today,
        )

    def handle(self, context: MessageContext) -> HandlerResult:
        """Dispatch ``context`` to its workflow and turn business errors into 400s."""

        workflows: dict[MessageKind, Callable[[MessageContext], HandlerResult]] = {
            MessageKind.CASE_IDENTIFICATION: self.register_case,
            MessageKind.DOCUMENT_IDENTIFICATION: self.register_document,
            MessageKind.CASE: self.populate_case,
            MessageKind.DOCUMENT: self.populate_document,
            MessageKind.DOCUMENT_RESPONSE: self.respond_document,
        }
        workflow = workflows[context.kind]
        try:
            return workflow(context)
        except GatewayError as exc:
            log.warning("Rejected %s message: %s", context.kind, exc.message)
            return HandlerResult(status=exc.status_code, payload={"Error": exc.message})

    # Identification registration ----------------------------------------------

    def register_case(self, context: MessageContext) -> HandlerResult:
        log.info("Handling create case identification")
        draft: CaseRegistrationDraft = self.mapper.transform(
            CASE_IDENTIFICATION_MAPPINGS.inbound, context.body
        )
        record = self._register(
            EntityType.CASE,
            draft.identification,
            draft.attributes,
            label="case",
        )
        context.record = record
        return self._respond(CASE_IDENTIFICATION_MAPPINGS.outbound, record, draft.routing)

    def register_document(self, context: MessageContext) -> HandlerResult:
        log.info("Handling create document identification")
        draft: DocumentRegistrationDraft = self.mapper.transform(
            DOCUMENT_IDENTIFICATION_MAPPINGS.inbound, context.body
        )
        record = self._register(
            EntityType.DOCUMENT,
            draft.identification,
            draft.attributes,
            label="document",
        )
        context.record = record
        return self._respond(DOCUMENT_IDENTIFICATION_MAPPINGS.outbound, record, draft.routing)

    def _register(
        self,
        entity_type: EntityType,
        identification: str,
        attributes: dict[str, Any],
        *,
        label: str,
    ) -> ObjectRecord:
        key = NaturalKey.of(entity_type, identification=identification)
        with self._guard(key):
            resolution = self._resolver.resolve(key)
            if isinstance(resolution, (UniqueResolution, AmbiguousResolution)):
                raise DuplicateEntityError(
                    f"The {label} with id {identification} already exists",
                    entity_type=entity_type,
                    key=identification,
                )
            log.debug("Creating new %s with identifier %s", label, identification)
            record = ObjectRecord(
                entity_type=entity_type,
                attributes={**attributes, "identification": identification},
            )
            self.repositories.objects.save(record)
        log.info("Created %s with identifier %s", label, identification)
        return record

    # Case population ----------------------------------------------------------

    def populate_case(self, context: MessageContext) -> HandlerResult:
        log.info("Populate case")
        draft: CaseDraft = self.mapper.transform(CASE_MAPPINGS.inbound, context.body)
        if draft.case_type is None:
            raise NotFoundError(
                f"The case with id {draft.identification} has no case type",
                entity_type=EntityType.CASE_TYPE,
                key=draft.identification,
            )

        # read-only, so a missing or ambiguous case leaves the case type untouched
        case = self._resolver.require_unique(
            NaturalKey.of(EntityType.CASE, identification=draft.identification),
            missing=f"The case with id {draft.identification} does not exist",
            ambiguous=f"More than one case exists with id {draft.identification}",
        )

        reconciliation = self._types.reconcile_case_type(
            draft.case_type,
            properties=[item.property for item in draft.properties],
            role_types=[item.role_type for item in draft.roles],
        )
        if reconciliation.skipped:
            log.warning(
                "Case %s populated without %s ambiguous type entries: %s",
                draft.identification,
                len(reconciliation.skipped),
                ", ".join(str(key) for key in reconciliation.skipped),
            )
        log.debug(
            "Case %s uses %s case type %s",
            draft.identification,
            "new" if reconciliation.created else "existing",
            draft.case_type.identification,
        )
        log.debug("Populating case with identification %s", draft.identification)
        case.hydrate(_case_fields(draft, reconciliation))
        self.repositories.objects.save(case)
        log.info("Populated case with identification %s", draft.identification)

        context.record = case
        return self._respond(CASE_MAPPINGS.outbound, case, draft.routing)

    # Document population ------------------------------------------------------

    def populate_document(self, context: MessageContext) -> HandlerResult:
        log.info("Populating document")
        draft: CaseDocumentDraft = self.mapper.transform(DOCUMENT_MAPPINGS.inbound, context.body)
        document_draft = draft.document

        case = self._resolver.require_unique(
            NaturalKey.of(EntityType.CASE, identification=draft.case_identification),
            missing=f"The case with id {draft.case_identification} does not exist",
            ambiguous=f"More than one case exists with id {draft.case_identification}",
        )
        case_type = self._case_type_of(case)

        # resolved before the document type so a missing document leaves no writes
        document = self._resolver.require_unique(
            NaturalKey.of(EntityType.DOCUMENT, identification=document_draft.identification),
            missing=f"The document with id {document_draft.identification} does not exist",
            ambiguous=f"More than one document exists with id {document_draft.identification}",
        )

        materializer: FileMaterializer | None = None
        if case_type.get("identification") in self.file_case_types:
            materializer = self._materializer()
            materializer.check_content(document_draft)

        fields = document_draft.document_fields()
        if document_draft.document_type_description is not None:
            document_type = self._types.reconcile_document_type(
                document_draft.document_type_description,
                case_type=case_type,
            )
            fields["document_type"] = document_type.ref

        log.debug("Populating document with identification %s", document_draft.identification)
        document.hydrate(fields)
        if materializer is not None:
            materializer.materialize(document, document_draft)
        else:
            self.repositories.objects.save(document)

        link = self._link(case, document, draft.attributes)
        log.info("Populated document with identification %s", document_draft.identification)

        context.record = document
        context.results.append(link)
        result = self._respond(DOCUMENT_MAPPINGS.outbound, link, draft.routing)
        result.results = tuple(context.results)
        return result

    def respond_document(self, context: MessageContext) -> HandlerResult:
        """Acknowledge a document message without touching the repository."""

        draft: CaseDocumentDraft = self.mapper.transform(DOCUMENT_MAPPINGS.inbound, context.body)
        payload = self.mapper.transform(
            DOCUMENT_MAPPINGS.outbound,
            OutboundMessage(
                record={
                    "case": draft.case_identification,
                    "document": draft.document.identification,
                },
                routing=draft.routing,
            ),
        )
        return HandlerResult(status=SUCCESS, payload=payload)

    def _case_type_of(self, case: ObjectRecord) -> ObjectRecord:
        reference = case.get("case_type")
        case_type = None if reference is None else self.repositories.objects.get(UUID(reference))
        if case_type is None:
            identification = case.get("identification")
            raise NotFoundError(
                f"There is no case type set to the case with identification: {identification}",
                entity_type=EntityType.CASE_TYPE,
                key=identification,
            )
        return case_type

    def _link(
        self,
        case: ObjectRecord,
        document: ObjectRecord,
        attributes: dict[str, Any],
    ) -> ObjectRecord:
        key = NaturalKey.of(EntityType.CASE_DOCUMENT, case=case.ref, document=document.ref)
        with self._guard(key):
            if self.policy.link_policy is LinkPolicy.IDEMPOTENT:
                resolution = self._resolver.resolve(key)
                if isinstance(resolution, UniqueResolution):
                    log.debug("Reusing link between case %s and document %s", case.id, document.id)
                    return resolution.target
                if isinstance(resolution, AmbiguousResolution):
                    raise AmbiguousMatchError(
                        f"More than one link exists between case {case.get('identification')} "
                        f"and document {document.get('identification')}",
                        count=resolution.count,
                        entity_type=EntityType.CASE_DOCUMENT,
                        key=str(key),
                    )
            link = ObjectRecord(
                entity_type=EntityType.CASE_DOCUMENT,
                attributes={**attributes, "case": case.ref, "document": document.ref},
            )
            self.repositories.objects.save(link)
        return link

    def _materializer(self) -> FileMaterializer:
        return FileMaterializer(
            files=self.repositories.files,
            objects=self.repositories.objects,
            endpoint=self.download_endpoint(),
        )

    def _respond(self, mapping_ref: str, record: ObjectRecord, routing: Routing) -> HandlerResult:
        payload = self.mapper.transform(
            mapping_ref,
            OutboundMessage(record=record.to_dict(), routing=routing),
        )
        return HandlerResult(status=SUCCESS, payload=payload, record=record)

    def _guard(self, key: NaturalKey) -> AbstractContextManager[None]:
        if self.locks is None:
            return nullcontext()
        return self.locks.hold(key)


def _case_fields(draft: CaseDraft, reconciliation: CaseTypeReconciliation) -> dict[str, Any]:
    """Draft fields merged onto the stored case, with type references filled in."""

    properties = [
        {"property": reconciliation.property_refs[item.property.name], "value": item.value}
        for item in draft.properties
        if item.property.name in reconciliation.property_refs
    ]
    role_type_refs = reconciliation.role_type_refs
    roles = [
        {**item.attributes, "role_type": role_type_refs[item.role_type.generic_description]}
        for item in draft.roles
        if item.role_type.generic_description in role_type_refs
    ]
    return {
        **draft.attributes,
        "identification": draft.identification,
        "case_type": reconciliation.case_type.ref,
        "properties": properties,
        "roles": roles,
    }
