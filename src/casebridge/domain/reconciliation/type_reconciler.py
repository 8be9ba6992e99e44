"""Reuse-or-create reconciliation for case types and document types.

A case type is resolved by identification; its properties and role types are
resolved by ``(natural key, case_type)`` and rebuilt as reference sets on the
case type every time a case message comes in. Stored type attributes win over
draft attributes once the type exists.
"""

from __future__ import annotations

import logging
from contextlib import nullcontext
from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING, Any
from uuid import UUID

from casebridge.domain.errors import AmbiguousMatchError
from casebridge.domain.model import EntityType, ObjectRecord

from .contracts import AmbiguousResolution, NaturalKey, UniqueResolution
from .policy import NestedAmbiguityPolicy
from .reference_sets import ReferenceSetChange, reconcile_reference_set

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from contextlib import AbstractContextManager

    from casebridge.domain.model import CaseTypeDraft, PropertyDraft, RoleTypeDraft
    from casebridge.domain.ports.persistence import ObjectRepository

    from .locks import KeyGuard
    from .resolve import IdentityResolver

log = logging.getLogger(__name__)

DEFAULT_CONFIDENTIALITY = "zaakvertrouwelijk"


@dataclass(slots=True, kw_only=True)
class CaseTypeReconciliation:
    """Outcome of reconciling one case type with its nested collections."""

    case_type: ObjectRecord
    created: bool
    property_refs: dict[str, str] = field(default_factory=dict[str, str])
    role_type_refs: dict[str, str] = field(default_factory=dict[str, str])
    skipped: tuple[NaturalKey, ...] = ()
    properties: ReferenceSetChange | None = None
    role_types: ReferenceSetChange | None = None


@dataclass(slots=True, kw_only=True)
class _ChildSpec:
    entity_type: EntityType
    key_field: str
    key_value: str
    attributes: dict[str, Any]


@dataclass(slots=True)
class TypeReconciler:
    """Materialize type records and their nested children, reusing by natural key."""

    resolver: IdentityResolver
    repository: ObjectRepository
    nested_ambiguity: NestedAmbiguityPolicy = NestedAmbiguityPolicy.SKIP
    locks: KeyGuard | None = None
    today: Callable[[], date] = date.today

    def reconcile_case_type(
        self,
        draft: CaseTypeDraft,
        *,
        properties: Sequence[PropertyDraft] = (),
        role_types: Sequence[RoleTypeDraft] = (),
    ) -> CaseTypeReconciliation:
        key = NaturalKey.of(EntityType.CASE_TYPE, identification=draft.identification)
        case_type, created = self._resolve_or_create(
            key,
            lambda: ObjectRecord(
                entity_type=EntityType.CASE_TYPE,
                attributes={**draft.attributes, "identification": draft.identification},
            ),
            ambiguous=f"More than one case type exists with identification {draft.identification}",
        )
        if created:
            log.debug("No existing case type found, created case type %s", draft.identification)
        else:
            log.debug("Case type found, connecting case to case type %s", draft.identification)

        skipped: list[NaturalKey] = []
        property_refs = self._reconcile_children(
            case_type,
            [
                _ChildSpec(
                    entity_type=EntityType.PROPERTY,
                    key_field="name",
                    key_value=item.name,
                    attributes=item.attributes,
                )
                for item in properties
            ],
            skipped,
        )
        role_type_refs = self._reconcile_children(
            case_type,
            [
                _ChildSpec(
                    entity_type=EntityType.ROLE_TYPE,
                    key_field="generic_description",
                    key_value=item.generic_description,
                    attributes=item.attributes,
                )
                for item in role_types
            ],
            skipped,
        )

        property_change = reconcile_reference_set(
            case_type.get("properties"), property_refs.values()
        )
        role_type_change = reconcile_reference_set(
            case_type.get("role_types"), role_type_refs.values()
        )
        case_type.hydrate(
            {
                "properties": list(property_change.desired),
                "role_types": list(role_type_change.desired),
            }
        )
        self.repository.save(case_type)

        log.info(
            "Connected case type %s: properties +%s/-%s, role types +%s/-%s",
            draft.identification,
            len(property_change.added),
            len(property_change.removed),
            len(role_type_change.added),
            len(role_type_change.removed),
        )
        return CaseTypeReconciliation(
            case_type=case_type,
            created=created,
            property_refs=property_refs,
            role_type_refs=role_type_refs,
            skipped=tuple(skipped),
            properties=property_change,
            role_types=role_type_change,
        )

    def reconcile_document_type(self, description: str, *, case_type: ObjectRecord) -> ObjectRecord:
        """Resolve or create the document type and point it at ``case_type``.

        A document type belongs to one case type at a time: when a description is
        reused under another case type it is moved, not shared.
        """

        key = NaturalKey.of(EntityType.DOCUMENT_TYPE, description=description)
        document_type, created = self._resolve_or_create(
            key,
            lambda: ObjectRecord(
                entity_type=EntityType.DOCUMENT_TYPE,
                attributes={
                    "description": description,
                    "confidentiality": DEFAULT_CONFIDENTIALITY,
                    "valid_from": self.today().isoformat(),
                },
            ),
            ambiguous=f"More than one document type exists with description {description}",
        )
        if created:
            log.debug("No existing document type found, created document type %s", description)

        previous = document_type.get("case_type")
        if previous != case_type.ref:
            if previous is not None:
                self._detach_document_type(previous, document_type)
            document_type.hydrate({"case_type": case_type.ref})
            self.repository.save(document_type)

        stored_refs: list[str] = list(case_type.get("document_types") or [])
        change = reconcile_reference_set(stored_refs, [*stored_refs, document_type.ref])
        if change.changed:
            case_type.hydrate({"document_types": list(change.desired)})
            self.repository.save(case_type)

        log.info(
            "Connected document type %s to case type %s",
            description,
            case_type.get("identification"),
        )
        return document_type

    def _reconcile_children(
        self,
        parent: ObjectRecord,
        specs: Sequence[_ChildSpec],
        skipped: list[NaturalKey],
    ) -> dict[str, str]:
        refs: dict[str, str] = {}
        for spec in specs:
            if spec.key_value in refs:
                continue
            key = NaturalKey.of(
                spec.entity_type,
                **{spec.key_field: spec.key_value, "case_type": parent.ref},
            )
            child = self._resolve_child(key, parent, spec)
            if child is None:
                skipped.append(key)
                continue
            refs[spec.key_value] = child.ref
        return refs

    def _resolve_child(
        self,
        key: NaturalKey,
        parent: ObjectRecord,
        spec: _ChildSpec,
    ) -> ObjectRecord | None:
        with self._guard(key):
            resolution = self.resolver.resolve(key)
            if isinstance(resolution, UniqueResolution):
                return resolution.target
            if isinstance(resolution, AmbiguousResolution):
                if self.nested_ambiguity is NestedAmbiguityPolicy.FAIL:
                    raise AmbiguousMatchError(
                        f"More than one {_label(spec.entity_type)} exists with "
                        f"{spec.key_field} {spec.key_value}",
                        count=resolution.count,
                        entity_type=spec.entity_type,
                        key=str(key),
                    )
                log.warning(
                    "Skipping %s: %s records match, leaving it out of the case type",
                    key,
                    resolution.count,
                )
                return None

            child = ObjectRecord(
                entity_type=spec.entity_type,
                attributes={
                    **spec.attributes,
                    spec.key_field: spec.key_value,
                    "case_type": parent.ref,
                },
            )
            self.repository.save(child)
            log.debug("Created %s", key)
            return child

    def _resolve_or_create(
        self,
        key: NaturalKey,
        build: Callable[[], ObjectRecord],
        *,
        ambiguous: str,
    ) -> tuple[ObjectRecord, bool]:
        with self._guard(key):
            resolution = self.resolver.resolve(key)
            if isinstance(resolution, UniqueResolution):
                return resolution.target, False
            if isinstance(resolution, AmbiguousResolution):
                raise AmbiguousMatchError(
                    ambiguous,
                    count=resolution.count,
                    entity_type=key.entity_type,
                    key=str(key),
                )
            record = build()
            self.repository.save(record)
            return record, True

    def _detach_document_type(self, previous_ref: str, document_type: ObjectRecord) -> None:
        previous = self.repository.get(UUID(previous_ref))
        if previous is None:
            return
        stored_refs: list[str] = list(previous.get("document_types") or [])
        change = reconcile_reference_set(
            stored_refs, [ref for ref in stored_refs if ref != document_type.ref]
        )
        if change.changed:
            previous.hydrate({"document_types": list(change.desired)})
            self.repository.save(previous)
            log.info(
                "Moved document type %s away from case type %s",
                document_type.get("description"),
                previous.get("identification"),
            )

    def _guard(self, key: NaturalKey) -> AbstractContextManager[None]:
        if self.locks is None:
            return nullcontext()
        return self.locks.hold(key)


def _label(entity_type: EntityType) -> str:
    return entity_type.value.replace("_", " ")
