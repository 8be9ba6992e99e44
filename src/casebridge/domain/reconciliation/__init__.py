"""Reconciliation core: natural-key identity resolution and type reconciliation.

Layered flow per inbound entity:
1) resolve the natural key against the object repository (read-only)
2) classify the outcome as ABSENT/UNIQUE/AMBIGUOUS
3) reuse, create, or reject according to the calling workflow
4) rebuild reference collections on the parent record as explicit sets
"""

from __future__ import annotations

from .contracts import (
    AbsentResolution,
    AmbiguousResolution,
    NaturalKey,
    Resolution,
    ResolutionStatus,
    UniqueResolution,
)
from .files import DEFAULT_FILE_CASE_TYPES, DownloadEndpoint, FileMaterializer
from .locks import HeldKeys, KeyGuard, NaturalKeyLocks
from .policy import LinkPolicy, NestedAmbiguityPolicy, ReconciliationPolicy
from .reference_sets import ReferenceSetChange, reconcile_reference_set
from .resolve import IdentityResolver, classify_candidates
from .type_reconciler import CaseTypeReconciliation, TypeReconciler

__all__ = [
    "DEFAULT_FILE_CASE_TYPES",
    "AbsentResolution",
    "AmbiguousResolution",
    "CaseTypeReconciliation",
    "DownloadEndpoint",
    "FileMaterializer",
    "HeldKeys",
    "IdentityResolver",
    "KeyGuard",
    "LinkPolicy",
    "NaturalKey",
    "NaturalKeyLocks",
    "NestedAmbiguityPolicy",
    "ReconciliationPolicy",
    "ReferenceSetChange",
    "Resolution",
    "ResolutionStatus",
    "TypeReconciler",
    "UniqueResolution",
    "classify_candidates",
    "reconcile_reference_set",
]
