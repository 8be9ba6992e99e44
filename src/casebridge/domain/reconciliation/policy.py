"""Policy switches for the two points where the legacy behaviour is questionable.

Both defaults reproduce what the legacy gateway did:
- an ambiguous nested Property/RoleType lookup drops the item instead of
  failing the message
- every document-population message appends a new case-document link
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class NestedAmbiguityPolicy(StrEnum):
    """What to do when a nested child lookup matches several records."""

    SKIP = "skip"
    FAIL = "fail"


class LinkPolicy(StrEnum):
    """How case-document links are written on document population."""

    APPEND = "append"
    IDEMPOTENT = "idempotent"


@dataclass(frozen=True, slots=True)
class ReconciliationPolicy:
    nested_ambiguity: NestedAmbiguityPolicy = NestedAmbiguityPolicy.SKIP
    link_policy: LinkPolicy = LinkPolicy.APPEND
