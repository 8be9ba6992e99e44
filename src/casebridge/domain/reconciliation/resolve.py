"""Identity resolution against the object repository.

Responsibilities of this stage:
- look records up by natural key
- classify each lookup as ABSENT/UNIQUE/AMBIGUOUS
- never mutate persistence state

Filter values are used exactly as mapped; no case folding or trimming happens
here. Repository faults propagate unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from casebridge.domain.errors import AmbiguousMatchError, NotFoundError

from .contracts import AbsentResolution, AmbiguousResolution, UniqueResolution

if TYPE_CHECKING:
    from collections.abc import Iterable

    from casebridge.domain.model import ObjectRecord
    from casebridge.domain.ports.persistence import ObjectRepository

    from .contracts import NaturalKey, Resolution

log = logging.getLogger(__name__)


def classify_candidates(key: NaturalKey, candidates: Iterable[ObjectRecord]) -> Resolution:
    """Classify lookup results for ``key``.

    Matching policy:
    - no candidates -> ``AbsentResolution``
    - one candidate -> ``UniqueResolution``
    - multiple candidates -> ``AmbiguousResolution`` (never an arbitrary pick)
    """

    unique = _dedupe_candidates(candidates)
    if not unique:
        return AbsentResolution(key=key)
    if len(unique) == 1:
        return UniqueResolution(key=key, target=unique[0])
    return AmbiguousResolution(key=key, candidates=unique)


def _dedupe_candidates(candidates: Iterable[ObjectRecord]) -> tuple[ObjectRecord, ...]:
    seen: set[object] = set()
    deduped: list[ObjectRecord] = []
    for candidate in candidates:
        marker = candidate.id if candidate.id is not None else id(candidate)
        if marker in seen:
            continue
        seen.add(marker)
        deduped.append(candidate)
    return tuple(deduped)


@dataclass(slots=True)
class IdentityResolver:
    """Resolve natural keys to zero, one or many stored records."""

    repository: ObjectRepository

    def resolve(self, key: NaturalKey) -> Resolution:
        candidates = self.repository.search(key.entity_type, key.filters)
        resolution = classify_candidates(key, candidates)
        log.debug("Resolved %s as %s", key, resolution.status)
        return resolution

    def require_unique(self, key: NaturalKey, *, missing: str, ambiguous: str) -> ObjectRecord:
        """Return the single record for ``key`` or raise the matching business error."""

        resolution = self.resolve(key)
        if isinstance(resolution, UniqueResolution):
            return resolution.target
        if isinstance(resolution, AmbiguousResolution):
            raise AmbiguousMatchError(
                ambiguous,
                count=resolution.count,
                entity_type=key.entity_type,
                key=str(key),
            )
        raise NotFoundError(missing, entity_type=key.entity_type, key=str(key))
