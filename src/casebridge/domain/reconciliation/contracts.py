"""Shared reconciliation contract components.

This module intentionally holds only:
- the natural-key value object used for lookups and locking
- the resolution outcomes produced by identity resolution
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from casebridge.domain.model import EntityType, ObjectRecord


@dataclass(frozen=True, slots=True)
class NaturalKey:
    """Equality filter over business fields, scoped to one entity type."""

    entity_type: EntityType
    fields: tuple[tuple[str, str], ...]

    @classmethod
    def of(cls, entity_type: EntityType, **fields: str) -> NaturalKey:
        return cls(entity_type=entity_type, fields=tuple(sorted(fields.items())))

    @property
    def filters(self) -> dict[str, str]:
        return dict(self.fields)

    def __str__(self) -> str:
        rendered = ", ".join(f"{name}={value}" for name, value in self.fields)
        return f"{self.entity_type}({rendered})"


class ResolutionStatus(StrEnum):
    """Outcome produced by identity resolution."""

    ABSENT = "absent"
    UNIQUE = "unique"
    AMBIGUOUS = "ambiguous"


@dataclass(slots=True, kw_only=True)
class AbsentResolution:
    """No record carries the natural key."""

    key: NaturalKey
    status: Literal[ResolutionStatus.ABSENT] = ResolutionStatus.ABSENT


@dataclass(slots=True, kw_only=True)
class UniqueResolution:
    """Exactly one record carries the natural key."""

    key: NaturalKey
    target: ObjectRecord
    status: Literal[ResolutionStatus.UNIQUE] = ResolutionStatus.UNIQUE


@dataclass(slots=True, kw_only=True)
class AmbiguousResolution:
    """Several records carry a natural key that must be singular."""

    key: NaturalKey
    candidates: tuple[ObjectRecord, ...]
    status: Literal[ResolutionStatus.AMBIGUOUS] = ResolutionStatus.AMBIGUOUS

    def __post_init__(self) -> None:
        if len(self.candidates) < 2:
            raise ValueError("Ambiguous resolution must include at least two candidates")

    @property
    def count(self) -> int:
        return len(self.candidates)


type Resolution = AbsentResolution | UniqueResolution | AmbiguousResolution
