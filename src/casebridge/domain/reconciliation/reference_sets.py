"""Set reconciliation for reference collections stored on a parent record."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence


@dataclass(frozen=True, slots=True)
class ReferenceSetChange:
    """Desired collection value plus its diff against what was stored."""

    desired: tuple[str, ...]
    added: tuple[str, ...]
    removed: tuple[str, ...]

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)


def reconcile_reference_set(
    stored: Sequence[str] | None,
    desired: Iterable[str],
) -> ReferenceSetChange:
    """Diff ``desired`` against ``stored``.

    ``desired`` keeps first-seen order with duplicates removed; the result replaces
    the stored value rather than extending it.
    """

    desired_refs = tuple(dict.fromkeys(desired))
    stored_refs = tuple(stored or ())
    desired_set = set(desired_refs)
    stored_set = set(stored_refs)
    return ReferenceSetChange(
        desired=desired_refs,
        added=tuple(ref for ref in desired_refs if ref not in stored_set),
        removed=tuple(ref for ref in stored_refs if ref not in desired_set),
    )
