"""Port for the declarative mapping engine."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Mapper(Protocol):
    """Pure structural transform addressed by a mapping reference."""

    def transform(self, mapping_ref: str, payload: Any) -> Any: ...
