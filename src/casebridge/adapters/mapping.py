"""Named, pure mapping functions looked up by reference."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from casebridge.config.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping

log = logging.getLogger(__name__)

type MappingFunction = Callable[[Any], Any]


class MappingNotFoundError(ConfigurationError):
    """Raised when a mapping reference has no registered function."""


@dataclass(slots=True)
class MappingRegistry:
    """In-process ``Mapper`` backed by a dict of mapping functions."""

    _mappings: dict[str, MappingFunction] = field(default_factory=dict[str, "MappingFunction"])

    @classmethod
    def of(cls, mappings: Mapping[str, MappingFunction]) -> MappingRegistry:
        registry = cls()
        for mapping_ref, function in mappings.items():
            registry.register(mapping_ref, function)
        return registry

    def register(self, mapping_ref: str, function: MappingFunction, *, replace: bool = False) -> None:
        if mapping_ref in self._mappings and not replace:
            raise ValueError(f"Mapping {mapping_ref} is already registered")
        self._mappings[mapping_ref] = function

    def transform(self, mapping_ref: str, payload: Any) -> Any:
        try:
            function = self._mappings[mapping_ref]
        except KeyError:
            raise MappingNotFoundError(f"No mapping registered for {mapping_ref}") from None
        log.debug("Applying mapping %s", mapping_ref)
        return function(payload)

    def __contains__(self, mapping_ref: object) -> bool:
        return mapping_ref in self._mappings

    def __iter__(self) -> Iterator[str]:
        return iter(self._mappings)


if TYPE_CHECKING:
    from casebridge.domain.ports import Mapper

    _mapper_check: Mapper = MappingRegistry()
