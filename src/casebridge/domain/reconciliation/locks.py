"""In-process serialization of resolve-then-create per natural key.

``NaturalKeyLocks`` is the shared registry. ``HeldKeys`` collects the keys one
message locks and keeps them until the message's unit of work has committed
or rolled back, so a concurrent flow only resolves after the writes are
visible.
"""

from __future__ import annotations

import threading
from contextlib import ExitStack, contextmanager, nullcontext
from typing import TYPE_CHECKING, Literal, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterator
    from contextlib import AbstractContextManager
    from types import TracebackType

    from .contracts import NaturalKey


class KeyGuard(Protocol):
    """Anything that can serialize work on a natural key."""

    def hold(self, key: NaturalKey) -> AbstractContextManager[None]: ...


class NaturalKeyLocks:
    """Registry of per-key locks; entries are dropped once no flow holds or waits on them."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[NaturalKey, tuple[threading.Lock, int]] = {}

    @contextmanager
    def hold(self, key: NaturalKey) -> Iterator[None]:
        lock = self._acquire_entry(key)
        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            self._release_entry(key)

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    def _acquire_entry(self, key: NaturalKey) -> threading.Lock:
        with self._guard:
            lock, users = self._locks.get(key, (threading.Lock(), 0))
            self._locks[key] = (lock, users + 1)
            return lock

    def _release_entry(self, key: NaturalKey) -> None:
        with self._guard:
            lock, users = self._locks[key]
            if users <= 1:
                del self._locks[key]
            else:
                self._locks[key] = (lock, users - 1)


class HeldKeys:
    """Keys locked by one message, released together when the scope exits.

    ``hold`` acquires the key on first use and returns a no-op context; holding
    a key twice within the same scope does not block.
    """

    def __init__(self, locks: NaturalKeyLocks) -> None:
        self._locks = locks
        self._stack = ExitStack()
        self._held: set[NaturalKey] = set()

    def hold(self, key: NaturalKey) -> AbstractContextManager[None]:
        if key not in self._held:
            self._stack.enter_context(self._locks.hold(key))
            self._held.add(key)
        return nullcontext()

    def __contains__(self, key: object) -> bool:
        return key in self._held

    def release(self) -> None:
        self._held.clear()
        self._stack.close()

    def __enter__(self) -> HeldKeys:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        self.release()
        return False
