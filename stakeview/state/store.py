"""Observable store base: copy-on-write snapshots with a revision counter."""
from __future__ import annotations

import itertools
import logging
from typing import Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

S = TypeVar("S")

# Shared across every store so a revision number is never reused,
# not even by two different state instances.
_revisions = itertools.count(1)


class Store(Generic[S]):
    """Holds one immutable snapshot; every write replaces it and bumps ``revision``."""

    name = "store"

    def __init__(self, initial: S) -> None:
        self._initial = initial
        self._snapshot = initial
        self._revision = next(_revisions)
        self._listeners: list[Callable[[Store[S]], None]] = []

    @property
    def snapshot(self) -> S:
        return self._snapshot

    @property
    def revision(self) -> int:
        return self._revision

    def subscribe(self, listener: Callable[[Store[S]], None]) -> Callable[[], None]:
        """Call ``listener(store)`` after each write. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def clear(self) -> None:
        """Reset to the initial empty state."""
        self._commit(self._initial)

    def _commit(self, snapshot: S) -> None:
        self._snapshot = snapshot
        self._revision = next(_revisions)
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logger.error("%s listener failed: %s", self.name, e)
