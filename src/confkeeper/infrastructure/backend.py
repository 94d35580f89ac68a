"""
confkeeper.infrastructure.backend - Key-Value Backend Interface
=================================================================

The key-value backend stores named collections, each a flat
``{key: value}`` map of strings. ConfKeeper keeps two collections per
artifact group (current values and archived versions).

Consistency Model:
    The backend is only EVENTUALLY consistent. A put() that returns
    successfully may not be visible to the next get(). BackendAdapter
    bridges this with a read-after-write confirmation loop; backends
    themselves make no attempt to hide the lag.

    An empty collection may read back as None rather than {} (Kubernetes
    reports a ConfigMap with no data as nil). Callers must accept both.

Implementations:
    - KeyValueBackend (ABC):        Abstract interface
    - InMemoryKeyValueBackend:      Dict-based, with optional propagation lag
    - ConfigMapBackend:             Kubernetes ConfigMaps (see configmap.py)
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import Optional

import structlog


logger = structlog.get_logger()


# =============================================================================
# Abstract Base Class
# =============================================================================
class KeyValueBackend(ABC):
    """Abstract interface for collection-oriented key-value storage.

    Implementations raise whatever their client raises; BackendAdapter
    translates failures into BackendReadError / BackendWriteError.
    """

    async def connect(self) -> None:
        """Prepare the backend for use. The default does nothing."""

    async def disconnect(self) -> None:
        """Release backend resources. The default does nothing."""

    @abstractmethod
    async def get(self, collection_id: str) -> Optional[dict[str, str]]:
        """Read a whole collection.

        Args:
            collection_id: The collection to read.

        Returns:
            The collection's data. None when the collection holds no data.
        """

    @abstractmethod
    async def put(self, collection_id: str, data: dict[str, str]) -> None:
        """Replace a whole collection.

        The new data may not be visible to get() immediately.

        Args:
            collection_id: The collection to replace.
            data: The complete new contents.
        """


# =============================================================================
# In-Memory Implementation
# =============================================================================
# Writes can be made to appear after a delay, which reproduces the
# eventual consistency of the real backend in tests:
#
#   put("x", {...})  ──► pending (visible_at = now + propagation_delay)
#   get("x")         ──► promotes every pending write whose time has come,
#                        then returns the newest visible data
# =============================================================================
class InMemoryKeyValueBackend(KeyValueBackend):
    """Dict-based backend for development and testing.

    Attributes:
        propagation_delay: Seconds before a put() becomes visible to get().
            0 makes the backend read-your-writes consistent.

    Example:
        >>> backend = InMemoryKeyValueBackend(propagation_delay=0.5)
        >>> await backend.put("alertrules", {"a.rules": "groups: []"})
        >>> await backend.get("alertrules")   # None for ~0.5s, then the data
    """

    def __init__(
        self,
        propagation_delay: float = 0.0,
        initial: Optional[dict[str, dict[str, str]]] = None,
    ) -> None:
        self.propagation_delay = propagation_delay
        self._visible: dict[str, dict[str, str]] = {}
        self._pending: dict[str, list[tuple[float, dict[str, str]]]] = {}
        self._logger = logger.bind(component="in_memory_backend")

        for collection_id, data in (initial or {}).items():
            self._visible[collection_id] = dict(data)

    async def get(self, collection_id: str) -> Optional[dict[str, str]]:
        self._promote(collection_id)
        data = self._visible.get(collection_id)
        if not data:
            return None
        return dict(data)

    async def put(self, collection_id: str, data: dict[str, str]) -> None:
        snapshot = dict(data)
        if self.propagation_delay <= 0:
            self._visible[collection_id] = snapshot
        else:
            visible_at = time.monotonic() + self.propagation_delay
            self._pending.setdefault(collection_id, []).append((visible_at, snapshot))
        self._logger.debug(
            "collection_written",
            collection_id=collection_id,
            keys=len(snapshot),
        )

    def snapshot(self, collection_id: str) -> dict[str, str]:
        """Return the visible contents of a collection without promoting writes."""
        return dict(self._visible.get(collection_id) or {})

    def _promote(self, collection_id: str) -> None:
        pending = self._pending.get(collection_id)
        if not pending:
            return
        now = time.monotonic()
        while pending and pending[0][0] <= now:
            _, data = pending.pop(0)
            self._visible[collection_id] = data
