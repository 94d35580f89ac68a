"""
confkeeper.infrastructure.adapter - Backend Adapter with Write Confirmation
=============================================================================

Thin wrapper around a KeyValueBackend that:

    1. Translates backend failures into BackendReadError / BackendWriteError.
    2. Confirms every write by reading it back (read-after-write loop).

Confirmation Loop:

    put(collection, new_map)
        │  fails? ──────────────────────────► BackendWriteError (no retry)
        ▼
    ┌──────────────── every poll_interval (0.3s) ────────────────┐
    │ get(collection)                                            │
    │   fails?            ──► BackendReadError (stop at once)     │
    │   == new_map?       ──► done                                │
    │   new_map == {} and                                        │
    │   read is None?     ──► done                                │
    │   otherwise         ──► sleep, poll again                   │
    └──────────── until timeout_seconds (10s) elapse ────────────┘
        │
        ▼
    ConfirmationTimeoutError(elapsed_seconds)

A successful commit means the adapter can observe its own write. It does NOT
mean every downstream consumer (for example pods mounting a ConfigMap) has
picked up the change yet.
"""

from __future__ import annotations

import asyncio
import time
from typing import Optional

import structlog

from confkeeper.core.config import ConfirmationConfig
from confkeeper.core.exceptions import (
    BackendReadError,
    BackendWriteError,
    ConfirmationTimeoutError,
    ConfKeeperError,
)
from confkeeper.infrastructure.backend import KeyValueBackend


logger = structlog.get_logger()


class BackendAdapter:
    """Error-translating, write-confirming wrapper around a backend.

    Attributes:
        backend: The wrapped key-value backend.
        confirmation: Poll interval and timeout of the confirmation loop.

    Example:
        >>> adapter = BackendAdapter(InMemoryKeyValueBackend())
        >>> await adapter.commit("alertrules", {"a.rules": "groups: []"})
        >>> await adapter.read("alertrules")
        {'a.rules': 'groups: []'}
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        confirmation: Optional[ConfirmationConfig] = None,
    ) -> None:
        self.backend = backend
        self.confirmation = confirmation or ConfirmationConfig()
        self._logger = logger.bind(component="backend_adapter")

    async def read(self, collection_id: str) -> dict[str, str]:
        """Read a collection, treating "no data" as an empty map.

        Raises:
            BackendReadError: If the backend read fails.
        """
        data = await self._get(collection_id)
        return dict(data) if data else {}

    async def commit(self, collection_id: str, new_map: dict[str, str]) -> None:
        """Write a collection and wait until the write can be read back.

        Args:
            collection_id: The collection to replace.
            new_map: Its complete new contents.

        Raises:
            BackendWriteError: The backend rejected the put.
            BackendReadError: A confirmation read failed.
            ConfirmationTimeoutError: The write was not observed within
                ``confirmation.timeout_seconds``. Outcome unknown.
        """
        expected = dict(new_map)
        try:
            await self.backend.put(collection_id, expected)
        except ConfKeeperError:
            raise
        except Exception as exc:
            self._logger.error(
                "collection_write_failed",
                collection_id=collection_id,
                error=str(exc),
            )
            raise BackendWriteError(
                message=f"Unable to update {collection_id}: {exc}",
                collection_id=collection_id,
            ) from exc

        interval = self.confirmation.poll_interval_seconds
        timeout = self.confirmation.timeout_seconds
        started = time.monotonic()

        while True:
            observed = await self._get(collection_id)
            if self._matches(observed, expected):
                self._logger.debug(
                    "collection_write_confirmed",
                    collection_id=collection_id,
                    elapsed_seconds=round(time.monotonic() - started, 3),
                )
                return

            elapsed = time.monotonic() - started
            if elapsed + interval > timeout:
                break
            self._logger.debug(
                "collection_not_yet_updated",
                collection_id=collection_id,
                observed_keys=len(observed or {}),
                expected_keys=len(expected),
            )
            await asyncio.sleep(interval)

        elapsed = time.monotonic() - started
        self._logger.warning(
            "collection_write_unconfirmed",
            collection_id=collection_id,
            elapsed_seconds=round(elapsed, 3),
        )
        raise ConfirmationTimeoutError(
            message=(
                f"verification of the updated configuration timed out "
                f"after {timeout}s"
            ),
            collection_id=collection_id,
            elapsed_seconds=elapsed,
        )

    @staticmethod
    def _matches(observed: Optional[dict[str, str]], expected: dict[str, str]) -> bool:
        if not expected and observed is None:
            return True
        return observed == expected

    async def _get(self, collection_id: str) -> Optional[dict[str, str]]:
        try:
            return await self.backend.get(collection_id)
        except ConfKeeperError:
            raise
        except Exception as exc:
            self._logger.error(
                "collection_read_failed",
                collection_id=collection_id,
                error=str(exc),
            )
            raise BackendReadError(
                message=f"Unable to read {collection_id}: {exc}",
                collection_id=collection_id,
            ) from exc
