"""
Tests for confkeeper.infrastructure.adapter
=============================================

What's Being Tested:
    - read() maps "no data" to an empty dict
    - commit() returns once the write reads back
    - commit() tolerates a lagging backend within the timeout
    - Failure classes: write error, read error, confirmation timeout
    - An empty new map is confirmed by a None read
"""

import pytest

from confkeeper.core.config import ConfirmationConfig
from confkeeper.core.exceptions import (
    BackendReadError,
    BackendWriteError,
    ConfirmationTimeoutError,
)
from confkeeper.infrastructure.adapter import BackendAdapter
from confkeeper.infrastructure.backend import InMemoryKeyValueBackend, KeyValueBackend


# =============================================================================
# Helpers
# =============================================================================
class ScriptedBackend(KeyValueBackend):
    """Backend whose failures and read results are set by the test."""

    def __init__(self) -> None:
        self.data: dict[str, dict[str, str]] = {}
        self.fail_put = False
        self.fail_get_after_put = False
        self.stale_reads = False
        self.empty_reads = False
        self.puts = 0
        self.gets = 0

    async def get(self, collection_id):
        self.gets += 1
        if self.fail_get_after_put and self.puts:
            raise ConnectionError("apiserver unreachable")
        if self.stale_reads:
            return {"stale": "value"}
        if self.empty_reads:
            return {}
        return self.data.get(collection_id)

    async def put(self, collection_id, data):
        if self.fail_put:
            raise RuntimeError("403 Forbidden")
        self.puts += 1
        self.data[collection_id] = dict(data)


# =============================================================================
# Tests: read()
# =============================================================================
class TestRead:
    async def test_missing_collection_reads_empty(self, adapter) -> None:
        assert await adapter.read("alertrules") == {}

    async def test_read_returns_copy(self, adapter, backend) -> None:
        await backend.put("c", {"k": "v"})
        data = await adapter.read("c")
        data["k"] = "x"
        assert await adapter.read("c") == {"k": "v"}

    async def test_read_failure_wrapped(self, fast_confirmation) -> None:
        backend = ScriptedBackend()
        backend.fail_get_after_put = True
        backend.puts = 1
        adapter = BackendAdapter(backend, fast_confirmation)
        with pytest.raises(BackendReadError) as exc_info:
            await adapter.read("alertrules")
        assert exc_info.value.collection_id == "alertrules"
        assert "apiserver unreachable" in exc_info.value.message


# =============================================================================
# Tests: commit()
# =============================================================================
class TestCommit:
    async def test_commit_confirms_write(self, adapter, backend) -> None:
        await adapter.commit("alertrules", {"a.rules": "groups: []"})
        assert backend.snapshot("alertrules") == {"a.rules": "groups: []"}

    async def test_commit_waits_for_lagging_backend(self) -> None:
        backend = InMemoryKeyValueBackend(propagation_delay=0.05)
        adapter = BackendAdapter(
            backend,
            ConfirmationConfig(poll_interval_seconds=0.01, timeout_seconds=1.0),
        )
        await adapter.commit("c", {"k": "v"})
        assert await backend.get("c") == {"k": "v"}

    async def test_empty_map_confirmed_by_none_read(self, adapter, backend) -> None:
        await backend.put("c", {"k": "v"})
        await adapter.commit("c", {})
        assert await backend.get("c") is None

    async def test_empty_map_confirmed_by_empty_read(self, fast_confirmation) -> None:
        backend = ScriptedBackend()
        backend.empty_reads = True
        adapter = BackendAdapter(backend, fast_confirmation)
        await adapter.commit("c", {})

    async def test_put_failure_raises_write_error(self, fast_confirmation) -> None:
        backend = ScriptedBackend()
        backend.fail_put = True
        adapter = BackendAdapter(backend, fast_confirmation)
        with pytest.raises(BackendWriteError) as exc_info:
            await adapter.commit("alertrules", {"a.rules": "x"})
        assert "403 Forbidden" in exc_info.value.message
        assert backend.gets == 0

    async def test_read_failure_during_confirmation(self, fast_confirmation) -> None:
        """A failing read-back stops the loop at once."""
        backend = ScriptedBackend()
        backend.fail_get_after_put = True
        adapter = BackendAdapter(backend, fast_confirmation)
        with pytest.raises(BackendReadError):
            await adapter.commit("alertrules", {"a.rules": "x"})
        assert backend.gets == 1

    async def test_unobserved_write_times_out(self, fast_confirmation) -> None:
        backend = ScriptedBackend()
        backend.stale_reads = True
        adapter = BackendAdapter(backend, fast_confirmation)

        with pytest.raises(ConfirmationTimeoutError) as exc_info:
            await adapter.commit("alertrules", {"a.rules": "x"})

        exc = exc_info.value
        assert not isinstance(exc, BackendWriteError)
        assert exc.collection_id == "alertrules"
        assert 0 < exc.elapsed_seconds <= fast_confirmation.timeout_seconds + 0.1
        assert backend.gets > 1
