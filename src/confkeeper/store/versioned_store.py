"""
confkeeper.store.versioned_store - Versioned Configuration Store
==================================================================

The core of ConfKeeper: one VersionedStore manages one ArtifactGroup, i.e.
a pair of backend collections.

    current  collection : {"a.rules": "<body>", "b.rules": "<body>"}
    history  collection : {"a.rules-2024-03-01T12-30-05": "<older body>", ...}

Per-artifact State Machine:

    ┌────────┐  put (validated)   ┌─────────┐
    │ Absent │ ─────────────────► │ Current │ ◄──┐ put (changed body):
    └────────┘                    └─────────┘ ───┘ archive old value
         ▲                              │
         └──────────── delete ──────────┘  (current + all history removed)

Put Protocol:
    1. validate name and content     → InvalidNameError / ValidationError
    2. read current, read history    (two independent reads, no snapshot)
    3. identical body?               → UNCHANGED, nothing written
    4. archive prior value           history[name-<now>] = old body
    5. apply retention               evict old versions of this name
    6. commit history                failure aborts, current untouched
    7. commit current                failure leaves an orphaned backup
    8. CREATED or UPDATED

Delete Protocol:
    1. absent?                       → NOT_FOUND
    2. commit current without name
    3. commit history without any key matching name
       (failure here leaves orphaned history)

Consistency:
    The backend has no compare-and-swap, so two concurrent puts to the same
    name race read-modify-write style: both may archive the same prior value
    and the last commit wins. Nothing is cached between calls; every
    operation re-reads the backend.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Optional

import structlog

from confkeeper.core.enums import DeleteOutcome, UpdateOutcome
from confkeeper.core.exceptions import BackendError, ValidationError
from confkeeper.core.models import ArtifactGroup, Version
from confkeeper.infrastructure.adapter import BackendAdapter
from confkeeper.validation.base import AcceptAllValidator, Validator
from confkeeper.validation.names import validate_artifact_name
from confkeeper.versioning.keys import (
    encode_version_key,
    extract_timestamp,
    format_timestamp,
    matches_base_name,
    parse_timestamp,
    version_label,
)
from confkeeper.versioning.retention import RetentionPolicy


logger = structlog.get_logger()

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Default clock: the current time in UTC."""
    return datetime.now(timezone.utc)


class VersionedStore:
    """Current values plus bounded history for one artifact group.

    Attributes:
        group: The artifact group (collection pair and naming rules).
        adapter: Backend adapter used for reads and confirmed commits.
        validator: Gate applied to every put.
        retention: History trimming policy.

    Example:
        >>> store = VersionedStore(adapter, group, validator=MockValidator())
        >>> await store.put("a.rules", "groups: []")
        <UpdateOutcome.CREATED: 'created'>
        >>> await store.put("a.rules", "groups: [{name: x, rules: []}]")
        <UpdateOutcome.UPDATED: 'updated'>
        >>> await store.list_versions("a.rules")
        ['2024-03-01T12-30-05']
    """

    def __init__(
        self,
        adapter: BackendAdapter,
        group: ArtifactGroup,
        *,
        validator: Optional[Validator] = None,
        retention: Optional[RetentionPolicy] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.adapter = adapter
        self.group = group
        self.validator = validator or AcceptAllValidator()
        self.retention = retention or RetentionPolicy()
        self._clock = clock or utc_now
        self._logger = logger.bind(component="versioned_store", group=group.name)

    # =========================================================================
    # Reads
    # =========================================================================

    async def list_names(self) -> list[str]:
        """Return the names of all current artifacts, sorted."""
        current = await self.adapter.read(self.group.current_collection)
        return sorted(current)

    async def get_current(self, base_name: str) -> Optional[str]:
        """Return the current content of ``base_name``, or None if absent.

        Raises:
            InvalidNameError: If the name is not allowed in this group.
            BackendReadError: If the backend read fails.
        """
        validate_artifact_name(base_name, self.group)
        current = await self.adapter.read(self.group.current_collection)
        return current.get(base_name)

    async def list_versions(self, base_name: str) -> list[str]:
        """Return the archived version timestamps of ``base_name``, newest first.

        Keys that match the name but do not decode are listed after the
        decodable ones, as their raw suffix.
        """
        validate_artifact_name(base_name, self.group)
        history = await self.adapter.read(self.group.history_collection)
        return [
            version_label(key, base_name)
            for key in self.retention.sort_keys(history, base_name)
        ]

    async def get_version(self, base_name: str, timestamp: str) -> Optional[str]:
        """Return the content archived for ``base_name`` at ``timestamp``.

        Args:
            base_name: The artifact name.
            timestamp: Version timestamp in ``YYYY-MM-DDThh-mm-ss`` layout.

        Returns:
            The archived content, or None if no such version exists.

        Raises:
            InvalidNameError: If the name is not allowed in this group.
            InvalidTimestampError: If the timestamp is malformed. Checked
                before the backend is contacted.
        """
        validate_artifact_name(base_name, self.group)
        moment = parse_timestamp(timestamp)
        history = await self.adapter.read(self.group.history_collection)
        return history.get(encode_version_key(base_name, moment))

    async def list_history(self, base_name: str) -> list[Version]:
        """Return the decodable archived versions of ``base_name``, newest first."""
        validate_artifact_name(base_name, self.group)
        history = await self.adapter.read(self.group.history_collection)
        versions = []
        for key in self.retention.sort_keys(history, base_name):
            moment = extract_timestamp(key, base_name)
            if moment is None:
                continue
            versions.append(
                Version(base_name=base_name, timestamp=moment, content=history[key])
            )
        return versions

    # =========================================================================
    # Put
    # =========================================================================

    async def put(self, base_name: str, content: str) -> UpdateOutcome:
        """Validate ``content`` and make it the current value of ``base_name``.

        Returns:
            CREATED if there was no current value, UPDATED if the prior value
            was archived, UNCHANGED if the body equals the current value.

        Raises:
            InvalidNameError: Name not allowed; nothing written.
            ValidationError: Content rejected; nothing written.
            BackendReadError: A collection could not be read; nothing written.
            BackendWriteError / ConfirmationTimeoutError: A commit failed.
                If the history commit succeeded before the current commit
                failed, the new backup stays in place (orphaned backup).
        """
        log = self._logger.bind(base_name=base_name)
        validate_artifact_name(base_name, self.group)

        try:
            diagnostics = await self.validator.validate(content)
        except ValidationError as exc:
            log.info(
                "artifact_rejected",
                reason=exc.message,
                diagnostics=exc.diagnostics,
            )
            raise
        log.debug("artifact_validated", diagnostics=diagnostics)

        current = await self.adapter.read(self.group.current_collection)
        history = await self.adapter.read(self.group.history_collection)

        previous = current.get(base_name)
        if previous is not None and previous == content:
            log.info("artifact_unchanged")
            return UpdateOutcome.UNCHANGED

        if previous is not None:
            now = self._now()
            version_key = encode_version_key(base_name, now)
            history[version_key] = previous
            evicted = self.retention.apply(history, base_name, now)
            log.info(
                "artifact_archived",
                version=format_timestamp(now),
                evicted=sorted(evicted),
            )

            # History first: current must never claim an archive that is
            # not stored.
            await self.adapter.commit(self.group.history_collection, history)

        current[base_name] = content
        try:
            await self.adapter.commit(self.group.current_collection, current)
        except BackendError:
            if previous is not None:
                log.warning(
                    "orphaned_backup",
                    version_key=version_key,
                    history_collection=self.group.history_collection,
                )
            raise

        outcome = UpdateOutcome.CREATED if previous is None else UpdateOutcome.UPDATED
        log.info("artifact_committed", outcome=outcome.value)
        return outcome

    # =========================================================================
    # Delete
    # =========================================================================

    async def delete(self, base_name: str) -> DeleteOutcome:
        """Remove ``base_name`` and every archived version of it.

        Returns:
            DELETED, or NOT_FOUND if there was no current value.

        Raises:
            InvalidNameError: Name not allowed; nothing written.
            BackendError: A read or commit failed. If the current commit
                succeeded and the history commit failed, the history stays
                behind (orphaned history).
        """
        log = self._logger.bind(base_name=base_name)
        validate_artifact_name(base_name, self.group)

        current = await self.adapter.read(self.group.current_collection)
        history = await self.adapter.read(self.group.history_collection)

        if base_name not in current:
            log.info("artifact_not_found")
            return DeleteOutcome.NOT_FOUND

        del current[base_name]
        await self.adapter.commit(self.group.current_collection, current)

        doomed = [key for key in history if matches_base_name(key, base_name)]
        for key in doomed:
            del history[key]
        try:
            await self.adapter.commit(self.group.history_collection, history)
        except BackendError:
            log.warning(
                "orphaned_history",
                versions=len(doomed),
                history_collection=self.group.history_collection,
            )
            raise

        log.info("artifact_deleted", versions_removed=len(doomed))
        return DeleteOutcome.DELETED

    def _now(self) -> datetime:
        moment = self._clock()
        if moment.tzinfo is None:
            return moment.replace(tzinfo=timezone.utc)
        return moment.astimezone(timezone.utc)
