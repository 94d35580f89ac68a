"""
confkeeper.versioning.retention - History Retention Policy
============================================================

Decides which archived versions of an artifact survive.

Rule (count cap plus age exemption):

    sorted newest → oldest
    ┌──────────────────────────────┬──────────────────────────────────────┐
    │ positions 0 .. max_files-1   │ positions >= max_files               │
    │ always kept                  │ evicted only if age >= max_hours     │
    └──────────────────────────────┴──────────────────────────────────────┘

    - Nothing is evicted while the count is <= max_backup_files.
    - A burst of recent edits can therefore leave more than max_backup_files
      versions in place until they age past max_backup_hours.
    - Keys whose timestamp cannot be decoded sort after all decodable keys
      and are never evicted.
    - Equal timestamps are ordered by the full key (descending), so repeated
      runs over the same input evict the same keys.

The policy is pure: it never touches a backend.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Iterable, MutableMapping

from confkeeper.core.config import RetentionConfig
from confkeeper.versioning.keys import extract_timestamp, matches_base_name

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


class RetentionPolicy:
    """Count-cap-plus-age-exemption retention for one artifact's history.

    Attributes:
        max_backup_files: Number of newest versions always retained.
        max_backup_hours: Minimum age before a version beyond the cap may go.

    Example:
        >>> policy = RetentionPolicy(max_backup_files=10, max_backup_hours=48)
        >>> evicted = policy.select_for_eviction(history.keys(), "a.rules", now)
    """

    def __init__(self, max_backup_files: int = 10, max_backup_hours: int = 48) -> None:
        self.max_backup_files = max_backup_files
        self.max_backup_hours = max_backup_hours

    @classmethod
    def from_config(cls, config: RetentionConfig) -> "RetentionPolicy":
        return cls(
            max_backup_files=config.max_backup_files,
            max_backup_hours=config.max_backup_hours,
        )

    def sort_keys(self, keys: Iterable[str], base_name: str) -> list[str]:
        """Return the keys of ``base_name``, newest first.

        Undecodable keys come last, in descending key order.
        """
        decoded = []
        for key in keys:
            if not matches_base_name(key, base_name):
                continue
            moment = extract_timestamp(key, base_name)
            decoded.append((moment is not None, moment or _OLDEST, key))
        decoded.sort(reverse=True)
        return [key for _, _, key in decoded]

    def is_expired(self, key: str, base_name: str, now: datetime) -> bool:
        """True if ``key`` is at least ``max_backup_hours`` old at ``now``."""
        moment = extract_timestamp(key, base_name)
        if moment is None:
            return False
        return now - moment >= timedelta(hours=self.max_backup_hours)

    def select_for_eviction(
        self,
        keys: Iterable[str],
        base_name: str,
        now: datetime,
    ) -> set[str]:
        """Pick the history keys of ``base_name`` that should be removed.

        Args:
            keys: All keys of the history collection (other artifacts'
                keys are ignored).
            base_name: The artifact whose history is being trimmed.
            now: Reference time (timezone-aware UTC).

        Returns:
            The keys to evict. Empty when the count is within the cap.
        """
        ordered = self.sort_keys(keys, base_name)
        if len(ordered) <= self.max_backup_files:
            return set()
        return {
            key
            for key in ordered[self.max_backup_files:]
            if self.is_expired(key, base_name, now)
        }

    def apply(
        self,
        history: MutableMapping[str, str],
        base_name: str,
        now: datetime,
    ) -> set[str]:
        """Remove evicted keys from ``history`` in place and return them."""
        evicted = self.select_for_eviction(list(history), base_name, now)
        for key in evicted:
            del history[key]
        return evicted
