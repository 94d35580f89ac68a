"""
confkeeper.store - Versioned Configuration Store
==================================================

    - VersionedStore:  current values plus bounded history for one
                       ArtifactGroup, with the validate-then-commit protocol

Usage:
    from confkeeper.store import VersionedStore
"""

from confkeeper.store.versioned_store import VersionedStore, utc_now

__all__ = ["VersionedStore", "utc_now"]
