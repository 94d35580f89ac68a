"""
confkeeper.versioning - Version Keys and Retention
====================================================

Pure helpers for the history collection:

    - keys:       encode/decode ``base_name-YYYY-MM-DDThh-mm-ss`` keys
    - retention:  decide which archived versions to evict

Usage:
    from confkeeper.versioning import RetentionPolicy, encode_version_key
"""

from confkeeper.versioning.keys import (
    TIMESTAMP_LAYOUT,
    encode_version_key,
    extract_timestamp,
    format_timestamp,
    matches_base_name,
    parse_timestamp,
    version_label,
)
from confkeeper.versioning.retention import RetentionPolicy

__all__ = [
    "TIMESTAMP_LAYOUT",
    "encode_version_key",
    "extract_timestamp",
    "format_timestamp",
    "matches_base_name",
    "parse_timestamp",
    "version_label",
    "RetentionPolicy",
]
