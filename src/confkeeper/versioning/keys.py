"""
confkeeper.versioning.keys - Version Key Codec
================================================

Archived versions live in the history collection under a composite key:

    base_name + "-" + timestamp          e.g. "a.rules-2024-03-01T12-30-05"

The timestamp is UTC with second granularity and the fixed layout
``YYYY-MM-DDThh-mm-ss``. Hyphens are used in the time part because the key
must be a valid ConfigMap key (``[-._a-zA-Z0-9]``), which rules out colons.

Decoding:
    A key can only be decoded when the base_name is already known: the codec
    strips the literal ``base_name + "-"`` prefix and parses the remainder.
    Keys whose remainder does not parse are "foreign". They are still listed
    but never take part in time-ordered decisions such as eviction.

Known Limitation:
    matches_base_name() is a plain prefix test. With base names "foo" and
    "foobar", keys of "foobar" also match "foo". Their remainders do not
    parse as timestamps under "foo", so they are treated as foreign keys of
    "foo": listed, never evicted, and removed by delete("foo"). Choose base
    names that are not prefixes of each other.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Optional

from confkeeper.core.exceptions import InvalidTimestampError


# =============================================================================
# Constants
# =============================================================================
TIMESTAMP_LAYOUT = "%Y-%m-%dT%H-%M-%S"
KEY_SEPARATOR = "-"

# Permissive pre-check applied to caller-supplied timestamps before parsing.
_TIMESTAMP_CHARS = re.compile(r"^[0-9T-]*$")

# Exact shape of a rendered timestamp. strptime alone accepts unpadded fields
# ("2024-3-1T1-2-3"), which format_timestamp() never produces.
_TIMESTAMP_SHAPE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}-\d{2}-\d{2}$")


# =============================================================================
# Timestamps
# =============================================================================
def format_timestamp(moment: datetime) -> str:
    """Render a datetime in the version key layout.

    Naive datetimes are taken to be UTC already; aware ones are converted.
    Sub-second precision is dropped.

    Example:
        >>> format_timestamp(datetime(2024, 3, 1, 12, 30, 5, tzinfo=timezone.utc))
        '2024-03-01T12-30-05'
    """
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime(TIMESTAMP_LAYOUT)


def parse_timestamp(text: str) -> datetime:
    """Parse a version timestamp supplied by a caller.

    Args:
        text: Timestamp in ``YYYY-MM-DDThh-mm-ss`` layout.

    Returns:
        A timezone-aware UTC datetime.

    Raises:
        InvalidTimestampError: If the text contains anything other than
            digits, hyphens and "T", or does not match the layout.
    """
    if not text or not _TIMESTAMP_CHARS.match(text):
        raise InvalidTimestampError(
            message="The version timestamp provided is not valid.",
            timestamp=text,
        )
    if not _TIMESTAMP_SHAPE.match(text):
        raise InvalidTimestampError(
            message="The version timestamp must use the layout YYYY-MM-DDThh-mm-ss.",
            timestamp=text,
        )
    try:
        parsed = datetime.strptime(text, TIMESTAMP_LAYOUT)
    except ValueError as exc:
        raise InvalidTimestampError(
            message=f"The version timestamp provided is not a valid date: {exc}",
            timestamp=text,
        ) from exc
    return parsed.replace(tzinfo=timezone.utc)


# =============================================================================
# Keys
# =============================================================================
def encode_version_key(base_name: str, moment: datetime) -> str:
    """Build the history key for ``base_name`` archived at ``moment``."""
    return f"{base_name}{KEY_SEPARATOR}{format_timestamp(moment)}"


def matches_base_name(key: str, base_name: str) -> bool:
    """Return True if ``key`` starts with ``base_name`` (literal prefix)."""
    return key.startswith(base_name)


def version_label(key: str, base_name: str) -> str:
    """Return the part of ``key`` after ``base_name + "-"``.

    Keys without that prefix are returned unchanged.
    """
    prefix = base_name + KEY_SEPARATOR
    if key.startswith(prefix):
        return key[len(prefix):]
    return key


def extract_timestamp(key: str, base_name: str) -> Optional[datetime]:
    """Decode the timestamp of a history key.

    Never raises: foreign or malformed keys yield None so callers can skip
    them in time-ordered operations.

    Returns:
        The UTC timestamp, or None if the key does not decode under
        ``base_name``.
    """
    prefix = base_name + KEY_SEPARATOR
    if not key.startswith(prefix):
        return None
    try:
        return parse_timestamp(key[len(prefix):])
    except InvalidTimestampError:
        return None
