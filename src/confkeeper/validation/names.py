"""
confkeeper.validation.names - Artifact Name Validation
========================================================

Artifact names become keys of backend collections, and (via the version key
``name-YYYY-MM-DDThh-mm-ss``) keys of the history collection. They must be
valid ConfigMap keys:

    - 1 to 253 characters
    - only letters, digits, "-", "_" and "."
    - at least one letter, digit or "_" (a name of only dots and hyphens
      is rejected)

Groups add their own rule on top: either a required suffix (".rules") or a
single fixed name ("prometheus.yml").
"""

from __future__ import annotations

import re

from confkeeper.core.exceptions import InvalidNameError
from confkeeper.core.models import ArtifactGroup

MAX_NAME_LENGTH = 253

_KEY_NAME = re.compile(r"^[-._a-zA-Z0-9]+$")
_WORD_CHAR = re.compile(r"\w")


def validate_key_name(name: str) -> None:
    """Check that ``name`` is a usable collection key.

    Raises:
        InvalidNameError: If the name is empty, too long, or uses
            characters outside ``[-._a-zA-Z0-9]``.
    """
    if not name or len(name) > MAX_NAME_LENGTH:
        raise InvalidNameError(
            message=f"Names must be between 1 and {MAX_NAME_LENGTH} characters long",
            name=name,
        )
    if not _KEY_NAME.match(name):
        raise InvalidNameError(
            message="Names may contain only ASCII letters, digits, '-', '_' and '.'",
            name=name,
        )
    if not _WORD_CHAR.search(name.replace("-", "")):
        raise InvalidNameError(
            message="Names must contain at least one letter, digit or underscore",
            name=name,
        )


def validate_artifact_name(name: str, group: ArtifactGroup) -> None:
    """Check ``name`` against the key rules and the group's naming rule.

    Raises:
        InvalidNameError: If the name is not allowed in ``group``.
    """
    validate_key_name(name)

    if group.fixed_name is not None and name != group.fixed_name:
        raise InvalidNameError(
            message=f"Group {group.name} only holds {group.fixed_name}",
            name=name,
            details={"group": group.name},
        )

    suffix = group.required_suffix
    if suffix:
        if not name.endswith(suffix):
            raise InvalidNameError(
                message=f"File name must end with: {suffix}",
                name=name,
                details={"group": group.name},
            )
        if name == suffix:
            raise InvalidNameError(
                message="Invalid file name.",
                name=name,
                details={"group": group.name},
            )
