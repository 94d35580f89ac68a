"""
confkeeper.core.models - Core Data Models
===========================================

Pydantic models shared across the store, the validators and the facade.

    ArtifactGroup  → naming/routing: which collections hold a family of
                     artifacts and which names and validators apply
    Version        → one archived value of an artifact

Both are frozen: groups are configuration, versions are immutable once
created.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from confkeeper.core.enums import ValidatorKind


# =============================================================================
# Artifact Group
# =============================================================================
# A logical group of artifacts stored as a pair of backend collections:
#
#   current_collection  : {base_name: content}
#   history_collection  : {base_name + "-" + timestamp: content}
#
# A group either holds a single well-known file (fixed_name, e.g.
# "prometheus.yml") or any number of files sharing a suffix (".rules").
# =============================================================================
class ArtifactGroup(BaseModel):
    """A named pair of current/history collections with naming rules.

    Attributes:
        name: Group identifier used by the facade ("alertrules", ...).
        current_collection: Backend collection holding current values.
        history_collection: Backend collection holding archived versions.
        required_suffix: If set, every artifact name must end with it.
        fixed_name: If set, this is the only artifact name allowed.
        validator: Which validator chain guards writes to this group.

    Example:
        >>> group = ArtifactGroup(
        ...     name="alertrules",
        ...     current_collection="alertrules",
        ...     history_collection="alertrules-versions",
        ...     required_suffix=".rules",
        ...     validator=ValidatorKind.PROMETHEUS_RULES,
        ... )
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Group identifier")
    current_collection: str = Field(
        min_length=1,
        description="Backend collection holding current values",
    )
    history_collection: str = Field(
        min_length=1,
        description="Backend collection holding archived versions",
    )
    required_suffix: Optional[str] = Field(
        default=None,
        description="Suffix every artifact name must carry (e.g. '.rules')",
    )
    fixed_name: Optional[str] = Field(
        default=None,
        description="The single artifact name this group holds, if any",
    )
    validator: ValidatorKind = Field(
        default=ValidatorKind.NONE,
        description="Validator chain applied before every write",
    )

    @model_validator(mode="after")
    def _check_collections(self) -> "ArtifactGroup":
        if self.current_collection == self.history_collection:
            raise ValueError(
                "current_collection and history_collection must differ"
            )
        return self


# =============================================================================
# Version
# =============================================================================
class Version(BaseModel):
    """An archived value of an artifact.

    Attributes:
        base_name: The artifact this version belongs to.
        timestamp: When the value was archived (UTC, second granularity).
        content: The archived content.
    """

    model_config = ConfigDict(frozen=True)

    base_name: str
    timestamp: datetime
    content: str


# =============================================================================
# Default Groups
# =============================================================================
# The three families of monitoring configuration managed out of the box.
# =============================================================================
PROMETHEUS_CONFIG_FILE_NAME = "prometheus.yml"
ALERTMANAGER_CONFIG_FILE_NAME = "alertmanager.yml"
RULES_SUFFIX = ".rules"


def default_groups() -> list[ArtifactGroup]:
    """Return the built-in artifact groups.

    Returns:
        Groups for prometheus.yml, *.rules files and alertmanager.yml.
    """
    return [
        ArtifactGroup(
            name="prometheus-config",
            current_collection="prometheus-config",
            history_collection="prometheus-config-versions",
            fixed_name=PROMETHEUS_CONFIG_FILE_NAME,
            validator=ValidatorKind.PROMETHEUS_CONFIG,
        ),
        ArtifactGroup(
            name="alertrules",
            current_collection="alertrules",
            history_collection="alertrules-versions",
            required_suffix=RULES_SUFFIX,
            validator=ValidatorKind.PROMETHEUS_RULES,
        ),
        ArtifactGroup(
            name="alertmanager-config",
            current_collection="alertmanager-config",
            history_collection="alertmanager-config-versions",
            fixed_name=ALERTMANAGER_CONFIG_FILE_NAME,
            validator=ValidatorKind.ALERTMANAGER_CONFIG,
        ),
    ]
