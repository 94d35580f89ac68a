"""
confkeeper.core.enums - Type-Safe Enumerations
================================================

All enums inherit from both `str` and `Enum`, which means:
    - They serialize to strings in JSON/YAML (Pydantic-friendly)
    - They can be compared with plain strings: UpdateOutcome.CREATED == "created"

    ┌─────────────────────────────────────────────────────────────────┐
    │  STORE OUTCOMES                                                 │
    │    UpdateOutcome: CREATED / UPDATED / UNCHANGED                 │
    │    DeleteOutcome: DELETED / NOT_FOUND                           │
    ├─────────────────────────────────────────────────────────────────┤
    │  WIRING                                                         │
    │    ValidatorKind: which validator chain guards a group          │
    │    BackendKind:   which key-value backend holds the collections │
    └─────────────────────────────────────────────────────────────────┘
"""

from enum import Enum


# =============================================================================
# Update Outcome
# =============================================================================
# Result of a successful VersionedStore.put(). Failures are exceptions, so
# only the three "accepted" outcomes appear here:
#
#   CREATED   → Absent  -> Current   (no backup written)
#   UPDATED   → Current -> Current   (previous value archived)
#   UNCHANGED → identical body, nothing written
# =============================================================================
class UpdateOutcome(str, Enum):
    """Outcome of a successful put.

    Usage:
        >>> outcome = await store.put("a.rules", body)
        >>> if outcome == UpdateOutcome.UNCHANGED:
        ...     print("No action taken")
    """

    CREATED = "created"       # First value for this name
    UPDATED = "updated"       # Prior value archived, new value committed
    UNCHANGED = "unchanged"   # Body identical to current value


class DeleteOutcome(str, Enum):
    """Outcome of a delete."""

    DELETED = "deleted"       # Current value and all history removed
    NOT_FOUND = "not_found"   # No current value existed


# =============================================================================
# Validator Kind
# =============================================================================
# Each artifact group names the validator chain that guards its writes. The
# factory in confkeeper.validation.factory maps these to concrete validators:
#
#   PROMETHEUS_CONFIG   → structural prometheus.yml check + promtool check config
#   PROMETHEUS_RULES    → structural "groups" check + promtool check rules
#   ALERTMANAGER_CONFIG → amtool check-config
#   YAML                → well-formed YAML only
#   NONE                → accept everything
# =============================================================================
class ValidatorKind(str, Enum):
    """Validator chain used for an artifact group."""

    PROMETHEUS_CONFIG = "prometheus_config"
    PROMETHEUS_RULES = "prometheus_rules"
    ALERTMANAGER_CONFIG = "alertmanager_config"
    YAML = "yaml"
    NONE = "none"


class BackendKind(str, Enum):
    """Key-value backend implementation."""

    MEMORY = "memory"         # InMemoryKeyValueBackend (dev/test)
    CONFIGMAP = "configmap"   # Kubernetes ConfigMaps (production)
