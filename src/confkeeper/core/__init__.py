"""
confkeeper.core - Foundation Layer
====================================

The foundational building blocks every other ConfKeeper module depends on:

    - config:      Configuration management (ConfKeeperConfig and sections)
    - enums:       Outcome and wiring enumerations
    - models:      ArtifactGroup and Version models
    - exceptions:  Structured exception hierarchy

Dependency Rule:
    core/ depends on NOTHING else in the confkeeper package.
"""

from confkeeper.core.config import (
    ConfirmationConfig,
    ConfKeeperConfig,
    KubernetesConfig,
    RetentionConfig,
    ValidatorConfig,
    load_config,
)
from confkeeper.core.enums import (
    BackendKind,
    DeleteOutcome,
    UpdateOutcome,
    ValidatorKind,
)
from confkeeper.core.exceptions import (
    BackendError,
    BackendReadError,
    BackendWriteError,
    ConfigurationError,
    ConfirmationTimeoutError,
    ConfKeeperError,
    InvalidNameError,
    InvalidTimestampError,
    RetryTimeoutError,
    ValidationError,
)
from confkeeper.core.models import ArtifactGroup, Version, default_groups

__all__ = [
    # Config
    "ConfKeeperConfig",
    "RetentionConfig",
    "ConfirmationConfig",
    "ValidatorConfig",
    "KubernetesConfig",
    "load_config",
    # Enums
    "BackendKind",
    "DeleteOutcome",
    "UpdateOutcome",
    "ValidatorKind",
    # Models
    "ArtifactGroup",
    "Version",
    "default_groups",
    # Exceptions
    "ConfKeeperError",
    "ConfigurationError",
    "ValidationError",
    "InvalidNameError",
    "InvalidTimestampError",
    "RetryTimeoutError",
    "BackendError",
    "BackendReadError",
    "BackendWriteError",
    "ConfirmationTimeoutError",
]
