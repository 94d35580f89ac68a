"""
confkeeper.core.config - Configuration Management
===================================================

This module provides the configuration system for ConfKeeper. Configuration
can be loaded from multiple sources with the following priority (highest first):

    1. Explicit constructor arguments
    2. Environment variables (prefixed with CONFKEEPER_)
    3. YAML configuration file (confkeeper.yaml)
    4. Default values defined in the models below

Architecture Context:
    Configuration flows DOWN through the system. The top-level ConfKeeperConfig
    is created once and handed to the facade, which passes each section to the
    component that needs it:

        ConfKeeperConfig
            ├── RetentionConfig     → RetentionPolicy → VersionedStore
            ├── ConfirmationConfig  → BackendAdapter
            ├── ValidatorConfig     → validator factory (promtool / amtool)
            ├── KubernetesConfig    → ConfigMapBackend
            └── groups              → one VersionedStore per ArtifactGroup

    No component reads ambient module-level settings; everything arrives
    through a constructor.

Usage:
    # Load from environment variables:
    config = ConfKeeperConfig()

    # Load from YAML file:
    config = load_config("confkeeper.yaml")

    # Explicit overrides:
    config = ConfKeeperConfig(backend="configmap", log_level="DEBUG")

Environment Variables:
    CONFKEEPER_LOG_LEVEL=DEBUG
    CONFKEEPER_BACKEND=configmap
    CONFKEEPER_KUBERNETES__NAMESPACE=monitoring
    CONFKEEPER_RETENTION__MAX_BACKUP_FILES=20
    CONFKEEPER_VALIDATORS__PROMTOOL_PATH=/usr/bin/promtool
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from confkeeper.core.enums import BackendKind
from confkeeper.core.exceptions import ConfigurationError
from confkeeper.core.models import ArtifactGroup, default_groups


# =============================================================================
# Retention Configuration
# =============================================================================
# Backends such as Kubernetes ConfigMaps have limited space (1 MiB), so the
# history collection must be trimmed. A version is evicted only when BOTH
# limits agree: it is beyond the newest max_backup_files AND it is at least
# max_backup_hours old.
# =============================================================================
class RetentionConfig(BaseModel):
    """Limits applied to each artifact's history.

    Attributes:
        max_backup_files: Versions always kept per artifact (newest first).
        max_backup_hours: Versions younger than this are never evicted,
            even beyond max_backup_files.
    """

    max_backup_files: int = Field(
        default=10,
        ge=1,
        description="Number of most recent versions always retained",
    )
    max_backup_hours: int = Field(
        default=48,
        ge=0,
        description="Versions younger than this many hours are never evicted",
    )


# =============================================================================
# Confirmation Configuration
# =============================================================================
# Controls the read-after-write loop in BackendAdapter.commit(). The backend
# is eventually consistent; a write is reported as done only once the adapter
# can read its own write back.
# =============================================================================
class ConfirmationConfig(BaseModel):
    """Read-after-write confirmation settings.

    Attributes:
        poll_interval_seconds: Delay between read-back attempts.
        timeout_seconds: Total time to wait before giving up with
            ConfirmationTimeoutError.
    """

    poll_interval_seconds: float = Field(
        default=0.3,
        gt=0,
        description="Delay between read-back polls in seconds",
    )
    timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Maximum time to wait for a write to become visible",
    )


class ValidatorConfig(BaseModel):
    """Paths and limits for external validation tools.

    Attributes:
        promtool_path: Location of the Prometheus ``promtool`` binary.
        amtool_path: Location of the Alertmanager ``amtool`` binary.
        timeout_seconds: Optional cap on a tool run. None waits forever,
            which blocks the calling request if the tool hangs.
    """

    promtool_path: str = Field(
        default="/opt/tools/bin/promtool",
        description="Path of the promtool binary",
    )
    amtool_path: str = Field(
        default="/opt/tools/bin/amtool",
        description="Path of the amtool binary",
    )
    timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="Timeout for an external validator run (None = no limit)",
    )


class KubernetesConfig(BaseModel):
    """Settings for the ConfigMap backend.

    Attributes:
        namespace: Namespace holding the ConfigMaps.
        kubeconfig: Path to a kubeconfig file (out-of-cluster only).
        in_cluster: Load the service-account config instead of a kubeconfig.
    """

    namespace: str = Field(
        default="default",
        description="Namespace holding the ConfigMaps",
    )
    kubeconfig: Optional[str] = Field(
        default=None,
        description="Path to a kubeconfig. Only required if out-of-cluster.",
    )
    in_cluster: bool = Field(
        default=True,
        description="Use in-cluster service account configuration",
    )


# =============================================================================
# Main Configuration
# =============================================================================
# Environment Variable Mapping:
#   CONFKEEPER_LOG_LEVEL                  → config.log_level
#   CONFKEEPER_BACKEND                    → config.backend
#   CONFKEEPER_CONFIRMATION__TIMEOUT_SECONDS → config.confirmation.timeout_seconds
#   CONFKEEPER_GROUPS='[{"name": ...}]'   → config.groups (JSON)
# =============================================================================
class ConfKeeperConfig(BaseSettings):
    """Top-level configuration for ConfKeeper.

    Attributes:
        environment: Deployment environment.
        log_level: Minimum structlog level (DEBUG, INFO, WARNING, ERROR).
        backend: Which key-value backend holds the collections.
        retention: History limits (see RetentionConfig).
        confirmation: Read-after-write loop settings.
        validators: External tool settings.
        kubernetes: ConfigMap backend settings.
        groups: Artifact groups to manage. Defaults to prometheus.yml,
            *.rules and alertmanager.yml.

    Example:
        >>> config = ConfKeeperConfig(
        ...     backend="memory",
        ...     confirmation=ConfirmationConfig(timeout_seconds=1.0),
        ... )
    """

    # -------------------------------------------------------------------------
    # General Settings
    # -------------------------------------------------------------------------
    environment: Literal["dev", "staging", "prod"] = Field(
        default="dev",
        description="Deployment environment",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    backend: BackendKind = Field(
        default=BackendKind.MEMORY,
        description="Key-value backend: 'memory' or 'configmap'",
    )

    # -------------------------------------------------------------------------
    # Nested Configurations
    # -------------------------------------------------------------------------
    retention: RetentionConfig = Field(default_factory=RetentionConfig)
    confirmation: ConfirmationConfig = Field(default_factory=ConfirmationConfig)
    validators: ValidatorConfig = Field(default_factory=ValidatorConfig)
    kubernetes: KubernetesConfig = Field(default_factory=KubernetesConfig)
    groups: list[ArtifactGroup] = Field(default_factory=default_groups)

    model_config = {
        "env_prefix": "CONFKEEPER_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
    }

    def get_group(self, name: str) -> ArtifactGroup:
        """Look up a configured artifact group by name.

        Raises:
            ConfigurationError: If no group has that name.
        """
        for group in self.groups:
            if group.name == name:
                return group
        raise ConfigurationError(
            message=f"Unknown artifact group: {name}",
            error_code="UNKNOWN_GROUP",
            details={"group": name, "known": [g.name for g in self.groups]},
        )


# =============================================================================
# Configuration Loader
# =============================================================================
def load_config(path: Optional[str] = None) -> ConfKeeperConfig:
    """Load ConfKeeper configuration from a YAML file and/or environment.

    Args:
        path: Path to a YAML configuration file. If None, looks for
            'confkeeper.yaml' in the current directory, falling back to
            defaults plus environment variables.

    Returns:
        A fully validated ConfKeeperConfig instance.

    Raises:
        FileNotFoundError: If an explicit path is provided but doesn't exist.
        ConfigurationError: If the YAML file cannot be parsed.
    """
    if path is None:
        default_path = Path("confkeeper.yaml")
        if default_path.exists():
            path = str(default_path)

    yaml_data: dict[str, Any] = {}
    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(config_path) as f:
            try:
                raw_data = yaml.safe_load(f)
            except yaml.YAMLError as exc:
                raise ConfigurationError(
                    message=f"Invalid YAML in configuration file: {path}",
                    error_code="CONFIG_PARSE_ERROR",
                    details={"path": path, "error": str(exc)},
                ) from exc
            if isinstance(raw_data, dict):
                yaml_data = raw_data

    return ConfKeeperConfig(**yaml_data)
