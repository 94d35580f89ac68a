"""
confkeeper.facade - ConfKeeper Top-Level Facade
=================================================

The single entry point that wires every layer together from one
ConfKeeperConfig. A transport (HTTP API, CLI) only ever talks to this
facade and the VersionedStores it hands out.

    ┌──────────────────────────────────────────────────┐
    │              ConfKeeper (Facade)                 │
    │                                                  │
    │  ┌─────────────────────────────────────────────┐ │
    │  │  VersionedStore per ArtifactGroup           │ │
    │  │   prometheus-config │ alertrules │ ...      │ │
    │  └──────────┬──────────────────────┬───────────┘ │
    │             │                      │             │
    │  ┌──────────▼──────────┐ ┌─────────▼───────────┐ │
    │  │ Validators          │ │ BackendAdapter      │ │
    │  │ (structural + tool) │ │ (confirmed commits) │ │
    │  └─────────────────────┘ └─────────┬───────────┘ │
    │                                    │             │
    │                          ┌─────────▼───────────┐ │
    │                          │ KeyValueBackend     │ │
    │                          │ memory │ configmap  │ │
    │                          └─────────────────────┘ │
    └──────────────────────────────────────────────────┘

Usage:
    >>> async with ConfKeeper(load_config()) as keeper:
    ...     rules = keeper.store("alertrules")
    ...     await rules.put("disk.rules", body)
    ...     await rules.list_versions("disk.rules")
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import structlog

from confkeeper.core.config import ConfKeeperConfig
from confkeeper.core.enums import BackendKind
from confkeeper.core.exceptions import BackendError, ConfigurationError
from confkeeper.core.models import ArtifactGroup
from confkeeper.infrastructure.adapter import BackendAdapter
from confkeeper.infrastructure.backend import InMemoryKeyValueBackend, KeyValueBackend
from confkeeper.infrastructure.configmap import ConfigMapBackend
from confkeeper.store.versioned_store import Clock, VersionedStore
from confkeeper.validation.base import Validator
from confkeeper.validation.factory import create_validator
from confkeeper.versioning.retention import RetentionPolicy


logger = structlog.get_logger()


def configure_logging(log_level: str) -> None:
    """Apply ``log_level`` as the minimum level of structlog loggers.

    Raises:
        ConfigurationError: If the level name is not a standard one.
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ConfigurationError(
            message=f"Unknown log level: {log_level}",
            error_code="INVALID_LOG_LEVEL",
            details={"log_level": log_level},
        )
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(level))


class ConfKeeper:
    """Top-level facade: one backend, one adapter, one store per group.

    Lifecycle:
        1. ``ConfKeeper(config)``  build components (no I/O)
        2. ``await initialize()``  configure logging, connect the backend
        3. ``store(name)``         obtain the VersionedStore of a group
        4. ``await shutdown()``    disconnect the backend

    Or use the async context manager:
        async with ConfKeeper(config) as keeper:
            ...

    Attributes:
        config: The configuration used to build the facade.
        backend: The key-value backend in use.
        adapter: The shared BackendAdapter.
    """

    def __init__(
        self,
        config: Optional[ConfKeeperConfig] = None,
        *,
        backend: Optional[KeyValueBackend] = None,
        validators: Optional[dict[str, Validator]] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        """Build all components.

        Args:
            config: Settings. Defaults to ConfKeeperConfig() (environment).
            backend: Optional custom backend. Defaults to the kind named by
                ``config.backend``.
            validators: Optional per-group validator overrides, keyed by
                group name. Groups without an override get
                ``create_validator(group.validator, config.validators)``.
            clock: Optional time source for archive timestamps.
        """
        self._config = config or ConfKeeperConfig()
        self._backend = backend or self._create_backend(self._config)
        self._adapter = BackendAdapter(self._backend, self._config.confirmation)
        retention = RetentionPolicy.from_config(self._config.retention)

        overrides = validators or {}
        self._stores: dict[str, VersionedStore] = {}
        for group in self._config.groups:
            if group.name in self._stores:
                raise ConfigurationError(
                    message=f"Duplicate artifact group: {group.name}",
                    error_code="DUPLICATE_GROUP",
                    details={"group": group.name},
                )
            validator = overrides.get(group.name) or create_validator(
                group.validator, self._config.validators
            )
            self._stores[group.name] = VersionedStore(
                self._adapter,
                group,
                validator=validator,
                retention=retention,
                clock=clock,
            )

        self._initialized = False
        self._logger = logger.bind(component="confkeeper")

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def config(self) -> ConfKeeperConfig:
        return self._config

    @property
    def backend(self) -> KeyValueBackend:
        return self._backend

    @property
    def adapter(self) -> BackendAdapter:
        return self._adapter

    @property
    def groups(self) -> list[ArtifactGroup]:
        return [store.group for store in self._stores.values()]

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def initialize(self) -> None:
        """Configure logging and connect the backend. Idempotent."""
        if self._initialized:
            return
        configure_logging(self._config.log_level)
        await self._backend.connect()
        self._initialized = True
        self._logger.info(
            "confkeeper_initialized",
            backend=type(self._backend).__name__,
            groups=[group.name for group in self.groups],
        )

    async def shutdown(self) -> None:
        """Disconnect the backend. Safe to call more than once."""
        if not self._initialized:
            return
        await self._backend.disconnect()
        self._initialized = False
        self._logger.info("confkeeper_shutdown")

    async def __aenter__(self) -> "ConfKeeper":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        await self.shutdown()

    # =========================================================================
    # Stores
    # =========================================================================

    def store(self, group_name: str) -> VersionedStore:
        """Return the VersionedStore of ``group_name``.

        Raises:
            ConfigurationError: If no such group is configured.
        """
        try:
            return self._stores[group_name]
        except KeyError:
            raise ConfigurationError(
                message=f"Unknown artifact group: {group_name}",
                error_code="UNKNOWN_GROUP",
                details={"group": group_name, "known": sorted(self._stores)},
            ) from None

    async def health(self) -> dict[str, Any]:
        """Check that every group's current collection can be read.

        Returns:
            ``{"status": "ok" | "degraded", "groups": {name: "ok" | error}}``
        """
        groups: dict[str, str] = {}
        for name, store in self._stores.items():
            try:
                await self._adapter.read(store.group.current_collection)
                groups[name] = "ok"
            except BackendError as exc:
                groups[name] = exc.message
        status = "ok" if all(v == "ok" for v in groups.values()) else "degraded"
        return {"status": status, "groups": groups}

    @staticmethod
    def _create_backend(config: ConfKeeperConfig) -> KeyValueBackend:
        if config.backend == BackendKind.CONFIGMAP:
            return ConfigMapBackend(config.kubernetes)
        return InMemoryKeyValueBackend()
