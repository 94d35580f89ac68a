"""
confkeeper.infrastructure.configmap - Kubernetes ConfigMap Backend
====================================================================

Stores each collection as the ``data`` map of a Kubernetes ConfigMap in a
single namespace. The ConfigMaps must already exist; ConfKeeper only ever
replaces their data.

    collection_id  ──►  ConfigMap name
    key            ──►  ConfigMap data key
    value          ──►  ConfigMap data value

Consistency:
    The API server accepts a replace before every reader observes it, and
    pods that mount the ConfigMap see the change later still. Confirmation
    happens one level up, in BackendAdapter.

Threading:
    The official kubernetes client is synchronous. Every call runs in the
    event loop's default executor so a slow API server never blocks other
    coroutines.
"""

from __future__ import annotations

import asyncio
import functools
from typing import Any, Optional

import structlog
from kubernetes import client as k8s_client
from kubernetes import config as k8s_config
from kubernetes.config.config_exception import ConfigException

from confkeeper.core.config import KubernetesConfig
from confkeeper.core.exceptions import ConfigurationError
from confkeeper.infrastructure.backend import KeyValueBackend


logger = structlog.get_logger()


class ConfigMapBackend(KeyValueBackend):
    """Key-value backend over Kubernetes ConfigMaps.

    Attributes:
        namespace: Namespace holding the ConfigMaps.

    Example:
        >>> backend = ConfigMapBackend(KubernetesConfig(namespace="monitoring"))
        >>> await backend.connect()
        >>> await backend.get("alertrules")
    """

    def __init__(
        self,
        config: Optional[KubernetesConfig] = None,
        *,
        core_api: Optional[Any] = None,
    ) -> None:
        """Initialize the backend.

        Args:
            config: Namespace and client settings.
            core_api: Pre-built CoreV1Api (or a stand-in). When given,
                connect() does not load any kubeconfig.
        """
        self._config = config or KubernetesConfig()
        self._api = core_api
        self._logger = logger.bind(
            component="configmap_backend",
            namespace=self._config.namespace,
        )

    @property
    def namespace(self) -> str:
        return self._config.namespace

    async def connect(self) -> None:
        """Load Kubernetes client configuration and build the CoreV1 client.

        Raises:
            ConfigurationError: If no usable cluster configuration is found.
        """
        if self._api is not None:
            return
        try:
            if self._config.in_cluster:
                k8s_config.load_incluster_config()
            else:
                k8s_config.load_kube_config(config_file=self._config.kubeconfig)
        except ConfigException as exc:
            raise ConfigurationError(
                message=f"Unable to load Kubernetes configuration: {exc}",
                error_code="KUBERNETES_CONFIG_ERROR",
                details={
                    "in_cluster": self._config.in_cluster,
                    "kubeconfig": self._config.kubeconfig,
                },
            ) from exc
        self._api = k8s_client.CoreV1Api()
        self._logger.info("configmap_backend_connected")

    async def get(self, collection_id: str) -> Optional[dict[str, str]]:
        config_map = await self._call(
            "read_namespaced_config_map", collection_id, self.namespace
        )
        data = config_map.data
        if data is None:
            return None
        return dict(data)

    async def put(self, collection_id: str, data: dict[str, str]) -> None:
        # Read-modify-replace keeps labels and annotations of the ConfigMap.
        config_map = await self._call(
            "read_namespaced_config_map", collection_id, self.namespace
        )
        config_map.data = dict(data)
        await self._call(
            "replace_namespaced_config_map", collection_id, self.namespace, config_map
        )
        self._logger.debug(
            "configmap_replaced",
            collection_id=collection_id,
            keys=len(data),
        )

    async def _call(self, method: str, *args: Any) -> Any:
        if self._api is None:
            raise ConfigurationError(
                message="ConfigMapBackend used before connect()",
                error_code="BACKEND_NOT_CONNECTED",
            )
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None, functools.partial(getattr(self._api, method), *args)
        )
