"""Kubernetes discovery client.

This module fetches the raw discovery documents the parser indexes: the
resource lists announced for every served group-version and the OpenAPI v2
document describing their schemas. Requests are retried with exponential
backoff and API errors are mapped onto a small exception hierarchy.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Generator
from contextlib import contextmanager
from typing import Any

from kubernetes import client, config
from kubernetes.client import ApiException

from .config import CatalogConfig
from .resource import APIResourceList


class K8sConnectionError(Exception):
    """Raised when Kubernetes connection fails."""


class K8sAuthenticationError(Exception):
    """Raised when Kubernetes authentication fails."""


class K8sResourceNotFoundError(Exception):
    """Raised when a requested Kubernetes resource is not found."""


class K8sPermissionError(Exception):
    """Raised when insufficient permissions for Kubernetes operation."""


class K8sClient:
    """Synchronous discovery client with retry logic."""

    def __init__(
        self,
        kubeconfig: str | None = None,
        context: str | None = None,
        max_retries: int = 3,
        retry_delay: float = 1.0,
    ):
        """Initialize the Kubernetes client.

        Args:
            kubeconfig: Path to a kubeconfig file (None for the default lookup)
            context: Kubeconfig context to use (None for the current context)
            max_retries: Maximum number of retry attempts for failed requests
            retry_delay: Base delay between retries in seconds
        """
        self.kubeconfig = kubeconfig
        self.context = context
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.logger = logging.getLogger(__name__)

        self._api_client: client.ApiClient | None = None

    @classmethod
    def from_config(cls, catalog_config: CatalogConfig) -> K8sClient:
        """Create a client from the connection settings of a catalog configuration."""
        return cls(
            kubeconfig=catalog_config.kubeconfig,
            context=catalog_config.context,
            max_retries=catalog_config.max_retries,
            retry_delay=catalog_config.retry_delay,
        )

    def connect(self) -> None:
        """Load cluster configuration and create the API client."""
        if self.kubeconfig or self.context:
            self._load_kube_config()
        else:
            # First try in-cluster config, then fall back to local config
            try:
                config.load_incluster_config()
                self.logger.info("Using in-cluster Kubernetes configuration")
            except config.ConfigException:
                self._load_kube_config()

        configuration = client.Configuration.get_default_copy()
        configuration.retries = 0  # We handle retries manually
        self._api_client = client.ApiClient(configuration)
        self.logger.debug("Kubernetes API client created")

    def _load_kube_config(self) -> None:
        try:
            config.load_kube_config(config_file=self.kubeconfig, context=self.context)
            self.logger.info("Using local Kubernetes configuration")
        except (config.ConfigException, OSError) as e:
            raise K8sAuthenticationError(
                f"Unable to load Kubernetes configuration: {e}"
            ) from e

    def disconnect(self) -> None:
        """Release the API client."""
        if self._api_client:
            self._api_client.close()
        self._api_client = None
        self.logger.debug("Disconnected from Kubernetes cluster")

    @contextmanager
    def connection(self) -> Generator[K8sClient, None, None]:
        """Context manager for managing Kubernetes connections."""
        try:
            self.connect()
            yield self
        finally:
            self.disconnect()

    @property
    def is_connected(self) -> bool:
        return self._api_client is not None

    def _ensure_connected(self) -> client.ApiClient:
        if self._api_client is None:
            self.connect()
        return self._api_client

    def _retry_request(self, func: Callable[..., Any], *args, **kwargs) -> Any:
        """Execute a request with retry logic."""
        last_exception: Exception | None = None
        for attempt in range(self.max_retries + 1):
            try:
                return func(*args, **kwargs)
            except ApiException as e:
                last_exception = e
                # Don't retry on certain errors
                if e.status == 401:
                    raise K8sAuthenticationError("Authentication failed") from e
                if e.status == 403:
                    raise K8sPermissionError("Insufficient permissions") from e
                if e.status == 404:
                    raise K8sResourceNotFoundError("Resource not found") from e
            except Exception as e:
                last_exception = e

            if attempt < self.max_retries:
                delay = self.retry_delay * (2 ** attempt)  # Exponential backoff
                self.logger.warning(
                    f"Request failed (attempt {attempt + 1}), retrying in {delay}s: {last_exception}"
                )
                time.sleep(delay)

        raise K8sConnectionError(
            f"Request failed after {self.max_retries + 1} attempts"
        ) from last_exception

    def _get(self, path: str, response_type: str) -> Any:
        api_client = self._ensure_connected()
        return self._retry_request(
            api_client.call_api,
            path,
            "GET",
            header_params={"Accept": "application/json"},
            response_type=response_type,
            auth_settings=["BearerToken"],
            _return_http_data_only=True,
        )

    def server_groups(self) -> list[str]:
        """List every served group-version, legacy core versions first.

        Returns:
            Group-version strings in server order (e.g. ``["v1", "apps/v1"]``)
        """
        api_client = self._ensure_connected()
        core = self._retry_request(client.CoreApi(api_client).get_api_versions)
        groups = self._retry_request(client.ApisApi(api_client).get_api_versions)

        group_versions = list(core.versions or [])
        for group in groups.groups or []:
            group_versions.extend(v.group_version for v in group.versions or [])
        return group_versions

    def server_resources_for_group_version(self, group_version: str) -> APIResourceList:
        """Fetch the resources announced for one group-version."""
        prefix = "/apis" if "/" in group_version else "/api"
        response = self._get(f"{prefix}/{group_version}", "V1APIResourceList")
        announcement = APIResourceList.from_k8s(response)
        if not announcement.group_version:
            announcement.group_version = group_version
        return announcement

    def server_resources(self) -> list[APIResourceList]:
        """Fetch the resource lists of every served group-version.

        Raises:
            K8sAuthenticationError: If authentication fails
            K8sPermissionError: If insufficient permissions
            K8sResourceNotFoundError: If a group-version disappears mid-discovery
            K8sConnectionError: If requests keep failing
        """
        announcements = []
        for group_version in self.server_groups():
            announcements.append(self.server_resources_for_group_version(group_version))
            self.logger.debug(
                f"Discovered {len(announcements[-1].resources)} resources in {group_version}"
            )
        return announcements

    def openapi_v2(self) -> dict[str, Any]:
        """Fetch the OpenAPI v2 document served at ``/openapi/v2``."""
        return self._get("/openapi/v2", "object")
