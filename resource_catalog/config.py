"""Configuration for resource discovery."""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass
class CatalogConfig:
    """Configuration for discovering and indexing resources."""
    api_group: str = ""  # only index this API group when set
    api_version: str = ""  # only index this API version when set
    kubeconfig: str | None = None
    context: str | None = None
    max_retries: int = 3
    retry_delay: float = 1.0  # seconds

    @classmethod
    def from_env(cls) -> CatalogConfig:
        """Create a configuration from environment variables.

        Raises:
            ValueError: If a numeric variable cannot be parsed
        """
        return cls(
            api_group=os.getenv("CATALOG_API_GROUP", ""),
            api_version=os.getenv("CATALOG_API_VERSION", ""),
            kubeconfig=os.getenv("KUBECONFIG") or None,
            context=os.getenv("CATALOG_KUBE_CONTEXT") or None,
            max_retries=int(os.getenv("CATALOG_MAX_RETRIES", "3")),
            retry_delay=float(os.getenv("CATALOG_RETRY_DELAY", "1.0")),
        )
