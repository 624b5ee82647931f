"""Tests for configuration loading and parser wiring."""

from unittest.mock import MagicMock

import pytest

from resource_catalog.config import CatalogConfig
from resource_catalog.parser import Parser, new_parser

ENV_VARS = [
    "CATALOG_API_GROUP",
    "CATALOG_API_VERSION",
    "KUBECONFIG",
    "CATALOG_KUBE_CONTEXT",
    "CATALOG_MAX_RETRIES",
    "CATALOG_RETRY_DELAY",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestCatalogConfig:
    def test_defaults(self):
        assert CatalogConfig.from_env() == CatalogConfig()

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("CATALOG_API_GROUP", "apps")
        monkeypatch.setenv("CATALOG_API_VERSION", "v1")
        monkeypatch.setenv("KUBECONFIG", "/etc/kube/config")
        monkeypatch.setenv("CATALOG_KUBE_CONTEXT", "prod")
        monkeypatch.setenv("CATALOG_MAX_RETRIES", "0")
        monkeypatch.setenv("CATALOG_RETRY_DELAY", "0.5")

        assert CatalogConfig.from_env() == CatalogConfig(
            api_group="apps",
            api_version="v1",
            kubeconfig="/etc/kube/config",
            context="prod",
            max_retries=0,
            retry_delay=0.5,
        )

    def test_invalid_number(self, monkeypatch):
        monkeypatch.setenv("CATALOG_MAX_RETRIES", "three")
        with pytest.raises(ValueError):
            CatalogConfig.from_env()


class TestNewParser:
    def test_wires_client_and_schemas(self, openapi_document):
        k8s_client = MagicMock()
        k8s_client.openapi_v2.return_value = openapi_document

        parser = new_parser(k8s_client, CatalogConfig(api_group="apps", context="dev"))

        assert isinstance(parser, Parser)
        assert parser.discovery is k8s_client
        assert parser.api_group == "apps"
        assert parser.api_version == ""
        assert parser.schemas.lookup_resource("apps", "v1", "Deployment") is not None
        k8s_client.openapi_v2.assert_called_once_with()

    def test_default_config(self):
        k8s_client = MagicMock()
        k8s_client.openapi_v2.return_value = {}

        parser = new_parser(k8s_client)

        assert parser.api_group == ""
        assert parser.api_version == ""
        assert len(parser.schemas) == 0
