"""Shared fixtures: a small OpenAPI document and an in-memory discovery source."""

import pytest

from resource_catalog.parser import Parser
from resource_catalog.resource import APIResource, APIResourceList
from resource_catalog.schema import OpenAPISchemaIndex


def gvk(group, version, kind):
    return [{"group": group, "version": version, "kind": kind}]


OPENAPI_DOCUMENT = {
    "swagger": "2.0",
    "definitions": {
        "io.k8s.apimachinery.pkg.apis.meta.v1.ObjectMeta": {
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "labels": {"type": "object", "additionalProperties": {"type": "string"}},
            },
        },
        "io.k8s.api.apps.v1.Deployment": {
            "type": "object",
            "properties": {
                "apiVersion": {"type": "string"},
                "kind": {"type": "string"},
                "metadata": {"$ref": "#/definitions/io.k8s.apimachinery.pkg.apis.meta.v1.ObjectMeta"},
                "spec": {"$ref": "#/definitions/io.k8s.api.apps.v1.DeploymentSpec"},
            },
            "x-kubernetes-group-version-kind": gvk("apps", "v1", "Deployment"),
        },
        "io.k8s.api.apps.v1.DeploymentSpec": {
            "type": "object",
            "properties": {
                "replicas": {"type": "integer"},
                "template": {"$ref": "#/definitions/io.k8s.api.core.v1.PodTemplateSpec"},
            },
        },
        "io.k8s.api.extensions.v1beta1.Deployment": {
            "type": "object",
            "properties": {
                "spec": {"type": "object", "properties": {"replicas": {"type": "integer"}}},
            },
            "x-kubernetes-group-version-kind": gvk("extensions", "v1beta1", "Deployment"),
        },
        "io.k8s.api.autoscaling.v1.Scale": {
            "type": "object",
            "properties": {
                "spec": {"type": "object", "properties": {"replicas": {"type": "integer"}}},
            },
            "x-kubernetes-group-version-kind": gvk("autoscaling", "v1", "Scale"),
        },
        "io.k8s.api.core.v1.PodTemplateSpec": {
            "type": "object",
            "properties": {
                "spec": {"$ref": "#/definitions/io.k8s.api.core.v1.PodSpec"},
            },
        },
        "io.k8s.api.core.v1.PodSpec": {
            "type": "object",
            "properties": {
                "nodeName": {"type": "string"},
                "containers": {
                    "type": "array",
                    "items": {"$ref": "#/definitions/io.k8s.api.core.v1.Container"},
                },
            },
        },
        "io.k8s.api.core.v1.Container": {
            "type": "object",
            "properties": {"image": {"type": "string"}},
        },
        "io.k8s.api.core.v1.Pod": {
            "type": "object",
            "properties": {
                "metadata": {"$ref": "#/definitions/io.k8s.apimachinery.pkg.apis.meta.v1.ObjectMeta"},
                "spec": {"$ref": "#/definitions/io.k8s.api.core.v1.PodSpec"},
            },
            "x-kubernetes-group-version-kind": gvk("", "v1", "Pod"),
        },
        "io.k8s.api.core.v1.Node": {
            "type": "object",
            "properties": {
                "spec": {"type": "object", "properties": {"unschedulable": {"type": "boolean"}}},
            },
            "x-kubernetes-group-version-kind": gvk("", "v1", "Node"),
        },
        "io.k8s.api.core.v1.Service": {
            "type": "object",
            "properties": {
                "spec": {"type": "object", "properties": {"clusterIP": {"type": "string"}}},
            },
            "x-kubernetes-group-version-kind": gvk("", "v1", "Service"),
        },
    },
}


class FakeDiscovery:
    """Discovery source serving a fixed list of announcements."""

    def __init__(self, announcements=None, error=None):
        self.announcements = announcements or []
        self.error = error
        self.calls = 0

    def server_resources(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.announcements


def announcement(group_version, *resources):
    return APIResourceList(
        group_version=group_version,
        resources=[APIResource(name=name, kind=kind, namespaced=True, verbs=["get", "list"]) for name, kind in resources],
    )


@pytest.fixture
def openapi_document():
    return OPENAPI_DOCUMENT


@pytest.fixture
def schema_index(openapi_document):
    return OpenAPISchemaIndex(openapi_document)


@pytest.fixture
def cluster_announcements():
    """Announcements resembling a small cluster, in server preference order."""
    return [
        announcement("v1", ("pods", "Pod"), ("pods/status", "Pod"), ("nodes", "Node"), ("services", "Service")),
        announcement(
            "extensions/v1beta1",
            ("deployments", "Deployment"),
            ("deployments/status", "Deployment"),
        ),
        APIResourceList(
            group_version="apps/v1",
            resources=[
                APIResource(name="deployments", kind="Deployment", namespaced=True, verbs=["get", "list", "watch"]),
                APIResource(name="deployments/status", kind="Deployment", namespaced=True, verbs=["get", "patch"]),
                APIResource(name="deployments/scale", kind="Scale", group="autoscaling", version="v1", namespaced=True),
            ],
        ),
    ]


@pytest.fixture
def make_parser(schema_index):
    def _make(announcements, **kwargs):
        return Parser(FakeDiscovery(announcements), schema_index, **kwargs)

    return _make


@pytest.fixture
def cluster_resources(make_parser, cluster_announcements):
    return make_parser(cluster_announcements).resources()
