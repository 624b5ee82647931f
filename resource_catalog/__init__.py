"""Discovery, indexing and filtering of the resources served by an API server.

Start by creating a Parser, then call its resources() method to discover the
resources of the API server::

    with K8sClient().connection() as k8s_client:
        resources = new_parser(k8s_client).resources()
    for name in resources.sort_keys():
        print("→", name)
        for version in resources[name]:
            print("→→", version.api_group_version, version.resource.kind)

Catalogs are narrowed with Filter implementations, see ``resource_catalog.filter``.
"""

from .config import CatalogConfig
from .filter import (
    AndFilter,
    EmptyFilter,
    FieldFilter,
    Filter,
    OrFilter,
    SkipSubresourceFilter,
)
from .k8s_client import K8sClient
from .parser import Parser, new_parser
from .resource import (
    APIResource,
    APIResourceList,
    GroupVersion,
    GroupVersionKind,
    Resource,
    SubResource,
)
from .resources import Resources
from .schema import FieldNotFoundError, OpenAPISchemaIndex, Schema

__all__ = [
    "APIResource",
    "APIResourceList",
    "AndFilter",
    "CatalogConfig",
    "EmptyFilter",
    "FieldFilter",
    "FieldNotFoundError",
    "Filter",
    "GroupVersion",
    "GroupVersionKind",
    "K8sClient",
    "OpenAPISchemaIndex",
    "OrFilter",
    "Parser",
    "Resource",
    "Resources",
    "Schema",
    "SkipSubresourceFilter",
    "SubResource",
    "new_parser",
]
