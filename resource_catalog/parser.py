"""Discovery and indexing of API resources.

The Parser pulls the resource announcements of every group-version from a
discovery source and turns them into a Resources catalog: resources indexed by
name, each carrying its schema, with subresources attached to their parents.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterator
from typing import Protocol

from .config import CatalogConfig
from .k8s_client import K8sClient
from .resource import APIResource, APIResourceList, GroupVersion, Resource, SubResource
from .resources import Resources
from .schema import OpenAPISchemaIndex, Schema


class DiscoveryInterface(Protocol):
    def server_resources(self) -> list[APIResourceList]: ...


class SchemaLookup(Protocol):
    def lookup_resource(self, group: str, version: str, kind: str) -> Schema | None: ...


# Resources indexed by (group, version, resource name) for attaching subresources.
ResourceIndex = dict[tuple[str, str, str], Resource]


def split_group_version(group_version: str) -> GroupVersion:
    """Split a group-version string such as ``apps/v1`` into its parts.

    A string without a group (``v1``) belongs to the legacy core group, which is
    the empty string. An empty string is taken to mean ``v1``.
    """
    if not group_version:
        return GroupVersion("", "v1")
    parts = group_version.split("/", 1)
    if len(parts) > 1:
        return GroupVersion(parts[0], parts[1])
    return GroupVersion("", parts[0])


def split_subresource(name: str) -> tuple[str, str]:
    """Split ``deployments/status`` into ``("deployments", "status")``.

    The second element is empty for names that are not subresources.
    """
    resource, _, subresource = name.partition("/")
    return resource, subresource


class Parser:
    """Discovers resources from an API server and indexes them."""

    def __init__(
        self,
        discovery: DiscoveryInterface,
        schemas: SchemaLookup,
        api_group: str = "",
        api_version: str = "",
    ):
        """Initialize the parser.

        Args:
            discovery: Source of the per group-version resource announcements
            schemas: Schema lookup by group, version and kind
            api_group: Only index this API group when set
            api_version: Only index this API version when set
        """
        self.discovery = discovery
        self.schemas = schemas
        self.api_group = api_group
        self.api_version = api_version
        self.logger = logging.getLogger(__name__)

    def resources(self) -> Resources:
        """Discover and index resources from the API server.

        Returns:
            Map of resource name to the resources serving that name, ordered by
            the server's preference

        Errors raised by the discovery source propagate unchanged.
        """
        announcements = self.discovery.server_resources()
        resources, index = self._index_resources(announcements)
        attached = self._attach_subresources(announcements, index)
        self.logger.info(
            f"Indexed {sum(len(v) for v in resources.values())} resources "
            f"under {len(resources)} names with {attached} subresources"
        )
        return resources

    def is_group_version_match(self, group_version: GroupVersion) -> bool:
        """Return False if the group or version is excluded by configuration."""
        if self.api_group and self.api_group != group_version.group:
            return False
        if self.api_version and self.api_version != group_version.version:
            return False
        return True

    def _matching(
        self, announcements: list[APIResourceList]
    ) -> Iterator[tuple[GroupVersion, APIResource]]:
        """Yield (group-version, normalized descriptor) pairs of matching announcements."""
        for announcement in announcements:
            group_version = split_group_version(announcement.group_version)
            if not self.is_group_version_match(group_version):
                self.logger.debug(f"Skipping {announcement.group_version or 'v1'}: not selected")
                continue
            for descriptor in announcement.resources:
                yield group_version, self._default_group_version(descriptor, group_version)

    @staticmethod
    def _default_group_version(descriptor: APIResource, group_version: GroupVersion) -> APIResource:
        """Return a copy of descriptor with a missing group and version filled in."""
        return dataclasses.replace(
            descriptor,
            group=descriptor.group or group_version.group,
            version=descriptor.version or group_version.version,
        )

    def _lookup_schema(self, descriptor: APIResource) -> Schema | None:
        schema = self.schemas.lookup_resource(descriptor.group, descriptor.version, descriptor.kind)
        if schema is None:
            self.logger.debug(
                f"No schema for {descriptor.name} "
                f"({descriptor.group}/{descriptor.version} {descriptor.kind})"
            )
        return schema

    def _index_resources(self, announcements: list[APIResourceList]) -> tuple[Resources, ResourceIndex]:
        resources = Resources()
        index: ResourceIndex = {}
        for group_version, descriptor in self._matching(announcements):
            name, subresource = split_subresource(descriptor.name)
            if subresource:
                continue
            schema = self._lookup_schema(descriptor)
            if schema is None:
                continue
            resource = Resource(resource=descriptor, api_group_version=group_version, schema=schema)
            resources.setdefault(name, []).append(resource)
            index[(group_version.group, group_version.version, name)] = resource
        return resources, index

    def _attach_subresources(self, announcements: list[APIResourceList], index: ResourceIndex) -> int:
        attached = 0
        for group_version, descriptor in self._matching(announcements):
            name, subresource = split_subresource(descriptor.name)
            if not subresource:
                continue
            schema = self._lookup_schema(descriptor)
            if schema is None:
                continue
            # The parent may have been filtered out or have no schema
            parent = index.get((group_version.group, group_version.version, name))
            if parent is None:
                continue
            parent.subresources.append(
                SubResource(
                    resource=descriptor,
                    parent=parent,
                    api_group_version=group_version,
                    schema=schema,
                )
            )
            attached += 1
        return attached


def new_parser(k8s_client: K8sClient, catalog_config: CatalogConfig | None = None) -> Parser:
    """Create a Parser backed by the cluster ``k8s_client`` talks to.

    The caller owns ``k8s_client`` and closes it, typically by running discovery
    inside ``k8s_client.connection()``.
    """
    catalog_config = catalog_config or CatalogConfig()
    return Parser(
        discovery=k8s_client,
        schemas=OpenAPISchemaIndex(k8s_client.openapi_v2()),
        api_group=catalog_config.api_group,
        api_version=catalog_config.api_version,
    )
