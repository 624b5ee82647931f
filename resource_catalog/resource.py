"""Catalog entities: discovered API resources and their subresources."""

from __future__ import annotations

from collections.abc import MutableMapping
from dataclasses import dataclass, field
from typing import Any, NamedTuple

from .schema import ObjectFieldFn, Schema, has_field, set_field


class GroupVersion(NamedTuple):
    group: str
    version: str

    def with_kind(self, kind: str) -> GroupVersionKind:
        return GroupVersionKind(self.group, self.version, kind)

    def __str__(self) -> str:
        if not self.group:
            return self.version
        return f"{self.group}/{self.version}"


class GroupVersionKind(NamedTuple):
    group: str
    version: str
    kind: str


@dataclass
class APIResource:
    """A resource descriptor as announced by the API server's discovery endpoint.

    ``name`` is the plural resource name, or ``<resource>/<subresource>`` for
    subresources. ``group`` and ``version`` are frequently empty, in which case
    they are inherited from the announcing group-version.
    """

    name: str
    kind: str
    group: str = ""
    version: str = ""
    namespaced: bool = False
    singular_name: str = ""
    verbs: list[str] = field(default_factory=list)
    short_names: list[str] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)

    @classmethod
    def from_k8s(cls, obj: Any) -> APIResource:
        """Build a descriptor from a ``kubernetes.client.V1APIResource``."""
        return cls(
            name=obj.name,
            kind=obj.kind,
            group=obj.group or "",
            version=obj.version or "",
            namespaced=bool(obj.namespaced),
            singular_name=obj.singular_name or "",
            verbs=list(obj.verbs or []),
            short_names=list(obj.short_names or []),
            categories=list(obj.categories or []),
        )


@dataclass
class APIResourceList:
    """All resources announced for one group-version."""

    group_version: str
    resources: list[APIResource] = field(default_factory=list)

    @classmethod
    def from_k8s(cls, obj: Any) -> APIResourceList:
        """Build an announcement from a ``kubernetes.client.V1APIResourceList``."""
        return cls(
            group_version=obj.group_version or "",
            resources=[APIResource.from_k8s(r) for r in obj.resources or []],
        )


@dataclass
class Resource:
    """An API resource with its resolved group-version, schema and subresources."""

    resource: APIResource
    api_group_version: GroupVersion
    schema: Schema
    subresources: list[SubResource] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.resource.name

    def has_field(self, path: list[str]) -> bool:
        return has_field(self.schema, path)

    def field(self, path: list[str], obj: MutableMapping[str, Any], fn: ObjectFieldFn) -> Any:
        return set_field(self.schema, path, obj, fn)

    def api_group_version_kind(self) -> GroupVersionKind:
        """GVK from the group-version the resource was discovered under."""
        return self.api_group_version.with_kind(self.resource.kind)

    def resource_group_version_kind(self) -> GroupVersionKind:
        """GVK from the resource descriptor itself."""
        return GroupVersionKind(self.resource.group, self.resource.version, self.resource.kind)


@dataclass
class SubResource:
    """An API subresource such as ``deployments/status``.

    ``parent`` points back at the owning Resource for navigation; the parent
    owns its subresources through ``Resource.subresources``.
    """

    resource: APIResource
    parent: Resource = field(repr=False, compare=False)
    api_group_version: GroupVersion
    schema: Schema

    @property
    def name(self) -> str:
        return self.resource.name

    def has_field(self, path: list[str]) -> bool:
        return has_field(self.schema, path)

    def field(self, path: list[str], obj: MutableMapping[str, Any], fn: ObjectFieldFn) -> Any:
        return set_field(self.schema, path, obj, fn)

    def api_group_version_kind(self) -> GroupVersionKind:
        return self.api_group_version.with_kind(self.resource.kind)

    def resource_group_version_kind(self) -> GroupVersionKind:
        return GroupVersionKind(self.resource.group, self.resource.version, self.resource.kind)
