"""OpenAPI schema lookup for discovered API resources.

This module wraps the OpenAPI v2 document served by the API server. Each
definition carrying an ``x-kubernetes-group-version-kind`` extension is indexed
so that a resource's structural schema can be looked up by group, version and
kind, and walked field by field.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, MutableMapping
from dataclasses import dataclass, field
from typing import Any

REF_PREFIX = "#/definitions/"
GVK_EXTENSION = "x-kubernetes-group-version-kind"


class FieldNotFoundError(LookupError):
    """Raised when a field path does not resolve against a schema."""

    def __init__(self, path: list[str], reason: str = "field not found"):
        self.path = list(path)
        super().__init__(f"{reason}: {'.'.join(self.path) or '<empty path>'}")


@dataclass
class Schema:
    """A single OpenAPI v2 definition together with the table it references."""

    name: str
    definition: dict[str, Any]
    definitions: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    def resolve(self, node: dict[str, Any]) -> dict[str, Any]:
        """Follow ``$ref`` pointers until a concrete schema node is reached."""
        seen: set[str] = set()
        while "$ref" in node:
            ref = node["$ref"]
            if not isinstance(ref, str) or not ref.startswith(REF_PREFIX) or ref in seen:
                return {}
            seen.add(ref)
            node = self.definitions.get(ref[len(REF_PREFIX):], {})
        return node

    def child(self, node: dict[str, Any], name: str) -> dict[str, Any] | None:
        """Return the schema of field ``name`` below ``node``, or None."""
        node = self.resolve(node)
        properties = node.get("properties")
        if properties is not None:
            child = properties.get(name)
            return None if child is None else self.resolve(child)
        # Maps accept any key and share one value schema.
        additional = node.get("additionalProperties")
        if isinstance(additional, dict):
            return self.resolve(additional)
        return None

    def lookup(self, path: list[str]) -> dict[str, Any] | None:
        """Walk ``path`` from the root of the definition."""
        node: dict[str, Any] | None = self.resolve(self.definition)
        for segment in path:
            node = self.child(node, segment)
            if node is None:
                return None
        return node


# Called with the field's schema node, the mapping that holds the field (None
# when an enclosing object is absent from the value) and the field name.
# Whatever it returns is handed back to the caller of field().
ObjectFieldFn = Callable[[dict[str, Any], MutableMapping[str, Any] | None, str], Any]


def has_field(schema: Schema, path: list[str]) -> bool:
    """Return True if every segment of ``path`` exists in ``schema``."""
    return schema.lookup(path) is not None


def set_field(
    schema: Schema,
    path: list[str],
    obj: MutableMapping[str, Any],
    fn: ObjectFieldFn,
) -> Any:
    """Validate ``path`` against ``schema`` and apply ``fn`` to it in ``obj``.

    ``obj`` is only read here. When an enclosing mapping is missing from ``obj``,
    ``fn`` receives None in place of the mapping that would hold the field.

    Raises:
        FieldNotFoundError: If the path is empty, does not exist in the schema,
            or crosses a value in ``obj`` that is not a mapping.
    """
    if not path:
        raise FieldNotFoundError(path)
    field_schema = schema.lookup(path)
    if field_schema is None:
        raise FieldNotFoundError(path)

    parent: MutableMapping[str, Any] | None = obj
    for depth, segment in enumerate(path[:-1]):
        value = parent.get(segment)
        if value is None:
            parent = None
            break
        if not isinstance(value, MutableMapping):
            raise FieldNotFoundError(path[: depth + 1], "not an object")
        parent = value
    return fn(field_schema, parent, path[-1])


class OpenAPISchemaIndex:
    """Index of OpenAPI v2 definitions keyed by group, version and kind."""

    def __init__(self, document: Mapping[str, Any]):
        """Build the index from an OpenAPI v2 document.

        Args:
            document: The parsed ``/openapi/v2`` document
        """
        self.logger = logging.getLogger(__name__)
        self.definitions: dict[str, Any] = dict(document.get("definitions") or {})
        self._by_gvk: dict[tuple[str, str, str], str] = {}

        for name, definition in self.definitions.items():
            for gvk in definition.get(GVK_EXTENSION) or []:
                key = (gvk.get("group", ""), gvk.get("version", ""), gvk.get("kind", ""))
                self._by_gvk.setdefault(key, name)

        self.logger.debug(
            f"Indexed {len(self._by_gvk)} group-version-kinds "
            f"from {len(self.definitions)} definitions"
        )

    def lookup_resource(self, group: str, version: str, kind: str) -> Schema | None:
        """Return the schema for a group/version/kind, or None if unknown."""
        name = self._by_gvk.get((group, version, kind))
        if name is None:
            return None
        return Schema(name=name, definition=self.definitions[name], definitions=self.definitions)

    def __len__(self) -> int:
        return len(self._by_gvk)
