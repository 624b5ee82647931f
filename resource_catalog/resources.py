"""The catalog of resources found in the API server."""

from __future__ import annotations

import dataclasses

from .filter import Filter
from .resource import Resource


class Resources(dict[str, list[Resource]]):
    """Map of resource name to the resources serving that name.

    Each list is ordered by the server's group-version preference.
    """

    def sort_keys(self) -> list[str]:
        """Return the resource names sorted alphanumerically."""
        return sorted(self)

    def filter(self, resource_filter: Filter) -> Resources:
        """Return a new catalog holding copies of the accepted resources.

        A resource rejected by the filter is dropped with all its subresources.
        Kept resources are copied with only the accepted subresources, which are
        copied as well and point at the copied parent. ``self`` is not modified.
        """
        filtered = Resources()
        for name, versions in self.items():
            for version in versions:
                if not resource_filter.accepts_resource(version):
                    continue
                filtered.setdefault(name, []).append(
                    self._filter_subresources(version, resource_filter)
                )
        return filtered

    @staticmethod
    def _filter_subresources(resource: Resource, resource_filter: Filter) -> Resource:
        copy = dataclasses.replace(resource, subresources=[])
        for subresource in resource.subresources:
            if not resource_filter.accepts_subresource(subresource):
                continue
            copy.subresources.append(dataclasses.replace(subresource, parent=copy))
        return copy
