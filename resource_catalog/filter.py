"""Filters for selecting resources and subresources from a catalog.

A Filter answers two questions: should a Resource be kept, and should a
SubResource be kept. Filters are pure predicates and are combined by
containment (``AndFilter`` / ``OrFilter`` hold child filters), so new criteria
are added by implementing the two methods rather than extending existing
filters.

Example, keeping only resources whose name starts with "n"::

    class LetterN(EmptyFilter):
        def accepts_resource(self, resource):
            return resource.name.startswith("n")

    resources = parser.resources().filter(LetterN())
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .resource import Resource, SubResource


class Filter(ABC):
    """Abstract base class for resource filters."""

    @abstractmethod
    def accepts_resource(self, resource: Resource) -> bool:
        """Return True to keep ``resource``."""
        ...

    @abstractmethod
    def accepts_subresource(self, subresource: SubResource) -> bool:
        """Return True to keep ``subresource``."""
        ...


class EmptyFilter(Filter):
    """Accepts everything."""

    def accepts_resource(self, resource: Resource) -> bool:
        return True

    def accepts_subresource(self, subresource: SubResource) -> bool:
        return True


class AndFilter(Filter):
    """
    Composite filter that accepts only what every child filter accepts.

    An empty AndFilter accepts everything.
    """

    def __init__(self, filters: list[Filter] | None = None):
        self.filters = list(filters or [])

    def accepts_resource(self, resource: Resource) -> bool:
        return all(f.accepts_resource(resource) for f in self.filters)

    def accepts_subresource(self, subresource: SubResource) -> bool:
        return all(f.accepts_subresource(subresource) for f in self.filters)


class OrFilter(Filter):
    """
    Composite filter that accepts what at least one child filter accepts.

    An empty OrFilter accepts nothing.
    """

    def __init__(self, filters: list[Filter] | None = None):
        self.filters = list(filters or [])

    def accepts_resource(self, resource: Resource) -> bool:
        return any(f.accepts_resource(resource) for f in self.filters)

    def accepts_subresource(self, subresource: SubResource) -> bool:
        return any(f.accepts_subresource(subresource) for f in self.filters)


class SkipSubresourceFilter(EmptyFilter):
    """Drops ``*/status`` subresources and keeps everything else."""

    def accepts_subresource(self, subresource: SubResource) -> bool:
        return not subresource.resource.name.endswith("/status")


class FieldFilter(EmptyFilter):
    """Keeps resources whose schema contains the field at ``path``.

    Subresources are not judged; combine with other filters for that.
    """

    def __init__(self, path: list[str]):
        self.path = list(path)

    def accepts_resource(self, resource: Resource) -> bool:
        return resource.has_field(self.path)


def new_empty_filter() -> Filter:
    return EmptyFilter()


def new_and_filter(*filters: Filter) -> AndFilter:
    return AndFilter(list(filters))


def new_or_filter(*filters: Filter) -> OrFilter:
    return OrFilter(list(filters))


def new_skip_subresource_filter() -> Filter:
    return SkipSubresourceFilter()


def new_field_filter(path: list[str]) -> Filter:
    return FieldFilter(path)
