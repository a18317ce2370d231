"""API-surface protocol for the extraction pipeline.

An API surface is an external authority listing which packages, classes,
fields and methods belong to a published API. When one is configured,
items it does not recognize are dropped from the annotation database.
Absence of an API surface disables all filtering.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ApiSurface(Protocol):
    """Read-only membership queries against a published API."""

    def has_package(self, name: str) -> bool:
        """Check if the package is part of the API."""
        ...

    def has_class(self, fqn: str) -> bool:
        """Check if the class (fully qualified, dotted) is part of the API."""
        ...

    def has_field(self, class_fqn: str, field_name: str) -> bool:
        """Check if the field is part of the API."""
        ...

    def has_method(self, class_fqn: str, method_name: str, parameter_list: str) -> bool:
        """Check if the method is part of the API.

        ``parameter_list`` is the compact form: comma separated, no spaces
        after commas, e.g. ``int,java.lang.String``.
        """
        ...

    def get_declared_int_fields(self, class_fqn: str) -> list[str] | None:
        """Names of the int constants declared by a class, or None if unknown."""
        ...
