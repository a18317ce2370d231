"""In-memory API surface database.

Holds the published API as plain sets keyed by class name. Suitable for
embedding a surface loaded from any listing format, and as a test double.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from annodb.extraction.signatures import package_of


def _compact(parameter_list: str) -> str:
    return ",".join(p.strip() for p in parameter_list.split(",")) if parameter_list else ""


@dataclass
class ClassSurface:
    """API members declared by one class."""

    fields: set[str] = field(default_factory=set)
    methods: dict[str, set[str]] = field(default_factory=dict)
    int_fields: list[str] = field(default_factory=list)


class ApiSurfaceDatabase:
    """Set-backed implementation of the ApiSurface protocol.

    Usage:
        api = ApiSurfaceDatabase.from_mapping({
            "foo.Bar": {
                "fields": ["MODE_A", "MODE_B"],
                "methods": {"compute": ["int,int"]},
                "int_fields": ["MODE_A", "MODE_B"],
            },
        })
        api.has_method("foo.Bar", "compute", "int,int")  # True
    """

    def __init__(self) -> None:
        self._classes: dict[str, ClassSurface] = {}
        self._packages: set[str] = set()

    @classmethod
    def from_mapping(cls, classes: Mapping[str, Mapping[str, Any]]) -> ApiSurfaceDatabase:
        db = cls()
        for class_fqn, members in classes.items():
            db.add_class(class_fqn)
            for name in members.get("fields", ()):
                db.add_field(class_fqn, name)
            for name, overloads in members.get("methods", {}).items():
                for parameter_list in overloads:
                    db.add_method(class_fqn, name, parameter_list)
            int_fields = members.get("int_fields")
            if int_fields is not None:
                db.set_int_fields(class_fqn, int_fields)
        return db

    # ========================================================================
    # Population
    # ========================================================================

    def add_package(self, name: str) -> None:
        self._packages.add(name)

    def add_class(self, class_fqn: str) -> ClassSurface:
        surface = self._classes.get(class_fqn)
        if surface is None:
            surface = self._classes[class_fqn] = ClassSurface()
            self._packages.add(package_of(class_fqn))
        return surface

    def add_field(self, class_fqn: str, field_name: str) -> None:
        self.add_class(class_fqn).fields.add(field_name)

    def add_method(self, class_fqn: str, method_name: str, parameter_list: str = "") -> None:
        methods = self.add_class(class_fqn).methods
        methods.setdefault(method_name, set()).add(_compact(parameter_list))

    def set_int_fields(self, class_fqn: str, names: Iterable[str]) -> None:
        surface = self.add_class(class_fqn)
        surface.int_fields = list(names)
        surface.fields.update(surface.int_fields)

    # ========================================================================
    # ApiSurface protocol
    # ========================================================================

    def has_package(self, name: str) -> bool:
        return name in self._packages

    def has_class(self, fqn: str) -> bool:
        return fqn in self._classes

    def has_field(self, class_fqn: str, field_name: str) -> bool:
        surface = self._classes.get(class_fqn)
        return surface is not None and field_name in surface.fields

    def has_method(self, class_fqn: str, method_name: str, parameter_list: str) -> bool:
        surface = self._classes.get(class_fqn)
        if surface is None:
            return False
        return _compact(parameter_list) in surface.methods.get(method_name, ())

    def get_declared_int_fields(self, class_fqn: str) -> list[str] | None:
        surface = self._classes.get(class_fqn)
        if surface is None:
            return None
        return list(surface.int_fields)
