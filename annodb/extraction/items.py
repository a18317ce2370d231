"""Annotated items: the entries of an external annotation database.

An Item is a tagged union over ItemKind. All variants share the containing
class, the ordered annotation list and an optional link back to the
declaration they were extracted from; kind-specific fields are left at
their defaults by the other variants.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from annodb.extraction.signatures import (
    compact_parameter_list,
    keep_rule,
    signature,
    sort_signature,
)
from annodb.extraction.types import (
    AttributeValue,
    ClassKind,
    Declaration,
    ItemKind,
)


@dataclass(eq=False)
class AnnotationData:
    """A normalized annotation attached to an item.

    Source annotations keep their attribute expressions in ``attributes``
    and are rendered at write time. Imported annotations carry already
    rendered, unescaped ``(name, value)`` pairs in ``values``. Equality is
    by name only: an item holds at most one annotation of each name.
    """

    name: str
    attributes: list[AttributeValue] | None = None
    values: list[tuple[str, str]] | None = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AnnotationData):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __repr__(self) -> str:
        return f"AnnotationData({self.name!r})"

    def value_of(self, attribute: str) -> str | None:
        """Rendered value of an imported attribute."""
        for name, value in self.values or ():
            if name == attribute:
                return value
        return None


@dataclass(eq=False)
class Item:
    """One annotated declaration: package, class, field, method or parameter."""

    kind: ItemKind
    containing_class: str
    name: str | None = None
    parameter_list: str = ""
    return_type: str | None = None
    field_type: str | None = None
    is_constructor: bool = False
    arg_index: int | None = None
    class_kind: ClassKind = ClassKind.CLASS
    declaration: Declaration | None = None
    annotations: list[AnnotationData] = field(default_factory=list)

    # ------------------------------------------------------------------------
    # Variant constructors
    # ------------------------------------------------------------------------

    @classmethod
    def package(cls, name: str) -> Item:
        return cls(ItemKind.PACKAGE, name)

    @classmethod
    def klass(
        cls,
        fqn: str,
        class_kind: ClassKind = ClassKind.CLASS,
        declaration: Declaration | None = None,
    ) -> Item:
        return cls(ItemKind.CLASS, fqn, class_kind=class_kind, declaration=declaration)

    @classmethod
    def field_item(
        cls,
        class_fqn: str,
        field_name: str,
        field_type: str | None = None,
        class_kind: ClassKind = ClassKind.CLASS,
        declaration: Declaration | None = None,
    ) -> Item:
        return cls(
            ItemKind.FIELD,
            class_fqn,
            name=field_name,
            field_type=field_type,
            class_kind=class_kind,
            declaration=declaration,
        )

    @classmethod
    def method(
        cls,
        class_fqn: str,
        method_name: str,
        parameter_list: str,
        return_type: str | None,
        is_constructor: bool = False,
        class_kind: ClassKind = ClassKind.CLASS,
        declaration: Declaration | None = None,
    ) -> Item:
        return cls(
            ItemKind.METHOD,
            class_fqn,
            name=method_name,
            parameter_list=parameter_list,
            return_type=None if is_constructor else return_type,
            is_constructor=is_constructor,
            class_kind=class_kind,
            declaration=declaration,
        )

    @classmethod
    def parameter(
        cls,
        class_fqn: str,
        method_name: str,
        parameter_list: str,
        return_type: str | None,
        arg_index: int,
        is_constructor: bool = False,
        class_kind: ClassKind = ClassKind.CLASS,
        declaration: Declaration | None = None,
    ) -> Item:
        return cls(
            ItemKind.PARAMETER,
            class_fqn,
            name=method_name,
            parameter_list=parameter_list,
            return_type=None if is_constructor else return_type,
            is_constructor=is_constructor,
            arg_index=arg_index,
            class_kind=class_kind,
            declaration=declaration,
        )

    @classmethod
    def for_method_declaration(
        cls,
        class_fqn: str,
        method: Declaration,
        class_kind: ClassKind = ClassKind.CLASS,
        arg_index: int | None = None,
    ) -> Item | None:
        """Build a method or parameter item, or None if the declaration is incomplete."""
        if method.name is None:
            return None
        if not method.is_constructor and method.type is None:
            return None
        types = method.parameter_types
        if any(t is None for t in types):
            return None
        parameter_list = compact_parameter_list([t for t in types if t is not None])
        if arg_index is None:
            return cls.method(
                class_fqn,
                method.name,
                parameter_list,
                method.type,
                is_constructor=method.is_constructor,
                class_kind=class_kind,
                declaration=method,
            )
        return cls.parameter(
            class_fqn,
            method.name,
            parameter_list,
            method.type,
            arg_index,
            is_constructor=method.is_constructor,
            class_kind=class_kind,
            declaration=method,
        )

    # ------------------------------------------------------------------------
    # Identity and rendering
    # ------------------------------------------------------------------------

    @property
    def key(self) -> tuple[Any, ...]:
        """Identity of the declaration, independent of its annotations."""
        return (
            self.kind,
            self.containing_class,
            self.name,
            self.parameter_list,
            self.is_constructor,
            self.arg_index,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Item):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __repr__(self) -> str:
        return f"Item({self.kind.value}: {self.signature})"

    @property
    def signature(self) -> str:
        return signature(self)

    @property
    def sort_signature(self) -> str:
        return sort_signature(self)

    @property
    def keep_rule(self) -> str:
        return keep_rule(self)

    def find_annotation(self, name: str) -> AnnotationData | None:
        for annotation in self.annotations:
            if annotation.name == name:
                return annotation
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        result: dict[str, Any] = {
            "kind": str(self.kind),
            "signature": self.signature,
            "annotations": [a.name for a in self.annotations],
        }
        if self.class_kind is not ClassKind.CLASS:
            result["class_kind"] = str(self.class_kind)
        return result
