"""Input and output types for the extraction pipeline.

The declaration tree is produced by a source-analysis front end; these
dataclasses are the shape the extraction pass consumes. Each type has a
``from_dict`` loader so trees can be built from JSON or plain mappings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

LiteralValue = str | int | float | bool


class DeclarationKind(StrEnum):
    """Kinds of nodes in the declaration tree."""

    FILE = "file"
    CLASS = "class"
    ANONYMOUS_CLASS = "anonymous_class"
    FIELD = "field"
    METHOD = "method"
    CONSTRUCTOR = "constructor"
    PARAMETER = "parameter"
    INITIALIZER = "initializer"


class ClassKind(StrEnum):
    """Kind of a class-like declaration."""

    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"
    ANNOTATION = "annotation"

    @property
    def keep_type(self) -> str:
        """Class specification keyword used in keep rules."""
        if self is ClassKind.INTERFACE:
            return "interface"
        if self is ClassKind.ENUM:
            return "enum"
        return "class"


class Visibility(StrEnum):
    """Declared visibility of a declaration."""

    PUBLIC = "public"
    PROTECTED = "protected"
    PACKAGE = "package"
    PRIVATE = "private"


class ExpressionKind(StrEnum):
    """Kinds of annotation attribute expressions."""

    LITERAL = "literal"
    REFERENCE = "reference"
    ARRAY = "array"
    CAST = "cast"
    ANNOTATION = "annotation"
    OTHER = "other"


class ItemKind(StrEnum):
    """Discriminator of the Item tagged union."""

    PACKAGE = "package"
    CLASS = "class"
    FIELD = "field"
    METHOD = "method"
    PARAMETER = "parameter"


@dataclass
class Expression:
    """An annotation attribute expression.

    - LITERAL: ``value`` holds the literal (None for a null literal)
    - REFERENCE: ``class_name``/``field_name`` name the referenced field and
      ``constant_value`` its compile-time value, when known
    - ARRAY: ``elements``
    - CAST: ``operand``
    - ANNOTATION: ``annotation`` is a nested annotation
    - OTHER: ``value`` is the evaluated constant, when the front end could
      evaluate it
    """

    kind: ExpressionKind
    value: LiteralValue | None = None
    class_name: str | None = None
    field_name: str | None = None
    constant_value: LiteralValue | None = None
    elements: list[Expression] = field(default_factory=list)
    operand: Expression | None = None
    annotation: AnnotationOccurrence | None = None
    text: str | None = None

    @classmethod
    def literal(cls, value: LiteralValue | None) -> Expression:
        return cls(ExpressionKind.LITERAL, value=value)

    @classmethod
    def reference(
        cls,
        class_name: str | None,
        field_name: str,
        constant_value: LiteralValue | None = None,
    ) -> Expression:
        text = f"{class_name}.{field_name}" if class_name else field_name
        return cls(
            ExpressionKind.REFERENCE,
            class_name=class_name,
            field_name=field_name,
            constant_value=constant_value,
            text=text,
        )

    @classmethod
    def array(cls, *elements: Expression) -> Expression:
        return cls(ExpressionKind.ARRAY, elements=list(elements))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Expression:
        """Build an expression from a mapping; bare scalars are literals."""
        kind = ExpressionKind(data.get("kind", ExpressionKind.LITERAL))
        operand = data.get("operand")
        annotation = data.get("annotation")
        return cls(
            kind=kind,
            value=data.get("value"),
            class_name=data.get("class_name"),
            field_name=data.get("field_name"),
            constant_value=data.get("constant_value"),
            elements=[_expression(e) for e in data.get("elements", [])],
            operand=_expression(operand) if operand is not None else None,
            annotation=(
                AnnotationOccurrence.from_dict(annotation) if annotation is not None else None
            ),
            text=data.get("text"),
        )


def _expression(data: Any) -> Expression:
    if isinstance(data, Expression):
        return data
    if isinstance(data, dict):
        return Expression.from_dict(data)
    return Expression.literal(data)


@dataclass
class AttributeValue:
    """A named annotation attribute; a None name is the implicit ``value``."""

    name: str | None
    expression: Expression


@dataclass
class AnnotationOccurrence:
    """One annotation written on a declaration.

    ``declaration`` is the resolved declaration of the annotation type, when
    the front end could resolve it. It is used to detect typedef indirection
    and to read the declared retention policy.
    """

    qualified_name: str | None
    attributes: list[AttributeValue] = field(default_factory=list)
    declaration: Declaration | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnnotationOccurrence:
        attributes = data.get("attributes", {})
        if isinstance(attributes, dict):
            pairs = [
                AttributeValue(name, _expression(value)) for name, value in attributes.items()
            ]
        else:
            pairs = [
                AttributeValue(a.get("name"), _expression(a.get("expression")))
                for a in attributes
            ]
        declaration = data.get("declaration")
        return cls(
            qualified_name=data.get("name"),
            attributes=pairs,
            declaration=Declaration.from_dict(declaration) if declaration is not None else None,
        )


@dataclass
class Declaration:
    """A node in the declaration tree.

    FILE nodes carry the package name in ``qualified_name`` and package-level
    annotations; CLASS nodes carry their fully qualified name. METHOD and
    CONSTRUCTOR nodes list their PARAMETER nodes in ``parameters``. ``type``
    holds the canonical type text of a field, parameter or method return.
    """

    kind: DeclarationKind
    name: str | None = None
    qualified_name: str | None = None
    type: str | None = None
    class_kind: ClassKind = ClassKind.CLASS
    visibility: Visibility = Visibility.PUBLIC
    annotations: list[AnnotationOccurrence] = field(default_factory=list)
    parameters: list[Declaration] = field(default_factory=list)
    children: list[Declaration] = field(default_factory=list)
    doc_comment: str | None = None

    @property
    def is_constructor(self) -> bool:
        return self.kind is DeclarationKind.CONSTRUCTOR

    @property
    def parameter_types(self) -> list[str | None]:
        return [p.type for p in self.parameters]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Declaration:
        """Build a declaration subtree from a mapping (e.g. decoded JSON)."""
        return cls(
            kind=DeclarationKind(data["kind"]),
            name=data.get("name"),
            qualified_name=data.get("qualified_name"),
            type=data.get("type"),
            class_kind=ClassKind(data.get("class_kind", ClassKind.CLASS)),
            visibility=Visibility(data.get("visibility", Visibility.PUBLIC)),
            annotations=[AnnotationOccurrence.from_dict(a) for a in data.get("annotations", [])],
            parameters=[cls.from_dict(p) for p in data.get("parameters", [])],
            children=[cls.from_dict(c) for c in data.get("children", [])],
            doc_comment=data.get("doc_comment"),
        )
