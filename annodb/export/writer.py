"""Rendering of items and annotations into annotation XML documents.

A per-package document looks like:

    <?xml version="1.0" encoding="UTF-8"?>
    <root>
      <item name="foo.Bar int compute(int) 0">
        <annotation name="androidx.annotation.IntDef">
          <val name="value" val="{foo.Bar.MODE_A, foo.Bar.MODE_B}" />
        </annotation>
      </item>
    </root>

Annotations whose attributes all fail to render are rolled back rather than
written empty, and so are items left without any annotation.
"""

from __future__ import annotations

from annodb.constants import (
    ANDROID_REQUIRES_PERMISSION,
    ATTR_VALUE,
    REQUIRES_PERMISSION,
    SYMBOLIC_REFERENCE_ANNOTATIONS,
    TYPEDEF_ANNOTATIONS,
    TYPEDEF_DOC_ATTRIBUTES,
    XML_HEADER,
    support_names,
)
from annodb.extraction.items import AnnotationData, Item
from annodb.extraction.session import ExtractionSession
from annodb.extraction.types import AttributeValue, Expression, ExpressionKind, LiteralValue
from annodb.types.errors import ErrorContext, UnresolvedAttributeError
from annodb.utils.helpers import escape_xml

PERMISSION_CONTAINERS: tuple[str, ...] = tuple(
    sorted(support_names(REQUIRES_PERMISSION) | {ANDROID_REQUIRES_PERMISSION})
)


class MarkableWriter:
    """Text buffer that can roll back to a previously taken mark."""

    def __init__(self) -> None:
        self._parts: list[str] = []

    def write(self, text: str) -> None:
        self._parts.append(text)

    def writeln(self, text: str = "") -> None:
        self._parts.append(text)
        self._parts.append("\n")

    def mark(self) -> int:
        return len(self._parts)

    def reset(self, mark: int) -> None:
        del self._parts[mark:]

    def getvalue(self) -> str:
        return "".join(self._parts)


def format_literal(value: LiteralValue | None) -> str | None:
    """Source form of a constant: numbers and booleans bare, text quoted."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return f'"{value}"'
    return None


def attribute_name(attribute: AttributeValue) -> str:
    return attribute.name if attribute.name is not None else ATTR_VALUE


def sort_attributes(attributes: list[AttributeValue]) -> list[AttributeValue]:
    """The implicit value attribute first, then alphabetical."""
    return sorted(
        attributes,
        key=lambda a: (0 if attribute_name(a) == ATTR_VALUE else 1, attribute_name(a)),
    )


class AnnotationRenderer:
    """Writes items of one session into annotation documents."""

    def __init__(self, session: ExtractionSession) -> None:
        self._session = session
        self._api = session.api_surface

    def render_document(self, package_item: Item | None, classes: dict[str, list[Item]]) -> str:
        """Full document for one package: package item, then classes, then items."""
        writer = MarkableWriter()
        writer.writeln(XML_HEADER)
        writer.writeln("<root>")
        if package_item is not None:
            self.write_item(writer, package_item)
        for class_name in sorted(classes):
            for item in sorted(classes[class_name], key=lambda i: i.sort_signature):
                self.write_item(writer, item)
        writer.writeln("</root>")
        writer.writeln()
        return writer.getvalue()

    def write_item(self, writer: MarkableWriter, item: Item) -> bool:
        if not item.annotations:
            return False
        start = writer.mark()
        writer.writeln(f'  <item name="{item.signature}">')
        written = 0
        for annotation in item.annotations:
            if self.write_annotation(writer, annotation):
                written += 1
        if written == 0:
            writer.reset(start)
            return False
        writer.writeln("  </item>")
        return True

    def write_annotation(self, writer: MarkableWriter, annotation: AnnotationData) -> bool:
        """Write one annotation; returns False if nothing survived rendering."""
        if annotation.attributes:
            pairs = self.render_attributes(annotation)
            if not pairs:
                return False
        elif annotation.values:
            pairs = [(name, value) for name, value in annotation.values if name]
            if not pairs:
                return False
            if self._session.config.sort_annotations:
                pairs.sort(key=lambda p: (0 if p[0] == ATTR_VALUE else 1, p[0]))
        else:
            writer.writeln(f'    <annotation name="{annotation.name}" />')
            return True

        writer.writeln(f'    <annotation name="{annotation.name}">')
        for name, value in pairs:
            writer.writeln(f'      <val name="{name}" val="{escape_xml(value)}" />')
        writer.writeln("    </annotation>")
        return True

    # ========================================================================
    # Attribute expressions
    # ========================================================================

    def render_attributes(self, annotation: AnnotationData) -> list[tuple[str, str]]:
        """Rendered (name, unescaped value) pairs of a source annotation."""
        attributes = list(annotation.attributes or ())
        if self._session.config.sort_annotations and len(attributes) > 1:
            attributes = sort_attributes(attributes)

        if len(attributes) == 1 and annotation.name.startswith(PERMISSION_CONTAINERS):
            nested = attributes[0].expression
            if nested.kind is ExpressionKind.ANNOTATION and nested.annotation is not None:
                # Containers such as @RequiresPermission.Read hold exactly one
                # permission annotation; its attributes are written inline
                attributes = list(nested.annotation.attributes)

        typedef = annotation.name in TYPEDEF_ANNOTATIONS
        pairs: list[tuple[str, str]] = []
        for attribute in attributes:
            name = attribute_name(attribute)
            if typedef and name in TYPEDEF_DOC_ATTRIBUTES:
                continue
            value = self.render_expression(attribute.expression, annotation.name)
            if value is not None:
                pairs.append((name, value))
        return pairs

    def render_expression(self, expression: Expression, annotation_name: str) -> str | None:
        """Source text of an attribute expression, or None if it cannot be written."""
        match expression.kind:
            case ExpressionKind.ARRAY:
                rendered = [self.render_expression(e, annotation_name) for e in expression.elements]
                kept = [r for r in rendered if r is not None]
                if not kept:
                    return None
                return "{" + ", ".join(kept) + "}"
            case ExpressionKind.REFERENCE:
                return self._render_reference(expression, annotation_name)
            case ExpressionKind.LITERAL:
                literal = format_literal(expression.value)
                if literal is not None:
                    return literal
            case ExpressionKind.CAST:
                if expression.operand is None:
                    return None
                return self.render_expression(expression.operand, annotation_name)
            case ExpressionKind.OTHER:
                literal = format_literal(expression.value)
                if literal is not None:
                    return literal

        self._unresolved(
            f"Unexpected annotation expression of type {expression.kind} "
            f"and is {expression.text or expression.value!r}",
            annotation_name,
        )
        return None

    def _render_reference(self, expression: Expression, annotation_name: str) -> str | None:
        if annotation_name not in SYMBOLIC_REFERENCE_ANNOTATIONS:
            literal = format_literal(expression.constant_value)
            if literal is not None:
                return literal

        owner = expression.class_name
        field_name = expression.field_name
        if owner is None or field_name is None:
            self._unresolved(
                f"Unexpected reference to {expression.text or field_name}", annotation_name
            )
            return None
        if self._api is not None and not self._api.has_field(owner, field_name):
            if self._session.list_ignored:
                self._session.info(f"Filtering out typedef constant {owner}.{field_name}")
            return None
        return f"{owner}.{field_name}"

    def _unresolved(self, message: str, annotation_name: str) -> None:
        self._session.report(
            UnresolvedAttributeError(
                message,
                context=ErrorContext(operation="export", component=annotation_name),
            )
        )
