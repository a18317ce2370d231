"""Conversion of imported <annotation> elements into AnnotationData.

Annotation documents written by other tools use a handful of annotation
vocabularies. This module maps the recognized ones onto canonical names:

- IntelliJ ``@MagicConstant`` becomes a canonical IntDef or StringDef,
  with ``valuesFromClass``/``flagsFromClass`` expanded through the API surface
- IntDef / LongDef / StringDef in any namespace keep ``value`` and ``flag``
- ``@Contract`` keeps ``value`` and ``pure``
- nullness markers map to the canonical pair; IntelliJ's inferred
  ``@Nullable`` is dropped
- anything else under a support or platform namespace is kept verbatim

Attribute values are stored unescaped; the writer escapes them once.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET

from annodb.constants import (
    ATTR_FLAG,
    ATTR_VALUE,
    IDEA_CONTRACT,
    IDEA_MAGIC,
    IDEA_NON_NLS,
    IDEA_NULLABLE,
    INT_DEF,
    LONG_DEF,
    NONNULL_ANNOTATIONS,
    NULLABLE_ANNOTATIONS,
    PLATFORM_PREFIX,
    STRING_DEF,
    TYPEDEF_ANNOTATIONS,
    ZIP_ENTRY_CLASS,
    ZIP_ENTRY_METHODS,
)
from annodb.extraction.items import AnnotationData
from annodb.extraction.relevance import is_support_annotation
from annodb.extraction.session import ExtractionSession
from annodb.types.errors import ErrorContext, UnsupportedAnnotationImportError
from annodb.utils.helpers import unescape_xml

ANNOTATION_TAG = "annotation"
VAL_TAG = "val"
ATTR_NAME = "name"
ATTR_VAL = "val"
ATTR_PURE = "pure"
ATTR_APIS = "apis"
DOT_CLASS = ".class"
VALUE_TRUE = "true"


def annotation_elements(item: ET.Element) -> list[ET.Element]:
    return [child for child in item if child.tag == ANNOTATION_TAG]


def val_elements(annotation: ET.Element) -> list[ET.Element]:
    return [child for child in annotation if child.tag == VAL_TAG]


def has_historic_data(item: ET.Element) -> bool:
    """True if an annotation on the item carries an ``apis`` range.

    Such entries describe APIs that may have left the current surface but
    whose annotations must be preserved for older API levels.
    """
    return any(
        val.get(ATTR_NAME) == ATTR_APIS
        for annotation in annotation_elements(item)
        for val in val_elements(annotation)
    )


class AnnotationImporter:
    """Builds canonical AnnotationData from imported elements for one session."""

    def __init__(self, session: ExtractionSession) -> None:
        self._session = session
        self._api = session.api_surface
        self._prefix = session.config.canonical_prefix
        self._nullable = session.relevance.nullable_name
        self._nonnull = session.relevance.nonnull_name

    # ========================================================================
    # Relevance
    # ========================================================================

    def convert(self, element: ET.Element) -> AnnotationData | None:
        """Relevant canonical annotation for an element, or None to skip it."""
        annotation = self.create(element)
        if annotation is None:
            return None
        name = annotation.name
        if (
            name in NULLABLE_ANNOTATIONS
            or name in NONNULL_ANNOTATIONS
            or name.startswith(PLATFORM_PREFIX)
            or is_support_annotation(name)
            or name == IDEA_CONTRACT
        ):
            return annotation
        if name != IDEA_NON_NLS:
            self._ignore(name)
        return None

    def _ignore(self, name: str) -> None:
        ignored = self._session.cache.ignored_imports
        if name in ignored:
            return
        ignored.add(name)
        self._session.report(
            UnsupportedAnnotationImportError(
                f"Ignoring merge annotation {name}",
                context=ErrorContext(operation="merge", component="importer"),
            )
        )
        if self._session.list_ignored:
            self._session.info(f"(Ignoring merge annotation {name})")

    # ========================================================================
    # Conversion
    # ========================================================================

    def create(self, element: ET.Element) -> AnnotationData | None:
        """Canonical form of one <annotation> element, or None if unsupported."""
        name = unescape_xml(element.get(ATTR_NAME, ""))
        if not name:
            return None
        values = val_elements(element)

        if name == IDEA_MAGIC:
            return self._magic_constant(values)
        if name in TYPEDEF_ANNOTATIONS:
            return self._typedef(name, values)
        if name == IDEA_CONTRACT:
            return self._contract(values)
        if name in NONNULL_ANNOTATIONS:
            return AnnotationData(self._nonnull)
        if name in NULLABLE_ANNOTATIONS:
            if name == IDEA_NULLABLE:
                # Inferred nullability is not imported
                return None
            return AnnotationData(self._nullable)
        if not values:
            return AnnotationData(name)
        return AnnotationData(
            name, values=[(val.get(ATTR_NAME, ""), val.get(ATTR_VAL, "")) for val in values]
        )

    def _typedef(self, name: str, values: list[ET.Element]) -> AnnotationData | None:
        if not values:
            return None
        simple = name[name.rfind(".") + 1 :]
        if simple not in (INT_DEF, LONG_DEF, STRING_DEF):
            return None
        value = values[0].get(ATTR_VAL, "")
        flag = any(
            val.get(ATTR_NAME) == ATTR_FLAG and val.get(ATTR_VAL) == VALUE_TRUE
            for val in values[1:]
        )
        return self._typedef_data(self._prefix + simple, value, flag)

    def _magic_constant(self, values: list[ET.Element]) -> AnnotationData | None:
        if len(values) != 1:
            return None
        val_name = values[0].get(ATTR_NAME, "")
        value = values[0].get(ATTR_VAL, "")
        from_class = val_name in ("valuesFromClass", "flagsFromClass")
        flag = val_name in ("flags", "flagsFromClass")

        if from_class:
            value = self._expand_class_constants(value)
            if value is None:
                return None

        if self._api is not None:
            value = self.remove_filtered(value)

        simple = STRING_DEF if val_name == "stringValues" else INT_DEF
        return self._typedef_data(self._prefix + simple, value, flag)

    def _expand_class_constants(self, value: str) -> str | None:
        """``foo.Bar.class`` -> ``{foo.Bar.A, foo.Bar.B}`` using the API surface."""
        if self._api is None or not value.endswith(DOT_CLASS):
            return None
        class_name = value[: -len(DOT_CLASS)]
        if class_name == ZIP_ENTRY_CLASS:
            # ZipEntry inherits many unrelated constants; only these apply
            fields: list[str] | None = list(ZIP_ENTRY_METHODS)
        else:
            fields = self._api.get_declared_int_fields(class_name)
        if not fields:
            return None
        return "{" + ", ".join(f"{class_name}.{f}" for f in sorted(fields)) + "}"

    def _contract(self, values: list[ET.Element]) -> AnnotationData | None:
        if not values:
            return None
        pairs = [(ATTR_VALUE, values[0].get(ATTR_VAL, ""))]
        pure = next((v.get(ATTR_VAL) for v in values if v.get(ATTR_NAME) == ATTR_PURE), None)
        if pure:
            pairs.append((ATTR_PURE, pure))
        return AnnotationData(IDEA_CONTRACT, values=pairs)

    @staticmethod
    def _typedef_data(name: str, value: str, flag: bool) -> AnnotationData:
        pairs = [(ATTR_VALUE, value)]
        if flag:
            pairs.append((ATTR_FLAG, VALUE_TRUE))
        return AnnotationData(name, values=pairs)

    def remove_filtered(self, value: str) -> str:
        """Drop typedef constants the API surface does not declare.

        ``{a.B.X, a.B.Y}`` keeps only the entries for which ``has_field``
        holds. String literals are not filterable and are kept.
        """
        if self._api is None:
            return value
        inner = value.strip()
        if inner.startswith("{"):
            inner = inner[1:]
        if inner.endswith("}"):
            inner = inner[:-1]
        kept: list[str] = []
        for entry in (e.strip() for e in inner.split(",")):
            if not entry:
                continue
            if entry.startswith('"'):
                kept.append(entry)
                continue
            owner, _, field = entry.rpartition(".")
            if owner and self._api.has_field(owner, field):
                kept.append(entry)
            elif self._session.list_ignored:
                self._session.info(
                    f"Skipping constant from typedef because it is not part of the SDK: {entry}"
                )
        return "{" + ", ".join(kept) + "}"
