"""Relevance filtering and name normalization for discovered annotations.

Decides which annotations on a declaration belong in the database and
rewrites legacy names to the canonical namespace:

- nullness markers from the platform and both support namespaces map to
  the canonical Nullable / NonNull pair
- platform resource-type annotations (``android.annotation.*Res``) and other
  platform annotations map to the canonical namespace, subject to retention
- typedef ("magic constant") annotations are detected directly, or through
  one level of indirection: an annotation type that is itself annotated with
  a typedef marker contributes that marker wherever it is used
"""

from __future__ import annotations

from annodb.config import ExtractorConfig
from annodb.constants import (
    ANDROID_NOTNULL,
    ANDROID_NULLABLE,
    FRAMEWORK_EXCLUDED_SUFFIXES,
    IDEA_CONTRACT,
    JAVA_LANG_PREFIX,
    KEEP_ANNOTATIONS,
    KNOWN_SOURCE_RETENTION,
    MAGIC_CONSTANT_ANNOTATIONS,
    NESTED_MARKER_ANNOTATIONS,
    NONNULL,
    NONNULL_ANNOTATIONS,
    NULLABLE,
    NULLABLE_ANNOTATIONS,
    PLATFORM_PREFIX,
    RESOURCE_TYPE_SUFFIX,
    RETENTION_ANNOTATIONS,
    SOURCE_RETENTION_FIELD,
    SUPPORT_PREFIXES,
    support_names,
)
from annodb.extraction.cache import ResolutionCache
from annodb.extraction.items import AnnotationData
from annodb.extraction.stats import ExtractionStats
from annodb.extraction.types import AnnotationOccurrence, Declaration, ExpressionKind
from annodb.utils.logger import logger

SOURCE_NULLABLE_NAMES = support_names(NULLABLE) | {ANDROID_NULLABLE}
SOURCE_NONNULL_NAMES = support_names(NONNULL) | {ANDROID_NOTNULL}


def is_support_annotation(name: str) -> bool:
    return name.startswith(SUPPORT_PREFIXES)


def is_relevant_framework_annotation(name: str) -> bool:
    """Platform annotations other than documentation and lint-only markers."""
    return name.startswith(PLATFORM_PREFIX) and not name.endswith(FRAMEWORK_EXCLUDED_SUFFIXES)


def is_keep_annotation(name: str | None) -> bool:
    return name in KEEP_ANNOTATIONS


def declares_source_retention(declaration: Declaration) -> bool:
    """True if an annotation type declares @Retention(SOURCE)."""
    for occurrence in declaration.annotations:
        if occurrence.qualified_name not in RETENTION_ANNOTATIONS:
            continue
        if len(occurrence.attributes) != 1:
            logger.error("Expected exactly one parameter passed to @Retention")
            return False
        expression = occurrence.attributes[0].expression
        if expression.kind is ExpressionKind.REFERENCE and expression.field_name is not None:
            if expression.field_name == SOURCE_RETENTION_FIELD:
                return True
        elif expression.text is not None and SOURCE_RETENTION_FIELD in expression.text:
            return True
    return False


class RelevanceFilter:
    """Relevance decisions and normalization, memoized per session."""

    def __init__(
        self,
        config: ExtractorConfig,
        cache: ResolutionCache,
        stats: ExtractionStats,
    ) -> None:
        self._config = config
        self._cache = cache
        self._stats = stats
        self.nullable_name = config.canonical_prefix + NULLABLE
        self.nonnull_name = config.canonical_prefix + NONNULL

    # ========================================================================
    # Retention
    # ========================================================================

    def has_source_retention(self, name: str, occurrence: AnnotationOccurrence | None) -> bool:
        """Whether the named annotation type is SOURCE retained.

        Known names come from a fixed table. Others are resolved once through
        the annotation's own declaration and cached; without an occurrence to
        resolve, unknown names count as not source retained.
        """
        known = KNOWN_SOURCE_RETENTION.get(name)
        if known is not None:
            return known
        cached = self._cache.source_retention.get(name)
        if cached is not None:
            self._cache.record(hit=True)
            return cached
        if occurrence is None:
            return False
        self._cache.record(hit=False)
        source = occurrence.declaration is not None and declares_source_retention(
            occurrence.declaration
        )
        self._cache.source_retention[name] = source
        return source

    def _retained(self, name: str, occurrence: AnnotationOccurrence | None) -> bool:
        return self._config.include_class_retention or self.has_source_retention(name, occurrence)

    # ========================================================================
    # Relevance
    # ========================================================================

    def is_relevant(self, occurrence: AnnotationOccurrence) -> bool:
        """Whether an annotation occurrence should be recorded at all."""
        name = occurrence.qualified_name
        if name is None or name.startswith(JAVA_LANG_PREFIX):
            return False
        if is_support_annotation(name):
            if is_keep_annotation(name):
                # Processed even with class retention
                return True
            return self._retained(name, occurrence)
        if name.startswith(PLATFORM_PREFIX):
            return is_relevant_framework_annotation(name)
        return self.is_magic_constant(occurrence, name) or name == IDEA_CONTRACT

    def has_relevant_annotations(self, declaration: Declaration) -> bool:
        return any(self.is_relevant(a) for a in declaration.annotations)

    def is_magic_constant(self, occurrence: AnnotationOccurrence, name: str) -> bool:
        """Whether an annotation type restricts values to constants or a range.

        Only one level of indirection is followed: markers on the annotation
        type's own declaration are recorded, markers on those markers are not.
        """
        if name in self._cache.irrelevant or name.startswith(JAVA_LANG_PREFIX):
            self._cache.record(hit=True)
            return False
        if name in self._cache.typedef_indirections:
            self._cache.record(hit=True)
            return True
        if name in MAGIC_CONSTANT_ANNOTATIONS:
            return True

        self._cache.record(hit=False)
        resolved = occurrence.declaration
        if resolved is not None:
            match = False
            for marker in resolved.annotations:
                marker_name = marker.qualified_name
                if marker_name in NESTED_MARKER_ANNOTATIONS:
                    indirect = self._cache.typedef_indirections.setdefault(name, [])
                    self.normalize(marker, indirect)
                    # Keep going: a type may carry both IntDef and IntRange
                    match = True
            if match:
                return True

        self._cache.irrelevant.add(name)
        return False

    # ========================================================================
    # Normalization
    # ========================================================================

    def normalize(self, occurrence: AnnotationOccurrence, into: list[AnnotationData]) -> None:
        """Append the canonical form(s) of a relevant annotation to ``into``."""
        name = occurrence.qualified_name
        if name is None:
            return

        if name in SOURCE_NULLABLE_NAMES:
            self._add(into, AnnotationData(self.nullable_name))
            return
        if name in SOURCE_NONNULL_NAMES:
            self._add(into, AnnotationData(self.nonnull_name))
            return

        if is_support_annotation(name):
            if name.endswith(RESOURCE_TYPE_SUFFIX):
                self._add(into, AnnotationData(name))
            else:
                self._add(into, self._with_attributes(name, occurrence))
            return

        if name.startswith(PLATFORM_PREFIX):
            canonical = self._config.canonical_prefix + name[len(PLATFORM_PREFIX) :]
            if name.endswith(RESOURCE_TYPE_SUFFIX):
                if self._retained(canonical, None):
                    self._add(into, AnnotationData(canonical))
            elif is_relevant_framework_annotation(name):
                if self._retained(canonical, None):
                    self._add(into, self._with_attributes(canonical, occurrence))
            return

        if name == IDEA_CONTRACT:
            self._add(into, self._with_attributes(name, occurrence))
            return

        if self.is_magic_constant(occurrence, name):
            into.extend(self._cache.typedef_indirections.get(name, ()))

    def _add(self, into: list[AnnotationData], data: AnnotationData) -> None:
        self._stats.record(data.name)
        into.append(data)

    @staticmethod
    def _with_attributes(name: str, occurrence: AnnotationOccurrence) -> AnnotationData:
        if not occurrence.attributes:
            return AnnotationData(name)
        return AnnotationData(name, attributes=list(occurrence.attributes))

    # ========================================================================
    # Nullness
    # ========================================================================

    @staticmethod
    def conflicts(existing: AnnotationData, incoming: AnnotationData) -> bool:
        """True if the two annotations are opposite nullness markers."""
        return (
            existing.name in NULLABLE_ANNOTATIONS and incoming.name in NONNULL_ANNOTATIONS
        ) or (existing.name in NONNULL_ANNOTATIONS and incoming.name in NULLABLE_ANNOTATIONS)
