"""Extraction pass over a declaration tree.

Walks each compilation unit once and records an Item for every declaration
carrying at least one relevant annotation. The walk is an explicit
recursive traversal; which node kinds it descends into is the data table
RECURSE_INTO rather than overridden visitor methods:

- files and named classes are entered
- method bodies, field initializers, class initializers and anonymous
  classes are not
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from annodb.constants import (
    FIND_VIEW_METHOD,
    NESTED_MARKER_ANNOTATIONS,
    NONNULL_ANNOTATIONS,
    NULLABLE_ANNOTATIONS,
)
from annodb.extraction.items import Item
from annodb.extraction.relevance import declares_source_retention, is_keep_annotation
from annodb.extraction.session import ExtractionSession
from annodb.extraction.signatures import internal_class_name
from annodb.extraction.types import ClassKind, Declaration, DeclarationKind, Visibility
from annodb.types.errors import ErrorContext, TypedefNotHiddenError, TypedefRetentionError

# Whether the traversal descends into a node's children
RECURSE_INTO: dict[DeclarationKind, bool] = {
    DeclarationKind.FILE: True,
    DeclarationKind.CLASS: True,
    DeclarationKind.ANONYMOUS_CLASS: False,
    DeclarationKind.FIELD: False,
    DeclarationKind.METHOD: False,
    DeclarationKind.CONSTRUCTOR: False,
    DeclarationKind.PARAMETER: False,
    DeclarationKind.INITIALIZER: False,
}

NULLNESS_ANNOTATIONS = NULLABLE_ANNOTATIONS | NONNULL_ANNOTATIONS


@dataclass(frozen=True)
class Scope:
    """Where a declaration sits: its package and innermost named class."""

    package: str | None = None
    class_fqn: str | None = None
    class_kind: ClassKind = ClassKind.CLASS

    @property
    def outer(self) -> str | None:
        return self.class_fqn or self.package


def is_hidden_typedef(declaration: Declaration) -> bool:
    """Typedef annotation types that are not public are stripped from output."""
    return declaration.visibility is not Visibility.PUBLIC


class ExtractionPass:
    """Populates a session's item index from declaration trees.

    Usage:
        session = ExtractionSession(config, api_surface)
        ExtractionPass(session).run(units)
    """

    def __init__(self, session: ExtractionSession) -> None:
        self._session = session
        self._relevance = session.relevance
        self._handlers: dict[DeclarationKind, Callable[[Declaration, Scope], Scope | None]] = {
            DeclarationKind.FILE: self._visit_file,
            DeclarationKind.FIELD: self._visit_field,
            DeclarationKind.METHOD: self._visit_method,
            DeclarationKind.CONSTRUCTOR: self._visit_method,
        }

    def run(self, units: Iterable[Declaration]) -> None:
        for unit in units:
            self._visit(unit, Scope())

    # ========================================================================
    # Traversal
    # ========================================================================

    def _visit(self, node: Declaration, scope: Scope) -> None:
        if node.kind is DeclarationKind.CLASS:
            # Members are visited before the class itself
            inner = self._enter_class(node, scope)
            for child in node.children:
                self._visit(child, inner)
            self._visit_class(node, inner)
            return

        handler = self._handlers.get(node.kind)
        child_scope = handler(node, scope) if handler is not None else None
        if RECURSE_INTO[node.kind]:
            for child in node.children:
                self._visit(child, child_scope or scope)

    def _enter_class(self, node: Declaration, scope: Scope) -> Scope:
        fqn = self._session.cache.class_fqn(node, scope.outer)
        return Scope(package=scope.package, class_fqn=fqn, class_kind=node.class_kind)

    # ========================================================================
    # Handlers
    # ========================================================================

    def _visit_file(self, node: Declaration, scope: Scope) -> Scope:
        package = node.qualified_name or ""
        if self._relevance.has_relevant_annotations(node):
            item = Item.package(package)
            self._session.index.add_package(item)
            self._add_annotations(node, item)
        return Scope(package=package)

    def _visit_class(self, node: Declaration, scope: Scope) -> None:
        fqn = scope.class_fqn
        if fqn is None:
            return

        if node.class_kind is ClassKind.ANNOTATION:
            self._check_typedef_declaration(node, fqn)
            if is_hidden_typedef(node):
                return

        if self._relevance.has_relevant_annotations(node):
            item = Item.klass(fqn, node.class_kind, declaration=node)
            self._session.index.add_item(item)
            self._add_annotations(node, item)

    def _visit_field(self, node: Declaration, scope: Scope) -> None:
        if scope.class_fqn is None or not self._relevance.has_relevant_annotations(node):
            return
        if node.name is None or node.type is None:
            return
        item = Item.field_item(
            scope.class_fqn, node.name, node.type, scope.class_kind, declaration=node
        )
        self._session.index.add_item(item)
        self._add_annotations(node, item)

    def _visit_method(self, node: Declaration, scope: Scope) -> None:
        class_fqn = scope.class_fqn
        if class_fqn is None:
            return

        if self._relevance.has_relevant_annotations(node):
            item = Item.for_method_declaration(class_fqn, node, scope.class_kind)
            if item is not None:
                added = self._session.index.add_item(item)
                self._add_annotations(node, item)
                if item.name == FIND_VIEW_METHOD:
                    self._drop_return_nullness(item, added)

        for index, parameter in enumerate(node.parameters):
            if not self._relevance.has_relevant_annotations(parameter):
                continue
            item = Item.for_method_declaration(class_fqn, node, scope.class_kind, arg_index=index)
            if item is not None:
                self._session.index.add_item(item)
                self._add_annotations(parameter, item)

    # ========================================================================
    # Helpers
    # ========================================================================

    def _add_annotations(self, node: Declaration, item: Item) -> None:
        for occurrence in node.annotations:
            if not self._relevance.is_relevant(occurrence):
                continue
            if is_keep_annotation(occurrence.qualified_name):
                self._session.divert_to_keep(item)
            else:
                self._relevance.normalize(occurrence, item.annotations)

    def _drop_return_nullness(self, item: Item, in_index: bool) -> None:
        # Return nullness is never recorded for findViewById
        item.annotations = [a for a in item.annotations if a.name not in NULLNESS_ANNOTATIONS]
        if not item.annotations and in_index:
            self._session.index.remove_item(item)

    def _check_typedef_declaration(self, node: Declaration, fqn: str) -> None:
        config = self._session.config
        for occurrence in node.annotations:
            if occurrence.qualified_name not in NESTED_MARKER_ANNOTATIONS:
                continue
            context = ErrorContext(operation="extract", signature=fqn, component="typedef")
            if config.require_hide and "@hide" not in (node.doc_comment or ""):
                self._session.report(
                    TypedefNotHiddenError(
                        f"{fqn}: This typedef annotation should specify @hide in a doc comment",
                        context=context,
                    )
                )
            if config.require_source_retention and not declares_source_retention(node):
                error = TypedefRetentionError(
                    f"{fqn}: The typedef annotation should have "
                    "@Retention(RetentionPolicy.SOURCE)",
                    context=context,
                )
                if config.enforce_typedef_retention:
                    raise error
                self._session.report(error)
            if is_hidden_typedef(node):
                self._session.typedefs_to_remove.append(internal_class_name(fqn))
            break
