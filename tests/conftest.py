"""
Pytest configuration and shared fixtures for annodb tests.
"""

from __future__ import annotations

import pytest

from annodb.config import ExtractorConfig
from annodb.extraction.api_surface import ApiSurfaceDatabase
from annodb.extraction.session import ExtractionSession
from annodb.extraction.types import (
    AnnotationOccurrence,
    AttributeValue,
    ClassKind,
    Declaration,
    DeclarationKind,
    Expression,
    Visibility,
)

ANDROIDX = "androidx.annotation."
SUPPORT = "android.support.annotation."


# =============================================================================
# Declaration builders
# =============================================================================


def annotation(
    name: str, declaration: Declaration | None = None, **attributes: Expression
) -> AnnotationOccurrence:
    """Annotation occurrence; keyword ``value`` becomes the implicit attribute."""
    pairs = [
        AttributeValue(None if key == "value" else key, expression)
        for key, expression in attributes.items()
    ]
    return AnnotationOccurrence(name, pairs, declaration)


def field(name: str, type_: str, *annotations: AnnotationOccurrence) -> Declaration:
    return Declaration(DeclarationKind.FIELD, name=name, type=type_, annotations=list(annotations))


def parameter(type_: str, *annotations: AnnotationOccurrence) -> Declaration:
    return Declaration(
        DeclarationKind.PARAMETER, name="p", type=type_, annotations=list(annotations)
    )


def method(
    name: str,
    return_type: str | None,
    parameters: list[Declaration] | None = None,
    annotations: list[AnnotationOccurrence] | None = None,
    constructor: bool = False,
) -> Declaration:
    return Declaration(
        DeclarationKind.CONSTRUCTOR if constructor else DeclarationKind.METHOD,
        name=name,
        type=return_type,
        parameters=parameters or [],
        annotations=annotations or [],
    )


def klass(
    fqn: str,
    *children: Declaration,
    annotations: list[AnnotationOccurrence] | None = None,
    class_kind: ClassKind = ClassKind.CLASS,
    visibility: Visibility = Visibility.PUBLIC,
    doc_comment: str | None = None,
) -> Declaration:
    return Declaration(
        DeclarationKind.CLASS,
        name=fqn.rsplit(".", 1)[-1],
        qualified_name=fqn,
        class_kind=class_kind,
        visibility=visibility,
        annotations=annotations or [],
        children=list(children),
        doc_comment=doc_comment,
    )


def unit(package: str, *classes: Declaration, annotations=None) -> Declaration:
    return Declaration(
        DeclarationKind.FILE,
        qualified_name=package,
        annotations=annotations or [],
        children=list(classes),
    )


def source_retention() -> AnnotationOccurrence:
    return annotation(
        "java.lang.annotation.Retention",
        value=Expression.reference("java.lang.annotation.RetentionPolicy", "SOURCE"),
    )


def int_def_type(
    fqn: str, *constants: str, visibility: Visibility = Visibility.PUBLIC, doc: str = "@hide"
) -> Declaration:
    """SOURCE-retained annotation type with @IntDef over constants of its outer class."""
    owner = fqn.rsplit(".", 1)[0]
    values = Expression.array(*(Expression.reference(owner, c) for c in constants))
    return klass(
        fqn,
        annotations=[annotation(ANDROIDX + "IntDef", value=values), source_retention()],
        class_kind=ClassKind.ANNOTATION,
        visibility=visibility,
        doc_comment=doc,
    )


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def config() -> ExtractorConfig:
    return ExtractorConfig()


@pytest.fixture
def session(config: ExtractorConfig) -> ExtractionSession:
    return ExtractionSession(config)


@pytest.fixture
def class_retention_session() -> ExtractionSession:
    """Session that also merges and records CLASS-retained annotations."""
    return ExtractionSession(ExtractorConfig(include_class_retention=True))


@pytest.fixture
def api() -> ApiSurfaceDatabase:
    return ApiSurfaceDatabase.from_mapping(
        {
            "foo.Bar": {
                "fields": ["MODE"],
                "methods": {"compute": ["int,int"], "Bar": ["int"]},
                "int_fields": ["MODE_A", "MODE_B"],
            },
        }
    )
