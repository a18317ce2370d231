"""Extraction pipeline: declaration trees in, annotated items out.

Usage:
    from annodb.extraction import AnnotationExtractor

    extractor = AnnotationExtractor()
    extractor.extract(units)
"""

from annodb.extraction.api_surface import ApiSurfaceDatabase
from annodb.extraction.items import AnnotationData, Item
from annodb.extraction.orchestrator import AnnotationExtractor
from annodb.extraction.protocols import ApiSurface
from annodb.extraction.session import ExtractionSession
from annodb.extraction.types import (
    AnnotationOccurrence,
    AttributeValue,
    ClassKind,
    Declaration,
    DeclarationKind,
    Expression,
    ExpressionKind,
    ItemKind,
    Visibility,
)

__all__ = [
    "AnnotationData",
    "AnnotationExtractor",
    "AnnotationOccurrence",
    "ApiSurface",
    "ApiSurfaceDatabase",
    "AttributeValue",
    "ClassKind",
    "Declaration",
    "DeclarationKind",
    "ExtractionSession",
    "Expression",
    "ExpressionKind",
    "Item",
    "ItemKind",
    "Visibility",
]
