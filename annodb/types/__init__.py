"""
annodb type definitions.

Exports the result and error types shared across extraction, merge and export.
"""

# Core types
from .core import ParseResult

# Error types
from .errors import (
    AnnodbError,
    ArchiveWriteError,
    ConfigurationError,
    ConflictingNullabilityError,
    DocumentParseError,
    DocumentValidationError,
    ErrorCode,
    ErrorContext,
    ErrorSeverity,
    MalformedSignatureError,
    TypedefNotHiddenError,
    TypedefRetentionError,
    UnresolvedAttributeError,
    UnsupportedAnnotationImportError,
)

__all__ = [
    # Core types
    "ParseResult",
    # Error types
    "AnnodbError",
    "ArchiveWriteError",
    "ConfigurationError",
    "ConflictingNullabilityError",
    "DocumentParseError",
    "DocumentValidationError",
    "ErrorCode",
    "ErrorContext",
    "ErrorSeverity",
    "MalformedSignatureError",
    "TypedefNotHiddenError",
    "TypedefRetentionError",
    "UnresolvedAttributeError",
    "UnsupportedAnnotationImportError",
]
