"""
Structured error handling for annodb.

Every problem the pipeline can hit is an AnnodbError carrying an ErrorCode,
a severity and an ErrorContext. Per-item and per-document problems are
recoverable: the session records them as diagnostics and carries on. Only
final-stage output failures are raised to the caller.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
from typing import Any

from annodb.utils.helpers import utcnow


class ErrorCode(IntEnum):
    """Internal error codes for categorization."""

    # Merge input errors (1000-1999)
    MALFORMED_SIGNATURE = 1001
    UNSUPPORTED_ANNOTATION_IMPORT = 1002
    DOCUMENT_PARSE_FAILED = 1003
    CONFLICTING_NULLABILITY = 1004

    # Extraction errors (2000-2999)
    UNRESOLVED_ATTRIBUTE = 2001
    TYPEDEF_RETENTION = 2002
    TYPEDEF_NOT_HIDDEN = 2003

    # Output errors (3000-3999)
    ARCHIVE_WRITE_FAILED = 3001
    DOCUMENT_VALIDATION_FAILED = 3002

    # Configuration errors (4000-4999)
    INVALID_CONFIG = 4001


class ErrorSeverity(str, Enum):
    """Error severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass
class ErrorContext:
    """Context information for an error."""

    operation: str | None = None
    file_path: str | None = None
    signature: str | None = None
    component: str | None = None
    timestamp: datetime = field(default_factory=utcnow)
    additional_info: dict[str, Any] = field(default_factory=dict)


class AnnodbError(Exception):
    """Base error class for annodb."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        user_message: str,
        severity: str = ErrorSeverity.MEDIUM,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.severity = severity
        self.user_message = user_message
        self.context = context or ErrorContext()
        self.original_error = original_error
        self.context.timestamp = utcnow()

    @property
    def recoverable(self) -> bool:
        """Whether the pipeline may skip the offending unit and continue."""
        return self.severity in (ErrorSeverity.LOW, ErrorSeverity.MEDIUM)

    def get_formatted_message(self) -> str:
        """Get a formatted error message for display to users."""
        parts = [
            f"[Error] {self.user_message}",
            f"   Code: {self.code.value}",
        ]

        if self.context.operation:
            parts.append(f"   Operation: {self.context.operation}")
        if self.context.file_path:
            parts.append(f"   File: {self.context.file_path}")
        if self.context.signature:
            parts.append(f"   Signature: {self.context.signature}")
        if self.context.component:
            parts.append(f"   Component: {self.context.component}")

        return "\n".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "name": self.__class__.__name__,
            "code": self.code.value,
            "message": str(self),
            "user_message": self.user_message,
            "severity": self.severity,
            "context": {
                "operation": self.context.operation,
                "file_path": self.context.file_path,
                "signature": self.context.signature,
                "component": self.context.component,
                "timestamp": self.context.timestamp.isoformat(),
                "additional_info": self.context.additional_info,
            },
            "original_error": str(self.original_error) if self.original_error else None,
        }


# Specialized error classes; each fixes its code, severity and default user message
class _DomainError(AnnodbError):
    default_code: ErrorCode
    default_severity: ErrorSeverity = ErrorSeverity.MEDIUM
    default_user_message: str = "Annotation processing problem."

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(
            code=self.default_code,
            message=message,
            user_message=user_message or self.default_user_message,
            severity=self.default_severity,
            context=context,
            original_error=original_error,
        )


class MalformedSignatureError(_DomainError):
    """A merge-source item name does not match the signature grammar."""

    default_code = ErrorCode.MALFORMED_SIGNATURE
    default_user_message = "No merge match for signature."


class UnsupportedAnnotationImportError(_DomainError):
    """A merge-source annotation type is not one of the recognized kinds."""

    default_code = ErrorCode.UNSUPPORTED_ANNOTATION_IMPORT
    default_severity = ErrorSeverity.LOW
    default_user_message = "Ignoring unsupported merge annotation."


class DocumentParseError(_DomainError):
    """A merge-source XML document could not be parsed."""

    default_code = ErrorCode.DOCUMENT_PARSE_FAILED
    default_user_message = "Could not parse annotation document."


class ConflictingNullabilityError(_DomainError):
    """A merge would put both nullable and non-null markers on one item."""

    default_code = ErrorCode.CONFLICTING_NULLABILITY
    default_user_message = "Conflicting nullness annotations; keeping the existing one."


class UnresolvedAttributeError(_DomainError):
    """An attribute expression could not be rendered as a literal or constant."""

    default_code = ErrorCode.UNRESOLVED_ATTRIBUTE
    default_user_message = "Dropped an annotation attribute that could not be evaluated."


class TypedefRetentionError(_DomainError):
    """A typedef annotation type does not declare SOURCE retention."""

    default_code = ErrorCode.TYPEDEF_RETENTION
    default_user_message = "Typedef annotation should be marked @Retention(RetentionPolicy.SOURCE)."


class TypedefNotHiddenError(_DomainError):
    """A typedef annotation type is not documented as hidden."""

    default_code = ErrorCode.TYPEDEF_NOT_HIDDEN
    default_user_message = "Typedef annotation should specify @hide."


class DocumentValidationError(_DomainError):
    """An emitted annotation document is not well-formed XML."""

    default_code = ErrorCode.DOCUMENT_VALIDATION_FAILED
    default_severity = ErrorSeverity.HIGH
    default_user_message = "Generated annotation document is not valid XML."


class ArchiveWriteError(_DomainError):
    """Writing an output archive or text artifact failed."""

    default_code = ErrorCode.ARCHIVE_WRITE_FAILED
    default_severity = ErrorSeverity.CRITICAL
    default_user_message = "Could not write output file."


class ConfigurationError(_DomainError):
    """Error related to configuration issues."""

    default_code = ErrorCode.INVALID_CONFIG
    default_severity = ErrorSeverity.HIGH
    default_user_message = "Configuration error occurred."
