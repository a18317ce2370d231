"""
Core result types shared by the merge and export stages.

Parsing an annotation document either succeeds with a root element or fails
with a diagnostic; ParseResult keeps the two apart explicitly so callers can
log the failure and tests can assert on it.
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass

from annodb.types.errors import DocumentParseError, ErrorContext

ROOT_TAG = "root"


@dataclass(frozen=True)
class ParseResult:
    """Outcome of parsing one annotation document."""

    root: ET.Element | None = None
    error: str | None = None
    line: int | None = None
    column: int | None = None
    source: str | None = None

    def __post_init__(self) -> None:
        if (self.root is None) == (self.error is None):
            raise ValueError("exactly one of root and error must be set")

    @property
    def ok(self) -> bool:
        """True when the document parsed and has a <root> element."""
        return self.root is not None

    @classmethod
    def parse(cls, text: str | bytes, source: str | None = None) -> "ParseResult":
        """Parse XML text, returning a failure result instead of raising."""
        try:
            root = ET.fromstring(text)
        except ET.ParseError as e:
            line, column = e.position
            return cls(error=str(e), line=line, column=column, source=source)
        if root.tag != ROOT_TAG:
            return cls(error=f"Unexpected root element <{root.tag}>", source=source)
        return cls(root=root, source=source)

    def describe(self) -> str:
        """Human readable location and message for a failed parse."""
        if self.ok:
            return f"{self.source or '<string>'}: ok"
        location = self.source or "<string>"
        if self.line is not None:
            location += f":{self.line}"
            if self.column is not None:
                location += f":{self.column}"
        return f"{location}: {self.error}"

    def to_error(self) -> DocumentParseError:
        """Convert a failed result into a recordable diagnostic."""
        if self.ok:
            raise ValueError("parse succeeded; there is no error to convert")
        return DocumentParseError(
            f"Failed to parse {self.describe()}",
            context=ErrorContext(
                operation="parse_document",
                file_path=self.source,
                additional_info={"line": self.line, "column": self.column},
            ),
        )
