"""Annotation database archive writer.

Each package becomes one entry, ``pkg/with/slashes/annotations.xml``, in a
zip archive. Entries are written in package order with a fixed timestamp,
so identical input always produces an identical archive. Every document is
re-parsed before it is written; the archive is assembled in a temporary
file and moved into place only once complete.
"""

from __future__ import annotations

import os
import zipfile
from pathlib import Path

from annodb.constants import ANNOTATIONS_ENTRY_NAME
from annodb.export.writer import AnnotationRenderer
from annodb.extraction.session import ExtractionSession
from annodb.types.core import ParseResult
from annodb.types.errors import ArchiveWriteError, DocumentValidationError, ErrorContext
from annodb.utils.logger import logger

# Earliest timestamp a zip entry can carry
FIXED_DATE_TIME = (1980, 1, 1, 0, 0, 0)


def entry_name(package: str) -> str:
    """Archive entry for a package's document."""
    if not package:
        return ANNOTATIONS_ENTRY_NAME
    return f"{package.replace('.', '/')}/{ANNOTATIONS_ENTRY_NAME}"


class ArchiveWriter:
    """Serializes a session's item index into an annotation archive.

    Usage:
        ArchiveWriter(session).write(Path("annotations.zip"))
    """

    def __init__(self, session: ExtractionSession) -> None:
        self._session = session
        self._renderer = AnnotationRenderer(session)

    def render_documents(self) -> dict[str, str]:
        """Entry name -> document text, in package order."""
        index = self._session.index
        documents: dict[str, str] = {}
        for package in index.package_names():
            documents[entry_name(package)] = self._renderer.render_document(
                index.package_item(package), index.classes(package)
            )
        return documents

    def validate(self, name: str, xml: str) -> ParseResult:
        """Re-parse an emitted document; failures are fatal only when strict."""
        result = ParseResult.parse(xml.encode("utf-8"), source=name)
        if result.ok:
            return result
        error = DocumentValidationError(
            f"Could not parse XML document back in for entry {name}: {result.describe()}",
            context=ErrorContext(operation="export", file_path=name),
        )
        if self._session.config.strict_validation:
            raise error
        self._session.report(error)
        return result

    def write(self, path: Path) -> bool:
        """Write the archive; returns False (and removes any old archive) if empty."""
        if self._session.index.is_empty():
            if path.exists():
                path.unlink()
            logger.debug(f"No annotations to write; {path} not created")
            return False

        documents = self.render_documents()
        for name, xml in documents.items():
            self.validate(name, xml)

        temporary = path.with_name(path.name + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with zipfile.ZipFile(temporary, "w", compression=zipfile.ZIP_DEFLATED) as archive:
                for name, xml in documents.items():
                    info = zipfile.ZipInfo(name, date_time=FIXED_DATE_TIME)
                    info.compress_type = zipfile.ZIP_DEFLATED
                    archive.writestr(info, xml.encode("utf-8"))
            os.replace(temporary, path)
        except (OSError, zipfile.BadZipFile) as e:
            if temporary.exists():
                temporary.unlink()
            raise ArchiveWriteError(
                f"Could not write annotation archive {path}: {e}",
                context=ErrorContext(operation="export", file_path=str(path)),
                original_error=e,
            ) from e

        self._session.info(f"Annotations written to {path}")
        return True
