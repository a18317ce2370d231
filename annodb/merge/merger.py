"""Merge pass: fold previously serialized annotation documents into a session.

Sources may be a single XML document, a jar/zip archive of documents, or a
directory scanned recursively for both. Each <item> is matched to an
existing item by its decomposed signature, or added as a new item, and its
annotations are merged under these rules:

1. an annotation whose name the item already carries is skipped
2. a nullness marker opposite to one the item carries is reported and skipped
3. anything else is appended, in document order

Merge order therefore matters: the first annotation of a given name wins.
Problems with one item or one document are recorded and skipped.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
import zipfile
import zlib
from pathlib import Path

from annodb.constants import SUPPORTED_MERGE_SUFFIXES
from annodb.extraction.items import AnnotationData, Item
from annodb.extraction.relevance import is_keep_annotation
from annodb.extraction.session import ExtractionSession
from annodb.merge.importer import (
    ATTR_NAME,
    AnnotationImporter,
    annotation_elements,
    has_historic_data,
)
from annodb.merge.signature_parser import (
    ParsedSignature,
    is_calendar_set_parameter,
    is_denied,
    looks_like_class_name,
    parse_signature,
)
from annodb.types.core import ParseResult
from annodb.types.errors import (
    ConflictingNullabilityError,
    DocumentParseError,
    ErrorContext,
    MalformedSignatureError,
)
from annodb.utils.helpers import unescape_xml
from annodb.utils.logger import logger

XML_SUFFIX = ".xml"


class MergePass:
    """Merges imported annotation documents into a session's item index.

    Usage:
        merger = MergePass(session)
        merger.merge_path(Path("platform-annotations.zip"))
        result = merger.merge_xml(xml_text, source="inline")
    """

    def __init__(self, session: ExtractionSession) -> None:
        self._session = session
        self._importer = AnnotationImporter(session)

    # ========================================================================
    # Sources
    # ========================================================================

    def merge_path(self, path: Path) -> None:
        """Merge a document, an archive, or every supported file under a directory."""
        if path.is_dir():
            for child in sorted(path.iterdir()):
                self.merge_path(child)
        elif path.is_file():
            if path.suffix in SUPPORTED_MERGE_SUFFIXES:
                self.merge_archive(path)
            elif path.suffix == XML_SUFFIX:
                try:
                    data = path.read_bytes()
                except OSError as e:
                    self._read_failed(str(path), e)
                    return
                self.merge_xml(data, source=str(path))

    def merge_archive(self, path: Path) -> None:
        """Merge every .xml entry of a jar or zip archive."""
        try:
            with zipfile.ZipFile(path) as archive:
                for info in archive.infolist():
                    if info.is_dir() or not info.filename.endswith(XML_SUFFIX):
                        continue
                    source = f"{path}: {info.filename}"
                    try:
                        data = archive.read(info)
                    except (OSError, EOFError, zipfile.BadZipFile, zlib.error) as e:
                        self._read_failed(source, e)
                        continue
                    self.merge_xml(data, source=source)
        except (OSError, zipfile.BadZipFile) as e:
            self._read_failed(str(path), e)

    def merge_xml(self, text: str | bytes, source: str | None = None) -> ParseResult:
        """Parse and merge one document; a parse failure skips the whole document."""
        result = ParseResult.parse(text, source)
        if not result.ok:
            self._session.report(result.to_error())
            return result
        assert result.root is not None
        self.merge_document(result.root)
        return result

    def _read_failed(self, source: str, error: Exception) -> None:
        self._session.report(
            DocumentParseError(
                f"Aborting merge of {source}: I/O problem: {error}",
                context=ErrorContext(operation="merge", file_path=source),
                original_error=error,
            )
        )

    # ========================================================================
    # Items
    # ========================================================================

    def merge_document(self, root: ET.Element) -> None:
        for element in root:
            self._merge_item_element(element)

    def _merge_item_element(self, element: ET.Element) -> None:
        raw = element.get(ATTR_NAME)
        if raw is None or raw == "null":
            return

        annotations: list[AnnotationData] = []
        for annotation_element in annotation_elements(element):
            annotation = self._importer.convert(annotation_element)
            if annotation is not None:
                annotations.append(annotation)
        if not annotations:
            return

        signature = unescape_xml(raw)
        if is_denied(signature):
            return

        parsed = parse_signature(signature)
        if parsed is None:
            if not looks_like_class_name(signature):
                self._session.report(
                    MalformedSignatureError(
                        f"No merge match for signature {signature}",
                        context=ErrorContext(operation="merge", signature=signature),
                    )
                )
            return

        if self._is_filtered(element, parsed):
            return
        if is_calendar_set_parameter(parsed):
            return

        item = self._item_for(parsed)
        existing = self._session.index.find_item(item)
        if existing is not None:
            self._attach(existing, annotations)
            return
        self._attach(item, annotations)
        if item.annotations and item not in self._session.keep_items:
            self._session.index.add_item_unconditionally(item)

    def _is_filtered(self, element: ET.Element, parsed: ParsedSignature) -> bool:
        api = self._session.api_surface
        if api is None or has_historic_data(element):
            return False
        owner = parsed.containing_class
        if parsed.is_field:
            known = api.has_field(owner, parsed.field_name or "")
            member = f"{owner}#{parsed.field_name}"
        else:
            known = api.has_method(owner, parsed.method_name or "", parsed.parameters)
            member = f"{owner}#{parsed.method_name}({parsed.parameters})"
        if known:
            return False
        self._session.stats.record_filtered()
        if self._session.list_ignored:
            self._session.info(
                f"Skipping imported element because it is not part of the API file: {member}"
            )
        return True

    @staticmethod
    def _item_for(parsed: ParsedSignature) -> Item:
        owner = parsed.containing_class
        if parsed.is_field:
            return Item.field_item(owner, parsed.field_name or "")
        if parsed.arg_index is not None:
            return Item.parameter(
                owner,
                parsed.method_name or "",
                parsed.parameters,
                parsed.return_type,
                parsed.arg_index,
                is_constructor=parsed.is_constructor,
            )
        return Item.method(
            owner,
            parsed.method_name or "",
            parsed.parameters,
            parsed.return_type,
            is_constructor=parsed.is_constructor,
        )

    def _attach(self, item: Item, annotations: list[AnnotationData]) -> int:
        """Merge imported annotations into an item; returns how many were added."""
        session = self._session
        count = 0
        for annotation in annotations:
            if is_keep_annotation(annotation.name):
                session.divert_to_keep(item)
                continue
            if not session.config.include_class_retention and not (
                session.relevance.has_source_retention(annotation.name, None)
            ):
                continue
            if item.find_annotation(annotation.name) is not None:
                continue
            if any(session.relevance.conflicts(a, annotation) for a in item.annotations):
                session.report(
                    ConflictingNullabilityError(
                        f"Found both @Nullable and @NonNull after import for {item}",
                        context=ErrorContext(operation="merge", signature=item.signature),
                    )
                )
                continue
            item.annotations.append(annotation)
            session.stats.record_merged(annotation.name)
            count += 1
        if count:
            logger.debug(f"Merged {count} annotation(s) into {item}")
        return count
