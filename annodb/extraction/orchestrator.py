"""Pipeline facade: extract, merge, then export.

AnnotationExtractor is the single entry point for a run. It owns one
ExtractionSession and drives the three stages over it, in order:

1. **Extract**: walk declaration trees and record annotated items
2. **Merge**: fold in annotation documents from other modules or archives
3. **Export**: write the keep rules, the annotation archive, the typedef
   manifest and the statistics report

Per-item and per-document problems are recorded in ``diagnostics`` and
never abort a run. Output I/O failures raise ArchiveWriteError.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from annodb.config import ExtractorConfig
from annodb.export.archive import ArchiveWriter
from annodb.export.keep_rules import write_keep_rules, write_typedef_manifest
from annodb.extraction.index import ItemIndex
from annodb.extraction.items import Item
from annodb.extraction.protocols import ApiSurface
from annodb.extraction.session import ExtractionSession
from annodb.extraction.stats import ExtractionStats
from annodb.extraction.types import Declaration
from annodb.extraction.visitor import ExtractionPass
from annodb.merge.merger import MergePass
from annodb.types.core import ParseResult
from annodb.types.errors import AnnodbError
from annodb.utils.logger import logger


class AnnotationExtractor:
    """Extracts, merges and serializes an external annotation database.

    Usage:
        extractor = AnnotationExtractor(config=ExtractorConfig.from_env(), api_surface=api)
        extractor.extract(units)
        extractor.merge_existing(Path("platform-annotations.zip"))
        extractor.export(Path("annotations.zip"), Path("proguard.txt"))
        extractor.write_typedef_file(Path("typedefs.txt"))
        print(extractor.write_stats())
    """

    def __init__(
        self,
        config: ExtractorConfig | None = None,
        api_surface: ApiSurface | None = None,
    ) -> None:
        self._session = ExtractionSession(config, api_surface)
        self._extraction = ExtractionPass(self._session)
        self._merge = MergePass(self._session)
        self._archive = ArchiveWriter(self._session)

    # ========================================================================
    # Session state
    # ========================================================================

    @property
    def session(self) -> ExtractionSession:
        return self._session

    @property
    def index(self) -> ItemIndex:
        return self._session.index

    @property
    def stats(self) -> ExtractionStats:
        return self._session.stats

    @property
    def keep_items(self) -> list[Item]:
        return self._session.keep_items

    @property
    def typedefs_to_remove(self) -> list[str]:
        return self._session.typedefs_to_remove

    @property
    def diagnostics(self) -> list[AnnodbError]:
        return self._session.diagnostics

    # ========================================================================
    # Stages
    # ========================================================================

    def extract(self, units: Iterable[Declaration]) -> None:
        """Record annotated declarations from compilation units."""
        self._extraction.run(units)
        logger.debug(f"Extraction done: {len(self.index)} item(s) indexed")

    def merge_existing(self, path: Path) -> None:
        """Merge an annotation document, archive, or directory of either."""
        self._merge.merge_path(path)

    def merge_annotations_xml(self, xml: str | bytes, source: str | None = None) -> ParseResult:
        """Merge a single in-memory annotation document."""
        return self._merge.merge_xml(xml, source)

    def export(self, annotations_zip: Path | None, proguard_cfg: Path | None = None) -> None:
        """Write keep rules first, then the annotation archive.

        Keep rules are written first so that keep items are out of the index
        before the archive is rendered.
        """
        if proguard_cfg is not None:
            write_keep_rules(self._session, proguard_cfg)
        else:
            for item in self.keep_items:
                self.index.remove_item(item)
        if annotations_zip is not None:
            self._archive.write(annotations_zip)

    def render_documents(self) -> dict[str, str]:
        """Per-package documents as they would be written to the archive."""
        return self._archive.render_documents()

    def write_typedef_file(self, path: Path) -> None:
        write_typedef_manifest(self._session, path)

    def write_stats(self) -> str:
        """Render the statistics report and log it as progress output."""
        report = self.stats.report()
        if report:
            self._session.info(report)
        return report
