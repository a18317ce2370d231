"""State of one extraction run.

A session owns everything a run mutates: the item index, statistics,
resolution caches, the keep list, hidden typedef names and recorded
diagnostics. The extraction, merge and export stages all operate on the
same session, one after another.
"""

from __future__ import annotations

from annodb.config import ExtractorConfig
from annodb.extraction.cache import ResolutionCache
from annodb.extraction.index import ItemIndex
from annodb.extraction.items import Item
from annodb.extraction.protocols import ApiSurface
from annodb.extraction.relevance import RelevanceFilter
from annodb.extraction.stats import ExtractionStats
from annodb.types.errors import AnnodbError, ErrorSeverity
from annodb.utils.logger import logger


class ExtractionSession:
    """Shared mutable state for extract, merge and export."""

    def __init__(
        self,
        config: ExtractorConfig | None = None,
        api_surface: ApiSurface | None = None,
    ) -> None:
        self.config = config or ExtractorConfig()
        self.api_surface = api_surface
        self.list_ignored = self.config.lists_ignored(api_surface is not None)
        self.stats = ExtractionStats()
        self.cache = ResolutionCache()
        self.index = ItemIndex(self.stats, api_surface, self.list_ignored)
        self.relevance = RelevanceFilter(self.config, self.cache, self.stats)
        self.keep_items: list[Item] = []
        self.typedefs_to_remove: list[str] = []
        self.diagnostics: list[AnnodbError] = []

    def info(self, message: str) -> None:
        """Progress output, shown at INFO level only when display_info is on."""
        if self.config.display_info:
            logger.info(message)
        else:
            logger.debug(message)

    def report(self, error: AnnodbError) -> None:
        """Record a recoverable problem and log it by severity."""
        self.diagnostics.append(error)
        if error.severity == ErrorSeverity.LOW:
            logger.debug(str(error))
        elif error.severity == ErrorSeverity.MEDIUM:
            logger.warning(str(error))
        else:
            logger.error(str(error))

    def diagnostics_of(self, error_type: type[AnnodbError]) -> list[AnnodbError]:
        return [d for d in self.diagnostics if isinstance(d, error_type)]

    def divert_to_keep(self, item: Item) -> None:
        """Move an item out of the annotation database into the keep list."""
        self.index.remove_item(item)
        if item not in self.keep_items:
            self.keep_items.append(item)
