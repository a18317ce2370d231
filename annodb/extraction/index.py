"""In-memory index of annotated items: package -> class -> items.

Item lists keep insertion order; the serializer sorts them at write time.
Removing the last item of a class drops the class entry, and removing the
last class of a package drops the package entry.
"""

from __future__ import annotations

from collections.abc import Iterator

from annodb.extraction.items import Item
from annodb.extraction.protocols import ApiSurface
from annodb.extraction.signatures import package_of
from annodb.extraction.stats import ExtractionStats
from annodb.extraction.types import ItemKind
from annodb.utils.logger import logger


def is_filtered(item: Item, api: ApiSurface) -> bool:
    """True if the API surface does not recognize the item's declaration."""
    match item.kind:
        case ItemKind.PACKAGE:
            return not api.has_package(item.containing_class)
        case ItemKind.CLASS:
            return not api.has_class(item.containing_class)
        case ItemKind.FIELD:
            return not api.has_field(item.containing_class, item.name or "")
        case ItemKind.METHOD | ItemKind.PARAMETER:
            return not api.has_method(item.containing_class, item.name or "", item.parameter_list)
    return False


class ItemIndex:
    """Package and class scoped storage of items.

    Usage:
        index = ItemIndex(stats, api_surface=api)
        if index.add_item(item):
            item.annotations.append(...)
    """

    def __init__(
        self,
        stats: ExtractionStats,
        api_surface: ApiSurface | None = None,
        list_ignored: bool = False,
    ) -> None:
        self._stats = stats
        self._api = api_surface
        self._list_ignored = list_ignored
        self._items: dict[str, dict[str, list[Item]]] = {}
        self._packages: dict[str, Item] = {}

    # ========================================================================
    # Mutation
    # ========================================================================

    def filter(self, item: Item) -> bool:
        """Apply the API surface; count and report a rejected item.

        Returns True if the item may be kept.
        """
        if self._api is not None and is_filtered(item, self._api):
            self._stats.record_filtered()
            if self._list_ignored:
                logger.info(f"Skipping API because it is not part of the API file: {item}")
            return False
        return True

    def add_item(self, item: Item) -> bool:
        """Insert an item unless the API surface rejects it."""
        if not self.filter(item):
            return False
        self.add_item_unconditionally(item)
        return True

    def add_item_unconditionally(self, item: Item) -> None:
        if item.kind is ItemKind.PACKAGE:
            self._packages[item.containing_class] = item
            return
        package = package_of(item.containing_class)
        classes = self._items.setdefault(package, {})
        classes.setdefault(item.containing_class, []).append(item)

    def add_package(self, item: Item) -> bool:
        """Insert a package-level item unless the API surface rejects it."""
        return self.add_item(item)

    def remove_item(self, item: Item) -> bool:
        """Remove one item, dropping containers that become empty."""
        if item.kind is ItemKind.PACKAGE:
            return self._packages.pop(item.containing_class, None) is not None

        package = package_of(item.containing_class)
        classes = self._items.get(package)
        if classes is None:
            return False
        items = classes.get(item.containing_class)
        if items is None:
            return False
        for i, existing in enumerate(items):
            if existing is item or existing == item:
                del items[i]
                break
        else:
            return False
        if not items:
            del classes[item.containing_class]
            if not classes:
                del self._items[package]
        return True

    # ========================================================================
    # Lookup
    # ========================================================================

    def find_item(self, item: Item) -> Item | None:
        """Existing item for the same declaration, searched in its class scope."""
        if item.kind is ItemKind.PACKAGE:
            return self._packages.get(item.containing_class)
        classes = self._items.get(package_of(item.containing_class))
        if classes is None:
            return None
        for existing in classes.get(item.containing_class, ()):
            if existing == item:
                return existing
        return None

    def package_names(self) -> list[str]:
        """Every package with items or a package-level item, sorted."""
        return sorted(set(self._items) | set(self._packages))

    def package_item(self, package: str) -> Item | None:
        return self._packages.get(package)

    def classes(self, package: str) -> dict[str, list[Item]]:
        return self._items.get(package, {})

    def __iter__(self) -> Iterator[Item]:
        yield from self._packages.values()
        for classes in self._items.values():
            for items in classes.values():
                yield from items

    def __len__(self) -> int:
        return len(self._packages) + sum(
            len(items) for classes in self._items.values() for items in classes.values()
        )

    def is_empty(self) -> bool:
        return not self._items and not self._packages
