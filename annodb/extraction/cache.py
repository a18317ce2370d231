"""Per-session memoization tables for annotation resolution.

Resolving an annotation type to decide whether it is a typedef, or reading
its retention policy, means walking its declaration. Results are cached here
for the lifetime of one extraction session. The cache is owned by the
session object, so independent runs never share state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from annodb.extraction.items import AnnotationData
    from annodb.extraction.types import Declaration


class ResolutionCache:
    """Memo tables used by the relevance filter and extraction pass.

    - ``typedef_indirections``: annotation type -> typedef markers found on
      its own declaration (one level of indirection)
    - ``irrelevant``: annotation types known not to be magic constants
    - ``source_retention``: annotation type -> declared SOURCE retention
    - ``ignored_imports``: merge annotation names already reported as ignored
    """

    def __init__(self) -> None:
        self.typedef_indirections: dict[str, list[AnnotationData]] = {}
        self.irrelevant: set[str] = set()
        self.source_retention: dict[str, bool] = {}
        self.ignored_imports: set[str] = set()
        self._last_class: Declaration | None = None
        self._last_fqn: str | None = None
        self._hits = 0
        self._misses = 0

    def record(self, hit: bool) -> None:
        if hit:
            self._hits += 1
        else:
            self._misses += 1

    def class_fqn(self, declaration: Declaration, outer: str | None) -> str | None:
        """Qualified name of a class declaration, memoizing the last lookup.

        Falls back to ``outer.name`` when the front end did not supply a
        qualified name; ``outer`` is the enclosing class or package.
        """
        if declaration is self._last_class:
            self._hits += 1
            return self._last_fqn
        self._misses += 1
        fqn = declaration.qualified_name
        if fqn is None and declaration.name is not None:
            fqn = f"{outer}.{declaration.name}" if outer else declaration.name
        self._last_class = declaration
        self._last_fqn = fqn
        return fqn

    def clear(self) -> None:
        """Clear all cached entries."""
        self.typedef_indirections.clear()
        self.irrelevant.clear()
        self.source_retention.clear()
        self.ignored_imports.clear()
        self._last_class = None
        self._last_fqn = None
        self._hits = 0
        self._misses = 0

    @property
    def stats(self) -> dict[str, int | float]:
        """Cache statistics."""
        return {
            "typedef_indirections": len(self.typedef_indirections),
            "irrelevant": len(self.irrelevant),
            "source_retention": len(self.source_retention),
            "ignored_imports": len(self.ignored_imports),
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / max(self._hits + self._misses, 1) * 100, 1),
        }
