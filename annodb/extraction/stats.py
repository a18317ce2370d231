"""Occurrence counters for extracted, filtered and merged annotations."""

from __future__ import annotations

from collections import Counter
from typing import Any


class ExtractionStats:
    """Counts per canonical annotation name, plus filtered and merged totals.

    Counters only grow during a session; they are read at report time.
    """

    def __init__(self) -> None:
        self.extracted: Counter[str] = Counter()
        self.merged: Counter[str] = Counter()
        self.filtered_count = 0

    @property
    def merged_count(self) -> int:
        return sum(self.merged.values())

    @property
    def extracted_count(self) -> int:
        return sum(self.extracted.values())

    def record(self, name: str) -> None:
        self.extracted[name] += 1

    def record_merged(self, name: str) -> None:
        self.merged[name] += 1

    def record_filtered(self) -> None:
        self.filtered_count += 1

    def report(self) -> str:
        """Render the summary shown at the end of a run.

        Annotation names are listed by descending frequency, then name, with
        simple names right-aligned:

            Extracted 3 Annotations:
              @IntDef: 2
             @NonNull: 1
        """
        lines: list[str] = []
        if self.extracted:
            ordered = sorted(self.extracted, key=lambda fqn: (-self.extracted[fqn], fqn))
            simple = {fqn: fqn[fqn.rfind(".") + 1 :] for fqn in ordered}
            width = max(len(name) for name in simple.values())
            lines.append(f"Extracted {self.extracted_count} Annotations:")
            for fqn in ordered:
                name = simple[fqn]
                lines.append(f"{' ' * (width - len(name) + 1)}@{name}: {self.extracted[fqn]}")
        if self.filtered_count > 0:
            lines.append(
                f"{self.filtered_count} of these were filtered out (not in API database file)"
            )
        if self.merged_count > 0:
            lines.append(f"{self.merged_count} additional annotations were merged in")
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "extracted": dict(self.extracted),
            "merged": dict(self.merged),
            "filtered_count": self.filtered_count,
        }
