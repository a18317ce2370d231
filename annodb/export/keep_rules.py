"""Keep-rule file and typedef removal manifest writers."""

from __future__ import annotations

from pathlib import Path

from annodb.extraction.session import ExtractionSession
from annodb.types.errors import ArchiveWriteError, ErrorContext


def render_keep_rules(session: ExtractionSession) -> str:
    """Keep rules for every keep item, in sort-signature order."""
    items = sorted(session.keep_items, key=lambda item: item.sort_signature)
    return "".join(f"{rule}\n" for rule in (item.keep_rule for item in items) if rule)


def write_keep_rules(session: ExtractionSession, path: Path) -> bool:
    """Write ProGuard keep rules, or delete ``path`` when there are none.

    Keep items are removed from the item index so they are never also
    written to the annotation archive.
    """
    for item in session.keep_items:
        session.index.remove_item(item)

    text = render_keep_rules(session)
    try:
        if not text:
            if path.exists():
                path.unlink()
            return False
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise ArchiveWriteError(
            f"Could not write keep rules {path}: {e}",
            context=ErrorContext(operation="write_keep_rules", file_path=str(path)),
            original_error=e,
        ) from e
    return True


def render_typedef_manifest(names: list[str]) -> str:
    return "".join(f"D {name}\n" for name in sorted(names))


def write_typedef_manifest(session: ExtractionSession, path: Path) -> None:
    """List hidden typedef classes (``D internal/Name``) for bytecode stripping."""
    try:
        if path.exists():
            path.unlink()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_typedef_manifest(session.typedefs_to_remove), encoding="utf-8")
    except OSError as e:
        raise ArchiveWriteError(
            f"Could not write typedef file {path}: {e}",
            context=ErrorContext(operation="write_typedef_file", file_path=str(path)),
            original_error=e,
        ) from e
