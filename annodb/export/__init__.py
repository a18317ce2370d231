"""Serialization of the annotation database and its derived artifacts."""

from annodb.export.archive import ArchiveWriter, entry_name
from annodb.export.keep_rules import write_keep_rules, write_typedef_manifest
from annodb.export.writer import AnnotationRenderer, MarkableWriter

__all__ = [
    "AnnotationRenderer",
    "ArchiveWriter",
    "MarkableWriter",
    "entry_name",
    "write_keep_rules",
    "write_typedef_manifest",
]
