"""
annodb - external annotation database extraction.

Extracts annotations from declaration trees, merges them with annotation
documents from other sources, and writes a deterministic per-package
annotation archive plus keep rules and a hidden typedef manifest.
"""

__version__ = "0.1.0"

from annodb.config import ExtractorConfig
from annodb.extraction.orchestrator import AnnotationExtractor

__all__ = ["AnnotationExtractor", "ExtractorConfig", "__version__"]
