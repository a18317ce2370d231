"""Tests for statistics, resolution caching, XML helpers and logging setup."""

from __future__ import annotations

import pytest

from annodb.extraction.cache import ResolutionCache
from annodb.extraction.stats import ExtractionStats
from annodb.extraction.types import Declaration, DeclarationKind
from annodb.utils.helpers import escape_xml, unescape_xml
from annodb.utils.logger import configure_logging, logger


class TestExtractionStats:
    """Tests for the end-of-run report."""

    def test_report(self):
        stats = ExtractionStats()
        stats.record("androidx.annotation.IntDef")
        stats.record("androidx.annotation.IntDef")
        stats.record("androidx.annotation.NonNull")
        stats.record_filtered()
        stats.record_merged("androidx.annotation.StringDef")

        assert stats.report().splitlines() == [
            "Extracted 3 Annotations:",
            "  @IntDef: 2",
            " @NonNull: 1",
            "1 of these were filtered out (not in API database file)",
            "1 additional annotations were merged in",
        ]

    def test_ties_sort_by_name(self):
        stats = ExtractionStats()
        stats.record("b.Zed")
        stats.record("a.Alpha")
        assert stats.report().splitlines()[1:] == [" @Alpha: 1", "   @Zed: 1"]

    def test_empty_report(self):
        assert ExtractionStats().report() == ""

    def test_to_dict(self):
        stats = ExtractionStats()
        stats.record_merged("x.Y")
        assert stats.to_dict() == {"extracted": {}, "merged": {"x.Y": 1}, "filtered_count": 0}


class TestResolutionCache:
    """Tests for ResolutionCache."""

    def test_class_name_fallback_and_memo(self):
        cache = ResolutionCache()
        inner = Declaration(DeclarationKind.CLASS, name="Inner")
        assert cache.class_fqn(inner, "foo.Outer") == "foo.Outer.Inner"
        assert cache.class_fqn(inner, "ignored") == "foo.Outer.Inner"
        assert cache.stats["hits"] == 1
        assert cache.stats["misses"] == 1

    def test_clear(self):
        cache = ResolutionCache()
        cache.irrelevant.add("x.Y")
        cache.source_retention["x.Z"] = True
        cache.clear()
        assert cache.stats["irrelevant"] == 0
        assert cache.stats["source_retention"] == 0


class TestXmlHelpers:
    """Tests for escape_xml and unescape_xml."""

    def test_escape(self):
        assert escape_xml("a<b>&\"'") == "a&lt;b&gt;&amp;&quot;&apos;"

    def test_whitespace_controls(self):
        assert escape_xml("a\tb\nc") == "a&#x9;b&#xA;c"

    def test_unescape_handles_amp_last(self):
        assert unescape_xml("&amp;lt;") == "&lt;"
        assert unescape_xml("List&lt;T&gt;") == "List<T>"


class TestLogging:
    """configure_logging installs a single sink."""

    def test_reconfigure_replaces_sink(self, monkeypatch):
        monkeypatch.setenv("DEBUG", "true")
        first = configure_logging()
        second = configure_logging(verbose=False)
        assert first != second
        with pytest.raises(ValueError):
            logger.remove(first)
        logger.remove(second)

    def test_default_handler_is_dropped(self):
        handler = configure_logging(verbose=False)
        with pytest.raises(ValueError):
            logger.remove(0)
        logger.remove(handler)
