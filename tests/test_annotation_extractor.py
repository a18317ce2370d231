"""End-to-end tests for the AnnotationExtractor facade."""

from __future__ import annotations

import zipfile

from conftest import ANDROIDX, annotation, field, int_def_type, klass, method, parameter, unit

from annodb import AnnotationExtractor, ExtractorConfig
from annodb.extraction.types import Declaration, Visibility
from annodb.types.errors import ConflictingNullabilityError

PLATFORM_DOC = """<root>
  <item name="foo.Bar int compute(int, int) 1">
    <annotation name="android.support.annotation.IntDef">
      <val name="value" val="{foo.Bar.MODE_A, foo.Bar.MODE_B}" />
    </annotation>
  </item>
</root>
"""


def source_tree() -> list[Declaration]:
    mode_type = int_def_type("foo.Bar.Mode", "MODE_A", "MODE_B", visibility=Visibility.PACKAGE)
    mode = annotation("foo.Bar.Mode", mode_type)
    bar = klass(
        "foo.Bar",
        field("sMode", "int", mode),
        field("KEPT", "int", annotation(ANDROIDX + "Keep")),
        method("compute", "int", [parameter("int", mode), parameter("int")]),
        mode_type,
    )
    return [unit("foo", bar)]


class TestPipeline:
    """extract, merge, export on one extractor."""

    def test_full_run(self, tmp_path):
        extractor = AnnotationExtractor(ExtractorConfig(display_info=True))
        extractor.extract(source_tree())
        extractor.merge_annotations_xml(PLATFORM_DOC, source="platform")

        archive = tmp_path / "annotations.zip"
        keep = tmp_path / "proguard.txt"
        typedefs = tmp_path / "typedefs.txt"
        extractor.export(archive, keep)
        extractor.write_typedef_file(typedefs)

        with zipfile.ZipFile(archive) as zf:
            assert zf.namelist() == ["foo/annotations.xml"]
            text = zf.read("foo/annotations.xml").decode("utf-8")
        assert '<item name="foo.Bar int compute(int, int) 0">' in text
        assert '<item name="foo.Bar int compute(int, int) 1">' in text
        assert '<item name="foo.Bar sMode">' in text
        assert "KEPT" not in text
        assert "foo.Bar.Mode" not in text

        assert keep.read_text(encoding="utf-8") == "-keep class foo.Bar {\n    int KEPT\n}\n\n"
        assert typedefs.read_text(encoding="utf-8") == "D foo/Bar$Mode\n"
        assert extractor.stats.merged_count == 1
        assert extractor.diagnostics == []

    def test_merge_existing_archive(self, tmp_path):
        archive = tmp_path / "platform.jar"
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr("foo/annotations.xml", PLATFORM_DOC)

        extractor = AnnotationExtractor()
        extractor.merge_existing(archive)
        assert list(extractor.render_documents()) == ["foo/annotations.xml"]

    def test_export_without_keep_file_still_drops_keep_items(self, tmp_path):
        extractor = AnnotationExtractor()
        extractor.extract(source_tree())
        extractor.export(tmp_path / "annotations.zip")
        assert all(i not in extractor.index for i in extractor.keep_items)
        assert [i.signature for i in extractor.keep_items] == ["foo.Bar KEPT"]

    def test_stats_report(self):
        extractor = AnnotationExtractor()
        extractor.extract(source_tree())
        report = extractor.write_stats()
        assert report.startswith("Extracted ")
        assert "@IntDef" in report

    def test_empty_run_writes_nothing(self, tmp_path):
        extractor = AnnotationExtractor()
        extractor.extract([])
        extractor.export(tmp_path / "annotations.zip", tmp_path / "proguard.txt")
        assert not (tmp_path / "annotations.zip").exists()
        assert not (tmp_path / "proguard.txt").exists()
        assert extractor.write_stats() == ""


class TestSignatureMatching:
    """Extracted and imported signatures for one declaration share a key."""

    def test_spaced_generic_parameter_matches_import(self):
        map_type = "java.util.Map<java.lang.String, java.lang.Integer>"
        bar = klass(
            "foo.Bar",
            method(
                "compute",
                "int",
                [parameter(map_type, annotation(ANDROIDX + "NonNull")), parameter("int")],
            ),
        )
        extractor = AnnotationExtractor(ExtractorConfig(include_class_retention=True))
        extractor.extract([unit("foo", bar)])
        extractor.merge_annotations_xml(
            '<root><item name="foo.Bar int compute('
            'java.util.Map&lt;java.lang.String, java.lang.Integer&gt;, int) 0">'
            f'<annotation name="{ANDROIDX}Nullable" /></item></root>'
        )

        (item,) = list(extractor.index)
        assert item.signature == (
            "foo.Bar int compute(java.util.Map&lt;java.lang.String,java.lang.Integer&gt;, int) 0"
        )
        assert [a.name for a in item.annotations] == [ANDROIDX + "NonNull"]
        assert len(extractor.session.diagnostics_of(ConflictingNullabilityError)) == 1
