"""Tests for the annotation archive writer."""

from __future__ import annotations

import zipfile

import pytest
from conftest import ANDROIDX

from annodb.config import ExtractorConfig
from annodb.export.archive import FIXED_DATE_TIME, ArchiveWriter, entry_name
from annodb.extraction.items import AnnotationData, Item
from annodb.extraction.session import ExtractionSession
from annodb.merge.merger import MergePass
from annodb.types.errors import ArchiveWriteError, DocumentValidationError


def populate(session: ExtractionSession) -> None:
    compute = Item.parameter("foo.Bar", "compute", "int,int", "int", 0)
    compute.annotations.append(
        AnnotationData(ANDROIDX + "IntDef", values=[("value", "{foo.Bar.A, foo.Bar.B}")])
    )
    mode = Item.field_item("foo.bar.Baz", "MODE", "int")
    mode.annotations.append(AnnotationData(ANDROIDX + "StringDef", values=[("value", '{"a"}')]))
    session.index.add_item(compute)
    session.index.add_item(mode)


class TestEntryName:
    """Package names map to slash-separated entry paths."""

    def test_nested_package(self):
        assert entry_name("foo.bar") == "foo/bar/annotations.xml"

    def test_default_package(self):
        assert entry_name("") == "annotations.xml"


class TestWrite:
    """Archive layout, determinism and empty output."""

    def test_one_entry_per_package(self, session, tmp_path):
        populate(session)
        path = tmp_path / "out" / "annotations.zip"
        assert ArchiveWriter(session).write(path) is True

        with zipfile.ZipFile(path) as archive:
            infos = archive.infolist()
            assert [i.filename for i in infos] == ["foo/annotations.xml", "foo/bar/annotations.xml"]
            assert all(i.date_time == FIXED_DATE_TIME for i in infos)
            text = archive.read("foo/bar/annotations.xml").decode("utf-8")
        assert '<item name="foo.bar.Baz MODE">' in text
        assert 'val="{&quot;a&quot;}"' in text
        assert not (tmp_path / "out" / "annotations.zip.tmp").exists()

    def test_output_is_deterministic(self, tmp_path):
        first, second = ExtractionSession(), ExtractionSession()
        populate(first)
        populate(second)
        ArchiveWriter(first).write(tmp_path / "a.zip")
        ArchiveWriter(second).write(tmp_path / "b.zip")
        assert (tmp_path / "a.zip").read_bytes() == (tmp_path / "b.zip").read_bytes()

    def test_empty_index_removes_stale_archive(self, session, tmp_path):
        path = tmp_path / "annotations.zip"
        path.write_bytes(b"stale")
        assert ArchiveWriter(session).write(path) is False
        assert not path.exists()

    def test_round_trip_through_merge(self, session, tmp_path):
        populate(session)
        path = tmp_path / "annotations.zip"
        ArchiveWriter(session).write(path)

        reloaded = ExtractionSession()
        MergePass(reloaded).merge_path(path)
        expected = ArchiveWriter(session).render_documents()
        assert ArchiveWriter(reloaded).render_documents() == expected

    def test_unwritable_destination_raises(self, session, tmp_path):
        populate(session)
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")

        with pytest.raises(ArchiveWriteError):
            ArchiveWriter(session).write(blocker / "annotations.zip")
        assert list(tmp_path.iterdir()) == [blocker]

    def test_failed_replace_leaves_no_partial_archive(self, session, tmp_path, monkeypatch):
        populate(session)
        path = tmp_path / "annotations.zip"

        def refuse(src, dst):
            raise PermissionError(13, "Permission denied", str(dst))

        monkeypatch.setattr("annodb.export.archive.os.replace", refuse)
        with pytest.raises(ArchiveWriteError) as excinfo:
            ArchiveWriter(session).write(path)
        assert not excinfo.value.recoverable
        assert not path.exists()
        assert not (tmp_path / "annotations.zip.tmp").exists()


class TestValidation:
    """Every document is parsed back before it is written."""

    def test_valid_document(self, session):
        result = ArchiveWriter(session).validate("foo/annotations.xml", "<root></root>")
        assert result.ok

    def test_invalid_document_is_reported(self, session):
        result = ArchiveWriter(session).validate("foo/annotations.xml", "<root>")
        assert not result.ok
        assert len(session.diagnostics_of(DocumentValidationError)) == 1

    def test_invalid_document_raises_when_strict(self):
        session = ExtractionSession(ExtractorConfig(strict_validation=True))
        with pytest.raises(DocumentValidationError):
            ArchiveWriter(session).validate("foo/annotations.xml", "<root>")
