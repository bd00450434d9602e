"""Tests for the Archival Writer and container extraction."""

import zipfile

import pytest

from pptx_export.errors import PackageIOError, PackageNotFound, WriteFailure
from pptx_export.package.archive import PackageWriter, extract_package
from pptx_export.package.parts import PartStore
from pptx_export.package.xmltree import parse_xml


@pytest.fixture
def store():
    store = PartStore()
    store.pin("[Content_Types].xml", parse_xml(b"<Types/>"))
    store.write_bytes("ppt/presentation.xml", b"<p/>")
    store.write_bytes("_rels/.rels", b"<Relationships/>")
    yield store
    store.release()


class TestPackageWriter:

    def test_writes_zip_with_content_types_first(self, store, tmp_path):
        dest = PackageWriter(store).write(tmp_path / "out.pptx")
        with zipfile.ZipFile(dest) as archive:
            names = archive.namelist()
            assert names[0] == "[Content_Types].xml"
            assert set(names) == {"[Content_Types].xml", "_rels/.rels", "ppt/presentation.xml"}
            assert archive.getinfo("ppt/presentation.xml").compress_type == zipfile.ZIP_DEFLATED

    def test_returns_resolved_path(self, store, tmp_path):
        dest = PackageWriter(store).write(tmp_path / "out.pptx")
        assert dest == (tmp_path / "out.pptx").resolve()

    def test_replaces_existing_file(self, store, tmp_path):
        target = tmp_path / "out.pptx"
        target.write_bytes(b"old")
        PackageWriter(store).write(target)
        assert zipfile.is_zipfile(target)

    def test_leaves_no_temporary_files(self, store, tmp_path):
        PackageWriter(store).write(tmp_path / "out.pptx")
        assert [p.name for p in tmp_path.iterdir()] == ["out.pptx"]

    def test_failure_chains_cause_and_keeps_destination(self, store, tmp_path):
        target = tmp_path / "missing-dir" / "out.pptx"
        with pytest.raises(WriteFailure) as excinfo:
            PackageWriter(store).write(target)
        assert isinstance(excinfo.value.__cause__, OSError)
        assert not target.exists()

    def test_failure_does_not_touch_previous_file(self, store, tmp_path):
        target = tmp_path / "out.pptx"
        target.mkdir()  # os.replace cannot overwrite a directory with a file
        with pytest.raises(WriteFailure):
            PackageWriter(store).write(target)
        assert target.is_dir()
        assert [p.name for p in tmp_path.iterdir()] == ["out.pptx"]

    def test_write_failure_is_package_io_error(self):
        assert issubclass(WriteFailure, PackageIOError)
        assert issubclass(WriteFailure, OSError)


class TestExtractPackage:

    def test_round_trip(self, store, tmp_path):
        dest = PackageWriter(store).write(tmp_path / "out.pptx")
        other = PartStore()
        try:
            names = extract_package(dest, other)
            assert sorted(names) == sorted(store.iter_part_names())
            assert other.read_bytes("ppt/presentation.xml") == b"<p/>"
        finally:
            other.release()

    def test_missing_file(self, tmp_path):
        other = PartStore()
        try:
            with pytest.raises(PackageNotFound):
                extract_package(tmp_path / "nope.pptx", other)
        finally:
            other.release()

    def test_not_a_zip(self, tmp_path):
        bogus = tmp_path / "bogus.pptx"
        bogus.write_bytes(b"this is not a zip file")
        other = PartStore()
        try:
            with pytest.raises(PackageIOError):
                extract_package(bogus, other)
        finally:
            other.release()

    def test_rejects_unsafe_member(self, tmp_path):
        evil = tmp_path / "evil.pptx"
        with zipfile.ZipFile(evil, "w") as archive:
            archive.writestr("../escape.xml", "<x/>")
        other = PartStore()
        try:
            with pytest.raises(PackageIOError):
                extract_package(evil, other)
            assert not (tmp_path / "escape.xml").exists()
        finally:
            other.release()
