"""Tests for listing, loading, deleting, and exporting log files."""

import os
import zipfile

import pytest

from simple_logger.errors import CorruptFileError, DeleteError
from simple_logger.models import LogLevel, create_log_entry


def _append(writer, source, level=LogLevel.INFO, message="msg"):
    writer.append(create_log_entry(message, level=level, source_file=source, function="f", line=1))


def _write_raw(log_root, name, content: bytes):
    with open(os.path.join(log_root, name), "wb") as f:
        f.write(content)


class TestListFiles:
    def test_empty_root(self, store):
        assert store.list_files() == []

    def test_sorted_with_level_counts(self, store, writer):
        _append(writer, "/src/zeta.py", LogLevel.ERROR)
        _append(writer, "/src/alpha.py", LogLevel.INFO)
        _append(writer, "/src/alpha.py", LogLevel.INFO)
        _append(writer, "/src/alpha.py", LogLevel.WARNING)

        summaries = store.list_files()
        assert [s.file_name for s in summaries] == ["alpha.json", "zeta.json"]

        alpha = summaries[0]
        assert alpha.identifier == "alpha"
        assert alpha.entry_count == 3
        assert alpha.level_counts[LogLevel.INFO] == 2
        assert alpha.level_counts[LogLevel.WARNING] == 1
        assert alpha.level_counts[LogLevel.DEBUG] == 0
        assert set(alpha.level_counts) == set(LogLevel)
        assert alpha.corrupt is False

    def test_size_and_mtime_from_filesystem(self, store, writer, log_root):
        _append(writer, "/src/alpha.py")
        summary = store.list_files()[0]
        st = os.stat(os.path.join(log_root, "alpha.json"))
        assert summary.size == st.st_size
        assert summary.last_modified.timestamp() == pytest.approx(st.st_mtime)
        assert summary.last_modified.tzinfo is not None

    def test_corrupt_file_flagged_not_fatal(self, store, writer, log_root):
        _append(writer, "/src/good.py")
        _write_raw(log_root, "broken.json", b"{{{{")

        summaries = {s.identifier: s for s in store.list_files()}
        assert summaries["broken"].corrupt is True
        assert summaries["broken"].size == 4
        assert summaries["broken"].entry_count == 0
        assert summaries["good"].corrupt is False

    def test_ignores_temp_and_other_files(self, store, writer, log_root):
        _append(writer, "/src/alpha.py")
        _write_raw(log_root, ".alpha.json.abc123.tmp", b"[]")
        _write_raw(log_root, "notes.txt", b"hello")
        os.mkdir(os.path.join(log_root, "nested.json"))
        assert [s.file_name for s in store.list_files()] == ["alpha.json"]


class TestLoadEntries:
    def test_missing_returns_empty(self, store):
        assert store.load_entries("nothing-here") == []

    def test_accepts_file_name(self, store, writer):
        _append(writer, "/src/alpha.py", message="one")
        assert [e.message for e in store.load_entries("alpha.json")] == ["one"]

    def test_corrupt_raises(self, store, log_root):
        _write_raw(log_root, "broken.json", b"not json at all")
        with pytest.raises(CorruptFileError):
            store.load_entries("broken")

    def test_repeat_reads_identical(self, store, writer):
        _append(writer, "/src/alpha.py", message="one")
        _append(writer, "/src/alpha.py", message="two")
        assert store.load_entries("alpha") == store.load_entries("alpha")


class TestDelete:
    def test_delete_existing(self, store, writer, log_root):
        _append(writer, "/src/alpha.py")
        store.delete_file("alpha")
        assert not os.path.exists(os.path.join(log_root, "alpha.json"))

    def test_delete_missing_is_noop(self, store):
        store.delete_file("never-existed")
        store.delete_file("never-existed")

    def test_delete_failure_reported(self, store, writer, monkeypatch):
        _append(writer, "/src/alpha.py")

        def refuse(path):
            raise PermissionError("read-only filesystem")

        monkeypatch.setattr(os, "remove", refuse)
        with pytest.raises(DeleteError) as exc_info:
            store.delete_file("alpha")
        assert list(exc_info.value.failures) == ["alpha"]


class TestClearAll:
    def test_clear_then_list_empty(self, store, writer):
        for name in ("a", "b", "c"):
            _append(writer, f"/src/{name}.py")
        store.clear_all()
        assert store.list_files() == []

    def test_clear_removes_corrupt_files_too(self, store, log_root):
        _write_raw(log_root, "broken.json", b"garbage")
        store.clear_all()
        assert store.list_files() == []

    def test_partial_failure_not_rolled_back(self, store, writer, log_root, monkeypatch):
        for name in ("a", "b", "c"):
            _append(writer, f"/src/{name}.py")

        real_remove = os.remove

        def flaky_remove(path):
            if os.path.basename(path) == "b.json":
                raise PermissionError("busy")
            real_remove(path)

        monkeypatch.setattr(os, "remove", flaky_remove)
        with pytest.raises(DeleteError) as exc_info:
            store.clear_all()
        monkeypatch.undo()

        assert exc_info.value.failures.keys() == {"b"}
        assert sorted(os.listdir(log_root)) == ["b.json"]


class TestStats:
    def test_empty(self, store):
        stats = store.stats()
        assert stats.file_count == 0
        assert stats.total_size == 0

    def test_counts_corrupt_files(self, store, writer, log_root):
        _append(writer, "/src/alpha.py")
        _write_raw(log_root, "broken.json", b"xyz")
        stats = store.stats()
        assert stats.file_count == 2
        assert stats.total_size == os.path.getsize(os.path.join(log_root, "alpha.json")) + 3


class TestExportArchive:
    def test_zip_contains_every_file(self, store, writer, tmp_path):
        _append(writer, "/src/alpha.py")
        _append(writer, "/src/beta.py")
        dest = str(tmp_path / "out" / "logs.zip")

        assert store.export_archive(dest) == dest
        with zipfile.ZipFile(dest) as zf:
            assert sorted(zf.namelist()) == ["alpha.json", "beta.json"]
            assert zf.read("alpha.json").startswith(b"[")

    def test_empty_export(self, store, tmp_path):
        dest = str(tmp_path / "empty.zip")
        store.export_archive(dest)
        with zipfile.ZipFile(dest) as zf:
            assert zf.namelist() == []


class TestUnusualFiles:
    def test_deeply_nested_file_flagged_corrupt(self, store, writer, log_root):
        _append(writer, "/src/good.py")
        _write_raw(log_root, "deep.json", b"[" * 100000 + b"]" * 100000)

        summaries = {s.identifier: s for s in store.list_files()}
        assert summaries["deep"].corrupt is True
        assert summaries["good"].corrupt is False
        with pytest.raises(CorruptFileError):
            store.load_entries("deep")

    def test_foreign_dotted_name_not_listed(self, store, writer, log_root):
        _append(writer, "/src/alpha.py")
        _write_raw(log_root, "a.b.json", b"[]")

        assert [s.file_name for s in store.list_files()] == ["alpha.json"]
        store.clear_all()
        assert os.listdir(log_root) == ["a.b.json"]

    def test_listed_identifiers_load_their_own_file(self, store, writer):
        _append(writer, "/src/pkg.mod.py", message="dotted source")
        for summary in store.list_files():
            entries = store.load_entries(summary.identifier)
            assert len(entries) == summary.entry_count
