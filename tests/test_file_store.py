"""Tests for the atomic file helpers."""

import errno
import os
import stat

import pytest
from gitplumb.infra.file_store import write_atomic, write_exclusive


class TestWriteAtomic:

    def test_creates_parents(self, tmp_path):
        target = tmp_path / "a" / "b" / "file"
        write_atomic(target, b"data")
        assert target.read_bytes() == b"data"

    def test_replaces_existing(self, tmp_path):
        target = tmp_path / "file"
        target.write_bytes(b"old")
        write_atomic(target, b"new")
        assert target.read_bytes() == b"new"
        assert os.listdir(tmp_path) == ["file"]


class TestWriteExclusive:

    def test_creates_file(self, tmp_path):
        target = tmp_path / "shard" / "name"
        write_exclusive(target, b"payload")
        assert target.read_bytes() == b"payload"
        assert os.listdir(target.parent) == ["name"]

    def test_read_only_by_default(self, tmp_path):
        target = tmp_path / "name"
        write_exclusive(target, b"payload")
        assert stat.S_IMODE(target.stat().st_mode) == 0o444

    def test_refuses_existing(self, tmp_path):
        target = tmp_path / "name"
        target.write_bytes(b"first")

        with pytest.raises(FileExistsError):
            write_exclusive(target, b"second")

        assert target.read_bytes() == b"first"
        assert os.listdir(tmp_path) == ["name"]


class TestWriteExclusiveWithoutHardLinks:
    """Filesystems such as FAT or some network mounts refuse os.link."""

    @pytest.fixture(autouse=True)
    def no_hard_links(self, monkeypatch):
        def refuse_link(src, dst, *args, **kwargs):
            raise PermissionError(errno.EPERM, "Operation not permitted", str(dst))
        monkeypatch.setattr(os, "link", refuse_link)

    def test_creates_file(self, tmp_path):
        target = tmp_path / "shard" / "name"
        write_exclusive(target, b"payload")
        assert target.read_bytes() == b"payload"
        assert stat.S_IMODE(target.stat().st_mode) == 0o444
        assert os.listdir(target.parent) == ["name"]

    def test_refuses_existing(self, tmp_path):
        target = tmp_path / "name"
        target.write_bytes(b"first")

        with pytest.raises(FileExistsError):
            write_exclusive(target, b"second")

        assert target.read_bytes() == b"first"
        assert os.listdir(tmp_path) == ["name"]

    def test_claim_removed_when_rename_fails(self, tmp_path, monkeypatch):
        def fail_replace(src, dst):
            raise OSError(errno.EIO, "I/O error")
        monkeypatch.setattr(os, "replace", fail_replace)

        with pytest.raises(OSError):
            write_exclusive(tmp_path / "name", b"payload")

        assert os.listdir(tmp_path) == []
