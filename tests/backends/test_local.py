"""Local backend specific tests."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from unifs._errors import AlreadyExists, InvalidPath, NotFound, NotSupported, UnifsError
from unifs.backends._local import LocalFileSystem

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture
def local_fs() -> Iterator[LocalFileSystem]:
    with tempfile.TemporaryDirectory() as tmp:
        yield LocalFileSystem(root=tmp)


class TestConstruction:
    def test_root_kept_verbatim(self) -> None:
        assert LocalFileSystem("tmp/x").root == "tmp/x"

    def test_construction_does_not_touch_disk(self, tmp_path: Path) -> None:
        LocalFileSystem(str(tmp_path / "not-yet"))
        assert not (tmp_path / "not-yet").exists()

    def test_relative_root_follows_working_directory(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        fs = LocalFileSystem("rel/root")
        fs.write("f.txt", b"x")
        assert (tmp_path / "rel" / "root" / "f.txt").read_bytes() == b"x"

    def test_name(self, local_fs: LocalFileSystem) -> None:
        assert local_fs.name == "local"


class TestPathSafety:
    def test_traversal_rejected(self, local_fs: LocalFileSystem) -> None:
        with pytest.raises(InvalidPath):
            local_fs.read_bytes("../../etc/passwd")

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_symlink_escape_rejected(self, local_fs: LocalFileSystem, tmp_path: Path) -> None:
        (tmp_path / "secret.txt").write_bytes(b"s")
        base = Path(local_fs.root)
        (base / "link").symlink_to(tmp_path)
        with pytest.raises(InvalidPath):
            local_fs.read_bytes("link/secret.txt")


class TestDirectories:
    def test_mkdir_creates_parents(self, local_fs: LocalFileSystem) -> None:
        local_fs.mkdir("a/b/c")
        assert local_fs.stat("a/b/c").is_dir is True
        local_fs.mkdir("a/b/c")

    def test_remove_empty_directory(self, local_fs: LocalFileSystem) -> None:
        local_fs.mkdir("empty")
        local_fs.remove("empty")
        assert local_fs.exists("empty") is False

    def test_remove_non_empty_without_recursive(self, local_fs: LocalFileSystem) -> None:
        local_fs.write("full/a.txt", b"a")
        with pytest.raises(UnifsError, match="not empty"):
            local_fs.remove("full")
        assert local_fs.exists("full/a.txt") is True

    def test_open_directory_is_not_found(self, local_fs: LocalFileSystem) -> None:
        local_fs.mkdir("d")
        with pytest.raises(NotFound):
            local_fs.open("d")

    def test_list_dir_on_file(self, local_fs: LocalFileSystem) -> None:
        local_fs.write("f.txt", b"x")
        with pytest.raises(NotFound):
            list(local_fs.list_dir("f.txt"))

    def test_write_onto_directory(self, local_fs: LocalFileSystem) -> None:
        local_fs.mkdir("d")
        with pytest.raises(InvalidPath):
            local_fs.write("d", b"x")

    def test_write_below_file(self, local_fs: LocalFileSystem) -> None:
        local_fs.write("f.txt", b"x")
        with pytest.raises(InvalidPath):
            local_fs.write("f.txt/child.txt", b"y")

    def test_mkdir_below_file(self, local_fs: LocalFileSystem) -> None:
        local_fs.write("f.txt", b"x")
        with pytest.raises(AlreadyExists):
            local_fs.mkdir("f.txt/sub")

    def test_stat_below_file(self, local_fs: LocalFileSystem) -> None:
        local_fs.write("f.txt", b"x")
        with pytest.raises(NotFound):
            local_fs.stat("f.txt/sub")

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_list_dir_skips_dangling_symlink(self, local_fs: LocalFileSystem) -> None:
        local_fs.write("a.txt", b"a")
        (Path(local_fs.root) / "broken").symlink_to(Path(local_fs.root) / "gone")
        assert [info.name for info in local_fs.list_dir("")] == ["a.txt"]


class TestUnwrap:
    def test_path(self, local_fs: LocalFileSystem) -> None:
        assert local_fs.unwrap(Path) == Path(local_fs.root).resolve()

    def test_other(self, local_fs: LocalFileSystem) -> None:
        with pytest.raises(NotSupported):
            local_fs.unwrap(int)
