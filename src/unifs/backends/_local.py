"""Local disk backend — stdlib-only implementation."""

from __future__ import annotations

import errno
import io
import os
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO, TypeVar

from unifs._errors import AlreadyExists, InvalidPath, NotFound, NotSupported, PermissionDenied, UnifsError
from unifs._filesystem import FileSystem
from unifs._models import FileInfo
from unifs._path import base_name, join_path, normalize_path

if TYPE_CHECKING:
    from collections.abc import Iterator

    from unifs._types import WritableContent

T = TypeVar("T")


class LocalFileSystem(FileSystem):
    """Local disk filesystem rooted at a directory.

    The root is kept verbatim: a relative root is resolved against the working
    directory at the time of each operation. Nothing touches the disk until
    the first operation.

    :param root: Root directory, absolute or relative.
    """

    def __init__(self, root: str) -> None:
        self._root = root

    @property
    def name(self) -> str:
        return "local"

    @property
    def root(self) -> str:
        """The root directory as configured."""
        return self._root

    def __repr__(self) -> str:
        return f"LocalFileSystem(root={self._root!r})"

    # region: path safety
    def _base(self) -> Path:
        return Path(self._root or ".").resolve()

    def _resolve(self, path: str) -> Path:
        """Resolve a relative path to an absolute path within root.

        ``.resolve()`` follows symlinks, so ``relative_to`` also rejects
        symlinks that point outside the root.

        :raises InvalidPath: If the resolved path escapes the root.
        """
        base = self._base()
        resolved = (base / normalize_path(path)).resolve()
        try:
            resolved.relative_to(base)
        except ValueError:
            raise InvalidPath(f"Path escapes root directory: {path}", path=path, backend=self.name) from None
        return resolved

    # endregion

    def _stat_to_fileinfo(self, path: str, full: Path) -> FileInfo:
        st = full.stat()
        is_dir = full.is_dir()
        return FileInfo(
            path=path,
            name=base_name(path),
            size=0 if is_dir else st.st_size,
            is_dir=is_dir,
            modified_at=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
        )

    # region: metadata
    def exists(self, path: str) -> bool:
        return self._resolve(path).exists()

    def stat(self, path: str) -> FileInfo:
        full = self._resolve(path)
        try:
            return self._stat_to_fileinfo(normalize_path(path), full)
        except (FileNotFoundError, NotADirectoryError):
            raise NotFound(f"Not found: {path}", path=path, backend=self.name) from None
        except PermissionError:
            raise PermissionDenied(f"Permission denied: {path}", path=path, backend=self.name) from None

    def list_dir(self, path: str) -> Iterator[FileInfo]:
        full = self._resolve(path)
        if not full.is_dir():
            raise NotFound(f"Directory not found: {path}", path=path, backend=self.name)
        rel = normalize_path(path)
        try:
            items = sorted(full.iterdir())
        except PermissionError:
            raise PermissionDenied(f"Permission denied: {path}", path=path, backend=self.name) from None
        for item in items:
            try:
                yield self._stat_to_fileinfo(join_path(rel, item.name), item)
            except FileNotFoundError:
                # dangling symlink or removed since iterdir
                continue

    # endregion

    # region: read and write
    def open(self, path: str) -> BinaryIO:
        full = self._resolve(path)
        try:
            return io.BytesIO(full.read_bytes())
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
            raise NotFound(f"File not found: {path}", path=path, backend=self.name) from None
        except PermissionError:
            raise PermissionDenied(f"Permission denied: {path}", path=path, backend=self.name) from None

    def read_bytes(self, path: str) -> bytes:
        full = self._resolve(path)
        try:
            return full.read_bytes()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
            raise NotFound(f"File not found: {path}", path=path, backend=self.name) from None
        except PermissionError:
            raise PermissionDenied(f"Permission denied: {path}", path=path, backend=self.name) from None

    def write(self, path: str, content: WritableContent, *, overwrite: bool = True) -> None:
        full = self._resolve(path)
        if not overwrite and full.exists():
            raise AlreadyExists(f"File already exists: {path}", path=path, backend=self.name)
        try:
            full.parent.mkdir(parents=True, exist_ok=True)
            full.write_bytes(self._read_content(content))
        except PermissionError:
            raise PermissionDenied(f"Permission denied: {path}", path=path, backend=self.name) from None
        except (IsADirectoryError, NotADirectoryError, FileExistsError):
            raise InvalidPath(f"Not a writable file path: {path}", path=path, backend=self.name) from None

    def mkdir(self, path: str) -> None:
        full = self._resolve(path)
        try:
            full.mkdir(parents=True, exist_ok=True)
        except (FileExistsError, NotADirectoryError):
            raise AlreadyExists(f"Not a directory: {path}", path=path, backend=self.name) from None
        except PermissionError:
            raise PermissionDenied(f"Permission denied: {path}", path=path, backend=self.name) from None

    # endregion

    # region: remove and rename
    def remove(self, path: str, *, recursive: bool = False, missing_ok: bool = False) -> None:
        full = self._resolve(path)
        if not full.exists():
            if not missing_ok:
                raise NotFound(f"Not found: {path}", path=path, backend=self.name)
            return
        try:
            if not full.is_dir():
                full.unlink()
            elif recursive:
                shutil.rmtree(str(full))
            else:
                full.rmdir()
        except OSError as exc:
            if exc.errno in (errno.ENOTEMPTY, errno.EEXIST):
                raise UnifsError(f"Directory not empty: {path}", path=path, backend=self.name) from None
            raise PermissionDenied(f"Permission denied: {path}", path=path, backend=self.name) from None

    def rename(self, src: str, dst: str) -> None:
        src_full = self._resolve(src)
        dst_full = self._resolve(dst)
        if not src_full.exists():
            raise NotFound(f"Source not found: {src}", path=src, backend=self.name)
        try:
            dst_full.parent.mkdir(parents=True, exist_ok=True)
            os.replace(str(src_full), str(dst_full))
        except PermissionError:
            raise PermissionDenied(f"Permission denied: {src} -> {dst}", path=src, backend=self.name) from None
        except (IsADirectoryError, NotADirectoryError, FileExistsError):
            raise InvalidPath(f"Cannot rename {src} onto {dst}", path=dst, backend=self.name) from None

    # endregion

    def unwrap(self, type_hint: type[T]) -> T:
        if type_hint is Path:
            return self._base()  # type: ignore[return-value]
        raise NotSupported(
            f"Backend 'local' does not expose native handle of type {type_hint.__name__}",
            operation="unwrap",
            backend=self.name,
        )
