"""Shared base for backends built on an fsspec filesystem."""

from __future__ import annotations

import abc
import io
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, BinaryIO, TypeVar

from unifs._errors import (
    AlreadyExists,
    BackendUnavailable,
    NotFound,
    NotSupported,
    PermissionDenied,
    UnifsError,
)
from unifs._filesystem import FileSystem
from unifs._models import FileInfo
from unifs._path import base_name, join_path, normalize_path

if TYPE_CHECKING:
    from collections.abc import Iterator

    from unifs._types import WritableContent

T = TypeVar("T")

log = logging.getLogger(__name__)


class FsspecFileSystem(FileSystem):
    """Adapts an ``fsspec.AbstractFileSystem`` to the unifs contract.

    The native filesystem is created lazily by :meth:`_create_fs` on first
    use, so constructing a backend never touches the network.

    :param root: Native path all operations are rooted at (may be empty).
    """

    #: Whether native paths carry a leading ``/`` (FTP) or not (S3, WebDAV).
    _absolute_paths = False

    def __init__(self, root: str = "") -> None:
        self._root = normalize_path(root)
        self._fs_instance: Any = None

    @property
    def root(self) -> str:
        """Native root path, normalized."""
        return self._root

    # region: lazy filesystem

    @abc.abstractmethod
    def _create_fs(self) -> Any:
        """Build the native fsspec filesystem."""

    @property
    def _fs(self) -> Any:
        if self._fs_instance is None:
            log.debug("Creating %s filesystem rooted at %r", self.name, self._root)
            self._fs_instance = self._create_fs()
        return self._fs_instance

    # endregion

    # region: path helpers

    def _native(self, path: str) -> str:
        native = join_path(self._root, normalize_path(path))
        return f"/{native}" if self._absolute_paths else native

    def _rel(self, native: str) -> str:
        key = native.strip("/")
        if not self._root:
            return key
        if key == self._root:
            return ""
        prefix = f"{self._root}/"
        if key.startswith(prefix):
            return key[len(prefix) :]
        return key

    # endregion

    # region: error mapping

    @contextmanager
    def _errors(self, path: str = "") -> Iterator[None]:
        """Map fsspec and library exceptions to unifs errors."""
        try:
            yield
        except UnifsError:
            raise
        except FileNotFoundError:
            raise NotFound(f"Not found: {path}", path=path, backend=self.name) from None
        except FileExistsError:
            raise AlreadyExists(f"Already exists: {path}", path=path, backend=self.name) from None
        except PermissionError:
            raise PermissionDenied(f"Permission denied: {path}", path=path, backend=self.name) from None
        except Exception as exc:
            raise self._classify_error(exc, path) from None

    def _classify_error(self, exc: Exception, path: str) -> UnifsError:
        """Classify an unknown exception into a unifs error type."""
        msg = str(exc).lower()
        if "404" in msg or "nosuchkey" in msg or "nosuchbucket" in msg or "not found" in msg:
            return NotFound(f"Not found: {path}", path=path, backend=self.name)
        if "403" in msg or "401" in msg or "accessdenied" in msg or "access denied" in msg:
            return PermissionDenied(f"Permission denied: {path}", path=path, backend=self.name)
        if any(kw in msg for kw in ("endpoint", "connect", "timeout", "timed out", "dns", "name or service")):
            return BackendUnavailable(str(exc), path=path, backend=self.name)
        return UnifsError(str(exc), path=path, backend=self.name)

    # endregion

    def _info_to_fileinfo(self, info: dict[str, Any], path: str) -> FileInfo:
        """Convert an fsspec info dict to a FileInfo."""
        is_dir = info.get("type") == "directory"
        modified = info.get("LastModified", info.get("modified", info.get("last_modified")))
        if isinstance(modified, str):
            modified = datetime.fromisoformat(modified)
        if isinstance(modified, datetime) and modified.tzinfo is None:
            modified = modified.replace(tzinfo=timezone.utc)
        if not isinstance(modified, datetime):
            modified = None
        size = info.get("size", info.get("Size", 0)) or 0
        return FileInfo(
            path=path,
            name=base_name(path),
            size=0 if is_dir else int(size),
            is_dir=is_dir,
            modified_at=modified,
        )

    # region: metadata

    def exists(self, path: str) -> bool:
        with self._errors(path):
            return bool(self._fs.exists(self._native(path)))

    def stat(self, path: str) -> FileInfo:
        with self._errors(path):
            info = self._fs.info(self._native(path))
            return self._info_to_fileinfo(info, normalize_path(path))

    def list_dir(self, path: str) -> Iterator[FileInfo]:
        rel_dir = normalize_path(path)
        with self._errors(path):
            entries: list[dict[str, Any]] = self._fs.ls(self._native(path), detail=True)
        for info in sorted(entries, key=lambda e: str(e["name"])):
            rel = self._rel(str(info["name"]))
            if rel == rel_dir:
                continue
            yield self._info_to_fileinfo(info, rel)

    # endregion

    # region: read and write

    def open(self, path: str) -> BinaryIO:
        return io.BytesIO(self.read_bytes(path))

    def read_bytes(self, path: str) -> bytes:
        with self._errors(path):
            return bytes(self._fs.cat_file(self._native(path)))

    def write(self, path: str, content: WritableContent, *, overwrite: bool = True) -> None:
        rel = normalize_path(path)
        with self._errors(path):
            if not overwrite and self._fs.exists(self._native(rel)):
                raise AlreadyExists(f"File already exists: {path}", path=path, backend=self.name)
            if "/" in rel:
                self._fs.makedirs(self._native(rel.rsplit("/", 1)[0]), exist_ok=True)
            self._fs.pipe_file(self._native(rel), self._read_content(content))

    def mkdir(self, path: str) -> None:
        if not normalize_path(path):
            return
        with self._errors(path):
            self._fs.makedirs(self._native(path), exist_ok=True)

    # endregion

    # region: remove and rename

    def _remove_empty_dir(self, native: str) -> None:
        self._fs.rmdir(native)

    def remove(self, path: str, *, recursive: bool = False, missing_ok: bool = False) -> None:
        native = self._native(path)
        with self._errors(path):
            if not self._fs.exists(native):
                if not missing_ok:
                    raise NotFound(f"Not found: {path}", path=path, backend=self.name)
                return
            if not self._fs.isdir(native):
                self._fs.rm_file(native)
            elif recursive:
                self._fs.rm(native, recursive=True)
            elif self._fs.ls(native, detail=False):
                raise UnifsError(f"Directory not empty: {path}", path=path, backend=self.name)
            else:
                self._remove_empty_dir(native)

    def rename(self, src: str, dst: str) -> None:
        with self._errors(src):
            if not self._fs.exists(self._native(src)):
                raise NotFound(f"Source not found: {src}", path=src, backend=self.name)
            self._fs.mv(self._native(src), self._native(dst), recursive=self._fs.isdir(self._native(src)))

    # endregion

    # region: lifecycle

    def close(self) -> None:
        self._fs_instance = None

    def unwrap(self, type_hint: type[T]) -> T:
        if isinstance(self._fs, type_hint):
            return self._fs  # type: ignore[no-any-return]
        raise NotSupported(
            f"Backend '{self.name}' does not expose native handle of type {type_hint.__name__}",
            operation="unwrap",
            backend=self.name,
        )

    # endregion
