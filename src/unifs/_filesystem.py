"""FileSystem abstract base class — the uniform capability every backend provides."""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, BinaryIO, TypeVar

from unifs._errors import NotSupported

if TYPE_CHECKING:
    from collections.abc import Iterator
    from types import TracebackType

    from unifs._models import FileInfo
    from unifs._types import WritableContent

T = TypeVar("T")


class FileSystem(abc.ABC):
    """Abstract base class for all filesystem backends.

    Paths are backend-relative and ``/``-separated; the empty string is the
    root. Backend-native exceptions must never leak; they are mapped to
    ``unifs`` errors.
    """

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Backend identifier (e.g. ``'local'``, ``'s3'``)."""

    @abc.abstractmethod
    def exists(self, path: str) -> bool:
        """Check if a file or directory exists. Never raises ``NotFound``."""

    @abc.abstractmethod
    def stat(self, path: str) -> FileInfo:
        """Return metadata for a file or directory.

        :raises NotFound: If nothing exists at ``path``.
        """

    @abc.abstractmethod
    def list_dir(self, path: str) -> Iterator[FileInfo]:
        """List the immediate entries of a directory.

        :raises NotFound: If the directory does not exist.
        """

    @abc.abstractmethod
    def open(self, path: str) -> BinaryIO:
        """Open a file for reading and return a binary stream.

        :raises NotFound: If the file does not exist.
        """

    def read_bytes(self, path: str) -> bytes:
        """Read the full content of a file.

        :raises NotFound: If the file does not exist.
        """
        with self.open(path) as f:
            return f.read()

    @abc.abstractmethod
    def write(self, path: str, content: WritableContent, *, overwrite: bool = True) -> None:
        """Write content to a file, creating parent directories as needed.

        :raises AlreadyExists: If the file exists and ``overwrite`` is ``False``.
        """

    @abc.abstractmethod
    def mkdir(self, path: str) -> None:
        """Create a directory and any missing parents. Existing directories are kept."""

    @abc.abstractmethod
    def remove(self, path: str, *, recursive: bool = False, missing_ok: bool = False) -> None:
        """Remove a file, or a directory (with its contents when ``recursive``).

        :raises NotFound: If ``path`` is missing and ``missing_ok`` is ``False``.
        """

    @abc.abstractmethod
    def rename(self, src: str, dst: str) -> None:
        """Move ``src`` to ``dst``, replacing ``dst`` if it is a file.

        :raises NotFound: If ``src`` does not exist.
        """

    def close(self) -> None:  # noqa: B027
        """Release resources. Default is a no-op."""

    def __enter__(self) -> FileSystem:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def unwrap(self, type_hint: type[T]) -> T:
        """Return the native backend handle if it matches the requested type.

        :param type_hint: The expected type (e.g., ``fsspec.AbstractFileSystem``).
        :raises NotSupported: If the backend cannot provide the requested type.
        """
        raise NotSupported(
            f"Backend '{self.name}' does not expose native handle of type {type_hint.__name__}",
            operation="unwrap",
            backend=self.name,
        )

    @staticmethod
    def _read_content(content: WritableContent) -> bytes:
        if isinstance(content, bytes):
            return content
        return content.read()
