"""Immutable metadata models."""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime


@dataclasses.dataclass(frozen=True)
class FileInfo:
    """Immutable snapshot of file or directory metadata.

    :param path: Backend-relative normalized path (empty for the root).
    :param name: Final path component.
    :param size: Size in bytes (``0`` for directories).
    :param is_dir: Whether the entry is a directory.
    :param modified_at: Last modification time, if the backend reports one.
    """

    path: str
    name: str
    size: int = 0
    is_dir: bool = False
    modified_at: datetime | None = None
