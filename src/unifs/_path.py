"""Backend-relative path normalization."""

from __future__ import annotations

from unifs._errors import InvalidPath


def normalize_path(raw: str) -> str:
    """Normalize a backend-relative path.

    Backslashes become forward slashes, empty and ``.`` segments are dropped.
    The empty string denotes the filesystem root.

    :raises InvalidPath: If the path contains a null byte or a ``..`` segment.
    """
    if "\0" in raw:
        raise InvalidPath("Path contains null byte", path=raw)
    parts: list[str] = []
    for segment in raw.replace("\\", "/").split("/"):
        if segment == "" or segment == ".":
            continue
        if segment == "..":
            raise InvalidPath("Path contains '..' segment", path=raw)
        parts.append(segment)
    return "/".join(parts)


def join_path(root: str, path: str) -> str:
    """Join a normalized *path* under *root*, either of which may be empty."""
    if not root:
        return path
    if not path:
        return root
    return f"{root}/{path}"


def base_name(path: str) -> str:
    """Final component of a ``/``-separated path."""
    return path.rstrip("/").rsplit("/", 1)[-1]
