"""Type aliases used throughout unifs."""

from __future__ import annotations

from typing import BinaryIO

WritableContent = BinaryIO | bytes
Extras = dict[str, list[str]]
