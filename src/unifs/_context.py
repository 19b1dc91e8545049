"""Context — explicit, immutable processing context and filesystem publication.

A :class:`Context` is a chain of nodes. Each derived node may bind one value,
tighten the deadline, or open a cancellation scope. Lookups walk towards the
root, so a binding is visible to descendants only and never mutates the
ancestor it was derived from.
"""

from __future__ import annotations

import threading
import time
from typing import TYPE_CHECKING

from unifs._errors import Cancelled, DeadlineExceeded

if TYPE_CHECKING:
    from types import TracebackType

    from unifs._errors import UnifsError
    from unifs._filesystem import FileSystem

_UNSET = object()


class Context:
    """An immutable processing context.

    Create the root with :meth:`background` and derive children with
    :meth:`with_value`, :meth:`with_cancel` and :meth:`with_timeout`.
    """

    __slots__ = ("_parent", "_key", "_value", "_deadline", "_event")

    def __init__(
        self,
        parent: Context | None = None,
        *,
        key: object = _UNSET,
        value: object = None,
        deadline: float | None = None,
        cancellable: bool = False,
    ) -> None:
        self._parent = parent
        self._key = key
        self._value = value
        if parent is not None and parent._deadline is not None:
            deadline = parent._deadline if deadline is None else min(deadline, parent._deadline)
        self._deadline = deadline
        self._event = threading.Event() if cancellable else None

    @classmethod
    def background(cls) -> Context:
        """Return an empty, never-cancelled root context."""
        return cls()

    def __repr__(self) -> str:
        return f"Context(deadline={self._deadline!r}, done={self.done()!r})"

    # region: derivation

    def with_value(self, key: object, value: object) -> Context:
        """Derive a child binding *key* to *value*."""
        return Context(self, key=key, value=value)

    def with_cancel(self) -> Context:
        """Derive a child that can be cancelled with :meth:`cancel`."""
        return Context(self, cancellable=True)

    def with_timeout(self, seconds: float) -> Context:
        """Derive a cancellable child whose deadline is *seconds* from now."""
        return Context(self, deadline=time.monotonic() + seconds, cancellable=True)

    # endregion

    # region: values

    def value(self, key: object, default: object = None) -> object:
        """Return the value bound to *key* by the nearest ancestor, or *default*."""
        node: Context | None = self
        while node is not None:
            if node._key is not _UNSET and node._key == key:
                return node._value
            node = node._parent
        return default

    # endregion

    # region: cancellation

    @property
    def deadline(self) -> float | None:
        """Monotonic deadline, or ``None`` when unbounded."""
        return self._deadline

    def cancel(self) -> None:
        """Cancel this context and every context derived from it.

        :raises ValueError: If this context was not created by
            :meth:`with_cancel` or :meth:`with_timeout`.
        """
        if self._event is None:
            raise ValueError("Context is not cancellable")
        self._event.set()

    def remaining(self) -> float | None:
        """Seconds until the deadline (never negative), or ``None`` when unbounded."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def error(self) -> UnifsError | None:
        """Return why the context is done, or ``None`` while it is still live."""
        node: Context | None = self
        while node is not None:
            if node._event is not None and node._event.is_set():
                return Cancelled("Context cancelled")
            node = node._parent
        if self._deadline is not None and time.monotonic() >= self._deadline:
            return DeadlineExceeded("Context deadline exceeded")
        return None

    def done(self) -> bool:
        """Return ``True`` once cancelled or past the deadline."""
        return self.error() is not None

    def raise_if_done(self) -> None:
        """Raise :class:`Cancelled` or :class:`DeadlineExceeded` if the context is done."""
        err = self.error()
        if err is not None:
            raise err

    def __enter__(self) -> Context:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._event is not None:
            self._event.set()

    # endregion


class _FileSystemKey:
    """Key under which the published filesystem is bound."""

    def __repr__(self) -> str:
        return "<filesystem>"


_FILESYSTEM_KEY = _FileSystemKey()


def inject(ctx: Context, fs: FileSystem | None) -> Context:
    """Derive a context that publishes *fs* to its descendants."""
    return ctx.with_value(_FILESYSTEM_KEY, fs)


def retrieve(ctx: Context) -> FileSystem | None:
    """Return the filesystem published on *ctx*'s lineage, or ``None``."""
    return ctx.value(_FILESYSTEM_KEY)  # type: ignore[return-value]
