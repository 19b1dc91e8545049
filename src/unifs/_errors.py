"""Normalized error hierarchy for unifs."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from unifs._endpoint import Endpoint


class UnifsError(Exception):
    """Base class for all unifs errors.

    :param message: Human-readable error description.
    :param path: The path involved in the error, if any.
    :param backend: The backend name involved, if any.
    """

    def __init__(self, message: str = "", *, path: Optional[str] = None, backend: Optional[str] = None) -> None:
        self.path = path
        self.backend = backend
        super().__init__(message)

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.path is not None:
            parts.append(f"path={self.path!r}")
        if self.backend is not None:
            parts.append(f"backend={self.backend!r}")
        return " | ".join(parts) if len(parts) > 1 else parts[0]

    def __repr__(self) -> str:
        cls = type(self).__name__
        args = [repr(super().__str__())]
        if self.path is not None:
            args.append(f"path={self.path!r}")
        if self.backend is not None:
            args.append(f"backend={self.backend!r}")
        return f"{cls}({', '.join(args)})"


class ConfigError(UnifsError):
    """Raised for malformed addresses, overwrites, or backend configuration."""


class UnsupportedScheme(UnifsError):
    """Raised when no backend is registered for an endpoint's scheme.

    :param endpoint: The offending endpoint, kept for diagnostics.
    """

    def __init__(self, endpoint: Endpoint) -> None:
        self.endpoint = endpoint
        # str(endpoint) never renders the password
        super().__init__(f"Unsupported scheme {endpoint.scheme!r}: {endpoint}")


class Cancelled(UnifsError):
    """Raised when the supplied context was cancelled."""


class DeadlineExceeded(UnifsError):
    """Raised when the supplied context's deadline has passed."""


class NotFound(UnifsError):
    """Raised when a file or directory does not exist."""


class AlreadyExists(UnifsError):
    """Raised when a target already exists and overwrite is not allowed."""


class PermissionDenied(UnifsError):
    """Raised when access is denied by the storage backend."""


class InvalidPath(UnifsError):
    """Raised for malformed or unsafe paths."""


class BackendUnavailable(UnifsError):
    """Raised when the backend cannot be reached."""


class NotSupported(UnifsError):
    """Raised when a backend cannot perform the requested operation.

    :param operation: The name of the unsupported operation.
    """

    def __init__(
        self,
        message: str = "",
        *,
        path: Optional[str] = None,
        backend: Optional[str] = None,
        operation: str = "",
    ) -> None:
        self.operation = operation
        super().__init__(message, path=path, backend=backend)

    def __str__(self) -> str:
        base = super().__str__()
        if self.operation:
            return f"{base} | operation={self.operation!r}" if base else f"operation={self.operation!r}"
        return base
