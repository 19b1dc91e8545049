"""Backend dispatch — maps endpoint schemes to filesystem factories."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from unifs._context import Context
from unifs._errors import UnsupportedScheme

if TYPE_CHECKING:
    from unifs._endpoint import Endpoint
    from unifs._filesystem import FileSystem

BackendFactory = Callable[["Endpoint", Context], "FileSystem"]

log = logging.getLogger(__name__)

# Global factory registry: maps scheme tags to filesystem factories.
_BACKEND_FACTORIES: dict[str, BackendFactory] = {}


def register_backend(scheme: str, factory: BackendFactory) -> None:
    """Register a filesystem factory for a scheme, replacing any previous one.

    :param scheme: The scheme tag (e.g. ``"s3"``).
    :param factory: Called as ``factory(endpoint, ctx)``; returns a ``FileSystem``.
    """
    _BACKEND_FACTORIES[scheme] = factory


def registered_schemes() -> list[str]:
    """Return the registered scheme tags, sorted."""
    _register_builtin_backends()
    return sorted(_BACKEND_FACTORIES)


def local_root(endpoint: Endpoint) -> str:
    """Return the local directory a ``file`` endpoint points at.

    ``file://./foo/bar`` (host ``.``) is relative to the working directory:
    exactly one leading ``/`` is dropped. Any other endpoint yields its path
    verbatim.
    """
    if endpoint.hostname == "." and endpoint.path.startswith("/"):
        return endpoint.path[1:]
    return endpoint.path


def _s3_factory(endpoint: Endpoint, ctx: Context) -> FileSystem:
    from unifs.backends._s3 import S3Config

    return S3Config.from_endpoint(endpoint).as_filesystem(ctx)


def _ftp_factory(endpoint: Endpoint, ctx: Context) -> FileSystem:
    from unifs.backends._ftp import FTPConfig, FTPFileSystem

    return FTPFileSystem(FTPConfig.from_endpoint(endpoint))


def _webdav_factory(endpoint: Endpoint, ctx: Context) -> FileSystem:
    from unifs.backends._webdav import WebDAVConfig, WebDAVFileSystem

    client = WebDAVConfig.from_endpoint(endpoint).client(ctx)
    return WebDAVFileSystem(client)


def _local_factory(endpoint: Endpoint, ctx: Context) -> FileSystem:
    from unifs.backends._local import LocalFileSystem

    return LocalFileSystem(local_root(endpoint))


def _register_builtin_backends() -> None:
    """Register the built-in backends, keeping any user override."""
    builtins: dict[str, BackendFactory] = {
        "s3": _s3_factory,
        "ftp": _ftp_factory,
        "ftps": _ftp_factory,
        "webdav": _webdav_factory,
        "file": _local_factory,
    }
    for scheme, factory in builtins.items():
        if scheme not in _BACKEND_FACTORIES:
            register_backend(scheme, factory)


def dispatch(endpoint: Endpoint, ctx: Context | None = None) -> FileSystem:
    """Construct the filesystem for a resolved endpoint.

    Factory errors propagate unchanged; there is no retry and no fallback.

    :raises UnsupportedScheme: If no factory is registered for the scheme.
    :raises Cancelled: If *ctx* is cancelled before construction.
    :raises DeadlineExceeded: If *ctx*'s deadline has passed.
    """
    _register_builtin_backends()
    factory = _BACKEND_FACTORIES.get(endpoint.scheme)
    if factory is None:
        raise UnsupportedScheme(endpoint)
    ctx = ctx or Context.background()
    ctx.raise_if_done()
    log.debug("Dispatching %s to the %r backend", endpoint, endpoint.scheme)
    return factory(endpoint, ctx)
