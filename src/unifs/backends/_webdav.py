"""WebDAV backend using webdav4."""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING, Any

from unifs._errors import ConfigError, NotFound
from unifs.backends._fsspec import FsspecFileSystem

if TYPE_CHECKING:
    from unifs._context import Context
    from unifs._endpoint import Endpoint

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
_TRUTHY = ("1", "true", "yes", "on")


@dataclasses.dataclass(frozen=True)
class WebDAVConfig:
    """WebDAV connection settings.

    :param base_url: Collection URL all operations are rooted at.
    :param username: Basic auth user; no auth when ``None``.
    :param password: Basic auth password.
    :param timeout: Request timeout in seconds.
    """

    base_url: str
    username: str | None = None
    password: str | None = dataclasses.field(default=None, repr=False)
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_endpoint(cls, endpoint: Endpoint) -> WebDAVConfig:
        """Derive the configuration from a ``webdav://`` endpoint.

        The base URL is ``https://host[:port]/path``, or ``http://`` when the
        ``insecure`` extra is true.

        :raises ConfigError: If the endpoint has no host.
        """
        if not endpoint.hostname:
            raise ConfigError("host must be a non-empty string", backend="webdav")
        scheme = "http" if endpoint.extra("insecure").lower() in _TRUTHY else "https"
        path = endpoint.path if endpoint.path.startswith("/") else f"/{endpoint.path}"
        return cls(
            base_url=f"{scheme}://{endpoint.host}{path}",
            username=endpoint.username or None,
            password=endpoint.password or None,
        )

    def client(self, ctx: Context | None = None) -> Any:
        """Build a ``webdav4`` client and check that the server accepts it.

        Issues exactly one ``PROPFIND`` on the base collection; failed requests
        are not retried. The request timeout is capped by the time left on *ctx*.

        :raises Cancelled: If *ctx* is cancelled before the request.
        :raises DeadlineExceeded: If *ctx*'s deadline has passed.
        :raises NotFound: If the base collection does not exist.
        """
        from webdav4.client import Client

        timeout = self.timeout
        if ctx is not None:
            ctx.raise_if_done()
            remaining = ctx.remaining()
            if remaining is not None:
                timeout = min(timeout, remaining)

        auth = (self.username, self.password or "") if self.username else None
        client = Client(self.base_url, auth=auth, timeout=timeout, retry=False)
        log.debug("Checking WebDAV collection %s", self.base_url)
        if not client.exists(""):
            raise NotFound(f"WebDAV collection not found: {self.base_url}", backend="webdav")
        return client


class WebDAVFileSystem(FsspecFileSystem):
    """WebDAV filesystem wrapping an established client.

    :param client: A ``webdav4.client.Client``.
    """

    def __init__(self, client: Any) -> None:
        super().__init__()
        self._client = client

    @property
    def name(self) -> str:
        return "webdav"

    @property
    def client(self) -> Any:
        return self._client

    def __repr__(self) -> str:
        return f"WebDAVFileSystem(base_url={str(self._client.base_url)!r})"

    def _create_fs(self) -> Any:
        from webdav4.fsspec import WebdavFileSystem

        return WebdavFileSystem(self._client.base_url, client=self._client, skip_instance_cache=True)
