"""FTP and FTPS backend using fsspec's ftplib-based filesystem."""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Any

from unifs._errors import ConfigError
from unifs.backends._fsspec import FsspecFileSystem

if TYPE_CHECKING:
    from unifs._endpoint import Endpoint

DEFAULT_PORT = 21
DEFAULT_TIMEOUT = 30.0


@dataclasses.dataclass(frozen=True)
class FTPConfig:
    """FTP connection settings.

    :param host: Server hostname (required, non-empty).
    :param port: Control connection port.
    :param username: Login user; anonymous when ``None``.
    :param password: Login password.
    :param tls: Use explicit FTPS (``AUTH TLS``).
    :param root: Remote directory all operations are rooted at.
    :param timeout: Socket timeout in seconds.
    """

    host: str
    port: int = DEFAULT_PORT
    username: str | None = None
    password: str | None = dataclasses.field(default=None, repr=False)
    tls: bool = False
    root: str = ""
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        if not self.host or not self.host.strip():
            raise ConfigError("host must be a non-empty string", backend="ftp")

    @classmethod
    def from_endpoint(cls, endpoint: Endpoint) -> FTPConfig:
        """Derive the configuration from an ``ftp://`` or ``ftps://`` endpoint.

        :raises ConfigError: If the host is missing or the ``timeout`` extra is not a number.
        """
        raw_timeout = endpoint.extra("timeout")
        try:
            timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
        except ValueError:
            raise ConfigError(f"Invalid timeout {raw_timeout!r}", backend="ftp") from None
        return cls(
            host=endpoint.hostname,
            port=endpoint.port or DEFAULT_PORT,
            username=endpoint.username or None,
            password=endpoint.password or None,
            tls=endpoint.scheme == "ftps",
            root=endpoint.path,
            timeout=timeout,
        )


class FTPFileSystem(FsspecFileSystem):
    """FTP/FTPS filesystem. The control connection opens on first use.

    :param config: The connection settings.
    """

    _absolute_paths = True

    def __init__(self, config: FTPConfig) -> None:
        super().__init__(config.root)
        self._config = config

    @property
    def name(self) -> str:
        return "ftps" if self._config.tls else "ftp"

    @property
    def config(self) -> FTPConfig:
        return self._config

    def __repr__(self) -> str:
        return f"FTPFileSystem(host={self._config.host!r}, port={self._config.port!r}, tls={self._config.tls!r})"

    def _create_fs(self) -> Any:
        from fsspec.implementations.ftp import FTPFileSystem as NativeFTPFileSystem

        cfg = self._config
        return NativeFTPFileSystem(
            cfg.host,
            port=cfg.port,
            username=cfg.username,
            password=cfg.password,
            tls=cfg.tls,
            timeout=cfg.timeout,
            skip_instance_cache=True,
        )

    def close(self) -> None:
        if self._fs_instance is not None:
            self._fs_instance.ftp.close()
        super().close()
