"""Endpoint — immutable, parsed storage address."""

from __future__ import annotations

import dataclasses
import re
from urllib.parse import quote, unquote, unquote_plus, urlencode, urlsplit

from unifs._errors import ConfigError
from unifs._types import Extras

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def _unescape(raw: str, *, plus: bool = True) -> str:
    if _BAD_ESCAPE.search(raw):
        raise ConfigError(f"Invalid URL escape in {raw!r}")
    return unquote_plus(raw) if plus else unquote(raw)


def parse_query(query: str) -> Extras:
    """Parse a raw query string into a mapping of key to ordered values.

    Pairs are separated by ``&`` and split on the first ``=``; a pair without
    ``=`` yields an empty value. Empty pairs are skipped.

    :raises ConfigError: On a ``;`` separator or an invalid percent escape.
    """
    extras: Extras = {}
    for pair in query.split("&"):
        if not pair:
            continue
        if ";" in pair:
            raise ConfigError(f"Invalid semicolon separator in query: {pair!r}")
        key, _, value = pair.partition("=")
        extras.setdefault(_unescape(key), []).append(_unescape(value))
    return extras


@dataclasses.dataclass(frozen=True)
class Endpoint:
    """A parsed address describing one storage location.

    Address grammar: ``scheme://[username[:password]@]host[:port]/path[?key=value&...]``.

    :param scheme: Backend tag (``s3``, ``ftp``, ``ftps``, ``webdav``, ``file``).
    :param hostname: Host name, without port.
    :param port: Port number, or ``None`` when not given.
    :param path: Path component, verbatim.
    :param username: User name (decoded).
    :param password: Password (decoded). Never rendered.
    :param extras: Free-form backend parameters, key to ordered values.
    """

    scheme: str = ""
    hostname: str = ""
    port: int | None = None
    path: str = ""
    username: str = ""
    password: str = dataclasses.field(default="", repr=False)
    extras: Extras = dataclasses.field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "extras", {str(k): list(v) for k, v in self.extras.items()})

    def __hash__(self) -> int:
        extras = tuple(sorted((key, tuple(values)) for key, values in self.extras.items()))
        return hash((self.scheme, self.hostname, self.port, self.path, self.username, self.password, extras))

    @classmethod
    def parse(cls, address: str) -> Endpoint:
        """Parse an address string.

        An empty address yields the zero endpoint.

        :raises ConfigError: If the address has no scheme, a bad port, or a bad query.
        """
        if not address:
            return cls()
        split = urlsplit(address)
        if not split.scheme:
            raise ConfigError(f"Missing scheme in address {cls._redact(address)!r}")

        userinfo, _, hostport = split.netloc.rpartition("@")
        username, _, password = userinfo.partition(":")
        try:
            port = split.port
        except ValueError:
            raise ConfigError(f"Invalid port in address {cls._redact(address)!r}") from None
        hostname = hostport
        if hostport.startswith("["):
            hostname = hostport[1 : hostport.find("]")]
        elif port is not None or hostport.endswith(":"):
            hostname = hostport.rsplit(":", 1)[0]

        return cls(
            scheme=split.scheme,
            hostname=hostname,
            port=port,
            path=_unescape(split.path, plus=False),
            username=_unescape(username, plus=False),
            password=_unescape(password, plus=False),
            extras=parse_query(split.query),
        )

    @staticmethod
    def _redact(address: str) -> str:
        split = urlsplit(address)
        if split.password is None:
            return address
        netloc = split.netloc.replace(f":{split.password}@", "@", 1)
        return split._replace(netloc=netloc).geturl()

    @property
    def host(self) -> str:
        """``hostname[:port]``, with IPv6 literals bracketed."""
        hostname = f"[{self.hostname}]" if ":" in self.hostname else self.hostname
        if self.port is not None:
            return f"{hostname}:{self.port}"
        return hostname

    def extra(self, key: str, default: str = "") -> str:
        """Return the first value of an extra, or *default*."""
        values = self.extras.get(key)
        if values:
            return values[0]
        return default

    def is_zero(self) -> bool:
        """Return ``True`` if every field is empty."""
        return self == Endpoint()

    def __str__(self) -> str:
        if self.is_zero():
            return ""
        userinfo = f"{quote(self.username, safe='')}@" if self.username else ""
        rendered = f"{self.scheme}://{userinfo}{self.host}{quote(self.path, safe='/')}"
        if self.extras:
            rendered += "?" + urlencode(self.extras, doseq=True)
        return rendered
