"""FileSystemBackend — configuration descriptor resolved into a filesystem."""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING

from unifs._context import inject
from unifs._endpoint import Endpoint
from unifs._errors import ConfigError
from unifs._overlay import Overrides, resolve
from unifs._registry import dispatch

if TYPE_CHECKING:
    from types import TracebackType

    from unifs._context import Context
    from unifs._filesystem import FileSystem

_OVERWRITE_KEYS = ("username_overwrite", "password_overwrite", "path_overwrite", "extra_overwrite")


@dataclasses.dataclass
class FileSystemBackend:
    """Describes one storage location and owns the filesystem built from it.

    A backend whose endpoint is the zero value is disabled: :meth:`init`
    succeeds without building anything. :meth:`init` is not safe to call
    concurrently on the same instance; call it once during startup.

    :param endpoint: The base endpoint; an address string is parsed.
    :param username_overwrite: Replaces the endpoint user name when non-empty.
    :param password_overwrite: Replaces the endpoint password when non-empty.
    :param path_overwrite: Replaces the endpoint path when non-empty.
    :param extra_overwrite: Query string replacing all endpoint extras when non-empty.
    """

    endpoint: Endpoint = dataclasses.field(default_factory=Endpoint)
    username_overwrite: str = ""
    password_overwrite: str = dataclasses.field(default="", repr=False)
    path_overwrite: str = ""
    extra_overwrite: str = ""
    _filesystem: FileSystem | None = dataclasses.field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if isinstance(self.endpoint, str):
            self.endpoint = Endpoint.parse(self.endpoint)

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> FileSystemBackend:
        """Construct from a plain dict (e.g. parsed TOML/JSON).

        :param data: Dict with a ``backend`` address and optional overwrite keys.
        :raises ConfigError: On unknown keys or non-string values.
        """
        unknown = sorted(set(data) - {"backend", *_OVERWRITE_KEYS})
        if unknown:
            raise ConfigError(f"Unknown backend config keys: {unknown}")
        raw_endpoint = data.get("backend", "")
        if not isinstance(raw_endpoint, (str, Endpoint)):
            raise ConfigError("Expected 'backend' to be an address string")
        overwrites: dict[str, str] = {}
        for key in _OVERWRITE_KEYS:
            value = data.get(key, "")
            if not isinstance(value, str):
                raise ConfigError(f"Expected '{key}' to be a string")
            overwrites[key] = value
        return cls(endpoint=raw_endpoint, **overwrites)  # type: ignore[arg-type]

    @property
    def overrides(self) -> Overrides:
        """The overwrites as an :class:`Overrides` value."""
        return Overrides(
            username=self.username_overwrite,
            password=self.password_overwrite,
            path=self.path_overwrite,
            extras=self.extra_overwrite,
        )

    def disabled(self) -> bool:
        """Return ``True`` if the endpoint is the zero value."""
        return self.endpoint.is_zero()

    def resolved_endpoint(self) -> Endpoint:
        """Return the endpoint with the overwrites applied.

        :raises ConfigError: If ``extra_overwrite`` is not a valid query string.
        """
        return resolve(self.endpoint, self.overrides)

    def init(self, ctx: Context | None = None) -> None:
        """Resolve the overwrites, construct the filesystem and keep it.

        A previously stored filesystem is closed once its replacement has been
        built. On failure it is left untouched.

        :raises ConfigError: If ``extra_overwrite`` is not a valid query string.
        :raises UnsupportedScheme: If no backend handles the endpoint scheme.
        """
        if self.disabled():
            return
        filesystem = dispatch(self.resolved_endpoint(), ctx)
        previous, self._filesystem = self._filesystem, filesystem
        if previous is not None and previous is not filesystem:
            previous.close()

    def filesystem(self) -> FileSystem | None:
        """Return the constructed filesystem, or ``None`` before a successful :meth:`init`."""
        return self._filesystem

    def inject_context(self, ctx: Context) -> Context:
        """Derive a context publishing this backend's filesystem."""
        return inject(ctx, self._filesystem)

    def close(self) -> None:
        """Close the filesystem and drop it."""
        if self._filesystem is not None:
            self._filesystem.close()
            self._filesystem = None

    def __enter__(self) -> FileSystemBackend:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
