"""S3-compatible object storage backend using s3fs."""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Any

from unifs._errors import ConfigError
from unifs._path import join_path, normalize_path
from unifs.backends._fsspec import FsspecFileSystem

if TYPE_CHECKING:
    from unifs._context import Context
    from unifs._endpoint import Endpoint

_TRUTHY = ("1", "true", "yes", "on")


@dataclasses.dataclass(frozen=True)
class S3Config:
    """Object storage configuration.

    Built from ``s3://access_key:secret_key@host[:port]/bucket[/prefix]``.

    :param bucket: Bucket name (required, non-empty).
    :param prefix: Key prefix the filesystem is rooted at.
    :param endpoint_url: Custom endpoint URL (e.g. for MinIO); ``None`` for AWS.
    :param key: Access key ID.
    :param secret: Secret access key.
    :param region_name: Region name.
    :param client_options: Additional options passed to s3fs.
    """

    bucket: str
    prefix: str = ""
    endpoint_url: str | None = None
    key: str | None = None
    secret: str | None = dataclasses.field(default=None, repr=False)
    region_name: str | None = None
    client_options: dict[str, Any] = dataclasses.field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.bucket or not self.bucket.strip():
            raise ConfigError("bucket must be a non-empty string", backend="s3")
        if bool(self.key) != bool(self.secret):
            raise ConfigError("access key and secret key must be given together", backend="s3")

    @classmethod
    def from_endpoint(cls, endpoint: Endpoint) -> S3Config:
        """Derive the configuration from a resolved endpoint.

        The first path segment is the bucket; the remainder is the prefix.
        Extras: ``insecure=true`` selects ``http://``, ``region`` sets the region.

        :raises ConfigError: If the endpoint names no bucket or has half a credential pair.
        """
        bucket, _, prefix = normalize_path(endpoint.path).partition("/")
        endpoint_url = None
        if endpoint.hostname:
            scheme = "http" if endpoint.extra("insecure").lower() in _TRUTHY else "https"
            endpoint_url = f"{scheme}://{endpoint.host}"
        return cls(
            bucket=bucket,
            prefix=prefix,
            endpoint_url=endpoint_url,
            key=endpoint.username or None,
            secret=endpoint.password or None,
            region_name=endpoint.extra("region") or None,
        )

    def as_filesystem(self, ctx: Context | None = None) -> S3FileSystem:
        """Build the filesystem for this configuration."""
        if ctx is not None:
            ctx.raise_if_done()
        return S3FileSystem(self)


class S3FileSystem(FsspecFileSystem):
    """S3-compatible object storage filesystem rooted at ``bucket/prefix``.

    :param config: The object storage configuration.
    """

    def __init__(self, config: S3Config) -> None:
        super().__init__(join_path(config.bucket, normalize_path(config.prefix)))
        self._config = config

    @property
    def name(self) -> str:
        return "s3"

    @property
    def config(self) -> S3Config:
        return self._config

    def __repr__(self) -> str:
        return f"S3FileSystem(bucket={self._config.bucket!r}, prefix={self._config.prefix!r})"

    def _create_fs(self) -> Any:
        import s3fs  # type: ignore[import-untyped]

        cfg = self._config
        opts: dict[str, Any] = dict(cfg.client_options)
        if cfg.endpoint_url is not None:
            opts["endpoint_url"] = cfg.endpoint_url
        if cfg.key is not None:
            opts["key"] = cfg.key
        if cfg.secret is not None:
            opts["secret"] = cfg.secret
        if cfg.region_name is not None:
            client_kwargs: dict[str, Any] = opts.setdefault("client_kwargs", {})
            client_kwargs["region_name"] = cfg.region_name
        opts.setdefault("anon", False)
        opts["skip_instance_cache"] = True
        return s3fs.S3FileSystem(**opts)

    def _remove_empty_dir(self, native: str) -> None:
        # Prefixes are virtual; an empty one has nothing to delete.
        pass
