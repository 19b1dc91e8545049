"""S3 backend tests.

Configuration tests need nothing but the package; the moto-backed tests
require moto[server,s3], s3fs and boto3 and are skipped without them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from unifs._context import Context
from unifs._endpoint import Endpoint
from unifs._errors import Cancelled, ConfigError, NotSupported
from unifs.backends._s3 import S3Config, S3FileSystem

from tests.backends.s3_helpers import REGION, make_bucket

if TYPE_CHECKING:
    from collections.abc import Iterator


class TestConfigFromEndpoint:
    def test_bucket_and_prefix(self) -> None:
        cfg = S3Config.from_endpoint(Endpoint.parse("s3://ak:sk@s3.example.com/bucket/a/b"))
        assert cfg.bucket == "bucket"
        assert cfg.prefix == "a/b"
        assert cfg.endpoint_url == "https://s3.example.com"
        assert (cfg.key, cfg.secret) == ("ak", "sk")
        assert cfg.region_name is None

    def test_insecure_and_region(self) -> None:
        cfg = S3Config.from_endpoint(Endpoint.parse("s3://ak:sk@minio:9000/b?insecure=true&region=eu-central-1"))
        assert cfg.endpoint_url == "http://minio:9000"
        assert cfg.region_name == "eu-central-1"

    def test_no_host_uses_default_endpoint(self) -> None:
        cfg = S3Config.from_endpoint(Endpoint(scheme="s3", path="/bucket"))
        assert cfg.endpoint_url is None
        assert cfg.key is None

    def test_missing_bucket(self) -> None:
        with pytest.raises(ConfigError, match="bucket"):
            S3Config.from_endpoint(Endpoint.parse("s3://ak:sk@host"))

    def test_half_credentials(self) -> None:
        with pytest.raises(ConfigError, match="together"):
            S3Config.from_endpoint(Endpoint.parse("s3://ak@host/bucket"))

    def test_repr_hides_secret(self) -> None:
        assert "sk-value" not in repr(S3Config(bucket="b", key="ak", secret="sk-value"))


class TestAsFilesystem:
    def test_builds_lazily(self) -> None:
        fs = S3Config(bucket="b", prefix="/p/").as_filesystem()
        assert isinstance(fs, S3FileSystem)
        assert fs.root == "b/p"
        assert fs._fs_instance is None
        assert fs.name == "s3"

    def test_honors_cancellation(self) -> None:
        ctx = Context.background().with_cancel()
        ctx.cancel()
        with pytest.raises(Cancelled):
            S3Config(bucket="b").as_filesystem(ctx)


@pytest.fixture()
def s3_fs(moto_server: str | None) -> Iterator[S3FileSystem]:
    """Create an S3FileSystem against moto's mock S3 service."""
    pytest.importorskip("s3fs", reason="s3fs not installed")
    if moto_server is None:
        pytest.skip("moto/boto3 not installed")
    fs = S3Config(
        bucket=make_bucket(moto_server),
        key="testing",
        secret="testing",
        region_name=REGION,
        endpoint_url=moto_server,
    ).as_filesystem()
    yield fs
    fs.close()


class TestAgainstMoto:
    def test_prefix_isolation(self, moto_server: str | None, s3_fs: S3FileSystem) -> None:
        bucket = s3_fs.config.bucket
        s3_fs.write("p/inside.txt", b"in")
        scoped = S3Config(
            bucket=bucket,
            prefix="p",
            key="testing",
            secret="testing",
            region_name=REGION,
            endpoint_url=moto_server,
        ).as_filesystem()
        try:
            assert scoped.read_bytes("inside.txt") == b"in"
            assert [info.path for info in scoped.list_dir("")] == ["inside.txt"]
        finally:
            scoped.close()

    def test_remove_empty_prefix_is_noop(self, s3_fs: S3FileSystem) -> None:
        s3_fs.write("d/x.txt", b"x")
        s3_fs.remove("d/x.txt")
        s3_fs.remove("d", missing_ok=True)

    def test_unwrap_native(self, s3_fs: S3FileSystem) -> None:
        import s3fs

        native = s3_fs.unwrap(s3fs.S3FileSystem)
        assert isinstance(native, s3fs.S3FileSystem)

    def test_unwrap_other(self, s3_fs: S3FileSystem) -> None:
        with pytest.raises(NotSupported):
            s3_fs.unwrap(int)
