"""Backend test fixtures -- parameterized for conformance testing."""

from __future__ import annotations

import socket
import tempfile
from typing import TYPE_CHECKING

import pytest

from tests.backends.s3_helpers import REGION, make_bucket
from unifs.backends._local import LocalFileSystem

if TYPE_CHECKING:
    from collections.abc import Iterator

    from unifs._filesystem import FileSystem


def _s3_available() -> bool:
    try:
        import boto3  # noqa: F401
        import moto  # noqa: F401
        import s3fs  # noqa: F401

        return True
    except ImportError:
        return False


def _free_port() -> int:
    with socket.socket() as s:
        s.bind(("", 0))
        return s.getsockname()[1]


@pytest.fixture(scope="session")
def moto_server() -> Iterator[str | None]:
    """Start a moto HTTP server for the test session.

    Server mode keeps s3fs/aiobotocore out of moto's in-process patching.
    """
    if not _s3_available():
        yield None
        return
    from moto.moto_server.threaded_moto_server import ThreadedMotoServer

    port = _free_port()
    server = ThreadedMotoServer(port=port, verbose=False)
    server.start()
    yield f"http://127.0.0.1:{port}"
    server.stop()


_s3_param = pytest.param(
    "s3",
    marks=pytest.mark.skipif(not _s3_available(), reason="moto/s3fs/boto3 not installed"),
)


@pytest.fixture(params=["local", _s3_param])
def filesystem(request: pytest.FixtureRequest, moto_server: str | None) -> Iterator[FileSystem]:
    """Parameterized filesystem fixture. Add new backends here."""
    if request.param == "local":
        with tempfile.TemporaryDirectory() as tmp:
            yield LocalFileSystem(root=tmp)
    elif request.param == "s3":
        from unifs.backends._s3 import S3Config

        assert moto_server is not None
        config = S3Config(
            bucket=make_bucket(moto_server, "conformance"),
            prefix="root",
            key="testing",
            secret="testing",
            region_name=REGION,
            endpoint_url=moto_server,
        )
        fs = config.as_filesystem()
        yield fs
        fs.close()
    else:
        pytest.skip(f"Unknown backend: {request.param}")
