"""Backend implementations."""

from unifs.backends._ftp import FTPConfig, FTPFileSystem
from unifs.backends._fsspec import FsspecFileSystem
from unifs.backends._local import LocalFileSystem
from unifs.backends._s3 import S3Config, S3FileSystem
from unifs.backends._webdav import WebDAVConfig, WebDAVFileSystem

__all__ = [
    "FsspecFileSystem",
    "FTPConfig",
    "FTPFileSystem",
    "LocalFileSystem",
    "S3Config",
    "S3FileSystem",
    "WebDAVConfig",
    "WebDAVFileSystem",
]
