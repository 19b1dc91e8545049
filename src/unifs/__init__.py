"""One filesystem interface over local disk, S3, FTP/FTPS and WebDAV."""

from unifs._config import FileSystemBackend
from unifs._context import Context, inject, retrieve
from unifs._endpoint import Endpoint, parse_query
from unifs._errors import (
    AlreadyExists,
    BackendUnavailable,
    Cancelled,
    ConfigError,
    DeadlineExceeded,
    InvalidPath,
    NotFound,
    NotSupported,
    PermissionDenied,
    UnifsError,
    UnsupportedScheme,
)
from unifs._filesystem import FileSystem
from unifs._models import FileInfo
from unifs._overlay import Overrides, resolve
from unifs._path import normalize_path
from unifs._registry import dispatch, local_root, register_backend, registered_schemes

__version__ = "0.1.0"

__all__ = [
    # Core
    "FileSystemBackend",
    "FileSystem",
    "Endpoint",
    "Overrides",
    "resolve",
    "dispatch",
    "register_backend",
    "registered_schemes",
    "local_root",
    "parse_query",
    # Context
    "Context",
    "inject",
    "retrieve",
    # Models
    "FileInfo",
    "normalize_path",
    # Errors
    "UnifsError",
    "ConfigError",
    "UnsupportedScheme",
    "Cancelled",
    "DeadlineExceeded",
    "NotFound",
    "AlreadyExists",
    "PermissionDenied",
    "InvalidPath",
    "BackendUnavailable",
    "NotSupported",
    # Version
    "__version__",
]
