"""Document Manager - revision-controlled storage for opaque documents."""

from ._version import __version__, get_version
from .config import StoreConfig
from .errors import (
    ConfigError,
    DocumentManagerError,
    DocumentNotFoundError,
    ErrorKind,
    InvalidArgumentError,
    RepositoryUnavailableError,
    StorageReadError,
    StorageWriteError,
)
from .services.paths import RevisionPolicy
from .services.reporting import OperationError, OperationResult
from .services.store import DocumentStore

__all__ = [
    "DocumentStore",
    "StoreConfig",
    "RevisionPolicy",
    "OperationResult",
    "OperationError",
    "ErrorKind",
    "DocumentManagerError",
    "ConfigError",
    "InvalidArgumentError",
    "RepositoryUnavailableError",
    "DocumentNotFoundError",
    "StorageWriteError",
    "StorageReadError",
    "__version__",
    "get_version",
]
