"""Error types for Document Manager."""

from enum import Enum


class ErrorKind(str, Enum):
    """Failure categories reported by the store.

    String enum so kinds compare equal to their plain names in logs and tests.
    """

    INVALID_ARGUMENT = "invalid_argument"
    REPOSITORY_UNAVAILABLE = "repository_unavailable"
    DOCUMENT_NOT_FOUND = "document_not_found"
    STORAGE_WRITE_FAILURE = "storage_write_failure"
    STORAGE_READ_FAILURE = "storage_read_failure"


class DocumentManagerError(Exception):
    """Base exception for Document Manager errors."""

    kind: ErrorKind | None = None


class ConfigError(DocumentManagerError):
    """Configuration error."""

    pass


class InvalidArgumentError(DocumentManagerError):
    """Malformed document id or revision, or missing file/directory argument."""

    kind = ErrorKind.INVALID_ARGUMENT


class RepositoryUnavailableError(DocumentManagerError):
    """Repository root missing or a shard directory cannot be listed."""

    kind = ErrorKind.REPOSITORY_UNAVAILABLE


class DocumentNotFoundError(DocumentManagerError):
    """No revision or no payload file where one was expected."""

    kind = ErrorKind.DOCUMENT_NOT_FOUND


class StorageWriteError(DocumentManagerError):
    """Creating directories or writing a file failed."""

    kind = ErrorKind.STORAGE_WRITE_FAILURE


class StorageReadError(DocumentManagerError):
    """Reading a stored payload failed."""

    kind = ErrorKind.STORAGE_READ_FAILURE


ERRORS_BY_KIND: dict[ErrorKind, type[DocumentManagerError]] = {
    ErrorKind.INVALID_ARGUMENT: InvalidArgumentError,
    ErrorKind.REPOSITORY_UNAVAILABLE: RepositoryUnavailableError,
    ErrorKind.DOCUMENT_NOT_FOUND: DocumentNotFoundError,
    ErrorKind.STORAGE_WRITE_FAILURE: StorageWriteError,
    ErrorKind.STORAGE_READ_FAILURE: StorageReadError,
}
