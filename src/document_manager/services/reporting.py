"""Per-call results and last-error reporting.

Store operations return an OperationResult instead of raising, so expected
failures never cross the public API as exceptions. The most recent failure
message is also kept per thread for callers that prefer to ask afterwards.
"""

import threading
from dataclasses import dataclass
from typing import Generic, TypeVar

from ..errors import ERRORS_BY_KIND, DocumentManagerError, ErrorKind

T = TypeVar("T")


@dataclass(frozen=True)
class OperationError:
    """Failure reported by a store operation."""

    kind: ErrorKind
    message: str

    @classmethod
    def from_exception(cls, exc: DocumentManagerError) -> "OperationError":
        return cls(kind=exc.kind, message=str(exc))

    def to_exception(self) -> DocumentManagerError:
        return ERRORS_BY_KIND[self.kind](self.message)

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """Value of a successful operation, or the error of a failed one."""

    value: T | None = None
    error: OperationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, raising the matching exception on failure.

        Raises:
            DocumentManagerError: Subclass matching the error kind
        """
        if self.error is not None:
            raise self.error.to_exception()
        return self.value

    @classmethod
    def success(cls, value: T) -> "OperationResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: OperationError) -> "OperationResult[T]":
        return cls(error=error)


class ErrorReporter:
    """Holds the last error message, one slot per thread.

    Each public store call clears the slot on entry and records a message
    on failure, so the slot is empty after a successful call.
    """

    def __init__(self):
        self._local = threading.local()

    def clear(self) -> None:
        self._local.error = None

    def record(self, error: OperationError) -> None:
        self._local.error = error

    @property
    def last_error(self) -> OperationError | None:
        return getattr(self._local, "error", None)

    def get_last_error(self) -> str:
        """Get the message of the most recent failed call, or ""."""
        error = self.last_error
        return error.message if error else ""
