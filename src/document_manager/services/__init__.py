"""Path resolution, filesystem helpers and the document store."""

from .paths import MAX_DOC_ID, MAX_REVISION, RevisionPolicy, repository_path
from .reporting import ErrorReporter, OperationError, OperationResult

__all__ = [
    "MAX_DOC_ID",
    "MAX_REVISION",
    "RevisionPolicy",
    "repository_path",
    "ErrorReporter",
    "OperationError",
    "OperationResult",
]
