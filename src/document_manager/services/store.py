"""Revision-controlled document store on a sharded directory tree.

Documents are registered with add(), which hands out a new integer id, and
read back with checkout(). Each (id, revision) pair maps to its own
directory holding a single payload file, see paths.repository_path().
"""

import logging
import threading
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from ..config import StoreConfig
from ..errors import (
    DocumentManagerError,
    DocumentNotFoundError,
    InvalidArgumentError,
    RepositoryUnavailableError,
    StorageReadError,
    StorageWriteError,
)
from . import paths
from .fs_utils import (
    atomic_copy,
    ensure_dir,
    is_directory,
    is_regular_file,
    list_payload_files,
    remove_created_dirs,
)
from .reporting import ErrorReporter, OperationError, OperationResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


class IdAllocator:
    """Thread-safe monotonic document id counter.

    An allocated id is never handed out again, whether or not the add that
    took it succeeds.
    """

    def __init__(self, next_id: int = 1):
        self._next_id = next_id
        self._lock = threading.Lock()

    def allocate(self) -> int:
        with self._lock:
            if self._next_id > paths.MAX_DOC_ID:
                raise StorageWriteError(f"Document id space exhausted at {paths.MAX_DOC_ID}")
            doc_id = self._next_id
            self._next_id += 1
            return doc_id

    @property
    def next_id(self) -> int:
        with self._lock:
            return self._next_id


class DocumentStore:
    """
    Manages a collection of revision-controlled documents.

    Public operations never raise for expected failures. They return an
    OperationResult and record the failure message, retrievable with
    get_last_error() from the same thread.
    """

    def __init__(self, config: StoreConfig | None = None, **options):
        """Initialize the store.

        Args:
            config: Store configuration; built from options when omitted
            **options: StoreConfig fields (repository_path, repository_permissions,
                next_id, revision_policy, rollback_on_failure)
        """
        if config is None:
            config = StoreConfig(**options)
        elif options:
            config = StoreConfig(**{**config.model_dump(), **options})
        self._config = config
        self._ids = IdAllocator(config.next_id)
        self._errors = ErrorReporter()
        logger.info(
            f"Initialized DocumentStore at {config.repository_path} "
            f"(next id {config.next_id}, mode {config.repository_permissions:#o})"
        )

    @classmethod
    def from_yaml(cls, path: Path) -> "DocumentStore":
        """Create a store from a YAML configuration file.

        Raises:
            ConfigError: If the file is missing or invalid
        """
        return cls(StoreConfig.from_yaml(path))

    @property
    def config(self) -> StoreConfig:
        return self._config

    @property
    def root(self) -> Path:
        return self._config.repository_path

    @property
    def next_id(self) -> int:
        """Id the next successful allocation will return."""
        return self._ids.next_id

    def snapshot_config(self) -> StoreConfig:
        """Get the configuration with next_id advanced to the current counter.

        Save it (StoreConfig.to_yaml) to continue numbering after a restart.
        """
        return self._config.model_copy(update={"next_id": self.next_id})

    def get_last_error(self) -> str:
        """Get the message of this thread's most recent failed call, or ""."""
        return self._errors.get_last_error()

    def _run(self, operation: str, fn: Callable[[], T]) -> OperationResult[T]:
        """Run an operation, turning store errors into a failed result."""
        self._errors.clear()
        try:
            return OperationResult.success(fn())
        except DocumentManagerError as e:
            error = OperationError.from_exception(e)
            self._errors.record(error)
            logger.warning(f"{operation} failed ({error.kind.value}): {error.message}")
            return OperationResult.failure(error)

    def repository_path(self, doc_id: int, revision: int | None = None) -> OperationResult[Path]:
        """Get the directory of a document revision.

        Args:
            doc_id: Positive document id
            revision: Revision number, or None to discover it on disk using
                the configured revision policy

        Returns:
            Result holding the revision directory path
        """
        return self._run(
            "repository_path",
            lambda: paths.repository_path(
                self.root, doc_id, revision, self._config.revision_policy
            ),
        )

    def revisions(self, doc_id: int) -> OperationResult[list[int]]:
        """List the revision numbers stored for a document."""
        return self._run("revisions", lambda: paths.list_revisions(self.root, doc_id))

    def add(self, source_file: str | Path, revision: int = 0) -> OperationResult[int]:
        """Add a new document to the repository.

        To register a document id without real content, add a zero-byte
        file.

        Args:
            source_file: File to store; its base name is kept
            revision: Revision the document starts at

        Returns:
            Result holding the new document id
        """
        return self._run("add", lambda: self._add(source_file, revision))

    def _add(self, source_file: str | Path, revision: int) -> int:
        if not is_regular_file(source_file):
            raise InvalidArgumentError(f"Invalid filename specified to add(): {source_file!r}")
        paths.validate_revision(revision)
        if not is_directory(self.root):
            raise RepositoryUnavailableError(f"Document repository '{self.root}' does not exist")

        source = Path(source_file)
        doc_id = self._ids.allocate()
        target_dir = paths.repository_path(self.root, doc_id, revision)

        created: list[Path] = []
        try:
            try:
                ensure_dir(target_dir, self._config.repository_permissions, created)
            except OSError as e:
                raise StorageWriteError(f"Error adding '{source}' to repository: {e}") from e

            try:
                existing = list_payload_files(target_dir)
            except OSError as e:
                raise StorageWriteError(f"Error adding '{source}' to repository: {e}") from e
            if existing:
                raise StorageWriteError(
                    f"Revision directory '{target_dir}' already holds '{existing[0]}'"
                )

            try:
                atomic_copy(source, target_dir / source.name)
            except OSError as e:
                raise StorageWriteError(f"Error copying '{source}' to repository: {e}") from e
        except StorageWriteError:
            if self._config.rollback_on_failure and created:
                logger.warning(f"Rolling back {len(created)} directories for document {doc_id}")
                remove_created_dirs(created)
            raise

        logger.info(f"Added '{source.name}' as document {doc_id} revision {revision}")
        return doc_id

    def checkout(
        self, dest_dir: str | Path, doc_id: int, revision: int | None = None
    ) -> OperationResult[str]:
        """Check out a copy of a document into a directory.

        Args:
            dest_dir: Existing directory to copy the document into
            doc_id: Positive document id
            revision: Revision to fetch; when None the configured revision
                policy picks one from what is stored

        Returns:
            Result holding the base name of the file copied into dest_dir
        """
        return self._run("checkout", lambda: self._checkout(dest_dir, doc_id, revision))

    def _checkout(self, dest_dir: str | Path, doc_id: int, revision: int | None) -> str:
        try:
            paths.validate_doc_id(doc_id)
        except InvalidArgumentError as e:
            raise InvalidArgumentError(f"Invalid doc_id specified to checkout(): {doc_id!r}") from e
        if not is_directory(dest_dir):
            raise InvalidArgumentError(f"Invalid dir specified to checkout(): {dest_dir!r}")

        source_dir = paths.repository_path(
            self.root, doc_id, revision, self._config.revision_policy
        )
        try:
            files = list_payload_files(source_dir)
        except OSError as e:
            raise DocumentNotFoundError(f"Could not open '{source_dir}' to checkout file: {e}") from e
        if not files:
            raise DocumentNotFoundError(f"No document file found in '{source_dir}'")

        filename = files[0]
        source = source_dir / filename
        dest = Path(dest_dir) / filename
        try:
            atomic_copy(source, dest)
        except OSError as e:
            # Tell apart a failing read of the payload from a failing write
            if _readable(source):
                raise StorageWriteError(
                    f"Error copying '{filename}' to destination '{dest_dir}': {e}"
                ) from e
            raise StorageReadError(f"Error reading '{source}': {e}") from e

        logger.info(f"Checked out document {doc_id} as '{filename}' into {dest_dir}")
        return filename


def _readable(path: Path) -> bool:
    try:
        with open(path, "rb") as f:
            f.read(1)
        return True
    except OSError:
        return False
