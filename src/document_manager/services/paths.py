"""Path resolution for the sharded document repository.

Every document lives under a directory derived from its id:

    root/[M###]/[k###]/###/<revision>

The millions segment only exists for ids above 999,999 and the thousands
segment only for ids above 999, so no directory level holds more than about
a thousand entries however large the corpus grows.
"""

import logging
import os
from enum import Enum
from pathlib import Path

from ..errors import DocumentNotFoundError, InvalidArgumentError, RepositoryUnavailableError

logger = logging.getLogger(__name__)

# Widest values the fixed 3-digit segments can represent
MAX_DOC_ID = 999_999_999
MAX_REVISION = 999


class RevisionPolicy(str, Enum):
    """Which revision auto-discovery picks when none is requested."""

    LOWEST = "lowest"
    HIGHEST = "highest"


def validate_doc_id(doc_id: int) -> int:
    """Check that doc_id is an integer in 1..MAX_DOC_ID.

    Raises:
        InvalidArgumentError: If the id is missing, not an int or out of range
    """
    if isinstance(doc_id, bool) or not isinstance(doc_id, int):
        raise InvalidArgumentError(f"Invalid document id: {doc_id!r}")
    if doc_id < 1 or doc_id > MAX_DOC_ID:
        raise InvalidArgumentError(f"Document id {doc_id} outside 1..{MAX_DOC_ID}")
    return doc_id


def validate_revision(revision: int) -> int:
    """Check that revision is an integer in 0..MAX_REVISION.

    Raises:
        InvalidArgumentError: If the revision is not an int or out of range
    """
    if isinstance(revision, bool) or not isinstance(revision, int):
        raise InvalidArgumentError(f"Invalid revision: {revision!r}")
    if revision < 0 or revision > MAX_REVISION:
        raise InvalidArgumentError(f"Revision {revision} outside 0..{MAX_REVISION}")
    return revision


def shard_segments(doc_id: int) -> list[str]:
    """Get the shard directory names for a document id.

    Args:
        doc_id: Positive document id

    Returns:
        Segment names from the root down, e.g. ["M001", "k234", "567"]
    """
    doc_id = validate_doc_id(doc_id)
    segments = []
    if doc_id > 999_999:
        segments.append(f"M{doc_id // 1_000_000:03d}")
    if doc_id > 999:
        segments.append(f"k{doc_id // 1000 % 1000:03d}")
    segments.append(f"{doc_id % 1000:03d}")
    return segments


def revision_segment(revision: int) -> str:
    """Get the zero-padded directory name for a revision."""
    return f"{validate_revision(revision):03d}"


def document_dir(root: str | Path, doc_id: int) -> Path:
    """Get the ones-level shard directory holding all revisions of a document.

    Args:
        root: Repository root
        doc_id: Positive document id

    Returns:
        Path to the document directory (not checked for existence)
    """
    return Path(root).joinpath(*shard_segments(doc_id))


def _require_root(root: str | Path) -> Path:
    root_path = Path(root) if root else None
    if root_path is None or not root_path.is_dir():
        raise RepositoryUnavailableError(f"Document repository '{root}' does not exist")
    return root_path


def list_revisions(root: str | Path, doc_id: int) -> list[int]:
    """List the revisions present for a document.

    Only entries whose names are made of ASCII digits count as revisions.

    Args:
        root: Repository root
        doc_id: Positive document id

    Returns:
        Revision numbers in ascending order

    Raises:
        InvalidArgumentError: If doc_id is invalid
        RepositoryUnavailableError: If the root or document directory can't be read
    """
    validate_doc_id(doc_id)
    doc_dir = document_dir(_require_root(root), doc_id)
    try:
        with os.scandir(doc_dir) as entries:
            names = [entry.name for entry in entries]
    except OSError as e:
        raise RepositoryUnavailableError(
            f"Could not open directory '{doc_dir}' to find the revision number: {e}"
        ) from e

    return sorted(int(name) for name in names if name.isascii() and name.isdigit())


def repository_path(
    root: str | Path,
    doc_id: int,
    revision: int | None = None,
    policy: RevisionPolicy = RevisionPolicy.LOWEST,
) -> Path:
    """Resolve the directory of one revision of a document.

    Args:
        root: Repository root, must be an existing directory
        doc_id: Positive document id
        revision: Revision number, or None to pick one from what is on disk
        policy: Which revision to pick when revision is None

    Returns:
        Path to the revision directory. The directory itself is neither
        created nor checked when an explicit revision is given.

    Raises:
        InvalidArgumentError: If doc_id or revision is invalid
        RepositoryUnavailableError: If the root is missing or the document
            directory can't be listed
        DocumentNotFoundError: If auto-discovery finds no revision
    """
    validate_doc_id(doc_id)
    root_path = _require_root(root)

    if revision is None:
        revisions = list_revisions(root_path, doc_id)
        if not revisions:
            raise DocumentNotFoundError(f"No revisions stored for document {doc_id}")
        revision = revisions[-1] if policy == RevisionPolicy.HIGHEST else revisions[0]
        # Directory names like "1000" parse but can't be written back as 3 digits
        if revision > MAX_REVISION:
            raise DocumentNotFoundError(
                f"Revision directory {revision} of document {doc_id} is out of range"
            )

    path = document_dir(root_path, doc_id) / revision_segment(revision)
    logger.debug(f"Resolved document {doc_id} revision {revision} to {path}")
    return path
