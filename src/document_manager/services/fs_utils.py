"""Filesystem utilities for directory creation, atomic copies and listings."""

import logging
import os
import shutil
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

HIDDEN_PREFIX = "."


def _is_path_like(path) -> bool:
    return isinstance(path, (str, os.PathLike)) and bool(path)


def is_directory(path: str | Path | None) -> bool:
    """Check that path is given and names an existing directory."""
    return _is_path_like(path) and Path(path).is_dir()


def is_regular_file(path: str | Path | None) -> bool:
    """Check that path is given and names an existing regular file."""
    return _is_path_like(path) and Path(path).is_file()


def ensure_dir(
    path: str | Path, mode: int = 0o700, created: list[Path] | None = None
) -> list[Path]:
    """Create a directory and every missing parent with the given mode.

    Unlike ``Path.mkdir(parents=True)``, the mode applies to the parents
    too (the process umask still applies).

    Args:
        path: Directory to create
        mode: Permission bits for each directory created
        created: List that each new directory is appended to as soon as it
            exists, so the caller still sees them if a deeper level fails

    Returns:
        Directories created by this call, outermost first

    Raises:
        OSError: If a component can't be created or exists as a non-directory
    """
    path = Path(path)
    missing = []
    current = path
    while not current.is_dir():
        missing.append(current)
        if current.parent == current:
            break
        current = current.parent

    if created is None:
        created = []
    for directory in reversed(missing):
        try:
            directory.mkdir(mode=mode)
        except FileExistsError:
            # Lost a race with another writer, or a file is in the way
            if not directory.is_dir():
                raise
            continue
        created.append(directory)
        logger.debug(f"Created directory {directory} with mode {mode:#o}")
    return created


def atomic_copy(src: str | Path, dest: str | Path) -> None:
    """Copy a file atomically using temp file + rename.

    The bytes are written to a hidden temporary file next to dest and
    renamed into place, so readers never see a partial payload.

    Args:
        src: Source file
        dest: Target file path (its parent must exist)

    Raises:
        OSError: If reading src, writing or renaming fails
    """
    src = Path(src)
    dest = Path(dest)

    with open(src, "rb") as source:
        with tempfile.NamedTemporaryFile(
            dir=dest.parent, prefix=f"{HIDDEN_PREFIX}{dest.name}.", suffix=".tmp", delete=False
        ) as tmp:
            tmp_path = Path(tmp.name)
            try:
                shutil.copyfileobj(source, tmp)
                tmp.flush()
                os.fsync(tmp.fileno())
            except BaseException:
                tmp.close()
                tmp_path.unlink(missing_ok=True)
                raise

    try:
        tmp_path.replace(dest)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    logger.debug(f"Atomically copied {src} to {dest}")


def list_payload_files(directory: str | Path) -> list[str]:
    """List regular, non-hidden files in a directory.

    Args:
        directory: Directory to list

    Returns:
        File names in lexicographic order

    Raises:
        OSError: If the directory can't be listed
    """
    with os.scandir(directory) as entries:
        names = [
            entry.name
            for entry in entries
            if entry.is_file() and not entry.name.startswith(HIDDEN_PREFIX)
        ]
    return sorted(names)


def remove_created_dirs(dirs: list[Path]) -> None:
    """Remove directories created by a failed write, innermost first.

    Any files left inside are removed too. Failures are logged rather than
    raised since the caller is already reporting an error.
    """
    for directory in reversed(dirs):
        try:
            shutil.rmtree(directory)
            logger.debug(f"Removed {directory}")
        except FileNotFoundError:
            continue
        except OSError as e:
            logger.error(f"Failed to remove {directory} during rollback: {e}")
