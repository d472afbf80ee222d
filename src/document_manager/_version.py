"""Version information for Document Manager."""

from importlib.metadata import PackageNotFoundError, version


def _get_version_from_metadata() -> str:
    """Get version from package metadata."""
    try:
        return version("document-manager")
    except PackageNotFoundError:
        return "0.0.0-unknown"


def get_version() -> str:
    """Get the installed version string."""
    return _get_version_from_metadata()


__version__ = _get_version_from_metadata()
