"""Test configuration and shared fixtures for Document Manager tests."""

import pytest

from document_manager import DocumentStore


@pytest.fixture
def repo_dir(tmp_path):
    """Empty, pre-existing repository root."""
    path = tmp_path / "repo"
    path.mkdir()
    return path


@pytest.fixture
def src_dir(tmp_path):
    """Directory holding files to add."""
    path = tmp_path / "src"
    path.mkdir()
    return path


@pytest.fixture
def out_dir(tmp_path):
    """Checkout destination."""
    path = tmp_path / "out"
    path.mkdir()
    return path


@pytest.fixture
def report(src_dir):
    """A small binary document."""
    path = src_dir / "report.pdf"
    path.write_bytes(b"%PDF-1.4\n\x00\x01\x02binary payload\n")
    return path


@pytest.fixture
def store(repo_dir):
    """Store on a fresh repository starting at id 1."""
    return DocumentStore(repository_path=repo_dir)
