"""Tests for sharded path derivation and revision auto-discovery."""

from pathlib import Path

import pytest

from document_manager.errors import (
    DocumentNotFoundError,
    InvalidArgumentError,
    RepositoryUnavailableError,
)
from document_manager.services.paths import (
    MAX_DOC_ID,
    MAX_REVISION,
    RevisionPolicy,
    document_dir,
    list_revisions,
    repository_path,
    revision_segment,
    shard_segments,
)


class TestShardSegments:
    """Shard directory names for document ids."""

    @pytest.mark.parametrize(
        "doc_id,expected",
        [
            (1, ["001"]),
            (42, ["042"]),
            (999, ["999"]),
            (1000, ["k001", "000"]),
            (123456, ["k123", "456"]),
            (999999, ["k999", "999"]),
            (1000000, ["M001", "k000", "000"]),
            (1234567, ["M001", "k234", "567"]),
            (MAX_DOC_ID, ["M999", "k999", "999"]),
        ],
    )
    def test_segments(self, doc_id, expected):
        """Test M/k segments appear only above their thresholds."""
        assert shard_segments(doc_id) == expected

    def test_ones_segment_is_id_mod_1000(self):
        """Test the last segment is always id % 1000 padded to 3 digits."""
        for doc_id in (7, 1007, 5_000_007, 31_415_926):
            assert shard_segments(doc_id)[-1] == f"{doc_id % 1000:03d}"

    @pytest.mark.parametrize("doc_id", [0, -1, MAX_DOC_ID + 1, "12", 1.0, None, True])
    def test_invalid_ids(self, doc_id):
        """Test ids outside 1..MAX_DOC_ID or of the wrong type are rejected."""
        with pytest.raises(InvalidArgumentError):
            shard_segments(doc_id)

    def test_revision_segment(self):
        """Test revision names are zero padded and bounded."""
        assert revision_segment(0) == "000"
        assert revision_segment(12) == "012"
        assert revision_segment(MAX_REVISION) == "999"
        with pytest.raises(InvalidArgumentError):
            revision_segment(MAX_REVISION + 1)
        with pytest.raises(InvalidArgumentError):
            revision_segment(-1)


class TestRepositoryPath:
    """Resolving revision directories."""

    def test_explicit_revision(self, repo_dir):
        """Test an explicit revision is used without checking it exists."""
        path = repository_path(repo_dir, 1234567, 3)
        assert path == repo_dir / "M001" / "k234" / "567" / "003"
        assert not path.exists()

    def test_explicit_revision_zero(self, repo_dir):
        """Test revision 0 is explicit, not a request for auto-discovery."""
        assert repository_path(repo_dir, 1, 0) == repo_dir / "001" / "000"

    def test_accepts_string_root(self, repo_dir):
        """Test the root may be given as a string."""
        assert repository_path(str(repo_dir), 5, 1) == repo_dir / "005" / "001"

    def test_missing_root(self, tmp_path):
        """Test a root that doesn't exist is reported as unavailable."""
        with pytest.raises(RepositoryUnavailableError, match="does not exist"):
            repository_path(tmp_path / "missing", 1, 0)

    def test_root_is_a_file(self, tmp_path):
        """Test a root that is a plain file is unavailable."""
        not_a_dir = tmp_path / "file"
        not_a_dir.write_text("x")
        with pytest.raises(RepositoryUnavailableError):
            repository_path(not_a_dir, 1, 0)

    def test_invalid_id_checked_before_root(self, tmp_path):
        """Test a bad id fails as an invalid argument even without a root."""
        with pytest.raises(InvalidArgumentError):
            repository_path(tmp_path / "missing", 0)

    def test_idempotent(self, repo_dir):
        """Test identical inputs give identical paths."""
        (repo_dir / "k002" / "345" / "001").mkdir(parents=True)
        assert repository_path(repo_dir, 2345) == repository_path(repo_dir, 2345)
        assert repository_path(repo_dir, 2345, 7) == repository_path(repo_dir, 2345, 7)


class TestRevisionDiscovery:
    """Auto-discovery of the revision when none is given."""

    @pytest.fixture
    def doc_dir(self, repo_dir):
        path = document_dir(repo_dir, 17)
        for name in ("000", "001", "002"):
            (path / name).mkdir(parents=True)
        return path

    def test_lowest_by_default(self, repo_dir, doc_dir):
        """Test the lowest numeric revision is picked by default."""
        assert repository_path(repo_dir, 17) == doc_dir / "000"

    def test_highest_policy(self, repo_dir, doc_dir):
        """Test the highest policy picks the latest revision."""
        path = repository_path(repo_dir, 17, policy=RevisionPolicy.HIGHEST)
        assert path == doc_dir / "002"

    def test_numeric_not_lexicographic(self, repo_dir):
        """Test revisions compare as numbers."""
        doc_dir = document_dir(repo_dir, 3)
        for name in ("9", "10", "0100"):
            (doc_dir / name).mkdir(parents=True)
        assert list_revisions(repo_dir, 3) == [9, 10, 100]
        assert repository_path(repo_dir, 3) == doc_dir / "009"
        assert repository_path(repo_dir, 3, policy=RevisionPolicy.HIGHEST) == doc_dir / "100"

    def test_ignores_non_numeric_entries(self, repo_dir, doc_dir):
        """Test only purely numeric names count as revisions."""
        (doc_dir / "abc").mkdir()
        (doc_dir / "01a").mkdir()
        (doc_dir / ".hidden").mkdir()
        assert list_revisions(repo_dir, 17) == [0, 1, 2]

    def test_missing_document_directory(self, repo_dir):
        """Test a document that was never stored can't be listed."""
        with pytest.raises(RepositoryUnavailableError, match="Could not open directory"):
            repository_path(repo_dir, 99)

    def test_no_revisions(self, repo_dir):
        """Test an existing document directory without revisions."""
        document_dir(repo_dir, 8).mkdir(parents=True)
        with pytest.raises(DocumentNotFoundError):
            repository_path(repo_dir, 8)

    def test_document_dir_is_ones_level(self, repo_dir):
        """Test document_dir stops above the revision segment."""
        assert document_dir(repo_dir, 1001) == Path(repo_dir) / "k001" / "001"
