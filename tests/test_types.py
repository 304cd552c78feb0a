"""Tests for snapshot artifact naming."""

from dbsnapshot.types import SnapshotArtifact


class TestSnapshotArtifact:
    def test_uncompressed_key(self):
        assert SnapshotArtifact(base_name="backup.sql").key == "backup.sql"

    def test_compressed_key(self):
        assert SnapshotArtifact(base_name="backup.sql", compressed=True).key == "backup.sql.gz"

    def test_equality(self):
        assert SnapshotArtifact(base_name="a.sql", compressed=True) == SnapshotArtifact(
            base_name="a.sql", compressed=True
        )
