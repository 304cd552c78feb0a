"""Core type definitions for dbsnapshot."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

GZIP_SUFFIX = ".gz"


class SnapshotArtifact(BaseModel):
    """A snapshot identified by its base name and compression state.

    The storage key and the local temp path always carry the same suffix.
    """

    model_config = ConfigDict(frozen=True)

    base_name: str
    compressed: bool = False

    @property
    def key(self) -> str:
        if self.compressed:
            return self.base_name + GZIP_SUFFIX
        return self.base_name


class StoredSnapshot(BaseModel):
    """A snapshot object as listed by a storage backend."""

    name: str
    size: int | None = None
    last_modified: datetime | None = None
