"""Storage client protocol."""

from typing import BinaryIO, Protocol

from dbsnapshot.types import StoredSnapshot


class StorageClient(Protocol):
    """Protocol for snapshot object storage.

    Keys are relative to the configured path prefix.
    """

    def put(self, key: str, data: BinaryIO) -> None:
        """Upload a stream under ``key``. Raises StorageError."""
        ...

    def get(self, key: str) -> BinaryIO:
        """Open a stored object for reading. Raises NotFoundError or StorageError."""
        ...

    def exists(self, key: str) -> bool:
        """Check if an object exists. Raises StorageError on connectivity failure."""
        ...

    def list(self) -> list[StoredSnapshot]:
        """List stored snapshots."""
        ...
