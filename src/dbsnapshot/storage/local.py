"""Local filesystem snapshot storage."""

import shutil
from datetime import datetime
from pathlib import Path
from typing import BinaryIO

from dbsnapshot.errors import NotFoundError, StorageError
from dbsnapshot.types import StoredSnapshot


class LocalStorageClient:
    """Directory-backed storage, for development and tests."""

    def __init__(self, base_path: Path):
        self.base_path = Path(base_path)
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create storage directory {self.base_path}: {e}") from e

    def put(self, key: str, data: BinaryIO) -> None:
        store_path = self._key_to_path(key)
        try:
            store_path.parent.mkdir(parents=True, exist_ok=True)
            with open(store_path, "wb") as f:
                shutil.copyfileobj(data, f)
        except OSError as e:
            store_path.unlink(missing_ok=True)
            raise StorageError(f"Failed to store {key}: {e}") from e

    def get(self, key: str) -> BinaryIO:
        store_path = self._key_to_path(key)
        if not store_path.is_file():
            raise NotFoundError(f"Snapshot {key} does not exist")
        try:
            return open(store_path, "rb")
        except OSError as e:
            raise StorageError(f"Failed to read {key}: {e}") from e

    def exists(self, key: str) -> bool:
        return self._key_to_path(key).is_file()

    def list(self) -> list[StoredSnapshot]:
        snapshots = []
        for path in sorted(self.base_path.rglob("*")):
            if path.is_file():
                stat = path.stat()
                snapshots.append(
                    StoredSnapshot(
                        name=path.relative_to(self.base_path).as_posix(),
                        size=stat.st_size,
                        last_modified=datetime.fromtimestamp(stat.st_mtime),
                    )
                )
        return snapshots

    def _key_to_path(self, key: str) -> Path:
        """Convert key to local path, refusing keys that escape the base directory."""
        base = self.base_path.resolve()
        path = (base / key).resolve()
        if path == base or base not in path.parents:
            raise StorageError(f"Invalid storage key: {key!r}")
        return path
