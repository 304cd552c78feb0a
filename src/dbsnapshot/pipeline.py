"""Snapshot transfer pipeline.

``create``: dump -> (compress) -> upload.
``load``:   exists -> download -> (decompress) -> restore.

Each run stages its file in the shared workspace directory and removes it
on every exit path. Concurrent runs against the same snapshot name are not
coordinated.
"""

import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Callable

from dbsnapshot.compression import Compressor, compressed_path, decompressed_path
from dbsnapshot.config import DbSnapshotConfig
from dbsnapshot.engine.base import DumpEngine
from dbsnapshot.errors import DumpError, NotFoundError, StorageError
from dbsnapshot.naming import check_name, render
from dbsnapshot.storage.base import StorageClient
from dbsnapshot.types import SnapshotArtifact, StoredSnapshot
from dbsnapshot.workspace import scoped_file

logger = logging.getLogger(__name__)


class SnapshotPipeline:
    """Creates, loads and lists database snapshots."""

    def __init__(
        self,
        config: DbSnapshotConfig,
        storage: StorageClient,
        engine: DumpEngine,
        compressor: Compressor,
        workspace_dir: Path,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.config = config
        self.storage = storage
        self.engine = engine
        self.compressor = compressor
        self.workspace_dir = Path(workspace_dir)
        self.clock = clock

    @property
    def compress(self) -> bool:
        return self.config.snapshot.compress

    def resolve_name(self, filename: str | None = None) -> str:
        """Explicit filename, or the configured template rendered at the current time."""
        if filename:
            return check_name(filename)
        return render(self.config.snapshot.filename, self.clock())

    def create(self, filename: str | None = None) -> SnapshotArtifact:
        """Dump the database and upload it. Returns the stored artifact."""
        base_name = self.resolve_name(filename)
        raw = SnapshotArtifact(base_name=base_name)

        with scoped_file(self.workspace_dir, raw.key) as temp:
            logger.info(f"Dumping database to {temp.path}")
            self.engine.dump(temp.path)
            if not temp.path.exists():
                raise DumpError(f"Dump produced no file at {temp.path}")
            artifact = raw

            if self.compress:
                temp.track(compressed_path(temp.path))
                temp.move_to(self.compressor.compress(temp.path))
                artifact = SnapshotArtifact(base_name=base_name, compressed=True)

            logger.info(f"Uploading {artifact.key}")
            with open(temp.path, "rb") as f:
                self.storage.put(artifact.key, f)

        logger.info(f"Snapshot {artifact.key} created")
        return artifact

    def load(self, filename: str | None = None) -> SnapshotArtifact:
        """Download a snapshot and restore it. Returns the loaded artifact."""
        artifact = SnapshotArtifact(base_name=self.resolve_name(filename), compressed=self.compress)

        if not self.storage.exists(artifact.key):
            raise NotFoundError(f"Snapshot {artifact.key} does not exist")

        with scoped_file(self.workspace_dir, artifact.key) as temp:
            logger.info(f"Downloading {artifact.key} to {temp.path}")
            self._download(artifact.key, temp.path)

            if artifact.compressed:
                temp.track(decompressed_path(temp.path))
                temp.move_to(self.compressor.decompress(temp.path))

            logger.info(f"Restoring database from {temp.path}")
            self.engine.restore(temp.path)

        logger.info(f"Snapshot {artifact.key} loaded")
        return artifact

    def list_snapshots(self) -> list[StoredSnapshot]:
        """List stored snapshots with a single storage call."""
        return self.storage.list()

    def _download(self, key: str, dest: Path) -> None:
        stream = self.storage.get(key)
        try:
            with open(dest, "wb") as f:
                shutil.copyfileobj(stream, f)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to download {key}: {e}") from e
        finally:
            stream.close()
