"""Storage backends for snapshots."""

from dbsnapshot.config import StorageConfig
from dbsnapshot.storage.base import StorageClient
from dbsnapshot.storage.local import LocalStorageClient


def create_storage_client(config: StorageConfig) -> StorageClient:
    """Create a storage client from config."""
    if config.backend == "local":
        return LocalStorageClient(config.local_path)

    from dbsnapshot.storage.s3 import S3StorageClient

    return S3StorageClient(config)


__all__ = ["StorageClient", "LocalStorageClient", "create_storage_client"]
