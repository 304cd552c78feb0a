"""Exception types raised by the snapshot pipeline and its collaborators."""


class SnapshotError(Exception):
    """Base class for all dbsnapshot errors."""


class ConfigError(SnapshotError):
    """Configuration file is missing or invalid."""


class TemplateError(SnapshotError):
    """Filename template could not be rendered."""


class WorkspaceError(SnapshotError, OSError):
    """Scratch directory could not be created or used."""


class DumpError(SnapshotError):
    """Database dump failed."""


class RestoreError(SnapshotError):
    """Database restore failed."""


class CompressionError(SnapshotError):
    """Compressing or decompressing a snapshot failed."""

    def __init__(self, message: str, missing_binary: bool = False):
        super().__init__(message)
        self.missing_binary = missing_binary


class StorageError(SnapshotError):
    """Object storage operation failed."""


class NotFoundError(StorageError):
    """Requested snapshot does not exist in storage."""
