"""Scratch workspace for staging snapshot files.

The workspace directory is shared across runs and created lazily. Each file
inside it is owned by the run that created it and is removed when that run
ends, whether it succeeded or not.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from dbsnapshot.errors import WorkspaceError

logger = logging.getLogger(__name__)

WORKSPACE_DIRNAME = "db_snapshots"


def ensure_dir(path: Path) -> Path:
    """Create a directory (and parents) if absent. Idempotent."""
    path = Path(path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise WorkspaceError(f"Cannot create workspace directory {path}: {e}") from e
    return path


def workspace_dir(storage_path: Path) -> Path:
    """Scratch directory under the host storage path."""
    return ensure_dir(Path(storage_path) / WORKSPACE_DIRNAME)


class ScopedFile:
    """Handle to a temp file whose location may move during a run.

    Every path assigned to the handle is remembered so cleanup also catches
    partial output left at an earlier location.
    """

    def __init__(self, path: Path):
        self._paths: list[Path] = [Path(path)]

    @property
    def path(self) -> Path:
        return self._paths[-1]

    def track(self, path: Path) -> None:
        """Also remove ``path`` on release without making it current."""
        path = Path(path)
        if path not in self._paths:
            self._paths.insert(0, path)

    def move_to(self, path: Path) -> Path:
        path = Path(path)
        if path in self._paths:
            self._paths.remove(path)
        self._paths.append(path)
        return path

    def release(self) -> None:
        for path in reversed(self._paths):
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                logger.warning(f"Failed to remove temp file {path}: {e}")
            else:
                logger.debug(f"Released temp file {path}")


@contextmanager
def scoped_file(directory: Path, name: str) -> Iterator[ScopedFile]:
    """Yield a temp file handle inside ``directory``, removed on exit."""
    directory = ensure_dir(directory)
    handle = ScopedFile(directory / name)
    try:
        yield handle
    finally:
        handle.release()
