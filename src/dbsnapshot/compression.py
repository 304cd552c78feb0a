"""Snapshot compression through an external gzip binary."""

import logging
import subprocess
from pathlib import Path
from typing import Protocol

from dbsnapshot.errors import CompressionError
from dbsnapshot.types import GZIP_SUFFIX

logger = logging.getLogger(__name__)


class Compressor(Protocol):
    """Protocol for compressing snapshot files in place."""

    def compress(self, path: Path) -> Path:
        """Compress ``path``. Returns ``path`` with the ``.gz`` suffix added."""
        ...

    def decompress(self, path: Path) -> Path:
        """Decompress ``path``. Returns ``path`` with the ``.gz`` suffix stripped."""
        ...


def compressed_path(path: Path) -> Path:
    path = Path(path)
    return path.with_name(path.name + GZIP_SUFFIX)


def decompressed_path(path: Path) -> Path:
    path = Path(path)
    if not path.name.endswith(GZIP_SUFFIX) or path.name == GZIP_SUFFIX:
        raise CompressionError(f"Not a gzip file name: {path}")
    return path.with_name(path.name[: -len(GZIP_SUFFIX)])


class GzipCompressor:
    """Runs ``gzip`` as a subprocess. The tool replaces the input file."""

    def __init__(self, binary: str = "gzip"):
        self.binary = binary

    def _run(self, args: list[str]) -> None:
        command = [self.binary, *args]
        logger.debug(f"Running {' '.join(command)}")
        try:
            result = subprocess.run(command, capture_output=True, text=True)
        except FileNotFoundError as e:
            raise CompressionError(
                f"Compression tool '{self.binary}' not found. Install gzip or disable compression.",
                missing_binary=True,
            ) from e
        except OSError as e:
            raise CompressionError(f"Could not run '{self.binary}': {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.strip() or f"exit code {result.returncode}"
            raise CompressionError(f"{self.binary} failed: {stderr}")

    def compress(self, path: Path) -> Path:
        target = compressed_path(path)
        self._run(["-f", str(path)])
        logger.debug(f"Compressed {path} -> {target}")
        return target

    def decompress(self, path: Path) -> Path:
        target = decompressed_path(path)
        self._run(["-d", "-f", str(path)])
        logger.debug(f"Decompressed {path} -> {target}")
        return target
