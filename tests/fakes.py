"""Fakes for pipeline collaborators."""

import gzip
import io
from pathlib import Path

from dbsnapshot.compression import compressed_path, decompressed_path
from dbsnapshot.errors import CompressionError, DumpError, NotFoundError, RestoreError, StorageError
from dbsnapshot.types import StoredSnapshot

DUMP_SQL = b"CREATE TABLE t (id INT);\nINSERT INTO t VALUES (1);\n"


class FakeEngine:
    def __init__(self, fail_dump=False, fail_restore=False, content=DUMP_SQL):
        self.fail_dump = fail_dump
        self.fail_restore = fail_restore
        self.content = content
        self.dumped_to: list[Path] = []
        self.restored: list[tuple[Path, bytes]] = []

    def dump(self, dest_path):
        self.dumped_to.append(Path(dest_path))
        Path(dest_path).write_bytes(self.content[:10])
        if self.fail_dump:
            raise DumpError("mysqldump failed: access denied")
        Path(dest_path).write_bytes(self.content)

    def restore(self, src_path):
        if self.fail_restore:
            raise RestoreError("mysql failed: unknown database")
        self.restored.append((Path(src_path), Path(src_path).read_bytes()))


class FakeCompressor:
    """In-process gzip with the same file contract as GzipCompressor."""

    def __init__(self, fail=False):
        self.fail = fail
        self.calls: list[tuple[str, Path]] = []

    def compress(self, path):
        path = Path(path)
        self.calls.append(("compress", path))
        target = compressed_path(path)
        if self.fail:
            target.write_bytes(b"partial")
            raise CompressionError("gzip failed: No space left on device")
        target.write_bytes(gzip.compress(path.read_bytes()))
        path.unlink()
        return target

    def decompress(self, path):
        path = Path(path)
        self.calls.append(("decompress", path))
        target = decompressed_path(path)
        if self.fail:
            raise CompressionError("gzip failed: not in gzip format")
        target.write_bytes(gzip.decompress(path.read_bytes()))
        path.unlink()
        return target


class FakeStorage:
    def __init__(self, fail_put=False, fail_get=False):
        self.objects: dict[str, bytes] = {}
        self.fail_put = fail_put
        self.fail_get = fail_get
        self.list_calls = 0
        self.exists_calls: list[str] = []

    def put(self, key, data):
        if self.fail_put:
            raise StorageError("Failed to upload: connection reset")
        self.objects[key] = data.read()

    def get(self, key):
        if key not in self.objects:
            raise NotFoundError(f"Snapshot {key} does not exist")
        if self.fail_get:
            raise StorageError("Failed to download: timeout")
        return io.BytesIO(self.objects[key])

    def exists(self, key):
        self.exists_calls.append(key)
        return key in self.objects

    def list(self):
        self.list_calls += 1
        return [StoredSnapshot(name=k, size=len(v)) for k, v in sorted(self.objects.items())]
