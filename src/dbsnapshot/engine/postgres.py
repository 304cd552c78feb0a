"""PostgreSQL dump engine using pg_dump and psql."""

from pathlib import Path

from dbsnapshot.config import DatabaseConfig
from dbsnapshot.engine.base import run_tool
from dbsnapshot.errors import DumpError, RestoreError


class PostgresDumpEngine:
    """Plain-SQL dumps with ``pg_dump``, restored with ``psql``."""

    def __init__(self, config: DatabaseConfig, dump_binary: str = "pg_dump", client_binary: str = "psql"):
        self.config = config
        self.dump_binary = dump_binary
        self.client_binary = client_binary

    def _connection_args(self) -> list[str]:
        args = [f"--host={self.config.host}"]
        if self.config.port:
            args.append(f"--port={self.config.port}")
        if self.config.user:
            args.append(f"--username={self.config.user}")
        args.append(f"--dbname={self.config.name}")
        return args

    def _env(self) -> dict[str, str]:
        return {"PGPASSWORD": self.config.password} if self.config.password else {}

    def dump_command(self, dest_path: Path) -> list[str]:
        return [
            self.dump_binary,
            *self._connection_args(),
            "--no-owner",
            "--no-acl",
            f"--file={dest_path}",
        ]

    def restore_command(self, src_path: Path) -> list[str]:
        return [
            self.client_binary,
            *self._connection_args(),
            "--set=ON_ERROR_STOP=1",
            "--quiet",
            f"--file={src_path}",
        ]

    def dump(self, dest_path: Path) -> None:
        run_tool(self.dump_command(dest_path), DumpError, env=self._env())

    def restore(self, src_path: Path) -> None:
        run_tool(self.restore_command(src_path), RestoreError, env=self._env())
