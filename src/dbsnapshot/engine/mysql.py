"""MySQL dump engine using mysqldump and the mysql client."""

from pathlib import Path

from dbsnapshot.config import DatabaseConfig
from dbsnapshot.engine.base import run_tool
from dbsnapshot.errors import DumpError, RestoreError


class MySQLDumpEngine:
    """Dumps with ``mysqldump`` and restores by piping the file into ``mysql``."""

    def __init__(self, config: DatabaseConfig, dump_binary: str = "mysqldump", client_binary: str = "mysql"):
        self.config = config
        self.dump_binary = dump_binary
        self.client_binary = client_binary

    def _connection_args(self) -> list[str]:
        args = [f"--host={self.config.host}"]
        if self.config.port:
            args.append(f"--port={self.config.port}")
        if self.config.user:
            args.append(f"--user={self.config.user}")
        return args

    def _env(self) -> dict[str, str]:
        # Keeps the password off the command line
        return {"MYSQL_PWD": self.config.password} if self.config.password else {}

    def dump_command(self, dest_path: Path) -> list[str]:
        return [
            self.dump_binary,
            *self._connection_args(),
            "--single-transaction",
            "--routines",
            "--triggers",
            "--no-tablespaces",
            f"--result-file={dest_path}",
            self.config.name,
        ]

    def restore_command(self) -> list[str]:
        return [self.client_binary, *self._connection_args(), self.config.name]

    def dump(self, dest_path: Path) -> None:
        run_tool(self.dump_command(dest_path), DumpError, env=self._env())

    def restore(self, src_path: Path) -> None:
        run_tool(self.restore_command(), RestoreError, env=self._env(), stdin_path=src_path)
