"""Dump engine driven by user-supplied shell commands."""

import shlex
from pathlib import Path

from dbsnapshot.engine.base import run_tool
from dbsnapshot.errors import DumpError, RestoreError

FILE_PLACEHOLDER = "{file}"


def expand_command(template: str, path: Path) -> str:
    """Substitute the quoted snapshot path for ``{file}``."""
    if FILE_PLACEHOLDER not in template:
        raise ValueError(f"Command must contain {FILE_PLACEHOLDER}: {template!r}")
    return template.replace(FILE_PLACEHOLDER, shlex.quote(str(path)))


class CommandDumpEngine:
    """Runs configured dump/restore shell commands."""

    def __init__(self, dump_command: str, restore_command: str, env: dict[str, str] | None = None):
        self.dump_template = dump_command
        self.restore_template = restore_command
        self.env = env or {}

    def dump(self, dest_path: Path) -> None:
        try:
            command = expand_command(self.dump_template, dest_path)
        except ValueError as e:
            raise DumpError(str(e)) from e
        run_tool(command, DumpError, env=self.env, shell=True)

    def restore(self, src_path: Path) -> None:
        try:
            command = expand_command(self.restore_template, src_path)
        except ValueError as e:
            raise RestoreError(str(e)) from e
        run_tool(command, RestoreError, env=self.env, shell=True)
