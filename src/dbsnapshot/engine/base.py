"""Dump engine protocol and subprocess helper."""

import logging
import os
import subprocess
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class DumpEngine(Protocol):
    """Protocol for dumping and restoring the live database."""

    def dump(self, dest_path: Path) -> None:
        """Write a full database dump to ``dest_path``. Raises DumpError."""
        ...

    def restore(self, src_path: Path) -> None:
        """Load ``src_path`` into the database. Raises RestoreError."""
        ...


def run_tool(
    command: list[str] | str,
    error_cls: type[Exception],
    env: dict[str, str] | None = None,
    stdin_path: Path | None = None,
    shell: bool = False,
) -> None:
    """Run an external database tool, raising ``error_cls`` on failure.

    A missing binary is reported with its own message.
    """
    display = command if isinstance(command, str) else " ".join(command)
    name = display.split()[0] if display.strip() else display
    logger.debug(f"Running {display}")

    run_env = {**os.environ, **(env or {})}
    try:
        if stdin_path is not None:
            with open(stdin_path, "rb") as stdin:
                result = subprocess.run(
                    command, stdin=stdin, capture_output=True, text=True, env=run_env, shell=shell
                )
        else:
            result = subprocess.run(
                command, capture_output=True, text=True, env=run_env, shell=shell
            )
    except FileNotFoundError as e:
        raise error_cls(f"'{name}' not found. Is the database client installed?") from e
    except OSError as e:
        raise error_cls(f"Could not run '{name}': {e}") from e

    if result.returncode != 0:
        stderr = result.stderr.strip() or f"exit code {result.returncode}"
        raise error_cls(f"{name} failed: {stderr}")
