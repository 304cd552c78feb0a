"""dbsnapshot CLI."""

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from dbsnapshot.compression import GzipCompressor
from dbsnapshot.config import DbSnapshotConfig, get_config_template, load_config
from dbsnapshot.engine import create_engine
from dbsnapshot.errors import SnapshotError
from dbsnapshot.pipeline import SnapshotPipeline
from dbsnapshot.storage import create_storage_client
from dbsnapshot.workspace import ensure_dir, workspace_dir

app = typer.Typer(help="dbsnapshot - database snapshots to S3-compatible storage")
console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)

CONFIG_FILE = "dbsnapshot.yaml"
LOG_DIRNAME = "logs"
LOG_FILE = "dbsnapshot.log"


class OperatorLogHandler(logging.FileHandler):
    """Appends full log records, tracebacks included, to the operator log file."""


def _console_filter(record: logging.LogRecord) -> bool:
    return not getattr(record, "operator_only", False)


def setup_logging(verbose: bool = False):
    """Configure logging with rich handler."""
    level = logging.DEBUG if verbose else logging.INFO
    handler = RichHandler(console=err_console, rich_tracebacks=True)
    handler.addFilter(_console_filter)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
    )
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("boto3").setLevel(logging.WARNING)
    logging.getLogger("s3transfer").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def setup_operator_log(storage_path: Path) -> Path:
    """Send log records to ``<storage_path>/logs/dbsnapshot.log``."""
    log_file = ensure_dir(Path(storage_path) / LOG_DIRNAME) / LOG_FILE
    root = logging.getLogger()

    for existing in [h for h in root.handlers if isinstance(h, OperatorLogHandler)]:
        root.removeHandler(existing)
        existing.close()

    handler = OperatorLogHandler(log_file, encoding="utf-8")
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root.addHandler(handler)
    return log_file


def build_pipeline(config: DbSnapshotConfig) -> SnapshotPipeline:
    """Wire the pipeline's collaborators from config."""
    return SnapshotPipeline(
        config=config,
        storage=create_storage_client(config.storage),
        engine=create_engine(config.database),
        compressor=GzipCompressor(config.snapshot.gzip_binary),
        workspace_dir=workspace_dir(Path(config.workspace.storage_path)),
    )


def get_pipeline(ctx: typer.Context) -> SnapshotPipeline:
    config = load_config(ctx.obj)
    setup_operator_log(Path(config.workspace.storage_path))
    return build_pipeline(config)


def fail(action: str, e: Exception) -> typer.Exit:
    """Log the full error, print a one-line summary, and return exit code 1."""
    if isinstance(e, SnapshotError):
        logger.error(f"{action} failed: {e}", exc_info=e, extra={"operator_only": True})
        logger.debug(f"{action} failed", exc_info=e)
    else:
        logger.error(f"{action} failed with unexpected error: {e}", exc_info=e)
    err_console.print(f"[red]error:[/red] {escape(str(e))}", highlight=False, soft_wrap=True)
    return typer.Exit(1)


@app.callback()
def main(
    ctx: typer.Context,
    config: Path = typer.Option(Path(CONFIG_FILE), "--config", "-c", help="Path to config file"),
):
    """Create, load and list database snapshots."""
    ctx.obj = config


@app.command()
def init(ctx: typer.Context):
    """Write a config template to the config path."""
    config_file = ctx.obj

    if config_file.exists():
        console.print(f"[yellow]Warning:[/yellow] {config_file} already exists.")
        if not typer.confirm("Overwrite?"):
            raise typer.Exit(0)

    config_file.write_text(get_config_template())
    console.print(f"[green]Created {config_file}[/green]")
    console.print(f"\nEdit {config_file} to configure storage and database access.")


@app.command()
def create(
    ctx: typer.Context,
    filename: str | None = typer.Option(None, "--filename", "-f", help="Snapshot name (overrides the template)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
):
    """Create a new snapshot and upload it."""
    setup_logging(verbose)
    console.print("Creating snapshot ... ", end="")

    try:
        artifact = get_pipeline(ctx).create(filename)
    except Exception as e:
        console.print()
        raise fail("create", e)

    console.print("[green]done[/green]")
    console.print(f"Stored as {artifact.key}", markup=False, highlight=False, soft_wrap=True)


@app.command()
def load(
    ctx: typer.Context,
    filename: str | None = typer.Option(None, "--filename", "-f", help="Snapshot name to load (defaults to the template)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
):
    """Load an existing snapshot into the database."""
    setup_logging(verbose)
    console.print("Loading snapshot ... ", end="")

    try:
        artifact = get_pipeline(ctx).load(filename)
    except Exception as e:
        console.print()
        raise fail("load", e)

    console.print("[green]done[/green]")
    console.print(f"Restored {artifact.key}", markup=False, highlight=False, soft_wrap=True)


@app.command("list")
def list_cmd(ctx: typer.Context):
    """List snapshots saved in storage."""
    setup_logging()

    try:
        snapshots = get_pipeline(ctx).list_snapshots()
    except Exception as e:
        raise fail("list", e)

    for snapshot in snapshots:
        console.print(snapshot.name, markup=False, highlight=False, soft_wrap=True)


if __name__ == "__main__":
    app()
