"""Configuration models for dbsnapshot."""

import os
import re
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from dbsnapshot.errors import ConfigError

_ENV_REF = re.compile(r"^\$\{?([A-Za-z_][A-Za-z0-9_]*)\}?$")


def resolve_env(value):
    """Resolve ``$NAME`` / ``${NAME}`` string values from the environment.

    Unset variables resolve to None. Other values pass through unchanged.
    """
    if isinstance(value, str):
        match = _ENV_REF.match(value.strip())
        if match:
            return os.environ.get(match.group(1))
    return value


class _Section(BaseModel):
    model_config = ConfigDict(frozen=True)

    @field_validator("*", mode="before")
    @classmethod
    def _resolve_env(cls, v):
        return resolve_env(v)


class SnapshotConfig(_Section):
    """Snapshot naming and compression."""

    filename: str = "snapshot-{now:%Y%m%d%H%M%S}.sql"
    compress: bool = True
    gzip_binary: str = "gzip"


class StorageConfig(_Section):
    """Object storage configuration.

    If ``endpoint`` is set and ``region`` is empty the backend is treated as a
    non-AWS S3-compatible provider (MinIO etc.) and path-style addressing is
    used. With a region set, ``endpoint`` overrides the regional endpoint.
    """

    backend: Literal["s3", "local"] = "s3"
    bucket: str | None = None
    path: str = ""
    region: str | None = None
    endpoint: str | None = None
    access_key: str | None = None
    secret_key: str | None = None
    local_path: str = ".dbsnapshot/storage"  # Only for backend: local

    def model_post_init(self, __context):
        if self.backend == "s3" and not self.bucket:
            raise ValueError("storage.bucket is required when backend is 's3'")
        if self.access_key and not self.secret_key:
            raise ValueError("storage.secret_key is required when storage.access_key is set")


class DatabaseConfig(_Section):
    """Database connection used for dump and restore."""

    driver: Literal["mysql", "pgsql"] = "mysql"
    host: str = "localhost"
    port: int | None = None
    user: str | None = None
    password: str | None = None
    name: str | None = None
    # Shell templates with a {file} placeholder; override the driver tools
    dump_command: str | None = None
    restore_command: str | None = None

    def model_post_init(self, __context):
        if bool(self.dump_command) != bool(self.restore_command):
            raise ValueError("database.dump_command and database.restore_command must be set together")
        if not self.name and not (self.dump_command and self.restore_command):
            raise ValueError(
                "database.name is required unless both dump_command and restore_command are set"
            )


class WorkspaceConfig(_Section):
    """Host storage path holding the scratch directory."""

    storage_path: str = ".dbsnapshot"


class DbSnapshotConfig(BaseModel):
    """Main dbsnapshot configuration."""

    model_config = ConfigDict(frozen=True)

    storage: StorageConfig
    database: DatabaseConfig
    snapshot: SnapshotConfig = SnapshotConfig()
    workspace: WorkspaceConfig = WorkspaceConfig()


def load_config(path: Path) -> DbSnapshotConfig:
    """Load configuration from YAML file."""
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"{path} not found. Run 'dbsnapshot init' first.")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping")

    try:
        return DbSnapshotConfig(**data)
    except (ValidationError, ValueError) as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e


def get_config_template() -> str:
    """Get the default configuration template."""
    return """# dbsnapshot configuration
#
# Any string value written as $NAME or ${NAME} is read from the environment.

snapshot:
  # Markers: {date} {time} {datetime} {timestamp} {now:<strftime format>}
  filename: "snapshot-{now:%Y%m%d%H%M%S}.sql"
  compress: true

storage:
  backend: s3
  bucket: my-snapshots
  path: snapshots  # Key prefix inside the bucket
  region: us-east-1
  # endpoint: https://minio.example.com  # Leave region empty for S3-compatible providers
  access_key: $AWS_ACCESS_KEY_ID
  secret_key: $AWS_SECRET_ACCESS_KEY

database:
  driver: mysql  # 'mysql' or 'pgsql'
  host: localhost
  # port: 3306
  user: $DB_USER
  password: $DB_PASSWORD
  name: $DB_NAME
  # Custom commands replace mysqldump/pg_dump; {file} is the snapshot path
  # dump_command: "mysqldump --no-tablespaces mydb > {file}"
  # restore_command: "mysql mydb < {file}"

workspace:
  storage_path: .dbsnapshot
"""
