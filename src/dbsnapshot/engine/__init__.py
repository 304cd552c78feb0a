"""Database dump engines."""

from dbsnapshot.config import DatabaseConfig
from dbsnapshot.engine.base import DumpEngine
from dbsnapshot.engine.command import CommandDumpEngine
from dbsnapshot.engine.mysql import MySQLDumpEngine
from dbsnapshot.engine.postgres import PostgresDumpEngine


def create_engine(config: DatabaseConfig) -> DumpEngine:
    """Create a dump engine from config.

    Custom commands take precedence over the driver's own tools.
    """
    if config.dump_command and config.restore_command:
        env = {}
        if config.password:
            env = {"MYSQL_PWD": config.password, "PGPASSWORD": config.password}
        return CommandDumpEngine(config.dump_command, config.restore_command, env=env)

    if config.driver == "pgsql":
        return PostgresDumpEngine(config)

    return MySQLDumpEngine(config)


__all__ = [
    "CommandDumpEngine",
    "DumpEngine",
    "MySQLDumpEngine",
    "PostgresDumpEngine",
    "create_engine",
]
