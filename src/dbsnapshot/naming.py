"""Snapshot filename templating."""

import string
from datetime import datetime

from dbsnapshot.errors import TemplateError

_formatter = string.Formatter()


def template_variables(now: datetime) -> dict[str, object]:
    """Built-in variables available to every filename template."""
    return {
        "now": now,
        "date": now.strftime("%Y-%m-%d"),
        "time": now.strftime("%H%M%S"),
        "datetime": now.strftime("%Y%m%d-%H%M%S"),
        "timestamp": int(now.timestamp()),
    }


def render(template: str, now: datetime, **variables) -> str:
    """Render a filename template.

    Markers use format-field syntax, e.g. ``backup-{date}.sql`` or
    ``db-{now:%Y%m%d%H%M}.sql``. Caller variables override the built-ins.

    Raises:
        TemplateError: on malformed braces, unknown markers, or a rendered
            name that is empty or contains a path separator.
    """
    context = template_variables(now)
    context.update(variables)

    try:
        rendered = _formatter.vformat(template, (), context)
    except KeyError as e:
        raise TemplateError(f"Unknown template variable {e.args[0]!r} in {template!r}") from e
    except (ValueError, IndexError, AttributeError) as e:
        raise TemplateError(f"Malformed filename template {template!r}: {e}") from e

    return check_name(rendered.strip())


def check_name(name: str) -> str:
    """Validate a snapshot name for use as a storage key and temp file name."""
    if not name or name in (".", ".."):
        raise TemplateError(f"Invalid snapshot name: {name!r}")
    if "/" in name or "\\" in name:
        raise TemplateError(f"Snapshot name must not contain a path separator: {name!r}")
    return name
