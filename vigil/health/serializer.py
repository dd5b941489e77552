"""Status report rendering.

Turns a completed ReportContext into the payload served by the status
endpoint:

    {"revision": "...", "time": "<ISO-8601 UTC>", "messages": {...}, "errors": [...]}

``messages`` is omitted when empty, ``errors`` is present only for a failed
run. ErrorKind entries are resolved to text here, through a message catalog
that can be overridden from a YAML file.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel

from .context import ErrorEntry, ReportContext
from .errors import DEFAULT_MESSAGES, ErrorKind

logger = logging.getLogger(__name__)


class StatusReport(BaseModel):
    revision: str
    time: datetime
    messages: Optional[dict[str, Union[bool, int, float, str]]] = None
    errors: Optional[list[str]] = None


def load_error_catalog(path: Path | None = None) -> dict[str, str]:
    """Default English messages, overlaid with ``path`` (a YAML mapping) if given."""
    catalog = dict(DEFAULT_MESSAGES)
    if path is None:
        return catalog
    if not path.exists():
        logger.warning("Error message file not found: %s", path)
        return catalog

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.error("Failed to parse %s: %s", path, e)
        return catalog

    if not isinstance(raw, dict):
        logger.error("Error message file %s must contain a mapping", path)
        return catalog
    catalog.update({str(k): str(v) for k, v in raw.items()})
    return catalog


def resolve_error(entry: ErrorEntry, catalog: dict[str, str] | None = None) -> str:
    if isinstance(entry, ErrorKind):
        messages = catalog if catalog is not None else DEFAULT_MESSAGES
        return messages.get(entry.value, entry.value)
    return str(entry)


def build_report(context: ReportContext, catalog: dict[str, str] | None = None) -> StatusReport:
    messages = context.messages
    errors = context.errors
    return StatusReport(
        revision=context.revision(),
        time=context.time().astimezone(timezone.utc),
        messages=messages or None,
        errors=[resolve_error(e, catalog) for e in errors] or None,
    )


def render_report(context: ReportContext, catalog: dict[str, str] | None = None) -> dict[str, Any]:
    """JSON-ready dict of the report, with empty optional fields left out."""
    return build_report(context, catalog).model_dump(mode="json", exclude_none=True)
