"""Check file loader — builds checks from a YAML file.

    checks:
      - id: api
        type: http
        url: https://api.example.com/health
        expected_status: 200
      - id: db
        type: sqlite
        path: data/app.db
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, fields
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from .checks import DnsCheck, HttpCheck, SqliteCheck, TcpCheck
from .errors import CheckFileError
from .registry import Check

if TYPE_CHECKING:
    from .checker import Checker

logger = logging.getLogger(__name__)


@dataclass
class CheckDef:
    """Definition of a single check from the check file."""

    id: str
    type: str  # http | tcp | dns | sqlite
    url: str = ""
    hostname: str = ""
    port: int = 443
    path: str = ""
    method: str = "GET"
    expected_status: int = 200
    timeout_ms: int = 10_000
    report_latency: bool = False


CHECK_BUILDERS: dict[str, Callable[[CheckDef], Check]] = {
    "http": lambda d: HttpCheck(
        d.id, d.url, d.method, d.expected_status, d.timeout_ms, d.report_latency,
    ),
    "tcp": lambda d: TcpCheck(d.id, d.hostname, d.port, d.timeout_ms),
    "dns": lambda d: DnsCheck(d.id, d.hostname, d.timeout_ms),
    "sqlite": lambda d: SqliteCheck(d.id, d.path, d.timeout_ms),
}


def _parse_check_def(raw: dict[str, Any]) -> CheckDef:
    known = {f.name for f in fields(CheckDef)}
    unknown = set(raw) - known
    if unknown:
        raise ValueError(f"unknown keys {sorted(unknown)}")
    check_id = str(raw.get("id", "")).strip()
    if not check_id:
        raise ValueError("check 'id' is required")
    data = {k: v for k, v in raw.items() if k in known}
    data["id"] = check_id
    data["type"] = str(raw.get("type", "")).strip().lower()
    return CheckDef(**data)


def load_check_defs(path: Path) -> list[CheckDef]:
    """Parse the check file. A missing file yields no checks.

    Raises CheckFileError if the file is not valid YAML or its root is not a
    mapping. Malformed entries are skipped with a warning.
    """
    if not path.exists():
        logger.warning("Check file not found: %s", path)
        return []

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise CheckFileError(f"Failed to parse {path}: {e}") from e
    if not isinstance(raw, dict):
        raise CheckFileError(f"{path} must contain a mapping with a 'checks' list")

    defs: list[CheckDef] = []
    for entry in raw.get("checks") or []:
        try:
            if not isinstance(entry, dict):
                raise ValueError("entry is not a mapping")
            defs.append(_parse_check_def(entry))
        except (TypeError, ValueError) as e:
            logger.warning("Skipping malformed check entry in %s: %s", path, e)

    logger.info("Loaded %d check definitions from %s", len(defs), path)
    return defs


def build_check(defn: CheckDef) -> Check | None:
    """Instantiate the check for ``defn``, or None for an unknown type."""
    builder = CHECK_BUILDERS.get(defn.type)
    if builder is None:
        logger.warning("Unknown check type %r for check %s", defn.type, defn.id)
        return None
    return builder(defn)


def register_checks(checker: Checker, path: Path) -> int:
    """Load ``path`` and register every buildable check. Returns how many were added."""
    count = 0
    for defn in load_check_defs(path):
        check = build_check(defn)
        if check is not None:
            checker.add_check(check)
            count += 1
    return count
