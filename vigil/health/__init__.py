"""Health subsystem — check registry, report context, checker, renderer.

A process-wide default checker backs the module-level helpers:

    from vigil import health

    health.add_check(lambda ctx: ctx.add_message("workers", 4))
    report = health.run()
"""

from ..config import settings
from . import checks as _checks_module  # noqa: F401  (bind submodule before def checks() below)
from .checker import Checker
from .context import ReportContext
from .errors import CheckFileError, ErrorKind, InvalidCheckError, VigilError
from .registry import Check, CheckRegistry
from .revision import Revision, current_revision
from .serializer import StatusReport, build_report, render_report

default_checker = Checker(
    revision_provider=current_revision,
    check_timeout=settings.check_timeout_seconds,
    max_workers=settings.check_workers,
)


def add_check(check: Check) -> Checker:
    return default_checker.add_check(check)


def clear() -> Checker:
    return default_checker.clear()


def checks() -> tuple[Check, ...]:
    return default_checker.checks()


def run() -> ReportContext:
    return default_checker.run()


__all__ = [
    "Check",
    "CheckFileError",
    "CheckRegistry",
    "Checker",
    "ErrorKind",
    "InvalidCheckError",
    "ReportContext",
    "Revision",
    "StatusReport",
    "VigilError",
    "add_check",
    "build_report",
    "checks",
    "clear",
    "current_revision",
    "default_checker",
    "render_report",
    "run",
]
