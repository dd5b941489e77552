"""Check registry — the set of checks every run executes.

Checks are keyed by identity and kept in insertion order. Reads go through
``snapshot()`` so a run never iterates the live collection while another
thread adds or clears checks.
"""

from __future__ import annotations

import inspect
import logging
import threading
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from .errors import InvalidCheckError

if TYPE_CHECKING:
    from .context import ReportContext

logger = logging.getLogger(__name__)


@runtime_checkable
class Check(Protocol):
    """A unit of diagnostic logic. Reports problems through the context."""

    def __call__(self, context: ReportContext) -> None: ...


def check_name(check: object) -> str:
    """Human-readable name for logs and synthetic errors."""
    name = getattr(check, "name", None)
    if isinstance(name, str) and name:
        return name
    name = getattr(check, "__name__", None)
    if isinstance(name, str) and name:
        return name
    return type(check).__name__


def validate_check(check: object) -> None:
    """Raise InvalidCheckError unless ``check`` accepts a single context argument."""
    if not callable(check):
        raise InvalidCheckError(f"A check must be callable, got {type(check).__name__}")
    try:
        sig = inspect.signature(check)
    except (TypeError, ValueError):
        # Builtins without introspectable signatures: trust callable()
        return
    try:
        sig.bind(None)
    except TypeError as e:
        raise InvalidCheckError(
            f"A check must be callable with one argument (the report context): "
            f"{check_name(check)}{sig}"
        ) from e


# ── Registry ─────────────────────────────────────────────────────────────────


class CheckRegistry:
    """Insertion-ordered, identity-keyed set of checks."""

    def __init__(self) -> None:
        self._checks: dict[int, Check] = {}
        self._lock = threading.RLock()

    def add(self, check: Check) -> CheckRegistry:
        validate_check(check)
        with self._lock:
            # The dict keeps a reference, so id() stays unique while registered
            if id(check) in self._checks:
                logger.debug("Check already registered: %s", check_name(check))
            else:
                self._checks[id(check)] = check
                logger.debug("Registered check: %s", check_name(check))
        return self

    def clear(self) -> CheckRegistry:
        with self._lock:
            self._checks = {}
        return self

    def snapshot(self) -> tuple[Check, ...]:
        """Registered checks in insertion order. Safe to iterate during mutation."""
        with self._lock:
            return tuple(self._checks.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._checks)

    def __contains__(self, check: object) -> bool:
        with self._lock:
            return self._checks.get(id(check)) is check
