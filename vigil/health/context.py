"""Report context — accumulates messages and errors for one run."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Union

from .errors import ErrorKind

logger = logging.getLogger(__name__)

Scalar = Union[str, int, float, bool]
ErrorEntry = Union[str, ErrorKind]

UNKNOWN_REVISION = "unknown"

# Token of the check invocation running on the current thread
_scope = threading.local()
_SEALED = object()


class ReportContext:
    """Mutable report handed to every check during a run.

    Checks write through ``add_error`` / ``add_message``. While a run is in
    progress writes are accepted until the current invocation is sealed,
    from the check thread and from any helper thread it starts. Writes from
    another invocation's thread (a timed-out check finishing late) or after
    sealing (a check that kept a reference) are dropped with a warning.
    """

    def __init__(self, revision_provider: Callable[[], str] | None = None) -> None:
        self._revision_provider = revision_provider
        self._messages: dict[str, Scalar] = {}
        self._errors: list[ErrorEntry] = []
        self._admitted: object | None = None  # None: accept every writer

    # ── Mutation ─────────────────────────────────────────────────────────────

    def add_error(self, message: ErrorEntry) -> ReportContext:
        """Record a failure. Every call appends, duplicates included."""
        if self._accepts("error"):
            self._errors.append(message)
        return self

    def add_message(self, name: str, value: Scalar) -> ReportContext:
        """Set a named diagnostic value. The last write for a name wins."""
        if not isinstance(name, str) or not name:
            raise ValueError(f"Message name must be a non-empty string, got {name!r}")
        if not isinstance(value, (str, int, float, bool)):
            raise TypeError(
                f"Message {name!r} must be a str, int, float or bool, got {type(value).__name__}"
            )
        if self._accepts("message"):
            self._messages[name] = value
        return self

    # ── Read accessors ───────────────────────────────────────────────────────

    @property
    def messages(self) -> dict[str, Scalar]:
        return dict(self._messages)

    @property
    def errors(self) -> list[ErrorEntry]:
        return list(self._errors)

    def has_errors(self) -> bool:
        return bool(self._errors)

    @property
    def ok(self) -> bool:
        return not self._errors

    def revision(self) -> str:
        """Current build revision, asked from the provider on every call."""
        if self._revision_provider is None:
            return UNKNOWN_REVISION
        try:
            return self._revision_provider() or UNKNOWN_REVISION
        except Exception:
            logger.warning("Revision provider failed", exc_info=True)
            return UNKNOWN_REVISION

    def time(self) -> datetime:
        """Now, in UTC. Not the start of the run."""
        return datetime.now(timezone.utc)

    # ── Run scoping (used by Checker) ────────────────────────────────────────

    def _admit(self) -> object:
        token = object()
        self._admitted = token
        return token

    def _seal(self) -> None:
        self._admitted = _SEALED

    def _record_error(self, message: ErrorEntry) -> None:
        self._errors.append(message)

    def _accepts(self, what: str) -> bool:
        admitted = self._admitted
        if admitted is None:
            return True
        writer = getattr(_scope, "token", None)
        # Threads without a token are helpers of the running check
        if admitted is not _SEALED and (writer is None or writer is admitted):
            return True
        logger.warning("Discarding %s written outside of its check invocation", what)
        return False

    def __repr__(self) -> str:
        return f"ReportContext(messages={self._messages!r}, errors={self._errors!r})"


def call_in_scope(
    check: Callable[[ReportContext], object],
    context: ReportContext,
    token: object,
    started: threading.Event | None = None,
) -> None:
    """Invoke ``check`` with writes to ``context`` attributed to ``token``.

    ``started`` is set right before the check begins, so callers can time
    the check itself rather than its wait in the worker queue.
    """
    previous = getattr(_scope, "token", None)
    _scope.token = token
    if started is not None:
        started.set()
    try:
        check(context)
    finally:
        _scope.token = previous
