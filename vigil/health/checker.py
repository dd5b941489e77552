"""Checker — runs the registered checks and returns the filled-in report.

Every ``run()`` gets its own ReportContext, so concurrent runs share nothing
mutable except the registry, which is only read through snapshots.

A check raising an exception, overrunning the per-check timeout, or finding
no free worker becomes a synthetic error naming the check; the remaining
checks still run.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout

from .context import ReportContext, call_in_scope
from .registry import Check, CheckRegistry, check_name

logger = logging.getLogger(__name__)


class Checker:
    """Registry + revision provider + per-check timeout."""

    def __init__(
        self,
        registry: CheckRegistry | None = None,
        revision_provider: Callable[[], str] | None = None,
        check_timeout: float | None = None,
        max_workers: int = 8,
    ) -> None:
        self.registry = registry if registry is not None else CheckRegistry()
        self.revision_provider = revision_provider
        self.check_timeout = check_timeout if check_timeout and check_timeout > 0 else None
        self._max_workers = max_workers
        self._executor: ThreadPoolExecutor | None = None
        self._executor_lock = threading.Lock()

    # ── Registration ─────────────────────────────────────────────────────────

    def add_check(self, check: Check) -> Checker:
        """Register ``check`` for every subsequent run.

        Raises InvalidCheckError if it cannot be called with a report context.
        """
        self.registry.add(check)
        return self

    def clear(self) -> Checker:
        self.registry.clear()
        return self

    def checks(self) -> tuple[Check, ...]:
        return self.registry.snapshot()

    # ── Execution ────────────────────────────────────────────────────────────

    def run(self) -> ReportContext:
        """Run every registered check, in registration order, on a fresh context."""
        context = ReportContext(self.revision_provider)
        checks = self.registry.snapshot()
        t0 = time.perf_counter()

        for check in checks:
            self._invoke(check, context)
        context._seal()

        logger.debug(
            "Ran %d checks in %.1fms: %d errors, %d messages",
            len(checks),
            (time.perf_counter() - t0) * 1000,
            len(context.errors),
            len(context.messages),
        )
        return context

    def _invoke(self, check: Check, context: ReportContext) -> None:
        name = check_name(check)
        token = context._admit()
        try:
            if self.check_timeout is None:
                call_in_scope(check, context, token)
            else:
                self._invoke_with_timeout(check, name, context, token)
        except Exception as e:
            context._seal()
            logger.exception("Check %s raised", name)
            context._record_error(f"{name} failed: {type(e).__name__}: {e}")

    def _invoke_with_timeout(
        self, check: Check, name: str, context: ReportContext, token: object,
    ) -> None:
        started = threading.Event()
        future = self._get_executor().submit(call_in_scope, check, context, token, started)

        # The timeout covers the check itself; waiting for a free worker is bounded separately
        if not started.wait(self.check_timeout) and future.cancel():
            context._seal()
            logger.warning(
                "Check %s not started: all %d check workers busy", name, self._max_workers,
            )
            context._record_error(
                f"{name} not run: all {self._max_workers} check workers busy"
            )
            return

        try:
            future.result(timeout=self.check_timeout)
        except FutureTimeout:
            if future.done():
                # Finished just as the wait gave up, or raised TimeoutError itself
                exc = future.exception()
                if exc is not None:
                    raise exc
                return
            future.cancel()
            context._seal()
            logger.warning("Check %s timed out after %ss", name, self.check_timeout)
            context._record_error(f"{name} timed out after {self.check_timeout:g}s")

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._max_workers, thread_name_prefix="check",
                )
            return self._executor

    def close(self) -> None:
        """Release the worker threads. Checks still running are not waited for."""
        with self._executor_lock:
            if self._executor is not None:
                self._executor.shutdown(wait=False)
                self._executor = None
