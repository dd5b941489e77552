"""Built-in checks: HTTP(S), TCP connect, DNS resolve, SQLite database.

Each check is a callable taking the report context. Failures are reported
with ``add_error``; optional latency is reported with ``add_message``.
"""

from __future__ import annotations

import logging
import socket
import sqlite3
import threading
import time
from pathlib import Path

import httpx

from .context import ReportContext
from .errors import ErrorKind

logger = logging.getLogger(__name__)


class HttpCheck:
    """HTTP(S) request; fails on connection errors or an unexpected status code."""

    def __init__(
        self,
        name: str,
        url: str,
        method: str = "GET",
        expected_status: int = 200,
        timeout_ms: int = 10_000,
        report_latency: bool = False,
    ) -> None:
        self.name = name
        self.url = url
        self.method = method
        self.expected_status = expected_status
        self.timeout_ms = timeout_ms
        self.report_latency = report_latency

    def __call__(self, context: ReportContext) -> None:
        t0 = time.perf_counter()
        try:
            with httpx.Client(timeout=self.timeout_ms / 1000, follow_redirects=True) as client:
                resp = client.request(self.method, self.url)
        except httpx.TimeoutException:
            context.add_error(f"{self.name}: timed out after {self.timeout_ms}ms")
            return
        except httpx.HTTPError as e:
            logger.warning("HTTP check %s failed: %s", self.name, e)
            context.add_error(f"{self.name}: connection error: {e}")
            return

        latency = (time.perf_counter() - t0) * 1000
        if resp.status_code != self.expected_status:
            context.add_error(
                f"{self.name}: expected {self.expected_status}, got {resp.status_code}"
            )
        if self.report_latency:
            context.add_message(f"{self.name}_latency_ms", round(latency, 1))


class TcpCheck:
    """Raw TCP port connectivity."""

    def __init__(self, name: str, hostname: str, port: int = 443, timeout_ms: int = 5_000) -> None:
        self.name = name
        self.hostname = hostname
        self.port = port
        self.timeout_ms = timeout_ms

    def __call__(self, context: ReportContext) -> None:
        try:
            sock = socket.create_connection((self.hostname, self.port), timeout=self.timeout_ms / 1000)
            sock.close()
        except OSError as e:
            logger.warning("TCP check %s failed: %s", self.name, e)
            context.add_error(f"{self.name}: {self.hostname}:{self.port} unreachable ({type(e).__name__})")


class DnsCheck:
    """DNS resolution of a host name, bounded by ``timeout_ms``."""

    def __init__(self, name: str, hostname: str, timeout_ms: int = 5_000) -> None:
        self.name = name
        self.hostname = hostname
        self.timeout_ms = timeout_ms

    def __call__(self, context: ReportContext) -> None:
        failures: list[OSError] = []

        def resolve() -> None:
            try:
                socket.getaddrinfo(self.hostname, None)
            except OSError as e:
                failures.append(e)

        # getaddrinfo has no timeout of its own; a stuck lookup is left to finish on its daemon thread
        resolver = threading.Thread(target=resolve, name=f"dns-{self.name}", daemon=True)
        resolver.start()
        resolver.join(self.timeout_ms / 1000)

        if resolver.is_alive():
            logger.warning("DNS check %s timed out after %dms", self.name, self.timeout_ms)
            context.add_error(f"{self.name}: resolving {self.hostname} timed out after {self.timeout_ms}ms")
        elif failures:
            logger.warning("DNS check %s failed: %s", self.name, failures[0])
            context.add_error(f"{self.name}: could not resolve {self.hostname}")


class SqliteCheck:
    """Runs ``SELECT 1`` against a SQLite database file."""

    def __init__(self, name: str, path: str | Path, timeout_ms: int = 5_000) -> None:
        self.name = name
        self.path = Path(path)
        self.timeout_ms = timeout_ms

    def __call__(self, context: ReportContext) -> None:
        # mode=rw: never create a missing database as a side effect
        uri = f"{self.path.resolve().as_uri()}?mode=rw"
        try:
            conn = sqlite3.connect(uri, uri=True, timeout=self.timeout_ms / 1000)
            try:
                conn.execute("SELECT 1").fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.warning("Database check %s failed: %s", self.name, e)
            context.add_error(ErrorKind.DATABASE_UNAVAILABLE)
