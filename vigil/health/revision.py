"""Build revision lookup.

Resolution order: explicit value -> revision file -> ``git rev-parse HEAD``
-> ``"unknown"``. The result is memoized until ``refresh()`` or ``set()``.
"""

from __future__ import annotations

import logging
import subprocess
import threading
from pathlib import Path

from ..config import settings
from .context import UNKNOWN_REVISION

logger = logging.getLogger(__name__)


class Revision:
    """Resolves and caches the revision string of the running build."""

    def __init__(
        self,
        value: str = "",
        path: Path | None = None,
        git_dir: Path | None = None,
        git_timeout: float = 5.0,
    ) -> None:
        self._explicit = value.strip()
        self._path = path
        self._git_dir = git_dir
        self._git_timeout = git_timeout
        self._current: str | None = None
        self._lock = threading.Lock()

    def current(self) -> str:
        with self._lock:
            if self._current is None:
                self._current = self._resolve()
            return self._current

    def refresh(self) -> str:
        """Forget the cached value and resolve again."""
        with self._lock:
            self._current = None
        return self.current()

    def set(self, value: str) -> None:
        with self._lock:
            self._current = value

    def _resolve(self) -> str:
        if self._explicit:
            return self._explicit
        return self._from_file() or self._from_git() or UNKNOWN_REVISION

    def _from_file(self) -> str:
        if self._path is None or not self._path.is_file():
            return ""
        try:
            lines = self._path.read_text(encoding="utf-8").splitlines()
        except OSError as e:
            logger.warning("Could not read revision file %s: %s", self._path, e)
            return ""
        return lines[0].strip() if lines else ""

    def _from_git(self) -> str:
        try:
            return subprocess.check_output(
                ["git", "rev-parse", "HEAD"],
                cwd=str(self._git_dir) if self._git_dir else None,
                stderr=subprocess.DEVNULL,
                text=True,
                timeout=self._git_timeout,
            ).strip()
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug("git revision lookup failed: %s", e)
            return ""


default_revision = Revision(
    value=settings.revision,
    path=Path(settings.revision_file),
    git_dir=Path(settings.revision_dir),
)


def current_revision() -> str:
    return default_revision.current()
