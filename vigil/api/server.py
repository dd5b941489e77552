"""FastAPI server exposing the status endpoint."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI

from vigil import __version__
from vigil.api.status_routes import status_router
from vigil.config import settings
from vigil.health import default_checker
from vigil.health.catalog import register_checks
from vigil.health.checker import Checker
from vigil.health.errors import CheckFileError
from vigil.health.serializer import load_error_catalog

logger = logging.getLogger(__name__)


def create_app(checker: Checker | None = None, checks_file: Path | None = None) -> FastAPI:
    """Create the status application.

    ``checker`` defaults to the process-wide checker. Checks from
    ``checks_file`` (default: the configured check file) are registered on
    startup.
    """
    checker = checker if checker is not None else default_checker
    if checks_file is None and settings.checks_file:
        checks_file = Path(settings.checks_file)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if checks_file is not None:
            try:
                added = register_checks(checker, checks_file)
                logger.info("Registered %d checks from %s", added, checks_file)
            except CheckFileError:
                logger.exception("Check file rejected — serving without file checks")

        yield

        checker.close()
        logger.info("Status server stopped")

    app = FastAPI(
        title="Vigil - Status Endpoint",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.checker = checker
    app.state.error_catalog = load_error_catalog(
        Path(settings.error_messages_file) if settings.error_messages_file else None
    )
    app.include_router(status_router)
    return app
