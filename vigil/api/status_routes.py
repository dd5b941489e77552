"""Status endpoint.

  GET /status — run every registered check and return the report.
                200 when healthy, 500 when any check reported an error.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from vigil.config import settings
from vigil.health.checker import Checker
from vigil.health.serializer import render_report

logger = logging.getLogger(__name__)

status_router = APIRouter()


@status_router.get(settings.status_path)
def get_status(request: Request) -> JSONResponse:
    """Run all checks and render the report."""
    checker: Checker = request.app.state.checker
    catalog: dict[str, str] | None = getattr(request.app.state, "error_catalog", None)

    context = checker.run()
    payload = render_report(context, catalog)

    if context.has_errors():
        logger.warning("Status check failed: %s", payload["errors"])
        return JSONResponse(status_code=500, content=payload)
    return JSONResponse(status_code=200, content=payload)
