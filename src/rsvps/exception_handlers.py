"""Render core errors as JSON responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.rsvps.errors import PersistenceError, RSVPError

logger = logging.getLogger(__name__)


async def handle_rsvp_error(request: Request, exc: RSVPError) -> JSONResponse:
    if isinstance(exc, PersistenceError) or exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code, content={"detail": "Internal Server Error."}
        )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RSVPError, handle_rsvp_error)  # type: ignore[arg-type]
