"""Catch-all error handling.

Anything a handler raises that is not an ``HTTPException`` or a validation
error ends up here: it is logged with its traceback and answered with
HTTP 500. Outside production the body is the exception message; in
production it is exactly ``Server error``.

The conversion happens in an HTTP middleware installed before CORS, so the
500 still passes through ``CORSMiddleware`` and an allowed frontend can
read it. Nothing is re-raised to the server, so each error is logged once.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Server error"


def register_error_handlers(app: FastAPI, expose_details: bool) -> None:
    """Register the catch-all handler on the app.

    Must be called before ``CORSMiddleware`` is added: middleware added
    later wraps the ones added earlier.

    Args:
        app: Application to install the handler on
        expose_details: Return the exception message instead of a generic one
    """

    @app.middleware("http")
    async def catch_unhandled_errors(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            logger.error(
                f"Unhandled exception on {request.method} {request.url.path}: {exc}",
                exc_info=exc,
            )
            body = str(exc) if expose_details else GENERIC_ERROR_MESSAGE
            return PlainTextResponse(
                body, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
            )
