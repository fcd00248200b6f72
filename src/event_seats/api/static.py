"""Serving the prebuilt frontend bundle.

Mounted after every API route so the API always takes precedence. Any
path that does not match a file in the bundle gets ``index.html`` and the
client-side router takes over.
"""

from __future__ import annotations

import logging
import os

from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response
from starlette.staticfiles import StaticFiles
from starlette.types import Scope

logger = logging.getLogger(__name__)

INDEX_FILE = "index.html"


class SPAStaticFiles(StaticFiles):
    """Static files with a single-page-application fallback."""

    async def get_response(self, path: str, scope: Scope) -> Response:
        try:
            response = await super().get_response(path, scope)
        except StarletteHTTPException as exc:
            if exc.status_code != 404:
                raise
            return await super().get_response(INDEX_FILE, scope)

        if response.status_code == 404:
            return await super().get_response(INDEX_FILE, scope)
        return response


def mount_frontend(app: FastAPI, directory: str) -> bool:
    """Serve the bundle at ``/`` if it exists. Returns whether it was mounted."""
    if not os.path.isdir(directory):
        logger.warning(f"Frontend bundle not found at {directory}; not serving it")
        return False

    app.mount("/", SPAStaticFiles(directory=directory, html=True), name="frontend")
    logger.info(f"Serving frontend bundle from {directory}")
    return True
