# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Dev-server endpoint serving the sprite injection module."""

import logging

from fastapi import FastAPI, Request, Response

from spriteify.assembler import IdentifierCollisionError
from spriteify.module_code import weak_etag
from spriteify.orchestrator import IncrementalOrchestrator

logger = logging.getLogger(__name__)

MODULE_CONTENT_TYPE: str = "application/javascript"


def module_url(dom_id: str) -> str:
    """Return the virtual module path for a container id."""
    return f"/@id/{dom_id}"


def create_app(orchestrator: IncrementalOrchestrator) -> FastAPI:
    """Create the dev-server application for one orchestrator.

    Args:
        orchestrator: Orchestrator whose cache backs the served module.

    Returns:
        FastAPI application exposing the virtual module route.
    """
    app = FastAPI(title="spriteify dev server", docs_url=None, redoc_url=None)
    dom_id = orchestrator.config.dom_id

    @app.get(module_url(dom_id))
    def sprite_module(request: Request) -> Response:
        try:
            code = orchestrator.module_code()
        except IdentifierCollisionError as exc:
            logger.warning(f"Serving sprite module failed (dom_id={dom_id} error={exc})")
            return Response(
                content=f"Error generating SVG sprite: {exc}",
                status_code=500,
                media_type="text/plain",
            )
        etag = weak_etag(code)
        headers = {"Cache-Control": "no-cache", "ETag": etag}
        if request.headers.get("if-none-match") == etag:
            return Response(status_code=304, headers=headers)
        logger.debug(f"Served sprite module (dom_id={dom_id} bytes={len(code)})")
        return Response(content=code, media_type=MODULE_CONTENT_TYPE, headers=headers)

    return app
