"""
pdfextract web server.

A FastAPI server exposing the same tools over plain HTTP, plus the
health and test endpoints used to exercise the working-directory tools
from a browser or curl.

Usage:
    pdfextract web                 # Start server on localhost:45451
    pdfextract web -p 3000         # Custom port
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from fastapi import Body, FastAPI
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel

from pdfextract import __version__
from pdfextract.config import ExtractorConfig
from pdfextract.errors import ExtractorError, MissingParameterError
from pdfextract.serve import build_dispatcher
from pdfextract.tools import TOOLS, ToolDispatcher

logger = logging.getLogger(__name__)


# =============================================================================
# Request/Response Models
# =============================================================================


class FileRequest(BaseModel):
    filename: str | None = None


class ToolCallResponse(BaseModel):
    isError: bool
    content: str


def _error(status_code: int, error: ExtractorError) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error.to_dict())


def _require_filename(request: FileRequest) -> str:
    if not request.filename or not request.filename.strip():
        raise MissingParameterError("filename")
    return request.filename


# =============================================================================
# FastAPI App
# =============================================================================


def create_app(config: ExtractorConfig, dispatcher: ToolDispatcher | None = None) -> FastAPI:
    """
    Create the HTTP front door.

    Args:
        config: Runtime configuration
        dispatcher: Pre-built dispatcher (built from config if omitted)

    Returns:
        FastAPI application
    """
    if dispatcher is None:
        dispatcher = build_dispatcher(config)
    workspace = dispatcher.workspace

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """App lifespan handler for startup/shutdown."""
        logger.info("PDF extractor server starting (files: %s)", config.files_directory)
        yield
        logger.info("Shutting down...")

    app = FastAPI(
        title="PDF Extractor",
        description="PDF text, image, table, form and metadata extraction",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    # -------------------------------------------------------------------------
    # Health
    # -------------------------------------------------------------------------

    @app.get("/api/health")
    async def health() -> dict[str, Any]:
        directory = config.files_directory
        return {
            "status": "ok",
            "server": "PDF Extractor Server",
            "version": __version__,
            "filesDirectoryExists": directory.exists(),
            "filesDirectoryReadable": os.access(directory, os.R_OK),
            "filesDirectoryWritable": os.access(directory, os.W_OK),
        }

    # -------------------------------------------------------------------------
    # Working-directory test endpoints
    # -------------------------------------------------------------------------

    @app.get("/api/test/list")
    async def list_files():
        try:
            return await run_in_threadpool(workspace.list_files)
        except ExtractorError as e:
            return _error(500, e)

    @app.post("/api/test/extract-html")
    async def extract_html(request: FileRequest):
        try:
            filename = _require_filename(request)
        except ExtractorError as e:
            return _error(400, e)
        try:
            return await run_in_threadpool(workspace.extract_html, filename)
        except ExtractorError as e:
            return _error(500, e)

    @app.post("/api/test/extract-text")
    async def extract_text(request: FileRequest):
        try:
            filename = _require_filename(request)
        except ExtractorError as e:
            return _error(400, e)
        try:
            return await run_in_threadpool(workspace.extract_text, filename)
        except ExtractorError as e:
            return _error(500, e)

    @app.post("/api/test/raw-html")
    async def raw_html(request: FileRequest):
        if not request.filename or not request.filename.strip():
            return HTMLResponse(
                "<html><body><h1>Error: Filename is required</h1></body></html>",
                status_code=400,
            )
        try:
            result = await run_in_threadpool(workspace.extract_html, request.filename)
        except ExtractorError as e:
            return HTMLResponse(
                f"<html><body><h1>Error: {e.message}</h1></body></html>",
                status_code=500,
            )
        return HTMLResponse(result["html"])

    # -------------------------------------------------------------------------
    # Tool API
    # -------------------------------------------------------------------------

    @app.get("/api/tools")
    async def list_tools() -> list[dict[str, Any]]:
        return [tool.to_dict() for tool in TOOLS]

    @app.post("/api/tools/{name}", response_model=ToolCallResponse)
    async def call_tool(name: str, arguments: dict[str, Any] | None = Body(default=None)):
        response = await run_in_threadpool(dispatcher.dispatch, name, arguments or {})
        return response.to_dict()

    return app


# =============================================================================
# Server Runner
# =============================================================================


def run_server(config: ExtractorConfig, host: str = "127.0.0.1", port: int | None = None) -> None:
    """
    Run the web server.

    Args:
        config: Runtime configuration
        host: Host to bind to
        port: Port to bind to (defaults to config.server_port)
    """
    import uvicorn

    port = port or config.server_port
    app = create_app(config)

    logger.info("PDF extractor server running at http://%s:%d", host, port)
    logger.info("Health check: http://%s:%d/api/health", host, port)
    uvicorn.run(app, host=host, port=port, log_level="warning")
