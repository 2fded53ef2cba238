"""
MCP Server for pdfextract.

Exposes the extraction tools to AI agents via the Model Context Protocol
over stdio.

Tools:
    extract-pdf-text      - Page-by-page text of a PDF
    extract-pdf-images    - Save embedded images
    extract-pdf-tables    - Tab-delimited table detection
    extract-pdf-forms     - Interactive form fields
    extract-pdf-metadata  - Document properties and file information
    extract-pdf-full      - All of the above, merged
    extract-to-html       - HTML rendition of a working-directory file
    extract-text          - Plain text of a working-directory file
    list-files            - Files in the working directory
    get-file-metadata     - Metadata of a working-directory file
"""

from __future__ import annotations

import asyncio
import logging

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from pdfextract.config import ExtractorConfig
from pdfextract.router import ExtractionRouter
from pdfextract.storage import DocumentWorkspace
from pdfextract.tools import TOOLS, ToolDispatcher

logger = logging.getLogger(__name__)

SERVER_NAME = "pdf-extractor-server"


class ToolCallError(Exception):
    """Carries an error envelope out of a tool handler.

    The low-level MCP server turns exceptions raised by ``call_tool`` into
    results with ``isError`` set, using the exception text as content.
    """


def build_dispatcher(config: ExtractorConfig) -> ToolDispatcher:
    """Wire the router and workspace for a configuration."""
    return ToolDispatcher(
        ExtractionRouter(config),
        DocumentWorkspace(config.files_directory),
    )


def create_server(config: ExtractorConfig, dispatcher: ToolDispatcher | None = None) -> Server:
    """
    Create an MCP server exposing the extraction tools.

    Args:
        config: Runtime configuration
        dispatcher: Pre-built dispatcher (built from config if omitted)

    Returns:
        Configured MCP Server instance
    """
    if dispatcher is None:
        dispatcher = build_dispatcher(config)

    server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return [
            Tool(
                name=tool.name,
                description=tool.description,
                inputSchema=tool.input_schema,
            )
            for tool in TOOLS
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict) -> list[TextContent]:
        # Extraction is blocking file and parser work
        response = await asyncio.to_thread(dispatcher.dispatch, name, arguments)
        if response.is_error:
            raise ToolCallError(response.text)
        return [TextContent(type="text", text=response.text)]

    return server


async def run_server(config: ExtractorConfig) -> None:
    """
    Run the MCP server over stdio.

    Args:
        config: Runtime configuration
    """
    server = create_server(config)
    logger.info("STDIO MCP server started. Available tools: %s", ", ".join(t.name for t in TOOLS))

    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )
