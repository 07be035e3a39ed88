"""MCP Transport — binds the dispatcher to the MCP SDK's low-level server over stdio.

Invariants:
    - Every protocol handler delegates to Dispatcher: no capability logic here
    - Tool failures become CallToolResult(isError=True); resource failures become
      JSON-RPC errors (resources/read has no isError field)
    - The SDK's own input validation is off: the dispatcher owns shape validation
    - Stdio setup failures surface as TransportConnectError, never a bare exception
    - "Server connected" is logged once the stdio streams exist

Design Decisions:
    - Low-level Server over FastMCP: capabilities are registered from our registry,
      not by decorating Python functions
    - Framing, session handshake and per-request task spawning stay in the SDK
"""

import logging
from contextlib import AsyncExitStack

import mcp.types as types
from mcp.server.lowlevel import NotificationOptions, Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError
from pydantic import AnyUrl

from demo_server.config import Settings
from demo_server.core.errors import TransportConnectError, jsonrpc_code_for
from demo_server.schemas.capability import Response
from demo_server.services.dispatch import Dispatcher

logger = logging.getLogger(__name__)


class ToolCallFailed(Exception):
    """Raised inside call_tool so the SDK answers with isError=True."""


def build_mcp_server(dispatcher: Dispatcher, settings: Settings) -> Server:
    """Low-level MCP server whose handlers all route through `dispatcher`."""
    server = Server(settings.server_name, version=settings.server_version)
    registry = dispatcher.registry

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [
            types.Tool(
                name=d.name,
                description=d.description or None,
                inputSchema=d.input_schema,
            )
            for d in registry.tools()
        ]

    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict) -> list[types.TextContent]:
        response = await dispatcher.call_tool(name, arguments)
        if response.is_error:
            raise ToolCallFailed(response.first_text())
        return to_text_content(response)

    @server.list_resources()
    async def list_resources() -> list[types.Resource]:
        # Templates are not enumerable
        return []

    @server.list_resource_templates()
    async def list_resource_templates() -> list[types.ResourceTemplate]:
        return [
            types.ResourceTemplate(
                name=d.name,
                uriTemplate=d.uri_template.template,
                description=d.description or None,
                mimeType=d.mime_type,
            )
            for d in registry.resource_templates()
        ]

    @server.read_resource()
    async def read_resource(uri: AnyUrl) -> list[ReadResourceContents]:
        response = await dispatcher.read_resource(str(uri))
        if response.is_error:
            raise McpError(types.ErrorData(
                code=jsonrpc_code_for(response.error_code),
                message=response.first_text(),
            ))
        return [
            ReadResourceContents(content=c.text, mime_type=c.mime_type)
            for c in response.contents
        ]

    return server


def to_text_content(response: Response) -> list[types.TextContent]:
    """Response.content -> MCP text content blocks, order preserved."""
    return [
        types.TextContent(type="text", text=item.text)
        for item in response.content
    ]


async def serve_stdio(server: Server) -> None:
    """Connect stdin/stdout and serve until the client closes stdin."""
    async with AsyncExitStack() as stack:
        try:
            read_stream, write_stream = await stack.enter_async_context(
                stdio_server(),
            )
        except Exception as e:
            raise TransportConnectError(str(e) or type(e).__name__) from e

        logger.info("Server connected")
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(
                notification_options=NotificationOptions(),
            ),
        )
