"""MCP runtime wiring.

Exposes the tool registry through the low-level MCP server and runs it over
stdio or the streamable HTTP transport.
"""

import uuid

import mcp.types as types
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.types import Receive, Scope, Send

from shared.logging import bind_context, clear_context, get_logger
from shared.models import AuthContext, ExecutionType, ToolDefinition
from mcp_server.auth import SESSION_TOKEN_KEY
from mcp_server.registry import ToolRegistry
from mcp_server.router import ToolDispatcher

logger = get_logger(__name__)

SERVER_NAME = "Leaf API"
SERVER_VERSION = "1.0.0"


def session_context(server: Server) -> AuthContext:
    """
    Authorization context of the MCP request being handled.

    Under HTTP the authentication gate left the caller's token in the
    request state; under stdio there is no HTTP request and the context is
    empty.
    """
    try:
        request_context = server.request_context
    except LookupError:
        return AuthContext()

    request = getattr(request_context, "request", None)
    state = getattr(request, "state", None)
    return AuthContext(session_token=getattr(state, SESSION_TOKEN_KEY, None))


def to_mcp_tool(tool: ToolDefinition) -> types.Tool:
    return types.Tool(
        name=tool.name,
        description=tool.description,
        inputSchema=tool.input_schema,
        annotations=types.ToolAnnotations(
            readOnlyHint=tool.execution_type == ExecutionType.READ
        ),
    )


def create_mcp_server(registry: ToolRegistry, dispatcher: ToolDispatcher) -> Server:
    """
    Build the MCP server for a sealed registry.

    Tool results are a single text item. Failures are raised and reported
    by the runtime as tool error results.
    """
    server = Server(SERVER_NAME, version=SERVER_VERSION)
    tools = [to_mcp_tool(tool) for tool in registry.list_tools()]

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return tools

    @server.call_tool()
    async def call_tool(name: str, arguments: dict) -> list[types.TextContent]:
        bind_context(call_id=uuid.uuid4().hex[:12], tool=name)
        try:
            response = await dispatcher.dispatch(name, arguments, session_context(server))
        finally:
            clear_context()
        return [types.TextContent(type="text", text=response.render())]

    logger.info("MCP server created", tool_count=len(tools))
    return server


async def run_stdio(server: Server) -> None:
    """Serve MCP over stdin/stdout until the client disconnects."""
    logger.info("Serving MCP over stdio")
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options()
        )


class StreamableHTTPEndpoint:
    """ASGI endpoint handing requests to the MCP session manager."""

    def __init__(self, session_manager: StreamableHTTPSessionManager) -> None:
        self.session_manager = session_manager

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self.session_manager.handle_request(scope, receive, send)
