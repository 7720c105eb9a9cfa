"""MCP Server - Tool registry, credential resolution, and dispatch.

The MCP Server exposes Leaf API endpoints as MCP tools. It registers tools,
validates arguments, resolves the bearer token of each call, forwards the
call upstream and normalizes the response.
"""

from mcp_server.registry import ToolRegistry
from mcp_server.router import ToolDispatcher
from mcp_server.auth import AuthorizationResolver, BearerAuthGate, extract_bearer_token
from mcp_server.normalizer import normalize
from mcp_server.upstream import UpstreamClient, UpstreamExecutor, build_request

__all__ = [
    "ToolRegistry",
    "ToolDispatcher",
    "AuthorizationResolver",
    "BearerAuthGate",
    "extract_bearer_token",
    "normalize",
    "UpstreamClient",
    "UpstreamExecutor",
    "build_request",
]
