"""Shared utilities and base classes for the Leaf MCP proxy."""

from shared.models import (
    AuthContext,
    EndpointBinding,
    JsonResponse,
    TextResponse,
    ToolDefinition,
    ToolResponse,
)
from shared.config import Settings, get_settings
from shared.errors import LeafProxyError
from shared.logging import get_logger, setup_logging

__all__ = [
    "AuthContext",
    "EndpointBinding",
    "JsonResponse",
    "TextResponse",
    "ToolDefinition",
    "ToolResponse",
    "LeafProxyError",
    "Settings",
    "get_settings",
    "get_logger",
    "setup_logging",
]
