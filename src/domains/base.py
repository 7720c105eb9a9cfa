"""Base classes for Leaf API domains.

A domain groups the tools of one Leaf service (fields, operations, ...).
REST domains only declare tools: each tool carries a static endpoint
binding and is executed by the shared upstream executor.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from shared.logging import get_logger
from shared.models import HttpMethod, StaticBinding, ToolDefinition

logger = get_logger(__name__)


# Reusable parameter schemas
PAGE = {
    "type": "integer",
    "minimum": 0,
    "description": "Zero-based page index"
}

SIZE = {
    "type": "integer",
    "minimum": 1,
    "maximum": 100,
    "description": "Page size (1-100)"
}

SORT = {
    "type": "string",
    "description": "Sort expression, e.g. 'startTime,desc'"
}

BODY = {
    "type": "object",
    "description": "JSON request body, sent as-is to the Leaf API"
}


def string_param(description: str) -> dict[str, Any]:
    return {"type": "string", "description": description}


def uuid_param(description: str) -> dict[str, Any]:
    return {"type": "string", "format": "uuid", "description": description}


PAGINATION_DOC = (
    "Pagination: 'page' is zero-based (default 0); 'size' is 1-100 "
    "(upstream default 20)."
)


class BaseDomain(ABC):
    """
    Base class for tool domains.

    Each domain:
    - Declares its tools once, at construction
    - Holds no per-call state
    """

    name: str = ""
    description: str = ""

    def __init__(self) -> None:
        self._tools: dict[str, ToolDefinition] = {}
        self._define_tools()

    @abstractmethod
    def _define_tools(self) -> None:
        """Populate ``self._tools``."""

    @property
    def tools(self) -> list[ToolDefinition]:
        """Return all tool definitions for this domain."""
        return list(self._tools.values())

    def get_tool(self, name: str) -> Optional[ToolDefinition]:
        """Get a tool definition by name."""
        return self._tools.get(name)


class RESTDomain(BaseDomain):
    """
    Base domain for Leaf REST services.

    Provides a declaration helper that pairs an input schema with a static
    endpoint binding.
    """

    def _add_tool(
        self,
        name: str,
        description: str,
        method: HttpMethod,
        path: str,
        properties: Optional[dict[str, Any]] = None,
        required: Optional[list[str]] = None,
        body_field: Optional[str] = None,
        tags: Optional[list[str]] = None
    ) -> ToolDefinition:
        input_schema: dict[str, Any] = {
            "type": "object",
            "properties": properties or {},
            "required": required or [],
        }
        tool = ToolDefinition(
            name=name,
            domain=self.name,
            description=description,
            input_schema=input_schema,
            binding=StaticBinding(
                method=method,
                path_template=path,
                body_field=body_field
            ),
            tags=tags or [self.name],
        )
        self._tools[name] = tool
        return tool
