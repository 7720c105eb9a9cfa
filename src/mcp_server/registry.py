"""Tool Registry for MCP Server.

Manages registration, discovery, and lookup of tools from all domains.
Tools are registered at startup; the registry is then sealed and only read
while serving.
"""

from typing import Any, Optional

from shared.errors import ToolNotFoundError, ToolRegistrationError
from shared.logging import get_logger
from shared.models import ToolDefinition
from shared.schema import check_schema, validate_schema

logger = get_logger(__name__)


class ToolRegistry:
    """
    Catalogue of all MCP tools.

    Responsibilities:
    - Register tools from domains, rejecting duplicate names
    - Lookup tools by name
    - Validate tool arguments against input schemas
    - Expose the catalogue in registration order
    """

    def __init__(self) -> None:
        self._tools: dict[str, ToolDefinition] = {}
        self._sealed = False

    def __contains__(self, tool_name: str) -> bool:
        return tool_name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    @property
    def sealed(self) -> bool:
        return self._sealed

    def register(self, tool: ToolDefinition) -> None:
        """
        Register a tool in the registry.

        Args:
            tool: Tool definition to register

        Raises:
            ToolRegistrationError: If the name is taken, the input schema is
                not a valid JSON Schema, or the registry is sealed
        """
        if self._sealed:
            raise ToolRegistrationError(
                f"Cannot register '{tool.name}': registry is sealed"
            )

        if tool.name in self._tools:
            raise ToolRegistrationError(f"Tool '{tool.name}' is already registered")

        schema_errors = check_schema(tool.input_schema)
        if schema_errors:
            raise ToolRegistrationError(
                f"Tool '{tool.name}' has an invalid input schema: {schema_errors[0]}"
            )

        self._tools[tool.name] = tool

        logger.debug(
            "Tool registered",
            tool=tool.name,
            domain=tool.domain,
            execution_type=tool.execution_type.value
        )

    def register_many(self, tools: list[ToolDefinition]) -> None:
        """Register multiple tools at once."""
        for tool in tools:
            self.register(tool)

    def seal(self) -> None:
        """Freeze the catalogue. Called once startup registration completes."""
        self._sealed = True
        logger.info(
            "Tool registry sealed",
            tool_count=len(self._tools),
            domains=self.list_domains()
        )

    def get(self, tool_name: str) -> ToolDefinition:
        """
        Get a tool by name.

        Raises:
            ToolNotFoundError: If no tool has that name
        """
        tool = self._tools.get(tool_name)
        if tool is None:
            raise ToolNotFoundError(tool_name)
        return tool

    def list_tools(self, domain: Optional[str] = None) -> list[ToolDefinition]:
        """
        List all registered tools in registration order.

        Args:
            domain: Filter by domain name
        """
        tools = list(self._tools.values())

        if domain:
            tools = [t for t in tools if t.domain == domain]

        return tools

    def list_domains(self) -> list[str]:
        """List registered domains in first-registration order."""
        return list(dict.fromkeys(t.domain for t in self._tools.values()))

    def validate_input(
        self,
        tool_name: str,
        parameters: dict[str, Any]
    ) -> tuple[bool, list[str]]:
        """
        Validate input parameters against tool's input schema.

        Args:
            tool_name: Tool name
            parameters: Input parameters to validate

        Returns:
            Tuple of (is_valid, list of error messages)
        """
        tool = self.get(tool_name)

        if not tool.input_schema:
            return True, []

        return validate_schema(parameters, tool.input_schema)

    def catalogue(self) -> list[dict[str, str]]:
        """Name and description of every tool, in registration order."""
        return [
            {"name": tool.name, "description": tool.description}
            for tool in self._tools.values()
        ]

    def get_tool_count(self) -> dict[str, int]:
        """Get count of tools per domain."""
        counts: dict[str, int] = {}
        for tool in self._tools.values():
            counts[tool.domain] = counts.get(tool.domain, 0) + 1
        return counts
