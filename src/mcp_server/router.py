"""Tool dispatch for MCP Server.

Routes tool calls to the adapter registered for the tool's domain.
Handles lookup and validation; every failure is raised to the caller.
"""

import time
from typing import Any, Awaitable, Callable, Optional

from shared.errors import InvalidArgumentError, LeafProxyError
from shared.logging import get_logger
from shared.models import AuthContext, ToolDefinition, ToolResponse
from mcp_server.registry import ToolRegistry

logger = get_logger(__name__)


# Type alias for adapter execute functions
AdapterExecutor = Callable[
    [ToolDefinition, dict[str, Any], AuthContext],
    Awaitable[ToolResponse]
]


class ToolDispatcher:
    """
    Dispatches tool calls to domain adapters.

    Responsibilities:
    - Look up the tool
    - Validate arguments against its schema before any adapter runs
    - Route to the domain's adapter
    """

    def __init__(self, registry: ToolRegistry) -> None:
        self.registry = registry
        self._adapters: dict[str, AdapterExecutor] = {}

    def register_adapter(self, domain: str, executor: AdapterExecutor) -> None:
        """
        Register a domain adapter.

        Args:
            domain: Domain name
            executor: Coroutine function that executes tools for this domain
        """
        self._adapters[domain] = executor
        logger.debug("Adapter registered", domain=domain)

    async def dispatch(
        self,
        tool_name: str,
        arguments: Optional[dict[str, Any]] = None,
        context: Optional[AuthContext] = None
    ) -> ToolResponse:
        """
        Execute a tool call.

        Args:
            tool_name: Name of the tool
            arguments: Raw tool arguments
            context: Per-call authorization context

        Returns:
            Normalized tool response

        Raises:
            ToolNotFoundError: Unknown tool
            InvalidArgumentError: Arguments fail schema validation
            UnauthorizedError: No credential for an upstream call
            UpstreamUnreachableError: Upstream could not be reached
        """
        start_time = time.time()
        arguments = arguments if arguments is not None else {}
        context = context or AuthContext()

        tool = self.registry.get(tool_name)

        if not isinstance(arguments, dict):
            raise InvalidArgumentError(
                "Validation failed: arguments must be an object",
                errors=["arguments must be an object"]
            )

        is_valid, errors = self.registry.validate_input(tool_name, arguments)
        if not is_valid:
            logger.info("Tool arguments rejected", tool=tool_name, errors=errors)
            raise InvalidArgumentError(
                f"Validation failed: {'; '.join(errors)}",
                errors=errors
            )

        adapter = self._adapters.get(tool.domain)
        if adapter is None:
            raise LeafProxyError(
                f"No adapter registered for domain '{tool.domain}'",
                code="NO_ADAPTER"
            )

        logger.debug(
            "Executing tool",
            tool=tool_name,
            domain=tool.domain,
            execution_type=tool.execution_type.value
        )

        try:
            response = await adapter(tool, arguments, context)
        except LeafProxyError as e:
            logger.info("Tool call failed", tool=tool_name, error_code=e.code)
            raise

        logger.info(
            "Tool executed",
            tool=tool_name,
            response_kind=response.kind,
            execution_time_ms=round((time.time() - start_time) * 1000, 1)
        )
        return response
