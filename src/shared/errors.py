"""Error taxonomy for the Leaf MCP proxy.

Every failure the proxy reports to an MCP client is one of these. They are
raised where the problem is detected and propagate unchanged to the
transport layer, which reports them as tool error results.
"""

from typing import Optional


class LeafProxyError(Exception):
    """Base exception for all proxy errors."""

    code = "ERROR"

    def __init__(self, message: str, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ConfigurationError(LeafProxyError):
    """Required configuration is missing. Raised at startup only."""

    code = "CONFIGURATION_ERROR"


class UnauthorizedError(LeafProxyError):
    """No usable credential for the current call."""

    code = "UNAUTHORIZED"


class InvalidArgumentError(LeafProxyError):
    """Tool arguments failed schema validation."""

    code = "INVALID_ARGUMENT"

    def __init__(self, message: str, errors: Optional[list[str]] = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class RequestConstructionError(InvalidArgumentError):
    """An upstream URL could not be built from the given arguments."""


class NotFoundError(LeafProxyError):
    code = "NOT_FOUND"


class ToolNotFoundError(NotFoundError):
    def __init__(self, tool_name: str) -> None:
        super().__init__(f"Tool '{tool_name}' not found")
        self.tool_name = tool_name


class DocNotFoundError(NotFoundError):
    def __init__(self, slug: str) -> None:
        super().__init__(f"Document '{slug}' not found")
        self.slug = slug


class UpstreamUnreachableError(LeafProxyError):
    """The upstream API could not be reached (DNS, connect, timeout)."""

    code = "UPSTREAM_UNREACHABLE"


class ToolRegistrationError(LeafProxyError, ValueError):
    """A tool catalogue could not be built."""

    code = "TOOL_REGISTRATION_ERROR"
