"""Upstream HTTP access.

Builds requests from endpoint bindings, sends them to the Leaf API and
normalizes the response body. Upstream status codes are not interpreted:
a 4xx/5xx body reaches the caller the same way a 2xx body does.
"""

import json
import time
from typing import Any, Optional
from urllib.parse import quote

import httpx

from shared.errors import RequestConstructionError, UpstreamUnreachableError
from shared.logging import get_logger
from shared.models import (
    PLACEHOLDER_PATTERN,
    AuthContext,
    EndpointBinding,
    ToolDefinition,
    ToolResponse,
    UpstreamRequest,
)
from mcp_server.auth import AuthorizationResolver
from mcp_server.normalizer import normalize

logger = get_logger(__name__)


def stringify(value: Any) -> str:
    """String form of an argument as it appears in a URL."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join(stringify(v) for v in value)
    if isinstance(value, dict):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def build_request(
    base_url: str,
    binding: EndpointBinding,
    input_schema: dict[str, Any],
    arguments: dict[str, Any],
    authorization: str
) -> UpstreamRequest:
    """
    Build the upstream request for a tool call.

    Args:
        base_url: Upstream base URL, with its trailing "/"
        binding: Endpoint binding of the tool
        input_schema: Tool input schema (query parameter order follows it)
        arguments: Validated tool arguments
        authorization: Value of the Authorization header

    Returns:
        The request to send

    Raises:
        RequestConstructionError: If a path placeholder has no value
    """
    def substitute(match) -> str:
        name = match.group(1)
        value = arguments.get(name)
        if value is None:
            raise RequestConstructionError(
                f"Missing value for path parameter '{name}'",
                errors=[f"{name}: required path parameter"]
            )
        return quote(stringify(value), safe="")

    path = PLACEHOLDER_PATTERN.sub(substitute, binding.path_template)

    params = [
        (name, stringify(arguments[name]))
        for name in binding.query_fields(input_schema)
        if arguments.get(name) is not None
    ]

    url = httpx.URL(base_url).join(path)
    if params:
        url = url.copy_merge_params(params)

    headers = {"Authorization": authorization}
    body: Optional[bytes] = None

    if binding.method.is_mutating:
        payload = arguments.get(binding.body_field) if binding.body_field else None
        body = json.dumps(
            {} if payload is None else payload,
            separators=(",", ":")
        ).encode("utf-8")
        headers["Content-Type"] = "application/json"

    return UpstreamRequest(
        method=binding.method,
        url=str(url),
        headers=headers,
        body=body
    )


class UpstreamClient:
    """
    HTTP client for the Leaf API.

    One instance is shared by all concurrent calls; it holds no per-call state.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> None:
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport
            )
        return self._client

    async def send(self, request: UpstreamRequest) -> ToolResponse:
        """
        Send a request and normalize the response body.

        Raises:
            UpstreamUnreachableError: On DNS, connection or timeout failures
        """
        client = self._get_client()
        start_time = time.time()

        try:
            response = await client.request(
                request.method.value,
                request.url,
                headers=request.headers,
                content=request.body
            )
        except httpx.TransportError as e:
            logger.warning(
                "Upstream unreachable",
                method=request.method.value,
                url=request.url,
                error=str(e)
            )
            raise UpstreamUnreachableError(f"Upstream request failed: {e}") from e

        logger.info(
            "Upstream responded",
            method=request.method.value,
            url=request.url,
            status=response.status_code,
            elapsed_ms=round((time.time() - start_time) * 1000, 1)
        )
        return normalize(response.text)

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None


class UpstreamExecutor:
    """
    Dispatcher adapter for tools bound to upstream endpoints.

    Resolves the call's credential before anything is sent, so an
    unauthorized call never reaches the upstream API.
    """

    def __init__(
        self,
        client: UpstreamClient,
        resolver: AuthorizationResolver,
        base_url: str
    ) -> None:
        self.client = client
        self.resolver = resolver
        self.base_url = base_url

    async def __call__(
        self,
        tool: ToolDefinition,
        arguments: dict[str, Any],
        context: AuthContext
    ) -> ToolResponse:
        if tool.binding is None:
            raise RequestConstructionError(f"Tool '{tool.name}' has no endpoint binding")

        authorization = self.resolver.resolve(context)
        request = build_request(
            self.base_url,
            tool.binding,
            tool.input_schema,
            arguments,
            authorization
        )
        return await self.client.send(request)
