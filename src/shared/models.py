"""Core data models for the Leaf MCP proxy.

Tool definitions, endpoint bindings, per-call authorization context and
normalized tool responses. Definitions are immutable once built.
"""

import json
import re
from abc import ABC, abstractmethod
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

PLACEHOLDER_PATTERN = re.compile(r"\{([^{}]+)\}")


class ExecutionType(str, Enum):
    """Type of tool execution - read operations vs write operations."""
    READ = "read"
    WRITE = "write"


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"

    @property
    def is_mutating(self) -> bool:
        return self in (HttpMethod.POST, HttpMethod.PUT, HttpMethod.PATCH)


class TenancyMode(str, Enum):
    """Where call credentials come from."""
    SINGLE = "single"
    MULTI = "multi"


class EndpointBinding(BaseModel, ABC):
    """Association between a tool and one upstream HTTP operation."""

    model_config = ConfigDict(frozen=True)

    method: HttpMethod
    path_template: str = Field(..., description="Path relative to the base URL")
    body_field: Optional[str] = None

    @property
    def placeholders(self) -> list[str]:
        """Placeholder names in template order."""
        return PLACEHOLDER_PATTERN.findall(self.path_template)

    @abstractmethod
    def query_fields(self, input_schema: dict[str, Any]) -> list[str]:
        """Argument names sent as query parameters, in emission order."""


class StaticBinding(EndpointBinding):
    """
    Hand-written binding.

    Every schema property that is neither a path placeholder nor the body
    field is sent as a query parameter.
    """
    kind: Literal["static"] = "static"

    def query_fields(self, input_schema: dict[str, Any]) -> list[str]:
        consumed = set(self.placeholders)
        if self.body_field:
            consumed.add(self.body_field)
        return [
            name for name in input_schema.get("properties", {})
            if name not in consumed
        ]


class DerivedBinding(EndpointBinding):
    """Binding derived from an OpenAPI operation with explicit query parameters."""
    kind: Literal["derived"] = "derived"
    operation_id: Optional[str] = None
    query_params: tuple[str, ...] = ()

    def query_fields(self, input_schema: dict[str, Any]) -> list[str]:
        placeholders = set(self.placeholders)
        return [name for name in self.query_params if name not in placeholders]


Binding = Annotated[Union[StaticBinding, DerivedBinding], Field(discriminator="kind")]


class ToolDefinition(BaseModel):
    """
    Complete definition of an MCP tool.

    Tools are declarative and immutable. A tool with a binding is executed
    against the upstream API; a tool without one is served locally by its
    domain adapter.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Unique tool name, used as dispatch key")
    domain: str = Field(..., description="Adapter routing key")
    description: str = Field(..., description="Clear description for LLM usage")

    input_schema: dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}},
        description="JSON Schema for input validation"
    )
    binding: Optional[Binding] = None

    tags: list[str] = Field(default_factory=list)

    @property
    def execution_type(self) -> ExecutionType:
        if self.binding is not None and self.binding.method.is_mutating:
            return ExecutionType.WRITE
        return ExecutionType.READ

    @model_validator(mode="after")
    def _check_binding(self) -> "ToolDefinition":
        if self.binding is None:
            return self

        properties = self.input_schema.get("properties", {})
        required = set(self.input_schema.get("required", []))

        for placeholder in self.binding.placeholders:
            if placeholder not in properties or placeholder not in required:
                raise ValueError(
                    f"Tool '{self.name}': path placeholder '{placeholder}' "
                    f"must be a required parameter"
                )

        if self.binding.body_field and self.binding.body_field not in properties:
            raise ValueError(
                f"Tool '{self.name}': body field '{self.binding.body_field}' "
                f"is not a declared parameter"
            )
        return self


class AuthContext(BaseModel):
    """Per-call authorization context."""
    session_token: Optional[str] = Field(
        default=None,
        description="Raw credential supplied by the HTTP authentication gate"
    )


class UpstreamRequest(BaseModel):
    """A fully built upstream HTTP request."""
    method: HttpMethod
    url: str
    headers: dict[str, str] = Field(default_factory=dict)
    body: Optional[bytes] = None


class JsonResponse(BaseModel):
    """Upstream body that parsed as JSON."""
    kind: Literal["json"] = "json"
    value: Any = None

    def render(self) -> str:
        return json.dumps(self.value, ensure_ascii=False, separators=(",", ":"))


class TextResponse(BaseModel):
    """Upstream body returned verbatim."""
    kind: Literal["text"] = "text"
    text: str = ""

    def render(self) -> str:
        return self.text


ToolResponse = Annotated[Union[JsonResponse, TextResponse], Field(discriminator="kind")]
