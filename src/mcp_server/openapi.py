"""Tool derivation from an OpenAPI document.

Each (path, method) operation in the document becomes one tool bound to that
endpoint. Tool names come from ``operationId`` when present and are
synthesized from the method and path otherwise. Duplicate names fail the
derivation instead of shadowing one another.
"""

import re
from pathlib import Path
from typing import Any, Optional

from shared.config import load_yaml_config
from shared.errors import ConfigurationError, ToolRegistrationError
from shared.logging import get_logger
from shared.models import (
    PLACEHOLDER_PATTERN,
    DerivedBinding,
    HttpMethod,
    ToolDefinition,
)
from shared.schema import check_schema

logger = get_logger(__name__)

HTTP_METHODS = ("get", "put", "post", "delete", "patch", "head", "options")
EXPOSED_LOCATIONS = ("path", "query")
JSON_MEDIA_TYPE = "application/json"
DERIVED_DOMAIN = "leaf"

_SEPARATOR_RUN = re.compile(r"[/{}_]+")


def synthesize_tool_name(method: str, path: str) -> str:
    """
    Build a tool name from an HTTP method and a path template.

    ``get`` + ``/users/{id}/fields`` gives ``get_users_id_fields``.
    """
    raw = f"{method.lower()}_{path}"
    return _SEPARATOR_RUN.sub("_", raw).strip("_")


def _merge_parameters(
    path_item: dict[str, Any],
    operation: dict[str, Any]
) -> list[dict[str, Any]]:
    """Path-level parameters overridden by operation-level ones on (name, in)."""
    merged: dict[tuple[str, str], dict[str, Any]] = {}
    for param in [*path_item.get("parameters", []), *operation.get("parameters", [])]:
        if "$ref" in param or "name" not in param:
            # Unresolved references are not followed
            continue
        merged[(param["name"], param.get("in", "query"))] = param
    return list(merged.values())


def _contains_ref(node: Any) -> bool:
    if isinstance(node, dict):
        return "$ref" in node or any(_contains_ref(v) for v in node.values())
    if isinstance(node, list):
        return any(_contains_ref(v) for v in node)
    return False


def _parameter_schema(name: str, schema: Any) -> dict[str, Any]:
    """
    JSON Schema for one parameter, or an unconstrained one.

    Component references are not resolved. OpenAPI 3.0 schemas that are
    not valid JSON Schema (a boolean ``exclusiveMinimum``, for one) accept
    any value instead of failing registration.
    """
    if not isinstance(schema, dict) or _contains_ref(schema):
        return {}
    errors = check_schema(schema)
    if errors:
        logger.debug("Parameter schema left unconstrained", parameter=name, error=errors[0])
        return {}
    return dict(schema)


def _describe(method: str, path: str, operation: dict[str, Any]) -> str:
    parts = [
        text.strip()
        for text in (operation.get("summary"), operation.get("description"))
        if text and text.strip()
    ]
    return "\n\n".join(parts) if parts else f"{method.upper()} {path}"


def _json_body_schema(operation: dict[str, Any]) -> Optional[dict[str, Any]]:
    request_body = operation.get("requestBody")
    if not request_body:
        return None
    content = request_body.get("content", {})
    media = content.get(JSON_MEDIA_TYPE)
    if media is None:
        return None
    schema: dict[str, Any] = {"type": "object", "description": "JSON request body"}
    if request_body.get("description"):
        schema["description"] = request_body["description"]
    return schema


def derive_tool(
    path: str,
    method: str,
    path_item: dict[str, Any],
    operation: dict[str, Any],
    domain: str = DERIVED_DOMAIN
) -> ToolDefinition:
    """Derive one tool definition from an OpenAPI operation."""
    operation_id = operation.get("operationId")
    name = operation_id or synthesize_tool_name(method, path)

    properties: dict[str, Any] = {}
    required: list[str] = []
    query_params: list[str] = []

    for param in _merge_parameters(path_item, operation):
        location = param.get("in", "query")
        if location not in EXPOSED_LOCATIONS:
            continue

        param_name = param["name"]
        schema = param.get("schema", {})
        prop = _parameter_schema(param_name, schema)
        if param.get("description"):
            prop["description"] = param["description"]
        properties[param_name] = prop

        if location == "path" or param.get("required"):
            required.append(param_name)
        if location == "query":
            query_params.append(param_name)

    # Placeholders the document forgot to declare still need a value
    for placeholder in PLACEHOLDER_PATTERN.findall(path):
        if placeholder not in properties:
            properties[placeholder] = {"type": "string"}
        if placeholder not in required:
            required.append(placeholder)

    body_field = None
    body_schema = _json_body_schema(operation)
    if body_schema is not None:
        body_field = "body" if "body" not in properties else "requestBody"
        properties[body_field] = body_schema
        if operation["requestBody"].get("required"):
            required.append(body_field)

    input_schema: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        input_schema["required"] = required

    binding = DerivedBinding(
        method=HttpMethod(method.upper()),
        path_template=path.lstrip("/"),
        body_field=body_field,
        operation_id=operation_id,
        query_params=tuple(query_params),
    )

    try:
        return ToolDefinition(
            name=name,
            domain=domain,
            description=_describe(method, path, operation),
            input_schema=input_schema,
            binding=binding,
            tags=list(operation.get("tags", [])),
        )
    except ValueError as e:
        raise ToolRegistrationError(f"Cannot derive tool for {method.upper()} {path}: {e}") from e


def derive_tools(document: dict[str, Any], domain: str = DERIVED_DOMAIN) -> list[ToolDefinition]:
    """
    Derive tool definitions for every operation in an OpenAPI document.

    Args:
        document: Parsed OpenAPI 3 document
        domain: Domain assigned to every derived tool

    Returns:
        Tool definitions in document order

    Raises:
        ToolRegistrationError: If two operations derive the same tool name
    """
    tools: list[ToolDefinition] = []
    origins: dict[str, str] = {}

    for path, path_item in (document.get("paths") or {}).items():
        for method in HTTP_METHODS:
            operation = path_item.get(method)
            if operation is None:
                continue

            tool = derive_tool(path, method, path_item, operation, domain=domain)
            origin = f"{method.upper()} {path}"

            if tool.name in origins:
                raise ToolRegistrationError(
                    f"Tool name '{tool.name}' derived from both "
                    f"{origins[tool.name]} and {origin}"
                )
            origins[tool.name] = origin
            tools.append(tool)

    logger.info("Derived tools from OpenAPI document", tool_count=len(tools))
    return tools


def load_openapi_document(path: str | Path) -> dict[str, Any]:
    """Load an OpenAPI document from a JSON or YAML file."""
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"OpenAPI document not found: {path}")

    document = load_yaml_config(path)
    if not isinstance(document, dict) or "paths" not in document:
        raise ConfigurationError(f"Not an OpenAPI document: {path}")
    return document
