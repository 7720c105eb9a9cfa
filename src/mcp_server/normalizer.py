"""Response normalization.

Upstream bodies are returned to the MCP client as text. Bodies that parse as
JSON are re-serialized compactly; anything else (plain-text error pages,
empty bodies) is passed through unchanged.
"""

import json
import math
from typing import Any

from shared.models import JsonResponse, TextResponse, ToolResponse


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def _finite_float(text: str) -> float:
    value = float(text)
    if math.isinf(value):
        raise ValueError(f"Number out of range: {text}")
    return value


def normalize(raw: str) -> ToolResponse:
    """
    Classify a raw response body as JSON or text.

    Never raises: any parse failure means "not JSON". Numbers that overflow a
    float count as a parse failure, since they cannot be rendered back as JSON.
    """
    try:
        value = json.loads(
            raw,
            parse_constant=_reject_constant,
            parse_float=_finite_float
        )
    except (ValueError, TypeError, RecursionError):
        return TextResponse(text=raw)
    return JsonResponse(value=value)
