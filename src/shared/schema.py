"""JSON Schema validation utilities."""

from typing import Any

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError

FORMAT_CHECKER = Draft202012Validator.FORMAT_CHECKER


def validate_schema(data: Any, schema: dict[str, Any]) -> tuple[bool, list[str]]:
    """
    Validate data against a JSON Schema.

    Formats such as ``uuid`` are asserted, not just annotated.

    Args:
        data: The data to validate
        schema: JSON Schema to validate against

    Returns:
        Tuple of (is_valid, list of error messages)
    """
    if not schema:
        return True, []

    validator = Draft202012Validator(schema, format_checker=FORMAT_CHECKER)
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.path])

    if not errors:
        return True, []

    error_messages = [
        f"{'.'.join(str(p) for p in e.path)}: {e.message}" if e.path else e.message
        for e in errors
    ]

    return False, error_messages


def check_schema(schema: dict[str, Any]) -> list[str]:
    """Return meta-schema violations for a tool input schema."""
    try:
        Draft202012Validator.check_schema(schema)
    except SchemaError as e:
        return [e.message]
    return []
