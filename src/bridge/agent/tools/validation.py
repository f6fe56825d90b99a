"""
Tool argument validation.

Checks LLM-produced arguments against a tool's JSON Schema before dispatch.
"""

from __future__ import annotations

import logging
from typing import Any

import jsonschema

from ..domain.errors import InvalidToolArguments

logger = logging.getLogger(__name__)


def validate_arguments(
    tool_name: str, arguments: Any, schema: dict[str, Any]
) -> None:
    """Validate tool arguments against a tool's parameter schema.

    A schema the server advertises but that is not valid JSON Schema
    is skipped with a warning; the server still sees the call.

    Args:
        tool_name: Tool being called (for error messages)
        arguments: Parsed arguments returned by the LLM
        schema: The JSON Schema advertised for the tool

    Raises:
        InvalidToolArguments: If the arguments do not fit the schema
    """
    if not isinstance(arguments, dict):
        raise InvalidToolArguments(
            f"Arguments for '{tool_name}' must be an object", tool_name
        )

    if not schema:
        return

    try:
        jsonschema.validate(arguments, schema)
    except jsonschema.ValidationError as e:
        location = "/".join(str(part) for part in e.absolute_path)
        where = f" at '{location}'" if location else ""
        raise InvalidToolArguments(
            f"Invalid arguments for '{tool_name}'{where}: {e.message}", tool_name
        ) from e
    except jsonschema.SchemaError as e:
        logger.warning(f"Skipping validation for '{tool_name}', bad schema: {e.message}")
