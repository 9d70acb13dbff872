"""Text result utilities for MCP tools.

Every tool answers with a single text payload: pretty-printed JSON for data,
a sentence for status, or an ``Error [CODE]: ...`` line for failures.
"""

import json
import re
from typing import Any, Optional

ERROR_PREFIX = "Error"


def is_error(text: str) -> bool:
    """Check if a tool result text is an error result."""
    return text.startswith(f"{ERROR_PREFIX} [") or text.startswith(f"{ERROR_PREFIX}:")


def data_response(data: Any) -> str:
    """Serialize an API response for the caller.

    Args:
        data: JSON-compatible response body

    Returns:
        Indented JSON text
    """
    return json.dumps(data, indent=2, ensure_ascii=False)


def error_response(message: str, code: Optional[str] = None) -> str:
    """Create an error result.

    Args:
        message: Error message
        code: Optional error code

    Returns:
        Error text, e.g. ``Error [VALIDATION_ERROR]: track: ...``
    """
    if code:
        return f"{ERROR_PREFIX} [{code}]: {message}"
    return f"{ERROR_PREFIX}: {message}"


def exception_to_error_code(exception: Exception) -> str:
    """
    Convert exception class name to an upper snake_case error code.

    Examples:
        EditOpenError -> EDIT_OPEN_ERROR
        PublisherAPIError -> PUBLISHER_API_ERROR
    """
    name = type(exception).__name__
    name = re.sub(r'([A-Z]+)([A-Z][a-z])', r'\1_\2', name)
    return re.sub(r'([a-z0-9])([A-Z])', r'\1_\2', name).upper()
