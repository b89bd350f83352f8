"""Parsing of Admin API error bodies."""

import json

from shared.errors import PlatformError

DEFAULT_MESSAGE = "Failed to create order in the commerce platform"


def parse_platform_error(status_code: int, text: str) -> PlatformError:
    """Build a PlatformError from a non-2xx response body.

    ``{"errors": "..."}`` yields the string itself; ``{"errors": {field:
    [msgs]}}`` yields ``"field: msg1, msg2"`` with the full object kept as
    details. Anything unparsable falls back to the raw text.
    """
    message = DEFAULT_MESSAGE
    details = None
    try:
        data = json.loads(text)
    except ValueError:
        return PlatformError(text or "Unknown platform error", status_code=status_code)

    errors = data.get("errors") if isinstance(data, dict) else None
    if isinstance(errors, str):
        message = errors
    elif isinstance(errors, dict) and errors:
        details = errors
        key = next(iter(errors))
        first = errors[key]
        if isinstance(first, list):
            message = f"{key}: {', '.join(str(m) for m in first)}"
        else:
            message = f"{key}: {first}"
    return PlatformError(message, status_code=status_code, details=details)
