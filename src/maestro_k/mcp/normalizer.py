"""Turns raw ``list_databases`` responses into DatabaseInfo records.

The server wraps tool results as a JSON-encoded string, so the array of
records usually arrives as a string that itself contains JSON. When no
database is active it answers with a plain sentinel message instead.
"""

import json

from pydantic import TypeAdapter, ValidationError

from maestro_k.errors import ParseError
from maestro_k.mcp.models import DatabaseInfo

NO_DATABASES_SENTINEL = "No vector databases are currently active"

_records = TypeAdapter(list[DatabaseInfo])


def normalize_databases(body: bytes) -> list[DatabaseInfo]:
    """Parse a response body into records, preserving the server's order.

    Raises ParseError when the body is neither the sentinel nor a JSON array
    of database records.
    """
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ParseError(body, f"response is not UTF-8: {e}") from e

    # The sentinel is not valid JSON, so it must be checked before parsing.
    if text == NO_DATABASES_SENTINEL:
        return []

    try:
        payload = json.loads(text)
        if isinstance(payload, str):
            if payload == NO_DATABASES_SENTINEL:
                return []
            payload = json.loads(payload)
    except json.JSONDecodeError as e:
        raise ParseError(body, str(e)) from e

    # A JSON null decodes to no databases, the same as an empty array.
    if payload is None:
        return []

    if not isinstance(payload, list):
        raise ParseError(body, f"expected a JSON array, got {type(payload).__name__}")

    try:
        return _records.validate_python(payload)
    except ValidationError as e:
        raise ParseError(body, f"invalid database record: {e.error_count()} error(s)") from e
