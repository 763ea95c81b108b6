"""
JSON codec for protocol messages and stored documents.

Every document crosses the wire as a single line of compact JSON.
"""

import json
from datetime import date, datetime, timedelta
from typing import Any, Optional, Union

from .exceptions import DecodeError


CONTENT_TYPE = "application/json"

_SEPARATORS = (",", ":")


def format_timestamp(value: datetime) -> str:
    """Format a datetime as ISO-8601, using 'Z' for UTC."""
    if value.tzinfo is not None and value.utcoffset() == timedelta(0):
        return value.replace(tzinfo=None).isoformat() + "Z"
    return value.isoformat()


def parse_timestamp(text: str) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp produced by format_timestamp.

    Returns:
        A datetime, or None if the text is not a timestamp
    """
    if not isinstance(text, str) or "T" not in text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _default(value: Any) -> Any:
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, date):
        return value.isoformat()
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def encode(value: Any) -> str:
    """
    Serialize a value to its single-line JSON form.

    Args:
        value: Any JSON-representable value. Datetimes become ISO-8601
            strings and objects with a ``to_dict()`` method are encoded
            through it.

    Returns:
        Compact JSON text without a trailing newline

    Raises:
        TypeError: If the value cannot be represented as JSON
    """
    return json.dumps(value, separators=_SEPARATORS, ensure_ascii=False, default=_default)


def decode(text: Union[str, bytes]) -> Any:
    """
    Parse JSON text into Python values.

    Object keys are returned as ``str`` keys.

    Args:
        text: JSON text, or UTF-8 encoded bytes

    Returns:
        The decoded value

    Raises:
        DecodeError: If the text is not well-formed JSON
    """
    try:
        if isinstance(text, (bytes, bytearray)):
            text = bytes(text).decode("utf-8")
        return json.loads(text)
    except UnicodeDecodeError as e:
        raise DecodeError(f"Document is not valid UTF-8: {e}") from e
    except json.JSONDecodeError as e:
        raise DecodeError(f"Malformed JSON: {e}", text=text) from e
    except TypeError as e:
        raise DecodeError(f"Cannot decode value of type {type(text).__name__}") from e
