"""
Core building blocks for the Interchange protocol: codec, errors and shared types.
"""

from .codec import CONTENT_TYPE, encode, decode, format_timestamp, parse_timestamp
from .exceptions import (
    InterchangeError,
    ProtocolError,
    DecodeError,
    MalformedMessageError,
    UnknownMessageTypeError,
    StorageError,
    NotFoundError,
    BackendIOError,
    UnsupportedSchemeError,
    NoImplementationError,
    ConfigurationError,
)
from .types import ABSENT, Absent, is_absent

__all__ = [
    "CONTENT_TYPE",
    "encode",
    "decode",
    "format_timestamp",
    "parse_timestamp",
    "InterchangeError",
    "ProtocolError",
    "DecodeError",
    "MalformedMessageError",
    "UnknownMessageTypeError",
    "StorageError",
    "NotFoundError",
    "BackendIOError",
    "UnsupportedSchemeError",
    "NoImplementationError",
    "ConfigurationError",
    "ABSENT",
    "Absent",
    "is_absent",
]
