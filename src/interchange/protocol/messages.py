"""
Protocol messages exchanged between taps and targets.

Messages travel as newline-delimited JSON objects. Three kinds exist:

- SCHEMA: describes the records of a stream
- RECORD: one row of data for a stream
- STATE: a checkpoint the target persists once preceding records are handled

Example:
    >>> write_record("users", {"id": 1, "name": "Mary"})
    {"type":"RECORD","stream":"users","record":{"id":1,"name":"Mary"}}
"""

import logging
import sys
from dataclasses import dataclass
from datetime import datetime
from typing import Any, ClassVar, Dict, Iterable, Optional, Sequence, TextIO, Union

from ..core.codec import decode, encode, parse_timestamp
from ..core.exceptions import MalformedMessageError, UnknownMessageTypeError
from ..core.types import ABSENT, Absent


logger = logging.getLogger(__name__)


RECORD = "RECORD"
SCHEMA = "SCHEMA"
STATE = "STATE"

MESSAGE_TYPES = (RECORD, SCHEMA, STATE)


def _as_tuple(values):
    if values is ABSENT or values is None:
        return values
    if isinstance(values, str):
        return (values,)
    return tuple(values)


def _parse_time_extracted(value: Any) -> Any:
    if isinstance(value, str):
        parsed = parse_timestamp(value)
        if parsed is not None:
            return parsed
    return value


class Message:
    """Base class for protocol messages."""

    message_type: ClassVar[str] = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire dictionary, omitting absent fields."""
        raise NotImplementedError

    def to_line(self) -> str:
        """Encode as a single line of JSON (without newline)."""
        return encode(self.to_dict())


@dataclass(frozen=True)
class RecordMessage(Message):
    """
    RECORD message.

    Attributes:
        stream: The name of the stream the record belongs to
        record: The raw data for the record
        version: For versioned streams, the version number (optional)
        time_extracted: When the record was extracted (optional)
    """
    stream: str
    record: Dict[str, Any]
    version: Union[int, None, Absent] = ABSENT
    time_extracted: Union[datetime, str, None, Absent] = ABSENT

    message_type: ClassVar[str] = RECORD

    def __post_init__(self):
        # Timestamp strings are held as datetimes
        object.__setattr__(self, "time_extracted", _parse_time_extracted(self.time_extracted))

    def to_dict(self) -> Dict[str, Any]:
        result = {"type": RECORD, "stream": self.stream, "record": self.record}
        if self.version is not ABSENT:
            result["version"] = self.version
        if self.time_extracted is not ABSENT:
            result["time_extracted"] = self.time_extracted
        return result


@dataclass(frozen=True)
class SchemaMessage(Message):
    """
    SCHEMA message.

    Attributes:
        stream: The name of the stream this schema describes
        schema: The JSON schema
        key_properties: Primary key properties
        bookmark_properties: Properties used for bookmarking (optional)
    """
    stream: str
    schema: Any
    key_properties: Sequence[str] = ()
    bookmark_properties: Union[Sequence[str], None, Absent] = ABSENT

    message_type: ClassVar[str] = SCHEMA

    def __post_init__(self):
        object.__setattr__(self, "key_properties", _as_tuple(self.key_properties))
        object.__setattr__(self, "bookmark_properties", _as_tuple(self.bookmark_properties))

    def to_dict(self) -> Dict[str, Any]:
        key_properties = self.key_properties
        result = {
            "type": SCHEMA,
            "stream": self.stream,
            "schema": self.schema,
            "key-properties": list(key_properties) if key_properties is not None else None,
        }
        if self.bookmark_properties is not ABSENT:
            bookmarks = self.bookmark_properties
            result["bookmark-properties"] = list(bookmarks) if bookmarks is not None else None
        return result


@dataclass(frozen=True)
class StateMessage(Message):
    """
    STATE message.

    Attributes:
        value: The value of the state
    """
    value: Any

    message_type: ClassVar[str] = STATE

    def to_dict(self) -> Dict[str, Any]:
        return {"type": STATE, "value": self.value}


def new_record_message(
    stream: str,
    record: Dict[str, Any],
    time_extracted: Union[datetime, str, None, Absent] = ABSENT,
    version: Union[int, None, Absent] = ABSENT,
) -> RecordMessage:
    """
    Build a RECORD message.

    Example:
        >>> new_record_message("users", {"id": 1, "name": "Mary"})
    """
    return RecordMessage(
        stream=stream,
        record=record,
        version=version,
        time_extracted=time_extracted,
    )


def new_schema_message(
    stream: str,
    schema: Any,
    key_properties: Sequence[str],
    bookmark_properties: Union[Sequence[str], None, Absent] = ABSENT,
) -> SchemaMessage:
    """Build a SCHEMA message."""
    return SchemaMessage(
        stream=stream,
        schema=schema,
        key_properties=key_properties,
        bookmark_properties=bookmark_properties,
    )


def new_state_message(value: Any) -> StateMessage:
    """Build a STATE message."""
    return StateMessage(value=value)


def _require(payload: Dict[str, Any], field: str, message_type: str) -> Any:
    if field not in payload:
        raise MalformedMessageError(
            f"{message_type} message is missing required field '{field}'",
            payload=payload,
        )
    return payload[field]


def _first_present(payload: Dict[str, Any], *fields: str) -> Any:
    for field in fields:
        if field in payload:
            return payload[field]
    return ABSENT


def parse_message(line: Union[str, bytes]) -> Message:
    """
    Parse a line of JSON into a protocol message.

    Args:
        line: One line from the data channel

    Returns:
        RecordMessage, SchemaMessage or StateMessage

    Raises:
        DecodeError: If the line is not well-formed JSON
        MalformedMessageError: If the payload is not an object, has no
            'type', or lacks a field its type requires
        UnknownMessageTypeError: If 'type' is not RECORD, SCHEMA or STATE
    """
    payload = decode(line)

    if not isinstance(payload, dict):
        raise MalformedMessageError(
            f"Message must be an object, got {type(payload).__name__}",
            payload=payload,
        )

    if "type" not in payload:
        raise MalformedMessageError("Message has no 'type' field", payload=payload)

    message_type = payload["type"]

    if message_type == RECORD:
        return RecordMessage(
            stream=_require(payload, "stream", RECORD),
            record=_require(payload, "record", RECORD),
            version=payload.get("version", ABSENT),
            time_extracted=payload.get("time_extracted", ABSENT),
        )

    if message_type == SCHEMA:
        key_properties = _first_present(payload, "key-properties", "key_properties")
        return SchemaMessage(
            stream=_require(payload, "stream", SCHEMA),
            schema=_require(payload, "schema", SCHEMA),
            key_properties=() if key_properties is ABSENT else key_properties,
            bookmark_properties=_first_present(
                payload, "bookmark-properties", "bookmark_properties"
            ),
        )

    if message_type == STATE:
        return StateMessage(value=_require(payload, "value", STATE))

    logger.debug(f"Rejected message with unknown type: {message_type!r}")
    raise UnknownMessageTypeError(
        f"Unknown message type: {message_type!r}",
        message_type=message_type,
    )


# Output sink shared by the write_* helpers; None means sys.stdout at call time
_output: Optional[TextIO] = None


def set_output(stream: Optional[TextIO]) -> Optional[TextIO]:
    """
    Replace the process-wide message sink.

    Args:
        stream: Text stream to write to, or None to restore sys.stdout

    Returns:
        The previously configured sink
    """
    global _output
    previous = _output
    _output = stream
    return previous


def get_output() -> TextIO:
    """Return the stream the write_* helpers currently write to."""
    return _output if _output is not None else sys.stdout


def write_message(message: Message, out: Optional[TextIO] = None) -> None:
    """
    Encode a message and append it as one line to the output sink.

    Args:
        message: The message to write
        out: Optional stream overriding the configured sink
    """
    line = message.to_line()
    stream = out if out is not None else get_output()
    stream.write(line + "\n")
    stream.flush()


def write_record(
    stream: str,
    record: Dict[str, Any],
    time_extracted: Union[datetime, str, None, Absent] = ABSENT,
    version: Union[int, None, Absent] = ABSENT,
    out: Optional[TextIO] = None,
) -> None:
    """Write a single RECORD message."""
    write_message(new_record_message(stream, record, time_extracted, version), out=out)


def write_records(
    stream: str,
    records: Iterable[Dict[str, Any]],
    out: Optional[TextIO] = None,
) -> int:
    """
    Write a RECORD message for each record.

    Returns:
        Number of records written
    """
    count = 0
    for record in records:
        write_record(stream, record, out=out)
        count += 1
    return count


def write_schema(
    stream: str,
    schema: Any,
    key_properties: Sequence[str],
    bookmark_properties: Union[Sequence[str], None, Absent] = ABSENT,
    out: Optional[TextIO] = None,
) -> None:
    """Write a SCHEMA message."""
    write_message(
        new_schema_message(stream, schema, key_properties, bookmark_properties),
        out=out,
    )


def write_state(value: Any, out: Optional[TextIO] = None) -> None:
    """Write a STATE message."""
    write_message(new_state_message(value), out=out)


class MessageWriter:
    """
    Writes protocol messages to a fixed stream.

    Example:
        >>> writer = MessageWriter(sys.stdout)
        >>> writer.write_schema("users", {"type": "object"}, ["id"])
        >>> writer.write_record("users", {"id": 1})
    """

    def __init__(self, out: Optional[TextIO] = None):
        self.out = out
        self.messages_written = 0

    def write(self, message: Message) -> None:
        write_message(message, out=self.out)
        self.messages_written += 1

    def write_record(self, stream: str, record: Dict[str, Any], **kwargs: Any) -> None:
        self.write(new_record_message(stream, record, **kwargs))

    def write_records(self, stream: str, records: Iterable[Dict[str, Any]]) -> int:
        count = 0
        for record in records:
            self.write_record(stream, record)
            count += 1
        return count

    def write_schema(
        self,
        stream: str,
        schema: Any,
        key_properties: Sequence[str],
        bookmark_properties: Union[Sequence[str], None, Absent] = ABSENT,
    ) -> None:
        self.write(new_schema_message(stream, schema, key_properties, bookmark_properties))

    def write_state(self, value: Any) -> None:
        self.write(new_state_message(value))
