"""
Interchange: the message protocol and document storage shared by taps and targets.
"""

from .core import (
    ABSENT,
    CONTENT_TYPE,
    encode,
    decode,
    InterchangeError,
    DecodeError,
    MalformedMessageError,
    UnknownMessageTypeError,
    NotFoundError,
    BackendIOError,
    NoImplementationError,
)
from .protocol import (
    RecordMessage,
    SchemaMessage,
    StateMessage,
    new_record_message,
    new_schema_message,
    new_state_message,
    parse_message,
    write_message,
    write_record,
    write_records,
    write_schema,
    write_state,
    Catalog,
    CatalogEntry,
    MetadataEntry,
    new_catalog_entry,
    new_catalog,
    new_metadata_entry,
    metadata_for,
    write_catalog,
)
from .storage import (
    DocumentLocations,
    read_document,
    write_document,
    delete_document,
    load_config,
    save_config,
    load_state,
    save_state,
    load_catalog,
    save_catalog,
)
from .extensions import tap, sink, discover, transform

__version__ = "0.1.0"

__all__ = [
    "ABSENT",
    "CONTENT_TYPE",
    "encode",
    "decode",
    "InterchangeError",
    "DecodeError",
    "MalformedMessageError",
    "UnknownMessageTypeError",
    "NotFoundError",
    "BackendIOError",
    "NoImplementationError",
    "RecordMessage",
    "SchemaMessage",
    "StateMessage",
    "new_record_message",
    "new_schema_message",
    "new_state_message",
    "parse_message",
    "write_message",
    "write_record",
    "write_records",
    "write_schema",
    "write_state",
    "Catalog",
    "CatalogEntry",
    "MetadataEntry",
    "new_catalog_entry",
    "new_catalog",
    "new_metadata_entry",
    "metadata_for",
    "write_catalog",
    "DocumentLocations",
    "read_document",
    "write_document",
    "delete_document",
    "load_config",
    "save_config",
    "load_state",
    "save_state",
    "load_catalog",
    "save_catalog",
    "tap",
    "sink",
    "discover",
    "transform",
]
