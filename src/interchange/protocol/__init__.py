"""
Protocol messages and catalog documents.
"""

from .messages import (
    RECORD,
    SCHEMA,
    STATE,
    MESSAGE_TYPES,
    Message,
    RecordMessage,
    SchemaMessage,
    StateMessage,
    MessageWriter,
    new_record_message,
    new_schema_message,
    new_state_message,
    parse_message,
    write_message,
    write_record,
    write_records,
    write_schema,
    write_state,
    set_output,
    get_output,
)
from .catalog import (
    Catalog,
    CatalogEntry,
    MetadataEntry,
    DEFAULT_METADATA,
    new_catalog_entry,
    new_catalog,
    new_metadata_entry,
    metadata_for,
    write_catalog,
    write_streams,
)

__all__ = [
    "RECORD",
    "SCHEMA",
    "STATE",
    "MESSAGE_TYPES",
    "Message",
    "RecordMessage",
    "SchemaMessage",
    "StateMessage",
    "MessageWriter",
    "new_record_message",
    "new_schema_message",
    "new_state_message",
    "parse_message",
    "write_message",
    "write_record",
    "write_records",
    "write_schema",
    "write_state",
    "set_output",
    "get_output",
    "Catalog",
    "CatalogEntry",
    "MetadataEntry",
    "DEFAULT_METADATA",
    "new_catalog_entry",
    "new_catalog",
    "new_metadata_entry",
    "metadata_for",
    "write_catalog",
    "write_streams",
]
