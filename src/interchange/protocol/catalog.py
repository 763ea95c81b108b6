"""
Catalog and metadata documents produced by discovery.

A catalog lists the streams a tap can produce. It is written once, as a
single JSON document, rather than as line-delimited messages.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, Mapping, Optional, TextIO, Tuple, Union

from ..core.codec import encode
from .messages import get_output


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogEntry:
    """
    A discoverable stream.

    Attributes:
        tap_stream_id: Identifier of the stream within the tap
        stream: Stream name
        schema: JSON schema of the stream's records
    """
    tap_stream_id: str
    stream: str
    schema: Any

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tap_stream_id": self.tap_stream_id,
            "stream": self.stream,
            "schema": self.schema,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CatalogEntry":
        return cls(
            tap_stream_id=data["tap_stream_id"],
            stream=data["stream"],
            schema=data.get("schema"),
        )


@dataclass(frozen=True)
class Catalog:
    """
    An ordered collection of catalog entries.

    Entries given as mappings (as read back from a catalog document) are
    converted to CatalogEntry objects.

    Attributes:
        streams: Catalog entries, in discovery order
    """
    streams: Tuple[CatalogEntry, ...] = ()

    def __post_init__(self):
        streams = tuple(
            CatalogEntry.from_dict(entry) if isinstance(entry, Mapping) else entry
            for entry in self.streams
        )
        object.__setattr__(self, "streams", streams)

    def to_dict(self) -> Dict[str, Any]:
        return {"streams": [entry.to_dict() for entry in self.streams]}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Catalog":
        """Rebuild a catalog from a loaded catalog document."""
        return cls(streams=[CatalogEntry.from_dict(s) for s in data.get("streams", [])])

    def get_stream(self, tap_stream_id: str) -> Optional[CatalogEntry]:
        """Return the entry with the given tap_stream_id, or None."""
        for entry in self.streams:
            if entry.tap_stream_id == tap_stream_id:
                return entry
        return None


def new_catalog_entry(tap_stream_id: str, stream: str, schema: Any) -> CatalogEntry:
    """Build a catalog entry."""
    return CatalogEntry(tap_stream_id=tap_stream_id, stream=stream, schema=schema)


# Short name used by tap implementations when listing streams
stream = new_catalog_entry


def new_catalog(entries: Iterable[Union[CatalogEntry, Mapping[str, Any]]]) -> Catalog:
    """Build a catalog from a list of entries, preserving order."""
    return Catalog(streams=tuple(entries))


def write_catalog(
    entries: Union[Catalog, Iterable[Union[CatalogEntry, Mapping[str, Any]]]],
    out: Optional[TextIO] = None,
) -> None:
    """
    Write a full catalog as a single JSON document.

    Args:
        entries: A Catalog or the entries to build one from
        out: Optional stream overriding the configured message sink
    """
    catalog = entries if isinstance(entries, Catalog) else new_catalog(entries)
    target = out if out is not None else get_output()
    target.write(encode(catalog.to_dict()) + "\n")
    target.flush()
    logger.debug(f"Wrote catalog with {len(catalog.streams)} streams")


write_streams = write_catalog


@dataclass(frozen=True)
class MetadataEntry:
    """
    Replication metadata for a discovered stream.

    Field names follow the discovery-mode metadata keys; ``to_dict`` returns
    them in their hyphenated wire form.
    """
    selected: bool = False
    replication_method: str = "INCREMENTAL"
    replication_key: Optional[str] = None
    view_key_properties: Tuple[str, ...] = ()
    inclusion: str = "automatic"
    selected_by_default: bool = False
    valid_replication_keys: Tuple[str, ...] = ()
    schema_name: Optional[str] = ""
    forced_replication_method: str = "FULL_TABLE"
    table_key_properties: Tuple[str, ...] = ()
    is_view: bool = False
    row_count: Optional[int] = None
    database_name: Optional[str] = ""
    sql_datatype: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {}
        for f in self.__dataclass_fields__.values():
            value = getattr(self, f.name)
            if isinstance(value, tuple):
                value = list(value)
            result[f.name.replace("_", "-")] = value
        return result

    def derive(self, **overrides: Any) -> "MetadataEntry":
        """Return a copy with the given fields overridden."""
        return replace(self, **overrides)


DEFAULT_METADATA = MetadataEntry()


def new_metadata_entry(stream_name: Optional[str] = None) -> MetadataEntry:
    """
    Build a metadata entry from the default template.

    Args:
        stream_name: Stream name to use as schema-name and database-name.
            When omitted, the default template is returned.
    """
    if stream_name is None:
        return DEFAULT_METADATA
    return DEFAULT_METADATA.derive(schema_name=stream_name, database_name=stream_name)


def metadata_for(stream_record: Union[CatalogEntry, Mapping[str, Any]]) -> MetadataEntry:
    """
    Build the metadata entry for a catalog entry or stream mapping.

    A record without a stream name gets null schema-name and database-name.
    """
    if isinstance(stream_record, Mapping):
        name = stream_record.get("stream")
    else:
        name = getattr(stream_record, "stream", None)
    return DEFAULT_METADATA.derive(schema_name=name, database_name=name)
