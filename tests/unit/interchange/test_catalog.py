"""
Unit tests for catalog and metadata documents.
"""

import io
import json
from dataclasses import FrozenInstanceError, fields

import pytest

from interchange.protocol.catalog import (
    DEFAULT_METADATA,
    Catalog,
    CatalogEntry,
    MetadataEntry,
    metadata_for,
    new_catalog,
    new_catalog_entry,
    new_metadata_entry,
    stream,
    write_catalog,
    write_streams,
)


USERS_SCHEMA = {"type": "object", "properties": {"id": {"type": "integer"}}}
ORDERS_SCHEMA = {"type": "object", "properties": {"total": {"type": "number"}}}


class TestCatalog:
    """Tests for CatalogEntry and Catalog."""

    def test_new_catalog_entry(self):
        entry = new_catalog_entry("public-users", "users", USERS_SCHEMA)

        assert entry.to_dict() == {
            "tap_stream_id": "public-users",
            "stream": "users",
            "schema": USERS_SCHEMA,
        }

    def test_stream_alias(self):
        assert stream("a", "b", {}) == CatalogEntry("a", "b", {})

    def test_new_catalog_preserves_order(self):
        entries = [
            new_catalog_entry("orders", "orders", ORDERS_SCHEMA),
            new_catalog_entry("users", "users", USERS_SCHEMA),
        ]

        catalog = new_catalog(entries)

        assert [e.stream for e in catalog.streams] == ["orders", "users"]
        assert catalog.to_dict() == {"streams": [e.to_dict() for e in entries]}

    def test_catalog_is_immutable(self):
        catalog = new_catalog([])

        with pytest.raises(FrozenInstanceError):
            catalog.streams = ()

    def test_from_dict(self):
        document = {
            "streams": [
                {"tap_stream_id": "users", "stream": "users", "schema": USERS_SCHEMA},
            ]
        }

        catalog = Catalog.from_dict(document)

        assert catalog.streams == (CatalogEntry("users", "users", USERS_SCHEMA),)
        assert catalog.to_dict() == document

    def test_get_stream(self):
        catalog = new_catalog([
            new_catalog_entry("users", "users", USERS_SCHEMA),
            new_catalog_entry("orders", "orders", ORDERS_SCHEMA),
        ])

        assert catalog.get_stream("orders").schema == ORDERS_SCHEMA
        assert catalog.get_stream("missing") is None

    def test_write_catalog_single_document(self):
        """Test the catalog is written as one JSON document."""
        buffer = io.StringIO()
        entries = [
            new_catalog_entry("users", "users", USERS_SCHEMA),
            new_catalog_entry("orders", "orders", ORDERS_SCHEMA),
        ]

        write_catalog(entries, out=buffer)

        lines = buffer.getvalue().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0]) == new_catalog(entries).to_dict()

    def test_write_catalog_mapping_entries(self):
        """Test entries given as plain mappings are accepted."""
        buffer = io.StringIO()

        write_catalog([{"tap_stream_id": "a", "stream": "a", "schema": {}}], out=buffer)

        assert json.loads(buffer.getvalue()) == {
            "streams": [{"tap_stream_id": "a", "stream": "a", "schema": {}}]
        }

    def test_catalog_converts_mapping_entries(self):
        catalog = new_catalog([{"tap_stream_id": "users", "stream": "users", "schema": USERS_SCHEMA}])

        assert catalog.streams == (new_catalog_entry("users", "users", USERS_SCHEMA),)

    def test_write_streams_uses_configured_sink(self, output):
        write_streams(new_catalog([new_catalog_entry("users", "users", {})]))

        assert output.getvalue() == (
            '{"streams":[{"tap_stream_id":"users","stream":"users","schema":{}}]}\n'
        )


class TestMetadata:
    """Tests for MetadataEntry defaults and derivation."""

    def test_default_template(self):
        assert new_metadata_entry().to_dict() == {
            "selected": False,
            "replication-method": "INCREMENTAL",
            "replication-key": None,
            "view-key-properties": [],
            "inclusion": "automatic",
            "selected-by-default": False,
            "valid-replication-keys": [],
            "schema-name": "",
            "forced-replication-method": "FULL_TABLE",
            "table-key-properties": [],
            "is-view": False,
            "row-count": None,
            "database-name": "",
            "sql-datatype": None,
        }

    def test_fourteen_fields(self):
        assert len(fields(MetadataEntry)) == 14

    def test_named_entry_overrides_only_names(self):
        """Test only schema-name and database-name differ from the template."""
        entry = new_metadata_entry("orders").to_dict()
        default = DEFAULT_METADATA.to_dict()

        changed = {k for k in default if entry[k] != default[k]}
        assert changed == {"schema-name", "database-name"}
        assert entry["schema-name"] == "orders"
        assert entry["database-name"] == "orders"

    def test_default_not_mutated(self):
        new_metadata_entry("orders")
        new_metadata_entry("users").derive(selected=True)

        assert DEFAULT_METADATA == MetadataEntry()
        assert DEFAULT_METADATA.schema_name == ""
        assert DEFAULT_METADATA.selected is False

    def test_derive_returns_copy(self):
        entry = new_metadata_entry("users")
        selected = entry.derive(selected=True, replication_key="updated_at")

        assert selected is not entry
        assert entry.selected is False
        assert selected.selected is True
        assert selected.replication_key == "updated_at"
        assert selected.schema_name == "users"

    def test_metadata_for_catalog_entry(self):
        entry = new_catalog_entry("public-users", "users", USERS_SCHEMA)

        assert metadata_for(entry) == new_metadata_entry("users")

    def test_metadata_for_mapping(self):
        assert metadata_for({"stream": "orders"}) == new_metadata_entry("orders")

    def test_metadata_for_mapping_without_stream(self):
        metadata = metadata_for({"tap_stream_id": "orders"})

        assert metadata.schema_name is None
        assert metadata.database_name is None
        assert metadata.to_dict()["schema-name"] is None

    def test_metadata_encodes(self):
        from interchange.core.codec import decode, encode

        assert decode(encode(new_metadata_entry("users")))["schema-name"] == "users"
