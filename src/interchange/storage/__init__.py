"""
Document storage: backends selected by location scheme, and the
config/state/catalog accessors built on them.
"""

from .base import StorageBackend
from .local import LocalFileBackend
from .remote import BlobClient, RemoteObjectBackend, split_location
from .s3_client import S3BlobClient
from .registry import (
    BackendRegistry,
    create_registry,
    get_default_registry,
    set_default_registry,
    register_backend,
    parse_location,
    read_document,
    write_document,
    delete_document,
)
from .documents import (
    DocumentLocations,
    get_location,
    load_config,
    save_config,
    load_state,
    save_state,
    load_catalog,
    save_catalog,
)

__all__ = [
    "StorageBackend",
    "LocalFileBackend",
    "BlobClient",
    "RemoteObjectBackend",
    "split_location",
    "S3BlobClient",
    "BackendRegistry",
    "create_registry",
    "get_default_registry",
    "set_default_registry",
    "register_backend",
    "parse_location",
    "read_document",
    "write_document",
    "delete_document",
    "DocumentLocations",
    "get_location",
    "load_config",
    "save_config",
    "load_state",
    "save_state",
    "load_catalog",
    "save_catalog",
]
