"""
Accessors for the three documents a pipeline component works with.

- config: connection settings for the tap or target
- state: the last checkpoint, rewritten as the pipeline progresses
- catalog: the discovered streams, written once by discovery

Each accessor reads or replaces the whole document at the location
configured for its role. Nothing is cached: every load goes to the backend.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Union

from ..core.exceptions import ConfigurationError
from ..protocol.catalog import Catalog, CatalogEntry, new_catalog
from .registry import BackendRegistry, read_document, write_document


logger = logging.getLogger(__name__)


CONFIG = "config"
STATE = "state"
CATALOG = "catalog"


@dataclass(frozen=True)
class DocumentLocations:
    """
    Where the config, state and catalog documents live.

    Attributes:
        config: Location of the config document
        state: Location of the state document
        catalog: Location of the catalog document
    """
    config: Optional[str] = None
    state: Optional[str] = None
    catalog: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DocumentLocations":
        return cls(
            config=data.get(CONFIG),
            state=data.get(STATE),
            catalog=data.get(CATALOG),
        )

    def to_dict(self) -> dict:
        return {CONFIG: self.config, STATE: self.state, CATALOG: self.catalog}


def get_location(locations: Any, role: str) -> str:
    """
    Look up the location for a document role.

    Args:
        locations: DocumentLocations, a mapping, or any object with
            config/state/catalog attributes
        role: 'config', 'state' or 'catalog'

    Raises:
        ConfigurationError: If no location is set for the role
    """
    if isinstance(locations, Mapping):
        location = locations.get(role)
    else:
        location = getattr(locations, role, None)

    if not location:
        raise ConfigurationError(f"No {role} location configured")
    return str(location)


def load_config(locations: Any, registry: Optional[BackendRegistry] = None) -> Any:
    """Read the config document."""
    return read_document(get_location(locations, CONFIG), registry=registry)


def save_config(locations: Any, value: Any, registry: Optional[BackendRegistry] = None) -> None:
    """Replace the config document."""
    write_document(get_location(locations, CONFIG), value, registry=registry)


def load_state(locations: Any, registry: Optional[BackendRegistry] = None) -> Any:
    """
    Read the state document.

    Returns:
        The state, or ABSENT when a remote state blob does not exist yet
    """
    return read_document(get_location(locations, STATE), registry=registry)


def save_state(locations: Any, value: Any, registry: Optional[BackendRegistry] = None) -> None:
    """Replace the state document."""
    location = get_location(locations, STATE)
    write_document(location, value, registry=registry)
    logger.debug("Saved state", extra={"location": location})


def load_catalog(locations: Any, registry: Optional[BackendRegistry] = None) -> Any:
    """Read the catalog document."""
    return read_document(get_location(locations, CATALOG), registry=registry)


def save_catalog(
    locations: Any,
    value: Union[Catalog, Iterable[Union[CatalogEntry, Mapping[str, Any]]], Mapping[str, Any]],
    registry: Optional[BackendRegistry] = None,
) -> None:
    """
    Replace the catalog document.

    Args:
        locations: Document locations
        value: A Catalog, a list of entries (CatalogEntry objects or entry
            mappings, wrapped into a catalog), or an already-built catalog
            document
        registry: Optional backend registry
    """
    if isinstance(value, Catalog):
        document = value.to_dict()
    elif isinstance(value, Mapping):
        document = value
    else:
        document = new_catalog(value).to_dict()
    write_document(get_location(locations, CATALOG), document, registry=registry)
