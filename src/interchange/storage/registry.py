"""
Scheme-keyed registry of storage backends.

A location such as ``gs://bucket/state.json`` is served by the backend
registered for ``gs``; a location without ``://`` is served by the default
(local) backend. Adding a backend means registering a scheme; callers of
read_document/write_document/delete_document do not change.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from ..core.exceptions import UnsupportedSchemeError
from .base import StorageBackend
from .local import LocalFileBackend
from .remote import RemoteObjectBackend
from .s3_client import create_gs_client, create_s3_client


logger = logging.getLogger(__name__)


def parse_location(location: str) -> Tuple[Optional[str], str]:
    """
    Split a location into its scheme and the rest.

    Example:
        >>> parse_location("gs://bucket/state.json")
        ('gs', 'bucket/state.json')
        >>> parse_location("state/tap.json")
        (None, 'state/tap.json')
    """
    scheme, sep, rest = location.partition("://")
    if not sep:
        return None, location
    return scheme.lower(), rest


class BackendRegistry:
    """
    Registry mapping URI schemes to storage backends.

    Example:
        >>> registry = BackendRegistry()
        >>> registry.register("mem", MemoryBackend())
        >>> registry.write_document("mem://bucket/doc.json", {"a": 1})
    """

    def __init__(self, default: Optional[StorageBackend] = None):
        """
        Initialize a registry.

        Args:
            default: Backend for locations without a scheme
                (defaults to LocalFileBackend)
        """
        self._backends: Dict[str, StorageBackend] = {}
        self.default = default if default is not None else LocalFileBackend()

    def register(self, scheme: str, backend: StorageBackend) -> None:
        """Register a backend for a scheme, replacing any existing one."""
        scheme = scheme.lower()
        if scheme in self._backends:
            logger.warning(f"Overwriting storage backend for scheme: {scheme}")
        self._backends[scheme] = backend
        logger.debug(f"Registered storage backend {backend.get_name()} for scheme: {scheme}")

    def unregister(self, scheme: str) -> Optional[StorageBackend]:
        """Remove and return the backend for a scheme."""
        return self._backends.pop(scheme.lower(), None)

    def schemes(self) -> List[str]:
        """List registered schemes."""
        return list(self._backends.keys())

    def get_backend(self, location: str) -> StorageBackend:
        """
        Resolve the backend serving a location.

        Raises:
            UnsupportedSchemeError: If no backend is registered for the scheme
        """
        scheme, _ = parse_location(location)
        if scheme is None:
            return self.default
        backend = self._backends.get(scheme)
        if backend is None:
            raise UnsupportedSchemeError(
                f"No storage backend registered for scheme '{scheme}'",
                location=location,
            )
        return backend

    def read_document(self, location: str) -> Any:
        return self.get_backend(location).read_document(location)

    def write_document(self, location: str, value: Any) -> None:
        self.get_backend(location).write_document(location, value)

    def delete_document(self, location: str) -> None:
        self.get_backend(location).delete_document(location)

    def close(self) -> None:
        """Close all registered backends."""
        self.default.close()
        for backend in self._backends.values():
            backend.close()


def create_registry(
    s3_endpoint_url: Optional[str] = None,
    s3_region: Optional[str] = None,
    gs_endpoint_url: Optional[str] = None,
) -> BackendRegistry:
    """
    Create a registry with the local, s3 and gs backends.

    Object-store clients are created on first use, so building a registry
    needs neither network access nor credentials.
    """
    registry = BackendRegistry(default=LocalFileBackend())
    registry.register("file", registry.default)
    registry.register(
        "s3",
        RemoteObjectBackend(
            scheme="s3",
            client_factory=lambda: create_s3_client(s3_endpoint_url, s3_region),
        ),
    )
    registry.register(
        "gs",
        RemoteObjectBackend(scheme="gs", client_factory=lambda: create_gs_client(gs_endpoint_url)),
    )
    return registry


# Global registry instance
_registry: Optional[BackendRegistry] = None


def get_default_registry() -> BackendRegistry:
    """Get the global backend registry."""
    global _registry
    if _registry is None:
        _registry = create_registry()
    return _registry


def set_default_registry(registry: Optional[BackendRegistry]) -> None:
    """Replace the global registry (None resets to a fresh default)."""
    global _registry
    _registry = registry


def register_backend(scheme: str, backend: StorageBackend) -> None:
    """Register a backend on the global registry."""
    get_default_registry().register(scheme, backend)


def read_document(location: str, registry: Optional[BackendRegistry] = None) -> Any:
    """Read the document at a location using the backend for its scheme."""
    return (registry or get_default_registry()).read_document(location)


def write_document(location: str, value: Any, registry: Optional[BackendRegistry] = None) -> None:
    """Replace the document at a location using the backend for its scheme."""
    (registry or get_default_registry()).write_document(location, value)


def delete_document(location: str, registry: Optional[BackendRegistry] = None) -> None:
    """Delete the document at a location using the backend for its scheme."""
    (registry or get_default_registry()).delete_document(location)
