"""
Storage backend interface for persisting whole JSON documents.
"""

from abc import ABC, abstractmethod
from typing import Any


class StorageBackend(ABC):
    """
    Abstract base class for storage backends.

    A backend reads, writes and deletes whole JSON documents at a location
    string. Documents are never partially updated: each write replaces the
    document.
    """

    @abstractmethod
    def read_document(self, location: str) -> Any:
        """
        Read and decode the document at a location.

        Args:
            location: Location string (path or scheme://bucket/name)

        Returns:
            The decoded document
        """
        pass

    @abstractmethod
    def write_document(self, location: str, value: Any) -> None:
        """
        Encode a value and replace the document at a location with it.

        Args:
            location: Location string
            value: JSON-representable value
        """
        pass

    @abstractmethod
    def delete_document(self, location: str) -> None:
        """Remove the document at a location."""
        pass

    @abstractmethod
    def get_name(self) -> str:
        """Return the backend name/identifier."""
        pass

    def close(self) -> None:
        """Close any open resources. Optional."""
        pass
