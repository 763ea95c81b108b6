"""
Object-store storage backend.

Locations have the form ``scheme://bucket/blob/name``. The first path segment
is the bucket and the remainder is the blob name.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Tuple

from ..core.codec import CONTENT_TYPE, decode, encode
from ..core.exceptions import BackendIOError, StorageError
from ..core.types import ABSENT
from .base import StorageBackend


logger = logging.getLogger(__name__)


def split_location(location: str) -> Tuple[str, str]:
    """
    Split a remote location into bucket and blob name.

    Example:
        >>> split_location("gs://my-bucket/state/tap.json")
        ('my-bucket', 'state/tap.json')

    Raises:
        StorageError: If the location has no bucket or no blob name
    """
    _, sep, path = location.partition("://")
    if not sep:
        raise StorageError(f"Not a remote location: {location}", location=location)

    bucket, _, blob_name = path.partition("/")
    if not bucket or not blob_name:
        raise StorageError(
            f"Remote location must be scheme://bucket/name: {location}",
            location=location,
        )
    return bucket, blob_name


class BlobClient(ABC):
    """
    Minimal object-store client: get, put and delete blobs by name.
    """

    @abstractmethod
    def get_blob_content(self, bucket: str, name: str) -> Optional[bytes]:
        """
        Fetch a blob's bytes.

        Returns:
            The blob content, or None if the blob does not exist
        """
        pass

    @abstractmethod
    def put_blob_string(self, bucket: str, name: str, content_type: str, data: str) -> None:
        """Upload a string, replacing any existing blob."""
        pass

    @abstractmethod
    def delete_blob(self, bucket: str, name: str) -> None:
        """Remove a blob."""
        pass


class RemoteObjectBackend(StorageBackend):
    """
    Stores documents as JSON blobs in an object store.

    Reading a blob that does not exist returns ``ABSENT`` rather than
    raising, so callers can treat a missing state document as empty state.

    Example:
        >>> backend = RemoteObjectBackend(S3BlobClient(), scheme="s3")
        >>> backend.write_document("s3://bucket/state.json", {"bookmarks": {}})
        >>> backend.read_document("s3://bucket/state.json")
        {'bookmarks': {}}
    """

    def __init__(
        self,
        client: Optional[BlobClient] = None,
        *,
        scheme: str,
        content_type: str = CONTENT_TYPE,
        client_factory: Optional[Callable[[], BlobClient]] = None,
    ):
        """
        Initialize the remote backend.

        Args:
            client: Object with get_blob_content, put_blob_string and
                delete_blob (a BlobClient or any object with those methods)
            scheme: URI scheme this backend serves (e.g. 'gs', 's3')
            content_type: Content type attached to uploaded documents
            client_factory: Zero-argument callable creating the client on
                first use, when no client is given

        Raises:
            ValueError: If neither or both of client and client_factory are given
        """
        if (client is None) == (client_factory is None):
            raise ValueError("Exactly one of client or client_factory is required")
        self.scheme = scheme
        self.content_type = content_type
        self._client = client
        self._client_factory = client_factory

    @property
    def client(self) -> BlobClient:
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    def read_document(self, location: str) -> Any:
        """
        Fetch and decode a blob.

        Returns:
            The decoded document, or ABSENT if the blob does not exist

        Raises:
            BackendIOError: If the object store call fails
            DecodeError: If the blob is not valid JSON
        """
        bucket, name = split_location(location)
        try:
            content = self.client.get_blob_content(bucket, name)
        except StorageError:
            raise
        except Exception as e:
            logger.error(f"Failed to read blob {location}: {e}")
            raise BackendIOError(f"Failed to read {location}: {e}", location=location) from e

        if content is None:
            logger.debug(f"Blob not found: {location}")
            return ABSENT

        logger.debug(f"Read blob: {location}")
        return decode(content)

    def write_document(self, location: str, value: Any) -> None:
        """
        Encode a value and upload it, replacing any existing blob.

        Raises:
            BackendIOError: If the object store call fails
        """
        bucket, name = split_location(location)
        data = encode(value)
        try:
            self.client.put_blob_string(bucket, name, self.content_type, data)
        except StorageError:
            raise
        except Exception as e:
            logger.error(f"Failed to write blob {location}: {e}")
            raise BackendIOError(f"Failed to write {location}: {e}", location=location) from e

        logger.debug(f"Wrote blob: {location}")

    def delete_document(self, location: str) -> None:
        """
        Remove a blob.

        Raises:
            BackendIOError: If the object store call fails
        """
        bucket, name = split_location(location)
        try:
            self.client.delete_blob(bucket, name)
        except StorageError:
            raise
        except Exception as e:
            logger.error(f"Failed to delete blob {location}: {e}")
            raise BackendIOError(f"Failed to delete {location}: {e}", location=location) from e

        logger.debug(f"Deleted blob: {location}")

    def get_name(self) -> str:
        return f"remote:{self.scheme}"

    def close(self) -> None:
        if self._client is not None:
            close = getattr(self._client, "close", None)
            if callable(close):
                close()
