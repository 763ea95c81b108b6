"""
Local filesystem storage backend.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from ..core.codec import decode, encode
from ..core.exceptions import NotFoundError
from .base import StorageBackend


logger = logging.getLogger(__name__)


def _to_path(location: str) -> Path:
    """Strip an optional file:// prefix and return a Path."""
    if location.startswith("file://"):
        location = location[len("file://"):]
    return Path(location)


class LocalFileBackend(StorageBackend):
    """
    Stores documents as JSON files on the local filesystem.

    Writes go to a temporary file in the target directory which then
    replaces the target, so readers never observe a half-written document.
    """

    def __init__(self, create_dirs: bool = True, encoding: str = "utf-8"):
        """
        Initialize the local backend.

        Args:
            create_dirs: Whether to create parent directories on write
            encoding: Text encoding for document files
        """
        self.create_dirs = create_dirs
        self.encoding = encoding

    def read_document(self, location: str) -> Any:
        """
        Read a JSON document from disk.

        Raises:
            NotFoundError: If the file does not exist
            PermissionError: If the file cannot be read
            DecodeError: If the file is not valid JSON
        """
        path = _to_path(location)
        try:
            with open(path, "r", encoding=self.encoding) as f:
                content = f.read()
        except FileNotFoundError as e:
            raise NotFoundError(f"Document not found: {location}", location=location) from e

        logger.debug(f"Read document: {path}")
        return decode(content)

    def write_document(self, location: str, value: Any) -> None:
        """
        Replace the file at location with the encoded value.

        Raises:
            PermissionError: If the file or directory is not writable
        """
        path = _to_path(location)
        content = encode(value)

        directory = path.parent
        if self.create_dirs:
            directory.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            dir=str(directory),
            prefix=f".{path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding=self.encoding) as f:
                f.write(content)
            os.replace(tmp_name, path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            logger.error(f"Failed to write document: {path}")
            raise

        logger.debug(f"Wrote document: {path}")

    def delete_document(self, location: str) -> None:
        """
        Remove the file at location.

        Raises:
            NotFoundError: If the file does not exist
        """
        path = _to_path(location)
        try:
            path.unlink()
        except FileNotFoundError as e:
            raise NotFoundError(f"Document not found: {location}", location=location) from e

        logger.debug(f"Deleted document: {path}")

    def get_name(self) -> str:
        return "local"
