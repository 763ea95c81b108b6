"""
Shared test fixtures and configuration for pytest.
"""

import io
import logging
import os
import sys
from pathlib import Path
from typing import Dict, Optional, Tuple

import pytest

# Add src directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from interchange.protocol import messages
from interchange.storage.registry import BackendRegistry
from interchange.storage.remote import BlobClient, RemoteObjectBackend


logger = logging.getLogger(__name__)


# ============================================================================
# Environment detection
# ============================================================================

def get_test_bucket() -> Optional[str]:
    """Bucket for integration tests against a real object store, if configured."""
    return os.environ.get("INTERCHANGE_TEST_S3_BUCKET")


# ============================================================================
# Pytest hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (requires an object-store bucket)")


def pytest_collection_modifyitems(config, items):
    """Automatically skip integration tests if no test bucket is configured."""
    if get_test_bucket():
        return

    skip_bucket = pytest.mark.skip(
        reason="Object store not available (set INTERCHANGE_TEST_S3_BUCKET)"
    )

    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_bucket)


# ============================================================================
# Fakes
# ============================================================================

class InMemoryBlobClient(BlobClient):
    """BlobClient keeping blobs in a dict, for tests."""

    def __init__(self):
        self.blobs: Dict[Tuple[str, str], bytes] = {}
        self.content_types: Dict[Tuple[str, str], str] = {}
        self.fail_with: Optional[Exception] = None

    def _check(self):
        if self.fail_with is not None:
            raise self.fail_with

    def get_blob_content(self, bucket, name):
        self._check()
        return self.blobs.get((bucket, name))

    def put_blob_string(self, bucket, name, content_type, data):
        self._check()
        self.blobs[(bucket, name)] = data.encode("utf-8")
        self.content_types[(bucket, name)] = content_type

    def delete_blob(self, bucket, name):
        self._check()
        self.blobs.pop((bucket, name), None)


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def output():
    """Capture messages written by the write_* helpers."""
    buffer = io.StringIO()
    previous = messages.set_output(buffer)
    yield buffer
    messages.set_output(previous)


@pytest.fixture
def blob_client():
    """Fixture providing an in-memory blob client."""
    return InMemoryBlobClient()


@pytest.fixture
def registry(blob_client):
    """Registry with the local backend and an in-memory 'gs' backend."""
    registry = BackendRegistry()
    registry.register("gs", RemoteObjectBackend(blob_client, scheme="gs"))
    yield registry
    registry.close()
