"""
S3-compatible blob client built on boto3.

Also serves ``gs://`` locations through the Cloud Storage XML
interoperability endpoint, which speaks the S3 API with HMAC credentials.
"""

import logging
from typing import Any, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from .remote import BlobClient


logger = logging.getLogger(__name__)


GCS_INTEROP_ENDPOINT = "https://storage.googleapis.com"

# Error codes meaning "no such object" rather than a failure
_MISSING_CODES = {"NoSuchKey", "404", "NotFound"}

SDK_CONFIG = Config(
    user_agent_extra="interchange/0.1.0",
    connect_timeout=10,
    read_timeout=60,
)


class S3BlobClient(BlobClient):
    """
    BlobClient backed by a boto3 S3 client.

    Example:
        >>> client = S3BlobClient(region_name="us-east-1")
        >>> client.put_blob_string("bucket", "state.json", "application/json", "{}")
        >>> client.get_blob_content("bucket", "state.json")
        b'{}'
    """

    def __init__(
        self,
        client: Any = None,
        endpoint_url: Optional[str] = None,
        region_name: Optional[str] = None,
        session: Optional[boto3.session.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            client: Existing boto3 S3 client (takes precedence)
            endpoint_url: Custom endpoint (e.g. GCS interop, MinIO)
            region_name: AWS region
            session: boto3 session used to create the client
        """
        if client is None:
            session = session or boto3.session.Session()
            client = session.client(
                "s3",
                endpoint_url=endpoint_url,
                region_name=region_name,
                config=SDK_CONFIG,
            )
        self._s3 = client
        self.endpoint_url = endpoint_url

    def get_blob_content(self, bucket: str, name: str) -> Optional[bytes]:
        try:
            response = self._s3.get_object(Bucket=bucket, Key=name)
        except ClientError as exc:
            code = str(exc.response.get("Error", {}).get("Code", ""))
            if code in _MISSING_CODES:
                return None
            raise

        body = response["Body"]
        try:
            return body.read()
        finally:
            body.close()

    def put_blob_string(self, bucket: str, name: str, content_type: str, data: str) -> None:
        self._s3.put_object(
            Bucket=bucket,
            Key=name,
            Body=data.encode("utf-8"),
            ContentType=content_type,
        )

    def delete_blob(self, bucket: str, name: str) -> None:
        self._s3.delete_object(Bucket=bucket, Key=name)

    def close(self) -> None:
        close = getattr(self._s3, "close", None)
        if callable(close):
            close()


def create_s3_client(endpoint_url: Optional[str] = None, region_name: Optional[str] = None) -> S3BlobClient:
    """Create a client for s3:// locations."""
    return S3BlobClient(endpoint_url=endpoint_url, region_name=region_name)


def create_gs_client(endpoint_url: Optional[str] = None) -> S3BlobClient:
    """Create a client for gs:// locations via the interoperability endpoint."""
    return S3BlobClient(endpoint_url=endpoint_url or GCS_INTEROP_ENDPOINT, region_name="auto")
