"""Object-storage client.

Ties the layers together for each operation:

    RequestBuilder -> Signer -> HttpTransport -> response interpretation

The client holds only immutable state (endpoint, credentials, config), so
one instance can be shared between threads.
"""

import logging
from typing import TYPE_CHECKING, Optional, Union

import httpx

from objstore.builder import RequestBuilder, range_for
from objstore.codec import decode_bucket_listing
from objstore.endpoint import Endpoint, resolve_endpoint
from objstore.errors import Unimplemented
from objstore.models import Acl, BucketListing, ClientConfig, Credentials, ObjectStat
from objstore.response import decode_success, expect_status, stat_from_headers
from objstore.signing import Signer, SigV4Signer
from objstore.stream import ObjectStream
from objstore.transport import HttpTransport

if TYPE_CHECKING:
    from objstore.config import ClientSettings

logger = logging.getLogger(__name__)

# Success status codes per operation
MAKE_BUCKET_OK = (204,)
REMOVE_BUCKET_OK = (200, 204)
SET_ACL_OK = (200,)
GET_OK = (200,)
RANGED_GET_OK = (200, 206)
HEAD_OK = (200,)


class ObjectStorageClient:
    """Client for an S3-compatible object-storage service."""

    def __init__(
        self,
        endpoint: Endpoint,
        credentials: Optional[Credentials] = None,
        config: Optional[ClientConfig] = None,
        transport: Optional[HttpTransport] = None,
        signer: Optional[Signer] = None,
    ):
        """Initialize the client.

        Most callers should use get_client(), which validates the URL.

        Args:
            endpoint: Resolved service endpoint.
            credentials: Key pair for signing. None sends anonymous requests.
            config: Client settings (region, user agent, timeouts).
            transport: Transport to send requests with.
            signer: Signing scheme. Defaults to SigV4 for config.region.
        """
        self.endpoint = endpoint
        self.credentials = credentials
        self.config = config or ClientConfig()
        self._builder = RequestBuilder(endpoint, self.config)
        self._transport = transport or HttpTransport(self.config)
        self._signer = signer or SigV4Signer(region=self.config.region)

    @classmethod
    def from_settings(cls, settings: "ClientSettings", **kwargs) -> "ObjectStorageClient":
        """Build a client from loaded settings."""
        return get_client(
            settings.endpoint_url,
            settings.access_key,
            settings.secret_key,
            config=settings.config,
            **kwargs,
        )

    def _send(self, request: httpx.Request, stream: bool = False) -> httpx.Response:
        if self.credentials is not None:
            request = self._signer.sign(request, self.credentials)
        return self._transport.send(request, stream=stream)

    def bucket_exists(self, bucket: str) -> bool:
        """Check whether a bucket exists.

        Any status other than 200, including 403 and 404, reports False.
        This method never raises for an HTTP status.
        """
        response = self._send(self._builder.bucket_exists(bucket))
        return response.status_code == 200

    def make_bucket(self, bucket: str, acl: Acl = Acl.PRIVATE) -> None:
        """Create a bucket in the configured region.

        Raises:
            ServiceError | UndecodableResponse: Unless the service answers 204.
        """
        response = self._send(self._builder.make_bucket(bucket, acl))
        expect_status(response, MAKE_BUCKET_OK)
        logger.info("Created bucket %s", bucket)

    def remove_bucket(self, bucket: str) -> None:
        """Delete an empty bucket."""
        response = self._send(self._builder.remove_bucket(bucket))
        expect_status(response, REMOVE_BUCKET_OK)
        logger.info("Removed bucket %s", bucket)

    def get_bucket_acl(self, bucket: str) -> Acl:
        """Fetch a bucket's ACL.

        Raises:
            Unimplemented: The service answered, but parsing ACL
                           documents is not supported yet.
            ServiceError | UndecodableResponse: The request failed.
        """
        response = self._send(self._builder.get_bucket_acl(bucket))
        expect_status(response, GET_OK)
        raise Unimplemented("parsing bucket ACL responses")

    def set_bucket_acl(self, bucket: str, acl: Acl) -> None:
        """Apply a canned ACL to a bucket."""
        response = self._send(self._builder.set_bucket_acl(bucket, acl))
        expect_status(response, SET_ACL_OK)

    def list_buckets(self) -> BucketListing:
        """List all buckets owned by the caller."""
        response = self._send(self._builder.list_buckets())
        expect_status(response, GET_OK)
        return decode_success(response, decode_bucket_listing)

    def get_object(
        self,
        bucket: str,
        key: str,
        offset: Optional[int] = None,
        length: Optional[int] = None,
    ) -> ObjectStream:
        """Download an object, or a byte range of it, as a stream.

        Args:
            bucket: Bucket name.
            key: Object key.
            offset: First byte to fetch. None fetches the whole object.
            length: Number of bytes to fetch from offset. None reads to
                    the end of the object.

        Returns:
            An ObjectStream; close it (or use it as a context manager)
            if it is not read to the end.

        Raises:
            InvalidArgument: If offset is negative, length is not positive,
                             or length is given without offset.
        """
        byte_range = range_for(offset, length)
        response = self._send(
            self._builder.get_object(bucket, key, byte_range), stream=True
        )
        expect_status(response, GET_OK if byte_range is None else RANGED_GET_OK)
        return ObjectStream(response, bucket, key, chunk_size=self.config.chunk_size)

    def stat_object(self, bucket: str, key: str) -> ObjectStat:
        """Fetch an object's metadata without its body."""
        response = self._send(self._builder.stat_object(bucket, key))
        expect_status(response, HEAD_OK)
        return stat_from_headers(key, response)

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> "ObjectStorageClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False

    def __repr__(self) -> str:
        return f"ObjectStorageClient({self.endpoint.root!r})"


def get_client(
    url: Union[str, httpx.URL],
    access_key: Optional[str] = None,
    secret_key: Optional[str] = None,
    config: Optional[ClientConfig] = None,
    transport: Optional[HttpTransport] = None,
    signer: Optional[Signer] = None,
) -> ObjectStorageClient:
    """Create a client for the service at url.

    Credentials are used only when both keys are given; otherwise requests
    are sent anonymously.

    Raises:
        InvalidEndpoint: If url is not a usable base URL.
    """
    endpoint = resolve_endpoint(url)
    credentials = None
    if access_key is not None and secret_key is not None:
        credentials = Credentials(access_key=access_key, secret_key=secret_key)
    return ObjectStorageClient(
        endpoint,
        credentials=credentials,
        config=config,
        transport=transport,
        signer=signer,
    )
