"""Request construction.

One method per client operation. Each builds an unsigned httpx.Request
from its inputs alone, so the same inputs always produce the same request.
"""

from typing import Optional

import httpx

from objstore.codec import encode_bucket_configuration
from objstore.endpoint import Endpoint
from objstore.errors import InvalidArgument
from objstore.models import Acl, BucketConfiguration, ClientConfig, RangeSpec

ACL_HEADER = "x-amz-acl"
XML_CONTENT_TYPE = "application/xml"


def object_path(bucket: Optional[str] = None, key: Optional[str] = None) -> str:
    """Return ``/``, ``/{bucket}`` or ``/{bucket}/{key}``.

    Bucket and key are used exactly as given, without percent-encoding.
    """
    if bucket is None:
        return "/"
    if not bucket:
        raise InvalidArgument("bucket name must not be empty")
    path = "/" + bucket
    if key is None:
        return path
    if not key:
        raise InvalidArgument("object key must not be empty")
    return path + "/" + key


def range_for(offset: Optional[int] = None, length: Optional[int] = None) -> Optional[RangeSpec]:
    """Build a RangeSpec from optional offset/length arguments."""
    if offset is None:
        if length is not None:
            raise InvalidArgument("length requires an offset")
        return None
    return RangeSpec(offset=offset, length=length)


class RequestBuilder:
    """Builds the outbound request for every client operation."""

    def __init__(self, endpoint: Endpoint, config: ClientConfig):
        self.endpoint = endpoint
        self.config = config

    def _build(
        self,
        method: str,
        bucket: Optional[str] = None,
        key: Optional[str] = None,
        query: str = "",
        headers: Optional[dict[str, str]] = None,
        content: Optional[bytes] = None,
    ) -> httpx.Request:
        url = self.endpoint.url(object_path(bucket, key), query)
        request_headers = {"User-Agent": self.config.user_agent}
        if headers:
            request_headers.update(headers)
        return httpx.Request(method, url, headers=request_headers, content=content)

    def bucket_exists(self, bucket: str) -> httpx.Request:
        return self._build("HEAD", bucket)

    def make_bucket(self, bucket: str, acl: Acl = Acl.PRIVATE) -> httpx.Request:
        config = BucketConfiguration(location_constraint=self.config.region)
        return self._build(
            "PUT",
            bucket,
            headers={ACL_HEADER: str(acl), "Content-Type": XML_CONTENT_TYPE},
            content=encode_bucket_configuration(config),
        )

    def remove_bucket(self, bucket: str) -> httpx.Request:
        return self._build("DELETE", bucket)

    def get_bucket_acl(self, bucket: str) -> httpx.Request:
        return self._build("GET", bucket, query="acl")

    def set_bucket_acl(self, bucket: str, acl: Acl) -> httpx.Request:
        return self._build("PUT", bucket, query="acl", headers={ACL_HEADER: str(acl)})

    def list_buckets(self) -> httpx.Request:
        return self._build("GET")

    def get_object(
        self,
        bucket: str,
        key: str,
        byte_range: Optional[RangeSpec] = None,
    ) -> httpx.Request:
        headers = {}
        if byte_range is not None:
            headers["Range"] = byte_range.header_value()
        return self._build("GET", bucket, key, headers=headers)

    def stat_object(self, bucket: str, key: str) -> httpx.Request:
        return self._build("HEAD", bucket, key)
