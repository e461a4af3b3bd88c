"""XML encoding and decoding of service entities.

Decoders take raw response bytes and either return a complete entity or
raise DecodeError; they never hand back partial results. Elements are
matched by local name, so bodies with or without the S3 namespace are
both accepted.
"""

from typing import Optional
from xml.etree import ElementTree as ET

from objstore.errors import DecodeError
from objstore.models import (
    BucketConfiguration,
    BucketInfo,
    BucketListing,
    ErrorEnvelope,
    Owner,
)

S3_NAMESPACE = "http://s3.amazonaws.com/doc/2006-03-01/"


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _parse(data: bytes, root_name: str) -> ET.Element:
    if not data or not data.strip():
        raise DecodeError(f"empty body, expected <{root_name}>")
    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        raise DecodeError(f"malformed XML: {e}") from e
    if _local(root.tag) != root_name:
        raise DecodeError(f"expected <{root_name}>, got <{_local(root.tag)}>")
    return root


def _child(element: ET.Element, name: str) -> Optional[ET.Element]:
    for child in element:
        if _local(child.tag) == name:
            return child
    return None


def _children(element: ET.Element, name: str) -> list[ET.Element]:
    return [child for child in element if _local(child.tag) == name]


def _text(element: Optional[ET.Element], name: str, default: str = "") -> str:
    if element is None:
        return default
    child = _child(element, name)
    if child is None or child.text is None:
        return default
    return child.text.strip()


def decode_error(data: bytes) -> ErrorEnvelope:
    """Decode an ``<Error>`` body.

    Raises:
        DecodeError: If the body is not XML, not an Error document,
                     or has no Code.
    """
    root = _parse(data, "Error")
    if _child(root, "Code") is None:
        raise DecodeError("error body has no <Code>")
    return ErrorEnvelope(
        code=_text(root, "Code"),
        message=_text(root, "Message"),
        resource=_text(root, "Resource"),
        request_id=_text(root, "RequestId"),
        host_id=_text(root, "HostId"),
        raw=data.decode("utf-8", errors="replace"),
    )


def decode_bucket_listing(data: bytes) -> BucketListing:
    """Decode a ``<ListAllMyBucketsResult>`` body."""
    root = _parse(data, "ListAllMyBucketsResult")

    owner_element = _child(root, "Owner")
    owner = Owner(
        id=_text(owner_element, "ID"),
        display_name=_text(owner_element, "DisplayName"),
    )

    buckets: list[BucketInfo] = []
    buckets_element = _child(root, "Buckets")
    if buckets_element is not None:
        for bucket in _children(buckets_element, "Bucket"):
            name = _text(bucket, "Name")
            if not name:
                raise DecodeError("bucket entry has no <Name>")
            buckets.append(
                BucketInfo(name=name, creation_date=_text(bucket, "CreationDate"))
            )

    return BucketListing(buckets=buckets, owner=owner)


def encode_bucket_configuration(config: BucketConfiguration) -> bytes:
    """Encode the body of a bucket creation request."""
    root = ET.Element("CreateBucketConfiguration", {"xmlns": S3_NAMESPACE})
    constraint = ET.SubElement(root, "LocationConstraint")
    constraint.text = config.location_constraint
    return ET.tostring(root, encoding="unicode").encode("utf-8")


def decode_bucket_configuration(data: bytes) -> BucketConfiguration:
    """Decode a ``<CreateBucketConfiguration>`` body."""
    root = _parse(data, "CreateBucketConfiguration")
    constraint = _child(root, "LocationConstraint")
    if constraint is None:
        raise DecodeError("configuration has no <LocationConstraint>")
    return BucketConfiguration(location_constraint=(constraint.text or "").strip())
