"""Response interpretation.

Every operation except bucket_exists names the exact status codes that
count as success. Anything else is turned into a typed error:

- a decodable <Error> body becomes ServiceError
- an empty body on a HEAD response becomes ServiceError with a code
  derived from the status, since HEAD responses never carry a body
- any other body becomes UndecodableResponse, keeping the raw bytes
"""

import logging
from http import HTTPStatus
from typing import Callable, Collection, Optional, TypeVar

import httpx

from objstore.codec import decode_error
from objstore.errors import (
    DecodeError,
    ObjectStorageError,
    ServiceError,
    UndecodableResponse,
)
from objstore.models import ErrorEnvelope, ObjectStat

logger = logging.getLogger(__name__)

T = TypeVar("T")

META_PREFIX = "x-amz-meta-"


def _split_path(path: str) -> tuple[Optional[str], Optional[str]]:
    parts = path.lstrip("/").split("/", 1)
    bucket = parts[0] or None
    key = parts[1] if len(parts) > 1 and parts[1] else None
    return bucket, key


def _status_envelope(response: httpx.Response) -> ErrorEnvelope:
    """Build an envelope for a bodiless error response."""
    status = response.status_code
    path = response.request.url.path
    bucket, key = _split_path(path)

    if status == 403:
        code, message = "AccessDenied", "Access denied"
    elif status == 404 and key:
        code, message = "NoSuchKey", "Object does not exist"
    elif status == 404 and bucket:
        code, message = "NoSuchBucket", "Bucket does not exist"
    elif status == 404:
        code, message = "ResourceNotFound", "Request resource not found"
    elif status == 405:
        code, message = "MethodNotAllowed", "The specified method is not allowed against this resource"
    else:
        try:
            phrase = HTTPStatus(status).phrase
        except ValueError:
            phrase = f"HTTP {status}"
        code, message = phrase.replace(" ", ""), phrase

    return ErrorEnvelope(
        code=code,
        message=message,
        resource=path,
        request_id=response.headers.get("x-amz-request-id", ""),
        host_id=response.headers.get("x-amz-id-2", ""),
    )


def error_for(response: httpx.Response) -> ObjectStorageError:
    """Classify a non-success response into a typed error.

    Streamed responses are read in full and closed.
    """
    try:
        body = response.read()
    finally:
        response.close()

    status = response.status_code
    if not body.strip() and response.request.method == "HEAD":
        return ServiceError(status, _status_envelope(response), body)

    try:
        envelope = decode_error(body)
    except DecodeError as e:
        logger.warning(
            "Undecodable error body for %s %s (HTTP %d): %s",
            response.request.method,
            response.request.url,
            status,
            e,
        )
        return UndecodableResponse(status, body, str(e))

    if not envelope.request_id:
        envelope.request_id = response.headers.get("x-amz-request-id", "")
    return ServiceError(status, envelope, body)


def expect_status(response: httpx.Response, expected: Collection[int]) -> httpx.Response:
    """Return the response if its status is one of expected, else raise.

    Raises:
        ServiceError: The service returned a decodable error.
        UndecodableResponse: The error body could not be decoded.
    """
    if response.status_code in expected:
        return response
    raise error_for(response)


def decode_success(response: httpx.Response, decoder: Callable[[bytes], T]) -> T:
    """Decode the body of a successful response.

    Raises:
        UndecodableResponse: If the body does not have the expected shape.
    """
    body = response.read()
    try:
        return decoder(body)
    except DecodeError as e:
        raise UndecodableResponse(response.status_code, body, str(e)) from e


def stat_from_headers(key: str, response: httpx.Response) -> ObjectStat:
    """Build an ObjectStat from the headers of a HEAD response.

    Raises:
        UndecodableResponse: If Content-Length is not a non-negative integer.
    """
    headers = response.headers

    raw_length = headers.get("Content-Length", "0")
    try:
        size = int(raw_length)
    except ValueError:
        size = -1
    if size < 0:
        raise UndecodableResponse(
            response.status_code, b"", f"invalid Content-Length: {raw_length!r}"
        )

    metadata = {
        name.lower()[len(META_PREFIX):]: value
        for name, value in headers.items()
        if name.lower().startswith(META_PREFIX)
    }

    return ObjectStat(
        key=key,
        size=size,
        etag=headers.get("ETag", "").strip('"'),
        last_modified_raw=headers.get("Last-Modified"),
        content_type=headers.get("Content-Type"),
        metadata=metadata,
    )
