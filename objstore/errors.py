"""Exception hierarchy for the object-storage client.

Every failure raised by the client derives from ObjectStorageError so
callers can catch the whole family at once:

- InvalidEndpoint: malformed base URL, raised at client construction
- ServiceError: non-success status with a decodable error body
- UndecodableResponse: a body that could not be decoded, raw bytes kept
- Unimplemented: operations the client cannot complete yet
- Cancelled: a streaming download cancelled by the caller
- StreamConsumed: an object stream read a second time
- TransportError: connection, timeout, or protocol failure below HTTP
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from objstore.models import ErrorEnvelope


class ObjectStorageError(Exception):
    """Base class for all object-storage client errors."""

    pass


class InvalidEndpoint(ObjectStorageError):
    """Raised when a base URL cannot be used as a client endpoint."""

    def __init__(self, reason: str, url: Optional[str] = None):
        super().__init__(reason)
        self.reason = reason
        self.url = url

    def __str__(self) -> str:
        if self.url is None:
            return self.reason
        return f"{self.reason}: {self.url!r}"


class InvalidArgument(ObjectStorageError, ValueError):
    """Raised when an operation is called with unusable arguments."""

    pass


class DecodeError(ObjectStorageError):
    """Raised by the codec when a body cannot be decoded."""

    pass


class ServiceError(ObjectStorageError):
    """The service rejected a request and explained why.

    Attributes:
        status_code: HTTP status of the response.
        envelope: Decoded error body.
        body: Raw response body.
    """

    def __init__(self, status_code: int, envelope: "ErrorEnvelope", body: bytes = b""):
        super().__init__(envelope.message or envelope.code)
        self.status_code = status_code
        self.envelope = envelope
        self.body = body

    @property
    def code(self) -> str:
        return self.envelope.code

    @property
    def message(self) -> str:
        return self.envelope.message

    @property
    def resource(self) -> str:
        return self.envelope.resource

    @property
    def request_id(self) -> str:
        return self.envelope.request_id

    def __str__(self) -> str:
        text = f"ServiceError({self.status_code}): {self.code} - {self.message}"
        if self.resource:
            text += f" [{self.resource}]"
        return text


class UndecodableResponse(ObjectStorageError):
    """A response body could not be decoded.

    The raw body is always kept so the caller can log or inspect it.
    """

    def __init__(self, status_code: int, body: bytes, reason: str = ""):
        super().__init__(reason or f"undecodable response (HTTP {status_code})")
        self.status_code = status_code
        self.body = body
        self.reason = reason

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def __str__(self) -> str:
        text = f"UndecodableResponse({self.status_code})"
        if self.reason:
            text += f": {self.reason}"
        return text


class Unimplemented(ObjectStorageError, NotImplementedError):
    """Raised for operations that are not supported yet."""

    def __init__(self, feature: str):
        super().__init__(f"not supported yet: {feature}")
        self.feature = feature


class Cancelled(ObjectStorageError):
    """Raised when a streaming download was cancelled by the caller."""

    pass


class StreamConsumed(ObjectStorageError, RuntimeError):
    """Raised when an object stream is iterated a second time."""

    pass


class TransportError(ObjectStorageError):
    """Raised when the request never produced an HTTP response."""

    pass
