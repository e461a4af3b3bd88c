"""Data models for the object-storage client."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from objstore.errors import InvalidArgument, Unimplemented

DEFAULT_REGION = "us-west-2"
DEFAULT_USER_AGENT = "objstore-python/0.1.0"

# 5 MiB, the smallest part size the service accepts
DEFAULT_PART_SIZE = 5 * 1024 * 1024

# 64 KiB chunks when streaming object bodies
DEFAULT_CHUNK_SIZE = 64 * 1024


class Acl(Enum):
    """Canned access-control lists accepted in the x-amz-acl header."""

    PRIVATE = "private"
    PUBLIC_READ = "public-read"
    PUBLIC_READ_WRITE = "public-read-write"
    AUTHENTICATED_READ = "authenticated-read"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Credentials:
    """Access/secret key pair used to sign requests."""

    access_key: str
    secret_key: str = field(repr=False)


@dataclass(frozen=True)
class ClientConfig:
    """Settings fixed for the lifetime of a client."""

    region: str = DEFAULT_REGION
    user_agent: str = DEFAULT_USER_AGENT
    part_size: int = DEFAULT_PART_SIZE
    chunk_size: int = DEFAULT_CHUNK_SIZE
    timeout: Optional[float] = 60.0
    verify: bool = True


@dataclass(frozen=True)
class RangeSpec:
    """A byte range starting at offset, optionally bounded by length."""

    offset: int
    length: Optional[int] = None

    def __post_init__(self):
        if self.offset < 0:
            raise InvalidArgument(f"offset must be >= 0, got {self.offset}")
        if self.length is not None and self.length <= 0:
            raise InvalidArgument(f"length must be > 0, got {self.length}")

    @property
    def last_byte(self) -> Optional[int]:
        """Inclusive upper bound, or None for an open-ended range."""
        if self.length is None:
            return None
        return self.offset + self.length - 1

    def header_value(self) -> str:
        """Render the value of an HTTP Range header."""
        if self.length is None:
            return f"bytes={self.offset}-"
        return f"bytes={self.offset}-{self.last_byte}"


@dataclass(frozen=True)
class BucketConfiguration:
    """Body of a bucket creation request."""

    location_constraint: str = DEFAULT_REGION


@dataclass
class Owner:
    """Owner of the listed buckets."""

    id: str = ""
    display_name: str = ""


@dataclass
class BucketInfo:
    """A single bucket in a listing.

    creation_date is the raw timestamp as sent by the service.
    """

    name: str
    creation_date: str = ""


@dataclass
class BucketListing:
    """Result of listing all buckets."""

    buckets: list[BucketInfo] = field(default_factory=list)
    owner: Owner = field(default_factory=Owner)

    @property
    def names(self) -> list[str]:
        return [bucket.name for bucket in self.buckets]


@dataclass
class ErrorEnvelope:
    """Error body returned by the service."""

    code: str = ""
    message: str = ""
    resource: str = ""
    request_id: str = ""
    host_id: str = ""
    raw: str = ""


@dataclass
class ObjectStat:
    """Metadata about a single object, taken from HEAD response headers."""

    key: str
    size: int
    etag: str = ""
    last_modified_raw: Optional[str] = None
    content_type: Optional[str] = None
    metadata: dict[str, str] = field(default_factory=dict)

    @property
    def last_modified(self):
        raise Unimplemented("parsing Last-Modified timestamps")
