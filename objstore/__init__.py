"""
objstore: a small client for S3-compatible object storage.

Builds, signs and sends bucket and object requests, and turns every
non-success response into a typed error.
"""

__version__ = "0.1.0"

from objstore.client import ObjectStorageClient, get_client
from objstore.endpoint import Endpoint, resolve_endpoint
from objstore.errors import (
    Cancelled,
    InvalidArgument,
    InvalidEndpoint,
    ObjectStorageError,
    ServiceError,
    StreamConsumed,
    TransportError,
    UndecodableResponse,
    Unimplemented,
)
from objstore.models import (
    Acl,
    BucketInfo,
    BucketListing,
    ClientConfig,
    Credentials,
    ErrorEnvelope,
    ObjectStat,
)
from objstore.signing import Signer, SigV4Signer
from objstore.stream import ObjectStream

__all__ = [
    "Acl",
    "BucketInfo",
    "BucketListing",
    "Cancelled",
    "ClientConfig",
    "Credentials",
    "Endpoint",
    "ErrorEnvelope",
    "InvalidArgument",
    "InvalidEndpoint",
    "ObjectStat",
    "ObjectStorageClient",
    "ObjectStorageError",
    "ObjectStream",
    "ServiceError",
    "SigV4Signer",
    "Signer",
    "StreamConsumed",
    "TransportError",
    "UndecodableResponse",
    "Unimplemented",
    "get_client",
    "resolve_endpoint",
    "__version__",
]
