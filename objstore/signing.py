"""Request signing.

The client depends only on the Signer interface: given a built request and
a credential pair, return the request ready to send. SigV4Signer is the
default implementation and delegates the cryptography to botocore.
"""

from abc import ABC, abstractmethod

import httpx
from botocore.auth import S3SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.credentials import Credentials as BotoCredentials

from objstore.models import DEFAULT_REGION, Credentials

# Headers botocore manages itself on every signing pass
SIGNATURE_HEADERS = ("Authorization", "X-Amz-Date", "X-Amz-Content-SHA256")
_SIGNATURE_HEADER_NAMES = {name.lower() for name in SIGNATURE_HEADERS}


class Signer(ABC):
    """Interface for request signing schemes."""

    @abstractmethod
    def sign(self, request: httpx.Request, credentials: Credentials) -> httpx.Request:
        """Return the request with authentication applied.

        Implementations must not alter the method, URL, or body.
        """
        pass


class SigV4Signer(Signer):
    """AWS Signature Version 4 signing for S3-compatible services."""

    def __init__(self, region: str = DEFAULT_REGION, service: str = "s3"):
        self.region = region
        self.service = service

    def sign(self, request: httpx.Request, credentials: Credentials) -> httpx.Request:
        """Sign the request in place and return it.

        The headers already on the request are signed along with it, so
        nothing may change them between signing and sending.
        """
        body = request.read()
        headers = {
            name: value
            for name, value in request.headers.items()
            if name.lower() not in _SIGNATURE_HEADER_NAMES
        }
        aws_request = AWSRequest(
            method=request.method,
            url=str(request.url),
            data=body,
            headers=headers,
        )

        signer = S3SigV4Auth(
            BotoCredentials(credentials.access_key, credentials.secret_key),
            self.service,
            self.region,
        )
        signer.add_auth(aws_request)

        for name in SIGNATURE_HEADERS:
            if name in aws_request.headers:
                request.headers[name] = aws_request.headers[name]
        return request
