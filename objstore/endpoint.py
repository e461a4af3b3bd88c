"""Endpoint resolution.

Validates the base URL handed to the client factory and reduces it to a
canonical root of the form ``{scheme}://{host}:{port}/``. Validation runs
once, when the client is built; requests afterwards trust the root.
"""

from dataclasses import dataclass
from typing import Union

import httpx

from objstore.errors import InvalidEndpoint

SUPPORTED_SCHEMES = ("http", "https")

DEFAULT_PORTS = {"http": 80, "https": 443}


@dataclass(frozen=True)
class Endpoint:
    """Canonical location of an object-storage service."""

    scheme: str
    host: str
    port: int

    @property
    def netloc(self) -> str:
        host = self.host
        # IPv6 literals need brackets inside a URL
        if ":" in host:
            host = f"[{host}]"
        return f"{host}:{self.port}"

    @property
    def root(self) -> str:
        return f"{self.scheme}://{self.netloc}/"

    @property
    def secure(self) -> bool:
        return self.scheme == "https"

    def url(self, path: str = "/", query: str = "") -> str:
        """Join a request path and raw query string onto the root."""
        url = self.root + path.lstrip("/")
        if query:
            url += "?" + query
        return url

    def __str__(self) -> str:
        return self.root


def resolve_endpoint(url: Union[str, httpx.URL]) -> Endpoint:
    """Validate a base URL and return its canonical Endpoint.

    Args:
        url: Base location of the service, e.g. ``https://play.example.com``.

    Returns:
        The canonical Endpoint. The fragment, if any, is discarded.

    Raises:
        InvalidEndpoint: If the scheme is not http or https, the URL has a
                         query string, a path other than ``/``, or no host.
    """
    if url is None:
        raise InvalidEndpoint("missing url")

    try:
        parsed = url if isinstance(url, httpx.URL) else httpx.URL(url)
    except httpx.InvalidURL as e:
        raise InvalidEndpoint("malformed url", str(url)) from e

    scheme = parsed.scheme.lower()
    if scheme not in SUPPORTED_SCHEMES:
        raise InvalidEndpoint("unsupported scheme", str(url))

    # an empty query ("host/?") still counts as a query component
    if parsed.query or b"?" in parsed.raw_path:
        raise InvalidEndpoint("unexpected query", str(url))

    if parsed.path not in ("", "/"):
        raise InvalidEndpoint("unexpected path", str(url))

    if not parsed.host:
        raise InvalidEndpoint("missing host", str(url))

    port = parsed.port or DEFAULT_PORTS[scheme]
    return Endpoint(scheme=scheme, host=parsed.host, port=port)
