"""HTTP transport.

Thin wrapper over httpx.Client. Connection pooling, TLS and socket-level
behaviour all belong to httpx; this layer only sends already-signed
requests and turns transport failures into TransportError.
"""

import logging
from typing import Optional

import httpx

from objstore.errors import TransportError
from objstore.models import ClientConfig

logger = logging.getLogger(__name__)


class HttpTransport:
    """Sends signed requests and returns raw responses."""

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        """Initialize the transport.

        Args:
            config: Client settings used when creating the httpx client.
            http_client: Existing httpx client to use instead. The caller
                         keeps ownership and is responsible for closing it.
        """
        config = config or ClientConfig()
        self._owns_client = http_client is None
        if http_client is None:
            http_client = httpx.Client(timeout=config.timeout, verify=config.verify)
        self.http_client = http_client

    def send(self, request: httpx.Request, stream: bool = False) -> httpx.Response:
        """Send a request.

        Args:
            request: The fully built and signed request.
            stream: If True, the body is left unread so it can be
                    consumed incrementally. The caller must close it.

        Returns:
            The response, whatever its status code.

        Raises:
            TransportError: If no response was received.
        """
        logger.debug("%s %s", request.method, request.url)
        try:
            response = self.http_client.send(request, stream=stream)
        except httpx.TransportError as e:
            raise TransportError(f"{request.method} {request.url} failed: {e}") from e
        logger.debug(
            "%s %s -> %d", request.method, request.url, response.status_code
        )
        return response

    def close(self) -> None:
        if self._owns_client:
            self.http_client.close()

    def __enter__(self) -> "HttpTransport":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False
