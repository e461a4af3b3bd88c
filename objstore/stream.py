"""Streaming object download."""

import threading
from typing import Iterator, Optional

import httpx

from objstore.errors import (
    Cancelled,
    StreamConsumed,
    TransportError,
    UndecodableResponse,
)
from objstore.models import DEFAULT_CHUNK_SIZE


class ObjectStream:
    """Lazy, finite, non-restartable sequence of an object's bytes.

    Wraps a streamed httpx response. Chunks are pulled from the network
    only as the caller iterates. cancel() may be called from another
    thread; the next chunk boundary then raises Cancelled.

    Usable as a context manager to guarantee the connection is released.
    """

    def __init__(
        self,
        response: httpx.Response,
        bucket: str,
        key: str,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        self._response = response
        self.bucket = bucket
        self.key = key
        self.chunk_size = chunk_size
        self._cancelled = threading.Event()
        self._started = False

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self._response.headers

    @property
    def content_length(self) -> Optional[int]:
        """Declared body length, or None when the header is absent.

        Raises:
            UndecodableResponse: If the header is not a non-negative integer.
        """
        value = self._response.headers.get("Content-Length")
        if value is None:
            return None
        try:
            length = int(value)
        except ValueError:
            length = -1
        if length < 0:
            raise UndecodableResponse(
                self.status_code, b"", f"invalid Content-Length: {value!r}"
            )
        return length

    @property
    def content_range(self) -> Optional[str]:
        return self._response.headers.get("Content-Range")

    @property
    def etag(self) -> str:
        return self._response.headers.get("ETag", "").strip('"')

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def closed(self) -> bool:
        return self._response.is_closed

    def __iter__(self) -> Iterator[bytes]:
        if self.cancelled:
            raise Cancelled(f"download of {self.bucket}/{self.key} was cancelled")
        if self._started:
            raise StreamConsumed("object stream can only be iterated once")
        self._started = True
        return self._chunks()

    def _chunks(self) -> Iterator[bytes]:
        chunks = self._response.iter_bytes(self.chunk_size)
        try:
            while not self.cancelled:
                try:
                    chunk = next(chunks)
                except StopIteration:
                    break
                yield chunk
        except (httpx.TransportError, httpx.StreamError) as e:
            # a cancel from another thread closes the response under us
            if not self.cancelled:
                raise TransportError(
                    f"reading {self.bucket}/{self.key} failed: {e}"
                ) from e
        finally:
            self._response.close()
        if self.cancelled:
            raise Cancelled(f"download of {self.bucket}/{self.key} was cancelled")

    def read(self) -> bytes:
        """Read the remaining body into memory."""
        return b"".join(self)

    def cancel(self) -> None:
        """Stop the download and release the connection."""
        self._cancelled.set()
        self._response.close()

    def close(self) -> None:
        self._response.close()

    def __enter__(self) -> "ObjectStream":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False
