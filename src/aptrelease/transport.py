"""HTTP transport used to retrieve archive files."""

import logging
from collections.abc import AsyncIterator
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Protocol

import httpx

from aptrelease.constants import CHUNK_SIZE, HTTP_TIMEOUT
from aptrelease.errors import TransportError

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Single-attempt, cancellable retrieval of a URL."""

    async def get(self, url: str) -> bytes:
        """Return the full body of url, or raise TransportError."""
        ...

    def stream(self, url: str) -> AbstractAsyncContextManager[AsyncIterator[bytes]]:
        """Open url and yield an iterator over its body chunks."""
        ...


class HTTPTransport:
    """httpx-backed Transport.

    If no client is supplied, a short-lived AsyncClient is created for every request.
    A supplied client is never closed by the transport.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = HTTP_TIMEOUT,
        chunk_size: int = CHUNK_SIZE,
    ):
        self._client = client
        self.timeout = timeout
        self.chunk_size = chunk_size

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(follow_redirects=True, timeout=self.timeout) as client:
            yield client

    async def get(self, url: str) -> bytes:
        logger.debug(f"GET {url}")
        async with self._session() as client:
            try:
                response = await client.get(url)
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                raise TransportError(url, f"status {e.response.status_code}", e.response.status_code) from e
            except httpx.HTTPError as e:
                raise TransportError(url, str(e) or type(e).__name__) from e
        return response.content

    async def _iter_chunks(self, url: str, response: httpx.Response) -> AsyncIterator[bytes]:
        try:
            async for chunk in response.aiter_bytes(self.chunk_size):
                yield chunk
        except httpx.HTTPError as e:
            raise TransportError(url, str(e) or type(e).__name__) from e

    @asynccontextmanager
    async def stream(self, url: str) -> AsyncIterator[AsyncIterator[bytes]]:
        logger.debug(f"GET (streaming) {url}")
        async with self._session() as client:
            try:
                async with client.stream("GET", url) as response:
                    response.raise_for_status()
                    yield self._iter_chunks(url, response)
            except httpx.HTTPStatusError as e:
                raise TransportError(url, f"status {e.response.status_code}", e.response.status_code) from e
            except httpx.HTTPError as e:
                raise TransportError(url, str(e) or type(e).__name__) from e
