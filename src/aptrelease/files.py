"""Streaming download of index files with digest verification."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import AsyncExitStack

from aptrelease.errors import AlreadyOpen, HashMismatch, NoHashData
from aptrelease.filetable import FileRecord
from aptrelease.transport import Transport

logger = logging.getLogger(__name__)


class IndexFile:
    """An index file listed in a Release file, bound to its expected FileRecord.

    Usage:
        async with IndexFile(record, url) as index:
            async for chunk in await index.open(transport):
                ...
            index.check_hash()

    Bytes handed to the caller are fed into a running digest as they are read.
    A handle holds one connection at a time and is not meant to be shared between
    concurrent readers; open and close are serialized with a lock.
    """

    def __init__(self, record: FileRecord, url: str):
        self.record = record
        self.url = url
        self._lock = asyncio.Lock()
        self._stack: AsyncExitStack | None = None
        self._hasher = None
        self._size = 0
        self._hashed = False

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return f"<IndexFile {self.record.path} ({self.record.algorithm.name}) {state}>"

    @property
    def path(self) -> str:
        return self.record.path

    @property
    def is_open(self) -> bool:
        return self._stack is not None

    async def open(self, transport: Transport) -> AsyncIterator[bytes]:
        """Start downloading the file and return an iterator over its contents.

        Raises:
            AlreadyOpen: if the handle is already open
            TransportError: if the download cannot be started
        """
        async with self._lock:
            if self._stack is not None:
                raise AlreadyOpen(self.path, "file is already open")
            stack = AsyncExitStack()
            try:
                chunks = await stack.enter_async_context(transport.stream(self.url))
            except BaseException:
                await stack.aclose()
                raise
            self._stack = stack
            self._hasher = self.record.algorithm.new()
            self._size = 0
            self._hashed = False
        return self._read(chunks)

    async def _read(self, chunks: AsyncIterator[bytes]) -> AsyncIterator[bytes]:
        async for chunk in chunks:
            self._hasher.update(chunk)
            self._size += len(chunk)
            self._hashed = True
            yield chunk
        # an empty file is fully read once the stream ends
        self._hashed = True

    def check_hash(self) -> None:
        """Compare what has been read so far with the expected record.

        Call after the stream returned by open has been fully consumed.

        Raises:
            NoHashData: if nothing has been read yet
            HashMismatch: if the size or digest of the data read differs from the record
        """
        if self._hasher is None or not self._hashed:
            raise NoHashData(self.path, "no data has been read")
        if self._size != self.record.size:
            raise HashMismatch(self.path, f"size {self._size} does not match expected {self.record.size}")
        digest = self._hasher.digest()
        if digest != self.record.digest:
            raise HashMismatch(
                self.path,
                f"{self.record.algorithm.name} {digest.hex()} does not match expected {self.record.hexdigest}",
            )
        logger.debug(f"Verified {self.path} ({self.record.algorithm.name}, {self._size} bytes)")

    async def close(self) -> None:
        """Release the underlying connection. Does nothing if not open."""
        async with self._lock:
            if self._stack is None:
                return
            stack, self._stack = self._stack, None
            await stack.aclose()

    async def __aenter__(self) -> "IndexFile":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
