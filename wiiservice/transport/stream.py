"""
TCP stream transport

Opens one connection to host:port, writes a request and reads until a
predicate over the accumulated bytes says the response is complete.
A connection is used for a single exchange and then closed.
"""

import asyncio
import logging
import socket
from typing import Callable, Optional

from wiiservice.errors import (
    HostUnreachableError,
    IncompleteResponseError,
    QueryTimeoutError,
    ResponseTooLargeError,
    ServiceIOError,
)

logger = logging.getLogger(__name__)

# Returns the length of the complete message in the buffer, or -1
Predicate = Callable[[bytes], int]

DEFAULT_CHUNK_SIZE = 1024


def terminator_predicate(marker: bytes) -> Predicate:
    """
    Build a predicate that completes once marker has been received.

    The message ends right after the first occurrence of marker; any
    bytes past it are not part of the response.
    """
    def predicate(buffer: bytes) -> int:
        index = buffer.find(marker)
        if index < 0:
            return -1
        return index + len(marker)
    return predicate


class StreamConnection:
    """
    Single-use TCP connection.

    Attributes:
        host: Remote host name
        port: Remote TCP port
        timeout: Deadline in seconds for connect and for read_until, None to block
        chunk_size: Maximum bytes taken per read call
        max_size: Response size cap in bytes, None for no cap
    """

    def __init__(self, host: str, port: int, timeout: float = None,
                 chunk_size: int = DEFAULT_CHUNK_SIZE, max_size: int = None):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.chunk_size = chunk_size
        self.max_size = max_size
        self.reader: Optional[asyncio.StreamReader] = None
        self.writer: Optional[asyncio.StreamWriter] = None

    async def __aenter__(self):
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def open(self):
        """Connect to host:port"""
        logger.debug(f"[TCP] Connecting to {self.host}:{self.port}")
        try:
            self.reader, self.writer = await asyncio.wait_for(
                asyncio.open_connection(self.host, self.port),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            raise QueryTimeoutError(
                f"Connecting to {self.host}:{self.port} timed out after {self.timeout}s"
            ) from None
        except socket.gaierror as e:
            raise HostUnreachableError(self.host, self.port, e.strerror) from e
        except OSError as e:
            raise HostUnreachableError(self.host, self.port, e.strerror or str(e)) from e

    async def write(self, data: bytes):
        """Write data and wait until it is flushed"""
        if self.writer is None:
            raise ServiceIOError("Connection is not open")
        try:
            self.writer.write(data)
            await self.writer.drain()
        except OSError as e:
            raise ServiceIOError(f"Write to {self.host}:{self.port} failed: {e}") from e
        logger.debug(f"[TCP] Sent {len(data)} bytes to {self.host}:{self.port}")

    async def read_until(self, predicate: Predicate) -> bytes:
        """
        Read until predicate(buffer) returns the message length.

        Each read blocks until data arrives; the predicate is re-checked
        after every read.

        Returns:
            The buffer truncated to the length reported by the predicate

        Raises:
            IncompleteResponseError: EOF before the predicate held
            ResponseTooLargeError: More than max_size bytes without completion
            QueryTimeoutError: The deadline passed
            ServiceIOError: Any other read failure
        """
        if self.reader is None:
            raise ServiceIOError("Connection is not open")
        try:
            return await asyncio.wait_for(self._read_loop(predicate), timeout=self.timeout)
        except asyncio.TimeoutError:
            raise QueryTimeoutError(
                f"No complete response from {self.host}:{self.port} within {self.timeout}s"
            ) from None

    async def _read_loop(self, predicate: Predicate) -> bytes:
        buffer = bytearray()
        while True:
            try:
                chunk = await self.reader.read(self.chunk_size)
            except OSError as e:
                raise ServiceIOError(f"Read from {self.host}:{self.port} failed: {e}") from e

            if not chunk:
                raise IncompleteResponseError(bytes(buffer))

            buffer += chunk
            end = predicate(bytes(buffer))
            size = end if end >= 0 else len(buffer)
            if self.max_size is not None and size > self.max_size:
                raise ResponseTooLargeError(
                    f"Response from {self.host}:{self.port} exceeded {self.max_size} bytes"
                )

            if end >= 0:
                if end < len(buffer):
                    logger.debug(f"[TCP] Ignoring {len(buffer) - end} bytes after end of response")
                return bytes(buffer[:end])

    async def close(self):
        """Close the connection; safe to call more than once"""
        if self.writer is None:
            return
        writer, self.writer, self.reader = self.writer, None, None
        writer.close()
        try:
            await writer.wait_closed()
        except OSError as e:
            logger.debug(f"[TCP] Error while closing {self.host}:{self.port}: {e}")
