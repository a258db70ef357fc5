"""
UDP request/response transport

Sends one datagram from an ephemeral local port and waits for the first
reply.
"""

import asyncio
import logging
import socket

from wiiservice.errors import HostUnreachableError, QueryTimeoutError, ServiceIOError

logger = logging.getLogger(__name__)


class ReplyProtocol(asyncio.DatagramProtocol):
    """UDP protocol handler resolving a future with the first datagram"""

    def __init__(self, reply: asyncio.Future):
        self.reply = reply
        self.transport = None
        super().__init__()

    def connection_made(self, transport):
        self.transport = transport

    def datagram_received(self, data, addr):
        if not self.reply.done():
            logger.debug(f"[UDP] Reply from {addr}: {data.hex()}")
            self.reply.set_result(data)

    def error_received(self, exc):
        if not self.reply.done():
            self.reply.set_exception(ServiceIOError(f"UDP error: {exc}"))

    def connection_lost(self, exc):
        if exc is not None and not self.reply.done():
            self.reply.set_exception(ServiceIOError(f"UDP connection lost: {exc}"))


async def request_datagram(host: str, port: int, payload: bytes, timeout: float = None) -> bytes:
    """
    Send payload to host:port and return the first datagram received.

    Args:
        host: Remote host name
        port: Remote UDP port
        payload: Request bytes
        timeout: Seconds to wait for the reply, None to wait forever

    Raises:
        HostUnreachableError: The host name could not be resolved
        QueryTimeoutError: No reply before the timeout
        ServiceIOError: The socket reported an error
    """
    loop = asyncio.get_running_loop()
    reply = loop.create_future()

    try:
        transport, _ = await loop.create_datagram_endpoint(
            lambda: ReplyProtocol(reply),
            remote_addr=(host, port),
        )
    except socket.gaierror as e:
        raise HostUnreachableError(host, port, e.strerror) from e
    except OSError as e:
        raise HostUnreachableError(host, port, e.strerror or str(e)) from e

    try:
        transport.sendto(payload)
        logger.debug(f"[UDP] Sent {len(payload)} bytes to {host}:{port}")
        return await asyncio.wait_for(reply, timeout=timeout)
    except asyncio.TimeoutError:
        raise QueryTimeoutError(f"No reply from {host}:{port} within {timeout}s") from None
    finally:
        transport.close()
