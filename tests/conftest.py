import asyncio
from contextlib import asynccontextmanager

import pytest

from wiiservice.config import Config

OTHERSLIST_RESPONSE = (
    b'\\otherslist\\'
    b'\\o\\354860031\\uniquenick\\4anbjhi1jRMCJ23ioucc'
    b'\\o\\447214276\\uniquenick\\7dkt0p6gtRMCJ2ljh72h'
    b'\\o\\469604577\\uniquenick\\7hl05oif6RMCJ142q65e'
    b'\\oldone\\\\final\\'
)


@asynccontextmanager
async def tcp_server(handler):
    """Run handler(reader, writer) on 127.0.0.1, yields the port"""
    server = await asyncio.start_server(handler, '127.0.0.1', 0)
    port = server.sockets[0].getsockname()[1]
    try:
        yield port
    finally:
        server.close()
        await server.wait_closed()


def gpsp_handler(response: bytes, chunk_size: int = None, received: list = None,
                 close_after: bool = False):
    """
    Fake GPSP server: reads one request, answers with response.

    The connection stays open until the client closes it unless
    close_after is set.
    """
    async def handler(reader, writer):
        request = await reader.readuntil(b'\\final\\')
        if received is not None:
            received.append(request)

        size = chunk_size or len(response) or 1
        for i in range(0, len(response), size):
            writer.write(response[i:i + size])
            await writer.drain()
            await asyncio.sleep(0)

        if not close_after:
            await reader.read()
        writer.close()
    return handler


@pytest.fixture
def client_config():
    settings = Config('example.test')
    settings.GPSP_HOST = '127.0.0.1'
    settings.AVAILABLE_HOST = '127.0.0.1'
    settings.QUERY_TIMEOUT = 5
    settings.MAX_RESPONSE_SIZE = 65536
    return settings
