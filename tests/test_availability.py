import asyncio
import socket

import pytest

from wiiservice.errors import HostUnreachableError, MalformedResponseError, QueryTimeoutError
from wiiservice.protocol.availability import (
    AvailabilityStatus,
    build_available_request,
    parse_available_response,
)
from wiiservice.services.gamespy.available_client import AvailabilityClient


class FakeAvailableServer(asyncio.DatagramProtocol):

    def __init__(self, reply, received):
        self.reply = reply
        self.received = received

    def connection_made(self, transport):
        self.transport = transport

    def datagram_received(self, data, addr):
        self.received.append(data)
        if self.reply is not None:
            self.transport.sendto(self.reply, addr)


async def query_fake_server(client_config, reply, game_name='mariokartwii'):
    received = []
    loop = asyncio.get_running_loop()
    transport, _ = await loop.create_datagram_endpoint(
        lambda: FakeAvailableServer(reply, received),
        local_addr=('127.0.0.1', 0),
    )
    try:
        client_config.AVAILABLE_PORT = transport.get_extra_info('sockname')[1]
        status = await AvailabilityClient(client_config).get_game_availability(game_name)
    finally:
        transport.close()
    return status, received


class TestPackets:

    def test_build_request(self):
        assert build_available_request('mariokartwii') == (
            bytes([0x09, 0x00, 0x00, 0x00, 0x00]) + b'mariokartwii' + b'\x00'
        )

    def test_available(self):
        status = parse_available_response(bytes.fromhex('fefd0900000000'))
        assert status.available
        assert not status.permanently_down
        assert not status.maintenance
        assert status.hex == 'FEFD0900000000'
        assert status.describe() == 'available'

    def test_permanently_down(self):
        status = parse_available_response(bytes.fromhex('fefd0900000001'))
        assert status.permanently_down
        assert not status.available
        assert status.describe() == 'permanently down'

    def test_maintenance(self):
        status = parse_available_response(bytes([0xFE, 0xFD, 0x09, 0x00, 0x00, 0x00, 0x02]))
        assert status.hex == 'FEFD0900000002'
        assert status.status == 2
        assert status.maintenance
        assert not status.permanently_down

    def test_too_short(self):
        with pytest.raises(MalformedResponseError):
            parse_available_response(b'\xfe\xfd\x09')

    def test_wrong_header(self):
        with pytest.raises(MalformedResponseError):
            parse_available_response(bytes.fromhex('fefd0a00000000'))

    def test_status_is_value_object(self):
        raw = bytes.fromhex('fefd0900000000')
        assert parse_available_response(raw) == AvailabilityStatus(raw=raw, status=0)


class TestAvailabilityClient:

    def test_host_derived_from_domain(self, client_config):
        client_config.AVAILABLE_HOST = ''
        assert client_config.available_host('mariokartwii') == 'mariokartwii.available.gs.example.test'

    def test_query(self, client_config):
        reply = bytes.fromhex('fefd0900000002')
        status, received = asyncio.run(query_fake_server(client_config, reply))
        assert received == [build_available_request('mariokartwii')]
        assert status.maintenance

    def test_no_reply(self, client_config):
        client_config.QUERY_TIMEOUT = 0.2
        with pytest.raises(QueryTimeoutError):
            asyncio.run(query_fake_server(client_config, None))

    def test_unresolvable_host(self, client_config, monkeypatch):
        async def query():
            loop = asyncio.get_running_loop()

            async def fail(*args, **kwargs):
                raise socket.gaierror(socket.EAI_NONAME, 'Name or service not known')

            monkeypatch.setattr(loop, 'create_datagram_endpoint', fail)
            client_config.AVAILABLE_HOST = 'mariokartwii.available.gs.example.invalid'
            return await AvailabilityClient(client_config).get_game_availability('mariokartwii')

        with pytest.raises(HostUnreachableError) as excinfo:
            asyncio.run(query())
        assert excinfo.value.host == 'mariokartwii.available.gs.example.invalid'


def test_build_request_rejects_non_ascii_name():
    with pytest.raises(ValueError):
        build_available_request('mariokartwïi')
