"""
GameSpy availability check packets

Protocol: UDP
Port: 27900

Request (client -> server):
    09              record type (AVAILABLE)
    00 00 00 00     status
    <gamename>      ASCII game name
    00              terminator

Response (server -> client):
    fe fd           response header
    09              record type (AVAILABLE)
    xx xx xx xx     status ("disabled services" bit field, big endian)

Status bits:
    0x01            service is down permanently
    0x02            service is down for maintenance
"""

import struct
from dataclasses import dataclass

from wiiservice.errors import MalformedResponseError

PACKET_TYPE_AVAILABLE = 0x09

# Response header for server packets
RESPONSE_HEADER = bytes([0xFE, 0xFD])

RESPONSE_LENGTH = 7

STATUS_PERMANENTLY_DOWN = 0x01
STATUS_MAINTENANCE = 0x02


@dataclass(frozen=True)
class AvailabilityStatus:
    """Decoded availability reply"""

    raw: bytes
    status: int

    @property
    def hex(self) -> str:
        """Uppercase hex of the whole reply, e.g. FEFD0900000000"""
        return self.raw.hex().upper()

    @property
    def permanently_down(self) -> bool:
        return bool(self.status & STATUS_PERMANENTLY_DOWN)

    @property
    def maintenance(self) -> bool:
        return bool(self.status & STATUS_MAINTENANCE)

    @property
    def available(self) -> bool:
        return self.status == 0

    def describe(self) -> str:
        if self.available:
            return 'available'
        if self.permanently_down:
            return 'permanently down'
        if self.maintenance:
            return 'temporary maintenance'
        return f'unavailable (status 0x{self.status:08x})'


def build_available_request(game_name: str) -> bytes:
    """
    Build an availability request for game_name.

    Example:
        >>> build_available_request('mariokartwii').hex()
        '09000000006d6172696f6b61727477696900'

    Raises:
        ValueError: game_name is not ASCII
    """
    try:
        name = game_name.encode('ascii')
    except UnicodeEncodeError:
        raise ValueError(f"Game name must be ASCII: {game_name!r}") from None

    return (
        struct.pack('>BI', PACKET_TYPE_AVAILABLE, 0)
        + name
        + b'\x00'
    )


def parse_available_response(data: bytes) -> AvailabilityStatus:
    """
    Parse an availability reply.

    Raises:
        MalformedResponseError: The reply is not fe fd 09 followed by a status
    """
    if len(data) < RESPONSE_LENGTH:
        raise MalformedResponseError(f"Availability reply too short: {len(data)} bytes")
    if data[:2] != RESPONSE_HEADER or data[2] != PACKET_TYPE_AVAILABLE:
        raise MalformedResponseError(f"Unexpected availability reply: {data.hex()}")

    raw = bytes(data[:RESPONSE_LENGTH])
    status = struct.unpack('>I', raw[3:7])[0]
    return AvailabilityStatus(raw=raw, status=status)
