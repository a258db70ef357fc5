"""
GameSpy availability check client

Asks <game>.available.gs.<domain> on UDP port 27900 whether the online
service of a game is up. Most altWFC servers answer fe fd 09 00 00 00 00
for any game name, even made-up ones.
"""

import logging

from wiiservice.protocol.availability import (
    AvailabilityStatus,
    build_available_request,
    parse_available_response,
)
from wiiservice.transport.datagram import request_datagram

logger = logging.getLogger(__name__)


class AvailabilityClient:
    """Availability check client"""

    def __init__(self, config):
        self.config = config
        self.port = config.AVAILABLE_PORT

    async def get_game_availability(self, game_name: str) -> AvailabilityStatus:
        """
        Query the availability of a game's online service.

        Raises:
            HostUnreachableError: The availability host could not be resolved
            QueryTimeoutError: No reply within QUERY_TIMEOUT
            MalformedResponseError: The reply was not an availability record
        """
        host = self.config.available_host(game_name)
        request = build_available_request(game_name)

        data = await request_datagram(host, self.port, request, timeout=self.config.QUERY_TIMEOUT)
        status = parse_available_response(data)

        logger.info(f"[AVAILABLE] {game_name}: {status.describe()} ({status.hex})")
        return status
