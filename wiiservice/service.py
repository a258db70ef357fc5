"""
WFC service facade

Binds the GPSP, availability and master server helpers to one altWFC
domain.
"""

import copy
import logging
from typing import Dict, List

from wiiservice.config import Config
from wiiservice.protocol.availability import AvailabilityStatus
from wiiservice.protocol.param_string import Pair
from wiiservice.services.gamespy.available_client import AvailabilityClient
from wiiservice.services.gamespy.gpsp_client import GPSearchClient
from wiiservice.utils.master_server import get_master_server_hostname

logger = logging.getLogger(__name__)


class WiiService:
    """
    Client for the services of one altWFC.

    Attributes:
        config: Client configuration
        domain: Domain of the altWFC, e.g. wiimmfi.de
    """

    def __init__(self, domain: str = None, config: Config = None):
        """
        Args:
            domain: Domain of the altWFC (defaults to WFC_DOMAIN)
            config: Configuration to use instead of a fresh Config; it is
                copied, never modified
        """
        self.config = copy.copy(config) if config is not None else Config()
        if domain:
            self.config.DOMAIN = domain
        self.domain = self.config.DOMAIN

        logger.debug(f"WiiService initialized - {self.config!r}")

    async def get_nicknames(self, game_name: str, profile_id: int, *profile_ids: int) -> List[Pair]:
        """Uniquenick lookup, returning the whole response as pairs"""
        return await GPSearchClient(self.config).get_nicknames(game_name, profile_id, *profile_ids)

    async def lookup_nicknames(self, game_name: str, profile_id: int, *profile_ids: int) -> Dict[int, str]:
        """Uniquenick lookup, returning {profile_id: uniquenick}"""
        return await GPSearchClient(self.config).lookup_nicknames(game_name, profile_id, *profile_ids)

    async def get_game_availability(self, game_name: str) -> AvailabilityStatus:
        return await AvailabilityClient(self.config).get_game_availability(game_name)

    def get_master_server_hostname(self, game_name: str) -> str:
        return get_master_server_hostname(game_name, self.domain)
