"""
Configuration for the WFC service client
"""

import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _optional_number(value: str, cast=float):
    """Zero or empty disables the setting"""
    if not value:
        return None
    number = cast(value)
    return number if number > 0 else None


class Config:
    """Client configuration"""

    # Backend (altWFC) domain
    DOMAIN = os.getenv('WFC_DOMAIN', 'wiimmfi.de')

    # GPSP (GameSpy Profile Search)
    GPSP_HOST = os.getenv('GPSP_HOST', '')
    GPSP_PORT = int(os.getenv('GPSP_PORT', '29901'))

    # Availability check (UDP)
    AVAILABLE_HOST = os.getenv('AVAILABLE_HOST', '')
    AVAILABLE_PORT = int(os.getenv('AVAILABLE_PORT', '27900'))

    # Query limits
    QUERY_TIMEOUT = _optional_number(os.getenv('QUERY_TIMEOUT', '10'))
    MAX_RESPONSE_SIZE = _optional_number(os.getenv('MAX_RESPONSE_SIZE', '65536'), int)

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    def __init__(self, domain: str = None):
        if domain:
            self.DOMAIN = domain

    def gpsp_host(self) -> str:
        """Profile search host, e.g. gpsp.gs.wiimmfi.de"""
        return self.GPSP_HOST or f"gpsp.gs.{self.DOMAIN}"

    def available_host(self, game_name: str) -> str:
        """Availability host, e.g. mariokartwii.available.gs.wiimmfi.de"""
        return self.AVAILABLE_HOST or f"{game_name}.available.gs.{self.DOMAIN}"

    def __repr__(self):
        return f"<Config domain={self.DOMAIN} GPSP={self.gpsp_host()}:{self.GPSP_PORT}>"


# Singleton instance
config = Config()
