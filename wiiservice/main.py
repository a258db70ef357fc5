"""
Command line entry point for the WFC service client

Commands:
- nicknames: translate profile ids into uniquenicks (GPSP, TCP 29901)
- available: check a game's availability (UDP 27900)
- master: print a game's master server hostname
"""

import argparse
import asyncio
import logging
import sys

from wiiservice.config import Config, config
from wiiservice.errors import WiiServiceError
from wiiservice.service import WiiService
from wiiservice.services.gamespy.gpsp_client import extract_nicknames

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='wiiservice',
        description='Query an altWFC (Nintendo Wi-Fi Connection replacement) server',
    )
    parser.add_argument('--domain', default=None,
                        help=f'altWFC domain (default: {config.DOMAIN})')
    parser.add_argument('--timeout', type=float, default=None,
                        help='query timeout in seconds, 0 to wait forever')
    parser.add_argument('--log-level', default=config.LOG_LEVEL,
                        help='logging level (default: %(default)s)')

    commands = parser.add_subparsers(dest='command', required=True)

    nicknames = commands.add_parser('nicknames', help='look up uniquenicks of profile ids')
    nicknames.add_argument('game', help='game name, e.g. mariokartwii')
    nicknames.add_argument('profile_id', type=int, help='profile id of the asking player')
    nicknames.add_argument('profile_ids', type=int, nargs='+', help='profile ids to look up')

    available = commands.add_parser('available', help='check game availability')
    available.add_argument('game', help='game name')

    master = commands.add_parser('master', help='print the master server hostname')
    master.add_argument('game', help='game name')

    return parser


async def run(args) -> int:
    """Run one command"""

    settings = Config(args.domain)
    if args.timeout is not None:
        settings.QUERY_TIMEOUT = args.timeout if args.timeout > 0 else None
    service = WiiService(config=settings)

    if args.command == 'master':
        print(service.get_master_server_hostname(args.game))

    elif args.command == 'available':
        status = await service.get_game_availability(args.game)
        print(f"{status.hex}  {status.describe()}")

    elif args.command == 'nicknames':
        pairs = await service.get_nicknames(args.game, args.profile_id, *args.profile_ids)
        for entry in extract_nicknames(pairs):
            print(f"{entry.profile_id}\t{entry.uniquenick}")

    return 0


def main(argv=None) -> int:
    """Main entry point"""

    args = build_parser().parse_args(argv)

    # Setup logging
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        return asyncio.run(run(args))
    except (WiiServiceError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 1


if __name__ == '__main__':
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(130)
