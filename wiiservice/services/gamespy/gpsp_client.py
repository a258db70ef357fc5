"""
GameSpy GPSP (Profile Search) Client

Translates profile ids into uniquenicks using the otherslist command.

Protocol: TCP on port 29901
Message Format: PARAM-STRING (\\key\\value\\key\\value\\final\\)

Request:
          otherslist =
             sesskey = 210997796
           profileid = 302594991
            numopids = 3
               opids = 469604577|447214276|354860031
         namespaceid = 16
            gamename = mariokartwii
               final /

The parameters sesskey and numopids are ignored by the server.

Response:
          otherslist =
                   o = 354860031
          uniquenick = 4anbjhi1jRMCJ23ioucc
                   o = 447214276
          uniquenick = 7dkt0p6gtRMCJ2ljh72h
                   o = 469604577
          uniquenick = 7hl05oif6RMCJ142q65e
              oldone =
               final /

One o + uniquenick pair per requested id, sorted by profile id.
Parameter oldone terminates the sequence.
"""

import logging
from typing import Dict, List, NamedTuple, Sequence, Union

from wiiservice.protocol.param_string import (
    ENCODING,
    TERMINATOR,
    Pair,
    ParamString,
    build_param_string,
    parse_param_string,
)
from wiiservice.transport.stream import StreamConnection, terminator_predicate

# GameSpy constants
OTHERSLIST_SESSKEY = 210997796  # Required by the protocol, ignored by the server
NAMESPACE_ID = 16

logger = logging.getLogger(__name__)


class NicknameEntry(NamedTuple):
    """A profile id and its uniquenick"""
    profile_id: int
    uniquenick: str


def build_otherslist_request(game_name: str, profile_id: int,
                             profile_ids: Sequence[int]) -> ParamString:
    """
    Build the otherslist request.

    Args:
        game_name: GameSpy game name, e.g. mariokartwii
        profile_id: Profile id of the asking player
        profile_ids: Profile ids to look up

    Returns:
        The request, terminated with final

    Raises:
        ValueError: profile_ids is empty
    """
    if not profile_ids:
        raise ValueError("At least one profile id is required")

    opids = '|'.join(str(pid) for pid in profile_ids)

    return build_param_string([
        ('otherslist', None),
        ('sesskey', OTHERSLIST_SESSKEY),
        ('profileid', profile_id),
        ('numopids', len(profile_ids)),
        ('opids', opids),
        ('namespaceid', NAMESPACE_ID),
        ('gamename', game_name),
    ])


def extract_nicknames(response: Union[ParamString, List[Pair]]) -> List[NicknameEntry]:
    """
    Collect o/uniquenick entries from an otherslist response.

    Works on the flat token order, so it does not matter how the pairs
    lined up. Stops at oldone or final.

    Args:
        response: The response ParamString, or the pairs decoded from it

    Returns:
        NicknameEntry items in server order
    """
    if isinstance(response, ParamString):
        tokens = response.tokens()
    else:
        tokens = [token for pair in response for token in pair if token is not None]

    entries = []
    profile_id = None
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token in ('oldone', 'final'):
            break
        if token == 'o' and i + 1 < len(tokens):
            profile_id = int(tokens[i + 1])
            i += 2
            continue
        if token == 'uniquenick' and i + 1 < len(tokens):
            if profile_id is None:
                logger.warning(f"[GPSP] uniquenick {tokens[i + 1]!r} without profile id")
            else:
                entries.append(NicknameEntry(profile_id, tokens[i + 1]))
                profile_id = None
            i += 2
            continue
        i += 1
    return entries


class GPSearchClient:
    """
    GameSpy Profile Search client.

    Every query opens its own connection and closes it once the
    response has been read.

    Attributes:
        config: Client configuration object
        host: GPSP host name
        port: GPSP TCP port
    """

    def __init__(self, config):
        """
        Initialize GPSP client.

        Args:
            config: Client configuration with the domain, GPSP_PORT and limits
        """
        self.config = config
        self.host = config.gpsp_host()
        self.port = config.GPSP_PORT

    def connect(self) -> StreamConnection:
        return StreamConnection(
            self.host,
            self.port,
            timeout=self.config.QUERY_TIMEOUT,
            max_size=self.config.MAX_RESPONSE_SIZE,
        )

    async def exchange(self, request: ParamString) -> bytes:
        """
        Send a request and read the response up to and including final.

        Args:
            request: A terminated PARAM-STRING request

        Returns:
            The raw response bytes
        """
        logger.debug(f"[GPSP] Sending to {self.host}:{self.port}: {request}")

        async with self.connect() as connection:
            await connection.write(request.encode())
            data = await connection.read_until(terminator_predicate(TERMINATOR.encode(ENCODING)))

        logger.debug(f"[GPSP] Received from {self.host}:{self.port}: {data.decode(ENCODING)}")
        return data

    async def get_nicknames(self, game_name: str, profile_id: int, *profile_ids: int) -> List[Pair]:
        """
        Look up the uniquenicks of profile_ids.

        Args:
            game_name: GameSpy game name
            profile_id: Profile id of the asking player
            profile_ids: Profile ids to look up (at least one)

        Returns:
            The whole response as ordered pairs

        Raises:
            HostUnreachableError: The GPSP host could not be reached
            ServiceIOError: The exchange failed after connecting
        """
        request = build_otherslist_request(game_name, profile_id, profile_ids)
        pairs = parse_param_string(await self.exchange(request))

        logger.info(f"[GPSP] otherslist for {game_name}: {len(profile_ids)} ids requested, "
                    f"{len(pairs)} pairs received")
        return pairs

    async def lookup_nicknames(self, game_name: str, profile_id: int, *profile_ids: int) -> Dict[int, str]:
        """Same as get_nicknames(), returned as {profile_id: uniquenick}"""
        pairs = await self.get_nicknames(game_name, profile_id, *profile_ids)
        return {entry.profile_id: entry.uniquenick for entry in extract_nicknames(pairs)}
