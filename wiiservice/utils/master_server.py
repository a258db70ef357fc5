"""
Master server hostname derivation

Every game has its own master server host following the scheme
<gamename>.ms<number>.<domain>. Mario Kart Wii uses
mariokartwii.ms19.<domain>. The number is derived from the game name
with GameSpy's folding hash; all hosts point to the same server, which
listens on TCP port 28910 for matchmaking queries.
"""

MASTER_SERVER_MULTIPLIER = 0x63306CE7
MASTER_SERVER_COUNT = 20


def _to_int32(value: int) -> int:
    """Wrap to a signed 32-bit integer"""
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def get_master_server_number(game_name: str) -> int:
    """
    Calculate the master server number for a game

    Each lower-cased character is folded with
    server = ord(c) - server * 0x63306CE7 in signed 32-bit arithmetic.
    The remainder modulo 20 keeps the sign of the dividend, as in C;
    its absolute value is the server number. Clients that keep the sign
    resolve negative folds to ms-<n> (mariokartds gives ms-19, here ms19).

    Args:
        game_name: Game name, any case

    Returns:
        Server number in range(20)

    Example:
        >>> get_master_server_number('mariokartwii')
        19
    """
    server = 0
    for char in game_name.lower():
        server = _to_int32(ord(char) - server * MASTER_SERVER_MULTIPLIER)

    return abs(server) % MASTER_SERVER_COUNT


def get_master_server_hostname(game_name: str, domain: str) -> str:
    """
    Build the master server hostname for a game

    Example:
        >>> get_master_server_hostname('MarioKartWii', 'wiimmfi.de')
        'mariokartwii.ms19.wiimmfi.de'
    """
    game_name = game_name.lower()
    return f"{game_name}.ms{get_master_server_number(game_name)}.{domain}"
