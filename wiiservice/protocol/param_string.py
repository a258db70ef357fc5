"""
PARAM-STRING protocol utilities

Handles building and parsing GameSpy PARAM-STRING messages.

Named parameters and their values are sent as a latin-1 string:
\\NAME1\\VALUE1\\NAME2\\VALUE2\\...\\final\\

Inside names and values '/' is sent as '/1' and '\\' as '/2'.
"""

import logging
from typing import Iterable, List, NamedTuple, Optional

logger = logging.getLogger(__name__)

DELIMITER = '\\'
ENCODING = 'latin-1'
FINAL = 'final'
TERMINATOR = f'{DELIMITER}{FINAL}{DELIMITER}'


class ParamEntry(NamedTuple):
    """A parameter name with an optional value (None for name-only entries)"""
    name: str
    value: Optional[str] = None


class Pair(NamedTuple):
    """A decoded key and its value, None when the message ended first"""
    key: str
    value: Optional[str] = None


def escape(text: str) -> str:
    """
    Escape a name or value for the wire

    Slashes are replaced before backslashes, so '/1' is never touched
    by the second pass.

    Example:
        >>> escape('a\\\\b/c')
        'a/2b/1c'
    """
    return text.replace('/', '/1').replace(DELIMITER, '/2')


class ParamString:
    """
    Append-only PARAM-STRING message.

    Built messages record their entries; received messages are wrapped
    with from_string() and only ever read. Equality and hashing follow
    the wire text.
    """

    def __init__(self):
        self._parts = []
        self._entries = []

    def add(self, name: str, *value) -> 'ParamString':
        """
        Add a parameter, with or without a value.

        add(name) emits \\name\\ (used for section markers and final).
        add(name, value) emits \\name\\value, the next add() supplies the
        following delimiter. Values are converted with str() first.

        Returns:
            This ParamString, for chaining
        """
        if len(value) > 1:
            raise TypeError(f"add() takes a name and at most one value ({len(value)} values given)")

        if value:
            text = str(value[0])
            self._parts.append(f'{DELIMITER}{escape(name)}{DELIMITER}{escape(text)}')
            self._entries.append(ParamEntry(name, text))
        else:
            self._parts.append(f'{DELIMITER}{escape(name)}{DELIMITER}')
            self._entries.append(ParamEntry(name))
        return self

    def add_final(self) -> 'ParamString':
        """Terminate the message, same as add('final')"""
        return self.add(FINAL)

    def entries(self) -> List[ParamEntry]:
        """Entries added so far, in order (empty for wrapped text)"""
        return list(self._entries)

    def tokens(self) -> List[str]:
        """
        Split the wire text on the delimiter.

        Trailing empty tokens are dropped and so is the empty token in
        front of the leading delimiter.
        """
        parts = str(self).split(DELIMITER)
        while parts and parts[-1] == '':
            parts.pop()
        if parts and parts[0] == '':
            parts = parts[1:]
        return parts

    def to_pairs(self) -> List[Pair]:
        """
        Pair the tokens up two at a time, in order.

        An odd trailing token gets a value of None.

        Example:
            >>> ParamString.from_string('\\\\a\\\\1\\\\b\\\\').to_pairs()
            [Pair(key='a', value='1'), Pair(key='b', value=None)]
        """
        parts = self.tokens()
        pairs = []
        for i in range(0, len(parts), 2):
            value = parts[i + 1] if i + 1 < len(parts) else None
            pairs.append(Pair(parts[i], value))
        return pairs

    def encode(self) -> bytes:
        """Wire bytes of this message"""
        return str(self).encode(ENCODING)

    @classmethod
    def from_string(cls, text: str) -> 'ParamString':
        """
        Wrap received text.

        The text is taken verbatim; if it is not a valid PARAM-STRING the
        results of to_pairs() are undefined.
        """
        ret = cls()
        ret._parts.append(text)
        return ret

    @classmethod
    def from_bytes(cls, data: bytes) -> 'ParamString':
        return cls.from_string(data.decode(ENCODING))

    def __str__(self):
        return ''.join(self._parts)

    def __repr__(self):
        return f"<ParamString {str(self)!r}>"

    def __eq__(self, other):
        if not isinstance(other, ParamString):
            return NotImplemented
        return str(self) == str(other)

    def __hash__(self):
        return hash(str(self))


def build_param_string(entries: Iterable, final: bool = True) -> ParamString:
    """
    Build a PARAM-STRING from (name, value) entries

    Args:
        entries: ParamEntry items or plain tuples; a value of None, or a
            1-tuple, makes a name-only entry
        final: Whether to append the final terminator

    Returns:
        The built ParamString

    Example:
        >>> str(build_param_string([('k1', 'v1'), ('k2', 'v2')]))
        '\\\\k1\\\\v1\\\\k2\\\\v2\\\\final\\\\'
    """
    message = ParamString()
    for entry in entries:
        name, value = (tuple(entry) + (None,))[:2]
        if value is None:
            message.add(name)
        else:
            message.add(name, value)
    if final:
        message.add_final()
    return message


def parse_param_string(data: bytes) -> List[Pair]:
    """
    Parse raw PARAM-STRING bytes into ordered pairs

    Args:
        data: Raw bytes as received from the server

    Returns:
        List of Pair in encounter order
    """
    pairs = ParamString.from_bytes(data).to_pairs()
    logger.debug(f"Parsed {len(pairs)} pairs from {len(data)} bytes")
    return pairs
