"""
Exceptions raised by the WFC service client

Every failure is scoped to a single query. Nothing is retried.
"""


class WiiServiceError(Exception):
    """Base exception for all client errors."""

    pass


class HostUnreachableError(WiiServiceError):
    """The host could not be resolved or connected to."""

    def __init__(self, host: str, port: int = None, reason: str = None):
        self.host = host
        self.port = port
        self.reason = reason
        target = f"{host}:{port}" if port is not None else host
        message = f"Unable to reach {target}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ServiceIOError(WiiServiceError):
    """Reading from or writing to an open connection failed."""

    pass


class IncompleteResponseError(ServiceIOError):
    """The peer closed the connection before the response was terminated."""

    def __init__(self, partial: bytes):
        self.partial = partial
        super().__init__(f"Connection closed after {len(partial)} bytes without terminator")


class ResponseTooLargeError(ServiceIOError):
    """The response grew past the configured size cap."""

    pass


class QueryTimeoutError(ServiceIOError):
    """The query did not complete before its deadline."""

    pass


class MalformedResponseError(ServiceIOError):
    """A fixed-layout reply did not have the expected shape."""

    pass
