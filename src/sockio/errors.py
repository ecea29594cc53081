"""
Exception types raised by sockio.

Transport failures are NOT wrapped: a reset connection still surfaces as
the OSError subclass the socket module raised (ConnectionResetError,
BrokenPipeError, ...). Callers that want to handle "the network broke"
catch OSError, exactly as they would with a bare socket.
"""


class SockIOError(Exception):
    """Base class for errors raised by sockio itself."""


class ChannelClosedError(SockIOError):
    """Raised when reading from or writing to a channel that was closed."""

    def __init__(self, channel_id: str):
        super().__init__(f"[{channel_id}] Channel is closed")
        self.channel_id = channel_id


class HTTPParseError(SockIOError):
    """
    Raised when the stub server cannot parse an incoming request.

    Carries the status code the stub should answer with.
    """

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
