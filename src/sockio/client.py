"""
=============================================================================
CLIENT
=============================================================================

One HTTP/1.0 request, two ways of doing the socket I/O.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    fetch_with_streams()                             │
    ├─────────────────────────────────────────────────────────────────────┤
    │   socket ──makefile()──► writer.write(request); writer.flush()      │
    │                          for line in reader: store line + linesep   │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    fetch_with_channel()                             │
    ├─────────────────────────────────────────────────────────────────────┤
    │   Channel ──► write(request.encode())                               │
    │               read_loop(): read → flip → decode → compact           │
    └─────────────────────────────────────────────────────────────────────┘

HTTP/1.0 without keep-alive means the server closes the connection after
the response. Both styles simply read until end of stream; neither parses
the response.

=============================================================================
"""

import socket
import logging
from dataclasses import replace
from typing import Optional

from .config import ClientConfig
from .core.channel import Channel
from .core.reader import read_loop
from .core.streams import open_streams, read_lines, write_request


logger = logging.getLogger(__name__)

# Request heads are ASCII no matter how the response is decoded
REQUEST_ENCODING = "ascii"


def build_request(path: str) -> str:
    """
    Build the request text.

        >>> build_request("/test.json")
        'GET /test.json HTTP/1.0\\r\\n\\r\\n'

    Raises:
        ValueError: If path does not start with "/", contains whitespace,
            or is not ASCII.
    """
    if not path.startswith("/"):
        raise ValueError(f"Request path must start with '/': {path!r}")
    if any(ch.isspace() for ch in path):
        raise ValueError(f"Request path must not contain whitespace: {path!r}")
    if not path.isascii():
        raise ValueError(f"Request path must be ASCII (percent-encode it): {path!r}")
    return f"GET {path} HTTP/1.0\r\n\r\n"


def _resolve(config: Optional[ClientConfig], host: str, port: int) -> ClientConfig:
    if config is None:
        config = ClientConfig(host=host, port=port)
    else:
        config = replace(config, host=host, port=port)
    config.validate()
    return config


def fetch_with_streams(
    host: str,
    port: int,
    path: str,
    config: Optional[ClientConfig] = None,
) -> str:
    """
    Send a GET through blocking text streams and read the response lines.

    Lines are joined with os.linesep (see streams.read_lines).

    Raises:
        OSError: On connection or I/O failure.
    """
    config = _resolve(config, host, port)
    request = build_request(path)

    sock = socket.create_connection((config.host, config.port), timeout=config.timeout)
    logger.debug(f"Stream fetch {path} from {config.host}:{config.port}")

    # Closing order: file objects first, then the socket they share
    with sock:
        reader, writer = open_streams(sock, encoding=config.encoding, errors=config.errors)
        with reader, writer:
            write_request(writer, request)
            text = read_lines(reader)

    logger.info(f"GET {path} via streams: {len(text)} chars")
    return text


def fetch_with_channel(
    host: str,
    port: int,
    path: str,
    config: Optional[ClientConfig] = None,
) -> str:
    """
    Send a GET through a channel and decode the response incrementally.

    The working chunk holds config.chunk_capacity bytes (8192 by default);
    the text is the same for any capacity.

    Raises:
        OSError: On connection or I/O failure.
    """
    config = _resolve(config, host, port)
    request = build_request(path)

    with Channel.open(config.host, config.port, timeout=config.timeout) as channel:
        channel.write(request.encode(REQUEST_ENCODING))
        text = read_loop(
            channel,
            chunk_capacity=config.chunk_capacity,
            encoding=config.encoding,
            errors=config.errors,
            flush_each_pass=config.flush_each_pass,
        )

    logger.info(
        f"GET {path} via channel: {len(text)} chars "
        f"(chunk capacity {config.chunk_capacity})"
    )
    return text
