"""
=============================================================================
SOCKIO - Socket I/O With Streams and Buffer Channels
=============================================================================

Fetch an HTTP/1.0 response over a raw socket in two styles, and decode the
bytes into text correctly no matter how small the read buffer is.

=============================================================================
PROJECT OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                       SOCKIO ARCHITECTURE                           │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. BLOCKING STREAMS                                               │
    │      - socket.makefile() reader and writer                          │
    │      - write + flush the request, read lines until EOF              │
    │                                                                      │
    │   2. BUFFER CHANNELS                                                │
    │      - fixed-capacity ByteChunk filled with recv_into()             │
    │      - incremental decoder, split characters carried over           │
    │      - compaction between reads                                     │
    │                                                                      │
    │   3. STUB HTTP SERVER                                               │
    │      - canned responses on an ephemeral port                        │
    │      - request journal for verification                             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    sockio/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m sockio)
    ├── client.py            # build_request, fetch_with_streams/channel
    ├── config.py            # ClientConfig dataclass
    ├── errors.py            # Exception types
    ├── stub.py              # StubServer
    ├── core/                # I/O building blocks
    │   ├── buffers.py       # ByteChunk, CharChunk
    │   ├── channel.py       # Channel, BytesChannel, EOF
    │   ├── decoder.py       # DecodeState, decode_step
    │   ├── reader.py        # read_loop, decode_chunked
    │   └── streams.py       # makefile() helpers
    └── http/                # Just enough HTTP for the stub
        ├── request.py       # Request head parsing
        ├── response.py      # StubResponse serialization
        └── status_codes.py  # HTTPStatus enum

=============================================================================
QUICK START
=============================================================================

    from sockio import StubServer, fetch_with_channel, ClientConfig

    with StubServer() as server:
        server.stub("GET", "/test.json", body='{ "response" : "It worked!" }')

        text = fetch_with_channel(
            "127.0.0.1", server.port, "/test.json",
            ClientConfig(chunk_capacity=8),
        )
        assert "It worked!" in text

=============================================================================
"""

__version__ = "1.0.0"

from .config import ClientConfig
from .client import build_request, fetch_with_channel, fetch_with_streams
from .core import decode_chunked, read_loop
from .errors import ChannelClosedError, HTTPParseError, SockIOError
from .stub import StubServer

__all__ = [
    "ClientConfig",
    "build_request",
    "fetch_with_channel",
    "fetch_with_streams",
    "decode_chunked",
    "read_loop",
    "StubServer",
    "SockIOError",
    "ChannelClosedError",
    "HTTPParseError",
    "__version__",
]
