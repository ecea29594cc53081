"""
=============================================================================
CORE I/O COMPONENTS
=============================================================================

The low-level pieces that move bytes off a socket and turn them into text.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                           CHANNEL                                    │
    │  ─────────────────────────────────────────────────────────────────  │
    │  • Wraps a connected socket                                         │
    │  • write(): sendall()                                               │
    │  • read(): recv_into() the free space of a ByteChunk                │
    │  • Reports EOF separately from "chunk full"                         │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    │ bytes
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                      BUFFERS + DECODER                               │
    │  ─────────────────────────────────────────────────────────────────  │
    │  • ByteChunk: position / limit / capacity, flip, compact            │
    │  • DecodeState: incremental codec, carries split characters         │
    │  • decode_step(): one pass from ByteChunk to text                   │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    │ text
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                          READ LOOP                                   │
    │  ─────────────────────────────────────────────────────────────────  │
    │  • read → flip → decode → compact, until EOF                        │
    │  • Same text for every chunk capacity >= 1                          │
    └─────────────────────────────────────────────────────────────────────┘

streams.py is the other style: socket.makefile() text streams, where the
io module does the buffering and decoding.

=============================================================================
"""

from .buffers import ByteChunk, CharChunk
from .channel import EOF, BytesChannel, Channel, ChannelState
from .decoder import DecodeState, decode_step
from .reader import decode_chunked, read_loop
from .streams import open_streams, read_lines, write_request

__all__ = [
    "ByteChunk",        # Byte buffer with cursors
    "CharChunk",        # Scratch buffer for decoded characters
    "EOF",              # End-of-stream marker returned by read()
    "Channel",          # Socket channel
    "BytesChannel",     # In-memory channel
    "ChannelState",     # Channel lifecycle enum
    "DecodeState",      # Incremental decoder state
    "decode_step",      # One decode pass
    "read_loop",        # Read a channel to the end as text
    "decode_chunked",   # read_loop over in-memory bytes
    "open_streams",     # makefile() reader/writer pair
    "write_request",    # Write + flush
    "read_lines",       # Read lines until EOF
]
