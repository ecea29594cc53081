"""
=============================================================================
BLOCKING STREAMS
=============================================================================

The stream style of socket I/O: wrap the socket in file objects and use
ordinary write()/readline() calls. The text layer does the decoding, so
there is no chunk or decoder to manage by hand.

    sock.makefile("r")  → text reader  (buffered, decodes for us)
    sock.makefile("w")  → text writer  (buffered, MUST be flushed)

=============================================================================
THE FLUSH TRAP
=============================================================================

A buffered writer holds small writes in memory. The request below is only
a few bytes, so without flush() it never leaves the process:

    writer.write("GET /test.json HTTP/1.0\\r\\n\\r\\n")
    reader.readline()     ← blocks forever: the server is still
                            waiting for the request we never sent

write_request() always flushes.

=============================================================================
"""

import os
import socket
import logging
from typing import List, TextIO, Tuple


logger = logging.getLogger(__name__)


def open_streams(
    sock: socket.socket,
    encoding: str = "utf-8",
    errors: str = "replace",
) -> Tuple[TextIO, TextIO]:
    """
    Wrap a connected socket in a (reader, writer) pair of text streams.

    newline="" on both sides keeps "\\r\\n" untouched on the wire; the
    reader still splits lines on it. Only the reader uses `encoding`; the
    writer carries an HTTP request head, which is ASCII.
    """
    reader = sock.makefile("r", encoding=encoding, errors=errors, newline="")
    writer = sock.makefile("w", encoding="ascii", newline="")
    return reader, writer


def write_request(writer: TextIO, request: str) -> None:
    """Write the request text and flush it onto the socket."""
    writer.write(request)
    writer.flush()
    logger.debug(f"Sent {len(request)} chars through stream writer")


def read_lines(reader: TextIO) -> str:
    """
    Read until end of stream, one line at a time.

    Each line is stored without its terminator and followed by os.linesep,
    so the result uses the platform's line separator throughout.
    """
    lines: List[str] = []
    for line in reader:
        lines.append(line.rstrip("\r\n"))
        lines.append(os.linesep)
    logger.debug(f"Read {len(lines) // 2} lines from stream")
    return "".join(lines)
