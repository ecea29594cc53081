"""
=============================================================================
CHANNELS
=============================================================================

A channel is the transport the read loop talks to. It knows three things:

    write(data)   send every byte of data
    read(chunk)   read into the chunk's free space
    close()       release the connection

=============================================================================
READ RESULTS
=============================================================================

socket.recv_into() returns 0 both when the peer closed the connection AND
when it was handed a zero-length buffer. The read loop must tell these
apart, so Channel.read() answers with three kinds of result:

    ┌─────────────────────────────────────────────────────────────────────┐
    │   read(chunk) returns                                               │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   n > 0   n bytes were appended at chunk.position                   │
    │                                                                      │
    │   0       the chunk has no free space, nothing was read             │
    │           (it still holds a partial character from the last pass)   │
    │                                                                      │
    │   EOF     the peer closed its side, no more bytes will come         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
CHANNEL STATE MACHINE
=============================================================================

    OPEN ──────► CLOSING ──────► CLOSED
      │                            ▲
      └── read() returned EOF      │
          (still OPEN, writes ok)  │
                                   │
    close() is idempotent ─────────┘

=============================================================================
"""

import socket
import time
import logging
import uuid
from enum import Enum
from typing import Optional

from ..errors import ChannelClosedError
from .buffers import ByteChunk


logger = logging.getLogger(__name__)


EOF = -1
"""Returned by read() when the peer has closed its side of the stream."""


class ChannelState(Enum):
    """Channel lifecycle states."""
    OPEN = "open"            # Connected, reads and writes allowed
    CLOSING = "closing"      # Shutdown sequence in progress
    CLOSED = "closed"        # Socket released


class Channel:
    """
    Buffer-oriented wrapper around a connected socket.

    Usage:
        with Channel.open("localhost", 8080) as channel:
            channel.write(b"GET / HTTP/1.0\\r\\n\\r\\n")
            chunk = ByteChunk(8192)
            while channel.read(chunk) != EOF:
                ...
        # socket closed here, even if the block raised

    Attributes:
        socket: The connected socket.
        id: Short identifier used as a log prefix.
        state: Current ChannelState.
        bytes_read: Total bytes received so far.
        bytes_written: Total bytes sent so far.
    """

    def __init__(self, sock: socket.socket, timeout: Optional[float] = None):
        self.socket = sock
        self.id = str(uuid.uuid4())[:8]
        self.state = ChannelState.OPEN
        self.created_at = time.time()
        self.bytes_read = 0
        self.bytes_written = 0
        self.reached_eof = False

        # None keeps the socket fully blocking
        self.socket.settimeout(timeout)

    @classmethod
    def open(cls, host: str, port: int, timeout: Optional[float] = None) -> "Channel":
        """
        Connect to host:port and wrap the socket in a channel.

        Raises:
            OSError: If the connection cannot be established.
        """
        sock = socket.create_connection((host, port), timeout=timeout)
        channel = cls(sock, timeout=timeout)
        logger.debug(f"[{channel.id}] Connected to {host}:{port}")
        return channel

    @property
    def is_open(self) -> bool:
        return self.state == ChannelState.OPEN

    # =========================================================================
    # I/O
    # =========================================================================

    def write(self, data: bytes) -> int:
        """
        Send all of data.

        Returns:
            Number of bytes written (always len(data)).

        Raises:
            ChannelClosedError: If the channel was closed.
            OSError: If the connection failed while sending.
        """
        self._ensure_open()
        try:
            self.socket.sendall(data)
        except OSError as e:
            logger.warning(f"[{self.id}] Write failed: {e}")
            raise
        self.bytes_written += len(data)
        return len(data)

    def read(self, chunk: ByteChunk) -> int:
        """
        Read into the chunk's free space.

        Blocks until at least one byte arrives or the peer closes.

        Returns:
            Bytes read, 0 if the chunk is full, or EOF.

        Raises:
            ChannelClosedError: If the channel was closed.
            OSError: If the connection failed while reading.
        """
        self._ensure_open()
        if self.reached_eof:
            return EOF
        if not chunk.has_remaining:
            return 0

        try:
            count = self.socket.recv_into(chunk.writable_view())
        except OSError as e:
            logger.warning(f"[{self.id}] Read failed: {e}")
            raise

        if count == 0:
            self.reached_eof = True
            logger.debug(f"[{self.id}] End of stream after {self.bytes_read} bytes")
            return EOF

        chunk.advance(count)
        self.bytes_read += count
        return count

    def _ensure_open(self):
        if self.state != ChannelState.OPEN:
            raise ChannelClosedError(self.id)

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the channel. Safe to call more than once.

        shutdown(SHUT_WR) first so the peer sees FIN, then release the
        file descriptor.
        """
        if self.state != ChannelState.OPEN:
            return

        self.state = ChannelState.CLOSING
        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Peer already gone

        try:
            self.socket.close()
        finally:
            self.state = ChannelState.CLOSED
            logger.debug(
                f"[{self.id}] Channel closed: {self.bytes_written} bytes out, "
                f"{self.bytes_read} bytes in, {time.time() - self.created_at:.3f}s"
            )

    def __enter__(self) -> "Channel":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def __repr__(self) -> str:
        return f"Channel(id={self.id!r}, state={self.state.value})"


class BytesChannel:
    """
    In-memory channel over a fixed byte string.

    Delivers at most `max_read` bytes per read() (all free space if None),
    which simulates a network that fragments data arbitrarily. Writes are
    recorded in `written`.
    """

    def __init__(self, data: bytes, max_read: Optional[int] = None):
        if max_read is not None and max_read < 1:
            raise ValueError(f"max_read must be >= 1, got {max_read}")
        self.id = "memory"
        self._data = memoryview(bytes(data))
        self._offset = 0
        self.max_read = max_read
        self.written = bytearray()
        self.closed = False

    def write(self, data: bytes) -> int:
        if self.closed:
            raise ChannelClosedError(self.id)
        self.written += data
        return len(data)

    def read(self, chunk: ByteChunk) -> int:
        if self.closed:
            raise ChannelClosedError(self.id)
        if self._offset >= len(self._data):
            return EOF
        size = chunk.remaining
        if self.max_read is not None:
            size = min(size, self.max_read)
        piece = self._data[self._offset:self._offset + size]
        count = chunk.put(piece)
        self._offset += count
        return count

    def close(self):
        self.closed = True

    def __enter__(self) -> "BytesChannel":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
