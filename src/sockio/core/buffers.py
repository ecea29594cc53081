"""
=============================================================================
BOUNDED BUFFERS
=============================================================================

Fixed-capacity buffers for the channel read path. A socket read lands in a
ByteChunk, the decoder drains it into a CharChunk, and the CharChunk is
drained into the caller's text accumulator.

=============================================================================
POSITION, LIMIT, CAPACITY
=============================================================================

Every buffer has three cursors:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         ByteChunk (capacity 8)                      │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   WRITE MODE (after clear() or compact())                           │
    │                                                                      │
    │     [ G  E  T  ·  ·  ·  ·  · ]                                       │
    │       0        ▲              ▲                                      │
    │             position        limit == capacity                        │
    │                                                                      │
    │     recv_into() fills from position up to limit                      │
    │                                                                      │
    │   READ MODE (after flip())                                           │
    │                                                                      │
    │     [ G  E  T  ·  ·  ·  ·  · ]                                       │
    │       ▲        ▲                                                     │
    │    position   limit                                                  │
    │                                                                      │
    │     the decoder consumes from position up to limit                   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
COMPACTION
=============================================================================

A decode pass may stop before the end of the data if the last bytes are an
incomplete multi-byte character. compact() moves those leftover bytes to the
front so the next read appends after them:

    before compact():   [ a  b  \xe2 \x82 ]   position=2, limit=4
    after compact():    [ \xe2 \x82 ·  · ]    position=2, limit=4 (capacity)

=============================================================================
"""

from typing import List


class ByteChunk:
    """
    A bounded, mutable byte buffer with position/limit/capacity cursors.

    Backed by a bytearray so socket.recv_into() can write straight into it
    without an intermediate bytes object.
    """

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError(f"chunk capacity must be >= 1, got {capacity}")
        self._data = bytearray(capacity)
        self._capacity = capacity
        self._position = 0
        self._limit = capacity

    # =========================================================================
    # CURSORS
    # =========================================================================

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def position(self) -> int:
        return self._position

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def remaining(self) -> int:
        """Number of bytes between position and limit."""
        return self._limit - self._position

    @property
    def has_remaining(self) -> bool:
        return self._position < self._limit

    def advance(self, count: int) -> None:
        """
        Move the position forward by count bytes.

        Used after recv_into() in write mode and after the decoder consumed
        bytes in read mode.
        """
        if count < 0 or count > self.remaining:
            raise ValueError(
                f"cannot advance {count} bytes, only {self.remaining} remaining"
            )
        self._position += count

    # =========================================================================
    # MODE SWITCHES
    # =========================================================================

    def flip(self) -> "ByteChunk":
        """Switch from filling to draining: limit = position, position = 0."""
        self._limit = self._position
        self._position = 0
        return self

    def compact(self) -> "ByteChunk":
        """
        Move the unread bytes to the front and switch back to filling.

        After this call position is the number of bytes kept, and limit is
        the capacity, so the next read appends after the kept bytes.
        """
        kept = self.remaining
        if kept and self._position:
            self._data[0:kept] = self._data[self._position:self._limit]
        self._position = kept
        self._limit = self._capacity
        return self

    def clear(self) -> "ByteChunk":
        """Forget all content and switch to filling."""
        self._position = 0
        self._limit = self._capacity
        return self

    # =========================================================================
    # DATA ACCESS
    # =========================================================================

    def writable_view(self) -> memoryview:
        """Memoryview over the free space [position, limit) for recv_into()."""
        return memoryview(self._data)[self._position:self._limit]

    def put(self, data: bytes) -> int:
        """
        Copy as much of data as fits into the free space.

        Returns:
            Number of bytes copied.
        """
        count = min(len(data), self.remaining)
        self._data[self._position:self._position + count] = data[:count]
        self._position += count
        return count

    def unread(self) -> bytes:
        """Copy of the bytes in [position, limit)."""
        return bytes(self._data[self._position:self._limit])

    def __repr__(self) -> str:
        return (
            f"ByteChunk(position={self._position}, limit={self._limit}, "
            f"capacity={self._capacity})"
        )


class CharChunk:
    """
    Fixed-capacity scratch buffer for decoded characters.

    The decoder never writes more than `capacity` characters at once; longer
    output goes through the buffer in several put/drain rounds.
    """

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError(f"char capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._parts: List[str] = []
        self._size = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def remaining(self) -> int:
        return self._capacity - self._size

    def __len__(self) -> int:
        return self._size

    def put(self, text: str) -> int:
        """
        Append up to `remaining` characters of text.

        Returns:
            How many characters were taken.
        """
        taken = text[:self.remaining]
        if taken:
            self._parts.append(taken)
            self._size += len(taken)
        return len(taken)

    def drain_into(self, accumulator: List[str]) -> int:
        """Append the buffered characters to accumulator and clear."""
        drained = self._size
        if drained:
            accumulator.append("".join(self._parts))
        self.clear()
        return drained

    def clear(self) -> None:
        self._parts.clear()
        self._size = 0

    def __repr__(self) -> str:
        return f"CharChunk(size={self._size}, capacity={self._capacity})"
