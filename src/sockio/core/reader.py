"""
=============================================================================
THE READ LOOP
=============================================================================

Reads a whole stream through a fixed-size chunk and returns it as text.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        read_loop() Flow                             │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   ┌─────────────────────────────┐                                   │
    │   │ channel.read(chunk)         │  ← append after leftover bytes   │
    │   └──────────────┬──────────────┘                                   │
    │                  │                                                   │
    │   ┌──────────────▼──────────────┐                                   │
    │   │ EOF and chunk empty?        │──yes──► final flush, return text  │
    │   └──────────────┬──────────────┘                                   │
    │                  │ no                                                │
    │   ┌──────────────▼──────────────┐                                   │
    │   │ chunk.flip()                │  ← switch to draining            │
    │   │ decode_step(...)            │  ← partial char stays behind     │
    │   │ chunk.compact()             │  ← leftovers to the front        │
    │   └──────────────┬──────────────┘                                   │
    │                  │                                                   │
    │                  └──────────────► loop                               │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
WHEN IS A PASS "FINAL"?
=============================================================================

Only once the channel has reported EOF. Telling the decoder "final" earlier
makes it give up on a character that is split across two reads and emit a
replacement character for each half:

    capacity 2, data "a€" = 61 E2 82 AC

    final only at EOF           final on every pass
    ──────────────────          ───────────────────
    [61 E2] → "a"   (E2 stays)  [61 E2] → "a�"
    [E2 82] → ""    (carried)   [82 AC] → "��"
    [AC]    → "€"
    result: "a€"                result: "a���"

flush_each_pass=True reproduces the second column for callers that depend
on the old behavior. It is lossy and off by default.

=============================================================================
"""

import logging
from typing import List

from .buffers import ByteChunk, CharChunk
from .channel import EOF, BytesChannel
from .decoder import DecodeState, decode_step


logger = logging.getLogger(__name__)


def read_loop(
    channel,
    chunk_capacity: int = 8192,
    encoding: str = "utf-8",
    errors: str = "replace",
    flush_each_pass: bool = False,
) -> str:
    """
    Read the channel to the end and decode everything it delivered.

    The channel is NOT closed here; the caller owns it (use a with block).

    Args:
        channel: Anything with read(chunk) -> int | EOF (Channel, BytesChannel).
        chunk_capacity: Bytes the working chunk holds. Any value >= 1 gives
            the same text; small values only mean more passes.
        encoding: Codec name for the incoming bytes.
        errors: Codec error policy. "replace" never raises.
        flush_each_pass: Legacy mode, see module docstring.

    Returns:
        The decoded text.

    Raises:
        ValueError: If chunk_capacity < 1.
        LookupError: If the encoding is unknown.
        OSError: If the channel fails mid-stream. Nothing is retried.
    """
    chunk = ByteChunk(chunk_capacity)
    chars = CharChunk(chunk_capacity)
    state = DecodeState(encoding, errors)
    accumulator: List[str] = []

    passes = 0
    total_read = 0
    at_eof = False

    while True:
        # ─────────────────────────────────────────────────────────────────
        # STEP 1: Read (once EOF is seen there is nothing more to read)
        # ─────────────────────────────────────────────────────────────────
        count = EOF if at_eof else channel.read(chunk)
        if count == EOF:
            at_eof = True
        else:
            total_read += count

        # ─────────────────────────────────────────────────────────────────
        # STEP 2: Stop when nothing is pending
        # ─────────────────────────────────────────────────────────────────
        if chunk.position == 0 and (at_eof or count == 0):
            break

        # ─────────────────────────────────────────────────────────────────
        # STEP 3: Decode, then keep leftovers for the next read
        # ─────────────────────────────────────────────────────────────────
        chunk.flip()
        decode_step(chunk, chars, state, at_eof or flush_each_pass, accumulator)
        chunk.compact()
        passes += 1

    # Flush whatever the decoder itself still carries (tiny chunks only)
    chunk.clear().flip()
    decode_step(chunk, chars, state, True, accumulator)

    text = "".join(accumulator)
    logger.debug(
        f"read loop done: {total_read} bytes in {passes} passes "
        f"(capacity {chunk_capacity}), {len(text)} chars"
    )
    return text


def decode_chunked(
    data: bytes,
    chunk_capacity: int,
    encoding: str = "utf-8",
    errors: str = "replace",
    flush_each_pass: bool = False,
) -> str:
    """
    Decode in-memory bytes through the read loop.

    Handy for checking that a chunk size decodes data the same way a single
    data.decode() would.
    """
    with BytesChannel(data) as channel:
        return read_loop(
            channel,
            chunk_capacity=chunk_capacity,
            encoding=encoding,
            errors=errors,
            flush_each_pass=flush_each_pass,
        )
