"""
=============================================================================
INCREMENTAL DECODING
=============================================================================

Turns raw bytes into text when the bytes arrive in pieces.

=============================================================================
WHY NOT JUST bytes.decode()?
=============================================================================

UTF-8 uses 1 to 4 bytes per character. A read boundary can land in the
middle of a character:

    "€" is encoded as  E2 82 AC

    read #1 → b"price: \xe2\x82"     (character cut in half!)
    read #2 → b"\xac 5"

    b"price: \xe2\x82".decode("utf-8")  → UnicodeDecodeError
    b"price: \xe2\x82".decode("utf-8", errors="replace")
                                        → "price: �"  (data lost!)

A stateful decoder remembers the cut-off bytes and finishes the character
when the rest arrives. The standard library ships one for every text codec:

    decoder = codecs.getincrementaldecoder("utf-8")()
    decoder.decode(b"price: \xe2\x82")   → "price: "
    decoder.decode(b"\xac 5")            → "€ 5"

=============================================================================
WHERE DO LEFTOVER BYTES LIVE?
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    Leftover bytes after a pass                      │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. IN THE CHUNK (normal case)                                      │
    │      └── decode_step() stops the chunk position before them         │
    │      └── compact() moves them to the front                          │
    │      └── the next read appends after them                           │
    │                                                                      │
    │   2. IN THE DECODE STATE (tiny chunks)                               │
    │      └── if the partial character would fill the whole chunk,       │
    │          there is no room left to read its remaining bytes          │
    │      └── the decoder keeps them as carry-over instead                │
    │      └── the chunk is emptied, so the loop keeps making progress    │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Either way each byte is decoded exactly once.

=============================================================================
"""

import codecs
import logging
from typing import List

from .buffers import ByteChunk, CharChunk


logger = logging.getLogger(__name__)


class DecodeState:
    """
    Per-connection decoder state.

    Wraps a codecs incremental decoder. One instance lives for the whole
    logical stream and must not be shared between connections.

    Attributes:
        encoding: Normalized codec name (e.g. "utf-8").
        errors: Error policy passed to the codec ("replace", "ignore", "strict"...).
    """

    def __init__(self, encoding: str = "utf-8", errors: str = "replace"):
        info = codecs.lookup(encoding)
        self.encoding = info.name
        self.errors = errors
        self._decoder = info.incrementaldecoder(errors)

    @property
    def carry(self) -> bytes:
        """Bytes held by the decoder that are waiting for more input."""
        return self._decoder.getstate()[0]

    def decode(self, data: bytes, final: bool = False) -> str:
        """
        Decode data, prefixed by any carry-over from earlier calls.

        With final=True an incomplete trailing sequence is handed to the
        error policy instead of being kept.
        """
        return self._decoder.decode(data, final)

    def release_carry(self) -> bytes:
        """Drop the carry-over from the decoder and return it."""
        pending, flag = self._decoder.getstate()
        self._decoder.setstate((b"", flag))
        return pending

    def __repr__(self) -> str:
        return f"DecodeState(encoding={self.encoding!r}, errors={self.errors!r}, carry={self.carry!r})"


def decode_step(
    chunk: ByteChunk,
    chars: CharChunk,
    state: DecodeState,
    final: bool,
    accumulator: List[str],
) -> int:
    """
    Run one decode pass over the chunk's unread region.

    =========================================================================
    FLOW
    =========================================================================

        chunk [position, limit)
            │
            ▼
        state.decode(data, final)  ──►  text
            │
            ├── trailing partial character?
            │      fits back in the chunk  → un-consume it (stays in chunk)
            │      would fill the chunk    → decoder keeps it as carry
            │
            ▼
        text ──► chars.put() ──► chars.drain_into(accumulator)   (repeat)

    =========================================================================

    Args:
        chunk: Byte chunk in read mode (after flip()).
        chars: Scratch character buffer, empty on entry and on exit.
        state: Decoder state for this stream.
        final: True when no more bytes will ever arrive.
        accumulator: List of text pieces to append to.

    Returns:
        Number of characters appended to the accumulator.
    """
    data = chunk.unread()
    text = state.decode(data, final)

    # ─────────────────────────────────────────────────────────────────────
    # Decide where a trailing partial character lives
    # ─────────────────────────────────────────────────────────────────────
    # The decoder now holds the undecoded tail of (old carry + data). When
    # that tail is no longer than data it is a suffix of data, so it can
    # be given back to the chunk as long as it leaves room for another read.

    consumed = len(data)
    pending = state.carry
    if pending and len(pending) <= len(data) and len(pending) < chunk.capacity:
        state.release_carry()
        consumed -= len(pending)
    chunk.advance(consumed)

    produced = 0
    while text:
        taken = chars.put(text)
        text = text[taken:]
        produced += chars.drain_into(accumulator)

    logger.debug(
        f"decode pass: {consumed}/{len(data)} bytes consumed, "
        f"{produced} chars, {chunk.remaining} left in chunk, "
        f"{len(state.carry)} carried, final={final}"
    )
    return produced


# =============================================================================
# MODULE SUMMARY
# =============================================================================
#
# DecodeState  - wraps codecs incremental decoders, exposes the carry-over
# decode_step  - one pass: decode, leave partial characters for next time,
#                drain output through the scratch buffer
#
# The loop that drives decode_step lives in reader.py.
# =============================================================================
