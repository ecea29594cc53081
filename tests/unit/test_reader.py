"""
Unit tests for the read/decode/compact loop.
"""

import pytest

from sockio.core.channel import BytesChannel, Channel
from sockio.core.reader import decode_chunked, read_loop


MIXED_TEXT = 'Grüße, 世界! € 😀 { "response" : "It worked!" }\r\n'
MIXED_BYTES = MIXED_TEXT.encode("utf-8")


class TestChunkSizeIndependence:
    """Every chunk capacity decodes to the same text as a one-shot decode."""

    @pytest.mark.parametrize("capacity", list(range(1, 17)) + [64, 8192])
    def test_utf8_round_trip(self, capacity: int):
        assert decode_chunked(MIXED_BYTES, capacity) == MIXED_BYTES.decode("utf-8")

    @pytest.mark.parametrize("capacity", [1, 2, 3, 5])
    def test_utf16_round_trip(self, capacity: int):
        data = "héllo 😀".encode("utf-16")

        assert decode_chunked(data, capacity, encoding="utf-16") == "héllo 😀"

    @pytest.mark.parametrize("max_read", [1, 2, 3, 7])
    def test_fragmented_reads_into_large_chunk(self, max_read: int):
        """A network that delivers a few bytes at a time changes nothing."""
        channel = BytesChannel(MIXED_BYTES, max_read=max_read)

        assert read_loop(channel, chunk_capacity=8192) == MIXED_TEXT

    @pytest.mark.parametrize("capacity", [1, 2, 3])
    def test_chunk_smaller_than_character(self, capacity: int):
        """A 4-byte character still decodes when the chunk holds fewer bytes."""
        assert decode_chunked("😀".encode("utf-8"), capacity) == "😀"


class TestEndOfStream:
    """Behavior at the end of the stream."""

    def test_empty_stream(self):
        assert decode_chunked(b"", 8) == ""

    @pytest.mark.parametrize("capacity", [1, 2, 3, 4, 5, 6, 8192])
    def test_truncated_tail_is_replaced_once(self, capacity: int):
        assert decode_chunked(b"abc\xe2\x82", capacity) == "abc�"

    def test_truncated_tail_dropped_with_ignore(self):
        assert decode_chunked(b"abc\xe2\x82", 2, errors="ignore") == "abc"

    def test_rejects_zero_capacity(self):
        with pytest.raises(ValueError):
            decode_chunked(b"abc", 0)


class TestFlushEachPass:
    """Legacy mode that tells the decoder every pass is the last."""

    def test_split_character_is_mangled(self):
        data = "a€".encode("utf-8")

        assert decode_chunked(data, 2, flush_each_pass=True) == "a���"
        assert decode_chunked(data, 2) == "a€"

    def test_harmless_when_chunk_holds_everything(self):
        assert decode_chunked(MIXED_BYTES, 8192, flush_each_pass=True) == MIXED_TEXT


class TestOverChannel:
    """read_loop driving a socket Channel."""

    def test_reads_until_eof(self, fake_socket_factory):
        sock = fake_socket_factory(MIXED_BYTES, max_recv=3)

        with Channel(sock) as channel:
            assert read_loop(channel, chunk_capacity=5) == MIXED_TEXT

        assert sock.close_calls == 1

    def test_transport_error_propagates(self, fake_socket_factory):
        sock = fake_socket_factory(
            MIXED_BYTES,
            max_recv=4,
            recv_error=ConnectionResetError("connection reset by peer"),
            fail_after=8,
        )

        with pytest.raises(ConnectionResetError):
            with Channel(sock) as channel:
                read_loop(channel, chunk_capacity=16)

        assert sock.close_calls == 1
