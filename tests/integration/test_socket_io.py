"""
Integration tests: real sockets against a running stub server.
"""

import os
import socket

import pytest

from sockio import ClientConfig, StubServer, fetch_with_channel, fetch_with_streams
from sockio.__main__ import main

from conftest import TEST_BODY, TEST_PATH


HOST = "127.0.0.1"


def body_of(text: str) -> str:
    """Everything after the blank line that ends the response head."""
    return text.split("\r\n\r\n", 1)[1]


def config(**overrides) -> ClientConfig:
    return ClientConfig(timeout=5.0, **overrides)


class TestStreams:
    """Blocking stream style."""

    def test_reads_response(self, stub_server: StubServer):
        text = fetch_with_streams(HOST, stub_server.port, TEST_PATH, config())

        assert "It worked!" in text
        assert text.startswith("HTTP/1.0 200 OK" + os.linesep)

    def test_lines_end_with_platform_separator(self, stub_server: StubServer):
        text = fetch_with_streams(HOST, stub_server.port, TEST_PATH, config())

        assert text.endswith(TEST_BODY + os.linesep)
        assert "\r\n" not in text.replace(os.linesep, "")


class TestChannels:
    """Buffer channel style."""

    def test_reads_response_with_default_buffer(self, stub_server: StubServer):
        text = fetch_with_channel(HOST, stub_server.port, TEST_PATH, config(chunk_capacity=8192))

        assert "It worked!" in text
        assert body_of(text) == TEST_BODY

    def test_reads_response_with_small_buffer(self, stub_server: StubServer):
        text = fetch_with_channel(HOST, stub_server.port, TEST_PATH, config(chunk_capacity=8))

        assert "It worked!" in text
        assert body_of(text) == TEST_BODY

    @pytest.mark.parametrize("capacity", [1, 2, 3, 5, 8, 8192])
    def test_multibyte_body_any_capacity(self, stub_server: StubServer, capacity: int):
        body = "Grüße, 世界! 😀 It worked!"
        stub_server.stub("GET", "/unicode.txt", body=body)

        text = fetch_with_channel(HOST, stub_server.port, "/unicode.txt", config(chunk_capacity=capacity))

        assert body_of(text) == body

    def test_sends_http10_request_line(self, stub_server: StubServer):
        fetch_with_channel(HOST, stub_server.port, TEST_PATH, config())

        assert [head.request_line for head in stub_server.requests] == [
            "GET /test.json HTTP/1.0",
        ]

    def test_unstubbed_path_is_404(self, stub_server: StubServer):
        text = fetch_with_channel(HOST, stub_server.port, "/missing", config())

        assert text.startswith("HTTP/1.0 404 Not Found\r\n")

    def test_connection_refused(self):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind((HOST, 0))
            port = s.getsockname()[1]

        with pytest.raises(OSError):
            fetch_with_channel(HOST, port, TEST_PATH, config())

    def test_invalid_path_rejected_before_connecting(self, stub_server: StubServer):
        with pytest.raises(ValueError):
            fetch_with_channel(HOST, stub_server.port, "test.json", config())

        assert stub_server.requests == []

    def test_non_ascii_path_rejected(self, stub_server: StubServer):
        with pytest.raises(ValueError):
            fetch_with_channel(HOST, stub_server.port, "/caf\u00e9.json", config())

        assert stub_server.requests == []


class TestRequestEncoding:
    """The request head is ASCII whatever codec decodes the response."""

    @pytest.mark.parametrize("fetch", [fetch_with_channel, fetch_with_streams])
    @pytest.mark.parametrize("encoding", ["utf-16", "utf-32", "cp500"])
    def test_request_line_is_ascii(self, stub_server: StubServer, fetch, encoding: str):
        fetch(HOST, stub_server.port, TEST_PATH, config(encoding=encoding))

        assert [head.request_line for head in stub_server.requests] == [
            "GET /test.json HTTP/1.0",
        ]


class TestStubServer:
    """Stub server behavior seen from a raw socket."""

    def raw_exchange(self, port: int, request: bytes) -> bytes:
        with socket.create_connection((HOST, port), timeout=5.0) as sock:
            sock.sendall(request)
            received = b""
            while True:
                data = sock.recv(1024)
                if not data:
                    return received
                received += data

    def test_malformed_request_is_400(self, stub_server: StubServer):
        response = self.raw_exchange(stub_server.port, b"BOGUS\r\n\r\n")

        assert response.startswith(b"HTTP/1.0 400 Bad Request\r\n")

    def test_unsupported_version_is_505(self, stub_server: StubServer):
        response = self.raw_exchange(stub_server.port, b"GET /test.json HTTP/2.0\r\n\r\n")

        assert response.startswith(b"HTTP/1.0 505 HTTP Version Not Supported\r\n")
        assert stub_server.requests == []

    @pytest.mark.parametrize("terminator", [b"\r\n\r\n", b""])
    def test_oversized_head_is_431(self, terminator: bytes):
        """Answered as soon as the limit is passed, blank line or not."""
        request = b"GET /test.json HTTP/1.0\r\nX-Padding: " + b"a" * 200 + terminator

        with StubServer(max_head_size=64) as server:
            server.stub("GET", TEST_PATH, body=TEST_BODY)
            response = self.raw_exchange(server.port, request)

            assert response.startswith(b"HTTP/1.0 431 Request Header Fields Too Large\r\n")
            assert server.requests == []

    def test_restub_replaces_response(self, stub_server: StubServer):
        stub_server.stub("GET", TEST_PATH, status=503, body="down")

        response = self.raw_exchange(stub_server.port, b"GET /test.json HTTP/1.0\r\n\r\n")

        assert response.startswith(b"HTTP/1.0 503 Service Unavailable\r\n")
        assert response.endswith(b"\r\n\r\ndown")

    def test_reset_forgets_stubs_and_journal(self, stub_server: StubServer):
        self.raw_exchange(stub_server.port, b"GET /test.json HTTP/1.0\r\n\r\n")

        stub_server.reset()

        assert stub_server.requests == []
        response = self.raw_exchange(stub_server.port, b"GET /test.json HTTP/1.0\r\n\r\n")
        assert response.startswith(b"HTTP/1.0 404")

    def test_stop_is_idempotent(self):
        server = StubServer().start()
        assert server.port != 0

        server.stop()
        server.stop()

        assert not server.is_running


class TestCLI:
    """python -m sockio get"""

    @pytest.mark.parametrize("mode", ["channel", "stream"])
    def test_get_prints_response(self, stub_server: StubServer, capsys, mode: str):
        code = main([
            "get", "--host", HOST, "--port", str(stub_server.port),
            "--mode", mode, "--chunk-size", "8", "--timeout", "5",
        ])

        assert code == 0
        assert "It worked!" in capsys.readouterr().out

    def test_get_reports_bad_config(self, capsys):
        code = main(["get", "--host", HOST, "--port", "1", "--chunk-size", "0"])

        assert code == 1
        assert "chunk_capacity" in capsys.readouterr().err
