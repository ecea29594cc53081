"""
pytest configuration and fixtures.
"""

from typing import Generator, List, Optional
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sockio import StubServer


TEST_PATH = "/test.json"
TEST_BODY = '{ "response" : "It worked!" }'


@pytest.fixture
def stub_server() -> Generator[StubServer, None, None]:
    """Running stub server answering GET /test.json."""
    server = StubServer(host="127.0.0.1", port=0, read_timeout=2.0)
    server.stub("GET", TEST_PATH, status=200, body=TEST_BODY)
    server.start()

    yield server

    server.stop()


class FakeSocket:
    """
    Socket stand-in for Channel tests.

    Serves `data` in pieces of at most `max_recv` bytes, records sendall()
    calls. recv_error is raised once fail_after bytes have been served;
    send_error is raised by every sendall().
    """

    def __init__(
        self,
        data: bytes = b"",
        max_recv: Optional[int] = None,
        recv_error: Optional[OSError] = None,
        fail_after: int = 0,
        send_error: Optional[OSError] = None,
    ):
        self._data = data
        self._offset = 0
        self.max_recv = max_recv
        self.recv_error = recv_error
        self.fail_after = fail_after
        self.send_error = send_error
        self.sent: List[bytes] = []
        self.timeout = "unset"
        self.shutdown_calls = 0
        self.close_calls = 0

    def settimeout(self, value):
        self.timeout = value

    def sendall(self, data: bytes):
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(bytes(data))

    def recv_into(self, buffer) -> int:
        if self.recv_error is not None and self._offset >= self.fail_after:
            raise self.recv_error
        size = len(buffer)
        if self.max_recv is not None:
            size = min(size, self.max_recv)
        piece = self._data[self._offset:self._offset + size]
        buffer[:len(piece)] = piece
        self._offset += len(piece)
        return len(piece)

    def shutdown(self, how):
        self.shutdown_calls += 1

    def close(self):
        self.close_calls += 1


@pytest.fixture
def fake_socket_factory():
    """Build FakeSocket instances inside a test."""
    return FakeSocket
