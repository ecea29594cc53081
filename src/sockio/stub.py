"""
=============================================================================
STUB HTTP SERVER
=============================================================================

A tiny HTTP/1.0 server that answers with canned responses. Tests point a
client at it instead of a real service.

    with StubServer() as server:
        server.stub("GET", "/test.json", body='{ "response" : "It worked!" }')
        text = fetch_with_channel("127.0.0.1", server.port, "/test.json")

=============================================================================
LIFECYCLE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      StubServer Internals                           │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    start()                                                           │
    │        ├──► _create_socket()   SO_REUSEADDR, accept timeout          │
    │        ├──► bind(host, 0)      OS picks a free port                  │
    │        ├──► listen()                                                 │
    │        └──► thread: _accept_loop()                                   │
    │                 │                                                    │
    │                 └──► while running:                                  │
    │                         accept()                                     │
    │                         _serve_connection()                          │
    │                            read head → match stub → send → close     │
    │                                                                      │
    │    stop()                                                            │
    │        └──► running = False, join thread, close socket               │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Binding happens in start() on the caller's thread, so `port` is valid as
soon as start() returns. No waiting for the server to "come up".

Connections are served one at a time on the accept thread. A stub only
ever sees a handful of requests.

=============================================================================
MATCHING
=============================================================================

Stubs match on exact method + path (query string ignored):

    stub("GET", "/test.json")    matches   GET /test.json
                                 matches   GET /test.json?cache=no
                                 no match  POST /test.json
                                 no match  GET /test.json/

Unmatched requests get 404, unparseable ones 400. Every parsed request is
recorded in `requests`, matched or not.

=============================================================================
"""

import socket
import logging
import threading
from typing import Dict, List, Optional, Tuple, Union

from .errors import HTTPParseError
from .http import HTTPStatus, RequestHead, StubResponse, parse_request_head


logger = logging.getLogger(__name__)


class StubServer:
    """
    HTTP stub with canned responses on an ephemeral port.

    Attributes:
        host: Interface to bind.
        requests: Every request head received, in arrival order.
    """

    def __init__(
        self,
        host: str = "127.0.0.1",
        port: int = 0,
        max_head_size: int = 16 * 1024,
        read_timeout: float = 5.0,
    ):
        self.host = host
        self._requested_port = port
        self.max_head_size = max_head_size
        self.read_timeout = read_timeout

        self.requests: List[RequestHead] = []
        self._stubs: Dict[Tuple[str, str], StubResponse] = {}
        self._lock = threading.Lock()

        self._socket: Optional[socket.socket] = None
        self._thread: Optional[threading.Thread] = None
        self._running = False
        self._port = 0

    # =========================================================================
    # STUB REGISTRATION
    # =========================================================================

    def stub(
        self,
        method: str,
        path: str,
        status: int = HTTPStatus.OK,
        body: Union[str, bytes] = b"",
        headers: Optional[Dict[str, str]] = None,
    ) -> "StubServer":
        """
        Register a canned response. Later registrations for the same
        method + path replace earlier ones.

        Returns self for chaining.
        """
        response = StubResponse.from_body(status=status, body=body, headers=headers)
        with self._lock:
            self._stubs[(method.upper(), path)] = response
        logger.debug(f"Stubbed {method.upper()} {path} -> {int(status)}")
        return self

    def reset(self):
        """Forget all stubs and recorded requests."""
        with self._lock:
            self._stubs.clear()
            self.requests.clear()

    def _match(self, head: RequestHead) -> StubResponse:
        with self._lock:
            self.requests.append(head)
            response = self._stubs.get((head.method, head.path))
        if response is None:
            logger.info(f"No stub for {head.method} {head.path}")
            return StubResponse.from_body(
                status=HTTPStatus.NOT_FOUND,
                body=f"No stub for {head.method} {head.path}\n",
                headers={"Content-Type": "text/plain; charset=utf-8"},
            )
        return response

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    @property
    def port(self) -> int:
        """Bound port (0 until start())."""
        return self._port

    @property
    def is_running(self) -> bool:
        return self._running

    def url(self, path: str = "/") -> str:
        return f"http://{self.host}:{self._port}{path}"

    def _create_socket(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        # accept() wakes up periodically so stop() is noticed
        sock.settimeout(0.2)
        return sock

    def start(self) -> "StubServer":
        """Bind, listen, and serve on a daemon thread. Returns self."""
        if self._running:
            return self

        self._socket = self._create_socket()
        try:
            self._socket.bind((self.host, self._requested_port))
        except OSError as e:
            logger.error(f"Failed to bind to {self.host}:{self._requested_port}: {e}")
            self._socket.close()
            self._socket = None
            raise

        self._socket.listen(16)
        self._port = self._socket.getsockname()[1]
        self._running = True

        self._thread = threading.Thread(
            target=self._accept_loop,
            name=f"stub-server-{self._port}",
            daemon=True,
        )
        self._thread.start()
        logger.info(f"Stub server listening on {self.host}:{self._port}")
        return self

    def stop(self, timeout: float = 5.0):
        """Stop accepting, wait for the accept thread, release the socket."""
        if not self._running:
            return
        self._running = False
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None
        if self._socket is not None:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None
        logger.info("Stub server stopped")

    def serve_forever(self):
        """Start and block until KeyboardInterrupt (CLI use)."""
        self.start()
        try:
            while self._thread is not None and self._thread.is_alive():
                self._thread.join(timeout=0.5)
        except KeyboardInterrupt:
            logger.info("Interrupted")
        finally:
            self.stop()

    def __enter__(self) -> "StubServer":
        return self.start()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
        return False

    # =========================================================================
    # SERVING
    # =========================================================================

    def _accept_loop(self):
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if self._running:
                    logger.error(f"Accept error: {e}")
                break

            try:
                self._serve_connection(client_socket, client_address)
            except OSError as e:
                logger.warning(f"Connection from {client_address[0]}:{client_address[1]} failed: {e}")
            finally:
                client_socket.close()

    def _serve_connection(self, client_socket: socket.socket, client_address: Tuple[str, int]):
        """Answer exactly one request, then let the caller close the socket."""
        client_socket.settimeout(self.read_timeout)

        data = self._read_head(client_socket)
        if data is None:
            logger.debug(f"{client_address[0]}:{client_address[1]} closed before sending a request")
            return

        version = "HTTP/1.0"
        try:
            if len(data) > self.max_head_size:
                raise HTTPParseError(
                    f"Request head exceeds {self.max_head_size} bytes",
                    status_code=HTTPStatus.REQUEST_HEADER_FIELDS_TOO_LARGE,
                )
            head = parse_request_head(data, client_address)
            version = head.version
            response = self._match(head)
        except HTTPParseError as e:
            logger.warning(f"Bad request from {client_address[0]}: {e.message}")
            response = StubResponse.from_body(status=e.status_code, body=e.message + "\n")

        client_socket.sendall(response.to_bytes(version=version))
        logger.debug(f"{client_address[0]}:{client_address[1]} <- {response.status}")

        # FIN tells the client the response is complete
        try:
            client_socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass

    def _read_head(self, client_socket: socket.socket) -> Optional[bytes]:
        """
        Read until the blank line that ends the request head.

        Returns:
            The bytes read, None if the client closed without sending
            anything. Stops early once more than
            max_head_size bytes have arrived.
        """
        buffer = b""
        while b"\r\n\r\n" not in buffer:
            chunk = client_socket.recv(4096)
            if not chunk:
                return buffer or None
            buffer += chunk
            if len(buffer) > self.max_head_size:
                break
        return buffer
