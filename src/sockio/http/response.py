"""
=============================================================================
STUB RESPONSES
=============================================================================

The canned responses the stub server sends back.

=============================================================================
SERIALIZATION FORMAT
=============================================================================

    HTTP/1.0 200 OK\\r\\n                 ← Status line (echoes request version)
    Content-Length: 30\\r\\n              ← Auto-calculated
    Date: Thu, 01 Jan 2026 ...\\r\\n      ← Auto-added
    Server: sockio-stub/1.0\\r\\n         ← Auto-added
    Connection: close\\r\\n               ← One request per connection
    \\r\\n                                ← Empty line (separator)
    { "response" : "It worked!" }       ← Body bytes

Connection: close plus closing the socket afterwards is what lets a client
read "until end of stream". The read loop relies on that EOF.

=============================================================================
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional, Union

from .status_codes import reason_phrase


SERVER_NAME = "sockio-stub/1.0"


@dataclass
class StubResponse:
    """
    A canned HTTP response.

    Attributes:
        status: Status code (HTTPStatus or plain int).
        headers: Extra headers; they override the automatic ones.
        body: Body bytes (str bodies are UTF-8 encoded by from_body()).
    """

    status: int = 200
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    @classmethod
    def from_body(
        cls,
        status: int = 200,
        body: Union[str, bytes] = b"",
        headers: Optional[Dict[str, str]] = None,
    ) -> "StubResponse":
        if isinstance(body, str):
            body = body.encode("utf-8")
        return cls(status=int(status), headers=dict(headers or {}), body=body)

    def status_line(self, version: str = "HTTP/1.0") -> str:
        return f"{version} {self.status} {reason_phrase(self.status)}"

    def to_bytes(self, version: str = "HTTP/1.0", server_name: str = SERVER_NAME) -> bytes:
        """
        Serialize the response for socket.sendall().

        Args:
            version: HTTP version for the status line.
            server_name: Value for the Server header.
        """
        response_headers = {
            "Content-Length": str(len(self.body)),
            "Date": format_http_date(datetime.now(timezone.utc)),
            "Server": server_name,
            "Connection": "close",
        }
        response_headers.update(self.headers)

        lines = [self.status_line(version)]
        for name, value in response_headers.items():
            lines.append(f"{name}: {value}")
        lines.append("")

        header_bytes = "\r\n".join(lines).encode("latin-1") + b"\r\n"
        return header_bytes + self.body


def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an HTTP-date (RFC 7231).

    Format: Day, DD Mon YYYY HH:MM:SS GMT
    Example: Thu, 01 Jan 2026 12:00:00 GMT

    HTTP dates are always GMT and always English, whatever the locale.
    """
    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )
