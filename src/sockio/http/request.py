"""
=============================================================================
REQUEST HEAD PARSING (stub side)
=============================================================================

The stub server only needs enough of a request to pick a canned response:
the request line and the headers.

    GET /test.json?x=1 HTTP/1.0\\r\\n      ← request line
    Host: localhost\\r\\n                  ← headers (optional in HTTP/1.0)
    \\r\\n                                 ← end of head

Bodies are ignored; the stub answers by method + path only.

=============================================================================
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple
from urllib.parse import unquote, urlsplit

from ..errors import HTTPParseError


REQUEST_LINE_PATTERN = re.compile(r"^([A-Z]+) ([^ ]+) (HTTP/\d\.\d)$")
HEADER_PATTERN = re.compile(r"^([^:]+):\s*(.*)$")

SUPPORTED_VERSIONS = ("HTTP/1.0", "HTTP/1.1")


@dataclass
class RequestHead:
    """
    Parsed request line and headers.

    Attributes:
        method: "GET", "POST", ...
        target: Request target exactly as sent ("/test.json?x=1").
        path: URL-decoded path without the query ("/test.json").
        query: Raw query string ("x=1"), empty if none.
        version: "HTTP/1.0" or "HTTP/1.1".
        headers: Header names lowercased.
        client_address: (ip, port) of the sender, if known.
    """

    method: str
    target: str
    path: str
    version: str = "HTTP/1.0"
    query: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    client_address: Optional[Tuple[str, int]] = None

    @property
    def request_line(self) -> str:
        return f"{self.method} {self.target} {self.version}"


def parse_request_head(
    data: bytes,
    client_address: Optional[Tuple[str, int]] = None,
) -> RequestHead:
    """
    Parse the head of an HTTP request.

    Args:
        data: Raw bytes up to and including the blank line.
        client_address: Sender address, stored on the result.

    Raises:
        HTTPParseError: If the head is incomplete or malformed. status_code
            is 400, or 505 for an unsupported HTTP version.
    """
    header_end = data.find(b"\r\n\r\n")
    if header_end == -1:
        raise HTTPParseError("Incomplete request: no header terminator")

    # Latin-1 maps every byte, so decoding the head cannot fail
    lines = data[:header_end].decode("latin-1").split("\r\n")

    match = REQUEST_LINE_PATTERN.match(lines[0])
    if not match:
        raise HTTPParseError(f"Invalid request line: {lines[0]!r}")

    method, target, version = match.groups()
    if version not in SUPPORTED_VERSIONS:
        raise HTTPParseError(f"Unsupported HTTP version: {version}", status_code=505)

    parts = urlsplit(target)
    path = unquote(parts.path) or "/"

    headers: Dict[str, str] = {}
    for line in lines[1:]:
        header = HEADER_PATTERN.match(line)
        if not header:
            continue  # Lenient: skip malformed header lines
        name = header.group(1).strip().lower()
        value = header.group(2).strip()
        headers[name] = f"{headers[name]}, {value}" if name in headers else value

    return RequestHead(
        method=method,
        target=target,
        path=path,
        version=version,
        query=parts.query,
        headers=headers,
        client_address=client_address,
    )
