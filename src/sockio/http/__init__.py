"""
HTTP pieces used by the stub server: status codes, request-head parsing,
and canned-response serialization.

The client side never parses HTTP; it reads the raw response text.
"""

from .status_codes import HTTPStatus, reason_phrase
from .request import RequestHead, parse_request_head
from .response import StubResponse, format_http_date

__all__ = [
    "HTTPStatus",
    "reason_phrase",
    "RequestHead",
    "parse_request_head",
    "StubResponse",
    "format_http_date",
]
