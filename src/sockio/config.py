"""
=============================================================================
CLIENT CONFIGURATION
=============================================================================

Centralized settings for fetching a response over a socket.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m sockio get --chunk-size 8                       │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── SOCKIO_CHUNK_CAPACITY=8 python -m sockio get ...          │
    │                                                                      │
    │   3. Default values (in this dataclass)                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class ClientConfig:
    """
    Configuration for a single request/response exchange.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, timeout

    DECODING
    - chunk_capacity, encoding, errors, flush_each_pass

    LOGGING
    - log_level

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "localhost"
    """Host to connect to."""

    port: int = 8080
    """Port to connect to."""

    timeout: Optional[float] = None
    """
    Socket timeout in seconds.
    None = fully blocking, a silent peer stalls the read forever.
    """

    # ─────────────────────────────────────────────────────────────────────
    # DECODING
    # ─────────────────────────────────────────────────────────────────────

    chunk_capacity: int = 8192
    """
    Size of the working byte buffer for channel reads.
    Any value >= 1 produces the same text; smaller means more passes.
    """

    encoding: str = "utf-8"
    """Codec for response bytes."""

    errors: str = "replace"
    """
    Codec error policy.
    "replace" substitutes U+FFFD for malformed bytes and never raises.
    "strict" raises UnicodeDecodeError instead.
    """

    flush_each_pass: bool = False
    """
    Treat every decode pass as the last one.
    Lossy when a character straddles two reads. Off unless an old caller
    depends on it.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR)."""

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """
        Create configuration from environment variables.

        SOCKIO_HOST            Host (default: localhost)
        SOCKIO_PORT            Port (default: 8080)
        SOCKIO_CHUNK_CAPACITY  Chunk capacity in bytes (default: 8192)
        SOCKIO_ENCODING        Response encoding (default: utf-8)
        SOCKIO_ERRORS          Decode error policy (default: replace)
        SOCKIO_FLUSH_EACH_PASS Legacy per-pass flush: 1, true or yes (default: off)
        SOCKIO_TIMEOUT         Socket timeout in seconds (default: blocking)
        SOCKIO_LOG_LEVEL       Logging level (default: INFO)
        """
        timeout = os.getenv("SOCKIO_TIMEOUT")
        return cls(
            host=os.getenv("SOCKIO_HOST", "localhost"),
            port=int(os.getenv("SOCKIO_PORT", "8080")),
            chunk_capacity=int(os.getenv("SOCKIO_CHUNK_CAPACITY", "8192")),
            encoding=os.getenv("SOCKIO_ENCODING", "utf-8"),
            errors=os.getenv("SOCKIO_ERRORS", "replace"),
            flush_each_pass=os.getenv("SOCKIO_FLUSH_EACH_PASS", "").lower() in ("1", "true", "yes"),
            timeout=float(timeout) if timeout else None,
            log_level=os.getenv("SOCKIO_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Fail fast: a bad encoding name should be reported before we connect,
        not after the response has been read.
        """
        if not 0 < self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 1-65535.")

        if self.chunk_capacity < 1:
            raise ValueError(f"chunk_capacity must be >= 1, got {self.chunk_capacity}")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        # str.encode() rejects unknown codecs and bytes-to-bytes codecs (hex, zlib...)
        try:
            "".encode(self.encoding)
        except LookupError as e:
            raise ValueError(f"Unsupported encoding: {self.encoding} ({e})") from e
