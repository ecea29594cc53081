"""
=============================================================================
SOCKIO CLI ENTRY POINT
=============================================================================

    # Run a stub that answers GET /test.json (prints the port it bound)
    python -m sockio serve

    # Fetch through a channel with an 8-byte chunk
    python -m sockio get --port 54321 --chunk-size 8

    # Fetch through blocking streams
    python -m sockio get --port 54321 --mode stream

=============================================================================
"""

import argparse
import logging
import sys

from . import __version__
from .client import fetch_with_channel, fetch_with_streams
from .config import ClientConfig
from .stub import StubServer


DEFAULT_PATH = "/test.json"
DEFAULT_BODY = '{ "response" : "It worked!" }'


def setup_logging(level_name: str):
    """Configure root logging and the sockio logger level."""
    level = getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("sockio").setLevel(level)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sockio",
        description="Socket I/O with blocking streams and buffer channels",
    )
    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: SOCKIO_LOG_LEVEL or INFO)",
    )
    parser.add_argument("--version", "-v", action="version", version=f"sockio {__version__}")

    commands = parser.add_subparsers(dest="command", required=True)

    # ─────────────────────────────────────────────────────────────────────
    # serve
    # ─────────────────────────────────────────────────────────────────────
    serve = commands.add_parser("serve", help="Run a stub HTTP server")
    serve.add_argument("--host", "-H", default="127.0.0.1")
    serve.add_argument("--port", "-p", type=int, default=0, help="0 = pick a free port")
    serve.add_argument("--path", default=DEFAULT_PATH, help="Path to stub (GET)")
    serve.add_argument("--status", type=int, default=200)
    serve.add_argument("--body", default=DEFAULT_BODY)

    # ─────────────────────────────────────────────────────────────────────
    # get
    # ─────────────────────────────────────────────────────────────────────
    get = commands.add_parser("get", help="Fetch a path and print the raw response")
    get.add_argument("--host", "-H", default=None)
    get.add_argument("--port", "-p", type=int, default=None)
    get.add_argument("--path", default=DEFAULT_PATH)
    get.add_argument("--mode", choices=["channel", "stream"], default="channel")
    get.add_argument("--chunk-size", "-c", type=int, default=None, help="Channel chunk capacity")
    get.add_argument("--encoding", default=None)
    get.add_argument("--timeout", type=float, default=None)

    return parser


def _config_from_args(args: argparse.Namespace) -> ClientConfig:
    config = ClientConfig.from_env()
    if args.host is not None:
        config.host = args.host
    if args.port is not None:
        config.port = args.port
    if args.chunk_size is not None:
        config.chunk_capacity = args.chunk_size
    if args.encoding is not None:
        config.encoding = args.encoding
    if args.timeout is not None:
        config.timeout = args.timeout
    return config


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "serve":
        setup_logging(args.log_level or "INFO")
        server = StubServer(host=args.host, port=args.port)
        server.stub("GET", args.path, status=args.status, body=args.body)
        server.start()
        print(f"Stub serving GET {args.path} at {server.url(args.path)}", flush=True)
        server.serve_forever()
        return 0

    config = _config_from_args(args)
    setup_logging(args.log_level or config.log_level)

    try:
        config.validate()
        if args.mode == "stream":
            text = fetch_with_streams(config.host, config.port, args.path, config)
        else:
            text = fetch_with_channel(config.host, config.port, args.path, config)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    sys.stdout.write(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
