"""
=============================================================================
COMMAND LINE INTERFACE
=============================================================================

Serve a directory of .html / .js / .wasm files:

    python -m webserver                          # ./ on 127.0.0.1:8080
    python -m webserver --root ./public -p 3000
    python -m webserver --workers 8 --log-level DEBUG

Ctrl+C (SIGINT) or SIGTERM stops accepting, lets in-flight requests
finish, and exits.

=============================================================================
"""

import argparse
import logging
import signal
import sys
from typing import List, Optional

from . import __version__
from .config import ServerConfig, setup_logging
from .handlers import StaticFileHandler
from .server import WebServer


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    defaults = ServerConfig.from_env()

    parser = argparse.ArgumentParser(
        prog="webserver",
        description="Minimal multi-threaded HTTP/1.1 static file server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m webserver                         # Serve ./ on 127.0.0.1:8080
  python -m webserver --root ./public         # Serve another directory
  python -m webserver --host 0.0.0.0 -p 3000  # Listen on all interfaces
  python -m webserver --workers 8             # 8 worker threads
        """,
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=defaults.host,
        help=f"Host to bind to (default: {defaults.host})",
    )
    parser.add_argument(
        "--port", "-p",
        type=int,
        default=defaults.port,
        help=f"Port to listen on (default: {defaults.port})",
    )

    # ─────────────────────────────────────────────────────────────────────
    # SERVER ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--workers", "-w",
        type=int,
        default=defaults.workers,
        help=f"Number of worker threads (default: {defaults.workers})",
    )
    parser.add_argument(
        "--root", "-r",
        default=defaults.root_dir,
        help=f"Directory to serve (default: {defaults.root_dir})",
    )
    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=defaults.log_level.upper(),
        help=f"Logging level (default: {defaults.log_level})",
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"webserver {__version__}",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config = ServerConfig(
        host=args.host,
        port=args.port,
        workers=args.workers,
        root_dir=args.root,
        log_level=args.log_level,
    )

    try:
        config.validate()
        handler = StaticFileHandler(config.root_dir)
    except ValueError as e:
        print(f"webserver: {e}", file=sys.stderr)
        return 2

    setup_logging(config.log_level)

    try:
        server = WebServer.from_config(config, handler)
    except OSError as e:
        logger.error(f"Could not start server on {config.address}: {e}")
        return 1

    def shutdown_handler(signum, frame):
        signal_name = signal.Signals(signum).name
        logger.info(f"Received {signal_name}, initiating shutdown...")
        server.shutdown()

    signal.signal(signal.SIGINT, shutdown_handler)
    signal.signal(signal.SIGTERM, shutdown_handler)

    server.launch()
    return 0


if __name__ == "__main__":
    sys.exit(main())
