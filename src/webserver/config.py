"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Everything the CLI can tweak, in one dataclass. The library itself only
needs an address and a worker count; WebServer.from_config() reads the rest.

    config = ServerConfig(port=3000, workers=8)
    config = ServerConfig.from_env()
    config.validate()

=============================================================================
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from .core.connection import DEFAULT_BUFFER_SIZE


@dataclass
class ServerConfig:
    """
    Configuration for the web server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK     host, port, backlog, poll_interval
    JOBS        workers, buffer_size
    CONTENT     root_dir (used by the static file handler)
    LOGGING     log_level

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """
    The IP address to bind to.
    - "127.0.0.1" - Localhost only (development)
    - "0.0.0.0" - All network interfaces
    """

    port: int = 8080
    """Port to listen on. 0 lets the OS pick one."""

    backlog: int = 128
    """Connections the OS queues before refusing new ones."""

    poll_interval: float = 0.5
    """
    Seconds accept() waits before re-checking for shutdown.
    Only affects how quickly shutdown() is noticed.
    """

    # ─────────────────────────────────────────────────────────────────────
    # JOB SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    workers: int = 4
    """Number of worker threads. Fixed for the server's lifetime."""

    buffer_size: int = DEFAULT_BUFFER_SIZE
    """
    Bytes taken by the single read of each request (64 KB).
    Larger requests are truncated.
    """

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT
    # ─────────────────────────────────────────────────────────────────────

    root_dir: str = "."
    """Directory served by the static file handler."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """DEBUG, INFO, WARNING, ERROR or CRITICAL."""

    @property
    def address(self) -> str:
        """The bind address as a "host:port" string."""
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        WEBSERVER_HOST       Server host (default: 127.0.0.1)
        WEBSERVER_PORT       Server port (default: 8080)
        WEBSERVER_WORKERS    Worker threads (default: 4)
        WEBSERVER_ROOT       Directory to serve (default: .)
        WEBSERVER_LOG_LEVEL  Logging level (default: INFO)

        =====================================================================
        """
        return cls(
            host=os.getenv("WEBSERVER_HOST", "127.0.0.1"),
            port=int(os.getenv("WEBSERVER_PORT", "8080")),
            workers=int(os.getenv("WEBSERVER_WORKERS", "4")),
            root_dir=os.getenv("WEBSERVER_ROOT", "."),
            log_level=os.getenv("WEBSERVER_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """
        Validate configuration values (fail fast, at startup).

        Raises:
            ValueError: Describing the first invalid value found.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.workers < 1:
            raise ValueError("workers must be >= 1")

        if self.buffer_size < 1024:
            raise ValueError("buffer_size must be >= 1024")

        if self.poll_interval <= 0:
            raise ValueError("poll_interval must be > 0")

        if _parse_level(self.log_level) is None:
            raise ValueError(f"Unknown log level: {self.log_level}")


def _parse_level(name: str) -> Optional[int]:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else None


def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger.

    Only the CLI calls this; importing the package never touches logging
    configuration.
    """
    logging.basicConfig(
        level=_parse_level(level) or logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("webserver").setLevel(_parse_level(level) or logging.INFO)
