"""
=============================================================================
LOW-LEVEL TCP SOCKET SERVER
=============================================================================

Owns the listening socket and the accept loop. Every accepted client is
wrapped in a Connection and handed to a callback; what happens to it next
is the caller's business (WebServer submits it to the thread pool).

=============================================================================
SOCKET LIFECYCLE (Server Side)
=============================================================================

    1. socket()    Create the socket                   ┐
    2. bind()      Reserve HOST:PORT                   ├─ in __init__()
    3. listen()    Start queueing incoming connections ┘
    4. accept()    Loop: take one connection at a time ── serve_forever()
    5. close()     Release the port                    ── after shutdown()

Binding happens in the constructor so that "address already in use" or
"permission denied" surfaces where the server is created, as a plain
OSError, and not later inside the accept loop.

=============================================================================
THE ACCEPT LOOP
=============================================================================

    while not shutdown requested:
        try:
            accept()                 # waits at most poll_interval seconds
        except timeout:
            continue                 # go check the shutdown flag
        except OSError:
            log it, continue         # one failed accept never stops the server
        callback(Connection(...))

The timeout on accept() exists only so shutdown() can be noticed. It is
not inherited by the accepted sockets.

=============================================================================
"""

import logging
import socket
import threading
from typing import Callable, Optional, Tuple

from .connection import DEFAULT_BUFFER_SIZE, Connection


logger = logging.getLogger(__name__)


ConnectionHandler = Callable[[Connection], None]


def parse_address(address: str) -> Tuple[str, int]:
    """
    Split a "host:port" string.

        parse_address("127.0.0.1:8080")  → ("127.0.0.1", 8080)
        parse_address("[::1]:8080")      → ("::1", 8080)

    Raises:
        ValueError: No port, or the port is not a number in 0-65535.
    """
    host, sep, port_text = address.rpartition(":")
    if not sep or not port_text.isdigit():
        raise ValueError(f"Invalid address {address!r}, expected host:port")

    port = int(port_text)
    if port > 65535:
        raise ValueError(f"Invalid port in {address!r}")

    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    return host, port


class SocketServer:
    """
    Listening socket plus accept loop.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      SocketServer Internals                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    __init__()        socket() + setsockopt() + bind() + listen()    │
    │                                                                      │
    │    serve_forever(cb) accept loop, cb(conn) per client (blocks)      │
    │                                                                      │
    │    shutdown()        ask the loop to stop (any thread)              │
    │                                                                      │
    │    close()           release the listening socket                    │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘
    """

    def __init__(
        self,
        host: str,
        port: int,
        backlog: int = 128,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        poll_interval: float = 0.5,
    ):
        """
        Create, bind and listen.

        Raises:
            OSError: The address could not be bound.
        """
        self.buffer_size = buffer_size
        self.poll_interval = poll_interval

        self._shutdown_event = threading.Event()
        self._socket: Optional[socket.socket] = self._create_socket(host)

        try:
            self._socket.bind((host, port))
            self._socket.listen(backlog)
        except OSError as e:
            logger.error(f"Failed to bind to {host}:{port}: {e}")
            self._socket.close()
            self._socket = None
            raise

        self._address = self._socket.getsockname()[:2]

    def _create_socket(self, host: str) -> socket.socket:
        family = socket.AF_INET6 if ":" in host else socket.AF_INET
        sock = socket.socket(family, socket.SOCK_STREAM)

        # SO_REUSEADDR: restart without waiting out TIME_WAIT
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        sock.settimeout(self.poll_interval)
        return sock

    @property
    def address(self) -> Tuple[str, int]:
        """The bound (host, port); the real port when 0 was requested."""
        return self._address

    @property
    def is_shutting_down(self) -> bool:
        return self._shutdown_event.is_set()

    def serve_forever(self, on_connection: ConnectionHandler) -> None:
        """
        Accept connections until shutdown() is called.

        Each accepted socket is wrapped in a Connection and passed to
        on_connection on this thread. on_connection must not block for long:
        nothing else is accepted while it runs.
        """
        if self._socket is None:
            raise RuntimeError("Socket server is closed")

        host, port = self._address
        logger.info(f"Server listening on {host}:{port}")

        while not self._shutdown_event.is_set():
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if self._shutdown_event.is_set():
                    break
                logger.error(f"Error on connection attempt: {e}")
                continue

            logger.debug(
                f"Accepted connection from {client_address[0]}:{client_address[1]}"
            )
            conn = Connection(
                socket=client_socket,
                address=client_address[:2],
                buffer_size=self.buffer_size,
            )
            on_connection(conn)

    def shutdown(self) -> None:
        """
        Ask serve_forever() to return.

        Safe from any thread and safe to call more than once. The loop
        notices within poll_interval seconds.
        """
        self._shutdown_event.set()

    def close(self) -> None:
        """Close the listening socket."""
        if self._socket is not None:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None
            logger.info("Socket server stopped")
