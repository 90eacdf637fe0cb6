"""
=============================================================================
CONNECTION
=============================================================================

Wraps one accepted client socket for the lifetime of one job:

    NEW ──read_request()──► READING ──► PROCESSING ──send_response()──► WRITING
     │                                                                    │
     └───────────────────────────── close() ◄─────────────────────────────┘
                                       │
                                       ▼
                                    CLOSED

One request, one response, then close. There is no keep-alive and no
pipelining.

=============================================================================
ONE READ ONLY
=============================================================================

TCP is a byte stream: a request may arrive in several recv() chunks. This
server does a single recv() of up to buffer_size bytes and treats what it
got as the whole request. A request larger than the buffer, or one that
the client sends in pieces, is truncated and will usually fail to parse.
That is a known limitation, not something this class tries to hide.

There are no socket timeouts either. A client that connects and never
sends anything holds its worker until it goes away.

=============================================================================
"""

import logging
import socket
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple

from ..errors import WebServerIOError


logger = logging.getLogger(__name__)


DEFAULT_BUFFER_SIZE = 65536


class ConnectionState(Enum):
    """Connection lifecycle states, for logging and debugging."""
    NEW = "new"
    READING = "reading"
    PROCESSING = "processing"
    WRITING = "writing"
    CLOSED = "closed"


@dataclass
class Connection:
    """
    An accepted client socket.

    Attributes:
        socket:      The client socket (blocking, no timeout).
        address:     Peer (ip, port).
        buffer_size: Maximum bytes taken by read_request().
        id:          Short identifier used in log lines.
        state:       Current ConnectionState.
    """

    socket: socket.socket
    address: Tuple[str, int]
    buffer_size: int = DEFAULT_BUFFER_SIZE
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW

    def __post_init__(self):
        # The listening socket polls with a timeout; accepted sockets must not
        # inherit it
        self.socket.settimeout(None)

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def client_port(self) -> int:
        return self.address[1]

    def read_request(self) -> bytes:
        """
        Read once from the socket, up to buffer_size bytes.

        Returns:
            The bytes received. Empty if the peer closed without sending.

        Raises:
            WebServerIOError: The socket read failed.
        """
        self.state = ConnectionState.READING
        try:
            data = self.socket.recv(self.buffer_size)
        except OSError as e:
            raise WebServerIOError(f"Read failed: {e}") from e

        logger.debug(f"[{self.id}] Read {len(data)} bytes")
        self.state = ConnectionState.PROCESSING
        return data

    def send_response(self, data: bytes) -> None:
        """
        Write every byte of data to the socket.

        sendall() either sends everything or raises, so there is no separate
        flush step.

        Raises:
            WebServerIOError: The peer went away or the write failed.
        """
        self.state = ConnectionState.WRITING
        try:
            self.socket.sendall(data)
        except OSError as e:
            raise WebServerIOError(f"Write failed: {e}") from e

    def close(self) -> None:
        """
        Close the connection.

        shutdown(SHUT_WR) first so the peer gets a FIN right after the last
        response byte, then release the file descriptor.
        """
        if self.state == ConnectionState.CLOSED:
            return

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Peer already gone

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed")

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
