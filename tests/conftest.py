"""
pytest configuration and fixtures.
"""

import socket
import threading
import time
from typing import Callable, Generator, Optional

import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from webserver import WebServer
from webserver.http import Request, Response


@pytest.fixture
def sample_get_request() -> str:
    """Sample HTTP GET request."""
    return (
        "GET /index.html HTTP/1.1\r\n"
        "Host: localhost\r\n"
        "\r\n"
    )


@pytest.fixture
def sample_post_request() -> str:
    """Sample HTTP POST request with a form body."""
    return (
        "POST /submit HTTP/1.1\r\n"
        "Host: localhost:8080\r\n"
        "User-Agent: pytest\r\n"
        "Content-Length: 15\r\n"
        "\r\n"
        "name=John&age=3"
    )


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


def send_raw(port: int, data: bytes, timeout: float = 5.0) -> bytes:
    """
    Send raw bytes to the server and read until it closes the connection.

    A server closing with part of the request unread resets the connection;
    that counts as closed.
    """
    with socket.create_connection(("127.0.0.1", port), timeout=timeout) as s:
        s.sendall(data)
        chunks = []
        while True:
            try:
                chunk = s.recv(65536)
            except ConnectionResetError:
                break
            if not chunk:
                break
            chunks.append(chunk)
    return b"".join(chunks)


class RunningServer:
    """Test server helper that runs launch() in a background thread."""

    def __init__(self, server: WebServer):
        self.server = server
        self._thread: Optional[threading.Thread] = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        """Start the accept loop in a background thread."""
        self._thread = threading.Thread(target=self.server.launch, daemon=True)
        self._thread.start()

    def request(self, data: bytes, timeout: float = 5.0) -> bytes:
        return send_raw(self.port, data, timeout=timeout)

    def stop(self, timeout: float = 5.0) -> bool:
        """Stop the server; True if launch() returned in time."""
        self.server.shutdown()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            return not self._thread.is_alive()
        return True


@pytest.fixture
def make_server() -> Generator[Callable[..., RunningServer], None, None]:
    """
    Factory for running servers on a free port.

        running = make_server(handler, workers=2)
        running.request(b"GET / HTTP/1.1\\r\\n\\r\\n")

    Every server created is stopped at teardown.
    """
    started = []

    def factory(
        handler: Callable[[Request], Response],
        workers: int = 2,
        error_page: Optional[Response] = None,
        buffer_size: int = 65536,
    ) -> RunningServer:
        server = WebServer(
            "127.0.0.1:0", workers, handler, buffer_size=buffer_size, poll_interval=0.05
        )
        if error_page is not None:
            server.set_custom_internal_error_page(error_page)
        running = RunningServer(server)
        running.start()
        started.append(running)
        return running

    yield factory

    for running in started:
        running.stop()


def wait_for(condition: Callable[[], bool], timeout: float = 5.0) -> bool:
    """Poll condition until it is true or timeout expires."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(0.01)
    return condition()
