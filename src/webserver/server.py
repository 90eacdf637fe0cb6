"""
=============================================================================
WEB SERVER
=============================================================================

Ties the pieces together:

    ┌──────────────┐  Connection  ┌──────────────┐   job    ┌──────────────┐
    │ SocketServer │ ───────────► │  WebServer   │ ───────► │  ThreadPool  │
    │ accept loop  │              │ _dispatch()  │          │   workers    │
    └──────────────┘              └──────────────┘          └──────┬───────┘
                                                                   │
                               handle_connection(handler, conn, error_page)
                                                                   │
         read ─► decode ─► Request.parse ─► handler ─► to_raw ─► write ─► close

=============================================================================
USAGE
=============================================================================

    from webserver import WebServer, Request, Response

    def handler(request: Request) -> Response:
        return Response.html_page("public/index.html")

    server = WebServer("127.0.0.1:8080", 4, handler)
    server.set_custom_internal_error_page(Response.html_page("public/500.html"))
    server.launch()   # blocks

=============================================================================
WHAT HAPPENS WHEN THINGS GO WRONG
=============================================================================

    bind() fails                → OSError out of WebServer(...)
    accept() fails              → logged, loop continues
    bytes are not UTF-8         → logged, connection closed, nothing written
    request does not parse      → logged, connection closed, nothing written
    handler raises (anything    → logged, the 500 page is written instead
    but KeyboardInterrupt)
    write fails                 → logged, connection closed

A request that could not be understood gets no response at all; the peer
just sees the connection close.

=============================================================================
"""

import logging
from functools import partial
from typing import Callable, Optional, Tuple, Union

from .config import ServerConfig
from .core import Connection, SocketServer, ThreadPool, parse_address
from .core.connection import DEFAULT_BUFFER_SIZE
from .errors import DecodeError, WebServerError
from .http import Request, Response


logger = logging.getLogger(__name__)


Handler = Callable[[Request], Response]


def handle_connection(
    handler: Handler,
    conn: Connection,
    internal_error_page: Response,
) -> None:
    """
    Serve one request on one connection (runs on a worker thread).

    =====================================================================
    JOB STEPS
    =====================================================================

    1. Read once, up to the connection's buffer size
    2. Decode as UTF-8
    3. Parse into a Request
    4. Call the handler; on any failure use internal_error_page
    5. Serialize and write
    6. Close (no keep-alive)

    =====================================================================

    Raises:
        WebServerError: Steps 1-3 or 5 failed. The connection is closed
                        either way; the caller logs the error.
    """
    with conn:
        raw = conn.read_request()

        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Request is not valid UTF-8: {e}") from e

        request = Request.parse(text)
        logger.debug(f"[{conn.id}] {request.request_line}")

        response = _call_handler(handler, request, internal_error_page, conn.id)

        conn.send_response(response.to_raw())
        logger.info(
            f"{conn.client_ip} \"{request.request_line}\" {response.status.code}"
        )


def _call_handler(
    handler: Handler,
    request: Request,
    internal_error_page: Response,
    conn_id: str,
) -> Response:
    """
    Run the handler; never let its failure escape.

    SystemExit and other BaseExceptions raised by a handler are contained
    too, so a handler cannot take its worker down. KeyboardInterrupt still
    propagates.
    """
    try:
        response = handler(request)
    except KeyboardInterrupt:
        raise
    except BaseException as e:
        logger.exception(f"[{conn_id}] Handler error ({type(e).__name__}): {e}")
        return internal_error_page

    if not isinstance(response, Response):
        logger.error(
            f"[{conn_id}] Handler returned {type(response).__name__}, not a Response"
        )
        return internal_error_page
    return response


def _run_job(handler: Handler, conn: Connection, internal_error_page: Response) -> None:
    """Job wrapper: the boundary where a failed connection gets logged."""
    try:
        handle_connection(handler, conn, internal_error_page)
    except WebServerError as e:
        logger.warning(f"[{conn.id}] Error on handling request from {conn.client_ip}: {e}")


class WebServer:
    """
    Multi-threaded HTTP/1.1 server, one request per connection.

    =========================================================================
    LIFECYCLE
    =========================================================================

        WebServer(...)                   bind + listen, start workers
            │
            ├── set_custom_internal_error_page(...)   (optional, before launch)
            │
            ▼
        launch()                         accept loop, blocks
            │
            └── shutdown() from another thread or a signal handler
                    │
                    ▼
                accept loop exits, listening socket closed,
                queued and in-flight jobs finish, workers joined,
                launch() returns

    A server can be launched once. Used as a context manager, leaving the
    block calls shutdown(), so a server that never launched still releases
    its socket and workers.

    =========================================================================
    """

    def __init__(
        self,
        address: Union[str, Tuple[str, int]],
        worker_count: int,
        handler: Handler,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        backlog: int = 128,
        poll_interval: float = 0.5,
    ):
        """
        Bind the listening socket and start the worker pool.

        Args:
            address:      "host:port" or (host, port). Port 0 picks a free port.
            worker_count: Number of worker threads (>= 1).
            handler:      Callable mapping a Request to a Response. Called
                          concurrently from several workers; it must not rely
                          on unsynchronized shared state.

        Raises:
            OSError:    The address could not be bound.
            ValueError: Malformed address or worker_count < 1.
        """
        if isinstance(address, str):
            host, port = parse_address(address)
        else:
            host, port = address

        if worker_count < 1:
            raise ValueError(f"worker_count must be >= 1, got {worker_count}")

        self._socket_server = SocketServer(
            host,
            port,
            backlog=backlog,
            buffer_size=buffer_size,
            poll_interval=poll_interval,
        )
        self._pool = ThreadPool(worker_count)
        self._handler = handler
        self._internal_error_page = Response.internal_server_error()
        self._launched = False

    @classmethod
    def from_config(cls, config: ServerConfig, handler: Handler) -> "WebServer":
        """Create a server from a validated ServerConfig."""
        config.validate()
        return cls(
            (config.host, config.port),
            config.workers,
            handler,
            buffer_size=config.buffer_size,
            backlog=config.backlog,
            poll_interval=config.poll_interval,
        )

    # =========================================================================
    # CONFIGURATION
    # =========================================================================

    @property
    def address(self) -> Tuple[str, int]:
        """The bound (host, port)."""
        return self._socket_server.address

    @property
    def pool(self) -> ThreadPool:
        return self._pool

    @property
    def internal_error_page(self) -> Response:
        return self._internal_error_page

    def set_custom_internal_error_page(self, response: Response) -> None:
        """
        Replace the page sent when the handler fails.

        Only valid before launch(): workers capture the page when their job
        is created.
        """
        if self._launched:
            raise RuntimeError("Cannot change the error page after launch()")
        self._internal_error_page = response

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def launch(self) -> None:
        """
        Run the accept loop on this thread until shutdown() is called.

        Every accepted connection becomes one job on the pool. On the way
        out the listening socket is closed and the pool is shut down, which
        waits for queued and in-flight jobs.
        """
        if self._launched:
            raise RuntimeError("Server has already been launched")
        self._launched = True

        host, port = self.address
        logger.info(
            f"Starting web server on {host}:{port} "
            f"with {self._pool.worker_count} workers"
        )

        try:
            self._socket_server.serve_forever(self._dispatch)
        finally:
            self._socket_server.close()
            self._pool.shutdown()
            logger.info("Server stopped")

    def _dispatch(self, conn: Connection) -> None:
        """Turn an accepted connection into a job (runs on the accept thread)."""
        job = partial(_run_job, self._handler, conn, self._internal_error_page)
        self._pool.execute(job)

    def shutdown(self) -> None:
        """
        Ask launch() to stop. Returns immediately.

        Safe to call from any thread or a signal handler, and more than
        once. If the server was never launched, this closes the listening
        socket and joins the workers directly.
        """
        logger.info("Shutting down server...")
        self._socket_server.shutdown()
        if not self._launched:
            self._launched = True
            self._socket_server.close()
            self._pool.shutdown()

    def __enter__(self) -> "WebServer":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.shutdown()
        return False
