"""
=============================================================================
WEBSERVER - A Minimal Concurrent HTTP/1.1 Server
=============================================================================

Accepts TCP connections, reads one request per connection, hands it to a
user-supplied handler on a fixed pool of worker threads, and writes the
response back.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    webserver/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m webserver)
    ├── server.py            # WebServer and the per-connection job
    ├── config.py            # ServerConfig dataclass, logging setup
    ├── errors.py            # WebServerError and subclasses
    ├── core/                # Sockets and threads
    │   ├── socket_server.py # Listening socket + accept loop
    │   ├── connection.py    # Accepted client socket
    │   └── thread_pool.py   # Fixed-size worker pool
    ├── http/                # Message model
    │   ├── content_type.py  # ContentType (.html / .js / .wasm)
    │   ├── headers.py       # Host, ContentLength, ContentTypeHeader, OtherHeader
    │   ├── status.py        # ResponseType
    │   ├── request.py       # Request parsing
    │   └── response.py      # Response building and serialization
    └── handlers/
        └── static.py        # StaticFileHandler

=============================================================================
QUICK START
=============================================================================

    from webserver import WebServer, Request, Response, ResponseType

    def handler(request: Request) -> Response:
        if request.uri == "/":
            return Response.html_page("public/index.html")
        return Response.error_page(ResponseType.NOT_FOUND)

    WebServer("127.0.0.1:8080", 4, handler).launch()

=============================================================================
"""

__version__ = "0.1.0"

from .config import ServerConfig
from .errors import (
    DecodeError,
    MalformedMessageError,
    UnsupportedContentTypeError,
    WebServerError,
    WebServerIOError,
)
from .http import (
    Charset,
    ContentLength,
    ContentType,
    ContentTypeHeader,
    Get,
    Head,
    Header,
    Host,
    OtherHeader,
    Post,
    Request,
    RequestMethod,
    Response,
    ResponseType,
)
from .server import WebServer

__all__ = [
    "WebServer",
    "ServerConfig",
    # Messages
    "Request",
    "RequestMethod",
    "Get",
    "Head",
    "Post",
    "Response",
    "ResponseType",
    "Header",
    "Host",
    "ContentLength",
    "ContentTypeHeader",
    "OtherHeader",
    "ContentType",
    "Charset",
    # Errors
    "WebServerError",
    "DecodeError",
    "WebServerIOError",
    "MalformedMessageError",
    "UnsupportedContentTypeError",
    "__version__",
]
