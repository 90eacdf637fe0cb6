"""
=============================================================================
HTTP RESPONSE
=============================================================================

An immutable HTTP/1.1 response and its serialization to bytes.

=============================================================================
HTTP RESPONSE ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP RESPONSE STRUCTURE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    HTTP/1.1 200 OK\r\n                  ← status line               │
    │    Content-Length: 10\r\n               ← headers, one per line     │
    │    Content-Type: text/html\r\n                                      │
    │    \r\n                                 ← blank line, ALWAYS sent   │
    │    <p>hi</p>                            ← body bytes, if any        │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The blank line is written even when there is no body. Without it a client
cannot tell where the header section ends.

=============================================================================
BUILDING RESPONSES
=============================================================================

    # From a file on disk (Content-Length and Content-Type filled in)
    Response.serve_file("public/app.js", ContentType.javascript(), ResponseType.OK)
    Response.html_page("public/index.html")

    # Fallback page used when a handler fails
    Response.internal_server_error()

    # Small generated page for any status
    Response.error_page(ResponseType.NOT_FOUND)

    # Same status and headers, no body (for HEAD)
    response.to_head()

=============================================================================
"""

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

from ..errors import WebServerIOError
from .content_type import ContentType
from .headers import ContentLength, ContentTypeHeader, Header
from .status import ResponseType


logger = logging.getLogger(__name__)


HTTP_VERSION = "HTTP/1.1"

CRLF = b"\r\n"


_INTERNAL_SERVER_ERROR_PAGE = """
<!DOCTYPE html>
<html lang="en">

<head>
    <meta charset="utf-8">
    <title>Internal Server Error (500)</title>
</head>

<body>
    <h1>Internal Server Error (500)</h1>
    <p>Something went wrong! The server is confused.</p>
</body>

</html>"""

_ERROR_PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">

<head>
    <meta charset="utf-8">
    <title>{phrase} ({code})</title>
</head>

<body>
    <h1>{phrase} ({code})</h1>
</body>

</html>"""


@dataclass(frozen=True)
class Response:
    """
    An HTTP response ready to be serialized.

    Attributes:
        status:       One of the ResponseType members.
        http_version: Version for the status line (default "HTTP/1.1").
        headers:      Headers in the order they will be written.
        body:         Raw body bytes, or None for a header-only response.
    """

    status: ResponseType
    http_version: str = HTTP_VERSION
    headers: Tuple[Header, ...] = ()
    body: Optional[bytes] = None

    def __post_init__(self):
        if not isinstance(self.headers, tuple):
            object.__setattr__(self, "headers", tuple(self.headers))

    @property
    def status_line(self) -> str:
        """
        The first line of the response.

        Format: HTTP-VERSION SP STATUS-CODE SP REASON-PHRASE
        Example: "HTTP/1.1 200 OK"
        """
        return f"{self.http_version} {self.status.code} {self.status.phrase}"

    def to_raw(self) -> bytes:
        """
        Serialize the response for socket.sendall().

        =====================================================================
        SERIALIZATION FORMAT
        =====================================================================

            status line \r\n
            header 1    \r\n
            ...
            header N    \r\n
            \r\n
            body bytes (appended as-is, never re-encoded)

        =====================================================================
        """
        lines = [self.status_line]
        lines.extend(str(header) for header in self.headers)
        head = "\r\n".join(lines).encode("utf-8") + CRLF + CRLF

        if self.body is None:
            return head
        return head + self.body

    def to_head(self) -> "Response":
        """Same status and headers with the body dropped (for HEAD requests)."""
        return replace(self, body=None)

    # =========================================================================
    # CONSTRUCTORS
    # =========================================================================

    @classmethod
    def with_body(
        cls,
        status: ResponseType,
        body: bytes,
        content_type: ContentType,
        headers: Sequence[Header] = (),
    ) -> "Response":
        """
        Build a response around an in-memory body.

        Content-Length and Content-Type are placed first, followed by any
        extra headers.
        """
        return cls(
            status=status,
            headers=(
                ContentLength(len(body)),
                ContentTypeHeader(content_type),
                *headers,
            ),
            body=body,
        )

    @classmethod
    def serve_file(
        cls,
        path: Union[str, Path],
        content_type: ContentType,
        status: ResponseType = ResponseType.OK,
    ) -> "Response":
        """
        Read a whole file into a response.

        The file is read eagerly; nothing is streamed.

        Raises:
            WebServerIOError: The file could not be read.
        """
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            raise WebServerIOError(f"Failed to read {str(path)!r}: {e}") from e

        logger.debug(f"Serving {path} ({len(data)} bytes, {content_type})")
        return cls.with_body(status, data, content_type)

    @classmethod
    def html_page(cls, path: Union[str, Path]) -> "Response":
        """Serve an HTML file with status 200."""
        return cls.serve_file(path, ContentType.html(), ResponseType.OK)

    @classmethod
    def internal_server_error(cls) -> "Response":
        """The default page sent when a handler fails."""
        return cls.with_body(
            ResponseType.INTERNAL_SERVER_ERROR,
            _INTERNAL_SERVER_ERROR_PAGE.encode("utf-8"),
            ContentType.html(),
        )

    @classmethod
    def error_page(cls, status: ResponseType) -> "Response":
        """A minimal HTML page titled after the status."""
        page = _ERROR_PAGE_TEMPLATE.format(code=status.code, phrase=status.phrase)
        return cls.with_body(status, page.encode("utf-8"), ContentType.html())
