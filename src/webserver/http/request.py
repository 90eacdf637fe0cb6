"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Turns the text of one HTTP/1.1 request into an immutable Request value.

=============================================================================
HTTP REQUEST ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP REQUEST STRUCTURE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  ┌─ REQUEST LINE ─────────────────────────────────────────────────┐ │
    │  │    POST /submit HTTP/1.1\r\n                                    │ │
    │  │    ─┬── ───┬─── ───┬────                                        │ │
    │  │   Method  URI   Version     exactly three fields, one space    │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ HEADERS ──────────────────────────────────────────────────────┐ │
    │  │    Host: localhost\r\n                                          │ │
    │  │    Content-Type: text/html\r\n                                  │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ BLANK LINE ───────────────────────────────────────────────────┐ │
    │  │    \r\n                                                         │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ BODY ─────────────────────────────────────────────────────────┐ │
    │  │    name=value                                                   │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
WHAT THIS PARSER DOES NOT DO
=============================================================================

- It does not look at Content-Length. The body is whatever followed the
  blank line in the single buffer that was read from the socket.
- CRLFs inside the body are removed when the body lines are joined back
  together.
- No pipelining: text after the body is part of the body.

=============================================================================
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Type, TypeVar

from ..errors import MalformedMessageError
from .headers import Header


CRLF = "\r\n"

H = TypeVar("H", bound=Header)


# =============================================================================
# REQUEST METHODS
# =============================================================================
#
# A closed set of variants. Only POST carries data.
#
# =============================================================================

class RequestMethod:
    """Base of the request method variants: Get, Head, Post."""

    __slots__ = ()

    @property
    def name(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Get(RequestMethod):
    @property
    def name(self) -> str:
        return "GET"


@dataclass(frozen=True)
class Head(RequestMethod):
    @property
    def name(self) -> str:
        return "HEAD"


@dataclass(frozen=True)
class Post(RequestMethod):
    data: str

    @property
    def name(self) -> str:
        return "POST"


@dataclass(frozen=True)
class Request:
    """
    A parsed HTTP request.

    Built once per connection by Request.parse() and never changed after.

    Attributes:
        uri:          Request target exactly as sent ("/index.html?x=1").
        http_version: Version string from the request line ("HTTP/1.1").
        headers:      Headers in the order they were received.
        method:       Get(), Head() or Post(data).
    """

    uri: str
    http_version: str
    headers: Tuple[Header, ...]
    method: RequestMethod

    def __post_init__(self):
        # Accept any sequence but always store a tuple
        if not isinstance(self.headers, tuple):
            object.__setattr__(self, "headers", tuple(self.headers))

    @property
    def data(self) -> Optional[str]:
        """The POST body, or None for methods without data."""
        if isinstance(self.method, Post):
            return self.method.data
        return None

    @property
    def request_line(self) -> str:
        """The first line of the request, rebuilt from its fields."""
        return f"{self.method.name} {self.uri} {self.http_version}"

    def header(self, kind: Type[H]) -> Optional[H]:
        """
        Return the first header of the given variant, if any.

            request.header(Host)           → Host("localhost") or None
        """
        for header in self.headers:
            if isinstance(header, kind):
                return header
        return None

    def get_header(self, name: str, default: str = "") -> str:
        """Look up a header value by name (case-insensitive)."""
        lowered = name.lower()
        for header in self.headers:
            if header.name.lower() == lowered:
                return header.value
        return default

    # =========================================================================
    # PARSING
    # =========================================================================

    @classmethod
    def parse(cls, raw: str) -> "Request":
        """
        Parse the text of a request.

        =====================================================================
        PARSING ALGORITHM
        =====================================================================

        1. Split the text on CRLF
        2. Request line: exactly 3 space-separated fields
        3. Headers: lines 2.. up to the first blank line
        4. Body: every line after the blank line, joined without separators
        5. Method: GET, HEAD, or POST (which needs a non-empty body)

        =====================================================================

        Raises:
            MalformedMessageError: For any deviation from the above.
        """
        lines = raw.split(CRLF)

        # ---------------------------------------------------------------------
        # Request line
        # ---------------------------------------------------------------------
        # str.split(" ") rather than split(): two spaces in a row produce an
        # empty field, which makes the count wrong, which is what we want.
        request_line = lines[0]
        fields = request_line.split(" ")
        if len(fields) != 3:
            raise MalformedMessageError(
                f"Malformed request line: expected 3 fields, got {len(fields)}",
                line=request_line,
            )
        method_token, uri, http_version = fields

        headers, data = _parse_headers_and_data(lines)

        return cls(
            uri=uri,
            http_version=http_version,
            headers=headers,
            method=_parse_method(method_token, data),
        )


def _parse_headers_and_data(
    lines: Sequence[str],
) -> Tuple[Tuple[Header, ...], Optional[str]]:
    """
    Split the lines after the request line into headers and body.

    The body is None when there is no blank line at all, and "" when the
    blank line is the last thing in the request.
    """
    headers = []
    current = 1  # skip the request line
    while current < len(lines) and lines[current] != "":
        headers.append(Header.parse(lines[current]))
        current += 1

    if current >= len(lines):
        return tuple(headers), None

    return tuple(headers), "".join(lines[current + 1:])


def _parse_method(token: str, data: Optional[str]) -> RequestMethod:
    if token == "GET":
        return Get()
    if token == "HEAD":
        return Head()
    if token == "POST":
        if not data:
            raise MalformedMessageError("POST request missing data")
        return Post(data)
    raise MalformedMessageError(
        f"Failed to match request type with: {token!r}",
        line=token,
    )


def parse_request(raw: str) -> Request:
    """Convenience wrapper around Request.parse()."""
    return Request.parse(raw)
