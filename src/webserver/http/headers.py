"""
=============================================================================
HTTP HEADERS
=============================================================================

A header is one "Name: value" line. The server gives structured access to
the few headers it cares about and keeps every other header exactly as it
arrived:

    "Host: localhost"                → Host(host="localhost")
    "Content-Length: 10"             → ContentLength(length=10)
    "Content-Type: text/html"        → ContentTypeHeader(ContentType.html())
    "Accept: */*"                    → OtherHeader("Accept", "*/*")

=============================================================================
PARSING RULES
=============================================================================

    Host: localhost:8080
    ────┬ ┬──────────────
        │ │
        │ └── value: everything after the colon, minus ONE leading space
        │
        └──── name: everything before the FIRST colon

Only a single leading space is dropped. "X-Pad:   a  " keeps its value as
"  a  ". Values are never trimmed beyond that.

Structured variants are only produced when rendering them gives back the
same line. "Content-Length: 007" stays an OtherHeader, because
ContentLength(7) would render as "Content-Length: 7". Name matching is
exact for the same reason: "host: x" is an OtherHeader.

=============================================================================
"""

from dataclasses import dataclass

from ..errors import MalformedMessageError
from .content_type import ContentType


class Header:
    """
    Base of the closed header family.

    Subclasses: Host, ContentLength, ContentTypeHeader, OtherHeader.
    str(header) renders the wire form "Name: value".
    """

    __slots__ = ()

    @property
    def name(self) -> str:
        raise NotImplementedError

    @property
    def value(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return f"{self.name}: {self.value}"

    @staticmethod
    def parse(line: str) -> "Header":
        """
        Parse one header line (without its CRLF).

        Raises:
            MalformedMessageError: The line contains no colon.
        """
        name, sep, contents = line.partition(":")
        if not sep:
            raise MalformedMessageError(
                f"Incorrectly formatted header: {line!r} length: {len(line)}",
                line=line,
            )

        # Exactly one space after the colon belongs to the syntax
        if contents.startswith(" "):
            contents = contents[1:]

        if name == Host.NAME:
            return Host(contents)

        if name == ContentLength.NAME and contents.isdigit() and contents.isascii():
            length = int(contents)
            if str(length) == contents:
                return ContentLength(length)

        if name == ContentTypeHeader.NAME:
            content_type = ContentType.parse(contents)
            if content_type is not None:
                return ContentTypeHeader(content_type)

        return OtherHeader(name, contents)


@dataclass(frozen=True)
class Host(Header):
    NAME = "Host"

    host: str

    @property
    def name(self) -> str:
        return self.NAME

    @property
    def value(self) -> str:
        return self.host


@dataclass(frozen=True)
class ContentLength(Header):
    NAME = "Content-Length"

    length: int

    def __post_init__(self):
        if self.length < 0:
            raise ValueError(f"Content-Length cannot be negative: {self.length}")

    @property
    def name(self) -> str:
        return self.NAME

    @property
    def value(self) -> str:
        return str(self.length)


@dataclass(frozen=True)
class ContentTypeHeader(Header):
    NAME = "Content-Type"

    content_type: ContentType

    @property
    def name(self) -> str:
        return self.NAME

    @property
    def value(self) -> str:
        return str(self.content_type)


@dataclass(frozen=True)
class OtherHeader(Header):
    """Any header without a structured variant, kept verbatim."""

    field_name: str
    field_value: str

    @property
    def name(self) -> str:
        return self.field_name

    @property
    def value(self) -> str:
        return self.field_value
