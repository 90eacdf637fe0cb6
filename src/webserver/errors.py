"""
=============================================================================
ERROR TAXONOMY
=============================================================================

Every failure the server knows how to name is a WebServerError. The
subclasses map one-to-one onto the places a failure can come from:

    ┌──────────────────────────────┬──────────────────────────────────────┐
    │  Exception                   │  Raised when                         │
    ├──────────────────────────────┼──────────────────────────────────────┤
    │  DecodeError                 │  request bytes are not UTF-8         │
    │  WebServerIOError            │  a socket or file operation fails    │
    │  MalformedMessageError       │  the request text is not HTTP        │
    │  UnsupportedContentTypeError │  a file extension has no media type  │
    └──────────────────────────────┴──────────────────────────────────────┘

Where the errors are handled:

    DecodeError / MalformedMessageError / WebServerIOError (socket)
        └─ Raised inside a job, logged by the job wrapper, connection closed.
           No response is written: the request could not be understood.

    Anything raised by the handler
        └─ Caught at the job boundary, replaced by the 500 page.

    OSError from bind()
        └─ Not wrapped. Propagates out of WebServer() to the caller.

=============================================================================
"""

from typing import Optional


class WebServerError(Exception):
    """Base class for all errors raised by this package."""


class DecodeError(WebServerError):
    """The raw request could not be decoded as UTF-8 text."""


class WebServerIOError(WebServerError):
    """
    A socket or filesystem operation failed.

    The original OSError is always chained as __cause__.
    """


class MalformedMessageError(WebServerError):
    """
    The request text does not follow the HTTP/1.1 message syntax.

    Attributes:
        line: The offending line, when the failure can be pinned to one.
    """

    def __init__(self, message: str, line: Optional[str] = None):
        super().__init__(message)
        self.line = line


class UnsupportedContentTypeError(WebServerError):
    """No ContentType exists for a file extension."""
