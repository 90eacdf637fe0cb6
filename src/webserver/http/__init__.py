"""
=============================================================================
HTTP MESSAGE MODEL
=============================================================================

Types for the two messages that cross the wire, plus the small closed
vocabularies they are built from:

    content_type.py   ContentType, MediaType, Charset
    headers.py        Header, Host, ContentLength, ContentTypeHeader, OtherHeader
    status.py         ResponseType
    request.py        Request, RequestMethod, Get, Head, Post, parse_request
    response.py       Response, HTTP_VERSION

    raw text ──Request.parse()──► Request ──handler──► Response ──to_raw()──► bytes

=============================================================================
"""

from .content_type import Charset, ContentType, MediaType
from .headers import ContentLength, ContentTypeHeader, Header, Host, OtherHeader
from .request import Get, Head, Post, Request, RequestMethod, parse_request
from .response import HTTP_VERSION, Response
from .status import ResponseType

__all__ = [
    # Content types
    "Charset",
    "ContentType",
    "MediaType",
    # Headers
    "Header",
    "Host",
    "ContentLength",
    "ContentTypeHeader",
    "OtherHeader",
    # Requests
    "Request",
    "RequestMethod",
    "Get",
    "Head",
    "Post",
    "parse_request",
    # Responses
    "Response",
    "ResponseType",
    "HTTP_VERSION",
]
