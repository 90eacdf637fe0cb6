"""
=============================================================================
RESPONSE STATUS CODES
=============================================================================

The statuses this server can answer with. Deliberately short: a handler
cannot invent a status code, it has to pick one of these.

    HTTP/1.1 404 Not Found
             ─┬─ ────┬────
              │      │
              │      └── ResponseType.NOT_FOUND.phrase
              └───────── int(ResponseType.NOT_FOUND)

Supporting another status means adding a member here (and its phrase).

=============================================================================
"""

from enum import IntEnum


class ResponseType(IntEnum):
    """
    HTTP response statuses understood by the server.

    IntEnum, so members compare equal to their codes:

        >>> ResponseType.OK == 200
        True
        >>> ResponseType.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200
    FORBIDDEN = 403
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    INTERNAL_SERVER_ERROR = 500

    @property
    def code(self) -> int:
        return int(self)

    @property
    def phrase(self) -> str:
        """Reason phrase for the status line."""
        return _PHRASES[self]

    @property
    def is_error(self) -> bool:
        return self >= 400

    def __str__(self) -> str:
        # "404 Not Found", the part of the status line after the version
        return f"{self.code} {self.phrase}"


_PHRASES = {
    ResponseType.OK: "OK",
    ResponseType.FORBIDDEN: "Forbidden",
    ResponseType.NOT_FOUND: "Not Found",
    ResponseType.METHOD_NOT_ALLOWED: "Method Not Allowed",
    ResponseType.INTERNAL_SERVER_ERROR: "Internal Server Error",
}
