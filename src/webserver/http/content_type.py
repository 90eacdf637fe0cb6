"""
=============================================================================
CONTENT TYPES
=============================================================================

The server knows exactly three media types. This is a closed set: an
unknown file extension is an error, never a silent fallback to something
like application/octet-stream.

    ┌───────────┬───────────────────┬──────────────────┐
    │ Extension │ Media type        │ Charset allowed? │
    ├───────────┼───────────────────┼──────────────────┤
    │ .html     │ text/html         │ yes              │
    │ .js       │ text/javascript   │ yes              │
    │ .wasm     │ application/wasm  │ no (binary)      │
    └───────────┴───────────────────┴──────────────────┘

Rendered as a header value:

    ContentType.html()                    → "text/html"
    ContentType.html(Charset.UTF8)        → "text/html; charset=utf-8"
    ContentType.wasm()                    → "application/wasm"

Adding a media type means adding a MediaType member and an entry in
_EXTENSIONS. There is no configuration hook for it.

=============================================================================
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from ..errors import UnsupportedContentTypeError


class Charset(Enum):
    """Character encodings a text media type can declare."""
    UTF8 = "utf-8"

    def __str__(self) -> str:
        return self.value


class MediaType(Enum):
    """The media types this server can label a body with."""
    HTML = "text/html"
    JAVASCRIPT = "text/javascript"
    WASM = "application/wasm"

    @property
    def is_text(self) -> bool:
        return self is not MediaType.WASM


_EXTENSIONS = {
    ".html": MediaType.HTML,
    ".js": MediaType.JAVASCRIPT,
    ".wasm": MediaType.WASM,
}


@dataclass(frozen=True)
class ContentType:
    """
    A media type plus an optional charset parameter.

    Use the named constructors rather than building one directly:

        ContentType.html()
        ContentType.javascript(Charset.UTF8)
        ContentType.wasm()
        ContentType.from_file_path("app/main.js")
    """

    media_type: MediaType
    charset: Optional[Charset] = None

    def __post_init__(self):
        if self.charset is not None and not self.media_type.is_text:
            raise ValueError(f"{self.media_type.value} does not take a charset")

    # =========================================================================
    # NAMED CONSTRUCTORS
    # =========================================================================

    @classmethod
    def html(cls, charset: Optional[Charset] = None) -> "ContentType":
        return cls(MediaType.HTML, charset)

    @classmethod
    def javascript(cls, charset: Optional[Charset] = None) -> "ContentType":
        return cls(MediaType.JAVASCRIPT, charset)

    @classmethod
    def wasm(cls) -> "ContentType":
        return cls(MediaType.WASM)

    @classmethod
    def from_extension(cls, extension: str) -> "ContentType":
        """
        Look up the content type for an extension such as ".html".

        Raises:
            UnsupportedContentTypeError: The extension is not one of
                .html, .js or .wasm (matched case-sensitively).
        """
        media_type = _EXTENSIONS.get(extension)
        if media_type is None:
            raise UnsupportedContentTypeError(
                f"File extension not recognized: {extension or '(none)'}"
            )
        return cls(media_type)

    @classmethod
    def from_file_path(cls, path: Union[str, Path]) -> "ContentType":
        """Derive the content type from a file name's extension."""
        try:
            return cls.from_extension(Path(path).suffix)
        except UnsupportedContentTypeError:
            raise UnsupportedContentTypeError(
                f"File extension not recognized for {str(path)!r}"
            ) from None

    @classmethod
    def parse(cls, value: str) -> Optional["ContentType"]:
        """
        Parse a header value produced by str(ContentType).

        Only the exact canonical rendering is recognized, so that a parsed
        header renders back to the bytes it was read from. Anything else
        returns None and the caller keeps the header verbatim.
        """
        for media_type in MediaType:
            if value == media_type.value:
                return cls(media_type)
            if not media_type.is_text:
                continue
            for charset in Charset:
                if value == f"{media_type.value}; charset={charset}":
                    return cls(media_type, charset)
        return None

    def __str__(self) -> str:
        if self.charset is None:
            return self.media_type.value
        return f"{self.media_type.value}; charset={self.charset}"
