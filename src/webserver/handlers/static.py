"""
=============================================================================
STATIC FILE HANDLER
=============================================================================

A ready-made handler that serves .html, .js and .wasm files from one
directory. It is what `python -m webserver` runs, and a worked example of
the handler contract:

    handler(request) -> Response      (raising means "send the 500 page")

=============================================================================
FLOW
=============================================================================

    GET /app/main.js?v=3

    1. Drop the query, %-decode     → "/app/main.js"
    2. "/" or a directory           → append index.html
    3. Resolve under root_dir       → must stay inside it, else 403
    4. Not a file                   → 404
    5. Extension not .html/.js/.wasm→ 404
    6. Response.serve_file(...)     → 200

    HEAD answers like GET without the body. POST gets 405.

=============================================================================
"""

import logging
from pathlib import Path
from typing import Union
from urllib.parse import unquote, urlparse

from ..errors import UnsupportedContentTypeError
from ..http import ContentType, Head, Post, Request, Response, ResponseType


logger = logging.getLogger(__name__)


class StaticFileHandler:
    """
    Serve files from root_dir.

    Instances hold only immutable configuration, so one instance can be
    called from every worker at once.

    Usage:
        handler = StaticFileHandler("./public")
        WebServer("127.0.0.1:8080", 4, handler).launch()
    """

    def __init__(self, root_dir: Union[str, Path], index_file: str = "index.html"):
        """
        Raises:
            ValueError: root_dir is not an existing directory.
        """
        self.root_dir = Path(root_dir).resolve()
        self.index_file = index_file

        if not self.root_dir.is_dir():
            raise ValueError(f"Static root directory does not exist: {root_dir}")

    def __call__(self, request: Request) -> Response:
        if isinstance(request.method, Post):
            return Response.error_page(ResponseType.METHOD_NOT_ALLOWED)

        response = self.handle_get(request.uri)

        if isinstance(request.method, Head):
            return response.to_head()
        return response

    def handle_get(self, uri: str) -> Response:
        """Build the response for a GET of uri."""
        # "/my%20page.html?v=2" -> "my page.html"
        relative = unquote(urlparse(uri).path).lstrip("/")

        if "\x00" in relative:
            return Response.error_page(ResponseType.NOT_FOUND)

        # Decoded before resolving, so "..%2f" is caught below like "../"
        full_path = (self.root_dir / relative).resolve()

        try:
            full_path.relative_to(self.root_dir)
        except ValueError:
            logger.warning(f"Path traversal attempt: {uri}")
            return Response.error_page(ResponseType.FORBIDDEN)

        if full_path.is_dir():
            full_path = full_path / self.index_file

        if not full_path.is_file():
            return Response.error_page(ResponseType.NOT_FOUND)

        try:
            content_type = ContentType.from_file_path(full_path)
        except UnsupportedContentTypeError as e:
            logger.debug(f"Refusing to serve {full_path}: {e}")
            return Response.error_page(ResponseType.NOT_FOUND)

        # A read failure here propagates: the server answers with its 500 page
        return Response.serve_file(full_path, content_type, ResponseType.OK)
