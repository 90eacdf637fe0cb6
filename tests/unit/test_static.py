"""
Unit tests for the static file handler.
"""

from pathlib import Path

import pytest

from webserver.handlers import StaticFileHandler
from webserver.http import ContentType, ContentTypeHeader, Request, ResponseType, parse_request


@pytest.fixture
def site(tmp_path: Path) -> Path:
    (tmp_path / "index.html").write_bytes(b"<h1>home</h1>")
    (tmp_path / "app.js").write_bytes(b"console.log(1);")
    (tmp_path / "style.css").write_bytes(b"body {}")
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "index.html").write_bytes(b"<h1>docs</h1>")
    (tmp_path / "empty").mkdir()
    return tmp_path


@pytest.fixture
def handler(site: Path) -> StaticFileHandler:
    return StaticFileHandler(site)


def get(uri: str) -> Request:
    return parse_request(f"GET {uri} HTTP/1.1\r\nHost: test\r\n\r\n")


class TestStaticFileHandler:

    def test_root_serves_index(self, handler):
        response = handler(get("/"))

        assert response.status == ResponseType.OK
        assert response.body == b"<h1>home</h1>"

    def test_javascript(self, handler):
        response = handler(get("/app.js?v=2"))

        assert response.status == ResponseType.OK
        assert ContentTypeHeader(ContentType.javascript()) in response.headers

    def test_directory_index(self, handler):
        assert handler(get("/docs/")).body == b"<h1>docs</h1>"
        assert handler(get("/docs")).body == b"<h1>docs</h1>"

    def test_missing_file(self, handler):
        assert handler(get("/nope.html")).status == ResponseType.NOT_FOUND
        assert handler(get("/empty/")).status == ResponseType.NOT_FOUND

    def test_unsupported_extension(self, handler):
        assert handler(get("/style.css")).status == ResponseType.NOT_FOUND

    def test_path_traversal(self, handler):
        assert handler(get("/../../etc/passwd")).status == ResponseType.FORBIDDEN

    def test_head(self, handler):
        request = parse_request("HEAD /index.html HTTP/1.1\r\n\r\n")
        response = handler(request)

        assert response.status == ResponseType.OK
        assert response.body is None
        assert response.headers == handler(get("/index.html")).headers

    def test_post_not_allowed(self, handler):
        request = parse_request("POST /index.html HTTP/1.1\r\n\r\nx=1")

        assert handler(request).status == ResponseType.METHOD_NOT_ALLOWED

    def test_root_must_exist(self, tmp_path):
        with pytest.raises(ValueError):
            StaticFileHandler(tmp_path / "missing")

    def test_percent_encoded_name(self, site, handler):
        (site / "my page.html").write_bytes(b"<p>spaced</p>")

        response = handler(get("/my%20page.html"))

        assert response.status == ResponseType.OK
        assert response.body == b"<p>spaced</p>"

    @pytest.mark.parametrize("uri", [
        "/..%2f..%2fetc%2fpasswd",
        "/%2e%2e/%2e%2e/etc/passwd",
        "/docs/..%2F..%2F..%2Fetc%2Fpasswd",
    ])
    def test_encoded_traversal(self, handler, uri):
        assert handler(get(uri)).status == ResponseType.FORBIDDEN

    def test_encoded_null_byte(self, handler):
        assert handler(get("/index.html%00.js")).status == ResponseType.NOT_FOUND
