"""
Unit tests for HTTP request parsing.
"""

import pytest

from webserver.errors import MalformedMessageError
from webserver.http.headers import ContentLength, Host, OtherHeader
from webserver.http.request import (
    Get,
    Head,
    Post,
    Request,
    parse_request,
)


class TestRequestParse:
    """Tests for Request.parse()."""

    def test_parse_simple_get(self, sample_get_request: str):
        """The canonical example request."""
        request = Request.parse(sample_get_request)

        assert request.uri == "/index.html"
        assert request.http_version == "HTTP/1.1"
        assert request.headers == (Host("localhost"),)
        assert request.method == Get()
        assert request.data is None

    def test_parse_post_with_body(self, sample_post_request: str):
        """POST keeps its body as the method's data."""
        request = parse_request(sample_post_request)

        assert isinstance(request.method, Post)
        assert request.method.data == "name=John&age=3"
        assert request.data == "name=John&age=3"
        assert request.uri == "/submit"

    def test_parse_head(self):
        """HEAD is accepted and carries no data."""
        request = parse_request("HEAD / HTTP/1.1\r\nHost: x\r\n\r\n")

        assert request.method == Head()
        assert request.data is None

    def test_headers_keep_order(self, sample_post_request: str):
        """Headers come back in the order they were sent."""
        request = parse_request(sample_post_request)

        assert request.headers == (
            Host("localhost:8080"),
            OtherHeader("User-Agent", "pytest"),
            ContentLength(15),
        )

    def test_request_line_and_headers_round_trip(self, sample_post_request: str):
        """Re-rendering the request line and headers gives the original text."""
        request = parse_request(sample_post_request)
        original_lines = sample_post_request.split("\r\n")

        assert request.request_line == original_lines[0]
        assert [str(h) for h in request.headers] == original_lines[1:4]

    @pytest.mark.parametrize("raw", [
        "GET /a HTTP/1.1\r\nHost: example.com\r\nAccept: */*\r\nX-Empty: \r\n\r\n",
        "GET /search?q=a%20b HTTP/1.0\r\nContent-Type: text/html; charset=utf-8\r\n\r\n",
        "POST /form HTTP/1.1\r\nContent-Length: 3\r\nContent-Type: text/javascript\r\n\r\nx=1",
    ])
    def test_round_trip_variants(self, raw: str):
        request = parse_request(raw)
        lines = raw.split("\r\n")
        header_lines = lines[1:lines.index("")]

        assert request.request_line == lines[0]
        assert [str(h) for h in request.headers] == header_lines

    def test_parse_missing_headers(self):
        """A request with no headers at all."""
        request = parse_request("GET / HTTP/1.1\r\n\r\n")

        assert request.uri == "/"
        assert request.headers == ()

    def test_body_lines_are_joined(self):
        """CRLFs inside the body are dropped when lines are joined."""
        request = parse_request("POST / HTTP/1.1\r\n\r\nline1\r\nline2")

        assert request.data == "line1line2"

    def test_header_value_drops_exactly_one_space(self):
        request = parse_request("GET / HTTP/1.1\r\nX-Pad:   padded  \r\nX-Tight:tight\r\n\r\n")

        assert request.get_header("X-Pad") == "  padded  "
        assert request.get_header("X-Tight") == "tight"

    def test_header_value_split_on_first_colon(self):
        request = parse_request("GET / HTTP/1.1\r\nHost: localhost:8080\r\n\r\n")

        assert request.header(Host) == Host("localhost:8080")


class TestRequestParseErrors:
    """Malformed input always raises MalformedMessageError."""

    @pytest.mark.parametrize("raw", [
        "",
        "GET\r\nHost: test\r\n\r\n",
        "GET /index.html\r\n\r\n",
        "GET /index.html HTTP/1.1 extra\r\n\r\n",
        "GET  /index.html HTTP/1.1\r\n\r\n",
        "GET /index.html HTTP/1.1 \r\n\r\n",
        "\r\n\r\n",
    ])
    def test_request_line_must_have_three_fields(self, raw: str):
        with pytest.raises(MalformedMessageError, match="Malformed request line"):
            parse_request(raw)

    def test_header_without_colon(self):
        with pytest.raises(MalformedMessageError) as exc_info:
            parse_request("GET / HTTP/1.1\r\nNotAHeader\r\n\r\n")

        assert exc_info.value.line == "NotAHeader"

    @pytest.mark.parametrize("raw", [
        "POST /submit HTTP/1.1\r\nHost: localhost",            # no blank line
        "POST /submit HTTP/1.1",                               # nothing at all
        "POST /submit HTTP/1.1\r\nHost: localhost\r\n\r\n",    # empty body
        "POST /submit HTTP/1.1\r\n\r\n",
    ])
    def test_post_without_body(self, raw: str):
        with pytest.raises(MalformedMessageError, match="missing data"):
            parse_request(raw)

    @pytest.mark.parametrize("method", ["PUT", "DELETE", "get", "OPTIONS"])
    def test_unknown_method(self, method: str):
        with pytest.raises(MalformedMessageError, match="Failed to match request type"):
            parse_request(f"{method} / HTTP/1.1\r\n\r\n")


class TestRequest:
    """Tests for the Request value itself."""

    def test_is_immutable(self, sample_get_request: str):
        request = parse_request(sample_get_request)

        with pytest.raises(AttributeError):
            request.uri = "/other"

    def test_headers_stored_as_tuple(self):
        request = Request("/", "HTTP/1.1", [Host("a")], Get())

        assert request.headers == (Host("a"),)

    def test_get_header_is_case_insensitive(self, sample_get_request: str):
        request = parse_request(sample_get_request)

        assert request.get_header("host") == "localhost"
        assert request.get_header("X-Missing") == ""
        assert request.get_header("X-Missing", "default") == "default"

    def test_header_lookup_by_variant(self, sample_post_request: str):
        request = parse_request(sample_post_request)

        assert request.header(ContentLength) == ContentLength(15)
        assert request.header(Host).host == "localhost:8080"
