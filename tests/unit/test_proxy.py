"""Tests for the dev server proxy."""

import io

import requests

from sitebuild.server.proxy import ProxyApp


class FakeResponse:
    status_code = 200
    reason = "OK"
    content = b"<html><body>hi</body></html>"
    headers = {
        "Content-Type": "text/html",
        "Content-Encoding": "gzip",
        "Content-Length": "999",
        "Connection": "keep-alive",
        "Set-Cookie": "a=1",
    }


class FakeSession:
    def __init__(self, error=None):
        self.calls = []
        self.error = error

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.error:
            raise self.error
        return FakeResponse()


def _environ(**overrides):
    environ = {
        "REQUEST_METHOD": "GET",
        "PATH_INFO": "/about/",
        "QUERY_STRING": "page=2",
        "HTTP_HOST": "localhost:3000",
        "HTTP_ACCEPT": "text/html",
        "HTTP_CONNECTION": "keep-alive",
        "wsgi.input": io.BytesIO(b""),
    }
    environ.update(overrides)
    return environ


def _call(app, environ):
    captured = {}

    def start_response(status, headers):
        captured["status"] = status
        captured["headers"] = dict(headers)

    body = b"".join(app(environ, start_response))
    return captured["status"], captured["headers"], body


def test_request_is_forwarded_to_target():
    """Test path, query and headers reach the upstream host."""
    session = FakeSession()
    app = ProxyApp("http://onbase.dev/", session=session)

    status, headers, body = _call(app, _environ())

    method, url, kwargs = session.calls[0]
    assert (method, url) == ("GET", "http://onbase.dev/about/?page=2")
    assert kwargs["headers"]["Host"] == "onbase.dev"
    assert kwargs["headers"]["Accept"] == "text/html"
    assert "Connection" not in kwargs["headers"]
    assert kwargs["allow_redirects"] is False
    assert status == "200 OK"
    assert body == FakeResponse.content


def test_response_headers_are_filtered():
    """Test hop-by-hop and encoding headers are recomputed."""
    _, headers, body = _call(ProxyApp("http://onbase.dev", session=FakeSession()), _environ())
    assert "Connection" not in headers
    assert "Content-Encoding" not in headers
    assert headers["Content-Length"] == str(len(body))
    assert headers["Set-Cookie"] == "a=1"


def test_request_body_is_forwarded():
    """Test POST bodies are passed through."""
    session = FakeSession()
    environ = _environ(
        REQUEST_METHOD="POST",
        CONTENT_LENGTH="5",
        CONTENT_TYPE="text/plain",
        **{"wsgi.input": io.BytesIO(b"hello")},
    )
    _call(ProxyApp("http://onbase.dev", session=session), environ)
    _, _, kwargs = session.calls[0]
    assert kwargs["data"] == b"hello"
    assert kwargs["headers"]["Content-Type"] == "text/plain"


def test_upstream_failure_is_bad_gateway():
    """Test connection errors answer 502."""
    session = FakeSession(error=requests.ConnectionError("refused"))
    status, _, body = _call(ProxyApp("http://onbase.dev", session=session), _environ())
    assert status == "502 Bad Gateway"
    assert b"onbase.dev" in body
