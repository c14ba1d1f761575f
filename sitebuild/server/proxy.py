"""
WSGI reverse proxy used by the development server.
"""

from urllib.parse import urlsplit

import requests

from sitebuild.utils.logging import logger

# Headers that describe a single connection and must not be forwarded
HOP_BY_HOP = {
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailers",
    "transfer-encoding",
    "upgrade",
}

# requests decodes bodies, so length and encoding are recomputed downstream
DROPPED_RESPONSE_HEADERS = HOP_BY_HOP | {"content-encoding", "content-length"}


def request_headers(environ: dict, target_host: str) -> dict[str, str]:
    """Rebuild request headers from a WSGI environ."""
    headers = {}
    for key, value in environ.items():
        if key.startswith("HTTP_"):
            name = key[5:].replace("_", "-").title()
            headers[name] = value
    if environ.get("CONTENT_TYPE"):
        headers["Content-Type"] = environ["CONTENT_TYPE"]
    headers = {k: v for k, v in headers.items() if k.lower() not in HOP_BY_HOP}
    headers["Host"] = target_host
    # Ask for an identity body so the live-reload script can be injected
    headers["Accept-Encoding"] = "identity"
    return headers


class ProxyApp:
    """
    Forward every request to an upstream host.

    Args:
        target: Upstream base URL, e.g. ``http://onbase.dev``
        session: requests session, created when None
        timeout: Upstream timeout in seconds
    """

    def __init__(self, target: str, session: requests.Session | None = None, timeout: float = 30) -> None:
        self.target = target.rstrip("/")
        self.target_host = urlsplit(self.target).netloc
        self.session = session or requests.Session()
        self.timeout = timeout

    def upstream_url(self, environ: dict) -> str:
        url = self.target + environ.get("PATH_INFO", "/")
        query = environ.get("QUERY_STRING")
        if query:
            url += "?" + query
        return url

    def __call__(self, environ, start_response):
        method = environ.get("REQUEST_METHOD", "GET")
        url = self.upstream_url(environ)
        length = int(environ.get("CONTENT_LENGTH") or 0)
        body = environ["wsgi.input"].read(length) if length else None

        try:
            response = self.session.request(
                method,
                url,
                headers=request_headers(environ, self.target_host),
                data=body,
                allow_redirects=False,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning(f"Proxy request to {url} failed: {e}")
            message = f"Upstream {self.target} unavailable: {e}".encode("utf-8")
            start_response(
                "502 Bad Gateway",
                [("Content-Type", "text/plain; charset=utf-8"), ("Content-Length", str(len(message)))],
            )
            return [message]

        content = response.content
        headers = [
            (name, value)
            for name, value in response.headers.items()
            if name.lower() not in DROPPED_RESPONSE_HEADERS
        ]
        headers.append(("Content-Length", str(len(content))))
        start_response(f"{response.status_code} {response.reason}", headers)
        return [content]
