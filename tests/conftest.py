from __future__ import annotations

import gzip
import threading
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Dict, List, Optional, Tuple

import pytest
import requests
from requests.structures import CaseInsensitiveDict


class FakeResponse:
    def __init__(self, status_code: int = 200, body: str = "", content_type: Optional[str] = "text/html"):
        self.status_code = status_code
        self.text = body
        self.content = body.encode("utf-8")
        self.headers = CaseInsensitiveDict()
        if content_type is not None:
            self.headers["Content-Type"] = content_type


class FakeSession:
    """Serves canned responses; unknown URLs fail like a refused connection."""

    def __init__(self, pages: Optional[Dict[str, FakeResponse]] = None):
        self.pages = dict(pages or {})
        self.calls: List[Tuple[str, Optional[float]]] = []
        self._lock = threading.Lock()

    def add(self, url: str, body: str = "", status_code: int = 200, content_type: Optional[str] = "text/html") -> None:
        self.pages[url] = FakeResponse(status_code, body, content_type)

    def get(self, url, timeout=None, allow_redirects=True, **kwargs):
        with self._lock:
            self.calls.append((url, timeout))
        if url not in self.pages:
            raise requests.ConnectionError(f"Connection refused: {url}")
        return self.pages[url]

    @property
    def fetched(self) -> List[str]:
        return [url for url, _ in self.calls]


def anchors(*hrefs: str) -> str:
    return "<html><body>" + "".join(f'<a href="{h}">{h}</a>' for h in hrefs) + "</body></html>"


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@dataclass
class Route:
    body: bytes
    status: int = 200
    content_type: Optional[str] = "text/html; charset=utf-8"
    gzip: bool = False


@dataclass
class LocalSite:
    server: ThreadingHTTPServer
    routes: Dict[str, Route] = field(default_factory=dict)

    @property
    def base(self) -> str:
        host, port = self.server.server_address[:2]
        return f"http://{host}:{port}"

    def url(self, path: str) -> str:
        return self.base + path

    def add(self, path: str, body: str, status: int = 200,
            content_type: Optional[str] = "text/html; charset=utf-8", gzip: bool = False) -> None:
        self.routes[path] = Route(body.encode("utf-8"), status, content_type, gzip)


@pytest.fixture
def site():
    routes: Dict[str, Route] = {}

    class Handler(BaseHTTPRequestHandler):
        def do_GET(self):
            route = routes.get(self.path) or Route(b"not found", status=404, content_type="text/plain")
            body = gzip.compress(route.body) if route.gzip else route.body
            self.send_response(route.status)
            if route.content_type:
                self.send_header("Content-Type", route.content_type)
            if route.gzip:
                self.send_header("Content-Encoding", "gzip")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def log_message(self, format, *args):
            pass

    server = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield LocalSite(server, routes)
    finally:
        server.shutdown()
        server.server_close()
