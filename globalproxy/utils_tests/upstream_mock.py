from typing import Callable, List, Optional
from urllib.parse import unquote

import httpx
from starlette.requests import Request

Responder = Callable[[httpx.Request], httpx.Response]


class UpstreamRecorder:
    """Stands in for the target site: records what the proxy sent, replies via ``responder``."""

    def __init__(self, responder: Optional[Responder] = None):
        self.responder = responder or (lambda request: httpx.Response(200, text="ok"))
        self.requests: List[httpx.Request] = []
        self.bodies: List[bytes] = []
        self.clients: List[httpx.AsyncClient] = []

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.bodies.append(await request.aread())
        self.requests.append(request)
        response = self.responder(request)
        if response.is_stream_consumed:
            # httpx reads content=... eagerly; hand the proxy an unread stream
            # like a real connection would
            response = httpx.Response(
                response.status_code,
                headers=response.headers.multi_items(),
                stream=httpx.ByteStream(response.content),
            )
        return response

    def client_factory(self) -> httpx.AsyncClient:
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(self.handle), follow_redirects=False
        )
        self.clients.append(client)
        return client

    @property
    def last_request(self) -> httpx.Request:
        assert self.requests, "upstream was never called"
        return self.requests[-1]


def make_request(
    path: str,
    query: str = "",
    scheme: str = "https",
    headers: Optional[dict] = None,
    method: str = "GET",
) -> Request:
    """Build a Starlette request the way an ASGI server would hand it over."""
    headers = {"host": "proxy.example.com", **(headers or {})}
    scope = {
        "type": "http",
        "http_version": "1.1",
        "method": method,
        "scheme": scheme,
        "path": unquote(path),
        "raw_path": path.encode("latin-1"),
        "query_string": query.encode("latin-1"),
        "root_path": "",
        "headers": [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in headers.items()
        ],
        "server": ("proxy.example.com", 443 if scheme == "https" else 80),
        "client": ("192.168.1.100", 51234),
    }
    return Request(scope)
