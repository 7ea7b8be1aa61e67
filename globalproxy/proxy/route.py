import logging
import time
from typing import Optional

import httpx
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response, StreamingResponse
from opentelemetry import trace
from starlette.background import BackgroundTask

from globalproxy.metrics import UPSTREAM_LATENCY, record_outcome
from globalproxy.proxy.headers import (
    HOP_BY_HOP_HEADERS,
    filter_headers,
    finish_headers,
    prepare_headers,
    reserved_prefix_filter,
)
from globalproxy.proxy.models import (
    REDIRECT_STATUS_CODES,
    ProxiedRequest,
    ResponseBranch,
)
from globalproxy.proxy.rewrite import rewrite_location_header, rewrite_relative_links
from globalproxy.proxy.target import get_inbound_origin, get_target_url
from globalproxy.utils import error_message
from globalproxy.utils.exception_logging import log_exception_with_details
from globalproxy.utils.traced_requests import traced_request
from globalproxy.vars import PROXY_TIMEOUT, RESERVED_HEADER_PREFIXES

router = APIRouter()
tracer = trace.get_tracer(__name__)
logger = logging.getLogger("uvicorn.error")

# An empty method set lets a route match every request method, WebDAV verbs included
ANY_METHOD: list = []

keep_forwarded_header = reserved_prefix_filter(RESERVED_HEADER_PREFIXES)

# Framing of a rebuilt body is decided by the ASGI server, not the upstream
REBUILT_BODY_HEADERS = frozenset({"content-length", "content-encoding"})


def create_upstream_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=httpx.Timeout(PROXY_TIMEOUT),
        follow_redirects=False,  # Redirects are rewritten, never followed
    )


def build_proxied_request(request: Request, target_url: str) -> ProxiedRequest:
    headers = prepare_headers(filter_headers(request.headers, keep_forwarded_header))
    has_body = (
        "content-length" in request.headers or "transfer-encoding" in request.headers
    )
    return ProxiedRequest(
        method=request.method,
        url=target_url,
        headers=headers,
        body=request.stream() if has_body else None,
    )


async def dispatch(client: httpx.AsyncClient, proxied: ProxiedRequest) -> httpx.Response:
    """Send the request and return as soon as the upstream headers arrive."""
    upstream_request = client.build_request(
        proxied.method,
        proxied.url,
        headers=proxied.headers,
        content=proxied.body,
    )
    return await client.send(upstream_request, stream=True, follow_redirects=False)


def classify_response(response: httpx.Response) -> ResponseBranch:
    """A redirect without a Location header is relayed as-is instead of failing."""
    if response.status_code in REDIRECT_STATUS_CODES:
        if "location" in response.headers:
            return ResponseBranch.REDIRECT
        return ResponseBranch.PASSTHROUGH
    if "text/html" in response.headers.get("content-type", ""):
        return ResponseBranch.HTML
    return ResponseBranch.PASSTHROUGH


def copy_upstream_headers(
    upstream: httpx.Response, outbound: Response, skip: frozenset = frozenset()
) -> None:
    """Copy every upstream header (repeated ones included) onto the outbound response."""
    for name, value in upstream.headers.multi_items():
        name_lower = name.lower()
        if name_lower in HOP_BY_HOP_HEADERS or name_lower in skip:
            continue
        outbound.headers.append(name, value)


async def close_upstream(
    response: Optional[httpx.Response], client: Optional[httpx.AsyncClient]
) -> None:
    if response is not None:
        await response.aclose()
    if client is not None:
        await client.aclose()


async def build_response(
    request: Request,
    target_url: str,
    upstream: httpx.Response,
    client: httpx.AsyncClient,
    branch: ResponseBranch,
    span,
) -> Response:
    if branch == ResponseBranch.HTML:
        try:
            await upstream.aread()
            html = upstream.text
        finally:
            await close_upstream(upstream, client)
        rewritten = rewrite_relative_links(html, get_inbound_origin(request), target_url)
        outbound = Response(
            content=rewritten.encode(upstream.encoding or "utf-8", errors="replace"),
            status_code=upstream.status_code,
        )
        copy_upstream_headers(upstream, outbound, skip=REBUILT_BODY_HEADERS)
        return outbound

    # Redirect and passthrough bodies are relayed byte for byte
    outbound = StreamingResponse(
        upstream.aiter_raw(),
        status_code=upstream.status_code,
        background=BackgroundTask(close_upstream, upstream, client),
    )
    if branch == ResponseBranch.REDIRECT:
        location = rewrite_location_header(upstream.headers["location"], target_url)
        span.set_attribute("proxy.rewritten_location", location)
        copy_upstream_headers(upstream, outbound, skip=frozenset({"location"}))
        outbound.headers["Location"] = location
    else:
        copy_upstream_headers(upstream, outbound)
    return outbound


def error_response(exception: BaseException) -> Response:
    response = JSONResponse(
        content={"error": error_message(exception)},
        status_code=500,
        media_type="application/json; charset=utf-8",
    )
    finish_headers(response.headers)
    return response


async def forward_to_target(request: Request) -> Response:
    """
    Forward the request to the URL encoded in its path.

    Every failure (bad target, transport error, anything unexpected) is
    reported the same way: a 500 with ``{"error": message}``.
    """
    with traced_request(
        tracer,
        "proxy_request",
        request.method,
        f"Proxying {request.method} {request.url.path}",
    ) as span:
        client: Optional[httpx.AsyncClient] = None
        upstream: Optional[httpx.Response] = None
        try:
            target_url = get_target_url(request)
            span.set_attribute("proxy.target_url", target_url)
            proxied = build_proxied_request(request, target_url)

            client = create_upstream_client()
            started = time.perf_counter()
            upstream = await dispatch(client, proxied)
            UPSTREAM_LATENCY.labels(method=request.method).observe(
                time.perf_counter() - started
            )
            span.set_attribute("proxy.status_code", upstream.status_code)

            branch = classify_response(upstream)
            span.set_attribute("proxy.branch", branch.value)
            logger.info(
                f"{request.method} {target_url} -> {upstream.status_code} ({branch.value})"
            )

            outbound = await build_response(
                request, target_url, upstream, client, branch, span
            )
        except Exception as e:
            log_exception_with_details(logger, "[Proxy]", e)
            span.set_attribute("proxy.error", error_message(e))
            await close_upstream(upstream, client)
            record_outcome(request.method, "error", 500)
            return error_response(e)

        record_outcome(request.method, branch.value, outbound.status_code)
        finish_headers(outbound.headers)
        return outbound


async def proxy_all(request: Request):
    """Catch-all route that proxies all requests to the URL in the path."""
    return await forward_to_target(request)


# Register catch-all route for proxying
router.add_route(
    "/{path:path}", proxy_all, methods=ANY_METHOD, include_in_schema=False
)
