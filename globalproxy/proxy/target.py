import re
from urllib.parse import unquote

import httpx
from fastapi import Request

from globalproxy.proxy.models import InboundOrigin, InvalidTargetURL

SUPPORTED_SCHEMES = ("http", "https")

# A "%" that does not start a two-digit hex escape
MALFORMED_ESCAPE_PATTERN = re.compile(r"%(?![0-9A-Fa-f]{2})")


def ensure_scheme(candidate: str, default_scheme: str) -> str:
    """Prefix ``default_scheme://`` unless the candidate already names http(s)."""
    if candidate.startswith(("http://", "https://")):
        return candidate
    return f"{default_scheme}://{candidate}"


def resolve_target_url(path: str, scheme: str, query: str = "") -> str:
    """
    Build the absolute target URL from a percent-encoded inbound path.

    ``/example.com/page`` requested over https resolves to
    ``https://example.com/page``; ``/https%3A%2F%2Fexample.com`` is used
    as given. The inbound query string is appended untouched.

    Raises:
        InvalidTargetURL: the path holds a malformed escape, or the result
            is not an absolute http(s) URL with a host
    """
    encoded = path[1:] if path.startswith("/") else path
    if MALFORMED_ESCAPE_PATTERN.search(encoded):
        raise InvalidTargetURL(f"Invalid URL encoding: {path}")
    try:
        candidate = unquote(encoded, errors="strict")
    except UnicodeDecodeError as e:
        raise InvalidTargetURL(f"Invalid URL encoding: {path}") from e

    target = ensure_scheme(candidate, scheme)
    if query:
        target = f"{target}?{query}"

    try:
        parsed = httpx.URL(target)
    except httpx.InvalidURL as e:
        raise InvalidTargetURL(f"Invalid URL: {target}") from e
    if parsed.scheme not in SUPPORTED_SCHEMES or not parsed.host:
        raise InvalidTargetURL(f"Invalid URL: {target}")

    return target


def raw_request_path(request: Request) -> str:
    """The path exactly as the client sent it, still percent-encoded."""
    raw_path = request.scope.get("raw_path")
    if isinstance(raw_path, (bytes, bytearray)):
        return bytes(raw_path).split(b"?", 1)[0].decode("latin-1")
    # ASGI servers without raw_path only hand over the decoded path
    return request.url.path


def get_target_url(request: Request) -> str:
    """Construct the target URL from the request path."""
    return resolve_target_url(
        raw_request_path(request),
        request.url.scheme,
        str(request.url.query),
    )


def get_inbound_origin(request: Request) -> InboundOrigin:
    host = request.headers.get("host") or request.url.netloc
    return InboundOrigin(scheme=request.url.scheme, host=host)


def target_origin(target_url: str) -> str:
    """``scheme://host[:port]`` of the target, default ports omitted."""
    url = httpx.URL(target_url)
    return f"{url.scheme}://{url.netloc.decode('ascii')}"
