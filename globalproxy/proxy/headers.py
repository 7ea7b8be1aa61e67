from typing import Callable, Iterable, Mapping, MutableMapping, Tuple

from globalproxy.proxy.models import HeaderList

HeaderPredicate = Callable[[str], bool]

# Hop-by-hop headers that should NOT be forwarded (RFC 7230 section 6.1)
HOP_BY_HOP_HEADERS = {
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailers",
    "transfer-encoding",
    "upgrade",
}

# Regenerated by the HTTP client from the target URL
TRANSPORT_REQUEST_HEADERS = HOP_BY_HOP_HEADERS | {"host"}

NO_CACHE_HEADERS = {"Cache-Control": "no-store"}

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE",
    "Access-Control-Allow-Headers": "*",
}


def reserved_prefix_filter(prefixes: Iterable[str]) -> HeaderPredicate:
    """
    Build a predicate keeping every header whose name does not start with
    one of ``prefixes`` (case-insensitive).
    """
    lowered = tuple(p.lower() for p in prefixes if p)

    def keep(name: str) -> bool:
        return not name.lower().startswith(lowered)

    return keep


def filter_headers(
    headers: Iterable[Tuple[str, str]] | Mapping[str, str],
    keep: HeaderPredicate,
) -> HeaderList:
    """Return a new header list with the entries ``keep`` accepts, values untouched."""
    items = headers.items() if hasattr(headers, "items") else headers
    return [(name, value) for name, value in items if keep(name)]


def prepare_headers(headers: HeaderList) -> HeaderList:
    """Drop headers the upstream HTTP client owns before dispatch."""
    return [
        (name, value)
        for name, value in headers
        if name.lower() not in TRANSPORT_REQUEST_HEADERS
    ]


def finish_headers(headers: MutableMapping[str, str]) -> None:
    """Force the no-cache and permissive CORS headers, overwriting existing values."""
    for name, value in NO_CACHE_HEADERS.items():
        headers[name] = value
    for name, value in CORS_HEADERS.items():
        headers[name] = value
